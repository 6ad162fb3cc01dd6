from .applicator import ApplyOutcome, apply_changes
from .classifier import classify, classify_into
from .discovery import discover, discover_from_config
from .pruner import prune_empty_dirs

__all__ = [
    "ApplyOutcome",
    "apply_changes",
    "classify",
    "classify_into",
    "discover",
    "discover_from_config",
    "prune_empty_dirs",
]
