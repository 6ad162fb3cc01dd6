"""rewriter: apply recipe-driven file edits to a project tree.

Discovers candidate files, runs the active recipes over them, classifies
each before/after pair (created, deleted, moved, edited in place), applies
the result to disk and prunes directories left empty.

Public API:
- RewriteConfig
- Environment
- Runner
- ReconciliationResult
"""

__version__ = "0.1.0"

from .config import RewriteConfig
from .models import ReconciliationResult, SourceFile
from .recipes import Environment
from .runner import Runner

__all__ = ["RewriteConfig", "Environment", "Runner", "ReconciliationResult", "SourceFile", "__version__"]
