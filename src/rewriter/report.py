"""Human-readable summaries of a reconciliation. No filesystem access."""
from __future__ import annotations

from datetime import timedelta

from .models import ReconciliationResult

def format_duration(d: timedelta) -> str:
    secs = d.total_seconds()
    if secs < 1:
        return "< 1 second"
    if secs < 60:
        return f"{int(secs)} seconds"
    if secs < 3600:
        return f"{int(secs // 60)} minutes"
    return f"{secs / 3600:.1f} hours"

def total_effort(result: ReconciliationResult) -> timedelta:
    return sum((c.estimated_effort for c in result.changes()), timedelta(0))

def _by(caused_by: tuple[str, ...]) -> list[str]:
    return [f"    {name}" for name in caused_by]

def apply_report(result: ReconciliationResult) -> list[str]:
    lines: list[str] = []
    for c in result.created:
        lines.append(f"Generated new file {c.after.path} by:")
        lines.extend(_by(c.caused_by))
    for c in result.deleted:
        lines.append(f"Deleted file {c.before.path} by:")
        lines.extend(_by(c.caused_by))
    for c in result.moved:
        lines.append(f"File has been moved from {c.before.path} to {c.after.path} by:")
        lines.extend(_by(c.caused_by))
    for c in result.edited_in_place:
        lines.append(f"Changes have been made to {c.before.path} by:")
        lines.extend(_by(c.caused_by))
    lines.append("Please review and commit the results.")
    lines.append(f"Estimate time saved: {format_duration(total_effort(result))}")
    return lines

def preview_report(result: ReconciliationResult) -> list[str]:
    lines = ["The following changes would be made:"]
    if result.created:
        lines.append(f"Would generate {len(result.created)} new files:")
        lines.extend(f"  + {c.after.path}" for c in result.created)
    if result.deleted:
        lines.append(f"Would delete {len(result.deleted)} files:")
        lines.extend(f"  - {c.before.path}" for c in result.deleted)
    if result.moved:
        lines.append(f"Would move {len(result.moved)} files:")
        lines.extend(f"  {c.before.path} -> {c.after.path}" for c in result.moved)
    if result.edited_in_place:
        lines.append(f"Would modify {len(result.edited_in_place)} files:")
        lines.extend(f"  ~ {c.before.path}" for c in result.edited_in_place)
    lines.append("Run without --dry-run to apply these changes.")
    return lines
