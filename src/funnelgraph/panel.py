"""Issue panel text and a rich-based live panel.

Validation always returns every issue; trimming the list for display
happens here.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from funnelgraph.events.processor import TypedEventProcessor
from funnelgraph.graph.validation import Severity, ValidationStatus

if TYPE_CHECKING:
    from funnelgraph.events.types import ValidationEvent
    from funnelgraph.graph.validation import Issue, ValidationReport

DEFAULT_MAX_ISSUES = 5

EMPTY_MESSAGE = "Drag nodes from the palette to start building your funnel"
OK_MESSAGE = "Funnel looks good!"

_ICONS = {Severity.ERROR: "❌", Severity.WARNING: "⚠️"}
_STYLES = {Severity.ERROR: "red", Severity.WARNING: "yellow"}


def _require_rich() -> None:
    """Raise a clear error if rich is not installed."""
    try:
        import rich  # noqa: F401
    except ImportError:
        raise ImportError(
            "The 'rich' package is required for RichIssuePanel. Install it with: pip install 'funnelgraph[progress]' or pip install rich"
        ) from None


def issue_header(count: int) -> str:
    return f"Validation ({count} {'issue' if count == 1 else 'issues'})"


def issue_line(issue: Issue) -> str:
    return f"{_ICONS[issue.severity]} {issue.message}"


def issue_panel_lines(report: ValidationReport, max_items: int = DEFAULT_MAX_ISSUES) -> list[str]:
    """Lines for the issue panel.

    Shows at most ``max_items`` issues followed by a count of the rest.
    """
    if report.status is ValidationStatus.EMPTY:
        return [EMPTY_MESSAGE]
    if report.status is ValidationStatus.OK:
        return [f"✓ {OK_MESSAGE}"]

    issues = report.issues
    lines = [issue_header(len(issues))]
    lines.extend(issue_line(issue) for issue in issues[:max_items])
    remaining = len(issues) - max_items
    if remaining > 0:
        lines.append(f"+{remaining} more issues")
    return lines


class RichIssuePanel(TypedEventProcessor):
    """Prints the issue panel with rich after every validation.

    Requires ``pip install funnelgraph[progress]`` (installs rich).

    Args:
        console: Rich console to print to. Defaults to a new stdout console.
        max_items: Maximum issues shown before the "+N more" line.
    """

    def __init__(self, console: Any = None, *, max_items: int = DEFAULT_MAX_ISSUES) -> None:
        _require_rich()
        from rich.console import Console

        self._console = console if console is not None else Console()
        self._max_items = max_items
        self.last_report: ValidationReport | None = None

    def on_validation(self, event: ValidationEvent) -> None:
        if event.report is None:
            return
        self.last_report = event.report
        self._console.print(self.render(event.report))

    def render(self, report: ValidationReport) -> Any:
        """Build a rich Panel for ``report``."""
        from rich.panel import Panel
        from rich.text import Text

        if report.status is ValidationStatus.EMPTY:
            return Panel(Text(EMPTY_MESSAGE, style="dim"), expand=False)
        if report.status is ValidationStatus.OK:
            return Panel(Text(f"✓ {OK_MESSAGE}", style="bold green"), border_style="green", expand=False)

        body = Text()
        shown = report.issues[: self._max_items]
        for idx, issue in enumerate(shown):
            if idx:
                body.append("\n")
            body.append(issue_line(issue), style=_STYLES[issue.severity])
        remaining = len(report.issues) - len(shown)
        if remaining > 0:
            body.append(f"\n+{remaining} more issues", style="dim")

        border = "red" if report.has_errors else "yellow"
        return Panel(body, title=issue_header(len(report.issues)), border_style=border, expand=False)
