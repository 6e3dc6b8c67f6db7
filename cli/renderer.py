"""Rich rendering of action output, results and visual feedback."""

import json
from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table

from actionhost.actions.control import VisualFeedback
from actionhost.actions.executor import ExecutionResult
from actionhost.actions.output import OutputMessage
from actionhost.actions.types import ActionRecord
from actionhost.errors import format_error
from actionhost.i18n import translation_manager

console = Console(
    legacy_windows=False,
    force_interactive=False,
    tab_size=4
)

_STATUS_STYLES = {
    "success": ("✓", "green"),
    "error": ("✗", "red"),
    "warn": ("⚠", "yellow"),
    "info": ("ℹ", "cyan"),
}


class OutputRenderer:
    """Renders ``OutputMessage`` objects as they are emitted."""

    def __init__(self, target: Optional[Console] = None, primary_color: str = "green"):
        self.console = target or console
        self.primary_color = primary_color

    def __call__(self, message: OutputMessage) -> None:
        self.render(message)

    def render(self, message: OutputMessage) -> None:
        handler = getattr(self, f"_render_{message.type}", None)
        if handler is None:
            self.console.print(str(message.content), markup=False)
            return
        handler(message)

    def _render_log(self, message: OutputMessage) -> None:
        self.console.print(message.content, markup=False, highlight=False)

    def _render_status(self, message: OutputMessage) -> None:
        icon, style = _STATUS_STYLES[message.type]
        self.console.print(f"{icon} {message.content}", style=style, markup=False)

    _render_success = _render_status
    _render_error = _render_status
    _render_warn = _render_status
    _render_info = _render_status

    def _render_newline(self, message: OutputMessage) -> None:
        self.console.print()

    def _render_code(self, message: OutputMessage) -> None:
        language = message.meta.get("language") or "text"
        self.console.print(Syntax(str(message.content), language, word_wrap=True))

    def _render_section(self, message: OutputMessage) -> None:
        self.console.print()
        self.console.print(f"[bold {self.primary_color}]{message.content}[/]")

    def _render_list(self, message: OutputMessage) -> None:
        for item in message.content or []:
            self.console.print(f"  • {item}", markup=False)

    def _render_key_value(self, message: OutputMessage) -> None:
        data: Dict[str, Any] = message.content or {}
        width = max((len(str(k)) for k in data), default=0)
        for key, value in data.items():
            self.console.print(f"  [cyan]{str(key).ljust(width)}[/cyan]  {value}")

    def _render_table(self, message: OutputMessage) -> None:
        rows: List[Dict[str, Any]] = message.content or []
        if not rows:
            return
        table = Table(show_header=True, header_style=f"bold {self.primary_color}")
        columns = list(rows[0])
        for column in columns:
            table.add_column(str(column))
        for row in rows:
            table.add_row(*(str(row.get(column, "")) for column in columns))
        self.console.print(table)

    def _render_json(self, message: OutputMessage) -> None:
        indent = message.meta.get("indent", 2)
        self.console.print_json(json.dumps(message.content, default=str), indent=indent)

    def _render_separator(self, message: OutputMessage) -> None:
        line = message.meta.get("char", "─") * message.meta.get("length", 50)
        self.console.print(line, style="dim", markup=False)

    def _render_step(self, message: OutputMessage) -> None:
        number = message.meta.get("number")
        self.console.print(f"[bold {self.primary_color}]{number}.[/] {message.content}")


class FeedbackRenderer:
    """Prints spinner/progress transitions as plain status lines."""

    def __init__(self, target: Optional[Console] = None):
        self.console = target or console

    def __call__(self, feedback: VisualFeedback) -> None:
        if feedback.status == "succeeded":
            self.console.print(f"[green]✓[/green] {feedback.message}")
        elif feedback.status == "failed":
            self.console.print(f"[red]✗[/red] {feedback.message}")
        elif feedback.kind == "progress" and feedback.total:
            percent = int((feedback.value or 0) / feedback.total * 100)
            self.console.print(f"[dim]{percent:3d}%[/dim] {feedback.message}")
        elif feedback.status == "running" and feedback.message:
            self.console.print(f"[dim]…[/dim] {feedback.message}")


def render_result(result: ExecutionResult, action_name: str, target: Optional[Console] = None):
    """Print the outcome line (and error chain) for a finished action."""
    target = target or console
    if result.success:
        completed = translation_manager.t("common:completed", duration=result.duration_ms)
        target.print(f"[dim]✓ {action_name}: {completed}[/dim]")
        return
    target.print(Panel(
        format_error(result.error),
        title=f"✗ {action_name} ({result.duration_ms}ms)",
        border_style="red"
    ))


def render_action_table(actions: List[ActionRecord], ctx=None, target: Optional[Console] = None):
    """Print a table of registered actions."""
    target = target or console
    table = Table(title="Actions")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Category", style="dim")
    table.add_column("Source", style="magenta")
    for action in sorted(actions, key=lambda a: a.name):
        table.add_row(
            action.name,
            action.resolve_description(ctx),
            action.category or "",
            action.location,
        )
    target.print(table)
