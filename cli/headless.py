"""Non-interactive runner: ``actionhost run <action> [args...]``."""

import logging
import sys
from typing import Optional, Sequence

from rich.console import Console

from actionhost.errors import ActionNotFoundError, format_error
from actionhost.host import ActionHost
from actionhost.prompt import clear_prompt_handler, set_prompt_handler
from cli.prompt_backend import TerminalPromptHandler
from cli.renderer import FeedbackRenderer, OutputRenderer

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NOT_FOUND = 2


async def run_headless(
    host: ActionHost,
    action_name: str,
    args: Sequence[str] = (),
    console: Optional[Console] = None,
    interactive: Optional[bool] = None,
) -> int:
    """Load actions, run one, stream its output and return an exit code.

    Prompts are answered on the terminal when stdin is a TTY; otherwise an
    action that prompts fails with ``PromptUnavailableError``.

    Returns:
        0 on success, 1 if the action failed, 2 if it does not exist
    """
    console = console or Console(stderr=False)
    err_console = Console(stderr=True)
    if interactive is None:
        interactive = sys.stdin.isatty()

    await host.load()

    try:
        action = host.get_action(action_name)
    except ActionNotFoundError as e:
        err_console.print(f"[red]{format_error(e)}[/red]", markup=True, highlight=False)
        return EXIT_NOT_FOUND

    primary = (host.config.get("theme") or {}).get("primary_color", "green")
    if interactive:
        set_prompt_handler(TerminalPromptHandler(console=console))

    try:
        result = await host.executor.run(
            action,
            args=args,
            on_output=OutputRenderer(console, primary_color=primary),
            on_visual_feedback=FeedbackRenderer(console),
        )
    finally:
        clear_prompt_handler()

    if result.success:
        logger.info(f"Headless run of {action_name} succeeded in {result.duration_ms}ms")
        return EXIT_OK

    err_console.print(format_error(result.error), style="red", markup=False, highlight=False)
    return EXIT_FAILED
