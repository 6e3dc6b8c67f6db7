"""REPL core loop."""

import asyncio
import logging
import shlex

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.history import FileHistory
from rich.console import Console
from rich.panel import Panel

from actionhost.config.paths import user_home_dir
from actionhost.errors import ActionNotFoundError
from actionhost.i18n import translation_manager
from actionhost.host import ActionHost
from actionhost.prompt import clear_prompt_handler, set_prompt_handler
from cli.command_handler import CommandHandler
from cli.prompt_backend import TerminalPromptHandler
from cli.renderer import FeedbackRenderer, OutputRenderer, render_result
from cli.state import REPLState

logger = logging.getLogger(__name__)

console = Console(
    legacy_windows=False,
    force_interactive=False,
    tab_size=4
)

HISTORY_FILE_NAME = ".repl_history"


class _ActionCompleter(WordCompleter):
    """Completes slash commands and the names currently in the registry."""

    def __init__(self, host: ActionHost, commands):
        super().__init__(lambda: list(commands) + host.registry.names(), sentence=True)


class REPLRunner:
    """Interactive loop: type an action name to run it, ``/help`` for commands.

    A failed action is rendered and the loop keeps going.
    """

    def __init__(self, host: ActionHost):
        self.host = host
        self.state = REPLState()
        self.command_handler = CommandHandler(host, self.state)

    def _show_welcome(self):
        plugins = self.host.plugin_manager.get_plugins()
        enabled = sum(1 for p in plugins if p.enabled)
        console.print(Panel.fit(
            "[bold cyan]actionhost[/bold cyan]\n"
            f"[green]Actions:[/green] {self.host.registry.count()}\n"
            f"[green]Plugins:[/green] {enabled}/{len(plugins)} enabled\n"
            "Type an action name to run it, /list to list actions, /help for help, /q to quit",
            border_style="blue"
        ))
        console.print()

    def _build_prompt(self) -> HTML:
        if self.state.last_result is not None and not self.state.last_result.success:
            return HTML('<ansired>✗</ansired> <b>action></b> ')
        return HTML('<b>action></b> ')

    async def _run_action(self, user_input: str):
        try:
            name, *args = shlex.split(user_input)
        except ValueError as e:
            console.print(f"[red]Invalid input: {e}[/red]\n")
            return

        try:
            action = self.host.get_action(name)
        except ActionNotFoundError:
            message = translation_manager.t("errors:action_not_found", name=name)
            console.print(f"[red]{message}[/red] [dim](try /list)[/dim]\n", highlight=False)
            return

        primary = (self.host.config.get("theme") or {}).get("primary_color", "green")
        result = await self.host.executor.run(
            action,
            args=args,
            on_output=OutputRenderer(console, primary_color=primary),
            on_visual_feedback=FeedbackRenderer(console),
        )
        self.state.record_run(name, result)
        render_result(result, name, console)
        console.print()

    async def run(self):
        """Main loop."""
        await self.host.load()

        history_file = user_home_dir() / HISTORY_FILE_NAME
        history_file.parent.mkdir(parents=True, exist_ok=True)
        session = PromptSession(
            history=FileHistory(str(history_file)),
            completer=_ActionCompleter(self.host, self.command_handler.commands),
        )
        set_prompt_handler(TerminalPromptHandler(console=console))

        self._show_welcome()

        try:
            while True:
                try:
                    user_input = await session.prompt_async(self._build_prompt())

                    if not user_input.strip():
                        continue

                    if user_input.startswith("/"):
                        should_continue = await self.command_handler.handle(user_input)
                        if not should_continue:
                            break
                        continue

                    await self._run_action(user_input.strip())

                except asyncio.CancelledError:
                    print()
                    continue

                except KeyboardInterrupt:
                    console.print("\n[yellow](use /q to quit)[/yellow]\n")
                    continue

                except EOFError:
                    console.print("\n[yellow]bye![/yellow]")
                    break

                except Exception as e:
                    console.print(f"[red]Error: {e}[/red]\n")
                    logger.exception("REPL error")
        finally:
            clear_prompt_handler()
