"""REPL slash commands."""

import json
from typing import Awaitable, Callable, Dict

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from actionhost.config.merge import get_overridden_keys
from actionhost.config.service import ConfigService
from actionhost.errors import ActionHostError, format_error
from actionhost.host import ActionHost
from actionhost.plugins.service import PluginService
from cli.renderer import render_action_table
from cli.state import REPLState

console = Console(
    legacy_windows=False,
    force_interactive=False,
    tab_size=4
)

CommandFunc = Callable[[str], Awaitable[bool]]


class CommandHandler:
    """Dispatches ``/command`` input to handler methods.

    Each handler returns whether the REPL loop should keep running.
    """

    def __init__(self, host: ActionHost, state: REPLState):
        self.host = host
        self.state = state
        self.config_service = ConfigService(host.store, host.translator)
        self.plugin_service = PluginService(host.store, host.plugin_manager)
        self.commands = self._register_commands()

    def _register_commands(self) -> Dict[str, CommandFunc]:
        return {
            "/q": self._cmd_quit,
            "/quit": self._cmd_quit,
            "/exit": self._cmd_quit,
            "/list": self._cmd_list,
            "/plugins": self._cmd_plugins,
            "/enable": self._cmd_enable,
            "/disable": self._cmd_disable,
            "/config": self._cmd_show_config,
            "/set": self._cmd_set,
            "/reset": self._cmd_reset,
            "/layer": self._cmd_layer,
            "/history": self._cmd_history,
            "/help": self._cmd_help,
        }

    async def handle(self, cmd: str) -> bool:
        """Run a slash command.

        Args:
            cmd: Raw user input starting with ``/``

        Returns:
            Whether to continue the REPL loop
        """
        name = cmd.split(maxsplit=1)[0]
        handler = self.commands.get(name)
        if handler is None:
            console.print(f"[red]Unknown command: {name}[/red]")
            console.print("[dim]Type /help for the list of commands[/dim]\n")
            return True

        try:
            return await handler(cmd)
        except ActionHostError as e:
            console.print(f"[red]{format_error(e)}[/red]\n", highlight=False)
            return True

    @staticmethod
    def _argument(cmd: str, usage: str):
        parts = cmd.split(maxsplit=1)
        if len(parts) < 2:
            console.print(f"[red]Usage: {usage}[/red]\n")
            return None
        return parts[1].strip()

    async def _cmd_quit(self, cmd: str) -> bool:
        console.print("[yellow]bye![/yellow]")
        return False

    async def _cmd_list(self, cmd: str) -> bool:
        render_action_table(self.host.registry.get_all(), target=console)
        console.print()
        return True

    async def _cmd_plugins(self, cmd: str) -> bool:
        plugins = self.host.plugin_manager.get_plugins()
        if not plugins:
            console.print("[yellow]No plugins installed[/yellow]\n")
            return True

        table = Table(title="Plugins")
        table.add_column("Name", style="cyan")
        table.add_column("Version")
        table.add_column("Status")
        table.add_column("Actions", justify="right")
        for plugin in plugins:
            status = "[green]enabled[/green]" if plugin.enabled else "[dim]disabled[/dim]"
            table.add_row(plugin.name, plugin.meta.version, status, str(len(plugin.action_paths)))
        console.print(table)
        console.print()
        return True

    async def _toggle(self, cmd: str, enabled: bool) -> bool:
        usage = "/enable <plugin>" if enabled else "/disable <plugin>"
        name = self._argument(cmd, usage)
        if name is None:
            return True
        if self.host.plugin_manager.get_plugin(name) is None:
            console.print(f"[red]Plugin not found: {name}[/red]\n")
            return True

        config = self.plugin_service.toggle_plugin(name, enabled, self.state.layer)
        await self.host.reload_plugins(config)
        word = "enabled" if enabled else "disabled"
        console.print(f"[green]✓ {name} {word} ({self.state.layer})[/green]\n")
        return True

    async def _cmd_enable(self, cmd: str) -> bool:
        return await self._toggle(cmd, True)

    async def _cmd_disable(self, cmd: str) -> bool:
        return await self._toggle(cmd, False)

    async def _cmd_show_config(self, cmd: str) -> bool:
        layered = self.host.store.load_all()
        overridden = get_overridden_keys(layered.user, layered.workspace)
        merged = self.config_service.get_config()

        body = json.dumps(merged, indent=2, ensure_ascii=False)
        if overridden:
            body += "\n\n[dim]Overridden by workspace:[/dim] " + ", ".join(overridden)
        console.print(Panel(
            body,
            title=f"Configuration (writes go to {self.state.layer})",
            border_style="blue"
        ))
        console.print()
        return True

    async def _cmd_set(self, cmd: str) -> bool:
        parts = cmd.split(maxsplit=2)
        if len(parts) < 3:
            console.print("[red]Usage: /set <key> <value>[/red]\n")
            return True

        key, raw = parts[1], parts[2]
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            value = raw
        self.host.config = self.config_service.change_config(key, value, self.state.layer)
        console.print(f"[green]✓ {key} = {json.dumps(value, ensure_ascii=False)}[/green]\n")
        return True

    async def _cmd_reset(self, cmd: str) -> bool:
        key = self._argument(cmd, "/reset <key>")
        if key is None:
            return True
        self.host.config = self.config_service.reset_config(key, self.state.layer)
        console.print(f"[green]✓ {key} reset in {self.state.layer} layer[/green]\n")
        return True

    async def _cmd_layer(self, cmd: str) -> bool:
        layer = self._argument(cmd, "/layer <user|workspace>")
        if layer is None:
            return True
        if layer not in ("user", "workspace"):
            console.print(f"[red]Unknown layer: {layer}[/red]\n")
            return True
        self.state.layer = layer
        console.print(f"[green]✓ Settings will be written to the {layer} layer[/green]\n")
        return True

    async def _cmd_history(self, cmd: str) -> bool:
        if not self.state.run_history:
            console.print("[yellow]Nothing has been run yet[/yellow]\n")
            return True

        table = Table(title="Run history")
        table.add_column("Action", style="cyan")
        table.add_column("Result")
        table.add_column("Duration", justify="right")
        table.add_column("Finished")
        for entry in self.state.run_history:
            outcome = "[green]ok[/green]" if entry["success"] else "[red]failed[/red]"
            table.add_row(entry["action"], outcome, f"{entry['duration_ms']}ms", entry["finished_at"])
        console.print(table)
        console.print()
        return True

    async def _cmd_help(self, cmd: str) -> bool:
        help_text = """[bold]Commands:[/bold]
  <action> [args...]      Run an action
  /list                   List actions
  /plugins                List plugins
  /enable <plugin>        Enable a plugin
  /disable <plugin>       Disable a plugin
  /config                 Show the merged configuration
  /set <key> <value>      Set a config key (value parsed as JSON when possible)
  /reset <key>            Remove a config key from the current layer
  /layer <user|workspace> Choose the layer written by /set, /reset, /enable, /disable
  /history                Show actions run in this session
  /q, /quit, /exit        Quit
  /help                   Show this help"""
        console.print(Panel(help_text, title="Help", border_style="blue"))
        console.print()
        return True
