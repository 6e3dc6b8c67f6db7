"""Tests for ActionHost and the headless runner."""

import asyncio
import io
import json

import pytest
from rich.console import Console

from actionhost.actions.types import ActionSource
from actionhost.config.store import FileConfigStore
from actionhost.errors import ActionNotFoundError
from actionhost.host import ActionHost
from cli.headless import EXIT_FAILED, EXIT_NOT_FOUND, EXIT_OK, run_headless

from conftest import write_action, write_plugin, write_settings

PREFIX = "actionhost-plugin-"


@pytest.fixture
def layout(project, home):
    """Project, global and plugin sources each providing ``deploy``."""
    write_action(project / ".actionhost" / "actions", "deploy", "P")
    write_action(project / ".actionhost" / "actions", "build", "project build")
    write_action(home / "actions", "deploy", "G")
    write_action(home / "actions", "cleanup", "global cleanup")
    write_plugin(home / "plugins", PREFIX + "ship", actions={"deploy": "Pl", "notify": "Notify"})
    return project


def _host(project, translator):
    return ActionHost(cwd=project, translator=translator)


class TestActionHostLoad:
    """Tests for ActionHost.load."""

    def test_plugin_wins_then_global_then_project(self, layout, translator):
        host = _host(layout, translator)
        asyncio.run(host.load())

        deploy = host.registry.get_by_name("deploy")
        assert deploy.description == "Pl"
        assert deploy.source is ActionSource.PLUGIN
        assert sorted(host.registry.names()) == ["build", "cleanup", "deploy", "notify"]

    def test_global_beats_project_without_plugin(self, layout, translator, home):
        write_settings(home / "settings.json", {"plugins": {PREFIX + "ship": False}})
        host = _host(layout, translator)
        asyncio.run(host.load())

        assert host.registry.get_by_name("deploy").description == "G"
        assert not host.registry.has("notify")

    def test_broken_action_file_is_skipped(self, layout, translator):
        (layout / ".actionhost" / "actions" / "broken.py").write_text("raise RuntimeError('x')\n")
        host = _host(layout, translator)
        asyncio.run(host.load())
        assert host.registry.has("build")
        assert not host.registry.has("broken")

    def test_reload_plugins_after_disable(self, layout, translator):
        host = _host(layout, translator)
        asyncio.run(host.load())

        FileConfigStore(layout).save("workspace", f"plugins.{PREFIX}ship", False)
        asyncio.run(host.reload_plugins())

        assert host.registry.get_by_name("deploy").description == "G"
        assert not host.registry.has("notify")
        assert host.registry.has("build")

    def test_reload_falls_back_to_shadowed_project_action(self, layout, translator):
        write_action(layout / ".actionhost" / "actions", "notify", "project notify")
        host = _host(layout, translator)
        asyncio.run(host.load())
        assert host.registry.get_by_name("notify").source is ActionSource.PLUGIN

        FileConfigStore(layout).save("workspace", f"plugins.{PREFIX}ship", False)
        asyncio.run(host.reload_plugins())
        notify = host.registry.get_by_name("notify")
        assert notify.description == "project notify"
        assert notify.source is ActionSource.PROJECT

        FileConfigStore(layout).save("workspace", f"plugins.{PREFIX}ship", True)
        asyncio.run(host.reload_plugins())
        assert host.registry.get_by_name("notify").source is ActionSource.PLUGIN
        assert host.registry.get_by_name("deploy").description == "Pl"

    def test_run_by_name(self, layout, translator):
        host = _host(layout, translator)
        asyncio.run(host.load())

        result = asyncio.run(host.run("build"))
        assert result.success
        assert [m.content for m in result.output.messages] == ["ran build"]

        with pytest.raises(ActionNotFoundError):
            asyncio.run(host.run("nope"))

    def test_plugin_action_receives_plugin_config(self, project, home, translator):
        plugin_dir = write_plugin(home / "plugins", PREFIX + "cfg", actions={"show": "Show"})
        (plugin_dir / "actions" / "show.py").write_text(
            "description = 'Show'\n"
            "def run(ctx):\n"
            "    ctx.output.info(ctx.plugin_config['greeting'])\n"
            "    ctx.output.info(ctx.t('plugin:title'))\n"
        )
        (plugin_dir / "locales" / "en").mkdir(parents=True)
        (plugin_dir / "locales" / "en" / "translation.json").write_text(json.dumps({"title": "Config"}))
        (plugin_dir / "plugin.py").write_text(
            "from actionhost import define_plugin\n"
            f"plugin = define_plugin(meta={{'name': '{PREFIX}cfg'}}, actions=['actions/show.py'], locales='locales')\n"
        )
        write_settings(
            project / ".actionhost" / "settings.json",
            {"plugins": {PREFIX + "cfg": {"config": {"greeting": "hi"}}}},
        )

        host = _host(project, translator)
        asyncio.run(host.load())
        result = asyncio.run(host.run("show"))

        assert result.success, result.error
        assert [m.content for m in result.output.messages] == ["hi", "Config"]


class TestHeadless:
    """Exit codes of ``actionhost run``."""

    def _run(self, host, name, args=()):
        console = Console(file=io.StringIO(), width=120)
        code = asyncio.run(run_headless(host, name, args, console=console, interactive=False))
        return code, console.file.getvalue()

    def test_success(self, layout, translator):
        code, out = self._run(_host(layout, translator), "build")
        assert code == EXIT_OK
        assert "ran build" in out

    def test_not_found(self, layout, translator):
        code, _ = self._run(_host(layout, translator), "nope")
        assert code == EXIT_NOT_FOUND

    def test_failure(self, layout, translator, capsys):
        write_action(
            layout / ".actionhost" / "actions", "fail", "Fails",
            body="def run(ctx):\n    raise RuntimeError('kaboom')\n",
        )
        code, _ = self._run(_host(layout, translator), "fail")
        assert code == EXIT_FAILED
        assert "kaboom" in capsys.readouterr().err

    def test_prompt_without_terminal_fails(self, layout, translator):
        write_action(
            layout / ".actionhost" / "actions", "ask", "Asks",
            body="async def run(ctx):\n    await ctx.prompt.text('Name?')\n",
        )
        code, _ = self._run(_host(layout, translator), "ask")
        assert code == EXIT_FAILED

    def test_args_are_passed(self, layout, translator):
        write_action(
            layout / ".actionhost" / "actions", "echo", "Echo",
            body="def run(ctx):\n    ctx.output.log(*ctx.args)\n",
        )
        code, out = self._run(_host(layout, translator), "echo", ["one", "two"])
        assert code == EXIT_OK
        assert "one two" in out
