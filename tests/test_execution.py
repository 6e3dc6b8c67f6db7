"""Tests for the execution context and ActionExecutor."""

import asyncio

import pytest

from actionhost.actions.context import create_action_context
from actionhost.actions.executor import ActionExecutor
from actionhost.actions.output import OutputCollector
from actionhost.actions.types import ActionRecord, ActionSource
from actionhost.errors import ActionExecutionError, format_error
from actionhost.i18n.scoped import create_scoped_t
from actionhost.plugins.registry import LoadedPlugin, LoadedPluginMeta

CONFIG = {"theme": {"primary_color": "green"}, "log_level": "info"}


def _action(run, name="demo", **kwargs):
    return ActionRecord(name=name, description="Demo", run=run, **kwargs)


def _executor(translator, plugins=()):
    return ActionExecutor(lambda: dict(CONFIG), plugins=lambda: list(plugins), translator=translator)


class TestScopedTranslation:
    """Translator scoping for action "foo" with plugin namespace "bar-plugin"."""

    @pytest.fixture
    def t(self, translator):
        translator.register_translations("foo", {"en": {"x": "foo x"}})
        translator.register_translations("common", {"en": {"y": "common y"}})
        translator.register_translations("bar-plugin", {"en": {"z": "bar z"}})
        translator.register_translations("other", {"en": {"z": "other z"}})
        return create_scoped_t(translator, "foo", "bar-plugin")

    def test_bare_key_uses_action_namespace(self, t):
        assert t("x") == "foo x"

    def test_common_namespace(self, t):
        assert t("common:y") == "common y"

    def test_plugin_alias(self, t):
        assert t("plugin:z") == "bar z"
        assert t("bar-plugin:z") == "bar z"

    def test_foreign_namespace_returns_raw_key(self, t):
        assert t("other:z") == "other:z"

    def test_plugin_alias_without_plugin(self, translator):
        t = create_scoped_t(translator, "foo")
        assert t("plugin:z") == "plugin:z"

    def test_missing_key_and_interpolation(self, translator):
        translator.register_translations("foo", {"en": {"hi": "Hi {{name}}"}, "ja": {}})
        translator.change_locale("ja")
        t = create_scoped_t(translator, "foo")
        assert t("hi", name="Ann") == "Hi Ann"
        assert t("missing") == "foo:missing"
        assert t("missing", default_value="fallback") == "fallback"


class TestOutputCollector:
    """Tests for OutputCollector."""

    def test_buffers_and_streams_in_order(self):
        streamed = []
        output = OutputCollector(streamed.append)

        output.log("a", 1, {"k": "v"})
        output.success("done")
        output.section("Title")
        output.step(2, "Second")
        output.table([{"a": 1}])
        output.json({"x": [1]}, indent=4)
        output.separator("=", 3)
        output.newline()

        assert streamed == output.messages
        assert [m.type for m in output.messages] == [
            "log", "success", "section", "step", "table", "json", "separator", "newline",
        ]
        assert output.messages[0].content == 'a 1 {"k": "v"}'
        assert output.messages[3].meta == {"number": 2}
        assert output.messages[5].meta == {"indent": 4}
        assert len(output) == 8

    def test_clear(self):
        output = OutputCollector()
        output.info("x")
        output.clear()
        assert output.messages == []


class TestCreateActionContext:
    """Tests for create_action_context."""

    def test_config_is_snapshot(self, translator):
        config = {"theme": {"primary_color": "green"}}
        ctx, _ = create_action_context("demo", config, translator=translator)
        config["theme"]["primary_color"] = "red"
        assert ctx.config["theme"]["primary_color"] == "green"
        with pytest.raises(TypeError):
            ctx.config["new"] = 1

    def test_collector_is_shared_with_context(self, translator):
        ctx, collector = create_action_context("demo", {}, args=["a"], translator=translator)
        ctx.output.info("hello")
        assert [m.content for m in collector.messages] == ["hello"]
        assert ctx.args == ("a",)
        assert ctx.logger.name == "action.demo"

    def test_plugin_logger_name(self, translator):
        ctx, _ = create_action_context("demo", {}, plugin_namespace="x-ns", translator=translator)
        assert ctx.logger.name == "plugin.x-ns"

    def test_feedback_requires_sink(self, translator):
        ctx, _ = create_action_context("demo", {}, translator=translator)
        with pytest.raises(RuntimeError, match="visual feedback"):
            ctx.control.spinner("working")

        events = []
        ctx, _ = create_action_context("demo", {}, on_visual_feedback=events.append, translator=translator)
        progress = ctx.control.progress(total=4, message="steps")
        progress.increment(2)
        progress.succeed()
        assert [(e.value, e.status) for e in events] == [(0, "running"), (2, "running"), (4, "succeeded")]


class TestActionExecutor:
    """The executor never raises for action failures."""

    def test_success(self, translator):
        async def run(ctx):
            await asyncio.sleep(0)
            ctx.output.success(ctx.config["theme"]["primary_color"])

        result = asyncio.run(_executor(translator).run(_action(run)))

        assert result.success is True
        assert result.error is None
        assert result.duration_ms >= 0
        assert [m.content for m in result.output.messages] == ["green"]

    def test_sync_run(self, translator):
        result = asyncio.run(_executor(translator).run(_action(lambda ctx: ctx.output.log("sync"))))
        assert result.success is True

    def test_exception_becomes_failed_result(self, translator):
        def run(ctx):
            ctx.output.log("before")
            raise KeyError("missing")

        result = asyncio.run(_executor(translator).run(_action(run)))

        assert result.success is False
        assert isinstance(result.error, ActionExecutionError)
        assert isinstance(result.error.cause, KeyError)
        assert [m.content for m in result.output.messages] == ["before"]
        assert "Caused by: KeyError" in format_error(result.error)

    def test_system_exit_is_caught(self, translator):
        def run(ctx):
            raise SystemExit(3)

        result = asyncio.run(_executor(translator).run(_action(run)))
        assert result.success is False
        assert isinstance(result.error.cause, SystemExit)

    def test_context_failure(self, translator):
        def broken_config():
            raise RuntimeError("config unavailable")

        executor = ActionExecutor(broken_config, translator=translator)
        result = asyncio.run(executor.run(_action(lambda ctx: None)))

        assert result.success is False
        assert len(result.output) == 0
        assert "config unavailable" in format_error(result.error)

    def test_explicit_config_and_streaming(self, translator):
        streamed = []
        result = asyncio.run(_executor(translator).run(
            _action(lambda ctx: ctx.output.info(ctx.config["custom"])),
            config={"custom": "value"},
            on_output=streamed.append,
        ))
        assert [m.content for m in streamed] == ["value"]
        assert result.output.messages == streamed

    def test_plugin_config_lookup(self, translator):
        plugin = LoadedPlugin(
            meta=LoadedPluginMeta(name="actionhost-plugin-x", version="1", i18n_namespace="x-ns"),
            path=None,
            user_config={"token": "abc"},
        )
        seen = {}
        action = _action(
            lambda ctx: seen.update(config=ctx.plugin_config),
            source=ActionSource.PLUGIN,
            plugin_namespace="x-ns",
        )
        asyncio.run(_executor(translator, [plugin]).run(action))
        assert seen["config"] == {"token": "abc"}
