"""Tests for plugin discovery, definition validation and loading."""

import asyncio
import json
import textwrap

import pytest
from pydantic import BaseModel

from actionhost.actions.types import ActionSource
from actionhost.errors import PluginLoadError
from actionhost.plugins.definition import PluginMeta, define_plugin, validate_plugin_definition
from actionhost.plugins.discovery import PluginDiscovery
from actionhost.plugins.loader import PluginLoader
from actionhost.plugins.registry import PluginState

from conftest import write_plugin

PREFIX = "actionhost-plugin-"


class TestPluginDiscovery:
    """Tests for PluginDiscovery."""

    def test_discovers_prefixed_directories_sorted(self, tmp_path):
        write_plugin(tmp_path, PREFIX + "zeta")
        write_plugin(tmp_path, PREFIX + "alpha")
        (tmp_path / "unrelated").mkdir()
        (tmp_path / "unrelated" / "plugin.json").write_text("{}")

        names = [d.name for d in PluginDiscovery([tmp_path]).discover_all()]
        assert names == [PREFIX + "alpha", PREFIX + "zeta"]

    def test_skips_broken_manifests(self, tmp_path):
        write_plugin(tmp_path, PREFIX + "good")
        bad_json = tmp_path / (PREFIX + "bad-json")
        bad_json.mkdir()
        (bad_json / "plugin.json").write_text("{oops")
        no_version = tmp_path / (PREFIX + "no-version")
        no_version.mkdir()
        (no_version / "plugin.json").write_text(json.dumps({"name": "x"}))
        (tmp_path / (PREFIX + "no-manifest")).mkdir()

        names = [d.name for d in PluginDiscovery([tmp_path]).discover_all()]
        assert names == [PREFIX + "good"]

    def test_first_search_path_wins(self, tmp_path):
        first, second = tmp_path / "first", tmp_path / "second"
        write_plugin(first, PREFIX + "dup", version="1.0.0")
        write_plugin(second, PREFIX + "dup", version="2.0.0")

        found = PluginDiscovery([first, second, tmp_path / "missing"]).discover_all()
        assert len(found) == 1
        assert found[0].manifest.version == "1.0.0"

    def test_does_not_execute_plugin_code(self, tmp_path):
        marker = tmp_path / "executed"
        write_plugin(
            tmp_path,
            PREFIX + "noisy",
            entry_source=f"open({str(marker)!r}, 'w').close()\n",
        )
        PluginDiscovery([tmp_path]).discover_all()
        assert not marker.exists()

    def test_discover_single(self, tmp_path):
        path = write_plugin(tmp_path, PREFIX + "one")
        assert PluginDiscovery([]).discover_single(path).name == PREFIX + "one"
        assert PluginDiscovery([]).discover_single(tmp_path / "nope") is None


class TestDefinePlugin:
    """Definition errors carry the specific reason."""

    @pytest.mark.parametrize("kwargs, reason", [
        ({"meta": {"name": "my-plugin"}, "actions": ["a.py"]}, "must start with"),
        ({"meta": {"name": PREFIX + "Bad_Name"}, "actions": ["a.py"]}, "lowercase"),
        ({"meta": {"name": PREFIX + "ok"}, "actions": []}, "at least one action"),
        ({"meta": {"name": PREFIX + "ok"}, "actions": "a.py"}, "must be a list"),
        ({"meta": {"name": PREFIX + "ok"}, "actions": [1]}, "must be a string"),
        ({"meta": {"name": PREFIX + "ok"}, "actions": ["a.py"], "locales": 3}, "locales"),
        ({"meta": {"name": PREFIX + "ok"}, "actions": ["a.py"], "config_schema": dict}, "pydantic"),
        ({"meta": {}, "actions": ["a.py"]}, "meta.name is required"),
    ])
    def test_invalid_definitions(self, kwargs, reason):
        with pytest.raises(ValueError, match=reason):
            define_plugin(**kwargs)

    def test_valid_definition(self):
        class Settings(BaseModel):
            greeting: str = "hi"

        plugin = define_plugin(
            meta=PluginMeta(name=PREFIX + "ok", i18n_namespace="ok-ns"),
            actions=["actions/a.py"],
            locales="locales",
            config_schema=Settings,
        )
        assert plugin.meta.i18n_namespace == "ok-ns"
        assert plugin.config_schema is Settings

    def test_validate_accepts_mapping(self):
        plugin = validate_plugin_definition({"meta": {"name": PREFIX + "ok"}, "actions": ["a.py"]})
        assert plugin.meta.name == PREFIX + "ok"

    def test_validate_rejects_missing_export(self):
        with pytest.raises(ValueError, match="must export"):
            validate_plugin_definition(None)


class TestPluginLoader:
    """Tests for PluginLoader."""

    def _descriptor(self, root):
        return PluginDiscovery([root]).discover_all()[0]

    def test_load_plugin(self, tmp_path, translator):
        write_plugin(tmp_path, PREFIX + "demo", actions={"greet": "Greets"}, version="0.3.0")
        plugin = asyncio.run(PluginLoader(translator).load_plugin(self._descriptor(tmp_path)))

        assert plugin.name == PREFIX + "demo"
        assert plugin.meta.version == "0.3.0"
        assert plugin.meta.i18n_namespace == PREFIX + "demo"
        assert plugin.enabled is True
        assert plugin.state is PluginState.LOADED
        assert [p.name for p in plugin.action_paths] == ["greet.py"]
        assert all(p.is_absolute() for p in plugin.action_paths)

    def test_missing_entry_point(self, tmp_path, translator):
        plugin_dir = write_plugin(tmp_path, PREFIX + "demo")
        (plugin_dir / "plugin.py").unlink()
        with pytest.raises(PluginLoadError) as exc_info:
            PluginLoader(translator).load_plugin_sync(self._descriptor(tmp_path))
        assert isinstance(exc_info.value.cause, FileNotFoundError)

    def test_entry_point_import_error(self, tmp_path, translator):
        write_plugin(tmp_path, PREFIX + "demo", entry_source="raise RuntimeError('boom')\n")
        with pytest.raises(PluginLoadError, match=PREFIX + "demo"):
            PluginLoader(translator).load_plugin_sync(self._descriptor(tmp_path))

    def test_missing_plugin_export(self, tmp_path, translator):
        write_plugin(tmp_path, PREFIX + "demo", entry_source="x = 1\n")
        with pytest.raises(PluginLoadError) as exc_info:
            PluginLoader(translator).load_plugin_sync(self._descriptor(tmp_path))
        assert "must export" in str(exc_info.value.cause)

    def test_meta_name_must_match_directory(self, tmp_path, translator):
        write_plugin(tmp_path, PREFIX + "dir", entry_source=textwrap.dedent(f"""
            from actionhost import define_plugin
            plugin = define_plugin(meta={{"name": "{PREFIX}meta"}}, actions=["actions/hello.py"])
        """))
        with pytest.raises(PluginLoadError, match=PREFIX + "dir") as exc_info:
            PluginLoader(translator).load_plugin_sync(self._descriptor(tmp_path))
        assert "does not match" in str(exc_info.value.cause)

    def test_custom_entry_point(self, tmp_path, translator):
        name = PREFIX + "custom"
        plugin_dir = write_plugin(
            tmp_path, name, manifest={"name": name, "version": "1.0.0", "entry_point": "main.py"}
        )
        (plugin_dir / "plugin.py").rename(plugin_dir / "main.py")
        plugin = PluginLoader(translator).load_plugin_sync(self._descriptor(tmp_path))
        assert plugin.name == name

    def test_config_schema_validation(self, tmp_path, translator):
        name = PREFIX + "typed"
        write_plugin(tmp_path, name, entry_source=textwrap.dedent(f"""
            from pydantic import BaseModel
            from actionhost import define_plugin

            class Settings(BaseModel):
                retries: int = 1

            plugin = define_plugin(
                meta={{"name": {name!r}}},
                actions=["actions/hello.py"],
                config_schema=Settings,
            )
        """))
        loader = PluginLoader(translator)
        descriptor = self._descriptor(tmp_path)

        plugin = loader.load_plugin_sync(descriptor, {"retries": "3"})
        assert plugin.user_config == {"retries": 3}

        with pytest.raises(PluginLoadError):
            loader.load_plugin_sync(descriptor, {"retries": "many"})

    def test_missing_action_file_is_dropped(self, tmp_path, translator):
        name = PREFIX + "partial"
        write_plugin(tmp_path, name, entry_source=textwrap.dedent(f"""
            from actionhost import define_plugin
            plugin = define_plugin(meta={{"name": {name!r}}}, actions=["actions/hello.py", "actions/gone.py"])
        """))
        plugin = PluginLoader(translator).load_plugin_sync(self._descriptor(tmp_path))
        assert [p.name for p in plugin.action_paths] == ["hello.py"]

    def test_load_plugin_actions(self, tmp_path, translator):
        name = PREFIX + "acts"
        plugin_dir = write_plugin(tmp_path, name, actions={"one": "First", "two": "Second"})
        (plugin_dir / "actions" / "two.py").write_text("description = 'broken'\n")
        loader = PluginLoader(translator)
        plugin = loader.load_plugin_sync(self._descriptor(tmp_path))

        actions = asyncio.run(loader.load_plugin_actions(plugin))

        assert [a.name for a in actions] == ["one"]
        action = actions[0]
        assert action.source is ActionSource.PLUGIN
        assert action.plugin_name == name
        assert action.plugin_namespace == name
        assert action.category == f"plugin:{name}"
        assert plugin.state is PluginState.ACTIONS_LOADED

    def test_register_translations(self, tmp_path, translator):
        name = PREFIX + "intl"
        write_plugin(
            tmp_path, name,
            locales={"en": {"greeting": "Hello"}, "ja": {"greeting": "こんにちは"}},
        )
        loader = PluginLoader(translator)
        plugin = loader.load_plugin_sync(self._descriptor(tmp_path))

        assert asyncio.run(loader.register_translations(plugin)) == 2
        assert translator.t(f"{name}:greeting") == "Hello"
        translator.change_locale("ja")
        assert translator.t(f"{name}:greeting") == "こんにちは"
