"""Tests for error formatting and the translation manager."""

import json

import pytest

from actionhost.errors import (
    ActionExecutionError,
    ActionLoadError,
    ConfigLoadError,
    PluginLoadError,
    format_error,
)
from actionhost.i18n import detect_locale, register_plugin_translations
from actionhost.i18n.manager import TranslationManager, interpolate


class TestFormatError:
    """Tests for format_error."""

    def test_cause_chain(self):
        root = ValueError("bad value")
        load = ActionLoadError("/tmp/a.py", root)
        error = PluginLoadError("actionhost-plugin-x", load)

        assert format_error(error).splitlines() == [
            "[PLUGIN_LOAD_ERROR] Failed to load plugin: actionhost-plugin-x",
            "Caused by: [ACTION_LOAD_ERROR] Failed to load action from /tmp/a.py",
            "Caused by: ValueError: bad value",
        ]

    def test_plain_values(self):
        assert format_error("text") == "text"
        assert format_error(Exception("plain")) == "plain"
        assert format_error(RuntimeError()) == "RuntimeError"

    def test_error_attributes(self):
        error = ConfigLoadError("user", "/x/settings.json", OSError("denied"))
        assert error.layer == "user"
        assert error.__cause__ is error.cause
        assert str(ActionExecutionError("deploy")) == "Action 'deploy' failed"


class TestTranslationManager:
    """Tests for TranslationManager."""

    def test_fallback_to_english(self):
        manager = TranslationManager()
        manager.add_resource_bundle("en", "common", {"nested": {"key": "English"}})
        manager.change_locale("ja")
        assert manager.t("nested.key") == "English"
        assert manager.t("common:nested.key") == "English"

    def test_namespaces(self):
        manager = TranslationManager()
        manager.register_translations("ns", {"en": {"a": "1"}, "ja": {"a": "2"}})
        assert manager.has_namespace("ns")
        assert manager.get_namespaces() == ["ns"]

    def test_interpolate_missing_variable(self):
        assert interpolate("{{a}}-{{b}}", {"a": 1}) == "1-"

    @pytest.mark.parametrize("config_locale, lang, expected", [
        ("ja", "en_US.UTF-8", "ja"),
        (None, "ja_JP.UTF-8", "ja"),
        (None, "de_DE.UTF-8", "en"),
        (None, "", "en"),
    ])
    def test_detect_locale(self, monkeypatch, config_locale, lang, expected):
        monkeypatch.setenv("LANG", lang)
        monkeypatch.delenv("LC_ALL", raising=False)
        assert detect_locale(config_locale) == expected

    def test_register_plugin_translations_skips_missing_locales(self, tmp_path):
        (tmp_path / "en").mkdir()
        (tmp_path / "en" / "translation.json").write_text(json.dumps({"hello": "Hello"}))
        manager = TranslationManager()

        assert register_plugin_translations("demo", tmp_path, manager) == 1
        assert manager.t("demo:hello") == "Hello"
