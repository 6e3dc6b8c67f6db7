"""Shared fixtures: an isolated home/project layout and file builders."""

import json
import textwrap
from pathlib import Path

import pytest

from actionhost.i18n.manager import TranslationManager
from actionhost.prompt import clear_prompt_handler

ENV_VARS = (
    "ACTIONHOST_HOME",
    "ACTIONHOST_PLUGIN_PATHS",
    "ACTIONHOST_USER_CONFIG",
    "ACTIONHOST_WORKSPACE_CONFIG",
)


@pytest.fixture
def home(tmp_path, monkeypatch):
    """Per-test ``~/.actionhost`` (via ACTIONHOST_HOME)."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    home_dir = tmp_path / "home" / ".actionhost"
    home_dir.mkdir(parents=True)
    monkeypatch.setenv("ACTIONHOST_HOME", str(home_dir))
    return home_dir


@pytest.fixture
def project(tmp_path, home, monkeypatch):
    """Project directory (cwd) with an empty ``.actionhost``."""
    project_dir = tmp_path / "project"
    (project_dir / ".actionhost").mkdir(parents=True)
    monkeypatch.chdir(project_dir)
    return project_dir


@pytest.fixture
def translator():
    return TranslationManager()


@pytest.fixture(autouse=True)
def _reset_prompt_handler():
    yield
    clear_prompt_handler()


def write_action(directory: Path, file_name: str, description: str = "", body: str = None, **attrs) -> Path:
    """Write an action module using module-level attributes.

    Args:
        directory: Target directory (created if needed)
        file_name: File name without ``.py``
        description: ``description`` attribute
        body: Source of ``run`` (defaults to a success message)
        **attrs: Extra module attributes (``name``, ``category``, ``tags``, ``translations``)
    """
    directory.mkdir(parents=True, exist_ok=True)
    lines = [f"description = {description or file_name!r}"]
    for key, value in attrs.items():
        lines.append(f"{key} = {value!r}")
    lines.append("")
    lines.append(body or textwrap.dedent(
        """
        def run(ctx):
            ctx.output.success("ran " + ctx.action_name)
        """
    ))
    path = directory / f"{file_name}.py"
    path.write_text("\n".join(lines), encoding="utf-8")
    return path


def write_plugin(
    root: Path,
    name: str,
    actions: dict = None,
    version: str = "1.0.0",
    entry_source: str = None,
    locales: dict = None,
    manifest: dict = None,
) -> Path:
    """Create ``root/<name>/`` with plugin.json, plugin.py and action files.

    Args:
        root: Plugin search path
        name: Plugin (and directory) name
        actions: ``{file_stem: description}`` written to ``actions/``
        version: Manifest version
        entry_source: Replaces the generated ``plugin.py``
        locales: ``{locale: resources}`` written to ``locales/<locale>/translation.json``
        manifest: Replaces the generated manifest
    """
    plugin_dir = root / name
    plugin_dir.mkdir(parents=True)
    (plugin_dir / "plugin.json").write_text(
        json.dumps(manifest if manifest is not None else {"name": name, "version": version}),
        encoding="utf-8",
    )

    actions = actions if actions is not None else {"hello": "Hello from " + name}
    for stem, description in actions.items():
        write_action(plugin_dir / "actions", stem, description)

    if locales:
        for locale, resources in locales.items():
            locale_dir = plugin_dir / "locales" / locale
            locale_dir.mkdir(parents=True)
            (locale_dir / "translation.json").write_text(json.dumps(resources), encoding="utf-8")

    if entry_source is None:
        action_list = [f"actions/{stem}.py" for stem in actions]
        locales_dir = "locales" if locales else None
        entry_source = textwrap.dedent(
            f"""
            from actionhost import define_plugin

            plugin = define_plugin(
                meta={{"name": {name!r}}},
                actions={action_list!r},
                locales={locales_dir!r},
            )
            """
        )
    (plugin_dir / "plugin.py").write_text(entry_source, encoding="utf-8")
    return plugin_dir


def write_settings(path: Path, document) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(document, str):
        path.write_text(document, encoding="utf-8")
    else:
        path.write_text(json.dumps(document, indent=2), encoding="utf-8")
    return path
