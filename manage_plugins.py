#!/usr/bin/env python3
"""Plugin management CLI tool."""

import argparse
import json
import shutil
import sys
from pathlib import Path

from dotenv import load_dotenv

from actionhost.config.merge import normalize_plugin_entry
from actionhost.config.paths import get_plugin_search_paths, user_home_dir
from actionhost.config.store import FileConfigStore
from actionhost.constants import PLUGIN_DEFAULT_ENTRY_POINT, PLUGIN_MANIFEST_FILE, PLUGIN_PREFIX, PLUGINS_DIR_NAME
from actionhost.errors import ConfigWriteError, format_error
from actionhost.plugins.discovery import PluginDiscovery


def get_discovery(args) -> PluginDiscovery:
    """Create a PluginDiscovery instance."""
    return PluginDiscovery(get_plugin_search_paths(args.cwd))


def get_store(args) -> FileConfigStore:
    """Create a FileConfigStore instance."""
    return FileConfigStore(args.cwd)


def _find(args, name):
    plugins = get_discovery(args).discover_all()
    return next((p for p in plugins if p.name == name), None)


def _plugin_entries(store: FileConfigStore) -> dict:
    return store.load_merged().get("plugins") or {}


def cmd_list(args):
    """List all discovered plugins."""
    plugins = get_discovery(args).discover_all()

    if not plugins:
        print("No plugins found.")
        return

    entries = _plugin_entries(get_store(args))

    print(f"{'Name':<40} {'Version':<10} {'Enabled':<8} {'Path'}")
    print("-" * 100)

    for p in plugins:
        enabled = "Yes" if normalize_plugin_entry(entries.get(p.name)).enabled else "No"
        print(f"{p.name:<40} {p.manifest.version:<10} {enabled:<8} {p.path}")


def cmd_info(args):
    """Show detailed plugin information."""
    plugin = _find(args, args.name)
    if not plugin:
        print(f"Plugin '{args.name}' not found.")
        sys.exit(1)

    setting = normalize_plugin_entry(_plugin_entries(get_store(args)).get(plugin.name))

    print(f"Plugin: {plugin.name}")
    print(f"  Manifest name: {plugin.manifest.name}")
    print(f"  Version:       {plugin.manifest.version}")
    print(f"  Description:   {plugin.manifest.description or ''}")
    print(f"  Author:        {plugin.manifest.author or ''}")
    print(f"  Path:          {plugin.path}")
    print(f"  Entry Point:   {plugin.manifest.entry_point or PLUGIN_DEFAULT_ENTRY_POINT}")
    print(f"  Enabled:       {setting.enabled}")
    if setting.config:
        print(f"  Config:        {json.dumps(setting.config, indent=4, ensure_ascii=False)}")


def _set_enabled(args, enabled: bool):
    if enabled and not _find(args, args.name):
        print(f"Plugin '{args.name}' not found.")
        sys.exit(1)

    try:
        get_store(args).save(args.layer, f"plugins.{args.name}.enabled", enabled)
    except ConfigWriteError as e:
        print(format_error(e))
        sys.exit(1)

    word = "enabled" if enabled else "disabled"
    print(f"Plugin '{args.name}' {word} in the {args.layer} settings.")


def cmd_enable(args):
    """Enable a plugin."""
    _set_enabled(args, True)


def cmd_disable(args):
    """Disable a plugin."""
    _set_enabled(args, False)


def cmd_install(args):
    """Install a plugin from a local path into the user plugins directory."""
    source = Path(args.path).resolve()
    if not source.is_dir():
        print(f"Path does not exist: {source}")
        sys.exit(1)

    if not (source / PLUGIN_MANIFEST_FILE).exists():
        print(f"No {PLUGIN_MANIFEST_FILE} found at {source}")
        sys.exit(1)

    if not source.name.startswith(PLUGIN_PREFIX):
        print(f"Plugin directory name must start with '{PLUGIN_PREFIX}': {source.name}")
        sys.exit(1)

    plugins_dir = user_home_dir() / PLUGINS_DIR_NAME
    dest = plugins_dir / source.name
    if dest.exists():
        print(f"Plugin '{source.name}' already installed at {dest}")
        sys.exit(1)

    plugins_dir.mkdir(parents=True, exist_ok=True)
    shutil.copytree(source, dest)
    print(f"Plugin '{source.name}' installed to {dest}")


def cmd_doctor(args):
    """Run health checks on the plugin system."""
    issues = []
    store = get_store(args)

    for layer in ("user", "workspace"):
        path = store.path_for(layer)
        if path.exists() and store.load_layer(layer) is None:
            issues.append(f"{layer} settings file is invalid and will be ignored: {path}")

    for search_path in get_plugin_search_paths(args.cwd):
        if not search_path.is_dir():
            continue
        for child in sorted(search_path.iterdir()):
            if child.is_dir() and child.name.startswith(PLUGIN_PREFIX):
                if not (child / PLUGIN_MANIFEST_FILE).exists():
                    issues.append(f"'{child.name}': {PLUGIN_MANIFEST_FILE} missing in {child}")

    plugins = get_discovery(args).discover_all()
    discovered = {p.name for p in plugins}
    entries = _plugin_entries(store)

    for name in entries:
        if name not in discovered:
            issues.append(f"Configured plugin '{name}' not found in any search path")

    for p in plugins:
        entry_file = p.path / (p.manifest.entry_point or PLUGIN_DEFAULT_ENTRY_POINT)
        if not entry_file.exists():
            issues.append(f"Plugin '{p.name}': entry point file missing: {entry_file}")

    enabled = sum(1 for p in plugins if normalize_plugin_entry(entries.get(p.name)).enabled)
    if issues:
        print(f"Found {len(issues)} issue(s):")
        for i, issue in enumerate(issues, 1):
            print(f"  {i}. {issue}")
        sys.exit(1)
    else:
        print(f"All checks passed. {len(plugins)} plugin(s) found, {enabled} enabled.")


def main(argv=None):
    load_dotenv('.env')

    parser = argparse.ArgumentParser(description="actionhost plugin manager")
    parser.add_argument("-C", "--cwd", type=Path, default=None, help="Project directory")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list
    subparsers.add_parser("list", help="List all plugins")

    # info
    info_parser = subparsers.add_parser("info", help="Show plugin details")
    info_parser.add_argument("name", help="Plugin name")

    # enable / disable
    for command, help_text in (("enable", "Enable a plugin"), ("disable", "Disable a plugin")):
        toggle_parser = subparsers.add_parser(command, help=help_text)
        toggle_parser.add_argument("name", help="Plugin name")
        toggle_parser.add_argument(
            "--layer", choices=("user", "workspace"), default="workspace",
            help="Settings layer to write (default: workspace)"
        )

    # install
    install_parser = subparsers.add_parser("install", help="Install a plugin from local path")
    install_parser.add_argument("path", help="Path to plugin directory")

    # doctor
    subparsers.add_parser("doctor", help="Run health checks")

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    commands = {
        "list": cmd_list,
        "info": cmd_info,
        "enable": cmd_enable,
        "disable": cmd_disable,
        "install": cmd_install,
        "doctor": cmd_doctor,
    }

    commands[args.command](args)


if __name__ == "__main__":
    main()
