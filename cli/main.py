#!/usr/bin/env python
"""
actionhost - command line entry point

Usage:
    actionhost                       # interactive REPL
    actionhost run <action> [args]   # run one action and exit
    actionhost list                  # list available actions
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables FIRST (ACTIONHOST_* paths are read at call time)
load_dotenv('.env')

from actionhost.config.paths import user_home_dir
from actionhost.config.store import FileConfigStore
from actionhost.host import ActionHost
from actionhost.i18n import init_i18n
from actionhost.utils.logger import configure_logging
from cli.headless import run_headless
from cli.renderer import console, render_action_table
from cli.repl import REPLRunner

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='actionhost',
        description='Discover, configure and run project, global and plugin actions',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument(
        '-C', '--cwd',
        type=Path,
        default=None,
        help='Project directory (default: current directory)'
    )
    parser.add_argument(
        '--log-file',
        type=Path,
        default=None,
        help='Log file (default: ~/.actionhost/actionhost.log)'
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Print info-level logs to the console'
    )

    subparsers = parser.add_subparsers(dest='command')

    run_parser = subparsers.add_parser('run', help='Run one action and exit')
    run_parser.add_argument('action', help='Action name')
    run_parser.add_argument('args', nargs=argparse.REMAINDER, help='Arguments passed to the action')

    subparsers.add_parser('list', help='List available actions')

    return parser.parse_args(argv)


async def _list_actions(host: ActionHost) -> int:
    await host.load()
    render_action_table(host.registry.get_all(), target=console)
    return 0


def main(argv=None):
    """Main function."""
    args = parse_args(argv)
    cwd = (args.cwd or Path.cwd()).resolve()

    store = FileConfigStore(cwd)
    config = store.load_merged()

    log_file = args.log_file or user_home_dir() / "actionhost.log"
    configure_logging(
        config.get("log_level"),
        log_file=log_file,
        console_level=logging.INFO if args.verbose else logging.WARNING,
    )
    init_i18n(config.get("locale"))

    host = ActionHost(cwd=cwd, store=store)

    try:
        if args.command == 'run':
            exit_code = asyncio.run(run_headless(host, args.action, args.args))
        elif args.command == 'list':
            exit_code = asyncio.run(_list_actions(host))
        else:
            asyncio.run(REPLRunner(host).run())
            exit_code = 0
    except KeyboardInterrupt:
        console.print("\n[yellow]interrupted[/yellow]")
        exit_code = 130

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
