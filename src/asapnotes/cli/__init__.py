"""Command-line interface for asapnotes.

Subcommands
-----------
- ``render``  render a markdown note to preview HTML
- ``serve``   run the local notes API for the browser editor
- ``tree``    show the notes folder as a tree
- ``search``  list notes containing some text

Environment Variable Support
----------------------------
Options support environment variable defaults using the pattern
ASAPNOTES_<OPTION_NAME>, where option names are uppercased with hyphens
replaced by underscores. CLI arguments always override environment
variables, and environment variables override configuration files.

Examples
--------
Render a note::

    $ asapnotes render todo.md -o todo.html

Render from stdin with list containers::

    $ cat todo.md | asapnotes render - --wrap-lists

Serve on another port without the heartbeat shutdown::

    $ asapnotes serve --port 9000 --no-heartbeat

Log every HTTP request while debugging the editor::

    $ asapnotes serve --access-log

Use environment variables for defaults::

    $ export ASAPNOTES_PORT=9000
    $ export ASAPNOTES_SETTINGS_FILE=~/.config/asapnotes/config.json
    $ asapnotes serve

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

import argparse
import logging
import os
import sys

from asapnotes import __version__
from asapnotes.cli.actions import add_env_argument
from asapnotes.cli.commands import EXIT_VALIDATION_ERROR, dispatch_command
from asapnotes.cli.config import load_config_with_priority
from asapnotes.logging_utils import configure_logging

logger = logging.getLogger(__name__)

__all__ = ["main", "create_parser"]

CONFIG_ENV_VAR = "ASAPNOTES_CONFIG"


def _add_settings_file_argument(parser: argparse.ArgumentParser) -> None:
    add_env_argument(
        parser,
        "--settings-file",
        default=None,
        help="Path to the JSON settings file (default: ./config.json)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser with all subcommands."""
    parser = argparse.ArgumentParser(
        prog="asapnotes",
        description="Plain-folder notes with a live markdown preview.",
    )
    parser.add_argument("--version", action="version", version=f"asapnotes {__version__}")
    parser.add_argument("--config", help="Path to a configuration file (JSON, TOML or YAML)")
    add_env_argument(
        parser,
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level (default: WARNING)",
    )
    add_env_argument(parser, "--log-file", default=None, help="Also write log messages to this file")
    add_env_argument(parser, "--trace", action="store_true", help="Debug logging with timestamps and logger names")

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")

    render_parser = subparsers.add_parser("render", help="Render a markdown note to preview HTML")
    render_parser.add_argument("input", help="Markdown file to render, or '-' for stdin")
    render_parser.add_argument("-o", "--output", help="Write HTML to this file instead of stdout")
    add_env_argument(
        render_parser,
        "--wrap-lists",
        action="store_true",
        default=None,
        help="Wrap consecutive list items in <ul>/<ol>",
    )
    add_env_argument(
        render_parser,
        "--no-link-target",
        action="store_true",
        help='Omit target="_blank" from links',
    )

    serve_parser = subparsers.add_parser("serve", help="Run the notes API for the browser editor")
    add_env_argument(serve_parser, "--host", default=None, help="Interface to bind (default: 127.0.0.1)")
    add_env_argument(serve_parser, "--port", type=int, default=None, help="Port to bind (default: 8080)")
    _add_settings_file_argument(serve_parser)
    add_env_argument(
        serve_parser,
        "--heartbeat-timeout",
        type=float,
        default=None,
        help="Seconds without a heartbeat before shutting down (default: 60)",
    )
    add_env_argument(
        serve_parser,
        "--no-heartbeat",
        dest="heartbeat",
        action="store_false",
        help="Keep running when the editor stops sending heartbeats",
    )
    add_env_argument(serve_parser, "--access-log", action="store_true", help="Log one line per HTTP request")

    tree_parser = subparsers.add_parser("tree", help="Show the notes folder as a tree")
    _add_settings_file_argument(tree_parser)

    search_parser = subparsers.add_parser("search", help="List notes containing some text")
    search_parser.add_argument("query", help="Text to search for (case-insensitive)")
    _add_settings_file_argument(search_parser)

    return parser


def _setup_logging_level(parsed_args: argparse.Namespace) -> None:
    # --trace takes precedence over --log-level inside resolve_log_level
    configure_logging(
        parsed_args.log_level,
        log_file=parsed_args.log_file,
        trace_mode=parsed_args.trace,
        access_log=getattr(parsed_args, "access_log", False),
    )


def main(args: list[str] | None = None) -> int:
    """Execute the CLI and return the process exit code."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help(sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        _setup_logging_level(parsed_args)
    except ValueError as e:
        # Environment defaults bypass argparse choices
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    try:
        config = load_config_with_priority(
            explicit_path=parsed_args.config, env_var_path=os.environ.get(CONFIG_ENV_VAR)
        )
    except argparse.ArgumentTypeError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_VALIDATION_ERROR

    return dispatch_command(parsed_args, config)


if __name__ == "__main__":
    sys.exit(main())
