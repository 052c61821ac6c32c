#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Subcommand handlers for the asapnotes CLI.

Each handler takes the parsed arguments and the loaded configuration and
returns a process exit code. Values are resolved in this order: command line
argument (or its ``ASAPNOTES_*`` environment default), configuration file,
built-in default.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.tree import Tree

from asapnotes.constants import (
    DEFAULT_HEARTBEAT_TIMEOUT,
    DEFAULT_HOST,
    DEFAULT_PORT,
    DEFAULT_SETTINGS_FILENAME,
)
from asapnotes.exceptions import (
    AsapNotesError,
    NoteError,
    RenderingError,
    SecurityError,
    SettingsError,
    ValidationError,
)
from asapnotes.options import MarkdownRendererOptions
from asapnotes.renderers import MarkdownHtmlRenderer
from asapnotes.server import LivenessMonitor, NotesApp, serve
from asapnotes.storage import Folder, NoteStore, SettingsStore

logger = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_ERROR = 1
EXIT_VALIDATION_ERROR = 3
EXIT_FILE_ERROR = 4
EXIT_RENDERING_ERROR = 7
EXIT_SECURITY_ERROR = 8


def get_exit_code_for_exception(exception: Exception) -> int:
    """Map an exception to an appropriate CLI exit code.

    Parameters
    ----------
    exception : Exception
        The exception to map to an exit code

    Returns
    -------
    int
        The appropriate exit code for the exception type

    """
    if isinstance(exception, SecurityError):
        return EXIT_SECURITY_ERROR

    if isinstance(exception, ValidationError):
        return EXIT_VALIDATION_ERROR

    if isinstance(exception, (NoteError, SettingsError, OSError)):
        return EXIT_FILE_ERROR

    if isinstance(exception, RenderingError):
        return EXIT_RENDERING_ERROR

    return EXIT_ERROR


def _pick(cli_value: Any, section: Dict[str, Any], key: str, default: Any) -> Any:
    if cli_value is not None:
        return cli_value
    value = section.get(key)
    return default if value is None else value


def build_renderer_options(parsed: argparse.Namespace, config: Dict[str, Any]) -> MarkdownRendererOptions:
    """Combine the ``[render]`` config section with command line flags.

    Raises
    ------
    ValidationError
        If the resulting options are invalid

    """
    try:
        options = MarkdownRendererOptions.from_mapping(config.get("render", {}))
        if parsed.wrap_lists is not None:
            options = options.create_updated(wrap_lists=parsed.wrap_lists)
        if parsed.no_link_target:
            options = options.create_updated(link_target=None)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Invalid renderer options: {e}", original_error=e) from e
    return options


def open_settings_store(parsed: argparse.Namespace, config: Dict[str, Any]) -> SettingsStore:
    """Load the settings file named on the command line, in the config, or the default."""
    settings_file = _pick(getattr(parsed, "settings_file", None), config, "settings_file", DEFAULT_SETTINGS_FILENAME)
    store = SettingsStore(Path(settings_file).expanduser())
    store.load()
    return store


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    return path.read_text(encoding="utf-8", errors="replace")


def handle_render_command(parsed: argparse.Namespace, config: Dict[str, Any]) -> int:
    """Render a markdown note to preview HTML."""
    options = build_renderer_options(parsed, config)
    renderer = MarkdownHtmlRenderer(options)

    try:
        text = _read_input(parsed.input)
    except OSError as e:
        print(f"Error: Could not read input {parsed.input}: {e}", file=sys.stderr)
        return EXIT_FILE_ERROR

    if parsed.output:
        renderer.render_to_file(text, parsed.output)
        logger.info("Rendered %s -> %s", parsed.input, parsed.output)
        return EXIT_SUCCESS

    sys.stdout.write(renderer.render_to_string(text))
    sys.stdout.write("\n")
    return EXIT_SUCCESS


def handle_serve_command(parsed: argparse.Namespace, config: Dict[str, Any], console: Optional[Console] = None) -> int:
    """Run the notes HTTP API until shutdown."""
    console = console or Console()
    serve_config = config.get("serve", {})

    host = _pick(parsed.host, serve_config, "host", DEFAULT_HOST)
    port = int(_pick(parsed.port, serve_config, "port", DEFAULT_PORT))
    timeout = float(_pick(parsed.heartbeat_timeout, serve_config, "heartbeat_timeout", DEFAULT_HEARTBEAT_TIMEOUT))

    store = open_settings_store(parsed, config)
    monitor = LivenessMonitor(timeout=timeout, check_interval=min(10.0, timeout)) if parsed.heartbeat else None
    app = NotesApp(store, renderer_options=MarkdownRendererOptions.from_mapping(config.get("render", {})), monitor=monitor)

    def announce(httpd) -> None:
        lines = [
            f"[bold]URL:[/bold] {httpd.url}",
            f"[bold]Notes folder:[/bold] {store.settings.notes_folder}",
            f"[bold]Settings file:[/bold] {store.path}",
        ]
        if monitor is not None:
            lines.append(f"Stops after {timeout:g}s without a heartbeat")
        lines.append("Press Ctrl+C to stop")
        console.print(Panel("\n".join(lines), title="asapnotes"))

    try:
        serve(app, host, port, on_ready=announce)
    except OSError as e:
        if "Address already in use" in str(e):
            print(f"Error: Port {port} is already in use", file=sys.stderr)
        else:
            print(f"Error: Could not start server: {e}", file=sys.stderr)
        return EXIT_ERROR

    return EXIT_SUCCESS


def build_folder_tree(folder: Folder, tree: Optional[Tree] = None) -> Tree:
    """Render a folder listing as a rich Tree."""
    if tree is None:
        tree = Tree(f"[bold]{escape(folder.name)}[/bold]")
    for sub in folder.subfolders:
        build_folder_tree(sub, tree.add(f"[bold blue]{escape(sub.name)}/[/bold blue]"))
    for note in folder.notes:
        tree.add(f"{escape(note.name)} [dim]{note.modified:%Y-%m-%d %H:%M}[/dim]")
    return tree


def handle_tree_command(parsed: argparse.Namespace, config: Dict[str, Any], console: Optional[Console] = None) -> int:
    """Print the notes folder as a tree."""
    console = console or Console()
    store = open_settings_store(parsed, config)
    folder = NoteStore(store.settings.notes_folder).list_tree()
    console.print(build_folder_tree(folder))
    return EXIT_SUCCESS


def handle_search_command(parsed: argparse.Namespace, config: Dict[str, Any], console: Optional[Console] = None) -> int:
    """Print notes whose contents contain the query."""
    console = console or Console()
    store = open_settings_store(parsed, config)
    results = NoteStore(store.settings.notes_folder).search(parsed.query)

    if not results:
        console.print("No results found.")
        return EXIT_SUCCESS

    for path in results:
        console.print(path, markup=False, highlight=False)
    return EXIT_SUCCESS


COMMAND_HANDLERS = {
    "render": handle_render_command,
    "serve": handle_serve_command,
    "tree": handle_tree_command,
    "search": handle_search_command,
}


def dispatch_command(parsed: argparse.Namespace, config: Dict[str, Any]) -> int:
    """Run the selected subcommand, converting errors to exit codes."""
    handler = COMMAND_HANDLERS[parsed.command]
    try:
        return handler(parsed, config)
    except AsapNotesError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        logger.debug("Command %s failed", parsed.command, exc_info=True)
        return get_exit_code_for_exception(e)
