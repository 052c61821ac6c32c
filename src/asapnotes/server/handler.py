#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/asapnotes/server/handler.py
"""HTTP API for the browser editor.

Routes
------
- ``GET  /api/settings``           current settings as JSON
- ``POST /api/settings``           partial settings update (JSON body)
- ``GET  /api/folders``            folder tree as JSON
- ``GET  /api/note?path=``         note text
- ``POST /api/note?path=``         save note text (raw body)
- ``POST /api/folder?path=``       create a folder
- ``GET  /api/search?q=``          matching note paths as JSON
- ``POST /api/heartbeat``          liveness ping
- ``POST /api/shutdown``           stop the server
- ``POST /api/render``             markdown body to preview HTML

Errors are returned as ``{"error": ..., "message": ...}`` JSON.
"""

from __future__ import annotations

import http.server
import json
import logging
from typing import Any, Callable, Optional
from urllib.parse import parse_qs, urlsplit

from asapnotes.constants import DEFAULT_HOST, DEFAULT_MAX_NOTE_BYTES, DEFAULT_PORT
from asapnotes.exceptions import AsapNotesError, NoteNotFoundError, SecurityError, ValidationError
from asapnotes.logging_utils import get_access_logger
from asapnotes.server.app import NotesApp

logger = logging.getLogger(__name__)
access_logger = get_access_logger()


def status_for_error(error: AsapNotesError) -> tuple[int, str]:
    """Map an application error to an HTTP status code and short reason."""
    if isinstance(error, ValidationError):
        return 400, "Bad request"
    if isinstance(error, SecurityError):
        return 403, "Access denied"
    if isinstance(error, NoteNotFoundError):
        return 404, "Not found"
    return 500, "Internal server error"


class NotesHTTPServer(http.server.ThreadingHTTPServer):
    """Threaded HTTP server carrying the application controller."""

    daemon_threads = True

    def __init__(self, server_address: tuple[str, int], app: NotesApp, max_body_bytes: int = DEFAULT_MAX_NOTE_BYTES):
        super().__init__(server_address, NotesRequestHandler)
        self.app = app
        self.max_body_bytes = max_body_bytes

    @property
    def url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}/"


class NotesRequestHandler(http.server.BaseHTTPRequestHandler):
    """Dispatch API requests to the server's NotesApp."""

    server: NotesHTTPServer
    server_version = "asapnotes"

    @property
    def app(self) -> NotesApp:
        return self.server.app

    def do_GET(self) -> None:
        self._dispatch(
            {
                "/api/settings": self._get_settings,
                "/api/folders": self._get_folders,
                "/api/note": self._get_note,
                "/api/search": self._get_search,
            }
        )

    def do_POST(self) -> None:
        self._dispatch(
            {
                "/api/settings": self._post_settings,
                "/api/note": self._post_note,
                "/api/folder": self._post_folder,
                "/api/heartbeat": self._post_heartbeat,
                "/api/shutdown": self._post_shutdown,
                "/api/render": self._post_render,
            }
        )

    def log_message(self, format: str, *args: Any) -> None:
        access_logger.info("%s - %s", self.address_string(), format % args)

    # Dispatch

    def _dispatch(self, routes: dict[str, Callable[[dict[str, list[str]]], None]]) -> None:
        parts = urlsplit(self.path)
        handler = routes.get(parts.path)
        if handler is None:
            self._send_error_json(404, "Not found", "The requested endpoint does not exist")
            return

        query = parse_qs(parts.query, keep_blank_values=True)
        try:
            handler(query)
        except AsapNotesError as e:
            status, reason = status_for_error(e)
            if status >= 500:
                logger.error("%s %s failed: %s", self.command, parts.path, e)
            else:
                logger.debug("%s %s rejected: %s", self.command, parts.path, e)
            self._send_error_json(status, reason, e.message)
        except Exception as e:
            logger.exception("Error handling %s %s", self.command, parts.path)
            self._send_error_json(500, "Internal server error", str(e))

    # Handlers

    def _get_settings(self, query: dict[str, list[str]]) -> None:
        self._send_json(self.app.get_settings())

    def _post_settings(self, query: dict[str, list[str]]) -> None:
        body = self._read_body()
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValidationError(f"Invalid JSON: {e}", parameter_name="body", original_error=e) from e
        self._send_json(self.app.update_settings(payload))

    def _get_folders(self, query: dict[str, list[str]]) -> None:
        self._send_json(self.app.folder_tree())

    def _get_note(self, query: dict[str, list[str]]) -> None:
        text = self.app.read_note(_param(query, "path"))
        self._send_text(text)

    def _post_note(self, query: dict[str, list[str]]) -> None:
        path = _param(query, "path")
        body = self._read_body()
        self.app.write_note(path, body.decode("utf-8", errors="replace"))
        self._send_text("OK")

    def _post_folder(self, query: dict[str, list[str]]) -> None:
        created = self.app.create_folder(_param(query, "path"))
        self._send_json({"path": created})

    def _get_search(self, query: dict[str, list[str]]) -> None:
        self._send_json(self.app.search(_param(query, "q")))

    def _post_heartbeat(self, query: dict[str, list[str]]) -> None:
        self.app.heartbeat()
        self._send_text("OK")

    def _post_shutdown(self, query: dict[str, list[str]]) -> None:
        self._send_text("Shutting down...")
        self.app.request_shutdown()

    def _post_render(self, query: dict[str, list[str]]) -> None:
        text = self._read_body().decode("utf-8", errors="replace")
        self._send_text(self.app.render_preview(text), content_type="text/html; charset=utf-8")

    # I/O helpers

    def _read_body(self) -> bytes:
        try:
            length = int(self.headers.get("Content-Length") or 0)
        except ValueError as e:
            raise ValidationError("Invalid Content-Length header", parameter_name="Content-Length") from e
        if length < 0:
            raise ValidationError("Invalid Content-Length header", parameter_name="Content-Length")
        if length > self.server.max_body_bytes:
            raise ValidationError(
                f"Request body exceeds {self.server.max_body_bytes} bytes",
                parameter_name="Content-Length",
                parameter_value=length,
            )
        return self.rfile.read(length) if length else b""

    def _send_bytes(self, status: int, data: bytes, content_type: str) -> None:
        self.send_response(status)
        self.send_header("Content-type", content_type)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def _send_json(self, payload: Any, status: int = 200) -> None:
        self._send_bytes(status, json.dumps(payload).encode("utf-8"), "application/json")

    def _send_text(self, text: str, content_type: str = "text/plain; charset=utf-8") -> None:
        self._send_bytes(200, text.encode("utf-8"), content_type)

    def _send_error_json(self, status: int, error: str, message: str) -> None:
        self._send_json({"error": error, "message": message}, status=status)


def _param(query: dict[str, list[str]], name: str) -> str:
    values = query.get(name)
    return values[0] if values else ""


def create_server(
    app: NotesApp,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    max_body_bytes: int = DEFAULT_MAX_NOTE_BYTES,
) -> NotesHTTPServer:
    """Bind a server for ``app`` and wire shutdown requests to it.

    Parameters
    ----------
    app : NotesApp
        Application controller
    host : str, default "127.0.0.1"
        Interface to bind
    port : int, default 8080
        Port to bind; 0 picks a free port
    max_body_bytes : int, default 10 MiB
        Largest accepted request body

    Returns
    -------
    NotesHTTPServer
        Bound, not yet serving

    """
    httpd = NotesHTTPServer((host, port), app, max_body_bytes=max_body_bytes)
    app.on_shutdown(httpd.shutdown)
    return httpd


def serve(
    app: NotesApp,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    on_ready: Optional[Callable[[NotesHTTPServer], None]] = None,
) -> None:
    """Run the notes API until shutdown is requested or the liveness monitor expires.

    Raises
    ------
    OSError
        If the address cannot be bound

    """
    with create_server(app, host, port) as httpd:
        logger.info("Server started at %s", httpd.url)
        logger.info("Notes folder: %s", app.settings_store.settings.notes_folder)

        if app.monitor is not None:
            app.monitor.start()
        if on_ready is not None:
            on_ready(httpd)

        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            logger.info("Shutting down server...")
        finally:
            if app.monitor is not None:
                app.monitor.stop()
