#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/asapnotes/server/app.py
"""The notes application controller.

NotesApp owns every piece of per-session state: the settings store, the
liveness monitor, and the renderer options. HTTP handlers only translate
requests into calls on this object, so the same operations are available
to the CLI and to tests without a running server.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import fields
from typing import Any, Callable, Mapping, Optional

from asapnotes.exceptions import ValidationError
from asapnotes.options import MarkdownRendererOptions
from asapnotes.renderers import MarkdownHtmlRenderer
from asapnotes.server.heartbeat import LivenessMonitor
from asapnotes.storage import NoteStore, Settings, SettingsStore

logger = logging.getLogger(__name__)

# Delay before a requested shutdown runs, so the response reaches the client
SHUTDOWN_DELAY_SECONDS = 0.1


class NotesApp:
    """Session controller behind the notes HTTP API.

    Parameters
    ----------
    settings_store : SettingsStore
        Persisted settings; ``load()`` should already have been called
    renderer_options : MarkdownRendererOptions, optional
        Options for ``render_preview``
    monitor : LivenessMonitor, optional
        Heartbeat tracker; when omitted heartbeats are accepted and ignored

    """

    def __init__(
        self,
        settings_store: SettingsStore,
        renderer_options: Optional[MarkdownRendererOptions] = None,
        monitor: Optional[LivenessMonitor] = None,
    ):
        self.settings_store = settings_store
        self.renderer = MarkdownHtmlRenderer(renderer_options)
        self.monitor = monitor
        self.shutdown_event = threading.Event()
        self._shutdown_callbacks: list[Callable[[], None]] = []

        if monitor is not None and monitor.on_expire is None:
            monitor.on_expire = self.request_shutdown

    @property
    def notes(self) -> NoteStore:
        """Note store for the currently configured notes folder."""
        return NoteStore(self.settings_store.settings.notes_folder)

    # Settings

    def get_settings(self) -> dict[str, str]:
        return self.settings_store.settings.to_dict()

    def update_settings(self, payload: Any) -> dict[str, str]:
        """Apply a partial settings update from a decoded JSON body.

        Keys other than the known settings are ignored, as are empty values.

        Raises
        ------
        ValidationError
            If the payload is not a JSON object

        """
        if not isinstance(payload, Mapping):
            raise ValidationError("Settings payload must be a JSON object", parameter_name="body")

        known = {f.name for f in fields(Settings)}
        changes = {key: value for key, value in payload.items() if key in known}
        return self.settings_store.update(**changes).to_dict()

    # Notes

    def folder_tree(self) -> dict[str, Any]:
        return self.notes.list_tree().to_dict()

    def read_note(self, path: str) -> str:
        return self.notes.read_note(path)

    def write_note(self, path: str, text: str) -> None:
        self.notes.write_note(path, text)

    def create_note(self, name: str, folder: str = "") -> str:
        return self.notes.create_note(name, folder)

    def create_folder(self, path: str) -> str:
        return self.notes.create_folder(path)

    def search(self, query: str) -> list[str]:
        return self.notes.search(query)

    def render_preview(self, text: str) -> str:
        """Render note text to preview HTML."""
        return self.renderer.render_to_string(text)

    # Lifecycle

    def heartbeat(self) -> None:
        if self.monitor is not None:
            self.monitor.ping()

    def on_shutdown(self, callback: Callable[[], None]) -> None:
        """Register a callback to run when shutdown is requested."""
        self._shutdown_callbacks.append(callback)

    def request_shutdown(self, delay: float = SHUTDOWN_DELAY_SECONDS) -> None:
        """Ask the application to stop after ``delay`` seconds.

        Repeated requests are ignored.
        """
        if self.shutdown_event.is_set():
            return
        self.shutdown_event.set()
        logger.info("Shutdown requested")

        timer = threading.Timer(delay, self._run_shutdown_callbacks)
        timer.daemon = True
        timer.start()

    def _run_shutdown_callbacks(self) -> None:
        if self.monitor is not None:
            self.monitor.stop()
        for callback in self._shutdown_callbacks:
            callback()
