#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Local HTTP API serving notes to the browser editor."""

from asapnotes.server.app import NotesApp
from asapnotes.server.handler import NotesHTTPServer, NotesRequestHandler, create_server, serve, status_for_error
from asapnotes.server.heartbeat import LivenessMonitor

__all__ = [
    "LivenessMonitor",
    "NotesApp",
    "NotesHTTPServer",
    "NotesRequestHandler",
    "create_server",
    "serve",
    "status_for_error",
]
