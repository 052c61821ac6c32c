#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Constants and default values for asapnotes.

This module centralizes the hardcoded values used across the package so
they can be found (and overridden in tests) in one place.

Constants are organized by category:
1. Renderer - placeholder sentinels and HTML fragment defaults
2. Notes storage - file extensions and name sanitization
3. Settings - persisted application settings defaults
4. Server - HTTP and liveness defaults
5. Configuration discovery - CLI config file names
"""

from __future__ import annotations

from pathlib import Path

# =============================================================================
# Renderer
# =============================================================================

# Fence delimiter recognized by the fence extractor
FENCE_MARKER = "```"

# Placeholder sentinels are drawn from the Unicode private-use area; the first
# code point absent from a document is used for that document.
PLACEHOLDER_SENTINEL_START = 0xE000
PLACEHOLDER_SENTINEL_END = 0xF8FF
PLACEHOLDER_LABEL = "CODEBLOCK"

# Fragment defaults (match the classic preview output)
DEFAULT_LINK_TARGET = "_blank"
DEFAULT_IMAGE_STYLE = "max-width: 100%; height: auto;"
DEFAULT_WRAP_LISTS = False
DEFAULT_PARAGRAPH_INLINE = True

# Maximum heading depth recognized by the structural rules
MAX_HEADING_LEVEL = 6

# =============================================================================
# Notes storage
# =============================================================================

NOTE_EXTENSIONS: tuple[str, ...] = (".md", ".txt")
DEFAULT_NOTE_EXTENSION = ".md"
ROOT_FOLDER_NAME = "Root"

# Characters kept when sanitizing user-supplied names (everything else is dropped)
NOTE_NAME_ALLOWED_PATTERN = r"[^a-zA-Z0-9 _\-.]"
FOLDER_NAME_ALLOWED_PATTERN = r"[^a-zA-Z0-9 _\-]"

# =============================================================================
# Settings
# =============================================================================

DEFAULT_NOTES_FOLDER = Path.home() / "Documents" / "ASAPNotes"
DEFAULT_FONT_FAMILY = "monospace"
DEFAULT_FONT_SIZE = "16"
DEFAULT_SETTINGS_FILENAME = "config.json"

# =============================================================================
# Server
# =============================================================================

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080
DEFAULT_HEARTBEAT_TIMEOUT = 60.0
DEFAULT_HEARTBEAT_CHECK_INTERVAL = 10.0
DEFAULT_MAX_NOTE_BYTES = 10 * 1024 * 1024

# =============================================================================
# Configuration discovery
# =============================================================================

CONFIG_FILENAMES: tuple[str, ...] = (
    ".asapnotes.toml",
    ".asapnotes.yaml",
    ".asapnotes.yml",
    ".asapnotes.json",
)
ENV_PREFIX = "ASAPNOTES_"
