"""Pytest configuration and shared fixtures for the asapnotes test suite.

This module provides shared fixtures, test configuration, and Hypothesis
profiles that are used across the entire test suite.
"""

import os
from pathlib import Path

import pytest
from hypothesis import Phase, Verbosity, settings

from asapnotes.storage import NoteStore, SettingsStore

# Register custom Hypothesis profiles
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.register_profile(
    "debug", max_examples=10, verbosity=Verbosity.verbose, phases=[Phase.explicit, Phase.reuse, Phase.generate]
)

# Load profile from environment or use default
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests - fast, isolated component tests")
    config.addinivalue_line("markers", "cli: Tests related to command-line interface")
    config.addinivalue_line("markers", "server: Tests that start the local HTTP API")
    config.addinivalue_line("markers", "fuzzing: Property-based tests driven by Hypothesis")
    config.addinivalue_line("markers", "slow: Slow tests that may take several seconds")


@pytest.fixture
def sample_note() -> str:
    """Provide a note exercising every supported construct.

    Returns
    -------
    str
        Markdown text used across multiple tests.

    """
    return """# Weekly plan

Some **bold** words and a [link](https://example.com).

## Tasks

- [x] write the report
- [ ] send the report

> remember the deadline

| Day | Item |
|-----|------|
| Mon | gym |

```
print("<done>")
```
"""


@pytest.fixture
def notes_root(tmp_path: Path) -> Path:
    """Provide a notes folder with a few notes and one subfolder.

    Returns
    -------
    Path
        Root of the populated notes folder.

    """
    root = tmp_path / "notes"
    (root / "work").mkdir(parents=True)
    (root / "todo.md").write_text("- [ ] buy milk\n", encoding="utf-8")
    (root / "ideas.txt").write_text("Plan a Trip to the coast", encoding="utf-8")
    (root / "work" / "meeting.md").write_text("# Meeting\n\nDiscuss the trip budget", encoding="utf-8")
    (root / "work" / "diagram.png").write_bytes(b"\x89PNG")
    return root


@pytest.fixture
def note_store(notes_root: Path) -> NoteStore:
    """Provide a NoteStore over the populated notes folder."""
    return NoteStore(notes_root)


@pytest.fixture
def settings_store(tmp_path: Path, notes_root: Path) -> SettingsStore:
    """Provide a loaded SettingsStore whose notes folder is ``notes_root``."""
    path = tmp_path / "config.json"
    path.write_text(f'{{"notes_folder": "{notes_root.as_posix()}"}}', encoding="utf-8")
    store = SettingsStore(path)
    store.load()
    return store
