"""Unit tests for asapnotes CLI configuration management.

This module tests the configuration system including file discovery, loading
in every supported format, validation, and priority handling.
"""

import argparse
import json
from pathlib import Path

import pytest

from asapnotes.cli.config import (
    _load_pyproject_section,
    discover_config_file,
    find_config_in_parents,
    get_config_search_paths,
    load_config_file,
    load_config_with_priority,
    merge_configs,
    validate_config,
)


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point the home directory at an empty temporary folder."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setattr(Path, "home", lambda: home)
    return home


@pytest.mark.unit
@pytest.mark.cli
class TestConfigDiscovery:
    """Test configuration file discovery functionality."""

    def test_discover_config_in_cwd(self, tmp_path, monkeypatch, isolated_home):
        """Test discovering config file in current working directory."""
        project = tmp_path / "project"
        project.mkdir()
        config_file = project / ".asapnotes.toml"
        config_file.write_text("[render]\nwrap_lists = true\n", encoding="utf-8")
        monkeypatch.chdir(project)

        assert discover_config_file() == config_file.resolve()

    def test_find_config_in_parent_directory(self, tmp_path):
        """Test that discovery walks up to parent directories."""
        config_file = tmp_path / ".asapnotes.yaml"
        config_file.write_text("render:\n  wrap_lists: true\n", encoding="utf-8")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)

        assert find_config_in_parents(nested) == config_file.resolve()

    def test_toml_takes_priority_over_json(self, tmp_path):
        """Test the per-directory filename priority."""
        (tmp_path / ".asapnotes.json").write_text("{}", encoding="utf-8")
        (tmp_path / ".asapnotes.toml").write_text("", encoding="utf-8")

        assert find_config_in_parents(tmp_path).name == ".asapnotes.toml"

    def test_pyproject_with_section(self, tmp_path):
        """Test that a pyproject.toml with [tool.asapnotes] is discovered."""
        pyproject = tmp_path / "pyproject.toml"
        pyproject.write_text('[tool.asapnotes]\nsettings_file = "notes.json"\n', encoding="utf-8")

        assert find_config_in_parents(tmp_path) == pyproject.resolve()
        assert _load_pyproject_section(pyproject) == {"settings_file": "notes.json"}

    def test_pyproject_without_section_is_skipped(self, tmp_path):
        """Test that unrelated pyproject.toml files do not stop the search."""
        (tmp_path / ".asapnotes.json").write_text("{}", encoding="utf-8")
        nested = tmp_path / "pkg"
        nested.mkdir()
        (nested / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")

        assert find_config_in_parents(nested).name == ".asapnotes.json"

    def test_broken_pyproject_is_skipped(self, tmp_path):
        """Test that an unparseable pyproject.toml is ignored during discovery."""
        (tmp_path / ".asapnotes.json").write_text("{}", encoding="utf-8")
        nested = tmp_path / "pkg"
        nested.mkdir()
        (nested / "pyproject.toml").write_text("[tool.asapnotes\n", encoding="utf-8")

        assert find_config_in_parents(nested).name == ".asapnotes.json"

    def test_home_fallback(self, tmp_path, monkeypatch, isolated_home):
        """Test discovery of a config file in the home directory."""
        empty = tmp_path / "empty"
        empty.mkdir()
        monkeypatch.chdir(empty)
        config_file = isolated_home / ".asapnotes.yml"
        config_file.write_text("serve:\n  port: 9000\n", encoding="utf-8")

        assert discover_config_file() == config_file

    def test_search_paths(self, tmp_path, monkeypatch, isolated_home):
        """Test the advertised search paths."""
        monkeypatch.chdir(tmp_path)
        paths = get_config_search_paths()

        assert Path.cwd() / ".asapnotes.toml" in paths
        assert Path.cwd() / "pyproject.toml" in paths
        assert isolated_home / ".asapnotes.json" in paths


@pytest.mark.unit
@pytest.mark.cli
class TestConfigLoading:
    """Test loading configuration files of each format."""

    def test_load_toml(self, tmp_path):
        """Test loading a TOML file."""
        path = tmp_path / "c.toml"
        path.write_text("[serve]\nport = 9000\n", encoding="utf-8")
        assert load_config_file(path) == {"serve": {"port": 9000}}

    def test_load_yaml(self, tmp_path):
        """Test loading a YAML file."""
        path = tmp_path / "c.yaml"
        path.write_text("render:\n  link_target: _self\n", encoding="utf-8")
        assert load_config_file(str(path)) == {"render": {"link_target": "_self"}}

    def test_load_empty_yaml(self, tmp_path):
        """Test that an empty YAML document is an empty config."""
        path = tmp_path / "c.yml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(path) == {}

    def test_load_json(self, tmp_path):
        """Test loading a JSON file."""
        path = tmp_path / "c.json"
        path.write_text(json.dumps({"settings_file": "s.json"}), encoding="utf-8")
        assert load_config_file(path) == {"settings_file": "s.json"}

    @pytest.mark.parametrize(
        "name, content",
        [
            ("bad.toml", "[serve\n"),
            ("bad.yaml", "a: [1,\n"),
            ("bad.json", "{"),
            ("list.json", "[1, 2]"),
            ("config.ini", "[serve]"),
        ],
    )
    def test_invalid_files(self, tmp_path, name, content):
        """Test that unparseable or unsupported files raise ArgumentTypeError."""
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")

        with pytest.raises(argparse.ArgumentTypeError):
            load_config_file(path)

    def test_missing_file(self, tmp_path):
        """Test that a missing file is reported."""
        with pytest.raises(argparse.ArgumentTypeError, match="does not exist"):
            load_config_file(tmp_path / "nope.toml")

    def test_directory(self, tmp_path):
        """Test that a directory is not accepted as a config file."""
        with pytest.raises(argparse.ArgumentTypeError, match="not a file"):
            load_config_file(tmp_path)

    def test_pyproject_section_must_be_table(self, tmp_path):
        """Test that a scalar [tool.asapnotes] value is rejected."""
        path = tmp_path / "pyproject.toml"
        path.write_text('[tool]\nasapnotes = "yes"\n', encoding="utf-8")

        with pytest.raises(argparse.ArgumentTypeError, match="must be a table"):
            load_config_file(path)


@pytest.mark.unit
@pytest.mark.cli
class TestConfigValidation:
    """Test shape checks on loaded configuration."""

    def test_valid_config(self):
        """Test a config using every known key."""
        config = {
            "settings_file": "s.json",
            "render": {"wrap_lists": True, "link_target": None},
            "serve": {"host": "0.0.0.0", "port": 9000, "heartbeat_timeout": 30},
        }
        assert validate_config(config) is config

    @pytest.mark.parametrize(
        "config, message",
        [
            ({"renderer": {}}, "Unknown configuration key"),
            ({"render": "yes"}, "must be a dict"),
            ({"settings_file": 3}, "must be a str"),
            ({"serve": {"colour": "red"}}, "Unknown \\[serve\\]"),
            ({"render": {"link_target": 'x" onclick="y'}}, "Invalid \\[render\\]"),
        ],
    )
    def test_invalid_config(self, config, message):
        """Test each validation failure."""
        with pytest.raises(argparse.ArgumentTypeError, match=message):
            validate_config(config)

    def test_unknown_render_keys_are_ignored(self):
        """Test that render options unknown to this version are ignored."""
        assert validate_config({"render": {"future_option": 1}}) == {"render": {"future_option": 1}}


@pytest.mark.unit
@pytest.mark.cli
class TestConfigPriority:
    """Test configuration priority handling."""

    def test_explicit_beats_env(self, tmp_path):
        """Test that --config wins over ASAPNOTES_CONFIG."""
        explicit = tmp_path / "explicit.json"
        explicit.write_text('{"serve": {"port": 1}}', encoding="utf-8")
        env = tmp_path / "env.json"
        env.write_text('{"serve": {"port": 2}}', encoding="utf-8")

        assert load_config_with_priority(str(explicit), str(env))["serve"]["port"] == 1
        assert load_config_with_priority(None, str(env))["serve"]["port"] == 2

    def test_discovered_config(self, tmp_path, monkeypatch, isolated_home):
        """Test fallback to the discovered file."""
        project = tmp_path / "project"
        project.mkdir()
        (project / ".asapnotes.json").write_text('{"serve": {"port": 3}}', encoding="utf-8")
        monkeypatch.chdir(project)

        assert load_config_with_priority()["serve"]["port"] == 3

    def test_no_config(self, tmp_path, monkeypatch, isolated_home):
        """Test that no config anywhere gives an empty dict."""
        project = tmp_path / "project"
        project.mkdir()
        monkeypatch.chdir(project)

        assert load_config_with_priority() == {}

    def test_explicit_config_is_validated(self, tmp_path):
        """Test that loaded configs go through validation."""
        path = tmp_path / "c.json"
        path.write_text('{"unknown": 1}', encoding="utf-8")

        with pytest.raises(argparse.ArgumentTypeError):
            load_config_with_priority(str(path))

    def test_merge_configs(self):
        """Test deep merging of nested sections."""
        base = {"serve": {"port": 8080, "host": "127.0.0.1"}, "settings_file": "a.json"}
        override = {"serve": {"host": "0.0.0.0"}, "settings_file": "b.json"}

        assert merge_configs(base, override) == {
            "serve": {"port": 8080, "host": "0.0.0.0"},
            "settings_file": "b.json",
        }
        assert base["serve"]["host"] == "127.0.0.1"
