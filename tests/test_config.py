"""
Tests for fbupload.config.loader module.

Tests server profile loading and merging including:
- Built-in defaults
- YAML profile merging (defaults -> profile -> overrides)
- Error handling
"""

from __future__ import annotations

import pytest

from fbupload.config.loader import DEFAULT_PROFILE, _deep_merge_dicts, load_profile
from fbupload.exceptions import ConfigError


class TestProfileLoading:
    """Tests for basic profile loading."""

    def test_defaults_without_file(self):
        """Test that no file yields the built-in defaults."""
        profile = load_profile()

        assert profile == DEFAULT_PROFILE
        assert profile is not DEFAULT_PROFILE

    def test_defaults_not_mutated(self):
        """Test that changing a loaded profile leaves the defaults alone."""
        profile = load_profile()
        profile["server"]["transfer"] = "resumable"

        assert DEFAULT_PROFILE["server"]["transfer"] == "direct"

    def test_profile_overrides_defaults(self, create_yaml_file):
        """Test that profile values win and unset keys keep defaults."""
        path = create_yaml_file(
            "fb.yaml",
            {
                "server": {"url": "https://files.example.com", "transfer": "resumable"},
                "transport": {"convention": "marker"},
            },
        )

        profile = load_profile(path)

        assert profile["server"]["url"] == "https://files.example.com"
        assert profile["server"]["transfer"] == "resumable"
        assert profile["server"]["token_format"] == "auto"
        assert profile["transport"]["convention"] == "marker"
        assert profile["transport"]["timeout"] == 60

    def test_overrides_win_over_profile(self, create_yaml_file):
        """Test that CLI-style overrides are applied last."""
        path = create_yaml_file("fb.yaml", {"server": {"transfer": "resumable"}})

        profile = load_profile(path, overrides={"server": {"transfer": "direct"}})

        assert profile["server"]["transfer"] == "direct"

    def test_none_overrides_ignored(self, create_yaml_file):
        """Test that unset (None) overrides do not clobber profile values."""
        path = create_yaml_file("fb.yaml", {"transport": {"backend": "curl"}})

        profile = load_profile(
            path, overrides={"transport": {"backend": None, "timeout": None}}
        )

        assert profile["transport"]["backend"] == "curl"
        assert profile["transport"]["timeout"] == 60


class TestDeepMerge:
    """Tests for the merge helper."""

    def test_nested_merge(self):
        """Test that nested dicts merge key by key."""
        merged = _deep_merge_dicts({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})

        assert merged == {"a": {"x": 1, "y": 3}}

    def test_scalar_replaces_dict(self):
        """Test that a scalar overlay replaces a dict."""
        assert _deep_merge_dicts({"a": {"x": 1}}, {"a": 5}) == {"a": 5}

    def test_inputs_not_mutated(self):
        """Test that neither input is modified."""
        base = {"a": {"x": 1}}
        overlay = {"a": {"x": 2}}

        _deep_merge_dicts(base, overlay)

        assert base == {"a": {"x": 1}}
        assert overlay == {"a": {"x": 2}}


class TestErrorHandling:
    """Tests for unusable profile files."""

    def test_missing_file(self, tmp_test_dir):
        """Test that a missing profile raises ConfigError."""
        with pytest.raises(ConfigError, match="not found"):
            load_profile(tmp_test_dir / "nope.yaml")

    def test_invalid_yaml(self, tmp_test_dir):
        """Test that invalid YAML raises ConfigError."""
        path = tmp_test_dir / "bad.yaml"
        path.write_text("server: [unclosed\n")

        with pytest.raises(ConfigError, match="invalid YAML"):
            load_profile(path)

    def test_empty_file(self, tmp_test_dir):
        """Test that an empty file raises ConfigError."""
        path = tmp_test_dir / "empty.yaml"
        path.write_text("")

        with pytest.raises(ConfigError, match="empty"):
            load_profile(path)

    def test_non_mapping_top_level(self, tmp_test_dir):
        """Test that a YAML list at the top level raises ConfigError."""
        path = tmp_test_dir / "list.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigError, match="must be a mapping"):
            load_profile(path)

    def test_section_not_a_mapping(self, tmp_test_dir):
        """Test that a scalar section raises ConfigError."""
        path = tmp_test_dir / "scalar.yaml"
        path.write_text("server: https://files.example.com\n")

        with pytest.raises(ConfigError, match="'server' must be a mapping"):
            load_profile(path)
