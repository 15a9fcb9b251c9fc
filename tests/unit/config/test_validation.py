"""Tests for configuration validation."""

from __future__ import annotations

from tealup.config.validation import validate_config


class TestValidateConfig:
    def test_valid_config(self) -> None:
        data = {
            "version": 1,
            "channel": "stable",
            "development": False,
            "server": {"path": "/opt/tealsp", "debug": True, "stop_timeout": 3, "features": {"x": 1}},
            "release": {"base_url": "https://mirror.example.com", "timeout": 12.5},
            "probe": {"timeout": 4},
            "updates": {"check_on_start": True, "auto_upgrade": False},
        }
        assert validate_config(data, "test.yml") == []

    def test_unknown_top_level_key_suggests(self) -> None:
        warnings = validate_config({"chanel": "stable"}, "test.yml")
        assert len(warnings) == 1
        assert warnings[0].key == "chanel"
        assert warnings[0].suggestion == "channel"
        assert not warnings[0].is_error

    def test_unknown_section_key_suggests(self) -> None:
        warnings = validate_config({"server": {"pth": "/x"}}, "test.yml")
        assert warnings[0].key == "server.pth"
        assert warnings[0].suggestion == "path"

    def test_wrong_scalar_type_is_error(self) -> None:
        warnings = validate_config({"development": "yes"}, "test.yml")
        assert warnings[0].is_error
        assert "boolean" in warnings[0].message

    def test_bool_is_not_a_number(self) -> None:
        warnings = validate_config({"release": {"timeout": True}}, "test.yml")
        assert warnings[0].is_error
        assert warnings[0].key == "release.timeout"

    def test_section_must_be_mapping(self) -> None:
        warnings = validate_config({"server": "tealsp"}, "test.yml")
        assert warnings[0].is_error
        assert "mapping" in warnings[0].message

    def test_http_base_url_is_error(self) -> None:
        warnings = validate_config({"release": {"base_url": "http://mirror"}}, "test.yml")
        assert any(w.is_error and w.key == "release.base_url" for w in warnings)

    def test_features_passed_through(self) -> None:
        data = {"server": {"features": {"anything": {"nested": [1, 2]}, "semantic_tokens": False}}}
        assert validate_config(data, "test.yml") == []

    def test_null_values_allowed(self) -> None:
        assert validate_config({"channel": None, "server": {"path": None}}, "test.yml") == []

