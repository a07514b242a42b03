"""Tests for Pydantic config schema validation."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from browser_actions.config_schema import (
    AppConfig,
    ControllerConfig,
    RegistryConfig,
    load_validated_config,
    validate_config_dict,
)


class TestValidConfig:
    """Test that valid configs are accepted."""

    def test_empty_config_uses_defaults(self) -> None:
        """Empty config should use all defaults."""
        config = validate_config_dict({})
        assert config.registry.exclude_actions == []
        assert config.registry.allow_overwrite is False
        assert config.registry.enforce_visibility is True
        assert config.registry.action_timeout_seconds is None
        assert config.controller.wait_default_seconds == 3
        assert config.controller.search_url == "https://www.google.com/search?q={query}&udm=14"
        assert config.logging.level == "INFO"

    def test_partial_config_merges_defaults(self) -> None:
        """Partial config should merge with defaults."""
        config = validate_config_dict({
            "registry": {"exclude_actions": ["save_pdf"]}
        })
        assert config.registry.exclude_actions == ["save_pdf"]
        assert config.controller.drag_steps == 10  # Default

    def test_full_config_loads(self) -> None:
        """Full config file should load without errors."""
        config = load_validated_config("config/config.yaml")
        assert "docs.google.com" in config.controller.sheets_domains
        assert config.telemetry.output_file.endswith(".jsonl")

    def test_models_usable_directly(self) -> None:
        assert RegistryConfig(coerce_types=True).coerce_types is True
        assert ControllerConfig().pdf_dir == "."
        assert isinstance(AppConfig().registry, RegistryConfig)


class TestInvalidConfig:
    """Test that invalid configs are rejected with clear errors."""

    def test_typo_in_key_rejected(self) -> None:
        """Typos in config keys should be rejected (extra='forbid')."""
        with pytest.raises(ValidationError) as exc_info:
            validate_config_dict({
                "regsitry": {"allow_overwrite": True}  # Typo: regsitry instead of registry
            })
        assert "regsitry" in str(exc_info.value)

    def test_typo_in_nested_key_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_config_dict({"registry": {"exclude_action": ["wait"]}})
        assert "exclude_action" in str(exc_info.value)

    def test_wrong_type_rejected(self) -> None:
        """Wrong types should be rejected."""
        with pytest.raises(ValidationError) as exc_info:
            validate_config_dict({
                "controller": {"wait_default_seconds": "three"}
            })
        assert "wait_default_seconds" in str(exc_info.value)

    def test_negative_timeout_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"registry": {"action_timeout_seconds": 0}})

    def test_search_url_needs_query_placeholder(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            validate_config_dict({"controller": {"search_url": "https://duckduckgo.com/"}})
        assert "{query}" in str(exc_info.value)

    def test_unknown_log_level_rejected(self) -> None:
        with pytest.raises(ValidationError):
            validate_config_dict({"logging": {"level": "LOUD"}})


class TestLoadFile:
    """Test loading config files from disk."""

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            load_validated_config(tmp_path / "nope.yaml")

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_validated_config(path).controller.wait_default_seconds == 3
