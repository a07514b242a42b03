"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from browser_actions.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# REGISTRY MODEL
# =============================================================================

class RegistryConfig(StrictModel):
    """Action registry and execution engine settings."""

    exclude_actions: list[str] = Field(
        default_factory=list,
        description="Action names that are silently skipped at registration"
    )
    allow_overwrite: bool = Field(
        default=False,
        description="Let a later registration replace an existing action of the same name"
    )
    enforce_visibility: bool = Field(
        default=True,
        description="Refuse to execute domain/page scoped actions that are not available on the current page"
    )
    coerce_types: bool = Field(
        default=False,
        description="Convert string arguments to integer/number/boolean when the schema expects them"
    )
    action_timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Hard deadline for a single action (None = wait for the handler)"
    )


# =============================================================================
# CONTROLLER MODEL
# =============================================================================

class ControllerConfig(StrictModel):
    """Settings for the built-in browser action catalogue."""

    wait_default_seconds: int = Field(
        default=3,
        ge=0,
        description="Delay used by the wait action when no seconds are given"
    )
    search_url: str = Field(
        default="https://www.google.com/search?q={query}&udm=14",
        description="Search URL template; {query} is replaced by the quoted query"
    )
    pdf_dir: str = Field(
        default=".",
        description="Directory where save_pdf writes files"
    )
    sheets_domains: list[str] = Field(
        default_factory=lambda: ["docs.google.com", "sheets.google.com"],
        description="Host patterns where the spreadsheet actions are offered"
    )
    drag_steps: int = Field(default=10, ge=1, description="Intermediate mouse moves for drag_drop")
    drag_delay_ms: int = Field(default=5, ge=0, description="Pause between drag_drop mouse moves")
    typing_delay_seconds: float = Field(
        default=0.05,
        ge=0,
        description="Per-key delay used when typing into spreadsheets"
    )

    @field_validator("search_url")
    @classmethod
    def _search_url_has_query(cls, v: str) -> str:
        if "{query}" not in v:
            raise ValueError("search_url must contain a {query} placeholder")
        return v


# =============================================================================
# TELEMETRY / LOGGING MODELS
# =============================================================================

class TelemetryConfig(StrictModel):
    """Telemetry sink configuration."""

    enabled: bool = Field(default=True, description="Write telemetry events at all")
    output_file: str = Field(
        default="logs/telemetry.jsonl",
        description="JSONL file that receives telemetry events"
    )


class LoggingConfig(StrictModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Root logger level"
    )
    format: str = Field(
        default="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        description="logging.Formatter format string"
    )


# =============================================================================
# ROOT CONFIG
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model."""

    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    controller: ControllerConfig = Field(default_factory=ControllerConfig)
    telemetry: TelemetryConfig = Field(default_factory=TelemetryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# LOADING FUNCTIONS
# =============================================================================

def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config YAML file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Args:
        config_dict: Configuration as a dictionary.

    Returns:
        Validated AppConfig instance.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


__all__ = [
    "AppConfig",
    "RegistryConfig",
    "ControllerConfig",
    "TelemetryConfig",
    "LoggingConfig",
    "StrictModel",
    "load_validated_config",
    "validate_config_dict",
]
