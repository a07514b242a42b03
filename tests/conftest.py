"""Pytest fixtures for browser-actions tests.

Common fixtures for exercising the registry and the built-in actions
against an in-memory browser.
"""

from __future__ import annotations

# Load environment variables from .env before any tests run
from dotenv import load_dotenv

load_dotenv()

from collections.abc import Iterator

import pytest

from browser_actions import config as config_module
from browser_actions.config_schema import ControllerConfig
from browser_actions.controller import Controller
from browser_actions.controller.actions import sheets
from browser_actions.registry import Registry
from tests.testing_utils import FakeBrowser, RecordingTelemetry, element


@pytest.fixture
def telemetry() -> RecordingTelemetry:
    """Telemetry sink that records every event."""
    return RecordingTelemetry()


@pytest.fixture
def registry(telemetry: RecordingTelemetry) -> Registry:
    """Empty registry wired to the recording telemetry sink."""
    return Registry(telemetry=telemetry)


@pytest.fixture
def browser() -> FakeBrowser:
    """Fake browser on example.com with a small selector map.

    - 1: text input
    - 2: submit button
    - 3: <select> dropdown
    - 4: file input
    - 5: link that opens a new tab
    """
    return FakeBrowser(
        "https://example.com/",
        elements={
            1: element(1, "input", type="text"),
            2: element(2, "button", text="Submit"),
            3: element(3, "select"),
            4: element(4, "input", type="file"),
            5: element(5, "a", text="Docs", target="_blank", href="https://docs.example.com/"),
        },
        content="Welcome to Example. Pricing starts at $10.",
    )


@pytest.fixture
def controller(telemetry: RecordingTelemetry) -> Controller:
    """Controller with every built-in and no drag delay."""
    return Controller(config=ControllerConfig(drag_delay_ms=0), telemetry=telemetry)


@pytest.fixture
def no_key_pause(monkeypatch: pytest.MonkeyPatch) -> None:
    """Skip the keystroke pauses the spreadsheet actions make."""
    monkeypatch.setattr(sheets, "KEY_PAUSE", 0)


@pytest.fixture
def clean_config() -> Iterator[None]:
    """Reset the global config before and after a test."""
    config_module.reset_config()
    yield
    config_module.reset_config()
