"""Tests for the catalogue inspector CLI (run.py)."""

import json
from pathlib import Path

import pytest

import run
from browser_actions.controller import Controller
from browser_actions.registry import ActionNotApplicable, ActionNotFound, PageState, ValidationError


pytestmark = pytest.mark.usefixtures("clean_config")


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Config with telemetry off and quiet logging."""
    path = tmp_path / "config.yaml"
    path.write_text("telemetry:\n  enabled: false\nlogging:\n  level: WARNING\n")
    return path


class TestCheckCall:
    """Test validating a call without running it."""

    def test_defaults_filled(self) -> None:
        assert run.check_call(Controller().registry, {"wait": {}}) == {
            "action": "wait",
            "params": {"seconds": 3},
        }

    def test_unknown_action(self) -> None:
        with pytest.raises(ActionNotFound):
            run.check_call(Controller().registry, {"fly": {}})

    def test_two_actions_rejected(self) -> None:
        with pytest.raises(ValidationError):
            run.check_call(Controller().registry, {"wait": {}, "go_back": {}})

    def test_scoped_action_needs_matching_page(self) -> None:
        registry = Controller().registry
        with pytest.raises(ActionNotApplicable):
            run.check_call(registry, {"get_sheet_contents": {}}, PageState(url="https://example.com/"))
        checked = run.check_call(
            registry,
            {"get_sheet_contents": {}},
            PageState(url="https://docs.google.com/spreadsheets/d/1"),
        )
        assert checked == {"action": "get_sheet_contents", "params": {}}


class TestMain:
    """Test the command line entry point."""

    def test_describe(self, config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        run.main(["--config", str(config_path)])
        assert capsys.readouterr().out.startswith("done: Complete task")

    def test_check_prints_validated_call(
        self, config_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        run.main(["--config", str(config_path), "--check", '{"go_to_url": {"url": "https://a.io/"}}'])
        assert json.loads(capsys.readouterr().out) == {
            "action": "go_to_url",
            "params": {"url": "https://a.io/"},
        }

    def test_registry_error_printed_as_error_payload(
        self, config_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        with pytest.raises(SystemExit) as exc_info:
            run.main(["--config", str(config_path), "--check", '{"go_to_url": {}}'])
        assert exc_info.value.code == 1
        payload = json.loads(capsys.readouterr().err)
        assert payload["success"] is False
        assert payload["error"] == "Missing required parameter(s) for go_to_url: url"
        assert payload["code"] == "missing_argument"
        assert payload["category"] == "validation"
        assert payload["retriable"] is True
        assert payload["details"] == {"action": "go_to_url", "errors": ["url"]}

    def test_not_applicable_payload(self, config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit):
            run.main([
                "--config", str(config_path),
                "--url", "https://example.com/",
                "--check", '{"clear_selected_range": {}}',
            ])
        payload = json.loads(capsys.readouterr().err)
        assert payload["code"] == "not_authorized"
        assert payload["details"] == {"action": "clear_selected_range", "url": "https://example.com/"}

    def test_invalid_json_is_a_usage_error(self, config_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            run.main(["--config", str(config_path), "--check", "{not json"])
        assert exc_info.value.code == 2
