"""Tests for secret placeholder substitution."""

import json
import logging

import pytest

from browser_actions.registry.sensitive import (
    SecretMaskingFilter,
    SensitiveDataResolver,
    bound_secrets,
    placeholder,
)
from browser_actions.telemetry import SensitiveDataMissingEvent
from tests.testing_utils import RecordingTelemetry


SECRETS = {"user": "alice", "pass": "s3cr3t"}


class TestResolve:
    """Test substitution inside argument trees."""

    def test_single_placeholder(self) -> None:
        resolver = SensitiveDataResolver()
        assert resolver.resolve({"text": "<secret>pass</secret>"}, SECRETS) == {"text": "s3cr3t"}

    def test_placeholder_inside_text(self) -> None:
        resolver = SensitiveDataResolver()
        params = {"text": "login <secret>user</secret>:<secret>pass</secret>!"}
        assert resolver.resolve(params, SECRETS) == {"text": "login alice:s3cr3t!"}

    def test_nested_structures_keep_shape(self) -> None:
        resolver = SensitiveDataResolver()
        params = {
            "rows": [["<secret>user</secret>", 1], ("<secret>pass</secret>",)],
            "meta": {"who": "<secret>user</secret>", "n": 2},
        }
        assert resolver.resolve(params, SECRETS) == {
            "rows": [["alice", 1], ("s3cr3t",)],
            "meta": {"who": "alice", "n": 2},
        }

    def test_input_not_modified(self) -> None:
        resolver = SensitiveDataResolver()
        params = {"text": "<secret>pass</secret>"}
        resolver.resolve(params, SECRETS)
        assert params == {"text": "<secret>pass</secret>"}

    def test_no_placeholders_unchanged(self) -> None:
        resolver = SensitiveDataResolver()
        params = {"text": "hello", "index": 3, "flag": None}
        assert resolver.resolve(params, SECRETS) == params


class TestMissingPlaceholders:
    """Test reporting of unresolved names."""

    def test_missing_key_left_in_place_and_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        resolver = SensitiveDataResolver()
        with caplog.at_level(logging.WARNING):
            result = resolver.resolve({"text": "<secret>token</secret>"}, SECRETS)
        assert result == {"text": "<secret>token</secret>"}
        assert "Missing or empty keys in sensitive_data dictionary: token" in caplog.text

    def test_empty_value_counts_as_missing(self) -> None:
        resolver = SensitiveDataResolver()
        assert resolver.find_missing({"text": "<secret>blank</secret>"}, {"blank": ""}) == {"blank"}

    def test_missing_reported_to_telemetry(self) -> None:
        telemetry = RecordingTelemetry()
        resolver = SensitiveDataResolver(telemetry)
        resolver.resolve(
            {"a": "<secret>x</secret>", "b": "<secret>y</secret> <secret>user</secret>"},
            SECRETS,
            action="input_text",
        )
        events = telemetry.of_type(SensitiveDataMissingEvent)
        assert len(events) == 1
        assert events[0].placeholders == ["x", "y"]
        assert events[0].action == "input_text"

    def test_nothing_reported_when_all_bound(self) -> None:
        telemetry = RecordingTelemetry()
        SensitiveDataResolver(telemetry).resolve({"a": "<secret>user</secret>"}, SECRETS)
        assert telemetry.events == []


class TestMask:
    """Test hiding secret values in log text."""

    def test_values_replaced_by_placeholders(self) -> None:
        text = "typed alice and s3cr3t"
        assert SensitiveDataResolver.mask(text, SECRETS) == (
            f"typed {placeholder('user')} and {placeholder('pass')}"
        )

    def test_longer_value_masked_first(self) -> None:
        secrets = {"short": "abc", "long": "abcdef"}
        assert SensitiveDataResolver.mask("abcdef", secrets) == "<secret>long</secret>"

    def test_no_secrets(self) -> None:
        assert SensitiveDataResolver.mask("plain", None) == "plain"

    def test_escaped_forms_masked(self) -> None:
        secrets = {"pw": 'a\\b"c\nd'}
        logged = f"repr={secrets['pw']!r} json={json.dumps(secrets['pw'])}"
        masked = SensitiveDataResolver.mask(logged, secrets)
        assert masked == "repr='<secret>pw</secret>' json=\"<secret>pw</secret>\""


class TestRedact:
    """Test masking whole argument trees."""

    def test_strings_masked_shape_kept(self) -> None:
        params = {"text": "alice", "rows": [["s3cr3t", 1]], "n": 2}
        assert SensitiveDataResolver.redact(params, SECRETS) == {
            "text": placeholder("user"),
            "rows": [[placeholder("pass"), 1]],
            "n": 2,
        }

    def test_no_secrets_returns_input(self) -> None:
        params = {"text": "alice"}
        assert SensitiveDataResolver.redact(params, None) is params


class TestSecretMaskingFilter:
    """Test masking of log records while secrets are bound."""

    def test_bound_secrets_masked(self, caplog: pytest.LogCaptureFixture) -> None:
        log = logging.getLogger("tests.masked")
        log.addFilter(SecretMaskingFilter())
        with caplog.at_level(logging.INFO, logger="tests.masked"):
            with bound_secrets(SECRETS):
                log.info("Logged in as %s with %s", "alice", "s3cr3t")
            log.info("Later alice")
        assert caplog.messages == [
            "Logged in as <secret>user</secret> with <secret>pass</secret>",
            "Later alice",
        ]

    def test_binding_reset_after_error(self) -> None:
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "alice", None, None)
        with pytest.raises(RuntimeError):
            with bound_secrets(SECRETS):
                raise RuntimeError("boom")
        assert SecretMaskingFilter().filter(record) is True
        assert record.getMessage() == "alice"
