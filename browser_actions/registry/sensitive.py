"""Secret placeholder substitution.

Models never see secret values. They write <secret>NAME</secret> in their
arguments and the resolver swaps in the caller's bound value right before
the handler runs. Unresolved names are reported, not raised: the action
proceeds with the placeholder text still in place.

While a handler runs, its secrets are bound to the current context so
SecretMaskingFilter can put the placeholders back into any log record the
handler emits.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any

from ..telemetry import SensitiveDataMissingEvent, TelemetrySink, safe_capture


logger = logging.getLogger(__name__)

SECRET_PATTERN = re.compile(r"<secret>(.*?)</secret>")

_bound_secrets: ContextVar[Mapping[str, str] | None] = ContextVar("bound_secrets", default=None)


def placeholder(name: str) -> str:
    """Render the placeholder a model should write for a secret."""
    return f"<secret>{name}</secret>"


def _renderings(value: str) -> list[str]:
    # The raw value plus the escaped forms repr() and json.dumps() produce
    forms = [value, repr(value)[1:-1], json.dumps(value)[1:-1]]
    return sorted({form for form in forms if form}, key=len, reverse=True)


@contextmanager
def bound_secrets(sensitive_data: Mapping[str, str] | None) -> Iterator[None]:
    """Bind secrets to the current context for the duration of the block.

    Tasks created inside the block inherit the binding.
    """
    token = _bound_secrets.set(sensitive_data or None)
    try:
        yield
    finally:
        _bound_secrets.reset(token)


class SecretMaskingFilter(logging.Filter):
    """Replaces bound secret values in log records with their placeholders.

    Attach it to loggers whose messages may quote resolved arguments:

        logger = logging.getLogger(__name__)
        logger.addFilter(SecretMaskingFilter())
    """

    def filter(self, record: logging.LogRecord) -> bool:
        secrets = _bound_secrets.get()
        if secrets:
            record.msg = SensitiveDataResolver.mask(record.getMessage(), secrets)
            record.args = None
        return True


class SensitiveDataResolver:
    """Replaces <secret>NAME</secret> markers inside argument trees."""

    def __init__(self, telemetry: TelemetrySink | None = None) -> None:
        self.telemetry = telemetry

    def resolve(
        self,
        params: Any,
        sensitive_data: Mapping[str, str],
        *,
        action: str | None = None,
    ) -> Any:
        """Return a copy of params with every bound placeholder substituted.

        Dicts, lists and tuples are walked recursively; order and shape are
        preserved and the input is not modified. Missing or empty bindings
        are logged once per call with the placeholder names.
        """
        missing: set[str] = set()
        resolved = self._replace(params, sensitive_data, missing)
        if missing:
            logger.warning(
                "Missing or empty keys in sensitive_data dictionary: %s",
                ", ".join(sorted(missing)),
            )
            safe_capture(
                self.telemetry,
                SensitiveDataMissingEvent(placeholders=sorted(missing), action=action),
            )
        return resolved

    def find_missing(self, params: Any, sensitive_data: Mapping[str, str]) -> set[str]:
        """Placeholder names in params that would stay unresolved."""
        missing: set[str] = set()
        self._replace(params, sensitive_data, missing)
        return missing

    def _replace(self, value: Any, sensitive_data: Mapping[str, str], missing: set[str]) -> Any:
        if isinstance(value, str):
            return self._replace_in_text(value, sensitive_data, missing)
        if isinstance(value, Mapping):
            return {k: self._replace(v, sensitive_data, missing) for k, v in value.items()}
        if isinstance(value, list):
            return [self._replace(v, sensitive_data, missing) for v in value]
        if isinstance(value, tuple):
            return tuple(self._replace(v, sensitive_data, missing) for v in value)
        return value

    @staticmethod
    def _replace_in_text(text: str, sensitive_data: Mapping[str, str], missing: set[str]) -> str:
        def substitute(match: re.Match[str]) -> str:
            name = match.group(1)
            value = sensitive_data.get(name)
            if value:
                return value
            missing.add(name)
            return match.group(0)

        return SECRET_PATTERN.sub(substitute, text)

    @staticmethod
    def mask(text: str, sensitive_data: Mapping[str, str] | None) -> str:
        """Replace bound secret values in text with their placeholders.

        Values are also recognised in their repr() and JSON escaped forms.
        Longer values are masked first so a secret that contains another
        secret is not partially revealed.
        """
        if not text or not sensitive_data:
            return text
        for name, value in sorted(sensitive_data.items(), key=lambda kv: len(kv[1] or ""), reverse=True):
            if value:
                for form in _renderings(value):
                    text = text.replace(form, placeholder(name))
        return text

    @classmethod
    def redact(cls, params: Any, sensitive_data: Mapping[str, str] | None) -> Any:
        """Copy of an argument tree with every string value masked."""
        if not sensitive_data:
            return params
        if isinstance(params, str):
            return cls.mask(params, sensitive_data)
        if isinstance(params, Mapping):
            return {k: cls.redact(v, sensitive_data) for k, v in params.items()}
        if isinstance(params, list):
            return [cls.redact(v, sensitive_data) for v in params]
        if isinstance(params, tuple):
            return tuple(cls.redact(v, sensitive_data) for v in params)
        return params
