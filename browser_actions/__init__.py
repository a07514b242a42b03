"""browser-actions source package.

This package contains:
- config: Configuration loading and management
- registry: Action registration, validation, dispatch and prompt descriptions
- controller: The built-in browser action catalogue
- telemetry: Telemetry events and sinks
"""

from __future__ import annotations

__all__: list[str] = []
