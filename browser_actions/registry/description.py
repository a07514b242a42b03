"""Renders the applicable actions for a model prompt or a tool-call API."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from ..telemetry import RegisteredFunction, RegisteredFunctionsEvent, TelemetrySink, safe_capture
from .matching import ApplicabilityMatcher
from .store import ActionStore
from .views import ActionDescriptor, PageState


logger = logging.getLogger(__name__)


@dataclass
class ActionCatalogue:
    """Structured action set for a tool-calling model API.

    `tools` uses the MCP-compatible shape {"name", "description",
    "inputSchema"}; to_json_schema() renders the selection object the model
    must return: exactly one property, named after the chosen action.
    """

    tools: list[dict[str, Any]] = field(default_factory=list)

    @property
    def names(self) -> list[str]:
        return [tool["name"] for tool in self.tools]

    def to_json_schema(self) -> dict[str, Any]:
        properties: dict[str, Any] = {}
        for tool in self.tools:
            properties[tool["name"]] = {**tool["inputSchema"], "description": tool["description"]}
        return {
            "type": "object",
            "properties": properties,
            "minProperties": 1,
            "maxProperties": 1,
            "additionalProperties": False,
        }


class DescriptionBuilder:
    """Builds prompt text and tool catalogues from the store."""

    def __init__(
        self,
        store: ActionStore,
        matcher: ApplicabilityMatcher,
        telemetry: TelemetrySink | None = None,
    ) -> None:
        self.store = store
        self.matcher = matcher
        self.telemetry = telemetry

    def visible_actions(self, page: PageState | None = None) -> list[ActionDescriptor]:
        return [d for d in self.store.list() if self.matcher.is_visible(d, page)]

    def describe(self, page: PageState | None = None) -> str:
        """One line per visible action, in registration order.

        Without a page only global actions are listed; with a page only the
        domain/page scoped actions that match it.
        """
        actions = self.visible_actions(page)
        self._capture(actions)
        return "\n".join(action.prompt_description() for action in actions)

    def build_schema(
        self,
        include_actions: Iterable[str] | None = None,
        page: PageState | None = None,
    ) -> ActionCatalogue:
        """Catalogue of the actions that can be executed on the page.

        Args:
            include_actions: Restrict to these names (None = all)
            page: Current page; scoped actions are only included when it matches
        """
        wanted = set(include_actions) if include_actions is not None else None
        actions = [
            d for d in self.store.list()
            if (wanted is None or d.name in wanted) and self.matcher.is_available(d, page)
        ]
        self._capture(actions)
        return ActionCatalogue(
            tools=[
                {
                    "name": action.name,
                    "description": action.description,
                    "inputSchema": action.param_schema.to_json_schema(),
                }
                for action in actions
            ]
        )

    def _capture(self, actions: list[ActionDescriptor]) -> None:
        event = RegisteredFunctionsEvent(
            registered_functions=[
                RegisteredFunction(name=a.name, params=a.param_schema.to_json_schema())
                for a in actions
            ]
        )
        safe_capture(self.telemetry, event)
