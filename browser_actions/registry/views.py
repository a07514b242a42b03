"""Data model shared by the registry, the engine and the agent loop."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .errors import ErrorCode, ValidationError
from .schema import ParameterSchema


@dataclass(frozen=True)
class PageState:
    """Snapshot of the page the agent is looking at.

    Passed to page filters and used for domain matching.
    """

    url: str
    title: str = ""
    tab_id: int | None = None


PageFilter = Callable[[PageState], bool]

# Handlers take validated arguments plus declared collaborators as keywords
# and return str, ActionResult or None (directly or via a coroutine).
ActionHandler = Callable[..., Any]


@dataclass
class ActionResult:
    """Outcome of executing one action.

    Attributes:
        is_done: The agent loop should stop after this action
        success: Whether the action achieved what it was asked to do
        extracted_content: Text handed back to the model
        include_in_memory: Keep this result in the agent's running transcript
        error: Description of a recoverable failure
    """

    is_done: bool = False
    success: bool = True
    extracted_content: str | None = None
    include_in_memory: bool = False
    error: str | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.success:
            raise ValueError("ActionResult with an error cannot be successful")

    @classmethod
    def failure(cls, error: str, *, include_in_memory: bool = True) -> ActionResult:
        """Recoverable failure the agent can react to."""
        return cls(success=False, error=error, include_in_memory=include_in_memory)


@dataclass(frozen=True)
class ActionDescriptor:
    """Immutable registration record for one action."""

    name: str
    description: str
    handler: ActionHandler
    param_schema: ParameterSchema = field(default_factory=ParameterSchema)
    domains: tuple[str, ...] | None = None
    page_filter: PageFilter | None = None

    def __post_init__(self) -> None:
        if self.domains is not None:
            object.__setattr__(self, "domains", tuple(self.domains))

    @property
    def is_global(self) -> bool:
        """No domain restriction and no page filter."""
        return not self.domains and self.page_filter is None

    def prompt_description(self) -> str:
        """Single-line description for a model prompt."""
        params = json.dumps(self.param_schema.properties(), ensure_ascii=False, default=str)
        return f"{self.name}: {self.description} {params}"


@dataclass
class DependencyBundle:
    """Collaborators the engine may inject into a handler.

    A collaborator counts as present when it is not None. Only the ones an
    action declares in its schema are checked and passed.
    """

    browser: Any = None
    page_extraction_llm: Any = None
    sensitive_data: Mapping[str, str] | None = None
    available_file_paths: list[str] | None = None
    context: Any = None

    @property
    def has_sensitive_data(self) -> bool:
        return bool(self.sensitive_data)

    def get(self, name: str) -> Any:
        if name == "has_sensitive_data":
            return self.has_sensitive_data
        if name not in {"browser", "page_extraction_llm", "sensitive_data", "available_file_paths", "context"}:
            raise KeyError(name)
        return getattr(self, name)

    def provides(self, name: str) -> bool:
        if name == "has_sensitive_data":
            return True
        return self.get(name) is not None


@dataclass(frozen=True)
class ActionCall:
    """The single action a model selected for this turn."""

    name: str
    params: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ActionCall:
        """Parse the {"action_name": {...params}} shape models return.

        Entries whose params are None are treated as unselected.

        Raises:
            ValidationError: Zero or more than one action selected, or the
                params are not an object.
        """
        if not isinstance(data, Mapping):
            raise ValidationError(
                f"Action call must be an object, got {type(data).__name__}",
                code=ErrorCode.INVALID_TYPE,
            )
        selected = [(name, params) for name, params in data.items() if params is not None]
        if len(selected) != 1:
            names = [name for name, _ in selected]
            raise ValidationError(
                f"Exactly one action must be selected, got {len(selected)}"
                + (f": {', '.join(map(str, names))}" if names else ""),
                errors=[str(n) for n in names],
            )
        name, params = selected[0]
        if not isinstance(params, Mapping):
            raise ValidationError(
                f"Parameters for {name} must be an object, got {type(params).__name__}",
                action=str(name),
                code=ErrorCode.INVALID_TYPE,
            )
        return cls(name=str(name), params=dict(params))

    def to_dict(self) -> dict[str, Any]:
        return {self.name: dict(self.params)}
