"""Registry facade: the single entry point the agent loop talks to.

A Registry is an ordinary object. Build one at startup, register every
action on it, then hand it to the agent loop; there is no module-level
registry.

Usage:
    registry = Registry(exclude_actions=["save_pdf"])
    registry.register(
        "go_to_url",
        "Navigate to URL in the current tab",
        go_to_url,
        ParameterSchema.of(FieldSpec("url"), requires=["browser"]),
    )
    prompt_block = registry.describe()
    result = await registry.execute("go_to_url", {"url": "https://example.com"},
                                    DependencyBundle(browser=driver))
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from ..config_schema import RegistryConfig
from ..telemetry import NullTelemetry, TelemetrySink
from .description import ActionCatalogue, DescriptionBuilder
from .engine import ExecutionEngine
from .matching import ApplicabilityMatcher
from .schema import ParameterSchema
from .sensitive import SensitiveDataResolver
from .store import ActionStore
from .views import (
    ActionCall,
    ActionDescriptor,
    ActionHandler,
    ActionResult,
    DependencyBundle,
    PageFilter,
    PageState,
)


logger = logging.getLogger(__name__)


class Registry:
    """Owns the action store and the components that read it."""

    def __init__(
        self,
        exclude_actions: Iterable[str] | None = None,
        *,
        telemetry: TelemetrySink | None = None,
        allow_overwrite: bool = False,
        enforce_visibility: bool = True,
        coerce_types: bool = False,
        action_timeout: float | None = None,
    ) -> None:
        self.telemetry: TelemetrySink = telemetry if telemetry is not None else NullTelemetry()
        self.store = ActionStore(exclude_actions or (), allow_overwrite=allow_overwrite)
        self.matcher = ApplicabilityMatcher()
        self.resolver = SensitiveDataResolver(self.telemetry)
        self.builder = DescriptionBuilder(self.store, self.matcher, self.telemetry)
        self.engine = ExecutionEngine(
            self.store,
            self.resolver,
            self.matcher,
            telemetry=self.telemetry,
            enforce_visibility=enforce_visibility,
            coerce_types=coerce_types,
            timeout=action_timeout,
        )

    @classmethod
    def from_config(
        cls,
        config: RegistryConfig,
        *,
        telemetry: TelemetrySink | None = None,
        exclude_actions: Iterable[str] | None = None,
    ) -> Registry:
        """Build a registry from the `registry` config section.

        Extra exclusions are added to the configured ones.
        """
        excluded = list(config.exclude_actions) + list(exclude_actions or ())
        return cls(
            excluded,
            telemetry=telemetry,
            allow_overwrite=config.allow_overwrite,
            enforce_visibility=config.enforce_visibility,
            coerce_types=config.coerce_types,
            action_timeout=config.action_timeout_seconds,
        )

    # ----------------------------------------------------------------- registration

    def register(
        self,
        name: str,
        description: str,
        handler: ActionHandler,
        schema: ParameterSchema | None = None,
        domains: Iterable[str] | None = None,
        page_filter: PageFilter | None = None,
        *,
        overwrite: bool = False,
    ) -> ActionDescriptor | None:
        """Register an action.

        Returns:
            The stored descriptor, or None when the name is excluded.

        Raises:
            DuplicateAction: The name is taken and overwriting is not allowed.
        """
        descriptor = ActionDescriptor(
            name=name,
            description=description,
            handler=handler,
            param_schema=schema if schema is not None else ParameterSchema(),
            domains=tuple(domains) if domains is not None else None,
            page_filter=page_filter,
        )
        if not self.store.register(descriptor, overwrite=overwrite):
            return None
        return descriptor

    def action(
        self,
        description: str,
        schema: ParameterSchema | None = None,
        *,
        name: str | None = None,
        domains: Iterable[str] | None = None,
        page_filter: PageFilter | None = None,
        overwrite: bool = False,
    ) -> Callable[[ActionHandler], ActionHandler]:
        """Decorator form of register(); the function name is the default action name.

        The schema must still be declared explicitly.
        """
        def decorator(func: ActionHandler) -> ActionHandler:
            self.register(
                name or func.__name__,
                description,
                func,
                schema,
                domains,
                page_filter,
                overwrite=overwrite,
            )
            return func

        return decorator

    # ----------------------------------------------------------------- lookup

    def lookup(self, name: str) -> ActionDescriptor:
        return self.store.lookup(name)

    @property
    def names(self) -> list[str]:
        return self.store.names()

    def __contains__(self, name: object) -> bool:
        return name in self.store

    def __len__(self) -> int:
        return len(self.store)

    # ----------------------------------------------------------------- execution

    async def execute(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        dependencies: DependencyBundle | None = None,
        *,
        page: PageState | None = None,
    ) -> ActionResult:
        return await self.engine.execute(name, params, dependencies, page=page)

    async def act(
        self,
        call: ActionCall | Mapping[str, Any],
        dependencies: DependencyBundle | None = None,
        *,
        page: PageState | None = None,
    ) -> ActionResult:
        """Execute the one action a model selected ({"name": {...}} or ActionCall)."""
        if not isinstance(call, ActionCall):
            call = ActionCall.from_dict(call)
        return await self.execute(call.name, call.params, dependencies, page=page)

    # ----------------------------------------------------------------- description

    def describe(self, page: PageState | None = None) -> str:
        return self.builder.describe(page)

    def build_schema(
        self,
        include_actions: Iterable[str] | None = None,
        page: PageState | None = None,
    ) -> ActionCatalogue:
        return self.builder.build_schema(include_actions, page)
