"""Controller: a Registry pre-populated with the built-in browser actions.

Usage:
    controller = Controller.from_config(get_validated_config())

    @controller.action("Read the cookie banner text", ParameterSchema.of(requires=["browser"]))
    async def read_cookie_banner(browser):
        ...

    result = await controller.act({"go_to_url": {"url": "https://example.com"}},
                                  DependencyBundle(browser=driver))
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

import pydantic

from ..config_schema import AppConfig, ControllerConfig
from ..registry.errors import ValidationError
from ..registry.schema import ParameterSchema
from ..registry.service import Registry
from ..registry.views import (
    ActionCall,
    ActionHandler,
    ActionResult,
    DependencyBundle,
    PageFilter,
    PageState,
)
from ..telemetry import TelemetrySink, telemetry_from_config
from . import params
from .actions import ACTION_GROUPS


logger = logging.getLogger(__name__)

DONE_DESCRIPTION = (
    "Complete task - with return text and if the task is finished (success=True) "
    "or not yet completely finished (success=False), because last step is reached"
)


async def done(text: str, success: bool) -> ActionResult:
    return ActionResult(is_done=True, success=success, extracted_content=text)


def structured_done(output_model: type[pydantic.BaseModel]) -> ActionHandler:
    """done() handler whose data must validate against output_model.

    The validated data is serialized to JSON as the extracted content;
    success is reported on the result, not inside the JSON.
    """
    async def done_with_output(success: bool, data: dict[str, Any]) -> ActionResult:
        try:
            output = output_model.model_validate(data)
        except pydantic.ValidationError as e:
            raise ValidationError(
                f"Invalid data for done: does not match {output_model.__name__}",
                action="done",
                errors=[f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in e.errors()],
            ) from e
        return ActionResult(
            is_done=True,
            success=success,
            extracted_content=output.model_dump_json(),
        )

    return done_with_output


class Controller:
    """Owns a Registry and registers the built-in actions into it."""

    def __init__(
        self,
        exclude_actions: Iterable[str] | None = None,
        output_model: type[pydantic.BaseModel] | None = None,
        *,
        config: ControllerConfig | None = None,
        registry: Registry | None = None,
        telemetry: TelemetrySink | None = None,
    ) -> None:
        self.config = config or ControllerConfig()
        if registry is None:
            registry = Registry(exclude_actions, telemetry=telemetry)
        elif exclude_actions:
            raise ValueError(
                "exclude_actions only applies when the Controller builds its registry; "
                "pass them to Registry(...) or Controller.from_config(...) instead"
            )
        self.registry = registry
        self.output_model = output_model

        if output_model is not None:
            self.registry.register(
                "done",
                DONE_DESCRIPTION,
                structured_done(output_model),
                params.structured_done_params(output_model.__name__),
            )
        else:
            self.registry.register("done", DONE_DESCRIPTION, done, params.DONE)

        for group in ACTION_GROUPS:
            group.register(self.registry, self.config)
        logger.debug("Controller ready with %d actions", len(self.registry))

    @classmethod
    def from_config(
        cls,
        config: AppConfig,
        *,
        output_model: type[pydantic.BaseModel] | None = None,
        telemetry: TelemetrySink | None = None,
        exclude_actions: Iterable[str] | None = None,
    ) -> Controller:
        """Build from the full app config; extra exclusions join the configured ones."""
        if telemetry is None:
            telemetry = telemetry_from_config(config.telemetry)
        registry = Registry.from_config(
            config.registry, telemetry=telemetry, exclude_actions=exclude_actions
        )
        return cls(output_model=output_model, config=config.controller, registry=registry)

    def action(
        self,
        description: str,
        schema: ParameterSchema | None = None,
        *,
        name: str | None = None,
        domains: Iterable[str] | None = None,
        page_filter: PageFilter | None = None,
    ) -> Callable[[ActionHandler], ActionHandler]:
        """Register a custom action next to the built-ins (see Registry.action)."""
        return self.registry.action(
            description, schema, name=name, domains=domains, page_filter=page_filter
        )

    async def act(
        self,
        call: ActionCall | Mapping[str, Any],
        dependencies: DependencyBundle | None = None,
        *,
        page: PageState | None = None,
    ) -> ActionResult:
        return await self.registry.act(call, dependencies, page=page)

    async def execute(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        dependencies: DependencyBundle | None = None,
        *,
        page: PageState | None = None,
    ) -> ActionResult:
        return await self.registry.execute(name, params, dependencies, page=page)

    def describe(self, page: PageState | None = None) -> str:
        return self.registry.describe(page)
