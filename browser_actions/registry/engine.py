"""Validation, dependency injection and dispatch of a single action.

The engine runs exactly one handler per execute() call, as an asyncio task
that is awaited before returning. It never runs two actions concurrently;
the browser handle is shared and the agent loop issues one call at a time.

Order of checks (each short-circuits before the handler runs):
1. lookup            -> ActionNotFound
2. schema validation -> ValidationError
3. secret substitution (non-fatal, reports missing placeholders)
4. collaborators     -> MissingDependency
5. applicability     -> ActionNotApplicable (scoped actions only)
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import time
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from ..telemetry import ActionExecutedEvent, TelemetrySink, safe_capture
from .errors import (
    ActionExecutionError,
    ActionNotApplicable,
    ActionTimeout,
    InvalidResultType,
    MissingDependency,
    RegistryError,
)
from .matching import ApplicabilityMatcher
from .sensitive import SecretMaskingFilter, SensitiveDataResolver, bound_secrets
from .store import ActionStore
from .views import ActionDescriptor, ActionResult, DependencyBundle, PageState


logger = logging.getLogger(__name__)
logger.addFilter(SecretMaskingFilter())


def normalize_result(action: str, result: Any) -> ActionResult:
    """Map a handler's return value onto ActionResult.

    str -> successful, not done, text as extracted content
    ActionResult -> unchanged
    None -> default successful no-op result
    """
    if isinstance(result, ActionResult):
        return result
    if isinstance(result, str):
        return ActionResult(is_done=False, success=True, extracted_content=result)
    if result is None:
        return ActionResult()
    raise InvalidResultType(action, result)


def _masked_result(result: ActionResult, secrets: Mapping[str, str] | None) -> ActionResult:
    """Put placeholders back into the text a result hands to the model."""
    if not secrets:
        return result
    return replace(
        result,
        extracted_content=SensitiveDataResolver.mask(result.extracted_content, secrets),
        error=SensitiveDataResolver.mask(result.error, secrets),
    )


def _masked(error: RegistryError, secrets: Mapping[str, str] | None) -> None:
    if secrets:
        error.message = SensitiveDataResolver.mask(error.message, secrets)
        error.args = (error.message,)


async def _call_handler(descriptor: ActionDescriptor, kwargs: dict[str, Any]) -> Any:
    result = descriptor.handler(**kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


class ExecutionEngine:
    """Runs registered actions on behalf of the Registry facade."""

    def __init__(
        self,
        store: ActionStore,
        resolver: SensitiveDataResolver,
        matcher: ApplicabilityMatcher,
        *,
        telemetry: TelemetrySink | None = None,
        enforce_visibility: bool = True,
        coerce_types: bool = False,
        timeout: float | None = None,
    ) -> None:
        self.store = store
        self.resolver = resolver
        self.matcher = matcher
        self.telemetry = telemetry
        self.enforce_visibility = enforce_visibility
        self.coerce_types = coerce_types
        self.timeout = timeout

    async def execute(
        self,
        name: str,
        params: Mapping[str, Any] | None = None,
        dependencies: DependencyBundle | None = None,
        *,
        page: PageState | None = None,
    ) -> ActionResult:
        """Validate, inject and run one action.

        Args:
            name: Registered action name
            params: Model-supplied arguments
            dependencies: Collaborators available for injection
            page: Current page; looked up from the browser when omitted and
                needed for a scoped action

        Returns:
            The normalized ActionResult.

        Raises:
            ActionNotFound, ValidationError, MissingDependency,
            ApplicabilityCheckFailed, ActionNotApplicable,
            ActionExecutionError (incl. ActionTimeout), InvalidResultType.
        """
        deps = dependencies or DependencyBundle()
        start_time = time.perf_counter()
        result: ActionResult | None = None
        error: BaseException | None = None
        try:
            result = await self._execute(name, params, deps, page)
            return result
        except Exception as e:
            error = e
            raise
        finally:
            duration_ms = (time.perf_counter() - start_time) * 1000
            safe_capture(
                self.telemetry,
                ActionExecutedEvent(
                    action=name,
                    success=bool(result and result.success),
                    is_done=bool(result and result.is_done),
                    duration_ms=round(duration_ms, 3),
                    error_type=type(error).__name__ if error is not None else None,
                ),
            )

    async def _execute(
        self,
        name: str,
        params: Mapping[str, Any] | None,
        deps: DependencyBundle,
        page: PageState | None,
    ) -> ActionResult:
        descriptor = self.store.lookup(name)
        schema = descriptor.param_schema

        args = schema.validate(params, action=name, coerce=self.coerce_types)

        if deps.sensitive_data is not None:
            args = self.resolver.resolve(args, deps.sensitive_data, action=name)

        for dependency in sorted(schema.collaborators):
            if not deps.provides(dependency):
                raise MissingDependency(dependency, name)

        if self.enforce_visibility and not descriptor.is_global:
            await self._check_available(descriptor, deps, page)

        kwargs = dict(args)
        for dependency in schema.requires:
            kwargs[dependency] = deps.get(dependency)

        secrets = deps.sensitive_data
        logger.debug("Executing action %s with %r", name, self.resolver.redact(args, secrets))

        try:
            with bound_secrets(secrets):
                raw = await self._run(descriptor, kwargs)
            result = normalize_result(name, raw)
        except RegistryError as e:
            _masked(e, secrets)
            raise
        result = _masked_result(result, secrets)

        if result.error:
            logger.info("Action %s failed: %s", name, result.error)
        else:
            logger.debug("Action %s finished (done=%s)", name, result.is_done)
        return result

    async def _check_available(
        self,
        descriptor: ActionDescriptor,
        deps: DependencyBundle,
        page: PageState | None,
    ) -> None:
        if page is None and deps.browser is not None:
            try:
                page = await deps.browser.current_page()
            except Exception as e:
                raise ActionExecutionError(descriptor.name, e) from e
        if not self.matcher.is_available(descriptor, page):
            raise ActionNotApplicable(descriptor.name, page.url if page else None)

    async def _run(self, descriptor: ActionDescriptor, kwargs: dict[str, Any]) -> Any:
        name = descriptor.name
        task = asyncio.create_task(_call_handler(descriptor, kwargs), name=f"action:{name}")
        try:
            if self.timeout is not None:
                return await asyncio.wait_for(task, self.timeout)
            return await task
        except asyncio.TimeoutError as e:
            if task.cancelled():
                raise ActionTimeout(name, self.timeout or 0, e) from e
            raise ActionExecutionError(name, e) from e
        except RegistryError:
            raise
        except Exception as e:
            raise ActionExecutionError(name, e) from e
