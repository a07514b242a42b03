"""Error taxonomy for action registration and execution.

Every contract violation raised by the registry is a RegistryError carrying
a machine-readable code, a category and retry guidance, so the agent loop
can decide whether to pick another action, fix its arguments, or escalate.

Interaction failures inside browser actions (element not clickable, frame
evaluation failed, ...) are NOT raised through this module; handlers return
them as ActionResult(success=False, error=...).

Usage:
    from browser_actions.registry.errors import ActionNotFound

    try:
        result = await registry.execute("click_element_by_index", {"index": 3}, deps)
    except ActionNotFound as e:
        payload = e.to_dict()  # {"success": False, "error": ..., "code": "not_found", ...}
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Categories for error classification.

    Helps the agent loop understand the nature of an error:
    - VALIDATION: Model provided bad arguments
    - PERMISSION: Action not offered on the current page
    - RESOURCE: Unknown or duplicate action name
    - EXECUTION: Handler raised or timed out
    - SYSTEM: Caller misuse or a bug in a registered action
    """

    VALIDATION = "validation"
    PERMISSION = "permission"
    RESOURCE = "resource"
    EXECUTION = "execution"
    SYSTEM = "system"


class ErrorCode(str, Enum):
    """Specific error codes for programmatic handling."""

    # Validation errors
    MISSING_ARGUMENT = "missing_argument"
    INVALID_ARGUMENT = "invalid_argument"
    INVALID_TYPE = "invalid_type"

    # Permission errors
    NOT_AUTHORIZED = "not_authorized"

    # Resource errors
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"

    # Execution errors
    TIMEOUT = "timeout"
    RUNTIME_ERROR = "runtime_error"

    # System errors
    INTERNAL_ERROR = "internal_error"
    NOT_CONFIGURED = "not_configured"


@dataclass
class ErrorResponse:
    """Standardized error payload.

    Same shape as the {"success": False, "error": "message"} results handlers
    return, extended with code/category/retriable for programmatic handling.
    """

    success: bool = False
    error: str = ""
    code: str = ""
    category: str = ""
    retriable: bool = False
    details: dict[str, object] | None = None

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for serialization."""
        result: dict[str, object] = {
            "success": self.success,
            "error": self.error,
            "code": self.code,
            "category": self.category,
            "retriable": self.retriable,
        }
        if self.details:
            result["details"] = self.details
        return result


class RegistryError(Exception):
    """Base class for registry contract violations."""

    code: ErrorCode = ErrorCode.INTERNAL_ERROR
    category: ErrorCategory = ErrorCategory.SYSTEM
    retriable: bool = False

    def __init__(self, message: str, *, code: ErrorCode | None = None, **details: Any) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details: dict[str, Any] = dict(details)

    def to_dict(self) -> dict[str, object]:
        return ErrorResponse(
            error=self.message,
            code=self.code.value,
            category=self.category.value,
            retriable=self.retriable,
            details=self.details or None,
        ).to_dict()


class ActionNotFound(RegistryError):
    """No action is registered under the requested name."""

    code = ErrorCode.NOT_FOUND
    category = ErrorCategory.RESOURCE
    retriable = True

    def __init__(self, action: str) -> None:
        super().__init__(f"Action {action} not found", action=action)
        self.action = action


class DuplicateAction(RegistryError):
    """An action with this name is already registered."""

    code = ErrorCode.ALREADY_EXISTS
    category = ErrorCategory.RESOURCE

    def __init__(self, action: str) -> None:
        super().__init__(
            f"Action {action} is already registered (pass overwrite=True to replace it)",
            action=action,
        )
        self.action = action


class ValidationError(RegistryError):
    """Arguments do not satisfy the action's parameter schema.

    Also used for malformed action calls and for element indexes that are
    not present in the current selector map.
    """

    code = ErrorCode.INVALID_ARGUMENT
    category = ErrorCategory.VALIDATION
    retriable = True

    def __init__(
        self,
        message: str,
        *,
        action: str | None = None,
        errors: list[str] | None = None,
        code: ErrorCode | None = None,
    ) -> None:
        super().__init__(message, code=code, action=action, errors=errors or [])
        self.action = action
        self.errors: list[str] = errors or []


class MissingDependency(RegistryError):
    """An action declared a collaborator that the caller did not supply."""

    code = ErrorCode.NOT_CONFIGURED
    category = ErrorCategory.SYSTEM

    def __init__(self, dependency: str, action: str) -> None:
        super().__init__(
            f"Action {action} requires {dependency} but none provided.",
            dependency=dependency,
            action=action,
        )
        self.dependency = dependency
        self.action = action


class ApplicabilityCheckFailed(RegistryError):
    """A registered page filter raised instead of returning a bool."""

    code = ErrorCode.INTERNAL_ERROR
    category = ErrorCategory.SYSTEM

    def __init__(self, action: str | None, cause: BaseException) -> None:
        label = action or "<anonymous>"
        super().__init__(
            f"Page filter for action {label} raised {type(cause).__name__}: {cause}",
            action=action,
        )
        self.action = action
        self.cause = cause


class ActionNotApplicable(RegistryError):
    """A domain/page scoped action was requested where it is not offered."""

    code = ErrorCode.NOT_AUTHORIZED
    category = ErrorCategory.PERMISSION
    retriable = True

    def __init__(self, action: str, url: str | None) -> None:
        where = url if url else "no page"
        super().__init__(f"Action {action} is not available on {where}", action=action, url=url)
        self.action = action
        self.url = url


class ActionExecutionError(RegistryError):
    """The action's handler raised. The original exception is kept as `cause`."""

    code = ErrorCode.RUNTIME_ERROR
    category = ErrorCategory.EXECUTION
    retriable = True

    def __init__(self, action: str, cause: BaseException) -> None:
        super().__init__(
            f"Error executing action {action}: {cause}",
            action=action,
            cause_type=type(cause).__name__,
        )
        self.action = action
        self.cause = cause


class ActionTimeout(ActionExecutionError):
    """The action exceeded the engine-level deadline."""

    code = ErrorCode.TIMEOUT

    def __init__(self, action: str, timeout: float, cause: BaseException) -> None:
        super().__init__(action, cause)
        self.message = f"Action {action} timed out after {timeout}s"
        self.args = (self.message,)
        self.details["timeout"] = timeout
        self.timeout = timeout


class InvalidResultType(RegistryError):
    """A handler returned something other than str, ActionResult or None."""

    code = ErrorCode.INVALID_TYPE
    category = ErrorCategory.SYSTEM

    def __init__(self, action: str, result: object) -> None:
        super().__init__(
            f"Invalid action result type: {type(result).__name__} of {result!r} (action {action})",
            action=action,
            result_type=type(result).__name__,
        )
        self.action = action
        self.result = result
