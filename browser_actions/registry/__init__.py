# Action registry and execution engine
from .errors import (
    ActionExecutionError,
    ActionNotApplicable,
    ActionNotFound,
    ActionTimeout,
    ApplicabilityCheckFailed,
    DuplicateAction,
    ErrorCategory,
    ErrorCode,
    InvalidResultType,
    MissingDependency,
    RegistryError,
    ValidationError,
)
from .schema import COLLABORATOR_NAMES, MISSING, NO_PARAMS, FieldSpec, ParameterSchema
from .views import (
    ActionCall,
    ActionDescriptor,
    ActionResult,
    DependencyBundle,
    PageState,
)
from .sensitive import SecretMaskingFilter, SensitiveDataResolver, bound_secrets
from .matching import ApplicabilityMatcher
from .store import ActionStore
from .engine import ExecutionEngine
from .description import ActionCatalogue, DescriptionBuilder
from .service import Registry

__all__ = [
    "Registry",
    "ActionStore", "ExecutionEngine", "DescriptionBuilder", "ActionCatalogue",
    "ApplicabilityMatcher", "SensitiveDataResolver", "SecretMaskingFilter", "bound_secrets",
    "FieldSpec", "ParameterSchema", "NO_PARAMS", "MISSING", "COLLABORATOR_NAMES",
    "ActionCall", "ActionDescriptor", "ActionResult", "DependencyBundle", "PageState",
    "RegistryError", "ErrorCategory", "ErrorCode",
    "ActionNotFound", "DuplicateAction", "ValidationError", "MissingDependency",
    "ApplicabilityCheckFailed", "ActionNotApplicable", "ActionExecutionError",
    "ActionTimeout", "InvalidResultType",
]
