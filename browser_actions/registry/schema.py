"""Declared parameter schemas for registered actions.

Every action declares its parameters explicitly at registration; nothing is
derived from the handler's signature. A schema has two parts:

- fields: the arguments the language model supplies (typed, with
  required-ness and defaults), validated before the handler runs
- requires: the collaborators the handler wants injected by the engine
  (browser, page_extraction_llm, available_file_paths, context,
  has_sensitive_data). These are never accepted from the model.

Type checking is done with jsonschema against the JSON schema rendered from
the fields, so the same schema object feeds validation, prompt descriptions
and the structured tool catalogue.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import cached_property
from typing import Any

import jsonschema

from .errors import ErrorCode, ValidationError


_logger = logging.getLogger(__name__)


# Collaborators a handler may declare; absence at call time is an error
COLLABORATOR_NAMES: frozenset[str] = frozenset(
    {"context", "browser", "page_extraction_llm", "available_file_paths"}
)

# Everything the engine can inject (has_sensitive_data is derived, never missing)
INJECTABLE_NAMES: frozenset[str] = COLLABORATOR_NAMES | {"has_sensitive_data"}

FIELD_TYPES: frozenset[str] = frozenset(
    {"string", "integer", "number", "boolean", "array", "object", "any"}
)


class _Missing:
    """Sentinel for 'no default declared'."""

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class FieldSpec:
    """One model-supplied parameter.

    Attributes:
        name: Argument name passed to the handler as a keyword
        type: JSON type name, or "any" to skip type checking
        required: Whether the model must supply it (a default satisfies this)
        default: Value filled in when the argument is omitted
        description: Shown to the model
        nullable: Whether null is an acceptable value
        items: Element type for arrays
        enum: Closed set of accepted values
    """

    name: str
    type: str = "string"
    required: bool = True
    default: Any = MISSING
    description: str = ""
    nullable: bool = False
    items: str | None = None
    enum: tuple[Any, ...] | None = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Field name must not be empty")
        if self.type not in FIELD_TYPES:
            raise ValueError(f"Unknown field type '{self.type}' for field '{self.name}'")
        if self.items is not None and self.items not in FIELD_TYPES:
            raise ValueError(f"Unknown items type '{self.items}' for field '{self.name}'")
        if self.enum is not None and not isinstance(self.enum, tuple):
            object.__setattr__(self, "enum", tuple(self.enum))

    @property
    def has_default(self) -> bool:
        return self.default is not MISSING

    @property
    def accepts_null(self) -> bool:
        """Null is valid when declared nullable, optional without default, or defaulting to None."""
        if self.nullable:
            return True
        if not self.required and not self.has_default:
            return True
        return self.has_default and self.default is None

    def json_schema(self) -> dict[str, Any]:
        """Render this field as a JSON schema property (no title)."""
        prop: dict[str, Any] = {}
        if self.type != "any":
            prop["type"] = [self.type, "null"] if self.accepts_null else self.type
        if self.type == "array" and self.items and self.items != "any":
            prop["items"] = {"type": self.items}
        if self.enum is not None:
            values = list(self.enum)
            if self.accepts_null and None not in values:
                values.append(None)
            prop["enum"] = values
        if self.description:
            prop["description"] = self.description
        if self.has_default:
            prop["default"] = self.default
        return prop


@dataclass(frozen=True)
class ParameterSchema:
    """Ordered set of fields plus the collaborators an action needs injected."""

    fields: tuple[FieldSpec, ...] = ()
    requires: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "requires", frozenset(self.requires))

        seen: set[str] = set()
        for spec in self.fields:
            if spec.name in seen:
                raise ValueError(f"Duplicate field '{spec.name}' in parameter schema")
            if spec.name in INJECTABLE_NAMES:
                raise ValueError(
                    f"Field name '{spec.name}' is reserved for injected collaborators; "
                    f"declare it in requires instead"
                )
            seen.add(spec.name)

        unknown = self.requires - INJECTABLE_NAMES
        if unknown:
            raise ValueError(
                f"Unknown collaborator(s) {sorted(unknown)}; "
                f"expected a subset of {sorted(INJECTABLE_NAMES)}"
            )

    @classmethod
    def of(cls, *fields: FieldSpec, requires: Iterable[str] = ()) -> ParameterSchema:
        """Shorthand: ParameterSchema.of(FieldSpec("url"), requires=["browser"])."""
        return cls(fields=tuple(fields), requires=frozenset(requires))

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    @property
    def declared_names(self) -> frozenset[str]:
        """Field names and collaborator names together."""
        return frozenset(self.field_names) | self.requires

    @property
    def collaborators(self) -> frozenset[str]:
        """Declared collaborators that must be present at call time."""
        return self.declared_names & COLLABORATOR_NAMES

    def get(self, name: str) -> FieldSpec | None:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def properties(self) -> dict[str, dict[str, Any]]:
        """Field name -> JSON schema property, in declaration order."""
        return {spec.name: spec.json_schema() for spec in self.fields}

    def to_json_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": self.properties(),
            "required": [
                spec.name for spec in self.fields if spec.required and not spec.has_default
            ],
            "additionalProperties": False,
        }

    @cached_property
    def _validator(self) -> jsonschema.Draft202012Validator:
        return jsonschema.Draft202012Validator(self.to_json_schema())

    def validate(
        self,
        params: Mapping[str, Any] | None,
        *,
        action: str | None = None,
        coerce: bool = False,
    ) -> dict[str, Any]:
        """Validate model-supplied arguments and fill defaults.

        Args:
            params: Raw arguments (None is treated as {})
            action: Action name, used in error messages
            coerce: Convert string values to the declared scalar type first

        Returns:
            New dict with one entry per declared field.

        Raises:
            ValidationError: Unknown fields, missing required fields, or
                type mismatches. Nothing is mutated on failure.
        """
        label = action or "action"
        if params is None:
            params = {}
        if not isinstance(params, Mapping):
            raise ValidationError(
                f"Parameters for {label} must be an object, got {type(params).__name__}",
                action=action,
                code=ErrorCode.INVALID_TYPE,
            )

        known = set(self.field_names)
        unknown = sorted(str(key) for key in params if key not in known)
        if unknown:
            raise ValidationError(
                f"Unknown parameter(s) for {label}: {', '.join(unknown)}. "
                f"Expected: {', '.join(self.field_names) or 'no parameters'}",
                action=action,
                errors=unknown,
            )

        args: dict[str, Any] = dict(params)
        if coerce:
            args = coerce_types(args, self)

        missing: list[str] = []
        for spec in self.fields:
            if spec.name in args:
                continue
            if spec.has_default:
                args[spec.name] = copy.deepcopy(spec.default)
            elif spec.required:
                missing.append(spec.name)
            else:
                args[spec.name] = None
        if missing:
            raise ValidationError(
                f"Missing required parameter(s) for {label}: {', '.join(missing)}",
                action=action,
                errors=missing,
                code=ErrorCode.MISSING_ARGUMENT,
            )

        problems = sorted(
            self._validator.iter_errors(args),
            key=lambda e: [str(p) for p in e.absolute_path],
        )
        if problems:
            errors = [_format_error(e) for e in problems]
            raise ValidationError(
                f"Invalid parameter(s) for {label}: {'; '.join(errors)}",
                action=action,
                errors=errors,
                code=ErrorCode.INVALID_TYPE,
            )

        return args


def _format_error(error: jsonschema.ValidationError) -> str:
    path = ".".join(str(p) for p in error.absolute_path)
    return f"{path}: {error.message}" if path else error.message


def coerce_types(args: dict[str, Any], schema: ParameterSchema) -> dict[str, Any]:
    """Coerce string arguments to the scalar type the schema expects.

    Models often send "5" instead of 5 when the schema expects an integer.
    Values that do not convert cleanly are left alone so validation reports
    them.

    Args:
        args: Dict of argument name -> value
        schema: Schema declaring the expected types

    Returns:
        New dict with types coerced where safe to do so.
    """
    coerced = dict(args)

    for name, value in args.items():
        spec = schema.get(name)
        if spec is None or not isinstance(value, str):
            continue

        if spec.type == "integer":
            try:
                coerced[name] = int(value)
            except ValueError:
                pass  # Keep original if not a valid integer

        elif spec.type == "number":
            try:
                coerced[name] = float(value)
            except ValueError:
                pass  # Keep original if not a valid number

        elif spec.type == "boolean":
            if value.lower() in ("true", "1", "yes"):
                coerced[name] = True
            elif value.lower() in ("false", "0", "no"):
                coerced[name] = False

    if coerced != args:
        _logger.debug("Coerced argument types: %s", sorted(k for k in args if coerced[k] is not args[k]))
    return coerced


# Schema for actions that take no model-supplied arguments
NO_PARAMS: ParameterSchema = ParameterSchema()
