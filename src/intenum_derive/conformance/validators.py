"""Dual-layer validation for intenum-derive contracts.

Combines:
1. Pydantic model validation (primary layer)
2. JSON Schema validation (optional secondary layer)

The validator gracefully degrades if jsonschema is unavailable, unless
strict=True is specified.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple, Type, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from intenum_derive.conversions import ConversionPlan
from intenum_derive.errors import SchemaError
from intenum_derive.models import EnumSchema
from intenum_derive.resolver import ResolvedMapping, resolve
from intenum_derive.schemas import load_schema


@dataclass(frozen=True)
class ModelViolation:
    """A violation detected by Pydantic model validation."""

    field: str
    message: str
    violation_type: str
    input_value: object


@dataclass(frozen=True)
class SchemaViolation:
    """A violation detected by JSON Schema validation."""

    json_path: str
    message: str
    validator: str
    validator_value: object
    schema_path: Tuple[Union[str, int], ...]


@dataclass(frozen=True)
class ConformanceResult:
    """Result of dual-layer conformance validation."""

    valid: bool
    model_violations: Tuple[ModelViolation, ...]
    schema_violations: Tuple[SchemaViolation, ...]
    schema_check_skipped: bool
    contract: str


@dataclass(frozen=True)
class ResolutionOutcome:
    """Result of validating and resolving a front-end payload."""

    conformance: ConformanceResult
    mapping: Optional[ResolvedMapping] = None
    error: Optional[SchemaError] = None

    @property
    def resolved(self) -> bool:
        return self.mapping is not None


# Contract name to Pydantic model (schema names match the registry)
_CONTRACT_TO_MODEL: Dict[str, Type[BaseModel]] = {
    "enum_schema": EnumSchema,
    "resolved_mapping": ResolvedMapping,
    "conversion_plan": ConversionPlan,
}


def _validate_with_model(
    payload: Dict[str, Any],
    model_class: Type[BaseModel],
) -> Tuple[ModelViolation, ...]:
    try:
        model_class.model_validate(payload)
        return ()
    except PydanticValidationError as e:
        violations = []
        for error in e.errors():
            field_path = ".".join(str(loc) for loc in error["loc"])
            violations.append(
                ModelViolation(
                    field=field_path,
                    message=error["msg"],
                    violation_type=error["type"],
                    input_value=error.get("input"),
                )
            )
        return tuple(violations)


def _validate_with_schema(
    payload: Dict[str, Any],
    contract: str,
    strict: bool,
) -> Tuple[Tuple[SchemaViolation, ...], bool]:
    """Validate payload against the generated JSON Schema.

    Returns:
        Tuple of (violations, skipped); skipped is True when jsonschema is
        not installed and strict is False.

    Raises:
        ImportError: If strict=True and jsonschema is unavailable.
    """
    try:
        from jsonschema import Draft202012Validator
    except ImportError:
        if strict:
            raise ImportError(
                "jsonschema is required for strict conformance validation. "
                "Install with: pip install 'intenum-derive[conformance]'"
            )
        return ((), True)

    validator = Draft202012Validator(load_schema(contract))
    violations = []
    for error in validator.iter_errors(payload):
        json_path = "$" + "".join(
            f"[{p}]" if isinstance(p, int) else f".{p}" for p in error.absolute_path
        )
        violations.append(
            SchemaViolation(
                json_path=json_path,
                message=error.message,
                validator=str(error.validator),
                validator_value=error.validator_value,
                schema_path=tuple(error.absolute_schema_path),
            )
        )
    return (tuple(violations), False)


def validate_payload(
    payload: Dict[str, Any],
    contract: str = "enum_schema",
    strict: bool = False,
) -> ConformanceResult:
    """Validate a JSON payload against one of the library's contracts.

    Args:
        payload: Decoded JSON document.
        contract: ``"enum_schema"`` (front-end input), ``"resolved_mapping"``
            or ``"conversion_plan"`` (engine outputs).
        strict: If True, require jsonschema and fail if unavailable.

    Returns:
        ConformanceResult with validation status and any violations found.

    Raises:
        ValueError: If contract is not recognized.
        ImportError: If strict=True and jsonschema is unavailable.
    """
    if contract not in _CONTRACT_TO_MODEL:
        raise ValueError(
            f"Unknown contract: {contract!r}. "
            f"Known contracts: {list(_CONTRACT_TO_MODEL.keys())}"
        )

    model_violations = _validate_with_model(payload, _CONTRACT_TO_MODEL[contract])
    schema_violations, schema_skipped = _validate_with_schema(payload, contract, strict)

    valid = len(model_violations) == 0 and (
        len(schema_violations) == 0 or schema_skipped
    )

    return ConformanceResult(
        valid=valid,
        model_violations=model_violations,
        schema_violations=schema_violations,
        schema_check_skipped=schema_skipped,
        contract=contract,
    )


def validate_and_resolve(
    payload: Dict[str, Any],
    strict: bool = False,
) -> ResolutionOutcome:
    """Validate an ``EnumSchema`` payload and, if it conforms, resolve it.

    Structural errors are captured in the outcome, never raised.
    """
    conformance = validate_payload(payload, "enum_schema", strict=strict)
    if conformance.model_violations:
        return ResolutionOutcome(conformance=conformance)
    schema = EnumSchema.model_validate(payload)
    try:
        return ResolutionOutcome(conformance=conformance, mapping=resolve(schema))
    except SchemaError as exc:
        return ResolutionOutcome(conformance=conformance, error=exc)
