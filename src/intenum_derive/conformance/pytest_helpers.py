"""Reusable test helpers for intenum-derive conformance testing.

Front ends can import these to check the schemas they produce:
    from intenum_derive.conformance.pytest_helpers import (
        assert_payload_conforms,
        assert_payload_fails,
        assert_resolves_to,
        assert_rejected_with,
    )
"""
from __future__ import annotations

from typing import Any, Dict

from intenum_derive.conformance.validators import (
    ConformanceResult,
    ResolutionOutcome,
    validate_and_resolve,
    validate_payload,
)
from intenum_derive.resolver import ResolvedMapping


def assert_payload_conforms(
    payload: Dict[str, Any],
    contract: str = "enum_schema",
    *,
    strict: bool = False,
) -> ConformanceResult:
    """Assert a payload conforms to the named contract."""
    result = validate_payload(payload, contract, strict=strict)
    if not result.valid:
        violations = []
        for mv in result.model_violations:
            violations.append(f"  Model: {mv.field}: {mv.message}")
        for sv in result.schema_violations:
            violations.append(f"  Schema: {sv.json_path}: {sv.message}")
        raise AssertionError(
            f"Payload for {contract!r} failed conformance:\n"
            + "\n".join(violations)
        )
    return result


def assert_payload_fails(
    payload: Dict[str, Any],
    contract: str = "enum_schema",
    *,
    strict: bool = False,
) -> ConformanceResult:
    """Assert a payload DOES NOT conform (expected invalid)."""
    result = validate_payload(payload, contract, strict=strict)
    if result.valid:
        raise AssertionError(
            f"Payload for {contract!r} was expected to fail but passed conformance."
        )
    return result


def assert_resolves_to(
    payload: Dict[str, Any],
    expected_values: Dict[str, int],
) -> ResolvedMapping:
    """Assert a schema payload resolves with the given canonical values."""
    outcome = validate_and_resolve(payload)
    if outcome.mapping is None:
        detail = outcome.error.render() if outcome.error else "model validation failed"
        raise AssertionError(f"Schema was expected to resolve: {detail}")
    actual = {v.name: v.canonical_value for v in outcome.mapping.variants}
    assert actual == expected_values, (
        f"Expected canonical values {expected_values!r}, got {actual!r}"
    )
    return outcome.mapping


def assert_rejected_with(payload: Dict[str, Any], code: str) -> ResolutionOutcome:
    """Assert a model-valid schema payload fails resolution with *code*."""
    outcome = validate_and_resolve(payload)
    if outcome.conformance.model_violations:
        raise AssertionError(
            "Schema failed model validation before resolution: "
            + "; ".join(mv.message for mv in outcome.conformance.model_violations)
        )
    if outcome.error is None:
        raise AssertionError(f"Schema was expected to fail resolution with {code}")
    assert outcome.error.code == code, (
        f"Expected {code}, got {outcome.error.code}: {outcome.error.message}"
    )
    return outcome
