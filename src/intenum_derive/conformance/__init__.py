"""Conformance test suite for intenum-derive.

Run: pytest --pyargs intenum_derive.conformance
"""
from intenum_derive.conformance.loader import (
    FixtureCase,
    load_fixtures,
)
from intenum_derive.conformance.pytest_helpers import (
    assert_payload_conforms,
    assert_payload_fails,
    assert_rejected_with,
    assert_resolves_to,
)
from intenum_derive.conformance.validators import (
    ConformanceResult,
    ModelViolation,
    ResolutionOutcome,
    SchemaViolation,
    validate_and_resolve,
    validate_payload,
)

__all__ = [
    "ConformanceResult",
    "FixtureCase",
    "ModelViolation",
    "ResolutionOutcome",
    "SchemaViolation",
    "assert_payload_conforms",
    "assert_payload_fails",
    "assert_rejected_with",
    "assert_resolves_to",
    "load_fixtures",
    "validate_and_resolve",
    "validate_payload",
]
