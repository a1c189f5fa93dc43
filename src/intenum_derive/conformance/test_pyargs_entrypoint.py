"""Conformance test suite for intenum-derive.

Run: pytest --pyargs intenum_derive.conformance
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest

from intenum_derive.conformance.loader import FixtureCase, load_fixtures
from intenum_derive.conformance.pytest_helpers import (
    assert_payload_fails,
    assert_rejected_with,
    assert_resolves_to,
)
from intenum_derive.conformance.validators import validate_payload
from intenum_derive.conversions import ConversionFamily, plan_conversions
from intenum_derive.evaluation import VariantValue, to_integer, try_from_integer
from intenum_derive.models import EnumSchema
from intenum_derive.schemas import list_schemas, load_schema

_VALID = load_fixtures("valid")
_INVALID = load_fixtures("invalid")
_REJECTED = load_fixtures("rejected")


# --- Manifest integrity ---


def test_manifest_paths_exist(manifest: Dict[str, Any], fixtures_dir: Path) -> None:
    for entry in manifest["fixtures"]:
        assert (fixtures_dir / entry["path"]).exists(), entry["path"]


def test_manifest_ids_unique(manifest: Dict[str, Any]) -> None:
    ids = [entry["id"] for entry in manifest["fixtures"]]
    assert len(ids) == len(set(ids))


# --- Valid schemas ---


@pytest.mark.parametrize("case", _VALID, ids=[c.id for c in _VALID])
def test_valid_fixture_conforms(case: FixtureCase) -> None:
    """The model layer must accept the payload; schema-only findings are tolerated."""
    result = validate_payload(case.payload)
    assert not result.model_violations, [v.message for v in result.model_violations]


@pytest.mark.parametrize("case", _VALID, ids=[c.id for c in _VALID])
def test_valid_fixture_resolves(case: FixtureCase) -> None:
    assert_resolves_to(case.payload, case.expected_values)


@pytest.mark.parametrize("case", _VALID, ids=[c.id for c in _VALID])
def test_valid_fixture_family_availability(case: FixtureCase) -> None:
    report = plan_conversions(EnumSchema.model_validate(case.payload))
    assert report.resolution_error is None
    unavailable = {family.value: exc.code for family, exc in report.unavailable.items()}
    assert unavailable == case.expected_unavailable
    assert ConversionFamily.TO_INTEGER in report.plans
    assert ConversionFamily.FROM_INTEGER_FALLIBLE in report.plans


@pytest.mark.parametrize("case", _VALID, ids=[c.id for c in _VALID])
def test_valid_fixture_round_trip(case: FixtureCase) -> None:
    """Every canonical value converts to its variant and back.

    The catch-all's own discriminant is not in the table, so it comes back
    through the fallback carrying the raw value.
    """
    report = plan_conversions(EnumSchema.model_validate(case.payload))
    assert report.mapping is not None
    to_plan = report.plans[ConversionFamily.TO_INTEGER]
    from_plan = report.plans[ConversionFamily.FROM_INTEGER_FALLIBLE]
    for name, value in case.expected_values.items():
        if name == report.mapping.catch_all_variant:
            expected = VariantValue(name, value)
        else:
            expected = VariantValue(name)
        assert try_from_integer(from_plan, value).unwrap() == expected
        assert to_integer(to_plan, expected) == value


# --- Model-invalid payloads ---


@pytest.mark.parametrize("case", _INVALID, ids=[c.id for c in _INVALID])
def test_invalid_fixture_fails(case: FixtureCase) -> None:
    result = assert_payload_fails(case.payload)
    assert result.model_violations


# --- Structurally rejected schemas ---


@pytest.mark.parametrize("case", _REJECTED, ids=[c.id for c in _REJECTED])
def test_rejected_fixture_code(case: FixtureCase) -> None:
    assert case.expected_code is not None
    assert_rejected_with(case.payload, case.expected_code)


# --- Schema integrity ---


def test_all_schemas_present() -> None:
    assert set(list_schemas()) == {
        "conversion_family",
        "conversion_plan",
        "enum_schema",
        "fallback_policy",
        "resolved_mapping",
    }


@pytest.mark.parametrize("name", list_schemas())
def test_schema_is_valid_json_schema(name: str) -> None:
    schema = load_schema(name)
    assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"
    assert schema["$id"] == f"intenum-derive/{name}"
