"""Unit tests for the schemas subpackage loader API."""
from __future__ import annotations

import json

import pytest

from conftest import make_schema, make_variant
from intenum_derive import ConversionFamily, derive_plan, resolve
from intenum_derive.schemas import list_schemas, load_schema
from intenum_derive.schemas.generate import (
    generate_all_schemas,
    schema_filename,
    schema_to_json,
)


def test_list_schemas_returns_all_names() -> None:
    assert list_schemas() == [
        "conversion_family",
        "conversion_plan",
        "enum_schema",
        "fallback_policy",
        "resolved_mapping",
    ]


def test_load_schema_has_schema_and_id() -> None:
    schema = load_schema("enum_schema")
    assert schema["$schema"] == "https://json-schema.org/draft/2020-12/schema"
    assert schema["$id"] == "intenum-derive/enum_schema"


def test_load_unknown_schema() -> None:
    with pytest.raises(FileNotFoundError, match="Available"):
        load_schema("event")


def test_enum_schema_properties() -> None:
    schema = load_schema("enum_schema")
    assert schema["type"] == "object"
    assert set(schema["required"]) >= {"name", "underlying_type", "variants"}
    assert schema["properties"]["name"]["pattern"] == "^[A-Za-z_][A-Za-z0-9_]*$"


def test_conversion_family_enum_values() -> None:
    schema = load_schema("conversion_family")
    assert schema["enum"] == [f.value for f in ConversionFamily]


def test_fallback_policy_enum_values() -> None:
    schema = load_schema("fallback_policy")
    assert schema["enum"] == ["unreachable", "default_variant", "catch_all", "return_error"]


def test_schema_to_json_is_deterministic() -> None:
    text = schema_to_json(load_schema("conversion_plan"))
    assert text.endswith("\n")
    assert schema_to_json(json.loads(text)) == text


def test_generate_all_matches_registry() -> None:
    assert sorted(generate_all_schemas()) == list_schemas()
    assert schema_filename("enum_schema") == "enum_schema.schema.json"


def test_plan_dump_validates_against_schema() -> None:
    jsonschema = pytest.importorskip("jsonschema")
    schema = make_schema(make_variant("Zero"), make_variant("Other", catch_all=True))
    plan = derive_plan(resolve(schema), ConversionFamily.FROM_INTEGER_FALLIBLE)
    jsonschema.Draft202012Validator(load_schema("conversion_plan")).validate(
        plan.model_dump(mode="json")
    )


def test_mapping_dump_validates_against_schema() -> None:
    jsonschema = pytest.importorskip("jsonschema")
    schema = make_schema(make_variant("Zero"), make_variant("Two", 2))
    jsonschema.Draft202012Validator(load_schema("resolved_mapping")).validate(
        resolve(schema).model_dump(mode="json")
    )
