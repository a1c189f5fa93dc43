"""JSON Schema generation for intenum-derive models.

Usage:
    python -m intenum_derive.schemas.generate --out DIR
    python -m intenum_derive.schemas.generate --check DIR
"""
from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Type, Union

from pydantic import BaseModel, TypeAdapter

from intenum_derive.conversions import ConversionFamily, ConversionPlan, FallbackPolicy
from intenum_derive.models import EnumSchema
from intenum_derive.resolver import ResolvedMapping

SCHEMA_DRAFT = "https://json-schema.org/draft/2020-12/schema"
ID_PREFIX = "intenum-derive"

# Input contract first, then the two output contracts
PYDANTIC_MODELS: List[Tuple[str, Type[BaseModel]]] = [
    ("enum_schema", EnumSchema),
    ("resolved_mapping", ResolvedMapping),
    ("conversion_plan", ConversionPlan),
]

# Enums (use TypeAdapter)
ENUM_TYPES: List[Tuple[str, type]] = [
    ("conversion_family", ConversionFamily),
    ("fallback_policy", FallbackPolicy),
]

REGISTRY: Dict[str, Union[Type[BaseModel], type]] = {
    **dict(PYDANTIC_MODELS),
    **dict(ENUM_TYPES),
}


def generate_schema(name: str, model: Type[BaseModel]) -> Dict[str, Any]:
    """Generate the JSON Schema for a pydantic model, tagged with $schema and $id."""
    schema = model.model_json_schema(mode="serialization")
    schema["$schema"] = SCHEMA_DRAFT
    schema["$id"] = f"{ID_PREFIX}/{name}"
    return schema


def generate_enum_schema(name: str, enum_cls: type) -> Dict[str, Any]:
    adapter: TypeAdapter[Any] = TypeAdapter(enum_cls)
    schema = adapter.json_schema(mode="serialization")
    schema["$schema"] = SCHEMA_DRAFT
    schema["$id"] = f"{ID_PREFIX}/{name}"
    return schema


def generate_named_schema(name: str) -> Dict[str, Any]:
    target = REGISTRY[name]
    if isinstance(target, type) and issubclass(target, BaseModel):
        return generate_schema(name, target)
    return generate_enum_schema(name, target)


def generate_all_schemas() -> Dict[str, Dict[str, Any]]:
    """Generate every registered schema, keyed by name."""
    return {name: generate_named_schema(name) for name in REGISTRY}


def schema_to_json(schema: Dict[str, Any]) -> str:
    """Serialize a schema deterministically, with a trailing newline."""
    return json.dumps(schema, indent=2, sort_keys=True) + "\n"


def schema_filename(name: str) -> str:
    return f"{name}.schema.json"


def write_all_schemas(out_dir: Path, schemas: Dict[str, Dict[str, Any]]) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)
    for name, schema in schemas.items():
        path = out_dir / schema_filename(name)
        path.write_text(schema_to_json(schema), encoding="utf-8")
        print(f"Generated {path}")


def check_drift(schema_dir: Path) -> int:
    """Compare generated schemas with the files in *schema_dir*.

    Returns:
        0 if every schema matches, 1 if any file is missing, stale or orphaned.
    """
    schemas = generate_all_schemas()
    drift_detected = False

    for name, schema in schemas.items():
        path = schema_dir / schema_filename(name)
        if not path.exists():
            print(f"ERROR: Missing schema file: {path}", file=sys.stderr)
            drift_detected = True
            continue
        if path.read_text(encoding="utf-8") != schema_to_json(schema):
            print(f"ERROR: Schema drift detected in {path}", file=sys.stderr)
            drift_detected = True

    expected_files = {schema_filename(name) for name in schemas}
    actual_files = {p.name for p in schema_dir.glob("*.schema.json")}
    for orphan in sorted(actual_files - expected_files):
        print(f"Orphaned schema {orphan}", file=sys.stderr)
        drift_detected = True

    if drift_detected:
        print("\nSchema drift detected. Run with --out to regenerate.", file=sys.stderr)
        return 1

    print(f"All {len(schemas)} schemas are up to date.")
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for schema generation.

    Returns:
        Exit code (0 for success, 1 for drift)
    """
    parser = argparse.ArgumentParser(
        description="Generate JSON schemas for intenum-derive models"
    )
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument(
        "--out",
        type=Path,
        metavar="DIR",
        help="Write schemas into DIR",
    )
    group.add_argument(
        "--check",
        type=Path,
        metavar="DIR",
        help="Check schemas in DIR for drift without writing files (CI mode)",
    )
    args = parser.parse_args(argv)

    if args.check is not None:
        return check_drift(args.check)

    schemas = generate_all_schemas()
    write_all_schemas(args.out, schemas)
    print(f"\nSuccessfully generated {len(schemas)} schemas.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
