"""JSON Schema artifacts for intenum-derive models.

Schemas are generated from the pydantic models on demand, so they can never
drift from the code. ``python -m intenum_derive.schemas.generate`` writes
them to disk for consumers in other languages.
"""
from __future__ import annotations

from typing import Any, Dict, List


def load_schema(name: str) -> Dict[str, Any]:
    """Return the JSON Schema registered under *name*.

    Raises:
        FileNotFoundError: If no schema is registered under *name*.
    """
    from intenum_derive.schemas.generate import REGISTRY, generate_named_schema

    if name not in REGISTRY:
        raise FileNotFoundError(
            f"No schema found for '{name}'. Available: {list_schemas()}"
        )
    return generate_named_schema(name)


def list_schemas() -> List[str]:
    """List all available schema names."""
    from intenum_derive.schemas.generate import REGISTRY

    return sorted(REGISTRY)
