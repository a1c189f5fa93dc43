"""Canonical fixture loading for intenum-derive conformance testing.

Provides FixtureCase (frozen dataclass) and load_fixtures() for data-driven
conformance tests. Reads from the bundled manifest.json and fixture JSON files.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

_FIXTURES_DIR = Path(__file__).parent / "fixtures"
_MANIFEST_PATH = _FIXTURES_DIR / "manifest.json"

# valid: resolves; invalid: rejected by the model layer; rejected: fails resolution
_VALID_CATEGORIES = frozenset({"valid", "invalid", "rejected"})


@dataclass(frozen=True)
class FixtureCase:
    """A single fixture test case loaded from the manifest."""

    id: str
    payload: Any
    expected_result: str
    notes: str
    expected_code: Optional[str] = None
    expected_values: Dict[str, int] = field(default_factory=dict)
    expected_unavailable: Dict[str, str] = field(default_factory=dict)

    @property
    def expected_valid(self) -> bool:
        """Whether the payload is expected to pass model validation."""
        return self.expected_result != "invalid"


def load_manifest() -> Dict[str, Any]:
    with open(_MANIFEST_PATH, "r", encoding="utf-8") as fh:
        manifest: Dict[str, Any] = json.load(fh)
    return manifest


def load_fixtures(category: str) -> List[FixtureCase]:
    """Load canonical fixture cases for a category.

    Args:
        category: One of ``"valid"``, ``"invalid"`` or ``"rejected"``.

    Returns:
        List of :class:`FixtureCase` instances with payloads loaded from JSON.

    Raises:
        ValueError: If *category* is not one of the recognised categories.
        FileNotFoundError: If a referenced fixture file is missing.
    """
    if category not in _VALID_CATEGORIES:
        raise ValueError(
            f"Unknown fixture category: {category!r}. "
            f"Valid categories: {sorted(_VALID_CATEGORIES)}"
        )

    fixtures: List[FixtureCase] = []
    for entry in load_manifest()["fixtures"]:
        fixture_path: str = entry["path"]
        if not fixture_path.startswith(category + "/"):
            continue

        full_path = _FIXTURES_DIR / fixture_path
        if not full_path.exists():
            raise FileNotFoundError(
                f"Fixture file referenced in manifest does not exist: {full_path}"
            )

        with open(full_path, "r", encoding="utf-8") as fh:
            payload: Any = json.load(fh)

        fixtures.append(
            FixtureCase(
                id=entry["id"],
                payload=payload,
                expected_result=entry["expected_result"],
                notes=entry["notes"],
                expected_code=entry.get("expected_code"),
                expected_values=dict(entry.get("expected_values", {})),
                expected_unavailable=dict(entry.get("expected_unavailable", {})),
            )
        )

    return fixtures
