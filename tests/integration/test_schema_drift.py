"""Integration tests for schema generation and drift detection."""
from __future__ import annotations

import subprocess
import sys
from pathlib import Path


def _run(*args: str) -> subprocess.CompletedProcess:
    return subprocess.run(
        [sys.executable, "-m", "intenum_derive.schemas.generate", *args],
        capture_output=True,
        text=True,
    )


def test_generate_then_check_passes(tmp_path: Path) -> None:
    result = _run("--out", str(tmp_path))
    assert result.returncode == 0, result.stderr
    assert sorted(p.name for p in tmp_path.glob("*.schema.json")) == [
        "conversion_family.schema.json",
        "conversion_plan.schema.json",
        "enum_schema.schema.json",
        "fallback_policy.schema.json",
        "resolved_mapping.schema.json",
    ]
    check = _run("--check", str(tmp_path))
    assert check.returncode == 0, check.stderr
    assert "up to date" in check.stdout


def test_check_detects_modification(tmp_path: Path) -> None:
    assert _run("--out", str(tmp_path)).returncode == 0
    schema_file = tmp_path / "enum_schema.schema.json"
    schema_file.write_text(
        schema_file.read_text(encoding="utf-8").replace(
            '"intenum-derive/enum_schema"', '"intenum-derive/enum_schema-modified"'
        ),
        encoding="utf-8",
    )
    result = _run("--check", str(tmp_path))
    assert result.returncode == 1
    assert "drift detected" in result.stderr.lower()


def test_check_detects_missing_and_orphaned(tmp_path: Path) -> None:
    assert _run("--out", str(tmp_path)).returncode == 0
    (tmp_path / "conversion_plan.schema.json").unlink()
    (tmp_path / "legacy.schema.json").write_text("{}\n", encoding="utf-8")
    result = _run("--check", str(tmp_path))
    assert result.returncode == 1
    assert "Missing schema file" in result.stderr
    assert "Orphaned schema legacy.schema.json" in result.stderr


def test_requires_a_mode() -> None:
    assert _run().returncode == 2
