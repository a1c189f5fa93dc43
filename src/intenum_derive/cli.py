"""Command-line front door for intenum-derive.

Reads an ``EnumSchema`` JSON document and prints the resolved mapping or
conversion plans as JSON:

    intenum-derive resolve number.json
    intenum-derive plan number.json --family from_integer_fallible
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from intenum_derive import __version__
from intenum_derive.conversions import ConversionFamily, plan_conversions
from intenum_derive.errors import SchemaError
from intenum_derive.models import EnumSchema, IntEnumDeriveError
from intenum_derive.resolver import resolve

logger = logging.getLogger("intenum_derive.cli")


class InputError(IntEnumDeriveError):
    """The schema document could not be read or parsed."""


def _read_schema(source: str) -> EnumSchema:
    if source == "-":
        text = sys.stdin.read()
    else:
        path = Path(source)
        if not path.exists():
            raise InputError(f"No such file: {path}")
        text = path.read_text(encoding="utf-8")
    try:
        return EnumSchema.model_validate_json(text)
    except ValidationError as exc:
        raise InputError(f"Invalid enum schema in {source}:\n{exc}") from exc


def _emit(document: Any) -> None:
    print(json.dumps(document, indent=2, sort_keys=True))


def _cmd_resolve(args: argparse.Namespace) -> int:
    schema = _read_schema(args.schema)
    mapping = resolve(schema)
    _emit(mapping.model_dump(mode="json"))
    return 0


def _cmd_plan(args: argparse.Namespace) -> int:
    schema = _read_schema(args.schema)
    explicit = bool(args.family)
    report = plan_conversions(schema, args.family or None)
    if report.resolution_error is not None:
        raise report.resolution_error

    label = "error" if explicit else "note"
    for family, exc in report.unavailable.items():
        print(f"{label}[{exc.code}]: {family.value}: {exc.message}", file=sys.stderr)
    if explicit and report.unavailable:
        return 1

    _emit({family.value: plan.model_dump(mode="json") for family, plan in report.plans.items()})
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="intenum-derive",
        description="Resolve integer-backed enum schemas and derive conversion plans",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging on stderr",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    resolve_parser = subparsers.add_parser("resolve", help="Print the resolved mapping")
    resolve_parser.add_argument("schema", help="EnumSchema JSON file, or - for stdin")
    resolve_parser.set_defaults(handler=_cmd_resolve)

    plan_parser = subparsers.add_parser("plan", help="Print conversion plans")
    plan_parser.add_argument("schema", help="EnumSchema JSON file, or - for stdin")
    plan_parser.add_argument(
        "--family",
        action="append",
        choices=[f.value for f in ConversionFamily],
        help="Family to derive (repeatable); all families when omitted",
    )
    plan_parser.set_defaults(handler=_cmd_plan)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, 1 for a rejected schema or unavailable family,
        2 for unreadable input)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        return int(args.handler(args))
    except InputError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except SchemaError as exc:
        logger.debug("Schema rejected", exc_info=True)
        print(exc.render(), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
