"""Shared pytest fixtures for all tests."""
from typing import Any, Iterable, Optional, Sequence, Union

import pytest

from intenum_derive import (
    AlternativesModifier,
    CatchAllModifier,
    ConstExpr,
    CustomErrorType,
    DefaultModifier,
    EnumSchema,
    IntegerType,
    ValueRange,
    VariantSpec,
)

Alternative = Union[int, ValueRange]


def make_variant(
    name: str,
    value: Optional[int] = None,
    *,
    text: Optional[str] = None,
    default: bool = False,
    catch_all: bool = False,
    alternatives: Iterable[Alternative] = (),
    field_types: Optional[Sequence[str]] = None,
) -> VariantSpec:
    """Build a VariantSpec from plain Python values.

    Integers in *alternatives* become single values; ValueRange instances are
    passed through. A catch-all variant gets one field of type ``u8`` unless
    *field_types* says otherwise.
    """
    modifiers: list[Any] = []
    if default:
        modifiers.append(DefaultModifier())
    if catch_all:
        modifiers.append(CatchAllModifier())
    alts = [
        ConstExpr(value=a) if isinstance(a, int) else a
        for a in alternatives
    ]
    if alts:
        modifiers.append(AlternativesModifier(values=alts))
    if field_types is None:
        field_types = ["u8"] if catch_all else []
    return VariantSpec(
        name=name,
        explicit_value=None if value is None else ConstExpr(value=value, text=text),
        modifiers=modifiers,
        field_types=list(field_types),
    )


def make_schema(
    *variants: VariantSpec,
    kind: str = "u8",
    name: str = "Number",
    error_type: Optional[CustomErrorType] = None,
) -> EnumSchema:
    """Build an EnumSchema; the underlying type defaults to u8."""
    return EnumSchema(
        name=name,
        underlying_type=IntegerType.of(kind),
        variants=list(variants),
        error_types=[error_type] if error_type is not None else [],
    )


@pytest.fixture
def gaps_schema() -> EnumSchema:
    """u8 ``{Zero, Two = 2, Four = 4}``."""
    return make_schema(
        make_variant("Zero"),
        make_variant("Two", 2),
        make_variant("Four", 4),
    )


@pytest.fixture
def default_schema() -> EnumSchema:
    """u8 ``{Zero = 0, NonZero = 1 (default)}``."""
    return make_schema(
        make_variant("Zero", 0),
        make_variant("NonZero", 1, default=True),
    )


@pytest.fixture
def catch_all_schema() -> EnumSchema:
    """u8 ``{Zero = 0, NonZero = 1, Other(u8) (catch_all)}``."""
    return make_schema(
        make_variant("Zero", 0),
        make_variant("NonZero", 1),
        make_variant("Other", catch_all=True),
    )


@pytest.fixture
def alternatives_schema() -> EnumSchema:
    """u8 ``{Zero = 0, OneToThree = 1 with [2, 3], Four = 4}`` plus a default."""
    return make_schema(
        make_variant("Zero", 0),
        make_variant("OneToThree", 1, alternatives=[2, 3]),
        make_variant("Four", 4),
        make_variant("Unknown", 200, default=True),
    )
