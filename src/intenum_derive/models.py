"""Core schema models for intenum-derive.

An ``EnumSchema`` is what a front end hands the engine after parsing an
enumeration declaration: the enum's name, its underlying integer type, and
the ordered list of variants with their modifiers. Every model here is
frozen; the engine never mutates its input.

Sections:
    1. Source locations and constant expressions
    2. Variant modifiers
    3. Variants and the enumeration schema
    4. Library base exception
"""
from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Iterator, List, Literal, Optional, Set, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from intenum_derive.integer_types import IntegerType

# JSON Schema pattern for variant and enum identifiers
_IDENTIFIER_PATTERN = r"^[A-Za-z_][A-Za-z0-9_]*$"
_IDENTIFIER_RE = re.compile(_IDENTIFIER_PATTERN)


def is_identifier(value: str) -> bool:
    """Return True if *value* is usable as an enum or variant name."""
    return bool(_IDENTIFIER_RE.match(value))


# ── Section 1: Source locations and constant expressions ─────────────────────


class SourceSpan(BaseModel):
    """Opaque source location attached by the front end.

    The engine never interprets a span; it only copies it into errors so
    the host toolchain can point at the offending declaration.
    """

    model_config = ConfigDict(frozen=True)

    file: Optional[str] = Field(None, description="Source file path")
    line: Optional[int] = Field(None, ge=1, description="1-based line number")
    column: Optional[int] = Field(None, ge=1, description="1-based column number")

    def __str__(self) -> str:
        parts = [self.file or "<unknown>"]
        if self.line is not None:
            parts.append(str(self.line))
            if self.column is not None:
                parts.append(str(self.column))
        return ":".join(parts)


class ConstExpr(BaseModel):
    """A constant integer expression folded by the front end.

    ``value`` is the folded integer used for collision detection and
    wraparound. ``text`` is the expression as written (e.g. ``"ONE + 1"``)
    and is passed through to conversion plans untouched.
    """

    model_config = ConfigDict(frozen=True)

    value: int = Field(..., description="Folded integer value of the expression")
    text: Optional[str] = Field(
        None, min_length=1, description="Original expression source, if any"
    )


class ValueRange(BaseModel):
    """A contiguous range of alternative values.

    ``inclusive=True`` reads as ``start..=end``, ``inclusive=False`` as
    ``start..end``. Empty ranges are rejected.
    """

    model_config = ConfigDict(frozen=True)

    start: int = Field(..., description="First value in the range")
    end: int = Field(..., description="Upper bound of the range")
    inclusive: bool = Field(True, description="Whether ``end`` belongs to the range")

    @model_validator(mode="after")
    def _check_not_empty(self) -> "ValueRange":
        if self.last < self.start:
            bound = "..=" if self.inclusive else ".."
            raise ValueError(
                f"range {self.start}{bound}{self.end} contains no values"
            )
        return self

    @classmethod
    def single(cls, value: int) -> "ValueRange":
        return cls(start=value, end=value, inclusive=True)

    @property
    def last(self) -> int:
        """Largest value contained in the range."""
        return self.end if self.inclusive else self.end - 1

    @property
    def size(self) -> int:
        return self.last - self.start + 1

    @property
    def is_single(self) -> bool:
        return self.start == self.last

    def contains(self, number: int) -> bool:
        return self.start <= number <= self.last

    def normalized(self) -> "ValueRange":
        """Return the equivalent inclusive range."""
        if self.inclusive:
            return self
        return ValueRange(start=self.start, end=self.last, inclusive=True)

    def values(self) -> Iterator[int]:
        return iter(range(self.start, self.last + 1))

    def __str__(self) -> str:
        if self.is_single:
            return str(self.start)
        return f"{self.start}..={self.last}"


# ── Section 2: Variant modifiers ─────────────────────────────────────────────


class ModifierKind(str, Enum):
    """Modifiers a variant may carry."""

    DEFAULT = "default"
    CATCH_ALL = "catch_all"
    ALTERNATIVES = "alternatives"


class DefaultModifier(BaseModel):
    """Marks the variant returned for unmatched input and as the default value."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["default"] = "default"
    span: Optional[SourceSpan] = None


class CatchAllModifier(BaseModel):
    """Marks the variant that absorbs unmatched input as its payload."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["catch_all"] = "catch_all"
    span: Optional[SourceSpan] = None


class AlternativesModifier(BaseModel):
    """Additional values that also map to the variant."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["alternatives"] = "alternatives"
    values: List[Union[ConstExpr, ValueRange]] = Field(
        ..., min_length=1, description="Alternative values or ranges"
    )
    span: Optional[SourceSpan] = None

    def ranges(self) -> List[ValueRange]:
        """Return every entry as an inclusive range."""
        result: List[ValueRange] = []
        for entry in self.values:
            if isinstance(entry, ConstExpr):
                result.append(ValueRange.single(entry.value))
            else:
                result.append(entry.normalized())
        return result


Modifier = Annotated[
    Union[DefaultModifier, CatchAllModifier, AlternativesModifier],
    Field(discriminator="kind"),
]


# ── Section 3: Variants and the enumeration schema ───────────────────────────


class PayloadShape(str, Enum):
    """Shape of a variant's fields relative to the underlying integer type."""

    UNIT = "unit"
    SINGLE_INTEGER_FIELD = "single_integer_field"
    UNSUPPORTED = "unsupported"


class VariantSpec(BaseModel):
    """One declared case of the enumeration."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Variant identifier, unique within the enumeration",
        json_schema_extra={"pattern": _IDENTIFIER_PATTERN},
    )
    explicit_value: Optional[ConstExpr] = Field(
        None, description="Declared discriminant (None means implicit)"
    )
    modifiers: List[Modifier] = Field(
        default_factory=list, description="Modifiers attached to the variant"
    )
    field_types: List[str] = Field(
        default_factory=list,
        description="Type names of the variant's payload fields (empty for a unit variant)",
    )
    span: Optional[SourceSpan] = Field(None, description="Location of the variant")

    @model_validator(mode="after")
    def _check_identifier(self) -> "VariantSpec":
        if not is_identifier(self.name):
            raise ValueError(f"variant name {self.name!r} is not an identifier")
        return self

    def modifiers_of(self, kind: ModifierKind) -> List[Modifier]:
        return [m for m in self.modifiers if m.kind == kind.value]

    def has_modifier(self, kind: ModifierKind) -> bool:
        return any(m.kind == kind.value for m in self.modifiers)

    @property
    def is_default(self) -> bool:
        return self.has_modifier(ModifierKind.DEFAULT)

    @property
    def is_catch_all(self) -> bool:
        return self.has_modifier(ModifierKind.CATCH_ALL)

    def alternatives(self) -> List[AlternativesModifier]:
        return [m for m in self.modifiers if isinstance(m, AlternativesModifier)]

    def payload_shape(self, integer_type: IntegerType) -> PayloadShape:
        """Classify the variant's fields against the enum's underlying type."""
        if not self.field_types:
            return PayloadShape.UNIT
        if len(self.field_types) == 1 and self.field_types[0] == integer_type.name:
            return PayloadShape.SINGLE_INTEGER_FIELD
        return PayloadShape.UNSUPPORTED


class CustomErrorType(BaseModel):
    """User-supplied error type for the fallible conversion.

    ``constructor`` is a unary function taking the raw integer and returning
    an instance of ``name``.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1, description="Error type path (e.g. 'CustomError')")
    constructor: str = Field(
        ..., min_length=1, description="Constructor path (e.g. 'CustomError::new')"
    )
    span: Optional[SourceSpan] = None


class EnumSchema(BaseModel):
    """Parsed enumeration declaration handed over by the front end.

    Variant order is semantically significant: it drives implicit
    discriminant inference and the order in which collisions are reported.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        min_length=1,
        description="Enumeration identifier",
        json_schema_extra={"pattern": _IDENTIFIER_PATTERN},
    )
    underlying_type: IntegerType = Field(..., description="Integer representation")
    variants: List[VariantSpec] = Field(
        ..., min_length=1, description="Variants in declaration order"
    )
    error_types: List[CustomErrorType] = Field(
        default_factory=list,
        description="Every custom error declaration seen (at most one is valid)",
    )

    @model_validator(mode="after")
    def _check_names(self) -> "EnumSchema":
        if not is_identifier(self.name):
            raise ValueError(f"enum name {self.name!r} is not an identifier")
        seen: Set[str] = set()
        for variant in self.variants:
            if variant.name in seen:
                raise ValueError(
                    f"variant name {variant.name!r} is declared more than once"
                )
            seen.add(variant.name)
        return self

    def variant_names(self) -> Tuple[str, ...]:
        return tuple(v.name for v in self.variants)

    def __repr__(self) -> str:
        """Human-readable representation."""
        return (
            f"EnumSchema(name={self.name}, "
            f"repr={self.underlying_type.name}, "
            f"variants={len(self.variants)})"
        )


# ── Section 4: Library base exception ────────────────────────────────────────


class IntEnumDeriveError(Exception):
    """Base exception for all library errors."""
    pass
