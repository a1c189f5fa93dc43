"""Discriminant resolution for enumeration schemas.

Provides the ResolvedVariant / ResolvedMapping output models and the
resolve() function that turns an EnumSchema into a validated value-to-variant
mapping, or raises the first structural SchemaError it finds.

Pipeline: assign canonical values (declaration order) → expand alternatives
→ modifier and payload checks → exhaustiveness → freeze.
"""
from __future__ import annotations

import bisect
import logging
from typing import Iterator, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from intenum_derive.errors import (
    ConflictingErrorType,
    ConflictingModifiers,
    DiscriminantCollision,
    DiscriminantOutOfRange,
    MalformedCatchAll,
    UnexpectedPayload,
)
from intenum_derive.integer_types import IntegerType
from intenum_derive.models import (
    CustomErrorType,
    EnumSchema,
    ModifierKind,
    PayloadShape,
    SourceSpan,
    ValueRange,
    VariantSpec,
)

logger = logging.getLogger("intenum_derive.resolver")

# ── Section 1: Output models ─────────────────────────────────────────────────


class ResolvedVariant(BaseModel):
    """A variant with its discriminant and alternative values settled.

    The catch-all variant takes a discriminant like any other variant but
    matches no values of its own: it is reached only as a fallback and never
    appears in a mapping table.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    canonical_value: int
    canonical_text: Optional[str] = Field(
        None, description="Source text of an explicit discriminant"
    )
    alternatives: Tuple[ValueRange, ...] = Field(
        (), description="Alternative values as inclusive ranges, ascending"
    )
    is_default: bool = False
    is_catch_all: bool = False

    @property
    def matched_values(self) -> Tuple[ValueRange, ...]:
        """Canonical value followed by the alternatives; empty for the catch-all."""
        if self.is_catch_all:
            return ()
        return (ValueRange.single(self.canonical_value),) + self.alternatives

    @property
    def alias_values(self) -> Tuple[int, ...]:
        """Alternative values expanded to integers (may be large for ranges)."""
        return tuple(n for r in self.alternatives for n in r.values())

    def matches(self, number: int) -> bool:
        return any(r.contains(number) for r in self.matched_values)


class ResolvedMapping(BaseModel):
    """Validated value-to-variant mapping for one enumeration."""

    model_config = ConfigDict(frozen=True)

    enum_name: str
    integer_type: IntegerType
    variants: Tuple[ResolvedVariant, ...]
    is_naturally_exhaustive: bool = Field(
        False, description="Declared values cover every bit pattern of the type"
    )
    default_variant: Optional[str] = None
    catch_all_variant: Optional[str] = None
    error_type: Optional[CustomErrorType] = None

    @property
    def has_alternatives(self) -> bool:
        return any(v.alternatives for v in self.variants)

    @property
    def value_count(self) -> int:
        """Number of distinct integers mapped to some variant."""
        return sum(r.size for v in self.variants for r in v.matched_values)

    def variant(self, name: str) -> ResolvedVariant:
        for candidate in self.variants:
            if candidate.name == name:
                return candidate
        raise KeyError(name)

    def lookup(self, number: int) -> Optional[ResolvedVariant]:
        """Return the variant whose matched values contain *number*, if any."""
        for candidate in self.variants:
            if candidate.matches(number):
                return candidate
        return None

    def canonical_values(self) -> Iterator[Tuple[str, int]]:
        for v in self.variants:
            yield v.name, v.canonical_value


# ── Section 2: Assigned value index ──────────────────────────────────────────


class _ValueIndex:
    """Disjoint value intervals ordered by start, each tagged with its owner."""

    def __init__(self) -> None:
        self._starts: List[int] = []
        self._ends: List[int] = []
        self._owners: List[str] = []

    def overlap(self, start: int, last: int) -> Optional[Tuple[int, str]]:
        """Return (lowest clashing value, owner) for ``start..=last``, or None."""
        # ends are ascending because intervals are disjoint and sorted
        pos = bisect.bisect_left(self._ends, start)
        if pos < len(self._starts) and self._starts[pos] <= last:
            return max(self._starts[pos], start), self._owners[pos]
        return None

    def add(self, start: int, last: int, owner: str) -> None:
        pos = bisect.bisect_left(self._starts, start)
        self._starts.insert(pos, start)
        self._ends.insert(pos, last)
        self._owners.insert(pos, owner)


# ── Section 3: Resolution ────────────────────────────────────────────────────


def _resolve_alternatives(
    variant: VariantSpec,
    integer_type: IntegerType,
    index: _ValueIndex,
) -> Tuple[ValueRange, ...]:
    ranges: List[ValueRange] = []
    for modifier in variant.alternatives():
        for entry in modifier.ranges():
            for bound in (entry.start, entry.last):
                if not integer_type.contains(bound):
                    raise DiscriminantOutOfRange(
                        bound, variant.name, integer_type.name, span=modifier.span
                    )
            clash = index.overlap(entry.start, entry.last)
            if clash is not None:
                value, owner = clash
                raise DiscriminantCollision(value, owner, variant.name, span=modifier.span)
            index.add(entry.start, entry.last, variant.name)
            ranges.append(entry)
    return tuple(sorted(ranges, key=lambda r: r.start))


def _check_modifiers(schema: EnumSchema) -> Tuple[Optional[str], Optional[str]]:
    """Validate modifier exclusivity and payload shapes.

    Returns:
        (default variant name, catch-all variant name).
    """
    integer_type = schema.underlying_type
    default_owner: Optional[str] = None
    catch_all_owner: Optional[str] = None
    catch_all_span: Optional[SourceSpan] = None

    for variant in schema.variants:
        name = variant.name
        defaults = variant.modifiers_of(ModifierKind.DEFAULT)
        catch_alls = variant.modifiers_of(ModifierKind.CATCH_ALL)

        if len(defaults) > 1:
            raise ConflictingModifiers(
                f"Variant `{name}` is marked `default` more than once",
                variant=name,
                span=defaults[1].span,
            )
        if len(catch_alls) > 1:
            raise ConflictingModifiers(
                f"Variant `{name}` is marked `catch_all` more than once",
                variant=name,
                span=catch_alls[1].span,
            )
        if defaults and catch_alls:
            raise ConflictingModifiers(
                f"Variant `{name}` cannot be marked both `default` and `catch_all`",
                variant=name,
                span=catch_alls[0].span,
            )

        if defaults:
            if default_owner is not None:
                raise ConflictingModifiers(
                    f"Multiple variants marked `default`: `{default_owner}` and `{name}`",
                    variant=name,
                    span=defaults[0].span,
                )
            default_owner = name

        shape = variant.payload_shape(integer_type)
        if catch_alls:
            if catch_all_owner is not None:
                raise ConflictingModifiers(
                    f"Multiple variants marked `catch_all`: `{catch_all_owner}` and `{name}`",
                    variant=name,
                    span=catch_alls[0].span,
                )
            catch_all_owner = name
            catch_all_span = catch_alls[0].span
            alternatives = variant.alternatives()
            if alternatives:
                raise ConflictingModifiers(
                    f"Variant `{name}` is marked `catch_all` and cannot have alternatives",
                    variant=name,
                    span=alternatives[0].span,
                )
            if shape is not PayloadShape.SINGLE_INTEGER_FIELD:
                raise MalformedCatchAll(
                    f"Variant `{name}` with `catch_all` must have exactly one field "
                    f"of type `{integer_type.name}`",
                    variant=name,
                    span=catch_alls[0].span,
                )
        elif shape is not PayloadShape.UNIT:
            raise UnexpectedPayload(name, variant.field_types, span=variant.span)

    if default_owner is not None and catch_all_owner is not None:
        raise ConflictingModifiers(
            f"Variants `{default_owner}` (`default`) and `{catch_all_owner}` (`catch_all`) "
            "are mutually exclusive: an enum has at most one fallback variant",
            variant=catch_all_owner,
            span=catch_all_span,
        )

    if len(schema.error_types) > 1:
        raise ConflictingErrorType(schema.name, span=schema.error_types[1].span)

    return default_owner, catch_all_owner


def resolve(schema: EnumSchema) -> ResolvedMapping:
    """Resolve every variant's discriminant and validate the schema.

    Variants are processed strictly in declaration order. A variant without
    an explicit value takes the previous variant's value plus one, wrapping
    within the underlying type; the first implicit value is 0.

    Args:
        schema: The enumeration as parsed by the front end.

    Returns:
        The frozen ResolvedMapping.

    Raises:
        SchemaError: The first structural problem found (collision, value out
            of range, conflicting modifiers, malformed catch-all, unexpected
            payload or conflicting error type).
    """
    integer_type = schema.underlying_type
    index = _ValueIndex()
    next_implicit = 0
    resolved: List[ResolvedVariant] = []

    for variant in schema.variants:
        text: Optional[str] = None
        if variant.explicit_value is not None:
            value = variant.explicit_value.value
            text = variant.explicit_value.text
            if not integer_type.contains(value):
                raise DiscriminantOutOfRange(
                    value, variant.name, integer_type.name, span=variant.span
                )
        else:
            value = next_implicit
        next_implicit = integer_type.wrapping_add(value, 1)

        clash = index.overlap(value, value)
        if clash is not None:
            raise DiscriminantCollision(value, clash[1], variant.name, span=variant.span)
        index.add(value, value, variant.name)

        resolved.append(ResolvedVariant(
            name=variant.name,
            canonical_value=value,
            canonical_text=text,
            alternatives=(
                () if variant.is_catch_all
                else _resolve_alternatives(variant, integer_type, index)
            ),
            is_default=variant.is_default,
            is_catch_all=variant.is_catch_all,
        ))

    default_owner, catch_all_owner = _check_modifiers(schema)
    # the catch-all's own discriminant is reachable only through the fallback
    mapped = sum(r.size for v in resolved for r in v.matched_values)
    is_naturally_exhaustive = mapped == integer_type.cardinality

    logger.debug(
        "Resolved enum %s (%s): %d variants, %d values, exhaustive=%s",
        schema.name,
        integer_type.name,
        len(resolved),
        mapped,
        is_naturally_exhaustive,
    )

    return ResolvedMapping(
        enum_name=schema.name,
        integer_type=integer_type,
        variants=tuple(resolved),
        is_naturally_exhaustive=is_naturally_exhaustive,
        default_variant=default_owner,
        catch_all_variant=catch_all_owner,
        error_type=schema.error_types[0] if schema.error_types else None,
    )
