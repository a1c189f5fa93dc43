"""Conversion semantics derivation.

Turns a ResolvedMapping into one ConversionPlan per requested conversion
family. A plan is a complete, serialisable decision record: the back end
emits a conversion body from it without re-deriving anything, and
``intenum_derive.evaluation`` executes it directly.

Five families exist:

* ``to_integer``: enum to integer, always available.
* ``from_integer_total``: integer to enum, never fails. Needs the enum to be
  naturally exhaustive or to have a ``default`` or ``catch_all`` variant.
* ``from_integer_fallible``: integer to enum, returns an error for unmatched
  input. Always available.
* ``from_integer_unchecked``: integer to enum by reinterpretation. Only for
  enums without ``default``, ``catch_all`` and alternatives.
* ``default_value``: the variant marked ``default``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from intenum_derive.errors import (
    ConversionUnavailable,
    ErrorConstruction,
    MissingDefault,
    MissingFallback,
    SchemaError,
    UncheckedConversionUnavailable,
)
from intenum_derive.integer_types import IntegerType
from intenum_derive.models import EnumSchema, ValueRange
from intenum_derive.resolver import ResolvedMapping, resolve

logger = logging.getLogger("intenum_derive.conversions")

# ── Section 1: Enums ─────────────────────────────────────────────────────────


class ConversionFamily(str, Enum):
    """Conversion procedures derivable for an enumeration."""

    TO_INTEGER = "to_integer"
    FROM_INTEGER_TOTAL = "from_integer_total"
    FROM_INTEGER_FALLIBLE = "from_integer_fallible"
    FROM_INTEGER_UNCHECKED = "from_integer_unchecked"
    DEFAULT_VALUE = "default_value"


ALL_FAMILIES: Tuple[ConversionFamily, ...] = tuple(ConversionFamily)


class FallbackPolicy(str, Enum):
    """What an integer-to-enum conversion does when no variant matches."""

    UNREACHABLE = "unreachable"
    DEFAULT_VARIANT = "default_variant"
    CATCH_ALL = "catch_all"
    RETURN_ERROR = "return_error"


class ToIntegerStrategy(str, Enum):
    """How the enum-to-integer conversion obtains its result."""

    CAST = "cast"
    CATCH_ALL_PAYLOAD = "catch_all_payload"


def normalize_family(value: Union[str, ConversionFamily]) -> ConversionFamily:
    """Accept a family name or enum member.

    Raises:
        ValueError: If *value* names no conversion family.
    """
    if isinstance(value, ConversionFamily):
        return value
    try:
        return ConversionFamily(value.strip().lower().replace("-", "_"))
    except ValueError:
        valid = ", ".join(f.value for f in ConversionFamily)
        raise ValueError(
            f"Unknown conversion family {value!r}; expected one of: {valid}"
        ) from None


# ── Section 2: Plan models ───────────────────────────────────────────────────


class MappingEntry(BaseModel):
    """One row of the shared mapping table."""

    model_config = ConfigDict(frozen=True)

    variant: str
    canonical_value: int
    canonical_text: Optional[str] = None
    matched_values: Tuple[ValueRange, ...] = Field(
        ..., min_length=1, description="Canonical value first, then alternatives"
    )

    def matches(self, number: int) -> bool:
        return any(r.contains(number) for r in self.matched_values)


class ConversionPlan(BaseModel):
    """Decision record for one conversion family of one enumeration."""

    model_config = ConfigDict(frozen=True)

    enum_name: str
    integer_type: IntegerType
    family: ConversionFamily
    mapping: Tuple[MappingEntry, ...] = Field(
        ..., description="Variants with their matched values, declaration order"
    )
    fallback: Optional[FallbackPolicy] = Field(
        None, description="Unmatched-input policy (integer-to-enum families only)"
    )
    fallback_variant: Optional[str] = Field(
        None, description="Variant produced by the default_variant or catch_all fallback"
    )
    default_variant: Optional[str] = None
    catch_all_variant: Optional[str] = None
    error: Optional[ErrorConstruction] = Field(
        None, description="Error construction (fallible conversion only)"
    )
    to_integer_strategy: Optional[ToIntegerStrategy] = None
    provides_const_form: bool = True
    requires_unchecked_acknowledgement: bool = False

    @model_validator(mode="after")
    def _check_fallback_variant(self) -> "ConversionPlan":
        needs_variant = self.fallback in (
            FallbackPolicy.DEFAULT_VARIANT,
            FallbackPolicy.CATCH_ALL,
        )
        if needs_variant and self.fallback_variant is None:
            raise ValueError(f"fallback {self.fallback.value} requires fallback_variant")
        if not needs_variant and self.fallback_variant is not None:
            raise ValueError("fallback_variant is only valid with a variant fallback")
        if self.fallback is FallbackPolicy.RETURN_ERROR and self.error is None:
            raise ValueError("fallback return_error requires an error construction")
        return self

    def lookup(self, number: int) -> Optional[MappingEntry]:
        for entry in self.mapping:
            if entry.matches(number):
                return entry
        return None

    def entry_for(self, variant: str) -> Optional[MappingEntry]:
        for entry in self.mapping:
            if entry.variant == variant:
                return entry
        return None


# ── Section 3: Derivation ────────────────────────────────────────────────────


def mapping_table(mapping: ResolvedMapping) -> Tuple[MappingEntry, ...]:
    """Build the shared mapping table; the catch-all variant is never in it."""
    return tuple(
        MappingEntry(
            variant=v.name,
            canonical_value=v.canonical_value,
            canonical_text=v.canonical_text,
            matched_values=v.matched_values,
        )
        for v in mapping.variants
        if not v.is_catch_all
    )


def _select_fallback(mapping: ResolvedMapping) -> Tuple[Optional[FallbackPolicy], Optional[str]]:
    if mapping.is_naturally_exhaustive:
        return FallbackPolicy.UNREACHABLE, None
    if mapping.default_variant is not None:
        return FallbackPolicy.DEFAULT_VARIANT, mapping.default_variant
    if mapping.catch_all_variant is not None:
        return FallbackPolicy.CATCH_ALL, mapping.catch_all_variant
    return None, None


def _unchecked_blockers(mapping: ResolvedMapping) -> List[str]:
    reasons: List[str] = []
    if mapping.default_variant is not None:
        reasons.append(f"variant `{mapping.default_variant}` is marked `default`")
    if mapping.catch_all_variant is not None:
        reasons.append(f"variant `{mapping.catch_all_variant}` is marked `catch_all`")
    for v in mapping.variants:
        if v.alternatives:
            reasons.append(f"variant `{v.name}` has alternatives")
    return reasons


def derive_plan(
    mapping: ResolvedMapping,
    family: Union[str, ConversionFamily],
) -> ConversionPlan:
    """Derive the conversion plan for one family.

    Args:
        mapping: Output of ``resolve``.
        family: The conversion family to derive.

    Returns:
        The ConversionPlan for *family*.

    Raises:
        ConversionUnavailable: If the family cannot be derived for this
            enumeration (MissingFallback, MissingDefault or
            UncheckedConversionUnavailable).
    """
    family = normalize_family(family)
    base = dict(
        enum_name=mapping.enum_name,
        integer_type=mapping.integer_type,
        family=family,
        mapping=mapping_table(mapping),
        default_variant=mapping.default_variant,
        catch_all_variant=mapping.catch_all_variant,
    )

    if family is ConversionFamily.TO_INTEGER:
        strategy = (
            ToIntegerStrategy.CAST
            if mapping.catch_all_variant is None
            else ToIntegerStrategy.CATCH_ALL_PAYLOAD
        )
        return ConversionPlan(to_integer_strategy=strategy, **base)

    if family is ConversionFamily.FROM_INTEGER_TOTAL:
        policy, variant = _select_fallback(mapping)
        if policy is None:
            raise MissingFallback(family.value, mapping.enum_name)
        logger.debug("%s: %s fallback %s", mapping.enum_name, family.value, policy.value)
        return ConversionPlan(fallback=policy, fallback_variant=variant, **base)

    if family is ConversionFamily.FROM_INTEGER_FALLIBLE:
        policy, variant = _select_fallback(mapping)
        if policy is None:
            policy = FallbackPolicy.RETURN_ERROR
        logger.debug("%s: %s fallback %s", mapping.enum_name, family.value, policy.value)
        return ConversionPlan(
            fallback=policy,
            fallback_variant=variant,
            error=ErrorConstruction.for_error_type(mapping.error_type),
            **base,
        )

    if family is ConversionFamily.FROM_INTEGER_UNCHECKED:
        reasons = _unchecked_blockers(mapping)
        if reasons:
            raise UncheckedConversionUnavailable(family.value, mapping.enum_name, reasons)
        return ConversionPlan(
            provides_const_form=False,
            requires_unchecked_acknowledgement=True,
            **base,
        )

    # DEFAULT_VALUE
    if mapping.default_variant is None:
        raise MissingDefault(family.value, mapping.enum_name)
    return ConversionPlan(**base)


def derive_plans(
    mapping: ResolvedMapping,
    families: Optional[Iterable[Union[str, ConversionFamily]]] = None,
) -> Dict[ConversionFamily, ConversionPlan]:
    """Derive several plans at once, in the order requested.

    Raises the first ConversionUnavailable encountered.
    """
    requested = ALL_FAMILIES if families is None else [normalize_family(f) for f in families]
    return {family: derive_plan(mapping, family) for family in requested}


# ── Section 4: Reports ───────────────────────────────────────────────────────


@dataclass(frozen=True)
class ConversionReport:
    """Outcome of ``plan_conversions`` for one enumeration.

    Either ``resolution_error`` is set (and nothing else is), or ``mapping``
    is set and every requested family appears in exactly one of ``plans``
    and ``unavailable``.
    """

    enum_name: str
    mapping: Optional[ResolvedMapping] = None
    resolution_error: Optional[SchemaError] = None
    plans: Mapping[ConversionFamily, ConversionPlan] = field(default_factory=dict)
    unavailable: Mapping[ConversionFamily, ConversionUnavailable] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.resolution_error is None and not self.unavailable

    @property
    def errors(self) -> Tuple[SchemaError, ...]:
        if self.resolution_error is not None:
            return (self.resolution_error,)
        return tuple(self.unavailable.values())


def plan_conversions(
    schema: EnumSchema,
    families: Optional[Sequence[Union[str, ConversionFamily]]] = None,
) -> ConversionReport:
    """Resolve *schema* and derive the requested families.

    This function NEVER raises for structural problems. Resolution errors and
    unavailable families are reported in the returned ConversionReport.

    Args:
        schema: The parsed enumeration.
        families: Families to derive; all five when omitted.

    Returns:
        A ConversionReport.
    """
    try:
        mapping = resolve(schema)
    except SchemaError as exc:
        logger.debug("Resolution of %s failed: %s", schema.name, exc.render())
        return ConversionReport(enum_name=schema.name, resolution_error=exc)

    requested = ALL_FAMILIES if families is None else [normalize_family(f) for f in families]
    plans: Dict[ConversionFamily, ConversionPlan] = {}
    unavailable: Dict[ConversionFamily, ConversionUnavailable] = {}
    for family in requested:
        try:
            plans[family] = derive_plan(mapping, family)
        except ConversionUnavailable as exc:
            unavailable[family] = exc

    return ConversionReport(
        enum_name=schema.name,
        mapping=mapping,
        plans=plans,
        unavailable=unavailable,
    )
