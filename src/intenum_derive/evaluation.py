"""Reference evaluation of conversion plans.

Executes a ConversionPlan exactly as a generated conversion body behaves.
Back ends can check their output against it, and the property tests use it
to state the round-trip, alias and fallback laws.

Const forms share these semantics, so there is no separate const evaluator.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from intenum_derive.conversions import ConversionFamily, ConversionPlan, FallbackPolicy
from intenum_derive.errors import ConversionFailed, ErrorConstructor, construct_error
from intenum_derive.models import IntEnumDeriveError

logger = logging.getLogger("intenum_derive.evaluation")


@dataclass(frozen=True)
class VariantValue:
    """An enum value: a variant name, plus the payload for the catch-all."""

    name: str
    payload: Optional[int] = None

    def __str__(self) -> str:
        if self.payload is None:
            return self.name
        return f"{self.name}({self.payload})"


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of the fallible conversion: a value or an error, never both."""

    ok: bool
    value: Optional[VariantValue] = None
    error: Any = None

    @classmethod
    def success(cls, value: VariantValue) -> "ConversionResult":
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, error: Any) -> "ConversionResult":
        return cls(ok=False, error=error)

    def unwrap(self) -> VariantValue:
        """Return the value, or raise ConversionFailed carrying the error."""
        if not self.ok or self.value is None:
            raise ConversionFailed(self.error)
        return self.value

    def unwrap_err(self) -> Any:
        if self.ok:
            raise ValueError(f"conversion succeeded with {self.value}")
        return self.error


class UncheckedPreconditionViolation(IntEnumDeriveError):
    """The unchecked conversion received a value no variant owns.

    Generated code has undefined behaviour here; the evaluator reports it.
    """

    def __init__(self, enum_name: str, number: int) -> None:
        self.enum_name = enum_name
        self.number = number
        super().__init__(
            f"Unchecked conversion into `{enum_name}` called with `{number}`, "
            f"which is not a discriminant"
        )


def _require_family(plan: ConversionPlan, family: ConversionFamily) -> None:
    if plan.family is not family:
        raise ValueError(
            f"Expected a {family.value} plan for {plan.enum_name}, got {plan.family.value}"
        )


def _require_in_range(plan: ConversionPlan, number: int) -> None:
    if not plan.integer_type.contains(number):
        raise ValueError(
            f"{number} is out of range for {plan.integer_type.name} "
            f"({plan.integer_type.min_value}..={plan.integer_type.max_value})"
        )


def _apply_fallback(plan: ConversionPlan, number: int) -> Optional[VariantValue]:
    """Return the fallback value for an unmatched *number*, or None for an error."""
    policy = plan.fallback
    if policy is FallbackPolicy.DEFAULT_VARIANT:
        return VariantValue(name=plan.fallback_variant or "")
    if policy is FallbackPolicy.CATCH_ALL:
        return VariantValue(name=plan.fallback_variant or "", payload=number)
    if policy is FallbackPolicy.UNREACHABLE:
        raise RuntimeError(
            f"{plan.enum_name} is exhaustive but {number} matched no variant"
        )
    return None


def to_integer(plan: ConversionPlan, value: VariantValue) -> int:
    """Convert an enum value to its integer.

    Regular variants yield their canonical value (never an alternative); the
    catch-all yields its payload verbatim.
    """
    _require_family(plan, ConversionFamily.TO_INTEGER)
    if plan.catch_all_variant is not None and value.name == plan.catch_all_variant:
        if value.payload is None:
            raise ValueError(f"catch-all variant {value.name} requires a payload")
        _require_in_range(plan, value.payload)
        return value.payload
    entry = plan.entry_for(value.name)
    if entry is None:
        raise ValueError(f"{plan.enum_name} has no variant {value.name!r}")
    return entry.canonical_value


def from_integer_total(plan: ConversionPlan, number: int) -> VariantValue:
    """Convert an integer to an enum value; never fails for in-range input."""
    _require_family(plan, ConversionFamily.FROM_INTEGER_TOTAL)
    _require_in_range(plan, number)
    entry = plan.lookup(number)
    if entry is not None:
        return VariantValue(name=entry.variant)
    result = _apply_fallback(plan, number)
    if result is None:
        # total plans are never derived with the error fallback
        raise RuntimeError(f"{plan.enum_name} total conversion has no fallback")
    return result


def try_from_integer(
    plan: ConversionPlan,
    number: int,
    constructors: Optional[Mapping[str, ErrorConstructor]] = None,
) -> ConversionResult:
    """Convert an integer to an enum value, returning an error if unmatched.

    Args:
        plan: A ``from_integer_fallible`` plan.
        number: The raw integer; must fit the plan's integer type.
        constructors: Callables for custom error constructors, keyed by the
            constructor path recorded in the plan.

    Returns:
        A ConversionResult. Unmatched input yields the default or catch-all
        variant when the enum has one, else the constructed error.
    """
    _require_family(plan, ConversionFamily.FROM_INTEGER_FALLIBLE)
    _require_in_range(plan, number)
    entry = plan.lookup(number)
    if entry is not None:
        return ConversionResult.success(VariantValue(name=entry.variant))
    fallback = _apply_fallback(plan, number)
    if fallback is not None:
        return ConversionResult.success(fallback)
    if plan.error is None:
        raise RuntimeError(f"{plan.enum_name} fallible plan has no error construction")
    logger.debug("%s: no variant matches %d", plan.enum_name, number)
    return ConversionResult.failure(
        construct_error(plan.error, plan.enum_name, number, constructors)
    )


def from_integer_unchecked(plan: ConversionPlan, number: int) -> VariantValue:
    """Reinterpret an integer as an enum value.

    Raises:
        UncheckedPreconditionViolation: If *number* is not a canonical value.
    """
    _require_family(plan, ConversionFamily.FROM_INTEGER_UNCHECKED)
    entry = plan.lookup(number)
    if entry is None:
        raise UncheckedPreconditionViolation(plan.enum_name, number)
    return VariantValue(name=entry.variant)


def default_value(plan: ConversionPlan) -> VariantValue:
    _require_family(plan, ConversionFamily.DEFAULT_VALUE)
    if plan.default_variant is None:
        raise RuntimeError(f"{plan.enum_name} default plan has no default variant")
    return VariantValue(name=plan.default_variant)
