"""Error model for intenum-derive.

Two disjoint classes of errors live here:

* Structural errors (``SchemaError`` and subclasses) describe an ill-formed
  enumeration. They are raised during resolution or derivation and are the
  equivalent of a compile error: the whole enumeration is rejected. Each
  carries a stable diagnostic code, the offending variant (when there is
  one) and the source span the front end attached.

* Runtime conversion errors (``TryFromIntegerError``) are plain values
  returned by the fallible integer-to-enum conversion when no variant
  matches. They never abort anything.

The fallible conversion may instead build a user-supplied error type; that
choice is captured once per schema as an ``ErrorConstruction`` and honoured
by ``construct_error``.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal, Mapping, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from intenum_derive.models import CustomErrorType, IntEnumDeriveError, SourceSpan

DEFAULT_ERROR_TYPE_NAME: str = "TryFromIntegerError"

# ── Section 1: Structural errors ─────────────────────────────────────────────


class SchemaError(IntEnumDeriveError):
    """An enumeration declaration is ill-formed.

    Attributes:
        message: Human-readable description of the problem.
        variant: Name of the offending variant, if the error is tied to one.
        span: Source location of the offending variant or modifier.
    """

    code: str = "IE000"

    def __init__(
        self,
        message: str,
        *,
        variant: Optional[str] = None,
        span: Optional[SourceSpan] = None,
    ) -> None:
        self.message = message
        self.variant = variant
        self.span = span
        super().__init__(message)

    def render(self) -> str:
        """Format the error as a single diagnostic line."""
        location = f" (at {self.span})" if self.span is not None else ""
        return f"error[{self.code}]: {self.message}{location}"


class DiscriminantCollision(SchemaError):
    """Two variants (or one variant twice) claim the same integer value."""

    code = "IE001"

    def __init__(
        self,
        value: int,
        existing: str,
        variant: str,
        *,
        span: Optional[SourceSpan] = None,
    ) -> None:
        self.value = value
        self.existing = existing
        if existing == variant:
            message = f"Variant `{variant}` lists the value `{value}` more than once"
        else:
            message = (
                f"Discriminant value `{value}` of variant `{variant}` "
                f"collides with variant `{existing}`"
            )
        super().__init__(message, variant=variant, span=span)


class DiscriminantOutOfRange(SchemaError):
    """A declared value does not fit the enumeration's underlying type."""

    code = "IE002"

    def __init__(
        self,
        value: int,
        variant: str,
        type_name: str,
        *,
        span: Optional[SourceSpan] = None,
    ) -> None:
        self.value = value
        self.type_name = type_name
        super().__init__(
            f"Value `{value}` of variant `{variant}` is out of range for `{type_name}`",
            variant=variant,
            span=span,
        )


class ConflictingModifiers(SchemaError):
    """Modifiers that may not be combined were found."""

    code = "IE003"


class MalformedCatchAll(SchemaError):
    """The catch-all variant does not have the required shape."""

    code = "IE004"


class UnexpectedPayload(SchemaError):
    """A variant other than the catch-all declares fields."""

    code = "IE005"

    def __init__(
        self,
        variant: str,
        field_types: Sequence[str],
        *,
        span: Optional[SourceSpan] = None,
    ) -> None:
        self.field_types = tuple(field_types)
        super().__init__(
            f"Variant `{variant}` has fields ({', '.join(field_types)}); "
            f"only the catch_all variant may carry a payload",
            variant=variant,
            span=span,
        )


class ConflictingErrorType(SchemaError):
    """More than one custom error type was declared."""

    code = "IE006"

    def __init__(self, enum_name: str, *, span: Optional[SourceSpan] = None) -> None:
        super().__init__(
            f"Enum `{enum_name}` must have at most one error_type",
            span=span,
        )


class ConversionUnavailable(SchemaError):
    """A conversion family cannot be derived for this enumeration."""

    code = "IE100"

    def __init__(self, family: str, message: str) -> None:
        self.family = family
        super().__init__(message)


class MissingFallback(ConversionUnavailable):
    """Total integer-to-enum conversion needs exhaustiveness or a fallback."""

    code = "IE101"

    def __init__(self, family: str, enum_name: str) -> None:
        super().__init__(
            family,
            f"Total conversion into `{enum_name}` requires the enum to be exhaustive, "
            f"or a variant marked `default` or `catch_all`",
        )


class MissingDefault(ConversionUnavailable):
    """Default value selection needs a variant marked ``default``."""

    code = "IE102"

    def __init__(self, family: str, enum_name: str) -> None:
        super().__init__(
            family,
            f"Default value of `{enum_name}` requires a variant marked `default`",
        )


class UncheckedConversionUnavailable(ConversionUnavailable):
    """Unchecked conversion is only defined for canonical-only enumerations."""

    code = "IE103"

    def __init__(self, family: str, enum_name: str, reasons: Sequence[str]) -> None:
        self.reasons = tuple(reasons)
        super().__init__(
            family,
            f"Unchecked conversion into `{enum_name}` is unavailable: "
            + "; ".join(reasons),
        )


# ── Section 2: Runtime conversion errors ─────────────────────────────────────


@dataclass(frozen=True, order=True)
class TryFromIntegerError:
    """No variant matched the integer passed to the fallible conversion.

    Equality, ordering and hashing follow ``number`` alone, mirroring the
    underlying integer.
    """

    number: int
    enum_name: str = field(compare=False)

    def __str__(self) -> str:
        return (
            f"No discriminant in enum `{self.enum_name}` "
            f"matches the value `{self.number!r}`"
        )


class ConversionFailed(IntEnumDeriveError):
    """Raised when unwrapping the result of a failed fallible conversion."""

    def __init__(self, error: Any) -> None:
        self.error = error
        super().__init__(str(error))


class UnknownErrorConstructor(IntEnumDeriveError):
    """A custom error constructor was not supplied at evaluation time."""

    def __init__(self, constructor: str) -> None:
        self.constructor = constructor
        super().__init__(
            f"No callable registered for error constructor {constructor!r}"
        )


# ── Section 3: Error construction strategy ───────────────────────────────────


class ErrorConstruction(BaseModel):
    """How the fallible conversion builds its error for an unmatched integer."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["default", "custom"] = Field(
        "default", description="Built-in error value or user-supplied constructor"
    )
    type_name: str = Field(
        DEFAULT_ERROR_TYPE_NAME, min_length=1, description="Name of the error type"
    )
    constructor: Optional[str] = Field(
        None, description="Constructor path for custom errors"
    )

    @classmethod
    def for_error_type(cls, error_type: Optional[CustomErrorType]) -> "ErrorConstruction":
        if error_type is None:
            return cls()
        return cls(
            kind="custom",
            type_name=error_type.name,
            constructor=error_type.constructor,
        )


ErrorConstructor = Callable[[int], Any]


def construct_error(
    construction: ErrorConstruction,
    enum_name: str,
    number: int,
    constructors: Optional[Mapping[str, ErrorConstructor]] = None,
) -> Any:
    """Build the error value for an unmatched integer.

    Args:
        construction: Strategy recorded in the conversion plan.
        enum_name: Name of the enumeration, used by the default message.
        number: The raw integer that matched no variant.
        constructors: Mapping of constructor path to callable, consulted for
            custom error types.

    Returns:
        A ``TryFromIntegerError`` or whatever the custom constructor returns.

    Raises:
        UnknownErrorConstructor: If a custom constructor is not registered.
    """
    if construction.kind == "default":
        return TryFromIntegerError(number=number, enum_name=enum_name)

    path = construction.constructor or ""
    registry = constructors or {}
    if path not in registry:
        raise UnknownErrorConstructor(path)
    return registry[path](number)
