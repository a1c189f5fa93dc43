"""
intenum-derive: discriminant resolution and conversion planning for integer-backed enums.

A front end describes an enumeration (its variants, their explicit or implicit
integer discriminants, and the ``default`` / ``catch_all`` / ``alternatives``
modifiers) as an ``EnumSchema``. The engine validates it, resolves every
discriminant, and derives a ``ConversionPlan`` for each conversion family a
back end may emit.

Example:
    >>> from intenum_derive import EnumSchema, IntegerType, VariantSpec, ConstExpr
    >>> from intenum_derive import resolve, derive_plan, try_from_integer
    >>> schema = EnumSchema(
    ...     name="Number",
    ...     underlying_type=IntegerType.of("u8"),
    ...     variants=[
    ...         VariantSpec(name="Zero"),
    ...         VariantSpec(name="Two", explicit_value=ConstExpr(value=2)),
    ...     ],
    ... )
    >>> mapping = resolve(schema)
    >>> [v.canonical_value for v in mapping.variants]
    [0, 2]
    >>> plan = derive_plan(mapping, "from_integer_fallible")
    >>> str(try_from_integer(plan, 3).unwrap_err())
    'No discriminant in enum `Number` matches the value `3`'

Export Notes:
    Models: IntegerType, EnumSchema, VariantSpec, modifiers, ResolvedMapping,
        ConversionPlan.
    Functions: resolve, derive_plan, derive_plans, plan_conversions and the
        evaluation functions to_integer, from_integer_total, try_from_integer,
        from_integer_unchecked, default_value.
    JSON Schemas for the input and output contracts are available via
    ``intenum_derive.schemas.load_schema()``; conformance fixtures live in
    ``intenum_derive.conformance``.
"""

__version__ = "0.1.0"

# Integer types
from intenum_derive.integer_types import (
    IntegerKind,
    IntegerType,
)

# Schema models
from intenum_derive.models import (
    AlternativesModifier,
    CatchAllModifier,
    ConstExpr,
    CustomErrorType,
    DefaultModifier,
    EnumSchema,
    IntEnumDeriveError,
    ModifierKind,
    PayloadShape,
    SourceSpan,
    ValueRange,
    VariantSpec,
)

# Errors
from intenum_derive.errors import (
    ConflictingErrorType,
    ConflictingModifiers,
    ConversionFailed,
    ConversionUnavailable,
    DiscriminantCollision,
    DiscriminantOutOfRange,
    ErrorConstruction,
    MalformedCatchAll,
    MissingDefault,
    MissingFallback,
    SchemaError,
    TryFromIntegerError,
    UncheckedConversionUnavailable,
    UnexpectedPayload,
    UnknownErrorConstructor,
)

# Resolution
from intenum_derive.resolver import (
    ResolvedMapping,
    ResolvedVariant,
    resolve,
)

# Conversion plans
from intenum_derive.conversions import (
    ConversionFamily,
    ConversionPlan,
    ConversionReport,
    FallbackPolicy,
    MappingEntry,
    ToIntegerStrategy,
    derive_plan,
    derive_plans,
    plan_conversions,
)

# Evaluation
from intenum_derive.evaluation import (
    ConversionResult,
    UncheckedPreconditionViolation,
    VariantValue,
    default_value,
    from_integer_total,
    from_integer_unchecked,
    to_integer,
    try_from_integer,
)

# Public API (controls what's exported with "from intenum_derive import *")
__all__ = [
    # Version
    "__version__",
    # Integer types
    "IntegerKind",
    "IntegerType",
    # Schema models
    "AlternativesModifier",
    "CatchAllModifier",
    "ConstExpr",
    "CustomErrorType",
    "DefaultModifier",
    "EnumSchema",
    "ModifierKind",
    "PayloadShape",
    "SourceSpan",
    "ValueRange",
    "VariantSpec",
    # Exceptions
    "IntEnumDeriveError",
    "SchemaError",
    "DiscriminantCollision",
    "DiscriminantOutOfRange",
    "ConflictingModifiers",
    "MalformedCatchAll",
    "UnexpectedPayload",
    "ConflictingErrorType",
    "ConversionUnavailable",
    "MissingFallback",
    "MissingDefault",
    "UncheckedConversionUnavailable",
    "ConversionFailed",
    "UnknownErrorConstructor",
    "UncheckedPreconditionViolation",
    # Runtime errors
    "TryFromIntegerError",
    "ErrorConstruction",
    # Resolution
    "ResolvedMapping",
    "ResolvedVariant",
    "resolve",
    # Conversion plans
    "ConversionFamily",
    "ConversionPlan",
    "ConversionReport",
    "FallbackPolicy",
    "MappingEntry",
    "ToIntegerStrategy",
    "derive_plan",
    "derive_plans",
    "plan_conversions",
    # Evaluation
    "ConversionResult",
    "VariantValue",
    "to_integer",
    "from_integer_total",
    "try_from_integer",
    "from_integer_unchecked",
    "default_value",
]
