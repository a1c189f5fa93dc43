"""Property tests for the conversion laws: round trip, alternatives and fallbacks."""

from typing import List, Optional

from hypothesis import assume, given, settings, strategies as st

from conftest import make_schema, make_variant
from intenum_derive import (
    ConversionFamily,
    DiscriminantCollision,
    IntegerKind,
    IntegerType,
    VariantValue,
    derive_plan,
    from_integer_total,
    resolve,
    to_integer,
    try_from_integer,
)

_distinct_u8 = st.lists(st.integers(0, 255), min_size=1, max_size=24, unique=True)


@given(values=_distinct_u8)
@settings(deadline=None)
def test_round_trip_through_fallible(values: List[int]) -> None:
    schema = make_schema(*[make_variant(f"V{i}", v) for i, v in enumerate(values)])
    mapping = resolve(schema)
    to_plan = derive_plan(mapping, ConversionFamily.TO_INTEGER)
    from_plan = derive_plan(mapping, ConversionFamily.FROM_INTEGER_FALLIBLE)
    for i, v in enumerate(values):
        variant = VariantValue(f"V{i}")
        assert to_integer(to_plan, variant) == v
        assert try_from_integer(from_plan, v).unwrap() == variant


@given(values=_distinct_u8, probe=st.integers(0, 255))
@settings(deadline=None)
def test_unmatched_value_is_error(values: List[int], probe: int) -> None:
    assume(probe not in values)
    schema = make_schema(*[make_variant(f"V{i}", v) for i, v in enumerate(values)])
    plan = derive_plan(resolve(schema), ConversionFamily.FROM_INTEGER_FALLIBLE)
    err = try_from_integer(plan, probe).unwrap_err()
    assert err.number == probe
    assert str(err) == f"No discriminant in enum `Number` matches the value `{probe}`"


@given(explicit=st.lists(st.one_of(st.none(), st.integers(0, 255)), min_size=1, max_size=16))
@settings(deadline=None)
def test_implicit_values_follow_previous(explicit: List[Optional[int]]) -> None:
    u8 = IntegerType.of("u8")
    schema = make_schema(*[make_variant(f"V{i}", v) for i, v in enumerate(explicit)])
    try:
        mapping = resolve(schema)
    except DiscriminantCollision:
        return
    previous: Optional[int] = None
    for declared, resolved in zip(explicit, mapping.variants):
        if declared is not None:
            assert resolved.canonical_value == declared
        elif previous is None:
            assert resolved.canonical_value == 0
        else:
            assert resolved.canonical_value == u8.wrapping_add(previous)
        previous = resolved.canonical_value
    canonical = [v.canonical_value for v in mapping.variants]
    assert len(set(canonical)) == len(canonical)


@given(values=st.lists(st.integers(0, 255), min_size=2, max_size=24, unique=True))
@settings(deadline=None)
def test_alternatives_convert_to_canonical(values: List[int]) -> None:
    canonical, aliases = values[0], values[1:]
    schema = make_schema(make_variant("Many", canonical, alternatives=aliases))
    mapping = resolve(schema)
    to_plan = derive_plan(mapping, ConversionFamily.TO_INTEGER)
    from_plan = derive_plan(mapping, ConversionFamily.FROM_INTEGER_FALLIBLE)
    for alias in aliases:
        variant = try_from_integer(from_plan, alias).unwrap()
        assert variant == VariantValue("Many")
        assert to_integer(to_plan, variant) == canonical


@given(values=_distinct_u8)
@settings(deadline=None)
def test_default_absorbs_every_unmatched_value(values: List[int]) -> None:
    variants = [make_variant(f"V{i}", v, default=(i == 0)) for i, v in enumerate(values)]
    plan = derive_plan(resolve(make_schema(*variants)), ConversionFamily.FROM_INTEGER_TOTAL)
    for n in range(256):
        expected = f"V{values.index(n)}" if n in values else "V0"
        assert from_integer_total(plan, n) == VariantValue(expected)


@given(values=st.lists(st.integers(1, 255), min_size=1, max_size=24, unique=True))
@settings(deadline=None)
def test_catch_all_preserves_raw_value(values: List[int]) -> None:
    # the catch-all takes discriminant 0, which it only reaches as a fallback
    variants = [make_variant("Other", catch_all=True)]
    variants.extend(make_variant(f"V{i}", v) for i, v in enumerate(values))
    mapping = resolve(make_schema(*variants))
    total = derive_plan(mapping, ConversionFamily.FROM_INTEGER_TOTAL)
    back = derive_plan(mapping, ConversionFamily.TO_INTEGER)
    for n in range(256):
        value = from_integer_total(total, n)
        if n not in values:
            assert value == VariantValue("Other", n)
        assert to_integer(back, value) == n


@given(
    kind=st.sampled_from(list(IntegerKind)),
    number=st.integers(-(2**70), 2**70),
)
@settings(deadline=None)
def test_wrap_lands_in_range(kind: IntegerKind, number: int) -> None:
    t = IntegerType(kind=kind)
    wrapped = t.wrap(number)
    assert t.contains(wrapped)
    assert (wrapped - number) % t.cardinality == 0
    assert t.wrap(wrapped) == wrapped
