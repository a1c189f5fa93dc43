"""Primitive integer representations backing an enumeration."""

from enum import Enum
from typing import Dict, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field


class IntegerKind(str, Enum):
    """Primitive integer kinds an enumeration may be represented as."""

    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    USIZE = "usize"
    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    ISIZE = "isize"


DEFAULT_POINTER_WIDTH: int = 64

# kind -> (bit width, signed); width 0 means pointer-sized
_KIND_LAYOUT: Dict[IntegerKind, Tuple[int, bool]] = {
    IntegerKind.U8: (8, False),
    IntegerKind.U16: (16, False),
    IntegerKind.U32: (32, False),
    IntegerKind.U64: (64, False),
    IntegerKind.USIZE: (0, False),
    IntegerKind.I8: (8, True),
    IntegerKind.I16: (16, True),
    IntegerKind.I32: (32, True),
    IntegerKind.I64: (64, True),
    IntegerKind.ISIZE: (0, True),
}

POINTER_SIZED_KINDS = frozenset({IntegerKind.USIZE, IntegerKind.ISIZE})


class IntegerType(BaseModel):
    """An underlying integer type: width, signedness and value range.

    All discriminant arithmetic is performed modulo the type's range, so
    ``wrapping_add`` never fails; it wraps from ``max_value`` back to
    ``min_value`` the way a C enum increment would.
    """

    model_config = ConfigDict(frozen=True)

    kind: IntegerKind = Field(..., description="Primitive integer kind (e.g. 'u8', 'i32')")
    pointer_width: Literal[16, 32, 64] = Field(
        DEFAULT_POINTER_WIDTH,
        description="Width used for the pointer-sized kinds 'usize' and 'isize'",
    )

    @classmethod
    def of(cls, kind: str, pointer_width: int = DEFAULT_POINTER_WIDTH) -> "IntegerType":
        """Build an IntegerType from a kind name such as ``"u8"``."""
        return cls(kind=IntegerKind(kind), pointer_width=pointer_width)  # type: ignore[arg-type]

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def bits(self) -> int:
        width, _ = _KIND_LAYOUT[self.kind]
        return width or self.pointer_width

    @property
    def signed(self) -> bool:
        return _KIND_LAYOUT[self.kind][1]

    @property
    def is_pointer_sized(self) -> bool:
        return self.kind in POINTER_SIZED_KINDS

    @property
    def cardinality(self) -> int:
        """Number of distinct bit patterns of this type."""
        return 1 << self.bits

    @property
    def min_value(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def max_value(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def contains(self, number: int) -> bool:
        """Return True if *number* is representable without wrapping."""
        return self.min_value <= number <= self.max_value

    def wrap(self, number: int) -> int:
        """Reduce an arbitrary integer into this type's range (two's complement)."""
        wrapped = number & (self.cardinality - 1)
        if self.signed and wrapped > self.max_value:
            wrapped -= self.cardinality
        return wrapped

    def wrapping_add(self, number: int, increment: int = 1) -> int:
        """Add *increment* to *number*, wrapping on overflow."""
        return self.wrap(number + increment)

    def __str__(self) -> str:
        return self.name
