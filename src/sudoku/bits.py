"""Bitset numerics for candidate tracking.

Digits 1-9 map to bits 1-9 of a 10-bit word ("number sets"), and positions 0-8 within a unit
map to bits 0-8 ("index sets").  Lookup tables covering all 1024 possible masks are built once
at import time, so the hot paths never scan bits one by one.
"""

from array import array
from collections.abc import Iterator

from bitarray.util import int2ba

INDEX_SET_MASK = 0x1FF
"""Bits 0 to 8 set: every position within a unit."""

NUMBER_SET_MASK = 0x3FE
"""Bits 1 to 9 set: every digit."""

TABLE_SIZE = 1 << 10
"""Number of entries in each lookup table (all 10-bit masks)."""

ROW_IN_BOX_MASKS = (0x007, 0x038, 0x1C0)
"""Index sets (within a box) of the box's top, middle and bottom rows."""

COL_IN_BOX_MASKS = (0x049, 0x092, 0x124)
"""Index sets (within a box) of the box's left, middle and right columns."""

BOX_IN_LINE_MASKS = (0x007, 0x038, 0x1C0)
"""Index sets (within a row or column) of the three boxes the line crosses."""


def number_to_set(number: int) -> int:
    """Return the number set holding only `number`."""
    return 1 << number


def index_to_set(index: int) -> int:
    """Return the index set holding only `index`."""
    return 1 << index


def available_from_taken(taken_set: int) -> int:
    """Convert a set of taken digits into the set of digits still available."""
    return ~taken_set & NUMBER_SET_MASK


def _build_tables() -> tuple[array, array, array, array]:
    """Build the bit count, lowest bit, remainder and singleton tables.

    Returns:
        A tuple `(bit_count, lowest_bit, without_lowest, single_number)`, each indexed by mask:

        - `bit_count[m]` is the population count of `m`.
        - `lowest_bit[m]` is the index of the lowest set bit of `m`, or -1 for `m == 0`.
        - `without_lowest[m]` is `m` with its lowest set bit cleared.
        - `single_number[m]` is the digit `d` if `m` is exactly `{d}` for `d` in 1-9, else 0.
    """
    bit_count = array("B", bytes(TABLE_SIZE))
    lowest_bit = array("b", bytes(TABLE_SIZE))
    without_lowest = array("H", bytes(2 * TABLE_SIZE))
    single_number = array("B", bytes(TABLE_SIZE))

    for mask in range(TABLE_SIZE):
        bits = int2ba(mask, length=10, endian="little")
        low = bits.find(1)
        bit_count[mask] = bits.count()
        lowest_bit[mask] = low
        without_lowest[mask] = mask & (mask - 1) if mask else 0
        if bit_count[mask] == 1 and 1 <= low <= 9:
            single_number[mask] = low

    return bit_count, lowest_bit, without_lowest, single_number


BIT_COUNT, LOWEST_BIT, WITHOUT_LOWEST, SINGLE_NUMBER = _build_tables()


def iter_bits(mask: int) -> Iterator[int]:
    """Yield the indices of the set bits of `mask`, lowest first."""
    while mask:
        yield LOWEST_BIT[mask]
        mask = WITHOUT_LOWEST[mask]


def format_set(number_set: int) -> str:
    """Format a number set for diagnostics, e.g. `{ 1 4 9 }`."""
    return "{" + "".join(f" {number}" for number in iter_bits(number_set)) + " }"
