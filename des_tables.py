"""
Constant tables of the simplified DES and the bit-selection helpers that
read them.

Every selection table lists, for each output bit from MSB to LSB, the
1-based position of the input bit it copies, counted from the input's MSB.
"""

from typing import Sequence, Tuple

# Expansion E: 32 -> 48 bits, every fourth input bit feeds two outputs
EXPANSION = (
    32,  1,  2,  3,  4,  5,
     4,  5,  6,  7,  8,  9,
     8,  9, 10, 11, 12, 13,
    12, 13, 14, 15, 16, 17,
    16, 17, 18, 19, 20, 21,
    20, 21, 22, 23, 24, 25,
    24, 25, 26, 27, 28, 29,
    28, 29, 30, 31, 32,  1,
)

# Permutation P: 32 -> 32 bits, applied to the substitution output
PERMUTATION = (
    16,  7, 20, 21, 29, 12, 28, 17,
     1, 15, 23, 26,  5, 18, 31, 10,
     2,  8, 24, 14, 32, 27,  3,  9,
    19, 13, 30,  6, 22, 11,  4, 25,
)

# A single S-box (DES S1), shared by all eight 6-bit chunks
SBOX = (
    (14,  4, 13,  1,  2, 15, 11,  8,  3, 10,  6, 12,  5,  9,  0,  7),
    ( 0, 15,  7,  4, 14,  2, 13,  1, 10,  6, 12, 11,  9,  5,  3,  8),
    ( 4,  1, 14,  8, 13,  6,  2, 11, 15, 12,  9,  7,  3, 10,  5,  0),
    (15, 12,  8,  2,  4,  9,  1,  7,  5, 11,  3, 14, 10,  0,  6, 13),
)

SBOX_ROWS = len(SBOX)
SBOX_COLS = len(SBOX[0])


def permute(data: int, table: Sequence[int], input_bits: int) -> int:
    """Apply a bit-selection table to data"""
    result = 0
    for pos in table:
        result = (result << 1) | ((data >> (input_bits - pos)) & 1)
    return result


def E(block: int) -> int:
    """Expand a 32-bit half block to 48 bits"""
    return permute(block, EXPANSION, 32)


def P(block: int) -> int:
    """
    Apply the 32-bit permutation P
    """
    return permute(block, PERMUTATION, 32)


def sbox_index(chunk: int) -> Tuple[int, int]:
    """
    Row and column of the S-box entry selected by a 6-bit chunk.

    :param chunk: A 6-bit value, bit 0 being its MSB
    :ret: (row, col), row from the outer bits and col from the middle four
    """
    row = ((chunk >> 5) & 1) << 1 | (chunk & 1)
    col = (chunk >> 1) & 0xf
    return row % SBOX_ROWS, col % SBOX_COLS


def S(chunk: int) -> int:
    """
    Substitute a 6-bit chunk with its 4-bit S-box value
    """
    row, col = sbox_index(chunk)
    return SBOX[row][col]


def get_i6(block: int, i: int) -> int:
    """
    Extract the i'th 6-bit chunk from a 48-bit block

    :param block: A 48-bit block of data
    :param i: The index of 6-bit chunk from MSB to LSB
    :ret: A 6-bit chunk from block
    """
    return (block >> (42 - i * 6)) & 0x3f
