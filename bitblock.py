"""
Fixed-width bit vectors used by the cipher.

Bits are numbered from 0 at the MSB, so ``block[0]`` is the leftmost
character of ``block.to_bits()``.
"""

from typing import Tuple, Union


class BitStringError(ValueError):
    """Base class for malformed bit-string (or byte-string) input."""


class InvalidLength(BitStringError):
    pass


class InvalidCharacter(BitStringError):
    pass


class BitBlock:
    """
    An immutable unsigned integer of exactly ``WIDTH`` bits.

    Subclasses fix the width; XOR and comparison are only defined between
    blocks of the same class.
    """

    WIDTH = 0

    __slots__ = ("_value",)

    def __init__(self, value: int = 0):
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeError(f"{type(self).__name__} expects an int, got {type(value).__name__}")
        # Truncate / zero-extend to the block width
        self._value = value & self.mask()

    @classmethod
    def mask(cls) -> int:
        return (1 << cls.WIDTH) - 1

    @classmethod
    def from_bits(cls, bits: str):
        """
        Build a block from a string of '0' and '1' characters, MSB first.

        :param bits: Exactly WIDTH characters
        :ret: A new block
        """
        if len(bits) != cls.WIDTH:
            raise InvalidLength(f"expected {cls.WIDTH} bits, got {len(bits)}")
        bad = set(bits) - {"0", "1"}
        if bad:
            raise InvalidCharacter(f"bit string may only contain '0' and '1', found {sorted(bad)!r}")
        return cls(int(bits, 2))

    @classmethod
    def from_bytes(cls, data: bytes):
        """
        Build a block from WIDTH / 8 bytes, first byte most significant.
        """
        if len(data) * 8 != cls.WIDTH:
            raise InvalidLength(f"expected {cls.WIDTH // 8} bytes, got {len(data)}")
        return cls(int.from_bytes(data, "big"))

    @classmethod
    def coerce(cls, value: Union["BitBlock", int, str, bytes]):
        """
        Accept a block of this type, an int, a bit string or raw bytes.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, BitBlock):
            raise TypeError(f"cannot use a {len(value)}-bit block where {cls.WIDTH} bits are required")
        if isinstance(value, str):
            return cls.from_bits(value)
        if isinstance(value, (bytes, bytearray)):
            return cls.from_bytes(bytes(value))
        return cls(value)

    def __getitem__(self, i: int) -> int:
        if i < 0:
            i += self.WIDTH
        if not 0 <= i < self.WIDTH:
            raise IndexError(f"bit index out of range for a {self.WIDTH}-bit block")
        return (self._value >> (self.WIDTH - 1 - i)) & 1

    def with_bit(self, i: int, bit: int):
        """Return a copy of this block with bit ``i`` set to ``bit``."""
        if i < 0:
            i += self.WIDTH
        if not 0 <= i < self.WIDTH:
            raise IndexError(f"bit index out of range for a {self.WIDTH}-bit block")
        shift = self.WIDTH - 1 - i
        if bit:
            return type(self)(self._value | (1 << shift))
        return type(self)(self._value & ~(1 << shift))

    def __xor__(self, other):
        if type(other) is not type(self):
            raise TypeError(f"cannot XOR {type(self).__name__} with {type(other).__name__}")
        return type(self)(self._value ^ other._value)

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._value == other._value

    def __hash__(self):
        return hash((self.WIDTH, self._value))

    def __int__(self) -> int:
        return self._value

    def __index__(self) -> int:
        return self._value

    def __len__(self) -> int:
        return self.WIDTH

    def to_bits(self) -> str:
        return format(self._value, f"0{self.WIDTH}b")

    def to_hex(self) -> str:
        return format(self._value, f"0{self.WIDTH // 4}X")

    def __str__(self):
        return self.to_bits()

    def __repr__(self):
        return f"{type(self).__name__}(0x{self.to_hex()})"


class HalfBlock32(BitBlock):
    WIDTH = 32
    __slots__ = ()


class Subkey48(BitBlock):
    WIDTH = 48
    __slots__ = ()


class Block64(BitBlock):
    WIDTH = 64
    __slots__ = ()

    def split(self) -> Tuple[HalfBlock32, HalfBlock32]:
        """
        Split a 64-bit block into a pair of 32-bit halves (left, right).
        """
        return HalfBlock32(self._value >> 32), HalfBlock32(self._value)

    @classmethod
    def join(cls, left: HalfBlock32, right: HalfBlock32) -> "Block64":
        """
        Join a pair of 32-bit halves back into a 64-bit block.
        """
        if not (isinstance(left, HalfBlock32) and isinstance(right, HalfBlock32)):
            raise TypeError("join expects two HalfBlock32 values")
        return cls((int(left) << 32) | int(right))


def hamming_distance(a: BitBlock, b: BitBlock) -> int:
    """Number of bit positions in which two same-width blocks differ."""
    return bin(int(a ^ b)).count("1")
