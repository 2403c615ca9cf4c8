"""
Simplified DES: a 16-round Feistel network over 64-bit blocks.

This is not the standard DES. The key schedule shifts the master key
instead of running PC1/PC2, a single S-box serves all eight chunks, and
the initial and final permutations are the identity.
"""

from typing import List, NamedTuple, Sequence, Tuple, Union

from bitblock import BitStringError, Block64, HalfBlock32, InvalidCharacter, InvalidLength, Subkey48
from des_tables import E, P, S, get_i6

ROUNDS = 16

BlockLike = Union[Block64, int, str, bytes]


class InvalidKeyFormat(BitStringError):
    """The master key is not a well-formed 64-bit value."""


class InvalidKeyLength(InvalidKeyFormat, InvalidLength):
    pass


class InvalidKeyCharacter(InvalidKeyFormat, InvalidCharacter):
    pass


class Ciphertext(NamedTuple):
    value: int
    bits: str


def generate_subkeys(key: Block64) -> Tuple[Subkey48, ...]:
    """
    Derive the 16 round subkeys: subkey r is the key shifted right by r
    bits, keeping the low 48 bits.
    """
    return tuple(Subkey48(int(key) >> r) for r in range(ROUNDS))


def substitute(block: Subkey48) -> HalfBlock32:
    """
    Run the eight 6-bit chunks of a 48-bit value through the S-box and
    concatenate the 4-bit outputs, first chunk in the high nibble.
    """
    value = int(block)
    ret = 0
    for i in range(8):
        ret = ret << 4 | S(get_i6(value, i))
    return HalfBlock32(ret)


def feistel(right: HalfBlock32, subkey: Subkey48) -> HalfBlock32:
    """
    Implements the round function: expand, mix with the subkey,
    substitute, permute.
    """
    if not isinstance(right, HalfBlock32):
        raise TypeError("feistel expects a HalfBlock32 half block")
    mixed = Subkey48(E(int(right))) ^ subkey
    return HalfBlock32(P(int(substitute(mixed))))


def feistel_round(left: HalfBlock32, right: HalfBlock32, subkey: Subkey48) -> Tuple[HalfBlock32, HalfBlock32]:
    """
    Perform a single Feistel round on 32-bit halves.
    """
    new_left = right
    new_right = left ^ feistel(right, subkey)
    return new_left, new_right


def initial_permutation(block: Block64) -> Block64:
    # Identity in this cipher
    return block


def final_permutation(block: Block64) -> Block64:
    # Identity in this cipher
    return block


def encode_block_rounds(block: Block64, subkeys: Sequence[Subkey48], rounds: int = ROUNDS) -> Block64:
    """
    Encode a 64-bit block using a configurable number of rounds.

    Parameters
    ----------
    block : Block64
        The plaintext block.
    subkeys : sequence of Subkey48
        Round subkeys, consumed in order.
    rounds : int
        How many rounds to apply. Values outside 1..len(subkeys) are
        clamped.

    Returns
    -------
    Block64
        The block after the chosen number of rounds, halves swapped.
    """
    keys_list = list(subkeys)
    if not keys_list:
        raise ValueError("subkeys must contain at least one subkey")
    rounds = max(1, min(rounds, len(keys_list)))

    left, right = initial_permutation(block).split()
    for subkey in keys_list[:rounds]:
        left, right = feistel_round(left, right, subkey)

    # The halves are swapped before the final permutation
    return final_permutation(Block64.join(right, left))


class Cipher:
    """
    Encrypt-only simplified DES bound to one master key.

    The key may be a Block64, an int, a 64-character bit string or 8 raw
    bytes. Subkeys are generated once, here.
    """

    def __init__(self, key: BlockLike):
        try:
            self.key = Block64.coerce(key)
        except InvalidLength as err:
            raise InvalidKeyLength(f"invalid key: {err}") from err
        except InvalidCharacter as err:
            raise InvalidKeyCharacter(f"invalid key: {err}") from err
        self.subkeys = generate_subkeys(self.key)

    def encode_block(self, block: BlockLike) -> Block64:
        return encode_block_rounds(Block64.coerce(block), self.subkeys, ROUNDS)

    def encode(self, plaintext: BlockLike) -> Ciphertext:
        """
        Encrypt one 64-bit block.

        :param plaintext: Block64, int, 64-character bit string or 8 bytes
        :ret: The ciphertext as an integer and as a bit string
        """
        out = self.encode_block(plaintext)
        return Ciphertext(int(out), out.to_bits())

    def trace(self, plaintext: BlockLike) -> List[Tuple[HalfBlock32, HalfBlock32]]:
        """
        The (L, R) halves before round 1 and after every round, 17 pairs.
        """
        left, right = initial_permutation(Block64.coerce(plaintext)).split()
        states = [(left, right)]
        for subkey in self.subkeys:
            left, right = feistel_round(left, right, subkey)
            states.append((left, right))
        return states

    def __repr__(self):
        return f"Cipher(key=0x{self.key.to_hex()})"
