from concurrent.futures import ThreadPoolExecutor

import pytest

import simple_des
from bitblock import Block64, HalfBlock32, InvalidCharacter, InvalidLength, Subkey48
from simple_des import Cipher, InvalidKeyFormat, encode_block_rounds, feistel, generate_subkeys

PLAINTEXT = "0001001000110100010101100111100010011010101111001101111011110001"
KEY = "0001001100110100010101110111100110011011101111001101111111110001"


def test_subkeys_are_shifted_key():
    subkeys = generate_subkeys(Block64(0x133457799BBCDFF1))
    assert len(subkeys) == 16
    assert all(isinstance(k, Subkey48) for k in subkeys)
    assert subkeys[0] == Subkey48(0x57799BBCDFF1)
    assert subkeys[1] == Subkey48(0x133457799BBCDFF1 >> 1)
    assert subkeys[15] == Subkey48(0x2668AEF33779)


def test_subkeys_are_deterministic():
    key = Block64(0xFEDCBA9876543210)
    assert generate_subkeys(key) == generate_subkeys(key)
    assert Cipher(key).subkeys == Cipher(int(key)).subkeys


def test_feistel_on_zero_input():
    # S-box entry (0, 0) is 14 for every chunk, then P
    assert feistel(HalfBlock32(0), Subkey48(0)) == HalfBlock32(0x59FF97FD)
    assert simple_des.substitute(Subkey48(0)) == HalfBlock32(0xEEEEEEEE)


def test_feistel_rejects_wrong_widths():
    with pytest.raises(TypeError):
        feistel(Subkey48(0), Subkey48(0))
    with pytest.raises(TypeError):
        feistel(HalfBlock32(0), HalfBlock32(0))


@pytest.mark.parametrize("bit", range(32))
def test_single_bit_flip_changes_round_function(bit):
    key = Cipher(KEY).subkeys[0]
    right = Block64.from_bits(PLAINTEXT).split()[1]
    flipped = right.with_bit(bit, 1 - right[bit])
    assert feistel(right, key) != feistel(flipped, key)


def test_all_zero_vector():
    ciphertext = Cipher("0" * 64).encode("0" * 64)
    assert ciphertext.value == 0x82C23DAF34C34096
    assert ciphertext.bits == "1000001011000010001111011010111100110100110000110100000010010110"
    assert Cipher(0).encode(0) == ciphertext


def test_lab_vector():
    ciphertext = Cipher(KEY).encode(PLAINTEXT)
    assert ciphertext.value == 0x39F45F130C549051
    assert ciphertext.bits == format(0x39F45F130C549051, "064b")


def test_key_forms_are_equivalent():
    expected = Cipher(KEY).encode(PLAINTEXT)
    assert Cipher(0x133457799BBCDFF1).encode(0x123456789ABCDEF1) == expected
    assert Cipher(bytes.fromhex("133457799BBCDFF1")).encode(Block64(0x123456789ABCDEF1)) == expected


def test_instances_agree():
    plaintext = 0x0123456789ABCDEF
    assert Cipher(KEY).encode(plaintext) == Cipher(KEY).encode(plaintext)
    cipher = Cipher(KEY)
    assert cipher.encode(plaintext) == cipher.encode(plaintext)


def test_key_of_wrong_length():
    with pytest.raises(InvalidLength) as excinfo:
        Cipher(KEY + "10101")
    assert isinstance(excinfo.value, InvalidKeyFormat)
    with pytest.raises(InvalidLength):
        Cipher(b"short")


def test_key_with_bad_characters():
    with pytest.raises(InvalidCharacter) as excinfo:
        Cipher(KEY[:-1] + "x")
    assert isinstance(excinfo.value, InvalidKeyFormat)


def test_plaintext_is_validated():
    cipher = Cipher(KEY)
    with pytest.raises(InvalidLength):
        cipher.encode(PLAINTEXT[:-1])
    with pytest.raises(InvalidCharacter):
        cipher.encode("2" * 64)


def test_encode_block_accepts_block_forms():
    cipher = Cipher(KEY)
    expected = Block64(0x39F45F130C549051)
    assert cipher.encode_block(Block64.from_bits(PLAINTEXT)) == expected
    assert cipher.encode_block(0x123456789ABCDEF1) == expected
    assert cipher.encode_block(PLAINTEXT) == expected
    with pytest.raises(InvalidLength):
        cipher.encode_block(PLAINTEXT + "0")


def test_trace():
    cipher = Cipher(KEY)
    states = cipher.trace(PLAINTEXT)
    assert len(states) == 17
    assert states[0] == Block64.from_bits(PLAINTEXT).split()
    for (l0, r0), (l1, r1), key in zip(states, states[1:], cipher.subkeys):
        assert l1 == r0
        assert r1 == l0 ^ feistel(r0, key)
    left, right = states[-1]
    assert Block64.join(right, left) == Block64(cipher.encode(PLAINTEXT).value)


def test_one_round():
    subkeys = generate_subkeys(Block64(0))
    assert encode_block_rounds(Block64(0), subkeys, 1) == Block64(0x59FF97FD00000000)


def test_rounds_are_clamped():
    subkeys = generate_subkeys(Block64(0))
    assert encode_block_rounds(Block64(0), subkeys, 0) == encode_block_rounds(Block64(0), subkeys, 1)
    assert encode_block_rounds(Block64(0), subkeys, 99) == Block64(0x82C23DAF34C34096)
    with pytest.raises(ValueError):
        encode_block_rounds(Block64(0), [], 16)


def test_permutations_are_identity():
    block = Block64(0x0123456789ABCDEF)
    assert simple_des.initial_permutation(block) == block
    assert simple_des.final_permutation(block) == block


def test_concurrent_encoding():
    cipher = Cipher(KEY)
    plaintexts = list(range(0, 2 ** 64, 2 ** 58))
    expected = [cipher.encode(pt) for pt in plaintexts]
    with ThreadPoolExecutor(max_workers=4) as pool:
        assert list(pool.map(cipher.encode, plaintexts)) == expected
