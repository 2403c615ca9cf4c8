import argparse
import random
from typing import List, Tuple

import des_tables
import simple_des
from bitblock import BitStringError, Block64, HalfBlock32, InvalidLength, Subkey48, hamming_distance

# Default demo vectors
DEFAULT_PLAINTEXT = "0001001000110100010101100111100010011010101111001101111011110001"
DEFAULT_KEY = "0001001100110100010101110111100110011011101111001101111111110001"

BLOCK_HELP = "64-character bit string, or hex of up to 16 digits (strings of 16 characters or fewer are always hex)"

# Functions for the S-box difference distribution table

def get_ddt() -> List[List[int]]:
    ddt = [[0 for _ in range(16)] for _ in range(64)]
    for x in range(64):
        for x_diff in range(64):
            x_ = x ^ x_diff
            y = des_tables.S(x)
            y_ = des_tables.S(x_)
            ddt[x_diff][y ^ y_] += 1
    return ddt

def get_best_characteristic(ddt: List[List[int]]) -> Tuple[int, int]:
    # Only differences in the four middle bits, which E never duplicates
    ret = (-1, -1)
    max_prob = -1
    for x in range(1, 16):
        for y in range(16):
            if ddt[x << 1][y] > max_prob:
                ret = (x << 1, y)
                max_prob = ddt[x << 1][y]
    return ret

# Functions for generating plaintext pairs and measuring diffusion

def generate_plaintext_pairs(in_diff: int, n: int) -> List[Tuple[int, int]]:
    ret = []
    for _ in range(n):
        pt = random.randrange(2 ** 64)
        ret.append((pt, pt ^ in_diff))
    return ret

def feistel_flip_distance(right: int, subkey: int, bit: int) -> int:
    """
    Number of output bits of the round function that change when one
    input bit of the right half is flipped.
    """
    r = HalfBlock32(right)
    k = Subkey48(subkey)
    out = simple_des.feistel(r, k)
    out_ = simple_des.feistel(r.with_bit(bit, 1 - r[bit]), k)
    return hamming_distance(out, out_)

def avalanche(cipher: simple_des.Cipher, num_pairs: int, rounds: int = simple_des.ROUNDS) -> float:
    """
    Mean number of ciphertext bits flipped by a single plaintext bit flip,
    over num_pairs random plaintexts and reduced to the given rounds.
    """
    if num_pairs <= 0:
        raise ValueError("num_pairs must be positive")
    total = 0
    for _ in range(num_pairs):
        bit = random.randrange(64)
        pt1, pt2 = generate_plaintext_pairs(1 << (63 - bit), 1)[0]
        ct1 = simple_des.encode_block_rounds(Block64(pt1), cipher.subkeys, rounds)
        ct2 = simple_des.encode_block_rounds(Block64(pt2), cipher.subkeys, rounds)
        total += hamming_distance(ct1, ct2)
    return total / num_pairs

def parse_block(text: str) -> Block64:
    """
    Read a 64-bit block given as a bit string or as hex (optionally 0x-prefixed).

    Only strings longer than 16 characters made of 0 and 1 are taken as bit
    strings; anything of 16 characters or fewer is hex, so
    "0000000000000001" reads as 0x1.
    """
    text = text.strip().replace("_", "")
    if len(text) > 16 and set(text) <= {"0", "1"}:
        return Block64.from_bits(text)
    digits = text[2:] if text.lower().startswith("0x") else text
    try:
        value = int(digits, 16)
    except ValueError:
        raise BitStringError(f"not a bit string or hex value: {text!r}") from None
    if value >> 64:
        raise InvalidLength(f"value does not fit in 64 bits: {text!r}")
    return Block64(value)

#
# Run a demo of the cipher and its diffusion
#

def run_demo(key: Block64, plaintext: Block64, num_pairs: int, verbose: bool = False):
    # Look for the strongest S-box characteristic
    print()
    print("Generating difference distribution table...")
    ddt = get_ddt()
    in_diff, out_diff = get_best_characteristic(ddt)
    print(f"Best characteristic: {in_diff:02x} -> {out_diff:01x} ({ddt[in_diff][out_diff]}/64)")
    print()

    # Build the cipher and show its subkeys
    cipher = simple_des.Cipher(key)
    print(f"First round subkey: {cipher.subkeys[0].to_hex()}")
    if verbose:
        for i, sk in enumerate(cipher.subkeys):
            print(f"  K{i+1:2d}: {sk.to_hex()}")
    print()

    # Encrypt
    ciphertext = cipher.encode(plaintext)
    if verbose:
        for r, (left, right) in enumerate(cipher.trace(plaintext)):
            print(f"  L{r} = {left.to_hex()}, R{r} = {right.to_hex()}")
        print()
    print(f"Plaintext : {plaintext.to_bits()}")
    print(f"Key       : {key.to_bits()}")
    print(f"Ciphertext: {ciphertext.bits}")
    print(f"           (0x{ciphertext.value:016X})")
    print()

    # One bit of R0 through the first round function
    left, right = plaintext.split()
    flips = [feistel_flip_distance(int(right), int(cipher.subkeys[0]), bit) for bit in range(32)]
    print(f"Round-1 f output: {min(flips)}..{max(flips)} bits change per flipped R0 bit")
    print()

    # Diffusion over increasing round counts
    print(f"Measuring avalanche over {num_pairs} single-bit plaintext flips...")
    for rounds in (1, 2, 4, 8, simple_des.ROUNDS):
        print(f"\t{rounds:2d} rounds: {avalanche(cipher, num_pairs, rounds):5.2f}/64 bits flipped")
    print()

#
# Run code
#

if __name__ == "__main__":
    # Parse command line arguments for demo settings
    parser = argparse.ArgumentParser()
    parser.add_argument('--key', default=DEFAULT_KEY, help=BLOCK_HELP)
    parser.add_argument('--plaintext', default=DEFAULT_PLAINTEXT, help=BLOCK_HELP)
    parser.add_argument('--pairs', type=int, default=100)
    parser.add_argument('-v', '--verbose', action='store_true')
    args = parser.parse_args()

    try:
        key = parse_block(args.key)
        plaintext = parse_block(args.plaintext)
    except BitStringError as err:
        parser.error(str(err))
    if args.pairs <= 0:
        parser.error("--pairs must be positive")

    run_demo(key, plaintext, args.pairs, args.verbose)
