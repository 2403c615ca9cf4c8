import argparse
import secrets

import pandas as pd
import matplotlib.pyplot as plt

import simple_des
from sbox_analysis import avalanche

TRIALS = 20
PAIRS = 50

def avalanche_frame(trials, num_pairs):
    x = range(1, simple_des.ROUNDS + 1)
    y = []
    for rounds in x:
        k = 0
        for _ in range(trials):
            # Fresh random key for every trial
            cipher = simple_des.Cipher(secrets.token_bytes(8))
            k += avalanche(cipher, num_pairs, rounds)
        k /= trials
        y.append(k)

    return pd.DataFrame({
        'Rounds': x,
        'Flipped_Bits': y
    })

def plot(df, output=None):
    plt.figure(figsize=(6, 6))
    plt.plot(df['Rounds'], df['Flipped_Bits'], marker='o', linestyle='-', color='red')
    plt.axhline(32, linestyle=':', color='gray')

    plt.xlabel('Number of Rounds', fontsize=12)
    plt.ylabel('Mean Ciphertext Bits Flipped (of 64)', fontsize=12)

    plt.ylim(0, 64)
    plt.xlim(1, simple_des.ROUNDS)

    plt.grid(True, linestyle='--', alpha=0.7)

    plt.tight_layout()
    if output:
        plt.savefig(output)
    else:
        plt.show()

if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument('--trials', type=int, default=TRIALS)
    parser.add_argument('--pairs', type=int, default=PAIRS)
    parser.add_argument('-o', '--output', help='save the figure instead of showing it')
    args = parser.parse_args()

    df = avalanche_frame(args.trials, args.pairs)
    print(df.to_string(index=False))
    plot(df, args.output)
