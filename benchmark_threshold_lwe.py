#!/usr/bin/env python3
"""
benchmark_threshold_lwe.py - Benchmark single-party and threshold LWE

For each security parameter n in [start_n, start_n + steps):
- Single-party: keygen, encrypt, decrypt
- Threshold (N-party DKG): keygen, encrypt, decrypt

Metrics:
- Wall-clock time per phase (μs), averaged over --iterations
- Decryption correctness (single-party bit and agreement of all participants)
- Resident memory after each round (psutil)

Outputs a summary table, ASCII bar charts, a CSV file and a JSON file.
"""

import csv
import json
import os
import sys
import time
from dataclasses import asdict, dataclass
from typing import List, Optional

import psutil

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.randomness import DeterministicRandomSource, SystemRandomSource
from modes.threshold_lwe import Coordinator, GaussianNoise, LweScheme, SchemeParameters


INIT_N = 12
STEPS = 4
COMMITTEE_SIZE = 5

CSV_COLUMNS = [
    "n",
    "keygen",
    "encrypt",
    "decrypt",
    "dealer",
    "dealer_encrypt",
    "dealer_decrypt",
]


# ============================================================================
# DATA STRUCTURES
# ============================================================================

@dataclass
class RoundMetrics:
    """Timings (μs) and correctness for one value of n"""
    n: int
    m: int
    committee_size: int

    keygen_us: float
    encrypt_us: float
    decrypt_us: float

    dealer_us: float
    dealer_encrypt_us: float
    dealer_decrypt_us: float

    single_correct: int
    threshold_correct: int
    iterations: int

    memory_mb: float = 0.0


def _us(seconds: float) -> float:
    return seconds * 1_000_000


# ============================================================================
# BENCHMARK
# ============================================================================

def benchmark_round(n: int, committee_size: int, iterations: int = 1,
                    seed: Optional[int] = None) -> RoundMetrics:
    """
    Benchmark one security parameter.

    Args:
        n: Security parameter (m = n³, q = 2^n)
        committee_size: N participants in the threshold run
        iterations: Encrypt/decrypt repetitions per phase
        seed: Deterministic seed (None → system CSPRNG)

    Returns:
        RoundMetrics
    """
    params = SchemeParameters(n)
    rng = DeterministicRandomSource(seed) if seed is not None else SystemRandomSource()
    noise_seed = None if seed is None else seed + n

    print(f"\n{'='*80}")
    print(f"ROUND: n={n}, m={params.m}, q=2^{n}, committee={committee_size}")
    print(f"{'='*80}")

    # Single-party
    print(f"\n[1/2] Standard LWE...", end=" ", flush=True)
    crypto = LweScheme(params, rng=rng, noise=GaussianNoise(params.noise_sigma, seed=noise_seed))

    t0 = time.perf_counter()
    pk, sk = crypto.keygen()
    keygen_time = time.perf_counter() - t0

    encrypt_time = 0.0
    decrypt_time = 0.0
    single_correct = 0
    for _ in range(iterations):
        bit = rng.randbits(1)

        t0 = time.perf_counter()
        c = crypto.encrypt(pk, bit)
        encrypt_time += time.perf_counter() - t0

        t0 = time.perf_counter()
        d = crypto.decrypt(sk, c)
        decrypt_time += time.perf_counter() - t0

        single_correct += int(d == bit)

    print(f"✓ ({single_correct}/{iterations} correct)")

    # Threshold
    print(f"[2/2] Threshold LWE ({committee_size} parties)...", end=" ", flush=True)
    t0 = time.perf_counter()
    dealer = Coordinator(committee_size, n, rng=rng,
                         noise=GaussianNoise(params.noise_sigma, seed=noise_seed))
    dealer_time = time.perf_counter() - t0

    dealer_encrypt_time = 0.0
    dealer_decrypt_time = 0.0
    threshold_correct = 0
    for _ in range(iterations):
        bit = rng.randbits(1)

        t0 = time.perf_counter()
        c = dealer.encrypt(bit)
        dealer_encrypt_time += time.perf_counter() - t0

        t0 = time.perf_counter()
        res = dealer.decrypt(c)
        dealer_decrypt_time += time.perf_counter() - t0

        threshold_correct += int(all(r == bit for _, r in res))

    print(f"✓ ({threshold_correct}/{iterations} correct, all parties agreeing)")

    memory_mb = psutil.Process().memory_info().rss / (1024 * 1024)

    return RoundMetrics(
        n=n,
        m=params.m,
        committee_size=committee_size,
        keygen_us=_us(keygen_time),
        encrypt_us=_us(encrypt_time / iterations),
        decrypt_us=_us(decrypt_time / iterations),
        dealer_us=_us(dealer_time),
        dealer_encrypt_us=_us(dealer_encrypt_time / iterations),
        dealer_decrypt_us=_us(dealer_decrypt_time / iterations),
        single_correct=single_correct,
        threshold_correct=threshold_correct,
        iterations=iterations,
        memory_mb=memory_mb,
    )


def create_bar_chart(values, labels, title, max_width=60, unit="ms"):
    """ASCII bar chart"""
    print(f"\n{title}")
    print("="*80)

    max_val = max(values) if values else 0

    for label, val in zip(labels, values):
        bar_len = int((val / max_val) * max_width) if max_val > 0 else 0
        bar = "█" * bar_len
        print(f"{label:<12} {bar} {val:.2f}{unit}")

    print()


def write_csv(results: List[RoundMetrics], path: str) -> None:
    with open(path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(CSV_COLUMNS)
        for r in results:
            writer.writerow([
                r.n,
                int(r.keygen_us),
                int(r.encrypt_us),
                int(r.decrypt_us),
                int(r.dealer_us),
                int(r.dealer_encrypt_us),
                int(r.dealer_decrypt_us),
            ])


def run_full_benchmark(start_n: int = INIT_N, steps: int = STEPS,
                       committee_size: int = COMMITTEE_SIZE, iterations: int = 1,
                       seed: Optional[int] = None, output_dir: str = "results") -> List[RoundMetrics]:
    """
    Run benchmark_round for n = start_n .. start_n + steps - 1.

    Args:
        start_n: First security parameter
        steps: Number of consecutive values of n
        committee_size: Threshold committee size
        iterations: Encrypt/decrypt repetitions per round
        seed: Deterministic seed or None
        output_dir: Directory for CSV / JSON results

    Returns:
        List of RoundMetrics
    """
    print("\n" + "="*80)
    print("THRESHOLD LWE BENCHMARK")
    print("="*80)
    print(f"Configuration: n={start_n}..{start_n + steps - 1}, committee={committee_size}, "
          f"iterations={iterations}, seed={seed}")

    results = [benchmark_round(n, committee_size, iterations, seed)
               for n in range(start_n, start_n + steps)]

    # Summary table
    print("\n" + "="*80)
    print("SUMMARY TABLE (μs)")
    print("="*80)
    print(f"{'n':<6} {'KeyGen':<12} {'Enc':<10} {'Dec':<10} {'DKG':<14} {'T-Enc':<10} {'T-Dec':<10} {'Mem(MB)':<8}")
    print("-"*80)
    for r in results:
        print(f"{r.n:<6} {r.keygen_us:<12.0f} {r.encrypt_us:<10.0f} {r.decrypt_us:<10.0f} "
              f"{r.dealer_us:<14.0f} {r.dealer_encrypt_us:<10.0f} {r.dealer_decrypt_us:<10.0f} "
              f"{r.memory_mb:<8.1f}")
    print("-"*80)

    labels = [f"n={r.n}" for r in results]
    create_bar_chart([r.keygen_us / 1000 for r in results], labels, "1. STANDARD KEYGEN (ms)")
    create_bar_chart([r.dealer_us / 1000 for r in results], labels, "2. DISTRIBUTED KEYGEN (ms)")
    create_bar_chart([r.dealer_decrypt_us / 1000 for r in results], labels, "3. THRESHOLD DECRYPT (ms)")

    os.makedirs(output_dir, exist_ok=True)
    csv_path = os.path.join(output_dir, "benchmark_threshold_lwe.csv")
    json_path = os.path.join(output_dir, "benchmark_threshold_lwe.json")
    write_csv(results, csv_path)
    with open(json_path, 'w') as f:
        json.dump([asdict(r) for r in results], f, indent=2)

    print(f"\n✓ Results saved to: {csv_path}, {json_path}")

    return results


if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description="Single-party vs threshold LWE benchmark")
    parser.add_argument("--start-n", type=int, default=INIT_N, help="First security parameter n")
    parser.add_argument("--steps", type=int, default=STEPS, help="Number of consecutive n values")
    parser.add_argument("--committee-size", type=int, default=COMMITTEE_SIZE, help="Threshold committee size N")
    parser.add_argument("--iterations", type=int, default=1, help="Encrypt/decrypt repetitions per round")
    parser.add_argument("--seed", type=int, default=None, help="Deterministic seed (benchmarks only)")
    parser.add_argument("--output", default="results")

    args = parser.parse_args()

    run_full_benchmark(args.start_n, args.steps, args.committee_size,
                       args.iterations, args.seed, args.output)

    print("\n" + "="*80)
    print("✅ BENCHMARK COMPLETE!")
    print("="*80)
