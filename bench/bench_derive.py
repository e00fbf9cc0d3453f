# MIT License © 2025 Motohiro Suzuki
"""
bench/bench_derive.py

EVP_BytesToKey derivation benchmark

- derives key+iv for a fixed password/salt in a loop
- checks every result against the first one (determinism)

Run:
  python3 -m bench.bench_derive
  python3 -m bench.bench_derive --n 50000 --bits 256 --iv-len 16
"""

from __future__ import annotations

import argparse
import time

from evp_core.key import KeyDeriver


def run_bench(n: int, warmup: int, bits: int, iv_len: int) -> None:
    kd = KeyDeriver()
    password = b"bench-password"
    salt = b"\x5a" * 8

    ref = kd.derive(password, salt, bits, iv_len)
    for _ in range(max(0, warmup)):
        kd.derive(password, salt, bits, iv_len)

    t0 = time.perf_counter()
    for i in range(n):
        m = kd.derive(password, salt, bits, iv_len)
        if m != ref:
            raise RuntimeError(f"derivation diverged at i={i}")
    t1 = time.perf_counter()

    dt = max(1e-12, (t1 - t0))

    print("=== bench_derive ===")
    print(f"loops        : {n}")
    print(f"warmup       : {warmup}")
    print(f"key_bits     : {bits}")
    print(f"iv_length    : {iv_len}")
    print(f"elapsed_sec  : {dt:.6f}")
    print(f"ops_per_sec  : {n / dt:.1f} derive/s")


def main() -> None:
    ap = argparse.ArgumentParser()
    ap.add_argument("--n", type=int, default=20000, help="number of derivations")
    ap.add_argument("--warmup", type=int, default=100, help="warmup loops (not counted)")
    ap.add_argument("--bits", type=int, default=256, help="key size in bits")
    ap.add_argument("--iv-len", type=int, default=16, help="IV size in bytes")
    args = ap.parse_args()

    if args.n <= 0:
        raise SystemExit("--n must be > 0")
    if args.warmup < 0:
        raise SystemExit("--warmup must be >= 0")

    run_bench(n=args.n, warmup=args.warmup, bits=args.bits, iv_len=args.iv_len)


if __name__ == "__main__":
    main()
