# MIT License © 2025 Motohiro Suzuki
"""
diagnostics/selftest.py

Known-answer self test (ALWAYS prints results)

Checks:
- MD5 primitive (hashlib) agrees with the pyca/cryptography backend
- EVP_BytesToKey known vectors (openssl enc -md md5 -P)

Run:
  python3 -m diagnostics.selftest
  python3 -m diagnostics.selftest 2>&1 | tee selftest.txt
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import List, Optional

from crypto.digest import md5, md5_cryptography
from evp_core.key import derive_key


@dataclass(frozen=True)
class Vector:
    password: bytes
    salt: Optional[bytes]
    key_bits: int
    iv_length: int
    key_hex: str
    iv_hex: Optional[str] = None


VECTORS: List[Vector] = [
    Vector(b"password", None, 128, 0, "5f4dcc3b5aa765d61d8327deb882cf99"),
    Vector(
        b"password",
        None,
        256,
        0,
        "5f4dcc3b5aa765d61d8327deb882cf992b95990a9151374abd8ff8c5a7a0fe08",
    ),
    Vector(
        b"password",
        b"saltsalt",
        256,
        16,
        "fdbdf3419fff98bdb0241390f62a9db35f4aba29d77566377997314ebfc709f2",
        "0b5ca7b1081f94b1ac12e3c8ba87d05a",
    ),
]


@dataclass
class SelfTestStats:
    digest_checked: int = 0
    digest_mismatch: int = 0
    vectors_ok: int = 0
    vectors_failed: int = 0
    failures: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.digest_mismatch == 0 and self.vectors_failed == 0


def check_digest(stats: SelfTestStats, iters: int = 256) -> None:
    for i in range(iters):
        data = os.urandom(i)
        stats.digest_checked += 1
        if md5(data) != md5_cryptography(data):
            stats.digest_mismatch += 1
            stats.failures.append(f"md5 mismatch len={i}")


def check_vectors(stats: SelfTestStats, vectors: List[Vector] = VECTORS) -> None:
    for v in vectors:
        m = derive_key(v.password, v.salt, v.key_bits, v.iv_length)
        if m.key_hex == v.key_hex and m.iv_hex == v.iv_hex:
            stats.vectors_ok += 1
        else:
            stats.vectors_failed += 1
            stats.failures.append(
                f"vector bits={v.key_bits} iv={v.iv_length} salted={v.salt is not None}: "
                f"key={m.key_hex} iv={m.iv_hex}"
            )


def run_selftest() -> SelfTestStats:
    stats = SelfTestStats()
    check_digest(stats)
    check_vectors(stats)
    return stats


def main() -> int:
    stats = run_selftest()
    print("=== EVP_BytesToKey selftest ===")
    print(f"digest_checked : {stats.digest_checked}")
    print(f"digest_mismatch: {stats.digest_mismatch}")
    print(f"vectors_ok     : {stats.vectors_ok}")
    print(f"vectors_failed : {stats.vectors_failed}")
    for f in stats.failures:
        print(f"  FAIL {f}")
    print("RESULT         : " + ("OK" if stats.ok else "FAILED"))
    return 0 if stats.ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
