# MIT License © 2025 Motohiro Suzuki
"""
crypto/digest.py

MD5 primitive for the legacy EVP_BytesToKey stretch.

- md5()              : hashlib, usedforsecurity=False (FIPS builds refuse plain md5)
- md5_cryptography() : same digest through pyca/cryptography (cross-check only)
"""

from __future__ import annotations

import hashlib

from cryptography.hazmat.primitives import hashes

DIGEST_SIZE = 16


def md5(data: bytes) -> bytes:
    return hashlib.md5(bytes(data), usedforsecurity=False).digest()


def md5_cryptography(data: bytes) -> bytes:
    h = hashes.Hash(hashes.MD5())
    h.update(bytes(data))
    return h.finalize()
