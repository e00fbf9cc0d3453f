# MIT License © 2025 Motohiro Suzuki
"""
crypto/openssl_header.py

`openssl enc` output layout (salted):

- magic : b"Salted__"  (8 bytes)
- salt  : 8 bytes
- body  : ciphertext

With -nosalt the magic is absent and the whole blob is ciphertext.
Only the salt is recovered here; nothing is decrypted.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Tuple

from evp_core.errors import OpenSSLHeaderError

SALTED_MAGIC = b"Salted__"
SALT_LEN = 8
_HEADER_LEN = len(SALTED_MAGIC) + SALT_LEN


def split_salted(blob: bytes) -> Tuple[Optional[bytes], bytes]:
    b = bytes(blob)
    if not b.startswith(SALTED_MAGIC):
        return None, b
    if len(b) < _HEADER_LEN:
        raise OpenSSLHeaderError(
            f"salted header truncated: need {_HEADER_LEN} bytes, got {len(b)}"
        )
    return b[len(SALTED_MAGIC) : _HEADER_LEN], b[_HEADER_LEN:]


def read_salt_from_file(path: str | Path) -> Optional[bytes]:
    with open(path, "rb") as f:
        head = f.read(_HEADER_LEN)
    salt, _ = split_salted(head)
    return salt
