# MIT License © 2025 Motohiro Suzuki
"""
evp_core/key.py

EVP_BytesToKey (openssl enc compatible) key + IV derivation.

Stream:
  D_0 = b""
  D_i = MD5(D_{i-1} || password || salt)
  out = D_1 || D_2 || ...   until len(out) >= key_bits/8 + iv_length

Slicing:
  key = out[:key_bits/8]
  iv  = out[key_bits/8 : key_bits/8 + iv_length]   (only when iv_length > 0)

Single round, MD5 only. This exists for interoperability with legacy
`openssl enc` material; do not use it for new designs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from crypto.digest import DIGEST_SIZE, md5
from evp_core.errors import (
    InvalidIvLengthError,
    InvalidKeyBitsError,
    InvalidPasswordError,
    InvalidSaltError,
)

log = logging.getLogger(__name__)

SALT_LEN = 8


def _is_int(x: Any) -> bool:
    # bool is an int subclass; True/False are never a size
    return isinstance(x, int) and not isinstance(x, bool)


def validate_password(password: Any) -> bytes:
    if isinstance(password, str):
        # surrogateescape: argv/environ bytes that were not valid utf-8 hash as the raw bytes
        try:
            return password.encode("utf-8", errors="surrogateescape")
        except UnicodeEncodeError as e:
            raise InvalidPasswordError(f"password is not encodable as utf-8: {e.reason}") from e
    if isinstance(password, (bytes, bytearray, memoryview)):
        return bytes(password)
    raise InvalidPasswordError(
        f"password must be bytes or str, got {type(password).__name__}"
    )


def validate_salt(salt: Any) -> Optional[bytes]:
    if salt is None:
        return None
    if not isinstance(salt, (bytes, bytearray, memoryview)) or len(bytes(salt)) != SALT_LEN:
        raise InvalidSaltError(f"salt must be {SALT_LEN} bytes or None")
    return bytes(salt)


def validate_key_bits(key_bits: Any) -> int:
    if not _is_int(key_bits) or key_bits < 0 or key_bits % 8 != 0:
        raise InvalidKeyBitsError(
            f"key_bits must be a non-negative int divisible by 8, got {key_bits!r}"
        )
    return key_bits


def validate_iv_length(iv_length: Any) -> int:
    if not _is_int(iv_length) or iv_length < 0:
        raise InvalidIvLengthError(
            f"iv_length must be a non-negative int, got {iv_length!r}"
        )
    return iv_length


@dataclass(frozen=True)
class DerivationRequest:
    password: bytes
    salt: Optional[bytes]
    key_bits: int
    iv_length: int

    @classmethod
    def create(cls, password: Any, salt: Any, key_bits: Any, iv_length: Any) -> "DerivationRequest":
        # order matters: callers get the first invalid field
        return cls(
            password=validate_password(password),
            salt=validate_salt(salt),
            key_bits=validate_key_bits(key_bits),
            iv_length=validate_iv_length(iv_length),
        )

    @property
    def key_len(self) -> int:
        return self.key_bits // 8

    @property
    def total_len(self) -> int:
        return self.key_len + self.iv_length


@dataclass(frozen=True)
class DerivedMaterial:
    key: bytes
    iv: Optional[bytes] = None

    @property
    def key_hex(self) -> str:
        return self.key.hex()

    @property
    def iv_hex(self) -> Optional[str]:
        return self.iv.hex() if self.iv is not None else None


def stretch(password: bytes, salt: Optional[bytes], length: int) -> bytes:
    """
    Chain MD5 digests until at least `length` bytes exist.
    Returns the whole stream (a multiple of 16 bytes, possibly longer than `length`).
    """
    tail = password + (salt or b"")
    out = bytearray()
    prev = b""
    while len(out) < length:
        prev = md5(prev + tail)
        out += prev
    return bytes(out)


class KeyDeriver:
    """
    Stateless; one instance may be shared across threads.
    """

    def derive(
        self,
        password: Any,
        salt: Any,
        key_bits: Any,
        iv_length: Any,
    ) -> DerivedMaterial:
        req = DerivationRequest.create(password, salt, key_bits, iv_length)
        return self.derive_request(req)

    def derive_request(self, req: DerivationRequest) -> DerivedMaterial:
        n = req.key_len
        stream = stretch(req.password, req.salt, req.total_len)
        log.debug(
            "derived key_bits=%d iv_length=%d salted=%s rounds=%d",
            req.key_bits,
            req.iv_length,
            req.salt is not None,
            len(stream) // DIGEST_SIZE,
        )

        iv = None
        if req.iv_length > 0:
            iv = stream[n : n + req.iv_length]
        return DerivedMaterial(key=stream[:n], iv=iv)


def derive_key(
    password: Any,
    salt: Any = None,
    key_bits: Any = None,
    iv_length: Any = None,
) -> DerivedMaterial:
    return KeyDeriver().derive(password, salt, key_bits, iv_length)
