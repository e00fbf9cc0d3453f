# MIT License © 2025 Motohiro Suzuki
"""
evp_core/config.py

CLI configuration.

Resolution order per field: command-line flag -> environment -> default.

Environment:
- EVP_PASSWORD   : password (utf-8)
- EVP_SALT_HEX   : 8-byte salt as 16 hex chars
- EVP_KEY_BITS   : key size in bits
- EVP_IV_LEN     : IV size in bytes
- EVP_LOG_LEVEL  : logging level name
"""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from crypto.openssl_header import read_salt_from_file
from diagnostics.logging_config import parse_log_level
from evp_core.errors import ConfigError

DEFAULT_KEY_BITS = 256
DEFAULT_IV_LEN = 16
DEFAULT_LOG_LEVEL = "WARNING"


def _hex_env(environ: Mapping[str, str], name: str) -> Optional[bytes]:
    v = environ.get(name, "").strip()
    if not v:
        return None
    try:
        return bytes.fromhex(v)
    except ValueError as e:
        raise ConfigError(f"{name} must be hex string, got {v!r}") from e


def _int_env(environ: Mapping[str, str], name: str, default: int) -> int:
    v = environ.get(name, "").strip()
    if not v:
        return default
    try:
        return int(v)
    except ValueError as e:
        raise ConfigError(f"{name} must be an integer, got {v!r}") from e


@dataclass(frozen=True)
class DeriveConfig:
    password: str
    salt: Optional[bytes]
    key_bits: int = DEFAULT_KEY_BITS
    iv_length: int = DEFAULT_IV_LEN
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_args(
        cls,
        ns: argparse.Namespace,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "DeriveConfig":
        env = os.environ if environ is None else environ

        password = ns.password if ns.password is not None else env.get("EVP_PASSWORD")
        if password is None:
            raise ConfigError("password required (--password or EVP_PASSWORD)")

        if ns.salt_hex is not None and ns.salt_from is not None:
            raise ConfigError("--salt-hex and --salt-from are mutually exclusive")
        if ns.salt_hex is not None:
            try:
                salt = bytes.fromhex(ns.salt_hex)
            except ValueError as e:
                raise ConfigError(f"--salt-hex must be hex string, got {ns.salt_hex!r}") from e
        elif ns.salt_from is not None:
            try:
                salt = read_salt_from_file(ns.salt_from)
            except OSError as e:
                raise ConfigError(f"cannot read {ns.salt_from}: {e}") from e
        else:
            salt = _hex_env(env, "EVP_SALT_HEX")

        key_bits = ns.bits if ns.bits is not None else _int_env(env, "EVP_KEY_BITS", DEFAULT_KEY_BITS)
        iv_length = ns.iv_len if ns.iv_len is not None else _int_env(env, "EVP_IV_LEN", DEFAULT_IV_LEN)
        log_level = ns.log_level or env.get("EVP_LOG_LEVEL", "").strip() or DEFAULT_LOG_LEVEL
        try:
            parse_log_level(log_level)
        except ValueError as e:
            raise ConfigError(str(e)) from e

        return cls(
            password=password,
            salt=salt,
            key_bits=key_bits,
            iv_length=iv_length,
            log_level=log_level.upper(),
        )
