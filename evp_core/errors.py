# MIT License © 2025 Motohiro Suzuki
"""
evp_core/errors.py

Error taxonomy for key derivation.

- EvpError              : base of everything raised by this package
- InvalidArgumentError  : an input field failed validation (one subclass per field)
- ConfigError           : CLI / environment configuration is unusable
- OpenSSLHeaderError    : a "Salted__" header is present but truncated
"""

from __future__ import annotations


class EvpError(Exception):
    pass


class InvalidArgumentError(EvpError, ValueError):
    field: str = ""


class InvalidPasswordError(InvalidArgumentError, TypeError):
    field = "password"


class InvalidSaltError(InvalidArgumentError, TypeError):
    field = "salt"


class InvalidKeyBitsError(InvalidArgumentError):
    field = "key_bits"


class InvalidIvLengthError(InvalidArgumentError):
    field = "iv_length"


class ConfigError(EvpError):
    pass


class OpenSSLHeaderError(EvpError):
    pass
