# MIT License © 2025 Motohiro Suzuki
"""
run_derive.py

Derive an openssl-enc compatible key/IV (EVP_BytesToKey, MD5, 1 round)
and print it the way `openssl enc -P` does.

How to run:
  python3 run_derive.py --password password --salt-hex 73616c7473616c74 --bits 256 --iv-len 16
  python3 run_derive.py --password password --salt-from secret.enc
  EVP_PASSWORD=password python3 run_derive.py --bits 128 --iv-len 0
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Mapping, Optional, Sequence, TextIO

from diagnostics.logging_config import setup_logging
from evp_core.config import DeriveConfig
from evp_core.errors import EvpError
from evp_core.key import DerivedMaterial, derive_key
from evp_core.version import __version__

log = logging.getLogger("run_derive")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="run_derive",
        description="openssl enc compatible EVP_BytesToKey (MD5, single round)",
    )
    ap.add_argument("--password", default=None, help="password (or EVP_PASSWORD)")
    ap.add_argument("--salt-hex", default=None, help="8-byte salt as hex (or EVP_SALT_HEX)")
    ap.add_argument("--salt-from", default=None, help="read salt from an openssl enc 'Salted__' file")
    ap.add_argument("--bits", type=int, default=None, help="key size in bits (default 256)")
    ap.add_argument("--iv-len", type=int, default=None, help="IV size in bytes (default 16)")
    ap.add_argument("--log-level", default=None, help="logging level (default WARNING)")
    ap.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return ap


def format_material(salt: Optional[bytes], m: DerivedMaterial) -> list[str]:
    lines = []
    if salt is not None:
        lines.append(f"salt={salt.hex().upper()}")
    lines.append(f"key={m.key_hex.upper()}")
    if m.iv_hex is not None:
        lines.append(f"iv ={m.iv_hex.upper()}")
    return lines


def main(
    argv: Optional[Sequence[str]] = None,
    environ: Optional[Mapping[str, str]] = None,
    out: TextIO = sys.stdout,
) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    try:
        cfg = DeriveConfig.from_args(args, environ)
    except EvpError as e:
        ap.error(str(e))

    setup_logging(cfg.log_level)
    log.info("deriving key_bits=%d iv_length=%d", cfg.key_bits, cfg.iv_length)

    try:
        m = derive_key(os.fsencode(cfg.password), cfg.salt, cfg.key_bits, cfg.iv_length)
    except EvpError as e:
        ap.error(str(e))

    for line in format_material(cfg.salt, m):
        print(line, file=out)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
