# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

import logging
import sys


def parse_log_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    if not isinstance(level, int):
        raise ValueError(f"unknown log level {name!r}")
    return level


def setup_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=parse_log_level(level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
