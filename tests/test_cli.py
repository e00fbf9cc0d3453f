# MIT License © 2025 Motohiro Suzuki
from __future__ import annotations

import argparse
import hashlib
import io
import os

import pytest

import run_derive
from crypto.openssl_header import SALTED_MAGIC
from diagnostics.logging_config import parse_log_level
from diagnostics.selftest import run_selftest
from evp_core.config import DeriveConfig
from evp_core.errors import ConfigError
from evp_core.version import __version__

KEY = "FDBDF3419FFF98BDB0241390F62A9DB35F4ABA29D77566377997314EBFC709F2"
IV = "0B5CA7B1081F94B1AC12E3C8BA87D05A"


def _run(argv: list[str], environ: dict[str, str] | None = None) -> list[str]:
    out = io.StringIO()
    rc = run_derive.main(argv, environ or {}, out)
    assert rc == 0
    return out.getvalue().splitlines()


def test_cli_prints_openssl_style() -> None:
    lines = _run(["--password", "password", "--salt-hex", "73616c7473616c74"])
    assert lines == ["salt=73616C7473616C74", f"key={KEY}", f"iv ={IV}"]


def test_cli_env_fallback() -> None:
    lines = _run(
        ["--iv-len", "0"],
        {"EVP_PASSWORD": "password", "EVP_KEY_BITS": "128"},
    )
    assert lines == ["key=5F4DCC3B5AA765D61D8327DEB882CF99"]


def test_cli_salt_from_file(tmp_path) -> None:
    p = tmp_path / "secret.enc"
    p.write_bytes(SALTED_MAGIC + b"saltsalt" + b"\x00" * 16)
    lines = _run(["--password", "password", "--salt-from", str(p)])
    assert lines[1:] == [f"key={KEY}", f"iv ={IV}"]


def test_cli_rejects_bad_salt(capsys) -> None:
    with pytest.raises(SystemExit) as ei:
        run_derive.main(["--password", "password", "--salt-hex", "abcd"], {}, io.StringIO())
    assert ei.value.code == 2
    assert "salt" in capsys.readouterr().err


def test_cli_requires_password(capsys) -> None:
    with pytest.raises(SystemExit) as ei:
        run_derive.main([], {}, io.StringIO())
    assert ei.value.code == 2
    assert "password" in capsys.readouterr().err


def test_cli_version(capsys) -> None:
    with pytest.raises(SystemExit) as ei:
        run_derive.main(["--version"], {}, io.StringIO())
    assert ei.value.code == 0
    assert __version__ in capsys.readouterr().out


def _ns(**kw: object) -> argparse.Namespace:
    base = dict(password=None, salt_hex=None, salt_from=None, bits=None, iv_len=None, log_level=None)
    base.update(kw)
    return argparse.Namespace(**base)


def test_config_defaults() -> None:
    cfg = DeriveConfig.from_args(_ns(password="pw"), {})
    assert cfg.salt is None
    assert cfg.key_bits == 256
    assert cfg.iv_length == 16
    assert cfg.log_level == "WARNING"


def test_config_flag_beats_env() -> None:
    cfg = DeriveConfig.from_args(_ns(password="a", bits=128), {"EVP_PASSWORD": "b", "EVP_KEY_BITS": "64"})
    assert cfg.password == "a"
    assert cfg.key_bits == 128


def test_config_bad_env() -> None:
    with pytest.raises(ConfigError, match="EVP_SALT_HEX"):
        DeriveConfig.from_args(_ns(password="pw"), {"EVP_SALT_HEX": "zz"})
    with pytest.raises(ConfigError, match="EVP_IV_LEN"):
        DeriveConfig.from_args(_ns(password="pw"), {"EVP_IV_LEN": "sixteen"})
    with pytest.raises(ConfigError, match="mutually exclusive"):
        DeriveConfig.from_args(_ns(password="pw", salt_hex="00" * 8, salt_from="x"), {})


def test_selftest_passes() -> None:
    stats = run_selftest()
    assert stats.ok
    assert stats.vectors_ok == 3


def test_cli_non_utf8_password_hashes_argv_bytes() -> None:
    raw = b"caf\xe9"
    lines = _run(["--password", os.fsdecode(raw), "--bits", "128", "--iv-len", "0"])
    assert lines == ["key=" + hashlib.md5(raw).hexdigest().upper()]


def test_cli_truncated_salted_file(tmp_path, capsys) -> None:
    p = tmp_path / "short.enc"
    p.write_bytes(SALTED_MAGIC + b"salt")
    with pytest.raises(SystemExit) as ei:
        run_derive.main(["--password", "password", "--salt-from", str(p)], {}, io.StringIO())
    assert ei.value.code == 2
    assert "truncated" in capsys.readouterr().err


@pytest.mark.parametrize("level", ["verbose", "basic_format", "shutdown"])
def test_cli_rejects_unknown_log_level(level: str, capsys) -> None:
    with pytest.raises(SystemExit) as ei:
        run_derive.main(["--password", "password", "--log-level", level], {}, io.StringIO())
    assert ei.value.code == 2
    assert "log level" in capsys.readouterr().err


def test_parse_log_level() -> None:
    assert parse_log_level("debug") == 10
    assert parse_log_level("WARNING") == 30
    with pytest.raises(ValueError):
        parse_log_level("BASIC_FORMAT")


def test_config_bad_env_log_level() -> None:
    with pytest.raises(ConfigError, match="log level"):
        DeriveConfig.from_args(_ns(password="pw"), {"EVP_LOG_LEVEL": "loud"})
