"""Tests for the totp-tool command line."""

import json

import pytest

from totp_core import DEMO_SECRET, totp
from totp_core.cli import EXIT_INVALID_CODE, EXIT_INVALID_SECRET, EXIT_OK, build_parser, main

RFC_SECRET = "GEZDGNBVGY3TQOJQGEZDGNBVGY3TQOJQ"


def test_generate(capsys):
    assert main(["generate", RFC_SECRET, "--time", "59"]) == EXIT_OK
    assert capsys.readouterr().out.strip() == "287082"


def test_generate_json(capsys):
    assert main(["generate", RFC_SECRET, "--time", "1234567890", "--json"]) == EXIT_OK
    assert json.loads(capsys.readouterr().out) == {"totp": "005924"}


def test_generate_invalid_secret(capsys):
    assert main(["generate", "not-base32!!!"]) == EXIT_INVALID_SECRET
    assert "invalid secret" in capsys.readouterr().err


def test_generate_lenient(capsys):
    assert main(["generate", "jbsw-y3dp-ehpk-3pxp", "--time", "59", "--lenient"]) == EXIT_OK
    assert capsys.readouterr().out.strip() == totp(DEMO_SECRET, 59)


def test_validate(capsys):
    assert main(["validate", RFC_SECRET, "287082", "--time", "59", "--window", "0"]) == EXIT_OK
    assert "[+]" in capsys.readouterr().out


def test_validate_wrong_code(capsys):
    assert main(["validate", RFC_SECRET, "287083", "--time", "59", "--window", "0"]) == EXIT_INVALID_CODE
    assert "[-]" in capsys.readouterr().out


def test_validate_invalid_secret(capsys):
    assert main(["validate", "not-base32!!!", "000000"]) == EXIT_INVALID_CODE


def test_uri(capsys):
    assert main(["uri", DEMO_SECRET, "--account", "alice", "--issuer", "Acme"]) == EXIT_OK
    assert capsys.readouterr().out.startswith("otpauth://totp/Acme:alice?")


def test_uri_invalid_secret(capsys):
    assert main(["uri", "not-base32!!!"]) == EXIT_INVALID_SECRET


def test_new_secret(capsys):
    assert main(["new-secret"]) == EXIT_OK
    assert len(capsys.readouterr().out.strip()) == 32


def test_no_command_prints_usage(capsys):
    assert main([]) == EXIT_OK
    out = capsys.readouterr().out
    assert out.startswith("usage: totp-tool")
    assert "generate" in out and "validate" in out


def test_serve_defaults():
    args = build_parser().parse_args(["serve"])
    assert (args.host, args.port) == ("127.0.0.1", 8080)


@pytest.mark.parametrize("command", [
    ["generate", RFC_SECRET],
    ["validate", RFC_SECRET, "287082"],
])
@pytest.mark.parametrize("bad_time", ["-5", "nan", "inf", "1e30", "soon"])
def test_out_of_range_time_is_a_usage_error(capsys, command, bad_time):
    with pytest.raises(SystemExit) as exc:
        main(command + ["--time", bad_time])
    assert exc.value.code == 2
    assert "--time" in capsys.readouterr().err


def test_uri_lenient(capsys):
    assert main(["uri", "jbsw-y3dp-ehpk-3pxp", "--lenient"]) == EXIT_OK
    assert f"secret={DEMO_SECRET}&" in capsys.readouterr().out
