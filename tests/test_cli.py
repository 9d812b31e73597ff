import json
import sys

import pytest

from tokenauth import Domain, Identifier, SignaturePayload
from tokenauth.cli import main, parse_parameters
from tokenauth.signing import load_keypair, verify_ed25519

KEY = b"\x03" * 32


def run(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["tokenauth", "--log-level", "WARNING", *argv])
    return main()


def params_json():
    return json.dumps([{"type": "Ed25519", "value": KEY.hex()}, 25])


def test_parse_parameters():
    assert parse_parameters(params_json()) == [Identifier.ed25519(KEY), 25]
    with pytest.raises(ValueError):
        parse_parameters('{"to": 1}')


def test_digest(monkeypatch, capsys, restore_root_logger):
    assert run(monkeypatch, "digest", "--domain", "transfer", "--nonce", "4", "--params", params_json()) == 0
    lines = capsys.readouterr().out.strip().splitlines()
    expected = SignaturePayload(nonce=4, domain=Domain.TRANSFER, parameters=(Identifier.ed25519(KEY), 25))
    assert lines[0] == expected.encode().decode("utf-8")
    assert lines[1] == expected.digest_hex()


def test_keygen_sign_verify(monkeypatch, capsys, tmp_path, restore_root_logger):
    key_file = tmp_path / "key.json"
    assert run(monkeypatch, "keygen", "--output", str(key_file)) == 0
    capsys.readouterr()

    assert run(monkeypatch, "sign", "--key", str(key_file), "--domain", "Transfer",
               "--nonce", "0", "--params", params_json()) == 0
    signed = json.loads(capsys.readouterr().out)

    keypair = load_keypair(str(key_file))
    payload = SignaturePayload(nonce=0, domain=Domain.TRANSFER, parameters=(Identifier.ed25519(KEY), 25))
    assert signed["public_key"] == keypair.public_key.hex()
    assert verify_ed25519(keypair.public_key, payload.digest(), bytes.fromhex(signed["signature"]))

    assert run(monkeypatch, "verify", "--public-key", signed["public_key"], "--signature", signed["signature"],
               "--domain", "transfer", "--nonce", "0", "--params", params_json()) == 0
    assert run(monkeypatch, "verify", "--public-key", signed["public_key"], "--signature", signed["signature"],
               "--domain", "transfer", "--nonce", "1", "--params", params_json()) == 1
    capsys.readouterr()

    assert run(monkeypatch, "verify", "--public-key", signed["public_key"], "--signature", signed["signature"],
               "--digest", signed["digest"], "--domain", "transfer", "--nonce", "0", "--params", params_json()) == 0
    assert run(monkeypatch, "verify", "--public-key", signed["public_key"], "--signature", signed["signature"],
               "--digest", signed["digest"], "--domain", "transfer", "--nonce", "2", "--params", params_json()) == 1
    assert "DIGEST MISMATCH" in capsys.readouterr().out


def test_demo(monkeypatch, capsys, restore_root_logger):
    assert run(monkeypatch, "demo") == 0
    out = capsys.readouterr().out
    assert "alice  balance=  800 nonce=1" in out
    assert "bob    balance=  200 nonce=1" in out
    assert "admin  nonce=1" in out


def test_bad_parameters_exit_nonzero(monkeypatch, capsys, restore_root_logger):
    assert run(monkeypatch, "digest", "--domain", "transfer", "--nonce", "0", "--params", "[1.5, 2]") == 1
    assert "ENCODING_ERROR" in capsys.readouterr().err


def test_unknown_domain(monkeypatch, capsys, restore_root_logger):
    assert run(monkeypatch, "digest", "--domain", "withdraw", "--nonce", "0", "--params", "[]") == 1
    assert "Unknown domain" in capsys.readouterr().err


def test_serve_refuses_invalid_config(monkeypatch, capsys, restore_root_logger):
    monkeypatch.setattr("tokenauth.config.ENV", "qa")
    assert run(monkeypatch, "serve") == 1
    assert "Invalid configuration: env" in capsys.readouterr().err


def test_invalid_log_level(monkeypatch, capsys, restore_root_logger):
    monkeypatch.delenv("TOKENAUTH_DEBUG", raising=False)
    monkeypatch.setattr(sys, "argv", ["tokenauth", "--log-level", "FOO", "demo"])
    assert main() == 1
    assert "invalid log level 'FOO'" in capsys.readouterr().err

    monkeypatch.setattr("tokenauth.config.LOG_LEVEL", "verbose")
    monkeypatch.setattr(sys, "argv", ["tokenauth", "demo"])
    assert main() == 1
    assert "invalid log level 'verbose'" in capsys.readouterr().err
