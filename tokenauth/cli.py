#!/usr/bin/env python3
"""
tokenauth Command Line Interface

Usage:
    tokenauth keygen --output <file>
    tokenauth digest --domain <name> --nonce <n> --params <json>
    tokenauth sign --key <file> --domain <name> --nonce <n> --params <json>
    tokenauth verify --public-key <hex> --signature <hex> [--digest <sha256:hex>] --domain <name> --nonce <n> --params <json>
    tokenauth demo
    tokenauth serve [--host HOST] [--port PORT]

Parameters are a JSON array. Amounts are JSON integers and identities are
objects of the form {"type": "Ed25519", "value": "<hex>"}.
"""

import argparse
import json
import sys
from typing import Any, List


def parse_parameters(text: str) -> List[Any]:
    """Decode a JSON parameter array into signable values."""
    from tokenauth.identity import Identifier

    raw = json.loads(text)
    if not isinstance(raw, list):
        raise ValueError("--params must be a JSON array")

    def convert(value: Any) -> Any:
        if isinstance(value, dict):
            return Identifier.from_dict(value)
        if isinstance(value, list):
            return [convert(v) for v in value]
        return value

    return [convert(v) for v in raw]


def _payload(args):
    from tokenauth.message import Domain, SignaturePayload

    return SignaturePayload(
        nonce=args.nonce,
        domain=Domain.from_name(args.domain),
        parameters=tuple(parse_parameters(args.params)),
    )


def cmd_keygen(args):
    """Generate an Ed25519 key pair."""
    from tokenauth.signing import generate_signing_key, save_keypair

    keypair = generate_signing_key()
    if args.output:
        save_keypair(keypair, args.output)
        print(f"Key pair saved to: {args.output}")
    print(f"Public key: {keypair.public_key.hex()}")
    return 0


def cmd_digest(args):
    """Print the canonical payload and its digest."""
    payload = _payload(args)
    print(payload.encode().decode('utf-8'))
    print(payload.digest_hex())
    return 0


def cmd_sign(args):
    """Sign a payload with a stored key pair."""
    from tokenauth.client import sign_payload
    from tokenauth.signing import load_keypair

    keypair = load_keypair(args.key)
    payload = _payload(args)
    signature = sign_payload(keypair, payload)
    print(json.dumps({
        "type": "Ed25519",
        "public_key": keypair.public_key.hex(),
        "signature": signature.hex(),
        "digest": payload.digest_hex(),
    }, indent=2))
    return 0


def cmd_verify(args):
    """Verify a signature over a payload."""
    from tokenauth.hashing import verify_hash
    from tokenauth.signing import verify_ed25519

    payload = _payload(args)
    if args.digest and not verify_hash(args.digest, payload.encode()):
        print("✗ DIGEST MISMATCH")
        return 1
    ok = verify_ed25519(bytes.fromhex(args.public_key), payload.digest(), bytes.fromhex(args.signature))
    if ok:
        print("✓ VALID")
        return 0
    print("✗ INVALID")
    return 1


def cmd_demo(args):
    """Run a mint / approve / transfer / transfer_from walkthrough in memory."""
    from tokenauth.client import TokenClient
    from tokenauth.contract import Token
    from tokenauth.signing import KeyPair

    admin, alice, bob, carol = (KeyPair.generate() for _ in range(4))
    token = Token()
    token.initialize(admin.identifier(), 7, "Demo Token", "DEMO")
    client = TokenClient(token)

    client.mint(admin, alice.identifier(), 1000)
    client.approve(bob, carol.identifier(), 500)
    client.transfer(alice, bob.identifier(), 600)
    client.transfer_from(carol, bob.identifier(), alice.identifier(), 400)

    for label, kp in (("alice", alice), ("bob", bob), ("carol", carol)):
        ident = kp.identifier()
        print(f"{label:6} balance={token.balance(ident):>5} nonce={token.nonce(ident)}")
    print(f"admin  nonce={token.nonce(admin.identifier())}")
    return 0


def cmd_serve(args):
    """Run the HTTP service."""
    import uvicorn

    from tokenauth.config import validate_config
    from tokenauth.service import create_app

    invalid = [name for name, ok in validate_config().items() if not ok]
    if invalid:
        print(f"Invalid configuration: {', '.join(invalid)}", file=sys.stderr)
        return 1
    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


def _add_payload_args(parser):
    parser.add_argument('--domain', required=True, help='Operation domain, e.g. transfer')
    parser.add_argument('--nonce', type=int, required=True, help='Signer nonce')
    parser.add_argument('--params', required=True, help='JSON array of parameters')


def main():
    from tokenauth import config
    from tokenauth.errors import TokenError
    from tokenauth.logging_config import configure_logging

    parser = argparse.ArgumentParser(
        description='tokenauth - signature-authorized token ledger',
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--log-level', default=config.LOG_LEVEL, help='Log level')
    subparsers = parser.add_subparsers(dest='command', help='Commands')

    keygen_parser = subparsers.add_parser('keygen', help='Generate key pair')
    keygen_parser.add_argument('--output', '-o', help='Output file for key pair')

    digest_parser = subparsers.add_parser('digest', help='Show payload digest')
    _add_payload_args(digest_parser)

    sign_parser = subparsers.add_parser('sign', help='Sign a payload')
    sign_parser.add_argument('--key', '-k', required=True, help='Key pair JSON file')
    _add_payload_args(sign_parser)

    verify_parser = subparsers.add_parser('verify', help='Verify a signature')
    verify_parser.add_argument('--public-key', required=True, help='Signer public key (hex)')
    verify_parser.add_argument('--signature', required=True, help='Signature (hex)')
    verify_parser.add_argument('--digest', help='Expected payload digest (sha256:<hex>), as printed by sign')
    _add_payload_args(verify_parser)

    subparsers.add_parser('demo', help='Run an in-memory walkthrough')

    serve_parser = subparsers.add_parser('serve', help='Run the HTTP service')
    serve_parser.add_argument('--host', default='127.0.0.1')
    serve_parser.add_argument('--port', type=int, default=8000)

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    level = "DEBUG" if config.is_debug() else args.log_level.upper()
    if level not in config.VALID_LOG_LEVELS:
        print(f"Error: invalid log level {args.log_level!r}", file=sys.stderr)
        return 1
    configure_logging(level, json_format=config.LOG_JSON, log_file=config.LOG_FILE or None)

    commands = {
        'keygen': cmd_keygen,
        'digest': cmd_digest,
        'sign': cmd_sign,
        'verify': cmd_verify,
        'demo': cmd_demo,
        'serve': cmd_serve,
    }

    try:
        return commands[args.command](args)
    except TokenError as e:
        print(f"✗ {e.code.value}: {e.message}", file=sys.stderr)
        return 1
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
