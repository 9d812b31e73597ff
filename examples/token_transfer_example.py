#!/usr/bin/env python3
"""
tokenauth Example - Administrator, Holders and a Multi-Signer Treasury

Walks through:
1. Initialization with an Ed25519 administrator
2. Minting to a multi-signer treasury account
3. A 2-of-3 treasury transfer, then a rejected 1-of-3 attempt
4. A replayed signature being refused
5. Administrator hand-over and freezing a holder

Run with: python examples/token_transfer_example.py
"""

from tokenauth import (
    Domain,
    Identifier,
    InMemoryAccountDirectory,
    KeyPair,
    Token,
    TokenClient,
    TokenError,
)
from tokenauth.client import account_authorization, ed25519_authorization
from tokenauth.logging_config import configure_logging


def section(title: str) -> None:
    print()
    print("=" * 60)
    print(title)
    print("=" * 60)


def main():
    configure_logging("WARNING", json_format=False)

    admin = KeyPair.generate()
    new_admin = KeyPair.generate()
    alice = KeyPair.generate()
    treasurers = [KeyPair.generate() for _ in range(3)]
    treasury_key = KeyPair.generate().public_key
    treasury = Identifier.account(treasury_key)

    accounts = InMemoryAccountDirectory()
    accounts.register(treasury_key, medium_threshold=2, signers={kp.public_key: 1 for kp in treasurers})

    token = Token(accounts=accounts)
    client = TokenClient(token)

    section("1. Initialize")
    token.initialize(admin.identifier(), 7, "Example Token", "EXT")
    print(f"name={token.name().decode()} symbol={token.symbol().decode()} decimals={token.decimals()}")

    section("2. Mint to treasury")
    client.mint(admin, treasury, 10_000)
    print(f"treasury balance: {token.balance(treasury)}")

    section("3. Treasury transfer (2 of 3 signers)")
    nonce = token.nonce(treasury)
    auth = account_authorization(
        treasury_key, treasurers[:2], nonce, Domain.TRANSFER, (alice.identifier(), 2_500)
    )
    token.transfer(auth, alice.identifier(), 2_500)
    print(f"alice balance: {token.balance(alice.identifier())}, treasury nonce: {token.nonce(treasury)}")

    single = account_authorization(
        treasury_key, treasurers[:1], token.nonce(treasury), Domain.TRANSFER, (alice.identifier(), 1)
    )
    try:
        token.transfer(single, alice.identifier(), 1)
    except TokenError as e:
        print(f"1-of-3 rejected: {e.code.value}")

    section("4. Replay")
    signed = ed25519_authorization(alice, token.nonce(alice.identifier()), Domain.TRANSFER, (treasury, 100))
    token.transfer(signed, treasury, 100)
    try:
        token.transfer(signed, treasury, 100)
    except TokenError as e:
        print(f"replay rejected: {e.code.value}")
    print(f"alice balance: {token.balance(alice.identifier())}")

    section("5. Administrator hand-over and freeze")
    client.set_admin(admin, new_admin.identifier())
    client.freeze(new_admin, alice.identifier())
    print(f"alice frozen: {token.is_frozen(alice.identifier())}")
    try:
        client.mint(admin, alice.identifier(), 1)
    except TokenError as e:
        print(f"old administrator rejected: {e.code.value}")


if __name__ == "__main__":
    main()
