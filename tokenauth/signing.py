"""
Ed25519 Signing

Uses Ed25519 (RFC 8032) via PyNaCl. The authorization core only ever needs
`verify_ed25519`; key generation and signing serve the client helpers, the
CLI and the tests.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict

from nacl.exceptions import BadSignatureError
from nacl.signing import SigningKey, VerifyKey

from .identity import Identifier


@dataclass(frozen=True)
class KeyPair:
    """Ed25519 key pair held as raw bytes."""
    signing_key: bytes
    verify_key: bytes

    @classmethod
    def generate(cls) -> "KeyPair":
        signing_key = SigningKey.generate()
        return cls(signing_key=bytes(signing_key), verify_key=bytes(signing_key.verify_key))

    @classmethod
    def from_seed(cls, seed: bytes) -> "KeyPair":
        """Deterministic key pair from a 32-byte seed."""
        signing_key = SigningKey(seed)
        return cls(signing_key=bytes(signing_key), verify_key=bytes(signing_key.verify_key))

    @property
    def public_key(self) -> bytes:
        return self.verify_key

    def identifier(self) -> Identifier:
        return Identifier.ed25519(self.verify_key)

    def sign(self, message: bytes) -> bytes:
        """Detached 64-byte signature over `message`."""
        return SigningKey(self.signing_key).sign(message).signature

    def to_dict(self) -> Dict[str, Any]:
        return {
            "algorithm": "Ed25519",
            "signing_key": self.signing_key.hex(),
            "public_key": self.verify_key.hex(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KeyPair":
        keypair = cls.from_seed(bytes.fromhex(data["signing_key"]))
        declared = data.get("public_key")
        if declared and bytes.fromhex(declared) != keypair.verify_key:
            raise ValueError("public_key does not match signing_key")
        return keypair


def generate_signing_key() -> KeyPair:
    """Generate a new Ed25519 key pair."""
    return KeyPair.generate()


def verify_ed25519(public_key: bytes, message: bytes, signature: bytes) -> bool:
    """
    Verify a detached Ed25519 signature.

    Returns False for a bad signature or a malformed key; never raises.
    """
    try:
        VerifyKey(public_key).verify(message, signature)
        return True
    except (BadSignatureError, ValueError, TypeError):
        return False


def load_keypair(path: str) -> KeyPair:
    with open(path, "r", encoding="utf-8") as f:
        return KeyPair.from_dict(json.load(f))


def save_keypair(keypair: KeyPair, path: str) -> None:
    with open(path, "w", encoding="utf-8") as f:
        json.dump(keypair.to_dict(), f, indent=2)
