"""
Domain-Separated Signature Payloads

A signature authorizes exactly one (version, nonce, domain, parameters)
tuple. The domain tag keeps a signature made for one operation from being
valid for another, and the nonce keeps it from being valid twice.

Wire form (canonical JSON, then SHA-256, then Ed25519 over the digest):

    {"body":{"domain":1,"nonce":"0","parameters":[...]},"version":0}
"""

import json
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Tuple

from .canonicalization import canonical_value, canonicalize, from_canonical_value
from .errors import EncodingError, UnsupportedMessageVersion
from .hashing import sha256_digest, sha256_hash

MESSAGE_VERSION = 0


class Domain(IntEnum):
    """Operation tags. The numeric values are part of the signed format."""
    APPROVE = 0
    TRANSFER = 1
    TRANSFER_FROM = 2
    BURN = 3
    FREEZE = 4
    MINT = 5
    SET_ADMINISTRATOR = 6
    UNFREEZE = 7

    @property
    def parameter_names(self) -> Tuple[str, ...]:
        return DOMAIN_PARAMETERS[self]

    @classmethod
    def from_name(cls, name: str) -> "Domain":
        """Accept 'transfer_from', 'TransferFrom' or 'TRANSFER_FROM'."""
        normalized = "".join(ch for ch in name if ch.isalnum()).upper()
        for member in cls:
            if member.name.replace("_", "") == normalized:
                return member
        raise ValueError(f"Unknown domain: {name}")


# Parameters each operation signs, in order. The proof itself is never signed.
DOMAIN_PARAMETERS: Dict[Domain, Tuple[str, ...]] = {
    Domain.APPROVE: ("spender", "amount"),
    Domain.TRANSFER: ("to", "amount"),
    Domain.TRANSFER_FROM: ("from", "to", "amount"),
    Domain.BURN: ("from", "amount"),
    Domain.FREEZE: ("id",),
    Domain.MINT: ("to", "amount"),
    Domain.SET_ADMINISTRATOR: ("new_admin",),
    Domain.UNFREEZE: ("id",),
}


@dataclass(frozen=True)
class SignaturePayload:
    """Version 0 signature payload."""
    nonce: int
    domain: Domain
    parameters: Tuple[Any, ...] = field(default_factory=tuple)
    version: int = MESSAGE_VERSION

    def __post_init__(self):
        if self.version != MESSAGE_VERSION:
            raise UnsupportedMessageVersion(f"Unsupported message version: {self.version}")
        if isinstance(self.nonce, bool) or not isinstance(self.nonce, int) or self.nonce < 0:
            raise EncodingError("nonce must be a non-negative integer")
        object.__setattr__(self, "domain", Domain(self.domain))
        object.__setattr__(self, "parameters", tuple(self.parameters))
        expected = len(self.domain.parameter_names)
        if len(self.parameters) != expected:
            raise EncodingError(
                f"{self.domain.name} takes {expected} parameters, got {len(self.parameters)}"
            )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "body": {
                "nonce": str(self.nonce),
                "domain": int(self.domain),
                "parameters": [canonical_value(p) for p in self.parameters],
            },
        }

    def encode(self) -> bytes:
        """Canonical bytes of this payload."""
        return canonicalize(self.to_dict())

    def digest(self) -> bytes:
        """The 32 bytes an Ed25519 signer actually signs."""
        return sha256_digest(self.encode())

    def digest_hex(self) -> str:
        return sha256_hash(self.encode())

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SignaturePayload":
        if not isinstance(data, dict) or "version" not in data:
            raise EncodingError("payload is missing its version")
        version = data["version"]
        if version != MESSAGE_VERSION or isinstance(version, bool):
            raise UnsupportedMessageVersion(f"Unsupported message version: {version!r}")
        body = data.get("body")
        if not isinstance(body, dict):
            raise EncodingError("payload body must be an object")
        try:
            nonce = int(body["nonce"])
            domain = Domain(body["domain"])
            parameters = tuple(from_canonical_value(p) for p in body["parameters"])
        except (KeyError, TypeError, ValueError) as e:
            raise EncodingError(f"Malformed payload body: {e}")
        return cls(nonce=nonce, domain=domain, parameters=parameters)

    @classmethod
    def decode(cls, data: bytes) -> "SignaturePayload":
        """Parse canonical bytes back into a payload."""
        try:
            parsed = json.loads(data.decode('utf-8'))
        except (UnicodeDecodeError, ValueError) as e:
            raise EncodingError(f"Payload is not valid JSON: {e}")
        payload = cls.from_dict(parsed)
        if payload.encode() != data:
            raise EncodingError("Payload bytes are not canonical")
        return payload
