"""
Identity and Authorization Model

An Identifier names who owns balances and nonces. It is one of three
variants:
- Contract: a calling contract, proven by the host's call context
- Ed25519: a single keyholder, proven by one signature
- Account: a multi-signer account, proven by weighted signatures

Authorizations are the proofs. The unkeyed forms are used for administrator
actions where the identity is stored separately; the keyed forms carry the
identity they prove.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple, Union

from .context import InvocationContext

KEY_LENGTH = 32
SIGNATURE_LENGTH = 64


class IdentifierKind(str, Enum):
    CONTRACT = "Contract"
    ED25519 = "Ed25519"
    ACCOUNT = "Account"


def _require_bytes(value: Any, length: int, name: str) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise ValueError(f"{name} must be bytes")
    if len(value) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(value)}")
    return bytes(value)


def _from_hex(value: str, name: str) -> bytes:
    try:
        return bytes.fromhex(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} is not valid hex")


@dataclass(frozen=True)
class Identifier:
    """
    Tagged identity. Immutable and hashable, equal by kind and value, so it
    can be used directly inside storage keys.
    """
    kind: IdentifierKind
    value: bytes

    def __post_init__(self):
        object.__setattr__(self, "kind", IdentifierKind(self.kind))
        object.__setattr__(self, "value", _require_bytes(self.value, KEY_LENGTH, "identifier value"))

    @classmethod
    def contract(cls, address: bytes) -> "Identifier":
        return cls(IdentifierKind.CONTRACT, address)

    @classmethod
    def ed25519(cls, public_key: bytes) -> "Identifier":
        return cls(IdentifierKind.ED25519, public_key)

    @classmethod
    def account(cls, account_key: bytes) -> "Identifier":
        return cls(IdentifierKind.ACCOUNT, account_key)

    def short(self) -> str:
        """Log-friendly label, e.g. 'Ed25519:3f9a1c2b'."""
        return f"{self.kind.value}:{self.value.hex()[:8]}"

    def to_dict(self) -> Dict[str, str]:
        return {"type": self.kind.value, "value": self.value.hex()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Identifier":
        try:
            kind = IdentifierKind(data["type"])
        except (KeyError, ValueError):
            raise ValueError(f"Unknown identifier type: {data.get('type')!r}")
        return cls(kind, _from_hex(data.get("value", ""), "identifier value"))


# ============================================================
# Authorization proofs
# ============================================================

@dataclass(frozen=True)
class KeyedEd25519Signature:
    """One signer's contribution to an account proof."""
    public_key: bytes
    signature: bytes

    def __post_init__(self):
        object.__setattr__(self, "public_key", _require_bytes(self.public_key, KEY_LENGTH, "public_key"))
        object.__setattr__(self, "signature", _require_bytes(self.signature, SIGNATURE_LENGTH, "signature"))

    def to_dict(self) -> Dict[str, str]:
        return {"public_key": self.public_key.hex(), "signature": self.signature.hex()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "KeyedEd25519Signature":
        return cls(
            public_key=_from_hex(data.get("public_key", ""), "public_key"),
            signature=_from_hex(data.get("signature", ""), "signature"),
        )


def _signature_tuple(signatures) -> Tuple[KeyedEd25519Signature, ...]:
    result = tuple(signatures)
    for item in result:
        if not isinstance(item, KeyedEd25519Signature):
            raise ValueError("account signatures must be KeyedEd25519Signature values")
    return result


@dataclass(frozen=True)
class ContractAuthorization:
    """
    Proof by call context. Shared by the unkeyed and keyed families: the
    identity is always the invoking contract.
    """

    def get_identifier(self, context: InvocationContext) -> Identifier:
        return Identifier.contract(context.require_invoking_contract())

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "Contract"}


@dataclass(frozen=True)
class Ed25519Authorization:
    """Unkeyed single signature; the key comes from the stored administrator."""
    signature: bytes

    def __post_init__(self):
        object.__setattr__(self, "signature", _require_bytes(self.signature, SIGNATURE_LENGTH, "signature"))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "Ed25519", "signature": self.signature.hex()}


@dataclass(frozen=True)
class AccountAuthorization:
    """Unkeyed account proof; the account key comes from the stored administrator."""
    signatures: Tuple[KeyedEd25519Signature, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "signatures", _signature_tuple(self.signatures))

    def to_dict(self) -> Dict[str, Any]:
        return {"type": "Account", "signatures": [s.to_dict() for s in self.signatures]}


@dataclass(frozen=True)
class KeyedEd25519Authorization:
    public_key: bytes
    signature: bytes

    def __post_init__(self):
        object.__setattr__(self, "public_key", _require_bytes(self.public_key, KEY_LENGTH, "public_key"))
        object.__setattr__(self, "signature", _require_bytes(self.signature, SIGNATURE_LENGTH, "signature"))

    def get_identifier(self, context: InvocationContext) -> Identifier:
        return Identifier.ed25519(self.public_key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "Ed25519",
            "public_key": self.public_key.hex(),
            "signature": self.signature.hex(),
        }


@dataclass(frozen=True)
class KeyedAccountAuthorization:
    public_key: bytes
    signatures: Tuple[KeyedEd25519Signature, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, "public_key", _require_bytes(self.public_key, KEY_LENGTH, "public_key"))
        object.__setattr__(self, "signatures", _signature_tuple(self.signatures))

    def get_identifier(self, context: InvocationContext) -> Identifier:
        return Identifier.account(self.public_key)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": "Account",
            "public_key": self.public_key.hex(),
            "signatures": [s.to_dict() for s in self.signatures],
        }


Authorization = Union[ContractAuthorization, Ed25519Authorization, AccountAuthorization]
KeyedAuthorization = Union[ContractAuthorization, KeyedEd25519Authorization, KeyedAccountAuthorization]


def get_identifier(auth: KeyedAuthorization, context: InvocationContext) -> Identifier:
    """Identity a keyed authorization claims to prove."""
    if isinstance(auth, (ContractAuthorization, KeyedEd25519Authorization, KeyedAccountAuthorization)):
        return auth.get_identifier(context)
    raise TypeError(f"Not a keyed authorization: {type(auth).__name__}")


# ============================================================
# Wire parsing (CLI / HTTP)
# ============================================================

def _parse_signatures(data: Dict[str, Any]) -> Tuple[KeyedEd25519Signature, ...]:
    return tuple(KeyedEd25519Signature.from_dict(s) for s in data.get("signatures", []))


def authorization_from_dict(data: Dict[str, Any]) -> Authorization:
    """Parse an unkeyed authorization from its dict form."""
    kind = data.get("type")
    if kind == "Contract":
        return ContractAuthorization()
    if kind == "Ed25519":
        return Ed25519Authorization(_from_hex(data.get("signature", ""), "signature"))
    if kind == "Account":
        return AccountAuthorization(_parse_signatures(data))
    raise ValueError(f"Unknown authorization type: {kind!r}")


def keyed_authorization_from_dict(data: Dict[str, Any]) -> KeyedAuthorization:
    """Parse a keyed authorization from its dict form."""
    kind = data.get("type")
    if kind == "Contract":
        return ContractAuthorization()
    if kind == "Ed25519":
        return KeyedEd25519Authorization(
            public_key=_from_hex(data.get("public_key", ""), "public_key"),
            signature=_from_hex(data.get("signature", ""), "signature"),
        )
    if kind == "Account":
        return KeyedAccountAuthorization(
            public_key=_from_hex(data.get("public_key", ""), "public_key"),
            signatures=_parse_signatures(data),
        )
    raise ValueError(f"Unknown authorization type: {kind!r}")
