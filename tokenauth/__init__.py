"""
tokenauth: Signature-Authorized Fungible Token Ledger

Version: 0.1.0

Every state-changing ledger operation (mint, burn, transfer, approve,
freeze, unfreeze, administrator change) must be proven by its caller:
- a calling contract, proven by the host's invocation context
- a single Ed25519 keyholder, proven by one signature
- a multi-signer account, proven by weighted signatures that reach the
  account's medium threshold

Signatures cover a domain-separated payload carrying the signer's nonce, so
a signature authorizes exactly one operation, exactly once.

Usage:
    from tokenauth import Token, TokenClient, KeyPair

    admin, alice, bob = KeyPair.generate(), KeyPair.generate(), KeyPair.generate()

    token = Token()
    token.initialize(admin.identifier(), 7, "name", "symbol")

    client = TokenClient(token)
    client.mint(admin, alice.identifier(), 1000)
    client.transfer(alice, bob.identifier(), 250)

    token.balance(bob.identifier())   # 250
    token.nonce(alice.identifier())   # 1
"""

__version__ = "0.1.0"

# Identity and proofs
from .identity import (
    Identifier,
    IdentifierKind,
    Authorization,
    KeyedAuthorization,
    ContractAuthorization,
    Ed25519Authorization,
    AccountAuthorization,
    KeyedEd25519Authorization,
    KeyedAccountAuthorization,
    KeyedEd25519Signature,
    authorization_from_dict,
    keyed_authorization_from_dict,
)
from .context import InvocationContext

# Errors
from .errors import (
    FailureCode,
    TokenError,
    AuthorizationError,
    LedgerError,
    NotAuthorized,
    UnknownAccount,
    IdentityMismatch,
    InvalidSignature,
    SignaturesOutOfOrder,
    InsufficientWeight,
    WeightOverflow,
    NonceOverflow,
    AlreadyInitialized,
    NotInitialized,
    FrozenAccount,
    InsufficientBalance,
    InsufficientAllowance,
    ArithmeticOverflow,
    ArithmeticUnderflow,
    InvalidAmount,
    InvalidConfiguration,
    EncodingError,
    UnsupportedMessageVersion,
)

# Canonicalization, hashing, messages
from .canonicalization import canonicalize, canonicalize_str, canonical_value, from_canonical_value
from .hashing import sha256_digest, sha256_hash
from .message import Domain, SignaturePayload, MESSAGE_VERSION

# Cryptography and accounts
from .signing import KeyPair, generate_signing_key, verify_ed25519
from .accounts import AccountDirectory, InMemoryAccountDirectory

# State
from .storage import DataKey, Storage, InMemoryStorage, SqliteStorage
from .nonce import NonceRegistry, MAX_NONCE

# Authorization and ledger
from .verifier import AuthorizationVerifier, MAX_WEIGHT
from .admin import to_administrator_authorization
from .contract import Token
from .client import TokenClient

__all__ = [
    # Identity
    "Identifier",
    "IdentifierKind",
    "Authorization",
    "KeyedAuthorization",
    "ContractAuthorization",
    "Ed25519Authorization",
    "AccountAuthorization",
    "KeyedEd25519Authorization",
    "KeyedAccountAuthorization",
    "KeyedEd25519Signature",
    "authorization_from_dict",
    "keyed_authorization_from_dict",
    "InvocationContext",

    # Errors
    "FailureCode",
    "TokenError",
    "AuthorizationError",
    "LedgerError",
    "NotAuthorized",
    "UnknownAccount",
    "IdentityMismatch",
    "InvalidSignature",
    "SignaturesOutOfOrder",
    "InsufficientWeight",
    "WeightOverflow",
    "NonceOverflow",
    "AlreadyInitialized",
    "NotInitialized",
    "FrozenAccount",
    "InsufficientBalance",
    "InsufficientAllowance",
    "ArithmeticOverflow",
    "ArithmeticUnderflow",
    "InvalidAmount",
    "InvalidConfiguration",
    "EncodingError",
    "UnsupportedMessageVersion",

    # Codec
    "canonicalize",
    "canonicalize_str",
    "canonical_value",
    "from_canonical_value",
    "sha256_digest",
    "sha256_hash",
    "Domain",
    "SignaturePayload",
    "MESSAGE_VERSION",

    # Crypto and accounts
    "KeyPair",
    "generate_signing_key",
    "verify_ed25519",
    "AccountDirectory",
    "InMemoryAccountDirectory",

    # State
    "DataKey",
    "Storage",
    "InMemoryStorage",
    "SqliteStorage",
    "NonceRegistry",
    "MAX_NONCE",

    # Authorization and ledger
    "AuthorizationVerifier",
    "MAX_WEIGHT",
    "to_administrator_authorization",
    "Token",
    "TokenClient",
]
