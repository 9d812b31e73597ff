"""
Administrator resolution.

Admin-gated operations carry an unkeyed proof. The identity it must prove is
the stored administrator, and the proof variant has to match the variant of
that identity.
"""

from typing import Optional

from .context import DIRECT_INVOCATION, InvocationContext
from .errors import IdentityMismatch, NotAuthorized, NotInitialized
from .identity import (
    AccountAuthorization,
    Authorization,
    ContractAuthorization,
    Ed25519Authorization,
    Identifier,
    IdentifierKind,
    KeyedAccountAuthorization,
    KeyedAuthorization,
    KeyedEd25519Authorization,
)
from .storage import DataKey, Storage


def has_administrator(storage: Storage) -> bool:
    return storage.has(DataKey.admin())


def read_administrator(storage: Storage) -> Identifier:
    admin: Optional[Identifier] = storage.get(DataKey.admin())
    if admin is None:
        raise NotInitialized("no administrator has been set")
    return admin


def write_administrator(storage: Storage, identity: Identifier) -> None:
    if not isinstance(identity, Identifier):
        raise TypeError("administrator must be an Identifier")
    storage.set(DataKey.admin(), identity)


def to_administrator_authorization(
    storage: Storage,
    auth: Authorization,
    context: InvocationContext = DIRECT_INVOCATION,
) -> KeyedAuthorization:
    """
    Pair an unkeyed proof with the stored administrator.

    Raises:
        NotInitialized: no administrator stored
        IdentityMismatch: proof variant differs from the administrator's
        NotAuthorized: contract administrator is not the invoking contract
    """
    admin = read_administrator(storage)

    if admin.kind is IdentifierKind.CONTRACT and isinstance(auth, ContractAuthorization):
        invoker = context.require_invoking_contract()
        if invoker != admin.value:
            raise NotAuthorized("invoking contract is not the administrator")
        return auth
    if admin.kind is IdentifierKind.ED25519 and isinstance(auth, Ed25519Authorization):
        return KeyedEd25519Authorization(public_key=admin.value, signature=auth.signature)
    if admin.kind is IdentifierKind.ACCOUNT and isinstance(auth, AccountAuthorization):
        return KeyedAccountAuthorization(public_key=admin.value, signatures=auth.signatures)

    if not isinstance(auth, (ContractAuthorization, Ed25519Authorization, AccountAuthorization)):
        raise TypeError(f"Not an authorization: {type(auth).__name__}")
    raise IdentityMismatch(
        f"administrator is {admin.kind.value}, proof is {type(auth).__name__}"
    )
