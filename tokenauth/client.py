"""
Signing client.

Builds the authorizations a caller submits to a Token: it reads the
signer's current nonce, constructs the domain-separated payload and signs
its digest. TokenClient wraps a Token so that each operation can be issued
with just a KeyPair.
"""

from typing import Any, Iterable, List, Sequence, Tuple

from .context import DIRECT_INVOCATION, InvocationContext
from .identity import (
    AccountAuthorization,
    Ed25519Authorization,
    Identifier,
    KeyedAccountAuthorization,
    KeyedEd25519Authorization,
    KeyedEd25519Signature,
)
from .message import Domain, SignaturePayload
from .signing import KeyPair


def sign_payload(keypair: KeyPair, payload: SignaturePayload) -> bytes:
    """Ed25519 signature over the payload digest."""
    return keypair.sign(payload.digest())


def ed25519_authorization(
    keypair: KeyPair,
    nonce: int,
    domain: Domain,
    parameters: Sequence[Any],
) -> KeyedEd25519Authorization:
    payload = SignaturePayload(nonce=nonce, domain=domain, parameters=tuple(parameters))
    return KeyedEd25519Authorization(public_key=keypair.public_key, signature=sign_payload(keypair, payload))


def ed25519_admin_authorization(
    keypair: KeyPair,
    nonce: int,
    domain: Domain,
    parameters: Sequence[Any],
) -> Ed25519Authorization:
    payload = SignaturePayload(nonce=nonce, domain=domain, parameters=tuple(parameters))
    return Ed25519Authorization(signature=sign_payload(keypair, payload))


def account_signatures(
    keypairs: Iterable[KeyPair],
    payload: SignaturePayload,
    sort: bool = True,
) -> Tuple[KeyedEd25519Signature, ...]:
    """
    Sign `payload` with every key pair.

    With sort=True the signatures are ordered by public key, which is what
    the verifier requires; pass sort=False to keep the caller's order.
    """
    pairs: List[KeyPair] = list(keypairs)
    if sort:
        pairs.sort(key=lambda kp: kp.public_key)
    return tuple(
        KeyedEd25519Signature(public_key=kp.public_key, signature=sign_payload(kp, payload))
        for kp in pairs
    )


def account_authorization(
    account_key: bytes,
    keypairs: Iterable[KeyPair],
    nonce: int,
    domain: Domain,
    parameters: Sequence[Any],
) -> KeyedAccountAuthorization:
    payload = SignaturePayload(nonce=nonce, domain=domain, parameters=tuple(parameters))
    return KeyedAccountAuthorization(public_key=account_key, signatures=account_signatures(keypairs, payload))


def account_admin_authorization(
    keypairs: Iterable[KeyPair],
    nonce: int,
    domain: Domain,
    parameters: Sequence[Any],
) -> AccountAuthorization:
    payload = SignaturePayload(nonce=nonce, domain=domain, parameters=tuple(parameters))
    return AccountAuthorization(signatures=account_signatures(keypairs, payload))


class TokenClient:
    """
    Issues signed operations against a Token on behalf of Ed25519 signers.

    Nonces are read from the token right before signing, so consecutive
    calls never need to track them.
    """

    def __init__(self, token, context: InvocationContext = DIRECT_INVOCATION):
        self.token = token
        self.context = context

    def _nonce(self, identity: Identifier) -> int:
        return self.token.nonce(identity)

    def _keyed(self, signer: KeyPair, domain: Domain, parameters) -> KeyedEd25519Authorization:
        return ed25519_authorization(signer, self._nonce(signer.identifier()), domain, parameters)

    def _admin(self, signer: KeyPair, domain: Domain, parameters) -> Ed25519Authorization:
        return ed25519_admin_authorization(signer, self._nonce(signer.identifier()), domain, parameters)

    def approve(self, signer: KeyPair, spender: Identifier, amount: int) -> None:
        auth = self._keyed(signer, Domain.APPROVE, (spender, amount))
        self.token.approve(auth, spender, amount, context=self.context)

    def transfer(self, signer: KeyPair, to: Identifier, amount: int) -> None:
        auth = self._keyed(signer, Domain.TRANSFER, (to, amount))
        self.token.transfer(auth, to, amount, context=self.context)

    def transfer_from(self, signer: KeyPair, from_id: Identifier, to: Identifier, amount: int) -> None:
        auth = self._keyed(signer, Domain.TRANSFER_FROM, (from_id, to, amount))
        self.token.transfer_from(auth, from_id, to, amount, context=self.context)

    def burn(self, admin: KeyPair, from_id: Identifier, amount: int) -> None:
        auth = self._admin(admin, Domain.BURN, (from_id, amount))
        self.token.burn(auth, from_id, amount, context=self.context)

    def mint(self, admin: KeyPair, to: Identifier, amount: int) -> None:
        auth = self._admin(admin, Domain.MINT, (to, amount))
        self.token.mint(auth, to, amount, context=self.context)

    def freeze(self, admin: KeyPair, identity: Identifier) -> None:
        auth = self._admin(admin, Domain.FREEZE, (identity,))
        self.token.freeze(auth, identity, context=self.context)

    def unfreeze(self, admin: KeyPair, identity: Identifier) -> None:
        auth = self._admin(admin, Domain.UNFREEZE, (identity,))
        self.token.unfreeze(auth, identity, context=self.context)

    def set_admin(self, admin: KeyPair, new_admin: Identifier) -> None:
        auth = self._admin(admin, Domain.SET_ADMINISTRATOR, (new_admin,))
        self.token.set_admin(auth, new_admin, context=self.context)
