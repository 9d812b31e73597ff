"""
Authorization Verifier

Decides whether a keyed authorization proves the right to perform one
operation, and consumes the signer's nonce when it does.

Proof types:
- Contract: the host reports an invoking contract. No signature, no nonce.
- Ed25519: one signature over the payload built with the signer's current
  nonce.
- Account: signatures from the account's signers, keys strictly increasing,
  whose accumulated weight reaches the account's medium threshold.

Every check runs before the nonce is touched: a rejected proof leaves the
nonce where it was.
"""

import logging
from typing import Any, Callable, Optional, Sequence

from .accounts import AccountDirectory, InMemoryAccountDirectory
from .arithmetic import checked_add
from .context import DIRECT_INVOCATION, InvocationContext
from .errors import (
    AuthorizationError,
    InsufficientWeight,
    InvalidSignature,
    SignaturesOutOfOrder,
    WeightOverflow,
)
from .identity import (
    ContractAuthorization,
    Identifier,
    KeyedAccountAuthorization,
    KeyedAuthorization,
    KeyedEd25519Authorization,
)
from .logging_config import audit_log
from .message import Domain, SignaturePayload
from .nonce import NonceRegistry
from .signing import verify_ed25519
from .storage import Storage

logger = logging.getLogger(__name__)

# Accumulated account weight is a u32 counter
MAX_WEIGHT = 2**32 - 1

SignatureVerifier = Callable[[bytes, bytes, bytes], bool]


class AuthorizationVerifier:
    """
    Verifies keyed authorizations against ledger storage.

    Args:
        storage: Ledger storage holding the nonces
        accounts: Account model used for multi-signer proofs
        verify_signature: Ed25519 primitive (public_key, message, signature) -> bool
    """

    def __init__(
        self,
        storage: Storage,
        accounts: Optional[AccountDirectory] = None,
        verify_signature: SignatureVerifier = verify_ed25519,
    ):
        self.storage = storage
        self.accounts = accounts if accounts is not None else InMemoryAccountDirectory()
        self.nonces = NonceRegistry(storage)
        self._verify_signature = verify_signature

    def check_auth(
        self,
        auth: KeyedAuthorization,
        domain: Domain,
        parameters: Sequence[Any],
        context: InvocationContext = DIRECT_INVOCATION,
    ) -> Identifier:
        """
        Verify `auth` for (domain, parameters) and consume its nonce.

        Returns:
            The identity that was proven

        Raises:
            AuthorizationError subclass describing the first failed check
        """
        domain = Domain(domain)
        proof = type(auth).__name__
        identity: Optional[Identifier] = None
        try:
            if isinstance(auth, ContractAuthorization):
                identity = auth.get_identifier(context)
                nonce = None
            elif isinstance(auth, KeyedEd25519Authorization):
                identity = auth.get_identifier(context)
                nonce = self._check_ed25519(auth, identity, domain, parameters)
            elif isinstance(auth, KeyedAccountAuthorization):
                identity = auth.get_identifier(context)
                nonce = self._check_account(auth, identity, domain, parameters)
            else:
                raise TypeError(f"Unsupported authorization type: {proof}")
        except AuthorizationError as e:
            audit_log.authorization_rejected(
                identity.short() if identity else None,
                domain.name,
                proof,
                e.code.value,
                e.message,
            )
            raise

        audit_log.authorization_accepted(identity.short(), domain.name, proof, nonce)
        return identity

    def _payload(self, identity: Identifier, domain: Domain, parameters: Sequence[Any]) -> SignaturePayload:
        nonce = self.nonces.read(identity)
        return SignaturePayload(nonce=nonce, domain=domain, parameters=tuple(parameters))

    def _check_ed25519(
        self,
        auth: KeyedEd25519Authorization,
        identity: Identifier,
        domain: Domain,
        parameters: Sequence[Any],
    ) -> int:
        payload = self._payload(identity, domain, parameters)
        if not self._verify_signature(auth.public_key, payload.digest(), auth.signature):
            raise InvalidSignature(
                "Ed25519 signature does not match payload",
                {"nonce": payload.nonce, "domain": domain.name},
            )
        return self.nonces.read_and_increment(identity)

    def _check_account(
        self,
        auth: KeyedAccountAuthorization,
        identity: Identifier,
        domain: Domain,
        parameters: Sequence[Any],
    ) -> int:
        if not auth.signatures:
            raise InsufficientWeight("account authorization carries no signatures", {"weight": 0})
        payload = self._payload(identity, domain, parameters)
        digest = payload.digest()
        threshold = self.accounts.medium_threshold(auth.public_key)

        weight = 0
        previous: Optional[bytes] = None
        for index, sig in enumerate(auth.signatures):
            # Fixed-width keys: byte order equals big-endian numeric order
            if previous is not None and not previous < sig.public_key:
                raise SignaturesOutOfOrder(
                    "account signatures must have strictly increasing keys",
                    {"index": index},
                )
            if not self._verify_signature(sig.public_key, digest, sig.signature):
                raise InvalidSignature(
                    "account signature does not match payload",
                    {"index": index},
                )
            signer_weight = self.accounts.signer_weight(auth.public_key, sig.public_key)
            weight = checked_add(weight, signer_weight, limit=MAX_WEIGHT, error=WeightOverflow)
            previous = sig.public_key

        if weight < threshold:
            raise InsufficientWeight(
                "insufficient signing weight",
                {"weight": weight, "threshold": threshold},
            )
        logger.debug("account weight %s meets threshold %s", weight, threshold)
        return self.nonces.read_and_increment(identity)
