"""
Token contract: the public operation surface.

Every mutating operation follows the same shape:
1. resolve the identity that must authorize it (the stored administrator
   for admin-gated operations)
2. verify the proof over (domain, parameters) and consume the nonce
3. apply the ledger mutation

All three run under one lock and one storage transaction. If any step
fails, none of them take effect.
"""

import logging
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from .accounts import AccountDirectory
from .admin import (
    has_administrator,
    read_administrator,
    to_administrator_authorization,
    write_administrator,
)
from .arithmetic import require_amount
from .context import DIRECT_INVOCATION, InvocationContext
from .errors import AlreadyInitialized, TokenError
from .identity import Authorization, Identifier, KeyedAuthorization, get_identifier
from .ledger import (
    read_allowance,
    read_balance,
    read_decimals,
    read_name,
    read_state,
    read_symbol,
    receive_balance,
    spend_allowance,
    spend_balance,
    write_allowance,
    write_decimals,
    write_name,
    write_state,
    write_symbol,
)
from .logging_config import audit_log, set_call_id
from .message import Domain
from .signing import verify_ed25519
from .storage import InMemoryStorage, Storage
from .verifier import AuthorizationVerifier, SignatureVerifier

logger = logging.getLogger(__name__)


class Token:
    """
    Fungible token ledger guarded by signature authorization.

    Args:
        storage: Ledger storage (default: fresh InMemoryStorage)
        accounts: Account model for multi-signer identities
        verify_signature: Ed25519 verification primitive
    """

    def __init__(
        self,
        storage: Optional[Storage] = None,
        accounts: Optional[AccountDirectory] = None,
        verify_signature: SignatureVerifier = verify_ed25519,
    ):
        self.storage = storage if storage is not None else InMemoryStorage()
        self.verifier = AuthorizationVerifier(self.storage, accounts, verify_signature)
        self._lock = threading.RLock()

    @contextmanager
    def _operation(self, name: str) -> Iterator[None]:
        with self._lock:
            set_call_id()
            try:
                with self.storage.transaction():
                    yield
            except TokenError as e:
                audit_log.operation_failed(name, e.code.value, e.message)
                raise

    def _check_admin(self, admin_auth: Authorization, domain: Domain, parameters, context: InvocationContext) -> Identifier:
        keyed = to_administrator_authorization(self.storage, admin_auth, context)
        return self.verifier.check_auth(keyed, domain, parameters, context)

    # ============================================================
    # Setup and metadata
    # ============================================================

    def initialize(self, admin: Identifier, decimals: int, name, symbol) -> None:
        """One-time setup. A second call fails and changes nothing."""
        with self._operation("initialize"):
            if has_administrator(self.storage):
                raise AlreadyInitialized("token is already initialized")
            write_decimals(self.storage, decimals)
            write_administrator(self.storage, admin)
            write_name(self.storage, name)
            write_symbol(self.storage, symbol)
            audit_log.operation_completed("initialize", admin=admin.short(), decimals=decimals)

    def decimals(self) -> int:
        with self._lock:
            return read_decimals(self.storage)

    def name(self) -> bytes:
        with self._lock:
            return read_name(self.storage)

    def symbol(self) -> bytes:
        with self._lock:
            return read_symbol(self.storage)

    def administrator(self) -> Identifier:
        with self._lock:
            return read_administrator(self.storage)

    # ============================================================
    # Queries
    # ============================================================

    def nonce(self, identity: Identifier) -> int:
        with self._lock:
            return self.verifier.nonces.read(identity)

    def balance(self, identity: Identifier) -> int:
        with self._lock:
            return read_balance(self.storage, identity)

    def allowance(self, from_id: Identifier, spender: Identifier) -> int:
        with self._lock:
            return read_allowance(self.storage, from_id, spender)

    def is_frozen(self, identity: Identifier) -> bool:
        with self._lock:
            return read_state(self.storage, identity)

    # ============================================================
    # Holder operations
    # ============================================================

    def approve(
        self,
        from_auth: KeyedAuthorization,
        spender: Identifier,
        amount: int,
        *,
        context: InvocationContext = DIRECT_INVOCATION,
    ) -> None:
        with self._operation("approve"):
            require_amount(amount)
            from_id = get_identifier(from_auth, context)
            self.verifier.check_auth(from_auth, Domain.APPROVE, (spender, amount), context)
            write_allowance(self.storage, from_id, spender, amount)
            audit_log.operation_completed(
                "approve", identity=from_id.short(), spender=spender.short(), amount=str(amount)
            )

    def transfer(
        self,
        from_auth: KeyedAuthorization,
        to: Identifier,
        amount: int,
        *,
        context: InvocationContext = DIRECT_INVOCATION,
    ) -> None:
        with self._operation("transfer"):
            require_amount(amount)
            from_id = get_identifier(from_auth, context)
            self.verifier.check_auth(from_auth, Domain.TRANSFER, (to, amount), context)
            spend_balance(self.storage, from_id, amount)
            receive_balance(self.storage, to, amount)
            audit_log.operation_completed(
                "transfer", identity=from_id.short(), to=to.short(), amount=str(amount)
            )

    def transfer_from(
        self,
        spender_auth: KeyedAuthorization,
        from_id: Identifier,
        to: Identifier,
        amount: int,
        *,
        context: InvocationContext = DIRECT_INVOCATION,
    ) -> None:
        with self._operation("transfer_from"):
            require_amount(amount)
            spender = get_identifier(spender_auth, context)
            self.verifier.check_auth(spender_auth, Domain.TRANSFER_FROM, (from_id, to, amount), context)
            spend_allowance(self.storage, from_id, spender, amount)
            spend_balance(self.storage, from_id, amount)
            receive_balance(self.storage, to, amount)
            audit_log.operation_completed(
                "transfer_from",
                identity=spender.short(),
                owner=from_id.short(),
                to=to.short(),
                amount=str(amount),
            )

    # ============================================================
    # Administrator operations
    # ============================================================

    def burn(
        self,
        admin_auth: Authorization,
        from_id: Identifier,
        amount: int,
        *,
        context: InvocationContext = DIRECT_INVOCATION,
    ) -> None:
        with self._operation("burn"):
            require_amount(amount)
            self._check_admin(admin_auth, Domain.BURN, (from_id, amount), context)
            spend_balance(self.storage, from_id, amount)
            audit_log.operation_completed("burn", owner=from_id.short(), amount=str(amount))

    def mint(
        self,
        admin_auth: Authorization,
        to: Identifier,
        amount: int,
        *,
        context: InvocationContext = DIRECT_INVOCATION,
    ) -> None:
        with self._operation("mint"):
            require_amount(amount)
            self._check_admin(admin_auth, Domain.MINT, (to, amount), context)
            receive_balance(self.storage, to, amount)
            audit_log.operation_completed("mint", to=to.short(), amount=str(amount))

    def freeze(
        self,
        admin_auth: Authorization,
        identity: Identifier,
        *,
        context: InvocationContext = DIRECT_INVOCATION,
    ) -> None:
        with self._operation("freeze"):
            self._check_admin(admin_auth, Domain.FREEZE, (identity,), context)
            write_state(self.storage, identity, True)
            audit_log.operation_completed("freeze", target=identity.short())

    def unfreeze(
        self,
        admin_auth: Authorization,
        identity: Identifier,
        *,
        context: InvocationContext = DIRECT_INVOCATION,
    ) -> None:
        with self._operation("unfreeze"):
            self._check_admin(admin_auth, Domain.UNFREEZE, (identity,), context)
            write_state(self.storage, identity, False)
            audit_log.operation_completed("unfreeze", target=identity.short())

    def set_admin(
        self,
        admin_auth: Authorization,
        new_admin: Identifier,
        *,
        context: InvocationContext = DIRECT_INVOCATION,
    ) -> None:
        with self._operation("set_admin"):
            if not isinstance(new_admin, Identifier):
                raise TypeError("new_admin must be an Identifier")
            previous = self._check_admin(admin_auth, Domain.SET_ADMINISTRATOR, (new_admin,), context)
            write_administrator(self.storage, new_admin)
            audit_log.administrator_changed(previous.short(), new_admin.short())
