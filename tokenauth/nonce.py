"""
Nonce Registry

Per-identity replay counters. A nonce starts at 0 and moves forward by
exactly one for every accepted signed authorization, so a signature over
nonce N can never be accepted again once N has been consumed.
"""

import logging

from .arithmetic import checked_add
from .errors import NonceOverflow
from .identity import Identifier
from .logging_config import audit_log
from .storage import DataKey, Storage

logger = logging.getLogger(__name__)

MAX_NONCE = 2**64 - 1


class NonceRegistry:
    """Reads and advances nonces held in ledger storage."""

    def __init__(self, storage: Storage):
        self._storage = storage

    def read(self, identity: Identifier) -> int:
        """Current nonce of `identity` (0 if it never signed anything)."""
        return self._storage.get(DataKey.nonce(identity), 0)

    def read_and_increment(self, identity: Identifier) -> int:
        """
        Consume the current nonce.

        Returns the value before the increment. Nothing is written when the
        counter is already at MAX_NONCE.
        """
        nonce = self.read(identity)
        next_nonce = checked_add(nonce, 1, limit=MAX_NONCE, error=NonceOverflow)
        self._storage.set(DataKey.nonce(identity), next_nonce)
        logger.debug("nonce %s -> %s for %s", nonce, next_nonce, identity.short())
        audit_log.nonce_consumed(identity.short(), nonce)
        return nonce
