"""
Account model.

Multi-signer accounts are owned by the host environment. The verifier only
asks two questions of it: the account's medium threshold and the weight of
a given signer. Signers the account does not list weigh 0.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict, Optional

from .errors import UnknownAccount

MAX_SIGNER_WEIGHT = 255
MAX_THRESHOLD = 255


class AccountDirectory(ABC):
    """Abstract interface to the host's account model."""

    @abstractmethod
    def medium_threshold(self, account_key: bytes) -> int:
        """Weight an account proof must reach. Raises UnknownAccount."""
        pass

    @abstractmethod
    def signer_weight(self, account_key: bytes, public_key: bytes) -> int:
        """Weight of `public_key` on the account, 0 if it is not a signer."""
        pass


class InMemoryAccountDirectory(AccountDirectory):
    """Thread-safe in-memory account directory."""

    def __init__(self):
        self._thresholds: Dict[bytes, int] = {}
        self._signers: Dict[bytes, Dict[bytes, int]] = {}
        self._lock = threading.Lock()

    def register(
        self,
        account_key: bytes,
        medium_threshold: int,
        signers: Optional[Dict[bytes, int]] = None,
    ) -> None:
        """Create or replace an account with its threshold and signer weights."""
        if not 0 <= medium_threshold <= MAX_THRESHOLD:
            raise ValueError(f"medium_threshold must be in 0..{MAX_THRESHOLD}")
        signers = dict(signers or {})
        for key, weight in signers.items():
            if len(key) != 32:
                raise ValueError("signer keys must be 32 bytes")
            if not 0 <= weight <= MAX_SIGNER_WEIGHT:
                raise ValueError(f"signer weight must be in 0..{MAX_SIGNER_WEIGHT}")
        with self._lock:
            self._thresholds[bytes(account_key)] = medium_threshold
            self._signers[bytes(account_key)] = signers

    def medium_threshold(self, account_key: bytes) -> int:
        with self._lock:
            if account_key not in self._thresholds:
                raise UnknownAccount(f"Unknown account {account_key.hex()[:8]}")
            return self._thresholds[account_key]

    def signer_weight(self, account_key: bytes, public_key: bytes) -> int:
        with self._lock:
            if account_key not in self._signers:
                raise UnknownAccount(f"Unknown account {account_key.hex()[:8]}")
            return self._signers[account_key].get(public_key, 0)
