"""
Ledger storage.

Key-value persistence for every piece of ledger state: balances, allowances,
nonces, frozen flags, the administrator and token metadata. Writes made
inside `transaction()` are committed together on success and discarded when
the block raises, so a failed operation never leaves a consumed nonce or a
half-applied transfer behind.
"""

import copy
import json
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterator, Tuple

from .canonicalization import canonical_value, canonicalize_str, from_canonical_value
from .identity import Identifier

logger = logging.getLogger(__name__)


class DataKeyKind(str, Enum):
    ALLOWANCE = "Allowance"
    BALANCE = "Balance"
    NONCE = "Nonce"
    STATE = "State"
    ADMIN = "Admin"
    DECIMALS = "Decimals"
    NAME = "Name"
    SYMBOL = "Symbol"


@dataclass(frozen=True)
class DataKey:
    """Storage key: a kind plus the identities it is scoped to."""
    kind: DataKeyKind
    ids: Tuple[Identifier, ...] = ()

    @classmethod
    def allowance(cls, from_id: Identifier, spender: Identifier) -> "DataKey":
        return cls(DataKeyKind.ALLOWANCE, (from_id, spender))

    @classmethod
    def balance(cls, identifier: Identifier) -> "DataKey":
        return cls(DataKeyKind.BALANCE, (identifier,))

    @classmethod
    def nonce(cls, identifier: Identifier) -> "DataKey":
        return cls(DataKeyKind.NONCE, (identifier,))

    @classmethod
    def state(cls, identifier: Identifier) -> "DataKey":
        return cls(DataKeyKind.STATE, (identifier,))

    @classmethod
    def admin(cls) -> "DataKey":
        return cls(DataKeyKind.ADMIN)

    @classmethod
    def decimals(cls) -> "DataKey":
        return cls(DataKeyKind.DECIMALS)

    @classmethod
    def name(cls) -> "DataKey":
        return cls(DataKeyKind.NAME)

    @classmethod
    def symbol(cls) -> "DataKey":
        return cls(DataKeyKind.SYMBOL)

    def encode(self) -> str:
        """Stable text form, used as the SQLite primary key."""
        return canonicalize_str([self.kind.value, [canonical_value(i) for i in self.ids]])


class Storage(ABC):
    """Abstract key-value store for ledger state."""

    @abstractmethod
    def has(self, key: DataKey) -> bool:
        pass

    @abstractmethod
    def get(self, key: DataKey, default: Any = None) -> Any:
        pass

    @abstractmethod
    def set(self, key: DataKey, value: Any) -> None:
        pass

    @abstractmethod
    def transaction(self):
        """Context manager: commit on success, roll back on any exception."""
        pass


class InMemoryStorage(Storage):
    """
    Dict-backed storage.

    Transactions snapshot the dict on entry and restore it on failure.
    Nested transactions join the outermost one.
    """

    def __init__(self):
        self._data: Dict[DataKey, Any] = {}
        self._lock = threading.RLock()
        self._depth = 0

    def has(self, key: DataKey) -> bool:
        with self._lock:
            return key in self._data

    def get(self, key: DataKey, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: DataKey, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    @contextmanager
    def transaction(self) -> Iterator["InMemoryStorage"]:
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            snapshot = copy.copy(self._data)
            self._depth = 1
            try:
                yield self
            except BaseException:
                self._data = snapshot
                raise
            finally:
                self._depth = 0

    def clear(self) -> None:
        with self._lock:
            self._data.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)


class SqliteStorage(Storage):
    """
    SQLite-backed storage.

    One connection guarded by a lock; WAL journal. Values are stored as
    canonical JSON of their typed form, so ints of any size, bytes and
    Identifiers round-trip exactly.
    """

    def __init__(self, db_path: str = "data/tokenauth.db"):
        self._db_path = db_path
        self._lock = threading.RLock()
        self._depth = 0
        self._conn = self._connect()
        self._init_schema()

    def _connect(self) -> sqlite3.Connection:
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self._db_path, check_same_thread=False, isolation_level=None)
        conn.execute("PRAGMA journal_mode=WAL;")
        conn.execute("PRAGMA synchronous=NORMAL;")
        conn.execute("PRAGMA temp_store=MEMORY;")
        return conn

    def _init_schema(self) -> None:
        with self.transaction():
            self._conn.execute("""
            CREATE TABLE IF NOT EXISTS ledger_entries (
                entry_key TEXT PRIMARY KEY,
                entry_value TEXT NOT NULL
            );""")

    @contextmanager
    def transaction(self) -> Iterator["SqliteStorage"]:
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            self._conn.execute("BEGIN IMMEDIATE")
            self._depth = 1
            try:
                yield self
                self._conn.execute("COMMIT")
            except BaseException:
                self._conn.execute("ROLLBACK")
                logger.debug("storage transaction rolled back")
                raise
            finally:
                self._depth = 0

    def has(self, key: DataKey) -> bool:
        with self._lock:
            row = self._conn.execute(
                "SELECT 1 FROM ledger_entries WHERE entry_key=?", (key.encode(),)
            ).fetchone()
            return row is not None

    def get(self, key: DataKey, default: Any = None) -> Any:
        with self._lock:
            row = self._conn.execute(
                "SELECT entry_value FROM ledger_entries WHERE entry_key=?", (key.encode(),)
            ).fetchone()
        if row is None:
            return default
        return from_canonical_value(json.loads(row[0]))

    def set(self, key: DataKey, value: Any) -> None:
        encoded = canonicalize_str(canonical_value(value))
        with self._lock:
            self._conn.execute(
                "INSERT OR REPLACE INTO ledger_entries(entry_key, entry_value) VALUES(?,?)",
                (key.encode(), encoded),
            )

    def close(self) -> None:
        with self._lock:
            self._conn.close()
