"""
Storage and Nonce Registry Tests

Both backends must round-trip every value type the ledger stores and must
discard all writes made inside a failed transaction.
"""

import os
import shutil
import tempfile
import unittest

from tokenauth import (
    DataKey,
    Identifier,
    InMemoryStorage,
    NonceOverflow,
    NonceRegistry,
    SqliteStorage,
    MAX_NONCE,
)
from tokenauth.config import create_storage, is_production, validate_config

ALICE = Identifier.ed25519(b"\x0a" * 32)
BOB = Identifier.account(b"\x0b" * 32)


class StorageContract:
    """Behaviour shared by every Storage backend."""

    def make_storage(self):
        raise NotImplementedError

    def setUp(self):
        self.storage = self.make_storage()

    def test_missing_key(self):
        self.assertFalse(self.storage.has(DataKey.balance(ALICE)))
        self.assertIsNone(self.storage.get(DataKey.balance(ALICE)))
        self.assertEqual(self.storage.get(DataKey.balance(ALICE), 0), 0)

    def test_value_types_round_trip(self):
        values = {
            DataKey.balance(ALICE): 2**128 + 5,
            DataKey.state(ALICE): True,
            DataKey.admin(): BOB,
            DataKey.name(): b"token name",
            DataKey.decimals(): 7,
        }
        for key, value in values.items():
            self.storage.set(key, value)
        for key, value in values.items():
            self.assertTrue(self.storage.has(key))
            self.assertEqual(self.storage.get(key), value)

    def test_keys_are_scoped_by_identity(self):
        self.storage.set(DataKey.allowance(ALICE, BOB), 5)
        self.assertEqual(self.storage.get(DataKey.allowance(BOB, ALICE), 0), 0)
        self.assertEqual(self.storage.get(DataKey.allowance(ALICE, BOB)), 5)

    def test_commit(self):
        with self.storage.transaction():
            self.storage.set(DataKey.balance(ALICE), 10)
        self.assertEqual(self.storage.get(DataKey.balance(ALICE)), 10)

    def test_rollback_discards_every_write(self):
        self.storage.set(DataKey.balance(ALICE), 10)
        with self.assertRaises(RuntimeError):
            with self.storage.transaction():
                self.storage.set(DataKey.balance(ALICE), 0)
                self.storage.set(DataKey.balance(BOB), 10)
                raise RuntimeError("abort")
        self.assertEqual(self.storage.get(DataKey.balance(ALICE)), 10)
        self.assertFalse(self.storage.has(DataKey.balance(BOB)))

    def test_nested_transaction_joins_outer(self):
        with self.assertRaises(RuntimeError):
            with self.storage.transaction():
                with self.storage.transaction():
                    self.storage.set(DataKey.balance(ALICE), 1)
                raise RuntimeError("abort")
        self.assertFalse(self.storage.has(DataKey.balance(ALICE)))


class TestInMemoryStorage(StorageContract, unittest.TestCase):

    def make_storage(self):
        return InMemoryStorage()

    def test_clear(self):
        self.storage.set(DataKey.balance(ALICE), 1)
        self.assertEqual(len(self.storage), 1)
        self.storage.clear()
        self.assertEqual(len(self.storage), 0)


class TestSqliteStorage(StorageContract, unittest.TestCase):

    def make_storage(self):
        return SqliteStorage(":memory:")

    def tearDown(self):
        self.storage.close()


class TestSqlitePersistence(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.mkdtemp()
        self.path = os.path.join(self.tmpdir, "nested", "ledger.db")

    def tearDown(self):
        shutil.rmtree(self.tmpdir, ignore_errors=True)

    def test_survives_reopen(self):
        storage = SqliteStorage(self.path)
        storage.set(DataKey.nonce(ALICE), 3)
        storage.close()

        reopened = SqliteStorage(self.path)
        self.assertEqual(reopened.get(DataKey.nonce(ALICE)), 3)
        reopened.close()


class TestNonceRegistry(unittest.TestCase):

    def setUp(self):
        self.storage = InMemoryStorage()
        self.nonces = NonceRegistry(self.storage)

    def test_defaults_to_zero(self):
        self.assertEqual(self.nonces.read(ALICE), 0)
        self.assertFalse(self.storage.has(DataKey.nonce(ALICE)))

    def test_increment_returns_previous(self):
        self.assertEqual(self.nonces.read_and_increment(ALICE), 0)
        self.assertEqual(self.nonces.read_and_increment(ALICE), 1)
        self.assertEqual(self.nonces.read(ALICE), 2)

    def test_identities_are_independent(self):
        self.nonces.read_and_increment(ALICE)
        self.assertEqual(self.nonces.read(BOB), 0)
        self.assertEqual(self.nonces.read(Identifier.account(ALICE.value)), 0)

    def test_overflow_fails_without_writing(self):
        self.storage.set(DataKey.nonce(ALICE), MAX_NONCE)
        with self.assertRaises(NonceOverflow):
            self.nonces.read_and_increment(ALICE)
        self.assertEqual(self.nonces.read(ALICE), MAX_NONCE)


class TestConfig(unittest.TestCase):

    def test_create_storage(self):
        self.assertIsInstance(create_storage("memory"), InMemoryStorage)
        storage = create_storage("sqlite", ":memory:")
        self.assertIsInstance(storage, SqliteStorage)
        storage.close()
        with self.assertRaises(ValueError):
            create_storage("redis")

    def test_defaults_validate(self):
        checks = validate_config()
        self.assertIn("storage", checks)
        self.assertIsInstance(is_production(), bool)


if __name__ == "__main__":
    unittest.main()
