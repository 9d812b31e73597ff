"""
Ledger state.

Balances, allowances and frozen flags keyed by Identifier, plus token
metadata. Missing entries read as 0, 0 and not frozen. A frozen identity
can neither receive nor spend.
"""

from .arithmetic import checked_add, checked_sub, require_amount
from .errors import (
    FrozenAccount,
    InsufficientAllowance,
    InsufficientBalance,
    InvalidConfiguration,
    NotInitialized,
)
from .identity import Identifier
from .storage import DataKey, Storage

MAX_DECIMALS = 255


# ============================================================
# Balances
# ============================================================

def read_balance(storage: Storage, identity: Identifier) -> int:
    return storage.get(DataKey.balance(identity), 0)


def write_balance(storage: Storage, identity: Identifier, amount: int) -> None:
    storage.set(DataKey.balance(identity), require_amount(amount))


def receive_balance(storage: Storage, identity: Identifier, amount: int) -> None:
    require_amount(amount)
    if read_state(storage, identity):
        raise FrozenAccount(f"{identity.short()} is frozen", {"identity": identity.to_dict()})
    balance = read_balance(storage, identity)
    write_balance(storage, identity, checked_add(balance, amount))


def spend_balance(storage: Storage, identity: Identifier, amount: int) -> None:
    require_amount(amount)
    if read_state(storage, identity):
        raise FrozenAccount(f"{identity.short()} is frozen", {"identity": identity.to_dict()})
    balance = read_balance(storage, identity)
    if balance < amount:
        raise InsufficientBalance(
            "insufficient balance",
            {"balance": str(balance), "amount": str(amount)},
        )
    write_balance(storage, identity, checked_sub(balance, amount))


# ============================================================
# Allowances
# ============================================================

def read_allowance(storage: Storage, from_id: Identifier, spender: Identifier) -> int:
    return storage.get(DataKey.allowance(from_id, spender), 0)


def write_allowance(storage: Storage, from_id: Identifier, spender: Identifier, amount: int) -> None:
    storage.set(DataKey.allowance(from_id, spender), require_amount(amount))


def spend_allowance(storage: Storage, from_id: Identifier, spender: Identifier, amount: int) -> None:
    require_amount(amount)
    allowance = read_allowance(storage, from_id, spender)
    if allowance < amount:
        raise InsufficientAllowance(
            "insufficient allowance",
            {"allowance": str(allowance), "amount": str(amount)},
        )
    write_allowance(storage, from_id, spender, checked_sub(allowance, amount))


# ============================================================
# Frozen state
# ============================================================

def read_state(storage: Storage, identity: Identifier) -> bool:
    return bool(storage.get(DataKey.state(identity), False))


def write_state(storage: Storage, identity: Identifier, frozen: bool) -> None:
    storage.set(DataKey.state(identity), bool(frozen))


# ============================================================
# Metadata
# ============================================================

def _to_bytes(value, field_name: str) -> bytes:
    if isinstance(value, str):
        return value.encode('utf-8')
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise InvalidConfiguration(f"{field_name} must be str or bytes")


def write_decimals(storage: Storage, decimals: int) -> None:
    if isinstance(decimals, bool) or not isinstance(decimals, int):
        raise InvalidConfiguration("decimals must be an integer")
    if not 0 <= decimals <= MAX_DECIMALS:
        raise InvalidConfiguration(f"decimals must fit in a u8 (0..{MAX_DECIMALS})")
    storage.set(DataKey.decimals(), decimals)


def read_decimals(storage: Storage) -> int:
    decimals = storage.get(DataKey.decimals())
    if decimals is None:
        raise NotInitialized("token metadata not set")
    return decimals


def write_name(storage: Storage, name) -> None:
    storage.set(DataKey.name(), _to_bytes(name, "name"))


def read_name(storage: Storage) -> bytes:
    name = storage.get(DataKey.name())
    if name is None:
        raise NotInitialized("token metadata not set")
    return name


def write_symbol(storage: Storage, symbol) -> None:
    storage.set(DataKey.symbol(), _to_bytes(symbol, "symbol"))


def read_symbol(storage: Storage) -> bytes:
    symbol = storage.get(DataKey.symbol())
    if symbol is None:
        raise NotInitialized("token metadata not set")
    return symbol
