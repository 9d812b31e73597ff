"""
Token Authorization Failure Taxonomy

Every rejected operation raises a TokenError subclass carrying a stable
FailureCode, so callers can tell a bad signature from insufficient funds.
An error aborts the whole call: no nonce, balance or allowance change is
committed.
"""

from enum import Enum
from typing import Any, Dict, Optional


class FailureCode(str, Enum):
    """Stable failure codes reported by the authorization core."""
    # Authorization
    NOT_AUTHORIZED = "NOT_AUTHORIZED"
    UNKNOWN_ACCOUNT = "UNKNOWN_ACCOUNT"
    IDENTITY_MISMATCH = "IDENTITY_MISMATCH"
    INVALID_SIGNATURE = "INVALID_SIGNATURE"
    SIGNATURES_OUT_OF_ORDER = "SIGNATURES_OUT_OF_ORDER"
    INSUFFICIENT_WEIGHT = "INSUFFICIENT_WEIGHT"
    WEIGHT_OVERFLOW = "WEIGHT_OVERFLOW"
    NONCE_OVERFLOW = "NONCE_OVERFLOW"

    # Ledger state
    ALREADY_INITIALIZED = "ALREADY_INITIALIZED"
    NOT_INITIALIZED = "NOT_INITIALIZED"
    FROZEN_ACCOUNT = "FROZEN_ACCOUNT"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    INSUFFICIENT_ALLOWANCE = "INSUFFICIENT_ALLOWANCE"
    ARITHMETIC_OVERFLOW = "ARITHMETIC_OVERFLOW"
    ARITHMETIC_UNDERFLOW = "ARITHMETIC_UNDERFLOW"
    INVALID_AMOUNT = "INVALID_AMOUNT"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"

    # Message codec
    ENCODING_ERROR = "ENCODING_ERROR"
    UNSUPPORTED_MESSAGE_VERSION = "UNSUPPORTED_MESSAGE_VERSION"


class TokenError(Exception):
    """
    Base error for every rejected token operation.

    Attributes:
        code: Stable FailureCode for programmatic handling
        message: Human-readable description
        details: Optional structured context (never contains signatures)
    """

    code: FailureCode = FailureCode.NOT_AUTHORIZED

    def __init__(self, message: str = "", details: Optional[Dict[str, Any]] = None):
        self.message = message or self.code.value
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            result["details"] = self.details
        return result


# ============================================================
# Authorization failures
# ============================================================

class AuthorizationError(TokenError):
    """The caller could not prove the right to perform the operation."""


class NotAuthorized(AuthorizationError):
    code = FailureCode.NOT_AUTHORIZED


class UnknownAccount(NotAuthorized):
    code = FailureCode.UNKNOWN_ACCOUNT


class IdentityMismatch(AuthorizationError):
    code = FailureCode.IDENTITY_MISMATCH


class InvalidSignature(AuthorizationError):
    code = FailureCode.INVALID_SIGNATURE


class SignaturesOutOfOrder(AuthorizationError):
    code = FailureCode.SIGNATURES_OUT_OF_ORDER


class InsufficientWeight(AuthorizationError):
    code = FailureCode.INSUFFICIENT_WEIGHT


# ============================================================
# Ledger state failures
# ============================================================

class LedgerError(TokenError):
    """The ledger state does not permit the operation."""


class AlreadyInitialized(LedgerError):
    code = FailureCode.ALREADY_INITIALIZED


class NotInitialized(LedgerError):
    code = FailureCode.NOT_INITIALIZED


class FrozenAccount(LedgerError):
    code = FailureCode.FROZEN_ACCOUNT


class InsufficientBalance(LedgerError):
    code = FailureCode.INSUFFICIENT_BALANCE


class InsufficientAllowance(LedgerError):
    code = FailureCode.INSUFFICIENT_ALLOWANCE


class ArithmeticOverflow(LedgerError):
    code = FailureCode.ARITHMETIC_OVERFLOW


class ArithmeticUnderflow(LedgerError):
    code = FailureCode.ARITHMETIC_UNDERFLOW


class InvalidAmount(LedgerError):
    code = FailureCode.INVALID_AMOUNT


class InvalidConfiguration(LedgerError):
    code = FailureCode.INVALID_CONFIGURATION


class WeightOverflow(AuthorizationError, ArithmeticOverflow):
    code = FailureCode.WEIGHT_OVERFLOW


class NonceOverflow(AuthorizationError, ArithmeticOverflow):
    code = FailureCode.NONCE_OVERFLOW


# ============================================================
# Codec failures
# ============================================================

class EncodingError(TokenError):
    """A value cannot be placed in, or read from, a signature payload."""
    code = FailureCode.ENCODING_ERROR


class UnsupportedMessageVersion(EncodingError):
    code = FailureCode.UNSUPPORTED_MESSAGE_VERSION
