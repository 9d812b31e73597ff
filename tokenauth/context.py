"""
Invocation context.

The host environment tells the authorization core which contract, if any,
invoked the current operation. It is passed explicitly into the verifier and
admin resolution rather than read from global state.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import NotAuthorized


@dataclass(frozen=True)
class InvocationContext:
    """Call-context facts supplied by the host for one operation."""
    invoking_contract: Optional[bytes] = None

    def __post_init__(self):
        if self.invoking_contract is not None and len(self.invoking_contract) != 32:
            raise ValueError("invoking_contract must be 32 bytes")

    def require_invoking_contract(self) -> bytes:
        """Return the invoking contract address or fail when called directly."""
        if self.invoking_contract is None:
            raise NotAuthorized("operation was not invoked by a contract")
        return self.invoking_contract


# Direct invocation by an external caller
DIRECT_INVOCATION = InvocationContext()
