"""Request models for the HTTP host service."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .context import InvocationContext
from .identity import (
    Authorization,
    Identifier,
    KeyedAuthorization,
    authorization_from_dict,
    keyed_authorization_from_dict,
)


def parse_identifier_ref(ref: str) -> Identifier:
    """Parse the compact 'Kind:hex' form used in query strings."""
    kind, sep, value = ref.partition(":")
    if not sep:
        raise ValueError("identifier must look like 'Kind:hex'")
    return Identifier.from_dict({"type": kind, "value": value})


class IdentifierModel(BaseModel):
    type: str
    value: str

    def to_identifier(self) -> Identifier:
        return Identifier.from_dict(self.model_dump())


class SignatureModel(BaseModel):
    public_key: str
    signature: str


class AuthorizationModel(BaseModel):
    type: str
    public_key: Optional[str] = None
    signature: Optional[str] = None
    signatures: List[SignatureModel] = Field(default_factory=list)

    def to_keyed(self) -> KeyedAuthorization:
        return keyed_authorization_from_dict(self.model_dump(exclude_none=True))

    def to_unkeyed(self) -> Authorization:
        return authorization_from_dict(self.model_dump(exclude_none=True))


class OperationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    auth: AuthorizationModel
    # Hex address of the calling contract, when the host call is contract-initiated
    invoking_contract: Optional[str] = None

    def context(self) -> InvocationContext:
        if self.invoking_contract is None:
            return InvocationContext()
        return InvocationContext(bytes.fromhex(self.invoking_contract))


class InitializeRequest(BaseModel):
    admin: IdentifierModel
    decimals: int
    name: str
    symbol: str


class ApproveRequest(OperationRequest):
    spender: IdentifierModel
    amount: int


class TransferRequest(OperationRequest):
    to: IdentifierModel
    amount: int


class TransferFromRequest(OperationRequest):
    from_: IdentifierModel = Field(alias="from")
    to: IdentifierModel
    amount: int


class BurnRequest(OperationRequest):
    from_: IdentifierModel = Field(alias="from")
    amount: int


class MintRequest(OperationRequest):
    to: IdentifierModel
    amount: int


class FreezeRequest(OperationRequest):
    id: IdentifierModel


class SetAdminRequest(OperationRequest):
    new_admin: IdentifierModel
