"""
HTTP host service.

Exposes a Token over HTTP. Identities and proofs travel as hex-encoded JSON;
query endpoints take identities in the compact 'Kind:hex' form. Failures
come back as {"detail": {"code": ..., "message": ...}} so that a client can
tell a bad signature (403) from insufficient funds (422).
"""

import logging
from typing import Any, Callable, Dict, Optional

from fastapi import FastAPI, HTTPException

from .config import create_storage, is_production
from .contract import Token
from .errors import (
    AlreadyInitialized,
    AuthorizationError,
    EncodingError,
    NotInitialized,
    TokenError,
)
from .logging_config import audit_log
from .models import (
    ApproveRequest,
    BurnRequest,
    FreezeRequest,
    InitializeRequest,
    MintRequest,
    SetAdminRequest,
    TransferFromRequest,
    TransferRequest,
    parse_identifier_ref,
)

logger = logging.getLogger(__name__)


def status_for(error: TokenError) -> int:
    """HTTP status for a rejected operation."""
    if isinstance(error, AuthorizationError):
        return 403
    if isinstance(error, (AlreadyInitialized, NotInitialized)):
        return 409
    if isinstance(error, EncodingError):
        return 400
    return 422


def _run(fn: Callable[[], Any]) -> Any:
    try:
        return fn()
    except TokenError as e:
        if isinstance(e, AuthorizationError):
            audit_log.security_event("authorization_failed", severity="low", code=e.code.value)
        raise HTTPException(status_for(e), e.to_dict())
    except ValueError as e:
        raise HTTPException(400, {"code": "MALFORMED_REQUEST", "message": str(e)})


def _identifier(ref: str):
    try:
        return parse_identifier_ref(ref)
    except ValueError as e:
        raise HTTPException(400, {"code": "MALFORMED_REQUEST", "message": str(e)})


def create_app(token: Optional[Token] = None) -> FastAPI:
    """Build the service around `token` (default: configured storage)."""
    token = token if token is not None else Token(create_storage())
    app = FastAPI(title="tokenauth ledger", docs_url=None if is_production() else "/docs")
    app.state.token = token

    @app.get("/health")
    def health() -> Dict[str, Any]:
        return {"status": "ok"}

    @app.get("/metadata")
    def metadata():
        return _run(lambda: {
            "decimals": token.decimals(),
            "name": token.name().decode('utf-8', errors='replace'),
            "symbol": token.symbol().decode('utf-8', errors='replace'),
            "administrator": token.administrator().to_dict(),
        })

    @app.get("/nonce")
    def nonce(id: str):
        return {"nonce": token.nonce(_identifier(id))}

    @app.get("/balance")
    def balance(id: str):
        return {"balance": token.balance(_identifier(id))}

    @app.get("/allowance")
    def allowance(from_id: str, spender: str):
        return {"allowance": token.allowance(_identifier(from_id), _identifier(spender))}

    @app.get("/is_frozen")
    def is_frozen(id: str):
        return {"frozen": token.is_frozen(_identifier(id))}

    @app.post("/initialize")
    def initialize(req: InitializeRequest):
        _run(lambda: token.initialize(req.admin.to_identifier(), req.decimals, req.name, req.symbol))
        return {"status": "initialized"}

    @app.post("/approve")
    def approve(req: ApproveRequest):
        _run(lambda: token.approve(
            req.auth.to_keyed(), req.spender.to_identifier(), req.amount, context=req.context()
        ))
        return {"status": "ok"}

    @app.post("/transfer")
    def transfer(req: TransferRequest):
        _run(lambda: token.transfer(
            req.auth.to_keyed(), req.to.to_identifier(), req.amount, context=req.context()
        ))
        return {"status": "ok"}

    @app.post("/transfer_from")
    def transfer_from(req: TransferFromRequest):
        _run(lambda: token.transfer_from(
            req.auth.to_keyed(),
            req.from_.to_identifier(),
            req.to.to_identifier(),
            req.amount,
            context=req.context(),
        ))
        return {"status": "ok"}

    @app.post("/burn")
    def burn(req: BurnRequest):
        _run(lambda: token.burn(
            req.auth.to_unkeyed(), req.from_.to_identifier(), req.amount, context=req.context()
        ))
        return {"status": "ok"}

    @app.post("/mint")
    def mint(req: MintRequest):
        _run(lambda: token.mint(
            req.auth.to_unkeyed(), req.to.to_identifier(), req.amount, context=req.context()
        ))
        return {"status": "ok"}

    @app.post("/freeze")
    def freeze(req: FreezeRequest):
        _run(lambda: token.freeze(req.auth.to_unkeyed(), req.id.to_identifier(), context=req.context()))
        return {"status": "ok"}

    @app.post("/unfreeze")
    def unfreeze(req: FreezeRequest):
        _run(lambda: token.unfreeze(req.auth.to_unkeyed(), req.id.to_identifier(), context=req.context()))
        return {"status": "ok"}

    @app.post("/set_admin")
    def set_admin(req: SetAdminRequest):
        _run(lambda: token.set_admin(
            req.auth.to_unkeyed(), req.new_admin.to_identifier(), context=req.context()
        ))
        return {"status": "ok"}

    logger.info("tokenauth service created")
    return app
