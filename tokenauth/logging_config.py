"""
Logging configuration for tokenauth.

Provides structured JSON logging and an audit logger for authorization
decisions and ledger mutations. Signatures are never logged; identities are
logged as short 'Kind:hexprefix' labels.
"""

import json
import logging
import sys
import time
import uuid
from contextvars import ContextVar
from typing import Any, Dict, List, Optional

# Context variable for per-operation call ID tracking
call_id_var: ContextVar[str] = ContextVar('call_id', default='')


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    One JSON object per record, suitable for log aggregation.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": time.strftime('%Y-%m-%dT%H:%M:%SZ', time.gmtime(record.created)),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        call_id = call_id_var.get()
        if call_id:
            log_data["call_id"] = call_id

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        if hasattr(record, 'extra_fields'):
            log_data.update(record.extra_fields)

        return json.dumps(log_data, default=str)


class AuditLogger:
    """
    Specialized logger for audit events.

    Records authorization outcomes, nonce consumption and ledger operations.
    """

    def __init__(self, name: str = "tokenauth.audit"):
        self._logger = logging.getLogger(name)

    def _log(self, level: int, event_type: str, **kwargs) -> None:
        if not self._logger.isEnabledFor(level):
            return
        extra = {
            "event_type": event_type,
            "call_id": call_id_var.get(),
            **kwargs
        }

        record = self._logger.makeRecord(
            self._logger.name,
            level,
            "",
            0,
            f"{event_type}: {kwargs.get('message', '')}",
            (),
            None
        )
        record.extra_fields = extra
        self._logger.handle(record)

    def authorization_accepted(
        self,
        identity: str,
        domain: str,
        proof: str,
        nonce: Optional[int] = None
    ) -> None:
        """Log an accepted authorization proof."""
        self._log(
            logging.INFO,
            "AUTHORIZATION_ACCEPTED",
            identity=identity,
            domain=domain,
            proof=proof,
            nonce=nonce,
            message=f"{proof} proof accepted for {domain}"
        )

    def authorization_rejected(
        self,
        identity: Optional[str],
        domain: str,
        proof: str,
        code: str,
        reason: str = ""
    ) -> None:
        """Log a rejected authorization proof."""
        self._log(
            logging.WARNING,
            "AUTHORIZATION_REJECTED",
            identity=identity,
            domain=domain,
            proof=proof,
            code=code,
            reason=reason,
            message=f"{proof} proof rejected for {domain}: {code}"
        )

    def nonce_consumed(self, identity: str, nonce: int) -> None:
        self._log(
            logging.DEBUG,
            "NONCE_CONSUMED",
            identity=identity,
            nonce=nonce,
            message=f"nonce {nonce} consumed by {identity}"
        )

    def operation_completed(self, operation: str, **details) -> None:
        """Log a committed ledger operation."""
        self._log(
            logging.INFO,
            "OPERATION_COMPLETED",
            operation=operation,
            **details,
            message=f"{operation} committed"
        )

    def operation_failed(self, operation: str, code: str, reason: str = "") -> None:
        """Log a rolled-back ledger operation."""
        self._log(
            logging.WARNING,
            "OPERATION_FAILED",
            operation=operation,
            code=code,
            reason=reason,
            message=f"{operation} failed: {code}"
        )

    def administrator_changed(self, previous: Optional[str], new: str) -> None:
        self._log(
            logging.WARNING,
            "ADMINISTRATOR_CHANGED",
            previous=previous,
            new=new,
            message=f"administrator changed to {new}"
        )

    def security_event(
        self,
        event: str,
        severity: str = "medium",
        **details
    ) -> None:
        """Log a security-relevant event."""
        level = {
            "low": logging.INFO,
            "medium": logging.WARNING,
            "high": logging.ERROR,
            "critical": logging.CRITICAL
        }.get(severity, logging.WARNING)

        self._log(
            level,
            "SECURITY_EVENT",
            security_event=event,
            severity=severity,
            **details,
            message=f"Security event: {event}"
        )


def configure_logging(
    level: str = "INFO",
    json_format: bool = True,
    log_file: Optional[str] = None
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Use JSON formatting (recommended for production)
        log_file: Optional file path for log output
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    if json_format:
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)


def set_call_id(call_id: Optional[str] = None) -> str:
    """
    Set the call ID for the current context.

    Args:
        call_id: Call ID to set, or None to generate one

    Returns:
        The call ID that was set
    """
    if call_id is None:
        call_id = str(uuid.uuid4())
    call_id_var.set(call_id)
    return call_id


def get_call_id() -> str:
    """Get the current call ID."""
    return call_id_var.get()


# Global audit logger instance
audit_log = AuditLogger()
