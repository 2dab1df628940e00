"""
Errors raised by the ledger store and reported by the HTTP layer.

The balance and settlement engine itself raises nothing; these belong to the
write path that guarantees the engine a consistent snapshot.
"""

from typing import Any, Dict, Optional


class LedgerError(Exception):
    """Base exception for all ledger errors."""

    status_code = 500
    default_code = "internal"

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        result = {
            "error": self.message,
            "code": self.code,
        }
        if self.details:
            result["details"] = self.details
        return result


class InvalidArgumentError(LedgerError):
    """Raised when a write request is malformed."""

    status_code = 400
    default_code = "invalid_argument"


class NotFoundError(LedgerError):
    """Raised when a member or expense id does not exist."""

    status_code = 404
    default_code = "not_found"

    def __init__(self, kind: str, ident: Any):
        super().__init__(
            f"{kind} not found",
            details={"kind": kind, "id": ident},
        )
        self.kind = kind
        self.ident = ident


class FailedPreconditionError(LedgerError):
    """Raised when the ledger state forbids an otherwise valid request."""

    status_code = 409
    default_code = "failed_precondition"
