"""Custom exception hierarchy for culturegraph."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class CultureGraphError(Exception):
    """Base class for engine errors with structured payloads."""

    error_code: str
    message: str
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:
        base = f"[{self.error_code}] {self.message}"
        if self.details:
            return f"{base} :: {self.details}"
        return base


class GraphStoreUnavailableError(CultureGraphError):
    """Raised when the graph store fails the request-level health precondition."""


class ValidationFailedError(CultureGraphError):
    """Raised when inbound data is rejected before any store call."""


class ConfirmationRequiredError(CultureGraphError):
    """Raised when a destructive operation is invoked without explicit confirmation."""


class GraphQueryError(CultureGraphError):
    """Raised when a graph query result reports failure to a caller that must not degrade."""


def validation_error(message: str, fields: list[str]) -> ValidationFailedError:
    return ValidationFailedError(
        error_code="VALIDATION_ERROR",
        message=message,
        details={"fields": fields},
    )
