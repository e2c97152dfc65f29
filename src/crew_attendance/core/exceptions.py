from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidTransition(ValidationError):
    """Raised when a punch is not allowed in the worker's current day state."""

    def __init__(self, message: str, *, worker_id: Optional[str] = None, kind=None, state=None):
        super().__init__(message)
        self.worker_id = worker_id
        self.kind = kind
        self.state = state


class MalformedWindow(ValidationError):
    """Raised when a reporting window ends before it starts."""
