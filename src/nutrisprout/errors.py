"""Custom exceptions."""

from __future__ import annotations

from typing import Optional


class NutriSproutError(Exception):
    """Base exception for nutrisprout errors."""

    pass


class StoreError(NutriSproutError):
    """Raised when a storage backend cannot complete a read or write."""

    def __init__(self, message: str, operation: Optional[str] = None):
        super().__init__(message)
        self.operation = operation


class SessionError(NutriSproutError):
    """Raised when an operation needs a session mode the caller is not in."""

    pass
