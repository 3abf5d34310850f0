"""Storage error hierarchy shared by every store.

Absence is never an error: stores return ``None`` or an empty list for rows
that do not exist (or have expired). Exceptions are reserved for conflicts and
infrastructure faults so callers can always tell the two apart.
"""

from __future__ import annotations

from typing import Optional, Sequence


class StorageError(Exception):
    """Base class for store errors."""

    def __init__(self, message: str, *, operation: Optional[str] = None) -> None:
        super().__init__(message)
        self.operation = operation


class ConflictError(StorageError):
    """Raised when a write violates a uniqueness or foreign-key constraint."""


class StorageFaultError(StorageError):
    """Raised when the underlying engine fails (connectivity, bad statement, corrupt data)."""

    def __init__(
        self,
        message: str,
        *,
        operation: Optional[str] = None,
        failed_ids: Sequence[str] = (),
    ) -> None:
        super().__init__(message, operation=operation)
        self.failed_ids = list(failed_ids)
