"""Exception hierarchy shared by the core algorithms and host adapters."""

from __future__ import annotations


class CelsweepError(Exception):
    """Base class for all celsweep failures."""


class ResolutionError(CelsweepError, LookupError):
    """Raised when a track's linked column or asset identity cannot be determined."""


class StorageMutationError(CelsweepError, RuntimeError):
    """Raised by a host when a column storage primitive fails."""


class TransactionError(CelsweepError, RuntimeError):
    """Raised when the undo transaction boundary cannot be established or closed."""


class AdapterNotFoundError(CelsweepError, LookupError):
    """Raised when no adapter matches the provided scene file or adapter name."""


__all__ = [
    "AdapterNotFoundError",
    "CelsweepError",
    "ResolutionError",
    "StorageMutationError",
    "TransactionError",
]
