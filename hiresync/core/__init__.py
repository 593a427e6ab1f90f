"""Core application components."""

from hiresync.core.config import settings
from hiresync.core.exceptions import (
    ApplicationError,
    ConcurrencyConflictError,
    DataIntegrityError,
    RemoteRequestError,
)
from hiresync.core.storage import Base, TokenStorage, async_session

__all__ = [
    "ApplicationError",
    "Base",
    "ConcurrencyConflictError",
    "DataIntegrityError",
    "RemoteRequestError",
    "TokenStorage",
    "async_session",
    "settings",
]
