"""Ports - interfaces/protocols for external dependencies."""

from .auth_provider import AuthenticationError, AuthProvider
from .record_store import GOALS, JOURNAL_ENTRIES, RecordStore, StoreError

__all__ = [
    "AuthProvider",
    "AuthenticationError",
    "RecordStore",
    "StoreError",
    "JOURNAL_ENTRIES",
    "GOALS",
]
