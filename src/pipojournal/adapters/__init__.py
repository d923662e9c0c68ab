"""Adapters - I/O implementations of ports."""

from .supabase_auth import SupabaseAuth
from .supabase_store import SupabaseStore

__all__ = [
    "SupabaseAuth",
    "SupabaseStore",
]
