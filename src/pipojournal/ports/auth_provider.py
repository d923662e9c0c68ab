"""Auth provider interface."""

from typing import Protocol

from pipojournal.core.records import Identity


class AuthenticationError(Exception):
    """Raised when the auth provider cannot be reached or rejects a request."""

    pass


class AuthProvider(Protocol):
    """Interface for the hosted auth service."""

    async def get_current_identity(self) -> Identity | None:
        """Fetch the signed-in identity. Returns None when anonymous."""
        ...

    async def end_session(self) -> None:
        """End the current session."""
        ...
