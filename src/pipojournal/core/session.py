"""Session lifecycle: absent -> loading -> resolved(identity | None)."""

from dataclasses import dataclass

from .records import Identity


@dataclass(frozen=True)
class SessionAbsent:
    """Nothing requested yet."""


@dataclass(frozen=True)
class SessionLoading:
    """Identity request in flight."""


@dataclass(frozen=True)
class SessionResolved:
    """Identity request finished. identity is None when anonymous or failed."""

    identity: Identity | None


SessionState = SessionAbsent | SessionLoading | SessionResolved


def current_user_id(state: SessionState) -> str | None:
    """Owner id to attach to new records, if an identity has been resolved."""
    if isinstance(state, SessionResolved) and state.identity is not None:
        return state.identity.id
    return None
