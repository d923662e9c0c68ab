"""Dashboard controller: session, journal entries and goals.

The view owns three independent loaders (identity, entries, goals) that run
concurrently on mount. Creating a record inserts it and then reloads the
whole list from the store. Every store or auth failure is logged and
swallowed so the view keeps whatever it last had.
"""

import asyncio
import logging
from typing import Callable, Generic, TypeVar

from .core.forms import EntryFields, Form, GoalFields, entry_form, goal_form
from .core.records import Goal, JournalEntry
from .core.session import (
    SessionAbsent,
    SessionLoading,
    SessionResolved,
    SessionState,
    current_user_id,
)
from .ports.auth_provider import AuthenticationError, AuthProvider
from .ports.record_store import GOALS, JOURNAL_ENTRIES, RecordStore, StoreError

logger = logging.getLogger(__name__)

R = TypeVar("R", JournalEntry, Goal)
F = TypeVar("F", EntryFields, GoalFields)


class SessionLoader:
    """Fetches the current identity once and holds its lifecycle state."""

    def __init__(self, auth: AuthProvider):
        self.auth = auth
        self.state: SessionState = SessionAbsent()
        self.resolved = asyncio.Event()
        self.closed = False

    @property
    def user_id(self) -> str | None:
        return current_user_id(self.state)

    async def load(self) -> None:
        self.state = SessionLoading()
        identity = None
        try:
            identity = await self.auth.get_current_identity()
        except AuthenticationError as e:
            logger.error(f"Error loading user: {e}")
        finally:
            if not self.closed:
                self.state = SessionResolved(identity)
                self.resolved.set()


class ListController(Generic[R, F]):
    """
    Loads and creates records of one collection.

    A load replaces the local list wholesale. Each load is numbered; a
    response is dropped if a newer load has already been applied, so a slow
    early read cannot overwrite a fresher one.
    """

    def __init__(
        self,
        store: RecordStore,
        session: SessionLoader,
        collection: str,
        parse: Callable[[dict], R],
        form: Form[F],
    ):
        self.store = store
        self.session = session
        self.collection = collection
        self.parse = parse
        self.form = form
        self.records: list[R] = []
        self.resolved = asyncio.Event()
        self.closed = False
        self._issued = 0
        self._applied = 0

    async def load(self) -> None:
        """Reload the full list. Failures leave the current list in place."""
        self._issued += 1
        seq = self._issued
        try:
            rows = await self.store.select_all(self.collection, order_by="created_at", descending=True)
            records = [self.parse(row) for row in rows or []]
        except (StoreError, KeyError, ValueError, TypeError) as e:
            logger.error(f"Error loading {self.collection}: {e}")
        else:
            if self.closed:
                return
            if seq > self._applied:
                self._applied = seq
                self.records = records
            else:
                logger.info(f"Dropped stale {self.collection} load #{seq}")
        finally:
            if not self.closed:
                self.resolved.set()

    async def create(self) -> bool:
        """
        Submit the open form.

        Returns True if the record was stored. Does nothing when the form is
        closed or a required field is empty. On success the form is reset
        and the list reloaded; on failure the form keeps its values.
        """
        fields = self.form.fields
        if fields is None or fields.missing_fields():
            return False

        record = fields.to_record(self.session.user_id)
        try:
            await self.store.insert(self.collection, record)
        except StoreError as e:
            logger.error(f"Error creating {self.collection} record: {e}")
            return False

        if self.closed:
            return True
        self.form.cancel()
        await self.load()
        return True


class DashboardView:
    """Journal and goals dashboard for the signed-in user."""

    def __init__(self, auth: AuthProvider, store: RecordStore):
        self.auth = auth
        self.session = SessionLoader(auth)
        self.entries: ListController[JournalEntry, EntryFields] = ListController(
            store, self.session, JOURNAL_ENTRIES, JournalEntry.from_api, entry_form()
        )
        self.goals: ListController[Goal, GoalFields] = ListController(
            store, self.session, GOALS, Goal.from_api, goal_form()
        )
        self.closed = False
        self._tasks: set[asyncio.Task] = set()

    @property
    def loading(self) -> bool:
        """True until the journal entries load has resolved once."""
        return not self.entries.resolved.is_set()

    def _spawn(self, coro) -> asyncio.Task:
        task = asyncio.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def mount(self) -> list[asyncio.Task]:
        """Start the identity, entries and goals loads concurrently."""
        return [
            self._spawn(self.session.load()),
            self._spawn(self.entries.load()),
            self._spawn(self.goals.load()),
        ]

    async def settle(self) -> None:
        """Wait for every outstanding load, create and sign-out."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def wait_until_loaded(self) -> None:
        await self.entries.resolved.wait()

    def reload_entries(self) -> asyncio.Task:
        return self._spawn(self.entries.load())

    def reload_goals(self) -> asyncio.Task:
        return self._spawn(self.goals.load())

    async def create_entry(self) -> bool:
        return await self._spawn(self.entries.create())

    async def create_goal(self) -> bool:
        return await self._spawn(self.goals.create())

    def sign_out(self) -> asyncio.Task:
        """End the session without touching local view state."""

        async def end_session():
            try:
                await self.auth.end_session()
            except AuthenticationError as e:
                logger.error(f"Error signing out: {e}")

        return self._spawn(end_session())

    async def close(self) -> None:
        """Cancel in-flight work; later results are ignored."""
        self.closed = True
        self.session.closed = True
        self.entries.closed = True
        self.goals.closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
