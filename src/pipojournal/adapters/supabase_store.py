"""Supabase table adapter - HTTP client for the PostgREST API."""

import asyncio
import logging

import requests

from pipojournal.config import Config, load_config
from pipojournal.ports.auth_provider import AuthenticationError
from pipojournal.ports.record_store import StoreError

from .supabase_auth import SupabaseAuth

logger = logging.getLogger(__name__)

REST_PATH = "/rest/v1"


class SupabaseStore:
    """
    Supabase PostgREST adapter.

    Implements RecordStore protocol. Requests carry the signed-in user's
    token so row-level policies scope what each user sees. No business
    logic - just I/O.
    """

    def __init__(
        self,
        config: Config | None = None,
        auth: SupabaseAuth | None = None,
        session: requests.Session | None = None,
    ):
        self.config = config or load_config()
        self.auth = auth or SupabaseAuth(self.config)
        self._session = session or requests.Session()

    def _url(self, collection: str) -> str:
        if not self.config.supabase_url:
            raise StoreError("SUPABASE_URL not configured. Add it to pipojournal.conf")
        return f"{self.config.supabase_url}{REST_PATH}/{collection}"

    def _headers(self) -> dict:
        try:
            token = self.auth.access_token()
        except AuthenticationError as e:
            raise StoreError(f"Could not authorize request: {e}") from e
        return {
            "apikey": self.config.supabase_anon_key,
            "Authorization": f"Bearer {token or self.config.supabase_anon_key}",
        }

    def fetch_rows(
        self, collection: str, order_by: str = "created_at", descending: bool = True
    ) -> list[dict]:
        """Fetch every visible row of a table."""
        direction = "desc" if descending else "asc"
        try:
            resp = self._session.get(
                self._url(collection),
                params={"select": "*", "order": f"{order_by}.{direction}"},
                headers=self._headers(),
                timeout=self.config.request_timeout,
            )
            resp.raise_for_status()
            data = resp.json()
        except requests.RequestException as e:
            raise StoreError(f"Failed to load {collection}: {e}") from e
        except ValueError as e:
            raise StoreError(f"Malformed {collection} response: {e}") from e

        if data is None:
            return []
        if not isinstance(data, list):
            raise StoreError(f"Unexpected {collection} response: {data!r}")
        return data

    def insert_row(self, collection: str, record: dict) -> None:
        """Insert a row, letting the server assign id and defaults."""
        try:
            headers = self._headers()
            headers["Prefer"] = "return=minimal"
            resp = self._session.post(
                self._url(collection),
                json=record,
                headers=headers,
                timeout=self.config.request_timeout,
            )
            resp.raise_for_status()
        except requests.RequestException as e:
            raise StoreError(f"Failed to insert into {collection}: {e}") from e

    async def select_all(
        self, collection: str, order_by: str = "created_at", descending: bool = True
    ) -> list[dict]:
        return await asyncio.to_thread(self.fetch_rows, collection, order_by, descending)

    async def insert(self, collection: str, record: dict) -> None:
        await asyncio.to_thread(self.insert_row, collection, record)
