"""Supabase auth adapter - HTTP client for the GoTrue API."""

import asyncio
import logging
import time

import requests

from pipojournal.config import Config, SessionTokens, load_config
from pipojournal.core.records import Identity
from pipojournal.ports.auth_provider import AuthenticationError

logger = logging.getLogger(__name__)

AUTH_PATH = "/auth/v1"


class SupabaseAuth:
    """
    Supabase auth adapter.

    Implements AuthProvider protocol. Handles sign-in, token refresh and
    sign-out. The blocking HTTP calls run in a worker thread when used
    through the async protocol methods.
    """

    def __init__(
        self,
        config: Config | None = None,
        tokens: SessionTokens | None = None,
        session: requests.Session | None = None,
    ):
        self.config = config or load_config()
        self.tokens = tokens or SessionTokens.load()
        self._session = session or requests.Session()

    @property
    def base_url(self) -> str:
        if not self.config.supabase_url:
            raise AuthenticationError("SUPABASE_URL not configured. Add it to pipojournal.conf")
        return f"{self.config.supabase_url}{AUTH_PATH}"

    def _headers(self, bearer: str | None = None) -> dict:
        headers = {"apikey": self.config.supabase_anon_key}
        if bearer:
            headers["Authorization"] = f"Bearer {bearer}"
        return headers

    def _store_session(self, data: dict) -> None:
        if not isinstance(data, dict) or not data.get("access_token"):
            raise AuthenticationError(f"Token response missing access_token: {data!r}")
        try:
            expires_in = int(data.get("expires_in") or 3600)
        except (TypeError, ValueError) as e:
            raise AuthenticationError(f"Malformed token expiry: {e}") from e
        self.tokens.access_token = data["access_token"]
        if data.get("refresh_token"):
            self.tokens.refresh_token = data["refresh_token"]
        self.tokens.expires_at = int(time.time()) + expires_in
        self.tokens.save()

    def _token_request(self, grant_type: str, payload: dict) -> dict:
        try:
            resp = self._session.post(
                f"{self.base_url}/token",
                params={"grant_type": grant_type},
                json=payload,
                headers=self._headers(),
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise AuthenticationError(f"Auth request failed: {e}") from e

        if resp.status_code != 200:
            raise AuthenticationError(f"Token request failed: {resp.text}")
        try:
            return resp.json()
        except ValueError as e:
            raise AuthenticationError(f"Malformed token response: {e}") from e

    def sign_in(self, email: str, password: str) -> SessionTokens:
        """Exchange email and password for a session and store it."""
        data = self._token_request("password", {"email": email, "password": password})
        self._store_session(data)
        logger.info(f"Signed in as {email}")
        return self.tokens

    def _refresh_token(self) -> None:
        """Refresh the access token."""
        if not self.tokens.refresh_token:
            raise AuthenticationError("No refresh token. Run 'pipojournal login' first.")
        data = self._token_request("refresh_token", {"refresh_token": self.tokens.refresh_token})
        self._store_session(data)

    def access_token(self) -> str | None:
        """Current access token, refreshed if expiring soon. None when signed out."""
        if not self.tokens.access_token:
            return None

        # Refresh if expiring within 5 minutes
        if self.tokens.expires_at and time.time() >= self.tokens.expires_at - 300:
            self._refresh_token()
        return self.tokens.access_token

    def fetch_identity(self) -> Identity | None:
        """Fetch the signed-in user. Returns None when anonymous."""
        token = self.access_token()
        if token is None:
            return None

        try:
            resp = self._session.get(
                f"{self.base_url}/user",
                headers=self._headers(token),
                timeout=self.config.request_timeout,
            )
        except requests.RequestException as e:
            raise AuthenticationError(f"Identity request failed: {e}") from e

        if resp.status_code == 401:
            return None
        if resp.status_code != 200:
            raise AuthenticationError(f"Identity request failed: {resp.text}")
        try:
            return Identity.from_api(resp.json())
        except (ValueError, KeyError) as e:
            raise AuthenticationError(f"Malformed identity response: {e}") from e

    def sign_out(self) -> None:
        """Revoke the session remotely and forget local tokens."""
        token = self.tokens.access_token
        try:
            if token:
                resp = self._session.post(
                    f"{self.base_url}/logout",
                    headers=self._headers(token),
                    timeout=self.config.request_timeout,
                )
                if resp.status_code not in (200, 204, 401):
                    raise AuthenticationError(f"Sign-out failed: {resp.text}")
        except requests.RequestException as e:
            raise AuthenticationError(f"Sign-out request failed: {e}") from e
        finally:
            self.tokens = SessionTokens()
            self.tokens.save()

    async def get_current_identity(self) -> Identity | None:
        return await asyncio.to_thread(self.fetch_identity)

    async def end_session(self) -> None:
        await asyncio.to_thread(self.sign_out)
