from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from supabase import Client, create_client

from ..config.settings import SupabaseSettings


class SupabaseNotInitializedError(RuntimeError):
    """The project URL or anon key is missing, so no client can be built."""


class SupabaseSessionMissingError(RuntimeError):
    """An owner-scoped calendar call ran before anyone signed in."""


@dataclass
class SupabaseGateway:
    """Supabase access for the calendar store, scoped to the signed-in owner.

    The client is created on first use from :class:`SupabaseSettings`, or
    injected with :meth:`use_client`. Every owner-scoped read and write asks
    :meth:`current_owner_id`, which fails without a signed-in user.
    """

    settings: SupabaseSettings
    _client: Optional[Client] = None
    _session: Optional[Any] = None

    def ensure_client(self) -> Client:
        if self._client is None:
            self._client = self._connect()
        return self._client

    def _connect(self) -> Client:
        missing = self.settings.missing_env_vars
        if missing:
            raise SupabaseNotInitializedError(
                f"Cannot open the calendar store: set {' and '.join(missing)}."
            )
        return create_client(self.settings.url, self.settings.anon_key)

    def use_client(self, client: Client) -> None:
        self._client = client

    def set_session(self, session: Any) -> None:
        self._session = session

    def clear_session(self) -> None:
        self._session = None

    def current_owner_id(self) -> str:
        if self._session is None:
            raise SupabaseSessionMissingError("Sign in before reading or changing calendar events.")
        owner = getattr(getattr(self._session, "user", None), "id", None)
        if not owner:
            raise SupabaseSessionMissingError("The current session carries no user id to own events.")
        return str(owner)

    def is_ready(self) -> bool:
        return self._client is not None and self._session is not None

    def table(self, name: str):
        return self.ensure_client().table(name)

    def rpc(self, name: str, params: dict):
        return self.ensure_client().rpc(name, params)
