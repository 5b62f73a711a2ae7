"""Per-request access to the managed database on behalf of one user.

A ``StorageSession`` is created for every request from the caller's bearer
token and handed explicitly to each storage function.  Row-level security
on the database side is what actually scopes reads and writes; the session
only supplies the identity and stamps ``user_id`` on new rows.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from supabase import AuthApiError, Client, create_client

from bizlaunch.config import get_supabase_anon_key, get_supabase_url

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """No authenticated user is attached to the session."""


class RecordNotFoundError(Exception):
    """A write or lookup by id matched no row visible to the caller."""


@dataclass
class StorageSession:
    client: Client
    access_token: str | None = None

    def current_user(self, action: str) -> Any:
        """Fetch the authenticated user, or raise AuthenticationError.

        Not cached: every call is a round trip to the auth service.
        *action* completes the error message ("... to save appointments").
        """
        message = f"User must be authenticated to {action}"
        if not self.access_token:
            raise AuthenticationError(message)
        try:
            response = self.client.auth.get_user(self.access_token)
        except AuthApiError as exc:
            logger.info("Auth lookup rejected token: %s", exc)
            raise AuthenticationError(message) from exc
        user = getattr(response, "user", None)
        if user is None:
            raise AuthenticationError(message)
        return user

    def table(self, name: str):
        return self.client.table(name)

    def upsert(self, table: str, record_id: str | None, row: dict[str, Any]) -> dict[str, Any]:
        """Update the row with *record_id*, or insert when there is no id.

        Returns the persisted row.
        """
        if record_id:
            response = self.table(table).update(row).eq("id", record_id).execute()
        else:
            response = self.table(table).insert(row).execute()
        return first_row(response, table, record_id)


def first_row(response: Any, table: str, record_id: str | None) -> dict[str, Any]:
    rows = response.data or []
    if not rows:
        raise RecordNotFoundError(f"No {table} row returned for id {record_id or '<new>'}")
    return rows[0]


def open_session(access_token: str | None) -> StorageSession:
    """Build a database client that acts with the caller's token."""
    client = create_client(get_supabase_url(), get_supabase_anon_key())
    if access_token:
        client.postgrest.auth(access_token)
    return StorageSession(client=client, access_token=access_token)
