"""Supabase Auth identity provider."""

from dataclasses import dataclass
from typing import Any

from supabase import AuthApiError, Client

from attendance_tracker.domain.identity import Identity
from attendance_tracker.services.identity import IdentityProvider

_NOT_FOUND = 404


@dataclass
class SupabaseIdentityProvider(IdentityProvider):
    """Reads users and their ``admin`` claim from Supabase Auth."""

    client: Client

    def resolve_caller(self, access_token: str) -> Identity | None:
        """Return the user behind an access token."""
        response = self.client.auth.get_user(access_token)
        if response is None or response.user is None:
            return None
        return _identity_from_user(response.user)

    def lookup_user(self, user_id: str) -> Identity | None:
        """Return a user's current claims via the admin API.

        Ids that are not UUIDs and users Supabase reports as missing resolve
        to None; other auth failures propagate.
        """
        try:
            response = self.client.auth.admin.get_user_by_id(user_id)
        except ValueError:
            return None
        except AuthApiError as exc:
            if exc.status == _NOT_FOUND:
                return None
            raise
        if response is None or response.user is None:
            return None
        return _identity_from_user(response.user)


def _identity_from_user(user: Any) -> Identity:
    app_metadata = user.app_metadata or {}
    return Identity(
        user_id=str(user.id),
        email=user.email,
        is_admin=bool(app_metadata.get("admin")),
    )
