"""Identity provider interface."""

from typing import Protocol

from attendance_tracker.domain.identity import Identity


class IdentityProvider(Protocol):
    """Resolves callers and re-checks claims of known users."""

    def resolve_caller(self, access_token: str) -> Identity | None:
        """Return the identity behind an access token, if valid."""

    def lookup_user(self, user_id: str) -> Identity | None:
        """Return the current identity and claims of a user, if present."""
