"""Identity domain models."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Identity:
    """Resolved user identity and its current admin claim."""

    user_id: str
    email: str | None
    is_admin: bool
