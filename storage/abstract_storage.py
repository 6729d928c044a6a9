"""Token storage abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover
    from models.user import User


@dataclass(frozen=True)
class IssuedToken:
    """A freshly issued bearer token and the moment it stops being valid."""

    token: str
    expires_at: datetime


class AbstractTokenStore(ABC):
    """Interface for bearer token backends."""

    @abstractmethod
    def issue(self, user_id: int, commit: bool = True) -> IssuedToken:
        """Create a new token for ``user_id``.

        With ``commit=False`` the row is only flushed, so the caller can commit
        it together with other writes.
        """

    @abstractmethod
    def resolve(self, token: str) -> User | None:
        """Return the active owner of an unexpired token, or None."""

    @abstractmethod
    def revoke(self, token: str) -> bool:
        """Delete a token; return whether it existed."""

    @abstractmethod
    def purge_expired(self) -> int:
        """Delete every expired token and return how many were removed."""
