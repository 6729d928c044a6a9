"""Storage backends."""

from .abstract_storage import AbstractTokenStore, IssuedToken
from .token_store import DatabaseTokenStore

__all__ = ["AbstractTokenStore", "DatabaseTokenStore", "IssuedToken"]
