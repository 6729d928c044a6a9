"""Credential hashing."""

from .passwords import PasswordHasher

__all__ = ["PasswordHasher"]
