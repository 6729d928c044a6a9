"""Application services."""

from flask import current_app

from .auth_service import AuthResult, AuthService


def get_auth_service() -> AuthService:
    """Return the AuthService bound to the current app."""

    return current_app.extensions["auth_service"]


__all__ = ["AuthResult", "AuthService", "get_auth_service"]
