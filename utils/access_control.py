"""Per-request principal resolution and role checks.

The ``before_request`` hook only resolves identity and never rejects a
request. Views opt into enforcement with ``login_required`` or
``roles_required``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import wraps
from typing import Any, Callable, Mapping

from flask import Flask, g, request

from errors import AuthenticationError, AuthorizationError
from models.user import User
from services import get_auth_service
from services.auth_service import AuthService

BEARER_PREFIX = "bearer "
# Some servers move the Authorization header here after an internal rewrite.
FALLBACK_AUTH_ENVIRON_KEYS = ("REDIRECT_HTTP_AUTHORIZATION",)


@dataclass
class RequestContext:
    """Everything a view needs to know about the caller."""

    headers: Mapping[str, str]
    body: dict[str, Any] = field(default_factory=dict)
    token: str | None = None
    principal: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None


def _bearer_value(raw: str | None) -> str | None:
    if not raw:
        return None
    raw = raw.strip()
    if raw[: len(BEARER_PREFIX)].lower() != BEARER_PREFIX:
        return None
    return raw[len(BEARER_PREFIX):].strip() or None


def extract_token(headers: Mapping[str, str], environ: Mapping[str, Any], body: Mapping[str, Any]) -> str | None:
    """Pick the bearer credential: Authorization header, environ fallback, then body."""

    header = headers.get("Authorization")
    if header is not None:
        return _bearer_value(header)

    for key in FALLBACK_AUTH_ENVIRON_KEYS:
        fallback = environ.get(key)
        if fallback is not None:
            return _bearer_value(fallback)

    token = body.get("token")
    if isinstance(token, str) and token.strip():
        return token.strip()
    return None


def _read_body() -> dict[str, Any]:
    data = request.get_json(silent=True) if request.is_json else None
    return data if isinstance(data, dict) else {}


def current_context() -> RequestContext:
    context = g.get("request_context")
    if context is None:
        context = RequestContext(headers=request.headers)
        g.request_context = context
    return context


def current_user() -> User | None:
    return current_context().principal


def login_required(view: Callable) -> Callable:
    """Reject anonymous callers with 401."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        if not current_context().is_authenticated:
            raise AuthenticationError("Authentication required")
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: str, message: str | None = None) -> Callable:
    """Reject anonymous callers with 401 and other roles with 403."""

    allowed = set(roles)
    denial = message or "{} access required".format(" or ".join(r.capitalize() for r in roles))

    def decorator(view: Callable) -> Callable:
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = current_user()
            if user is None:
                raise AuthenticationError("Authentication required")
            if user.user_type not in allowed:
                raise AuthorizationError(denial)
            return view(*args, **kwargs)

        return wrapper

    return decorator


class AccessControl:
    """Flask extension resolving the bearer token of every request."""

    def __init__(self, app: Flask | None = None):
        if app is not None:
            self.init_app(app)

    def init_app(self, app: Flask) -> None:
        app.extensions["auth_service"] = AuthService.from_app(app)
        app.before_request(self._resolve_principal)

    @staticmethod
    def _resolve_principal() -> None:
        body = _read_body()
        token = extract_token(request.headers, request.environ, body)
        principal = get_auth_service().resolve(token) if token else None
        g.request_context = RequestContext(
            headers=request.headers,
            body=body,
            token=token,
            principal=principal,
        )
