"""Registration, login, token validation and logout."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Mapping

from email_validator import EmailNotValidError, validate_email
from flask import Flask
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    StorageError,
    ValidationError,
)
from models import db
from models.user import USER_TYPES, User
from security.passwords import PasswordHasher
from storage.abstract_storage import AbstractTokenStore, IssuedToken
from storage.token_store import DatabaseTokenStore
from utils.request_validation import is_blank, require_fields

REGISTER_FIELDS = ("name", "email", "password", "user_type", "phone")
LOGIN_FIELDS = ("email", "password")
INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class AuthResult:
    user: User
    token: IssuedToken

    def to_dict(self) -> dict:
        return {
            "user": self.user.to_dict(),
            "token": self.token.token,
            "expires_at": self.token.expires_at.isoformat(),
        }


def normalize_email(raw_email: Any) -> str:
    """Strip whitespace and lower-case; emails compare case-insensitively."""

    if not isinstance(raw_email, str):
        return ""
    return raw_email.strip().lower()


class AuthService:
    """Orchestrates password hashing and the token store for the auth endpoints."""

    def __init__(
        self,
        session: Session,
        hasher: PasswordHasher,
        token_store: AbstractTokenStore,
        *,
        min_password_length: int = 6,
        admin_self_registration: bool = False,
        logger: logging.Logger | None = None,
    ):
        self.session = session
        self.hasher = hasher
        self.token_store = token_store
        self.min_password_length = min_password_length
        self.admin_self_registration = admin_self_registration
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_app(cls, app: Flask) -> "AuthService":
        """Build a service wired to the app's database session and settings."""

        ttl = timedelta(hours=int(app.config.get("TOKEN_TTL_HOURS", 24)))
        return cls(
            db.session,
            PasswordHasher(method=app.config.get("PASSWORD_HASH_METHOD", "scrypt")),
            DatabaseTokenStore(db.session, ttl=ttl),
            min_password_length=int(app.config.get("MIN_PASSWORD_LENGTH", 6)),
            admin_self_registration=bool(app.config.get("ADMIN_SELF_REGISTRATION")),
            logger=app.logger,
        )

    def register(self, fields: Mapping[str, Any], acting_user: User | None = None) -> AuthResult:
        """Create an account and sign it in.

        Admin accounts are created verified, but only when the caller is an
        admin, when no active admin exists yet, or when open admin
        registration is switched on.
        """

        data = dict(fields)
        if is_blank(data.get("user_type")) and not is_blank(data.get("userType")):
            data["user_type"] = data["userType"]
        require_fields(data, REGISTER_FIELDS)

        user_type = str(data["user_type"]).strip()
        if user_type not in USER_TYPES:
            raise ValidationError("Invalid user type")

        email = self._validate_email(data["email"])

        password = data["password"]
        if not isinstance(password, str) or len(password) < self.min_password_length:
            raise ValidationError(
                f"Password must be at least {self.min_password_length} characters long"
            )

        if user_type == "admin":
            self._check_admin_registration(acting_user)

        if self.find_by_email(email) is not None:
            raise ConflictError("Email already registered")

        user = User(
            name=str(data["name"]).strip(),
            email=email,
            password_hash=self.hasher.hash(password),
            phone=str(data["phone"]).strip(),
            address=str(data.get("address") or "").strip(),
            user_type=user_type,
            is_verified=user_type == "admin",
            is_active=True,
        )
        # The account and its first token are committed together or not at all.
        self.session.add(user)
        try:
            self.session.flush()
            issued = self.token_store.issue(user.id, commit=False)
            self.session.commit()
        except IntegrityError:
            # Lost the check-then-insert race to a concurrent registration.
            self.session.rollback()
            raise ConflictError("Email already registered") from None
        except SQLAlchemyError:
            self.session.rollback()
            self.logger.exception("Failed to register user %s", email)
            raise StorageError("Registration failed") from None

        self.logger.info("Registered %s user id=%s", user.user_type, user.id)
        return AuthResult(user=user, token=issued)

    def login(self, email: Any, password: Any) -> AuthResult:
        require_fields({"email": email, "password": password}, LOGIN_FIELDS)

        user = self.find_by_email(normalize_email(email), active_only=True)
        if user is None or not self.hasher.verify(str(password), user.password_hash):
            self.logger.warning("Failed login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS)

        issued = self._issue(user, "Login failed")
        self.logger.info("User id=%s logged in", user.id)
        return AuthResult(user=user, token=issued)

    def validate(self, token: Any) -> User:
        if is_blank(token) or not isinstance(token, str):
            raise ValidationError("Token required")
        user = self.resolve(token)
        if user is None:
            raise AuthenticationError("Invalid or expired token")
        return user

    def resolve(self, token: str | None) -> User | None:
        """Lookup without raising; used by the access-control hook."""

        if not token:
            return None
        return self.token_store.resolve(token)

    def logout(self, token: str | None) -> bool:
        """Revoke the presented token. Returns whether a token was removed."""

        if not token:
            return False
        try:
            revoked = self.token_store.revoke(token)
        except SQLAlchemyError:
            self.logger.exception("Failed to revoke token")
            raise StorageError("Logout failed") from None
        if revoked:
            self.logger.info("Token revoked on logout")
        return revoked

    def find_by_email(self, email: str, active_only: bool = False) -> User | None:
        query = User.query.filter(func.lower(User.email) == email)
        if active_only:
            query = query.filter(User.is_active.is_(True))
        return query.first()

    def _validate_email(self, raw_email: Any) -> str:
        email = normalize_email(raw_email)
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError:
            raise ValidationError("Invalid email format") from None
        return email

    def _check_admin_registration(self, acting_user: User | None) -> None:
        if self.admin_self_registration:
            return
        if acting_user is not None and acting_user.is_admin:
            return
        existing_admin = (
            self.session.query(User.id)
            .filter(User.user_type == "admin", User.is_active.is_(True))
            .first()
        )
        if existing_admin is not None:
            self.logger.warning("Rejected admin self-registration")
            raise AuthorizationError("Only an administrator can create admin accounts")

    def _issue(self, user: User, failure_message: str) -> IssuedToken:
        try:
            return self.token_store.issue(user.id)
        except SQLAlchemyError:
            self.logger.exception("Failed to issue token for user id=%s", user.id)
            raise StorageError(failure_message) from None
