"""SQLAlchemy-backed bearer token store."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from models import utcnow
from models.user import User
from models.user_token import UserToken

from .abstract_storage import AbstractTokenStore, IssuedToken

TOKEN_BYTES = 32  # 256 bits, rendered as 64 hex characters


class DatabaseTokenStore(AbstractTokenStore):
    """Persist tokens in the ``user_tokens`` table.

    Expiry is evaluated lazily: ``resolve`` compares ``expires_at`` with the
    clock on every lookup, nothing sweeps rows in the background.
    """

    def __init__(
        self,
        session: Session,
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = utcnow,
    ):
        self.session = session
        self.ttl = ttl
        self.clock = clock

    def issue(self, user_id: int, commit: bool = True) -> IssuedToken:
        now = self.clock()
        record = UserToken(
            token=secrets.token_hex(TOKEN_BYTES),
            user_id=user_id,
            created_at=now,
            expires_at=now + self.ttl,
        )
        self.session.add(record)
        if commit:
            self._commit()
        else:
            self.session.flush()
        return IssuedToken(token=record.token, expires_at=record.expires_at)

    def resolve(self, token: str) -> User | None:
        if not token:
            return None
        return (
            User.query.join(UserToken, UserToken.user_id == User.id)
            .filter(
                UserToken.token == token,
                UserToken.expires_at > self.clock(),
                User.is_active.is_(True),
            )
            .first()
        )

    def revoke(self, token: str) -> bool:
        if not token:
            return False
        deleted = UserToken.query.filter_by(token=token).delete(synchronize_session=False)
        self._commit()
        return bool(deleted)

    def purge_expired(self) -> int:
        deleted = UserToken.query.filter(UserToken.expires_at <= self.clock()).delete(
            synchronize_session=False
        )
        self._commit()
        return deleted

    def _commit(self) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError:
            self.session.rollback()
            raise
