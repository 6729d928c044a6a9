"""Write helpers shared by the resource blueprints."""

from __future__ import annotations

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from errors import ConflictError, StorageError
from models import db


def commit_or_fail(failure_message: str, conflict_message: str | None = None) -> None:
    """Commit the session, turning a backend failure into a generic 500.

    The underlying error is logged server-side and not echoed to the client.
    With ``conflict_message`` set, a unique-constraint violation becomes a 400.
    """

    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        if conflict_message is None:
            current_app.logger.exception(failure_message)
            raise StorageError(failure_message) from None
        raise ConflictError(conflict_message) from None
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception(failure_message)
        raise StorageError(failure_message) from None
