"""Database initialization and model exports."""

from datetime import UTC, datetime

from flask_sqlalchemy import SQLAlchemy


db = SQLAlchemy()


def utcnow() -> datetime:
    """Naive UTC timestamp, matching how the columns are stored."""

    return datetime.now(UTC).replace(tzinfo=None)


# Import models to register them with SQLAlchemy metadata.
from .user import User  # noqa: E402,F401
from .user_token import UserToken  # noqa: E402,F401
from .product import Category, Product  # noqa: E402,F401
from .buyer_request import BuyerRequest  # noqa: E402,F401
from .message import Message  # noqa: E402,F401
from .rating import Rating  # noqa: E402,F401
from .announcement import Announcement  # noqa: E402,F401

__all__ = [
    "db",
    "utcnow",
    "User",
    "UserToken",
    "Category",
    "Product",
    "BuyerRequest",
    "Message",
    "Rating",
    "Announcement",
]
