"""Bearer token model."""

from . import db, utcnow


class UserToken(db.Model):
    """An opaque bearer credential bound to one user until ``expires_at``."""

    __tablename__ = "user_tokens"

    id = db.Column(db.Integer, primary_key=True)
    token = db.Column(db.String(128), unique=True, nullable=False, index=True)
    user_id = db.Column(
        db.Integer,
        db.ForeignKey("users.id"),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    user = db.relationship("User", backref=db.backref("tokens", lazy="dynamic"))

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<UserToken user_id={self.user_id} expires_at={self.expires_at}>"
