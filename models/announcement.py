"""Announcement model."""

from . import db, utcnow


class Announcement(db.Model):
    """A community notice authored by an administrator."""

    __tablename__ = "announcements"

    id = db.Column(db.Integer, primary_key=True)
    admin_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    title = db.Column(db.String(200), nullable=False)
    content = db.Column(db.Text, nullable=False)
    is_important = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    admin = db.relationship("User")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "admin_id": self.admin_id,
            "admin_name": self.admin.name if self.admin else None,
            "title": self.title,
            "content": self.content,
            "is_important": self.is_important,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
