"""User model definition."""

from typing import Optional

from . import db, utcnow


USER_TYPES = ("farmer", "buyer", "admin")


class User(db.Model):
    """Represents a marketplace account: farmer, buyer or administrator."""

    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    # Stored lower-cased; the unique constraint is what actually prevents duplicates.
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(32), nullable=False)
    address = db.Column(db.Text, nullable=False, default="")
    user_type = db.Column(
        db.Enum(*USER_TYPES, name="user_type_enum"),
        nullable=False,
    )
    is_verified = db.Column(db.Boolean, nullable=False, default=False)
    is_active = db.Column(
        db.Boolean,
        nullable=False,
        default=True,
        server_default=db.true(),
    )
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    barangay_id = db.Column(db.String(64), nullable=True)
    product_type = db.Column(db.String(120), nullable=True)
    verification_notes = db.Column(db.Text, nullable=True)
    verification_date = db.Column(db.DateTime, nullable=True)
    verified_by = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)

    verifier = db.relationship("User", remote_side=[id])

    @property
    def is_admin(self) -> bool:
        return self.user_type == "admin"

    def mark_verified(self, reviewer: "User", notes: Optional[str] = None) -> None:
        """Record an admin's verification of this account."""

        self.is_verified = True
        self.verified_by = reviewer.id
        self.verification_date = utcnow()
        if notes is not None:
            self.verification_notes = notes

    def deactivate(self) -> None:
        """Soft delete; every outstanding token stops resolving."""

        self.is_active = False

    def to_dict(self) -> dict:
        """Serialize the user without the password digest."""

        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "user_type": self.user_type,
            "is_verified": self.is_verified,
            "is_active": self.is_active,
            "barangay_id": self.barangay_id,
            "product_type": self.product_type,
            "verification_notes": self.verification_notes,
            "verification_date": self.verification_date.isoformat()
            if self.verification_date
            else None,
            "verified_by": self.verified_by,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<User {self.email}>"
