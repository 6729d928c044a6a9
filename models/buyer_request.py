"""Buyer request model."""

from decimal import Decimal

from . import db, utcnow


class BuyerRequest(db.Model):
    """A buyer's posted demand for produce."""

    __tablename__ = "buyer_requests"

    id = db.Column(db.Integer, primary_key=True)
    buyer_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False)
    quantity = db.Column(db.Numeric(10, 2), nullable=True)
    unit = db.Column(db.String(32), nullable=False, default="")
    max_price = db.Column(db.Numeric(10, 2), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    buyer = db.relationship("User", backref=db.backref("buyer_requests", lazy="dynamic"))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "buyer_id": self.buyer_id,
            "buyer_name": self.buyer.name if self.buyer else None,
            "title": self.title,
            "description": self.description,
            "quantity": float(self.quantity) if isinstance(self.quantity, Decimal) else self.quantity,
            "unit": self.unit,
            "max_price": float(self.max_price)
            if isinstance(self.max_price, Decimal)
            else self.max_price,
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
