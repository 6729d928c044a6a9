"""Product and category models."""

from decimal import Decimal

from . import db, utcnow


def _number(value):
    return float(value) if isinstance(value, Decimal) else value


class Category(db.Model):
    """A product category such as vegetables or livestock."""

    __tablename__ = "categories"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False)


class Product(db.Model):
    """Produce listed for sale by a farmer."""

    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    seller_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    category_id = db.Column(db.Integer, db.ForeignKey("categories.id"), nullable=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=False, default="")
    price = db.Column(db.Numeric(10, 2), nullable=False)
    quantity = db.Column(db.Numeric(10, 2), nullable=False)
    unit = db.Column(db.String(32), nullable=False)
    image = db.Column(db.String(512), nullable=True)
    is_available = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    seller = db.relationship("User", backref=db.backref("products", lazy="dynamic"))
    category = db.relationship("Category")

    def to_dict(self) -> dict:
        """Serialize the product along with seller and category names."""

        return {
            "id": self.id,
            "seller_id": self.seller_id,
            "seller_name": self.seller.name if self.seller else None,
            "is_verified": self.seller.is_verified if self.seller else False,
            "category_id": self.category_id,
            "category_name": self.category.name if self.category else None,
            "name": self.name,
            "description": self.description,
            "price": _number(self.price),
            "quantity": _number(self.quantity),
            "unit": self.unit,
            "image": self.image,
            "is_available": self.is_available,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
