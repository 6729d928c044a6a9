"""Rating model."""

from . import db, utcnow


RATING_VALUES = ("satisfied", "not_satisfied")


class Rating(db.Model):
    """Feedback one user leaves about another, optionally tied to a product."""

    __tablename__ = "ratings"
    __table_args__ = (
        db.UniqueConstraint("rater_id", "rated_id", "product_id", name="uq_rating_target"),
    )

    id = db.Column(db.Integer, primary_key=True)
    rater_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    rated_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    product_id = db.Column(db.Integer, db.ForeignKey("products.id"), nullable=True)
    rating = db.Column(db.Enum(*RATING_VALUES, name="rating_value_enum"), nullable=False)
    comment = db.Column(db.Text, nullable=False, default="")
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    rater = db.relationship("User", foreign_keys=[rater_id])
    rated = db.relationship("User", foreign_keys=[rated_id])
    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "rater_id": self.rater_id,
            "rater_name": self.rater.name if self.rater else None,
            "rated_id": self.rated_id,
            "rated_name": self.rated.name if self.rated else None,
            "product_id": self.product_id,
            "product_name": self.product.name if self.product else None,
            "rating": self.rating,
            "comment": self.comment,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
