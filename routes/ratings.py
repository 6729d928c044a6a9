"""Ratings blueprint: users leave satisfied/not-satisfied feedback on each other."""

from __future__ import annotations

from flask import Blueprint, request

from errors import NotFoundError, ValidationError
from models import db
from models.rating import RATING_VALUES, Rating
from models.user import User
from utils.access_control import current_user, login_required
from utils.persistence import commit_or_fail
from utils.request_validation import (
    apply_updates,
    coerce_field,
    parse_json_request,
    to_optional_int,
    to_optional_text,
    to_text,
)
from utils.responses import ok

ratings_bp = Blueprint("ratings", __name__)


def _to_rating_value(value) -> str:
    text = to_text(value)
    if text not in RATING_VALUES:
        raise ValueError("must be one of: satisfied, not_satisfied")
    return text


UPDATABLE_FIELDS = {
    "rating": _to_rating_value,
    "comment": to_text,
}


def _get_own_rating_or_404(rating_id: int) -> Rating:
    rating = Rating.query.filter_by(id=rating_id, rater_id=current_user().id).first()
    if rating is None:
        raise NotFoundError("Rating not found or access denied")
    return rating


@ratings_bp.route("", methods=["GET"])
def list_ratings():
    query = Rating.query
    rated_id = request.args.get("rated_id", type=int)
    if rated_id:
        query = query.filter(Rating.rated_id == rated_id)
    rater_id = request.args.get("rater_id", type=int)
    if rater_id:
        query = query.filter(Rating.rater_id == rater_id)

    ratings = query.order_by(Rating.created_at.desc(), Rating.id.desc()).all()
    return ok(
        "Ratings retrieved successfully",
        {"ratings": [rating.to_dict() for rating in ratings], "total": len(ratings)},
    )


@ratings_bp.route("", methods=["POST"])
@login_required
def create_rating():
    user = current_user()
    data = parse_json_request(request, required_keys=("rated_id", "rating"))

    value = coerce_field(data, "rating", _to_rating_value, "Invalid rating value")
    rated_id = coerce_field(data, "rated_id", to_optional_int)
    product_id = coerce_field(data, "product_id", to_optional_int)

    if User.query.filter_by(id=rated_id, is_active=True).first() is None:
        raise NotFoundError("Rated user not found")
    if rated_id == user.id:
        raise ValidationError("Cannot rate yourself")

    # NULL product_id never collides in the unique constraint, so check here too.
    existing = Rating.query.filter_by(
        rater_id=user.id, rated_id=rated_id, product_id=product_id
    ).first()
    if existing is not None:
        raise ValidationError("Rating already exists for this user and product")

    rating = Rating(
        rater_id=user.id,
        rated_id=rated_id,
        product_id=product_id,
        rating=value,
        comment=coerce_field(data, "comment", to_optional_text),
    )
    db.session.add(rating)
    commit_or_fail("Failed to create rating")
    return ok("Rating created successfully", {"rating": rating.to_dict()})


@ratings_bp.route("/<int:rating_id>", methods=["PUT"])
@login_required
def update_rating(rating_id: int):
    rating = _get_own_rating_or_404(rating_id)
    apply_updates(rating, parse_json_request(request), UPDATABLE_FIELDS)
    commit_or_fail("Failed to update rating")
    return ok("Rating updated successfully", {"rating": rating.to_dict()})


@ratings_bp.route("/<int:rating_id>", methods=["DELETE"])
@login_required
def delete_rating(rating_id: int):
    rating = _get_own_rating_or_404(rating_id)
    db.session.delete(rating)
    commit_or_fail("Failed to delete rating")
    return ok("Rating deleted successfully")
