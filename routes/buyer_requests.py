"""Buyer requests blueprint: buyers post what they are looking for."""

from __future__ import annotations

from flask import Blueprint, request

from errors import NotFoundError
from models import db
from models.buyer_request import BuyerRequest
from utils.access_control import current_user, login_required, roles_required
from utils.persistence import commit_or_fail
from utils.request_validation import (
    apply_updates,
    coerce_field,
    parse_json_request,
    to_bool,
    to_optional_decimal,
    to_optional_text,
    to_required_text,
    to_text,
)
from utils.responses import ok

buyer_requests_bp = Blueprint("buyer_requests", __name__)

UPDATABLE_FIELDS = {
    "title": to_required_text,
    "description": to_required_text,
    "quantity": to_optional_decimal,
    "unit": to_text,
    "max_price": to_optional_decimal,
    "is_active": to_bool,
}


def _get_owned_request_or_404(request_id: int) -> BuyerRequest:
    buyer_request = BuyerRequest.query.filter_by(
        id=request_id, buyer_id=current_user().id
    ).first()
    if buyer_request is None:
        raise NotFoundError("Request not found or access denied")
    return buyer_request


@buyer_requests_bp.route("", methods=["GET"])
def list_requests():
    query = BuyerRequest.query.filter(BuyerRequest.is_active.is_(True))
    buyer_id = request.args.get("buyer_id", type=int)
    if buyer_id:
        query = query.filter(BuyerRequest.buyer_id == buyer_id)

    requests = query.order_by(BuyerRequest.created_at.desc(), BuyerRequest.id.desc()).all()
    return ok(
        "Requests retrieved successfully",
        {"requests": [item.to_dict() for item in requests], "total": len(requests)},
    )


@buyer_requests_bp.route("", methods=["POST"])
@roles_required("buyer", message="Only buyers can create requests")
def create_request():
    data = parse_json_request(request, required_keys=("title", "description"))

    buyer_request = BuyerRequest(
        buyer_id=current_user().id,
        title=coerce_field(data, "title", to_text),
        description=coerce_field(data, "description", to_text),
        quantity=coerce_field(data, "quantity", to_optional_decimal),
        unit=coerce_field(data, "unit", to_optional_text),
        max_price=coerce_field(data, "max_price", to_optional_decimal),
        is_active=True,
    )
    db.session.add(buyer_request)
    commit_or_fail("Failed to create request")
    return ok("Request created successfully", {"request": buyer_request.to_dict()})


@buyer_requests_bp.route("/<int:request_id>", methods=["PUT"])
@login_required
def update_request(request_id: int):
    buyer_request = _get_owned_request_or_404(request_id)
    apply_updates(buyer_request, parse_json_request(request), UPDATABLE_FIELDS)
    commit_or_fail("Failed to update request")
    return ok("Request updated successfully", {"request": buyer_request.to_dict()})


@buyer_requests_bp.route("/<int:request_id>", methods=["DELETE"])
@login_required
def delete_request(request_id: int):
    buyer_request = _get_owned_request_or_404(request_id)
    buyer_request.is_active = False
    commit_or_fail("Failed to delete request")
    return ok("Request deleted successfully")
