"""Admin user management: listing, edits, verification and soft deletion."""

from __future__ import annotations

from email_validator import EmailNotValidError, validate_email
from flask import Blueprint, current_app, request
from sqlalchemy import func

from errors import NotFoundError, ValidationError
from models import db
from models.user import USER_TYPES, User
from services.auth_service import normalize_email
from utils.access_control import current_user, roles_required
from utils.persistence import commit_or_fail
from utils.request_validation import (
    apply_updates,
    parse_json_request,
    to_bool,
    to_optional_text,
    to_required_text,
)
from utils.responses import ok

admin_users_bp = Blueprint("admin_users", __name__)

EMAIL_TAKEN = "Email already registered"


def _to_email(value) -> str:
    email = normalize_email(value)
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValueError("must be a valid email address") from None
    return email


# user_type is immutable after registration.
UPDATABLE_FIELDS = {
    "is_verified": to_bool,
    "is_active": to_bool,
    "name": to_required_text,
    "email": _to_email,
    "phone": to_required_text,
    "address": to_optional_text,
    "barangay_id": to_optional_text,
    "product_type": to_optional_text,
    "verification_notes": to_optional_text,
}


def _get_user_or_404(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


@admin_users_bp.route("", methods=["GET"])
@roles_required("admin")
def list_users():
    """All accounts, including deactivated ones, newest first."""

    query = User.query
    user_type = request.args.get("user_type")
    if user_type:
        if user_type not in USER_TYPES:
            raise ValidationError("Invalid user type")
        query = query.filter(User.user_type == user_type)

    users = query.order_by(User.created_at.desc(), User.id.desc()).all()
    return ok(
        "Users retrieved successfully",
        {"users": [user.to_dict() for user in users], "total": len(users)},
    )


@admin_users_bp.route("/<int:user_id>", methods=["PUT"])
@roles_required("admin")
def update_user(user_id: int):
    admin = current_user()
    target = _get_user_or_404(user_id)
    data = parse_json_request(request)

    if target.id == admin.id and ("is_verified" in data or "is_active" in data):
        raise ValidationError("Cannot change verification or status of your own account")

    was_verified = target.is_verified
    changed = apply_updates(target, data, UPDATABLE_FIELDS)

    if "email" in changed:
        with db.session.no_autoflush:
            clash = User.query.filter(
                func.lower(User.email) == target.email, User.id != target.id
            ).first()
        if clash is not None:
            raise ValidationError(EMAIL_TAKEN)

    if "is_verified" in changed and target.is_verified != was_verified:
        if target.is_verified:
            target.mark_verified(admin)
        else:
            target.verified_by = None
            target.verification_date = None

    commit_or_fail("Failed to update user", conflict_message=EMAIL_TAKEN)
    current_app.logger.info("Admin id=%s updated user id=%s: %s", admin.id, target.id, changed)
    return ok("User updated successfully", {"user": target.to_dict()})


@admin_users_bp.route("/<int:user_id>/verify", methods=["POST"])
@roles_required("admin")
def verify_user(user_id: int):
    """Mark an account verified, recording who reviewed it and when."""

    admin = current_user()
    if admin.id == user_id:
        raise ValidationError("Cannot verify your own account")
    target = _get_user_or_404(user_id)
    if not target.is_active:
        raise NotFoundError("User not found")

    notes = None
    if request.content_length:
        payload = parse_json_request(request, allow_empty=True)
        notes = payload.get("verification_notes") or payload.get("notes")
        if notes is not None and not isinstance(notes, str):
            raise ValidationError("verification_notes must be a string")

    target.mark_verified(admin, notes=notes)
    commit_or_fail("Failed to verify user")
    current_app.logger.info("Admin id=%s verified user id=%s", admin.id, target.id)
    return ok("User verified successfully", {"user": target.to_dict()})


@admin_users_bp.route("/<int:user_id>", methods=["DELETE"])
@roles_required("admin")
def delete_user(user_id: int):
    """Soft delete; the account's tokens stop resolving immediately."""

    admin = current_user()
    if admin.id == user_id:
        raise ValidationError("Cannot delete your own account")
    target = _get_user_or_404(user_id)

    target.deactivate()
    commit_or_fail("Failed to delete user")
    current_app.logger.info("Admin id=%s deactivated user id=%s", admin.id, target.id)
    return ok("User deleted successfully")
