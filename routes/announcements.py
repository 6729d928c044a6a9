"""Community announcements, authored by administrators."""

from __future__ import annotations

from flask import Blueprint, request

from errors import NotFoundError
from models import db
from models.announcement import Announcement
from utils.access_control import current_user, roles_required
from utils.persistence import commit_or_fail
from utils.request_validation import (
    apply_updates,
    coerce_field,
    parse_bool,
    parse_json_request,
    to_bool,
    to_required_text,
    to_text,
)
from utils.responses import ok

announcements_bp = Blueprint("announcements", __name__)

UPDATABLE_FIELDS = {
    "title": to_required_text,
    "content": to_required_text,
    "is_important": to_bool,
}


def _get_authored_announcement_or_404(announcement_id: int) -> Announcement:
    announcement = Announcement.query.filter_by(
        id=announcement_id, admin_id=current_user().id
    ).first()
    if announcement is None:
        raise NotFoundError("Announcement not found or access denied")
    return announcement


@announcements_bp.route("", methods=["GET"])
def list_announcements():
    """Important announcements first, then newest."""

    query = Announcement.query
    if parse_bool(request.args.get("important")):
        query = query.filter(Announcement.is_important.is_(True))

    announcements = query.order_by(
        Announcement.is_important.desc(),
        Announcement.created_at.desc(),
        Announcement.id.desc(),
    ).all()
    return ok(
        "Announcements retrieved successfully",
        {
            "announcements": [item.to_dict() for item in announcements],
            "total": len(announcements),
        },
    )


@announcements_bp.route("", methods=["POST"])
@roles_required("admin", message="Only admins can create announcements")
def create_announcement():
    data = parse_json_request(request, required_keys=("title", "content"))

    announcement = Announcement(
        admin_id=current_user().id,
        title=coerce_field(data, "title", to_text),
        content=coerce_field(data, "content", to_text),
        is_important=bool(parse_bool(data.get("is_important"))),
    )
    db.session.add(announcement)
    commit_or_fail("Failed to create announcement")
    return ok("Announcement created successfully", {"announcement": announcement.to_dict()})


@announcements_bp.route("/<int:announcement_id>", methods=["PUT"])
@roles_required("admin", message="Only admins can update announcements")
def update_announcement(announcement_id: int):
    announcement = _get_authored_announcement_or_404(announcement_id)
    apply_updates(announcement, parse_json_request(request), UPDATABLE_FIELDS)
    commit_or_fail("Failed to update announcement")
    return ok("Announcement updated successfully", {"announcement": announcement.to_dict()})


@announcements_bp.route("/<int:announcement_id>", methods=["DELETE"])
@roles_required("admin", message="Only admins can delete announcements")
def delete_announcement(announcement_id: int):
    announcement = _get_authored_announcement_or_404(announcement_id)
    db.session.delete(announcement)
    commit_or_fail("Failed to delete announcement")
    return ok("Announcement deleted successfully")
