"""Direct messages between marketplace users."""

from __future__ import annotations

from flask import Blueprint, request
from sqlalchemy import and_, or_

from errors import NotFoundError, ValidationError
from models import db
from models.message import Message
from models.user import User
from utils.access_control import current_user, login_required
from utils.persistence import commit_or_fail
from utils.request_validation import coerce_field, parse_json_request, to_optional_int, to_text
from utils.responses import ok

messages_bp = Blueprint("messages", __name__)


def _active_user(user_id: int | None) -> User | None:
    if user_id is None:
        return None
    return User.query.filter_by(id=user_id, is_active=True).first()


@messages_bp.route("", methods=["GET"])
@login_required
def list_messages():
    """Messages the caller sent or received, newest first."""

    user = current_user()
    query = Message.query.filter(
        or_(Message.sender_id == user.id, Message.receiver_id == user.id)
    )
    other_id = request.args.get("conversation_with", type=int)
    if other_id:
        query = query.filter(
            or_(
                and_(Message.sender_id == user.id, Message.receiver_id == other_id),
                and_(Message.sender_id == other_id, Message.receiver_id == user.id),
            )
        )

    messages = query.order_by(Message.created_at.desc(), Message.id.desc()).all()
    return ok(
        "Messages retrieved successfully",
        {"messages": [message.to_dict() for message in messages]},
    )


@messages_bp.route("", methods=["POST"])
@login_required
def send_message():
    user = current_user()
    data = parse_json_request(request, required_keys=("receiver_id", "message"))

    receiver_id = coerce_field(data, "receiver_id", to_optional_int)
    product_id = coerce_field(data, "product_id", to_optional_int)
    request_id = coerce_field(data, "request_id", to_optional_int)

    if _active_user(receiver_id) is None:
        raise NotFoundError("Receiver not found")
    if receiver_id == user.id:
        raise ValidationError("Cannot send message to yourself")

    message = Message(
        sender_id=user.id,
        receiver_id=receiver_id,
        product_id=product_id,
        request_id=request_id,
        message=coerce_field(data, "message", to_text),
    )
    db.session.add(message)
    commit_or_fail("Failed to send message")
    return ok("Message sent successfully", {"message": message.to_dict()})


@messages_bp.route("/<int:message_id>/read", methods=["PUT"])
@login_required
def mark_as_read(message_id: int):
    message = Message.query.filter_by(id=message_id, receiver_id=current_user().id).first()
    if message is None:
        raise NotFoundError("Message not found or access denied")

    message.is_read = True
    commit_or_fail("Failed to mark message as read")
    return ok("Message marked as read")
