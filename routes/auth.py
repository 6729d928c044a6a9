"""Authentication blueprint: one POST endpoint dispatching on ``action``."""

from __future__ import annotations

from flask import Blueprint, request

from errors import ValidationError
from services import get_auth_service
from utils.access_control import current_context
from utils.request_validation import parse_json_request
from utils.responses import ok

auth_bp = Blueprint("auth", __name__)


def _register(payload: dict):
    context = current_context()
    result = get_auth_service().register(payload, acting_user=context.principal)
    return ok("Registration successful", result.to_dict())


def _login(payload: dict):
    result = get_auth_service().login(payload.get("email"), payload.get("password"))
    return ok("Login successful", result.to_dict())


def _validate(payload: dict):
    user = get_auth_service().validate(payload.get("token"))
    return ok("Token valid", {"user": user.to_dict()})


def _logout(payload: dict):
    get_auth_service().logout(current_context().token)
    return ok("Logout successful")


ACTIONS = {
    "register": _register,
    "login": _login,
    "validate": _validate,
    "logout": _logout,
}


@auth_bp.route("", methods=["POST"])
def dispatch():
    """Route ``{"action": ...}`` to the matching auth operation."""

    payload = parse_json_request(request)
    action = payload.get("action")
    handler = ACTIONS.get(action) if isinstance(action, str) else None
    if handler is None:
        raise ValidationError("Invalid action")
    return handler(payload)
