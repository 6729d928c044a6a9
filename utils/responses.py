"""The JSON envelope every endpoint answers with."""

from __future__ import annotations

from http import HTTPStatus

from flask import Response, jsonify


def envelope(
    success: bool,
    message: str = "",
    data: dict | None = None,
    status: int = HTTPStatus.OK,
) -> tuple[Response, int]:
    """Return ``{"success", "message", "data"?}`` paired with ``status``."""

    payload: dict = {"success": success, "message": message}
    if data is not None:
        payload["data"] = data
    return jsonify(payload), int(status)


def ok(message: str, data: dict | None = None) -> tuple[Response, int]:
    return envelope(True, message, data)
