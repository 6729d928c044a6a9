"""Utilities for validating incoming Flask requests."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Iterable, Mapping

from flask import Request

from errors import ValidationError


def parse_json_request(
    req: Request,
    *,
    required_keys: Iterable[str] | None = None,
    allow_empty: bool = False,
) -> dict:
    """Return the parsed JSON body or raise a 400 error."""

    if not req.is_json:
        raise ValidationError("Request content type must be application/json.")

    data = req.get_json(silent=True)
    if data is None:
        raise ValidationError("Request JSON body is required.")

    if not isinstance(data, dict):
        raise ValidationError("Request JSON payload must be an object.")

    if not data and not allow_empty:
        raise ValidationError("Request JSON body must not be empty.")

    if required_keys:
        require_fields(data, required_keys)

    return data


def is_blank(value: Any) -> bool:
    """True for absent values and strings containing only whitespace."""

    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_fields(data: Mapping[str, Any], fields: Iterable[str]) -> None:
    """Raise a 400 naming every required field that is missing or blank."""

    missing = [field for field in fields if is_blank(data.get(field))]
    if missing:
        raise ValidationError("Missing required fields: {}".format(", ".join(missing)))


def parse_bool(value: Any) -> bool | None:
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return bool(value)
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "y"}:
        return True
    if text in {"0", "false", "no", "n"}:
        return False
    return None


# Coercers used by ``apply_updates``. Each raises ValueError on bad input.


def to_bool(value: Any) -> bool:
    parsed = parse_bool(value)
    if parsed is None:
        raise ValueError("must be a boolean")
    return parsed


def to_text(value: Any) -> str:
    if not isinstance(value, (str, int, float)) or isinstance(value, bool):
        raise ValueError("must be a string")
    return str(value).strip()


def to_required_text(value: Any) -> str:
    text = to_text(value)
    if not text:
        raise ValueError("must not be blank")
    return text


def to_positive_decimal(value: Any) -> Decimal:
    number = to_optional_decimal(value)
    if number is None or number <= 0:
        raise ValueError("must be a positive number")
    return number


def to_optional_decimal(value: Any) -> Decimal | None:
    if is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValueError("must be numeric")
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError):
        raise ValueError("must be numeric") from None
    if not number.is_finite():
        raise ValueError("must be numeric")
    return number


def to_optional_int(value: Any) -> int | None:
    if is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValueError("must be an integer")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError("must be an integer") from None


def apply_updates(
    instance: Any,
    data: Mapping[str, Any],
    allowed: Mapping[str, Callable[[Any], Any]],
) -> list[str]:
    """Copy permitted fields from ``data`` onto ``instance``.

    ``allowed`` maps field name to a coercer; fields outside it are ignored.
    Raises 400 if nothing permitted was supplied or a value fails coercion.
    """

    changes: dict[str, Any] = {}
    errors = []
    for field, coerce in allowed.items():
        if field not in data or data[field] is None:
            continue
        try:
            changes[field] = coerce(data[field])
        except ValueError as exc:
            errors.append(f"{field} {exc}")

    if errors:
        raise ValidationError("; ".join(errors))
    if not changes:
        raise ValidationError("No fields to update")

    for field, value in changes.items():
        setattr(instance, field, value)
    return list(changes)


def coerce_field(
    data: Mapping[str, Any],
    field: str,
    coerce: Callable[[Any], Any],
    message: str | None = None,
) -> Any:
    """Apply ``coerce`` to ``data[field]``, reporting failures as a 400."""

    try:
        return coerce(data.get(field))
    except ValueError as exc:
        raise ValidationError(message or f"{field} {exc}") from None


def to_optional_text(value: Any) -> str:
    return "" if value is None else to_text(value)
