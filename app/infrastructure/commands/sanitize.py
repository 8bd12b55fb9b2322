"""Payload decoding for registered handlers.

Every registration decodes its payload in one of three ways: a pydantic
model, a custom sanitizer callable, or the default recursive text
sanitizer. All failures surface as ValidationError (invalid_payload).
"""

import re
from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from infrastructure.commands.errors import ValidationError
from infrastructure.commands.models import HandlerRegistration

_KEY_INVALID = re.compile(r"[^a-z0-9_\-]")
_TAG = re.compile(r"<[^>]*>")
_WHITESPACE = re.compile(r"\s+")


def sanitize_key(key: Any) -> str:
    """Lower-case a key and drop everything outside [a-z0-9_-]."""
    return _KEY_INVALID.sub("", str(key).lower())


def sanitize_text(value: str) -> str:
    """Strip tags, collapse whitespace and trim."""
    value = _TAG.sub("", value)
    value = _WHITESPACE.sub(" ", value)
    return value.strip()


def sanitize_value(value: Any) -> Any:
    if isinstance(value, dict):
        return sanitize_payload(value)
    if isinstance(value, (list, tuple)):
        return [sanitize_value(item) for item in value]
    if isinstance(value, str):
        return sanitize_text(value)
    if value is None or isinstance(value, (bool, int, float)):
        return value
    return sanitize_text(str(value))


def sanitize_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Default sanitizer: recursive key and text cleanup.

    Keys that reduce to an empty string are dropped.
    """
    if not isinstance(payload, dict):
        raise ValidationError("Payload must be an object")

    sanitized: Dict[str, Any] = {}
    for key, value in payload.items():
        clean_key = sanitize_key(key)
        if not clean_key:
            continue
        sanitized[clean_key] = sanitize_value(value)
    return sanitized


def decode_payload(
    registration: HandlerRegistration, payload: Dict[str, Any]
) -> Dict[str, Any]:
    """Decode a raw payload according to the registration.

    Raises:
        ValidationError: If the payload does not satisfy the registration
    """
    if payload is None:
        payload = {}

    if registration.payload_model is not None:
        try:
            model = registration.payload_model.model_validate(payload)
        except PydanticValidationError as e:
            fields = {
                ".".join(str(part) for part in error["loc"]) or "payload": error["msg"]
                for error in e.errors()
            }
            raise ValidationError(data={"fields": fields}) from e
        return model.model_dump(mode="json", exclude_none=True)

    if registration.sanitizer is not None:
        try:
            result = registration.sanitizer(payload)
        except ValidationError:
            raise
        except (TypeError, ValueError) as e:
            raise ValidationError(str(e)) from e
        if not isinstance(result, dict):
            raise ValidationError("Sanitizer must return an object")
        return result

    return sanitize_payload(payload)
