# payload.py

import json
import logging
from urllib.parse import parse_qs

from pydantic import ValidationError

from errors import InvalidPayload, UnsupportedMediaType
from models.github_webhook import PushEvent

logger = logging.getLogger(__name__)

JSON_MEDIA_TYPE = "application/json"
FORM_MEDIA_TYPE = "application/x-www-form-urlencoded"
MAIN_BRANCH_REF = "refs/heads/main"


def media_type(content_type: str) -> str:
    """'application/json; charset=utf-8' -> 'application/json'"""
    return (content_type or "").split(";", 1)[0].strip().lower()


def extract_event_bytes(body: bytes, content_type: str) -> bytes:
    """
    Returns the JSON event bytes carried by a webhook delivery.

    GitHub delivers either the JSON document as the body, or a form body whose
    'payload' field holds the JSON document.
    """
    kind = media_type(content_type)
    if kind == JSON_MEDIA_TYPE:
        return body

    if kind == FORM_MEDIA_TYPE:
        try:
            form_data = parse_qs(body.decode("utf-8"), strict_parsing=bool(body))
        except (UnicodeDecodeError, ValueError) as e:
            raise InvalidPayload(f"Could not parse form body: {e}")
        if "payload" not in form_data:
            raise InvalidPayload("No payload parameter in form data")
        return form_data["payload"][0].encode("utf-8")

    raise UnsupportedMediaType(f"Unsupported Content-Type: {content_type!r}")


def parse_push_event(event_bytes: bytes) -> PushEvent:
    try:
        payload = json.loads(event_bytes)
    except (UnicodeDecodeError, ValueError) as e:
        raise InvalidPayload(f"Could not decode JSON payload: {e}")

    if not isinstance(payload, dict):
        raise InvalidPayload(f"Expected a JSON object, got {type(payload).__name__}")

    try:
        return PushEvent(**payload)
    except ValidationError as e:
        raise InvalidPayload(f"Payload does not look like a push event: {e}")


def decode(body: bytes, content_type: str) -> PushEvent:
    return parse_push_event(extract_event_bytes(body, content_type))


def should_sync(event: PushEvent) -> bool:
    # Only pushes to main are deployed; anything else is accepted and ignored.
    return event.ref == MAIN_BRANCH_REF
