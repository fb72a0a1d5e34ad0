"""Encoding of cache values to and from backend payloads.

Values are stored as UTF-8 JSON text. Boolean False encodes to the reserved
sentinel payload b"false", which stays distinct from "not found" because the
backend reports presence separately.
"""

import json
from typing import Any

from sharedkv.domain.models.common import CacheValue, Payload

FALSE_SENTINEL = Payload(json.dumps(False).encode("utf-8"))

# Reserved as input so it can never be mistaken for the sentinel.
RESERVED_STRING = "false"

SUPPORTED_TYPES = (str, int, float, bool)


def is_false_sentinel(payload: Any) -> bool:
    """Checks whether a stored payload is the encoded boolean False."""
    return payload == FALSE_SENTINEL


def encode_value(value: CacheValue) -> Payload:
    """Encodes a scalar value into a backend payload.

    Raises:
        TypeError: If the value is not a str, int, float or bool.
    """
    if value is False:
        return FALSE_SENTINEL
    if not isinstance(value, SUPPORTED_TYPES):
        raise TypeError(f"Unsupported value type: {type(value).__name__}")
    return Payload(json.dumps(value).encode("utf-8"))


def decode_value(payload: bytes) -> CacheValue:
    """Decodes a backend payload back into a scalar value.

    Raises:
        ValueError: If the payload is not a valid encoded scalar.
    """
    if is_false_sentinel(payload):
        return False
    try:
        value = json.loads(bytes(payload).decode("utf-8"))
    except (TypeError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"Malformed cache payload: {e}") from e
    if not isinstance(value, SUPPORTED_TYPES):
        raise ValueError(f"Payload decodes to unsupported type: {type(value).__name__}")
    return value
