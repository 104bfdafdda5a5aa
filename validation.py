"""Schema validation helpers for export requests.

Provides a JSON Schema for the /api/export body and a helper to validate payloads.
"""
from jsonschema import validate, ValidationError


_FIELD = {"type": ["string", "number", "null"]}

EXPORT_REQUEST_SCHEMA = {
    "type": "object",
    "properties": {
        "url": {"type": ["string", "null"]},
        "price": _FIELD,
        "weight": _FIELD,
        "flavor": {"type": ["string", "array", "null"], "items": {"type": "string"}},
        "processing": _FIELD,
        "farmer": _FIELD,
    }
}


def validate_export_request(payload: dict) -> bool:
    """Validate a payload against the export request schema.

    Raises:
        jsonschema.ValidationError: on invalid payloads with a helpful message.

    Returns:
        True when valid.
    """
    try:
        validate(instance=payload, schema=EXPORT_REQUEST_SCHEMA)
    except ValidationError as exc:
        # Re-raise with a clear message for upstream handling
        raise ValidationError(f"Invalid export request: {exc.message}") from exc

    return True
