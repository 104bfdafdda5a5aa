import pytest
from validation import validate_export_request
from jsonschema import ValidationError


def test_validate_valid_payload():
    payload = {"url": "https://thebarn.de/products/x", "price": "9.50", "weight": 250, "farmer": None}
    assert validate_export_request(payload) is True


def test_validate_empty_payload():
    assert validate_export_request({}) is True


def test_validate_invalid_payload():
    payload = {"price": {"amount": 9.5}}
    with pytest.raises(ValidationError) as exc:
        validate_export_request(payload)
    assert "Invalid export request" in exc.value.message
