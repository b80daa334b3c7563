from datetime import date

import pytest

from tsmwa_admin.utils.validation import (
    is_valid_aadhaar,
    is_valid_email,
    is_valid_gstin,
    is_valid_pan,
    is_valid_phone,
    is_valid_pin_code,
    is_valid_time,
    normalize_phone,
    parse_date,
    parse_number,
    validate_fields,
)


def test_phone():
    assert is_valid_phone("")
    assert is_valid_phone("98765 43210")
    assert is_valid_phone("+91-98765-43210")
    assert is_valid_phone("098765 43210")
    assert not is_valid_phone("98765")
    assert normalize_phone("+91 98765 43210") == "9876543210"
    assert normalize_phone(None) is None


def test_email():
    assert is_valid_email(None)
    assert is_valid_email("office@tsmwa.org")
    assert not is_valid_email("office@tsmwa")


def test_identifiers():
    assert is_valid_pin_code("501141")
    assert not is_valid_pin_code("012345")
    assert is_valid_pan("abcde1234f")
    assert not is_valid_pan("ABCDE12345")
    assert is_valid_gstin("36AABCT1332L1ZZ")
    assert not is_valid_gstin("36AABCT1332L1Z")
    assert is_valid_aadhaar("1234 5678 9012")
    assert not is_valid_aadhaar("1234 5678")


def test_dates_and_times():
    assert parse_date("2025-01-31") == date(2025, 1, 31)
    assert parse_date("31/01/2025") == date(2025, 1, 31)
    assert parse_date("2025-31-01") is None
    assert parse_date("  ") is None
    assert is_valid_time("09:30")
    assert not is_valid_time("24:00")


def test_numbers():
    assert parse_number("1,00,000") == 100000.0
    assert parse_number("") is None
    with pytest.raises(ValueError):
        parse_number("12a")


def test_validate_fields():
    errors = validate_fields({"Phone": ("123", is_valid_phone), "Email": ("a@b.co", is_valid_email)})
    assert errors == ["Phone looks invalid."]
