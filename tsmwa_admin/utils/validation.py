import re
from datetime import date, datetime

# -----------------------------
# Phone
# -----------------------------

PHONE_DIGITS_RE = re.compile(r"\D+")


def normalize_phone(value: str | None) -> str | None:
    """
    Strip all non-digits and a leading 91 / 0 trunk prefix.
    Return the 10 digit subscriber number or None.
    """
    if not value:
        return None
    digits = PHONE_DIGITS_RE.sub("", value)
    if len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    elif len(digits) == 11 and digits.startswith("0"):
        digits = digits[1:]
    return digits or None


def is_valid_phone(value: str | None) -> bool:
    """
    Valid phone numbers:
    - empty / None → valid
    - 10 digits after removing +91 / 0 → valid
    """
    if not value:
        return True
    digits = normalize_phone(value)
    return bool(digits and len(digits) == 10)


# -----------------------------
# Email
# -----------------------------

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_valid_email(value: str | None) -> bool:
    """
    Empty email is allowed.
    Basic sanity check, not RFC insanity.
    """
    if not value:
        return True
    return bool(EMAIL_RE.match(value.strip()))


# -----------------------------
# PIN code / tax identifiers
# -----------------------------

PIN_RE = re.compile(r"^[1-9]\d{5}$")
PAN_RE = re.compile(r"^[A-Z]{5}\d{4}[A-Z]$")
GSTIN_RE = re.compile(r"^\d{2}[A-Z]{5}\d{4}[A-Z][1-9A-Z]Z[0-9A-Z]$")
AADHAAR_RE = re.compile(r"^\d{12}$")


def is_valid_pin_code(value: str | None) -> bool:
    if not value:
        return True
    return bool(PIN_RE.match(value.strip()))


def is_valid_pan(value: str | None) -> bool:
    if not value:
        return True
    return bool(PAN_RE.match(value.strip().upper()))


def is_valid_gstin(value: str | None) -> bool:
    if not value:
        return True
    return bool(GSTIN_RE.match(value.strip().upper()))


def is_valid_aadhaar(value: str | None) -> bool:
    """12 digits; spaces and dashes between groups are ignored."""
    if not value:
        return True
    return bool(AADHAAR_RE.match(re.sub(r"[\s-]", "", value)))


# -----------------------------
# Dates / numbers
# -----------------------------

def parse_date(value: str | None) -> date | None:
    """Parse YYYY-MM-DD (HTML date inputs) or DD/MM/YYYY (typed). None if blank/invalid."""
    raw = (value or "").strip()
    if not raw:
        return None

    if "-" in raw:
        try:
            return datetime.strptime(raw, "%Y-%m-%d").date()
        except ValueError:
            pass

    try:
        return datetime.strptime(raw, "%d/%m/%Y").date()
    except ValueError:
        return None


TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def is_valid_time(value: str | None) -> bool:
    if not value:
        return True
    return bool(TIME_RE.match(value.strip()))


def parse_number(value: str | None) -> float | None:
    """Float from form text; commas allowed as thousands separators. Raises ValueError."""
    raw = (value or "").strip().replace(",", "")
    if not raw:
        return None
    return float(raw)


# -----------------------------
# Error helpers
# -----------------------------

def validate_fields(field_map):
    """
    field_map = {
        "Owner phone": (form_value, is_valid_phone),
        "Email": (form_value, is_valid_email),
    }

    Returns a list of error strings, one per invalid label.
    """
    errors = []
    for label, (value, validator) in field_map.items():
        if not validator(value):
            errors.append(f"{label} looks invalid.")
    return errors
