"""Display formatting shared by Jinja filters and list/detail cells."""

from __future__ import annotations

import re
from datetime import date, datetime

from markupsafe import Markup, escape


def format_date(value, fmt="%d/%m/%Y"):
    """Format a date or datetime for display.

    Default format is DD/MM/YYYY. If value is falsy, return an empty string.
    """
    if not value:
        return ""
    if isinstance(value, (date, datetime)):
        return value.strftime(fmt)
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        return str(value)
    return parsed.strftime(fmt)


def format_datetime(value, fmt="%d/%m/%Y %H:%M"):
    if not value:
        return ""
    if isinstance(value, datetime):
        return value.strftime(fmt)
    if isinstance(value, date):
        return datetime.combine(value, datetime.min.time()).strftime(fmt)
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        return str(value)
    return parsed.strftime(fmt)


def _indian_grouping(whole: int) -> str:
    """12345678 -> '1,23,45,678' (last three digits, then pairs)."""
    s = str(whole)
    if len(s) <= 3:
        return s
    head, tail = s[:-3], s[-3:]
    pairs = []
    while len(head) > 2:
        pairs.insert(0, head[-2:])
        head = head[:-2]
    if head:
        pairs.insert(0, head)
    return ",".join(pairs) + "," + tail


def format_currency(value, symbol="₹"):
    if value is None or value == "":
        return ""
    try:
        amount = round(float(value), 2)
    except (TypeError, ValueError):
        return str(value)
    sign = "-" if amount < 0 else ""
    whole, _, fraction = f"{abs(amount):.2f}".partition(".")
    return f"{sign}{symbol}{_indian_grouping(int(whole))}.{fraction}"


def format_phone(value):
    """Format Indian mobile numbers as 98765 43210 when possible; otherwise return original."""
    if value is None:
        return ""
    s = str(value).strip()
    if not s:
        return ""
    digits = "".join(ch for ch in s if ch.isdigit())
    if len(digits) == 12 and digits.startswith("91"):
        digits = digits[2:]
    if len(digits) == 10:
        return f"{digits[:5]} {digits[5:]}"
    return s


def nl2br(value):
    """Render multiline text safely.

    Returns Markup so Jinja does not escape the <br> tags.
    """
    if value is None:
        return Markup("")
    s = str(value).replace("\r\n", "\n").replace("\r", "\n")
    s = re.sub(r"(?i)<br\s*/?>", "\n", s)
    if not s:
        return Markup("")
    return Markup(str(escape(s)).replace("\n", "<br>\n"))


FILTERS = {
    "format_date": format_date,
    "format_datetime": format_datetime,
    "format_currency": format_currency,
    "format_phone": format_phone,
    "nl2br": nl2br,
}
