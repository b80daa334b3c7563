from datetime import date, datetime

from markupsafe import Markup

from tsmwa_admin.formatting import format_currency, format_date, format_datetime, format_phone, nl2br


def test_format_date():
    assert format_date(date(2025, 4, 2)) == "02/04/2025"
    assert format_date("2025-04-02") == "02/04/2025"
    assert format_date(None) == ""
    assert format_date("soon") == "soon"


def test_format_datetime():
    assert format_datetime(datetime(2025, 4, 2, 9, 5)) == "02/04/2025 09:05"
    assert format_datetime(date(2025, 4, 2)) == "02/04/2025 00:00"


def test_format_currency_uses_indian_grouping():
    assert format_currency(1234567.5) == "₹12,34,567.50"
    assert format_currency(999) == "₹999.00"
    assert format_currency(-1500) == "-₹1,500.00"
    assert format_currency(None) == ""


def test_format_phone():
    assert format_phone("9876543210") == "98765 43210"
    assert format_phone("+91 9876543210") == "98765 43210"
    assert format_phone("040-123") == "040-123"


def test_nl2br_escapes():
    out = nl2br("a<b>\nc<br>d")
    assert isinstance(out, Markup)
    assert out == Markup("a&lt;b&gt;<br>\nc<br>\nd")
