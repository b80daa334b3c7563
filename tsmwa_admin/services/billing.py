"""Money maths for invoices, trips and GST filings.

Pure functions only: callers (forms, export, seed script) pass plain numbers
and dicts in and persist whatever comes back. Nothing here touches the
session.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional

GST_RATE_PERCENT = 18.0

_SINGLE = ["", "One", "Two", "Three", "Four", "Five", "Six", "Seven", "Eight", "Nine"]
_TEENS = [
    "Ten",
    "Eleven",
    "Twelve",
    "Thirteen",
    "Fourteen",
    "Fifteen",
    "Sixteen",
    "Seventeen",
    "Eighteen",
    "Nineteen",
]
_TENS = ["", "", "Twenty", "Thirty", "Forty", "Fifty", "Sixty", "Seventy", "Eighty", "Ninety"]

# Indian numbering: crore (10^7), lakh (10^5), thousand, hundred.
_SCALES = ((10_000_000, "Crore"), (100_000, "Lakh"), (1_000, "Thousand"), (100, "Hundred"))


def round_money(value: Any) -> float:
    try:
        return round(float(value or 0.0), 2)
    except (TypeError, ValueError):
        return 0.0


def _two_digit_words(n: int) -> str:
    if n < 10:
        return _SINGLE[n]
    if n < 20:
        return _TEENS[n - 10]
    tail = f" {_SINGLE[n % 10]}" if n % 10 else ""
    return _TENS[n // 10] + tail


def number_to_words(num: int) -> str:
    """Spell a non-negative integer using crore/lakh grouping.

    >>> number_to_words(1234567)
    'Twelve Lakh Thirty Four Thousand Five Hundred Sixty Seven'
    """
    num = int(num)
    if num < 0:
        raise ValueError("number_to_words() expects a non-negative integer")
    if num == 0:
        return "Zero"

    words: List[str] = []
    for size, name in _SCALES:
        if num >= size:
            words.append(f"{number_to_words(num // size)} {name}")
            num %= size
    if num:
        words.append(_two_digit_words(num))
    return " ".join(words)


def amount_in_words(amount: Any) -> str:
    """Rupee amount as invoice text, e.g. 'Rupees One Hundred and Fifty Paise Only'."""
    value = round_money(amount)
    rupees = int(value)
    paise = int(round((value - rupees) * 100))
    text = f"Rupees {number_to_words(rupees)}"
    if paise:
        text += f" and {number_to_words(paise)} Paise"
    return text + " Only"


# -----------------------------------------------------------------------------
# Invoices
# -----------------------------------------------------------------------------

def item_amount(total_sq_feet: Any, rate_per_sq_ft: Any) -> float:
    return round_money(round_money(total_sq_feet) * round_money(rate_per_sq_ft))


def calculate_invoice_amounts(
    items: Iterable[Mapping[str, Any]],
    cgst: Any = 0.0,
    sgst: Any = 0.0,
    igst: Any = 0.0,
) -> Dict[str, float]:
    """Totals for an invoice; each item contributes its `amount`."""
    sub_total = round_money(sum(round_money(i.get("amount")) for i in items))
    cgst_amount = round_money(sub_total * round_money(cgst) / 100)
    sgst_amount = round_money(sub_total * round_money(sgst) / 100)
    igst_amount = round_money(sub_total * round_money(igst) / 100)
    total = round_money(sub_total + cgst_amount + sgst_amount + igst_amount)
    return {
        "sub_total": sub_total,
        "cgst_amount": cgst_amount,
        "sgst_amount": sgst_amount,
        "igst_amount": igst_amount,
        "total_amount": total,
        "amount_in_words": amount_in_words(total),
    }


def default_tax_split(state: Optional[str], home_state: str) -> Dict[str, float]:
    """Intra-state sales split GST into CGST + SGST; inter-state use IGST."""
    if (state or "").strip().lower() == (home_state or "").strip().lower():
        half = GST_RATE_PERCENT / 2
        return {"cgst_percentage": half, "sgst_percentage": half, "igst_percentage": 0.0}
    return {"cgst_percentage": 0.0, "sgst_percentage": 0.0, "igst_percentage": GST_RATE_PERCENT}


def next_code(last: Optional[str], prefix: str, width: int = 3) -> str:
    """Continue a zero-padded sequence: next_code('INV/2025/007', 'INV/2025/') -> 'INV/2025/008'.

    Codes that don't carry a numeric suffix restart the sequence at 1.
    """
    current = code_number(last, prefix)
    next_n = 1 if current is None else current + 1
    return f"{prefix}{next_n:0{width}d}"


def code_number(code: Optional[str], prefix: str) -> Optional[int]:
    """Numeric suffix of `code` under `prefix`, or None when it has none."""
    if not code or not code.startswith(prefix):
        return None
    suffix = code[len(prefix):]
    return int(suffix) if suffix.isdigit() else None


def highest_code(codes: Iterable[Optional[str]], prefix: str) -> Optional[str]:
    """The code with the largest numeric suffix. 'INV/2025/1000' beats 'INV/2025/999'."""
    numbered = [(code_number(c, prefix), c) for c in codes]
    numbered = [(n, c) for n, c in numbered if n is not None]
    if not numbered:
        return None
    return max(numbered)[1]


def invoice_prefix(year: int) -> str:
    return f"INV/{year}/"


def trip_prefix(year: int) -> str:
    return f"TRP{year}-"


LEASE_QUERY_PREFIX = "LQ-"


# -----------------------------------------------------------------------------
# Trips
# -----------------------------------------------------------------------------

def trip_amounts(amount_per_trip: Any, number_of_trips: Any, amount_paid: Any) -> Dict[str, Any]:
    total = round_money(round_money(amount_per_trip) * int(number_of_trips or 0))
    paid = round_money(amount_paid)
    balance = round_money(max(0.0, total - paid))

    if total > 0 and balance == 0:
        status = "PAID"
    elif paid > 0:
        status = "PARTIAL"
    else:
        status = "UNPAID"

    return {"total_amount": total, "balance_amount": balance, "payment_status": status}


# -----------------------------------------------------------------------------
# GST filings
# -----------------------------------------------------------------------------

def gst_filing_totals(items: Iterable[Mapping[str, Any]]) -> Dict[str, float]:
    taxable = round_money(sum(round_money(i.get("taxable_amount")) for i in items))
    return {
        "total_taxable_amount": taxable,
        "total_amount": round_money(taxable * GST_RATE_PERCENT / 100),
    }


# -----------------------------------------------------------------------------
# GST register export
# -----------------------------------------------------------------------------

INVOICE_EXPORT_HEADERS = [
    "Sl",
    "Date",
    "Invoice No",
    "Firm Name",
    "GSTIN",
    "State",
    "Taxable Amount",
    "IGST",
    "CGST",
    "SGST",
    "Total",
    "Quantity",
    "Unit",
]


def invoice_export_rows(invoices: Iterable[Any]) -> List[List[Any]]:
    rows: List[List[Any]] = []
    for n, inv in enumerate(invoices, start=1):
        quantity = sum(int(item.no_of_stones or 0) for item in (inv.items or []))
        rows.append(
            [
                n,
                inv.invoice_date.isoformat() if inv.invoice_date else "",
                inv.invoice_number,
                inv.firm_name or "",
                inv.gst_number or "",
                inv.state or "",
                round_money(inv.sub_total),
                round_money(inv.igst_amount),
                round_money(inv.cgst_amount),
                round_money(inv.sgst_amount),
                round_money(inv.total_amount),
                quantity,
                "Sq. Ft.",
            ]
        )
    return rows
