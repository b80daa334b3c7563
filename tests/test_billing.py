from datetime import date

import pytest

from tsmwa_admin.services import billing


class TestNumberWords:
    @pytest.mark.parametrize(
        "n, words",
        [
            (0, "Zero"),
            (7, "Seven"),
            (15, "Fifteen"),
            (40, "Forty"),
            (101, "One Hundred One"),
            (1000, "One Thousand"),
            (100000, "One Lakh"),
            (1234567, "Twelve Lakh Thirty Four Thousand Five Hundred Sixty Seven"),
            (25000000, "Two Crore Fifty Lakh"),
        ],
    )
    def test_indian_grouping(self, n, words):
        assert billing.number_to_words(n) == words

    def test_negative(self):
        with pytest.raises(ValueError):
            billing.number_to_words(-1)

    def test_amount_in_words_with_paise(self):
        assert billing.amount_in_words(100.5) == "Rupees One Hundred and Fifty Paise Only"
        assert billing.amount_in_words(0) == "Rupees Zero Only"


class TestInvoiceMaths:
    def test_item_amount(self):
        assert billing.item_amount(12.5, 40) == 500.0
        assert billing.item_amount(None, 40) == 0.0

    def test_invoice_amounts(self):
        totals = billing.calculate_invoice_amounts([{"amount": 1000}, {"amount": 333.33}], 9, 9, 0)
        assert totals["sub_total"] == 1333.33
        assert totals["cgst_amount"] == 120.0
        assert totals["sgst_amount"] == 120.0
        assert totals["total_amount"] == 1573.33

    def test_tax_split(self):
        assert billing.default_tax_split("telangana ", "Telangana") == {
            "cgst_percentage": 9.0,
            "sgst_percentage": 9.0,
            "igst_percentage": 0.0,
        }
        assert billing.default_tax_split("Goa", "Telangana")["igst_percentage"] == 18.0
        assert billing.default_tax_split(None, "Telangana")["igst_percentage"] == 18.0


class TestCodes:
    def test_next_code(self):
        assert billing.next_code(None, "INV/2025/") == "INV/2025/001"
        assert billing.next_code("INV/2025/009", "INV/2025/") == "INV/2025/010"
        assert billing.next_code("INV/2025/abc", "INV/2025/") == "INV/2025/001"
        assert billing.next_code("LQ-0041", "LQ-", width=4) == "LQ-0042"
        assert billing.next_code("INV/2025/999", "INV/2025/") == "INV/2025/1000"

    def test_highest_code_compares_numbers(self):
        codes = ["INV/2025/999", "INV/2025/1000", "INV/2025/draft", None]
        assert billing.highest_code(codes, "INV/2025/") == "INV/2025/1000"
        assert billing.highest_code(["TRP2025-abc"], "TRP2025-") is None
        assert billing.highest_code([], "LQ-") is None

    def test_prefixes(self):
        assert billing.invoice_prefix(2026) == "INV/2026/"
        assert billing.trip_prefix(2026) == "TRP2026-"


class TestTrips:
    def test_unpaid(self):
        assert billing.trip_amounts(1000, 2, 0) == {"total_amount": 2000.0, "balance_amount": 2000.0, "payment_status": "UNPAID"}

    def test_partial(self):
        assert billing.trip_amounts(1000, 2, 500)["payment_status"] == "PARTIAL"

    def test_overpaid_balance_is_zero(self):
        result = billing.trip_amounts(1000, 2, 2500)
        assert result["balance_amount"] == 0.0
        assert result["payment_status"] == "PAID"

    def test_zero_total_is_not_paid(self):
        assert billing.trip_amounts(0, 0, 0)["payment_status"] == "UNPAID"


def test_gst_filing_totals():
    assert billing.gst_filing_totals([{"taxable_amount": 1000}, {"taxable_amount": 500}]) == {
        "total_taxable_amount": 1500.0,
        "total_amount": 270.0,
    }


def test_invoice_export_rows():
    class Item:
        no_of_stones = 4

    class Inv:
        invoice_date = date(2025, 4, 2)
        invoice_number = "INV/2025/001"
        firm_name = "Sri Sai Stones"
        gst_number = None
        state = "Telangana"
        sub_total = 1000
        igst_amount = 0
        cgst_amount = 90
        sgst_amount = 90
        total_amount = 1180
        items = [Item(), Item()]

    rows = billing.invoice_export_rows([Inv()])
    assert rows == [[1, "2025-04-02", "INV/2025/001", "Sri Sai Stones", "", "Telangana", 1000.0, 0.0, 90.0, 90.0, 1180.0, 8, "Sq. Ft."]]
    assert len(rows[0]) == len(billing.INVOICE_EXPORT_HEADERS)
