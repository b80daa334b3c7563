"""End-to-end requests through the catch-all page view."""

from datetime import date

import pytest
import requests

from tsmwa_admin.errors import DataAccessFailure
from tsmwa_admin.extensions import db
from tsmwa_admin.models import Invoice, Vehicle
from tsmwa_admin.services.log_feed import LogFeed, LogRecord


class TestPages:
    def test_home_lists_meter_readings(self, client, sample):
        r = client.get("/")
        assert r.status_code == 200
        assert b"MET042" in r.data

    def test_meter_reading_detail_is_case_insensitive(self, client, sample):
        r = client.get("/met042")
        assert r.status_code == 200
        assert b"Jane Smith" in r.data

    def test_dashboard(self, client, sample):
        r = client.get("/admin")
        assert r.status_code == 200
        assert b"Membership approvals" in r.data

    def test_list_and_detail(self, client, sample):
        assert b"Sri Sai Stones" in client.get("/admin/memberships").data
        r = client.get(f"/admin/memberships/{sample['member'].id}")
        assert r.status_code == 200
        assert b"R. Kumar" in r.data

    def test_approval_queue_only_shows_pending(self, client, sample):
        r = client.get("/admin/memberships/approval-pending")
        assert r.status_code == 200
        assert b"Balaji Granites" in r.data
        assert b"Sri Sai Stones" not in r.data

    def test_add_form_renders(self, client, sample):
        r = client.get("/admin/vehicle/add")
        assert r.status_code == 200
        assert b"Create Vehicle" in r.data

    def test_edit_form_is_prefilled(self, client, sample):
        r = client.get(f"/admin/vehicle/{sample['vehicle'].id}/edit")
        assert r.status_code == 200
        assert b"TS34AB1234" in r.data

    def test_logs_page_without_feed(self, client):
        assert client.get("/admin/logs").status_code == 200

    def test_logs_page_keeps_healthy_sources(self, client, data_access, monkeypatch):
        feed = LogFeed("http://logs.local", {"backend": "/api/logs", "notify": "/api/notify/logs"})

        def fetch(source):
            if source == "notify":
                raise requests.HTTPError("503 Server Error")
            return [LogRecord(source="backend", timestamp="2025-01-01T10:00:00", level="info", message="backend started")]

        monkeypatch.setattr(feed, "fetch", fetch)
        monkeypatch.setattr(data_access, "log_feed", feed)
        r = client.get("/admin/logs")
        feed.close()
        assert r.status_code == 200
        assert b"backend started" in r.data
        assert b"Could not load notify logs" in r.data


class TestNotFound:
    def test_unknown_route(self, client):
        r = client.get("/nonexistent/route")
        assert r.status_code == 404
        assert b"Page not found" in r.data

    def test_unknown_record(self, client, sample):
        assert client.get("/admin/memberships/999").status_code == 404

    def test_trip_under_wrong_vehicle(self, client, sample):
        other, trip = sample["other_vehicle"], sample["trip"]
        assert client.get(f"/admin/vehicle/{other.id}/edit-trip/{trip.id}").status_code == 404

    def test_post_to_list_is_not_allowed(self, client, sample):
        assert client.post("/admin/memberships", data={}).status_code == 405


class TestSubmit:
    def test_valid_post_redirects_to_detail(self, client, app_ctx):
        r = client.post("/admin/vehicle/add", data={"vehicle_number": "ts09xy4321", "status": "ACTIVE"})
        assert r.status_code == 302
        vehicle = Vehicle.query.filter_by(vehicle_number="TS09XY4321").one()
        assert r.headers["Location"].endswith(f"/admin/vehicle/{vehicle.id}")

    def test_invalid_post_rerenders_with_errors(self, client, app_ctx):
        r = client.post("/admin/vehicle/add", data={"driver_phone_number": "123", "status": "ACTIVE"})
        assert r.status_code == 400
        assert b"Vehicle number is required." in r.data
        assert b"123" in r.data
        assert Vehicle.query.count() == 0

    def test_nested_trip_redirects_to_vehicle(self, client, sample):
        vehicle = sample["vehicle"]
        r = client.post(
            f"/admin/vehicle/{vehicle.id}/add-trip",
            data={"trip_date": "2025-05-01", "amount_per_trip": "1000", "number_of_trips": "1"},
        )
        assert r.status_code == 302
        assert r.headers["Location"].endswith(f"/admin/vehicle/{vehicle.id}")


class TestFailures:
    def test_data_access_failure_renders_500(self, client, data_access, monkeypatch):
        async def broken(*args, **kwargs):
            raise DataAccessFailure("database unavailable")

        monkeypatch.setattr(data_access, "find_many", broken)
        r = client.get("/admin/memberships")
        assert r.status_code == 500
        assert b"Something went wrong" in r.data


class TestInvoiceDownloads:
    def test_csv_export(self, client, sample):
        r = client.get("/admin/invoices/export.csv")
        assert r.status_code == 200
        assert r.mimetype == "text/csv"
        assert "attachment; filename=gst-register-" in r.headers["Content-Disposition"]
        lines = r.get_data(as_text=True).splitlines()
        assert lines[0].startswith("Sl,Date,Invoice No")
        assert "INV/2025/001" in lines[1]

    def test_csv_export_unknown_section(self, client):
        assert client.get("/nowhere/invoices/export.csv").status_code == 404

    def test_pdf_for_missing_invoice(self, client, sample):
        assert client.get("/admin/invoices/999/pdf").status_code == 404

    @pytest.mark.parametrize("path", ["/admin/invoices", "/admin/invoices/{id}"])
    def test_download_links(self, client, sample, path):
        r = client.get(path.format(id=sample["invoice"].id))
        assert b"/admin/invoices/" in r.data


class TestNumbering:
    def test_invoice_after_code_1000(self, client, sample):
        member = sample["member"]
        for code in ("INV/2025/999", "INV/2025/1000"):
            db.session.add(Invoice(invoice_number=code, invoice_date=date(2025, 5, 1), membership=member, firm_name="Sri Sai Stones"))
        db.session.commit()

        r = client.post(
            "/admin/invoices/create",
            data={
                "invoice_date": "2025-06-10",
                "membership_id": str(member.id),
                "firm_name": "Sri Sai Stones",
                "state": "Telangana",
                "approval_status": "pending",
                "item_particulars": "Yellow stone",
                "item_total_sq_feet": "100",
                "item_rate_per_sq_ft": "20",
            },
        )
        assert r.status_code == 302
        assert Invoice.query.filter_by(invoice_number="INV/2025/1001").count() == 1
