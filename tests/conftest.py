"""Shared fixtures: a fresh app on an in-memory database per test."""

from datetime import date

import pytest

from tsmwa_admin import create_app
from tsmwa_admin.config import TestConfig
from tsmwa_admin.extensions import db
from tsmwa_admin.models import Invoice, InvoiceItem, Membership, MeterReading, Trip, Vehicle


@pytest.fixture
def app():
    app = create_app(TestConfig)
    yield app
    app.extensions["data_access"].close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield app


@pytest.fixture
def data_access(app):
    return app.extensions["data_access"]


@pytest.fixture
def sample(app_ctx):
    """A small, fixed set of records most tests can share."""
    member = Membership(industry_name="Sri Sai Stones", applicant_name="R. Kumar", status="Active")
    pending = Membership(industry_name="Balaji Granites", status="Pending")
    vehicle = Vehicle(vehicle_number="TS34AB1234", driver_name="Ramesh")
    other_vehicle = Vehicle(vehicle_number="TS34CD5678")
    trip = Trip(
        trip_code="TRP2025-001",
        vehicle=vehicle,
        trip_date=date(2025, 3, 1),
        amount_per_trip=2000.0,
        number_of_trips=2,
        total_amount=4000.0,
        amount_paid=1000.0,
        balance_amount=3000.0,
        payment_status="PARTIAL",
    )
    invoice = Invoice(
        invoice_number="INV/2025/001",
        invoice_date=date(2025, 4, 2),
        membership=member,
        firm_name="Sri Sai Stones",
        state="Telangana",
        sub_total=1000.0,
        cgst_percentage=9.0,
        sgst_percentage=9.0,
        cgst_amount=90.0,
        sgst_amount=90.0,
        total_amount=1180.0,
        amount_in_words="Rupees One Thousand One Hundred Eighty Only",
        items=[InvoiceItem(particulars="Tandur yellow stone", no_of_stones=10, total_sq_feet=40.0, rate_per_sq_ft=25.0, amount=1000.0)],
    )
    reading = MeterReading(meter_id="MET042", name="Jane Smith", price=120.0)

    db.session.add_all([member, pending, vehicle, other_vehicle, trip, invoice, reading])
    db.session.commit()
    return {
        "member": member,
        "pending": pending,
        "vehicle": vehicle,
        "other_vehicle": other_vehicle,
        "trip": trip,
        "invoice": invoice,
        "reading": reading,
    }
