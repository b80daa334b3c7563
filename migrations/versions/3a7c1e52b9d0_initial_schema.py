"""initial schema

Revision ID: 3a7c1e52b9d0
Revises:
Create Date: 2026-10-17 09:00:00
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "3a7c1e52b9d0"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=True),
    ]


def upgrade() -> None:
    op.create_table(
        "membership",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("meter_number", sa.String(50)),
        sa.Column("industry_name", sa.String(255), nullable=False),
        sa.Column("applicant_name", sa.String(255)),
        sa.Column("address", sa.String(255)),
        sa.Column("pin_code", sa.String(10)),
        sa.Column("contact_number", sa.String(20)),
        sa.Column("email", sa.String(255)),
        sa.Column("aadhar_number", sa.String(20)),
        sa.Column("pan_number", sa.String(10)),
        sa.Column("gstin_number", sa.String(15)),
        sa.Column("membership_start_date", sa.Date()),
        sa.Column("membership_due_date", sa.Date()),
        sa.Column("monthly_fee", sa.Float()),
        sa.Column("last_payment_date", sa.Date()),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "membership_fee",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("membership_id", sa.Integer(), sa.ForeignKey("membership.id"), nullable=False),
        sa.Column("amount", sa.Float(), nullable=False),
        sa.Column("paid_amount", sa.Float()),
        sa.Column("paid_date", sa.Date()),
        sa.Column("period_from", sa.Date()),
        sa.Column("period_to", sa.Date()),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("approval_status", sa.String(20), nullable=False),
        sa.Column("receipt_number", sa.String(50)),
        sa.Column("payment_method", sa.String(50)),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "invoice",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_number", sa.String(30), nullable=False, unique=True),
        sa.Column("invoice_date", sa.Date(), nullable=False),
        sa.Column("membership_id", sa.Integer(), sa.ForeignKey("membership.id")),
        sa.Column("member_name", sa.String(255)),
        sa.Column("firm_name", sa.String(255), nullable=False),
        sa.Column("firm_address", sa.String(255)),
        sa.Column("gst_number", sa.String(15)),
        sa.Column("state", sa.String(60)),
        sa.Column("cgst_percentage", sa.Float()),
        sa.Column("sgst_percentage", sa.Float()),
        sa.Column("igst_percentage", sa.Float()),
        sa.Column("sub_total", sa.Float()),
        sa.Column("cgst_amount", sa.Float()),
        sa.Column("sgst_amount", sa.Float()),
        sa.Column("igst_amount", sa.Float()),
        sa.Column("total_amount", sa.Float()),
        sa.Column("amount_in_words", sa.String(255)),
        sa.Column("approval_status", sa.String(20), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "invoice_item",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("invoice_id", sa.Integer(), sa.ForeignKey("invoice.id"), nullable=False),
        sa.Column("hsn_code", sa.String(20)),
        sa.Column("particulars", sa.String(255), nullable=False),
        sa.Column("no_of_stones", sa.Integer()),
        sa.Column("sizes", sa.String(120)),
        sa.Column("total_sq_feet", sa.Float()),
        sa.Column("rate_per_sq_ft", sa.Float()),
        sa.Column("amount", sa.Float()),
    )

    op.create_table(
        "gst_filing",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("membership_id", sa.Integer(), sa.ForeignKey("membership.id"), nullable=False),
        sa.Column("filing_period", sa.String(30), nullable=False),
        sa.Column("filing_date", sa.Date()),
        sa.Column("due_date", sa.Date()),
        sa.Column("total_taxable_amount", sa.Float()),
        sa.Column("total_amount", sa.Float()),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "gst_item",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("filing_id", sa.Integer(), sa.ForeignKey("gst_filing.id"), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("taxable_amount", sa.Float()),
    )

    op.create_table(
        "labour",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("phone", sa.String(20), nullable=False),
        sa.Column("email", sa.String(255)),
        sa.Column("father_name", sa.String(255)),
        sa.Column("date_of_birth", sa.Date()),
        sa.Column("aadhar_number", sa.String(20)),
        sa.Column("pan_number", sa.String(10)),
        sa.Column("esi_number", sa.String(30)),
        sa.Column("permanent_address", sa.Text()),
        sa.Column("present_address", sa.Text()),
        sa.Column("current_membership_id", sa.Integer(), sa.ForeignKey("membership.id")),
        sa.Column("employed_from", sa.Date()),
        sa.Column("employed_to", sa.Date()),
        sa.Column("status", sa.String(20), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "lease_query",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("lease_query_id", sa.String(20), nullable=False, unique=True),
        sa.Column("membership_id", sa.Integer(), sa.ForeignKey("membership.id"), nullable=False),
        sa.Column("present_lease_holder", sa.String(255), nullable=False),
        sa.Column("date_of_lease", sa.Date()),
        sa.Column("expiry_of_lease", sa.Date()),
        sa.Column("date_of_renewal", sa.Date()),
        sa.Column("status", sa.String(20), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "meeting",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("agenda", sa.Text()),
        sa.Column("meeting_date", sa.Date(), nullable=False),
        sa.Column("meeting_time", sa.String(10)),
        sa.Column("meeting_point", sa.String(255)),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("expected_attendees", sa.Integer()),
        sa.Column("actual_attendees", sa.Integer()),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "app_user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("phone", sa.String(20)),
        sa.Column("role", sa.String(40), nullable=False),
        sa.Column("status", sa.String(20), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "vehicle",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("vehicle_number", sa.String(20), nullable=False),
        sa.Column("driver_name", sa.String(255)),
        sa.Column("driver_phone_number", sa.String(20)),
        sa.Column("owner_name", sa.String(255)),
        sa.Column("owner_phone_number", sa.String(20)),
        sa.Column("status", sa.String(20), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "trip",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("trip_code", sa.String(20), nullable=False, unique=True),
        sa.Column("vehicle_id", sa.Integer(), sa.ForeignKey("vehicle.id"), nullable=False),
        sa.Column("trip_date", sa.Date(), nullable=False),
        sa.Column("amount_per_trip", sa.Float()),
        sa.Column("number_of_trips", sa.Integer()),
        sa.Column("total_amount", sa.Float()),
        sa.Column("amount_paid", sa.Float()),
        sa.Column("balance_amount", sa.Float()),
        sa.Column("payment_status", sa.String(20), nullable=False),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )

    op.create_table(
        "meter_reading",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("meter_id", sa.String(20), nullable=False),
        sa.Column("name", sa.String(255)),
        sa.Column("email", sa.String(255)),
        sa.Column("reading_date", sa.DateTime()),
        sa.Column("status", sa.String(20), nullable=False),
        sa.Column("price", sa.Float()),
        *_timestamps(),
    )
    op.create_index("ix_meter_reading_meter_id", "meter_reading", ["meter_id"])


def downgrade() -> None:
    op.drop_index("ix_meter_reading_meter_id", table_name="meter_reading")
    for table in (
        "meter_reading",
        "trip",
        "vehicle",
        "app_user",
        "meeting",
        "lease_query",
        "labour",
        "gst_item",
        "gst_filing",
        "invoice_item",
        "invoice",
        "membership_fee",
        "membership",
    ):
        op.drop_table(table)
