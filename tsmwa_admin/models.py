"""
SQLAlchemy models for the TSMWA admin.

This file defines:
- Members: Membership, MembershipFee, MembershipChange
- Billing: Invoice + InvoiceItem, GstFiling + GstItem
- People: Labour, User
- Operations: LeaseQuery, Meeting, Vehicle, Trip, MeterReading

Every table uses an integer surrogate `id`. Records are addressed from URLs by
that id, except MeterReading which is looked up by its `meter_id` natural key.
"""

from datetime import datetime
from .extensions import db


class TimestampMixin:
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


# ============================================================
#  MEMBERSHIPS
# ============================================================

class Membership(TimestampMixin, db.Model):
    __tablename__ = "membership"

    id = db.Column(db.Integer, primary_key=True)

    meter_number = db.Column(db.String(50))
    industry_name = db.Column(db.String(255), nullable=False)
    applicant_name = db.Column(db.String(255))

    address = db.Column(db.String(255))
    pin_code = db.Column(db.String(10))
    contact_number = db.Column(db.String(20))
    email = db.Column(db.String(255))

    # Compliance identifiers
    aadhar_number = db.Column(db.String(20))
    pan_number = db.Column(db.String(10))
    gstin_number = db.Column(db.String(15))

    membership_start_date = db.Column(db.Date)
    membership_due_date = db.Column(db.Date)
    monthly_fee = db.Column(db.Float, default=0.0)
    last_payment_date = db.Column(db.Date)

    status = db.Column(db.String(20), default="Pending", nullable=False)  # Active/Pending/Inactive
    notes = db.Column(db.Text)

    fees = db.relationship("MembershipFee", back_populates="membership")
    invoices = db.relationship("Invoice", back_populates="membership")
    gst_filings = db.relationship("GstFiling", back_populates="membership")
    changes = db.relationship("MembershipChange", back_populates="membership")

    def __str__(self):
        return self.industry_name or f"Membership {self.id}"

    def __repr__(self):
        return f"<Membership {self.industry_name}>"


class MembershipFee(TimestampMixin, db.Model):
    __tablename__ = "membership_fee"

    id = db.Column(db.Integer, primary_key=True)

    membership_id = db.Column(db.Integer, db.ForeignKey("membership.id"), nullable=False)
    membership = db.relationship("Membership", back_populates="fees")

    amount = db.Column(db.Float, nullable=False, default=0.0)
    paid_amount = db.Column(db.Float, default=0.0)
    paid_date = db.Column(db.Date)
    period_from = db.Column(db.Date)
    period_to = db.Column(db.Date)

    status = db.Column(db.String(20), default="due", nullable=False)  # paid/due/canceled
    approval_status = db.Column(db.String(20), default="pending", nullable=False)

    receipt_number = db.Column(db.String(50))
    payment_method = db.Column(db.String(50))
    notes = db.Column(db.Text)

    def __repr__(self):
        return f"<MembershipFee {self.id} member={self.membership_id} {self.status}>"


class MembershipChange(TimestampMixin, db.Model):
    """An edit to a membership held for admin approval.

    `updated_data` maps Membership field names to the submitted form text.
    Approving writes those values onto the membership; declining keeps the
    membership as it is and records why.
    """

    __tablename__ = "membership_change"

    id = db.Column(db.Integer, primary_key=True)

    membership_id = db.Column(db.Integer, db.ForeignKey("membership.id"), nullable=False)
    membership = db.relationship("Membership", back_populates="changes")

    updated_data = db.Column(db.JSON, nullable=False, default=dict)
    modified_by = db.Column(db.String(255))

    approval_status = db.Column(db.String(20), default="PENDING", nullable=False, index=True)  # PENDING/APPROVED/DECLINED
    decline_reason = db.Column(db.Text)
    decided_at = db.Column(db.DateTime)

    def __repr__(self):
        return f"<MembershipChange {self.id} member={self.membership_id} {self.approval_status}>"


# ============================================================
#  INVOICES
# ============================================================

class Invoice(TimestampMixin, db.Model):
    __tablename__ = "invoice"

    id = db.Column(db.Integer, primary_key=True)

    invoice_number = db.Column(db.String(30), unique=True, nullable=False)  # INV/2025/001
    invoice_date = db.Column(db.Date, nullable=False)

    membership_id = db.Column(db.Integer, db.ForeignKey("membership.id"))
    membership = db.relationship("Membership", back_populates="invoices")

    # Snapshot of the buyer at invoice time
    member_name = db.Column(db.String(255))
    firm_name = db.Column(db.String(255), nullable=False)
    firm_address = db.Column(db.String(255))
    gst_number = db.Column(db.String(15))
    state = db.Column(db.String(60))

    cgst_percentage = db.Column(db.Float, default=0.0)
    sgst_percentage = db.Column(db.Float, default=0.0)
    igst_percentage = db.Column(db.Float, default=0.0)

    sub_total = db.Column(db.Float, default=0.0)
    cgst_amount = db.Column(db.Float, default=0.0)
    sgst_amount = db.Column(db.Float, default=0.0)
    igst_amount = db.Column(db.Float, default=0.0)
    total_amount = db.Column(db.Float, default=0.0)
    amount_in_words = db.Column(db.String(255))

    approval_status = db.Column(db.String(20), default="pending", nullable=False)

    items = db.relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
    )

    def __str__(self):
        return self.invoice_number

    def __repr__(self):
        return f"<Invoice {self.invoice_number} – {self.total_amount:.2f}>"


class InvoiceItem(db.Model):
    __tablename__ = "invoice_item"

    id = db.Column(db.Integer, primary_key=True)
    invoice_id = db.Column(db.Integer, db.ForeignKey("invoice.id"), nullable=False)
    invoice = db.relationship("Invoice", back_populates="items")

    hsn_code = db.Column(db.String(20))
    particulars = db.Column(db.String(255), nullable=False)
    no_of_stones = db.Column(db.Integer, default=0)
    sizes = db.Column(db.String(120))
    total_sq_feet = db.Column(db.Float, default=0.0)
    rate_per_sq_ft = db.Column(db.Float, default=0.0)
    amount = db.Column(db.Float, default=0.0)

    def __repr__(self):
        return f"<InvoiceItem {self.particulars}>"


# ============================================================
#  GST FILINGS
# ============================================================

class GstFiling(TimestampMixin, db.Model):
    __tablename__ = "gst_filing"

    id = db.Column(db.Integer, primary_key=True)

    membership_id = db.Column(db.Integer, db.ForeignKey("membership.id"), nullable=False)
    membership = db.relationship("Membership", back_populates="gst_filings")

    filing_period = db.Column(db.String(30), nullable=False)  # "Q1 2024", "Apr 2024"
    filing_date = db.Column(db.Date)
    due_date = db.Column(db.Date)

    total_taxable_amount = db.Column(db.Float, default=0.0)
    total_amount = db.Column(db.Float, default=0.0)

    status = db.Column(db.String(20), default="pending", nullable=False)  # filled/pending/due
    notes = db.Column(db.Text)

    items = db.relationship(
        "GstItem",
        back_populates="filing",
        cascade="all, delete-orphan",
        order_by="GstItem.id",
    )

    def __repr__(self):
        return f"<GstFiling {self.filing_period} member={self.membership_id}>"


class GstItem(db.Model):
    __tablename__ = "gst_item"

    id = db.Column(db.Integer, primary_key=True)
    filing_id = db.Column(db.Integer, db.ForeignKey("gst_filing.id"), nullable=False)
    filing = db.relationship("GstFiling", back_populates="items")

    name = db.Column(db.String(255), nullable=False)
    taxable_amount = db.Column(db.Float, default=0.0)


# ============================================================
#  LABOUR
# ============================================================

class Labour(TimestampMixin, db.Model):
    __tablename__ = "labour"

    id = db.Column(db.Integer, primary_key=True)

    name = db.Column(db.String(255), nullable=False)
    phone = db.Column(db.String(20), nullable=False)
    email = db.Column(db.String(255))
    father_name = db.Column(db.String(255))
    date_of_birth = db.Column(db.Date)

    aadhar_number = db.Column(db.String(20))
    pan_number = db.Column(db.String(10))
    esi_number = db.Column(db.String(30))

    permanent_address = db.Column(db.Text)
    present_address = db.Column(db.Text)

    # Member firm currently employing this labourer
    current_membership_id = db.Column(db.Integer, db.ForeignKey("membership.id"))
    current_membership = db.relationship("Membership")
    employed_from = db.Column(db.Date)
    employed_to = db.Column(db.Date)

    status = db.Column(db.String(20), default="active", nullable=False)  # active/bench/inactive

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"<Labour {self.name}>"


# ============================================================
#  LEASE QUERIES
# ============================================================

class LeaseQuery(TimestampMixin, db.Model):
    __tablename__ = "lease_query"

    id = db.Column(db.Integer, primary_key=True)
    lease_query_id = db.Column(db.String(20), unique=True, nullable=False)  # LQ-0001

    membership_id = db.Column(db.Integer, db.ForeignKey("membership.id"), nullable=False)
    membership = db.relationship("Membership")

    present_lease_holder = db.Column(db.String(255), nullable=False)
    date_of_lease = db.Column(db.Date)
    expiry_of_lease = db.Column(db.Date)
    date_of_renewal = db.Column(db.Date)

    status = db.Column(db.String(20), default="PENDING", nullable=False)

    def __repr__(self):
        return f"<LeaseQuery {self.lease_query_id}>"


# ============================================================
#  MEETINGS
# ============================================================

class Meeting(TimestampMixin, db.Model):
    __tablename__ = "meeting"

    id = db.Column(db.Integer, primary_key=True)

    title = db.Column(db.String(255), nullable=False)
    agenda = db.Column(db.Text)
    meeting_date = db.Column(db.Date, nullable=False)
    meeting_time = db.Column(db.String(10))  # HH:MM
    meeting_point = db.Column(db.String(255))

    status = db.Column(db.String(20), default="scheduled", nullable=False)
    expected_attendees = db.Column(db.Integer, default=0)
    actual_attendees = db.Column(db.Integer)
    notes = db.Column(db.Text)

    def __str__(self):
        return self.title

    def __repr__(self):
        return f"<Meeting {self.title} on {self.meeting_date}>"


# ============================================================
#  USERS
# ============================================================

class User(TimestampMixin, db.Model):
    __tablename__ = "app_user"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    phone = db.Column(db.String(20))
    role = db.Column(db.String(40), nullable=False)
    status = db.Column(db.String(20), default="Active", nullable=False)

    def __str__(self):
        return self.name

    def __repr__(self):
        return f"<User {self.email}>"


# ============================================================
#  VEHICLES & TRIPS
# ============================================================

class Vehicle(TimestampMixin, db.Model):
    __tablename__ = "vehicle"

    id = db.Column(db.Integer, primary_key=True)
    vehicle_number = db.Column(db.String(20), nullable=False)
    driver_name = db.Column(db.String(255))
    driver_phone_number = db.Column(db.String(20))
    owner_name = db.Column(db.String(255))
    owner_phone_number = db.Column(db.String(20))
    status = db.Column(db.String(20), default="ACTIVE", nullable=False)

    trips = db.relationship(
        "Trip",
        back_populates="vehicle",
        cascade="all, delete-orphan",
        order_by="Trip.trip_date.desc()",
    )

    def __str__(self):
        return self.vehicle_number

    def __repr__(self):
        return f"<Vehicle {self.vehicle_number}>"


class Trip(TimestampMixin, db.Model):
    __tablename__ = "trip"

    id = db.Column(db.Integer, primary_key=True)
    trip_code = db.Column(db.String(20), unique=True, nullable=False)  # TRP2025-001

    vehicle_id = db.Column(db.Integer, db.ForeignKey("vehicle.id"), nullable=False)
    vehicle = db.relationship("Vehicle", back_populates="trips")

    trip_date = db.Column(db.Date, nullable=False)
    amount_per_trip = db.Column(db.Float, default=0.0)
    number_of_trips = db.Column(db.Integer, default=1)
    total_amount = db.Column(db.Float, default=0.0)
    amount_paid = db.Column(db.Float, default=0.0)
    balance_amount = db.Column(db.Float, default=0.0)
    payment_status = db.Column(db.String(20), default="UNPAID", nullable=False)
    notes = db.Column(db.Text)

    def __repr__(self):
        return f"<Trip {self.trip_code} vehicle={self.vehicle_id}>"


# ============================================================
#  METER READINGS
# ============================================================

class MeterReading(TimestampMixin, db.Model):
    __tablename__ = "meter_reading"

    id = db.Column(db.Integer, primary_key=True)
    meter_id = db.Column(db.String(20), nullable=False, index=True)  # stored upper-case
    name = db.Column(db.String(255))
    email = db.Column(db.String(255))
    reading_date = db.Column(db.DateTime, default=datetime.utcnow)
    status = db.Column(db.String(20), default="ACTIVE", nullable=False)
    price = db.Column(db.Float, default=0.0)

    def __repr__(self):
        return f"<MeterReading {self.meter_id} {self.status}>"
