"""Entity form components.

A form is built fresh for each request from the page context:

    form = form_for(ctx, settings=current_app.config)

and owns everything about submission: parsing the posted `MultiDict`,
validating it, deriving computed fields (totals, running numbers) and calling
`create` (add mode) or `update` (edit mode) on the data-access handle it is
given. Path parameters arrive in `ids` as captured strings; nested forms
(trips under a vehicle) combine them here, not in the URL layer.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .route_table import Entity
from .services import billing
from .utils.validation import (
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


@dataclass(frozen=True)
class Field:
    name: str
    label: str
    kind: str = "text"  # text/textarea/email/phone/date/time/number/integer/select/reference
    required: bool = False
    choices: Tuple[str, ...] = ()
    reference: Optional[Entity] = None
    validator: Optional[Callable[[str], bool]] = None
    upper: bool = False
    default: Any = None


@dataclass
class FormOutcome:
    record: Any = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _min_length(n: int) -> Callable[[str], bool]:
    def check(value: str) -> bool:
        return len(value.strip()) >= n

    return check


def _as_form_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_value(f: Field, raw: Optional[str], errors: List[str], *, prefix: str = "") -> Any:
    """Convert one submitted string for `f`, appending user-facing errors."""
    label = f"{prefix}{f.label}"
    text = (raw or "").strip()

    if not text:
        if f.required:
            errors.append(f"{label} is required.")
        return None

    if f.upper:
        text = text.upper()

    if f.kind == "email" and not is_valid_email(text):
        errors.append(f"{label} looks invalid.")
        return None
    if f.kind == "phone":
        if not is_valid_phone(text):
            errors.append(f"{label} must be a 10 digit phone number.")
            return None
        return normalize_phone(text)
    if f.kind == "date":
        parsed = parse_date(text)
        if parsed is None:
            errors.append(f"{label} must be a date (YYYY-MM-DD or DD/MM/YYYY).")
        return parsed
    if f.kind == "time" and not is_valid_time(text):
        errors.append(f"{label} must be a time (HH:MM).")
        return None
    if f.kind == "number":
        try:
            number = parse_number(text)
        except ValueError:
            errors.append(f"{label} must be a number.")
            return None
        if number is not None and number < 0:
            errors.append(f"{label} cannot be negative.")
            return None
        return number
    if f.kind in ("integer", "reference"):
        if not text.isdigit():
            errors.append(f"{label} must be a whole number." if f.kind == "integer" else f"Select a valid {f.label.lower()}.")
            return None
        return int(text)
    if f.kind == "select" and f.choices and text not in f.choices:
        errors.append(f"{label} must be one of: {', '.join(f.choices)}.")
        return None

    if f.validator is not None:
        invalid = validate_fields({label: (text, f.validator)})
        if invalid:
            errors.extend(invalid)
            return None
    return text


class EntityForm:
    entity: Entity
    title: str = ""
    fields: Tuple[Field, ...] = ()
    # Repeating child rows (invoice items, GST items); posted as item_<name> lists.
    item_fields: Tuple[Field, ...] = ()
    items_attr = "items"

    def __init__(
        self,
        is_edit_mode: bool,
        initial_record: Any = None,
        ids: Optional[Mapping[str, str]] = None,
        *,
        key_param: Optional[str] = "id",
        settings: Optional[Mapping[str, Any]] = None,
    ):
        if is_edit_mode and initial_record is None:
            raise ValueError("Edit forms need the record being edited")
        self.is_edit_mode = is_edit_mode
        self.initial_record = initial_record if is_edit_mode else None
        self.ids: Dict[str, str] = dict(ids or {})
        self.key_param = key_param
        self.settings = settings or {}

    # -------------------------------------------------------------------------
    # Rendering helpers
    # -------------------------------------------------------------------------

    @property
    def submit_label(self) -> str:
        return f"Update {self.title}" if self.is_edit_mode else f"Create {self.title}"

    @property
    def record_key(self) -> Optional[str]:
        if not self.is_edit_mode:
            return None
        return self.ids.get(self.key_param or "id")

    def visible_fields(self) -> Tuple[Field, ...]:
        return self.fields

    def initial_data(self) -> Dict[str, str]:
        """Values for the inputs: record values when editing, defaults when adding."""
        data: Dict[str, str] = {}
        for f in self.visible_fields():
            if self.initial_record is not None:
                data[f.name] = _as_form_text(getattr(self.initial_record, f.name, None))
            else:
                data[f.name] = _as_form_text(f.default)
        return data

    def initial_items(self) -> List[Dict[str, str]]:
        if not self.item_fields:
            return []
        children = getattr(self.initial_record, self.items_attr, None) or []
        rows = [{f.name: _as_form_text(getattr(c, f.name, None)) for f in self.item_fields} for c in children]
        return rows or [{f.name: "" for f in self.item_fields}]

    def posted_items(self, formdata) -> List[Dict[str, str]]:
        columns = {f.name: formdata.getlist(f"item_{f.name}") for f in self.item_fields}
        size = max((len(v) for v in columns.values()), default=0)
        rows = []
        for i in range(size):
            rows.append({name: (vals[i] if i < len(vals) else "") for name, vals in columns.items()})
        return rows

    async def load_choices(self, data_access) -> Dict[str, List[Tuple[str, str]]]:
        """Options for reference selects (members, vehicles)."""
        choices: Dict[str, List[Tuple[str, str]]] = {}
        for f in self.visible_fields():
            if f.kind == "reference" and f.reference is not None:
                records = await data_access.find_many(f.reference)
                choices[f.name] = [(str(r.id), str(r)) for r in records]
            elif f.kind == "select":
                choices[f.name] = [(c, c) for c in f.choices]
        return choices

    # -------------------------------------------------------------------------
    # Submission
    # -------------------------------------------------------------------------

    def parse(self, formdata) -> Tuple[Dict[str, Any], List[str]]:
        errors: List[str] = []
        values = {f.name: parse_value(f, formdata.get(f.name), errors) for f in self.visible_fields()}

        if self.item_fields:
            items = []
            for n, row in enumerate(self.posted_items(formdata), start=1):
                if not any((v or "").strip() for v in row.values()):
                    continue
                items.append(
                    {f.name: parse_value(f, row.get(f.name), errors, prefix=f"Item {n}: ") for f in self.item_fields}
                )
            if not items:
                errors.append(f"Add at least one {self.item_label}.")
            values[self.items_attr] = items
        return values, errors

    item_label = "item"

    async def prepare(self, values: Dict[str, Any], data_access) -> List[str]:
        """Derive computed fields in place. Returns extra validation errors."""
        return []

    async def _check_references(self, values: Mapping[str, Any], data_access) -> List[str]:
        errors = []
        for f in self.visible_fields():
            if f.kind == "reference" and values.get(f.name) is not None:
                if await data_access.find_one(f.reference, str(values[f.name])) is None:
                    errors.append(f"{f.label} does not exist.")
        return errors

    async def submit(self, data_access, formdata) -> FormOutcome:
        values, errors = self.parse(formdata)
        if not errors:
            errors = await self._check_references(values, data_access)
        if not errors:
            errors = await self.prepare(values, data_access)
        if errors:
            return FormOutcome(errors=errors)

        if self.is_edit_mode:
            record = await data_access.update(self.entity, self.record_key, values)
        else:
            record = await data_access.create(self.entity, values)
        return FormOutcome(record=record)


def _date_order_errors(values, start: str, end: str, message: str) -> List[str]:
    if values.get(start) and values.get(end) and values[end] < values[start]:
        return [message]
    return []


# =============================================================================
# Memberships
# =============================================================================

class MembershipForm(EntityForm):
    entity = Entity.MEMBERSHIP
    title = "Membership"
    fields = (
        Field("industry_name", "Industry / firm name", required=True),
        Field("applicant_name", "Applicant name"),
        Field("meter_number", "Meter number", upper=True),
        Field("address", "Address", kind="textarea"),
        Field("pin_code", "PIN code", validator=is_valid_pin_code),
        Field("contact_number", "Contact number", kind="phone"),
        Field("email", "Email", kind="email"),
        Field("aadhar_number", "Aadhaar number", validator=is_valid_aadhaar),
        Field("pan_number", "PAN", upper=True, validator=is_valid_pan),
        Field("gstin_number", "GSTIN", upper=True, validator=is_valid_gstin),
        Field("membership_start_date", "Membership start date", kind="date"),
        Field("membership_due_date", "Membership due date", kind="date"),
        Field("monthly_fee", "Monthly fee", kind="number"),
        Field("last_payment_date", "Last payment date", kind="date"),
        Field("status", "Status", kind="select", required=True, choices=("Active", "Pending", "Inactive"), default="Pending"),
        Field("notes", "Notes", kind="textarea"),
    )

    async def prepare(self, values, data_access):
        return _date_order_errors(
            values,
            "membership_start_date",
            "membership_due_date",
            "Membership due date cannot be before the start date.",
        )


class MembershipFeeForm(EntityForm):
    entity = Entity.MEMBERSHIP_FEE
    title = "Membership Fee"
    fields = (
        Field("membership_id", "Member", kind="reference", reference=Entity.MEMBERSHIP, required=True),
        Field("amount", "Amount", kind="number", required=True),
        Field("paid_amount", "Paid amount", kind="number"),
        Field("paid_date", "Paid date", kind="date"),
        Field("period_from", "Period from", kind="date", required=True),
        Field("period_to", "Period to", kind="date", required=True),
        Field("status", "Status", kind="select", required=True, choices=("paid", "due", "canceled"), default="due"),
        Field(
            "approval_status",
            "Approval",
            kind="select",
            required=True,
            choices=("pending", "approved", "rejected"),
            default="pending",
        ),
        Field("receipt_number", "Receipt number"),
        Field("payment_method", "Payment method", kind="select", choices=("Cash", "Cheque", "UPI", "Bank Transfer")),
        Field("notes", "Notes", kind="textarea"),
    )

    async def prepare(self, values, data_access):
        errors = _date_order_errors(values, "period_from", "period_to", "Period to cannot be before period from.")
        if values.get("status") == "paid" and values.get("paid_amount") is None:
            values["paid_amount"] = values.get("amount")
        if (values.get("paid_amount") or 0) > (values.get("amount") or 0):
            errors.append("Paid amount cannot exceed the fee amount.")
        return errors


# =============================================================================
# Invoices / GST
# =============================================================================

class InvoiceForm(EntityForm):
    entity = Entity.INVOICE
    title = "Invoice"
    item_label = "invoice item"
    fields = (
        Field("invoice_date", "Invoice date", kind="date", required=True),
        Field("membership_id", "Member", kind="reference", reference=Entity.MEMBERSHIP),
        Field("member_name", "Member name"),
        Field("firm_name", "Firm name", required=True),
        Field("firm_address", "Firm address", kind="textarea"),
        Field("gst_number", "GSTIN", upper=True, validator=is_valid_gstin),
        Field("state", "State", required=True, default="Telangana"),
        Field("cgst_percentage", "CGST %", kind="number"),
        Field("sgst_percentage", "SGST %", kind="number"),
        Field("igst_percentage", "IGST %", kind="number"),
        Field(
            "approval_status",
            "Approval",
            kind="select",
            required=True,
            choices=("pending", "approved", "rejected"),
            default="pending",
        ),
    )
    item_fields = (
        Field("hsn_code", "HSN code"),
        Field("particulars", "Particulars", required=True),
        Field("no_of_stones", "No. of stones", kind="integer"),
        Field("sizes", "Sizes"),
        Field("total_sq_feet", "Total sq. ft.", kind="number", required=True),
        Field("rate_per_sq_ft", "Rate per sq. ft.", kind="number", required=True),
    )

    async def prepare(self, values, data_access):
        for item in values["items"]:
            item["amount"] = billing.item_amount(item.get("total_sq_feet"), item.get("rate_per_sq_ft"))

        pct_names = ("cgst_percentage", "sgst_percentage", "igst_percentage")
        if all(values.get(n) is None for n in pct_names):
            home = self.settings.get("INVOICE_STATE", "Telangana")
            values.update(billing.default_tax_split(values.get("state"), home))
        for n in pct_names:
            values[n] = values.get(n) or 0.0

        values.update(
            billing.calculate_invoice_amounts(
                values["items"],
                values["cgst_percentage"],
                values["sgst_percentage"],
                values["igst_percentage"],
            )
        )

        if not self.is_edit_mode:
            prefix = billing.invoice_prefix(values["invoice_date"].year)
            last = await data_access.latest_code(Entity.INVOICE, "invoice_number", prefix)
            values["invoice_number"] = billing.next_code(last, prefix)
        return []


class GstFilingForm(EntityForm):
    entity = Entity.GST_FILING
    title = "GST Filing"
    item_label = "GST item"
    fields = (
        Field("membership_id", "Member", kind="reference", reference=Entity.MEMBERSHIP, required=True),
        Field("filing_period", "Filing period", required=True),
        Field("filing_date", "Filing date", kind="date"),
        Field("due_date", "Due date", kind="date"),
        Field("status", "Status", kind="select", required=True, choices=("filled", "pending", "due"), default="pending"),
        Field("notes", "Notes", kind="textarea"),
    )
    item_fields = (
        Field("name", "Item", required=True),
        Field("taxable_amount", "Taxable amount", kind="number", required=True),
    )

    async def prepare(self, values, data_access):
        values.update(billing.gst_filing_totals(values["items"]))
        if values.get("status") == "filled" and values.get("filing_date") is None:
            return ["Filing date is required once a return is filled."]
        return []


# =============================================================================
# People
# =============================================================================

class LabourForm(EntityForm):
    entity = Entity.LABOUR
    title = "Labour"
    fields = (
        Field("name", "Name", required=True),
        Field("phone", "Phone", kind="phone", required=True),
        Field("email", "Email", kind="email"),
        Field("father_name", "Father's name"),
        Field("date_of_birth", "Date of birth", kind="date"),
        Field("aadhar_number", "Aadhaar number", validator=is_valid_aadhaar),
        Field("pan_number", "PAN", upper=True, validator=is_valid_pan),
        Field("esi_number", "ESI number"),
        Field("permanent_address", "Permanent address", kind="textarea"),
        Field("present_address", "Present address", kind="textarea"),
        Field("current_membership_id", "Employed by", kind="reference", reference=Entity.MEMBERSHIP),
        Field("employed_from", "Employed from", kind="date"),
        Field("employed_to", "Employed to", kind="date"),
        Field("status", "Status", kind="select", required=True, choices=("active", "bench", "inactive"), default="active"),
    )

    async def prepare(self, values, data_access):
        errors = _date_order_errors(values, "employed_from", "employed_to", "Employed to cannot be before employed from.")
        dob = values.get("date_of_birth")
        if dob and dob > date.today():
            errors.append("Date of birth cannot be in the future.")
        return errors


class UserForm(EntityForm):
    entity = Entity.USER
    title = "User"
    ROLES = (
        "Admin",
        "TSMWA Admin",
        "TSMWA Editor",
        "TSMWA Viewer",
        "TQMWA Editor",
        "TQMWA Viewer",
    )
    fields = (
        Field("name", "Name", required=True, validator=_min_length(2)),
        Field("email", "Email", kind="email", required=True),
        Field("phone", "Phone", kind="phone", required=True),
        Field("role", "Role", kind="select", required=True, choices=ROLES),
        Field("status", "Status", kind="select", required=True, choices=("Active", "Inactive"), default="Active"),
    )

    async def prepare(self, values, data_access):
        values["email"] = values["email"].lower()
        same_email = await data_access.find_many(Entity.USER, filter={"email": values["email"]})
        current = self.initial_record
        if any(current is None or u.id != current.id for u in same_email):
            return ["A user with this email already exists."]
        return []


# =============================================================================
# Operations
# =============================================================================

class LeaseQueryForm(EntityForm):
    entity = Entity.LEASE_QUERY
    title = "Lease Query"
    fields = (
        Field("membership_id", "Member", kind="reference", reference=Entity.MEMBERSHIP, required=True),
        Field("present_lease_holder", "Present lease holder", required=True),
        Field("date_of_lease", "Date of lease", kind="date", required=True),
        Field("expiry_of_lease", "Expiry of lease", kind="date", required=True),
        Field("date_of_renewal", "Date of renewal", kind="date"),
        Field(
            "status",
            "Status",
            kind="select",
            required=True,
            choices=("PENDING", "PROCESSING", "RESOLVED", "REJECTED"),
            default="PENDING",
        ),
    )

    async def prepare(self, values, data_access):
        errors = _date_order_errors(values, "date_of_lease", "expiry_of_lease", "Lease expiry cannot be before the lease date.")
        if not errors and not self.is_edit_mode:
            prefix = billing.LEASE_QUERY_PREFIX
            last = await data_access.latest_code(Entity.LEASE_QUERY, "lease_query_id", prefix)
            values["lease_query_id"] = billing.next_code(last, prefix, width=4)
        return errors


class MeetingForm(EntityForm):
    entity = Entity.MEETING
    title = "Meeting"
    fields = (
        Field("title", "Title", required=True),
        Field("agenda", "Agenda", kind="textarea"),
        Field("meeting_date", "Date", kind="date", required=True),
        Field("meeting_time", "Time", kind="time"),
        Field("meeting_point", "Meeting point"),
        Field(
            "status",
            "Status",
            kind="select",
            required=True,
            choices=("scheduled", "completed", "cancelled"),
            default="scheduled",
        ),
        Field("expected_attendees", "Expected attendees", kind="integer"),
        Field("actual_attendees", "Actual attendees", kind="integer"),
        Field("notes", "Notes", kind="textarea"),
    )

    async def prepare(self, values, data_access):
        if values.get("actual_attendees") is not None and values.get("status") == "scheduled":
            return ["Actual attendees can only be recorded for completed meetings."]
        return []


class VehicleForm(EntityForm):
    entity = Entity.VEHICLE
    title = "Vehicle"
    fields = (
        Field("vehicle_number", "Vehicle number", required=True, upper=True),
        Field("driver_name", "Driver name"),
        Field("driver_phone_number", "Driver phone", kind="phone"),
        Field("owner_name", "Owner name"),
        Field("owner_phone_number", "Owner phone", kind="phone"),
        Field(
            "status",
            "Status",
            kind="select",
            required=True,
            choices=("ACTIVE", "MAINTENANCE", "INACTIVE"),
            default="ACTIVE",
        ),
    )


class TripForm(EntityForm):
    """Trips are nested under a vehicle when the route captured one (`id`).

    The vehicle id and the trip id (`tripId`) stay separate path parameters;
    this form joins them into the update request.
    """

    entity = Entity.TRIP
    title = "Trip"
    parent_param = "id"
    fields = (
        Field("vehicle_id", "Vehicle", kind="reference", reference=Entity.VEHICLE, required=True),
        Field("trip_date", "Trip date", kind="date", required=True),
        Field("amount_per_trip", "Amount per trip", kind="number", required=True),
        Field("number_of_trips", "Number of trips", kind="integer", required=True, default=1),
        Field("amount_paid", "Amount paid", kind="number"),
        Field("notes", "Notes", kind="textarea"),
    )

    @property
    def vehicle_key(self) -> Optional[str]:
        return self.ids.get(self.parent_param)

    def visible_fields(self):
        if self.vehicle_key is not None:
            return tuple(f for f in self.fields if f.name != "vehicle_id")
        return self.fields

    async def prepare(self, values, data_access):
        if self.vehicle_key is not None:
            vehicle = await data_access.find_one(Entity.VEHICLE, self.vehicle_key)
            if vehicle is None:
                return ["Vehicle does not exist."]
            values["vehicle_id"] = vehicle.id

        values.update(
            billing.trip_amounts(
                values.get("amount_per_trip"),
                values.get("number_of_trips"),
                values.get("amount_paid"),
            )
        )
        values["amount_paid"] = values.get("amount_paid") or 0.0

        if not self.is_edit_mode:
            prefix = billing.trip_prefix(values["trip_date"].year)
            last = await data_access.latest_code(Entity.TRIP, "trip_code", prefix)
            values["trip_code"] = billing.next_code(last, prefix)
        return []


FORMS: Dict[Entity, type] = {
    Entity.MEMBERSHIP: MembershipForm,
    Entity.MEMBERSHIP_FEE: MembershipFeeForm,
    Entity.INVOICE: InvoiceForm,
    Entity.GST_FILING: GstFilingForm,
    Entity.LABOUR: LabourForm,
    Entity.USER: UserForm,
    Entity.LEASE_QUERY: LeaseQueryForm,
    Entity.MEETING: MeetingForm,
    Entity.VEHICLE: VehicleForm,
    Entity.TRIP: TripForm,
}


def form_for(ctx, settings: Optional[Mapping[str, Any]] = None) -> EntityForm:
    """Build the form component for an Add/Edit page context."""
    form_cls = FORMS.get(ctx.entity)
    if form_cls is None:
        raise ValueError(f"{ctx.entity.value} has no form")
    route = ctx.identity.route
    return form_cls(
        ctx.is_edit_mode,
        ctx.record,
        ctx.ids,
        key_param=route.key_param if route is not None else "id",
        settings=settings,
    )
