from datetime import date

import pytest
from werkzeug.datastructures import MultiDict

from tsmwa_admin.forms import (
    Field,
    InvoiceForm,
    LeaseQueryForm,
    MembershipForm,
    TripForm,
    UserForm,
    VehicleForm,
    form_for,
    parse_value,
)
from tsmwa_admin.page_controller import load_page
from tsmwa_admin.resolver import resolve_path
from tsmwa_admin.route_table import Entity


class TestParseValue:
    def test_required(self):
        errors = []
        assert parse_value(Field("name", "Name", required=True), "  ", errors) is None
        assert errors == ["Name is required."]

    def test_dates(self):
        errors = []
        f = Field("d", "Date", kind="date")
        assert parse_value(f, "2025-04-01", errors) == date(2025, 4, 1)
        assert parse_value(f, "01/04/2025", errors) == date(2025, 4, 1)
        assert errors == []
        parse_value(f, "April", errors)
        assert errors and errors[0].startswith("Date must be a date")

    def test_numbers(self):
        errors = []
        f = Field("n", "Amount", kind="number")
        assert parse_value(f, "1,250.50", errors) == 1250.5
        parse_value(f, "-3", errors)
        parse_value(f, "ten", errors)
        assert errors == ["Amount cannot be negative.", "Amount must be a number."]

    def test_phone_is_normalized(self):
        errors = []
        assert parse_value(Field("p", "Phone", kind="phone"), "+91 98765 43210", errors) == "9876543210"
        parse_value(Field("p", "Phone", kind="phone"), "12345", errors)
        assert errors == ["Phone must be a 10 digit phone number."]

    def test_select_and_upper(self):
        errors = []
        f = Field("s", "Status", kind="select", choices=("A", "B"))
        assert parse_value(f, "A", errors) == "A"
        parse_value(f, "C", errors)
        assert errors == ["Status must be one of: A, B."]
        assert parse_value(Field("v", "Vehicle", upper=True), "ts07ab1", []) == "TS07AB1"

    def test_validator(self):
        errors = []
        from tsmwa_admin.utils.validation import is_valid_pan

        parse_value(Field("pan", "PAN", upper=True, validator=is_valid_pan), "abc", errors)
        assert errors == ["PAN looks invalid."]

    def test_membership_identifiers_share_one_message(self):
        data = MultiDict({"industry_name": "Sri Sai Stones", "status": "Active", "pin_code": "012345", "gstin_number": "36AAB"})
        _, errors = MembershipForm(False).parse(data)
        assert errors == ["PIN code looks invalid.", "GSTIN looks invalid."]


class TestFormBasics:
    def test_edit_needs_record(self):
        with pytest.raises(ValueError):
            VehicleForm(is_edit_mode=True)

    def test_add_ignores_stray_record(self):
        form = VehicleForm(False, initial_record=object())
        assert form.initial_record is None
        assert form.submit_label == "Create Vehicle"

    def test_initial_data_from_record(self, sample):
        form = VehicleForm(True, sample["vehicle"], {"id": str(sample["vehicle"].id)})
        data = form.initial_data()
        assert data["vehicle_number"] == "TS34AB1234"
        assert data["owner_name"] == ""
        assert form.submit_label == "Update Vehicle"

    def test_initial_data_defaults(self):
        assert MembershipForm(False).initial_data()["status"] == "Pending"

    def test_trip_hides_vehicle_when_nested(self):
        nested = TripForm(False, ids={"id": "3"})
        assert "vehicle_id" not in [f.name for f in nested.visible_fields()]
        flat = TripForm(False)
        assert "vehicle_id" in [f.name for f in flat.visible_fields()]

    @pytest.mark.asyncio
    async def test_form_for_edit_context(self, sample, data_access):
        trip = sample["trip"]
        path = f"/admin/vehicle/{trip.vehicle_id}/edit-trip/{trip.id}"
        ctx = await load_page(resolve_path(path), data_access)
        form = form_for(ctx)
        assert isinstance(form, TripForm)
        assert form.is_edit_mode
        assert form.record_key == str(trip.id)
        assert form.vehicle_key == str(trip.vehicle_id)


class TestSubmit:
    @pytest.mark.asyncio
    async def test_vehicle_create(self, app_ctx, data_access):
        form = VehicleForm(False)
        outcome = await form.submit(data_access, MultiDict({"vehicle_number": "ts07ab0001", "status": "ACTIVE"}))
        assert outcome.ok
        assert outcome.record.vehicle_number == "TS07AB0001"

    @pytest.mark.asyncio
    async def test_validation_errors_do_not_write(self, app_ctx, data_access):
        form = VehicleForm(False)
        outcome = await form.submit(data_access, MultiDict({"driver_phone_number": "123"}))
        assert not outcome.ok
        assert "Vehicle number is required." in outcome.errors
        assert await data_access.count(Entity.VEHICLE) == 0

    @pytest.mark.asyncio
    async def test_membership_edit_updates(self, sample, data_access):
        member = sample["member"]
        form = MembershipForm(True, member, {"id": str(member.id)})
        data = MultiDict(form.initial_data())
        data["status"] = "Inactive"
        outcome = await form.submit(data_access, data)
        assert outcome.ok, outcome.errors
        assert outcome.record.id == member.id
        assert outcome.record.status == "Inactive"

    @pytest.mark.asyncio
    async def test_membership_edit_by_member_id_param(self, sample, data_access):
        member = sample["member"]
        form = MembershipForm(True, member, {"memberId": str(member.id)}, key_param="memberId")
        assert form.record_key == str(member.id)

    @pytest.mark.asyncio
    async def test_unknown_reference(self, app_ctx, data_access):
        form = LeaseQueryForm(False)
        outcome = await form.submit(
            data_access,
            MultiDict(
                {
                    "membership_id": "77",
                    "present_lease_holder": "K. Rao",
                    "date_of_lease": "2020-01-01",
                    "expiry_of_lease": "2030-01-01",
                    "status": "PENDING",
                }
            ),
        )
        assert outcome.errors == ["Member does not exist."]

    @pytest.mark.asyncio
    async def test_lease_query_numbering(self, sample, data_access):
        data = MultiDict(
            {
                "membership_id": str(sample["member"].id),
                "present_lease_holder": "K. Rao",
                "date_of_lease": "2020-01-01",
                "expiry_of_lease": "2030-01-01",
                "status": "PENDING",
            }
        )
        first = await LeaseQueryForm(False).submit(data_access, data)
        second = await LeaseQueryForm(False).submit(data_access, data)
        assert first.record.lease_query_id == "LQ-0001"
        assert second.record.lease_query_id == "LQ-0002"

    @pytest.mark.asyncio
    async def test_lease_expiry_before_lease(self, sample, data_access):
        outcome = await LeaseQueryForm(False).submit(
            data_access,
            MultiDict(
                {
                    "membership_id": str(sample["member"].id),
                    "present_lease_holder": "K. Rao",
                    "date_of_lease": "2020-01-01",
                    "expiry_of_lease": "2019-01-01",
                    "status": "PENDING",
                }
            ),
        )
        assert outcome.errors == ["Lease expiry cannot be before the lease date."]

    @pytest.mark.asyncio
    async def test_user_email_must_be_unique(self, app_ctx, data_access):
        data = MultiDict({"name": "Asha", "email": "Asha@Example.com", "phone": "9876543210", "role": "Admin", "status": "Active"})
        assert (await UserForm(False).submit(data_access, data)).ok
        outcome = await UserForm(False).submit(data_access, data)
        assert outcome.errors == ["A user with this email already exists."]


class TestInvoiceForm:
    def _data(self, member_id, **overrides):
        data = MultiDict(
            {
                "invoice_date": "2025-06-10",
                "membership_id": str(member_id),
                "firm_name": "Sri Sai Stones",
                "state": "Telangana",
                "approval_status": "pending",
            }
        )
        for key, value in overrides.items():
            data[key] = value
        data.setlist("item_particulars", ["Yellow stone", "", "Blue stone"])
        data.setlist("item_hsn_code", ["6802", "", "6802"])
        data.setlist("item_no_of_stones", ["10", "", "4"])
        data.setlist("item_sizes", ["2x2", "", ""])
        data.setlist("item_total_sq_feet", ["100", "", "50"])
        data.setlist("item_rate_per_sq_ft", ["20", "", "10"])
        return data

    @pytest.mark.asyncio
    async def test_intra_state_totals_and_number(self, sample, data_access):
        form = InvoiceForm(False, settings={"INVOICE_STATE": "Telangana"})
        outcome = await form.submit(data_access, self._data(sample["member"].id))
        assert outcome.ok, outcome.errors
        inv = outcome.record
        assert inv.invoice_number == "INV/2025/002"
        assert [i.amount for i in inv.items] == [2000.0, 500.0]
        assert inv.sub_total == 2500.0
        assert inv.cgst_amount == 225.0
        assert inv.sgst_amount == 225.0
        assert inv.igst_amount == 0.0
        assert inv.total_amount == 2950.0
        assert inv.amount_in_words == "Rupees Two Thousand Nine Hundred Fifty Only"

    @pytest.mark.asyncio
    async def test_inter_state_uses_igst(self, sample, data_access):
        form = InvoiceForm(False, settings={"INVOICE_STATE": "Telangana"})
        outcome = await form.submit(data_access, self._data(sample["member"].id, state="Karnataka"))
        assert outcome.ok, outcome.errors
        assert outcome.record.igst_amount == 450.0
        assert outcome.record.cgst_amount == 0.0

    @pytest.mark.asyncio
    async def test_needs_an_item(self, sample, data_access):
        data = self._data(sample["member"].id)
        for key in list(data.keys()):
            if key.startswith("item_"):
                data.setlist(key, [""])
        outcome = await InvoiceForm(False).submit(data_access, data)
        assert outcome.errors == ["Add at least one invoice item."]

    @pytest.mark.asyncio
    async def test_item_errors_are_numbered(self, sample, data_access):
        data = self._data(sample["member"].id)
        data.setlist("item_rate_per_sq_ft", ["abc", "", "10"])
        outcome = await InvoiceForm(False).submit(data_access, data)
        assert outcome.errors == ["Item 1: Rate per sq. ft. must be a number."]

    @pytest.mark.asyncio
    async def test_edit_keeps_number(self, sample, data_access):
        invoice = sample["invoice"]
        form = InvoiceForm(True, invoice, {"id": str(invoice.id)})
        outcome = await form.submit(data_access, self._data(sample["member"].id))
        assert outcome.ok, outcome.errors
        assert outcome.record.invoice_number == "INV/2025/001"
        assert len(outcome.record.items) == 2


class TestTripForm:
    def _data(self, **extra):
        data = {"trip_date": "2025-05-02", "amount_per_trip": "1500", "number_of_trips": "3", "amount_paid": "1000"}
        data.update(extra)
        return MultiDict(data)

    @pytest.mark.asyncio
    async def test_nested_add_uses_path_vehicle(self, sample, data_access):
        vehicle = sample["vehicle"]
        form = TripForm(False, ids={"id": str(vehicle.id)})
        outcome = await form.submit(data_access, self._data())
        assert outcome.ok, outcome.errors
        trip = outcome.record
        assert trip.vehicle_id == vehicle.id
        assert trip.trip_code == "TRP2025-002"
        assert trip.total_amount == 4500.0
        assert trip.balance_amount == 3500.0
        assert trip.payment_status == "PARTIAL"

    @pytest.mark.asyncio
    async def test_flat_add_needs_vehicle(self, sample, data_access):
        outcome = await TripForm(False).submit(data_access, self._data())
        assert outcome.errors == ["Vehicle is required."]

    @pytest.mark.asyncio
    async def test_nested_edit_combines_ids(self, sample, data_access):
        trip = sample["trip"]
        ids = {"id": str(trip.vehicle_id), "tripId": str(trip.id)}
        form = TripForm(True, trip, ids, key_param="tripId")
        outcome = await form.submit(data_access, self._data(amount_paid="4500"))
        assert outcome.ok, outcome.errors
        assert outcome.record.id == trip.id
        assert outcome.record.trip_code == "TRP2025-001"
        assert outcome.record.payment_status == "PAID"
        assert outcome.record.balance_amount == 0.0

    @pytest.mark.asyncio
    async def test_unknown_parent_vehicle(self, sample, data_access):
        outcome = await TripForm(False, ids={"id": "999"}).submit(data_access, self._data())
        assert outcome.errors == ["Vehicle does not exist."]


class TestChoices:
    @pytest.mark.asyncio
    async def test_reference_options(self, sample, data_access):
        choices = await InvoiceForm(False).load_choices(data_access)
        labels = [label for _, label in choices["membership_id"]]
        assert labels == ["Balaji Granites", "Sri Sai Stones"]
        assert ("pending", "pending") in choices["approval_status"]
