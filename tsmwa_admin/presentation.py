"""Entity display definitions and page rendering.

Views call `render_page(ctx, data_access)` after `load_page()`. Everything the
templates show (table columns, detail fields, links between pages, the
sidebar) is decided here so templates stay dumb.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

from flask import current_app, render_template, url_for

from .formatting import format_currency, format_date, format_datetime, format_phone, nl2br
from .forms import form_for
from .page_controller import PageContext
from .route_table import ROUTES, SECTIONS, Entity, Operation, build_path, find_route, section_navigation
from .services import change_requests


@dataclass(frozen=True)
class Column:
    attr: str
    label: str
    kind: str = "text"  # text/date/datetime/money/phone/status/multiline


@dataclass(frozen=True)
class ChildTable:
    attr: str
    title: str
    columns: Tuple[Column, ...]
    entity: Optional[Entity] = None  # rows link to this entity's pages


@dataclass(frozen=True)
class EntityView:
    title: str
    columns: Tuple[Column, ...]
    extra_detail: Tuple[Column, ...] = ()
    children: Tuple[ChildTable, ...] = ()

    @property
    def detail(self) -> Tuple[Column, ...]:
        return self.columns + self.extra_detail


C = Column

FEE_COLUMNS = (
    C("membership", "Member"),
    C("amount", "Amount", "money"),
    C("paid_amount", "Paid", "money"),
    C("period_from", "From", "date"),
    C("period_to", "To", "date"),
    C("status", "Status", "status"),
    C("approval_status", "Approval", "status"),
)

TRIP_COLUMNS = (
    C("trip_code", "Trip"),
    C("vehicle", "Vehicle"),
    C("trip_date", "Date", "date"),
    C("number_of_trips", "Trips"),
    C("total_amount", "Total", "money"),
    C("amount_paid", "Paid", "money"),
    C("balance_amount", "Balance", "money"),
    C("payment_status", "Payment", "status"),
)

ENTITY_VIEWS: Dict[Entity, EntityView] = {
    Entity.MEMBERSHIP: EntityView(
        "Memberships",
        (
            C("industry_name", "Industry"),
            C("applicant_name", "Applicant"),
            C("meter_number", "Meter"),
            C("contact_number", "Contact", "phone"),
            C("membership_due_date", "Due", "date"),
            C("status", "Status", "status"),
        ),
        extra_detail=(
            C("address", "Address", "multiline"),
            C("pin_code", "PIN code"),
            C("email", "Email"),
            C("aadhar_number", "Aadhaar"),
            C("pan_number", "PAN"),
            C("gstin_number", "GSTIN"),
            C("membership_start_date", "Member since", "date"),
            C("monthly_fee", "Monthly fee", "money"),
            C("last_payment_date", "Last payment", "date"),
            C("notes", "Notes", "multiline"),
        ),
        children=(ChildTable("fees", "Membership fees", FEE_COLUMNS, Entity.MEMBERSHIP_FEE),),
    ),
    Entity.MEMBERSHIP_FEE: EntityView(
        "Membership Fees",
        FEE_COLUMNS,
        extra_detail=(
            C("paid_date", "Paid on", "date"),
            C("receipt_number", "Receipt"),
            C("payment_method", "Method"),
            C("notes", "Notes", "multiline"),
        ),
    ),
    Entity.INVOICE: EntityView(
        "Invoices",
        (
            C("invoice_number", "Invoice"),
            C("invoice_date", "Date", "date"),
            C("firm_name", "Firm"),
            C("gst_number", "GSTIN"),
            C("total_amount", "Total", "money"),
            C("approval_status", "Approval", "status"),
        ),
        extra_detail=(
            C("member_name", "Member"),
            C("firm_address", "Address", "multiline"),
            C("state", "State"),
            C("sub_total", "Sub total", "money"),
            C("cgst_amount", "CGST", "money"),
            C("sgst_amount", "SGST", "money"),
            C("igst_amount", "IGST", "money"),
            C("amount_in_words", "Amount in words"),
        ),
        children=(
            ChildTable(
                "items",
                "Items",
                (
                    C("hsn_code", "HSN"),
                    C("particulars", "Particulars"),
                    C("no_of_stones", "Stones"),
                    C("sizes", "Sizes"),
                    C("total_sq_feet", "Sq. ft."),
                    C("rate_per_sq_ft", "Rate", "money"),
                    C("amount", "Amount", "money"),
                ),
            ),
        ),
    ),
    Entity.GST_FILING: EntityView(
        "GST Filings",
        (
            C("membership", "Member"),
            C("filing_period", "Period"),
            C("filing_date", "Filed", "date"),
            C("due_date", "Due", "date"),
            C("total_taxable_amount", "Taxable", "money"),
            C("total_amount", "GST", "money"),
            C("status", "Status", "status"),
        ),
        extra_detail=(C("notes", "Notes", "multiline"),),
        children=(
            ChildTable("items", "Items", (C("name", "Item"), C("taxable_amount", "Taxable", "money"))),
        ),
    ),
    Entity.LABOUR: EntityView(
        "Labour",
        (
            C("name", "Name"),
            C("phone", "Phone", "phone"),
            C("current_membership", "Employer"),
            C("employed_from", "Since", "date"),
            C("status", "Status", "status"),
        ),
        extra_detail=(
            C("email", "Email"),
            C("father_name", "Father's name"),
            C("date_of_birth", "Date of birth", "date"),
            C("aadhar_number", "Aadhaar"),
            C("pan_number", "PAN"),
            C("esi_number", "ESI"),
            C("permanent_address", "Permanent address", "multiline"),
            C("present_address", "Present address", "multiline"),
            C("employed_to", "Employed to", "date"),
        ),
    ),
    Entity.LEASE_QUERY: EntityView(
        "Lease Queries",
        (
            C("lease_query_id", "Query"),
            C("membership", "Member"),
            C("present_lease_holder", "Lease holder"),
            C("date_of_lease", "Leased", "date"),
            C("expiry_of_lease", "Expires", "date"),
            C("status", "Status", "status"),
        ),
        extra_detail=(C("date_of_renewal", "Renewed", "date"),),
    ),
    Entity.MEETING: EntityView(
        "Meetings",
        (
            C("title", "Title"),
            C("meeting_date", "Date", "date"),
            C("meeting_time", "Time"),
            C("meeting_point", "Venue"),
            C("status", "Status", "status"),
        ),
        extra_detail=(
            C("agenda", "Agenda", "multiline"),
            C("expected_attendees", "Expected"),
            C("actual_attendees", "Attended"),
            C("notes", "Notes", "multiline"),
        ),
    ),
    Entity.USER: EntityView(
        "Users",
        (
            C("name", "Name"),
            C("email", "Email"),
            C("phone", "Phone", "phone"),
            C("role", "Role"),
            C("status", "Status", "status"),
        ),
    ),
    Entity.VEHICLE: EntityView(
        "Vehicles",
        (
            C("vehicle_number", "Vehicle"),
            C("driver_name", "Driver"),
            C("driver_phone_number", "Driver phone", "phone"),
            C("owner_name", "Owner"),
            C("status", "Status", "status"),
        ),
        extra_detail=(C("owner_phone_number", "Owner phone", "phone"),),
        children=(ChildTable("trips", "Trips", TRIP_COLUMNS, Entity.TRIP),),
    ),
    Entity.TRIP: EntityView("Trips", TRIP_COLUMNS, extra_detail=(C("notes", "Notes", "multiline"),)),
    Entity.METER_READING: EntityView(
        "Meter Readings",
        (
            C("meter_id", "Meter"),
            C("name", "Name"),
            C("email", "Email"),
            C("reading_date", "Read at", "datetime"),
            C("price", "Price", "money"),
            C("status", "Status", "status"),
        ),
    ),
}

# Nested resources: entity -> (owner entity, attribute holding the owner id)
PARENTS = {Entity.TRIP: (Entity.VEHICLE, "vehicle_id")}


# =============================================================================
# Cells
# =============================================================================

def cell(record: Any, column: Column) -> Any:
    value = getattr(record, column.attr, None)
    if column.kind == "date":
        return format_date(value)
    if column.kind == "datetime":
        return format_datetime(value)
    if column.kind == "money":
        return format_currency(value)
    if column.kind == "phone":
        return format_phone(value)
    if column.kind == "multiline":
        return nl2br(value)
    if value is None:
        return ""
    return str(value)


# =============================================================================
# Links
# =============================================================================

def record_params(entity: Entity, operation: Operation, record: Any) -> Dict[str, Any]:
    """Path parameters identifying `record` for a Detail/Edit link."""
    if entity is Entity.METER_READING:
        return {"meterId": record.meter_id}
    if entity is Entity.TRIP and operation is Operation.EDIT:
        return {"id": record.vehicle_id, "tripId": record.id}
    if entity is Entity.MEMBERSHIP:
        return {"id": record.id, "memberId": record.id}
    return {"id": record.id}


def path_for(
    entity: Entity,
    operation: Operation,
    section: str,
    params: Optional[Mapping[str, Any]] = None,
    *,
    strict: bool = False,
) -> Optional[str]:
    """Concrete path for (entity, operation), preferring `section`.

    With `strict`, only a route inside `section` qualifies.
    """
    route = find_route(entity, operation, section, params=dict(params or {}))
    if route is None or (strict and route.section != section):
        return None
    return build_path(route, params)


def record_path(entity: Entity, operation: Operation, section: str, record: Any, *, strict=False):
    return path_for(entity, operation, section, record_params(entity, operation, record), strict=strict)


def after_save_path(ctx: PageContext, record: Any, current_path: str) -> str:
    """Detail page in the same section, else the owner's detail, else the list, else stay."""
    section = ctx.section
    path = record_path(ctx.entity, Operation.DETAIL, section, record, strict=True)
    if path is None and ctx.entity in PARENTS:
        owner, attr = PARENTS[ctx.entity]
        path = path_for(owner, Operation.DETAIL, section, {"id": getattr(record, attr)}, strict=True)
    if path is None:
        path = path_for(ctx.entity, Operation.LIST, section, {}, strict=True)
    return path or current_path


def navigation(section: str) -> List[Dict[str, str]]:
    return [{"label": r.label, "path": build_path(r)} for r in section_navigation(section)]


def section_for_path(path: str) -> str:
    first = (path or "").strip("/").split("/", 1)[0]
    return first if first in SECTIONS else ""


# =============================================================================
# Page rendering
# =============================================================================

def _rows(entity: Entity, records, section: str, columns) -> List[Dict[str, Any]]:
    rows = []
    for record in records:
        rows.append(
            {
                "cells": [cell(record, c) for c in columns],
                "detail_path": record_path(entity, Operation.DETAIL, section, record),
                "edit_path": record_path(entity, Operation.EDIT, section, record),
            }
        )
    return rows


def _children(ctx: PageContext, view: EntityView) -> List[Dict[str, Any]]:
    tables = []
    for child in view.children:
        records = getattr(ctx.record, child.attr, None) or []
        if child.entity is not None:
            rows = _rows(child.entity, records, ctx.section, child.columns)
        else:
            rows = [{"cells": [cell(r, c) for c in child.columns]} for r in records]
        add_path = None
        if child.entity is Entity.TRIP:
            add_path = path_for(Entity.TRIP, Operation.ADD, ctx.section, {"id": ctx.record.id})
        tables.append({"title": child.title, "columns": child.columns, "rows": rows, "add_path": add_path})
    return tables


def _extra_actions(ctx: PageContext) -> List[Dict[str, str]]:
    section = ctx.section or "admin"
    if ctx.entity is Entity.INVOICE and ctx.kind == "detail":
        return [{"label": "Download PDF", "path": url_for("main.invoice_pdf", section=section, invoice_id=ctx.record.id)}]
    if ctx.entity is Entity.INVOICE and ctx.kind == "list":
        return [{"label": "Export CSV", "path": url_for("main.invoices_export", section=section)}]
    return []


def _list_path(entity: Entity, section: str, list_filter: Optional[Mapping[str, str]]) -> Optional[str]:
    """List page for `entity`; an approval queue when its fixed filter matches."""
    if list_filter:
        queues = [
            r
            for r in ROUTES
            if r.entity is entity and r.operation is Operation.LIST and dict(r.list_filter) == dict(list_filter)
        ]
        queues.sort(key=lambda r: r.section != section)
        if queues:
            return build_path(queues[0])
    return path_for(entity, Operation.LIST, section, {})


def _change_rows(changes, section: str) -> List[Dict[str, Any]]:
    rows = []
    for change in changes:
        member = change.membership
        rows.append(
            {
                "change": change,
                "member": member,
                "member_path": record_path(Entity.MEMBERSHIP, Operation.DETAIL, section, member) if member else None,
                "fields": change_requests.changed_fields(change),
                "submitted": format_datetime(change.created_at),
                "decided": format_datetime(change.decided_at),
                "approve_path": url_for("main.approve_change", section=section, change_id=change.id),
                "decline_path": url_for("main.decline_change", section=section, change_id=change.id),
            }
        )
    return rows


def _dashboard_cards(ctx: PageContext, key: str) -> List[Dict[str, Any]]:
    cards = []
    for card in ctx.stats[key]:
        cards.append(
            {
                "label": card["label"],
                "value": card["value"],
                "path": _list_path(card["entity"], ctx.section, card.get("filter")),
            }
        )
    return cards


async def render_page(
    ctx: PageContext,
    data_access,
    *,
    form=None,
    formdata=None,
    status: int = 200,
):
    """Render the template for `ctx`. Returns a (body, status) tuple."""
    common = {
        "ctx": ctx,
        "breadcrumb": ctx.breadcrumb,
        "section": ctx.section,
        "nav_links": navigation(ctx.section),
        "actions": _extra_actions(ctx),
    }

    if ctx.kind == "dashboard":
        return (
            render_template(
                "dashboard.html",
                stats=ctx.stats,
                count_cards=_dashboard_cards(ctx, "counts"),
                pending_cards=_dashboard_cards(ctx, "pending"),
                **common,
            ),
            status,
        )

    if ctx.entity is Entity.LOG:
        return render_template("logs.html", records=ctx.records, **common), status

    if ctx.entity is Entity.MEMBERSHIP_CHANGE:
        return (
            render_template(
                "changes.html",
                rows=_change_rows(ctx.records, ctx.section),
                counts=change_requests.status_counts(ctx.records),
                **common,
            ),
            status,
        )

    view = ENTITY_VIEWS[ctx.entity]

    if ctx.kind == "list":
        return (
            render_template(
                "list.html",
                view=view,
                rows=_rows(ctx.entity, ctx.records, ctx.section, view.columns),
                add_path=path_for(ctx.entity, Operation.ADD, ctx.section, {}),
                **common,
            ),
            status,
        )

    if ctx.kind == "detail":
        fields = [(c.label, cell(ctx.record, c)) for c in view.detail]
        return (
            render_template(
                "detail.html",
                view=view,
                record=ctx.record,
                fields=fields,
                children=_children(ctx, view),
                edit_path=record_path(ctx.entity, Operation.EDIT, ctx.section, ctx.record),
                **common,
            ),
            status,
        )

    form = form or form_for(ctx, settings=current_app.config)
    if formdata is not None:
        values = {f.name: formdata.get(f.name, "") for f in form.visible_fields()}
        items = form.posted_items(formdata) if form.item_fields else []
    else:
        values = form.initial_data()
        items = form.initial_items()
    return (
        render_template(
            "form.html",
            form=form,
            values=values,
            items=items,
            choices=await form.load_choices(data_access),
            is_edit_mode=ctx.is_edit_mode,
            **common,
        ),
        status,
    )
