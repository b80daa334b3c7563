"""The explicit page route table.

Every user-facing page is one `RouteEntry`: a path pattern plus the entity and
operation it renders. `{name}` segments are captured as string parameters.

Order matters. The resolver returns the first entry whose pattern matches, so
literal routes (`/admin/vehicle/add`) are listed before parametrised routes
of the same shape (`/admin/vehicle/{id}`), and the bare `/{meterId}` route
comes last.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Mapping, Optional


class Entity(str, enum.Enum):
    MEMBERSHIP = "Membership"
    MEMBERSHIP_FEE = "MembershipFee"
    MEMBERSHIP_CHANGE = "MembershipChange"
    INVOICE = "Invoice"
    GST_FILING = "GstFiling"
    LABOUR = "Labour"
    LEASE_QUERY = "LeaseQuery"
    MEETING = "Meeting"
    USER = "User"
    VEHICLE = "Vehicle"
    TRIP = "Trip"
    METER_READING = "MeterReading"
    LOG = "Log"
    DASHBOARD = "Dashboard"


class Operation(str, enum.Enum):
    LIST = "List"
    DETAIL = "Detail"
    ADD = "Add"
    EDIT = "Edit"


@dataclass(frozen=True)
class Segment:
    value: str
    param: Optional[str] = None

    @property
    def is_param(self) -> bool:
        return self.param is not None


def parse_pattern(pattern: str) -> tuple[Segment, ...]:
    """Split "/admin/vehicle/{id}/edit" into literal and parameter segments."""
    segments = []
    for part in pattern.strip("/").split("/"):
        if not part:
            continue
        if part.startswith("{") and part.endswith("}"):
            segments.append(Segment(part, param=part[1:-1]))
        else:
            segments.append(Segment(part))
    return tuple(segments)


@dataclass(frozen=True)
class RouteEntry:
    """One row of the route table.

    key_param    captured parameter that identifies the record (Detail/Edit)
    parent_param captured parameter naming the owning record of a nested
                 resource (vehicle `id` for trips)
    list_filter  fixed equality filter applied to List pages (approval queues)
    alias        second path for a page that has a canonical route elsewhere;
                 resolved like any other entry but not used for links
    label        breadcrumb label; may reference captured params ("{id}")
    """

    pattern: str
    entity: Entity
    operation: Operation
    label: str
    key_param: Optional[str] = None
    parent_param: Optional[str] = None
    list_filter: Mapping[str, str] = field(default_factory=dict)
    alias: bool = False
    segments: tuple[Segment, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        segments = parse_pattern(self.pattern)
        object.__setattr__(self, "segments", segments)

        params = [s.param for s in segments if s.is_param]
        if len(params) != len(set(params)):
            raise ValueError(f"Duplicate parameter name in {self.pattern!r}")
        for name in (self.key_param, self.parent_param):
            if name is not None and name not in params:
                raise ValueError(f"{self.pattern!r} does not capture {name!r}")
        if self.operation in (Operation.DETAIL, Operation.EDIT) and self.key_param is None:
            raise ValueError(f"{self.pattern!r} needs a key parameter")

    @property
    def section(self) -> str:
        """First path segment (admin / tsmwa / twwa), '' for root pages."""
        first = self.segments[0] if self.segments else None
        if first is None or first.is_param:
            return ""
        return first.value if first.value in SECTIONS else ""

    @property
    def param_names(self) -> tuple[str, ...]:
        return tuple(s.param for s in self.segments if s.is_param)

    @property
    def is_edit_mode(self) -> bool:
        return self.operation is Operation.EDIT

    def breadcrumb(self, params: Mapping[str, str]) -> str:
        try:
            return self.label.format(**params)
        except (KeyError, IndexError):
            return self.label


SECTIONS = ("admin", "tsmwa", "twwa")

E = Entity
O = Operation


def _r(pattern, entity, operation, label, key=None, parent=None, alias=False, **list_filter):
    if key is None and operation in (O.DETAIL, O.EDIT):
        key = "id"
    return RouteEntry(
        pattern=pattern,
        entity=entity,
        operation=operation,
        label=label,
        key_param=key,
        parent_param=parent,
        list_filter=dict(list_filter),
        alias=alias,
    )


ROUTES: tuple[RouteEntry, ...] = (
    # -------------------------------------------------------------------------
    # Root pages
    # -------------------------------------------------------------------------
    _r("/", E.METER_READING, O.LIST, "Meter Readings"),
    _r("/memberships", E.MEMBERSHIP, O.LIST, "Memberships"),
    _r("/memberships/add", E.MEMBERSHIP, O.ADD, "Add Membership"),
    _r("/memberships/{memberId}", E.MEMBERSHIP, O.DETAIL, "{memberId}", key="memberId"),
    # -------------------------------------------------------------------------
    # /admin
    # -------------------------------------------------------------------------
    _r("/admin", E.DASHBOARD, O.LIST, "Dashboard"),
    _r("/admin/changes-approval", E.MEMBERSHIP_CHANGE, O.LIST, "Changes Approval"),
    _r("/admin/examplee/{id}", E.MEMBERSHIP, O.DETAIL, "{id}", alias=True),
    _r("/admin/examplee/{id}/edit", E.MEMBERSHIP, O.EDIT, "Edit Member", alias=True),
    _r("/admin/gst", E.INVOICE, O.LIST, "All GST Filling", alias=True),
    _r("/admin/gst-filings", E.GST_FILING, O.LIST, "GST Filing Details"),
    _r("/admin/gst-filings/add", E.GST_FILING, O.ADD, "GST Filing Details"),
    _r("/admin/gst-filings/{id}", E.GST_FILING, O.DETAIL, "GST Filing Details"),
    _r("/admin/gst-filings/{id}/edit", E.GST_FILING, O.EDIT, "Edit GST Filing"),
    _r("/admin/invoices", E.INVOICE, O.LIST, "All Invoices"),
    _r("/admin/invoices/create", E.INVOICE, O.ADD, "Create an Invoice"),
    _r("/admin/invoices/{id}", E.INVOICE, O.DETAIL, "Invoice Details"),
    _r("/admin/invoices/{id}/edit", E.INVOICE, O.EDIT, "Edit Invoice"),
    _r("/admin/labour/add", E.LABOUR, O.ADD, "Add a Labour"),
    _r("/admin/labour/{id}", E.LABOUR, O.DETAIL, "All Labours"),
    _r("/admin/labour/{id}/edit", E.LABOUR, O.EDIT, "Edit Labour Details"),
    _r("/admin/lease-queries/add", E.LEASE_QUERY, O.ADD, "Add a Lease Query"),
    _r("/admin/lease-queries/{id}", E.LEASE_QUERY, O.DETAIL, "Lease Query Details"),
    _r("/admin/lease-queries/{id}/edit", E.LEASE_QUERY, O.EDIT, "Edit Lease Query: {id}"),
    _r("/admin/logs", E.LOG, O.LIST, "System Logs"),
    _r("/admin/meetings/{id}", E.MEETING, O.DETAIL, "{id}"),
    _r("/admin/meetings/{id}/edit", E.MEETING, O.EDIT, "Edit Meeting"),
    _r("/admin/member", E.MEMBERSHIP, O.LIST, "All Memberships", alias=True),
    _r(
        "/admin/membership-fees/approval-pending",
        E.MEMBERSHIP_FEE,
        O.LIST,
        "Bill Approval Pending",
        approval_status="pending",
    ),
    _r("/admin/membership-fees/{id}", E.MEMBERSHIP_FEE, O.DETAIL, "Membership Fees Details"),
    _r("/admin/membership-fees/{id}/edit", E.MEMBERSHIP_FEE, O.EDIT, "Edit Membership Fees Details"),
    _r("/admin/memberships", E.MEMBERSHIP, O.LIST, "All Memberships"),
    _r(
        "/admin/memberships/approval-pending",
        E.MEMBERSHIP,
        O.LIST,
        "Approval Pending",
        status="Pending",
    ),
    _r("/admin/memberships/{id}", E.MEMBERSHIP, O.DETAIL, "{id}"),
    _r("/admin/memberships/{id}/edit", E.MEMBERSHIP, O.EDIT, "Edit Member"),
    _r("/admin/users/{id}", E.USER, O.DETAIL, "User Details"),
    _r("/admin/users/{id}/edit", E.USER, O.EDIT, "Edit an user"),
    _r("/admin/vehicle", E.VEHICLE, O.LIST, "All Vehicles"),
    _r("/admin/vehicle/add", E.VEHICLE, O.ADD, "Add Vehicle"),
    _r("/admin/vehicle/trips/add", E.TRIP, O.ADD, "Add a new trip"),
    _r("/admin/vehicle/{id}", E.VEHICLE, O.DETAIL, "Vehicle Details - {id}"),
    _r("/admin/vehicle/{id}/edit", E.VEHICLE, O.EDIT, "Edit Vehicle"),
    _r("/admin/vehicle/{id}/add-trip", E.TRIP, O.ADD, "Add Vehicle Trip"),
    _r(
        "/admin/vehicle/{id}/edit-trip/{tripId}",
        E.TRIP,
        O.EDIT,
        "Edit Vehicle Trip",
        key="tripId",
        parent="id",
    ),
    # -------------------------------------------------------------------------
    # /tsmwa
    # -------------------------------------------------------------------------
    _r("/tsmwa", E.DASHBOARD, O.LIST, "Dashboard"),
    _r("/tsmwa/changes-approval", E.MEMBERSHIP_CHANGE, O.LIST, "Changes Approval"),
    _r(
        "/tsmwa/invoices/pending-approval",
        E.INVOICE,
        O.LIST,
        "Invoice Approval Pending",
        approval_status="pending",
    ),
    _r("/tsmwa/labour", E.LABOUR, O.LIST, "All Labours"),
    _r("/tsmwa/labour/{id}", E.LABOUR, O.DETAIL, "All Labours"),
    _r("/tsmwa/lease-queries/{id}", E.LEASE_QUERY, O.DETAIL, "Lease Query Details"),
    _r("/tsmwa/lease-queries/{id}/edit", E.LEASE_QUERY, O.EDIT, "Edit Lease Query: {id}"),
    _r("/tsmwa/meetings/add", E.MEETING, O.ADD, "Add Meeting"),
    _r("/tsmwa/meetings/{id}/edit", E.MEETING, O.EDIT, "Edit Meeting"),
    _r("/tsmwa/membership-fees", E.MEMBERSHIP_FEE, O.LIST, "All Membership Fees"),
    _r("/tsmwa/memberships/{id}", E.MEMBERSHIP, O.DETAIL, "{id}"),
    _r("/tsmwa/users", E.USER, O.LIST, "All Users"),
    _r("/tsmwa/users/add", E.USER, O.ADD, "Add a user"),
    _r("/tsmwa/vehicle/trips", E.TRIP, O.LIST, "All Trips"),
    _r("/tsmwa/vehicle/trips/{id}", E.TRIP, O.DETAIL, "{id}"),
    _r("/tsmwa/vehicle/{id}/edit", E.VEHICLE, O.EDIT, "Edit Vehicle"),
    # -------------------------------------------------------------------------
    # /twwa
    # -------------------------------------------------------------------------
    _r("/twwa", E.DASHBOARD, O.LIST, "Dashboard"),
    _r("/twwa/analytics", E.DASHBOARD, O.LIST, "Analytics"),
    _r("/twwa/changes-approval", E.MEMBERSHIP_CHANGE, O.LIST, "Changes Approval"),
    _r("/twwa/examplee/{id}/edit", E.MEMBERSHIP, O.EDIT, "Edit Member", alias=True),
    _r("/twwa/examplee/vehicle/{id}/add-trip", E.TRIP, O.ADD, "Add Vehicle Trip", alias=True),
    _r(
        "/twwa/examplee/vehicle/{id}/edit-trip/{tripId}",
        E.TRIP,
        O.EDIT,
        "Edit Vehicle Trip",
        key="tripId",
        parent="id",
    ),
    _r("/twwa/invoices/create", E.INVOICE, O.ADD, "Create an Invoice"),
    _r("/twwa/lease-queries", E.LEASE_QUERY, O.LIST, "All Lease Queries"),
    _r("/twwa/lease-queries/{id}/edit", E.LEASE_QUERY, O.EDIT, "Edit Lease Query: {id}"),
    _r("/twwa/meetings", E.MEETING, O.LIST, "All Meetings"),
    _r("/twwa/membership-fees/add", E.MEMBERSHIP_FEE, O.ADD, "Add Membership Fees"),
    _r("/twwa/membership-fees/{id}/edit", E.MEMBERSHIP_FEE, O.EDIT, "Edit Membership Fees Details"),
    _r("/twwa/vehicle", E.VEHICLE, O.LIST, "All Vehicles"),
    _r("/twwa/vehicle/{id}", E.VEHICLE, O.DETAIL, "Vehicle Details - {id}"),
    _r("/twwa/vehicle/{id}/add-trip", E.TRIP, O.ADD, "Add Vehicle Trip"),
    # -------------------------------------------------------------------------
    # Meter lookup by natural key; must stay last (matches any single segment)
    # -------------------------------------------------------------------------
    _r("/{meterId}", E.METER_READING, O.DETAIL, "Meter {meterId}", key="meterId"),
)


def find_route(
    entity: Entity,
    operation: Operation,
    section: str = "",
    routes: tuple[RouteEntry, ...] = ROUTES,
    *,
    params: Mapping[str, str] | None = None,
) -> Optional[RouteEntry]:
    """Return the best route for (entity, operation), preferring `section`.

    When `params` is given, only routes whose parameters can all be filled from
    it qualify, so a Trip link with a vehicle id picks the nested route.

    Ranking: unfiltered pages before fixed-filter queues, then `section`,
    then canonical routes before aliases, then the most parameters used.
    Ties keep table order.
    """
    candidates = [r for r in routes if r.entity is entity and r.operation is operation]
    if params is not None:
        candidates = [r for r in candidates if all(p in params for p in r.param_names)]

    def rank(route: RouteEntry):
        used = len(route.param_names) if params is not None else 0
        return (bool(route.list_filter), route.section != section, route.alias, -used)

    return min(candidates, key=rank, default=None)


def build_path(route: RouteEntry, params: Mapping[str, object] | None = None) -> str:
    """Reverse a route pattern into a concrete path."""
    params = params or {}
    parts = []
    for seg in route.segments:
        if seg.is_param:
            if seg.param not in params:
                raise KeyError(f"{route.pattern!r} needs {seg.param!r}")
            parts.append(str(params[seg.param]))
        else:
            parts.append(seg.value)
    return "/" + "/".join(parts)


def section_navigation(section: str, routes: tuple[RouteEntry, ...] = ROUTES) -> list[RouteEntry]:
    """Parameter-free List/Add routes of one section, for the sidebar."""
    return [
        r
        for r in routes
        if r.section == section
        and not r.param_names
        and r.operation in (Operation.LIST, Operation.ADD)
    ]
