import pytest

from tsmwa_admin.route_table import (
    ROUTES,
    SECTIONS,
    Entity,
    Operation,
    RouteEntry,
    build_path,
    find_route,
    parse_pattern,
    section_navigation,
)


def _sample_params(route):
    return {name: ("99" if name == "tripId" else "7") for name in route.param_names}


class TestRouteEntry:
    def test_parse_pattern_marks_parameters(self):
        segments = parse_pattern("/admin/vehicle/{id}/edit-trip/{tripId}")
        assert [s.value for s in segments] == ["admin", "vehicle", "{id}", "edit-trip", "{tripId}"]
        assert [s.param for s in segments if s.is_param] == ["id", "tripId"]

    def test_detail_and_edit_need_a_key(self):
        with pytest.raises(ValueError):
            RouteEntry("/admin/things/{id}", Entity.USER, Operation.DETAIL, "x")

    def test_key_must_be_captured(self):
        with pytest.raises(ValueError):
            RouteEntry("/admin/things/{id}", Entity.USER, Operation.EDIT, "x", key_param="thingId")

    def test_duplicate_parameter_names_rejected(self):
        with pytest.raises(ValueError):
            RouteEntry("/a/{id}/b/{id}", Entity.TRIP, Operation.LIST, "x")

    def test_section_is_first_literal_segment(self):
        by_pattern = {r.pattern: r for r in ROUTES}
        assert by_pattern["/admin/vehicle"].section == "admin"
        assert by_pattern["/twwa/analytics"].section == "twwa"
        assert by_pattern["/memberships"].section == ""
        assert by_pattern["/{meterId}"].section == ""

    def test_breadcrumb_interpolates_params(self):
        by_pattern = {r.pattern: r for r in ROUTES}
        route = by_pattern["/admin/lease-queries/{id}/edit"]
        assert route.breadcrumb({"id": "12"}) == "Edit Lease Query: 12"
        assert by_pattern["/admin/vehicle/add"].breadcrumb({}) == "Add Vehicle"


class TestTable:
    def test_patterns_are_unique(self):
        patterns = [r.pattern for r in ROUTES]
        assert len(patterns) == len(set(patterns))

    def test_nested_trip_edits_carry_parent(self):
        nested = [r for r in ROUTES if r.entity is Entity.TRIP and r.operation is Operation.EDIT]
        assert nested
        for route in nested:
            assert route.key_param == "tripId"
            assert route.parent_param == "id"

    def test_meter_lookup_is_last(self):
        assert ROUTES[-1].pattern == "/{meterId}"

    def test_approval_queues_have_fixed_filters(self):
        by_pattern = {r.pattern: r for r in ROUTES}
        assert by_pattern["/admin/memberships/approval-pending"].list_filter == {"status": "Pending"}
        assert by_pattern["/admin/membership-fees/approval-pending"].list_filter == {"approval_status": "pending"}
        assert by_pattern["/tsmwa/invoices/pending-approval"].list_filter == {"approval_status": "pending"}

    def test_every_section_has_a_dashboard(self):
        for section in SECTIONS:
            assert find_route(Entity.DASHBOARD, Operation.LIST, section).section == section


class TestReverseRouting:
    def test_build_path_fills_parameters(self):
        route = find_route(Entity.TRIP, Operation.EDIT, "twwa", params={"id": 7, "tripId": 99})
        assert build_path(route, {"id": 7, "tripId": 99}) == "/twwa/examplee/vehicle/7/edit-trip/99"

    def test_build_path_missing_parameter(self):
        route = find_route(Entity.VEHICLE, Operation.DETAIL, "admin")
        with pytest.raises(KeyError):
            build_path(route, {})

    def test_round_trip_for_every_route(self):
        for route in ROUTES:
            path = build_path(route, _sample_params(route))
            assert path.startswith("/")

    def test_find_route_prefers_section(self):
        assert find_route(Entity.VEHICLE, Operation.LIST, "twwa").pattern == "/twwa/vehicle"
        assert find_route(Entity.VEHICLE, Operation.LIST, "admin").pattern == "/admin/vehicle"

    def test_find_route_falls_back_to_other_sections(self):
        route = find_route(Entity.USER, Operation.EDIT, "twwa")
        assert route.pattern == "/admin/users/{id}/edit"

    def test_find_route_with_params_prefers_nested(self):
        route = find_route(Entity.TRIP, Operation.ADD, "admin", params={"id": "3"})
        assert route.pattern == "/admin/vehicle/{id}/add-trip"
        route = find_route(Entity.TRIP, Operation.ADD, "admin", params={})
        assert route.pattern == "/admin/vehicle/trips/add"

    def test_plain_list_preferred_over_queues_and_aliases(self):
        assert find_route(Entity.MEMBERSHIP_FEE, Operation.LIST, "admin").pattern == "/tsmwa/membership-fees"
        assert find_route(Entity.INVOICE, Operation.LIST, "admin").pattern == "/admin/invoices"
        assert find_route(Entity.INVOICE, Operation.LIST, "tsmwa").pattern == "/admin/invoices"
        assert find_route(Entity.MEMBERSHIP, Operation.LIST, "admin").pattern == "/admin/memberships"

    def test_alias_used_only_inside_its_section(self):
        assert find_route(Entity.MEMBERSHIP, Operation.DETAIL, "admin").pattern == "/admin/memberships/{id}"
        assert find_route(Entity.MEMBERSHIP, Operation.EDIT, "twwa").pattern == "/twwa/examplee/{id}/edit"

    def test_find_route_none(self):
        assert find_route(Entity.METER_READING, Operation.EDIT, "") is None

    def test_section_navigation_has_no_parameters(self):
        nav = section_navigation("admin")
        assert nav
        assert all(not r.param_names for r in nav)
        assert {r.pattern for r in nav} >= {"/admin/vehicle", "/admin/vehicle/add", "/admin/logs"}


def test_aliases_still_resolve():
    from tsmwa_admin.resolver import resolve_path

    for route in (r for r in ROUTES if r.alias):
        path = build_path(route, _sample_params(route))
        assert resolve_path(path).route == route
