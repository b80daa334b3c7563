"""Resolve a URL path into a Page Identity.

A pure function of the path string and the static route table: no request
state, no database access, no caching.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

from .errors import RouteNotFound
from .route_table import ROUTES, Entity, Operation, RouteEntry


@dataclass(frozen=True)
class PageIdentity:
    entity: Entity
    operation: Operation
    path_params: Mapping[str, str] = field(default_factory=dict)
    route: RouteEntry | None = None

    @property
    def is_edit_mode(self) -> bool:
        return self.operation is Operation.EDIT

    @property
    def key(self) -> str | None:
        """Captured value of the route's key parameter, if any."""
        if self.route is None or self.route.key_param is None:
            return self.path_params.get("id")
        return self.path_params.get(self.route.key_param)

    @property
    def parent_key(self) -> str | None:
        if self.route is None or self.route.parent_param is None:
            return None
        return self.path_params.get(self.route.parent_param)

    @property
    def section(self) -> str:
        return self.route.section if self.route is not None else ""

    @property
    def breadcrumb(self) -> str:
        if self.route is None:
            return self.entity.value
        return self.route.breadcrumb(self.path_params)


def split_path(path: str) -> list[str]:
    """Path segments. One leading and one trailing slash are dropped; empty
    segments inside the path are kept so they can never match."""
    path = path or ""
    if path.startswith("/"):
        path = path[1:]
    if path.endswith("/"):
        path = path[:-1]
    return path.split("/") if path else []


def match_route(route: RouteEntry, parts: list[str]) -> dict[str, str] | None:
    """Return captured params when `parts` fits `route`, else None."""
    if len(parts) != len(route.segments):
        return None
    params: dict[str, str] = {}
    for seg, part in zip(route.segments, parts):
        if seg.is_param:
            params[seg.param] = part
        elif seg.value != part:
            return None
    return params


def resolve_path(path: str, routes: tuple[RouteEntry, ...] = ROUTES) -> PageIdentity:
    """Map `path` onto the first matching route entry.

    Raises RouteNotFound when nothing matches.
    """
    parts = split_path(path)
    if "" in parts:
        raise RouteNotFound(path)
    for route in routes:
        params = match_route(route, parts)
        if params is not None:
            return PageIdentity(
                entity=route.entity,
                operation=route.operation,
                path_params=params,
                route=route,
            )
    raise RouteNotFound(path)
