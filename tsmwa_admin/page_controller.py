"""Mode resolution: turn a PageIdentity into everything a page renders from.

`load_page()` is the single awaited fetch step of every GET. It never renders
and never touches the request; components read ids from the returned
`PageContext`, not from the URL.

    List      collection (route's fixed filter only)
    Detail    one record by key, RecordNotFound when missing
    Add       no fetch, not edit mode, captured ids passed through
    Edit      one record by key (+ parent check), edit mode
    Dashboard aggregate numbers
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .errors import RecordNotFound
from .resolver import PageIdentity
from .route_table import Entity, Operation
from .services.dashboard_service import build_dashboard

logger = logging.getLogger(__name__)

# Attribute on a nested record holding its owner's id.
PARENT_ATTRS = {Entity.TRIP: "vehicle_id"}


@dataclass
class PageContext:
    identity: PageIdentity
    kind: str  # list / detail / form / dashboard
    records: List[Any] = field(default_factory=list)
    record: Any = None
    is_edit_mode: bool = False
    ids: Dict[str, str] = field(default_factory=dict)
    stats: Optional[Dict[str, Any]] = None

    @property
    def entity(self) -> Entity:
        return self.identity.entity

    @property
    def operation(self) -> Operation:
        return self.identity.operation

    @property
    def section(self) -> str:
        return self.identity.section

    @property
    def breadcrumb(self) -> str:
        return self.identity.breadcrumb

    @property
    def initial_record(self):
        return self.record if self.is_edit_mode else None


async def _require_record(identity: PageIdentity, data_access):
    key = identity.key
    if key is None:
        raise RecordNotFound(identity.entity, None)
    record = await data_access.find_one(identity.entity, key)
    if record is None:
        logger.debug("%s %r not found", identity.entity.value, key)
        raise RecordNotFound(identity.entity, key)
    return record


def _check_parent(identity: PageIdentity, record) -> None:
    parent_key = identity.parent_key
    if identity.route is None or identity.route.parent_param is None:
        return
    attr = PARENT_ATTRS.get(identity.entity)
    if attr is None:
        return
    if parent_key is None or str(getattr(record, attr, None)) != parent_key:
        logger.debug(
            "%s %r does not belong to parent %r",
            identity.entity.value,
            identity.key,
            parent_key,
        )
        raise RecordNotFound(identity.entity, identity.key)


async def load_page(identity: PageIdentity, data_access) -> PageContext:
    ids = dict(identity.path_params)

    if identity.entity is Entity.DASHBOARD:
        stats = await build_dashboard(data_access)
        return PageContext(identity, "dashboard", ids=ids, stats=stats)

    op = identity.operation

    if op is Operation.LIST:
        list_filter = identity.route.list_filter if identity.route is not None else None
        records = await data_access.find_many(identity.entity, filter=dict(list_filter or {}) or None)
        return PageContext(identity, "list", records=records, ids=ids)

    if op is Operation.DETAIL:
        record = await _require_record(identity, data_access)
        return PageContext(identity, "detail", record=record, ids=ids)

    if op is Operation.ADD:
        return PageContext(identity, "form", is_edit_mode=False, ids=ids)

    # Operation.EDIT
    record = await _require_record(identity, data_access)
    _check_parent(identity, record)
    return PageContext(identity, "form", record=record, is_edit_mode=True, ids=ids)
