"""Explicit data-access handle.

One `DataAccess` is created per application in `create_app()` and stored in
`app.extensions["data_access"]`. Page controllers and form components receive
it as an argument; nothing imports a module-level client.

Lifecycle:
- `init_app(app)` binds the handle (and the remote log feed) to the app
- request teardown removes the scoped session (Flask-SQLAlchemy)
- `close()` disposes engine pools and the log feed session at shutdown

Every operation is a coroutine so page code has exactly one awaited fetch
step. Driver errors are logged, rolled back and re-raised as
DataAccessFailure; a missing record on update raises RecordNotFound.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

import requests
from sqlalchemy import Integer, func, inspect as sa_inspect, select
from sqlalchemy.exc import SQLAlchemyError

from ..errors import DataAccessFailure, RecordNotFound
from ..extensions import db
from ..models import (
    GstFiling,
    Invoice,
    Labour,
    LeaseQuery,
    Meeting,
    Membership,
    MembershipChange,
    MembershipFee,
    MeterReading,
    Trip,
    User,
    Vehicle,
)
from ..route_table import Entity
from . import billing
from .log_feed import LogFeed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntitySource:
    model: Any
    key: str = "id"
    # Natural keys compared case-insensitively are upper-cased for lookup.
    case_insensitive: bool = False
    default_order: tuple = ("-id",)


ENTITY_SOURCES: Dict[Entity, EntitySource] = {
    Entity.MEMBERSHIP: EntitySource(Membership, default_order=("industry_name",)),
    Entity.MEMBERSHIP_FEE: EntitySource(MembershipFee, default_order=("-period_from", "-id")),
    Entity.MEMBERSHIP_CHANGE: EntitySource(MembershipChange, default_order=("-created_at", "-id")),
    Entity.INVOICE: EntitySource(Invoice, default_order=("-invoice_date", "-id")),
    Entity.GST_FILING: EntitySource(GstFiling, default_order=("-filing_date", "-id")),
    Entity.LABOUR: EntitySource(Labour, default_order=("name",)),
    Entity.LEASE_QUERY: EntitySource(LeaseQuery, default_order=("-id",)),
    Entity.MEETING: EntitySource(Meeting, default_order=("-meeting_date", "-id")),
    Entity.USER: EntitySource(User, default_order=("name",)),
    Entity.VEHICLE: EntitySource(Vehicle, default_order=("vehicle_number",)),
    Entity.TRIP: EntitySource(Trip, default_order=("-trip_date", "-id")),
    Entity.METER_READING: EntitySource(
        MeterReading,
        key="meter_id",
        case_insensitive=True,
        default_order=("-reading_date", "-id"),
    ),
}

Order = Union[str, Sequence[str], None]


def _source(entity: Entity) -> EntitySource:
    try:
        return ENTITY_SOURCES[entity]
    except KeyError:
        raise ValueError(f"{entity} is not backed by a database table") from None


def _order_clauses(model, order: Order, default: Sequence[str]):
    names = [order] if isinstance(order, str) else list(order or default)
    clauses = []
    for name in names:
        desc = name.startswith("-")
        column = getattr(model, name.lstrip("-"), None)
        if column is None:
            raise ValueError(f"{model.__name__} has no column {name.lstrip('-')!r}")
        clauses.append(column.desc() if desc else column.asc())
    return clauses


def _check_fields(model, names: Iterable[str]) -> None:
    known = set(sa_inspect(model).attrs.keys())
    unknown = [n for n in names if n not in known]
    if unknown:
        raise ValueError(f"{model.__name__} has no field(s) {', '.join(sorted(unknown))}")


class DataAccess:
    def __init__(self, database=None, log_feed: Optional[LogFeed] = None):
        self.db = database or db
        self.log_feed = log_feed
        self.app = None

    def init_app(self, app) -> None:
        self.app = app
        if self.log_feed is None:
            self.log_feed = LogFeed.from_config(app.config)
        app.extensions["data_access"] = self

    def close(self) -> None:
        """Dispose connection pools. Call once at process shutdown."""
        if self.app is not None:
            with self.app.app_context():
                self.db.session.remove()
                for engine in self.db.engines.values():
                    engine.dispose()
        if self.log_feed is not None:
            self.log_feed.close()
        logger.info("Data access closed")

    @property
    def session(self):
        return self.db.session

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    @contextmanager
    def _failures(self, entity: Entity, action: str):
        try:
            yield
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.exception("%s %s failed", action, entity.value)
            raise DataAccessFailure(f"Could not {action} {entity.value}", entity=entity) from exc

    def _key_condition(self, src: EntitySource, record_id: Any):
        """Equality condition for a lookup by key, or None if the id can't exist.

        Path ids arrive as strings. Integer keys only accept digit strings;
        anything else cannot match a stored row.
        """
        column = getattr(src.model, src.key)
        raw = "" if record_id is None else str(record_id).strip()
        if not raw:
            return None
        if isinstance(column.type, Integer):
            if not raw.isdigit():
                return None
            return column == int(raw)
        if src.case_insensitive:
            return func.upper(column) == raw.upper()
        return column == raw

    def _get(self, entity: Entity, record_id: Any):
        src = _source(entity)
        condition = self._key_condition(src, record_id)
        if condition is None:
            return None
        stmt = select(src.model).where(condition).limit(1)
        return self.session.execute(stmt).scalars().first()

    def _assign(self, record, fields: Mapping[str, Any]) -> None:
        mapper = sa_inspect(type(record))
        _check_fields(type(record), fields.keys())
        for name, value in fields.items():
            rel = mapper.relationships[name] if name in mapper.relationships else None
            if rel is not None and rel.uselist and isinstance(value, list):
                child_cls = rel.mapper.class_
                value = [child_cls(**v) if isinstance(v, Mapping) else v for v in value]
            setattr(record, name, value)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    async def find_many(
        self,
        entity: Entity,
        filter: Optional[Mapping[str, Any]] = None,
        order: Order = None,
    ) -> List[Any]:
        if entity is Entity.LOG:
            return self._fetch_logs(filter)

        src = _source(entity)
        stmt = select(src.model)
        if filter:
            _check_fields(src.model, filter.keys())
            stmt = stmt.filter_by(**filter)
        stmt = stmt.order_by(*_order_clauses(src.model, order, src.default_order))
        with self._failures(entity, "list"):
            return list(self.session.execute(stmt).scalars().all())

    async def find_one(self, entity: Entity, record_id: Any) -> Optional[Any]:
        with self._failures(entity, "load"):
            return self._get(entity, record_id)

    async def count(self, entity: Entity, filter: Optional[Mapping[str, Any]] = None) -> int:
        src = _source(entity)
        stmt = select(func.count()).select_from(src.model)
        if filter:
            _check_fields(src.model, filter.keys())
            stmt = stmt.filter_by(**filter)
        with self._failures(entity, "count"):
            return int(self.session.execute(stmt).scalar_one())

    async def latest_code(self, entity: Entity, column: str, prefix: str) -> Optional[str]:
        """Code under `prefix` with the highest numeric suffix, or None.

        Suffixes compare as numbers, so INV/2025/1000 follows INV/2025/999.
        """
        src = _source(entity)
        col = getattr(src.model, column)
        stmt = select(col).where(col.like(f"{prefix}%"))
        with self._failures(entity, "number"):
            codes = self.session.execute(stmt).scalars().all()
        return billing.highest_code(codes, prefix)

    async def total(self, entity: Entity, column: str, filter: Optional[Mapping[str, Any]] = None) -> float:
        src = _source(entity)
        stmt = select(func.coalesce(func.sum(getattr(src.model, column)), 0))
        if filter:
            stmt = stmt.filter_by(**filter)
        with self._failures(entity, "sum"):
            return float(self.session.execute(stmt).scalar_one() or 0.0)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def create(self, entity: Entity, fields: Mapping[str, Any]):
        src = _source(entity)
        record = src.model()
        self._assign(record, fields)
        with self._failures(entity, "create"):
            self.session.add(record)
            self.session.commit()
        logger.info("Created %s %s", entity.value, record.id)
        return record

    async def update(self, entity: Entity, record_id: Any, fields: Mapping[str, Any]):
        with self._failures(entity, "update"):
            record = self._get(entity, record_id)
            if record is None:
                raise RecordNotFound(entity, record_id)
            self._assign(record, fields)
            self.session.commit()
        logger.info("Updated %s %s", entity.value, record.id)
        return record

    # -------------------------------------------------------------------------
    # Remote logs
    # -------------------------------------------------------------------------

    def _fetch_logs(self, filter: Optional[Mapping[str, Any]] = None):
        if self.log_feed is None:
            return []
        try:
            records = self.log_feed.fetch_all()
        except (requests.RequestException, ValueError) as exc:
            logger.exception("Log feed request failed")
            raise DataAccessFailure("Could not load system logs", entity=Entity.LOG) from exc
        for name, value in (filter or {}).items():
            records = [r for r in records if getattr(r, name, None) == value]
        return records
