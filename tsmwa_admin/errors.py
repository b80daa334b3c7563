"""Domain exceptions raised by the resolver, page controller and data access.

RouteNotFound and RecordNotFound are recovered at the view boundary and
rendered as a 404. DataAccessFailure is never recovered locally; the app-level
error handler logs it and renders the generic error page.
"""

from __future__ import annotations


class AdminError(Exception):
    """Base class for every error this package raises on purpose."""


class RouteNotFound(AdminError):
    def __init__(self, path: str):
        super().__init__(f"No route matches {path!r}")
        self.path = path


class RecordNotFound(AdminError):
    def __init__(self, entity, record_id: str | None):
        label = getattr(entity, "value", entity)
        super().__init__(f"{label} {record_id!r} does not exist")
        self.entity = entity
        self.record_id = record_id


class DataAccessFailure(AdminError):
    """The database (or remote log feed) raised while reading or writing."""

    def __init__(self, message: str, *, entity=None):
        super().__init__(message)
        self.entity = entity
