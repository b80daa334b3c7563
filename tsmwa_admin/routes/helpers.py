"""Shared route helpers.

Intentionally **no Blueprint routes** should live here.
"""

from __future__ import annotations

from typing import Iterable

from flask import current_app, flash

from ..services.data_access import DataAccess


def get_data_access() -> DataAccess:
    """The application's data-access handle (created in create_app)."""
    return current_app.extensions["data_access"]


def flash_errors(errors: Iterable[str]) -> None:
    for message in errors:
        flash(message, "danger")
