"""Approve or decline queued membership changes from the changes-approval list."""

from __future__ import annotations

from flask import abort, current_app, flash, redirect, request

from ..presentation import path_for
from ..route_table import SECTIONS, Entity, Operation
from ..services import change_requests
from . import bp
from .helpers import flash_errors, get_data_access


def _back(section: str):
    return redirect(path_for(Entity.MEMBERSHIP_CHANGE, Operation.LIST, section, strict=True))


@bp.route("/<section>/changes-approval/<change_id>/approve", methods=["POST"])
async def approve_change(section: str, change_id: str):
    if section not in SECTIONS:
        abort(404)
    outcome = await change_requests.approve_change(get_data_access(), change_id)
    if not outcome.ok:
        flash_errors(outcome.errors)
        return _back(section)
    current_app.logger.info("Change %s approved via %s", change_id, request.path)
    flash("Change approved and applied to the member.", "success")
    return _back(section)


@bp.route("/<section>/changes-approval/<change_id>/decline", methods=["POST"])
async def decline_change(section: str, change_id: str):
    if section not in SECTIONS:
        abort(404)
    outcome = await change_requests.decline_change(get_data_access(), change_id, request.form.get("reason"))
    if not outcome.ok:
        flash_errors(outcome.errors)
        return _back(section)
    current_app.logger.info("Change %s declined via %s", change_id, request.path)
    flash("Change declined.", "success")
    return _back(section)
