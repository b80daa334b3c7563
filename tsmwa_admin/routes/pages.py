"""Every page in the route table is served by one catch-all view.

GET:  resolve path -> load_page() -> render
POST: resolve path -> (Add/Edit only) form.submit() -> redirect, or re-render
      with the submitted values and a 400
"""

from __future__ import annotations

from flask import current_app, flash, redirect, request
from werkzeug.exceptions import MethodNotAllowed

from ..forms import form_for
from ..page_controller import load_page
from ..presentation import after_save_path, render_page
from ..resolver import resolve_path
from ..route_table import Operation
from . import bp
from .helpers import flash_errors, get_data_access

FORM_OPERATIONS = (Operation.ADD, Operation.EDIT)


@bp.route("/", defaults={"path": ""}, methods=["GET", "POST"])
@bp.route("/<path:path>", methods=["GET", "POST"])
async def page(path: str):
    identity = resolve_path(path)
    data_access = get_data_access()

    if request.method == "POST":
        if identity.operation not in FORM_OPERATIONS:
            raise MethodNotAllowed(valid_methods=["GET"])
        return await _submit(identity, data_access)

    ctx = await load_page(identity, data_access)
    return await render_page(ctx, data_access)


async def _submit(identity, data_access):
    ctx = await load_page(identity, data_access)
    form = form_for(ctx, settings=current_app.config)
    outcome = await form.submit(data_access, request.form)

    if not outcome.ok:
        flash_errors(outcome.errors)
        return await render_page(ctx, data_access, form=form, formdata=request.form, status=400)

    verb = "updated" if ctx.is_edit_mode else "created"
    current_app.logger.info("%s %s via %s", form.title, verb, request.path)
    flash(f"{form.title} {verb} successfully.", "success")
    return redirect(after_save_path(ctx, outcome.record, request.path))
