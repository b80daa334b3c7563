"""Invoice downloads: printable PDF and the GST register CSV."""

from __future__ import annotations

import csv
import io
from datetime import date

from flask import Response, abort, current_app, render_template, send_file

from ..errors import RecordNotFound
from ..route_table import SECTIONS, Entity
from ..services.billing import INVOICE_EXPORT_HEADERS, invoice_export_rows
from . import bp
from .helpers import get_data_access


def _check_section(section: str) -> None:
    if section not in SECTIONS:
        abort(404)


@bp.route("/<section>/invoices/export.csv")
async def invoices_export(section: str):
    _check_section(section)
    invoices = await get_data_access().find_many(Entity.INVOICE, order=("invoice_date", "id"))

    buf = io.StringIO()
    writer = csv.writer(buf)
    writer.writerow(INVOICE_EXPORT_HEADERS)
    writer.writerows(invoice_export_rows(invoices))

    filename = f"gst-register-{date.today().isoformat()}.csv"
    headers = [("Content-Disposition", f"attachment; filename={filename}")]
    return Response(buf.getvalue(), headers=headers, content_type="text/csv; charset=utf-8")


@bp.route("/<section>/invoices/<invoice_id>/pdf")
async def invoice_pdf(section: str, invoice_id: str):
    """Print-friendly invoice rendered to PDF."""
    _check_section(section)
    invoice = await get_data_access().find_one(Entity.INVOICE, invoice_id)
    if invoice is None:
        raise RecordNotFound(Entity.INVOICE, invoice_id)

    html = render_template("invoice_print.html", invoice=invoice, items=invoice.items)

    # WeasyPrint pulls in native libraries; import only when a PDF is requested.
    from weasyprint import HTML

    pdf_bytes = HTML(string=html, base_url=current_app.root_path).write_pdf()
    current_app.logger.info("Rendered PDF for invoice %s", invoice.invoice_number)

    return send_file(
        io.BytesIO(pdf_bytes),
        mimetype="application/pdf",
        as_attachment=True,
        download_name=f"{invoice.invoice_number.replace('/', '-')}.pdf",
    )
