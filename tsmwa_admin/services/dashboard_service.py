"""Dashboard aggregation.

Keeps dashboard numbers out of views and templates. Returns plain dicts and
lists ready for Jinja; no HTML here.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List

from ..route_table import Entity

RECENT_LIMIT = 5


# -----------------------------------------------------------------------------
#  Cards
# -----------------------------------------------------------------------------

# (label, entity, fixed filter)
COUNT_CARDS = (
    ("Members", Entity.MEMBERSHIP, None),
    ("Active members", Entity.MEMBERSHIP, {"status": "Active"}),
    ("Vehicles", Entity.VEHICLE, None),
    ("Trips", Entity.TRIP, None),
    ("Labour", Entity.LABOUR, None),
    ("Users", Entity.USER, None),
)

PENDING_CARDS = (
    ("Membership approvals", Entity.MEMBERSHIP, {"status": "Pending"}),
    ("Fee approvals", Entity.MEMBERSHIP_FEE, {"approval_status": "pending"}),
    ("Invoice approvals", Entity.INVOICE, {"approval_status": "pending"}),
    ("Open lease queries", Entity.LEASE_QUERY, {"status": "PENDING"}),
    ("Member change requests", Entity.MEMBERSHIP_CHANGE, {"approval_status": "PENDING"}),
)


async def _cards(data_access, definitions) -> List[Dict[str, Any]]:
    cards = []
    for label, entity, flt in definitions:
        cards.append(
            {
                "label": label,
                "entity": entity,
                "filter": flt,
                "value": await data_access.count(entity, filter=flt),
            }
        )
    return cards


async def build_dashboard(data_access, *, today: date | None = None) -> Dict[str, Any]:
    """Counts, pending approvals, money owed and what's coming up."""
    today = today or date.today()

    meetings = await data_access.find_many(
        Entity.MEETING,
        filter={"status": "scheduled"},
        order=("meeting_date", "id"),
    )
    upcoming = [m for m in meetings if m.meeting_date and m.meeting_date >= today][:RECENT_LIMIT]

    invoices = await data_access.find_many(Entity.INVOICE)

    return {
        "counts": await _cards(data_access, COUNT_CARDS),
        "pending": await _cards(data_access, PENDING_CARDS),
        "unpaid_trip_balance": await data_access.total(Entity.TRIP, "balance_amount"),
        "invoiced_total": await data_access.total(Entity.INVOICE, "total_amount"),
        "fees_collected": await data_access.total(Entity.MEMBERSHIP_FEE, "paid_amount", {"status": "paid"}),
        "upcoming_meetings": upcoming,
        "recent_invoices": invoices[:RECENT_LIMIT],
    }
