"""Membership edits that wait for an admin before they touch the member.

A change request stores the submitted form text in `updated_data`. Approving
parses it with the membership form's field rules and writes the result onto
the membership; declining records a reason and leaves the member untouched.
Only PENDING requests can be decided.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..errors import RecordNotFound
from ..forms import FormOutcome, MembershipForm, parse_value
from ..route_table import Entity

logger = logging.getLogger(__name__)

PENDING = "PENDING"
APPROVED = "APPROVED"
DECLINED = "DECLINED"
STATUSES = (PENDING, APPROVED, DECLINED)

CHANGEABLE_FIELDS = {f.name: f for f in MembershipForm.fields}


def parse_changes(updated_data: Mapping[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """Convert stored form text to column values using the membership rules."""
    errors: List[str] = []
    values: Dict[str, Any] = {}
    for name, raw in (updated_data or {}).items():
        f = CHANGEABLE_FIELDS.get(name)
        if f is None:
            errors.append(f"{name} cannot be changed.")
            continue
        values[name] = parse_value(f, None if raw is None else str(raw), errors)
    if not values and not errors:
        errors.append("The change request has no fields.")
    return values, errors


def changed_fields(change) -> List[Dict[str, str]]:
    """Current and requested value of each field, for display."""
    member = change.membership
    rows = []
    for name, new in (change.updated_data or {}).items():
        f = CHANGEABLE_FIELDS.get(name)
        old = getattr(member, name, None) if member is not None else None
        rows.append(
            {
                "label": f.label if f is not None else name,
                "old": "" if old is None else str(old),
                "new": "" if new is None else str(new),
            }
        )
    return rows


def status_counts(changes) -> Dict[str, int]:
    counts = {status: 0 for status in STATUSES}
    for change in changes:
        if change.approval_status in counts:
            counts[change.approval_status] += 1
    return counts


async def _load(data_access, change_id):
    change = await data_access.find_one(Entity.MEMBERSHIP_CHANGE, change_id)
    if change is None:
        raise RecordNotFound(Entity.MEMBERSHIP_CHANGE, change_id)
    return change


async def propose_change(
    data_access,
    membership_id: Any,
    updated_data: Mapping[str, Any],
    *,
    modified_by: Optional[str] = None,
) -> FormOutcome:
    """Queue an edit to a membership. Nothing is written to the member yet."""
    member = await data_access.find_one(Entity.MEMBERSHIP, str(membership_id))
    if member is None:
        raise RecordNotFound(Entity.MEMBERSHIP, membership_id)

    _, errors = parse_changes(updated_data)
    if errors:
        return FormOutcome(errors=errors)

    change = await data_access.create(
        Entity.MEMBERSHIP_CHANGE,
        {
            "membership_id": member.id,
            "updated_data": dict(updated_data),
            "modified_by": modified_by,
            "approval_status": PENDING,
        },
    )
    return FormOutcome(record=change)


async def approve_change(data_access, change_id: Any) -> FormOutcome:
    change = await _load(data_access, change_id)
    if change.approval_status != PENDING:
        return FormOutcome(record=change, errors=[f"This change is already {change.approval_status.lower()}."])

    values, errors = parse_changes(change.updated_data)
    if not errors:
        member = change.membership
        start = values.get("membership_start_date", member.membership_start_date)
        due = values.get("membership_due_date", member.membership_due_date)
        if start and due and due < start:
            errors.append("Membership due date cannot be before the start date.")
    if errors:
        return FormOutcome(record=change, errors=errors)

    await data_access.update(Entity.MEMBERSHIP, str(change.membership_id), values)
    change = await data_access.update(
        Entity.MEMBERSHIP_CHANGE,
        str(change.id),
        {"approval_status": APPROVED, "decline_reason": None, "decided_at": datetime.utcnow()},
    )
    logger.info("Approved change %s for membership %s", change.id, change.membership_id)
    return FormOutcome(record=change)


async def decline_change(data_access, change_id: Any, reason: Optional[str]) -> FormOutcome:
    change = await _load(data_access, change_id)
    if change.approval_status != PENDING:
        return FormOutcome(record=change, errors=[f"This change is already {change.approval_status.lower()}."])

    reason = (reason or "").strip()
    if not reason:
        return FormOutcome(record=change, errors=["Enter a reason for declining."])

    change = await data_access.update(
        Entity.MEMBERSHIP_CHANGE,
        str(change.id),
        {"approval_status": DECLINED, "decline_reason": reason, "decided_at": datetime.utcnow()},
    )
    logger.info("Declined change %s for membership %s", change.id, change.membership_id)
    return FormOutcome(record=change)
