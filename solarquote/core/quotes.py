"""
Quotation book-keeping: id numbering, state updates and the dashboard query.

Id format: {PREFIX}-{seq}/{MM}-{YY}, e.g. KAPL-1001/02-24. The sequence is
never stored authoritatively; it is re-derived from the ids already present
(current prefix and any legacy prefix) every time state is loaded.
"""

import re
import uuid
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Iterable, List

from .defaults import ID_SEQUENCE_FLOOR
from .models import AppState, PricingConfig, Quotation, User

# ═══════════════════════════════════════════════════════════════════════════════
# Id numbering
# ═══════════════════════════════════════════════════════════════════════════════

def format_quotation_id(prefix: str, seq: int, when: datetime) -> str:
    return f"{prefix}-{seq}/{when.strftime('%m')}-{when.strftime('%y')}"


def is_quotation_id(quote_id: str, prefix: str) -> bool:
    """True for ids shaped exactly like format_quotation_id(prefix, ...) output."""
    return re.fullmatch(rf"{re.escape(prefix)}-\d+/(0[1-9]|1[0-2])-\d\d", quote_id or "") is not None


def _sequence_pattern(prefixes: Iterable[str]):
    alts = "|".join(re.escape(p) for p in prefixes if p)
    return re.compile(rf"(?:{alts})-(\d+)")


def extract_sequence(quote_id: str, prefixes: Iterable[str]):
    """Numeric sequence of an id carrying one of the prefixes, else None."""
    m = _sequence_pattern(prefixes).search(quote_id or "")
    return int(m.group(1)) if m else None


def compute_next_id(quote_ids: Iterable[str], prefix: str = "KAPL",
                    legacy_prefixes: Iterable[str] = ()) -> int:
    """1 + highest sequence found, with ID_SEQUENCE_FLOOR as the floor."""
    prefixes = [prefix] + [p for p in legacy_prefixes if p != prefix]
    highest = ID_SEQUENCE_FLOOR
    for qid in quote_ids:
        seq = extract_sequence(qid, prefixes)
        if seq is not None and seq > highest:
            highest = seq
    return highest + 1


# ═══════════════════════════════════════════════════════════════════════════════
# Creation & state updates (all return new objects)
# ═══════════════════════════════════════════════════════════════════════════════

def new_bom_item_id() -> str:
    return uuid.uuid4().hex[:10]


def new_quotation(state: AppState, user: User, prefix: str = "KAPL",
                  now: datetime = None) -> Quotation:
    """Blank quotation numbered from state.next_id, stamped with its creator."""
    now = now or datetime.now()
    return Quotation(
        id=format_quotation_id(prefix, state.next_id, now),
        date=now.strftime("%Y-%m-%d"),
        pricing=PricingConfig(),
        bom=[],
        created_by=user.id if user else "",
        created_by_name=user.name if user else "",
    )


def upsert_quotation(state: AppState, q: Quotation) -> AppState:
    """Replace by id, or append and advance next_id for a new quotation."""
    if state.find_quotation(q.id) is not None:
        quotes = [q if item.id == q.id else item for item in state.quotations]
        return replace(state, quotations=quotes)
    return replace(state, quotations=state.quotations + [q], next_id=state.next_id + 1)


def remove_quotation(state: AppState, quote_id: str) -> AppState:
    return replace(state, quotations=[q for q in state.quotations if q.id != quote_id])


# ═══════════════════════════════════════════════════════════════════════════════
# Dashboard query
# ═══════════════════════════════════════════════════════════════════════════════

@dataclass
class DashboardRow:
    quotation: Quotation
    creator_name: str
    can_edit: bool
    can_delete: bool = False


def can_see_all(user: User) -> bool:
    return user is not None and user.role in ("admin", "TL")


def can_edit_any(user: User) -> bool:
    return user is not None and user.role in ("admin", "TL")


def can_export_report(user: User) -> bool:
    return user is not None and user.role == "admin"


def can_edit(user: User, q: Quotation) -> bool:
    """Editing is TL/admin only; a user views and creates their own."""
    return can_edit_any(user)


def can_delete(user: User, q: Quotation) -> bool:
    """Deleting is TL/admin only, even for the creator."""
    return can_edit_any(user)


def can_manage_settings(user: User, section: str = "") -> bool:
    if section == "users":
        return user is not None and user.role == "admin"
    return can_edit_any(user)


def visible_quotations(state: AppState, user: User) -> List[DashboardRow]:
    """Quotations the user may see, each annotated with its creator's name.

    admin/TL see everything; a plain user sees only what they created.
    """
    rows = []
    for q in state.quotations:
        if not can_see_all(user) and (user is None or q.created_by != user.id):
            continue
        creator = state.find_user(q.created_by)
        name = q.created_by_name or (creator.name if creator else "") or "Unknown"
        rows.append(DashboardRow(quotation=q, creator_name=name, can_edit=can_edit(user, q),
                                 can_delete=can_delete(user, q)))
    return rows


def search_rows(rows: List[DashboardRow], query: str = "") -> List[DashboardRow]:
    """Case-insensitive match on id, customer, DISCOM no., mobile, location, creator."""
    q = (query or "").strip().lower()
    if not q:
        return rows
    out = []
    for row in rows:
        qt = row.quotation
        searchable = " ".join([
            qt.id, qt.customer_name, qt.discom_number, qt.mobile,
            qt.location, qt.system_description, row.creator_name,
        ]).lower()
        if q in searchable:
            out.append(row)
    return out
