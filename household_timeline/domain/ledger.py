"""Ledger entries derived from timeline events, and their status lifecycle"""

from dataclasses import replace
from decimal import Decimal
from typing import Iterable, List, Optional

from household_timeline.domain.currency import normalize_currency, sum_currency
from household_timeline.domain.exceptions import LedgerTransitionError
from household_timeline.domain.models import LedgerEntry, LedgerStatus, TimelineEvent

_STATUS_RANK = {LedgerStatus.PLANNED: 0, LedgerStatus.POSTED: 1, LedgerStatus.PAID: 2}


def source_type_for_event(event: TimelineEvent) -> str:
    if event.category == "income":
        return "income"
    if event.category == "loanedOut":
        return "loaned-out"
    if event.type == "card-due":
        return "card-due"
    if event.type == "bill-due":
        return "bill-due"
    return "adjustment"


def build_planned_ledger_entries(month: str, events: List[TimelineEvent], now: str) -> List[LedgerEntry]:
    """Every event becomes a planned entry; `now` is supplied by the caller"""
    return [
        LedgerEntry(
            month=month,
            date=event.date,
            day=event.day,
            title=event.title,
            subtitle=event.subtitle,
            category=event.category,
            amount=normalize_currency(event.amount),
            status=LedgerStatus.PLANNED,
            source_type=source_type_for_event(event),
            source_id=event.id,
            created_at=now,
            updated_at=now,
        )
        for event in events
    ]


def transition_ledger_entry(entry: LedgerEntry, target_status: LedgerStatus, now: str) -> LedgerEntry:
    """
    Move a ledger entry to a new status and return the updated copy.

    Allowed moves: planned -> posted -> paid (planned -> paid sets both
    timestamps), and an explicit revert to planned which clears them.
    posted_at / paid_at are never overwritten once set.

    Raises:
        LedgerTransitionError: On a backward move other than revert-to-planned,
            or a move to the current status
    """
    target = LedgerStatus(target_status)
    current = LedgerStatus(entry.status)

    if target == LedgerStatus.PLANNED:
        if current == LedgerStatus.PLANNED:
            raise LedgerTransitionError("Ledger entry is already planned")
        return replace(entry, status=target, posted_at=None, paid_at=None, updated_at=now)

    if _STATUS_RANK[target] <= _STATUS_RANK[current]:
        raise LedgerTransitionError(f"Cannot move ledger entry from {current.value} to {target.value}")

    posted_at = entry.posted_at or now
    paid_at = (entry.paid_at or now) if target == LedgerStatus.PAID else None
    return replace(entry, status=target, posted_at=posted_at, paid_at=paid_at, updated_at=now)


def sum_ledger_movement(
    entries: Iterable[LedgerEntry],
    cutoff_day: Optional[int] = None,
    statuses: Optional[Iterable[LedgerStatus]] = None,
) -> Decimal:
    """Net signed movement, optionally up to a day and limited to some statuses"""
    allowed = {LedgerStatus(status) for status in statuses} if statuses is not None else None
    return sum_currency(
        entry.amount
        for entry in entries
        if (not cutoff_day or entry.day <= cutoff_day) and (allowed is None or entry.status in allowed)
    )
