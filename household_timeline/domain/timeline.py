"""Month timeline - expand entities into dated calendar events"""

from typing import Iterable, List, Mapping, Optional

from household_timeline.domain.currency import clamp_non_negative, normalize_currency
from household_timeline.domain.models import (
    AdjustmentCategory,
    CardAccount,
    LineItem,
    LoanedOutItem,
    LoanStatus,
    MonthlyAdjustment,
    MonthlyCardPayments,
    MonthTimeline,
    PaydayModeSettings,
    TimelineEvent,
)
from household_timeline.domain.paydays import resolve_paydays
from household_timeline.utils.date_utils import clamp_day, iso_date, parse_month_key


def _event(
    event_id: str,
    event_type: str,
    title: str,
    category: str,
    month: str,
    due_day: Optional[int],
    amount: object,
    subtitle: Optional[str] = None,
) -> TimelineEvent:
    year, month_number = parse_month_key(month)
    day = clamp_day(year, month_number, due_day)
    return TimelineEvent(
        id=event_id,
        type=event_type,
        title=title,
        category=category,
        date=iso_date(year, month_number, day),
        day=day,
        amount=normalize_currency(amount),
        subtitle=subtitle,
    )


def _sort_key(event: TimelineEvent):
    return (event.date, -event.amount, event.title)


def build_timeline(
    month: str,
    cards: List[CardAccount],
    payments_for_month: Optional[MonthlyCardPayments],
    income: List[LineItem],
    payday_overrides: Optional[Mapping[str, Iterable[int]]],
    house_bills: List[LineItem],
    shopping: List[LineItem],
    my_bills: List[LineItem],
    adjustments: List[MonthlyAdjustment],
    loaned_out_items: Optional[List[LoanedOutItem]] = None,
    payday_mode: Optional[PaydayModeSettings] = None,
) -> MonthTimeline:
    """
    Build the dated events for one month.

    Debits are negative, credits positive. Due days beyond the month's end are
    clamped to its last day. Events sort by date, then amount descending,
    then title.

    Raises:
        InvalidMonthKeyError: If month is not YYYY-MM
    """
    parse_month_key(month)
    events: List[TimelineEvent] = []
    by_card_id = payments_for_month.by_card_id if payments_for_month else {}

    for card in cards:
        events.append(
            _event(
                f"card-{card.id}-{month}",
                "card-due",
                f"{card.name} due",
                "cards",
                month,
                card.due_day_of_month,
                -clamp_non_negative(by_card_id.get(card.id)),
                subtitle="Card payment",
            )
        )

    paydays = resolve_paydays(month, income, payday_overrides, payday_mode)
    for item in income:
        for day in paydays[item.id]:
            events.append(
                _event(
                    f"income-{item.id}-{month}-{day}",
                    "income",
                    item.name,
                    "income",
                    month,
                    day,
                    clamp_non_negative(item.amount),
                    subtitle="Payday",
                )
            )

    bill_collections = (
        ("houseBills", house_bills, "House bill"),
        ("shopping", shopping, "Shopping"),
        ("myBills", my_bills, "My bill"),
    )
    for key, items, subtitle in bill_collections:
        for item in items:
            events.append(
                _event(
                    f"{key}-{item.id}-{month}",
                    "bill-due",
                    item.name,
                    key,
                    month,
                    item.due_day_of_month if item.due_day_of_month is not None else 1,
                    -clamp_non_negative(item.amount),
                    subtitle=subtitle,
                )
            )

    # Ranged adjustments are folded into category totals, only one-offs get a date
    for adjustment in adjustments:
        if adjustment.start_month != month or adjustment.end_month != month:
            continue
        sign = 1 if adjustment.category == AdjustmentCategory.INCOME else -1
        category = AdjustmentCategory(adjustment.category).value
        events.append(
            _event(
                f"adjustment-{adjustment.id}-{month}",
                "adjustment",
                adjustment.name,
                category,
                month,
                adjustment.due_day_of_month if adjustment.due_day_of_month is not None else 1,
                sign * clamp_non_negative(adjustment.amount),
                subtitle=f"One-off {category} adjustment",
            )
        )

    for loan in loaned_out_items or []:
        if loan.start_month == month:
            events.append(
                _event(
                    f"loaned-out-{loan.id}-{month}",
                    "loaned-out",
                    f"Loan to {loan.name}",
                    "loanedOut",
                    month,
                    1,
                    -clamp_non_negative(loan.amount),
                    subtitle="Money lent",
                )
            )
        if loan.status == LoanStatus.PAID_BACK and loan.paid_back_month == month:
            events.append(
                _event(
                    f"loaned-out-repaid-{loan.id}-{month}",
                    "loaned-out",
                    f"{loan.name} paid back",
                    "loanedOut",
                    month,
                    1,
                    clamp_non_negative(loan.amount),
                    subtitle="Loan repaid",
                )
            )

    return MonthTimeline(month=month, events=sorted(events, key=_sort_key))
