"""Card balance projection - interest accrual then payment, month over month"""

from decimal import Decimal
from typing import Dict, List, Optional

from household_timeline.domain.currency import ZERO, clamp_non_negative, normalize_currency
from household_timeline.domain.models import (
    CardAccount,
    CardMonthProjection,
    CardMonthProjectionEntry,
    FormulaVariant,
    MonthlyCardPayments,
)
from household_timeline.utils.date_utils import format_month_key, month_range_inclusive, parse_month_key

MONTHLY_RATE_DIVISOR = 1200  # APR percent -> monthly rate
STANDARD_FORMULA_CELL = "C37"  # My bills cell in the workbook money-left formula


def infer_formula_variant(formula_expression: Optional[str]) -> FormulaVariant:
    """Detect the legacy variant whose money-left formula leaves out my bills"""
    if not formula_expression:
        return FormulaVariant.STANDARD
    if STANDARD_FORMULA_CELL in formula_expression:
        return FormulaVariant.STANDARD
    return FormulaVariant.MAY_QUIRK


def extend_payments_to_year_end(monthly_payments: List[MonthlyCardPayments]) -> List[MonthlyCardPayments]:
    """
    Fill the payment timeline from the first known month through December.

    Months with no explicit row (gaps and the tail after the last row) are
    synthesized with zero payment so compounding interest stays visible.
    Synthesized rows are flagged inferred.
    """
    if not monthly_payments:
        return []

    ordered = sorted(monthly_payments, key=lambda p: p.month)
    last_year, _ = parse_month_key(ordered[-1].month)
    by_month = {payment.month: payment for payment in ordered}

    timeline = []
    for month in month_range_inclusive(ordered[0].month, format_month_key(last_year, 12)):
        existing = by_month.get(month)
        if existing is not None:
            timeline.append(existing)
            continue
        timeline.append(
            MonthlyCardPayments(
                month=month,
                by_card_id={},
                total=ZERO,
                formula_variant_id=FormulaVariant.STANDARD,
                formula_expression=None,
                inferred=True,
            )
        )
    return timeline


def _project_card_month(
    card: CardAccount, opening: Decimal, payment: Optional[Decimal]
) -> CardMonthProjectionEntry:
    opening_balance = clamp_non_negative(opening)
    apr = clamp_non_negative(card.interest_rate_apr)
    interest_added = normalize_currency(opening_balance * apr / MONTHLY_RATE_DIVISOR)
    payment_amount = clamp_non_negative(payment)
    closing_balance = clamp_non_negative(opening_balance + interest_added - payment_amount)

    return CardMonthProjectionEntry(
        card_id=card.id,
        opening_balance=opening_balance,
        interest_rate_apr=apr,
        interest_added=interest_added,
        payment_amount=payment_amount,
        closing_balance=closing_balance,
    )


def project_card_balances(
    cards: List[CardAccount], monthly_payments: List[MonthlyCardPayments]
) -> List[CardMonthProjection]:
    """
    Simulate every card across the payment timeline.

    Per card and month:
    - opening = previous closing (first month: used_limit)
    - interest = opening * APR / 1200
    - closing = max(0, opening + interest - payment); overpayment is not carried as credit

    Pass the timeline through extend_payments_to_year_end first to include
    the inferred tail months.
    """
    balances: Dict[str, Decimal] = {card.id: clamp_non_negative(card.used_limit) for card in cards}
    projections = []

    for payment in sorted(monthly_payments, key=lambda p: p.month):
        entries: Dict[str, CardMonthProjectionEntry] = {}
        total_interest = ZERO
        total_payment = ZERO
        total_closing = ZERO

        for card in cards:
            entry = _project_card_month(card, balances[card.id], payment.by_card_id.get(card.id))
            entries[card.id] = entry
            balances[card.id] = entry.closing_balance

            total_interest = normalize_currency(total_interest + entry.interest_added)
            total_payment = normalize_currency(total_payment + entry.payment_amount)
            total_closing = normalize_currency(total_closing + entry.closing_balance)

        projections.append(
            CardMonthProjection(
                month=payment.month,
                entries=entries,
                total_interest_added=total_interest,
                total_payment_amount=total_payment,
                total_closing_balance=total_closing,
            )
        )

    return projections
