"""Month snapshot builder - the central monthly aggregation"""

from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from household_timeline.domain.currency import ZERO, normalize_currency, sum_currency
from household_timeline.domain.models import (
    AdjustmentCategory,
    CardAccount,
    CardMonthProjection,
    FormulaVariant,
    LineItem,
    LoanedOutItem,
    LoanStatus,
    MonthlyAdjustment,
    MonthlyCardPayments,
    MonthSnapshot,
    PaydayModeSettings,
)
from household_timeline.domain.paydays import resolve_paydays
from household_timeline.domain.projections import extend_payments_to_year_end, project_card_balances
from household_timeline.utils.date_utils import is_month_in_range

PaydayOverrides = Mapping[str, Mapping[str, Iterable[int]]]  # month -> income id -> days


def compute_money_left(
    income_total: Decimal,
    card_spend_total: Decimal,
    house_bills_total: Decimal,
    shopping_total: Decimal,
    my_bills_total: Decimal,
    formula_variant_id: FormulaVariant,
) -> Decimal:
    """
    Money left after all outgoings for the month.

    The MAY_QUIRK variant reproduces a workbook formula that never subtracted
    my bills. Keep both branches.
    """
    if formula_variant_id == FormulaVariant.MAY_QUIRK:
        return normalize_currency(income_total - card_spend_total - house_bills_total - shopping_total)

    return normalize_currency(
        income_total - card_spend_total - house_bills_total - shopping_total - my_bills_total
    )


def adjustments_for_month(
    month: str, category: AdjustmentCategory, adjustments: List[MonthlyAdjustment]
) -> Decimal:
    """Sum of adjustments in `category` whose [start, end] range contains `month`"""
    return sum_currency(
        adjustment.amount
        for adjustment in adjustments
        if adjustment.category == category
        and is_month_in_range(month, adjustment.start_month, adjustment.end_month)
    )


def is_loan_outstanding(month: str, loan: LoanedOutItem) -> bool:
    if month < loan.start_month:
        return False
    if loan.status != LoanStatus.PAID_BACK:
        return True
    if not loan.paid_back_month:
        return False
    return month < loan.paid_back_month


def is_loan_paid_back(month: str, loan: LoanedOutItem) -> bool:
    return loan.status == LoanStatus.PAID_BACK and bool(loan.paid_back_month) and loan.paid_back_month <= month


def income_total_for_month(
    month: str,
    income_items: List[LineItem],
    overrides_by_income_id: Optional[Mapping[str, Iterable[int]]] = None,
    payday_mode: Optional[PaydayModeSettings] = None,
) -> Decimal:
    """Each income item contributes its full amount once per payday"""
    paydays = resolve_paydays(month, income_items, overrides_by_income_id, payday_mode)
    return sum_currency(item.amount * len(paydays[item.id]) for item in income_items)


def _build_month_snapshot(
    payment: MonthlyCardPayments,
    projection: Optional[CardMonthProjection],
    base_totals: Dict[AdjustmentCategory, Decimal],
    income_items: List[LineItem],
    adjustments: List[MonthlyAdjustment],
    payday_overrides: PaydayOverrides,
    payday_mode: Optional[PaydayModeSettings],
    loaned_out_items: List[LoanedOutItem],
    base_bank_balance: Decimal,
    cumulative_money_left: Decimal,
) -> Tuple[MonthSnapshot, Decimal]:
    """Fold step: one month in, (snapshot, new cumulative money left) out"""
    month = payment.month
    category_adjustments = {
        category: adjustments_for_month(month, category, adjustments) for category in AdjustmentCategory
    }

    base_income = income_total_for_month(month, income_items, payday_overrides.get(month), payday_mode)
    income_total = normalize_currency(base_income + category_adjustments[AdjustmentCategory.INCOME])
    house_bills_total = normalize_currency(
        base_totals[AdjustmentCategory.HOUSE_BILLS] + category_adjustments[AdjustmentCategory.HOUSE_BILLS]
    )
    shopping_total = normalize_currency(
        base_totals[AdjustmentCategory.SHOPPING] + category_adjustments[AdjustmentCategory.SHOPPING]
    )
    my_bills_total = normalize_currency(
        base_totals[AdjustmentCategory.MY_BILLS] + category_adjustments[AdjustmentCategory.MY_BILLS]
    )
    adjustments_total = sum_currency(category_adjustments.values())

    card_spend_total = projection.total_payment_amount if projection else ZERO
    card_interest_total = projection.total_interest_added if projection else ZERO
    card_balance_total = projection.total_closing_balance if projection else ZERO

    money_left = compute_money_left(
        income_total,
        card_spend_total,
        house_bills_total,
        shopping_total,
        my_bills_total,
        payment.formula_variant_id,
    )
    cumulative_money_left = normalize_currency(cumulative_money_left + money_left)

    outstanding = sum_currency(loan.amount for loan in loaned_out_items if is_loan_outstanding(month, loan))
    paid_back = sum_currency(loan.amount for loan in loaned_out_items if is_loan_paid_back(month, loan))
    money_in_bank = normalize_currency(base_bank_balance + cumulative_money_left - outstanding)

    snapshot = MonthSnapshot(
        month=month,
        income_total=income_total,
        house_bills_total=house_bills_total,
        shopping_total=shopping_total,
        my_bills_total=my_bills_total,
        adjustments_total=adjustments_total,
        card_interest_total=card_interest_total,
        card_balance_total=card_balance_total,
        card_spend_total=card_spend_total,
        loaned_out_outstanding_total=outstanding,
        loaned_out_paid_back_total=paid_back,
        money_in_bank=money_in_bank,
        money_left=money_left,
        formula_variant_id=payment.formula_variant_id,
        inferred=payment.inferred,
    )
    return snapshot, cumulative_money_left


def build_snapshots(
    cards: List[CardAccount],
    monthly_payments: List[MonthlyCardPayments],
    house_bills: List[LineItem],
    income: List[LineItem],
    shopping: List[LineItem],
    my_bills: List[LineItem],
    adjustments: List[MonthlyAdjustment],
    payday_overrides: Optional[PaydayOverrides] = None,
    loaned_out_items: Optional[List[LoanedOutItem]] = None,
    base_bank_balance: object = 0,
    payday_mode: Optional[PaydayModeSettings] = None,
    card_projections: Optional[List[CardMonthProjection]] = None,
) -> List[MonthSnapshot]:
    """
    Build the ordered month snapshot timeline.

    The payment rows are extended through December of their final year and
    the card projection runs over that extended timeline. Months are then
    folded in ascending order, carrying the cumulative money left forward:

        money_in_bank(n) = base + sum(money_left[1..n]) - outstanding_loans(n)

    Pass card_projections to reuse a projection already run over the same
    extended timeline.

    Returns an empty list when there are no payment rows.
    """
    timeline = extend_payments_to_year_end(monthly_payments)
    if not timeline:
        return []

    if card_projections is None:
        card_projections = project_card_balances(cards, timeline)
    projections_by_month = {p.month: p for p in card_projections}
    base_totals = {
        AdjustmentCategory.HOUSE_BILLS: sum_currency(item.amount for item in house_bills),
        AdjustmentCategory.SHOPPING: sum_currency(item.amount for item in shopping),
        AdjustmentCategory.MY_BILLS: sum_currency(item.amount for item in my_bills),
    }
    base_balance = normalize_currency(base_bank_balance)

    snapshots = []
    cumulative_money_left = ZERO
    for payment in timeline:
        snapshot, cumulative_money_left = _build_month_snapshot(
            payment,
            projections_by_month.get(payment.month),
            base_totals,
            income,
            adjustments,
            payday_overrides or {},
            payday_mode,
            loaned_out_items or [],
            base_balance,
            cumulative_money_left,
        )
        snapshots.append(snapshot)

    return snapshots
