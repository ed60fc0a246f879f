"""Planning summaries - savings goals, net worth, month-over-month analytics"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Mapping, Optional

from household_timeline.config import settings
from household_timeline.domain.currency import ZERO, clamp_non_negative, normalize_currency, sum_currency, to_decimal
from household_timeline.domain.debt import build_debt_payoff_summary
from household_timeline.domain.models import (
    CardAccount,
    CardMonthProjectionEntry,
    DebtPayoffSummary,
    LineItem,
    MonthlyCardPayments,
    MonthSnapshot,
    PaydayModeSettings,
    SavingsGoal,
    SavingsGoalStatus,
)
from household_timeline.domain.paydays import resolve_paydays
from household_timeline.utils.date_utils import add_months, is_month_in_range, month_range_inclusive

GOAL_EPSILON = Decimal("0.0001")


@dataclass(frozen=True)
class SavingsGoalProjection:
    id: str
    name: str
    status: SavingsGoalStatus
    target_amount: Decimal
    current_amount: Decimal
    monthly_contribution: Decimal
    start_month: str
    target_month: Optional[str]
    projected_completion_month: Optional[str]
    remaining_amount: Decimal
    month_contribution: Decimal


@dataclass(frozen=True)
class SavingsProjectionSummary:
    selected_month: str
    monthly_target_total: Decimal
    projected_money_left_after_savings: Decimal
    goals: List[SavingsGoalProjection]
    at_risk_goal_ids: List[str]


@dataclass(frozen=True)
class NetWorthSummary:
    month: str
    assets: Decimal
    liabilities: Decimal
    loaned_out_recoverable: Decimal
    net_worth: Decimal
    month_delta: Decimal


@dataclass(frozen=True)
class CategoryDelta:
    key: str
    label: str
    current_value: Decimal
    previous_value: Decimal
    delta: Decimal
    delta_percent: Optional[Decimal]


@dataclass(frozen=True)
class AnalyticsSummary:
    month: str
    previous_month: Optional[str]
    deltas: List[CategoryDelta]
    drift_alerts: List[CategoryDelta]


@dataclass(frozen=True)
class PaydayModeSummary:
    enabled: bool
    anchor_date: str
    cycle_days: int
    income_ids: List[str]
    month_paydays_by_income_id: Dict[str, List[int]]


@dataclass(frozen=True)
class PlanningSummary:
    payday_mode: PaydayModeSummary
    savings: SavingsProjectionSummary
    debt_payoff: DebtPayoffSummary
    net_worth: NetWorthSummary
    analytics: AnalyticsSummary


def projected_goal_completion_month(goal: SavingsGoal, selected_month: str) -> Optional[str]:
    """
    First month the goal reaches its target, or None.

    Contributions only accrue while the goal is active and inside its
    [start_month, target_month] window; the search stops at the target month
    or settings.savings_horizon_months past the selected month, whichever is
    earlier.
    """
    target = to_decimal(goal.target_amount)
    running = normalize_currency(max(ZERO, min(target, to_decimal(goal.current_amount))))
    if running >= target - GOAL_EPSILON:
        return goal.start_month

    horizon_end = add_months(selected_month, settings.savings_horizon_months)
    loop_end = goal.target_month if goal.target_month and goal.target_month < horizon_end else horizon_end

    for month in month_range_inclusive(goal.start_month, loop_end):
        if goal.status != SavingsGoalStatus.ACTIVE or not is_month_in_range(
            month, goal.start_month, goal.target_month
        ):
            continue
        remaining = clamp_non_negative(target - running)
        if remaining <= GOAL_EPSILON:
            return month
        running = normalize_currency(running + min(remaining, clamp_non_negative(goal.monthly_contribution)))
        if running >= target - GOAL_EPSILON:
            return month

    return None


def build_savings_projection(
    selected_month: str, selected_snapshot: Optional[MonthSnapshot], goals: List[SavingsGoal]
) -> SavingsProjectionSummary:
    ordered = sorted(goals, key=lambda g: (g.start_month, g.name))
    projections = []
    for goal in ordered:
        active = goal.status == SavingsGoalStatus.ACTIVE and is_month_in_range(
            selected_month, goal.start_month, goal.target_month
        )
        remaining = clamp_non_negative(to_decimal(goal.target_amount) - to_decimal(goal.current_amount))
        month_contribution = (
            normalize_currency(min(remaining, to_decimal(goal.monthly_contribution))) if active else ZERO
        )
        projections.append(
            SavingsGoalProjection(
                id=goal.id,
                name=goal.name,
                status=goal.status,
                target_amount=normalize_currency(goal.target_amount),
                current_amount=normalize_currency(goal.current_amount),
                monthly_contribution=normalize_currency(goal.monthly_contribution),
                start_month=goal.start_month,
                target_month=goal.target_month,
                projected_completion_month=projected_goal_completion_month(goal, selected_month),
                remaining_amount=remaining,
                month_contribution=month_contribution,
            )
        )

    monthly_target_total = sum_currency(p.month_contribution for p in projections)
    money_left = selected_snapshot.money_left if selected_snapshot else ZERO

    at_risk = [
        p.id
        for p in projections
        if p.target_month
        and p.status == SavingsGoalStatus.ACTIVE
        and (p.projected_completion_month is None or p.projected_completion_month > p.target_month)
    ]

    return SavingsProjectionSummary(
        selected_month=selected_month,
        monthly_target_total=monthly_target_total,
        projected_money_left_after_savings=normalize_currency(money_left - monthly_target_total),
        goals=projections,
        at_risk_goal_ids=at_risk,
    )


def _net_worth(snapshot: MonthSnapshot) -> Decimal:
    return normalize_currency(
        snapshot.money_in_bank + snapshot.loaned_out_outstanding_total - max(ZERO, snapshot.card_balance_total)
    )


def _previous_snapshot(selected_month: str, snapshots: List[MonthSnapshot]) -> Optional[MonthSnapshot]:
    months = [s.month for s in snapshots]
    if selected_month not in months:
        return None
    index = months.index(selected_month)
    return snapshots[index - 1] if index > 0 else None


def build_net_worth_summary(
    selected_month: str, snapshots: List[MonthSnapshot], selected_snapshot: Optional[MonthSnapshot]
) -> NetWorthSummary:
    if selected_snapshot is None:
        return NetWorthSummary(selected_month, ZERO, ZERO, ZERO, ZERO, ZERO)

    assets = normalize_currency(selected_snapshot.money_in_bank + selected_snapshot.loaned_out_outstanding_total)
    liabilities = clamp_non_negative(selected_snapshot.card_balance_total)
    net_worth = normalize_currency(assets - liabilities)
    previous = _previous_snapshot(selected_month, snapshots)
    previous_net_worth = _net_worth(previous) if previous else net_worth

    return NetWorthSummary(
        month=selected_month,
        assets=assets,
        liabilities=liabilities,
        loaned_out_recoverable=normalize_currency(selected_snapshot.loaned_out_outstanding_total),
        net_worth=net_worth,
        month_delta=normalize_currency(net_worth - previous_net_worth),
    )


def percentage_delta(current: Decimal, previous: Decimal) -> Optional[Decimal]:
    """Percent change vs previous; None when previous is zero but current is not"""
    if abs(previous) < GOAL_EPSILON:
        return ZERO if abs(current) < GOAL_EPSILON else None
    return normalize_currency((current - previous) / abs(previous) * 100)


ANALYTICS_CATEGORIES = (
    ("income", "Income", "income_total"),
    ("cardSpend", "Card spend", "card_spend_total"),
    ("houseBills", "House bills", "house_bills_total"),
    ("shopping", "Shopping", "shopping_total"),
    ("myBills", "My bills", "my_bills_total"),
    ("adjustments", "Adjustments", "adjustments_total"),
    ("moneyLeft", "Money left", "money_left"),
    ("moneyInBank", "Money in bank", "money_in_bank"),
)


def build_analytics_summary(
    selected_month: str, snapshots: List[MonthSnapshot], selected_snapshot: Optional[MonthSnapshot]
) -> AnalyticsSummary:
    """Month-over-month deltas and the largest drifts worth flagging"""
    previous = _previous_snapshot(selected_month, snapshots)
    if selected_snapshot is None or previous is None:
        return AnalyticsSummary(
            month=selected_month,
            previous_month=previous.month if previous else None,
            deltas=[],
            drift_alerts=[],
        )

    deltas = []
    for key, label, attribute in ANALYTICS_CATEGORIES:
        current_value = normalize_currency(getattr(selected_snapshot, attribute))
        previous_value = normalize_currency(getattr(previous, attribute))
        deltas.append(
            CategoryDelta(
                key=key,
                label=label,
                current_value=current_value,
                previous_value=previous_value,
                delta=normalize_currency(current_value - previous_value),
                delta_percent=percentage_delta(current_value, previous_value),
            )
        )

    min_delta = to_decimal(settings.drift_min_delta)
    min_percent = to_decimal(settings.drift_min_percent)
    drift_alerts = sorted(
        (
            d
            for d in deltas
            if d.delta_percent is not None and abs(d.delta) >= min_delta and abs(d.delta_percent) >= min_percent
        ),
        key=lambda d: -abs(d.delta_percent),
    )[: settings.drift_max_alerts]

    return AnalyticsSummary(
        month=selected_month,
        previous_month=previous.month,
        deltas=deltas,
        drift_alerts=drift_alerts,
    )


def build_planning_summary(
    selected_month: str,
    snapshots: List[MonthSnapshot],
    selected_snapshot: Optional[MonthSnapshot],
    cards: List[CardAccount],
    selected_payments: Optional[MonthlyCardPayments],
    projection_by_card: Mapping[str, CardMonthProjectionEntry],
    income: List[LineItem],
    payday_overrides_by_income_id: Optional[Mapping[str, Iterable[int]]],
    payday_mode: Optional[PaydayModeSettings],
    savings_goals: List[SavingsGoal],
) -> PlanningSummary:
    paydays = resolve_paydays(selected_month, income, payday_overrides_by_income_id, payday_mode)

    return PlanningSummary(
        payday_mode=PaydayModeSummary(
            enabled=bool(payday_mode and payday_mode.enabled),
            anchor_date=payday_mode.anchor_date if payday_mode else "",
            cycle_days=payday_mode.cycle_days if payday_mode else settings.default_cycle_days,
            income_ids=list(payday_mode.income_ids) if payday_mode else [],
            month_paydays_by_income_id=paydays,
        ),
        savings=build_savings_projection(selected_month, selected_snapshot, savings_goals),
        debt_payoff=build_debt_payoff_summary(cards, projection_by_card, selected_payments),
        net_worth=build_net_worth_summary(selected_month, snapshots, selected_snapshot),
        analytics=build_analytics_summary(selected_month, snapshots, selected_snapshot),
    )
