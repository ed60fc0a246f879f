"""Engine entry points - owner timeline, debt simulation, scenario evaluation

Each entry point is a pure function of its inputs. The caller fetches the
entities, calls in, and persists whatever it needs from the result; nothing
here touches storage, the network or the clock (except for metrics/log
timings, which never feed into computed totals).
"""

import time
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Union

from household_timeline.domain.bank import build_account_projection
from household_timeline.domain.debt import simulate_strategy
from household_timeline.domain.ledger import build_planned_ledger_entries
from household_timeline.domain.models import (
    BankAccountMonthProjection,
    CardAccount,
    CardMonthProjection,
    DebtPayoffResult,
    DebtStrategy,
    LedgerEntry,
    MonthSnapshot,
    MonthTimeline,
)
from household_timeline.domain.planning import PlanningSummary, build_planning_summary
from household_timeline.domain.projections import extend_payments_to_year_end, project_card_balances
from household_timeline.domain.scenario import ScenarioInput, ScenarioResult, evaluate_scenario
from household_timeline.domain.snapshots import build_snapshots
from household_timeline.domain.timeline import build_timeline
from household_timeline.infrastructure.observability.logging import (
    log_debt_simulation,
    log_scenario_evaluated,
    log_timeline_computed,
)
from household_timeline.infrastructure.observability.metrics import (
    record_computation,
    record_debt_simulation,
    record_inferred_months,
)
from household_timeline.schemas import DebtSimulationRequest, OwnerEntities, ScenarioInputSchema
from household_timeline.utils.date_utils import validate_month_key


@dataclass(frozen=True)
class OwnerTimeline:
    """Everything derived for one owner and one selected month"""

    selected_month: str
    available_months: List[str]
    snapshots: List[MonthSnapshot]
    snapshot: Optional[MonthSnapshot]
    card_projection: Optional[CardMonthProjection]
    account_projection: BankAccountMonthProjection
    timeline: MonthTimeline
    ledger_entries: List[LedgerEntry]
    planning: PlanningSummary


def compute_owner_timeline(
    entities: Union[OwnerEntities, Mapping[str, Any]],
    selected_month: str,
    now: str = "",
) -> OwnerTimeline:
    """
    Recompute the full timeline for one owner.

    Flow:
    1. Validate and convert the raw entities
    2. Extend card payments to year end and project card balances
    3. Fold months into snapshots
    4. Build the selected month's account projection, events and planned ledger
    5. Summarize planning (paydays, savings, debt payoff, net worth, analytics)

    `now` only stamps created_at/updated_at on planned ledger entries.

    Raises:
        InvalidMonthKeyError: If selected_month is not YYYY-MM
        pydantic.ValidationError: If an entity carries a malformed month key
    """
    start_time = time.time()
    validate_month_key(selected_month)
    if not isinstance(entities, OwnerEntities):
        entities = OwnerEntities.model_validate(entities)

    cards = [card.to_domain() for card in entities.cards]
    payments = [payment.to_domain() for payment in entities.monthly_payments]
    house_bills = [item.to_domain() for item in entities.house_bills]
    income = [item.to_domain() for item in entities.income]
    shopping = [item.to_domain() for item in entities.shopping]
    my_bills = [item.to_domain() for item in entities.my_bills]
    adjustments = [adjustment.to_domain() for adjustment in entities.adjustments]
    loaned_out = [loan.to_domain() for loan in entities.loaned_out_items]
    goals = [goal.to_domain() for goal in entities.savings_goals]
    accounts = [account.to_domain() for account in entities.bank_accounts]
    transfers = [transfer.to_domain() for transfer in entities.bank_transfers]
    payday_mode = entities.payday_mode.to_domain() if entities.payday_mode else None
    payday_overrides = entities.income_paydays

    timeline_payments = extend_payments_to_year_end(payments)
    projections = project_card_balances(cards, timeline_payments)
    snapshots = build_snapshots(
        cards,
        timeline_payments,
        house_bills,
        income,
        shopping,
        my_bills,
        adjustments,
        payday_overrides,
        loaned_out,
        entities.base_bank_balance,
        payday_mode,
        card_projections=projections,
    )

    snapshot = next((s for s in snapshots if s.month == selected_month), None)
    card_projection = next((p for p in projections if p.month == selected_month), None)
    selected_payments = next((p for p in timeline_payments if p.month == selected_month), None)
    month_overrides = payday_overrides.get(selected_month, {})

    account_projection = build_account_projection(selected_month, accounts, transfers, snapshots)
    timeline = build_timeline(
        selected_month,
        cards,
        selected_payments,
        income,
        month_overrides,
        house_bills,
        shopping,
        my_bills,
        adjustments,
        loaned_out,
        payday_mode,
    )
    ledger_entries = build_planned_ledger_entries(selected_month, timeline.events, now)
    planning = build_planning_summary(
        selected_month,
        snapshots,
        snapshot,
        cards,
        selected_payments,
        card_projection.entries if card_projection else {},
        income,
        month_overrides,
        payday_mode,
        goals,
    )

    explicit_months = {payment.month for payment in payments}
    inferred_count = sum(1 for payment in timeline_payments if payment.month not in explicit_months)
    duration = time.time() - start_time
    record_computation("timeline", duration)
    record_inferred_months(inferred_count)
    log_timeline_computed(
        selected_month,
        len(snapshots),
        inferred_count,
        len(timeline.events),
        duration * 1000,
        owner_id=entities.owner_id,
    )

    return OwnerTimeline(
        selected_month=selected_month,
        available_months=[s.month for s in snapshots],
        snapshots=snapshots,
        snapshot=snapshot,
        card_projection=card_projection,
        account_projection=account_projection,
        timeline=timeline,
        ledger_entries=ledger_entries,
        planning=planning,
    )


def run_debt_simulation(
    cards: List[CardAccount],
    starting_balances: Mapping[str, object],
    monthly_budget: object,
    configured_payments: Optional[Mapping[str, object]] = None,
) -> Dict[DebtStrategy, DebtPayoffResult]:
    """Simulate every payoff strategy over the same inputs"""
    results = {}
    for strategy in DebtStrategy:
        start_time = time.time()
        result = simulate_strategy(strategy, cards, starting_balances, monthly_budget, configured_payments)
        duration = time.time() - start_time

        record_computation("debt_simulation", duration)
        record_debt_simulation(strategy.value, result.months_to_debt_free)
        log_debt_simulation(strategy.value, result.months_to_debt_free, len(cards), duration * 1000)
        results[strategy] = result

    return results


def run_debt_simulation_request(
    request: Union[DebtSimulationRequest, Mapping[str, Any]],
) -> Dict[DebtStrategy, DebtPayoffResult]:
    """run_debt_simulation for a raw payload"""
    if not isinstance(request, DebtSimulationRequest):
        request = DebtSimulationRequest.model_validate(request)
    return run_debt_simulation(
        [card.to_domain() for card in request.cards],
        request.starting_balances,
        request.monthly_budget,
        request.configured_payments,
    )


def run_scenario(
    selected_month: str,
    snapshot: Optional[MonthSnapshot],
    account_projection: Optional[BankAccountMonthProjection],
    scenario_input: Union[ScenarioInput, ScenarioInputSchema, Mapping[str, Any]],
) -> ScenarioResult:
    """
    Evaluate a what-if scenario against a baseline month.

    The baseline snapshot and projection are read, never modified.
    """
    start_time = time.time()
    validate_month_key(selected_month)
    if isinstance(scenario_input, ScenarioInputSchema):
        scenario_input = scenario_input.to_domain()
    elif not isinstance(scenario_input, ScenarioInput):
        scenario_input = ScenarioInputSchema.model_validate(scenario_input).to_domain()

    result = evaluate_scenario(selected_month, snapshot, account_projection, scenario_input)

    duration = time.time() - start_time
    record_computation("scenario", duration)
    log_scenario_evaluated(
        selected_month,
        str(result.delta.money_left),
        str(result.delta.net_worth),
        duration * 1000,
    )
    return result
