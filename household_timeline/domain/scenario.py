"""What-if scenario evaluation against one month's baseline"""

from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Dict, List, Optional

from household_timeline.domain.currency import ZERO, clamp_non_negative, normalize_currency, sum_currency
from household_timeline.domain.bank import default_spending_account_id
from household_timeline.domain.models import (
    BankAccount,
    BankAccountMonthProjection,
    BankAccountProjection,
    MonthSnapshot,
)


@dataclass(frozen=True)
class ScenarioInput:
    extra_income: Decimal = ZERO
    extra_expenses: Decimal = ZERO
    extra_card_payments: Decimal = ZERO
    account_deltas: Dict[str, Decimal] = field(default_factory=dict)
    note: Optional[str] = None


@dataclass(frozen=True)
class ScenarioFigures:
    income_total: Decimal
    card_spend_total: Decimal
    card_balance_total: Decimal
    money_left: Decimal
    money_in_bank: Decimal
    net_worth: Decimal


@dataclass(frozen=True)
class ScenarioDelta:
    money_left: Decimal
    money_in_bank: Decimal
    card_balance_total: Decimal
    net_worth: Decimal


@dataclass(frozen=True)
class ScenarioAccountProjection:
    entries: List[BankAccountProjection]
    total_closing_balance: Decimal


@dataclass(frozen=True)
class ScenarioResult:
    month: str
    input: ScenarioInput
    base: ScenarioFigures
    projected: ScenarioFigures
    delta: ScenarioDelta
    account_projection: ScenarioAccountProjection
    note: Optional[str] = None


def normalize_scenario_input(scenario_input: ScenarioInput) -> ScenarioInput:
    """Non-numeric values become zero; extra card payments cannot be negative"""
    return ScenarioInput(
        extra_income=normalize_currency(scenario_input.extra_income),
        extra_expenses=normalize_currency(scenario_input.extra_expenses),
        extra_card_payments=clamp_non_negative(scenario_input.extra_card_payments),
        account_deltas={
            account_id: normalize_currency(value)
            for account_id, value in (scenario_input.account_deltas or {}).items()
        },
        note=scenario_input.note,
    )


def _spending_account_id(entries: List[BankAccountProjection]) -> Optional[str]:
    return default_spending_account_id(
        [
            BankAccount(
                id=entry.account_id,
                name=entry.name,
                account_type=entry.account_type,
                balance=entry.closing_balance,
                include_in_net_worth=entry.include_in_net_worth,
            )
            for entry in entries
        ]
    )


def evaluate_scenario(
    month: str,
    snapshot: Optional[MonthSnapshot],
    account_projection: Optional[BankAccountMonthProjection],
    scenario_input: ScenarioInput,
) -> ScenarioResult:
    """
    Apply ad hoc deltas to a month's baseline without touching the baseline.

    - money_left_delta = extra_income - extra_expenses - extra_card_payments,
      applied to the default spending account only
    - account_deltas are applied verbatim to their own accounts
    - projected card balance = max(0, base - extra_card_payments)
    - net_worth = money_in_bank + loaned_out_outstanding - card_balance
    """
    scenario = normalize_scenario_input(scenario_input)

    base_income = snapshot.income_total if snapshot else ZERO
    base_card_spend = snapshot.card_spend_total if snapshot else ZERO
    base_card_balance = snapshot.card_balance_total if snapshot else ZERO
    base_money_left = snapshot.money_left if snapshot else ZERO
    base_money_in_bank = snapshot.money_in_bank if snapshot else ZERO
    loaned_out = snapshot.loaned_out_outstanding_total if snapshot else ZERO

    money_left_delta = normalize_currency(
        scenario.extra_income - scenario.extra_expenses - scenario.extra_card_payments
    )
    projected_income = normalize_currency(base_income + scenario.extra_income)
    projected_card_spend = normalize_currency(base_card_spend + scenario.extra_card_payments)
    projected_card_balance = clamp_non_negative(base_card_balance - scenario.extra_card_payments)
    projected_money_left = normalize_currency(base_money_left + money_left_delta)

    base_entries = list(account_projection.entries) if account_projection else []
    spending_id = _spending_account_id(base_entries)
    projected_entries = []
    for entry in base_entries:
        flow_delta = money_left_delta if entry.account_id == spending_id else ZERO
        closing = normalize_currency(
            entry.closing_balance + scenario.account_deltas.get(entry.account_id, ZERO) + flow_delta
        )
        projected_entries.append(
            replace(
                entry,
                opening_balance=entry.closing_balance,
                closing_balance=closing,
                net_change=normalize_currency(closing - entry.closing_balance),
            )
        )

    if projected_entries:
        projected_money_in_bank = sum_currency(entry.closing_balance for entry in projected_entries)
    else:
        manual_total = sum_currency(scenario.account_deltas.values())
        projected_money_in_bank = normalize_currency(base_money_in_bank + money_left_delta + manual_total)

    base_net_worth = normalize_currency(base_money_in_bank + loaned_out - base_card_balance)
    projected_net_worth = normalize_currency(projected_money_in_bank + loaned_out - projected_card_balance)

    return ScenarioResult(
        month=month,
        note=scenario.note,
        input=scenario,
        base=ScenarioFigures(
            income_total=normalize_currency(base_income),
            card_spend_total=normalize_currency(base_card_spend),
            card_balance_total=normalize_currency(base_card_balance),
            money_left=normalize_currency(base_money_left),
            money_in_bank=normalize_currency(base_money_in_bank),
            net_worth=base_net_worth,
        ),
        projected=ScenarioFigures(
            income_total=projected_income,
            card_spend_total=projected_card_spend,
            card_balance_total=projected_card_balance,
            money_left=projected_money_left,
            money_in_bank=projected_money_in_bank,
            net_worth=projected_net_worth,
        ),
        delta=ScenarioDelta(
            money_left=normalize_currency(projected_money_left - base_money_left),
            money_in_bank=normalize_currency(projected_money_in_bank - base_money_in_bank),
            card_balance_total=normalize_currency(projected_card_balance - base_card_balance),
            net_worth=normalize_currency(projected_net_worth - base_net_worth),
        ),
        account_projection=ScenarioAccountProjection(
            entries=projected_entries,
            total_closing_balance=sum_currency(entry.closing_balance for entry in projected_entries),
        ),
    )
