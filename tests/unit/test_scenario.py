"""Unit tests for what-if scenario evaluation"""

import copy
from decimal import Decimal

import pytest

from household_timeline.domain.bank import build_account_projection
from household_timeline.domain.models import BankAccount, BankTransfer
from household_timeline.domain.scenario import ScenarioInput, evaluate_scenario


@pytest.fixture
def baseline(make_snapshot):
    return make_snapshot(
        "2026-03",
        income_total=1000,
        card_spend_total=100,
        card_balance_total=Decimal("301.98"),
        money_left=620,
        money_in_bank=2120,
        loaned_out_outstanding_total=50,
    )


@pytest.fixture
def account_projection(baseline):
    accounts = [
        BankAccount(id="current", name="Current", account_type="current", balance=Decimal("1000")),
        BankAccount(id="savings", name="Rainy day", account_type="savings", balance=Decimal("500")),
    ]
    transfers = [
        BankTransfer(id="t1", month="2026-03", day=5, from_account_id="current", to_account_id="savings",
                     amount=Decimal("100"))
    ]
    return build_account_projection("2026-03", accounts, transfers, [baseline])


@pytest.fixture
def scenario():
    return ScenarioInput(
        extra_income=Decimal("200"),
        extra_expenses=Decimal("50"),
        extra_card_payments=Decimal("100"),
        account_deltas={"savings": Decimal("25")},
        note="Overtime in March",
    )


def test_deltas_applied(baseline, account_projection, scenario):
    result = evaluate_scenario("2026-03", baseline, account_projection, scenario)

    assert result.projected.money_left == Decimal("670.00")
    assert result.projected.income_total == Decimal("1200.00")
    assert result.projected.card_spend_total == Decimal("200.00")
    assert result.projected.card_balance_total == Decimal("201.98")
    assert result.projected.money_in_bank == Decimal("2195.00")
    assert result.delta.money_left == Decimal("50.00")
    assert result.delta.money_in_bank == Decimal("75.00")
    assert result.delta.card_balance_total == Decimal("-100.00")
    assert result.note == "Overtime in March"


def test_net_worth(baseline, account_projection, scenario):
    """Test net worth = bank + loans out - card balance"""
    result = evaluate_scenario("2026-03", baseline, account_projection, scenario)

    assert result.base.net_worth == Decimal("1868.02")
    assert result.projected.net_worth == Decimal("2043.02")
    assert result.delta.net_worth == Decimal("175.00")


def test_flow_only_hits_spending_account(baseline, account_projection, scenario):
    result = evaluate_scenario("2026-03", baseline, account_projection, scenario)

    entries = {e.account_id: e for e in result.account_projection.entries}
    assert entries["current"].opening_balance == Decimal("1520.00")
    assert entries["current"].closing_balance == Decimal("1570.00")
    assert entries["current"].net_change == Decimal("50.00")
    assert entries["savings"].closing_balance == Decimal("625.00")
    assert result.account_projection.total_closing_balance == Decimal("2195.00")


def test_baseline_not_mutated(baseline, account_projection, scenario):
    before_snapshot = copy.deepcopy(baseline)
    before_projection = copy.deepcopy(account_projection)

    evaluate_scenario("2026-03", baseline, account_projection, scenario)

    assert baseline == before_snapshot
    assert account_projection == before_projection


def test_without_accounts_uses_manual_deltas(baseline, scenario):
    result = evaluate_scenario("2026-03", baseline, None, scenario)

    assert result.account_projection.entries == []
    assert result.projected.money_in_bank == Decimal("2195.00")


def test_negative_card_payment_clamped(baseline, account_projection):
    result = evaluate_scenario(
        "2026-03", baseline, account_projection, ScenarioInput(extra_card_payments=Decimal("-100"))
    )

    assert result.input.extra_card_payments == Decimal("0.00")
    assert result.projected.card_balance_total == Decimal("301.98")
    assert result.delta.money_left == Decimal("0.00")


def test_card_balance_floors_at_zero(baseline, account_projection):
    result = evaluate_scenario(
        "2026-03", baseline, account_projection, ScenarioInput(extra_card_payments=Decimal("500"))
    )

    assert result.projected.card_balance_total == Decimal("0.00")


def test_non_numeric_inputs_treated_as_zero(baseline, account_projection):
    result = evaluate_scenario(
        "2026-03",
        baseline,
        account_projection,
        ScenarioInput(extra_income=float("nan"), extra_expenses="lots", account_deltas={"savings": None}),
    )

    assert result.delta.money_left == Decimal("0.00")
    assert result.delta.money_in_bank == Decimal("0.00")


def test_missing_baseline(scenario):
    result = evaluate_scenario("2026-03", None, None, scenario)

    assert result.base.money_left == Decimal("0.00")
    assert result.projected.money_left == Decimal("50.00")
    assert result.projected.money_in_bank == Decimal("75.00")
