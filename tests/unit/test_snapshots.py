"""Unit tests for month snapshot aggregation"""

from dataclasses import replace
from decimal import Decimal

import pytest

from household_timeline.domain.models import FormulaVariant, LineItem, LoanedOutItem, LoanStatus
from household_timeline.domain.projections import extend_payments_to_year_end, project_card_balances
from household_timeline.domain.snapshots import build_snapshots, compute_money_left, is_loan_outstanding


@pytest.fixture
def snapshots(fluid_card, spring_payments, rent, salary, broadband_adjustments):
    return build_snapshots(
        [fluid_card],
        spring_payments,
        [rent],
        [salary],
        [],
        [],
        broadband_adjustments,
    )


def test_march_and_april_totals(snapshots):
    """Test card interest, balances and money left for the first two months"""
    march, april = snapshots[0], snapshots[1]

    assert march.month == "2026-03"
    assert march.card_interest_total == Decimal("3.98")
    assert march.card_balance_total == Decimal("301.98")
    assert march.house_bills_total == Decimal("280.00")
    assert march.adjustments_total == Decimal("80.00")
    assert march.money_left == Decimal("620.00")

    assert april.card_interest_total == Decimal("3.02")
    assert april.card_balance_total == Decimal("205.00")
    assert april.house_bills_total == Decimal("240.00")
    assert april.adjustments_total == Decimal("40.00")
    assert april.money_left == Decimal("660.00")


def test_timeline_runs_to_december(snapshots):
    assert [s.month for s in snapshots] == [f"2026-{m:02d}" for m in range(3, 13)]
    assert not snapshots[1].inferred
    assert snapshots[2].inferred


def test_inferred_month_has_no_card_spend(snapshots):
    """Test May carries interest but no payment"""
    may = snapshots[2]

    assert may.card_spend_total == Decimal("0.00")
    assert may.card_interest_total == Decimal("2.05")
    assert may.card_balance_total == Decimal("207.05")
    assert may.money_left == Decimal("760.00")


def test_money_in_bank_accumulates(snapshots):
    assert snapshots[0].money_in_bank == Decimal("620.00")
    assert snapshots[1].money_in_bank == Decimal("1280.00")
    assert snapshots[2].money_in_bank == Decimal("2040.00")


def test_money_in_bank_includes_base_balance(fluid_card, spring_payments, rent, salary, broadband_adjustments):
    result = build_snapshots(
        [fluid_card], spring_payments, [rent], [salary], [], [], broadband_adjustments, base_bank_balance=500
    )

    assert result[0].money_in_bank == Decimal("1120.00")
    assert result[1].money_in_bank == Decimal("1780.00")


def test_build_is_idempotent(fluid_card, spring_payments, rent, salary, broadband_adjustments):
    """Test two builds from identical inputs produce identical snapshots"""
    first = build_snapshots([fluid_card], spring_payments, [rent], [salary], [], [], broadband_adjustments)
    second = build_snapshots([fluid_card], spring_payments, [rent], [salary], [], [], broadband_adjustments)

    assert first == second


def test_no_payment_rows_yields_empty(fluid_card, rent, salary):
    assert build_snapshots([fluid_card], [], [rent], [salary], [], [], []) == []


def test_quirk_variant_skips_my_bills(fluid_card, spring_payments, rent, salary, broadband_adjustments):
    """Test the quirk month leaves my bills out of money left"""
    payments = [spring_payments[0], replace(spring_payments[1], formula_variant_id=FormulaVariant.MAY_QUIRK)]
    my_bills = [LineItem(id="phone", name="Phone", amount=Decimal("50"))]

    result = build_snapshots([fluid_card], payments, [rent], [salary], [], my_bills, broadband_adjustments)

    assert result[0].money_left == Decimal("570.00")
    assert result[1].my_bills_total == Decimal("50.00")
    assert result[1].money_left == Decimal("660.00")
    assert result[1].formula_variant_id == FormulaVariant.MAY_QUIRK


def test_compute_money_left_branches():
    args = (Decimal("1000"), Decimal("100"), Decimal("200"), Decimal("50"), Decimal("25"))

    assert compute_money_left(*args, FormulaVariant.STANDARD) == Decimal("625.00")
    assert compute_money_left(*args, FormulaVariant.MAY_QUIRK) == Decimal("650.00")


def test_loaned_out_reduces_money_in_bank_until_paid_back(fluid_card, spring_payments, rent, salary, broadband_adjustments):
    loan = LoanedOutItem(
        id="sis",
        name="Sister",
        amount=Decimal("300"),
        start_month="2026-04",
        status=LoanStatus.PAID_BACK,
        paid_back_month="2026-06",
    )
    result = build_snapshots(
        [fluid_card], spring_payments, [rent], [salary], [], [], broadband_adjustments, loaned_out_items=[loan]
    )
    by_month = {s.month: s for s in result}

    assert by_month["2026-03"].loaned_out_outstanding_total == Decimal("0.00")
    assert by_month["2026-04"].loaned_out_outstanding_total == Decimal("300.00")
    assert by_month["2026-04"].money_in_bank == Decimal("980.00")
    assert by_month["2026-05"].loaned_out_outstanding_total == Decimal("300.00")
    assert by_month["2026-06"].loaned_out_outstanding_total == Decimal("0.00")
    assert by_month["2026-06"].loaned_out_paid_back_total == Decimal("300.00")
    assert by_month["2026-06"].money_in_bank == Decimal("2800.00")
    assert by_month["2026-07"].loaned_out_paid_back_total == Decimal("300.00")


def test_money_in_bank_identity_holds_every_month(fluid_card, spring_payments, rent, salary, broadband_adjustments):
    """Test money in bank = base + running money left - outstanding loans"""
    loan = LoanedOutItem(id="l", name="Friend", amount=Decimal("120"), start_month="2026-05")
    result = build_snapshots(
        [fluid_card],
        spring_payments,
        [rent],
        [salary],
        [LineItem(id="food", name="Food", amount=Decimal("123.45"))],
        [],
        broadband_adjustments,
        loaned_out_items=[loan],
        base_bank_balance="250.10",
    )

    running = Decimal("0")
    for snapshot in result:
        running += snapshot.money_left
        assert snapshot.money_in_bank == Decimal("250.10") + running - snapshot.loaned_out_outstanding_total


def test_payday_overrides_multiply_income(fluid_card, spring_payments, rent, salary):
    result = build_snapshots(
        [fluid_card],
        spring_payments,
        [rent],
        [salary],
        [],
        [],
        [],
        payday_overrides={"2026-03": {"income": [1, 15]}},
    )

    assert result[0].income_total == Decimal("2000.00")
    assert result[1].income_total == Decimal("1000.00")


def test_loan_outstanding_rules():
    """Test status and paid-back month combinations"""
    open_loan = LoanedOutItem(id="a", name="A", amount=Decimal("10"), start_month="2026-02")
    repaid_without_month = replace(open_loan, status=LoanStatus.PAID_BACK)

    assert not is_loan_outstanding("2026-01", open_loan)
    assert is_loan_outstanding("2026-02", open_loan)
    assert is_loan_outstanding("2030-01", open_loan)
    assert not is_loan_outstanding("2026-03", repaid_without_month)


def test_precomputed_card_projections_reused(fluid_card, spring_payments, rent, salary, broadband_adjustments):
    """Test passing the extended timeline's projection gives the same snapshots"""
    timeline = extend_payments_to_year_end(spring_payments)
    projections = project_card_balances([fluid_card], timeline)

    reused = build_snapshots(
        [fluid_card], timeline, [rent], [salary], [], [], broadband_adjustments, card_projections=projections
    )
    fresh = build_snapshots([fluid_card], spring_payments, [rent], [salary], [], [], broadband_adjustments)

    assert reused == fresh
    assert reused[1].card_balance_total == Decimal("205.00")
