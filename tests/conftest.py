"""Pytest fixtures for testing"""

from decimal import Decimal
from typing import Any, Callable, Dict

import pytest

from household_timeline.domain.models import (
    AdjustmentCategory,
    CardAccount,
    FormulaVariant,
    LineItem,
    MonthlyAdjustment,
    MonthlyCardPayments,
    MonthSnapshot,
)


@pytest.fixture
def fluid_card() -> CardAccount:
    """Single card carrying 398 at 12% APR"""
    return CardAccount(
        id="fluid",
        name="Fluid",
        limit=Decimal("450"),
        used_limit=Decimal("398"),
        interest_rate_apr=Decimal("12"),
        due_day_of_month=15,
    )


@pytest.fixture
def spring_payments() -> list[MonthlyCardPayments]:
    """100 a month to the Fluid card in March and April 2026"""
    return [
        MonthlyCardPayments(month="2026-03", by_card_id={"fluid": Decimal("100")}, total=Decimal("100")),
        MonthlyCardPayments(month="2026-04", by_card_id={"fluid": Decimal("100")}, total=Decimal("100")),
    ]


@pytest.fixture
def broadband_adjustments() -> list[MonthlyAdjustment]:
    """+80 house bills in March only, +40 from April onward"""
    return [
        MonthlyAdjustment(
            id="march-double",
            name="Broadband first invoice",
            amount=Decimal("80"),
            category=AdjustmentCategory.HOUSE_BILLS,
            start_month="2026-03",
            end_month="2026-03",
        ),
        MonthlyAdjustment(
            id="from-apr",
            name="Broadband ongoing",
            amount=Decimal("40"),
            category=AdjustmentCategory.HOUSE_BILLS,
            start_month="2026-04",
        ),
    ]


@pytest.fixture
def rent() -> LineItem:
    return LineItem(id="base", name="Base", amount=Decimal("200"))


@pytest.fixture
def salary() -> LineItem:
    return LineItem(id="income", name="Income", amount=Decimal("1000"))


@pytest.fixture
def owner_payload() -> Dict[str, Any]:
    """Raw camelCase payload as the surrounding app would send it"""
    return {
        "ownerId": "owner-1",
        "cards": [
            {"id": "fluid", "name": "Fluid", "limit": 450, "usedLimit": 398, "interestRateApr": 12, "dueDayOfMonth": 15}
        ],
        "monthlyPayments": [
            {"month": "2026-03", "byCardId": {"fluid": 100}, "total": 100, "formulaVariantId": "money-left-standard"},
            {"month": "2026-04", "byCardId": {"fluid": 100}, "total": 100, "formulaVariantId": "money-left-standard"},
        ],
        "houseBills": [{"id": "base", "name": "Base", "amount": 200}],
        "income": [{"id": "income", "name": "Income", "amount": 1000, "dueDayOfMonth": 25}],
        "shopping": [],
        "myBills": [],
        "adjustments": [
            {
                "id": "march-double",
                "name": "Broadband first invoice",
                "amount": 80,
                "category": "houseBills",
                "startMonth": "2026-03",
                "endMonth": "2026-03",
            },
            {
                "id": "from-apr",
                "name": "Broadband ongoing",
                "amount": 40,
                "category": "houseBills",
                "startMonth": "2026-04",
            },
        ],
        "bankAccounts": [
            {"id": "current", "name": "Current", "accountType": "current", "balance": 1000},
            {"id": "savings", "name": "Rainy day", "accountType": "savings", "balance": 500},
        ],
        "bankTransfers": [
            {"id": "t1", "month": "2026-03", "day": 5, "fromAccountId": "current", "toAccountId": "savings", "amount": 100}
        ],
        "savingsGoals": [
            {
                "id": "holiday",
                "name": "Holiday",
                "targetAmount": 1000,
                "currentAmount": 400,
                "monthlyContribution": 200,
                "startMonth": "2026-03",
            }
        ],
        "baseBankBalance": 1500,
    }


@pytest.fixture
def make_snapshot() -> Callable[..., MonthSnapshot]:
    """Factory for hand-built snapshots; every total defaults to zero"""

    def _make(month: str = "2026-03", **overrides: Any) -> MonthSnapshot:
        values: Dict[str, Any] = {
            "month": month,
            "income_total": Decimal("0.00"),
            "house_bills_total": Decimal("0.00"),
            "shopping_total": Decimal("0.00"),
            "my_bills_total": Decimal("0.00"),
            "adjustments_total": Decimal("0.00"),
            "card_interest_total": Decimal("0.00"),
            "card_balance_total": Decimal("0.00"),
            "card_spend_total": Decimal("0.00"),
            "loaned_out_outstanding_total": Decimal("0.00"),
            "loaned_out_paid_back_total": Decimal("0.00"),
            "money_in_bank": Decimal("0.00"),
            "money_left": Decimal("0.00"),
            "formula_variant_id": FormulaVariant.STANDARD,
            "inferred": False,
        }
        for key, value in overrides.items():
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                value = Decimal(str(value))
            values[key] = value
        return MonthSnapshot(**values)

    return _make
