"""Domain models - pure Python dataclasses representing household finance entities"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional


class FormulaVariant(str, Enum):
    """Money-left calculation branches preserved from the legacy workbook"""

    STANDARD = "money-left-standard"
    MAY_QUIRK = "money-left-may-quirk"  # My bills omitted from money left


class AdjustmentCategory(str, Enum):
    INCOME = "income"
    HOUSE_BILLS = "houseBills"
    SHOPPING = "shopping"
    MY_BILLS = "myBills"


class LoanStatus(str, Enum):
    OUTSTANDING = "outstanding"
    PAID_BACK = "paidBack"


class SavingsGoalStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class LedgerStatus(str, Enum):
    PLANNED = "planned"
    POSTED = "posted"
    PAID = "paid"


class DebtStrategy(str, Enum):
    SNOWBALL = "snowball"
    AVALANCHE = "avalanche"


@dataclass(frozen=True)
class MinimumPaymentRule:
    """Card minimum payment: a fixed amount or a percent of statement balance"""

    type: str  # "fixed" or "percent"
    value: Decimal


@dataclass
class CardAccount:
    """Revolving credit line; used_limit is the current real-world balance"""

    id: str
    name: str
    limit: Decimal
    used_limit: Decimal
    interest_rate_apr: Decimal
    due_day_of_month: Optional[int] = None
    minimum_payment_rule: Optional[MinimumPaymentRule] = None


@dataclass
class MonthlyCardPayments:
    """Card payments planned for one month"""

    month: str
    by_card_id: Dict[str, Decimal]
    total: Decimal
    formula_variant_id: FormulaVariant = FormulaVariant.STANDARD
    formula_expression: Optional[str] = None
    inferred: bool = False


@dataclass
class LineItem:
    """Flat recurring monthly value (house bill, income, shopping, my bill)"""

    id: str
    name: str
    amount: Decimal
    due_day_of_month: Optional[int] = None


@dataclass
class MonthlyAdjustment:
    """Bounded-range override to a category total; no end_month means open-ended"""

    id: str
    name: str
    amount: Decimal
    category: AdjustmentCategory
    start_month: str
    end_month: Optional[str] = None
    due_day_of_month: Optional[int] = None
    source_type: Optional[str] = None  # "loan", "bonus" or "other"


@dataclass
class LoanedOutItem:
    """Money lent to someone else"""

    id: str
    name: str
    amount: Decimal
    start_month: str
    status: LoanStatus = LoanStatus.OUTSTANDING
    paid_back_month: Optional[str] = None


@dataclass
class SavingsGoal:
    id: str
    name: str
    target_amount: Decimal
    current_amount: Decimal
    monthly_contribution: Decimal
    start_month: str
    target_month: Optional[str] = None
    status: SavingsGoalStatus = SavingsGoalStatus.ACTIVE


@dataclass
class BankAccount:
    id: str
    name: str
    account_type: str  # "current", "savings", "cash" or "other"
    balance: Decimal
    include_in_net_worth: bool = True


@dataclass
class BankTransfer:
    """Value moved between two accounts on a given day"""

    id: str
    month: str
    day: int
    from_account_id: str
    to_account_id: str
    amount: Decimal
    note: Optional[str] = None


@dataclass
class PaydayModeSettings:
    """Cyclical income schedule driven by an anchor date and cycle length"""

    enabled: bool
    anchor_date: str  # YYYY-MM-DD
    cycle_days: int = 28
    income_ids: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class CardMonthProjectionEntry:
    card_id: str
    opening_balance: Decimal
    interest_rate_apr: Decimal
    interest_added: Decimal
    payment_amount: Decimal
    closing_balance: Decimal


@dataclass(frozen=True)
class CardMonthProjection:
    """Simulated balances for every card in one month"""

    month: str
    entries: Dict[str, CardMonthProjectionEntry]
    total_interest_added: Decimal
    total_payment_amount: Decimal
    total_closing_balance: Decimal


@dataclass(frozen=True)
class MonthSnapshot:
    """One month's fully aggregated financial totals"""

    month: str
    income_total: Decimal
    house_bills_total: Decimal
    shopping_total: Decimal
    my_bills_total: Decimal
    adjustments_total: Decimal
    card_interest_total: Decimal
    card_balance_total: Decimal
    card_spend_total: Decimal
    loaned_out_outstanding_total: Decimal
    loaned_out_paid_back_total: Decimal
    money_in_bank: Decimal
    money_left: Decimal
    formula_variant_id: FormulaVariant
    inferred: bool


@dataclass(frozen=True)
class DebtPayoffResult:
    """Outcome of one debt payoff strategy; months_to_debt_free is None if never cleared"""

    strategy: DebtStrategy
    monthly_budget: Decimal
    months_to_debt_free: Optional[int]
    total_interest: Decimal
    total_paid: Decimal
    payoff_order: List[str]


@dataclass(frozen=True)
class DebtPayoffSummary:
    total_debt: Decimal
    monthly_budget: Decimal
    by_strategy: Dict[DebtStrategy, DebtPayoffResult]


@dataclass(frozen=True)
class TimelineEvent:
    """Dated projected movement; debit negative, credit positive"""

    id: str
    type: str  # "card-due", "bill-due", "income", "adjustment" or "loaned-out"
    title: str
    category: str
    date: str
    day: int
    amount: Decimal
    subtitle: Optional[str] = None


@dataclass(frozen=True)
class MonthTimeline:
    month: str
    events: List[TimelineEvent]


@dataclass(frozen=True)
class LedgerEntry:
    """Ledger row derived from a timeline event; status only moves forward"""

    month: str
    date: str
    day: int
    title: str
    category: str
    amount: Decimal
    status: LedgerStatus
    source_type: str
    source_id: str
    subtitle: Optional[str] = None
    posted_at: Optional[str] = None
    paid_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


@dataclass(frozen=True)
class BankAccountProjection:
    account_id: str
    name: str
    account_type: str
    include_in_net_worth: bool
    opening_balance: Decimal
    closing_balance: Decimal
    net_change: Decimal


@dataclass(frozen=True)
class BankAccountMonthProjection:
    month: str
    entries: List[BankAccountProjection]
    total_opening_balance: Decimal
    total_closing_balance: Decimal
    net_movement_applied: Decimal
