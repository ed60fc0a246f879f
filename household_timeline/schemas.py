"""Pydantic schemas that validate raw entity payloads and convert them to domain models

Monetary fields never fail validation: anything that is not a finite number
becomes 0. Names, days and cycle lengths fall back to defaults the same way.
Month keys are strict and raise on anything but YYYY-MM.
"""

from decimal import Decimal
from typing import Annotated, Any, Dict, List, Literal, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field
from pydantic.alias_generators import to_camel

from household_timeline.domain.currency import to_decimal
from household_timeline.domain.models import (
    AdjustmentCategory,
    BankAccount,
    BankTransfer,
    CardAccount,
    FormulaVariant,
    LineItem,
    LoanedOutItem,
    LoanStatus,
    MinimumPaymentRule,
    MonthlyAdjustment,
    MonthlyCardPayments,
    PaydayModeSettings,
    SavingsGoal,
    SavingsGoalStatus,
)
from household_timeline.domain.paydays import normalize_cycle_days
from household_timeline.domain.projections import infer_formula_variant
from household_timeline.domain.scenario import ScenarioInput
from household_timeline.utils.date_utils import validate_month_key


def _coerce_day(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _coerce_transfer_day(value: Any) -> int:
    day = _coerce_day(value)
    if day is None:
        return 1
    return min(31, max(1, day))


def _coerce_name(value: Any) -> Any:
    return "" if value is None else value


Money = Annotated[Decimal, BeforeValidator(to_decimal)]
MonthKey = Annotated[str, AfterValidator(validate_month_key)]
DayOfMonth = Annotated[Optional[int], BeforeValidator(_coerce_day)]
TransferDay = Annotated[int, BeforeValidator(_coerce_transfer_day)]
CycleDays = Annotated[int, BeforeValidator(normalize_cycle_days)]
Name = Annotated[str, BeforeValidator(_coerce_name)]


class EngineModel(BaseModel):
    """Accepts camelCase keys from the surrounding app as well as snake_case"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class MinimumPaymentRuleSchema(EngineModel):
    type: Literal["fixed", "percent"]
    value: Money = Decimal(0)

    def to_domain(self) -> MinimumPaymentRule:
        return MinimumPaymentRule(type=self.type, value=self.value)


class CardAccountSchema(EngineModel):
    id: str = Field(..., min_length=1)
    name: Name = ""
    limit: Money = Decimal(0)
    used_limit: Money = Decimal(0)
    interest_rate_apr: Money = Decimal(0)
    due_day_of_month: DayOfMonth = None
    minimum_payment_rule: Optional[MinimumPaymentRuleSchema] = None

    def to_domain(self) -> CardAccount:
        return CardAccount(
            id=self.id,
            name=self.name or self.id,
            limit=self.limit,
            used_limit=self.used_limit,
            interest_rate_apr=self.interest_rate_apr,
            due_day_of_month=self.due_day_of_month,
            minimum_payment_rule=self.minimum_payment_rule.to_domain() if self.minimum_payment_rule else None,
        )


class MonthlyCardPaymentsSchema(EngineModel):
    month: MonthKey
    by_card_id: Dict[str, Money] = Field(default_factory=dict)
    total: Optional[Money] = None
    formula_variant_id: Optional[FormulaVariant] = None
    formula_expression: Optional[str] = None
    inferred: bool = False

    def to_domain(self) -> MonthlyCardPayments:
        total = self.total if self.total is not None else sum(self.by_card_id.values(), Decimal(0))
        return MonthlyCardPayments(
            month=self.month,
            by_card_id=dict(self.by_card_id),
            total=total,
            formula_variant_id=self.formula_variant_id or infer_formula_variant(self.formula_expression),
            formula_expression=self.formula_expression,
            inferred=self.inferred,
        )


class LineItemSchema(EngineModel):
    id: str = Field(..., min_length=1)
    name: Name = ""
    amount: Money = Decimal(0)
    due_day_of_month: DayOfMonth = None

    def to_domain(self) -> LineItem:
        return LineItem(id=self.id, name=self.name, amount=self.amount, due_day_of_month=self.due_day_of_month)


class MonthlyAdjustmentSchema(EngineModel):
    id: str = Field(..., min_length=1)
    name: Name = ""
    amount: Money = Decimal(0)
    category: AdjustmentCategory
    start_month: MonthKey
    end_month: Optional[MonthKey] = None
    due_day_of_month: DayOfMonth = None
    source_type: Optional[Literal["loan", "bonus", "other"]] = None

    def to_domain(self) -> MonthlyAdjustment:
        return MonthlyAdjustment(
            id=self.id,
            name=self.name,
            amount=self.amount,
            category=self.category,
            start_month=self.start_month,
            end_month=self.end_month,
            due_day_of_month=self.due_day_of_month,
            source_type=self.source_type,
        )


class LoanedOutItemSchema(EngineModel):
    id: str = Field(..., min_length=1)
    name: Name = ""
    amount: Money = Decimal(0)
    start_month: MonthKey
    status: LoanStatus = LoanStatus.OUTSTANDING
    paid_back_month: Optional[MonthKey] = None

    def to_domain(self) -> LoanedOutItem:
        return LoanedOutItem(
            id=self.id,
            name=self.name,
            amount=self.amount,
            start_month=self.start_month,
            status=self.status,
            paid_back_month=self.paid_back_month,
        )


class SavingsGoalSchema(EngineModel):
    id: str = Field(..., min_length=1)
    name: Name = ""
    target_amount: Money = Decimal(0)
    current_amount: Money = Decimal(0)
    monthly_contribution: Money = Decimal(0)
    start_month: MonthKey
    target_month: Optional[MonthKey] = None
    status: SavingsGoalStatus = SavingsGoalStatus.ACTIVE

    def to_domain(self) -> SavingsGoal:
        return SavingsGoal(
            id=self.id,
            name=self.name,
            target_amount=self.target_amount,
            current_amount=self.current_amount,
            monthly_contribution=self.monthly_contribution,
            start_month=self.start_month,
            target_month=self.target_month,
            status=self.status,
        )


class BankAccountSchema(EngineModel):
    id: str = Field(..., min_length=1)
    name: Name = ""
    account_type: Literal["current", "savings", "cash", "other"] = "current"
    balance: Money = Decimal(0)
    include_in_net_worth: bool = True

    def to_domain(self) -> BankAccount:
        return BankAccount(
            id=self.id,
            name=self.name,
            account_type=self.account_type,
            balance=self.balance,
            include_in_net_worth=self.include_in_net_worth,
        )


class BankTransferSchema(EngineModel):
    id: str = Field(..., min_length=1)
    month: MonthKey
    day: TransferDay = 1
    from_account_id: str
    to_account_id: str
    amount: Money = Decimal(0)
    note: Optional[str] = None

    def to_domain(self) -> BankTransfer:
        return BankTransfer(
            id=self.id,
            month=self.month,
            day=self.day,
            from_account_id=self.from_account_id,
            to_account_id=self.to_account_id,
            amount=self.amount,
            note=self.note,
        )


class PaydayModeSchema(EngineModel):
    enabled: bool = False
    anchor_date: str = ""
    cycle_days: CycleDays = 28
    income_ids: List[str] = Field(default_factory=list)

    def to_domain(self) -> PaydayModeSettings:
        return PaydayModeSettings(
            enabled=self.enabled,
            anchor_date=self.anchor_date,
            cycle_days=self.cycle_days,
            income_ids=list(self.income_ids),
        )


class OwnerEntities(EngineModel):
    """The full entity set for one owner, as fetched by the surrounding app"""

    owner_id: Optional[str] = None
    cards: List[CardAccountSchema] = Field(default_factory=list)
    monthly_payments: List[MonthlyCardPaymentsSchema] = Field(default_factory=list)
    house_bills: List[LineItemSchema] = Field(default_factory=list)
    income: List[LineItemSchema] = Field(default_factory=list)
    shopping: List[LineItemSchema] = Field(default_factory=list)
    my_bills: List[LineItemSchema] = Field(default_factory=list)
    adjustments: List[MonthlyAdjustmentSchema] = Field(default_factory=list)
    income_paydays: Dict[MonthKey, Dict[str, List[Any]]] = Field(
        default_factory=dict, description="Manual payday overrides: month -> income id -> days"
    )
    payday_mode: Optional[PaydayModeSchema] = None
    loaned_out_items: List[LoanedOutItemSchema] = Field(default_factory=list)
    savings_goals: List[SavingsGoalSchema] = Field(default_factory=list)
    bank_accounts: List[BankAccountSchema] = Field(default_factory=list)
    bank_transfers: List[BankTransferSchema] = Field(default_factory=list)
    base_bank_balance: Money = Decimal(0)


class ScenarioInputSchema(EngineModel):
    extra_income: Money = Decimal(0)
    extra_expenses: Money = Decimal(0)
    extra_card_payments: Money = Decimal(0)
    account_deltas: Dict[str, Money] = Field(default_factory=dict)
    note: Optional[str] = None

    def to_domain(self) -> ScenarioInput:
        return ScenarioInput(
            extra_income=self.extra_income,
            extra_expenses=self.extra_expenses,
            extra_card_payments=self.extra_card_payments,
            account_deltas=dict(self.account_deltas),
            note=self.note,
        )


class DebtSimulationRequest(EngineModel):
    cards: List[CardAccountSchema] = Field(default_factory=list)
    starting_balances: Dict[str, Money] = Field(default_factory=dict)
    monthly_budget: Money = Decimal(0)
    configured_payments: Dict[str, Money] = Field(default_factory=dict)
