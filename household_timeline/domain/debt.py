"""Debt payoff simulation - snowball vs avalanche"""

from decimal import Decimal
from typing import Dict, List, Mapping, Optional

from household_timeline.config import settings
from household_timeline.domain.currency import ZERO, clamp_non_negative, normalize_currency, sum_currency, to_decimal
from household_timeline.domain.models import (
    CardAccount,
    CardMonthProjectionEntry,
    DebtPayoffResult,
    DebtPayoffSummary,
    DebtStrategy,
    MonthlyCardPayments,
)
from household_timeline.domain.projections import MONTHLY_RATE_DIVISOR


def compute_minimum_payment(statement_balance: Decimal, card: CardAccount) -> Decimal:
    """
    Rule-based minimum payment for a statement balance.

    - fixed rule: the fixed amount
    - percent rule: balance * value%
    - no rule: max(floor, balance * default percent); both come from settings

    Never more than the balance itself.
    """
    balance = to_decimal(statement_balance)
    if balance <= 0:
        return ZERO

    rule = card.minimum_payment_rule
    if rule is None:
        percent = to_decimal(settings.minimum_payment_percent)
        floor = to_decimal(settings.minimum_payment_floor)
        return normalize_currency(min(balance, max(floor, balance * percent / 100)))

    value = max(ZERO, to_decimal(rule.value))
    if rule.type == "fixed":
        return normalize_currency(min(balance, value))

    return normalize_currency(min(balance, balance * value / 100))


def _strategy_order(
    strategy: DebtStrategy,
    cards_by_id: Mapping[str, CardAccount],
    balances: Mapping[str, Decimal],
    epsilon: Decimal,
) -> List[str]:
    """Active card ids, best payoff target first"""
    active = [card_id for card_id in cards_by_id if balances[card_id] > epsilon]

    if strategy == DebtStrategy.SNOWBALL:
        return sorted(active, key=lambda cid: (balances[cid], cards_by_id[cid].name or cid))

    return sorted(
        active,
        key=lambda cid: (
            -clamp_non_negative(cards_by_id[cid].interest_rate_apr),
            -balances[cid],
            cards_by_id[cid].name or cid,
        ),
    )


def simulate_strategy(
    strategy: DebtStrategy,
    cards: List[CardAccount],
    starting_balances_by_card: Mapping[str, object],
    monthly_budget: object,
    configured_payments_by_card: Optional[Mapping[str, object]] = None,
) -> DebtPayoffResult:
    """
    Simulate paying down every card under one strategy.

    Each month:
    1. Accrue interest on every card with a positive balance
    2. Pay each card max(rule minimum, configured payment), capped at its balance
    3. Pour the rest of max(budget, sum of minimums) into the strategy's
       target card, re-ranking after each allocation

    Stops at settings.debt_max_months; months_to_debt_free is None if debt remains.
    """
    strategy = DebtStrategy(strategy)
    epsilon = to_decimal(settings.debt_epsilon)
    budget_input = normalize_currency(monthly_budget)
    configured = configured_payments_by_card or {}
    cards_by_id = {card.id: card for card in cards}
    balances: Dict[str, Decimal] = {
        card.id: clamp_non_negative(starting_balances_by_card.get(card.id)) for card in cards
    }

    payoff_order: List[str] = []
    total_interest = ZERO
    total_paid = ZERO
    months = 0

    def record_payoff(card_id: str) -> None:
        if balances[card_id] <= epsilon and card_id not in payoff_order:
            payoff_order.append(card_id)

    for _ in range(settings.debt_max_months):
        active_ids = [card_id for card_id in cards_by_id if balances[card_id] > epsilon]
        if not active_ids:
            break
        months += 1

        for card_id in active_ids:
            apr = clamp_non_negative(cards_by_id[card_id].interest_rate_apr)
            interest = normalize_currency(balances[card_id] * apr / MONTHLY_RATE_DIVISOR)
            balances[card_id] = normalize_currency(balances[card_id] + interest)
            total_interest = normalize_currency(total_interest + interest)

        minimums: Dict[str, Decimal] = {}
        for card_id in active_ids:
            statement_balance = balances[card_id]
            rule_minimum = compute_minimum_payment(statement_balance, cards_by_id[card_id])
            configured_minimum = clamp_non_negative(configured.get(card_id))
            minimums[card_id] = normalize_currency(
                min(statement_balance, max(rule_minimum, configured_minimum))
            )

        remaining = normalize_currency(max(budget_input, sum_currency(minimums.values())))

        for card_id in active_ids:
            minimum = min(balances[card_id], minimums[card_id])
            if minimum <= 0:
                continue
            balances[card_id] = clamp_non_negative(balances[card_id] - minimum)
            total_paid = normalize_currency(total_paid + minimum)
            remaining = clamp_non_negative(remaining - minimum)
            record_payoff(card_id)

        while remaining > epsilon:
            ordered = _strategy_order(strategy, cards_by_id, balances, epsilon)
            if not ordered:
                break
            target_id = ordered[0]
            extra = min(remaining, balances[target_id])
            balances[target_id] = clamp_non_negative(balances[target_id] - extra)
            total_paid = normalize_currency(total_paid + extra)
            remaining = clamp_non_negative(remaining - extra)
            record_payoff(target_id)

    unresolved = any(balance > epsilon for balance in balances.values())
    names: List[str] = []
    for card_id in payoff_order:
        name = cards_by_id[card_id].name or card_id
        if name not in names:
            names.append(name)

    return DebtPayoffResult(
        strategy=strategy,
        monthly_budget=budget_input,
        months_to_debt_free=None if unresolved else months,
        total_interest=total_interest,
        total_paid=total_paid,
        payoff_order=names,
    )


def normalize_debt_budget(
    cards: List[CardAccount],
    starting_balances_by_card: Mapping[str, object],
    selected_payments: Optional[MonthlyCardPayments],
) -> Decimal:
    """Budget = max(sum of the month's configured card payments, sum of rule minimums)"""
    configured_budget = (
        sum_currency(clamp_non_negative(value) for value in selected_payments.by_card_id.values())
        if selected_payments
        else ZERO
    )
    required_minimums = sum_currency(
        compute_minimum_payment(clamp_non_negative(starting_balances_by_card.get(card.id)), card)
        for card in cards
    )
    return normalize_currency(max(configured_budget, required_minimums))


def build_debt_payoff_summary(
    cards: List[CardAccount],
    projection_by_card: Mapping[str, CardMonthProjectionEntry],
    selected_payments: Optional[MonthlyCardPayments],
) -> DebtPayoffSummary:
    """Run both strategies from the selected month's projected closing balances"""
    starting_balances = {}
    for card in cards:
        projected = projection_by_card.get(card.id)
        source = projected.closing_balance if projected is not None else card.used_limit
        starting_balances[card.id] = clamp_non_negative(source)

    monthly_budget = normalize_debt_budget(cards, starting_balances, selected_payments)
    configured = selected_payments.by_card_id if selected_payments else {}

    return DebtPayoffSummary(
        total_debt=sum_currency(starting_balances.values()),
        monthly_budget=monthly_budget,
        by_strategy={
            strategy: simulate_strategy(strategy, cards, starting_balances, monthly_budget, configured)
            for strategy in DebtStrategy
        },
    )
