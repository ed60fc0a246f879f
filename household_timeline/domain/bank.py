"""Bank account balances and month projections across multiple accounts"""

from decimal import Decimal
from typing import Dict, List, Optional

from household_timeline.domain.currency import ZERO, clamp_non_negative, normalize_currency, sum_currency
from household_timeline.domain.models import (
    BankAccount,
    BankAccountMonthProjection,
    BankAccountProjection,
    BankTransfer,
    MonthSnapshot,
)


def default_spending_account_id(accounts: List[BankAccount]) -> Optional[str]:
    """First current account, else the first account, else None"""
    if not accounts:
        return None
    for account in accounts:
        if account.account_type == "current":
            return account.id
    return accounts[0].id


def sum_account_balances(accounts: List[BankAccount]) -> Decimal:
    return sum_currency(account.balance for account in accounts)


def build_account_projection(
    month: str,
    accounts: List[BankAccount],
    transfers: List[BankTransfer],
    snapshots: List[MonthSnapshot],
) -> BankAccountMonthProjection:
    """
    Project every account's closing balance at the end of `month`.

    Starting from today's balances, each snapshot up to `month` moves the
    default spending account by that month's change in money in bank, then the
    month's transfers are applied in (day, id) order. Transfers with a
    non-positive amount or an unknown account are skipped.
    """
    opening: Dict[str, Decimal] = {account.id: normalize_currency(account.balance) for account in accounts}
    balances = dict(opening)
    spending_id = default_spending_account_id(accounts)
    previous_money_in_bank = sum_account_balances(accounts)

    for snapshot in sorted(snapshots, key=lambda s: s.month):
        if snapshot.month > month:
            break

        movement = normalize_currency(snapshot.money_in_bank - previous_money_in_bank)
        if spending_id is not None:
            balances[spending_id] = normalize_currency(balances[spending_id] + movement)
        previous_money_in_bank = snapshot.money_in_bank

        month_transfers = sorted(
            (t for t in transfers if t.month == snapshot.month), key=lambda t: (t.day, t.id)
        )
        for transfer in month_transfers:
            amount = clamp_non_negative(transfer.amount)
            if amount <= 0:
                continue
            if transfer.from_account_id not in balances or transfer.to_account_id not in balances:
                continue
            balances[transfer.from_account_id] = normalize_currency(balances[transfer.from_account_id] - amount)
            balances[transfer.to_account_id] = normalize_currency(balances[transfer.to_account_id] + amount)

    entries = []
    for account in accounts:
        opening_balance = opening[account.id]
        closing_balance = balances[account.id]
        entries.append(
            BankAccountProjection(
                account_id=account.id,
                name=account.name,
                account_type=account.account_type,
                include_in_net_worth=account.include_in_net_worth is not False,
                opening_balance=opening_balance,
                closing_balance=closing_balance,
                net_change=normalize_currency(closing_balance - opening_balance),
            )
        )

    total_opening = sum_currency(entry.opening_balance for entry in entries)
    total_closing = sum_currency(entry.closing_balance for entry in entries)
    return BankAccountMonthProjection(
        month=month,
        entries=entries,
        total_opening_balance=total_opening,
        total_closing_balance=total_closing,
        net_movement_applied=normalize_currency(total_closing - total_opening) if entries else ZERO,
    )
