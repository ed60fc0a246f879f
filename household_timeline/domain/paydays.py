"""Payday resolution - which calendar days an income item lands on in a month"""

import logging
import math
from datetime import timedelta
from typing import Dict, Iterable, List, Mapping, Optional

from household_timeline.config import settings
from household_timeline.domain.models import LineItem, PaydayModeSettings
from household_timeline.utils.date_utils import month_bounds, parse_iso_date

logger = logging.getLogger(__name__)


def normalize_day_list(values: Optional[Iterable]) -> List[int]:
    """Keep integer days 1..31, de-duplicated and ascending"""
    days = set()
    for value in values or []:
        try:
            day = int(str(value).strip())
        except (TypeError, ValueError):
            continue
        if 1 <= day <= 31:
            days.add(day)
    return sorted(days)


def income_uses_payday_mode(payday_mode: Optional[PaydayModeSettings], income_id: str) -> bool:
    """Payday mode applies when enabled and the income is in scope (empty scope = all)"""
    if payday_mode is None or not payday_mode.enabled:
        return False
    if not payday_mode.income_ids:
        return True
    return income_id in payday_mode.income_ids


def normalize_cycle_days(cycle_days) -> int:
    """Round half up and floor at 1; missing or non-finite lengths use the configured default"""
    try:
        value = float(cycle_days)
    except (TypeError, ValueError):
        return settings.default_cycle_days
    if not math.isfinite(value):
        return settings.default_cycle_days
    return max(1, math.floor(value + 0.5))


def generate_cycle_paydays(month: str, anchor_date: str, cycle_days) -> List[int]:
    """
    Calendar days in `month` that fall on a cycle date.

    Cycle dates are anchor_date + k * cycle_days for any integer k, so the
    anchor may sit before or after the target month. A short cycle can put
    more than one payday in the same month.

    Example:
        anchor 2026-01-02, cycle 14, month 2026-01 -> [2, 16, 30]
    """
    month_start, month_end = month_bounds(month)
    anchor = parse_iso_date(anchor_date)
    if anchor is None:
        logger.debug("Ignoring unparseable payday anchor", extra={"anchor_date": anchor_date})
        return []

    cycle = normalize_cycle_days(cycle_days)
    cycle_index = (month_start - anchor).days // cycle
    candidate = anchor + timedelta(days=cycle_index * cycle)

    while candidate < month_start:
        cycle_index += 1
        candidate = anchor + timedelta(days=cycle_index * cycle)

    days = []
    while candidate <= month_end:
        days.append(candidate.day)
        cycle_index += 1
        candidate = anchor + timedelta(days=cycle_index * cycle)

    return normalize_day_list(days)


def resolve_paydays(
    month: str,
    income_items: List[LineItem],
    manual_overrides_by_income_id: Optional[Mapping[str, Iterable]] = None,
    payday_mode: Optional[PaydayModeSettings] = None,
) -> Dict[str, List[int]]:
    """
    Resolve the payday days for every income item in a month.

    Precedence per item:
    1. A non-empty manual override for the month
    2. Payday mode, when enabled, scoped to the item and producing days
    3. The item's static due day (default day 1)
    """
    overrides = manual_overrides_by_income_id or {}
    mode_days = (
        generate_cycle_paydays(month, payday_mode.anchor_date, payday_mode.cycle_days)
        if payday_mode is not None and payday_mode.enabled
        else []
    )

    resolved: Dict[str, List[int]] = {}
    for item in income_items:
        manual_days = normalize_day_list(overrides.get(item.id))
        if manual_days:
            resolved[item.id] = manual_days
            continue

        if mode_days and income_uses_payday_mode(payday_mode, item.id):
            resolved[item.id] = list(mode_days)
            continue

        fallback = normalize_day_list([item.due_day_of_month if item.due_day_of_month is not None else 1])
        resolved[item.id] = fallback or [1]

    return resolved
