"""Payment schedule and day count arithmetic.

Payment dates roll forward from the starting date by the contract frequency.
Each date is computed from the starting date directly (not from the previous
payment date) so that a 31st start day does not drift to the 28th after
February. The maturity date is always the final payment date; if the term
is not a whole number of periods the last period is a short stub.
"""

import calendar
from datetime import date
from decimal import Decimal

from irswap.exceptions import InvalidInput
from irswap.models import AccrualPeriod, DayCount, SwapContract

_DAY_COUNT_DENOMINATORS = {
    DayCount.ACT_360: Decimal("360"),
    DayCount.ACT_365: Decimal("365"),
    DayCount.THIRTY_360: Decimal("360"),
}


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping to the last day of the target month."""
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, min(start.day, last_day))


def year_fraction(start: date, end: date, day_count: DayCount) -> Decimal:
    """Accrual fraction of a year between two dates.

    Args:
        start: First day of the accrual period (inclusive).
        end: Last day of the accrual period (exclusive).
        day_count: ACT/360, ACT/365 or 30/360 (US bond basis).

    Returns:
        Exact Decimal fraction, e.g. Decimal(90) / Decimal(360).

    Raises:
        InvalidInput: If end is before start.
    """
    if end < start:
        raise InvalidInput(
            "Accrual period ends before it starts",
            context={"start": start.isoformat(), "end": end.isoformat()},
        )

    if day_count == DayCount.THIRTY_360:
        days = _days_30_360(start, end)
    else:
        days = (end - start).days

    return Decimal(days) / _DAY_COUNT_DENOMINATORS[day_count]


def _days_30_360(start: date, end: date) -> int:
    """Day count under 30/360 bond basis (ISDA 2006 4.16(f))."""
    d1 = start.day
    d2 = end.day
    if d1 == 31:
        d1 = 30
    if d1 >= 30 and d2 == 31:
        d2 = 30
    return (end.year - start.year) * 360 + (end.month - start.month) * 30 + (d2 - d1)


def payment_dates(contract: SwapContract) -> list[date]:
    """Return every payment date of the contract in ascending order.

    Raises:
        InvalidInput: If the maturity date is not after the starting date.
    """
    if contract.maturity_date <= contract.starting_date:
        raise InvalidInput(
            "Maturity date must be after starting date",
            context={
                "contract_id": contract.contract_id,
                "starting_date": contract.starting_date.isoformat(),
                "maturity_date": contract.maturity_date.isoformat(),
            },
        )

    step = contract.frequency.months
    dates: list[date] = []
    n = 1
    while True:
        candidate = add_months(contract.starting_date, n * step)
        if candidate >= contract.maturity_date:
            break
        dates.append(candidate)
        n += 1

    dates.append(contract.maturity_date)
    return dates


def accrual_periods(contract: SwapContract) -> list[AccrualPeriod]:
    """Split the contract term into accrual periods ending on each payment date."""
    periods: list[AccrualPeriod] = []
    start = contract.starting_date
    for end in payment_dates(contract):
        periods.append(
            AccrualPeriod(
                start=start,
                end=end,
                year_fraction=year_fraction(start, end, contract.day_count),
            )
        )
        start = end
    return periods
