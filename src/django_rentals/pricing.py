"""Two-tier rental pricing.

Ranges shorter than one monthly block are charged per day. Ranges of one
block or more are charged the monthly rate scaled linearly by
``days / block`` (fractional months, no rounding up).

Owners set both rates independently, so a 30-day hire can cost less than a
29-day hire. That inversion is kept as-is and reported on the Quote.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN
from typing import Optional

from .conf import get_setting
from .daterange import DateRange
from .exceptions import InvalidRateError


logger = logging.getLogger(__name__)

DAILY = "daily"
MONTHLY = "monthly"

# Minor units per currency for quantizing quotes
CURRENCY_DECIMALS = {
    "SAR": 2, "USD": 2, "EUR": 2, "GBP": 2, "AED": 2,
    "JPY": 0, "KRW": 0,
    "KWD": 3, "BHD": 3, "OMR": 3,
}


def _to_decimal(value) -> Optional[Decimal]:
    if value is None:
        return None
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class RateSchedule:
    """Owner-set rental rates for one piece of equipment."""

    daily_rate: Optional[Decimal] = None
    monthly_rate: Optional[Decimal] = None
    currency: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "daily_rate", _to_decimal(self.daily_rate))
        object.__setattr__(self, "monthly_rate", _to_decimal(self.monthly_rate))
        if not self.currency:
            object.__setattr__(self, "currency", get_setting("DEFAULT_CURRENCY"))

    def rate_for(self, tier: str) -> Decimal:
        """Return the rate for ``tier`` or raise InvalidRateError."""
        rate = self.monthly_rate if tier == MONTHLY else self.daily_rate
        if rate is None or rate <= 0:
            raise InvalidRateError(tier, rate)
        return rate


@dataclass(frozen=True)
class Quote:
    """A priced date range."""

    amount: Decimal
    currency: str
    tier: str
    days: int
    # Set when the monthly tier undercuts the daily price for the same days
    monthly_cheaper_than_daily: bool = False


def quantize(amount: Decimal, currency: str) -> Decimal:
    """Round to the currency's minor unit using banker's rounding."""
    decimals = CURRENCY_DECIMALS.get(currency, 2)
    return amount.quantize(Decimal(10) ** -decimals, rounding=ROUND_HALF_EVEN)


def tier_for(days: int) -> str:
    return MONTHLY if days >= get_setting("MONTHLY_BLOCK_DAYS") else DAILY


def quote_range(date_range: DateRange, schedule: RateSchedule) -> Quote:
    """
    Price a candidate range against a rate schedule.

    Args:
        date_range: The candidate range (already validated, at least one day)
        schedule: The equipment's rate schedule

    Returns:
        Quote with a non-negative amount

    Raises:
        InvalidRateError: If the rate for the chosen tier is absent or not positive
    """
    days = date_range.days
    block = get_setting("MONTHLY_BLOCK_DAYS")
    tier = tier_for(days)

    if tier == MONTHLY:
        amount = schedule.rate_for(MONTHLY) * Decimal(days) / Decimal(block)
    else:
        amount = schedule.rate_for(DAILY) * days

    inverted = False
    if tier == MONTHLY and schedule.daily_rate is not None and schedule.daily_rate > 0:
        # Compare against the most expensive daily-tier hire
        inverted = amount < schedule.daily_rate * (block - 1)
        if inverted:
            logger.warning(
                "Monthly rate %s undercuts %s x %s daily for %s days",
                schedule.monthly_rate, block - 1, schedule.daily_rate, days,
            )

    return Quote(
        amount=quantize(amount, schedule.currency),
        currency=schedule.currency,
        tier=tier,
        days=days,
        monthly_cheaper_than_daily=inverted,
    )
