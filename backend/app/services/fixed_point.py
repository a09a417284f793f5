from __future__ import annotations

from decimal import Decimal, ROUND_DOWN, ROUND_HALF_UP

# Rates are per-second growth fractions scaled by PRECISION exactly once:
# a holder at `rate` grows by principal * rate * elapsed / PRECISION.
PRECISION = 10**18

SECONDS_PER_YEAR = 365 * 24 * 60 * 60

# "withdraw everything": resolved to the live balance before any balance check
MAX_AMOUNT = 2**256 - 1

Q4 = Decimal("0.0001")


def _to_dec(v) -> Decimal:
    return Decimal(str(v))


def growth_factor(rate: int, elapsed: int) -> int:
    if elapsed <= 0:
        return PRECISION
    return PRECISION + rate * elapsed


def accrue(principal: int, rate: int, elapsed: int) -> int:
    """Principal plus simple interest over `elapsed` seconds, floored."""
    return principal * growth_factor(rate, elapsed) // PRECISION


def resolve_amount(amount: int, full: int) -> int:
    if amount == MAX_AMOUNT:
        return full
    return amount


def rate_from_annual_percent(pct) -> int:
    per_second = _to_dec(pct) / Decimal("100") / Decimal(SECONDS_PER_YEAR)
    return int((per_second * PRECISION).to_integral_value(rounding=ROUND_DOWN))


def annual_percent(rate: int) -> Decimal:
    pct = Decimal(rate) * Decimal(SECONDS_PER_YEAR) * Decimal("100") / Decimal(PRECISION)
    return pct.quantize(Q4, rounding=ROUND_HALF_UP)
