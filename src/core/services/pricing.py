"""
Pricing calculator.

Turns a foreign-currency unit cost into a GHS selling price:

    base cost    = cost_cfa * exchange_rate / 1000
    total cost   = base + service% + misc%   (both of base)
    pre-tax      = total cost + flat profit margin
    final price  = ceil(pre-tax + tax%)

and back-calculates the tax portion of a tax-inclusive line total.
"""

import math
from dataclasses import dataclass

from src.core.exceptions import ValidationError

# Float noise (e.g. 275.00000000000006) must not push ceil up a whole unit
_CEIL_PRECISION = 6


@dataclass(frozen=True)
class PriceBreakdown:
    """Every intermediate figure of a selling price computation."""

    base_cost_ghs: float
    service_charge: float
    misc_charge: float
    total_cost: float
    price_pre_tax: float
    tax_amount: float
    final_price: float


@dataclass(frozen=True)
class TaxSplit:
    """A tax-inclusive amount split into base and tax."""

    base_price: float
    tax_amount: float


def round_up_price(amount: float) -> float:
    """Round up to the next whole currency unit."""
    return float(math.ceil(round(amount, _CEIL_PRECISION)))


def price_from_cost(
    total_cost: float,
    profit_margin: float,
    tax_rate_pct: float,
) -> tuple[float, float, float]:
    """Return (pre-tax price, tax amount, final price) for a landed cost."""
    price_pre_tax = total_cost + profit_margin
    tax_amount = price_pre_tax * tax_rate_pct / 100
    return price_pre_tax, tax_amount, round_up_price(price_pre_tax + tax_amount)


def calculate_price(
    cost_cfa: float,
    exchange_rate: float,
    service_rate_pct: float,
    misc_rate_pct: float,
    profit_margin: float,
    tax_rate_pct: float,
) -> PriceBreakdown:
    """Compute the selling price breakdown.

    ``exchange_rate`` is GHS per 1000 units of the foreign currency.
    """
    for field, value in (
        ("cost_cfa", cost_cfa),
        ("exchange_rate", exchange_rate),
        ("service_rate_pct", service_rate_pct),
        ("misc_rate_pct", misc_rate_pct),
        ("tax_rate_pct", tax_rate_pct),
    ):
        if value < 0:
            raise ValidationError(field, "must not be negative", value)

    base_cost_ghs = cost_cfa * (exchange_rate / 1000)
    service_charge = base_cost_ghs * service_rate_pct / 100
    misc_charge = base_cost_ghs * misc_rate_pct / 100
    total_cost = base_cost_ghs + service_charge + misc_charge
    price_pre_tax, tax_amount, final_price = price_from_cost(
        total_cost, profit_margin, tax_rate_pct
    )

    return PriceBreakdown(
        base_cost_ghs=base_cost_ghs,
        service_charge=service_charge,
        misc_charge=misc_charge,
        total_cost=total_cost,
        price_pre_tax=price_pre_tax,
        tax_amount=tax_amount,
        final_price=final_price,
    )


def split_tax(line_total: float, tax_rate_pct: float) -> TaxSplit:
    """Back-calculate the tax inside a tax-inclusive line total."""
    base_price = line_total / (1 + tax_rate_pct / 100)
    return TaxSplit(base_price=base_price, tax_amount=line_total - base_price)
