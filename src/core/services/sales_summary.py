"""
Sales and stock reports.

Pure arithmetic over in-memory collections; no rendering.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from src.core.entities.product import Product
from src.core.entities.sale import PaymentMethod, PaymentStatus, Sale


@dataclass
class DailySummary:
    """Paid business of one calendar day (UTC)."""

    day: date
    total_revenue: float = 0.0
    transaction_count: int = 0
    line_count: int = 0
    by_method: dict[str, float] = field(default_factory=dict)
    by_salesman: list[tuple[str, float]] = field(default_factory=list)


@dataclass
class StockReport:
    """Products running low and products sold out."""

    threshold: int
    low_stock: list[Product] = field(default_factory=list)
    out_of_stock: list[Product] = field(default_factory=list)


def summarize_day(sales: Iterable[Sale], day: date) -> DailySummary:
    """Summarize PAID lines whose payment date falls on ``day``.

    Refund lines are paid at booking time, so they net out of the day they
    were issued.
    """
    lines = [
        s
        for s in sales
        if s.payment_status == PaymentStatus.PAID
        and s.payment_date is not None
        and s.payment_date.date() == day
    ]

    by_method: dict[str, float] = {}
    by_salesman: dict[str, float] = {}
    for line in lines:
        method = (line.payment_method or PaymentMethod.UNKNOWN).value
        by_method[method] = by_method.get(method, 0.0) + line.total_price
        salesman = line.salesman or "Unassigned"
        by_salesman[salesman] = by_salesman.get(salesman, 0.0) + line.total_price

    return DailySummary(
        day=day,
        total_revenue=sum(line.total_price for line in lines),
        transaction_count=len({line.group_key for line in lines}),
        line_count=len(lines),
        by_method=by_method,
        by_salesman=sorted(by_salesman.items(), key=lambda item: item[1], reverse=True),
    )


def stock_report(products: Iterable[Product], threshold: int) -> StockReport:
    report = StockReport(threshold=threshold)
    for product in products:
        if product.stock_quantity == 0:
            report.out_of_stock.append(product)
        elif product.stock_quantity <= threshold:
            report.low_stock.append(product)
    report.low_stock.sort(key=lambda p: p.stock_quantity)
    return report
