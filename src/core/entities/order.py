"""Order aggregate: the sale lines of one checkout viewed together."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.core.entities.sale import FulfillmentStatus, PaymentStatus, Sale


class Order(BaseModel):
    """Sale lines sharing a group key, in their original relative order.

    Built by the order grouping service; never persisted itself.
    """

    key: str
    lines: list[Sale] = Field(default_factory=list)

    @property
    def sale_lines(self) -> list[Sale]:
        return [line for line in self.lines if not line.is_refund]

    @property
    def refund_lines(self) -> list[Sale]:
        return [line for line in self.lines if line.is_refund]

    @property
    def _status_line(self) -> Sale:
        sale_lines = self.sale_lines
        return sale_lines[0] if sale_lines else self.lines[0]

    @property
    def payment_status(self) -> PaymentStatus:
        return self._status_line.payment_status

    @property
    def fulfillment_status(self) -> FulfillmentStatus:
        return self._status_line.fulfillment_status

    @property
    def is_consistent(self) -> bool:
        """True when every sale line shares payment and fulfillment status."""
        statuses = {(s.payment_status, s.fulfillment_status) for s in self.sale_lines}
        return len(statuses) <= 1

    @property
    def short_code(self) -> str:
        return self.key[:8].upper()

    @property
    def date(self) -> datetime:
        return min(line.date for line in self.lines)

    @property
    def customer_id(self) -> str | None:
        return self._status_line.customer_id

    @property
    def customer_name(self) -> str:
        return self._status_line.customer_name

    @property
    def salesman(self) -> str:
        return self._status_line.salesman

    @property
    def gross_total(self) -> float:
        return sum(line.total_price for line in self.sale_lines)

    @property
    def net_total(self) -> float:
        """Total after refunds."""
        return sum(line.total_price for line in self.lines)

    @property
    def tax_total(self) -> float:
        return sum(line.tax_amount for line in self.lines)

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.sale_lines)
