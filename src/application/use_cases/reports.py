"""Report use cases: daily sales summary and stock levels."""

from src.application.dto.requests import DailySummaryRequest
from src.application.dto.responses import (
    DailySummaryResponse,
    ProductResponse,
    SalesmanRevenueResponse,
    StockReportResponse,
)
from src.application.state import PosState
from src.config import get_logger, get_settings
from src.core.services.sales_summary import (
    DailySummary,
    StockReport,
    stock_report,
    summarize_day,
)

logger = get_logger(__name__)


class DailySummaryUseCase:
    """Revenue of one day split by payment method and salesman."""

    def __init__(self, state: PosState | None = None):
        self._state = state

    def _get_state(self) -> PosState:
        if self._state is None:
            from src.application.services import get_pos_state

            self._state = get_pos_state()
        return self._state

    async def execute(self, request: DailySummaryRequest) -> DailySummary:
        summary = summarize_day(self._get_state().sales, request.day)
        logger.debug(
            "daily_summary_built",
            day=request.day.isoformat(),
            revenue=summary.total_revenue,
            transactions=summary.transaction_count,
        )
        return summary

    def to_response(self, summary: DailySummary) -> DailySummaryResponse:
        return DailySummaryResponse(
            day=summary.day,
            total_revenue=summary.total_revenue,
            transaction_count=summary.transaction_count,
            line_count=summary.line_count,
            by_method=summary.by_method,
            by_salesman=[
                SalesmanRevenueResponse(salesman=name, revenue=revenue)
                for name, revenue in summary.by_salesman
            ],
        )


class StockReportUseCase:
    """Products at or below the low-stock threshold, and sold-out ones."""

    def __init__(self, state: PosState | None = None):
        self._state = state

    def _get_state(self) -> PosState:
        if self._state is None:
            from src.application.services import get_pos_state

            self._state = get_pos_state()
        return self._state

    async def execute(self, threshold: int | None = None) -> StockReport:
        if threshold is None:
            threshold = get_settings().inventory.low_stock_threshold
        return stock_report(self._get_state().products.values(), threshold)

    def to_response(self, report: StockReport) -> StockReportResponse:
        return StockReportResponse(
            threshold=report.threshold,
            low_stock=[ProductResponse.from_entity(p) for p in report.low_stock],
            out_of_stock=[ProductResponse.from_entity(p) for p in report.out_of_stock],
        )
