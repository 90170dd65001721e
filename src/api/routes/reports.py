"""Report endpoints."""

from datetime import date

from fastapi import APIRouter, Depends

from src.api.dependencies import get_daily_summary_use_case, get_stock_report_use_case
from src.application.dto.requests import DailySummaryRequest
from src.application.dto.responses import DailySummaryResponse, StockReportResponse
from src.application.use_cases import DailySummaryUseCase, StockReportUseCase
from src.core.entities.product import utcnow

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/daily-summary", response_model=DailySummaryResponse)
async def daily_summary(
    day: date | None = None,
    use_case: DailySummaryUseCase = Depends(get_daily_summary_use_case),
) -> DailySummaryResponse:
    """Paid revenue of one day (defaults to today, UTC)."""
    summary = await use_case.execute(DailySummaryRequest(day=day or utcnow().date()))
    return use_case.to_response(summary)


@router.get("/low-stock", response_model=StockReportResponse)
async def low_stock(
    threshold: int | None = None,
    use_case: StockReportUseCase = Depends(get_stock_report_use_case),
) -> StockReportResponse:
    report = await use_case.execute(threshold)
    return use_case.to_response(report)
