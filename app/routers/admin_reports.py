import logging
from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlmodel import Session

from app.core.config import get_settings
from app.database import get_session
from app.repositories.stats_repo import StatsRepository
from app.repositories.store_repo import StoreRepository
from app.schemas.stats import CustomersReport, ProductsReport, SalesReport
from app.services.export_service import report_filename, report_rows, rows_to_csv
from app.services.stats_service import StatsService

router = APIRouter(prefix="/admin/reports", tags=["Admin Reports"])
logger = logging.getLogger(__name__)

repo = StatsRepository(StoreRepository())
service = StatsService(repo, get_settings())


@router.get(
    "/{report_type}",
    response_model=SalesReport | ProductsReport | CustomersReport,
)
def get_report(
    report_type: str,
    start_date: date = Query(...),
    end_date: date = Query(...),
    session: Session = Depends(get_session),
):
    """
    Date-range report over orders placed in [start_date, end_date] (UTC days).

    report_type:
      - sales:     totals, orders by status, daily revenue, top 10 products
      - products:  units sold, revenue, last and average price per product
      - customers: orders, spend, first/last order per customer email

    404 for an unknown type, 400 when start_date is after end_date.
    """
    return service.get_report(session, report_type, start_date, end_date)


@router.get("/{report_type}/export")
def export_report(
    report_type: str,
    start_date: date = Query(...),
    end_date: date = Query(...),
    session: Session = Depends(get_session),
):
    """Same report as CSV attachment."""
    report = service.get_report(session, report_type, start_date, end_date)
    filename = report_filename(report)
    logger.info("Exporting %s", filename)

    return StreamingResponse(
        iter([rows_to_csv(report_rows(report))]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
