import csv
import io
from typing import Any

from app.schemas.stats import CustomersReport, ProductsReport, Report, SalesReport


def rows_to_csv(rows: list[dict[str, Any]]) -> str:
    """
    Render rows as CSV text.

    Headers are the first row's keys; missing or None cells are written
    empty. No rows -> empty string.
    """
    if not rows:
        return ""

    headers = list(rows[0].keys())
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n")
    writer.writerow(headers)
    for row in rows:
        writer.writerow(["" if row.get(h) is None else row.get(h) for h in headers])
    return output.getvalue()


def report_rows(report: Report) -> list[dict[str, Any]]:
    """Flatten a report into CSV rows (sales reports export their daily rows)."""
    if isinstance(report, SalesReport):
        return [d.model_dump(mode="json") for d in report.daily_revenue]
    if isinstance(report, ProductsReport):
        return [p.model_dump(mode="json") for p in report.products]
    if isinstance(report, CustomersReport):
        return [c.model_dump(mode="json") for c in report.customers]
    raise TypeError(f"cannot export {type(report).__name__}")


def report_filename(report: Report) -> str:
    return f"{report.report_type}_report_{report.start_date}_{report.end_date}.csv"
