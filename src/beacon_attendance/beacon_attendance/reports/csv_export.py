from __future__ import annotations

import csv
import io

from .model import REPORT_FIELDS, SUMMARY_FIELDS, ReportData


def write_report_csv(data: ReportData) -> bytes:
    """Render report rows (and the summary block, if any) as CSV.

    UTF-8 with BOM so spreadsheet apps detect the encoding.
    """
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=REPORT_FIELDS)
    writer.writeheader()
    for row in data.rows:
        writer.writerow(row)

    if data.summary:
        out.write("\r\n")
        summary_writer = csv.DictWriter(out, fieldnames=SUMMARY_FIELDS)
        summary_writer.writeheader()
        for row in data.summary:
            summary_writer.writerow(row)

    return out.getvalue().encode("utf-8-sig")


def report_filename(start, end) -> str:
    return f"attendance_report_{start.strftime('%Y-%m-%d')}_to_{end.strftime('%Y-%m-%d')}.csv"
