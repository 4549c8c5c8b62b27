"""Spreadsheet exports of attendance data (openpyxl workbooks)."""
from __future__ import annotations

import io
from datetime import timedelta
from typing import Any, Iterable

from openpyxl import Workbook

from .models import Attendance

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _to_bytes(wb: Workbook) -> bytes:
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def weekly_recap_workbook(recap: dict[str, Any]) -> bytes:
    """One row per student, one column per day of the week."""
    days = [recap["startDate"] + timedelta(days=i) for i in range(7)]
    wb = Workbook()
    ws = wb.active
    ws.title = "Weekly recap"
    ws.append(["Student name", "Email"] + [d.strftime("%a, %d %b") for d in days])
    for row in recap["recap"]:
        status_by_day = {r["date"]: r["status"] for r in row["records"]}
        ws.append([row["name"] or "N/A", row["email"]] + [status_by_day.get(d, "-") for d in days])
    return _to_bytes(wb)


def student_history_workbook(history: Iterable[Attendance]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.title = "Attendance history"
    ws.append(["Date", "Status", "Notes"])
    for rec in history:
        ws.append([rec.date.strftime("%A, %d %B %Y"), rec.status, rec.notes or "-"])
    return _to_bytes(wb)
