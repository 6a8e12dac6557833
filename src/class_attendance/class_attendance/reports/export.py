from __future__ import annotations

import csv
import io
from datetime import date
from typing import Mapping, Optional, Sequence

import pandas as pd

from ..attendance.model import AttendanceRecord
from ..roster.model import Student
from .service import StudentReport, Summary, summary_to_dict

CSV_FIELDS = ["date", "student_id", "student_name", "status", "note"]


def student_details_csv(report: StudentReport, student: Optional[Student] = None) -> bytes:
    """Detail rows of one student, newest first, as UTF-8 (BOM) CSV."""
    out = io.StringIO()
    writer = csv.DictWriter(out, fieldnames=CSV_FIELDS)
    writer.writeheader()
    for r in report.details:
        writer.writerow(
            {
                "date": r.date.strftime("%Y-%m-%d"),
                "student_id": r.student_id,
                "student_name": student.name if student else "",
                "status": r.status.value,
                "note": r.note,
            }
        )
    return out.getvalue().encode("utf-8-sig")


def class_period_xlsx(
    *,
    records: Sequence[AttendanceRecord],
    students: Mapping[str, Student],
    summary: Summary,
    start: date,
    end: date,
) -> bytes:
    """Workbook with the detail sheet and the period summary."""
    detail = pd.DataFrame(
        [
            {
                "Tanggal": r.date.strftime("%Y-%m-%d"),
                "Nama": students[r.student_id].name if r.student_id in students else r.student_id,
                "Status": r.status.value,
                "Catatan": r.note,
            }
            for r in records
        ],
        columns=["Tanggal", "Nama", "Status", "Catatan"],
    )
    totals = pd.DataFrame(
        list(summary_to_dict(summary).items()),
        columns=["Status", "Jumlah"],
    )
    period = pd.DataFrame([{"Mulai": start.strftime("%Y-%m-%d"), "Sampai": end.strftime("%Y-%m-%d")}])

    out = io.BytesIO()
    with pd.ExcelWriter(out, engine="openpyxl") as writer:
        detail.to_excel(writer, sheet_name="Absensi", index=False)
        totals.to_excel(writer, sheet_name="Ringkasan", index=False)
        period.to_excel(writer, sheet_name="Periode", index=False)
    return out.getvalue()
