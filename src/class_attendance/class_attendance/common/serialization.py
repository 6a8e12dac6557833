from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from ..attendance.model import AttendanceRecord, SaveResult
from ..roster.model import SchoolClass, Student


def iso(value: Optional[date]) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    return value.isoformat()


def class_to_dict(c: SchoolClass) -> dict[str, Any]:
    return {"id": c.class_id, "name": c.name, "created_at": iso(c.created_at)}


def student_to_dict(s: Student) -> dict[str, Any]:
    return {"id": s.student_id, "name": s.name, "class_id": s.class_id, "created_at": iso(s.created_at)}


def attendance_to_dict(r: AttendanceRecord) -> dict[str, Any]:
    return {
        "id": r.attendance_id,
        "student_id": r.student_id,
        "class_id": r.class_id,
        "date": r.date.strftime("%Y-%m-%d"),
        "status": r.status.value,
        "note": r.note,
    }


def save_result_to_dict(result: SaveResult) -> dict[str, Any]:
    return {
        "class_id": result.class_id,
        "date": result.date.strftime("%Y-%m-%d"),
        "deleted": result.deleted,
        "saved": result.saved,
    }
