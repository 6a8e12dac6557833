from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from ..core.constants import DEFAULT_STATUS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class AttendanceRecord:
    """Entitas domain: satu catatan absensi siswa pada satu hari."""

    attendance_id: str
    student_id: str
    class_id: str
    date: datetime
    status: AttendanceStatus
    note: str = ""
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class AttendanceEntry:
    """Status + note submitted for one student when saving a day."""

    status: AttendanceStatus = DEFAULT_STATUS
    note: str = ""

    @classmethod
    def coerce(cls, value: Union["AttendanceEntry", Mapping[str, Any], str]) -> "AttendanceEntry":
        """Entry from a request value; the status must be given explicitly."""
        if isinstance(value, AttendanceEntry):
            return value
        if isinstance(value, str):
            value = {"status": value}
        if not isinstance(value, Mapping):
            raise ValidationError("Data absensi tidak valid")

        raw_status = value.get("status")
        if not raw_status:
            raise ValidationError("Status absensi wajib diisi")
        try:
            status = AttendanceStatus(raw_status)
        except ValueError:
            raise ValidationError(f"Status absensi tidak dikenal: {raw_status}")
        return cls(status=status, note=str(value.get("note") or ""))

    def to_dict(self) -> dict:
        return {"status": self.status.value, "note": self.note}


@dataclass(frozen=True)
class NewAttendance:
    student_id: str
    class_id: str
    date: datetime
    status: AttendanceStatus
    note: str = ""


@dataclass(frozen=True)
class SaveResult:
    class_id: str
    date: datetime
    deleted: int
    saved: int
