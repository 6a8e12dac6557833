from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Status absensi harian yang disimpan di koleksi `attendance`."""

    HADIR = "Hadir"
    SAKIT = "Sakit"
    IZIN = "Izin"
    ALPA = "Alpa"


class Collection(str, Enum):
    """Document collections kept per user namespace."""

    CLASSES = "classes"
    STUDENTS = "students"
    ATTENDANCE = "attendance"


class Semester(int, Enum):
    GANJIL = 1  # July - December
    GENAP = 2  # January - June
