from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class SchoolClass:
    """Entitas domain: Kelas."""

    class_id: str
    name: str
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Student:
    """Entitas domain: Siswa (references its class by id)."""

    student_id: str
    name: str
    class_id: str
    created_at: Optional[datetime] = None
