from __future__ import annotations

import logging

from ..common.validators import parse_name_list, require_id
from ..core.exceptions import ValidationError
from .repository import ClassRepository, StudentRepository

log = logging.getLogger(__name__)


class BulkImportService:
    """Create many students of one class from a pasted name list."""

    def __init__(self, classes: ClassRepository, students: StudentRepository):
        self._classes = classes
        self._students = students

    def import_students(self, class_id: str, raw_text: str) -> int:
        """Returns how many students were created (all in one batch)."""
        class_id = require_id(class_id, "Kelas")
        names = parse_name_list(raw_text)
        if not names:
            raise ValidationError("Tidak ada nama siswa yang valid untuk diunggah.")
        if not self._classes.get_by_id(class_id):
            raise ValidationError("Kelas tidak ditemukan")

        created = self._students.create_many(names=names, class_id=class_id)
        log.info("Imported %d students into class %s", len(created), class_id)
        return len(created)
