from __future__ import annotations

from typing import Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} harus berupa teks")
    if not value or not value.strip():
        raise ValidationError(f"{field_name} tidak boleh kosong")
    return value.strip()


def require_id(value: Optional[str], field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} belum dipilih")
    return str(value).strip()


def parse_name_list(raw_text: Optional[str]) -> list[str]:
    """One name per line; surrounding whitespace trimmed, blank lines dropped."""
    if raw_text is not None and not isinstance(raw_text, str):
        raise ValidationError("Daftar nama siswa harus berupa teks")
    if not raw_text:
        return []
    return [line.strip() for line in raw_text.splitlines() if line.strip()]
