"""Identity scope: who is acting, and which data partition they own.

Every stored entity lives under ``artifacts/{app_id}/users/{user_id}``; a
missing identifier means the app is "not ready" and no operation may run.
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from ..core.exceptions import AuthenticationError, NotReadyError


@dataclass(frozen=True)
class Namespace:
    app_id: str
    user_id: str

    @property
    def path(self) -> str:
        return f"artifacts/{self.app_id}/users/{self.user_id}"

    def __str__(self) -> str:
        return self.path


def resolve_namespace(user_id: Optional[str], *, app_id: str) -> Namespace:
    if user_id is None or not str(user_id).strip():
        raise NotReadyError("Identitas pengguna belum tersedia")
    return Namespace(app_id=app_id, user_id=str(user_id).strip())


class IdentityService:
    """Establishes the opaque user identifier (custom token or anonymous)."""

    _SALT = "absensi-kelas-identity"

    def __init__(self, *, secret_key: str, app_id: str, token_max_age: Optional[int] = None):
        self._serializer = URLSafeTimedSerializer(secret_key, salt=self._SALT)
        self._app_id = app_id
        self._token_max_age = token_max_age

    @property
    def app_id(self) -> str:
        return self._app_id

    def issue_token(self, user_id: str) -> str:
        if not user_id or not user_id.strip():
            raise AuthenticationError("User ID tidak valid")
        return self._serializer.dumps({"uid": user_id.strip()})

    def sign_in_with_token(self, token: str) -> str:
        try:
            payload = self._serializer.loads(token, max_age=self._token_max_age)
        except SignatureExpired as e:
            raise AuthenticationError("Token sudah kedaluwarsa") from e
        except BadSignature as e:
            raise AuthenticationError("Token tidak valid") from e

        uid = payload.get("uid") if isinstance(payload, dict) else None
        if not uid:
            raise AuthenticationError("Token tidak valid")
        return str(uid)

    def sign_in_anonymously(self) -> str:
        return uuid.uuid4().hex

    def namespace_for(self, user_id: Optional[str]) -> Namespace:
        return resolve_namespace(user_id, app_id=self._app_id)
