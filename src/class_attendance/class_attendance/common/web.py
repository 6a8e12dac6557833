from __future__ import annotations

from datetime import date
from functools import wraps
from typing import Optional

from flask import current_app, g, jsonify, session

from ..core.exceptions import AuthenticationError, NotReadyError, StoreError, ValidationError
from ..identity.service import resolve_namespace
from .datetime_utils import parse_iso_date

SESSION_UID = "uid"


def json_error(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def namespace_required(view):
    """Resolve the caller's namespace into `g.namespace`; 401 when not ready."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            g.namespace = resolve_namespace(session.get(SESSION_UID), app_id=current_app.config["APP_ID"])
        except NotReadyError as e:
            return json_error(str(e), 401)
        return view(*args, **kwargs)

    return wrapper


def json_api(failure_message: str):
    """Translate domain errors into JSON responses.

    ValidationError -> 400, identity errors -> 401, store failures -> 503
    (the action can simply be retried), anything else -> 500.
    """

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except ValidationError as e:
                return json_error(str(e), 400)
            except (NotReadyError, AuthenticationError) as e:
                return json_error(str(e), 401)
            except StoreError as e:
                current_app.logger.error("%s: %s", failure_message, e)
                return json_error(f"{failure_message}. Coba lagi.", 503)
            except Exception:
                current_app.logger.exception(failure_message)
                return json_error(failure_message, 500)

        return wrapper

    return decorator


def parse_date_arg(value: Optional[str], field_name: str, *, default: Optional[date] = None) -> date:
    if not value:
        if default is None:
            raise ValidationError(f"Parameter {field_name} wajib diisi")
        return default
    if not isinstance(value, str):
        raise ValidationError(f"Format {field_name} harus YYYY-MM-DD")
    try:
        return parse_iso_date(value)
    except ValueError:
        raise ValidationError(f"Format {field_name} harus YYYY-MM-DD")


def parse_int_arg(value: Optional[str], field_name: str) -> int:
    try:
        return int(value or "")
    except ValueError:
        raise ValidationError(f"Parameter {field_name} tidak valid")
