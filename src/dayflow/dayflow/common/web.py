from __future__ import annotations

import logging
from datetime import datetime, timedelta
from functools import wraps

from flask import jsonify, request, session

from ..core.constants import SESSION_TIMEOUT_HOURS
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError, RateLimitError, ValidationError

logger = logging.getLogger(__name__)

SESSION_TIMEOUT = timedelta(hours=SESSION_TIMEOUT_HOURS)

_STATUS_BY_ERROR = (
    (RateLimitError, 429),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (ValidationError, 400),
    (DomainError, 400),
)


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def ok(status: int = 200, **payload):
    return jsonify({"success": True, **payload}), status


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def status_for(error: DomainError) -> int:
    for cls, status in _STATUS_BY_ERROR:
        if isinstance(error, cls):
            return status
    return 400


def start_session(user) -> None:
    """Store a signed-in user into the Flask session."""
    now = datetime.now().isoformat()
    session.clear()
    session["email"] = user.email
    session["employee_id"] = user.employee_id
    session["role"] = user.role.value
    session["name"] = user.display_name
    session["login_time"] = now
    session["last_activity"] = now


def session_expired() -> bool:
    last = session.get("last_activity")
    if not last:
        return True
    try:
        last_at = datetime.fromisoformat(last)
    except ValueError:
        return True
    return datetime.now() - last_at > SESSION_TIMEOUT


def api_view(view):
    """Map domain errors to JSON error responses; anything else is a 500."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            return view(*args, **kwargs)
        except DomainError as e:
            return fail(str(e), status_for(e))
        except Exception:
            logger.exception("Unhandled error in %s", request.path)
            return fail("Internal server error", 500)

    return wrapper


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "employee_id" not in session:
            return fail("Please sign in to continue.", 401)
        if session_expired():
            logger.info("Session for %s expired due to inactivity", session.get("email"))
            session.clear()
            return fail("Your session has expired. Please sign in again.", 401)

        session["last_activity"] = datetime.now().isoformat()
        return view(*args, **kwargs)

    return wrapper


def hr_required(view):
    @login_required
    @wraps(view)
    def wrapper(*args, **kwargs):
        if session.get("role") != Role.HR.value:
            return fail("You do not have permission to perform this action.", 403)
        return view(*args, **kwargs)

    return wrapper


def is_hr() -> bool:
    return session.get("role") == Role.HR.value


def current_employee_id() -> str:
    return str(session["employee_id"])
