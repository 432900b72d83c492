# guards.py — role gates for page and API routes
from functools import wraps
from flask import current_app, g, jsonify, redirect, request

from services_auth import current_user

LOGIN_PATH = "/login"


def _allowed(user, roles) -> bool:
    if not user:
        return False
    return not roles or user.get("role") in roles


def page_guard(*roles):
    """Redirect to /login unless a user is logged in with one of roles (any role if none given)."""
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            user = current_user()
            if not _allowed(user, roles):
                current_app.logger.info("[GUARD] %s -> %s (role=%s)", request.path, LOGIN_PATH,
                                        (user or {}).get("role"))
                return redirect(LOGIN_PATH)
            g.user = user
            return f(*args, **kwargs)
        return wrapper
    return deco


def api_guard(*roles):
    """Same check as page_guard but answers 401 JSON for API callers."""
    def deco(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            user = current_user()
            if not _allowed(user, roles):
                return jsonify(ok=False, error="unauthorized"), 401
            g.user = user
            return f(*args, **kwargs)
        return wrapper
    return deco


def json_body() -> dict:
    """Request JSON as a dict; unparseable or non-object bodies read as {}."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
