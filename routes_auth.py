# routes_auth.py
from flask import Blueprint, request, jsonify, current_app, g

from guards import api_guard, json_body
import services_auth as auth
from services_auth import AuthError

bp_auth = Blueprint("auth", __name__)


def _session_payload(user: dict):
    return jsonify(ok=True, user=user, token=auth.make_jwt(user), redirect=auth.get_redirect_path(user))


def _auth_error(e: AuthError):
    body = {"ok": False, "error": e.message}
    if e.details:
        body["details"] = e.details
    return jsonify(body), e.status


@bp_auth.post("/api/auth/login")
def login():
    data = json_body()
    user = auth.login(data.get("email"), data.get("password"))
    if not user:
        return jsonify(ok=False, error="bad_credentials"), 401
    return _session_payload(user)


@bp_auth.post("/api/auth/signup")
def signup():
    data = json_body()
    try:
        user = auth.signup(data)
    except AuthError as e:
        return _auth_error(e)
    return _session_payload(user), 201


@bp_auth.post("/api/auth/logout")
def logout():
    auth.logout()
    return jsonify(ok=True)


@bp_auth.post("/api/auth/send-code")
def send_code():
    data = json_body()
    try:
        auth.send_verification_code(data.get("email"))
    except AuthError as e:
        return _auth_error(e)
    return jsonify(ok=True, message="Verification code sent to your email")


@bp_auth.post("/api/auth/verify-code")
def verify_code():
    data = json_body()
    try:
        user = auth.login_with_email_code(data.get("email"), data.get("code"))
    except AuthError as e:
        current_app.logger.info("[AUTH] verify-code failed: %s", e.message)
        return _auth_error(e)
    return _session_payload(user)


@bp_auth.get("/api/auth/me")
def me():
    user = auth.current_user()
    if not user:
        return jsonify(ok=False, error="unauthorized"), 401
    return jsonify(ok=True, user=user, redirect=auth.get_redirect_path(user))


@bp_auth.patch("/api/auth/me")
@api_guard()
def update_me():
    data = json_body()
    try:
        user = auth.update_profile(g.user, data)
    except AuthError as e:
        return _auth_error(e)
    return jsonify(ok=True, user=user)
