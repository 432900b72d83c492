# services_auth.py — session/role store (login, email codes, signup, redirects)
import time
from datetime import datetime, timedelta
import jwt
from flask import current_app, request, session
from pydantic import ValidationError
from werkzeug.security import generate_password_hash, check_password_hash

from extensions import db
from models_auth import ROLES, User, VerificationCode
from schemas import SignupRequest, ProfileUpdate
from services_notify import send_email, create_verification_email

SESSION_KEY = "user"
JWT_ISSUER = "chiefmedia"

REDIRECT_PATHS = {
    "admin": "/admin",
    "realtor": "/vendors",
    "vendor": "/vendor/dashboard",
}
DEFAULT_REDIRECT = "/dashboard"

SELF_SIGNUP_ROLES = set(ROLES) - {"admin"}
COMPANY_BY_DOMAIN = {
    "@kwsingapore.com": "KW Singapore",
    "@propertylimbrothers.com": "Property Lim Brothers",
}
DOMAIN_ERROR = ("Email verification is only available for KW Singapore realtors "
                "and Property Lim Brothers users")


class AuthError(Exception):
    def __init__(self, message, status=400, details=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.details = details or []


def get_redirect_path(user) -> str:
    """Landing route for a user's role; unknown roles land on the dashboard."""
    role = user.get("role") if isinstance(user, dict) else getattr(user, "role", None)
    return REDIRECT_PATHS.get(role, DEFAULT_REDIRECT)


def _text(v) -> str:
    return v.strip() if isinstance(v, str) else ""


def _norm_email(v) -> str:
    return _text(v).lower()


def _ts_id(prefix: str = "") -> str:
    """Millisecond timestamp id, bumped past any id already issued."""
    ts = int(time.time() * 1000)
    while User.query.filter_by(id=f"{prefix}{ts}").first() is not None:
        ts += 1
    return f"{prefix}{ts}"


def allowed_domain(email: str) -> bool:
    return any(email.endswith(d) for d in current_app.config["REALTOR_DOMAINS"])


def company_for(email: str):
    for domain, company in COMPANY_BY_DOMAIN.items():
        if email.endswith(domain):
            return company
    return None


def _latest_user(email: str):
    return User.query.filter_by(email=email).order_by(User.pk.desc()).first()


def _create_user(**fields) -> User:
    u = User(**fields)
    db.session.add(u); db.session.commit()
    return u


def _persist_session(user: dict) -> dict:
    session[SESSION_KEY] = user
    return user


# ---------- JWT helpers ----------
def make_jwt(user: dict) -> str:
    now = datetime.utcnow()
    payload = {
        "sub": f"user:{user['id']}",
        "uid": user["id"],
        "role": user.get("role"),
        "name": user.get("name") or "",
        "email": user.get("email") or "",
        "company": user.get("company") or "",
        "phone": user.get("phone") or "",
        "exp": now + timedelta(minutes=current_app.config["JWT_TTL_MIN"]),
        "iat": now,
        "iss": JWT_ISSUER,
    }
    return jwt.encode(payload, current_app.config["JWT_SECRET"], algorithm="HS256")


def _user_from_token(token: str):
    try:
        payload = jwt.decode(token, current_app.config["JWT_SECRET"], algorithms=["HS256"],
                             issuer=JWT_ISSUER, options={"require": ["exp", "iat", "iss"]})
    except jwt.PyJWTError as e:
        current_app.logger.info("[AUTH] bearer token rejected: %s", e)
        return None
    user = {"id": payload.get("uid"), "email": payload.get("email"),
            "name": payload.get("name"), "role": payload.get("role")}
    if payload.get("company"): user["company"] = payload["company"]
    if payload.get("phone"): user["phone"] = payload["phone"]
    return user


def current_user():
    """Session user, else the user carried by an Authorization: Bearer token."""
    user = session.get(SESSION_KEY)
    if user:
        return user
    auth = request.headers.get("Authorization") or ""
    if auth.startswith("Bearer "):
        return _user_from_token(auth[7:].strip())
    return None


# ---------- Store operations ----------
def login(email: str, password: str):
    """Mock credential check. Returns the session user or None."""
    email = _norm_email(email)
    password = password if isinstance(password, str) else ""
    if not email or not password:
        return None

    cfg = current_app.config
    if email == _norm_email(cfg["ADMIN_EMAIL"]):
        if password != cfg["ADMIN_PASSWORD"]:
            current_app.logger.info("[AUTH] bad admin password for %s", email)
            return None
        u = _latest_user(email)
        if u is None or u.role != "admin":
            u = _create_user(id=_ts_id(), email=email, name=email.split("@")[0], role="admin")
        return _persist_session(u.to_dict())

    u = _latest_user(email)
    if u is not None:
        if u.password_hash and not check_password_hash(u.password_hash, password):
            current_app.logger.info("[AUTH] bad credentials for %s", email)
            return None
        return _persist_session(u.to_dict())

    role = "realtor" if allowed_domain(email) else "client"
    u = _create_user(id=_ts_id(), email=email, name=email.split("@")[0],
                     role=role, company=company_for(email) if role == "realtor" else None)
    current_app.logger.info("[AUTH] login %s as %s", email, role)
    return _persist_session(u.to_dict())


def send_verification_code(email: str) -> bool:
    email = _norm_email(email)
    if not email:
        raise AuthError("Email is required", 400)
    if not allowed_domain(email):
        raise AuthError(DOMAIN_ERROR, 403)

    ttl_min = current_app.config["VERIFICATION_TTL_MIN"]
    VerificationCode.query.filter_by(email=email, used=False).update({"used": True})
    vc = VerificationCode.new(email, ttl_sec=ttl_min * 60)
    db.session.add(vc); db.session.commit()

    if send_email(**create_verification_email(email, vc.code, ttl_min)):
        current_app.logger.info("[AUTH] verification code sent to %s", email)
    else:
        # no mail transport: expose the code in the log for local use
        current_app.logger.warning("[AUTH] verification code for %s: %s", email, vc.code)
    return True


def login_with_email_code(email: str, code: str) -> dict:
    email = _norm_email(email)
    code = _text(code)
    if not email or not code:
        raise AuthError("Email and code are required", 400)
    if not allowed_domain(email):
        raise AuthError(DOMAIN_ERROR, 403)

    vc = (VerificationCode.query.filter_by(email=email, used=False)
          .order_by(VerificationCode.id.desc()).first())
    if vc is None:
        raise AuthError("No verification code found for this email", 400)
    if vc.expired():
        vc.used = True; db.session.commit()
        raise AuthError("Verification code has expired", 400)
    if vc.code != code:
        raise AuthError("Invalid verification code", 400)
    vc.used = True; db.session.commit()

    # email-code sign-in is always a realtor session, whatever else the address signed up as
    u = (User.query.filter_by(email=email, role="realtor")
         .order_by(User.pk.desc()).first())
    if u is None:
        u = _create_user(id=_ts_id("kw_"), email=email, name=email.split("@")[0],
                         role="realtor", company=company_for(email))
    current_app.logger.info("[AUTH] email-code login %s", email)
    return _persist_session(u.to_dict())


def signup(user_data: dict) -> dict:
    try:
        req = SignupRequest.model_validate(user_data or {})
    except ValidationError as e:
        raise AuthError("invalid_signup", 400, e.errors(include_url=False, include_context=False)) from e
    role = req.role if req.role in SELF_SIGNUP_ROLES else "client"
    u = _create_user(
        id=_ts_id(), email=_norm_email(req.email), name=req.name.strip(), role=role,
        company=(req.company or "").strip() or None, phone=(req.phone or "").strip() or None,
        password_hash=generate_password_hash(req.password) if req.password else None,
    )
    current_app.logger.info("[AUTH] signup %s as %s", u.email, role)
    return _persist_session(u.to_dict())


def logout():
    session.pop(SESSION_KEY, None)


def update_profile(user: dict, changes: dict) -> dict:
    try:
        upd = ProfileUpdate.model_validate(changes or {})
    except ValidationError as e:
        raise AuthError("invalid_profile", 400, e.errors(include_url=False, include_context=False)) from e
    row = User.query.filter_by(id=user["id"]).order_by(User.pk.desc()).first()
    if row is None:
        raise AuthError("user_not_found", 404)
    if upd.name is not None and upd.name.strip():
        row.name = upd.name.strip()
    if upd.company is not None:
        row.company = upd.company.strip() or None
    if upd.phone is not None:
        row.phone = upd.phone.strip() or None
    db.session.commit()

    updated = row.to_dict()
    if (session.get(SESSION_KEY) or {}).get("id") == row.id:
        session[SESSION_KEY] = updated
    return updated
