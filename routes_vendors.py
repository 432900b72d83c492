# routes_vendors.py — public listings + admin proxies over the content API
from functools import wraps
from flask import Blueprint, request, jsonify, current_app

from guards import api_guard, json_body
from strapi_api import StrapiError, get_client, convert_strapi_vendor, convert_strapi_studio

bp_vendors = Blueprint("vendors", __name__)

VENDOR_FIELDS = ("name", "company", "services", "location", "rating", "projects", "experience",
                 "description", "specialties", "status", "contact", "image")


def content_api(f):
    """Turn content-API failures into a generic error answer."""
    @wraps(f)
    def wrapper(*args, **kwargs):
        try:
            return f(*args, **kwargs)
        except StrapiError as e:
            # upstream status is logged, never relayed
            current_app.logger.warning("[STRAPI] %s (upstream %s): %s", request.path, e.status, e)
            return jsonify(ok=False, error="content_api_error",
                           message="Content service is unavailable, please try again"), 502
    return wrapper


def _filled(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _validate_vendor(body: dict):
    for field in ("name", "company", "location", "description"):
        if not _filled(body.get(field)):
            return f"{field.capitalize()} is required"
    contact = body.get("contact")
    contact = contact if isinstance(contact, dict) else {}
    if not all(_filled(contact.get(k)) for k in ("email", "phone", "address")):
        return "Contact email, phone, and address are required"
    return None


def _validate_studio(body: dict):
    for field in ("name", "address", "description"):
        if not _filled(body.get(field)):
            return f"{field.capitalize()} is required"
    contact = body.get("contact")
    contact = contact if isinstance(contact, dict) else {}
    if not all(_filled(contact.get(k)) for k in ("email", "phone")):
        return "Contact email and phone are required"
    return None


# --- Public -------------------------------------------------------------------
@bp_vendors.get("/api/vendors")
@content_api
def list_vendors():
    vendors = get_client().get_vendors(status="active",
                                       search=request.args.get("search") or None,
                                       location=request.args.get("location") or None)
    rows = [convert_strapi_vendor(v) for v in vendors]
    service = request.args.get("service")
    if service and service != "all":
        rows = [v for v in rows if service in v["services"]]
    return jsonify(ok=True, data=rows, message="Vendors fetched successfully")


@bp_vendors.get("/api/vendors/<vendor_id>")
@content_api
def get_vendor(vendor_id):
    v = get_client().get_vendor(vendor_id)
    if not v or v.get("status") != "active":
        return jsonify(ok=False, error="not_found"), 404
    return jsonify(ok=True, data=convert_strapi_vendor(v))


@bp_vendors.get("/api/studios")
@content_api
def list_studios():
    studios = get_client().get_studios(status="active", search=request.args.get("search") or None)
    return jsonify(ok=True, data=[convert_strapi_studio(s) for s in studios])


# --- Admin: vendors -----------------------------------------------------------
@bp_vendors.get("/api/admin/vendors")
@api_guard("admin")
@content_api
def admin_list_vendors():
    vendors = get_client().get_vendors(status=request.args.get("status") or None,
                                       search=request.args.get("search") or None,
                                       location=request.args.get("location") or None)
    return jsonify(ok=True, data=[convert_strapi_vendor(v) for v in vendors])


@bp_vendors.post("/api/admin/vendors")
@api_guard("admin")
@content_api
def admin_create_vendor():
    body = json_body()
    err = _validate_vendor(body)
    if err:
        return jsonify(ok=False, error=err), 400
    v = get_client().create_vendor(body)
    current_app.logger.info("[VENDORS] created %s", v.get("id"))
    return jsonify(ok=True, data=convert_strapi_vendor(v), message="Vendor created successfully"), 201


@bp_vendors.get("/api/admin/vendors/<vendor_id>")
@api_guard("admin")
@content_api
def admin_get_vendor(vendor_id):
    v = get_client().get_vendor(vendor_id)
    if not v:
        return jsonify(ok=False, error="not_found"), 404
    return jsonify(ok=True, data=convert_strapi_vendor(v))


@bp_vendors.put("/api/admin/vendors/<vendor_id>")
@api_guard("admin")
@content_api
def admin_update_vendor(vendor_id):
    body = json_body()
    changes = {k: body[k] for k in VENDOR_FIELDS if k in body}
    if not changes:
        return jsonify(ok=False, error="no_changes"), 400
    v = get_client().update_vendor(vendor_id, changes)
    return jsonify(ok=True, data=convert_strapi_vendor(v))


@bp_vendors.delete("/api/admin/vendors/<vendor_id>")
@api_guard("admin")
@content_api
def admin_delete_vendor(vendor_id):
    get_client().delete_vendor(vendor_id)
    return jsonify(ok=True)


# --- Admin: studios -----------------------------------------------------------
@bp_vendors.get("/api/admin/studios")
@api_guard("admin")
@content_api
def admin_list_studios():
    studios = get_client().get_studios(status=request.args.get("status") or None,
                                       search=request.args.get("search") or None)
    return jsonify(ok=True, data=[convert_strapi_studio(s) for s in studios])


@bp_vendors.post("/api/admin/studios")
@api_guard("admin")
@content_api
def admin_create_studio():
    body = json_body()
    err = _validate_studio(body)
    if err:
        return jsonify(ok=False, error=err), 400
    s = get_client().create_studio(body)
    return jsonify(ok=True, data=convert_strapi_studio(s)), 201


@bp_vendors.get("/api/admin/studios/<studio_id>")
@api_guard("admin")
@content_api
def admin_get_studio(studio_id):
    s = get_client().get_studio(studio_id)
    if not s:
        return jsonify(ok=False, error="not_found"), 404
    return jsonify(ok=True, data=convert_strapi_studio(s))


@bp_vendors.put("/api/admin/studios/<studio_id>")
@api_guard("admin")
@content_api
def admin_update_studio(studio_id):
    body = json_body()
    s = get_client().update_studio(studio_id, body)
    return jsonify(ok=True, data=convert_strapi_studio(s))


@bp_vendors.delete("/api/admin/studios/<studio_id>")
@api_guard("admin")
@content_api
def admin_delete_studio(studio_id):
    get_client().delete_studio(studio_id)
    return jsonify(ok=True)
