# routes_pages.py — role-gated pages (JSON view models for the web client)
from flask import Blueprint, jsonify, redirect, g, current_app

from enquiries import EnquiryStore
from guards import page_guard
from services_auth import current_user, get_redirect_path
from strapi_api import StrapiError, get_client, convert_strapi_vendor
from studio_enquiries import StudioEnquiryStore

bp_pages = Blueprint("pages", __name__)


@bp_pages.get("/login")
def login_page():
    user = current_user()
    if user:
        return redirect(get_redirect_path(user))
    return jsonify(page="login", actions={
        "password": "/api/auth/login",
        "send_code": "/api/auth/send-code",
        "verify_code": "/api/auth/verify-code",
        "signup": "/api/auth/signup",
    })


@bp_pages.get("/dashboard")
@page_guard()
def dashboard_page():
    return jsonify(page="dashboard", user=g.user)


@bp_pages.get("/admin")
@page_guard("admin")
def admin_page():
    return jsonify(page="admin", user=g.user,
                   enquiries=EnquiryStore().count_by_status(),
                   studio_enquiries=StudioEnquiryStore().count_by_status())


@bp_pages.get("/admin/enquiries")
@page_guard("admin")
def admin_enquiries_page():
    return jsonify(page="admin/enquiries", enquiries=EnquiryStore().enquiries)


@bp_pages.get("/admin/studio-enquiries")
@page_guard("admin")
def admin_studio_enquiries_page():
    return jsonify(page="admin/studio-enquiries", enquiries=StudioEnquiryStore().studio_enquiries)


@bp_pages.get("/enquiries")
@page_guard("realtor")
def realtor_enquiries_page():
    return jsonify(page="enquiries", enquiries=EnquiryStore().get_enquiries_by_realtor(g.user["id"]))


@bp_pages.get("/vendor/dashboard")
@page_guard("vendor")
def vendor_dashboard_page():
    rows = EnquiryStore().get_enquiries_by_vendor(g.user["id"])
    return jsonify(page="vendor/dashboard", user=g.user, enquiries=rows)


@bp_pages.get("/vendors")
@page_guard("realtor")
def vendors_page():
    try:
        vendors = [convert_strapi_vendor(v) for v in get_client().get_vendors(status="active")]
    except StrapiError as e:
        current_app.logger.warning("[PAGES] vendor listing unavailable: %s", e)
        return jsonify(page="vendors", error="Failed to load vendors", retry="/vendors"), 502
    return jsonify(page="vendors", vendors=vendors)
