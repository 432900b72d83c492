# routes_enquiries.py — vendor enquiries and studio booking enquiries
from flask import Blueprint, request, jsonify, g

from enquiries import EnquiryStore, EnquiryValidationError
from guards import api_guard, json_body
from schemas import ENQUIRY_STATUSES
from studio_enquiries import StudioEnquiryStore

bp_enquiries = Blueprint("enquiries", __name__)


def _bad_request(e: EnquiryValidationError):
    body = {"ok": False, "error": e.message}
    if e.details:
        body["details"] = e.details
    return jsonify(body), 400


def _status_from_body():
    status = json_body().get("status")
    # non-string values fall through to the store as bad_status
    return status.strip().lower() if isinstance(status, str) else ""


# --- Vendor enquiries ---------------------------------------------------------
@bp_enquiries.post("/api/enquiries")
@api_guard("realtor", "admin")
def create_enquiry():
    data = json_body()
    user = g.user
    if user["role"] == "realtor":
        # a realtor always enquires as themselves
        data.update(realtorId=user["id"], realtorName=user.get("name") or "",
                    realtorEmail=user.get("email") or "")
    offerings = data.get("offerings")
    if (not data.get("notes") and isinstance(offerings, list) and offerings
            and all(isinstance(o, str) for o in offerings)):
        data["notes"] = f"Interested in: {', '.join(offerings)}"
    try:
        rec = EnquiryStore().add_enquiry(data)
    except EnquiryValidationError as e:
        return _bad_request(e)
    return jsonify(ok=True, enquiry=rec), 201


@bp_enquiries.get("/api/enquiries")
@api_guard("admin", "realtor", "vendor")
def list_enquiries():
    store = EnquiryStore()
    user = g.user
    if user["role"] == "realtor":
        rows = store.get_enquiries_by_realtor(user["id"])
    elif user["role"] == "vendor":
        rows = store.get_enquiries_by_vendor(user["id"])
    else:
        vendor_id = request.args.get("vendorId")
        realtor_id = request.args.get("realtorId")
        rows = store.enquiries
        if vendor_id:
            rows = [r for r in rows if r.get("vendorId") == vendor_id]
        if realtor_id:
            rows = [r for r in rows if r.get("realtorId") == realtor_id]

    st = (request.args.get("status") or "").lower()
    if st in ENQUIRY_STATUSES:
        rows = [r for r in rows if r.get("status") == st]
    return jsonify(ok=True, results=rows, count=len(rows))


@bp_enquiries.patch("/api/enquiries/<enquiry_id>")
@api_guard("admin", "vendor")
def update_enquiry(enquiry_id):
    store = EnquiryStore()
    current = store.get(enquiry_id)
    if current is None:
        return jsonify(ok=False, error="not_found"), 404
    if g.user["role"] == "vendor" and current.get("vendorId") != g.user["id"]:
        return jsonify(ok=False, error="forbidden"), 403
    try:
        rec = store.update_enquiry_status(enquiry_id, _status_from_body())
    except EnquiryValidationError as e:
        return _bad_request(e)
    return jsonify(ok=True, enquiry=rec)


# --- Studio enquiries ---------------------------------------------------------
@bp_enquiries.post("/api/studio-enquiries")
def create_studio_enquiry():
    # public booking form; no session required
    data = json_body()
    try:
        rec = StudioEnquiryStore().add_studio_enquiry(data)
    except EnquiryValidationError as e:
        return _bad_request(e)
    return jsonify(ok=True, enquiry=rec,
                   message=f"Studio booking enquiry submitted successfully for {rec['studioName']}"), 201


@bp_enquiries.get("/api/studio-enquiries")
@api_guard("admin", "realtor")
def list_studio_enquiries():
    store = StudioEnquiryStore()
    if g.user["role"] == "realtor":
        rows = store.get_studio_enquiries_by_realtor(g.user.get("email"))
    else:
        studio = request.args.get("studio")
        rows = store.get_studio_enquiries_by_studio(studio) if studio else store.studio_enquiries
    st = (request.args.get("status") or "").lower()
    if st in ENQUIRY_STATUSES:
        rows = [r for r in rows if r.get("status") == st]
    return jsonify(ok=True, results=rows, count=len(rows))


@bp_enquiries.patch("/api/studio-enquiries/<enquiry_id>")
@api_guard("admin")
def update_studio_enquiry(enquiry_id):
    try:
        rec = StudioEnquiryStore().update_studio_enquiry_status(enquiry_id, _status_from_body())
    except EnquiryValidationError as e:
        return _bad_request(e)
    if rec is None:
        return jsonify(ok=False, error="not_found"), 404
    return jsonify(ok=True, enquiry=rec)
