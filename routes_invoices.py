# routes_invoices.py
import base64
from flask import Blueprint, request, jsonify, current_app, g, Response

from guards import api_guard, json_body
from invoices import (InvoiceValidationError, validate_invoice, create_invoice_email,
                      save_invoice, list_invoices)
from pdf_generator import generate_invoice_pdf, invoice_filename
from services_notify import send_email

bp_invoices = Blueprint("invoices", __name__)


def _invalid(e: InvoiceValidationError):
    body = {"ok": False, "error": e.message}
    if e.details:
        body["details"] = e.details
    return jsonify(body), 400


@bp_invoices.get("/api/invoices")
@api_guard("admin", "vendor")
def get_invoices():
    rows = list_invoices()
    if g.user["role"] != "admin":
        rows = [r for r in rows if r.get("createdBy") == g.user["id"]]
    return jsonify(ok=True, results=rows, count=len(rows))


@bp_invoices.post("/api/invoices")
@api_guard("admin", "vendor")
def create_invoice():
    try:
        inv = validate_invoice(json_body())
    except InvoiceValidationError as e:
        return _invalid(e)
    rec = save_invoice(inv, created_by=g.user["id"])
    return jsonify(ok=True, invoice=rec), 201


@bp_invoices.post("/api/invoices/generate-pdf")
@api_guard("admin", "vendor")
def generate_pdf():
    try:
        inv = validate_invoice(json_body(), require_items=False)
    except InvoiceValidationError as e:
        return _invalid(e)
    pdf = generate_invoice_pdf(inv)
    return jsonify(ok=True, pdfBase64=base64.b64encode(pdf).decode("ascii"), filename=invoice_filename(inv))


@bp_invoices.post("/api/invoices/download-pdf")
@api_guard("admin", "vendor")
def download_pdf():
    try:
        inv = validate_invoice(json_body(), require_items=False)
    except InvoiceValidationError as e:
        return _invalid(e)
    return Response(generate_invoice_pdf(inv), mimetype="application/pdf",
                    headers={"Content-Disposition": f'attachment; filename="{invoice_filename(inv)}"'})


@bp_invoices.post("/api/invoices/send-email")
@api_guard("admin", "vendor")
def send_invoice_email():
    data = json_body()
    try:
        inv = validate_invoice(data.get("invoiceData") or {}, require_items=False)
    except InvoiceValidationError as e:
        return _invalid(e)
    if not send_email(**create_invoice_email(inv)):
        current_app.logger.warning("[INVOICE] email for %s not sent", inv.invoice_number)
        return jsonify(ok=False, error="Failed to send email"), 500
    return jsonify(ok=True, message="Invoice email sent successfully")
