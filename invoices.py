# invoices.py — invoice validation, totals, email template and the "invoices" storage key
from datetime import datetime
from html import escape
from flask import current_app
from pydantic import ValidationError

from enquiries import now_iso
from schemas import InvoiceData
from storage import INVOICES_KEY, LocalStorage, get_storage, load_array, save_array

TAX_RATE = 0.10
COMPANY_NAME = "Chief Media Platform"
COMPANY_EMAIL = "info@chiefmedia.sg"


class InvoiceValidationError(ValueError):
    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or []


def parse_invoice(data) -> InvoiceData:
    try:
        return InvoiceData.model_validate(data or {})
    except ValidationError as e:
        raise InvoiceValidationError(
            "Invalid invoice data", e.errors(include_url=False, include_context=False)
        ) from e


def validate_invoice(data, require_items: bool = True) -> InvoiceData:
    """Form gate: raises before any persist/send when required fields or items are missing."""
    inv = data if isinstance(data, InvoiceData) else parse_invoice(data)
    if not inv.invoice_number.strip():
        raise InvoiceValidationError("Please enter an invoice number")
    if not inv.client_name.strip():
        raise InvoiceValidationError("Please enter a client name")
    if not inv.client_email.strip():
        raise InvoiceValidationError("Please enter a client email")
    if require_items and not inv.items:
        raise InvoiceValidationError("Please add at least one item to the invoice")
    return inv


def invoice_totals(inv: InvoiceData) -> dict:
    subtotal = round(sum(item.amount or 0 for item in inv.items), 2)
    tax = round(subtotal * TAX_RATE, 2)
    return {"subtotal": subtotal, "tax": tax, "total": round(subtotal + tax, 2)}


def format_date(value: str) -> str:
    """'2025-01-05' -> 'January 5, 2025'; anything unparsable is returned as-is."""
    try:
        d = datetime.fromisoformat((value or "").replace("Z", "+00:00"))
    except ValueError:
        return value or ""
    return f"{d.strftime('%B')} {d.day}, {d.year}"


def create_invoice_email(inv: InvoiceData) -> dict:
    t = invoice_totals(inv)
    rows = "".join(
        f"<tr><td style=\"padding: 12px; border-bottom: 1px solid #dee2e6;\">{escape(item.description)}</td>"
        f"<td style=\"padding: 12px; text-align: center; border-bottom: 1px solid #dee2e6;\">{item.quantity:g}</td>"
        f"<td style=\"padding: 12px; text-align: right; border-bottom: 1px solid #dee2e6;\">${item.rate:.2f}</td>"
        f"<td style=\"padding: 12px; text-align: right; border-bottom: 1px solid #dee2e6;\">${item.amount:.2f}</td></tr>"
        for item in inv.items
    )
    bill_to = [inv.client_name, inv.client_email, inv.client_phone, inv.client_address]
    bill_to_html = "".join(f"<p style=\"color: #333; margin: 0 0 5px 0;\">{escape(x)}</p>" for x in bill_to if x)
    notes_html = ""
    if inv.notes:
        notes_html = (
            "<div style=\"background-color: #f8f9fa; padding: 20px; border-radius: 8px; margin-bottom: 30px;\">"
            "<p style=\"color: #273f4f; font-weight: bold; margin: 0 0 10px 0;\">Notes:</p>"
            f"<p style=\"color: #666; margin: 0; line-height: 1.6;\">{escape(inv.notes)}</p></div>"
        )
    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <div style="background: linear-gradient(135deg, #03809c 0%, #273f4f 100%); padding: 30px; border-radius: 10px; text-align: center;">
    <h1 style="color: white; margin: 0; font-size: 24px;">{COMPANY_NAME}</h1>
    <p style="color: white; margin: 10px 0 0 0; opacity: 0.9;">KW Singapore</p>
  </div>
  <div style="background: white; padding: 30px; border-radius: 0 0 10px 10px;">
    <h2 style="color: #273f4f; margin: 0 0 20px 0;">Invoice {escape(inv.invoice_number)}</h2>
    <div style="margin-bottom: 30px;">
      <p style="color: #666; margin: 0 0 10px 0; font-weight: bold;">Bill To:</p>
      {bill_to_html}
    </div>
    <div style="margin-bottom: 30px;">
      <p style="color: #666; margin: 0 0 10px 0; font-weight: bold;">Invoice Details:</p>
      <p style="color: #333; margin: 0 0 5px 0;">Issue Date: {escape(format_date(inv.issue_date))}</p>
      <p style="color: #333; margin: 0 0 5px 0;">Due Date: {escape(format_date(inv.due_date))}</p>
    </div>
    <table style="width: 100%; border-collapse: collapse; margin-bottom: 30px;">
      <thead><tr style="background-color: #f8f9fa;">
        <th style="padding: 12px; text-align: left;">Description</th>
        <th style="padding: 12px; text-align: center;">Qty</th>
        <th style="padding: 12px; text-align: right;">Rate</th>
        <th style="padding: 12px; text-align: right;">Amount</th>
      </tr></thead>
      <tbody>{rows}</tbody>
    </table>
    <div style="text-align: right; margin-bottom: 30px;">
      <div>Subtotal: <b>${t['subtotal']:.2f}</b></div>
      <div>Tax ({int(TAX_RATE * 100)}%): <b>${t['tax']:.2f}</b></div>
      <div style="border-top: 2px solid #dee2e6; padding-top: 10px; color: #273f4f; font-size: 18px;">Total: <b>${t['total']:.2f}</b></div>
    </div>
    {notes_html}
    <div style="background-color: #f8f9fa; padding: 20px; border-radius: 8px; text-align: center;">
      <p style="color: #666; margin: 0 0 15px 0; font-weight: bold;">Payment Instructions</p>
      <p style="color: #666; margin: 0; line-height: 1.6;">
        Please make payment by the due date. For payment inquiries, please contact us at {COMPANY_EMAIL}
      </p>
    </div>
  </div>
</div>
"""
    return {"to": inv.client_email, "subject": f"Invoice {inv.invoice_number} from {COMPANY_NAME}", "html": html}


def save_invoice(inv: InvoiceData, created_by: str = None, storage: LocalStorage = None) -> dict:
    storage = storage or get_storage()
    items = load_array(storage, INVOICES_KEY)
    rec = inv.to_record()
    rec.update(invoice_totals(inv))
    rec["createdAt"] = now_iso()
    rec["status"] = "draft"
    if created_by:
        rec["createdBy"] = created_by
    save_array(storage, INVOICES_KEY, items + [rec])
    current_app.logger.info("[INVOICE] %s saved (%d items)", inv.invoice_number, len(inv.items))
    return rec


def list_invoices(storage: LocalStorage = None) -> list:
    return load_array(storage or get_storage(), INVOICES_KEY)
