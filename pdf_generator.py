from fpdf import FPDF

from invoices import COMPANY_NAME, COMPANY_EMAIL, TAX_RATE, format_date, invoice_totals
from schemas import InvoiceData

# --- LAYOUT (mm, A4) ---
BRAND_RGB = (39, 63, 79)    # #273f4f
MUTED_RGB = (100, 100, 100)
TABLE_Y = 140
COLUMN_X = (20, 100, 120, 150)
PAGE_BOTTOM_Y = 250


class InvoicePDF(FPDF):
    def __init__(self):
        super().__init__(orientation="P", unit="mm", format="A4")
        # rows are placed at absolute positions; page breaks are handled by hand
        self.set_auto_page_break(auto=False)


def _sanitize_text(text) -> str:
    """Core fonts are latin-1 only."""
    if not text:
        return ""
    text = str(text)
    for char, repl in {"‘": "'", "’": "'", "“": '"', "”": '"',
                       "–": "-", "—": "--", "…": "..."}.items():
        text = text.replace(char, repl)
    return text.encode("latin-1", "replace").decode("latin-1")


def split_text_to_fit(text: str, max_chars: int) -> list:
    """Greedy word wrap by character count; a single over-long word gets its own line."""
    lines, current = [], ""
    for word in (text or "").split():
        candidate = f"{current} {word}" if current else word
        if len(candidate) <= max_chars:
            current = candidate
        else:
            if current:
                lines.append(current)
            current = word
    if current:
        lines.append(current)
    return lines


def _style(pdf, size, rgb=MUTED_RGB, bold=False):
    pdf.set_font("helvetica", "B" if bold else "", size)
    pdf.set_text_color(*rgb)


def _text(pdf, x, y, value):
    pdf.text(x, y, _sanitize_text(value))


def generate_invoice_pdf(inv: InvoiceData) -> bytes:
    pdf = InvoicePDF()
    pdf.add_page()

    _style(pdf, 24, BRAND_RGB)
    _text(pdf, 20, 30, "INVOICE")

    _style(pdf, 12)
    _text(pdf, 20, 45, COMPANY_NAME)
    _text(pdf, 20, 52, "KW Singapore")
    _text(pdf, 20, 59, f"Email: {COMPANY_EMAIL}")

    _style(pdf, 14, BRAND_RGB)
    _text(pdf, 120, 45, "Invoice Details")
    _style(pdf, 10)
    _text(pdf, 120, 55, f"Invoice Number: {inv.invoice_number}")
    _text(pdf, 120, 62, f"Issue Date: {format_date(inv.issue_date)}")
    _text(pdf, 120, 69, f"Due Date: {format_date(inv.due_date)}")

    _style(pdf, 14, BRAND_RGB)
    _text(pdf, 20, 85, "Bill To:")
    _style(pdf, 10)
    _text(pdf, 20, 95, inv.client_name)
    _text(pdf, 20, 102, inv.client_email)
    if inv.client_phone:
        _text(pdf, 20, 109, inv.client_phone)
    for i, line in enumerate(split_text_to_fit(inv.client_address, 60)):
        _text(pdf, 20, 116 + i * 7, line)

    # Items table
    _style(pdf, 12, BRAND_RGB)
    pdf.set_fill_color(248, 249, 250)
    pdf.rect(20, TABLE_Y - 5, 160, 10, style="F")
    for x, header in zip(COLUMN_X, ("Description", "Qty", "Rate", "Amount")):
        _text(pdf, x, TABLE_Y, header)

    _style(pdf, 10)
    y = TABLE_Y + 15
    for item in inv.items:
        if y > PAGE_BOTTOM_Y:
            pdf.add_page()
            _style(pdf, 10)
            y = 20
        desc_lines = split_text_to_fit(item.description, 70) or [""]
        for i, line in enumerate(desc_lines):
            _text(pdf, COLUMN_X[0], y + i * 5, line)
        _text(pdf, COLUMN_X[1], y, f"{item.quantity:g}")
        _text(pdf, COLUMN_X[2], y, f"${item.rate:.2f}")
        _text(pdf, COLUMN_X[3], y, f"${item.amount:.2f}")
        y += len(desc_lines) * 5 + 5

    t = invoice_totals(inv)
    totals_y = max(y + 10, 220)
    if totals_y + 20 > 287:
        pdf.add_page()
        totals_y = 30
    _style(pdf, 10)
    _text(pdf, 130, totals_y, "Subtotal:")
    _text(pdf, 170, totals_y, f"${t['subtotal']:.2f}")
    _text(pdf, 130, totals_y + 8, f"Tax ({int(TAX_RATE * 100)}%):")
    _text(pdf, 170, totals_y + 8, f"${t['tax']:.2f}")
    _style(pdf, 12, BRAND_RGB, bold=True)
    _text(pdf, 130, totals_y + 20, "Total:")
    _text(pdf, 170, totals_y + 20, f"${t['total']:.2f}")

    if inv.notes:
        notes_y = totals_y + 40
        notes = split_text_to_fit(inv.notes, 80)
        if notes_y + 10 + len(notes) * 5 > 287:
            pdf.add_page()
            notes_y = 30
        _style(pdf, 12, BRAND_RGB)
        _text(pdf, 20, notes_y, "Notes:")
        _style(pdf, 10)
        for i, line in enumerate(notes):
            _text(pdf, 20, notes_y + 10 + i * 5, line)

    return bytes(pdf.output())


def invoice_filename(inv: InvoiceData) -> str:
    return f"invoice-{inv.invoice_number}.pdf"
