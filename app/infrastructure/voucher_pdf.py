"""
Booking voucher rendered as an A4 PDF with the reportlab canvas API.

render_voucher is a pure function of the order and its bank account: the same
input always lays out the same text in the same positions.
"""

import io
import logging
import os
from datetime import date, datetime
from functools import lru_cache
from typing import Any, Mapping, Optional

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import A4
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from app.config import get_settings

logger = logging.getLogger(__name__)

# ─── PAGE GEOMETRY ───
PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 50
BOTTOM = 50

# ─── PALETTE ───
NAVY = HexColor("#1B2A4A")
CHARCOAL = HexColor("#2D3748")
SLATE = HexColor("#64748B")

# ─── FONT REGISTRATION ───
BUILTIN_FONTS = ("Helvetica", "Helvetica-Bold")


@lru_cache
def voucher_fonts() -> tuple:
    """Regular and bold font names, registered once per process.

    The built-in Helvetica has no Cyrillic glyphs, so the configured TTF pair
    is used whenever both files exist.
    """
    settings = get_settings()
    regular, bold = settings.VOUCHER_FONT_PATH, settings.VOUCHER_FONT_BOLD_PATH
    if not (os.path.isfile(regular) and os.path.isfile(bold)):
        logger.warning("Voucher TTF fonts not found, non-Latin text will not render: %s, %s", regular, bold)
        return BUILTIN_FONTS
    pdfmetrics.registerFont(TTFont("VoucherSans", regular))
    pdfmetrics.registerFont(TTFont("VoucherSans-Bold", bold))
    return "VoucherSans", "VoucherSans-Bold"


IMPORTANT_INFORMATION = [
    ("Deposit Rules (60/59 days):", [
        "Deposit must be paid within 60 days before check-in",
        "Cancellation policy applies according to Greek legislation",
    ]),
    ("Check-in/Check-out:", [
        "Check-in: 15:00 - 18:00",
        "Check-out: 08:00 - 11:00",
    ]),
    ("Quiet Hours (Greek Law):", [
        "15:00 - 17:30 and 22:00 - 07:00",
    ]),
    ("Personal Data Protection:", [
        "Your personal data is protected according to GDPR regulations",
        "Data is used only for reservation purposes",
    ]),
]


def format_date(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.strftime("%d.%m.%Y")
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10]).strftime("%d.%m.%Y")
    return ""


def format_amount(value: Any) -> str:
    amount = float(value or 0)
    return f"{amount:.0f}€" if amount.is_integer() else f"{amount:.2f}€"


def format_guests(guests: Optional[Mapping[str, Any]]) -> str:
    guests = guests or {}
    adults = guests.get("adults", 0) or 0
    children = guests.get("children", 0) or 0
    text = f"{adults} adult(s)"
    if children:
        text += f", {children} child(ren)"
    return text


class VoucherCanvas:
    """Top-down text cursor over a reportlab canvas."""

    def __init__(self, buffer: io.BytesIO, title: str):
        self.c = canvas.Canvas(buffer, pagesize=A4)
        self.c.setTitle(title)
        self.c.setAuthor("Travel Agency")
        self.y = PAGE_HEIGHT - MARGIN
        self.font, self.bold = voucher_fonts()

    def _ensure_room(self, height: float) -> None:
        if self.y - height < BOTTOM:
            self.c.showPage()
            self.y = PAGE_HEIGHT - MARGIN

    def centered(self, text: str, size: int, bold: bool = False, color=CHARCOAL, gap: float = 6) -> None:
        self._ensure_room(size + gap)
        self.y -= size
        self.c.setFont(self.bold if bold else self.font, size)
        self.c.setFillColor(color)
        self.c.drawCentredString(PAGE_WIDTH / 2, self.y, text)
        self.y -= gap

    def heading(self, text: str, size: int = 16) -> None:
        self.space(12)
        self._ensure_room(size + 10)
        self.y -= size
        self.c.setFont(self.bold, size)
        self.c.setFillColor(NAVY)
        self.c.drawString(MARGIN, self.y, text)
        width = self.c.stringWidth(text, self.bold, size)
        self.c.setStrokeColor(NAVY)
        self.c.setLineWidth(0.8)
        self.c.line(MARGIN, self.y - 2, MARGIN + width, self.y - 2)
        self.y -= 10

    def line(self, text: str, size: int = 12, bold: bool = False, indent: float = 0, color=CHARCOAL) -> None:
        self._ensure_room(size + 4)
        self.y -= size
        self.c.setFont(self.bold if bold else self.font, size)
        self.c.setFillColor(color)
        self.c.drawString(MARGIN + indent, self.y, text)
        self.y -= 4

    def space(self, height: float) -> None:
        self.y -= height

    def finish(self) -> None:
        self.c.showPage()
        self.c.save()


def render_voucher(order: Mapping[str, Any], bank_account: Optional[Mapping[str, Any]] = None) -> bytes:
    """Lay out one approved order as voucher PDF bytes.

    `order` and `bank_account` use the column names of the orders and
    bank_accounts tables.
    """
    buffer = io.BytesIO()
    pdf = VoucherCanvas(buffer, title=f"Voucher {order['reservation_number']}")

    # Header
    pdf.centered("TRAVEL AGENCY", 20, bold=True, color=NAVY, gap=10)
    pdf.centered(
        f"We are pleased to confirm your reservation made on {format_date(order.get('created_at'))}",
        14,
    )
    pdf.space(16)

    pdf.heading("RESERVATION DETAILS")
    pdf.line(f"Check in/out: {format_date(order['check_in'])} – {format_date(order['check_out'])}")
    pdf.line(f"Nights: {order['nights']}")
    pdf.line(f"Property: {order['property_name']}")
    pdf.line(f"Location: {order['city_travel']}, {order['country_travel']}")
    pdf.line(f"Number: {order['reservation_number']}")
    pdf.line(f"Client Name: {order['client_name']}")
    if order.get("client_document_number"):
        pdf.line(f"Client ID No: {order['client_document_number']}")
    if order.get("guests"):
        pdf.line(f"Guests: {format_guests(order['guests'])}")
    if order.get("client_phone"):
        pdf.line(f"Client Phone: {', '.join(order['client_phone'])}")

    official_price = order.get("official_price") or 0
    tax = order.get("tax_clean") or 0
    balance = (order.get("payments") or {}).get("balance") or {}

    pdf.heading("FINANCIAL INFORMATION")
    pdf.line(
        f"Official Price: {format_amount(official_price)} + {format_amount(tax)} (tax) "
        f"= {format_amount(official_price + tax)}"
    )
    pdf.line(f"Total price: {format_amount(order['total_price'])}")
    pdf.line(f"Cash on check-in: {format_amount(balance.get('amount'))}")

    if bank_account:
        pdf.heading("BANK ACCOUNT DETAILS")
        pdf.line(f"Bank Name: {bank_account['bank_name']}")
        pdf.line(f"IBAN: {bank_account['iban']}")
        pdf.line(f"SWIFT: {bank_account['swift']}")
        pdf.line(f"Account Holder: {bank_account['holder_name']}")
        if bank_account.get("address"):
            pdf.line(f"Address: {bank_account['address']}")
        pdf.line(f"Note on Payment: {order['reservation_number']}")

    pdf.space(12)
    pdf.heading("IMPORTANT INFORMATION", size=14)
    for title, items in IMPORTANT_INFORMATION:
        pdf.line(title, size=10, bold=True)
        for item in items:
            pdf.line(f"• {item}", size=9, indent=10, color=SLATE)
        pdf.space(4)

    pdf.finish()
    return buffer.getvalue()
