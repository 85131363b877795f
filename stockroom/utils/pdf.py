# stockroom/utils/pdf.py

import io
import logging
from pathlib import Path
from typing import Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.pdfgen import canvas

from stockroom.config import settings
from stockroom.schemas.product import Product
from stockroom.services.stock import calculate_total_stock

logger = logging.getLogger(__name__)

# Optional unicode fonts; the built-in Helvetica is used when they are missing
FONT_DIR = Path(__file__).parent.parent / "assets" / "fonts"
FONT_REGULAR_PATH = FONT_DIR / "DejaVuSans.ttf"
FONT_BOLD_PATH = FONT_DIR / "DejaVuSans-Bold.ttf"

FONT_REGULAR_NAME = "Helvetica"
FONT_BOLD_NAME = "Helvetica-Bold"


class EmptyReportError(Exception):
    """Nothing to export."""


_fonts_inited = False
def _init_fonts():
    """Registers DejaVu fonts in ReportLab when they ship with the app."""
    global _fonts_inited, FONT_REGULAR_NAME, FONT_BOLD_NAME
    if _fonts_inited:
        return
    _fonts_inited = True

    if not FONT_REGULAR_PATH.exists():
        logger.debug(f"Font file not found at {FONT_REGULAR_PATH}, using Helvetica")
        return

    pdfmetrics.registerFont(TTFont("DejaVuSans", str(FONT_REGULAR_PATH)))
    FONT_REGULAR_NAME = "DejaVuSans"
    if FONT_BOLD_PATH.exists():
        pdfmetrics.registerFont(TTFont("DejaVuSans-Bold", str(FONT_BOLD_PATH)))
        FONT_BOLD_NAME = "DejaVuSans-Bold"
    else:
        FONT_BOLD_NAME = FONT_REGULAR_NAME


def _fmt_number(value: float) -> str:
    return f"{value:g}" if float(value).is_integer() else f"{value:.2f}"


def generate_products_report(products: Sequence[Product]) -> bytes:
    """
    Catalog report: one table row per product with its total stock.
    Raises EmptyReportError when the catalog is empty.
    """
    if not products:
        raise EmptyReportError("No products available to export.")

    _init_fonts()
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4

    columns = [
        (22 * mm, "ID", "left"),
        (37 * mm, "Name", "left"),
        (82 * mm, "Type", "left"),
        (110 * mm, "Barcode", "left"),
        (150 * mm, "Price ($)", "right"),
        (153 * mm, "Supplier", "left"),
        (188 * mm, "Stock", "right"),
    ]

    def draw_header(y):
        c.setFillColorRGB(0.95, 0.95, 0.95)
        c.rect(20 * mm, y - 2 * mm, 170 * mm, 8 * mm, fill=1, stroke=0)
        c.setFillColorRGB(0, 0, 0)
        c.setFont(FONT_BOLD_NAME, 9)
        for x, label, align in columns:
            if align == "right":
                c.drawRightString(x, y, label)
            else:
                c.drawString(x, y, label)
        return y - 8 * mm

    # --- Title ---
    y = height - 20 * mm
    c.setFont(FONT_BOLD_NAME, 16)
    c.drawCentredString(width / 2, y, "Product Report")
    y -= 15 * mm
    y = draw_header(y)

    # --- Rows ---
    c.setFont(FONT_REGULAR_NAME, 9)
    for product in products:
        values = [
            str(product.id)[:8],
            product.name[:24],
            product.type[:16],
            product.barcode[:20],
            f"{product.price:.2f}",
            product.supplier[:18],
            str(calculate_total_stock(product)),
        ]
        for (x, _, align), text in zip(columns, values):
            if align == "right":
                c.drawRightString(x, y, text)
            else:
                c.drawString(x, y, text)

        c.setLineWidth(0.1)
        c.line(20 * mm, y - 2 * mm, 190 * mm, y - 2 * mm)
        y -= 6 * mm

        # New page
        if y < 20 * mm:
            c.showPage()
            y = draw_header(height - 20 * mm)
            c.setFont(FONT_REGULAR_NAME, 9)

    c.showPage()
    c.save()
    return buffer.getvalue()


def generate_product_sheet(product: Product) -> bytes:
    """Single product sheet: prices, identifiers and total stock."""
    _init_fonts()
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    width, height = A4
    currency = settings.CURRENCY

    y = height - 25 * mm
    c.setFont(FONT_BOLD_NAME, 18)
    c.drawString(20 * mm, y, product.name)
    y -= 6 * mm
    c.setLineWidth(0.5)
    c.line(20 * mm, y, 190 * mm, y)
    y -= 10 * mm

    lines = [
        ("Type", product.type),
        ("Price", f"{_fmt_number(product.display_price)} {currency}"),
    ]
    if product.solde is not None:
        lines.append(("Original Price", f"{_fmt_number(product.price)} {currency}"))
    lines += [
        ("Barcode", product.barcode),
        ("Supplier", product.supplier),
        ("Total Stock", f"{calculate_total_stock(product)} units"),
    ]

    for label, value in lines:
        c.setFont(FONT_BOLD_NAME, 11)
        c.drawString(20 * mm, y, f"{label}:")
        c.setFont(FONT_REGULAR_NAME, 11)
        c.drawString(60 * mm, y, str(value))
        y -= 7 * mm

    # Per-warehouse breakdown
    if product.stocks:
        y -= 5 * mm
        c.setFont(FONT_BOLD_NAME, 11)
        c.drawString(20 * mm, y, "Stocks:")
        y -= 7 * mm
        c.setFont(FONT_REGULAR_NAME, 10)
        for stock in product.stocks:
            city = stock.localisation.city if stock.localisation else "-"
            c.drawString(25 * mm, y, f"{stock.name} ({city})")
            c.drawRightString(120 * mm, y, str(stock.quantity))
            y -= 6 * mm

    c.showPage()
    c.save()
    return buffer.getvalue()
