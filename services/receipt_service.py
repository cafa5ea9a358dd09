"""
services/receipt_service.py
---------------------------
Renders PDF donation receipts with fpdf2.

Text is set in DejaVu Sans (a Unicode TTF shipped with matplotlib), so donor
names and addresses in any script DejaVu covers print as typed. Scripts it
does not cover, such as Devanagari, need a TTF listed in PDF_FALLBACK_FONTS.
"""

import os
from datetime import datetime
from typing import Optional

import matplotlib
from fpdf import FPDF
from fpdf.enums import XPos, YPos

from config import (
    NGO_ADDRESS,
    NGO_EMAIL,
    NGO_NAME,
    NGO_PHONE,
    NGO_TAGLINE,
    PDF_FALLBACK_FONTS,
    PDF_FONT_DIR,
    PDF_TEXT_SHAPING,
    RECEIPTS_DIR,
)
from models.donation import Donation
from utils.logger import get_logger

logger = get_logger(__name__)

PRIMARY = (29, 53, 87)
ACCENT = (11, 114, 133)
LIGHT = (244, 246, 251)
MUTED = (108, 122, 145)

FONT = "DejaVu"
FONT_FILES = {
    "": "DejaVuSans.ttf",
    "B": "DejaVuSans-Bold.ttf",
    "I": "DejaVuSans-Oblique.ttf",
    "BI": "DejaVuSans-BoldOblique.ttf",
}


def default_font_dir() -> str:
    return PDF_FONT_DIR or os.path.join(matplotlib.get_data_path(), "fonts", "ttf")


class ReceiptPDF(FPDF):
    """
    A4 page with the NGO letterhead and footer.

    Args:
        font_dir: Directory with the DejaVu Sans TTFs (defaults to matplotlib's copy).
        fallback_fonts: TTF paths tried for characters DejaVu has no glyph for.
            Missing files are skipped with a warning.
        text_shaping: Enable HarfBuzz shaping (requires uharfbuzz).
    """

    def __init__(self, *args, font_dir: Optional[str] = None,
                 fallback_fonts: Optional[list[str]] = None,
                 text_shaping: Optional[bool] = None, **kwargs):
        super().__init__(*args, **kwargs)
        font_dir = font_dir or default_font_dir()
        for style, filename in FONT_FILES.items():
            self.add_font(FONT, style, os.path.join(font_dir, filename))

        self.fallback_families: list[str] = []
        for path in PDF_FALLBACK_FONTS if fallback_fonts is None else fallback_fonts:
            if not os.path.isfile(path):
                logger.warning(f"Fallback font {path} not found; skipping it")
                continue
            family = os.path.splitext(os.path.basename(path))[0]
            self.add_font(family, "", path)
            self.fallback_families.append(family)
        if self.fallback_families:
            self.set_fallback_fonts(self.fallback_families)

        if PDF_TEXT_SHAPING if text_shaping is None else text_shaping:
            self.set_text_shaping(True)

    def header(self):
        self.set_fill_color(*LIGHT)
        self.set_draw_color(*PRIMARY)
        self.rect(10, 10, 190, 38, style="DF")
        self.set_xy(16, 14)
        self.set_font(FONT, "B", 26)
        self.set_text_color(*ACCENT)
        self.cell(0, 11, "HOPE", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_x(16)
        self.set_font(FONT, "B", 14)
        self.set_text_color(*PRIMARY)
        self.cell(0, 8, NGO_NAME, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_x(16)
        self.set_font(FONT, "", 9)
        self.set_text_color(*MUTED)
        self.cell(0, 5, f"{NGO_ADDRESS} | Phone: {NGO_PHONE} | Email: {NGO_EMAIL}",
                  new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_y(55)

    def footer(self):
        self.set_y(-20)
        self.set_draw_color(*MUTED)
        self.line(10, self.get_y(), 200, self.get_y())
        self.set_font(FONT, "", 8)
        self.set_text_color(*MUTED)
        self.cell(0, 6, f"{NGO_NAME} | {NGO_TAGLINE}", align="C",
                  new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.cell(0, 5, f"Generated on: {datetime.now().strftime('%Y-%m-%d %H:%M')}", align="C")

    def section(self, title: str) -> None:
        self.ln(4)
        self.set_fill_color(*ACCENT)
        self.set_text_color(255, 255, 255)
        self.set_font(FONT, "B", 12)
        self.cell(0, 9, f"  {title}", fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.ln(3)

    def field(self, label: str, value) -> None:
        self.set_x(16)
        self.set_font(FONT, "B", 10)
        self.set_text_color(*PRIMARY)
        self.cell(50, 7, label)
        self.set_font(FONT, "", 10)
        self.set_text_color(0, 0, 0)
        self.multi_cell(0, 7, str(value if value is not None else ""),
                        new_x=XPos.LMARGIN, new_y=YPos.NEXT)


class ReceiptService:
    """Produces one PDF per donation and returns where it was written."""

    def __init__(self, output_dir: str = RECEIPTS_DIR):
        self.output_dir = output_dir

    def generate(self, donation: Donation, donor: dict) -> str:
        """
        Render the receipt for a donation.

        Args:
            donation: A persisted donation (its id names the file).
            donor: Donor dict with at least 'full_name'.

        Returns:
            Path of the written PDF.
        """
        os.makedirs(self.output_dir, exist_ok=True)
        path = os.path.join(self.output_dir, f"{donation.id}.pdf")

        pdf = ReceiptPDF(format="A4")
        pdf.set_title("Donation Receipt")
        pdf.set_author(NGO_NAME)
        pdf.add_page()

        pdf.set_font(FONT, "B", 20)
        pdf.set_text_color(*PRIMARY)
        pdf.cell(0, 10, "DONATION RECEIPT", align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font(FONT, "I", 9)
        pdf.set_text_color(*ACCENT)
        pdf.cell(0, 6, "(Tax Exemption Certificate Available)", align="C",
                 new_x=XPos.LMARGIN, new_y=YPos.NEXT)

        issued = donation.created_at or datetime.now()
        pdf.ln(2)
        pdf.field("Receipt Number:", f"HOPE-{donation.id:06d}")
        pdf.field("Receipt Date:", issued.strftime("%d %B %Y"))

        pdf.section("DONOR DETAILS")
        pdf.field("Name:", donor.get("full_name"))
        pdf.field("Email:", donor.get("email") or "-")
        pdf.field("Contact Number:", donor.get("contact_number") or "-")
        pdf.field("Address:", donor.get("address") or "-")

        pdf.section("DONATION DETAILS")
        pdf.set_fill_color(*LIGHT)
        pdf.set_draw_color(*PRIMARY)
        pdf.set_x(16)
        pdf.set_font(FONT, "B", 11)
        pdf.set_text_color(*PRIMARY)
        pdf.cell(178, 8, "  Amount Donated:", border="LTR", fill=True, new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_x(16)
        pdf.set_font(FONT, "B", 22)
        pdf.set_text_color(*ACCENT)
        pdf.cell(178, 14, f"  {donation.currency} {donation.amount:,.2f}", border="LBR", fill=True,
                 new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.ln(3)
        pdf.field("Payment Method:", donation.payment_method.upper())
        pdf.field("Transaction Status:", donation.status.upper())
        pdf.field("Currency:", donation.currency)
        pdf.field("Transaction Reference:", donation.reference)

        pdf.ln(6)
        pdf.set_font(FONT, "B", 11)
        pdf.set_text_color(*PRIMARY)
        pdf.cell(0, 7, "Thank You for Your Generous Contribution!", align="C",
                 new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        pdf.set_font(FONT, "", 9)
        pdf.set_text_color(0, 0, 0)
        pdf.multi_cell(
            0, 5,
            "Your donation helps us empower under-served communities through healthcare, "
            "education, and sustainable livelihoods. This receipt is eligible for tax deduction "
            "as per Section 80G of the Income Tax Act, 1961.",
            align="C",
        )

        pdf.output(path)
        logger.info(f"Generated receipt for donation #{donation.id} at {path}")
        return path
