"""
Invoice PDF Generator
Builds the facility invoice (letterhead, bill-to, line items, total due) with reportlab
"""

import html
import io
import logging
from datetime import date
from typing import Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from sqlalchemy.orm import Session

from ..config import (
    AGENCY_ADDRESS_LINE1,
    AGENCY_ADDRESS_LINE2,
    AGENCY_EMAIL,
    AGENCY_NAME,
)
from ..models_billing import Invoice
from .job_billing import build_invoice_line_items
from .storage import invoice_key, upload_document

logger = logging.getLogger(__name__)


def _date(value: Optional[date]) -> str:
    return value.strftime("%m/%d/%Y") if value else ""


def _money(value: Optional[float]) -> str:
    return f"${(value or 0):,.2f}"


def invoice_line_items(invoice: Invoice) -> list[dict]:
    """Stored line items, or items rebuilt from the linked job when none are stored"""
    if invoice.items:
        return [
            {
                "description": item.description,
                "quantity": item.quantity or 0,
                "unit_price": item.unit_price or 0,
                "total": item.total or 0,
            }
            for item in invoice.items
        ]
    if invoice.job is not None:
        return build_invoice_line_items(invoice.job)
    return []


class InvoicePDFGenerator:
    """Generate facility invoice PDFs"""

    def __init__(self, invoice: Invoice):
        self.invoice = invoice
        self.facility = invoice.facility
        self.items = invoice_line_items(invoice)
        self.total = sum(item["total"] for item in self.items) if self.items else (invoice.total or 0)

        # PDF settings
        self.page_width, self.page_height = letter
        self.margin = 0.6 * inch
        self.content_width = self.page_width - (2 * self.margin)

        self.dark_gray = colors.HexColor("#1e293b")
        self.muted = colors.HexColor("#64748b")
        self.light_gray = colors.HexColor("#f1f5f9")

    def _bill_to_lines(self) -> list[str]:
        facility = self.facility
        if facility is None:
            return ["Unknown"]
        lines = [facility.billing_name or facility.name or "Unknown"]
        if facility.billing_address:
            lines.append(facility.billing_address)
        city_state_zip = " ".join(
            part
            for part in (
                f"{facility.billing_city}," if facility.billing_city else "",
                facility.billing_state or "",
                facility.billing_zip or "",
            )
            if part
        )
        if city_state_zip:
            lines.append(city_state_zip)
        return lines

    def generate(self) -> bytes:
        """Generate PDF and return bytes"""
        logger.info(f"📄 Generating invoice PDF for {self.invoice.invoice_number}")

        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=self.margin,
            leftMargin=self.margin,
            topMargin=self.margin,
            bottomMargin=self.margin,
            title=f"Invoice {self.invoice.invoice_number}",
        )

        styles = getSampleStyleSheet()
        company_style = ParagraphStyle(
            "Company", parent=styles["Heading1"], fontSize=18, textColor=self.dark_gray, spaceAfter=2
        )
        subtitle_style = ParagraphStyle(
            "Subtitle", parent=styles["Normal"], fontSize=13, textColor=self.muted, spaceAfter=6
        )
        small_style = ParagraphStyle(
            "Small", parent=styles["Normal"], fontSize=10, textColor=self.muted, leading=13
        )
        right_style = ParagraphStyle(
            "Right", parent=styles["Normal"], fontSize=10, alignment=2, leading=16
        )
        label_style = ParagraphStyle(
            "Label", parent=styles["Normal"], fontName="Helvetica-Bold", fontSize=10, spaceAfter=4
        )
        body_style = ParagraphStyle("Body", parent=styles["Normal"], fontSize=10, leading=13)

        story = []

        # Letterhead on the left, date / amount / due date on the right
        letterhead = [
            Paragraph(html.escape(AGENCY_NAME), company_style),
            Paragraph("Invoice", subtitle_style),
            Paragraph(html.escape(AGENCY_ADDRESS_LINE1), small_style),
            Paragraph(html.escape(AGENCY_ADDRESS_LINE2), small_style),
            Paragraph(html.escape(AGENCY_EMAIL), small_style),
        ]
        summary = [
            Paragraph(f"INVOICE #: {html.escape(self.invoice.invoice_number)}", right_style),
            Paragraph(f"DATE: {_date(self.invoice.issued_date or date.today())}", right_style),
            Paragraph(f"<b>PLEASE PAY: {_money(self.total)}</b>", right_style),
            Paragraph(f"DUE DATE: {_date(self.invoice.due_date)}", right_style),
        ]
        header = Table(
            [[letterhead, summary]],
            colWidths=[self.content_width * 0.6, self.content_width * 0.4],
        )
        header.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP")]))
        story.append(header)
        story.append(Spacer(1, 0.3 * inch))

        # Bill to
        story.append(Paragraph("BILL TO", label_style))
        for line in self._bill_to_lines():
            story.append(Paragraph(html.escape(line), body_style))
        story.append(Spacer(1, 0.3 * inch))

        # Line items
        service_date = _date(self.invoice.job.job_date) if self.invoice.job else ""
        table_data = [["DATE", "DESCRIPTION", "QTY", "RATE", "AMOUNT"]]
        for index, item in enumerate(self.items):
            table_data.append(
                [
                    service_date if index == 0 else "",
                    Paragraph(html.escape(item["description"]), body_style),
                    f"{item['quantity']:.2f}",
                    f"{item['unit_price']:.2f}",
                    f"{item['total']:.2f}",
                ]
            )

        items_table = Table(
            table_data,
            colWidths=[
                1.0 * inch,
                self.content_width - 4.0 * inch,
                0.9 * inch,
                1.0 * inch,
                1.1 * inch,
            ],
            repeatRows=1,
        )
        items_table.setStyle(
            TableStyle(
                [
                    # Header row
                    ("BACKGROUND", (0, 0), (-1, 0), self.light_gray),
                    ("FONT", (0, 0), (-1, 0), "Helvetica-Bold", 9),
                    ("TEXTCOLOR", (0, 0), (-1, 0), self.muted),
                    ("LINEBELOW", (0, 0), (-1, 0), 0.75, self.muted),
                    # Data rows
                    ("FONT", (0, 1), (-1, -1), "Helvetica", 10),
                    ("TEXTCOLOR", (0, 1), (-1, -1), self.dark_gray),
                    ("ALIGN", (2, 0), (-1, -1), "RIGHT"),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LINEBELOW", (0, 1), (-1, -1), 0.25, colors.lightgrey),
                    ("TOPPADDING", (0, 0), (-1, -1), 6),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 6),
                ]
            )
        )
        story.append(items_table)
        story.append(Spacer(1, 0.3 * inch))

        story.append(
            Paragraph(
                f"<b>TOTAL DUE: {_money(self.total)}</b>",
                ParagraphStyle("Total", parent=right_style, fontSize=13),
            )
        )

        if self.invoice.notes:
            story.append(Spacer(1, 0.3 * inch))
            story.append(Paragraph("NOTES", label_style))
            story.append(Paragraph(html.escape(self.invoice.notes), body_style))

        doc.build(story)

        pdf_bytes = buffer.getvalue()
        buffer.close()

        logger.info(f"✅ Generated invoice PDF ({len(pdf_bytes)} bytes)")
        return pdf_bytes


def generate_and_store_invoice_pdf(db: Session, invoice: Invoice) -> tuple[bytes, str]:
    """
    Render the invoice, upload it as invoice-<number>.pdf and save the key.

    Returns:
        (pdf_bytes, storage_key)
    """
    pdf_bytes = InvoicePDFGenerator(invoice).generate()
    key = upload_document(invoice_key(invoice.invoice_number), pdf_bytes)

    invoice.pdf_url = key
    db.commit()
    db.refresh(invoice)
    return pdf_bytes, key
