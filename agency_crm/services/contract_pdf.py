"""
Contract PDF Generator
Renders the facility services agreement and the interpreter agreement letters
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
from reportlab.platypus import KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from ..config import AGENCY_ADDRESS_LINE1, AGENCY_PHONE, AGENCY_SHORT_NAME
from ..models import Facility, Interpreter

logger = logging.getLogger(__name__)

SIGNATORY_NAME = "Denise Corino"
SIGNATORY_TITLE = "Certified Sign Language Interpreter for the Deaf"
CONTRACT_CITY_LINE = "Staten Island, NY 10312"

INTERPRETER_TERMS = [
    "This is an agreement between {agency} and {name}, Sign Language Interpreter for the Deaf. "
    "The interpreter agrees to provide sign language interpreting services for {agency} on an as "
    "needed basis. The interpreter will act as an independent contractor in the performance of "
    "their duties under this contract.",
    "The interpreter understands that while on interpreting assignments for {agency}, the "
    "interpreter acts as a representative of {agency} and is expected to act on behalf of {agency}.",
    "The interpreter is expected to be professional on all assignments. The interpreter must "
    "follow and adhere to all tenets of RID (Registry of Interpreters for the Deaf), Code of "
    "Professional Conduct.",
    "The interpreter is expected to dress in an appropriate manner for all assignments; either in "
    "business casual or business formal depending on the type of assignment. Jeans and sneakers "
    "are not professional attire.",
    "The interpreter agrees that they will not knowingly solicit any current, past or potential "
    "client of {agency} either directly or indirectly for the benefit of the interpreter or the "
    "benefit of any other person, firm or corporation during or at anytime after their assignment. "
    "Please refer all clients/institutions back to {agency}. Interpreters should not give personal "
    "business cards when working on an assignment through {agency}. If the interpreter would like "
    "to provide their name and the request comes specifically for such interpreter, every effort "
    "will be made to honor the request.",
    "The interpreter agrees to not accept assignments independently from the same "
    "facility/institution for one year after the interpreter was contracted through {agency}. The "
    "interpreter may accept work at the same facility if assigned by another agency but not "
    "independently.",
    "Once an assignment is accepted an email confirmation will be sent to the interpreter. Once "
    "received, the interpreter must email {agency} and acknowledge receipt of the confirmation. The "
    "interpreter is then officially assigned once the confirmation is received and acknowledged.",
    "If the Deaf client has not arrived after thirty minutes from the start time of the assignment, "
    "the interpreter may ask the on site contact person what their protocol is. If the on site "
    "contact person asks the interpreter to stay for the duration of the contracted time then the "
    "interpreter must adhere to their request to ensure adequate billing. The interpreter must get "
    "the approval from the on-site contact and {agency} before leaving any assignment before the "
    'contracted time if the Deaf consumer is a "no show".',
    "If an assignment goes over the contracted billing time the interpreter must notify {agency} so "
    "that billing arrangements can be made. Assignments that go over the original scheduled time "
    "will then be billed on 15 minute increments.",
    "The interpreter agrees that travel time will not be reimbursed, unless discussed and agreed "
    "upon before accepting an assignment.",
    "The Interpreter agrees to submit all invoices within 10 days after assignment is completed. "
    "{agency} agrees to pay the interpreter within 30 days after completing an assignment and "
    "invoice is submitted.",
]


def _money(amount: Optional[float]) -> str:
    return f"${(amount or 0):,.2f}"


def _hours(value: Optional[float]) -> str:
    value = value or 2
    return str(int(value)) if float(value).is_integer() else str(value)


class ContractPDFGenerator:
    """Shared letterhead and styles for contract letters"""

    title = "Contract"

    def __init__(self):
        self.page_width, self.page_height = letter
        self.margin = 0.8 * inch
        self.content_width = self.page_width - (2 * self.margin)

        self.dark_gray = colors.HexColor("#1e293b")

        styles = getSampleStyleSheet()
        self.agency_style = ParagraphStyle(
            "AgencyName",
            parent=styles["Heading1"],
            fontSize=16,
            textColor=self.dark_gray,
            spaceAfter=4,
        )
        self.letterhead_style = ParagraphStyle(
            "Letterhead", parent=styles["Normal"], fontSize=10, leading=13
        )
        self.title_style = ParagraphStyle(
            "ContractTitle",
            parent=styles["Heading2"],
            fontSize=14,
            textColor=self.dark_gray,
            spaceBefore=14,
            spaceAfter=10,
        )
        self.heading_style = ParagraphStyle(
            "ContractHeading",
            parent=styles["Normal"],
            fontName="Helvetica-Bold",
            fontSize=10,
            spaceBefore=6,
            spaceAfter=4,
        )
        self.body_style = ParagraphStyle(
            "ContractBody", parent=styles["Normal"], fontSize=10, leading=13, spaceAfter=8
        )

    def _letterhead(self) -> list:
        return [
            Paragraph(html.escape(AGENCY_SHORT_NAME), self.agency_style),
            Paragraph(html.escape(AGENCY_ADDRESS_LINE1), self.letterhead_style),
            Paragraph(CONTRACT_CITY_LINE, self.letterhead_style),
            Paragraph(html.escape(AGENCY_PHONE), self.letterhead_style),
            Spacer(1, 0.25 * inch),
        ]

    def _paragraph(self, text: str) -> Paragraph:
        return Paragraph(html.escape(text), self.body_style)

    def _story(self) -> list:
        raise NotImplementedError

    def generate(self) -> bytes:
        """Generate PDF and return bytes"""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=self.margin,
            leftMargin=self.margin,
            topMargin=self.margin,
            bottomMargin=self.margin,
            title=self.title,
        )
        doc.build(self._story())

        pdf_bytes = buffer.getvalue()
        buffer.close()
        logger.info(f"✅ Generated contract PDF '{self.title}' ({len(pdf_bytes)} bytes)")
        return pdf_bytes


class FacilityContractPDFGenerator(ContractPDFGenerator):
    """Services agreement letter addressed to a facility"""

    def __init__(self, facility: Facility, mileage_rate: Optional[float] = None):
        super().__init__()
        self.facility = facility
        self.mileage_rate = mileage_rate
        self.title = f"Interpreting Services Agreement - {facility.name}"

    @property
    def primary_contact(self) -> dict:
        contacts = self.facility.billing_contacts or []
        return contacts[0] if contacts else {}

    def _story(self) -> list:
        facility = self.facility
        contact_name = self.primary_contact.get("name") or "Authorized Representative"
        billing_email = self.primary_contact.get("email") or "[email address]"
        min_hours = _hours(facility.minimum_billable_hours)

        if facility.physical_city and facility.physical_state:
            location = f"{facility.physical_city}, {facility.physical_state}"
        else:
            location = "the agreed upon location"

        if self.mileage_rate:
            mileage = f"${self.mileage_rate:.2f}"
        else:
            mileage = "the current IRS rate"

        story = self._letterhead()
        story.append(Paragraph(html.escape(facility.name), self.title_style))
        story.append(self._paragraph(f"Dear {contact_name},"))
        story.append(
            self._paragraph(
                "As per our conversation regarding sign language interpreting services, please "
                "note the terms of our agreement. If after reviewing them you are in accord, "
                "please sign one copy and return it to me as soon as possible."
            )
        )

        story.append(Paragraph("Contractual Agreement:", self.heading_style))
        story.append(
            self._paragraph(
                f"It has been agreed that {AGENCY_SHORT_NAME} will provide interpreting services "
                f"for {facility.name} when needed in {location}."
            )
        )

        story.append(Paragraph("Hourly Rates:", self.heading_style))
        story.append(
            self._paragraph(
                f"• 9:00 am to 5:00 pm: {_money(facility.rate_business_hours)} per hour "
                f"with a {min_hours}-hour minimum."
            )
        )
        story.append(
            self._paragraph(
                f"• 5:00 pm to 9:00 am: {_money(facility.rate_after_hours)} per hour with a "
                f"{min_hours}-hour minimum. (including nights, weekends or emergencies)"
            )
        )

        story.append(Paragraph("Holiday Rate:", self.heading_style))
        holiday_rate = facility.holiday_fee or facility.rate_after_hours
        story.append(
            self._paragraph(f"{_money(holiday_rate)} per hour with a {min_hours}-hour minimum.")
        )

        story.append(Paragraph("Additional Fees:", self.heading_style))
        for fee in (
            "• Trilingual Interpreters: $25 more per hour for anytime slot",
            "• Tactile Interpreters: $25 more per hour for anytime slot",
            "• Media Event: $150 per hour with a two-hour minimum",
        ):
            story.append(self._paragraph(fee))

        story.append(
            self._paragraph(
                "Two-full business day cancelation policy; otherwise scheduled time will be "
                f"billed. Total mileage will be billed at {mileage} per mile, plus tolls, if "
                "applicable."
            )
        )
        story.append(
            self._paragraph(f"All bills will be emailed to {contact_name} at {billing_email}.")
        )
        story.append(
            self._paragraph(
                f"Both {facility.name} and {AGENCY_SHORT_NAME} agree that the interpreter/agency "
                "will act as an independent contractor in the performance of their duties under "
                "this contract."
            )
        )

        story.append(
            KeepTogether(
                [
                    Spacer(1, 0.2 * inch),
                    self._paragraph("Sincerely,"),
                    Paragraph(html.escape(SIGNATORY_NAME), self.letterhead_style),
                    Paragraph(SIGNATORY_TITLE, self.letterhead_style),
                    Paragraph(html.escape(AGENCY_SHORT_NAME), self.letterhead_style),
                    Spacer(1, 0.4 * inch),
                    Paragraph("______________________________", self.letterhead_style),
                    Paragraph("Name", self.letterhead_style),
                    Spacer(1, 0.25 * inch),
                    Paragraph("_________________________", self.letterhead_style),
                    Paragraph("Date", self.letterhead_style),
                ]
            )
        )
        return story


class InterpreterContractPDFGenerator(ContractPDFGenerator):
    """Independent contractor agreement for an interpreter"""

    def __init__(self, interpreter: Interpreter, on_date: Optional[date] = None):
        super().__init__()
        self.interpreter = interpreter
        self.on_date = on_date or date.today()
        self.title = f"Interpreter Agreement - {interpreter.full_name}"

    def _story(self) -> list:
        story = self._letterhead()
        story.append(
            self._paragraph(f"{self.on_date.month}/{self.on_date.day}/{self.on_date.year}")
        )
        story.append(Spacer(1, 0.15 * inch))

        for term in INTERPRETER_TERMS:
            story.append(
                self._paragraph(term.format(agency=AGENCY_SHORT_NAME, name=self.interpreter.full_name))
            )

        story.append(
            KeepTogether(
                [
                    Spacer(1, 0.3 * inch),
                    Paragraph("Agreed on: _________________________________", self.body_style),
                    Spacer(1, 0.3 * inch),
                    Paragraph(
                        "Signature of Interpreter: _____________________________________________",
                        self.body_style,
                    ),
                ]
            )
        )
        return story
