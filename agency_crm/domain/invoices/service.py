"""Invoice service - Business logic for facility invoices"""

import asyncio
import logging
from datetime import date, timedelta
from typing import Optional

from arq import create_pool
from fastapi import HTTPException
from redis.exceptions import RedisError
from sqlalchemy.orm import Session

from ...config import INVOICE_DUE_DAYS
from ...email_service import EmailDeliveryError, pdf_attachment, send_logged_email
from ...email_templates import plain_text_to_html
from ...models import Job
from ...models_billing import Invoice
from ...services.invoice_pdf import generate_and_store_invoice_pdf
from ...services.job_calculations import money
from ...services.numbering import next_invoice_number
from ...services.storage import download_document, generate_document_url
from ...worker import get_redis_settings
from ..facilities.repository import FacilityRepository
from .repository import InvoiceRepository
from .schemas import (
    InvoiceCreate,
    InvoiceItemInput,
    InvoiceUpdate,
    MarkInvoicePaidRequest,
    SendInvoiceRequest,
)

logger = logging.getLogger(__name__)


def _item_rows(items: list[InvoiceItemInput]) -> list[dict]:
    return [
        {
            "description": item.description,
            "quantity": item.quantity,
            "unit_price": item.unit_price,
            "total": money(item.quantity * item.unit_price),
        }
        for item in items
    ]


def default_invoice_email(invoice: Invoice) -> tuple[str, str]:
    """Default (subject, plain-text body) offered when sending an invoice"""
    facility_name = invoice.facility.billing_name or invoice.facility.name
    due_date = invoice.due_date
    due = f"{due_date:%B} {due_date.day}, {due_date.year}" if due_date else "N/A"
    subject = f"Invoice {invoice.invoice_number} from ECASL"
    body = (
        f"Dear {facility_name},\n\n"
        f"Please find attached Invoice {invoice.invoice_number} for interpreter services.\n\n"
        "Invoice Details:\n"
        f"- Invoice Number: {invoice.invoice_number}\n"
        f"- Total Amount: ${(invoice.total or 0):,.2f}\n"
        f"- Due Date: {due}\n\n"
        "Please remit payment by the due date. If you have any questions regarding this "
        "invoice, please don't hesitate to contact us.\n\n"
        "Thank you for your business.\n\n"
        "Best regards,\n"
        "ECASL"
    )
    return subject, body


class InvoiceService:
    """Service layer for invoice business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InvoiceRepository()

    def get_invoices(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        facility_id: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_dir: Optional[str] = None,
    ) -> list[Invoice]:
        return self.repo.list_invoices(self.db, search, status, facility_id, sort_by, sort_dir)

    def get_invoice(self, invoice_id: int) -> Invoice:
        invoice = self.repo.get_invoice_by_id(self.db, invoice_id)
        if not invoice:
            raise HTTPException(status_code=404, detail="Invoice not found")
        return invoice

    def create_invoice(self, data: InvoiceCreate) -> Invoice:
        if not FacilityRepository.get_facility_by_id(self.db, data.facility_id):
            raise HTTPException(status_code=404, detail="Facility not found")

        job = None
        if data.job_id is not None:
            job = self.db.query(Job).filter(Job.id == data.job_id).first()
            if not job:
                raise HTTPException(status_code=404, detail="Job not found")
            if job.facility_id != data.facility_id:
                raise HTTPException(status_code=400, detail="Job belongs to a different facility")

        issued = data.issued_date or date.today()
        items = _item_rows(data.items)
        subtotal = money(sum(item["total"] for item in items))

        invoice = self.repo.create_invoice(
            self.db,
            items,
            invoice_number=next_invoice_number(self.db, issued, job),
            facility_id=data.facility_id,
            job_id=data.job_id,
            status="draft",
            subtotal=subtotal,
            tax=data.tax,
            total=money(subtotal + data.tax),
            issued_date=issued,
            due_date=data.due_date or issued + timedelta(days=INVOICE_DUE_DAYS),
            notes=data.notes,
        )
        self.db.commit()
        self.db.refresh(invoice)
        logger.info(f"✅ Created invoice {invoice.invoice_number} for facility {data.facility_id}")
        return invoice

    def _apply_status(self, invoice: Invoice, new_status: str, paid_date: Optional[date] = None):
        """Set the invoice status and advance the linked job on draft → submitted"""
        old_status = invoice.status
        invoice.status = new_status

        if new_status == "paid":
            invoice.paid_date = paid_date or invoice.paid_date or date.today()

        if old_status == "draft" and new_status == "submitted" and invoice.job is not None:
            if invoice.job.status == "ready_to_bill":
                invoice.job.status = "billed"
                logger.info(f"✅ Job {invoice.job.job_number} transitioned: ready_to_bill → billed")

    def update_invoice(self, invoice_id: int, data: InvoiceUpdate) -> Invoice:
        invoice = self.get_invoice(invoice_id)
        updates = data.model_dump(exclude_unset=True)

        if invoice.status == "paid" and "items" in updates:
            raise HTTPException(status_code=409, detail="Paid invoices cannot be edited")

        if data.items is not None:
            self.repo.replace_items(self.db, invoice, _item_rows(data.items))
            invoice.subtotal = money(sum(item.total for item in invoice.items))

        for field in ("issued_date", "due_date", "paid_date", "tax", "notes"):
            if field in updates:
                setattr(invoice, field, updates[field])

        if "tax" in updates or data.items is not None:
            invoice.total = money((invoice.subtotal or 0) + (invoice.tax or 0))

        if data.status is not None and data.status != invoice.status:
            self._apply_status(invoice, data.status, data.paid_date)

        self.db.commit()
        self.db.refresh(invoice)
        return invoice

    def delete_invoice(self, invoice_id: int) -> dict:
        invoice = self.get_invoice(invoice_id)
        if invoice.status != "draft":
            raise HTTPException(status_code=409, detail="Only draft invoices can be deleted")
        self.repo.delete_invoice(self.db, invoice)
        logger.info(f"🗑️ Deleted invoice {invoice_id}")
        return {"message": "Invoice deleted"}

    def generate_pdf(self, invoice_id: int) -> dict:
        invoice = self.get_invoice(invoice_id)
        _, key = generate_and_store_invoice_pdf(self.db, invoice)
        return {"pdf_url": key, "download_url": generate_document_url(key)}

    def get_pdf_url(self, invoice_id: int) -> dict:
        invoice = self.get_invoice(invoice_id)
        if not invoice.pdf_url:
            raise HTTPException(status_code=404, detail="Invoice PDF has not been generated")
        return {"url": generate_document_url(invoice.pdf_url)}

    def get_email_defaults(self, invoice_id: int) -> dict:
        """Suggested recipients, subject and body for the send dialog"""
        invoice = self.get_invoice(invoice_id)
        subject, body = default_invoice_email(invoice)
        contacts = invoice.facility.billing_contacts or []
        return {
            "to": [c["email"] for c in contacts if c.get("email")],
            "contacts": contacts,
            "subject": subject,
            "body": body,
        }

    async def send_invoice(self, invoice_id: int, data: SendInvoiceRequest) -> dict:
        """Email the invoice PDF; a successful send marks the invoice submitted"""
        invoice = self.get_invoice(invoice_id)
        default_subject, default_body = default_invoice_email(invoice)

        if invoice.pdf_url:
            pdf_bytes = download_document(invoice.pdf_url)
        else:
            pdf_bytes, _ = generate_and_store_invoice_pdf(self.db, invoice)

        try:
            result = await send_logged_email(
                self.db,
                data.to,
                data.subject or default_subject,
                plain_text_to_html(data.body or default_body),
                template_name="invoice_send",
                job_id=invoice.job_id,
                facility_id=invoice.facility_id,
                attachments=[pdf_attachment(f"invoice-{invoice.invoice_number}.pdf", pdf_bytes)],
            )
        except EmailDeliveryError as e:
            raise HTTPException(status_code=502, detail=str(e)) from e

        if invoice.status == "draft":
            self._apply_status(invoice, "submitted")
            self.db.commit()

        logger.info(f"📧 Invoice {invoice.invoice_number} sent to {result['recipients']}")
        return {"message": "Invoice sent", "recipients": result["recipients"]}

    def mark_paid(self, invoice_id: int, data: MarkInvoicePaidRequest) -> Invoice:
        invoice = self.get_invoice(invoice_id)
        if invoice.status == "paid":
            raise HTTPException(status_code=409, detail="Invoice is already paid")
        self._apply_status(invoice, "paid", data.paid_date)
        self.db.commit()
        self.db.refresh(invoice)
        logger.info(f"✅ Invoice {invoice.invoice_number} marked paid on {invoice.paid_date}")
        return invoice

    async def queue_pdf(self, invoice_id: int) -> dict:
        """Hand PDF rendering to the background worker"""
        invoice = self.get_invoice(invoice_id)
        try:
            pool = await asyncio.wait_for(create_pool(get_redis_settings()), timeout=20.0)
        except (asyncio.TimeoutError, OSError, RedisError) as e:
            logger.error(f"❌ Could not reach the job queue: {e}")
            raise HTTPException(status_code=503, detail="Background queue unavailable") from e

        try:
            job = await pool.enqueue_job("generate_invoice_pdf_task", invoice.id)
        finally:
            await pool.close()

        logger.info(f"📄 Queued PDF generation for invoice {invoice.invoice_number}")
        return {"job_id": job.job_id if job else None, "status": "queued"}
