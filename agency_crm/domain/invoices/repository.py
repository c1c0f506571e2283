"""Invoice repository - Database operations for invoices and line items"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Facility
from ...models_billing import Invoice, InvoiceItem
from ...shared.listing import apply_search, apply_sort

SORTABLE_COLUMNS = {
    "invoice_number": Invoice.invoice_number,
    "status": Invoice.status,
    "facility": Facility.name,
    "total": Invoice.total,
    "issued_date": Invoice.issued_date,
    "due_date": Invoice.due_date,
    "paid_date": Invoice.paid_date,
    "created_at": Invoice.created_at,
}


class InvoiceRepository:
    """Repository for invoice database operations"""

    @staticmethod
    def list_invoices(
        db: Session,
        search: Optional[str] = None,
        status: Optional[str] = None,
        facility_id: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_dir: Optional[str] = None,
    ) -> list[Invoice]:
        query = (
            db.query(Invoice)
            .join(Facility, Invoice.facility_id == Facility.id)
            .options(joinedload(Invoice.facility), joinedload(Invoice.job))
        )
        if status:
            query = query.filter(Invoice.status == status)
        if facility_id:
            query = query.filter(Invoice.facility_id == facility_id)
        query = apply_search(query, search, Invoice.invoice_number, Facility.name)
        query = apply_sort(
            query, SORTABLE_COLUMNS, sort_by, sort_dir, [Invoice.created_at.desc(), Invoice.id.desc()]
        )
        return query.all()

    @staticmethod
    def get_invoice_by_id(db: Session, invoice_id: int) -> Optional[Invoice]:
        return (
            db.query(Invoice)
            .options(
                joinedload(Invoice.facility), joinedload(Invoice.job), joinedload(Invoice.items)
            )
            .filter(Invoice.id == invoice_id)
            .first()
        )

    @staticmethod
    def create_invoice(db: Session, items: list[dict], **invoice_data) -> Invoice:
        """Add an invoice and its line items (flushed, not committed)"""
        invoice = Invoice(**invoice_data)
        invoice.items = [InvoiceItem(**item) for item in items]
        db.add(invoice)
        db.flush()
        return invoice

    @staticmethod
    def replace_items(db: Session, invoice: Invoice, items: list[dict]) -> None:
        invoice.items = [InvoiceItem(**item) for item in items]
        db.flush()

    @staticmethod
    def delete_invoice(db: Session, invoice: Invoice) -> None:
        db.delete(invoice)
        db.commit()
