"""Invoice router - FastAPI endpoints for facility invoices"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin, require_billing_reader
from ...database import get_db
from ...models import Profile
from ...shared.schemas import DocumentUrlResponse, EmailSentResponse
from .schemas import (
    InvoiceCreate,
    InvoiceDetailResponse,
    InvoiceEmailDefaults,
    InvoicePdfResponse,
    InvoiceResponse,
    InvoiceUpdate,
    MarkInvoicePaidRequest,
    SendInvoiceRequest,
)
from .service import InvoiceService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/invoices", tags=["Invoices"])


def get_invoice_service(db: Session = Depends(get_db)) -> InvoiceService:
    """Dependency injection for InvoiceService"""
    return InvoiceService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("", response_model=list[InvoiceResponse])
async def list_invoices(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    facility_id: Optional[int] = Query(None),
    sort_by: Optional[str] = Query(None),
    sort_dir: Optional[str] = Query(None),
    current_user: Profile = Depends(require_billing_reader),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.get_invoices(search, status, facility_id, sort_by, sort_dir)


@router.get("/{invoice_id}", response_model=InvoiceDetailResponse)
async def get_invoice(
    invoice_id: int,
    current_user: Profile = Depends(require_billing_reader),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Invoice with its line items"""
    return service.get_invoice(invoice_id)


@router.post("", response_model=InvoiceDetailResponse, status_code=201)
async def create_invoice(
    data: InvoiceCreate,
    current_user: Profile = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.create_invoice(data)


@router.put("/{invoice_id}", response_model=InvoiceDetailResponse)
async def update_invoice(
    invoice_id: int,
    data: InvoiceUpdate,
    current_user: Profile = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.update_invoice(invoice_id, data)


@router.delete("/{invoice_id}")
async def delete_invoice(
    invoice_id: int,
    current_user: Profile = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.delete_invoice(invoice_id)


# ============================================================================
# PDF AND DELIVERY
# ============================================================================


@router.post("/{invoice_id}/pdf", response_model=InvoicePdfResponse)
async def generate_invoice_pdf(
    invoice_id: int,
    current_user: Profile = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Render the invoice PDF and store it"""
    return service.generate_pdf(invoice_id)


@router.post("/{invoice_id}/pdf/queue", status_code=202)
async def queue_invoice_pdf(
    invoice_id: int,
    current_user: Profile = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Render the invoice PDF in the background worker"""
    return await service.queue_pdf(invoice_id)


@router.get("/{invoice_id}/pdf", response_model=DocumentUrlResponse)
async def get_invoice_pdf_url(
    invoice_id: int,
    current_user: Profile = Depends(require_billing_reader),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.get_pdf_url(invoice_id)


@router.get("/{invoice_id}/email-defaults", response_model=InvoiceEmailDefaults)
async def get_invoice_email_defaults(
    invoice_id: int,
    current_user: Profile = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.get_email_defaults(invoice_id)


@router.post("/{invoice_id}/send", response_model=EmailSentResponse)
async def send_invoice(
    invoice_id: int,
    data: SendInvoiceRequest,
    current_user: Profile = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    """Email the invoice PDF and mark the invoice submitted"""
    return await service.send_invoice(invoice_id, data)


@router.post("/{invoice_id}/mark-paid", response_model=InvoiceDetailResponse)
async def mark_invoice_paid(
    invoice_id: int,
    data: MarkInvoicePaidRequest,
    current_user: Profile = Depends(require_admin),
    service: InvoiceService = Depends(get_invoice_service),
):
    return service.mark_paid(invoice_id, data)
