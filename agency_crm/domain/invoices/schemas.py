"""Invoice domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models_billing import INVOICE_STATUSES
from ...shared.validators import validate_choice, validate_email


class InvoiceItemInput(BaseModel):
    description: str = Field(..., min_length=1)
    quantity: float = Field(1, ge=0)
    unit_price: float = Field(..., ge=0)


class InvoiceCreate(BaseModel):
    """Schema for a manually created invoice"""

    facility_id: int
    job_id: Optional[int] = None
    issued_date: Optional[date] = None
    due_date: Optional[date] = None
    tax: float = Field(0, ge=0)
    notes: Optional[str] = None
    items: list[InvoiceItemInput] = []


class InvoiceUpdate(BaseModel):
    """Schema for editing an invoice; items, when sent, replace the existing lines"""

    status: Optional[str] = None
    issued_date: Optional[date] = None
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    tax: Optional[float] = Field(None, ge=0)
    notes: Optional[str] = None
    items: Optional[list[InvoiceItemInput]] = None

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, INVOICE_STATUSES, "status")


class SendInvoiceRequest(BaseModel):
    to: list[str] = Field(..., min_length=1)
    subject: Optional[str] = None
    body: Optional[str] = None

    @field_validator("to")
    @classmethod
    def check_recipients(cls, v):
        recipients = [validate_email(email) for email in v if email and email.strip()]
        if not recipients:
            raise ValueError("At least one recipient email is required")
        return recipients


class MarkInvoicePaidRequest(BaseModel):
    paid_date: Optional[date] = None


class InvoiceItemResponse(BaseModel):
    id: int
    description: str
    quantity: Optional[float] = None
    unit_price: float
    total: float

    class Config:
        from_attributes = True


class InvoiceFacilitySummary(BaseModel):
    id: int
    name: str
    billing_name: Optional[str] = None
    billing_contacts: Optional[list[dict]] = None

    class Config:
        from_attributes = True


class InvoiceResponse(BaseModel):
    """Schema for invoice response"""

    id: int
    public_id: Optional[str] = None
    invoice_number: str
    facility_id: int
    job_id: Optional[int] = None
    status: Optional[str] = None
    subtotal: Optional[float] = None
    tax: Optional[float] = None
    total: Optional[float] = None
    issued_date: Optional[date] = None
    due_date: Optional[date] = None
    paid_date: Optional[date] = None
    pdf_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    facility: Optional[InvoiceFacilitySummary] = None

    class Config:
        from_attributes = True


class InvoiceDetailResponse(InvoiceResponse):
    items: list[InvoiceItemResponse] = []


class InvoicePdfResponse(BaseModel):
    pdf_url: str
    download_url: str


class InvoiceEmailDefaults(BaseModel):
    to: list[str]
    contacts: list[dict]
    subject: str
    body: str
