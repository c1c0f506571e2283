"""Facility domain schemas - Pydantic models for validation"""

import uuid
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import CONTRACT_STATUSES, FACILITY_TYPES, RECORD_STATUSES
from ...shared.validators import (
    validate_choice,
    validate_email,
    validate_phone,
    validate_state,
    validate_zip_code,
)


class BillingContact(BaseModel):
    """Person who receives invoices for a facility"""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: str = ""
    phone: Optional[str] = None
    email: Optional[str] = None

    @field_validator("id", mode="before")
    @classmethod
    def ensure_id(cls, v):
        return v or str(uuid.uuid4())

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class FacilityBase(BaseModel):
    facility_type: Optional[str] = None
    is_gsa: Optional[bool] = None
    contractor: Optional[bool] = None
    status: Optional[str] = None

    billing_name: Optional[str] = None
    billing_address: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None
    billing_zip: Optional[str] = None

    physical_address: Optional[str] = None
    physical_city: Optional[str] = None
    physical_state: Optional[str] = None
    physical_zip: Optional[str] = None
    timezone: Optional[str] = None

    billing_contacts: Optional[list[BillingContact]] = None

    rate_holiday_hours: Optional[float] = Field(None, ge=0)
    minimum_billable_hours: Optional[float] = Field(None, ge=0)
    emergency_fee: Optional[float] = Field(None, ge=0)
    holiday_fee: Optional[float] = Field(None, ge=0)

    invoice_prefix: Optional[str] = None
    billing_code: Optional[str] = None
    net_terms: Optional[int] = Field(None, ge=0)

    contract_status: Optional[str] = None
    contract_signed_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("facility_type")
    @classmethod
    def check_facility_type(cls, v):
        return validate_choice(v, FACILITY_TYPES, "facility type")

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, RECORD_STATUSES, "status")

    @field_validator("contract_status")
    @classmethod
    def check_contract_status(cls, v):
        return validate_choice(v, CONTRACT_STATUSES, "contract status")

    @field_validator("billing_state", "physical_state")
    @classmethod
    def check_state(cls, v):
        return validate_state(v)

    @field_validator("billing_zip", "physical_zip")
    @classmethod
    def check_zip(cls, v):
        return validate_zip_code(v)


class FacilityCreate(FacilityBase):
    """Schema for creating a new facility"""

    name: str = Field(..., min_length=1)
    rate_business_hours: Optional[float] = Field(None, ge=0)
    rate_after_hours: Optional[float] = Field(None, ge=0)


class FacilityUpdate(FacilityBase):
    """Schema for updating an existing facility"""

    name: Optional[str] = Field(None, min_length=1)
    rate_business_hours: Optional[float] = Field(None, ge=0)
    rate_after_hours: Optional[float] = Field(None, ge=0)


class FacilityResponse(BaseModel):
    """Schema for facility response"""

    id: int
    public_id: Optional[str] = None
    name: str
    facility_type: Optional[str] = None
    is_gsa: Optional[bool] = None
    contractor: Optional[bool] = None
    status: Optional[str] = None
    billing_name: Optional[str] = None
    billing_address: Optional[str] = None
    billing_city: Optional[str] = None
    billing_state: Optional[str] = None
    billing_zip: Optional[str] = None
    physical_address: Optional[str] = None
    physical_city: Optional[str] = None
    physical_state: Optional[str] = None
    physical_zip: Optional[str] = None
    timezone: Optional[str] = None
    billing_contacts: Optional[list[dict]] = None
    rate_business_hours: Optional[float] = None
    rate_after_hours: Optional[float] = None
    rate_holiday_hours: Optional[float] = None
    minimum_billable_hours: Optional[float] = None
    emergency_fee: Optional[float] = None
    holiday_fee: Optional[float] = None
    invoice_prefix: Optional[str] = None
    billing_code: Optional[str] = None
    net_terms: Optional[int] = None
    contract_status: Optional[str] = None
    contract_signed_date: Optional[date] = None
    contract_pdf_url: Optional[str] = None
    signed_contract_pdf_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
