"""Interpreter domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...models import CONTRACT_STATUSES, PAYMENT_METHODS, RECORD_STATUSES
from ...shared.validators import (
    validate_choice,
    validate_email,
    validate_phone,
    validate_required_rate,
    validate_state,
    validate_zip_code,
)


class InterpreterBase(BaseModel):
    phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    timezone: Optional[str] = None
    status: Optional[str] = None

    rid_certified: Optional[bool] = None
    rid_number: Optional[str] = None
    nic_certified: Optional[bool] = None
    other_certifications: Optional[str] = None

    rate_holiday_hours: Optional[float] = Field(None, ge=0)
    minimum_hours: Optional[float] = Field(None, ge=0)
    eligible_emergency_fee: Optional[bool] = None
    eligible_holiday_fee: Optional[bool] = None

    payment_details: Optional[str] = None

    w9_received: Optional[bool] = None
    w9_received_date: Optional[date] = None
    insurance_end_date: Optional[date] = None

    contract_status: Optional[str] = None
    contract_signed_date: Optional[date] = None
    notes: Optional[str] = None

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("state")
    @classmethod
    def check_state(cls, v):
        return validate_state(v)

    @field_validator("zip_code")
    @classmethod
    def check_zip(cls, v):
        return validate_zip_code(v)

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, RECORD_STATUSES, "status")

    @field_validator("contract_status")
    @classmethod
    def check_contract_status(cls, v):
        return validate_choice(v, CONTRACT_STATUSES, "contract status")


class InterpreterCreate(InterpreterBase):
    """Schema for creating a new interpreter"""

    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    email: str
    rate_business_hours: float
    rate_after_hours: float
    payment_method: str

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        if not v:
            raise ValueError("Valid email is required")
        return validate_email(v)

    @field_validator("rate_business_hours", "rate_after_hours")
    @classmethod
    def check_rates(cls, v):
        return validate_required_rate(v)

    @field_validator("payment_method")
    @classmethod
    def check_payment_method(cls, v):
        if not v:
            raise ValueError("Payment method is required")
        return validate_choice(v, PAYMENT_METHODS, "payment method")


class InterpreterUpdate(InterpreterBase):
    """Schema for updating an existing interpreter"""

    first_name: Optional[str] = Field(None, min_length=1)
    last_name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    rate_business_hours: Optional[float] = None
    rate_after_hours: Optional[float] = None
    payment_method: Optional[str] = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)

    @field_validator("rate_business_hours", "rate_after_hours")
    @classmethod
    def check_rates(cls, v):
        if v is None:
            return v
        return validate_required_rate(v)

    @field_validator("payment_method")
    @classmethod
    def check_payment_method(cls, v):
        return validate_choice(v, PAYMENT_METHODS, "payment method")


class InterpreterResponse(BaseModel):
    """Schema for interpreter response"""

    id: int
    public_id: Optional[str] = None
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None
    status: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    timezone: Optional[str] = None
    rid_certified: Optional[bool] = None
    rid_number: Optional[str] = None
    nic_certified: Optional[bool] = None
    other_certifications: Optional[str] = None
    rate_business_hours: Optional[float] = None
    rate_after_hours: Optional[float] = None
    rate_holiday_hours: Optional[float] = None
    minimum_hours: Optional[float] = None
    eligible_emergency_fee: Optional[bool] = None
    eligible_holiday_fee: Optional[bool] = None
    payment_method: Optional[str] = None
    payment_details: Optional[str] = None
    w9_received: Optional[bool] = None
    w9_received_date: Optional[date] = None
    insurance_end_date: Optional[date] = None
    contract_status: Optional[str] = None
    contract_signed_date: Optional[date] = None
    contract_pdf_url: Optional[str] = None
    signed_contract_pdf_url: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
