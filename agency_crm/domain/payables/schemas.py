"""Payable domain schemas - Pydantic models for validation"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...models import PAYMENT_METHODS
from ...shared.validators import validate_choice


class PayableUpdate(BaseModel):
    """Schema for editing a queued payable"""

    hours_amount: Optional[float] = Field(None, ge=0)
    mileage_amount: Optional[float] = Field(None, ge=0)
    expenses_amount: Optional[float] = Field(None, ge=0)
    total: Optional[float] = Field(None, ge=0)
    pay_period_start: Optional[date] = None
    pay_period_end: Optional[date] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("payment_method")
    @classmethod
    def check_payment_method(cls, v):
        return validate_choice(v, PAYMENT_METHODS, "payment method")

    @model_validator(mode="after")
    def check_pay_period(self):
        if self.pay_period_start and self.pay_period_end and self.pay_period_end < self.pay_period_start:
            raise ValueError("Pay period end must be on or after its start")
        return self


class MarkPayablePaidRequest(BaseModel):
    paid_date: Optional[date] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None

    @field_validator("payment_method")
    @classmethod
    def check_payment_method(cls, v):
        return validate_choice(v, PAYMENT_METHODS, "payment method")


class PayableInterpreterSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    payment_method: Optional[str] = None

    class Config:
        from_attributes = True


class PayableJobSummary(BaseModel):
    id: int
    job_number: Optional[str] = None
    job_date: date
    status: str

    class Config:
        from_attributes = True


class PayableResponse(BaseModel):
    """Schema for payable response"""

    id: int
    public_id: Optional[str] = None
    bill_number: Optional[str] = None
    interpreter_id: int
    job_id: int
    status: Optional[str] = None
    hours_amount: Optional[float] = None
    mileage_amount: Optional[float] = None
    expenses_amount: Optional[float] = None
    total: Optional[float] = None
    pay_period_start: Optional[date] = None
    pay_period_end: Optional[date] = None
    paid_date: Optional[date] = None
    payment_method: Optional[str] = None
    payment_reference: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    interpreter: Optional[PayableInterpreterSummary] = None
    job: Optional[PayableJobSummary] = None

    class Config:
        from_attributes = True
