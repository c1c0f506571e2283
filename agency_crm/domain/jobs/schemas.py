"""Job domain schemas - Pydantic models for validation"""

from datetime import date, datetime, time
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ...models import JOB_STATUSES, LOCATION_TYPES, OPPORTUNITY_SOURCES
from ...services.job_calculations import (
    is_valid_job_duration,
    is_valid_time_format,
    needs_time_normalization,
    normalize_time_to_hhmm,
    parse_time,
)
from ...shared.validators import (
    validate_choice,
    validate_email,
    validate_phone,
    validate_state,
    validate_zip_code,
)

JOB_LENGTH_MESSAGE = "Job must be between 2 and 8 hours long"


def _coerce_time(value):
    # Accept "HH:MM", "HH:MM:SS" and "HH:MM:SS.sss" as stored by some clients
    if value is None or value == "":
        return None
    if isinstance(value, str):
        text = value.strip()
        if needs_time_normalization(text):
            text = normalize_time_to_hhmm(text)
        if not is_valid_time_format(text):
            raise ValueError("Time must be in HH:MM format")
        return parse_time(text)
    return value


class JobFields(BaseModel):
    interpreter_id: Optional[int] = None
    potential_interpreter_ids: Optional[list[int]] = None
    deaf_client_name: Optional[str] = None
    timezone: Optional[str] = None

    actual_start_time: Optional[time] = None
    actual_end_time: Optional[time] = None

    location_type: Optional[str] = None
    location_address: Optional[str] = None
    location_city: Optional[str] = None
    location_state: Optional[str] = None
    location_zip: Optional[str] = None
    video_call_link: Optional[str] = None

    opportunity_source: Optional[str] = None

    facility_rate_business: Optional[float] = Field(None, ge=0)
    facility_rate_after_hours: Optional[float] = Field(None, ge=0)
    facility_rate_holiday: Optional[float] = Field(None, ge=0)
    facility_rate_mileage: Optional[float] = Field(None, ge=0)
    facility_rate_adjustment: Optional[float] = None
    interpreter_rate_business: Optional[float] = Field(None, ge=0)
    interpreter_rate_after_hours: Optional[float] = Field(None, ge=0)
    interpreter_rate_holiday: Optional[float] = Field(None, ge=0)
    interpreter_rate_mileage: Optional[float] = Field(None, ge=0)
    interpreter_rate_adjustment: Optional[float] = None
    trilingual_rate_uplift: Optional[float] = Field(None, ge=0)
    travel_time_rate: Optional[float] = Field(None, ge=0)

    mileage: Optional[float] = Field(None, ge=0)
    travel_time_hours: Optional[float] = Field(None, ge=0)
    parking: Optional[float] = Field(None, ge=0)
    tolls: Optional[float] = Field(None, ge=0)
    misc_fee: Optional[float] = Field(None, ge=0)
    emergency_fee_applied: Optional[bool] = None
    holiday_fee_applied: Optional[bool] = None

    client_business_name: Optional[str] = None
    client_contact_name: Optional[str] = None
    client_contact_phone: Optional[str] = None
    client_contact_email: Optional[str] = None

    internal_notes: Optional[str] = None

    @field_validator("actual_start_time", "actual_end_time", mode="before")
    @classmethod
    def coerce_actual_times(cls, v):
        return _coerce_time(v)

    @field_validator("location_type")
    @classmethod
    def check_location_type(cls, v):
        return validate_choice(v, LOCATION_TYPES, "location type")

    @field_validator("opportunity_source")
    @classmethod
    def check_opportunity_source(cls, v):
        return validate_choice(v, OPPORTUNITY_SOURCES, "opportunity source")

    @field_validator("location_state")
    @classmethod
    def check_state(cls, v):
        return validate_state(v)

    @field_validator("location_zip")
    @classmethod
    def check_zip(cls, v):
        return validate_zip_code(v)

    @field_validator("client_contact_phone")
    @classmethod
    def check_phone(cls, v):
        return validate_phone(v)

    @field_validator("client_contact_email")
    @classmethod
    def check_email(cls, v):
        return validate_email(v)


class JobCreate(JobFields):
    """Schema for creating a new job"""

    facility_id: int
    job_date: date
    start_time: time
    end_time: time

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def coerce_times(cls, v):
        return _coerce_time(v)

    @model_validator(mode="after")
    def check_length(self):
        if not is_valid_job_duration(self.start_time, self.end_time):
            raise ValueError(JOB_LENGTH_MESSAGE)
        return self


class JobUpdate(JobFields):
    """Schema for updating a job; any valid status may be set directly"""

    facility_id: Optional[int] = None
    job_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    status: Optional[str] = None

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def coerce_times(cls, v):
        return _coerce_time(v)

    @field_validator("status")
    @classmethod
    def check_status(cls, v):
        return validate_choice(v, JOB_STATUSES, "status")


class ConfirmInterpreterRequest(BaseModel):
    interpreter_id: Optional[int] = None
    send_email: bool = True


class OutreachRequest(BaseModel):
    """Optional subset of potential interpreters to email"""

    interpreter_ids: Optional[list[int]] = None


class FacilitySummary(BaseModel):
    id: int
    name: str
    is_gsa: Optional[bool] = None

    class Config:
        from_attributes = True


class InterpreterSummary(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str

    class Config:
        from_attributes = True


class JobResponse(BaseModel):
    """Schema for job response"""

    id: int
    public_id: Optional[str] = None
    job_number: Optional[str] = None
    facility_id: int
    interpreter_id: Optional[int] = None
    potential_interpreter_ids: Optional[list[int]] = None
    deaf_client_name: Optional[str] = None
    job_date: date
    start_time: time
    end_time: time
    actual_start_time: Optional[time] = None
    actual_end_time: Optional[time] = None
    timezone: Optional[str] = None
    location_type: Optional[str] = None
    location_address: Optional[str] = None
    location_city: Optional[str] = None
    location_state: Optional[str] = None
    location_zip: Optional[str] = None
    video_call_link: Optional[str] = None
    status: str
    opportunity_source: Optional[str] = None

    billable_hours: Optional[float] = None
    business_hours_worked: Optional[float] = None
    after_hours_worked: Optional[float] = None

    facility_rate_business: Optional[float] = None
    facility_rate_after_hours: Optional[float] = None
    facility_rate_holiday: Optional[float] = None
    facility_rate_mileage: Optional[float] = None
    facility_rate_adjustment: Optional[float] = None
    interpreter_rate_business: Optional[float] = None
    interpreter_rate_after_hours: Optional[float] = None
    interpreter_rate_holiday: Optional[float] = None
    interpreter_rate_mileage: Optional[float] = None
    interpreter_rate_adjustment: Optional[float] = None
    trilingual_rate_uplift: Optional[float] = None
    travel_time_rate: Optional[float] = None

    mileage: Optional[float] = None
    travel_time_hours: Optional[float] = None
    parking: Optional[float] = None
    tolls: Optional[float] = None
    misc_fee: Optional[float] = None
    emergency_fee_applied: Optional[bool] = None
    holiday_fee_applied: Optional[bool] = None

    facility_hourly_total: Optional[float] = None
    facility_billable_total: Optional[float] = None
    interpreter_hourly_total: Optional[float] = None
    interpreter_billable_total: Optional[float] = None

    client_business_name: Optional[str] = None
    client_contact_name: Optional[str] = None
    client_contact_phone: Optional[str] = None
    client_contact_email: Optional[str] = None
    internal_notes: Optional[str] = None

    outreach_sent_at: Optional[datetime] = None
    confirmation_sent_at: Optional[datetime] = None
    finalized_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    facility: Optional[FacilitySummary] = None
    interpreter: Optional[InterpreterSummary] = None

    class Config:
        from_attributes = True


class OutreachResponse(BaseModel):
    message: str
    sent: list[str]
    failed: list[str]
    status: str


class GenerateBillingResponse(BaseModel):
    message: str
    invoice_id: int
    invoice_number: str
    bill_id: int
    bill_number: Optional[str] = None
    facility_total: float
    interpreter_total: float


class AutoCompleteResponse(BaseModel):
    message: str
    updated: int
    jobs: list[str]


class DashboardResponse(BaseModel):
    active_jobs: int
    new_jobs: int
    active_interpreters: int
    active_facilities: int
