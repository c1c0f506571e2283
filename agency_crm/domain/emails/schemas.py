"""Email domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional, Union

from pydantic import BaseModel, Field, field_validator

from ...shared.validators import validate_email


class SendEmailRequest(BaseModel):
    """Generic send; a template_name renders subject and html from a stored template"""

    to: Union[str, list[str]]
    subject: Optional[str] = None
    html: Optional[str] = None
    template_name: Optional[str] = None
    variables: dict = {}
    job_id: Optional[int] = None
    interpreter_id: Optional[int] = None
    facility_id: Optional[int] = None

    @field_validator("to")
    @classmethod
    def check_recipients(cls, v):
        values = [v] if isinstance(v, str) else v
        recipients = [validate_email(email) for email in values if email and email.strip()]
        if not recipients:
            raise ValueError("At least one recipient email is required")
        return recipients


class SendEmailResponse(BaseModel):
    message: str
    id: Optional[str] = None
    recipients: list[str]


class EmailTemplateCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    subject: str = Field(..., min_length=1, max_length=500)
    body: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v):
        return v.strip()


class EmailTemplateUpdate(BaseModel):
    subject: Optional[str] = Field(None, min_length=1, max_length=500)
    body: Optional[str] = Field(None, min_length=1)


class EmailTemplateResponse(BaseModel):
    id: int
    name: str
    subject: str
    body: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EmailLogResponse(BaseModel):
    id: int
    job_id: Optional[int] = None
    interpreter_id: Optional[int] = None
    facility_id: Optional[int] = None
    template_name: Optional[str] = None
    recipient_email: str
    subject: str
    status: Optional[str] = None
    error_message: Optional[str] = None
    sent_at: Optional[datetime] = None

    class Config:
        from_attributes = True
