"""Request/response models shared across domains"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, field_validator

from .validators import validate_email


class ContractEmailRequest(BaseModel):
    """Recipients and optional message for a contract email"""

    recipients: Optional[list[str]] = None
    recipient_name: Optional[str] = None
    subject: Optional[str] = None
    body: Optional[str] = None

    @field_validator("recipients")
    @classmethod
    def check_recipients(cls, v):
        if v is None:
            return v
        return [validate_email(email) for email in v if email and email.strip()]


class ContractDocumentResponse(BaseModel):
    contract_pdf_url: str
    download_url: str
    contract_status: str


class SignedContractResponse(BaseModel):
    signed_contract_pdf_url: str
    contract_status: str
    contract_signed_date: Optional[date] = None


class DocumentUrlResponse(BaseModel):
    url: str


class EmailSentResponse(BaseModel):
    message: str
    recipients: list[str]
