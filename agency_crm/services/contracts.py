"""
Contract document workflow shared by facilities and interpreters.

Both record types carry the same contract columns (contract_status,
contract_pdf_url, signed_contract_pdf_url, contract_signed_date), so the
generate / email / signed-upload steps are written once here.
"""

import logging
from datetime import date
from typing import Optional, Union

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ..config import AGENCY_SHORT_NAME
from ..email_service import (
    EmailDeliveryError,
    pdf_attachment,
    render_named_template,
    send_logged_email,
)
from ..email_templates import plain_text_to_html
from ..models import Facility, Interpreter
from .storage import (
    contract_key,
    download_document,
    generate_document_url,
    signed_contract_key,
    upload_document,
)

logger = logging.getLogger(__name__)

ContractRecord = Union[Facility, Interpreter]

SIGNED_CONTRACT_CONTENT_TYPES = ("application/pdf",)


def _kind(record: ContractRecord) -> str:
    return "facility" if isinstance(record, Facility) else "interpreter"


def store_generated_contract(db: Session, record: ContractRecord, pdf_bytes: bytes) -> dict:
    """Upload a freshly rendered contract and mark it sent"""
    kind = _kind(record)
    key = upload_document(contract_key(kind, record.public_id), pdf_bytes)

    record.contract_pdf_url = key
    if record.contract_status != "signed":
        record.contract_status = "sent"
    db.commit()
    db.refresh(record)

    logger.info(f"📄 Stored {kind} contract for record {record.id}: {key}")
    return {
        "contract_pdf_url": key,
        "download_url": generate_document_url(key),
        "contract_status": record.contract_status,
    }


async def email_contract(
    db: Session,
    record: ContractRecord,
    recipients: list[str],
    recipient_name: str,
    subject: Optional[str] = None,
    body: Optional[str] = None,
) -> dict:
    """
    Email the stored contract PDF as an attachment.

    A typed body is sent as escaped HTML; without one the contract_send
    template is rendered.
    """
    kind = _kind(record)
    if not record.contract_pdf_url:
        raise HTTPException(status_code=400, detail="Generate the contract before emailing it")
    if not recipients:
        raise HTTPException(status_code=400, detail="At least one recipient email is required")

    variables = {"recipient_name": recipient_name, "agency_name": AGENCY_SHORT_NAME}
    default_subject, default_html = render_named_template(db, "contract_send", variables)
    html_content = plain_text_to_html(body) if body else default_html

    pdf_bytes = download_document(record.contract_pdf_url)
    attachment = pdf_attachment(f"{kind}-contract.pdf", pdf_bytes)

    try:
        result = await send_logged_email(
            db,
            recipients,
            subject or default_subject,
            html_content,
            template_name="contract_send",
            facility_id=record.id if kind == "facility" else None,
            interpreter_id=record.id if kind == "interpreter" else None,
            attachments=[attachment],
        )
    except EmailDeliveryError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e

    if record.contract_status == "not_sent":
        record.contract_status = "sent"
        db.commit()

    logger.info(f"📧 Contract for {kind} {record.id} emailed to {result['recipients']}")
    return {"message": "Contract sent", "recipients": result["recipients"]}


def store_signed_contract(
    db: Session,
    record: ContractRecord,
    filename: str,
    content: bytes,
    content_type: Optional[str] = None,
    signed_date: Optional[date] = None,
) -> dict:
    """Store the countersigned copy and mark the contract signed"""
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if content_type and content_type not in SIGNED_CONTRACT_CONTENT_TYPES:
        raise HTTPException(status_code=400, detail="Signed contract must be a PDF")

    kind = _kind(record)
    key = upload_document(
        signed_contract_key(kind, record.public_id, filename or "signed.pdf"),
        content,
        content_type or "application/pdf",
    )

    record.signed_contract_pdf_url = key
    record.contract_status = "signed"
    record.contract_signed_date = signed_date or date.today()
    db.commit()
    db.refresh(record)

    logger.info(f"✅ Signed {kind} contract stored for record {record.id}")
    return {
        "signed_contract_pdf_url": key,
        "contract_status": record.contract_status,
        "contract_signed_date": record.contract_signed_date,
    }


def contract_download_url(record: ContractRecord, signed: bool = False) -> dict:
    key = record.signed_contract_pdf_url if signed else record.contract_pdf_url
    if not key:
        raise HTTPException(status_code=404, detail="Contract document not found")
    return {"url": generate_document_url(key)}
