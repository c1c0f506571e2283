"""
Email Service using Resend
Sends transactional email and records every attempt in email_logs
"""

import base64
import logging
from typing import Optional, Union

import resend
from sqlalchemy.orm import Session

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .email_templates import DEFAULT_TEMPLATES, render_template
from .models import EmailLog, EmailTemplate

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


class EmailDeliveryError(Exception):
    """Raised when the email provider rejects or cannot be reached"""


def normalize_recipients(to: Union[str, list[str]]) -> list[str]:
    recipients = [to] if isinstance(to, str) else list(to or [])
    return [r.strip() for r in recipients if r and r.strip()]


def pdf_attachment(filename: str, content: bytes) -> dict:
    return {"filename": filename, "content": base64.b64encode(content).decode("ascii")}


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    html_content: str,
    from_address: Optional[str] = None,
    attachments: Optional[list[dict]] = None,
) -> dict:
    """
    Send an email via Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        html_content: Rendered HTML body
        from_address: Optional custom from address
        attachments: Optional list of {"filename", "content"} with base64 content

    Returns:
        Send response dict
    """
    recipients = normalize_recipients(to)
    if not recipients:
        raise EmailDeliveryError("No recipients provided")

    if not resend.api_key:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise EmailDeliveryError("Email service not configured")

    email_data = {
        "from": from_address or EMAIL_FROM_ADDRESS,
        "to": recipients,
        "subject": subject,
        "html": html_content,
    }
    if attachments:
        email_data["attachments"] = [
            {"filename": attachment["filename"], "content": attachment["content"]}
            for attachment in attachments
        ]

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(email_data)
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise EmailDeliveryError(f"Failed to send email: {str(e)}") from e


def log_email(
    db: Session,
    recipient: str,
    subject: str,
    status: str,
    template_name: Optional[str] = None,
    job_id: Optional[int] = None,
    interpreter_id: Optional[int] = None,
    facility_id: Optional[int] = None,
    error_message: Optional[str] = None,
) -> EmailLog:
    entry = EmailLog(
        recipient_email=recipient,
        subject=subject,
        status=status,
        template_name=template_name,
        job_id=job_id,
        interpreter_id=interpreter_id,
        facility_id=facility_id,
        error_message=error_message,
    )
    db.add(entry)
    return entry


async def send_logged_email(
    db: Session,
    to: Union[str, list[str]],
    subject: str,
    html_content: str,
    template_name: Optional[str] = None,
    job_id: Optional[int] = None,
    interpreter_id: Optional[int] = None,
    facility_id: Optional[int] = None,
    attachments: Optional[list[dict]] = None,
) -> dict:
    """
    Send one email to all recipients and write an email_logs row for each.

    Logs are committed whether or not delivery succeeds; a failure is re-raised
    after logging.
    """
    recipients = normalize_recipients(to)
    try:
        response = await send_email(recipients, subject, html_content, attachments=attachments)
    except EmailDeliveryError as e:
        for recipient in recipients:
            log_email(
                db,
                recipient,
                subject,
                "failed",
                template_name=template_name,
                job_id=job_id,
                interpreter_id=interpreter_id,
                facility_id=facility_id,
                error_message=str(e),
            )
        db.commit()
        raise

    for recipient in recipients:
        log_email(
            db,
            recipient,
            subject,
            "sent",
            template_name=template_name,
            job_id=job_id,
            interpreter_id=interpreter_id,
            facility_id=facility_id,
        )
    db.commit()
    return {"id": (response or {}).get("id"), "recipients": recipients}


def get_template(db: Session, name: str) -> Optional[dict]:
    """Stored template by name, falling back to the built-in default"""
    template = db.query(EmailTemplate).filter(EmailTemplate.name == name).first()
    if template:
        return {"name": template.name, "subject": template.subject, "body": template.body}
    default = DEFAULT_TEMPLATES.get(name)
    if default:
        return {"name": name, **default}
    return None


def render_named_template(db: Session, name: str, variables: dict) -> tuple[str, str]:
    """Return (subject, html) for a template rendered with variables"""
    template = get_template(db, name)
    if not template:
        raise LookupError(f"Email template '{name}' not found")
    return (
        render_template(template["subject"], variables),
        render_template(template["body"], variables, escape_html=True),
    )


def seed_default_templates(db: Session) -> int:
    """Insert any default template that is missing; existing rows are left untouched"""
    existing = {name for (name,) in db.query(EmailTemplate.name).all()}
    created = 0
    for name, template in DEFAULT_TEMPLATES.items():
        if name in existing:
            continue
        db.add(EmailTemplate(name=name, subject=template["subject"], body=template["body"]))
        created += 1
    if created:
        db.commit()
        logger.info(f"✅ Seeded {created} default email template(s)")
    return created
