"""Email service - Generic sends, template management and the email log"""

import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...email_service import EmailDeliveryError, get_template, send_logged_email
from ...email_templates import render_template
from ...models import EmailLog, EmailTemplate
from .repository import EmailRepository
from .schemas import EmailTemplateCreate, EmailTemplateUpdate, SendEmailRequest

logger = logging.getLogger(__name__)


class EmailService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = EmailRepository()

    async def send(self, data: SendEmailRequest) -> dict:
        """
        Send one email to every recipient.

        With a template_name the stored (or built-in) template supplies the
        subject and body; an explicit subject or html still wins. Variables are
        substituted into whichever text is used.
        """
        subject, html = data.subject, data.html
        if data.template_name:
            template = get_template(self.db, data.template_name)
            if not template:
                raise HTTPException(
                    status_code=404, detail=f"Email template '{data.template_name}' not found"
                )
            subject = subject or template["subject"]
            html = html or template["body"]

        if not subject or not html:
            raise HTTPException(status_code=400, detail="Subject and html are required")

        subject = render_template(subject, data.variables)
        html = render_template(html, data.variables, escape_html=True)

        try:
            result = await send_logged_email(
                self.db,
                data.to,
                subject,
                html,
                template_name=data.template_name,
                job_id=data.job_id,
                interpreter_id=data.interpreter_id,
                facility_id=data.facility_id,
            )
        except EmailDeliveryError as e:
            raise HTTPException(status_code=502, detail=str(e)) from e

        return {"message": "Email sent", **result}

    # Templates

    def get_templates(self) -> list[EmailTemplate]:
        return self.repo.list_templates(self.db)

    def get_template(self, template_id: int) -> EmailTemplate:
        template = self.repo.get_template_by_id(self.db, template_id)
        if not template:
            raise HTTPException(status_code=404, detail="Email template not found")
        return template

    def create_template(self, data: EmailTemplateCreate) -> EmailTemplate:
        if self.repo.get_template_by_name(self.db, data.name):
            raise HTTPException(
                status_code=409, detail=f"An email template named '{data.name}' already exists"
            )
        template = self.repo.create_template(self.db, **data.model_dump())
        logger.info(f"✅ Created email template {template.name}")
        return template

    def update_template(self, template_id: int, data: EmailTemplateUpdate) -> EmailTemplate:
        template = self.get_template(template_id)
        return self.repo.update_template(self.db, template, **data.model_dump(exclude_unset=True))

    def delete_template(self, template_id: int) -> dict:
        template = self.get_template(template_id)
        self.repo.delete_template(self.db, template)
        logger.info(f"🗑️ Deleted email template {template_id}")
        return {"message": "Email template deleted"}

    # Logs

    def get_logs(
        self,
        job_id: Optional[int] = None,
        interpreter_id: Optional[int] = None,
        facility_id: Optional[int] = None,
        status: Optional[str] = None,
        limit: int = 100,
    ) -> list[EmailLog]:
        return self.repo.list_logs(self.db, job_id, interpreter_id, facility_id, status, limit)
