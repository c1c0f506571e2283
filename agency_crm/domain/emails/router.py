"""Email router - Sending, templates and the email log"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...models import Profile
from .schemas import (
    EmailLogResponse,
    EmailTemplateCreate,
    EmailTemplateResponse,
    EmailTemplateUpdate,
    SendEmailRequest,
    SendEmailResponse,
)
from .service import EmailService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/emails", tags=["Email"])


def get_email_service(db: Session = Depends(get_db)) -> EmailService:
    """Dependency injection for EmailService"""
    return EmailService(db)


@router.post("/send", response_model=SendEmailResponse)
async def send_email(
    data: SendEmailRequest,
    current_user: Profile = Depends(require_admin),
    service: EmailService = Depends(get_email_service),
):
    """Send an email (optionally from a template) and log it per recipient"""
    return await service.send(data)


# ============================================================================
# TEMPLATES
# ============================================================================


@router.get("/templates", response_model=list[EmailTemplateResponse])
async def list_templates(
    current_user: Profile = Depends(get_current_user),
    service: EmailService = Depends(get_email_service),
):
    return service.get_templates()


@router.get("/templates/{template_id}", response_model=EmailTemplateResponse)
async def get_template(
    template_id: int,
    current_user: Profile = Depends(get_current_user),
    service: EmailService = Depends(get_email_service),
):
    return service.get_template(template_id)


@router.post("/templates", response_model=EmailTemplateResponse, status_code=201)
async def create_template(
    data: EmailTemplateCreate,
    current_user: Profile = Depends(require_admin),
    service: EmailService = Depends(get_email_service),
):
    return service.create_template(data)


@router.put("/templates/{template_id}", response_model=EmailTemplateResponse)
async def update_template(
    template_id: int,
    data: EmailTemplateUpdate,
    current_user: Profile = Depends(require_admin),
    service: EmailService = Depends(get_email_service),
):
    return service.update_template(template_id, data)


@router.delete("/templates/{template_id}")
async def delete_template(
    template_id: int,
    current_user: Profile = Depends(require_admin),
    service: EmailService = Depends(get_email_service),
):
    return service.delete_template(template_id)


# ============================================================================
# LOGS
# ============================================================================


@router.get("/logs", response_model=list[EmailLogResponse])
async def list_email_logs(
    job_id: Optional[int] = Query(None),
    interpreter_id: Optional[int] = Query(None),
    facility_id: Optional[int] = Query(None),
    status: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    current_user: Profile = Depends(get_current_user),
    service: EmailService = Depends(get_email_service),
):
    return service.get_logs(job_id, interpreter_id, facility_id, status, limit)
