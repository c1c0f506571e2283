"""Facility router - FastAPI endpoints for facility operations"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import require_admin, require_scheduling_reader
from ...database import get_db
from ...models import Profile
from ...shared.schemas import (
    ContractDocumentResponse,
    ContractEmailRequest,
    DocumentUrlResponse,
    EmailSentResponse,
    SignedContractResponse,
)
from .schemas import FacilityCreate, FacilityResponse, FacilityUpdate
from .service import FacilityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/facilities", tags=["Facilities"])


def get_facility_service(db: Session = Depends(get_db)) -> FacilityService:
    """Dependency injection for FacilityService"""
    return FacilityService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("", response_model=list[FacilityResponse])
async def list_facilities(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    is_gsa: Optional[bool] = Query(None),
    sort_by: Optional[str] = Query(None),
    sort_dir: Optional[str] = Query(None),
    current_user: Profile = Depends(require_scheduling_reader),
    service: FacilityService = Depends(get_facility_service),
):
    """List facilities with search, status filter and sorting"""
    return service.get_facilities(current_user, search, status, is_gsa, sort_by, sort_dir)


@router.get("/{facility_id}", response_model=FacilityResponse)
async def get_facility(
    facility_id: int,
    current_user: Profile = Depends(require_scheduling_reader),
    service: FacilityService = Depends(get_facility_service),
):
    return service.get_facility(facility_id, current_user)


@router.post("", response_model=FacilityResponse, status_code=201)
async def create_facility(
    data: FacilityCreate,
    current_user: Profile = Depends(require_admin),
    service: FacilityService = Depends(get_facility_service),
):
    """Create a new facility"""
    return service.create_facility(data)


@router.put("/{facility_id}", response_model=FacilityResponse)
async def update_facility(
    facility_id: int,
    data: FacilityUpdate,
    current_user: Profile = Depends(require_admin),
    service: FacilityService = Depends(get_facility_service),
):
    return service.update_facility(facility_id, data)


@router.delete("/{facility_id}")
async def delete_facility(
    facility_id: int,
    current_user: Profile = Depends(require_admin),
    service: FacilityService = Depends(get_facility_service),
):
    """Delete a facility that has no jobs"""
    return service.delete_facility(facility_id)


# ============================================================================
# CONTRACTS
# ============================================================================


@router.post("/{facility_id}/contract", response_model=ContractDocumentResponse)
async def generate_facility_contract(
    facility_id: int,
    current_user: Profile = Depends(require_admin),
    service: FacilityService = Depends(get_facility_service),
):
    """Render the services agreement PDF and store it"""
    return service.generate_contract(facility_id)


@router.post("/{facility_id}/contract/email", response_model=EmailSentResponse)
async def email_facility_contract(
    facility_id: int,
    data: ContractEmailRequest,
    current_user: Profile = Depends(require_admin),
    service: FacilityService = Depends(get_facility_service),
):
    """Email the stored contract to the billing contacts (or the given recipients)"""
    return await service.email_contract(facility_id, data)


@router.post("/{facility_id}/contract/signed", response_model=SignedContractResponse)
async def upload_signed_facility_contract(
    facility_id: int,
    file: UploadFile = File(...),
    signed_date: Optional[date] = Form(None),
    current_user: Profile = Depends(require_admin),
    service: FacilityService = Depends(get_facility_service),
):
    content = await file.read()
    return service.upload_signed_contract(
        facility_id, file.filename, content, file.content_type, signed_date
    )


@router.get("/{facility_id}/contract/url", response_model=DocumentUrlResponse)
async def get_facility_contract_url(
    facility_id: int,
    signed: bool = Query(False),
    current_user: Profile = Depends(require_scheduling_reader),
    service: FacilityService = Depends(get_facility_service),
):
    """Presigned download URL for the generated or signed contract"""
    service.get_facility(facility_id, current_user)
    return service.get_contract_url(facility_id, signed)
