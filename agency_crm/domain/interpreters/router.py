"""Interpreter router - FastAPI endpoints for interpreter operations"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin
from ...database import get_db
from ...models import Profile
from ...shared.schemas import (
    ContractDocumentResponse,
    ContractEmailRequest,
    DocumentUrlResponse,
    EmailSentResponse,
    SignedContractResponse,
)
from .schemas import InterpreterCreate, InterpreterResponse, InterpreterUpdate
from .service import InterpreterService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/interpreters", tags=["Interpreters"])


def get_interpreter_service(db: Session = Depends(get_db)) -> InterpreterService:
    """Dependency injection for InterpreterService"""
    return InterpreterService(db)


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("", response_model=list[InterpreterResponse])
async def list_interpreters(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    sort_by: Optional[str] = Query(None),
    sort_dir: Optional[str] = Query(None),
    current_user: Profile = Depends(get_current_user),
    service: InterpreterService = Depends(get_interpreter_service),
):
    """List interpreters with search, status filter and sorting"""
    return service.get_interpreters(search, status, sort_by, sort_dir)


@router.get("/{interpreter_id}", response_model=InterpreterResponse)
async def get_interpreter(
    interpreter_id: int,
    current_user: Profile = Depends(get_current_user),
    service: InterpreterService = Depends(get_interpreter_service),
):
    return service.get_interpreter(interpreter_id)


@router.post("", response_model=InterpreterResponse, status_code=201)
async def create_interpreter(
    data: InterpreterCreate,
    current_user: Profile = Depends(require_admin),
    service: InterpreterService = Depends(get_interpreter_service),
):
    return service.create_interpreter(data)


@router.put("/{interpreter_id}", response_model=InterpreterResponse)
async def update_interpreter(
    interpreter_id: int,
    data: InterpreterUpdate,
    current_user: Profile = Depends(require_admin),
    service: InterpreterService = Depends(get_interpreter_service),
):
    return service.update_interpreter(interpreter_id, data)


@router.delete("/{interpreter_id}")
async def delete_interpreter(
    interpreter_id: int,
    current_user: Profile = Depends(require_admin),
    service: InterpreterService = Depends(get_interpreter_service),
):
    return service.delete_interpreter(interpreter_id)


# ============================================================================
# CONTRACTS
# ============================================================================


@router.post("/{interpreter_id}/contract", response_model=ContractDocumentResponse)
async def generate_interpreter_contract(
    interpreter_id: int,
    current_user: Profile = Depends(require_admin),
    service: InterpreterService = Depends(get_interpreter_service),
):
    """Render the interpreter agreement PDF and store it"""
    return service.generate_contract(interpreter_id)


@router.post("/{interpreter_id}/contract/email", response_model=EmailSentResponse)
async def email_interpreter_contract(
    interpreter_id: int,
    data: ContractEmailRequest,
    current_user: Profile = Depends(require_admin),
    service: InterpreterService = Depends(get_interpreter_service),
):
    return await service.email_contract(interpreter_id, data)


@router.post("/{interpreter_id}/contract/signed", response_model=SignedContractResponse)
async def upload_signed_interpreter_contract(
    interpreter_id: int,
    file: UploadFile = File(...),
    signed_date: Optional[date] = Form(None),
    current_user: Profile = Depends(require_admin),
    service: InterpreterService = Depends(get_interpreter_service),
):
    content = await file.read()
    return service.upload_signed_contract(
        interpreter_id, file.filename, content, file.content_type, signed_date
    )


@router.get("/{interpreter_id}/contract/url", response_model=DocumentUrlResponse)
async def get_interpreter_contract_url(
    interpreter_id: int,
    signed: bool = Query(False),
    current_user: Profile = Depends(get_current_user),
    service: InterpreterService = Depends(get_interpreter_service),
):
    return service.get_contract_url(interpreter_id, signed)
