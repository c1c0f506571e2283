"""Payable router - FastAPI endpoints for interpreter bills"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import require_admin, require_billing_reader
from ...database import get_db
from ...models import Profile
from .schemas import MarkPayablePaidRequest, PayableResponse, PayableUpdate
from .service import PayableService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payables", tags=["Payables"])


def get_payable_service(db: Session = Depends(get_db)) -> PayableService:
    """Dependency injection for PayableService"""
    return PayableService(db)


@router.get("", response_model=list[PayableResponse])
async def list_payables(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    interpreter_id: Optional[int] = Query(None),
    sort_by: Optional[str] = Query(None),
    sort_dir: Optional[str] = Query(None),
    current_user: Profile = Depends(require_billing_reader),
    service: PayableService = Depends(get_payable_service),
):
    return service.get_payables(search, status, interpreter_id, sort_by, sort_dir)


@router.get("/{bill_id}", response_model=PayableResponse)
async def get_payable(
    bill_id: int,
    current_user: Profile = Depends(require_billing_reader),
    service: PayableService = Depends(get_payable_service),
):
    return service.get_payable(bill_id)


@router.put("/{bill_id}", response_model=PayableResponse)
async def update_payable(
    bill_id: int,
    data: PayableUpdate,
    current_user: Profile = Depends(require_admin),
    service: PayableService = Depends(get_payable_service),
):
    return service.update_payable(bill_id, data)


@router.post("/{bill_id}/mark-paid", response_model=PayableResponse)
async def mark_payable_paid(
    bill_id: int,
    data: MarkPayablePaidRequest,
    current_user: Profile = Depends(require_admin),
    service: PayableService = Depends(get_payable_service),
):
    """Record payment to the interpreter"""
    return service.mark_paid(bill_id, data)
