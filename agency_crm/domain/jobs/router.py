"""Job router - FastAPI endpoints for scheduling and job workflow"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_admin, require_scheduling_reader
from ...database import get_db
from ...models import Profile
from .schemas import (
    AutoCompleteResponse,
    ConfirmInterpreterRequest,
    DashboardResponse,
    GenerateBillingResponse,
    JobCreate,
    JobResponse,
    JobUpdate,
    OutreachRequest,
    OutreachResponse,
)
from .service import JobService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def get_job_service(db: Session = Depends(get_db)) -> JobService:
    """Dependency injection for JobService"""
    return JobService(db)


# ============================================================================
# LISTS AND DASHBOARD
# ============================================================================


@router.get("", response_model=list[JobResponse])
async def list_jobs(
    search: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    facility_id: Optional[int] = Query(None),
    interpreter_id: Optional[int] = Query(None),
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    sort_by: Optional[str] = Query(None),
    sort_dir: Optional[str] = Query(None),
    current_user: Profile = Depends(require_scheduling_reader),
    service: JobService = Depends(get_job_service),
):
    """List jobs with filters, search and sorting"""
    return service.get_jobs(
        current_user,
        search=search,
        status=status,
        facility_id=facility_id,
        interpreter_id=interpreter_id,
        date_from=date_from,
        date_to=date_to,
        sort_by=sort_by,
        sort_dir=sort_dir,
    )


@router.get("/calendar", response_model=list[JobResponse])
async def get_calendar(
    start: date = Query(...),
    end: date = Query(...),
    current_user: Profile = Depends(require_scheduling_reader),
    service: JobService = Depends(get_job_service),
):
    """Jobs in a date range ordered by date and start time"""
    return service.get_calendar(start, end, current_user)


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    current_user: Profile = Depends(require_scheduling_reader),
    service: JobService = Depends(get_job_service),
):
    return service.get_dashboard(current_user)


@router.post("/auto-complete", response_model=AutoCompleteResponse)
async def auto_complete(
    current_user: Profile = Depends(get_current_user),
    service: JobService = Depends(get_job_service),
):
    """Mark confirmed jobs that have ended as complete"""
    logger.info(f"🔍 Auto-complete triggered by profile {current_user.id}")
    return service.run_auto_complete()


# ============================================================================
# CORE CRUD OPERATIONS
# ============================================================================


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: int,
    current_user: Profile = Depends(require_scheduling_reader),
    service: JobService = Depends(get_job_service),
):
    return service.get_job(job_id, current_user)


@router.post("", response_model=JobResponse, status_code=201)
async def create_job(
    data: JobCreate,
    current_user: Profile = Depends(require_admin),
    service: JobService = Depends(get_job_service),
):
    """Create a new job"""
    return service.create_job(data)


@router.put("/{job_id}", response_model=JobResponse)
async def update_job(
    job_id: int,
    data: JobUpdate,
    current_user: Profile = Depends(require_admin),
    service: JobService = Depends(get_job_service),
):
    """Edit a job; totals are recomputed on every save"""
    return service.update_job(job_id, data)


@router.delete("/{job_id}")
async def delete_job(
    job_id: int,
    current_user: Profile = Depends(require_admin),
    service: JobService = Depends(get_job_service),
):
    return service.delete_job(job_id)


# ============================================================================
# WORKFLOW
# ============================================================================


@router.post("/{job_id}/outreach", response_model=OutreachResponse)
async def send_outreach(
    job_id: int,
    data: Optional[OutreachRequest] = None,
    current_user: Profile = Depends(require_admin),
    service: JobService = Depends(get_job_service),
):
    """Email the job's potential interpreters"""
    return await service.send_outreach(job_id, data)


@router.post("/{job_id}/confirm", response_model=JobResponse)
async def confirm_interpreter(
    job_id: int,
    data: ConfirmInterpreterRequest,
    current_user: Profile = Depends(require_admin),
    service: JobService = Depends(get_job_service),
):
    return await service.confirm_interpreter(job_id, data)


@router.post("/{job_id}/generate-billing", response_model=GenerateBillingResponse)
async def generate_billing(
    job_id: int,
    current_user: Profile = Depends(require_admin),
    service: JobService = Depends(get_job_service),
):
    """Create the draft invoice and queued payable for a completed job"""
    return service.generate_billing(job_id)
