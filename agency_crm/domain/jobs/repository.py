"""Job repository - Database operations for jobs"""

from datetime import date
from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from ...models import Facility, Interpreter, Job
from ...models_billing import Invoice
from ...shared.listing import apply_search, apply_sort

SORTABLE_COLUMNS = {
    "job_number": Job.job_number,
    "job_date": Job.job_date,
    "start_time": Job.start_time,
    "status": Job.status,
    "facility": Facility.name,
    "deaf_client_name": Job.deaf_client_name,
    "billable_hours": Job.billable_hours,
    "facility_billable_total": Job.facility_billable_total,
    "created_at": Job.created_at,
}

ACTIVE_JOB_STATUSES = ("new", "outreach_in_progress", "confirmed")


class JobRepository:
    """Repository for job database operations"""

    @staticmethod
    def _base_query(db: Session, gsa_only: bool = False):
        query = (
            db.query(Job)
            .join(Facility, Job.facility_id == Facility.id)
            .options(joinedload(Job.facility), joinedload(Job.interpreter))
        )
        if gsa_only:
            query = query.filter(Facility.is_gsa.is_(True))
        return query

    @staticmethod
    def list_jobs(
        db: Session,
        search: Optional[str] = None,
        status: Optional[str] = None,
        facility_id: Optional[int] = None,
        interpreter_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        gsa_only: bool = False,
        sort_by: Optional[str] = None,
        sort_dir: Optional[str] = None,
    ) -> list[Job]:
        query = JobRepository._base_query(db, gsa_only)
        if status:
            query = query.filter(Job.status == status)
        if facility_id:
            query = query.filter(Job.facility_id == facility_id)
        if interpreter_id:
            query = query.filter(Job.interpreter_id == interpreter_id)
        if date_from:
            query = query.filter(Job.job_date >= date_from)
        if date_to:
            query = query.filter(Job.job_date <= date_to)
        query = apply_search(
            query, search, Job.job_number, Job.deaf_client_name, Facility.name
        )
        query = apply_sort(
            query,
            SORTABLE_COLUMNS,
            sort_by,
            sort_dir,
            [Job.job_date.desc(), Job.start_time.asc()],
        )
        return query.all()

    @staticmethod
    def list_calendar(
        db: Session, start: date, end: date, gsa_only: bool = False
    ) -> list[Job]:
        return (
            JobRepository._base_query(db, gsa_only)
            .filter(Job.job_date >= start, Job.job_date <= end)
            .order_by(Job.job_date.asc(), Job.start_time.asc())
            .all()
        )

    @staticmethod
    def get_job_by_id(db: Session, job_id: int) -> Optional[Job]:
        return (
            db.query(Job)
            .options(joinedload(Job.facility), joinedload(Job.interpreter))
            .filter(Job.id == job_id)
            .first()
        )

    @staticmethod
    def create_job(db: Session, **job_data) -> Job:
        job = Job(**job_data)
        db.add(job)
        db.flush()
        return job

    @staticmethod
    def has_invoice(db: Session, job_id: int) -> bool:
        return db.query(Invoice.id).filter(Invoice.job_id == job_id).first() is not None

    @staticmethod
    def count_jobs_by_status(db: Session, statuses: tuple, gsa_only: bool = False) -> int:
        query = db.query(func.count(Job.id)).join(Facility, Job.facility_id == Facility.id)
        if gsa_only:
            query = query.filter(Facility.is_gsa.is_(True))
        return query.filter(Job.status.in_(statuses)).scalar() or 0

    @staticmethod
    def count_active_interpreters(db: Session) -> int:
        return (
            db.query(func.count(Interpreter.id)).filter(Interpreter.status == "active").scalar()
            or 0
        )

    @staticmethod
    def count_active_facilities(db: Session, gsa_only: bool = False) -> int:
        query = db.query(func.count(Facility.id)).filter(Facility.status == "active")
        if gsa_only:
            query = query.filter(Facility.is_gsa.is_(True))
        return query.scalar() or 0
