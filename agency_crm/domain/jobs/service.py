"""Job service - Scheduling workflow and billing generation for jobs"""

import logging
from datetime import date, datetime, timedelta
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ...auth import gsa_only
from ...config import INVOICE_DUE_DAYS
from ...email_service import EmailDeliveryError, render_named_template, send_logged_email
from ...models import Facility, Interpreter, Job, Profile
from ...services.job_billing import (
    build_invoice_line_items,
    payable_amounts,
    recalculate_job_totals,
    snapshot_rates,
)
from ...services.job_calculations import (
    format_currency,
    format_date_for_display,
    format_time_for_display,
    is_valid_job_duration,
    money,
)
from ...services.numbering import next_bill_number, next_invoice_number, next_job_number
from ...services.status_automation import auto_complete_jobs
from ...shared.timezones import get_timezone_from_state
from ..facilities.repository import FacilityRepository
from ..interpreters.repository import InterpreterRepository
from ..invoices.repository import InvoiceRepository
from ..payables.repository import PayableRepository
from .repository import ACTIVE_JOB_STATUSES, JobRepository
from .schemas import (
    JOB_LENGTH_MESSAGE,
    ConfirmInterpreterRequest,
    JobCreate,
    JobUpdate,
    OutreachRequest,
)

logger = logging.getLogger(__name__)

FACILITY_RATE_FIELDS = ("facility_rate_business", "facility_rate_after_hours", "facility_rate_holiday")
INTERPRETER_RATE_FIELDS = (
    "interpreter_rate_business",
    "interpreter_rate_after_hours",
    "interpreter_rate_holiday",
)


def job_location_text(job: Job) -> str:
    if job.location_type == "remote":
        return f"Remote - {job.video_call_link}" if job.video_call_link else "Remote"
    city_state = ", ".join(part for part in (job.location_city, job.location_state) if part)
    parts = [part for part in (job.location_address, city_state, job.location_zip) if part]
    return ", ".join(parts) or "TBD"


def job_email_variables(job: Job, interpreter: Interpreter) -> dict:
    """Template variables for interpreter-facing job emails"""
    return {
        "interpreter_name": interpreter.first_name,
        "facility_name": job.facility.name if job.facility else "",
        "job_number": job.job_number,
        "job_date": format_date_for_display(job.job_date),
        "start_time": format_time_for_display(job.start_time),
        "end_time": format_time_for_display(job.end_time),
        "location": job_location_text(job),
        "rate_info": (
            f"{format_currency(interpreter.rate_business_hours)}/hr business hours, "
            f"{format_currency(interpreter.rate_after_hours)}/hr after hours"
        ),
        "contact_name": job.client_contact_name or "",
        "contact_phone": job.client_contact_phone or "",
        "deaf_client_name": job.deaf_client_name or "",
    }


class JobService:
    """Service layer for job business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = JobRepository()
        self.facility_repo = FacilityRepository()
        self.interpreter_repo = InterpreterRepository()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get_jobs(
        self,
        user: Profile,
        search: Optional[str] = None,
        status: Optional[str] = None,
        facility_id: Optional[int] = None,
        interpreter_id: Optional[int] = None,
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        sort_by: Optional[str] = None,
        sort_dir: Optional[str] = None,
    ) -> list[Job]:
        return self.repo.list_jobs(
            self.db,
            search=search,
            status=status,
            facility_id=facility_id,
            interpreter_id=interpreter_id,
            date_from=date_from,
            date_to=date_to,
            gsa_only=gsa_only(user),
            sort_by=sort_by,
            sort_dir=sort_dir,
        )

    def get_job(self, job_id: int, user: Optional[Profile] = None) -> Job:
        job = self.repo.get_job_by_id(self.db, job_id)
        if not job:
            raise HTTPException(status_code=404, detail="Job not found")
        if user is not None and gsa_only(user) and not job.facility.is_gsa:
            raise HTTPException(status_code=404, detail="Job not found")
        return job

    def get_calendar(self, start: date, end: date, user: Profile) -> list[Job]:
        if end < start:
            raise HTTPException(status_code=400, detail="End date must be on or after start date")
        return self.repo.list_calendar(self.db, start, end, gsa_only(user))

    def get_dashboard(self, user: Profile) -> dict:
        restricted = gsa_only(user)
        return {
            "active_jobs": self.repo.count_jobs_by_status(self.db, ACTIVE_JOB_STATUSES, restricted),
            "new_jobs": self.repo.count_jobs_by_status(self.db, ("new",), restricted),
            "active_interpreters": self.repo.count_active_interpreters(self.db),
            "active_facilities": self.repo.count_active_facilities(self.db, restricted),
        }

    # ------------------------------------------------------------------
    # Create / update
    # ------------------------------------------------------------------

    def _require_facility(self, facility_id: int) -> Facility:
        facility = self.facility_repo.get_facility_by_id(self.db, facility_id)
        if not facility:
            raise HTTPException(status_code=404, detail="Facility not found")
        return facility

    def _require_interpreter(self, interpreter_id: int) -> Interpreter:
        interpreter = self.interpreter_repo.get_interpreter_by_id(self.db, interpreter_id)
        if not interpreter:
            raise HTTPException(status_code=404, detail="Interpreter not found")
        return interpreter

    def _check_potential_interpreters(self, interpreter_ids: Optional[list[int]]) -> list[int]:
        ids = list(dict.fromkeys(interpreter_ids or []))
        found = {i.id for i in self.interpreter_repo.get_interpreters_by_ids(self.db, ids)}
        missing = [i for i in ids if i not in found]
        if missing:
            raise HTTPException(status_code=400, detail=f"Unknown interpreter id(s): {missing}")
        return ids

    @staticmethod
    def _inherit_location(job_data: dict, facility: Facility) -> None:
        """Fill an in-person job's address from the facility (physical, else billing)"""
        if job_data.get("location_type", "in_person") == "in_person" and not job_data.get(
            "location_address"
        ):
            if facility.physical_address:
                job_data.setdefault("location_address", facility.physical_address)
                job_data.setdefault("location_city", facility.physical_city)
                job_data.setdefault("location_state", facility.physical_state)
                job_data.setdefault("location_zip", facility.physical_zip)
            elif facility.billing_address:
                job_data.setdefault("location_address", facility.billing_address)
                job_data.setdefault("location_city", facility.billing_city)
                job_data.setdefault("location_state", facility.billing_state)
                job_data.setdefault("location_zip", facility.billing_zip)
            if not job_data.get("location_address"):
                job_data.pop("location_address", None)

        if not job_data.get("timezone"):
            job_data["timezone"] = (
                get_timezone_from_state(job_data.get("location_state")) or facility.timezone
            )

    def create_job(self, data: JobCreate) -> Job:
        facility = self._require_facility(data.facility_id)
        job_data = data.model_dump(exclude_none=True)

        if data.interpreter_id is not None:
            self._require_interpreter(data.interpreter_id)
        job_data["potential_interpreter_ids"] = self._check_potential_interpreters(
            data.potential_interpreter_ids
        )

        self._inherit_location(job_data, facility)
        job_data["status"] = "new"
        job_data["job_number"] = next_job_number(self.db, data.job_date)

        try:
            job = self.repo.create_job(self.db, **job_data)
            self.db.refresh(job)
            recalculate_job_totals(self.db, job)
            self.db.commit()
            self.db.refresh(job)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to create job: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to create job") from e

        logger.info(f"✅ Created job {job.job_number} for facility {facility.id}")
        return job

    def update_job(self, job_id: int, data: JobUpdate) -> Job:
        job = self.get_job(job_id)
        if job.is_locked:
            raise HTTPException(status_code=409, detail="Paid jobs are locked and cannot be edited")

        updates = data.model_dump(exclude_unset=True)
        for required in ("facility_id", "job_date", "start_time", "end_time", "status"):
            if required in updates and updates[required] is None:
                raise HTTPException(status_code=400, detail=f"{required} cannot be cleared")

        if "start_time" in updates or "end_time" in updates:
            start = updates.get("start_time", job.start_time)
            end = updates.get("end_time", job.end_time)
            if not is_valid_job_duration(start, end):
                raise HTTPException(status_code=400, detail=JOB_LENGTH_MESSAGE)

        facility_changed = "facility_id" in updates and updates["facility_id"] != job.facility_id
        if facility_changed:
            self._require_facility(updates["facility_id"])

        interpreter_changed = (
            "interpreter_id" in updates and updates["interpreter_id"] != job.interpreter_id
        )
        if interpreter_changed and updates["interpreter_id"] is not None:
            self._require_interpreter(updates["interpreter_id"])

        if "potential_interpreter_ids" in updates:
            updates["potential_interpreter_ids"] = self._check_potential_interpreters(
                updates["potential_interpreter_ids"]
            )

        for key, value in updates.items():
            setattr(job, key, value)

        try:
            self.db.flush()
            self.db.expire(job, ["facility", "interpreter"])
            # A new facility or interpreter brings its own rate card unless rates were sent
            if facility_changed:
                for field in FACILITY_RATE_FIELDS:
                    if field not in updates:
                        setattr(job, field, None)
            if interpreter_changed:
                for field in INTERPRETER_RATE_FIELDS:
                    if field not in updates:
                        setattr(job, field, None)
            recalculate_job_totals(self.db, job)
            self.db.commit()
            self.db.refresh(job)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to update job {job_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to update job") from e

        logger.info(f"✅ Updated job {job.job_number} (status {job.status})")
        return job

    def delete_job(self, job_id: int) -> dict:
        job = self.get_job(job_id)
        if job.is_locked:
            raise HTTPException(status_code=409, detail="Paid jobs are locked and cannot be deleted")
        if self.repo.has_invoice(self.db, job.id) or job.bills:
            raise HTTPException(
                status_code=409, detail="Job has billing records and cannot be deleted"
            )
        job_number = job.job_number
        self.db.delete(job)
        self.db.commit()
        logger.info(f"🗑️ Deleted job {job_number}")
        return {"message": "Job deleted"}

    # ------------------------------------------------------------------
    # Workflow
    # ------------------------------------------------------------------

    async def send_outreach(self, job_id: int, data: Optional[OutreachRequest] = None) -> dict:
        """Email each potential interpreter about the job"""
        job = self.get_job(job_id)
        if job.status != "new":
            raise HTTPException(status_code=400, detail="Outreach can only be sent for new jobs")

        candidate_ids = job.potential_interpreter_ids or []
        if data is not None and data.interpreter_ids:
            candidate_ids = [i for i in data.interpreter_ids if i in candidate_ids]
        if not candidate_ids:
            raise HTTPException(
                status_code=400, detail="Add potential interpreters before sending outreach"
            )

        interpreters = self.interpreter_repo.get_interpreters_by_ids(self.db, candidate_ids)
        sent, failed = [], []
        for interpreter in interpreters:
            subject, html_content = render_named_template(
                self.db, "interpreter_outreach", job_email_variables(job, interpreter)
            )
            try:
                await send_logged_email(
                    self.db,
                    interpreter.email,
                    subject,
                    html_content,
                    template_name="interpreter_outreach",
                    job_id=job.id,
                    interpreter_id=interpreter.id,
                )
                sent.append(interpreter.email)
            except EmailDeliveryError as e:
                logger.warning(f"⚠️ Outreach to {interpreter.email} failed: {e}")
                failed.append(interpreter.email)

        if not sent:
            raise HTTPException(status_code=502, detail="Failed to send outreach emails")

        job.status = "outreach_in_progress"
        job.outreach_sent_at = datetime.utcnow()
        self.db.commit()

        logger.info(f"📧 Outreach for job {job.job_number}: {len(sent)} sent, {len(failed)} failed")
        return {
            "message": f"Outreach sent to {len(sent)} interpreter(s)",
            "sent": sent,
            "failed": failed,
            "status": job.status,
        }

    async def confirm_interpreter(self, job_id: int, data: ConfirmInterpreterRequest) -> Job:
        """Confirm the assigned interpreter and lock in billable hours"""
        job = self.get_job(job_id)
        if job.status != "outreach_in_progress":
            raise HTTPException(
                status_code=400,
                detail="Only jobs with outreach in progress can be confirmed",
            )

        if data.interpreter_id is not None and data.interpreter_id != job.interpreter_id:
            job.interpreter = self._require_interpreter(data.interpreter_id)
            snapshot_rates(self.db, job, overwrite_interpreter=True)

        if job.interpreter is None:
            raise HTTPException(status_code=400, detail="Assign an interpreter before confirming")

        recalculate_job_totals(self.db, job)
        job.status = "confirmed"
        self.db.commit()
        self.db.refresh(job)
        logger.info(f"✅ Job {job.job_number} confirmed with interpreter {job.interpreter_id}")

        if data.send_email:
            interpreter = job.interpreter
            subject, html_content = render_named_template(
                self.db, "interpreter_confirmation", job_email_variables(job, interpreter)
            )
            try:
                await send_logged_email(
                    self.db,
                    interpreter.email,
                    subject,
                    html_content,
                    template_name="interpreter_confirmation",
                    job_id=job.id,
                    interpreter_id=interpreter.id,
                )
                job.confirmation_sent_at = datetime.utcnow()
                self.db.commit()
                self.db.refresh(job)
            except EmailDeliveryError as e:
                logger.warning(f"⚠️ Confirmation email for job {job.job_number} failed: {e}")

        return job

    def generate_billing(self, job_id: int) -> dict:
        """Create a draft invoice and a queued payable for a completed job"""
        job = self.get_job(job_id)
        if job.status != "complete":
            raise HTTPException(
                status_code=400, detail="Billing can only be generated for completed jobs"
            )
        if job.interpreter is None:
            raise HTTPException(status_code=400, detail="Job has no assigned interpreter")
        if self.repo.has_invoice(self.db, job.id):
            raise HTTPException(status_code=409, detail="An invoice already exists for this job")

        try:
            totals = recalculate_job_totals(self.db, job)
            items = build_invoice_line_items(job)
            subtotal = money(sum(item["total"] for item in items))

            issued = date.today()
            invoice = InvoiceRepository.create_invoice(
                self.db,
                items,
                invoice_number=next_invoice_number(self.db, issued, job),
                facility_id=job.facility_id,
                job_id=job.id,
                status="draft",
                subtotal=subtotal,
                tax=0,
                total=subtotal,
                issued_date=issued,
                due_date=issued + timedelta(days=INVOICE_DUE_DAYS),
            )
            bill = PayableRepository.create_bill(
                self.db,
                bill_number=next_bill_number(self.db, job, issued),
                interpreter_id=job.interpreter_id,
                job_id=job.id,
                status="queued",
                payment_method=job.interpreter.payment_method,
                **payable_amounts(totals),
            )

            job.status = "ready_to_bill"
            job.finalized_at = datetime.utcnow()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"❌ Failed to generate billing for job {job_id}: {str(e)}")
            raise HTTPException(status_code=500, detail="Failed to generate billing") from e

        logger.info(
            f"✅ Billing generated for job {job.job_number}: invoice {invoice.invoice_number} "
            f"(${invoice.total:.2f}), bill {bill.bill_number} (${bill.total:.2f})"
        )
        return {
            "message": "Billing generated",
            "invoice_id": invoice.id,
            "invoice_number": invoice.invoice_number,
            "bill_id": bill.id,
            "bill_number": bill.bill_number,
            "facility_total": invoice.total,
            "interpreter_total": bill.total,
        }

    def run_auto_complete(self) -> dict:
        return auto_complete_jobs(self.db)
