"""Sequential per-year document numbers (YYYY-NNNNN) for jobs, invoices and bills"""

import logging
import re
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ..models import Job
from ..models_billing import Invoice, InterpreterBill

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"^(\d{4})-(\d+)$")


def format_number(year: int, sequence: int) -> str:
    return f"{year}-{sequence:05d}"


def _next_sequence(db: Session, column, year: int) -> int:
    prefix = f"{year}-"
    existing = db.query(column).filter(column.like(f"{prefix}%")).all()

    highest = 0
    for (value,) in existing:
        match = NUMBER_PATTERN.match(value or "")
        if match and int(match.group(1)) == year:
            highest = max(highest, int(match.group(2)))
    return highest + 1


def next_job_number(db: Session, job_date: date) -> str:
    return format_number(job_date.year, _next_sequence(db, Job.job_number, job_date.year))


def next_invoice_number(db: Session, issued_date: date, job: Optional[Job] = None) -> str:
    """An invoice for a job reuses the job number; otherwise the next number for the year"""
    if job is not None and job.job_number and NUMBER_PATTERN.match(job.job_number):
        taken = db.query(Invoice.id).filter(Invoice.invoice_number == job.job_number).first()
        if not taken:
            return job.job_number
        logger.warning(f"⚠️ Invoice number {job.job_number} already used, assigning next in sequence")
    year = issued_date.year
    return format_number(year, _next_sequence(db, Invoice.invoice_number, year))


def next_bill_number(db: Session, job: Optional[Job] = None, on_date: Optional[date] = None) -> str:
    """A bill for a job reuses the job number; otherwise the next number for the year"""
    if job is not None and job.job_number and NUMBER_PATTERN.match(job.job_number):
        taken = (
            db.query(InterpreterBill.id)
            .filter(InterpreterBill.bill_number == job.job_number)
            .first()
        )
        if not taken:
            return job.job_number
        logger.warning(f"⚠️ Bill number {job.job_number} already used, assigning next in sequence")
    year = (on_date or date.today()).year
    return format_number(year, _next_sequence(db, InterpreterBill.bill_number, year))
