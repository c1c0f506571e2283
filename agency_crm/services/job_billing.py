"""
Job pricing: rate snapshots, computed totals and invoice line items.

Rates stored on the job take precedence. Missing rates fall back to the
facility or interpreter rate card, then 0; a missing mileage rate falls back
to the default_mileage_rate setting.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ..models import Job
from .app_settings import get_default_mileage_rate
from .job_calculations import (
    DEFAULT_MINIMUM_HOURS,
    BillableInputs,
    BillableTotal,
    HoursSplit,
    calculate_billable_total,
    calculate_hours_split,
    has_value,
    money,
    to_safe_number,
)

logger = logging.getLogger(__name__)


def effective_minimum_hours(job: Job) -> float:
    """Larger of the facility and interpreter minimums (each defaulting to 2)"""
    facility_minimum = DEFAULT_MINIMUM_HOURS
    if job.facility is not None and job.facility.minimum_billable_hours is not None:
        facility_minimum = job.facility.minimum_billable_hours

    interpreter_minimum = DEFAULT_MINIMUM_HOURS
    if job.interpreter is not None and job.interpreter.minimum_hours is not None:
        interpreter_minimum = job.interpreter.minimum_hours

    return max(facility_minimum, interpreter_minimum)


def snapshot_rates(db: Session, job: Job, overwrite_interpreter: bool = False) -> None:
    """Copy rate cards onto the job where the job has no rate of its own"""
    facility = job.facility
    if facility is not None:
        if not has_value(job.facility_rate_business):
            job.facility_rate_business = facility.rate_business_hours
        if not has_value(job.facility_rate_after_hours):
            job.facility_rate_after_hours = facility.rate_after_hours
        if not has_value(job.facility_rate_holiday):
            job.facility_rate_holiday = facility.rate_holiday_hours

    interpreter = job.interpreter
    if interpreter is not None:
        if overwrite_interpreter or not has_value(job.interpreter_rate_business):
            job.interpreter_rate_business = interpreter.rate_business_hours
        if overwrite_interpreter or not has_value(job.interpreter_rate_after_hours):
            job.interpreter_rate_after_hours = interpreter.rate_after_hours
        if overwrite_interpreter or not has_value(job.interpreter_rate_holiday):
            job.interpreter_rate_holiday = interpreter.rate_holiday_hours

    if not has_value(job.facility_rate_mileage) or not has_value(job.interpreter_rate_mileage):
        default_rate = get_default_mileage_rate(db)
        if not has_value(job.facility_rate_mileage):
            job.facility_rate_mileage = default_rate
        if not has_value(job.interpreter_rate_mileage):
            job.interpreter_rate_mileage = default_rate


def job_hours_split(job: Job, minimum_hours: Optional[float] = None) -> HoursSplit:
    """Split actual times when both are recorded, otherwise the scheduled times"""
    if job.actual_start_time is not None and job.actual_end_time is not None:
        start, end = job.actual_start_time, job.actual_end_time
    else:
        start, end = job.start_time, job.end_time
    if minimum_hours is None:
        minimum_hours = effective_minimum_hours(job)
    return calculate_hours_split(start, end, minimum_hours)


def build_billable_inputs(job: Job, split: HoursSplit) -> BillableInputs:
    return BillableInputs(
        hours_split=split,
        facility_business_rate=to_safe_number(job.facility_rate_business),
        facility_after_hours_rate=to_safe_number(job.facility_rate_after_hours),
        facility_mileage_rate=to_safe_number(job.facility_rate_mileage),
        facility_rate_adjustment=to_safe_number(job.facility_rate_adjustment),
        trilingual_rate_uplift=to_safe_number(job.trilingual_rate_uplift),
        interpreter_business_rate=to_safe_number(job.interpreter_rate_business),
        interpreter_after_hours_rate=to_safe_number(job.interpreter_rate_after_hours),
        interpreter_mileage_rate=to_safe_number(job.interpreter_rate_mileage),
        interpreter_rate_adjustment=to_safe_number(job.interpreter_rate_adjustment),
        mileage=to_safe_number(job.mileage),
        travel_time_hours=to_safe_number(job.travel_time_hours),
        parking=to_safe_number(job.parking),
        tolls=to_safe_number(job.tolls),
        misc_fee=to_safe_number(job.misc_fee),
    )


def recalculate_job_totals(
    db: Session, job: Job, minimum_hours: Optional[float] = None
) -> BillableTotal:
    """Recompute the hours split and totals and store them on the job (no commit)"""
    snapshot_rates(db, job)
    split = job_hours_split(job, minimum_hours)
    totals = calculate_billable_total(build_billable_inputs(job, split))

    job.billable_hours = split.billable_hours
    job.business_hours_worked = split.business_hours
    job.after_hours_worked = split.after_hours
    job.facility_hourly_total = money(totals.facility_hourly_total)
    job.facility_billable_total = money(totals.facility_total)
    job.interpreter_hourly_total = money(totals.interpreter_hourly_total)
    job.interpreter_billable_total = money(totals.interpreter_total)

    logger.info(
        f"📊 Job {job.job_number}: {split.billable_hours:.2f}h billable "
        f"({split.hours_type}), facility ${job.facility_billable_total:.2f}, "
        f"interpreter ${job.interpreter_billable_total:.2f}"
    )
    return totals


def _line(description: str, quantity: float, unit_price: float) -> dict:
    return {
        "description": description,
        "quantity": round(quantity, 2),
        "unit_price": round(unit_price, 2),
        "total": money(quantity * unit_price),
    }


def build_invoice_line_items(job: Job) -> list[dict]:
    """Invoice lines for a job; zero-amount lines are left out"""
    uplift = to_safe_number(job.trilingual_rate_uplift)
    adjustment = to_safe_number(job.facility_rate_adjustment)
    adjusted = uplift > 0 or adjustment > 0

    business_rate = to_safe_number(job.facility_rate_business) + uplift + adjustment
    after_hours_rate = to_safe_number(job.facility_rate_after_hours) + uplift + adjustment
    business_hours = to_safe_number(job.business_hours_worked)
    after_hours = to_safe_number(job.after_hours_worked)
    billable_hours = to_safe_number(job.billable_hours)

    items = []
    if business_hours > 0 and business_rate > 0:
        label = "Business Hours, adjusted" if adjusted else "Business Hours"
        items.append(_line(f"Interpreter Services ({label})", business_hours, business_rate))

    if after_hours > 0 and after_hours_rate > 0:
        label = "After Hours, adjusted" if adjusted else "After Hours"
        items.append(_line(f"Interpreter Services ({label})", after_hours, after_hours_rate))

    if business_hours == 0 and after_hours == 0 and billable_hours > 0 and business_rate > 0:
        description = "Interpreter Services (adjusted)" if adjusted else "Interpreter Services"
        items.append(_line(description, billable_hours, business_rate))

    travel_hours = to_safe_number(job.travel_time_hours)
    travel_rate = to_safe_number(job.travel_time_rate)
    if travel_hours > 0 and travel_rate > 0:
        items.append(_line("Travel Time", travel_hours, travel_rate))

    mileage = to_safe_number(job.mileage)
    mileage_rate = to_safe_number(job.facility_rate_mileage)
    if mileage > 0 and mileage_rate > 0:
        items.append(_line("Mileage", mileage, mileage_rate))

    for description, amount in (
        ("Parking", job.parking),
        ("Tolls", job.tolls),
        ("Miscellaneous Fee", job.misc_fee),
    ):
        amount = to_safe_number(amount)
        if amount > 0:
            items.append(_line(description, 1, amount))

    facility = job.facility
    if job.emergency_fee_applied and facility is not None and facility.emergency_fee:
        items.append(_line("Emergency Fee", 1, facility.emergency_fee))
    if job.holiday_fee_applied and facility is not None and facility.holiday_fee:
        items.append(_line("Holiday Fee", 1, facility.holiday_fee))

    return items


def payable_amounts(totals: BillableTotal) -> dict:
    """Split of the interpreter total used for a queued payable"""
    expenses = totals.interpreter_travel_time_total + totals.interpreter_fees_total
    return {
        "hours_amount": money(totals.interpreter_hourly_total),
        "mileage_amount": money(totals.interpreter_mileage_total),
        "expenses_amount": money(expenses),
        "total": money(totals.interpreter_total),
    }
