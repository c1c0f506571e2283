"""
Job time and billing calculations
Splits a shift into business/after-hours buckets and prices it for both sides
"""

import re
from dataclasses import dataclass
from datetime import time
from typing import Optional, Union

MINUTES_PER_DAY = 24 * 60

# Business hours: 8:00 AM (480) to 5:00 PM (1020)
BUSINESS_START_MINUTE = 8 * 60
BUSINESS_END_MINUTE = 17 * 60

DEFAULT_MINIMUM_HOURS = 2
MIN_JOB_MINUTES = 120
MAX_JOB_MINUTES = 480

TimeLike = Union[str, time]

_HHMM_PREFIX = re.compile(r"^(\d{2}:\d{2})")
_HHMM_EXACT = re.compile(r"^\d{2}:\d{2}$")


@dataclass
class HoursSplit:
    business_hours: float
    after_hours: float
    total_hours: float
    billable_hours: float
    minimum_applied: float
    hours_type: str  # business, after, mixed


@dataclass
class BillableInputs:
    hours_split: HoursSplit
    facility_business_rate: float = 0
    facility_after_hours_rate: float = 0
    facility_mileage_rate: float = 0
    facility_rate_adjustment: float = 0
    trilingual_rate_uplift: float = 0
    interpreter_business_rate: float = 0
    interpreter_after_hours_rate: float = 0
    interpreter_mileage_rate: float = 0
    interpreter_rate_adjustment: float = 0
    mileage: float = 0
    travel_time_hours: float = 0
    parking: float = 0
    tolls: float = 0
    misc_fee: float = 0


@dataclass
class BillableTotal:
    # Facility side
    facility_business_rate: float
    facility_after_hours_rate: float
    facility_mileage_rate: float
    facility_business_total: float
    facility_after_hours_total: float
    facility_mileage_total: float
    facility_fees_total: float
    facility_hourly_total: float
    facility_total: float

    # Interpreter side
    interpreter_business_rate: float
    interpreter_after_hours_rate: float
    interpreter_mileage_rate: float
    interpreter_travel_time_rate: float
    interpreter_business_total: float
    interpreter_after_hours_total: float
    interpreter_mileage_total: float
    interpreter_travel_time_total: float
    interpreter_fees_total: float
    interpreter_hourly_total: float
    interpreter_total: float


# ============================================================================
# TIME PARSING
# ============================================================================


def to_minutes(value: TimeLike) -> int:
    """Minutes since midnight for "HH:MM", "HH:MM:SS" or a time object"""
    if isinstance(value, time):
        return value.hour * 60 + value.minute

    hhmm = normalize_time_to_hhmm(value)
    if not hhmm:
        raise ValueError(f"Invalid time: {value!r}")
    hours, minutes = (int(part) for part in hhmm.split(":"))
    if hours > 23 or minutes > 59:
        raise ValueError(f"Invalid time: {value!r}")
    return hours * 60 + minutes


def normalize_time_to_hhmm(value) -> str:
    """
    Normalize "HH:MM:SS", "HH:MM:SS.sss" or "HH:MM" to "HH:MM".
    Returns an empty string for anything else.
    """
    if isinstance(value, time):
        return value.strftime("%H:%M")
    if not isinstance(value, str):
        return ""
    match = _HHMM_PREFIX.match(value.strip())
    return match.group(1) if match else ""


def is_valid_time_format(value: Optional[str]) -> bool:
    if not value:
        return False
    return bool(_HHMM_EXACT.match(value))


def needs_time_normalization(value: Optional[str]) -> bool:
    if not value:
        return False
    return len(value) > 5 and bool(_HHMM_PREFIX.match(value))


def parse_time(value: TimeLike) -> time:
    minutes = to_minutes(value)
    return time(minutes // 60, minutes % 60)


# ============================================================================
# DURATIONS
# ============================================================================


def calculate_duration_minutes(start_time: TimeLike, end_time: TimeLike) -> int:
    """Elapsed minutes; an end before the start wraps past midnight"""
    start = to_minutes(start_time)
    end = to_minutes(end_time)
    if end >= start:
        return end - start
    return (MINUTES_PER_DAY - start) + end


def calculate_job_duration(start_time: TimeLike, end_time: TimeLike) -> float:
    return calculate_duration_minutes(start_time, end_time) / 60


def calculate_end_time(start_time: TimeLike, duration_minutes: int) -> str:
    end = (to_minutes(start_time) + duration_minutes) % MINUTES_PER_DAY
    return f"{end // 60:02d}:{end % 60:02d}"


def is_valid_job_duration(start_time: TimeLike, end_time: TimeLike) -> bool:
    duration = calculate_duration_minutes(start_time, end_time)
    return MIN_JOB_MINUTES <= duration <= MAX_JOB_MINUTES


def clamp_duration(start_time: TimeLike, end_time: TimeLike) -> str:
    """Return an end time that keeps the job between 2 and 8 hours"""
    duration = calculate_duration_minutes(start_time, end_time)
    if MIN_JOB_MINUTES <= duration <= MAX_JOB_MINUTES:
        return normalize_time_to_hhmm(end_time)
    clamped = max(MIN_JOB_MINUTES, min(MAX_JOB_MINUTES, duration))
    return calculate_end_time(start_time, clamped)


def format_duration(hours: float) -> str:
    """Format hours as "Xh Ym", "Xh" or "Ym" """
    h = int(hours)
    m = round((hours - h) * 60)
    if m == 60:
        h, m = h + 1, 0
    if m == 0:
        return f"{h}h"
    if h == 0:
        return f"{m}m"
    return f"{h}h {m}m"


def _time_label(hour: int, minute: int) -> str:
    hour12 = 12 if hour == 0 else hour - 12 if hour > 12 else hour
    ampm = "AM" if hour < 12 else "PM"
    return f"{hour12}:{minute:02d} {ampm}"


def generate_time_options() -> list[dict]:
    """15-minute increments across the day, labelled in 12-hour time"""
    return [
        {"value": f"{h:02d}:{m:02d}", "label": _time_label(h, m)}
        for h in range(24)
        for m in range(0, 60, 15)
    ]


def generate_duration_options() -> list[dict]:
    """2h to 8h in 15-minute increments"""
    options = []
    for minutes in range(MIN_JOB_MINUTES, MAX_JOB_MINUTES + 1, 15):
        hours, mins = divmod(minutes, 60)
        label = f"{hours}h" if mins == 0 else f"{hours}h {mins}m"
        options.append({"value": minutes, "label": label})
    return options


TIME_OPTIONS = generate_time_options()
DURATION_OPTIONS = generate_duration_options()


def format_time_for_display(value: Optional[TimeLike]) -> str:
    if value is None or value == "":
        return "-"
    try:
        minutes = to_minutes(value)
    except ValueError:
        return str(value)
    return _time_label(minutes // 60, minutes % 60)


def format_date_for_display(value) -> str:
    """Dates render as "Jan 5, 2026" """
    if not value:
        return "-"
    return f"{value.strftime('%b')} {value.day}, {value.year}"


# ============================================================================
# HOURS SPLIT
# ============================================================================


def calculate_hours_split(
    start_time: TimeLike, end_time: TimeLike, minimum_hours: float = DEFAULT_MINIMUM_HOURS
) -> HoursSplit:
    """
    Split a shift into business (08:00-17:00) and after-hours time.

    Any shortfall below the minimum is billed entirely as business hours and
    reported as minimum_applied.
    """
    start = to_minutes(start_time)
    total_minutes = calculate_duration_minutes(start_time, end_time)
    total_hours = calculate_job_duration(start_time, end_time)

    business_minutes = 0
    after_minutes = 0
    for offset in range(total_minutes):
        minute_of_day = (start + offset) % MINUTES_PER_DAY
        if BUSINESS_START_MINUTE <= minute_of_day < BUSINESS_END_MINUTE:
            business_minutes += 1
        else:
            after_minutes += 1

    billable_hours = max(total_hours, minimum_hours or 0)
    minimum_applied = billable_hours - total_hours if billable_hours > total_hours else 0

    if after_minutes == 0:
        hours_type = "business"
    elif business_minutes == 0:
        hours_type = "after"
    else:
        hours_type = "mixed"

    return HoursSplit(
        business_hours=business_minutes / 60 + minimum_applied,
        after_hours=after_minutes / 60,
        total_hours=total_hours,
        billable_hours=billable_hours,
        minimum_applied=minimum_applied,
        hours_type=hours_type,
    )


# ============================================================================
# BILLING
# ============================================================================


def calculate_billable_total(inputs: BillableInputs) -> BillableTotal:
    """Price a job for the facility invoice and the interpreter payable"""
    split = inputs.hours_split

    facility_business_rate = (
        inputs.facility_business_rate + inputs.trilingual_rate_uplift + inputs.facility_rate_adjustment
    )
    facility_after_hours_rate = (
        inputs.facility_after_hours_rate
        + inputs.trilingual_rate_uplift
        + inputs.facility_rate_adjustment
    )
    interpreter_business_rate = inputs.interpreter_business_rate + inputs.interpreter_rate_adjustment
    interpreter_after_hours_rate = (
        inputs.interpreter_after_hours_rate + inputs.interpreter_rate_adjustment
    )

    # Travel time is paid at whichever bucket dominates; ties go to business
    if split.business_hours >= split.after_hours:
        travel_time_rate = interpreter_business_rate
    else:
        travel_time_rate = interpreter_after_hours_rate

    fees_total = inputs.parking + inputs.tolls + inputs.misc_fee

    facility_business_total = split.business_hours * facility_business_rate
    facility_after_hours_total = split.after_hours * facility_after_hours_rate
    facility_mileage_total = inputs.mileage * inputs.facility_mileage_rate
    facility_hourly_total = facility_business_total + facility_after_hours_total

    interpreter_business_total = split.business_hours * interpreter_business_rate
    interpreter_after_hours_total = split.after_hours * interpreter_after_hours_rate
    interpreter_mileage_total = inputs.mileage * inputs.interpreter_mileage_rate
    interpreter_travel_time_total = inputs.travel_time_hours * travel_time_rate
    interpreter_hourly_total = interpreter_business_total + interpreter_after_hours_total

    return BillableTotal(
        facility_business_rate=facility_business_rate,
        facility_after_hours_rate=facility_after_hours_rate,
        facility_mileage_rate=inputs.facility_mileage_rate,
        facility_business_total=facility_business_total,
        facility_after_hours_total=facility_after_hours_total,
        facility_mileage_total=facility_mileage_total,
        facility_fees_total=fees_total,
        facility_hourly_total=facility_hourly_total,
        facility_total=facility_hourly_total + facility_mileage_total + fees_total,
        interpreter_business_rate=interpreter_business_rate,
        interpreter_after_hours_rate=interpreter_after_hours_rate,
        interpreter_mileage_rate=inputs.interpreter_mileage_rate,
        interpreter_travel_time_rate=travel_time_rate,
        interpreter_business_total=interpreter_business_total,
        interpreter_after_hours_total=interpreter_after_hours_total,
        interpreter_mileage_total=interpreter_mileage_total,
        interpreter_travel_time_total=interpreter_travel_time_total,
        interpreter_fees_total=fees_total,
        interpreter_hourly_total=interpreter_hourly_total,
        interpreter_total=(
            interpreter_hourly_total
            + interpreter_mileage_total
            + interpreter_travel_time_total
            + fees_total
        ),
    )


# ============================================================================
# VALUE HELPERS
# ============================================================================


def to_safe_number(value, fallback: float = 0) -> float:
    """Coerce form input to a number; blanks and junk become the fallback"""
    if value is None or value == "":
        return fallback
    try:
        number = float(value)
    except (TypeError, ValueError):
        return fallback
    if number != number:  # NaN
        return fallback
    return number


def has_value(value) -> bool:
    if value is None or value == "":
        return False
    try:
        number = float(value)
    except (TypeError, ValueError):
        return False
    return number == number


def format_currency(value: Optional[float]) -> str:
    if value is None:
        return "-"
    return f"${value:.2f}"


def money(value: float) -> float:
    return round(value or 0, 2)
