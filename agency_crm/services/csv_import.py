"""
CSV import of interpreters and facilities.

An import replaces every existing row of that type. Column headers are matched
case-insensitively against the spreadsheet exports the agency keeps.
"""

import csv
import io
import logging
import re
import uuid
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ..models import EmailLog, Facility, Interpreter, Job
from ..models_billing import Invoice, InvoiceItem, InterpreterBill
from ..shared.timezones import get_timezone_from_state
from ..shared.validators import US_STATES

logger = logging.getLogger(__name__)

BATCH_SIZE = 50
IMPORT_TYPES = ("interpreters", "facilities")

_STATE_BY_NAME = {name.lower(): code for code, name in US_STATES.items()}


class CSVImportError(ValueError):
    """Raised when the payload cannot be imported at all"""


def parse_rows(csv_data: str) -> list[dict]:
    """
    Parse CSV text into dicts keyed by lower-cased, trimmed header names.

    Blank lines are dropped and every cell is trimmed.
    """
    lines = [line for line in csv_data.splitlines() if line.strip()]
    if not lines:
        raise CSVImportError("CSV data is empty")

    reader = csv.reader(io.StringIO("\n".join(lines)), skipinitialspace=True)
    headers = [h.strip().lower() for h in next(reader)]
    rows = []
    for values in reader:
        cells = [v.strip() for v in values]
        rows.append({header: cells[i] if i < len(cells) else "" for i, header in enumerate(headers)})
    return rows


def clean_currency(value: Optional[str]) -> Optional[float]:
    """'$1,250.50' -> 1250.5; blank or unparseable -> None"""
    if not value or not value.strip():
        return None
    cleaned = re.sub(r"[$,]", "", value).strip()
    try:
        return float(cleaned)
    except ValueError:
        return None


def parse_date(value: Optional[str]) -> Optional[date]:
    """
    Parse M/D/YYYY or M/D/YY.

    Two-digit years above 50 belong to the 1900s, the rest to the 2000s.
    Anything else is logged and returns None.
    """
    if not value or not value.strip():
        return None

    parts = [p.strip() for p in value.strip().split("/")]
    if len(parts) != 3 or not all(p.isdigit() for p in parts):
        logger.warning(f"⚠️ Could not parse date: {value}")
        return None

    month, day, year = (int(p) for p in parts)
    if year < 100:
        year = 1900 + year if year > 50 else 2000 + year

    if not (1 <= month <= 12 and 1 <= day <= 31 and 1900 <= year <= 2100):
        logger.warning(f"⚠️ Invalid date range: {value}")
        return None

    try:
        return date(year, month, day)
    except ValueError:
        logger.warning(f"⚠️ Invalid calendar date: {value}")
        return None


def determine_payment_method(zelle_value: Optional[str], notes: Optional[str]) -> tuple:
    """Infer (payment_method, payment_details) from the Zelle column and notes"""
    zelle = (zelle_value or "").strip()
    zelle_lower = zelle.lower()
    notes_lower = (notes or "").lower()

    if (
        zelle_lower == "no"
        or "no zelle" in zelle_lower
        or "no zelle" in notes_lower
        or "send check" in notes_lower
    ):
        return "check", None
    if zelle:
        return "zelle", zelle
    if "check" in notes_lower:
        return "check", None
    return "zelle", None


def normalize_state(value: Optional[str]) -> Optional[str]:
    """Two-letter code from a code or a full state name"""
    if not value or not value.strip():
        return None
    text = value.strip()
    if text.upper() in US_STATES:
        return text.upper()
    code = _STATE_BY_NAME.get(text.lower())
    if code is None:
        logger.warning(f"⚠️ Unknown state in import: {value}")
    return code


def _text(value: Optional[str]) -> Optional[str]:
    return value.strip() if value and value.strip() else None


def interpreter_from_row(row: dict) -> Optional[dict]:
    """Column values for one interpreter, or None when the row must be skipped"""
    first_name = row.get("first name", "")
    last_name = row.get("last name", "")
    if not first_name and not last_name:
        return None

    email = row.get("email") or row.get("email address") or ""
    if not email:
        logger.warning(f"⚠️ Skipping interpreter {first_name} {last_name}: no email")
        return None

    notes = row.get("notes", "")
    payment_method, payment_details = determine_payment_method(row.get("zelle"), notes)
    rid_number = _text(row.get("rid #"))
    state = normalize_state(row.get("state"))

    return {
        "first_name": first_name,
        "last_name": last_name,
        "email": email.lower(),
        "rate_business_hours": clean_currency(row.get("businesshourrate")),
        "rate_after_hours": clean_currency(row.get("afterhoursrate")),
        "rate_holiday_hours": clean_currency(row.get("holidayrate")),
        "insurance_end_date": parse_date(row.get("insuranceenddate")),
        # the agency's spreadsheet spells the column "Adress"
        "address": _text(row.get("adress") or row.get("address")),
        "city": _text(row.get("city")),
        "state": state,
        "timezone": get_timezone_from_state(state),
        "rid_number": rid_number,
        "rid_certified": bool(rid_number),
        "notes": _text(notes),
        "payment_method": payment_method,
        "payment_details": payment_details,
        "status": "active",
    }


def facility_from_row(row: dict) -> Optional[dict]:
    """Column values for one facility, or None when the row must be skipped"""
    name = row.get("facilityname", "")
    if not name:
        return None

    contractor = row.get("contractor (y/n)", "").lower() in ("y", "yes")
    address = _text(row.get("address"))
    city = _text(row.get("city"))
    state = normalize_state(row.get("state"))
    zip_code = _text(row.get("zipcode"))

    contact = {
        "name": row.get("contact name", ""),
        "email": row.get("contact email", ""),
        "phone": row.get("phone", ""),
    }
    billing_contacts = []
    if any(contact.values()):
        billing_contacts.append({"id": str(uuid.uuid4()), **contact})

    return {
        "name": name,
        "contractor": contractor,
        "physical_address": address,
        "physical_city": city,
        "physical_state": state,
        "physical_zip": zip_code,
        "billing_address": address,
        "billing_city": city,
        "billing_state": state,
        "billing_zip": zip_code,
        "timezone": get_timezone_from_state(state),
        "rate_business_hours": clean_currency(row.get("businesshourrate")),
        "rate_after_hours": clean_currency(row.get("afterhoursrate")),
        "rate_holiday_hours": clean_currency(row.get("holidayrate")),
        "emergency_fee": clean_currency(row.get("emergencyfee")),
        "billing_contacts": billing_contacts,
        "notes": _text(row.get("notes")),
        "billing_code": _text(row.get("department charge#")),
        "status": "active",
    }


def _clear_interpreters(db: Session) -> None:
    db.query(InterpreterBill).delete(synchronize_session="fetch")
    db.query(Job).update({Job.interpreter_id: None}, synchronize_session="fetch")
    db.query(EmailLog).update({EmailLog.interpreter_id: None}, synchronize_session="fetch")
    db.query(Interpreter).delete(synchronize_session="fetch")


def _clear_facilities(db: Session) -> None:
    # Jobs reference facilities, so everything billed against a job goes too
    db.query(InvoiceItem).delete(synchronize_session="fetch")
    db.query(Invoice).delete(synchronize_session="fetch")
    db.query(InterpreterBill).delete(synchronize_session="fetch")
    db.query(EmailLog).update(
        {EmailLog.job_id: None, EmailLog.facility_id: None}, synchronize_session="fetch"
    )
    db.query(Job).delete(synchronize_session="fetch")
    db.query(Facility).delete(synchronize_session="fetch")


def import_csv(db: Session, import_type: str, csv_data: str) -> dict:
    """
    Replace all interpreters or facilities with the rows of a CSV payload.

    Returns:
        {"message", "count", "skipped"}
    """
    if import_type not in IMPORT_TYPES:
        raise CSVImportError(f"Invalid import type: {import_type}")

    if import_type == "interpreters":
        model, build_row, clear = Interpreter, interpreter_from_row, _clear_interpreters
    else:
        model, build_row, clear = Facility, facility_from_row, _clear_facilities

    logger.info(f"📊 Starting {import_type} import")
    records = []
    skipped = 0
    for row in parse_rows(csv_data):
        values = build_row(row)
        if values is None:
            skipped += 1
            continue
        records.append(values)
    logger.info(f"📊 Parsed {len(records)} {import_type}, skipped {skipped}")

    try:
        clear(db)
        inserted = 0
        for start in range(0, len(records), BATCH_SIZE):
            batch = records[start : start + BATCH_SIZE]
            db.add_all(model(**values) for values in batch)
            db.flush()
            inserted += len(batch)
            logger.info(f"📊 Inserted {inserted}/{len(records)} {import_type}")
        db.commit()
    except Exception as e:
        logger.error(f"❌ {import_type} import failed: {e}")
        db.rollback()
        raise

    logger.info(f"✅ Imported {len(records)} {import_type}")
    return {
        "message": f"Successfully imported {len(records)} {import_type}",
        "count": len(records),
        "skipped": skipped,
    }
