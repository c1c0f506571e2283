import uuid

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base


def generate_public_id():
    """Generate a unique public ID for secure public access"""
    return str(uuid.uuid4())


# Enumerated values are stored as plain strings and checked by the pydantic schemas
JOB_STATUSES = (
    "new",
    "outreach_in_progress",
    "confirmed",
    "complete",
    "ready_to_bill",
    "billed",
    "paid",
    "cancelled",
)
RECORD_STATUSES = ("active", "inactive", "pending")
CONTRACT_STATUSES = ("not_sent", "sent", "signed")
PAYMENT_METHODS = ("zelle", "check")
OPPORTUNITY_SOURCES = ("direct", "agency", "gsa", "referral", "repeat", "other")
LOCATION_TYPES = ("in_person", "remote")
FACILITY_TYPES = ("hospital", "clinic", "school", "government", "business", "other")
APP_ROLES = ("admin", "gsa_contributor", "bookkeeper")


class Profile(Base):
    """Staff user known to the hosted auth service"""

    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    auth_uid = Column(String(128), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    roles = relationship("UserRole", back_populates="profile", cascade="all, delete-orphan")

    @property
    def role_names(self) -> list[str]:
        return [r.role for r in self.roles]

    def has_role(self, role: str) -> bool:
        return role in self.role_names

    @property
    def is_team_member(self) -> bool:
        return bool(self.roles)


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("profile_id", "role", name="uq_user_roles_profile_role"),)

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    role = Column(String(50), nullable=False)  # admin, gsa_contributor, bookkeeper
    created_at = Column(DateTime, server_default=func.now())

    profile = relationship("Profile", back_populates="roles")


class Facility(Base):
    """Client site or agency that requests interpreting services"""

    __tablename__ = "facilities"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, nullable=True, index=True, default=generate_public_id)
    name = Column(String(255), nullable=False, index=True)
    facility_type = Column(String(50), nullable=True)
    is_gsa = Column(Boolean, default=False)
    contractor = Column(Boolean, default=False)
    status = Column(String(20), default="pending", index=True)

    # Billing address
    billing_name = Column(String(255), nullable=True)
    billing_address = Column(String(255), nullable=True)
    billing_city = Column(String(100), nullable=True)
    billing_state = Column(String(2), nullable=True)
    billing_zip = Column(String(10), nullable=True)

    # Physical address
    physical_address = Column(String(255), nullable=True)
    physical_city = Column(String(100), nullable=True)
    physical_state = Column(String(2), nullable=True)
    physical_zip = Column(String(10), nullable=True)
    timezone = Column(String(64), nullable=True)

    # [{id, name, phone, email}]
    billing_contacts = Column(JSON, default=list)

    # Rate card
    rate_business_hours = Column(Float, nullable=True)
    rate_after_hours = Column(Float, nullable=True)
    rate_holiday_hours = Column(Float, nullable=True)
    minimum_billable_hours = Column(Float, default=2)
    emergency_fee = Column(Float, nullable=True)
    holiday_fee = Column(Float, nullable=True)

    # Billing settings
    invoice_prefix = Column(String(20), nullable=True)
    billing_code = Column(String(100), nullable=True)
    net_terms = Column(Integer, default=30)

    # Contract
    contract_status = Column(String(20), default="not_sent")
    contract_signed_date = Column(Date, nullable=True)
    contract_pdf_url = Column(String(500), nullable=True)
    signed_contract_pdf_url = Column(String(500), nullable=True)

    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    jobs = relationship("Job", back_populates="facility")
    invoices = relationship("Invoice", back_populates="facility")


class Interpreter(Base):
    """ASL interpreter who is offered and assigned jobs"""

    __tablename__ = "interpreters"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, nullable=True, index=True, default=generate_public_id)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, index=True)
    phone = Column(String(50), nullable=True)
    status = Column(String(20), default="pending", index=True)

    address = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(2), nullable=True)
    zip_code = Column(String(10), nullable=True)
    timezone = Column(String(64), nullable=True)

    # Certifications
    rid_certified = Column(Boolean, default=False)
    rid_number = Column(String(50), nullable=True)
    nic_certified = Column(Boolean, default=False)
    other_certifications = Column(Text, nullable=True)

    # Rate card
    rate_business_hours = Column(Float, nullable=True)
    rate_after_hours = Column(Float, nullable=True)
    rate_holiday_hours = Column(Float, nullable=True)
    minimum_hours = Column(Float, default=2)
    eligible_emergency_fee = Column(Boolean, default=False)
    eligible_holiday_fee = Column(Boolean, default=False)

    # Payment
    payment_method = Column(String(20), nullable=True)  # zelle, check
    payment_details = Column(Text, nullable=True)

    # Compliance
    w9_received = Column(Boolean, default=False)
    w9_received_date = Column(Date, nullable=True)
    insurance_end_date = Column(Date, nullable=True)

    # Contract
    contract_status = Column(String(20), default="not_sent")
    contract_signed_date = Column(Date, nullable=True)
    contract_pdf_url = Column(String(500), nullable=True)
    signed_contract_pdf_url = Column(String(500), nullable=True)

    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    jobs = relationship("Job", back_populates="interpreter")
    bills = relationship("InterpreterBill", back_populates="interpreter")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Job(Base):
    """A single scheduled interpreting assignment"""

    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, nullable=True, index=True, default=generate_public_id)
    job_number = Column(String(20), unique=True, nullable=True, index=True)  # YYYY-NNNNN

    facility_id = Column(Integer, ForeignKey("facilities.id", ondelete="RESTRICT"), nullable=False)
    interpreter_id = Column(
        Integer, ForeignKey("interpreters.id", ondelete="SET NULL"), nullable=True
    )
    potential_interpreter_ids = Column(JSON, default=list)
    deaf_client_name = Column(String(255), nullable=True)

    # Schedule
    job_date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    actual_start_time = Column(Time, nullable=True)
    actual_end_time = Column(Time, nullable=True)
    timezone = Column(String(64), nullable=True)

    # Location
    location_type = Column(String(20), default="in_person")
    location_address = Column(String(255), nullable=True)
    location_city = Column(String(100), nullable=True)
    location_state = Column(String(2), nullable=True)
    location_zip = Column(String(10), nullable=True)
    video_call_link = Column(String(500), nullable=True)

    status = Column(String(30), default="new", index=True)
    opportunity_source = Column(String(20), nullable=True)

    # Hours split snapshot
    billable_hours = Column(Float, nullable=True)
    business_hours_worked = Column(Float, nullable=True)
    after_hours_worked = Column(Float, nullable=True)

    # Facility rate snapshot
    facility_rate_business = Column(Float, nullable=True)
    facility_rate_after_hours = Column(Float, nullable=True)
    facility_rate_holiday = Column(Float, nullable=True)
    facility_rate_mileage = Column(Float, nullable=True)
    facility_rate_adjustment = Column(Float, default=0)

    # Interpreter rate snapshot
    interpreter_rate_business = Column(Float, nullable=True)
    interpreter_rate_after_hours = Column(Float, nullable=True)
    interpreter_rate_holiday = Column(Float, nullable=True)
    interpreter_rate_mileage = Column(Float, nullable=True)
    interpreter_rate_adjustment = Column(Float, default=0)

    trilingual_rate_uplift = Column(Float, nullable=True)
    travel_time_rate = Column(Float, nullable=True)

    # Expenses
    mileage = Column(Float, nullable=True)
    travel_time_hours = Column(Float, nullable=True)
    parking = Column(Float, nullable=True)
    tolls = Column(Float, nullable=True)
    misc_fee = Column(Float, nullable=True)
    emergency_fee_applied = Column(Boolean, default=False)
    holiday_fee_applied = Column(Boolean, default=False)

    # Computed totals
    facility_hourly_total = Column(Float, nullable=True)
    facility_billable_total = Column(Float, nullable=True)
    interpreter_hourly_total = Column(Float, nullable=True)
    interpreter_billable_total = Column(Float, nullable=True)

    # On-site client contact
    client_business_name = Column(String(255), nullable=True)
    client_contact_name = Column(String(255), nullable=True)
    client_contact_phone = Column(String(50), nullable=True)
    client_contact_email = Column(String(255), nullable=True)

    internal_notes = Column(Text, nullable=True)

    outreach_sent_at = Column(DateTime, nullable=True)
    confirmation_sent_at = Column(DateTime, nullable=True)
    reminder_sent_at = Column(DateTime, nullable=True)
    finalized_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    facility = relationship("Facility", back_populates="jobs")
    interpreter = relationship("Interpreter", back_populates="jobs")
    invoices = relationship("Invoice", back_populates="job")
    bills = relationship("InterpreterBill", back_populates="job")

    @property
    def is_locked(self) -> bool:
        return self.status == "paid"


class EmailTemplate(Base):
    __tablename__ = "email_templates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False, index=True)
    subject = Column(String(500), nullable=False)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class EmailLog(Base):
    """Audit record of an outbound email"""

    __tablename__ = "email_logs"

    id = Column(Integer, primary_key=True, index=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True, index=True)
    interpreter_id = Column(
        Integer, ForeignKey("interpreters.id", ondelete="SET NULL"), nullable=True
    )
    facility_id = Column(Integer, ForeignKey("facilities.id", ondelete="SET NULL"), nullable=True)
    template_name = Column(String(100), nullable=True)
    recipient_email = Column(String(255), nullable=False)
    subject = Column(String(500), nullable=False)
    status = Column(String(20), default="sent")  # sent, failed
    error_message = Column(Text, nullable=True)
    sent_at = Column(DateTime, server_default=func.now())


class Setting(Base):
    """App-wide key/value settings"""

    __tablename__ = "settings"

    id = Column(Integer, primary_key=True, index=True)
    key = Column(String(100), unique=True, nullable=False, index=True)
    value = Column(JSON, nullable=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


# Billing models live in their own module; register them with the same Base
from . import models_billing  # noqa: E402, F401
