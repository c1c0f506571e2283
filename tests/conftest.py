"""Pytest configuration and fixtures for the agency CRM tests.

Tests run against a shared in-memory SQLite database; Resend and the
document bucket are replaced with mocks.
"""

import io
import os
from datetime import date, time
from unittest.mock import MagicMock, patch

# Configure the app before any agency_crm module is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")
os.environ.setdefault("AUTH_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("RESEND_API_KEY", "re_test_key")
os.environ.setdefault("AUTO_COMPLETE_TIMEZONE", "America/New_York")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from agency_crm.auth import get_current_profile  # noqa: E402
from agency_crm.database import Base, SessionLocal, engine, get_db  # noqa: E402
from agency_crm.main import app  # noqa: E402
from agency_crm.models import Facility, Interpreter, Job, Profile, UserRole  # noqa: E402

PDF_BYTES = b"%PDF-1.4 stored test document"


@pytest.fixture
def db():
    """Fresh schema per test"""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def mock_resend():
    with patch("agency_crm.email_service.resend.Emails.send") as send:
        send.return_value = {"id": "email_test_123"}
        yield send


@pytest.fixture
def mock_storage():
    s3 = MagicMock()
    s3.generate_presigned_url.side_effect = (
        lambda op, Params, ExpiresIn: f"https://storage.test/{Params['Key']}?expires={ExpiresIn}"
    )
    s3.get_object.side_effect = lambda Bucket, Key: {"Body": io.BytesIO(PDF_BYTES)}
    with patch("agency_crm.services.storage.get_storage_client", return_value=s3):
        yield s3


def make_profile(db, email: str, roles: tuple = ()) -> Profile:
    profile = Profile(auth_uid=f"uid-{email}", email=email, first_name="Test", last_name="User")
    db.add(profile)
    db.flush()
    for role in roles:
        db.add(UserRole(profile_id=profile.id, role=role))
    db.commit()
    db.refresh(profile)
    return profile


@pytest.fixture
def client_for(db, mock_resend, mock_storage):
    """
    Factory returning a TestClient authenticated as a profile with the given roles.

    The most recent call decides which profile the app sees.
    """

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    clients = []

    def _make(*roles: str, email: str = None) -> TestClient:
        profile = make_profile(db, email or f"{'-'.join(roles) or 'none'}@ecasl.test", roles)
        app.dependency_overrides[get_current_profile] = lambda: profile
        client = TestClient(app)
        clients.append(client)
        return client

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client_for):
    return client_for("admin")


# ============================================================================
# RECORD FACTORIES
# ============================================================================


@pytest.fixture
def facility(db) -> Facility:
    record = Facility(
        name="Staten Island Hospital",
        facility_type="hospital",
        status="active",
        is_gsa=False,
        billing_name="SI Hospital Accounts Payable",
        billing_address="475 Seaview Ave",
        billing_city="Staten Island",
        billing_state="NY",
        billing_zip="10305",
        physical_address="475 Seaview Ave",
        physical_city="Staten Island",
        physical_state="NY",
        physical_zip="10305",
        timezone="America/New_York",
        billing_contacts=[
            {"id": "c1", "name": "Pat Billing", "email": "billing@sihospital.test", "phone": ""}
        ],
        rate_business_hours=100,
        rate_after_hours=150,
        rate_holiday_hours=200,
        minimum_billable_hours=2,
        emergency_fee=50,
        holiday_fee=75,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def gsa_facility(db) -> Facility:
    record = Facility(
        name="Federal Building",
        status="active",
        is_gsa=True,
        physical_state="NY",
        rate_business_hours=90,
        rate_after_hours=120,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def interpreter(db) -> Interpreter:
    record = Interpreter(
        first_name="Jordan",
        last_name="Rivera",
        email="jordan@interpreters.test",
        status="active",
        state="NY",
        rate_business_hours=60,
        rate_after_hours=80,
        minimum_hours=2,
        payment_method="zelle",
        payment_details="jordan@interpreters.test",
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


@pytest.fixture
def make_job(db, facility):
    def _make(**overrides) -> Job:
        values = {
            "job_number": "2025-00001",
            "facility_id": facility.id,
            "job_date": date(2025, 3, 10),
            "start_time": time(9, 0),
            "end_time": time(12, 0),
            "status": "new",
            "location_type": "in_person",
            "potential_interpreter_ids": [],
        }
        values.update(overrides)
        job = Job(**values)
        db.add(job)
        db.commit()
        db.refresh(job)
        return job

    return _make
