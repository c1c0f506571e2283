import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./agency_crm.db")

# Hosted auth (Supabase-style HS256 access tokens)
AUTH_JWT_SECRET = os.getenv("AUTH_JWT_SECRET")
if not AUTH_JWT_SECRET:
    import warnings

    warnings.warn(
        "AUTH_JWT_SECRET not set! Using insecure default - DO NOT USE IN PRODUCTION",
        RuntimeWarning,
        stacklevel=2,
    )
    AUTH_JWT_SECRET = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105 - Dev fallback only
AUTH_JWT_AUDIENCE = os.getenv("AUTH_JWT_AUDIENCE", "authenticated")
AUTH_JWT_ALGORITHM = "HS256"

# Frontend base URL for links in emails
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173")

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv("EMAIL_FROM_ADDRESS", "ECASL <onboarding@resend.dev>")

# S3-compatible document storage (Cloudflare R2, Supabase storage, AWS S3)
STORAGE_ENDPOINT_URL = os.getenv("STORAGE_ENDPOINT_URL")
STORAGE_ACCESS_KEY_ID = os.getenv("STORAGE_ACCESS_KEY_ID")
STORAGE_SECRET_ACCESS_KEY = os.getenv("STORAGE_SECRET_ACCESS_KEY")
STORAGE_BUCKET_NAME = os.getenv("STORAGE_BUCKET_NAME", "documents")
STORAGE_REGION = os.getenv("STORAGE_REGION", "auto")
STORAGE_URL_EXPIRATION_MINUTES = int(os.getenv("STORAGE_URL_EXPIRATION_MINUTES", "60"))

# Agency letterhead used on invoices and contracts
AGENCY_NAME = os.getenv("AGENCY_NAME", "Effective Communication NY, LLC")
AGENCY_SHORT_NAME = os.getenv("AGENCY_SHORT_NAME", "Effective Communication")
AGENCY_ADDRESS_LINE1 = os.getenv("AGENCY_ADDRESS_LINE1", "195 Crown Ave")
AGENCY_ADDRESS_LINE2 = os.getenv("AGENCY_ADDRESS_LINE2", "Staten Island, NY 10312 US")
AGENCY_EMAIL = os.getenv("AGENCY_EMAIL", "admin@ecasl.com")
AGENCY_PHONE = os.getenv("AGENCY_PHONE", "917-330-0517")

# Billing defaults
INVOICE_DUE_DAYS = int(os.getenv("INVOICE_DUE_DAYS", "14"))
DEFAULT_MILEAGE_RATE = float(os.getenv("DEFAULT_MILEAGE_RATE", "0.7"))

# Local wall clock used when deciding whether a confirmed job has ended
AUTO_COMPLETE_TIMEZONE = os.getenv("AUTO_COMPLETE_TIMEZONE", "America/New_York")

# Emails granted the admin role when their profile is first created
ADMIN_EMAILS = [
    e.strip().lower() for e in os.getenv("ADMIN_EMAILS", "").split(",") if e.strip()
]

# CORS: comma-separated list of frontend origins
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:3000").split(",")
    if origin.strip()
]
