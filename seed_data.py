#!/usr/bin/env python3
"""
Create tables and insert the default email templates and settings.
Usage: python seed_data.py
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from agency_crm.database import Base, SessionLocal, engine
from agency_crm.email_service import seed_default_templates
from agency_crm.services.app_settings import seed_default_settings

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def seed():
    Base.metadata.create_all(bind=engine, checkfirst=True)
    db = SessionLocal()
    try:
        templates = seed_default_templates(db)
        settings = seed_default_settings(db)
        logger.info(f"✅ Seeded {templates} template(s) and {settings} setting(s)")
    finally:
        db.close()


if __name__ == "__main__":
    try:
        seed()
    except Exception as e:
        logger.error(f"❌ Seeding failed: {e}")
        sys.exit(1)
