#!/usr/bin/env python3
"""
Replace all interpreters or facilities from a CSV export
Usage: python import_csv.py <interpreters|facilities> <file.csv>
"""

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent))

from agency_crm.database import SessionLocal
from agency_crm.services.csv_import import IMPORT_TYPES, import_csv

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)


def run_import(import_type: str, csv_path: str):
    csv_file = Path(csv_path)
    if not csv_file.exists():
        logger.error(f"CSV file not found: {csv_file}")
        sys.exit(1)

    logger.info(f"Reading {csv_file}")
    csv_data = csv_file.read_text(encoding="utf-8-sig")

    db = SessionLocal()
    try:
        result = import_csv(db, import_type, csv_data)
        logger.info(f"✅ {result['message']} ({result['skipped']} skipped)")
    finally:
        db.close()


if __name__ == "__main__":
    if len(sys.argv) < 3 or sys.argv[1] not in IMPORT_TYPES:
        logger.error("Usage: python import_csv.py <interpreters|facilities> <file.csv>")
        sys.exit(1)

    try:
        run_import(sys.argv[1], sys.argv[2])
    except Exception as e:
        logger.error(f"❌ Import failed: {e}")
        sys.exit(1)
