"""Typed access to the key/value settings table"""

import logging
from typing import Any, Optional

from sqlalchemy.orm import Session

from ..config import DEFAULT_MILEAGE_RATE
from ..models import Setting

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS = {
    "default_mileage_rate": {
        "value": DEFAULT_MILEAGE_RATE,
        "description": "Per-mile rate used when a job has no mileage rate of its own",
    },
}


def get_setting(db: Session, key: str, default: Any = None) -> Any:
    setting = db.query(Setting).filter(Setting.key == key).first()
    if setting is None or setting.value is None:
        return default
    return setting.value


def get_default_mileage_rate(db: Session) -> float:
    value = get_setting(db, "default_mileage_rate", DEFAULT_MILEAGE_RATE)
    try:
        return float(value)
    except (TypeError, ValueError):
        logger.warning(f"⚠️ Invalid default_mileage_rate setting {value!r}, using {DEFAULT_MILEAGE_RATE}")
        return DEFAULT_MILEAGE_RATE


def set_setting(db: Session, key: str, value: Any, description: Optional[str] = None) -> Setting:
    setting = db.query(Setting).filter(Setting.key == key).first()
    if setting is None:
        setting = Setting(key=key)
        db.add(setting)
    setting.value = value
    if description is not None:
        setting.description = description
    db.commit()
    db.refresh(setting)
    return setting


def seed_default_settings(db: Session) -> int:
    """Insert any missing default setting; existing values are left untouched"""
    existing = {key for (key,) in db.query(Setting.key).all()}
    created = 0
    for key, entry in DEFAULT_SETTINGS.items():
        if key in existing:
            continue
        db.add(Setting(key=key, value=entry["value"], description=entry["description"]))
        created += 1
    if created:
        db.commit()
        logger.info(f"✅ Seeded {created} default setting(s)")
    return created
