"""Admin service - settings, role grants and data import"""

import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from ...models import Profile, Setting, UserRole
from ...services.app_settings import DEFAULT_SETTINGS, set_setting
from ...services.csv_import import CSVImportError, import_csv

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, db: Session):
        self.db = db

    # Settings

    def get_settings(self) -> list[Setting]:
        return self.db.query(Setting).order_by(Setting.key.asc()).all()

    def get_setting(self, key: str) -> Setting:
        setting = self.db.query(Setting).filter(Setting.key == key).first()
        if not setting:
            raise HTTPException(status_code=404, detail="Setting not found")
        return setting

    def update_setting(self, key: str, value, description=None) -> Setting:
        if key == "default_mileage_rate":
            try:
                value = float(value)
            except (TypeError, ValueError) as e:
                raise HTTPException(status_code=400, detail="Mileage rate must be a number") from e
            if value < 0:
                raise HTTPException(status_code=400, detail="Mileage rate cannot be negative")

        if description is None and key in DEFAULT_SETTINGS:
            existing = self.db.query(Setting).filter(Setting.key == key).first()
            if existing is None:
                description = DEFAULT_SETTINGS[key]["description"]

        setting = set_setting(self.db, key, value, description)
        logger.info(f"✅ Setting {key} updated to {value!r}")
        return setting

    # Profiles and roles

    def get_profiles(self) -> list[Profile]:
        return (
            self.db.query(Profile)
            .options(joinedload(Profile.roles))
            .order_by(Profile.email.asc())
            .all()
        )

    def _get_profile(self, profile_id: int) -> Profile:
        profile = (
            self.db.query(Profile)
            .options(joinedload(Profile.roles))
            .filter(Profile.id == profile_id)
            .first()
        )
        if not profile:
            raise HTTPException(status_code=404, detail="User not found")
        return profile

    def grant_role(self, profile_id: int, role: str) -> Profile:
        profile = self._get_profile(profile_id)
        if profile.has_role(role):
            raise HTTPException(status_code=409, detail=f"User already has the {role} role")

        profile.roles.append(UserRole(role=role))
        self.db.commit()
        self.db.refresh(profile)
        logger.info(f"✅ Granted {role} to profile {profile_id}")
        return profile

    def revoke_role(self, profile_id: int, role: str, current_user: Profile) -> Profile:
        profile = self._get_profile(profile_id)
        if profile.id == current_user.id and role == "admin":
            raise HTTPException(status_code=400, detail="You cannot remove your own admin role")

        entry = next((r for r in profile.roles if r.role == role), None)
        if entry is None:
            raise HTTPException(status_code=404, detail=f"User does not have the {role} role")

        profile.roles.remove(entry)
        self.db.commit()
        self.db.refresh(profile)
        logger.info(f"🗑️ Revoked {role} from profile {profile_id}")
        return profile

    # Import

    def import_data(self, import_type: str, csv_data: str) -> dict:
        try:
            return import_csv(self.db, import_type, csv_data)
        except CSVImportError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        except SQLAlchemyError as e:
            raise HTTPException(status_code=500, detail="Import failed") from e
