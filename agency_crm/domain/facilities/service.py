"""Facility service - Business logic for facility operations"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...auth import gsa_only
from ...models import Facility, Profile
from ...services.app_settings import get_default_mileage_rate
from ...services.contract_pdf import FacilityContractPDFGenerator
from ...services.contracts import (
    contract_download_url,
    email_contract,
    store_generated_contract,
    store_signed_contract,
)
from ...shared.schemas import ContractEmailRequest
from ...shared.timezones import get_timezone_from_state
from .repository import FacilityRepository
from .schemas import FacilityCreate, FacilityUpdate

logger = logging.getLogger(__name__)


class FacilityService:
    """Service layer for facility business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = FacilityRepository()

    def get_facilities(
        self,
        user: Profile,
        search: Optional[str] = None,
        status: Optional[str] = None,
        is_gsa: Optional[bool] = None,
        sort_by: Optional[str] = None,
        sort_dir: Optional[str] = None,
    ) -> list[Facility]:
        """List facilities; GSA contributors only see GSA facilities"""
        if gsa_only(user):
            is_gsa = True
        return self.repo.list_facilities(self.db, search, status, is_gsa, sort_by, sort_dir)

    def get_facility(self, facility_id: int, user: Optional[Profile] = None) -> Facility:
        facility = self.repo.get_facility_by_id(self.db, facility_id)
        if not facility:
            raise HTTPException(status_code=404, detail="Facility not found")
        if user is not None and gsa_only(user) and not facility.is_gsa:
            raise HTTPException(status_code=404, detail="Facility not found")
        return facility

    @staticmethod
    def _default_timezone(data: dict) -> Optional[str]:
        return get_timezone_from_state(data.get("physical_state")) or get_timezone_from_state(
            data.get("billing_state")
        )

    def create_facility(self, data: FacilityCreate) -> Facility:
        facility_data = data.model_dump(exclude_none=True)
        if "billing_contacts" in facility_data:
            facility_data["billing_contacts"] = [
                contact.model_dump() for contact in data.billing_contacts
            ]
        if not facility_data.get("timezone"):
            facility_data["timezone"] = self._default_timezone(facility_data)

        facility = self.repo.create_facility(self.db, **facility_data)
        logger.info(f"✅ Created facility {facility.id}: {facility.name}")
        return facility

    def update_facility(self, facility_id: int, data: FacilityUpdate) -> Facility:
        facility = self.get_facility(facility_id)

        updates = data.model_dump(exclude_unset=True)
        if "billing_contacts" in updates:
            updates["billing_contacts"] = [
                contact.model_dump() for contact in (data.billing_contacts or [])
            ]
        if "name" in updates and not updates["name"]:
            raise HTTPException(status_code=400, detail="Facility name is required")

        state_changed = "physical_state" in updates or "billing_state" in updates
        if state_changed and not updates.get("timezone") and not facility.timezone:
            merged = {
                "physical_state": updates.get("physical_state", facility.physical_state),
                "billing_state": updates.get("billing_state", facility.billing_state),
            }
            updates["timezone"] = self._default_timezone(merged)

        return self.repo.update_facility(self.db, facility, **updates)

    def delete_facility(self, facility_id: int) -> dict:
        facility = self.get_facility(facility_id)

        job_count = self.repo.count_jobs(self.db, facility.id)
        if job_count:
            raise HTTPException(
                status_code=409,
                detail=f"Facility has {job_count} job(s) and cannot be deleted",
            )

        self.repo.delete_facility(self.db, facility)
        logger.info(f"🗑️ Deleted facility {facility_id}")
        return {"message": "Facility deleted"}

    # Contracts

    def generate_contract(self, facility_id: int) -> dict:
        facility = self.get_facility(facility_id)
        generator = FacilityContractPDFGenerator(
            facility, mileage_rate=get_default_mileage_rate(self.db)
        )
        return store_generated_contract(self.db, facility, generator.generate())

    async def email_contract(self, facility_id: int, data: ContractEmailRequest) -> dict:
        facility = self.get_facility(facility_id)
        contacts = facility.billing_contacts or []

        recipients = data.recipients or [c["email"] for c in contacts if c.get("email")]
        recipient_name = data.recipient_name
        if not recipient_name:
            recipient_name = (contacts[0].get("name") if contacts else None) or facility.name

        return await email_contract(
            self.db, facility, recipients, recipient_name, data.subject, data.body
        )

    def upload_signed_contract(
        self,
        facility_id: int,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        signed_date: Optional[date] = None,
    ) -> dict:
        facility = self.get_facility(facility_id)
        return store_signed_contract(
            self.db, facility, filename, content, content_type, signed_date
        )

    def get_contract_url(self, facility_id: int, signed: bool = False) -> dict:
        return contract_download_url(self.get_facility(facility_id), signed)
