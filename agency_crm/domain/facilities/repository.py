"""Facility repository - Database operations for facilities"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Facility, Job
from ...shared.listing import apply_search, apply_sort

SORTABLE_COLUMNS = {
    "name": Facility.name,
    "status": Facility.status,
    "facility_type": Facility.facility_type,
    "billing_city": Facility.billing_city,
    "physical_city": Facility.physical_city,
    "contract_status": Facility.contract_status,
    "rate_business_hours": Facility.rate_business_hours,
    "created_at": Facility.created_at,
}


class FacilityRepository:
    """Repository for facility database operations"""

    @staticmethod
    def list_facilities(
        db: Session,
        search: Optional[str] = None,
        status: Optional[str] = None,
        is_gsa: Optional[bool] = None,
        sort_by: Optional[str] = None,
        sort_dir: Optional[str] = None,
    ) -> list[Facility]:
        query = db.query(Facility)
        if status:
            query = query.filter(Facility.status == status)
        if is_gsa is not None:
            query = query.filter(Facility.is_gsa == is_gsa)
        query = apply_search(
            query, search, Facility.name, Facility.billing_name, Facility.physical_city
        )
        query = apply_sort(query, SORTABLE_COLUMNS, sort_by, sort_dir, [Facility.name.asc()])
        return query.all()

    @staticmethod
    def get_facility_by_id(db: Session, facility_id: int) -> Optional[Facility]:
        return db.query(Facility).filter(Facility.id == facility_id).first()

    @staticmethod
    def create_facility(db: Session, **facility_data) -> Facility:
        facility = Facility(**facility_data)
        db.add(facility)
        db.commit()
        db.refresh(facility)
        return facility

    @staticmethod
    def update_facility(db: Session, facility: Facility, **updates) -> Facility:
        for key, value in updates.items():
            if hasattr(facility, key):
                setattr(facility, key, value)
        db.commit()
        db.refresh(facility)
        return facility

    @staticmethod
    def delete_facility(db: Session, facility: Facility) -> None:
        db.delete(facility)
        db.commit()

    @staticmethod
    def count_jobs(db: Session, facility_id: int) -> int:
        return db.query(Job).filter(Job.facility_id == facility_id).count()
