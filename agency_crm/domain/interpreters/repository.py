"""Interpreter repository - Database operations for interpreters"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Interpreter, Job
from ...models_billing import InterpreterBill
from ...shared.listing import apply_search, apply_sort

SORTABLE_COLUMNS = {
    "first_name": Interpreter.first_name,
    "last_name": Interpreter.last_name,
    "email": Interpreter.email,
    "status": Interpreter.status,
    "city": Interpreter.city,
    "state": Interpreter.state,
    "rate_business_hours": Interpreter.rate_business_hours,
    "contract_status": Interpreter.contract_status,
    "insurance_end_date": Interpreter.insurance_end_date,
    "created_at": Interpreter.created_at,
}


class InterpreterRepository:
    """Repository for interpreter database operations"""

    @staticmethod
    def list_interpreters(
        db: Session,
        search: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_dir: Optional[str] = None,
    ) -> list[Interpreter]:
        query = db.query(Interpreter)
        if status:
            query = query.filter(Interpreter.status == status)
        query = apply_search(
            query,
            search,
            Interpreter.first_name,
            Interpreter.last_name,
            Interpreter.email,
            Interpreter.city,
        )
        query = apply_sort(
            query,
            SORTABLE_COLUMNS,
            sort_by,
            sort_dir,
            [Interpreter.last_name.asc(), Interpreter.first_name.asc()],
        )
        return query.all()

    @staticmethod
    def get_interpreter_by_id(db: Session, interpreter_id: int) -> Optional[Interpreter]:
        return db.query(Interpreter).filter(Interpreter.id == interpreter_id).first()

    @staticmethod
    def get_interpreters_by_ids(db: Session, interpreter_ids: list[int]) -> list[Interpreter]:
        if not interpreter_ids:
            return []
        return db.query(Interpreter).filter(Interpreter.id.in_(interpreter_ids)).all()

    @staticmethod
    def create_interpreter(db: Session, **interpreter_data) -> Interpreter:
        interpreter = Interpreter(**interpreter_data)
        db.add(interpreter)
        db.commit()
        db.refresh(interpreter)
        return interpreter

    @staticmethod
    def update_interpreter(db: Session, interpreter: Interpreter, **updates) -> Interpreter:
        for key, value in updates.items():
            if hasattr(interpreter, key):
                setattr(interpreter, key, value)
        db.commit()
        db.refresh(interpreter)
        return interpreter

    @staticmethod
    def delete_interpreter(db: Session, interpreter: Interpreter) -> None:
        db.delete(interpreter)
        db.commit()

    @staticmethod
    def count_assigned_jobs(db: Session, interpreter_id: int) -> int:
        return db.query(Job).filter(Job.interpreter_id == interpreter_id).count()

    @staticmethod
    def count_bills(db: Session, interpreter_id: int) -> int:
        return db.query(InterpreterBill).filter(InterpreterBill.interpreter_id == interpreter_id).count()
