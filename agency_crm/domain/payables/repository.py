"""Payable repository - Database operations for interpreter bills"""

from typing import Optional

from sqlalchemy.orm import Session, joinedload

from ...models import Interpreter, Job
from ...models_billing import InterpreterBill
from ...shared.listing import apply_search, apply_sort

SORTABLE_COLUMNS = {
    "bill_number": InterpreterBill.bill_number,
    "status": InterpreterBill.status,
    "interpreter": Interpreter.last_name,
    "total": InterpreterBill.total,
    "paid_date": InterpreterBill.paid_date,
    "pay_period_end": InterpreterBill.pay_period_end,
    "created_at": InterpreterBill.created_at,
}


class PayableRepository:
    """Repository for interpreter bill database operations"""

    @staticmethod
    def list_bills(
        db: Session,
        search: Optional[str] = None,
        status: Optional[str] = None,
        interpreter_id: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_dir: Optional[str] = None,
    ) -> list[InterpreterBill]:
        query = (
            db.query(InterpreterBill)
            .join(Interpreter, InterpreterBill.interpreter_id == Interpreter.id)
            .join(Job, InterpreterBill.job_id == Job.id)
            .options(joinedload(InterpreterBill.interpreter), joinedload(InterpreterBill.job))
        )
        if status:
            query = query.filter(InterpreterBill.status == status)
        if interpreter_id:
            query = query.filter(InterpreterBill.interpreter_id == interpreter_id)
        query = apply_search(
            query,
            search,
            InterpreterBill.bill_number,
            Interpreter.first_name,
            Interpreter.last_name,
            Job.job_number,
        )
        query = apply_sort(
            query,
            SORTABLE_COLUMNS,
            sort_by,
            sort_dir,
            [InterpreterBill.created_at.desc(), InterpreterBill.id.desc()],
        )
        return query.all()

    @staticmethod
    def get_bill_by_id(db: Session, bill_id: int) -> Optional[InterpreterBill]:
        return (
            db.query(InterpreterBill)
            .options(joinedload(InterpreterBill.interpreter), joinedload(InterpreterBill.job))
            .filter(InterpreterBill.id == bill_id)
            .first()
        )

    @staticmethod
    def create_bill(db: Session, **bill_data) -> InterpreterBill:
        """Add a bill (flushed, not committed)"""
        bill = InterpreterBill(**bill_data)
        db.add(bill)
        db.flush()
        return bill

    @staticmethod
    def update_bill(db: Session, bill: InterpreterBill, **updates) -> InterpreterBill:
        for key, value in updates.items():
            if hasattr(bill, key):
                setattr(bill, key, value)
        db.commit()
        db.refresh(bill)
        return bill
