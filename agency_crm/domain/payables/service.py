"""Payable service - Business logic for interpreter bills"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models_billing import InterpreterBill
from ...services.job_calculations import money
from .repository import PayableRepository
from .schemas import MarkPayablePaidRequest, PayableUpdate

logger = logging.getLogger(__name__)

AMOUNT_FIELDS = ("hours_amount", "mileage_amount", "expenses_amount")


class PayableService:
    """Service layer for payable business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = PayableRepository()

    def get_payables(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        interpreter_id: Optional[int] = None,
        sort_by: Optional[str] = None,
        sort_dir: Optional[str] = None,
    ) -> list[InterpreterBill]:
        return self.repo.list_bills(self.db, search, status, interpreter_id, sort_by, sort_dir)

    def get_payable(self, bill_id: int) -> InterpreterBill:
        bill = self.repo.get_bill_by_id(self.db, bill_id)
        if not bill:
            raise HTTPException(status_code=404, detail="Payable not found")
        return bill

    def update_payable(self, bill_id: int, data: PayableUpdate) -> InterpreterBill:
        bill = self.get_payable(bill_id)
        updates = data.model_dump(exclude_unset=True)

        if bill.status == "paid" and any(field in updates for field in (*AMOUNT_FIELDS, "total")):
            raise HTTPException(status_code=409, detail="Paid payables cannot change amounts")

        # Amount edits keep the total consistent unless a total is given
        if "total" not in updates and any(field in updates for field in AMOUNT_FIELDS):
            amounts = {field: updates.get(field, getattr(bill, field)) for field in AMOUNT_FIELDS}
            updates["total"] = money(sum(value or 0 for value in amounts.values()))

        return self.repo.update_bill(self.db, bill, **updates)

    def mark_paid(self, bill_id: int, data: MarkPayablePaidRequest) -> InterpreterBill:
        """Pay a queued bill; its billed job becomes paid"""
        bill = self.get_payable(bill_id)
        if bill.status == "paid":
            raise HTTPException(status_code=409, detail="Payable is already paid")

        bill.status = "paid"
        bill.paid_date = data.paid_date or date.today()
        bill.payment_method = (
            data.payment_method
            or bill.payment_method
            or (bill.interpreter.payment_method if bill.interpreter else None)
        )
        if data.payment_reference is not None:
            bill.payment_reference = data.payment_reference

        job = bill.job
        if job is not None and job.status == "billed":
            job.status = "paid"
            logger.info(f"✅ Job {job.job_number} transitioned: billed → paid")

        self.db.commit()
        self.db.refresh(bill)
        logger.info(f"✅ Payable {bill.bill_number} marked paid on {bill.paid_date}")
        return bill
