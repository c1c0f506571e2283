"""Interpreter service - Business logic for interpreter operations"""

import logging
from datetime import date
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import Interpreter
from ...services.contract_pdf import InterpreterContractPDFGenerator
from ...services.contracts import (
    contract_download_url,
    email_contract,
    store_generated_contract,
    store_signed_contract,
)
from ...shared.schemas import ContractEmailRequest
from ...shared.timezones import get_timezone_from_state
from .repository import InterpreterRepository
from .schemas import InterpreterCreate, InterpreterUpdate

logger = logging.getLogger(__name__)


class InterpreterService:
    """Service layer for interpreter business logic"""

    def __init__(self, db: Session):
        self.db = db
        self.repo = InterpreterRepository()

    def get_interpreters(
        self,
        search: Optional[str] = None,
        status: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_dir: Optional[str] = None,
    ) -> list[Interpreter]:
        return self.repo.list_interpreters(self.db, search, status, sort_by, sort_dir)

    def get_interpreter(self, interpreter_id: int) -> Interpreter:
        interpreter = self.repo.get_interpreter_by_id(self.db, interpreter_id)
        if not interpreter:
            raise HTTPException(status_code=404, detail="Interpreter not found")
        return interpreter

    def create_interpreter(self, data: InterpreterCreate) -> Interpreter:
        interpreter_data = data.model_dump(exclude_none=True)
        if not interpreter_data.get("timezone"):
            interpreter_data["timezone"] = get_timezone_from_state(interpreter_data.get("state"))
        if interpreter_data.get("w9_received") and not interpreter_data.get("w9_received_date"):
            interpreter_data["w9_received_date"] = date.today()

        interpreter = self.repo.create_interpreter(self.db, **interpreter_data)
        logger.info(f"✅ Created interpreter {interpreter.id}: {interpreter.full_name}")
        return interpreter

    def update_interpreter(self, interpreter_id: int, data: InterpreterUpdate) -> Interpreter:
        interpreter = self.get_interpreter(interpreter_id)
        updates = data.model_dump(exclude_unset=True)

        for required in ("first_name", "last_name", "email", "rate_business_hours", "rate_after_hours"):
            if required in updates and updates[required] is None:
                raise HTTPException(status_code=400, detail=f"{required} cannot be cleared")

        if "state" in updates and not updates.get("timezone") and not interpreter.timezone:
            updates["timezone"] = get_timezone_from_state(updates["state"])
        if updates.get("w9_received") and not interpreter.w9_received_date:
            updates.setdefault("w9_received_date", date.today())

        return self.repo.update_interpreter(self.db, interpreter, **updates)

    def delete_interpreter(self, interpreter_id: int) -> dict:
        interpreter = self.get_interpreter(interpreter_id)

        bill_count = self.repo.count_bills(self.db, interpreter.id)
        if bill_count:
            raise HTTPException(
                status_code=409,
                detail=f"Interpreter has {bill_count} payable(s) and cannot be deleted",
            )

        # Assigned jobs keep their history with the interpreter unset
        self.repo.delete_interpreter(self.db, interpreter)
        logger.info(f"🗑️ Deleted interpreter {interpreter_id}")
        return {"message": "Interpreter deleted"}

    # Contracts

    def generate_contract(self, interpreter_id: int) -> dict:
        interpreter = self.get_interpreter(interpreter_id)
        pdf_bytes = InterpreterContractPDFGenerator(interpreter).generate()
        return store_generated_contract(self.db, interpreter, pdf_bytes)

    async def email_contract(self, interpreter_id: int, data: ContractEmailRequest) -> dict:
        interpreter = self.get_interpreter(interpreter_id)
        recipients = data.recipients or [interpreter.email]
        return await email_contract(
            self.db,
            interpreter,
            recipients,
            data.recipient_name or interpreter.full_name,
            data.subject,
            data.body,
        )

    def upload_signed_contract(
        self,
        interpreter_id: int,
        filename: str,
        content: bytes,
        content_type: Optional[str] = None,
        signed_date: Optional[date] = None,
    ) -> dict:
        interpreter = self.get_interpreter(interpreter_id)
        return store_signed_contract(
            self.db, interpreter, filename, content, content_type, signed_date
        )

    def get_contract_url(self, interpreter_id: int, signed: bool = False) -> dict:
        return contract_download_url(self.get_interpreter(interpreter_id), signed)
