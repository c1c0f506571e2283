from datetime import date

from agency_crm.models_billing import Invoice, InterpreterBill
from agency_crm.services.numbering import (
    format_number,
    next_bill_number,
    next_invoice_number,
    next_job_number,
)


class TestJobNumbers:
    def test_first_number_of_the_year(self, db):
        assert next_job_number(db, date(2025, 1, 5)) == "2025-00001"

    def test_continues_from_highest_suffix_for_that_year(self, db, make_job):
        make_job(job_number="2025-00007")
        make_job(job_number="2025-00003")
        make_job(job_number="2024-00099")
        assert next_job_number(db, date(2025, 6, 1)) == "2025-00008"
        assert next_job_number(db, date(2024, 6, 1)) == "2024-00100"

    def test_format_number_pads_to_five_digits(self):
        assert format_number(2026, 42) == "2026-00042"


class TestInvoiceAndBillNumbers:
    def test_invoice_reuses_job_number(self, db, make_job):
        job = make_job(job_number="2025-00012")
        assert next_invoice_number(db, date(2025, 3, 1), job) == "2025-00012"

    def test_invoice_falls_back_to_sequence_when_job_number_taken(self, db, make_job, facility):
        job = make_job(job_number="2025-00012")
        db.add(
            Invoice(
                invoice_number="2025-00012",
                facility_id=facility.id,
                subtotal=0,
                total=0,
                issued_date=date(2025, 3, 1),
            )
        )
        db.commit()
        assert next_invoice_number(db, date(2025, 3, 1), job) == "2025-00013"

    def test_manual_invoice_uses_issue_year(self, db):
        assert next_invoice_number(db, date(2026, 2, 1)) == "2026-00001"

    def test_bill_reuses_job_number(self, db, make_job):
        job = make_job(job_number="2025-00004")
        assert next_bill_number(db, job) == "2025-00004"

    def test_bill_sequence_without_job(self, db, make_job, interpreter):
        job = make_job()
        db.add(
            InterpreterBill(
                bill_number="2025-00009", interpreter_id=interpreter.id, job_id=job.id, total=0
            )
        )
        db.commit()
        assert next_bill_number(db, on_date=date(2025, 8, 1)) == "2025-00010"
