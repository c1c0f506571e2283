from datetime import date, time

from agency_crm.models_billing import Invoice, InvoiceItem
from agency_crm.services.contract_pdf import (
    FacilityContractPDFGenerator,
    InterpreterContractPDFGenerator,
)
from agency_crm.services.invoice_pdf import (
    InvoicePDFGenerator,
    generate_and_store_invoice_pdf,
    invoice_line_items,
)
from agency_crm.services.job_billing import recalculate_job_totals


def _invoice(db, facility, job=None, items=()):
    invoice = Invoice(
        invoice_number="2025-00001",
        facility_id=facility.id,
        job_id=job.id if job else None,
        subtotal=sum(i["total"] for i in items),
        total=sum(i["total"] for i in items),
        issued_date=date(2025, 3, 11),
        due_date=date(2025, 3, 25),
        notes="Thank you & welcome <back>",
    )
    invoice.items = [InvoiceItem(**item) for item in items]
    db.add(invoice)
    db.commit()
    db.refresh(invoice)
    return invoice


class TestInvoicePDF:
    def test_generates_pdf_bytes(self, db, facility):
        invoice = _invoice(
            db,
            facility,
            items=[{"description": "Interpreter Services", "quantity": 2, "unit_price": 100, "total": 200}],
        )
        pdf = InvoicePDFGenerator(invoice).generate()
        assert pdf.startswith(b"%PDF")

    def test_items_rebuilt_from_job_when_none_stored(self, db, facility, make_job):
        job = make_job(start_time=time(9, 0), end_time=time(12, 0))
        recalculate_job_totals(db, job)
        db.commit()
        invoice = _invoice(db, facility, job=job)
        items = invoice_line_items(invoice)
        assert items[0]["description"] == "Interpreter Services (Business Hours)"
        assert items[0]["total"] == 300

    def test_store_sets_pdf_key(self, db, facility, mock_storage):
        invoice = _invoice(db, facility)
        pdf, key = generate_and_store_invoice_pdf(db, invoice)
        assert key == "invoices/invoice-2025-00001.pdf"
        assert invoice.pdf_url == key
        assert pdf.startswith(b"%PDF")
        assert mock_storage.put_object.call_args.kwargs["ContentType"] == "application/pdf"


class TestContractPDF:
    def test_facility_contract(self, facility):
        generator = FacilityContractPDFGenerator(facility, mileage_rate=0.7)
        assert generator.primary_contact["email"] == "billing@sihospital.test"
        assert generator.generate().startswith(b"%PDF")

    def test_facility_contract_without_contacts_or_rates(self, db, facility):
        facility.billing_contacts = []
        facility.rate_holiday_hours = None
        facility.holiday_fee = None
        db.commit()
        assert FacilityContractPDFGenerator(facility).generate().startswith(b"%PDF")

    def test_interpreter_contract(self, interpreter):
        pdf = InterpreterContractPDFGenerator(interpreter, on_date=date(2025, 4, 1)).generate()
        assert pdf.startswith(b"%PDF")
