from datetime import date

import pytest

from agency_crm.models import EmailLog


@pytest.fixture
def billed_job(admin_client, make_job, interpreter):
    """A completed job run through billing generation"""
    job = make_job(status="complete", interpreter_id=interpreter.id)
    response = admin_client.post(f"/jobs/{job.id}/generate-billing")
    return job, response.json()


class TestManualInvoices:
    def test_create_computes_totals_and_due_date(self, admin_client, facility):
        response = admin_client.post(
            "/invoices",
            json={
                "facility_id": facility.id,
                "issued_date": "2025-05-01",
                "tax": 5,
                "items": [
                    {"description": "Interpreter Services", "quantity": 2.5, "unit_price": 100},
                    {"description": "Parking", "unit_price": 12.5},
                ],
            },
        )
        assert response.status_code == 201
        body = response.json()
        assert body["invoice_number"] == "2025-00001"
        assert body["status"] == "draft"
        assert body["subtotal"] == 262.5
        assert body["total"] == 267.5
        assert body["due_date"] == "2025-05-15"
        assert [item["total"] for item in body["items"]] == [250, 12.5]

    def test_job_must_belong_to_facility(self, admin_client, gsa_facility, make_job):
        job = make_job()
        response = admin_client.post(
            "/invoices", json={"facility_id": gsa_facility.id, "job_id": job.id}
        )
        assert response.status_code == 400

    def test_update_replaces_items(self, admin_client, facility):
        created = admin_client.post(
            "/invoices",
            json={"facility_id": facility.id, "items": [{"description": "A", "unit_price": 10}]},
        ).json()
        response = admin_client.put(
            f"/invoices/{created['id']}",
            json={"items": [{"description": "B", "quantity": 2, "unit_price": 40}], "tax": 1},
        )
        body = response.json()
        assert [item["description"] for item in body["items"]] == ["B"]
        assert body["subtotal"] == 80
        assert body["total"] == 81

    def test_only_draft_can_be_deleted(self, admin_client, facility):
        created = admin_client.post("/invoices", json={"facility_id": facility.id}).json()
        admin_client.put(f"/invoices/{created['id']}", json={"status": "submitted"})
        assert admin_client.delete(f"/invoices/{created['id']}").status_code == 409

    def test_delete_draft(self, admin_client, facility):
        created = admin_client.post("/invoices", json={"facility_id": facility.id}).json()
        assert admin_client.delete(f"/invoices/{created['id']}").status_code == 200
        assert admin_client.get(f"/invoices/{created['id']}").status_code == 404

    def test_list_filters(self, admin_client, facility, gsa_facility):
        admin_client.post("/invoices", json={"facility_id": facility.id})
        admin_client.post("/invoices", json={"facility_id": gsa_facility.id})
        response = admin_client.get("/invoices", params={"facility_id": gsa_facility.id})
        assert [i["facility"]["name"] for i in response.json()] == ["Federal Building"]


class TestInvoiceStatus:
    def test_submitting_advances_the_job(self, admin_client, billed_job):
        job, billing = billed_job
        response = admin_client.put(f"/invoices/{billing['invoice_id']}", json={"status": "submitted"})
        assert response.json()["status"] == "submitted"
        assert admin_client.get(f"/jobs/{job.id}").json()["status"] == "billed"

    def test_mark_paid(self, admin_client, billed_job):
        _, billing = billed_job
        url = f"/invoices/{billing['invoice_id']}/mark-paid"
        response = admin_client.post(url, json={"paid_date": "2025-04-01"})
        assert response.json()["status"] == "paid"
        assert response.json()["paid_date"] == "2025-04-01"
        assert admin_client.post(url, json={}).status_code == 409

    def test_paid_invoice_items_are_locked(self, admin_client, billed_job):
        _, billing = billed_job
        admin_client.post(f"/invoices/{billing['invoice_id']}/mark-paid", json={})
        response = admin_client.put(
            f"/invoices/{billing['invoice_id']}",
            json={"items": [{"description": "x", "unit_price": 1}]},
        )
        assert response.status_code == 409

    def test_bookkeeper_reads_but_cannot_mark_paid(self, client_for, billed_job):
        _, billing = billed_job
        client = client_for("bookkeeper")
        assert client.get(f"/invoices/{billing['invoice_id']}").status_code == 200
        response = client.post(f"/invoices/{billing['invoice_id']}/mark-paid", json={})
        assert response.status_code == 403

    def test_gsa_contributor_cannot_read_invoices(self, client_for, billed_job):
        assert client_for("gsa_contributor").get("/invoices").status_code == 403


class TestInvoiceDelivery:
    def test_generate_pdf(self, admin_client, billed_job, mock_storage):
        _, billing = billed_job
        response = admin_client.post(f"/invoices/{billing['invoice_id']}/pdf")
        assert response.status_code == 200
        assert response.json()["pdf_url"] == "invoices/invoice-2025-00001.pdf"
        assert mock_storage.put_object.call_args.kwargs["Body"].startswith(b"%PDF")

        response = admin_client.get(f"/invoices/{billing['invoice_id']}/pdf")
        assert response.json()["url"].startswith("https://storage.test/invoices/invoice-2025-00001.pdf")

    def test_pdf_url_before_generation(self, admin_client, billed_job):
        _, billing = billed_job
        assert admin_client.get(f"/invoices/{billing['invoice_id']}/pdf").status_code == 404

    def test_email_defaults(self, admin_client, billed_job):
        _, billing = billed_job
        response = admin_client.get(f"/invoices/{billing['invoice_id']}/email-defaults")
        body = response.json()
        assert body["to"] == ["billing@sihospital.test"]
        assert body["subject"] == "Invoice 2025-00001 from ECASL"
        assert "Dear SI Hospital Accounts Payable," in body["body"]
        assert "- Total Amount: $300.00" in body["body"]

    def test_send_uses_stored_pdf(self, admin_client, db, billed_job, mock_storage, mock_resend):
        _, billing = billed_job
        admin_client.post(f"/invoices/{billing['invoice_id']}/pdf")
        mock_storage.put_object.reset_mock()

        response = admin_client.post(
            f"/invoices/{billing['invoice_id']}/send",
            json={"to": ["AP@sihospital.test"], "subject": "March invoice", "body": "See attached."},
        )
        assert response.status_code == 200
        assert response.json()["recipients"] == ["ap@sihospital.test"]
        mock_storage.put_object.assert_not_called()

        sent = mock_resend.call_args.args[0]
        assert sent["subject"] == "March invoice"
        assert sent["html"] == "See attached."
        assert sent["attachments"][0]["filename"] == "invoice-2025-00001.pdf"

        log = db.query(EmailLog).one()
        assert log.template_name == "invoice_send"
        assert log.facility_id is not None

    def test_send_requires_recipient(self, admin_client, billed_job):
        _, billing = billed_job
        response = admin_client.post(f"/invoices/{billing['invoice_id']}/send", json={"to": []})
        assert response.status_code == 422

    def test_failed_send_keeps_draft(self, admin_client, billed_job, mock_resend):
        job, billing = billed_job
        mock_resend.side_effect = Exception("provider down")
        response = admin_client.post(
            f"/invoices/{billing['invoice_id']}/send", json={"to": ["ap@sihospital.test"]}
        )
        assert response.status_code == 502
        assert admin_client.get(f"/invoices/{billing['invoice_id']}").json()["status"] == "draft"
        assert admin_client.get(f"/jobs/{job.id}").json()["status"] == "ready_to_bill"

    def test_invoice_due_in_two_weeks(self, admin_client, billed_job):
        _, billing = billed_job
        body = admin_client.get(f"/invoices/{billing['invoice_id']}").json()
        issued = date.fromisoformat(body["issued_date"])
        assert (date.fromisoformat(body["due_date"]) - issued).days == 14
