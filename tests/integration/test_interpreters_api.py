from datetime import date

from agency_crm.models import EmailLog, Job
from agency_crm.models_billing import InterpreterBill

NEW_INTERPRETER = {
    "first_name": "Casey",
    "last_name": "Nguyen",
    "email": "Casey@Example.test",
    "state": "ca",
    "rate_business_hours": 65,
    "rate_after_hours": 85,
    "payment_method": "check",
}


class TestInterpreterCrud:
    def test_create_normalizes_and_defaults(self, admin_client):
        response = admin_client.post("/interpreters", json={**NEW_INTERPRETER, "w9_received": True})
        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "casey@example.test"
        assert body["state"] == "CA"
        assert body["timezone"] == "America/Los_Angeles"
        assert body["status"] == "pending"
        assert body["contract_status"] == "not_sent"
        assert body["w9_received_date"] == date.today().isoformat()

    def test_create_requires_rates_and_payment_method(self, admin_client):
        payload = {**NEW_INTERPRETER, "rate_business_hours": 0, "payment_method": "venmo"}
        response = admin_client.post("/interpreters", json=payload)
        assert response.status_code == 422
        fields = {error["loc"][-1] for error in response.json()["detail"]}
        assert {"rate_business_hours", "payment_method"} <= fields

    def test_create_rejects_bad_email(self, admin_client):
        response = admin_client.post("/interpreters", json={**NEW_INTERPRETER, "email": "nope"})
        assert response.status_code == 422

    def test_list_sorted_by_last_name(self, admin_client, interpreter):
        admin_client.post("/interpreters", json=NEW_INTERPRETER)
        response = admin_client.get("/interpreters")
        assert [i["last_name"] for i in response.json()] == ["Nguyen", "Rivera"]

    def test_search(self, admin_client, interpreter):
        admin_client.post("/interpreters", json=NEW_INTERPRETER)
        response = admin_client.get("/interpreters", params={"search": "JORDAN"})
        assert [i["first_name"] for i in response.json()] == ["Jordan"]

    def test_update_cannot_clear_required_field(self, admin_client, interpreter):
        response = admin_client.put(f"/interpreters/{interpreter.id}", json={"email": None})
        assert response.status_code == 400

    def test_update(self, admin_client, interpreter):
        response = admin_client.put(
            f"/interpreters/{interpreter.id}", json={"rate_after_hours": 90, "nic_certified": True}
        )
        assert response.status_code == 200
        assert response.json()["rate_after_hours"] == 90
        assert response.json()["nic_certified"] is True

    def test_delete_unassigns_jobs(self, admin_client, db, interpreter, make_job):
        job = make_job(interpreter_id=interpreter.id, status="confirmed")
        response = admin_client.delete(f"/interpreters/{interpreter.id}")
        assert response.status_code == 200
        db.expire_all()
        assert db.get(Job, job.id).interpreter_id is None

    def test_delete_blocked_by_payables(self, admin_client, db, interpreter, make_job):
        job = make_job(interpreter_id=interpreter.id)
        db.add(InterpreterBill(interpreter_id=interpreter.id, job_id=job.id, total=100))
        db.commit()
        response = admin_client.delete(f"/interpreters/{interpreter.id}")
        assert response.status_code == 409

    def test_missing_interpreter(self, admin_client):
        assert admin_client.get("/interpreters/404").status_code == 404


class TestInterpreterAccess:
    def test_team_member_reads(self, client_for, interpreter):
        client = client_for("gsa_contributor")
        assert client.get("/interpreters").status_code == 200
        assert client.post("/interpreters", json=NEW_INTERPRETER).status_code == 403


class TestInterpreterContracts:
    def test_generate_and_email(self, admin_client, db, interpreter, mock_storage, mock_resend):
        response = admin_client.post(f"/interpreters/{interpreter.id}/contract")
        assert response.status_code == 200
        assert response.json()["contract_pdf_url"] == (
            f"contracts/interpreter/{interpreter.public_id}.pdf"
        )

        response = admin_client.post(
            f"/interpreters/{interpreter.id}/contract/email",
            json={"subject": "Your agreement", "body": "Hi Jordan,\nPlease sign."},
        )
        assert response.status_code == 200
        assert response.json()["recipients"] == ["jordan@interpreters.test"]
        sent = mock_resend.call_args.args[0]
        assert sent["subject"] == "Your agreement"
        assert "Hi Jordan,<br>" in sent["html"]
        assert db.query(EmailLog).one().interpreter_id == interpreter.id

    def test_url_before_upload(self, admin_client, interpreter):
        response = admin_client.get(
            f"/interpreters/{interpreter.id}/contract/url", params={"signed": True}
        )
        assert response.status_code == 404
