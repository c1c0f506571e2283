from agency_crm.models import EmailLog, EmailTemplate


class TestSendEmail:
    def test_send_raw_email(self, admin_client, db, mock_resend, facility):
        response = admin_client.post(
            "/emails/send",
            json={
                "to": "Billing@SIHospital.test",
                "subject": "Hello {{name}}",
                "html": "<p>Hi {name}</p>",
                "variables": {"name": "Pat"},
                "facility_id": facility.id,
            },
        )
        assert response.status_code == 200
        assert response.json() == {
            "message": "Email sent",
            "id": "email_test_123",
            "recipients": ["billing@sihospital.test"],
        }
        sent = mock_resend.call_args.args[0]
        assert sent["subject"] == "Hello Pat"
        assert sent["html"] == "<p>Hi Pat</p>"
        assert db.query(EmailLog).one().facility_id == facility.id

    def test_send_with_builtin_template(self, admin_client, mock_resend):
        response = admin_client.post(
            "/emails/send",
            json={
                "to": ["a@x.test", "b@x.test"],
                "template_name": "invoice_reminder",
                "variables": {"invoice_number": "2025-00007", "facility_contact": "Pat"},
            },
        )
        assert response.status_code == 200
        sent = mock_resend.call_args.args[0]
        assert sent["to"] == ["a@x.test", "b@x.test"]
        assert sent["subject"] == "Invoice 2025-00007 - Payment Reminder"
        assert "Dear Pat," in sent["html"]

    def test_stored_template_overrides_builtin(self, admin_client, db, mock_resend):
        db.add(EmailTemplate(name="invoice_reminder", subject="Reminder {{invoice_number}}", body="Pay"))
        db.commit()
        admin_client.post(
            "/emails/send",
            json={"to": "a@x.test", "template_name": "invoice_reminder", "variables": {"invoice_number": "9"}},
        )
        assert mock_resend.call_args.args[0]["subject"] == "Reminder 9"

    def test_unknown_template(self, admin_client):
        response = admin_client.post("/emails/send", json={"to": "a@x.test", "template_name": "nope"})
        assert response.status_code == 404

    def test_subject_and_html_required(self, admin_client):
        response = admin_client.post("/emails/send", json={"to": "a@x.test", "subject": "Hi"})
        assert response.status_code == 400

    def test_invalid_recipient(self, admin_client):
        response = admin_client.post(
            "/emails/send", json={"to": "not-an-email", "subject": "Hi", "html": "x"}
        )
        assert response.status_code == 422

    def test_provider_failure_is_logged(self, admin_client, db, mock_resend):
        mock_resend.side_effect = Exception("rate limited")
        response = admin_client.post(
            "/emails/send", json={"to": ["a@x.test", "b@x.test"], "subject": "Hi", "html": "x"}
        )
        assert response.status_code == 502
        logs = db.query(EmailLog).all()
        assert [log.status for log in logs] == ["failed", "failed"]
        assert "rate limited" in logs[0].error_message

    def test_admin_only(self, client_for):
        client = client_for("bookkeeper")
        response = client.post("/emails/send", json={"to": "a@x.test", "subject": "Hi", "html": "x"})
        assert response.status_code == 403


class TestTemplates:
    def test_crud(self, admin_client):
        response = admin_client.post(
            "/emails/templates", json={"name": " welcome ", "subject": "Welcome", "body": "<p>Hi</p>"}
        )
        assert response.status_code == 201
        template_id = response.json()["id"]
        assert response.json()["name"] == "welcome"

        duplicate = admin_client.post(
            "/emails/templates", json={"name": "welcome", "subject": "Again", "body": "x"}
        )
        assert duplicate.status_code == 409

        response = admin_client.put(f"/emails/templates/{template_id}", json={"subject": "Welcome aboard"})
        assert response.json()["subject"] == "Welcome aboard"
        assert response.json()["body"] == "<p>Hi</p>"

        assert [t["name"] for t in admin_client.get("/emails/templates").json()] == ["welcome"]
        assert admin_client.delete(f"/emails/templates/{template_id}").status_code == 200
        assert admin_client.get(f"/emails/templates/{template_id}").status_code == 404

    def test_team_members_read_templates(self, client_for, db):
        db.add(EmailTemplate(name="a", subject="A", body="A"))
        db.commit()
        client = client_for("gsa_contributor")
        assert len(client.get("/emails/templates").json()) == 1
        assert client.post("/emails/templates", json={"name": "b", "subject": "B", "body": "B"}).status_code == 403


class TestEmailLogs:
    def test_filter_and_limit(self, admin_client, db, facility, interpreter):
        db.add_all(
            [
                EmailLog(recipient_email="a@x.test", subject="1", status="sent", facility_id=facility.id),
                EmailLog(recipient_email="b@x.test", subject="2", status="failed", facility_id=facility.id),
                EmailLog(recipient_email="c@x.test", subject="3", status="sent", interpreter_id=interpreter.id),
            ]
        )
        db.commit()

        response = admin_client.get("/emails/logs", params={"facility_id": facility.id})
        assert len(response.json()) == 2

        response = admin_client.get("/emails/logs", params={"status": "failed"})
        assert [log["recipient_email"] for log in response.json()] == ["b@x.test"]

        response = admin_client.get("/emails/logs", params={"limit": 1})
        assert len(response.json()) == 1

    def test_limit_bounds(self, admin_client):
        assert admin_client.get("/emails/logs", params={"limit": 0}).status_code == 422
