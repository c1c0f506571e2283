from datetime import date

from agency_crm.models import EmailLog, Facility


class TestFacilityCrud:
    def test_create_defaults_timezone_and_contact_ids(self, admin_client):
        response = admin_client.post(
            "/facilities",
            json={
                "name": "Harbor Clinic",
                "facility_type": "clinic",
                "physical_state": "il",
                "billing_contacts": [{"name": "Ann", "email": "Ann@Harbor.test"}],
                "rate_business_hours": 95,
            },
        )
        assert response.status_code == 201
        body = response.json()
        assert body["timezone"] == "America/Chicago"
        assert body["physical_state"] == "IL"
        assert body["status"] == "pending"
        assert body["billing_contacts"][0]["email"] == "ann@harbor.test"
        assert body["billing_contacts"][0]["id"]

    def test_create_validates_fields(self, admin_client):
        response = admin_client.post(
            "/facilities", json={"name": "Bad Zip", "billing_zip": "123", "facility_type": "spa"}
        )
        assert response.status_code == 422
        fields = {error["loc"][-1] for error in response.json()["detail"]}
        assert {"billing_zip", "facility_type"} <= fields

    def test_list_search_and_sort(self, admin_client, facility, gsa_facility):
        response = admin_client.get("/facilities", params={"sort_by": "name", "sort_dir": "desc"})
        assert [f["name"] for f in response.json()] == ["Staten Island Hospital", "Federal Building"]

        response = admin_client.get("/facilities", params={"search": "federal"})
        assert [f["name"] for f in response.json()] == ["Federal Building"]

    def test_unknown_sort_column_falls_back(self, admin_client, facility, gsa_facility):
        response = admin_client.get("/facilities", params={"sort_by": "drop table"})
        assert response.status_code == 200
        assert [f["name"] for f in response.json()] == ["Federal Building", "Staten Island Hospital"]

    def test_update_cannot_clear_name(self, admin_client, facility):
        response = admin_client.put(f"/facilities/{facility.id}", json={"name": None})
        assert response.status_code == 400

    def test_update(self, admin_client, facility):
        response = admin_client.put(
            f"/facilities/{facility.id}", json={"status": "inactive", "rate_after_hours": 175}
        )
        assert response.status_code == 200
        assert response.json()["status"] == "inactive"
        assert response.json()["rate_after_hours"] == 175

    def test_delete_blocked_by_jobs(self, admin_client, facility, make_job):
        make_job()
        response = admin_client.delete(f"/facilities/{facility.id}")
        assert response.status_code == 409

    def test_delete(self, admin_client, db, gsa_facility):
        response = admin_client.delete(f"/facilities/{gsa_facility.id}")
        assert response.status_code == 200
        assert db.query(Facility).count() == 0

    def test_missing_facility(self, admin_client):
        assert admin_client.get("/facilities/999").status_code == 404


class TestFacilityAccess:
    def test_gsa_contributor_sees_only_gsa_facilities(self, client_for, facility, gsa_facility):
        client = client_for("gsa_contributor")
        response = client.get("/facilities")
        assert [f["name"] for f in response.json()] == ["Federal Building"]
        assert client.get(f"/facilities/{facility.id}").status_code == 404
        assert client.get(f"/facilities/{gsa_facility.id}").status_code == 200

    def test_bookkeeper_reads_but_cannot_write(self, client_for, facility):
        client = client_for("bookkeeper")
        assert client.get("/facilities").status_code == 200
        assert client.post("/facilities", json={"name": "New"}).status_code == 403

    def test_non_member_is_forbidden(self, client_for):
        assert client_for().get("/facilities").status_code == 403


class TestFacilityContracts:
    def test_generate_email_and_sign(self, admin_client, db, facility, mock_storage, mock_resend):
        response = admin_client.post(f"/facilities/{facility.id}/contract")
        assert response.status_code == 200
        body = response.json()
        assert body["contract_status"] == "sent"
        assert body["contract_pdf_url"] == f"contracts/facility/{facility.public_id}.pdf"
        assert body["download_url"].startswith("https://storage.test/")
        assert mock_storage.put_object.call_args.kwargs["Body"].startswith(b"%PDF")

        response = admin_client.post(f"/facilities/{facility.id}/contract/email", json={})
        assert response.status_code == 200
        assert response.json()["recipients"] == ["billing@sihospital.test"]
        sent = mock_resend.call_args.args[0]
        assert sent["attachments"][0]["filename"].endswith(".pdf")
        log = db.query(EmailLog).one()
        assert log.facility_id == facility.id
        assert log.status == "sent"

        response = admin_client.post(
            f"/facilities/{facility.id}/contract/signed",
            files={"file": ("signed.pdf", b"%PDF-1.4 signed", "application/pdf")},
            data={"signed_date": "2025-04-02"},
        )
        assert response.status_code == 200
        assert response.json()["contract_status"] == "signed"
        assert response.json()["contract_signed_date"] == "2025-04-02"

        response = admin_client.get(f"/facilities/{facility.id}/contract/url", params={"signed": True})
        assert response.json()["url"].startswith(
            f"https://storage.test/signed-contracts/facility/{facility.public_id}.pdf"
        )

    def test_email_before_generation(self, admin_client, facility):
        response = admin_client.post(f"/facilities/{facility.id}/contract/email", json={})
        assert response.status_code == 400

    def test_signed_upload_must_be_pdf(self, admin_client, facility):
        response = admin_client.post(
            f"/facilities/{facility.id}/contract/signed",
            files={"file": ("signed.png", b"\x89PNG", "image/png")},
        )
        assert response.status_code == 400

    def test_signed_date_defaults_to_today(self, admin_client, facility):
        response = admin_client.post(
            f"/facilities/{facility.id}/contract/signed",
            files={"file": ("signed.pdf", b"%PDF-1.4", "application/pdf")},
        )
        assert response.json()["contract_signed_date"] == date.today().isoformat()

    def test_email_failure_is_bad_gateway(self, admin_client, db, facility, mock_resend):
        admin_client.post(f"/facilities/{facility.id}/contract")
        mock_resend.side_effect = Exception("provider down")
        response = admin_client.post(f"/facilities/{facility.id}/contract/email", json={})
        assert response.status_code == 502
        assert db.query(EmailLog).one().status == "failed"
