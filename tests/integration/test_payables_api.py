import pytest


@pytest.fixture
def payable(admin_client, make_job, interpreter):
    job = make_job(status="complete", interpreter_id=interpreter.id, parking=10)
    billing = admin_client.post(f"/jobs/{job.id}/generate-billing").json()
    return job, billing


class TestPayables:
    def test_generated_payable(self, admin_client, payable):
        _, billing = payable
        response = admin_client.get(f"/payables/{billing['bill_id']}")
        body = response.json()
        assert body["status"] == "queued"
        assert body["hours_amount"] == 180
        assert body["expenses_amount"] == 10
        assert body["total"] == 190
        assert body["payment_method"] == "zelle"
        assert body["interpreter"]["last_name"] == "Rivera"
        assert body["job"]["job_number"] == "2025-00001"

    def test_list_by_status(self, admin_client, payable):
        assert len(admin_client.get("/payables", params={"status": "queued"}).json()) == 1
        assert admin_client.get("/payables", params={"status": "paid"}).json() == []

    def test_amount_edit_recomputes_total(self, admin_client, payable):
        _, billing = payable
        response = admin_client.put(
            f"/payables/{billing['bill_id']}", json={"mileage_amount": 7, "notes": "mileage added"}
        )
        assert response.status_code == 200
        assert response.json()["total"] == 197

    def test_explicit_total_wins(self, admin_client, payable):
        _, billing = payable
        response = admin_client.put(
            f"/payables/{billing['bill_id']}", json={"hours_amount": 200, "total": 150}
        )
        assert response.json()["total"] == 150

    def test_pay_period_must_be_ordered(self, admin_client, payable):
        _, billing = payable
        response = admin_client.put(
            f"/payables/{billing['bill_id']}",
            json={"pay_period_start": "2025-03-15", "pay_period_end": "2025-03-01"},
        )
        assert response.status_code == 422

    def test_mark_paid_before_invoice_sent(self, admin_client, payable):
        job, billing = payable
        response = admin_client.post(
            f"/payables/{billing['bill_id']}/mark-paid",
            json={"paid_date": "2025-03-20", "payment_method": "check", "payment_reference": "#1042"},
        )
        body = response.json()
        assert body["status"] == "paid"
        assert body["paid_date"] == "2025-03-20"
        assert body["payment_method"] == "check"
        assert body["payment_reference"] == "#1042"
        # only billed jobs move to paid
        assert admin_client.get(f"/jobs/{job.id}").json()["status"] == "ready_to_bill"

    def test_paid_payable_is_final(self, admin_client, payable):
        _, billing = payable
        url = f"/payables/{billing['bill_id']}"
        admin_client.post(f"{url}/mark-paid", json={})
        assert admin_client.post(f"{url}/mark-paid", json={}).status_code == 409
        assert admin_client.put(url, json={"hours_amount": 1}).status_code == 409
        assert admin_client.put(url, json={"notes": "paid by zelle"}).status_code == 200

    def test_missing_payable(self, admin_client):
        assert admin_client.get("/payables/77").status_code == 404

    def test_bookkeeper_cannot_pay(self, client_for, payable):
        _, billing = payable
        client = client_for("bookkeeper")
        assert client.get("/payables").status_code == 200
        assert client.post(f"/payables/{billing['bill_id']}/mark-paid", json={}).status_code == 403
