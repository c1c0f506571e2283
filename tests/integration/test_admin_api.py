from agency_crm.models import Facility, Interpreter, Setting

from tests.conftest import make_profile

INTERPRETERS_CSV = """First Name,Last Name,Email,Zelle,BusinessHourRate,AfterHoursRate,State
Ada,Lovelace,ada@example.test,ada@example.test,$65.00,$85.00,New York
Grace,Hopper,,,$60,$80,NJ
"""


class TestOptions:
    def test_options(self, client_for):
        response = client_for("bookkeeper").get("/admin/options")
        body = response.json()
        assert body["timezones"][0] == {"value": "America/New_York", "label": "Eastern Time (ET)"}
        assert body["times"][0] == {"value": "00:00", "label": "12:00 AM"}
        assert len(body["times"]) == 96
        assert body["durations"][0] == {"value": 120, "label": "2h"}
        assert body["durations"][-1] == {"value": 480, "label": "8h"}


class TestSettings:
    def test_update_and_read_mileage_rate(self, admin_client, db, facility):
        response = admin_client.put("/admin/settings/default_mileage_rate", json={"value": "0.725"})
        assert response.status_code == 200
        assert response.json()["value"] == 0.725
        assert response.json()["description"]

        assert admin_client.get("/admin/settings/default_mileage_rate").json()["value"] == 0.725
        assert [s["key"] for s in admin_client.get("/admin/settings").json()] == ["default_mileage_rate"]

        job = admin_client.post(
            "/jobs",
            json={
                "facility_id": facility.id,
                "job_date": "2025-03-10",
                "start_time": "09:00",
                "end_time": "11:00",
                "mileage": 10,
            },
        ).json()
        assert job["facility_rate_mileage"] == 0.725

    def test_mileage_rate_must_be_non_negative_number(self, admin_client):
        bad = admin_client.put("/admin/settings/default_mileage_rate", json={"value": "abc"})
        negative = admin_client.put("/admin/settings/default_mileage_rate", json={"value": -1})
        assert bad.status_code == 400
        assert negative.status_code == 400

    def test_missing_setting(self, admin_client):
        assert admin_client.get("/admin/settings/unknown").status_code == 404

    def test_only_admin_updates(self, client_for, db):
        db.add(Setting(key="default_mileage_rate", value=0.7))
        db.commit()
        client = client_for("bookkeeper")
        assert client.get("/admin/settings/default_mileage_rate").status_code == 200
        assert client.put("/admin/settings/default_mileage_rate", json={"value": 1}).status_code == 403


class TestRoles:
    def test_grant_and_revoke(self, admin_client, db):
        staff = make_profile(db, "staff@ecasl.test")
        response = admin_client.post(f"/admin/users/{staff.id}/roles", json={"role": "bookkeeper"})
        assert response.status_code == 200
        assert response.json()["roles"] == ["bookkeeper"]
        assert response.json()["is_team_member"] is True

        again = admin_client.post(f"/admin/users/{staff.id}/roles", json={"role": "bookkeeper"})
        assert again.status_code == 409

        response = admin_client.delete(f"/admin/users/{staff.id}/roles/bookkeeper")
        assert response.json()["roles"] == []
        assert response.json()["is_team_member"] is False

        missing = admin_client.delete(f"/admin/users/{staff.id}/roles/bookkeeper")
        assert missing.status_code == 404

    def test_unknown_role(self, admin_client, db):
        staff = make_profile(db, "staff@ecasl.test")
        response = admin_client.post(f"/admin/users/{staff.id}/roles", json={"role": "owner"})
        assert response.status_code == 422

    def test_cannot_remove_own_admin(self, client_for):
        client = client_for("admin", email="boss@ecasl.test")
        users = client.get("/admin/users").json()
        me = next(u for u in users if u["email"] == "boss@ecasl.test")
        assert client.delete(f"/admin/users/{me['id']}/roles/admin").status_code == 400

    def test_unknown_user(self, admin_client):
        assert admin_client.post("/admin/users/999/roles", json={"role": "admin"}).status_code == 404

    def test_listing_users_requires_admin(self, client_for):
        assert client_for("bookkeeper").get("/admin/users").status_code == 403


class TestImport:
    def test_import_interpreters(self, admin_client, db, interpreter):
        response = admin_client.post(
            "/admin/import",
            data={"import_type": "interpreters"},
            files={"file": ("interpreters.csv", INTERPRETERS_CSV.encode("utf-8-sig"), "text/csv")},
        )
        assert response.status_code == 200
        assert response.json() == {
            "message": "Successfully imported 1 interpreters",
            "count": 1,
            "skipped": 1,
        }
        imported = db.query(Interpreter).one()
        assert imported.first_name == "Ada"
        assert imported.state == "NY"
        assert imported.rate_business_hours == 65

    def test_import_facilities(self, admin_client, db, facility):
        csv_text = "FacilityName,State,BusinessHourRate\nMercy Clinic,NJ,$110\n"
        response = admin_client.post(
            "/admin/import",
            data={"import_type": "facilities"},
            files={"file": ("facilities.csv", csv_text.encode(), "text/csv")},
        )
        assert response.json()["count"] == 1
        assert [f.name for f in db.query(Facility).all()] == ["Mercy Clinic"]

    def test_unknown_import_type(self, admin_client):
        response = admin_client.post(
            "/admin/import",
            data={"import_type": "jobs"},
            files={"file": ("jobs.csv", b"a,b\n1,2\n", "text/csv")},
        )
        assert response.status_code == 400

    def test_non_utf8_file(self, admin_client):
        response = admin_client.post(
            "/admin/import",
            data={"import_type": "interpreters"},
            files={"file": ("x.csv", b"\xff\xfe\x00bad", "text/csv")},
        )
        assert response.status_code == 400

    def test_empty_file(self, admin_client):
        response = admin_client.post(
            "/admin/import",
            data={"import_type": "interpreters"},
            files={"file": ("x.csv", b"", "text/csv")},
        )
        assert response.status_code == 400

    def test_admin_only(self, client_for):
        response = client_for("bookkeeper").post(
            "/admin/import",
            data={"import_type": "interpreters"},
            files={"file": ("x.csv", b"First Name\n", "text/csv")},
        )
        assert response.status_code == 403
