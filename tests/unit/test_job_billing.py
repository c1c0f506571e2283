from datetime import time

import pytest

from agency_crm.models import Setting
from agency_crm.services.job_billing import (
    build_invoice_line_items,
    effective_minimum_hours,
    payable_amounts,
    recalculate_job_totals,
    snapshot_rates,
)


class TestRateSnapshots:
    def test_rates_copied_from_rate_cards(self, db, make_job, interpreter):
        job = make_job(interpreter_id=interpreter.id)
        snapshot_rates(db, job)
        assert job.facility_rate_business == 100
        assert job.facility_rate_after_hours == 150
        assert job.interpreter_rate_business == 60
        assert job.interpreter_rate_after_hours == 80

    def test_job_rates_take_precedence(self, db, make_job, interpreter):
        job = make_job(interpreter_id=interpreter.id, facility_rate_business=95, interpreter_rate_business=65)
        snapshot_rates(db, job)
        assert job.facility_rate_business == 95
        assert job.interpreter_rate_business == 65

    def test_overwrite_interpreter_rates(self, db, make_job, interpreter):
        job = make_job(interpreter_id=interpreter.id, interpreter_rate_business=65)
        snapshot_rates(db, job, overwrite_interpreter=True)
        assert job.interpreter_rate_business == 60

    def test_mileage_rate_from_setting(self, db, make_job):
        db.add(Setting(key="default_mileage_rate", value=0.67))
        db.commit()
        job = make_job()
        snapshot_rates(db, job)
        assert job.facility_rate_mileage == 0.67
        assert job.interpreter_rate_mileage == 0.67

    def test_mileage_rate_default_without_setting(self, db, make_job):
        job = make_job()
        snapshot_rates(db, job)
        assert job.facility_rate_mileage == 0.7


class TestMinimumHours:
    def test_larger_of_facility_and_interpreter(self, db, make_job, interpreter, facility):
        facility.minimum_billable_hours = 2
        interpreter.minimum_hours = 3
        db.commit()
        job = make_job(interpreter_id=interpreter.id)
        assert effective_minimum_hours(job) == 3

    def test_defaults_to_two(self, db, make_job, facility):
        facility.minimum_billable_hours = None
        db.commit()
        job = make_job()
        assert effective_minimum_hours(job) == 2


class TestRecalculate:
    def test_stores_split_and_totals(self, db, make_job, interpreter):
        job = make_job(
            interpreter_id=interpreter.id,
            start_time=time(15, 0),
            end_time=time(19, 0),
            mileage=10,
            parking=12,
        )
        totals = recalculate_job_totals(db, job)

        assert job.billable_hours == 4
        assert job.business_hours_worked == 2
        assert job.after_hours_worked == 2
        assert job.facility_hourly_total == 500
        assert job.facility_billable_total == 519
        assert job.interpreter_hourly_total == 280
        assert job.interpreter_billable_total == 299
        assert totals.interpreter_mileage_total == pytest.approx(7)

    def test_actual_times_win(self, db, make_job):
        job = make_job(actual_start_time=time(9, 0), actual_end_time=time(13, 0))
        recalculate_job_totals(db, job)
        assert job.billable_hours == 4

    def test_payable_split(self, db, make_job, interpreter):
        job = make_job(
            interpreter_id=interpreter.id,
            travel_time_hours=1,
            mileage=10,
            tolls=5,
        )
        totals = recalculate_job_totals(db, job)
        amounts = payable_amounts(totals)
        assert amounts == {
            "hours_amount": 180,
            "mileage_amount": 7,
            "expenses_amount": 65,
            "total": 252,
        }


class TestInvoiceLineItems:
    def test_business_and_after_hours_lines(self, db, make_job, interpreter):
        job = make_job(interpreter_id=interpreter.id, start_time=time(15, 0), end_time=time(19, 0))
        recalculate_job_totals(db, job)
        items = build_invoice_line_items(job)
        assert items == [
            {
                "description": "Interpreter Services (Business Hours)",
                "quantity": 2,
                "unit_price": 100,
                "total": 200,
            },
            {
                "description": "Interpreter Services (After Hours)",
                "quantity": 2,
                "unit_price": 150,
                "total": 300,
            },
        ]

    def test_adjusted_rates_and_expenses(self, db, make_job):
        job = make_job(
            trilingual_rate_uplift=20,
            travel_time_hours=1,
            travel_time_rate=50,
            mileage=20,
            parking=10,
            tolls=4,
            misc_fee=6,
            emergency_fee_applied=True,
            holiday_fee_applied=True,
        )
        recalculate_job_totals(db, job)
        descriptions = [item["description"] for item in build_invoice_line_items(job)]
        assert descriptions == [
            "Interpreter Services (Business Hours, adjusted)",
            "Travel Time",
            "Mileage",
            "Parking",
            "Tolls",
            "Miscellaneous Fee",
            "Emergency Fee",
            "Holiday Fee",
        ]

    def test_zero_amount_lines_left_out(self, db, make_job, facility):
        facility.rate_business_hours = None
        facility.rate_after_hours = None
        db.commit()
        job = make_job(parking=0)
        recalculate_job_totals(db, job)
        assert build_invoice_line_items(job) == []
