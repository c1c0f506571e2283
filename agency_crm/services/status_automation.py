"""
Automated job status transitions
Handles confirmed → complete once a job's scheduled end has passed
"""

import logging
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy import and_, or_
from sqlalchemy.orm import Session

from ..config import AUTO_COMPLETE_TIMEZONE
from ..models import Job

logger = logging.getLogger(__name__)


def agency_now(tz_name: str = AUTO_COMPLETE_TIMEZONE) -> datetime:
    """Current wall-clock time in the agency timezone (naive)"""
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


def auto_complete_jobs(db: Session, now: Optional[datetime] = None) -> dict:
    """
    Mark confirmed jobs complete once they have ended.

    A job has ended when its date is before today, or it is today and its
    end time is at or before the current time. An overnight job (end before
    start) ends on the day after its date, so it completes once that end time
    has passed the following day. Should be run on a schedule
    (the worker cron runs it every 15 minutes).

    Returns:
        dict: message, number of jobs updated and their job numbers
    """
    now = now or agency_now()
    today = now.date()
    yesterday = today - timedelta(days=1)
    overnight = Job.end_time < Job.start_time
    current_time = now.time().replace(microsecond=0)

    try:
        jobs = (
            db.query(Job)
            .filter(Job.status == "confirmed")
            .filter(
                or_(
                    Job.job_date < yesterday,
                    and_(
                        Job.job_date == yesterday,
                        or_(~overnight, Job.end_time <= current_time),
                    ),
                    and_(Job.job_date == today, ~overnight, Job.end_time <= current_time),
                )
            )
            .order_by(Job.job_date.asc(), Job.start_time.asc())
            .all()
        )

        if not jobs:
            logger.debug("ℹ️ No jobs to auto-complete")
            return {"message": "No jobs to auto-complete", "updated": 0, "jobs": []}

        job_numbers = []
        for job in jobs:
            job.status = "complete"
            job_numbers.append(job.job_number)
            logger.info(f"✅ Job {job.job_number} transitioned: confirmed → complete")

        db.commit()
        summary = {
            "message": f"Auto-completed {len(jobs)} job(s)",
            "updated": len(jobs),
            "jobs": job_numbers,
        }
        logger.info(f"📊 Status automation summary: {summary}")
        return summary

    except Exception as e:
        logger.error(f"❌ Error auto-completing jobs: {str(e)}")
        db.rollback()
        raise
