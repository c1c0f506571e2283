"""Email repository - Database operations for templates and email logs"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import EmailLog, EmailTemplate


class EmailRepository:
    """Repository for email template and log operations"""

    @staticmethod
    def list_templates(db: Session) -> list[EmailTemplate]:
        return db.query(EmailTemplate).order_by(EmailTemplate.name.asc()).all()

    @staticmethod
    def get_template_by_id(db: Session, template_id: int) -> Optional[EmailTemplate]:
        return db.query(EmailTemplate).filter(EmailTemplate.id == template_id).first()

    @staticmethod
    def get_template_by_name(db: Session, name: str) -> Optional[EmailTemplate]:
        return db.query(EmailTemplate).filter(EmailTemplate.name == name).first()

    @staticmethod
    def create_template(db: Session, **data) -> EmailTemplate:
        template = EmailTemplate(**data)
        db.add(template)
        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def update_template(db: Session, template: EmailTemplate, **updates) -> EmailTemplate:
        for key, value in updates.items():
            setattr(template, key, value)
        db.commit()
        db.refresh(template)
        return template

    @staticmethod
    def delete_template(db: Session, template: EmailTemplate) -> None:
        db.delete(template)
        db.commit()

    @staticmethod
    def list_logs(
        db: Session,
        job_id: Optional[int] = None,
        interpreter_id: Optional[int] = None,
        facility_id: Optional[int] = None,
        status: Optional[str] = None,
        limit: int = 100,
    ) -> list[EmailLog]:
        query = db.query(EmailLog)
        if job_id is not None:
            query = query.filter(EmailLog.job_id == job_id)
        if interpreter_id is not None:
            query = query.filter(EmailLog.interpreter_id == interpreter_id)
        if facility_id is not None:
            query = query.filter(EmailLog.facility_id == facility_id)
        if status:
            query = query.filter(EmailLog.status == status)
        return query.order_by(EmailLog.sent_at.desc(), EmailLog.id.desc()).limit(limit).all()
