"""
Invoice and Payable Models for facility billing and interpreter pay
"""

from sqlalchemy import Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base
from .models import generate_public_id

INVOICE_STATUSES = ("draft", "submitted", "paid")
BILL_STATUSES = ("queued", "paid")


class Invoice(Base):
    """Invoice sent to a facility"""

    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, nullable=True, index=True, default=generate_public_id)
    invoice_number = Column(String(50), unique=True, nullable=False, index=True)
    facility_id = Column(Integer, ForeignKey("facilities.id"), nullable=False)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="SET NULL"), nullable=True, index=True)

    status = Column(String(20), default="draft", index=True)  # draft, submitted, paid
    subtotal = Column(Float, nullable=True)
    tax = Column(Float, default=0)
    total = Column(Float, nullable=True)

    issued_date = Column(Date, nullable=True)
    due_date = Column(Date, nullable=True)
    paid_date = Column(Date, nullable=True)

    pdf_url = Column(String(500), nullable=True)  # Storage key for invoice PDF
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    facility = relationship("Facility", back_populates="invoices")
    job = relationship("Job", back_populates="invoices")
    items = relationship(
        "InvoiceItem",
        back_populates="invoice",
        cascade="all, delete-orphan",
        order_by="InvoiceItem.id",
    )


class InvoiceItem(Base):
    __tablename__ = "invoice_items"

    id = Column(Integer, primary_key=True, index=True)
    invoice_id = Column(Integer, ForeignKey("invoices.id", ondelete="CASCADE"), nullable=False)
    description = Column(String(500), nullable=False)
    quantity = Column(Float, default=1)
    unit_price = Column(Float, nullable=False)
    total = Column(Float, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    invoice = relationship("Invoice", back_populates="items")


class InterpreterBill(Base):
    """Payable owed to an interpreter for a completed job"""

    __tablename__ = "interpreter_bills"

    id = Column(Integer, primary_key=True, index=True)
    public_id = Column(String(36), unique=True, nullable=True, index=True, default=generate_public_id)
    bill_number = Column(String(50), unique=True, nullable=True, index=True)
    interpreter_id = Column(Integer, ForeignKey("interpreters.id"), nullable=False)
    job_id = Column(Integer, ForeignKey("jobs.id"), nullable=False, index=True)

    status = Column(String(20), default="queued", index=True)  # queued, paid
    hours_amount = Column(Float, nullable=True)
    mileage_amount = Column(Float, nullable=True)
    expenses_amount = Column(Float, nullable=True)
    total = Column(Float, nullable=True)

    pay_period_start = Column(Date, nullable=True)
    pay_period_end = Column(Date, nullable=True)
    paid_date = Column(Date, nullable=True)
    payment_method = Column(String(20), nullable=True)  # zelle, check
    payment_reference = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    interpreter = relationship("Interpreter", back_populates="bills")
    job = relationship("Job", back_populates="bills")
