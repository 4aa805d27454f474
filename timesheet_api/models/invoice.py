from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from timesheet_api.db.session import Base

INVOICE_STATUSES = ("pending", "paid", "rejected")


class Invoice(Base):
    __tablename__ = "invoices"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    week_id = Column(Integer, ForeignKey("weeks.id"), nullable=True)
    invoice_number = Column(String(32), nullable=False, unique=True)
    total_hours = Column(Numeric(8, 2), nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending|paid|rejected

    file_name = Column(Text, nullable=True)  # name as uploaded
    stored_name = Column(String(255), nullable=True, index=True)
    file_url = Column(Text, nullable=True)
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    paid_at = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", foreign_keys=[user_id])
    week = relationship("Week")
    uploader = relationship("User", foreign_keys=[uploaded_by])
