from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from timesheet_api.db.session import Base


class PaymentEvidence(Base):
    __tablename__ = "payment_evidence"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    week_id = Column(Integer, ForeignKey("weeks.id"), nullable=False, index=True)
    filename = Column(Text, nullable=False)
    stored_name = Column(String(255), nullable=False, index=True)
    file_url = Column(Text, nullable=False)
    uploaded_by = Column(Integer, ForeignKey("users.id"), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", foreign_keys=[user_id])
    week = relationship("Week")
    uploader = relationship("User", foreign_keys=[uploaded_by])
