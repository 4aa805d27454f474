from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from timesheet_api.db.session import Base

TASK_STATUSES = ("pending", "approved", "rejected")


class Task(Base):
    __tablename__ = "tasks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    week_id = Column(Integer, ForeignKey("weeks.id"), nullable=False, index=True)
    description = Column(Text, nullable=False)
    hours = Column(Numeric(5, 2), nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending|approved|rejected
    admin_comment = Column(Text, nullable=True)
    approved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    reviewed_at = Column(DateTime, nullable=True)

    jira_task_id = Column(String(64), nullable=True)
    jira_task_key = Column(String(64), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", foreign_keys=[user_id])
    week = relationship("Week")
    approver = relationship("User", foreign_keys=[approved_by])
