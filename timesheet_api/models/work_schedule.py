from datetime import datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric
from sqlalchemy.orm import relationship

from timesheet_api.db.session import Base


class DeveloperWorkSchedule(Base):
    __tablename__ = "developer_work_schedules"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    days_per_week = Column(Integer, nullable=False, default=5)
    hours_per_day = Column(Integer, nullable=False, default=8)
    expected_payout = Column(Numeric(10, 2), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="work_schedule")
