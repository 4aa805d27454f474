from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from timesheet_api.db.session import Base

ROLES = ("admin", "developer", "hr")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, default="")
    email = Column(String(255), nullable=False, unique=True, index=True)
    image = Column(Text, nullable=True)
    role = Column(String(20), nullable=False, default="developer")  # admin|developer|hr
    hourly_rate = Column(Numeric(10, 2), nullable=False, default=0)

    jira_url = Column(Text, nullable=True)
    jira_token = Column(Text, nullable=True)
    jira_connected = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    work_schedule = relationship("DeveloperWorkSchedule", back_populates="user", uselist=False)
