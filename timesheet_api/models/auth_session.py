from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from timesheet_api.db.session import Base


class AuthSession(Base):
    __tablename__ = "sessions"

    session_token = Column(String(128), primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    expires = Column(DateTime, nullable=False)

    user = relationship("User")
