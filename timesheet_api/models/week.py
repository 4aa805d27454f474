from datetime import datetime

from sqlalchemy import Boolean, Column, Date, DateTime, Index, Integer, text

from timesheet_api.db.session import Base


class Week(Base):
    __tablename__ = "weeks"

    id = Column(Integer, primary_key=True, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_open = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # At most one open week.
    __table_args__ = (
        Index(
            "uq_weeks_single_open",
            "is_open",
            unique=True,
            sqlite_where=text("is_open = 1"),
            postgresql_where=text("is_open"),
        ),
    )
