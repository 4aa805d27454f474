from datetime import date, timedelta

from sqlalchemy.orm import Session

from timesheet_api.db.session import Base, engine, session_scope
from timesheet_api.models import DeveloperWorkSchedule, Task, User, Week


def seed(session: Session) -> None:
    admin = User(email="admin@example.com", name="Admin", role="admin")
    reviewer = User(email="hr@example.com", name="People Ops", role="hr")
    developer = User(email="dev@example.com", name="Ada Lovelace", role="developer", hourly_rate=50)
    session.add_all([admin, reviewer, developer])
    session.flush()

    start = date.today() - timedelta(days=date.today().weekday())
    closed_week = Week(start_date=start - timedelta(days=7), end_date=start - timedelta(days=1), is_open=False)
    open_week = Week(start_date=start, end_date=start + timedelta(days=6), is_open=True)
    session.add_all([closed_week, open_week])
    session.flush()

    session.add_all(
        [
            Task(
                user_id=developer.id,
                week_id=closed_week.id,
                description="Payment export",
                hours=16,
                status="approved",
                approved_by=admin.id,
            ),
            Task(user_id=developer.id, week_id=open_week.id, description="Invoice screen", hours=6),
            DeveloperWorkSchedule(user_id=developer.id, days_per_week=5, hours_per_day=8),
        ]
    )
    session.commit()


def main() -> None:
    Base.metadata.create_all(bind=engine)
    with session_scope() as session:
        seed(session)


if __name__ == "__main__":
    main()
