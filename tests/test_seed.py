from timesheet_api.domains.tasks.service import compute_week_summary
from timesheet_api.domains.weeks.service import get_open_week
from timesheet_api.models import DeveloperWorkSchedule, Task, User, Week
from timesheet_api.seed.seed_data import seed


def test_seed_populates_demo_data(db_session):
    seed(db_session)

    assert db_session.query(User).count() == 3
    assert db_session.query(Week).count() == 2
    assert db_session.query(Task).count() == 2
    assert db_session.query(DeveloperWorkSchedule).count() == 1

    developer = db_session.query(User).filter_by(role="developer").one()
    assert get_open_week(db_session) is not None
    summary = compute_week_summary(db_session, developer)
    assert float(summary.total_hours) == 6.0
    assert float(summary.approved_hours) == 0.0
