from .auth_session import AuthSession
from .invoice import Invoice
from .payment_evidence import PaymentEvidence
from .task import Task
from .user import User
from .week import Week
from .work_schedule import DeveloperWorkSchedule

__all__ = [
    "User",
    "AuthSession",
    "Week",
    "Task",
    "Invoice",
    "PaymentEvidence",
    "DeveloperWorkSchedule",
]
