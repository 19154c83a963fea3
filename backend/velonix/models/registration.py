from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Text
from datetime import datetime
import enum

from velonix.core.database import Base


class RegistrationStatus(str, enum.Enum):
    """Review status of a registration; any status may move to any other"""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def values(cls):
        return [member.value for member in cls]


# selected_events is stored as a single delimited string
EVENT_SEPARATOR = ","


def split_events(selected_events: str) -> list:
    """Split a stored selected_events value into trimmed, non-empty names"""
    if not selected_events:
        return []
    return [name.strip() for name in selected_events.split(EVENT_SEPARATOR) if name.strip()]


class Registration(Base):
    """One applicant submission"""
    __tablename__ = "registrations"

    id = Column(String(32), primary_key=True)
    full_name = Column(String(255), nullable=False)
    college_name = Column(String(255), nullable=False)
    department = Column(String(255), nullable=False)
    year = Column(String(16), nullable=False)
    email = Column(String(255), index=True, nullable=False)
    phone = Column(String(32), nullable=False)
    selected_events = Column(Text, nullable=False)
    transaction_id = Column(String(128), nullable=False)
    screenshot_path = Column(String(512), nullable=False, default="")

    status = Column(
        SQLEnum(RegistrationStatus, values_callable=lambda e: [m.value for m in e]),
        default=RegistrationStatus.PENDING,
        nullable=False,
    )
    timestamp = Column(DateTime, default=datetime.utcnow, index=True, nullable=False)

    def __repr__(self):
        return f"<Registration {self.id} ({self.status})>"
