"""
Review Service - admin-side access to registrations

Handles:
- Listing registrations (newest first, no pagination)
- Status changes (pending / approved / rejected, any direction)
- Dashboard statistics and CSV export
"""

import csv
import io
from collections import Counter
from typing import Dict, List, Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from velonix.core.exceptions import InvalidStatusError, RegistrationNotFoundError
from velonix.core.logging_config import logger
from velonix.models.registration import Registration, RegistrationStatus, split_events
from velonix.schemas.registration import RegistrationStats

CSV_COLUMNS = [
    "id", "fullName", "collegeName", "department", "year", "email", "phone",
    "selectedEvents", "transactionId", "screenshotPath", "status", "timestamp",
]


def count_events(selected_events_values: List[str]) -> Dict[str, int]:
    """
    Count how many registrations picked each event.

    Each value is split on the separator and trimmed; blank entries are
    ignored. An event listed twice in one registration counts twice.
    """
    counts: Counter = Counter()
    for value in selected_events_values:
        counts.update(split_events(value or ""))
    return dict(counts)


class ReviewService:
    """Read and update registrations on behalf of an authenticated admin"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_registrations(self) -> List[Registration]:
        result = await self.db.execute(
            select(Registration).order_by(Registration.timestamp.desc(), Registration.id.desc())
        )
        return list(result.scalars().all())

    async def get_registration(self, registration_id: str) -> Registration:
        registration = await self.db.get(Registration, registration_id)
        if registration is None:
            raise RegistrationNotFoundError(registration_id)
        return registration

    async def update_status(self, registration_id: str, status: str, admin_username: Optional[str] = None) -> Registration:
        """
        Move a registration to another status.

        Raises:
            InvalidStatusError: status is not pending/approved/rejected
            RegistrationNotFoundError: no registration with that id
        """
        try:
            new_status = RegistrationStatus(status)
        except ValueError:
            raise InvalidStatusError(status, RegistrationStatus.values())

        registration = await self.get_registration(registration_id)
        old_status = registration.status
        registration.status = new_status
        await self.db.commit()
        await self.db.refresh(registration)

        logger.log_registration_event(
            "status_changed",
            registration_id,
            old_status=getattr(old_status, "value", old_status),
            new_status=new_status.value,
            admin=admin_username,
        )
        return registration

    async def _count(self, status: Optional[RegistrationStatus] = None) -> int:
        query = select(func.count(Registration.id))
        if status is not None:
            query = query.where(Registration.status == status)
        return await self.db.scalar(query) or 0

    async def compute_stats(self) -> RegistrationStats:
        """Totals, per-status counts and per-event counts"""
        selected = await self.db.execute(select(Registration.selected_events))

        return RegistrationStats(
            total=await self._count(),
            pending=await self._count(RegistrationStatus.PENDING),
            approved=await self._count(RegistrationStatus.APPROVED),
            rejected=await self._count(RegistrationStatus.REJECTED),
            event_counts=count_events(list(selected.scalars().all())),
        )

    async def export_csv(self) -> str:
        """All registrations, newest first, as CSV text"""
        registrations = await self.list_registrations()

        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(CSV_COLUMNS)
        for r in registrations:
            writer.writerow([
                r.id,
                r.full_name,
                r.college_name,
                r.department,
                r.year,
                r.email,
                r.phone,
                r.selected_events,
                r.transaction_id,
                r.screenshot_path,
                getattr(r.status, "value", r.status),
                r.timestamp.isoformat() if r.timestamp else "",
            ])
        return buf.getvalue()
