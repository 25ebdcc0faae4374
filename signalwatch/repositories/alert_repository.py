"""Repository for Alert entity database operations.

Example:
    async with get_session() as session:
        repo = AlertRepository(session)
        alert = await repo.transition_from_pending(
            "alert-uuid", AlertStatus.CONFIRMED, resolved_at=datetime.now(UTC)
        )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select, update

from signalwatch.models import Alert, AlertStatus
from signalwatch.repositories.base import Repository

if TYPE_CHECKING:
    from collections.abc import Sequence
    from datetime import datetime


class AlertRepository(Repository[Alert]):
    """Repository for Alert entity database operations."""

    model_class = Alert

    async def get_by_user_id(
        self,
        user_id: str,
        status: AlertStatus | None = None,
        limit: int = 100,
        offset: int = 0,
    ) -> Sequence[Alert]:
        """Get a user's alerts, newest first, optionally filtered by status."""
        stmt = select(Alert).where(Alert.user_id == user_id)
        if status is not None:
            stmt = stmt.where(Alert.status == status)
        stmt = stmt.order_by(Alert.created_at.desc()).limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return result.scalars().all()

    async def transition_from_pending(
        self,
        alert_id: str,
        to_status: AlertStatus,
        *,
        resolved_at: datetime,
    ) -> Alert | None:
        """Move a PENDING alert to a terminal status in one conditional UPDATE.

        The status check and the write happen in the same statement, so two
        concurrent transitions on one alert cannot both succeed.

        Returns:
            The updated Alert, or None if no PENDING alert with this id exists.
        """
        stmt = (
            update(Alert)
            .where(Alert.id == alert_id, Alert.status == AlertStatus.PENDING)
            .values(status=to_status, resolved_at=resolved_at)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        if result.rowcount == 0:
            return None
        return await self.session.get(Alert, alert_id, populate_existing=True)
