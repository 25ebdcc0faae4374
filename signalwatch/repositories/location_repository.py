"""Repository for Location entity database operations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from signalwatch.models import Location
from signalwatch.repositories.base import Repository

if TYPE_CHECKING:
    from collections.abc import Sequence


class LocationRepository(Repository[Location]):
    """Repository for Location entity database operations.

    Example:
        async with get_session() as session:
            repo = LocationRepository(session)
            nearby = await repo.find_in_bounding_box(30.0442, 30.0446, 31.2355, 31.2359)
    """

    model_class = Location

    async def find_in_bounding_box(
        self,
        min_latitude: float,
        max_latitude: float,
        min_longitude: float,
        max_longitude: float,
    ) -> Sequence[Location]:
        """Get locations whose coordinates fall inside an inclusive box.

        Results are ordered by creation time so "first match" is stable.
        """
        stmt = (
            select(Location)
            .where(
                Location.latitude >= min_latitude,
                Location.latitude <= max_latitude,
                Location.longitude >= min_longitude,
                Location.longitude <= max_longitude,
            )
            .order_by(Location.created_at.asc(), Location.id.asc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
