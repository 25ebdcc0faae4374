"""Repositories for ConnectivitySample and CellularSignalReading entities.

Example:
    async with get_session() as session:
        repo = ConnectivitySampleRepository(session)
        sample = await repo.get_with_relations("sample-uuid")
        readings = await repo.get_cellular_readings_at_location("location-uuid")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from signalwatch.models import CellularSignalReading, ConnectivitySample
from signalwatch.repositories.base import Repository

if TYPE_CHECKING:
    from collections.abc import Sequence


class CellularSignalReadingRepository(Repository[CellularSignalReading]):
    model_class = CellularSignalReading


class ConnectivitySampleRepository(Repository[ConnectivitySample]):
    """Repository for ConnectivitySample entity database operations."""

    model_class = ConnectivitySample

    async def get_with_relations(self, sample_id: str) -> ConnectivitySample | None:
        """Get a sample with its device, location and reading eagerly loaded."""
        stmt = (
            select(ConnectivitySample)
            .where(ConnectivitySample.id == sample_id)
            .options(
                selectinload(ConnectivitySample.device),
                selectinload(ConnectivitySample.location),
                selectinload(ConnectivitySample.reading),
            )
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_cellular_readings_at_location(
        self, location_id: str
    ) -> Sequence[CellularSignalReading]:
        """Get usable cellular readings of every sample linked to a location.

        Only readings with a carrier name and a dBm value are returned.
        """
        stmt = (
            select(CellularSignalReading)
            .join(
                ConnectivitySample,
                ConnectivitySample.reading_id == CellularSignalReading.id,
            )
            .where(
                ConnectivitySample.location_id == location_id,
                CellularSignalReading.carrier.is_not(None),
                CellularSignalReading.signal_dbm.is_not(None),
            )
            .order_by(CellularSignalReading.created_at.asc())
        )
        result = await self.session.execute(stmt)
        return result.scalars().all()
