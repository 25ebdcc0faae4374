"""Repository for Device entity database operations."""

from __future__ import annotations

from sqlalchemy import select

from signalwatch.models import Device
from signalwatch.repositories.base import Repository


class DeviceRepository(Repository[Device]):
    model_class = Device

    async def get_owned(self, device_id: str, owner_id: str) -> Device | None:
        """Get a device only if it belongs to the given user."""
        stmt = select(Device).where(Device.id == device_id, Device.owner_id == owner_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
