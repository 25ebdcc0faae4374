"""Repository for User entity and the user's alerting preferences."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import selectinload

from signalwatch.models import ContactType, EmergencyContact, User
from signalwatch.repositories.base import Repository


class UserRepository(Repository[User]):
    model_class = User

    async def get_with_alert_mode(self, user_id: str) -> User | None:
        """Get a user with the selected AlertMode eagerly loaded."""
        stmt = select(User).where(User.id == user_id).options(selectinload(User.alert_mode))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_first_emergency_contact(self, user_id: str) -> EmergencyContact | None:
        """Get the user's earliest EMERGENCY contact, if any."""
        stmt = (
            select(EmergencyContact)
            .where(
                EmergencyContact.user_id == user_id,
                EmergencyContact.type == ContactType.EMERGENCY,
            )
            .order_by(EmergencyContact.created_at.asc(), EmergencyContact.id.asc())
            .limit(1)
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()
