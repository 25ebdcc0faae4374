"""Generic Repository base class for database access abstraction.

This module provides a type-safe, async-first repository pattern implementation
that works with SQLAlchemy 2.0 models. Model-specific repositories extend it
with their own queries.

Example:
    from signalwatch.repositories import Repository
    from signalwatch.models import Device

    class DeviceRepository(Repository[Device]):
        model_class = Device

        async def get_owned(self, device_id: str, owner_id: str) -> Device | None:
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Generic, TypeVar

from sqlalchemy import func, select

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from signalwatch.core.database import Base

T = TypeVar("T", bound="Base")


class Repository(Generic[T]):  # noqa: UP046
    """Generic repository base class providing common CRUD operations.

    Attributes:
        model_class: Class attribute that must be set to the SQLAlchemy model class.
        session: The async database session used for all operations.

    Example:
        async with get_session() as session:
            repo = DeviceRepository(session)
            device = await repo.get_by_id("device-uuid")
    """

    model_class: type[T]

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository with a database session.

        Args:
            session: An async SQLAlchemy session, usually from get_db() or get_session().
        """
        self.session = session

    async def get_by_id(self, entity_id: Any) -> T | None:
        """Retrieve an entity by its primary key.

        Returns:
            The entity if found, None otherwise.
        """
        return await self.session.get(self.model_class, entity_id)

    async def create(self, entity: T) -> T:
        """Persist a new entity.

        The entity is flushed, not committed, so client-side defaults (ids,
        timestamps) are populated while the surrounding transaction stays open.
        Commit happens when the session context exits or when the caller
        commits explicitly.
        """
        self.session.add(entity)
        await self.session.flush()
        return entity

    async def update(self, entity: T) -> T:
        """Flush pending changes on an entity already attached to the session."""
        await self.session.flush()
        return entity

    async def delete(self, entity: T) -> None:
        """Delete an entity from the database.

        Cascade behaviour is defined by the model's foreign keys.
        """
        await self.session.delete(entity)
        await self.session.flush()

    async def count(self) -> int:
        """Count the total number of entities of this type."""
        stmt = select(func.count()).select_from(self.model_class)
        result = await self.session.execute(stmt)
        return result.scalar_one()
