"""Device model: a client reporting telemetry on behalf of a user."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import DateTime, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signalwatch.core.database import Base

if TYPE_CHECKING:
    from signalwatch.models.user import User


class Device(Base):
    """A physical or software client owned by a user.

    The owner reference is nullable: removing a user keeps the device row
    (and its telemetry) with ``owner_id`` set to NULL.
    """

    __tablename__ = "devices"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    owner_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    platform: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_pinged: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    owner: Mapped[User | None] = relationship("User", back_populates="devices")

    __table_args__ = (Index("idx_devices_owner_id", "owner_id"),)

    def __repr__(self) -> str:
        return f"<Device(id={self.id!r}, owner_id={self.owner_id!r})>"
