"""User, AlertMode and EmergencyContact models.

Users are managed by the account service; this backend reads them to pick an
alert mechanism and a notification recipient.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING
from uuid import uuid4

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signalwatch.core.database import Base
from signalwatch.models.enums import ContactType, UserRole

if TYPE_CHECKING:
    from signalwatch.models.device import Device


class AlertMode(Base):
    """A named alerting policy a user can select.

    Only the ``key`` matters to the alert dispatcher: ``auto_alert`` and
    ``manual_alert`` are understood, any other key behaves as unconfigured.
    """

    __tablename__ = "alert_modes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    key: Mapped[str] = mapped_column(String(64), unique=True, nullable=False)
    label: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        return f"<AlertMode(id={self.id!r}, key={self.key!r})>"


class User(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    role: Mapped[UserRole] = mapped_column(
        Enum(UserRole, name="user_role"), nullable=False, default=UserRole.USER
    )
    alert_mode_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("alert_modes.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    alert_mode: Mapped[AlertMode | None] = relationship("AlertMode")
    contacts: Mapped[list[EmergencyContact]] = relationship(
        "EmergencyContact", back_populates="user", cascade="all, delete-orphan"
    )
    devices: Mapped[list[Device]] = relationship("Device", back_populates="owner")

    def __repr__(self) -> str:
        return f"<User(id={self.id!r}, email={self.email!r}, role={self.role.value!r})>"


class EmergencyContact(Base):
    """A person the user wants notified, tagged EMERGENCY or FAVORITE."""

    __tablename__ = "contacts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    type: Mapped[ContactType] = mapped_column(
        Enum(ContactType, name="contact_type"), nullable=False, default=ContactType.FAVORITE
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    user: Mapped[User] = relationship("User", back_populates="contacts")

    __table_args__ = (Index("idx_contacts_user_type", "user_id", "type"),)

    def __repr__(self) -> str:
        return f"<EmergencyContact(id={self.id!r}, user_id={self.user_id!r}, type={self.type.value!r})>"
