"""Alert model for detected connectivity anomalies.

Lifecycle:
    PENDING -> CONFIRMED   (user confirms, owner is notified)
    PENDING -> DISMISSED   (user dismisses, nothing is sent)

Alerts are only created under the manual mechanism, already in PENDING.
Both transitions stamp ``resolved_at`` and are final.
"""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from signalwatch.core.database import Base
from signalwatch.models.enums import AlertMechanism, AlertStatus, AlertType


class Alert(Base):
    __tablename__ = "alerts"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    device_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("devices.id", ondelete="SET NULL"), nullable=True
    )
    # The triggering sample is referenced, not owned
    sample_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("connectivity_samples.id", ondelete="SET NULL"), nullable=True
    )
    type: Mapped[AlertType] = mapped_column(Enum(AlertType, name="alert_type"), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[AlertStatus] = mapped_column(
        Enum(AlertStatus, name="alert_status"),
        nullable=False,
        default=AlertStatus.PENDING,
    )
    mechanism: Mapped[AlertMechanism] = mapped_column(
        Enum(AlertMechanism, name="alert_mechanism"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_alerts_user_id", "user_id"),
        Index("idx_alerts_status", "status"),
    )

    def __repr__(self) -> str:
        return (
            f"<Alert(id={self.id!r}, user_id={self.user_id!r}, "
            f"type={self.type.value!r}, status={self.status.value!r})>"
        )
