"""ConnectivitySample and CellularSignalReading models.

A sample is one point-in-time observation from a device. It references, but
does not own, an optional Location and an optional CellularSignalReading.
"""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import Boolean, DateTime, Enum, ForeignKey, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from signalwatch.core.database import Base
from signalwatch.models.device import Device
from signalwatch.models.enums import ConnectivityType
from signalwatch.models.location import Location


class CellularSignalReading(Base):
    """Mobile network details captured with a sample. Immutable after creation."""

    __tablename__ = "cellular_signal_readings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    carrier: Mapped[str | None] = mapped_column(String(128), nullable=True)
    # Network generation, e.g. "4G" or "5G"
    network_type: Mapped[str | None] = mapped_column(String(16), nullable=True)
    # Coarse level 0-4
    signal_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    signal_dbm: Mapped[int | None] = mapped_column(Integer, nullable=True)
    asu_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    mcc: Mapped[str | None] = mapped_column(String(8), nullable=True)
    mnc: Mapped[str | None] = mapped_column(String(8), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    def __repr__(self) -> str:
        return (
            f"<CellularSignalReading(id={self.id!r}, carrier={self.carrier!r}, "
            f"dbm={self.signal_dbm}, level={self.signal_level})>"
        )


class ConnectivitySample(Base):
    __tablename__ = "connectivity_samples"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    device_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("devices.id", ondelete="CASCADE"), nullable=False
    )
    connectivity_type: Mapped[ConnectivityType] = mapped_column(
        Enum(ConnectivityType, name="connectivity_type"), nullable=False
    )
    is_connected: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
    wifi_ssid: Mapped[str | None] = mapped_column(String(255), nullable=True)
    wifi_bssid: Mapped[str | None] = mapped_column(String(64), nullable=True)
    location_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("locations.id", ondelete="SET NULL"), nullable=True
    )
    reading_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("cellular_signal_readings.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    device: Mapped[Device] = relationship("Device")
    location: Mapped[Location | None] = relationship("Location")
    reading: Mapped[CellularSignalReading | None] = relationship("CellularSignalReading")

    __table_args__ = (
        Index("idx_connectivity_samples_device_id", "device_id"),
        Index("idx_connectivity_samples_location_id", "location_id"),
    )

    def __repr__(self) -> str:
        return (
            f"<ConnectivitySample(id={self.id!r}, device_id={self.device_id!r}, "
            f"type={self.connectivity_type.value!r}, connected={self.is_connected})>"
        )
