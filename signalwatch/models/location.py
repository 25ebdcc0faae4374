"""Location model: a fuzzy-deduplicated point on the map."""

from __future__ import annotations

from datetime import UTC, datetime
from uuid import uuid4

from sqlalchemy import DateTime, Float, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from signalwatch.core.database import Base


class Location(Base):
    """A reported point, immutable once created.

    No two locations are closer than the matching radius. This is enforced by
    GeoMatcher at write time, not by a database constraint on raw coordinates.
    """

    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    # Measurement radius reported by the client, in meters
    accuracy: Mapped[float | None] = mapped_column(Float, nullable=True)
    label: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(UTC), nullable=False
    )

    # Supports the bounding-box range query
    __table_args__ = (Index("idx_locations_lat_lon", "latitude", "longitude"),)

    def __repr__(self) -> str:
        return f"<Location(id={self.id!r}, lat={self.latitude}, lon={self.longitude})>"
