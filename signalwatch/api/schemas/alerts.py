"""Pydantic schemas for alerts API endpoints."""

from datetime import datetime

from pydantic import ConfigDict, Field

from signalwatch.api.schemas.common import CamelModel
from signalwatch.models.enums import AlertMechanism, AlertStatus, AlertType


class AlertResponse(CamelModel):
    """Schema for alert response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440001",
                "userId": "550e8400-e29b-41d4-a716-446655440000",
                "deviceId": "550e8400-e29b-41d4-a716-446655440002",
                "sampleId": "550e8400-e29b-41d4-a716-446655440003",
                "type": "LOW_SIGNAL",
                "message": "Low signal detected on your device",
                "status": "PENDING",
                "mechanism": "manual_alert",
                "createdAt": "2026-01-12T12:00:00Z",
                "resolvedAt": None,
            }
        },
    )

    id: str = Field(..., description="Alert UUID")
    user_id: str = Field(..., description="Owning user UUID")
    device_id: str | None = Field(None, description="Originating device UUID")
    sample_id: str | None = Field(None, description="Triggering connectivity sample UUID")
    type: AlertType = Field(..., description="Anomaly type")
    message: str = Field(..., description="Human-readable message")
    status: AlertStatus = Field(..., description="Lifecycle status")
    mechanism: AlertMechanism = Field(..., description="Alert mechanism that produced the alert")
    created_at: datetime = Field(..., description="Creation timestamp")
    resolved_at: datetime | None = Field(None, description="Confirmation or dismissal timestamp")


class AlertActionResponse(CamelModel):
    """Result of confirming or dismissing an alert."""

    message: str = Field(..., description="Outcome of the action")
    alert: AlertResponse


class AlertListResponse(CamelModel):
    alerts: list[AlertResponse]
    count: int = Field(..., description="Number of alerts returned")
