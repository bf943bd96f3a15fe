"""Schemas exposed by the load board and lifecycle endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from dispatch.domain.entities import LoadStatus


class LoadCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    pickup_location: str = Field(..., min_length=1, max_length=255)
    dropoff_location: str = Field(..., min_length=1, max_length=255)
    pickup_date: datetime | None = None
    weight_lbs: float = Field(0.0, ge=0)
    description: str | None = Field(None, max_length=1000)
    cargo_type: str | None = Field(None, max_length=100)
    pickup_latitude: float | None = Field(None, ge=-90, le=90)
    pickup_longitude: float | None = Field(None, ge=-180, le=180)
    dropoff_latitude: float | None = Field(None, ge=-90, le=90)
    dropoff_longitude: float | None = Field(None, ge=-180, le=180)


class LoadRead(BaseModel):
    id: int
    customer_id: int
    title: str
    status: LoadStatus
    pickup_location: str
    dropoff_location: str
    pickup_date: datetime | None
    weight_lbs: float
    description: str | None
    cargo_type: str | None
    pickup_latitude: float | None
    pickup_longitude: float | None
    dropoff_latitude: float | None
    dropoff_longitude: float | None
    assigned_driver_id: int | None
    estimated_minutes: int | None
    delivery_sequence: int | None
    created_at: datetime | None
    accepted_at: datetime | None
    picked_up_at: datetime | None
    delivered_at: datetime | None
    completed_at: datetime | None

    model_config = ConfigDict(from_attributes=True)


class AcceptLoadRequest(BaseModel):
    estimated_minutes: int | None = Field(
        None, ge=0, description="Driver's estimate; the configured default applies when omitted"
    )


class CancelLoadRequest(BaseModel):
    reason: str | None = Field(None, max_length=500)


class EtaUpdateRequest(BaseModel):
    estimated_minutes: int = Field(..., ge=0)


class TransitionResponse(BaseModel):
    message: str


class DeliverySequenceItem(BaseModel):
    load_id: int
    sequence: int = Field(..., ge=0)


class DeliverySequenceRequest(BaseModel):
    load_sequences: list[DeliverySequenceItem] = Field(..., min_length=1)

    def as_mapping(self) -> dict[int, int]:
        return {item.load_id: item.sequence for item in self.load_sequences}


__all__ = [
    "AcceptLoadRequest",
    "CancelLoadRequest",
    "DeliverySequenceItem",
    "DeliverySequenceRequest",
    "EtaUpdateRequest",
    "LoadCreate",
    "LoadRead",
    "TransitionResponse",
]
