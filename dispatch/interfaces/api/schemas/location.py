"""Schemas for driver position reports."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class LocationReport(BaseModel):
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    notes: str | None = Field(None, max_length=500)


class LocationRead(BaseModel):
    latitude: float
    longitude: float
    reported_at: datetime

    model_config = ConfigDict(from_attributes=True)


__all__ = ["LocationRead", "LocationReport"]
