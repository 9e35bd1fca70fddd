"""Crop batch records read by the risk engine."""

from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

BatchStatus = Literal["active", "completed"]


class CropBatch(BaseModel):
    """A farmer-owned unit of harvested produce in storage.

    Identity fields are optional at parse time so that the assessment service,
    not the parser, decides whether a batch can be assessed.
    """

    model_config = ConfigDict(frozen=True)

    id: Optional[str] = None
    owner_id: Optional[str] = None
    crop_type: Optional[str] = None
    estimated_weight: float = 0.0
    harvest_date: Optional[date] = None
    storage_location: str = ""
    storage_type: str = ""
    status: BatchStatus = "active"
    moisture_level: Optional[float] = Field(default=None, description="Grain moisture, % w/w")
    temperature_level: Optional[float] = Field(default=None, description="Storage temperature, °C")
    loss_events: int = 0
    intervention_success_rate: float = 0.0
    created_at: Optional[datetime] = None

    @property
    def is_active(self) -> bool:
        return self.status == "active"


__all__ = ["CropBatch", "BatchStatus"]
