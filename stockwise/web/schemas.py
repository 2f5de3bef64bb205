"""Pydantic schemas for API responses."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


# Insight schemas
class InsightDTO(BaseModel):
    """Advisory record produced by an analytics component."""

    id: str = Field(..., description="Stable id used for de-duplication")
    type: str = Field(..., description="prediction|recommendation|alert|optimization|critical|...")
    title: str
    description: str
    confidence: float = Field(..., ge=0, le=1)
    impact: str = Field(..., description="high|medium|low")
    actionable: bool
    data: dict[str, Any] = Field(default_factory=dict)
    category: str | None = Field(None, description="stock|sales|clients|margin (alerts only)")
    action: str | None = None

    model_config = ConfigDict(from_attributes=True)


class ClientSegmentsDTO(BaseModel):
    """Client segment membership (segments may overlap)."""

    counts: dict[str, int]
    vip: list[str]
    active: list[str]
    dormant: list[str]
    at_risk: list[str]


# Forecast schemas
class ForecastPointDTO(BaseModel):
    """One forecast point."""

    label: str
    date: date
    value: float
    confidence: float | None = None
    growth: float | None = None

    model_config = ConfigDict(from_attributes=True)


# Dashboard schemas
class SmartMetricDTO(BaseModel):
    """Headline dashboard card."""

    id: str
    title: str
    value: float
    trend: float
    prediction: str
    confidence: float
    insight: str

    model_config = ConfigDict(from_attributes=True)


class DashboardDTO(BaseModel):
    """Performance score with metric cards."""

    performance_score: int
    rating: str
    metrics: list[SmartMetricDTO]
    stock_breakdown: dict[str, int]

    model_config = ConfigDict(from_attributes=True)


# Notification schemas
class NotificationDTO(BaseModel):
    """Persisted alert in the notification center."""

    id: int
    alert_id: str
    title: str
    description: str
    type: str
    category: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)
    is_read: bool
    created_at: datetime
    read_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class PublishResult(BaseModel):
    """Outcome of publishing the current alerts."""

    alerts: int = Field(..., description="Alerts generated from the snapshot")
    created: int = Field(..., description="Notifications persisted")
    deduplicated: bool = Field(..., description="True if the alert set was unchanged")
