"""Demand and revenue forecast API endpoints."""

from __future__ import annotations

import random

from fastapi import APIRouter, Query

from stockwise.services.insights import demand_forecast, revenue_forecast
from stockwise.web.deps import AppSettings, Now, Provider
from stockwise.web.schemas import ForecastPointDTO

router = APIRouter()


@router.get("/demand", response_model=list[ForecastPointDTO])
def get_demand_forecast(
    provider: Provider,
    now: Now,
    settings: AppSettings,
    seed: int | None = Query(None, description="Seed for reproducible noise"),
) -> list[ForecastPointDTO]:
    """Get daily unit demand forecast for the coming days."""
    rng = random.Random(seed) if seed is not None else None
    points = demand_forecast(provider, now, rng, settings)
    return [ForecastPointDTO.model_validate(p) for p in points]


@router.get("/revenue", response_model=list[ForecastPointDTO])
def get_revenue_forecast(provider: Provider, now: Now, settings: AppSettings) -> list[ForecastPointDTO]:
    """Get monthly revenue forecast for the coming months."""
    points = revenue_forecast(provider, now, settings)
    return [ForecastPointDTO.model_validate(p) for p in points]
