"""Analytics insight API endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from stockwise.services.insights import (
    COMPONENTS,
    Snapshot,
    client_segments,
    rank_insights,
    run_analysis,
    run_component,
)
from stockwise.web.deps import AppSettings, Now, Provider
from stockwise.web.schemas import ClientSegmentsDTO, InsightDTO

router = APIRouter()


@router.get("", response_model=list[InsightDTO])
def get_insights(provider: Provider, now: Now, settings: AppSettings) -> list[InsightDTO]:
    """Get all assistant insights, ranked by impact and confidence."""
    insights = run_analysis(provider, now, settings)
    return [InsightDTO(**i.to_dict()) for i in insights]


@router.get("/segments", response_model=ClientSegmentsDTO)
def get_client_segments(provider: Provider, now: Now, settings: AppSettings) -> ClientSegmentsDTO:
    """Get client segment membership by client name."""
    segments = client_segments(provider, now, settings)
    return ClientSegmentsDTO(
        counts=segments.counts(),
        vip=[c.name for c in segments.vip],
        active=[c.name for c in segments.active],
        dormant=[c.name for c in segments.dormant],
        at_risk=[c.name for c in segments.at_risk],
    )


@router.get("/{component}", response_model=list[InsightDTO])
def get_component_insights(
    component: str, provider: Provider, now: Now, settings: AppSettings
) -> list[InsightDTO]:
    """Get insights of a single component.

    Available components: stock, profitability, clients, sales_trend, catalog, reports, alerts.
    """
    if component not in COMPONENTS:
        raise HTTPException(status_code=404, detail=f"Unknown component: {component}")

    insights = run_component(component, Snapshot.load(provider), now, settings)
    if component != "alerts":
        insights = rank_insights(insights)
    return [InsightDTO(**i.to_dict()) for i in insights]
