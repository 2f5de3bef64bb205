"""Dashboard API endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from stockwise.services.insights import dashboard
from stockwise.web.deps import Provider
from stockwise.web.schemas import DashboardDTO

router = APIRouter()


@router.get("/metrics", response_model=DashboardDTO)
def get_dashboard_metrics(provider: Provider) -> DashboardDTO:
    """Get performance score, smart metric cards and stock breakdown."""
    return DashboardDTO.model_validate(dashboard(provider))
