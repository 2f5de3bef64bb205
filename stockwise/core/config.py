"""Configuration management with pydantic-settings.

Provides type-safe configuration with environment variable validation.
Heuristic thresholds live here so operators can tune them per deployment
without touching the analytics code.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Monthly seasonal multipliers, January first
DEFAULT_SEASONAL_FACTORS = [
    0.85,
    0.90,
    0.95,
    1.00,
    1.00,
    0.95,
    0.90,
    0.90,
    1.05,
    1.10,
    1.15,
    1.20,
]


class Settings(BaseSettings):
    """Application settings with environment variable validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Database ===
    database_url: str = Field(
        "sqlite:///./stockwise.db",
        description="Database URL for products, sales, clients and notifications",
    )

    # === Logging ===
    log_level: str = Field("INFO", description="Root log level")
    log_file: str | None = Field(None, description="Path to JSON log file (None = stdout only)")

    # === Record defaults ===
    default_alert_threshold: int = Field(5, description="Alert threshold when a product has none")

    # === Stock forecaster ===
    stock_window_days: int = Field(30, description="Trailing window for sales velocity (days)")
    stock_safety_days: int = Field(14, description="Safety stock horizon (days)")
    stock_min_order_qty: int = Field(10, description="Minimum reorder for out-of-stock products")

    # === Profitability ===
    margin_low_pct: float = Field(15.0, description="Margin below this is flagged (%)")
    margin_high_pct: float = Field(40.0, description="Margin above this is highlighted (%)")
    margin_uplift_per_product: float = Field(
        5000.0, description="Estimated monthly uplift per repriced product"
    )

    # === Client segmentation ===
    client_vip_amount: float = Field(500000.0, description="Lifetime amount for VIP status")
    client_active_days: int = Field(30, description="Max days since last order for active")
    client_dormant_days: int = Field(90, description="Days since last order for dormant")
    client_at_risk_min_orders: int = Field(2, description="At-risk needs strictly more orders")
    client_dormant_min_count: int = Field(5, description="Dormant insight needs more clients")
    client_reactivation_value: float = Field(
        25000.0, description="Estimated value per reactivated client"
    )

    # === Sales trend ===
    trend_min_sales: int = Field(5, description="Minimum sales before trend analysis")
    trend_window: int = Field(10, description="Sales per comparison window")
    trend_alert_pct: float = Field(10.0, description="Growth beyond this emits an insight (%)")
    trend_high_pct: float = Field(20.0, description="Growth beyond this is high impact (%)")

    # === Demand / revenue forecast ===
    forecast_demand_days: int = Field(30, description="Demand forecast horizon (days)")
    forecast_default_daily_demand: float = Field(10.0, description="Demand without history")
    forecast_noise: float = Field(0.075, description="Half-width of multiplicative noise")
    forecast_revenue_months: int = Field(12, description="Revenue forecast horizon (months)")
    forecast_default_monthly_revenue: float = Field(
        500000.0, description="Monthly revenue without history"
    )
    forecast_default_growth: float = Field(0.05, description="Growth rate without history")
    forecast_growth_min: float = Field(-0.10, description="Lower clamp for growth rate")
    forecast_growth_max: float = Field(0.20, description="Upper clamp for growth rate")
    forecast_seasonal_factors: list[float] = Field(
        default_factory=lambda: list(DEFAULT_SEASONAL_FACTORS),
        description="Seasonal multiplier per calendar month (JSON list of 12)",
    )

    # === Smart alerts ===
    alert_overstock_multiplier: float = Field(3.0, description="Overstock above N x threshold")
    alert_week_change_pct: float = Field(20.0, description="Week-over-week sales swing (%)")
    alert_vip_share_pct: float = Field(50.0, description="VIP revenue share for info alert (%)")
    alert_vip_top_fraction: float = Field(0.1, description="Share of clients counted as VIP")

    # === Catalog advisor ===
    catalog_min_order_value: float = Field(50.0, description="Average basket below this is low")
    catalog_products_per_category: float = Field(
        10.0, description="Products per category above which to diversify"
    )

    # === Reports ===
    report_expected_markup: float = Field(1.4, description="Expected sell/buy price ratio")
    report_price_deviation: float = Field(
        0.3, description="Relative gap to the expected price flagged as anomaly"
    )
    report_stock_multiplier: float = Field(
        5.0, description="Stock above N x threshold is anomalous"
    )
    report_low_margin_pct: float = Field(20.0, description="Margin (%) counted as low in reports")
    report_reactivation_days: int = Field(60, description="Days without order before win-back")

    # === Notifications ===
    notification_types: str = Field(
        "critical,warning", description="Comma-separated alert types persisted as notifications"
    )

    @field_validator("forecast_seasonal_factors")
    @classmethod
    def _twelve_months(cls, value: list[float]) -> list[float]:
        if len(value) != 12:
            raise ValueError("forecast_seasonal_factors must have exactly 12 entries")
        return value

    @property
    def persisted_notification_types(self) -> set[str]:
        """Get set of alert types stored in the notification center."""
        return {t.strip() for t in self.notification_types.split(",") if t.strip()}


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Raises:
        RuntimeError: If an environment variable holds an invalid value.

    """
    try:
        return Settings()
    except ValidationError as e:
        bad_fields = [str(error["loc"][0]).upper() for error in e.errors()]
        error_msg = (
            f"Configuration error: Invalid environment variables: "
            f"{', '.join(bad_fields)}\n"
            f"Please fix them in .env file or in the environment."
        )
        raise RuntimeError(error_msg) from e


__all__ = ["Settings", "get_settings", "DEFAULT_SEASONAL_FACTORS"]
