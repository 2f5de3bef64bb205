"""Sales trend detection: recent vs. prior window growth and best weekday."""

from __future__ import annotations

from stockwise.domain.records import Insight, Sale

MIN_SALES = 5
TREND_WINDOW = 10
ALERT_PCT = 10.0
HIGH_PCT = 20.0

WEEKDAY_NAMES = ("lundi", "mardi", "mercredi", "jeudi", "vendredi", "samedi", "dimanche")


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def sales_growth(sales: list[Sale], window: int = TREND_WINDOW) -> float:
    """Growth (%) of the mean sale total, last window vs. the one before.

    Sales must be sorted by date. Without a prior window the growth is 0.

    Examples:
        With 10 sales of 50 followed by 10 sales of 100 the growth is 100.0.
    """
    recent = [s.total for s in sales[-window:]]
    older = [s.total for s in sales[-2 * window : -window]]

    recent_avg = _mean(recent)
    older_avg = _mean(older) if older else recent_avg

    if older_avg == 0:
        return 0.0
    return (recent_avg - older_avg) / older_avg * 100


def revenue_by_weekday(sales: list[Sale]) -> dict[str, float]:
    """Sum sale totals per weekday name, Monday first."""
    totals = dict.fromkeys(WEEKDAY_NAMES, 0.0)
    for sale in sales:
        totals[WEEKDAY_NAMES[sale.date.weekday()]] += sale.total
    return totals


def analyze_sales_trend(
    sales: list[Sale],
    *,
    min_sales: int = MIN_SALES,
    window: int = TREND_WINDOW,
    alert_pct: float = ALERT_PCT,
    high_pct: float = HIGH_PCT,
) -> list[Insight]:
    """Emit growth/decline and best-weekday insights.

    Nothing is produced below ``min_sales`` sales.
    """
    if len(sales) < min_sales:
        return []

    ordered = sorted(sales, key=lambda s: s.date)
    insights: list[Insight] = []

    growth = sales_growth(ordered, window)
    if abs(growth) > alert_pct:
        rising = growth > 0
        insights.append(
            Insight(
                id="sales-trend",
                type="prediction" if rising else "alert",
                title="Ventes en progression" if rising else "Ventes en recul",
                description=(
                    f"Le panier moyen des {window} dernières ventes est "
                    f"{'en hausse' if rising else 'en baisse'} de {abs(growth):.1f}% "
                    f"par rapport aux {window} précédentes."
                ),
                confidence=0.82,
                impact="high" if abs(growth) > high_pct else "medium",
                actionable=not rising,
                data={"growth": round(growth, 2)},
            )
        )

    by_day = revenue_by_weekday(ordered)
    best_day = max(by_day, key=by_day.__getitem__)
    insights.append(
        Insight(
            id="sales-best-day",
            type="recommendation",
            title=f"Meilleur jour de vente : {best_day}",
            description=(
                f"Le {best_day} génère le plus de chiffre d'affaires "
                f"({by_day[best_day]:,.0f}). Planifiez vos promotions ce jour-là."
            ),
            confidence=0.75,
            impact="low",
            actionable=True,
            data={"bestDay": best_day, "revenue": by_day[best_day], "byWeekday": by_day},
        )
    )

    return insights
