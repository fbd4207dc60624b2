"""
BizScore forecast

Projects demand and competition saturation 6 and 12 months ahead and
rescores both horizons with the BizScore engine.
"""

import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional

from .category_intelligence import annual_growth_rate
from .models import MarketSignal, TrendDirection, require_finite, round_half_up, to_plain_dict
from .scoring import BizScoreBreakdown, score

logger = logging.getLogger(__name__)

# Competition grows slower than demand
COMPETITION_GROWTH_SHARE_6M = 0.3
COMPETITION_GROWTH_SHARE_12M = 0.6

TREND_THRESHOLD = 5


@dataclass(frozen=True)
class BizScoreForecast:
    growth_rate: float  # annual
    demand_6m: int
    demand_12m: int
    competition_6m: int
    competition_12m: int
    score_6m: BizScoreBreakdown
    score_12m: BizScoreBreakdown
    trend: TrendDirection

    @property
    def biz_score_6m(self) -> int:
        return self.score_6m.overall

    @property
    def biz_score_12m(self) -> int:
        return self.score_12m.overall

    def to_dict(self) -> Dict:
        return to_plain_dict(self)


def trend_direction(score_today: float, score_12m: float) -> TrendDirection:
    diff = score_12m - score_today
    if diff > TREND_THRESHOLD:
        return TrendDirection.GROWING
    if diff < -TREND_THRESHOLD:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


def forecast_bizscores(
    market: MarketSignal,
    category=None,
    score_today: Optional[float] = None,
    forecast_growth: Optional[float] = None,
    category_ease_score: Optional[float] = None,
) -> BizScoreForecast:
    """
    Forecast BizScores at 6 and 12 months.

    The annual growth rate is forecast_growth - 1 when a growth ratio is
    given, otherwise the category's published rate.

    Args:
        market: Current market inputs
        category: Category id or business type
        score_today: Current overall BizScore, recomputed when omitted
        forecast_growth: Growth ratio over 12 months
        category_ease_score: Passed through to the BizScore engine

    Returns:
        BizScoreForecast
    """
    if forecast_growth is None:
        rate = annual_growth_rate(category)
    else:
        rate = require_finite(forecast_growth, "forecast_growth") - 1

    if score_today is None:
        score_today = score(market, category, forecast_growth, None, category_ease_score).overall

    density_today = market.density_score

    def horizon(demand_share: float, competition_share: float):
        demand = min(100, round_half_up(market.demand_index * (1 + rate * demand_share)))
        competition = min(100, round_half_up(density_today * (1 + rate * competition_share)))
        future = replace(market, demand_index=max(0, demand), competition_density_score=max(0, competition))
        return demand, competition, score(future, category, forecast_growth, competition, category_ease_score)

    demand_6m, competition_6m, score_6m = horizon(0.5, COMPETITION_GROWTH_SHARE_6M)
    demand_12m, competition_12m, score_12m = horizon(1.0, COMPETITION_GROWTH_SHARE_12M)

    trend = trend_direction(score_today, score_12m.overall)
    logger.debug(f"Forecast {score_today} -> {score_6m.overall} (6M) -> {score_12m.overall} (12M), {trend.value}")

    return BizScoreForecast(
        growth_rate=rate,
        demand_6m=demand_6m,
        demand_12m=demand_12m,
        competition_6m=competition_6m,
        competition_12m=competition_12m,
        score_6m=score_6m,
        score_12m=score_12m,
        trend=trend,
    )
