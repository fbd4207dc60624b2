"""
Feasibility report builder

Runs the full pipeline for one location/category pairing:
- BizScore today and forecast at 6 / 12 months
- SWOT analysis and financial projection
- Risk index, failure prediction and recommendation

Reports are immutable and carry a deterministic id derived from their
inputs and the as_of timestamp.
"""

import hashlib
import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

from tools.schema_validation import FeasibilityReportPayload, validate_schema

from risk_engine.failure_prediction import FailurePrediction, predict_business_failure
from risk_engine.recommendation import Recommendation, recommend
from risk_engine.risk_index import RiskBreakdown, generate_risk_index
from risk_engine.swot import SWOTAnalysis, SWOTInputs, generate_swot

from .category_intelligence import annual_growth_rate, profile_for, resolve_category
from .finance import FinancialProjection, format_currency, project
from .forecast import forecast_bizscores
from .models import (
    CompetitionDensity,
    Difficulty,
    MarketSignal,
    StaffingNeeds,
    TrendDirection,
    clamp,
    require_finite,
    round_half_up,
    to_plain_dict,
)
from .scoring import BizScoreBreakdown, economic_score, score

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReportInputs:
    """
    Pre-scored inputs for a feasibility report.

    competition_index defaults to the market signal's saturation score.
    """
    location: str
    category: str
    market: MarketSignal
    category_difficulty: Difficulty
    biz_score_today: int
    biz_score_6m: int
    biz_score_12m: int
    forecast_growth: float
    trend: TrendDirection = TrendDirection.STABLE
    strategic_opportunity_index: float = 0.0
    competition_index: Optional[float] = None
    staffing_needs: StaffingNeeds = StaffingNeeds.MODERATE
    coordinates: Optional[Tuple[float, float]] = None

    def __post_init__(self):
        object.__setattr__(self, "category_difficulty",
                           Difficulty.parse(self.category_difficulty, "category_difficulty"))
        object.__setattr__(self, "trend", TrendDirection.parse(self.trend, "trend"))
        object.__setattr__(self, "staffing_needs", StaffingNeeds.parse(self.staffing_needs, "staffing_needs"))
        for name in ("biz_score_today", "biz_score_6m", "biz_score_12m",
                     "forecast_growth", "strategic_opportunity_index"):
            require_finite(getattr(self, name), name)
        if self.competition_index is None:
            object.__setattr__(self, "competition_index", self.market.density_score)


@dataclass(frozen=True)
class FeasibilityReport:
    id: str
    created_at: datetime
    location: str
    category: str
    category_id: Optional[str]
    market: MarketSignal
    biz_score_today: int
    biz_score_6m: int
    biz_score_12m: int
    forecast_growth: float
    trend: TrendDirection
    strategic_opportunity_index: float
    competition_index: float
    category_difficulty: Difficulty
    swot: SWOTAnalysis
    financials: FinancialProjection
    recommendation: Recommendation
    breakdown: Optional[BizScoreBreakdown] = None
    risk: Optional[RiskBreakdown] = None
    failure: Optional[FailurePrediction] = None
    coordinates: Optional[Tuple[float, float]] = field(default=None, compare=False)

    @property
    def competition_density(self) -> CompetitionDensity:
        return self.market.competition_density

    @property
    def demand_index(self) -> float:
        return self.market.demand_index

    def to_dict(self) -> Dict[str, Any]:
        data = to_plain_dict(self)
        data["financials"]["viability"] = self.financials.viability.value
        return data


def _report_id(inputs: ReportInputs, as_of: datetime) -> str:
    payload = {
        "location": inputs.location,
        "category": inputs.category,
        "market": to_plain_dict(inputs.market),
        "difficulty": inputs.category_difficulty.value,
        "scores": [inputs.biz_score_today, inputs.biz_score_6m, inputs.biz_score_12m],
        "forecast_growth": inputs.forecast_growth,
        "as_of": as_of.isoformat(),
    }
    digest = hashlib.sha256(json.dumps(payload, sort_keys=True).encode("utf-8")).hexdigest()
    return f"report-{digest[:16]}"


def build_feasibility_report(
    inputs: ReportInputs,
    as_of: Optional[datetime] = None,
    breakdown: Optional[BizScoreBreakdown] = None,
) -> FeasibilityReport:
    """
    Build a feasibility report from pre-scored inputs.

    Args:
        inputs: Scores and market inputs for the location
        as_of: Report timestamp, defaults to now (UTC)
        breakdown: BizScore breakdown to attach, when the caller has one

    Returns:
        FeasibilityReport
    """
    as_of = as_of or datetime.now(timezone.utc)
    market = inputs.market

    swot = generate_swot(SWOTInputs(
        demand_index=market.demand_index,
        competition_density=market.competition_density,
        category_difficulty=inputs.category_difficulty,
        forecast_growth=inputs.forecast_growth,
        strategic_opportunity_index=inputs.strategic_opportunity_index,
        biz_score_today=inputs.biz_score_today,
        biz_score_12m=inputs.biz_score_12m,
        population_density=market.population_density,
    ))

    financials = project(
        inputs.category,
        market.demand_index,
        market.competition_density,
        market.population_density,
        inputs.forecast_growth,
    )

    recommendation = recommend(
        inputs.biz_score_today,
        inputs.biz_score_12m,
        market.competition_density,
        inputs.category_difficulty,
        swot,
        financials,
        inputs.forecast_growth,
    )

    risk = generate_risk_index(
        inputs.category,
        market.competition_density,
        inputs.competition_index,
        inputs.category_difficulty,
        financials.setup_cost.min,
        financials.break_even_months,
        financials.profit_margin.min,
        inputs.staffing_needs,
    )

    # Without demographic data the demand index stands in for demographic fit
    demographic_fit = economic_score(market) or market.demand_index
    failure = predict_business_failure(
        inputs.biz_score_today,
        inputs.biz_score_12m,
        market.competition_density,
        financials.viability,
        demand_match=clamp(market.demand_index),
        demographic_fit=demographic_fit,
        break_even_months=financials.break_even_months,
        setup_cost=financials.setup_cost.max,
    )

    category_id = resolve_category(inputs.category)
    report = FeasibilityReport(
        id=_report_id(inputs, as_of),
        created_at=as_of,
        location=inputs.location,
        category=inputs.category,
        category_id=category_id.value if category_id else None,
        market=market,
        biz_score_today=int(inputs.biz_score_today),
        biz_score_6m=int(inputs.biz_score_6m),
        biz_score_12m=int(inputs.biz_score_12m),
        forecast_growth=inputs.forecast_growth,
        trend=inputs.trend,
        strategic_opportunity_index=inputs.strategic_opportunity_index,
        competition_index=inputs.competition_index,
        category_difficulty=inputs.category_difficulty,
        swot=swot,
        financials=financials,
        recommendation=recommendation,
        breakdown=breakdown,
        risk=risk,
        failure=failure,
        coordinates=inputs.coordinates,
    )
    logger.info(
        f"Built report {report.id} for {inputs.category} at {inputs.location}: "
        f"BizScore {report.biz_score_today}, {recommendation.type.value}"
    )
    return report


def analyze_opportunity(
    location: str,
    category: str,
    signal: MarketSignal,
    forecast_growth: Optional[float] = None,
    category_ease_score: Optional[float] = None,
    staffing_needs=StaffingNeeds.MODERATE,
    coordinates: Optional[Tuple[float, float]] = None,
    as_of: Optional[datetime] = None,
) -> FeasibilityReport:
    """
    Score, forecast and assess one location/category pairing end to end.

    Args:
        location: Location name
        category: Business type (e.g. "Cafe") or category id
        signal: Market inputs for the location
        forecast_growth: Growth ratio; scored at the category annual growth rate when omitted
        category_ease_score: Overrides the category profile's ease score
        staffing_needs: Minimal / Moderate / Extensive
        coordinates: Optional (lat, lng)
        as_of: Report timestamp, defaults to now (UTC)

    Returns:
        FeasibilityReport with BizScore breakdown, risk and failure sections
    """
    profile = profile_for(category)
    if forecast_growth is None:
        growth = 1 + annual_growth_rate(category)
    else:
        growth = require_finite(forecast_growth, "forecast_growth")

    breakdown = score(signal, category, forecast_growth, None, category_ease_score)
    outlook = forecast_bizscores(signal, category, breakdown.overall, forecast_growth, category_ease_score)

    inputs = ReportInputs(
        location=location,
        category=category,
        market=signal,
        category_difficulty=profile.difficulty_tier,
        biz_score_today=breakdown.overall,
        biz_score_6m=outlook.biz_score_6m,
        biz_score_12m=outlook.biz_score_12m,
        forecast_growth=growth,
        trend=outlook.trend,
        strategic_opportunity_index=breakdown.strategic_opportunity,
        staffing_needs=staffing_needs,
        coordinates=coordinates,
    )
    return build_feasibility_report(inputs, as_of=as_of, breakdown=breakdown)


QUICK_REPORT_DIFFICULTY = {
    "cafe": Difficulty.MODERATE,
    "salon": Difficulty.MODERATE,
    "restaurant": Difficulty.DIFFICULT,
    "gym": Difficulty.DIFFICULT,
}


def build_quick_report(
    location: str,
    category: str,
    demand_index: float,
    competition_density,
    population_density: float,
    biz_score_today: float,
    coordinates: Optional[Tuple[float, float]] = None,
    as_of: Optional[datetime] = None,
) -> FeasibilityReport:
    """
    Build a report from minimal inputs, deriving forecast and difficulty.

    Growth is 1.2 / 1.1 / 1.05 by BizScore tier (>=70, >=50, else).
    """
    require_finite(biz_score_today, "biz_score_today")
    growth = 1.2 if biz_score_today >= 70 else 1.1 if biz_score_today >= 50 else 1.05
    today = round_half_up(clamp(biz_score_today))

    market = MarketSignal(
        demand_index=demand_index,
        competition_density=competition_density,
        population_density=population_density,
    )
    inputs = ReportInputs(
        location=location,
        category=category,
        market=market,
        category_difficulty=QUICK_REPORT_DIFFICULTY.get(category.strip().lower(), Difficulty.MODERATE),
        biz_score_today=today,
        biz_score_6m=min(100, round_half_up(today * 1.05)),
        biz_score_12m=min(100, round_half_up(today * growth)),
        forecast_growth=growth,
        trend=TrendDirection.GROWING if growth > 1.1 else TrendDirection.STABLE,
        strategic_opportunity_index=clamp(demand_index),
        competition_index=clamp(100 - demand_index),
        coordinates=coordinates,
    )
    return build_feasibility_report(inputs, as_of=as_of)


def export_report_json(report: FeasibilityReport, indent: int = 2) -> str:
    """Serialize a report to JSON after validating it against FeasibilityReportPayload"""
    data = report.to_dict()
    validate_schema(data, FeasibilityReportPayload)
    return json.dumps(data, indent=indent)


def create_report_summary(report: FeasibilityReport) -> str:
    """Plain-text summary suitable for sharing"""
    fin = report.financials
    rec = report.recommendation

    if fin.reaches_break_even:
        break_even = f"{fin.break_even_months} months"
    else:
        break_even = f"Not within {fin.break_even_months} months"

    lines = [
        "BizScore Feasibility Report",
        "===========================",
        f"Location: {report.location}",
        f"Category: {report.category}",
        f"Generated: {report.created_at.strftime('%Y-%m-%d %H:%M %Z').strip()}",
        "",
        f"BizScore: {report.biz_score_today} (Today) -> {report.biz_score_12m} (12M)",
        f"Recommendation: {rec.label}",
        f"Risk Level: {rec.risk_level.value}",
        "",
        "Financial Highlights:",
        f"- Setup Cost: {format_currency(fin.setup_cost.min, fin.currency)} - "
        f"{format_currency(fin.setup_cost.max, fin.currency)}",
        f"- Break-even: {break_even}",
        f"- Profit Margin: {fin.profit_margin.min:.0f}-{fin.profit_margin.max:.0f}%",
        "",
        f"Key Strengths ({len(report.swot.strengths)}):",
    ]
    lines += [f"{i}. {s}" for i, s in enumerate(report.swot.strengths, 1)]
    lines += ["", f"Key Threats ({len(report.swot.threats)}):"]
    lines += [f"{i}. {t}" for i, t in enumerate(report.swot.threats, 1)]
    lines += ["", "Action Steps:"]
    lines += [f"{i}. {a}" for i, a in enumerate(rec.action_steps, 1)]
    return "\n".join(lines)
