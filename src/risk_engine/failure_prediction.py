"""
Business failure prediction

Accumulates failure risk across independent contributions (BizScore tier,
12-month trend, competition, financial viability, break-even, market fit),
capped at 100. Each warning carries a WarningKind; survival recommendations
are chosen by kind.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Tuple

from utils.config import Config

from opportunity_engine.finance import FinancialViability
from opportunity_engine.models import (
    CompetitionDensity,
    RiskLevel,
    band_for,
    require_finite,
    to_plain_dict,
)

logger = logging.getLogger(__name__)


class WarningKind(str, Enum):
    LOW_BIZSCORE = "low_bizscore"
    CHALLENGING_BIZSCORE = "challenging_bizscore"
    DECLINING_TREND = "declining_trend"
    OVERSATURATION = "oversaturation"
    WEAK_FINANCIALS = "weak_financials"
    LONG_BREAK_EVEN = "long_break_even"
    POOR_MARKET_FIT = "poor_market_fit"
    HIGH_CAPITAL = "high_capital"


class RecommendationGroup(str, Enum):
    COMPETITION = "competition"
    FINANCIAL = "financial"
    MARKET = "market"


WARNING_GROUPS = {
    WarningKind.LOW_BIZSCORE: RecommendationGroup.MARKET,
    WarningKind.CHALLENGING_BIZSCORE: RecommendationGroup.MARKET,
    WarningKind.DECLINING_TREND: RecommendationGroup.MARKET,
    WarningKind.POOR_MARKET_FIT: RecommendationGroup.MARKET,
    WarningKind.OVERSATURATION: RecommendationGroup.COMPETITION,
    WarningKind.WEAK_FINANCIALS: RecommendationGroup.FINANCIAL,
    WarningKind.HIGH_CAPITAL: RecommendationGroup.FINANCIAL,
}

GROUP_RECOMMENDATIONS = {
    RecommendationGroup.COMPETITION: [
        "Develop strong differentiation strategy before launch",
        "Consider alternative locations with lower competition",
    ],
    RecommendationGroup.FINANCIAL: [
        "Reduce initial investment through leasing and outsourcing",
        "Focus on high-margin products/services initially",
    ],
    RecommendationGroup.MARKET: [
        "Conduct customer validation before full launch",
        "Pivot positioning to better match local demographics",
    ],
}

COMPETITION_FAILURE_RISK = {
    CompetitionDensity.LOW: 5,
    CompetitionDensity.BALANCED: 12,
    CompetitionDensity.HIGH: 18,
    CompetitionDensity.OVERSATURATED: 25,
}

VIABILITY_FAILURE_RISK = {
    FinancialViability.POOR: 25,
    FinancialViability.FAIR: 15,
    FinancialViability.GOOD: 8,
    FinancialViability.EXCELLENT: 3,
}

HIGH_CAPITAL_SETUP_COST = 3_000_000


@dataclass(frozen=True)
class FailureWarning:
    kind: WarningKind
    message: str


@dataclass(frozen=True)
class FailurePrediction:
    failure_risk: int  # 0-100, higher = more likely to fail
    failure_probability: RiskLevel
    time_to_failure: str
    warnings: Tuple[FailureWarning, ...]
    protective_factors: Tuple[str, ...]
    survival_recommendations: Tuple[str, ...]
    confidence_level: int

    @property
    def critical_warnings(self) -> List[str]:
        return [w.message for w in self.warnings]

    def to_dict(self) -> Dict:
        return to_plain_dict(self)


def failure_band(failure_risk: float) -> Tuple[RiskLevel, str]:
    """Probability label and time-to-failure label for a failure risk"""
    very_high, high, moderate, low = Config.FAILURE_BREAKPOINTS
    return band_for(failure_risk, [
        (very_high, (RiskLevel.VERY_HIGH, "Within 6 months")),
        (high, (RiskLevel.HIGH, "6-12 months")),
        (moderate, (RiskLevel.MODERATE, "12-24 months")),
        (low, (RiskLevel.LOW, "24+ months")),
    ], (RiskLevel.VERY_LOW, "N/A - Strong survival indicators"))


def predict_business_failure(
    biz_score_today: float,
    biz_score_12m: float,
    competition_density,
    financial_viability,
    demand_match: float,
    demographic_fit: float,
    break_even_months: float,
    setup_cost: float,
) -> FailurePrediction:
    """
    Estimate the probability of business failure.

    Args:
        biz_score_today: Current BizScore
        biz_score_12m: Forecast BizScore in 12 months
        competition_density: Competition band
        financial_viability: Excellent / Good / Fair / Poor
        demand_match: How well demand matches the idea, 0-100
        demographic_fit: How well local demographics fit the idea, 0-100
        break_even_months: Break-even months (36 is the not-profitable sentinel)
        setup_cost: Setup cost estimate

    Returns:
        FailurePrediction
    """
    density = CompetitionDensity.parse(competition_density, "competition_density")
    viability = FinancialViability.parse(financial_viability, "financial_viability")
    for name, value in (("biz_score_today", biz_score_today), ("biz_score_12m", biz_score_12m),
                        ("demand_match", demand_match), ("demographic_fit", demographic_fit),
                        ("break_even_months", break_even_months), ("setup_cost", setup_cost)):
        require_finite(value, name)

    risk = 0
    warnings: List[FailureWarning] = []
    protective: List[str] = []

    # BizScore tier
    if biz_score_today < 40:
        risk += 25
        warnings.append(FailureWarning(WarningKind.LOW_BIZSCORE, "Current BizScore is critically low"))
    elif biz_score_today < 55:
        risk += 15
        warnings.append(FailureWarning(WarningKind.CHALLENGING_BIZSCORE,
                                       "BizScore indicates challenging market conditions"))
    elif biz_score_today >= 75:
        protective.append("Strong current BizScore provides buffer")

    # Trend
    change = biz_score_12m - biz_score_today
    if change < -10:
        risk += 20
        warnings.append(FailureWarning(WarningKind.DECLINING_TREND, "Declining market trend predicted"))
    elif change > 10:
        protective.append("Growing market with positive momentum")

    # Competition pressure
    risk += COMPETITION_FAILURE_RISK[density]
    if density == CompetitionDensity.OVERSATURATED:
        warnings.append(FailureWarning(WarningKind.OVERSATURATION,
                                       "Market oversaturation significantly increases failure risk"))

    # Financial viability
    risk += VIABILITY_FAILURE_RISK[viability]
    if viability == FinancialViability.POOR:
        warnings.append(FailureWarning(WarningKind.WEAK_FINANCIALS,
                                       "Weak financial projections threaten sustainability"))
    elif viability == FinancialViability.EXCELLENT:
        protective.append("Strong financial foundation supports long-term viability")

    # Break-even
    if break_even_months > 24:
        risk += 15
        warnings.append(FailureWarning(WarningKind.LONG_BREAK_EVEN,
                                       "Long break-even period increases cash flow risk"))
    elif break_even_months > 18:
        risk += 10
    elif break_even_months <= 12:
        protective.append("Quick break-even reduces financial stress")

    # Market fit
    market_fit = (demand_match + demographic_fit) / 2
    if market_fit < 40:
        risk += 15
        warnings.append(FailureWarning(WarningKind.POOR_MARKET_FIT, "Poor market-idea fit detected"))
    elif market_fit < 60:
        risk += 8
    elif market_fit >= 75:
        protective.append("Excellent market-idea alignment")

    # Capital exposure
    if setup_cost > HIGH_CAPITAL_SETUP_COST and viability != FinancialViability.EXCELLENT:
        warnings.append(FailureWarning(WarningKind.HIGH_CAPITAL,
                                       "High capital requirement with uncertain returns"))

    risk = min(100, risk)
    probability, time_to_failure = failure_band(risk)

    recommendations = survival_recommendations(risk, warnings, break_even_months)

    confidence = (
        (25 if biz_score_today > 0 else 0)
        + (25 if density is not None else 0)
        + (25 if viability is not None else 0)
        + (25 if demand_match > 0 else 0)
    )

    logger.debug(f"Failure risk {risk} ({probability.value}), {len(warnings)} warnings")

    return FailurePrediction(
        failure_risk=risk,
        failure_probability=probability,
        time_to_failure=time_to_failure,
        warnings=tuple(warnings),
        protective_factors=tuple(protective),
        survival_recommendations=tuple(recommendations),
        confidence_level=min(100, confidence),
    )


def survival_recommendations(
    failure_risk: float,
    warnings: List[FailureWarning],
    break_even_months: float,
) -> List[str]:
    """Recommendations keyed on which kinds of warning fired"""
    recommendations = []

    if failure_risk >= 60:
        recommendations.extend([
            "URGENT: Reconsider this location or category entirely",
            "If proceeding, start with minimal investment (MVP approach)",
            "Secure 24+ months of operating capital as buffer",
        ])

    fired = {WARNING_GROUPS[w.kind] for w in warnings if w.kind in WARNING_GROUPS}
    for group in RecommendationGroup:
        if group in fired:
            recommendations.extend(GROUP_RECOMMENDATIONS[group])

    if break_even_months > 18:
        recommendations.append("Explore ways to accelerate break-even (reduce costs, increase prices)")

    if failure_risk >= 40:
        recommendations.extend([
            "Maintain lean operations - avoid fixed costs",
            "Build strong customer relationships for retention",
            "Monitor cash flow weekly and adjust quickly",
        ])

    return recommendations
