"""
Weighted risk index

Four independent sub-risks (competition, financial, operational,
regulatory), each 0-100, combined with Config.RISK_WEIGHTS into an overall
risk and a risk level.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Tuple

from utils.config import Config

from opportunity_engine.models import (
    CompetitionDensity,
    Difficulty,
    RiskLevel,
    StaffingNeeds,
    band_for,
    clamp,
    require_finite,
    round_half_up,
    to_plain_dict,
)

logger = logging.getLogger(__name__)


DENSITY_RISK = {
    CompetitionDensity.LOW: 20,
    CompetitionDensity.BALANCED: 45,
    CompetitionDensity.HIGH: 70,
    CompetitionDensity.OVERSATURATED: 90,
}

DIFFICULTY_RISK = {
    Difficulty.EASY: 15,
    Difficulty.MODERATE: 35,
    Difficulty.DIFFICULT: 60,
    Difficulty.VERY_DIFFICULT: 85,
}

STAFFING_RISK = {
    StaffingNeeds.MINIMAL: 10,
    StaffingNeeds.MODERATE: 25,
    StaffingNeeds.EXTENSIVE: 40,
}

# Regulatory complexity by business type
REGULATORY_RISK = {
    "restaurant": 60,
    "cafe": 45,
    "bar": 75,
    "pharmacy": 70,
    "hospital": 80,
    "gym": 40,
    "salon": 35,
    "retail": 30,
    "office": 25,
}
DEFAULT_REGULATORY_RISK = 40

CRITICAL_RISK = 70
MITIGATION_RISK = 60

MITIGATION_STEPS = {
    "competition": [
        "Develop strong differentiation strategy",
        "Focus on niche targeting to avoid direct competition",
    ],
    "financial": [
        "Secure adequate funding buffer for 18-24 months",
        "Consider phased rollout to reduce initial capital",
        "Negotiate favorable payment terms with suppliers",
    ],
    "operational": [
        "Hire experienced operations manager",
        "Implement strong training programs",
        "Use technology to simplify operations",
    ],
    "regulatory": [
        "Consult legal expert for compliance roadmap",
        "Budget for licensing and certification costs",
        "Stay updated on regulatory changes",
    ],
}

GENERAL_MITIGATION_STEPS = [
    "Maintain lean operations initially",
    "Focus on customer satisfaction and retention",
    "Monitor market trends regularly",
]

CRITICAL_FACTORS = {
    "competition": "High competition saturation",
    "financial": "High capital requirement and long ROI",
    "operational": "Complex operations and staffing",
    "regulatory": "Strict regulatory compliance needed",
}


@dataclass(frozen=True)
class RiskBreakdown:
    competition_risk: int
    financial_risk: int
    operational_risk: int
    regulatory_risk: int
    overall_risk: int
    risk_level: RiskLevel
    critical_factors: Tuple[str, ...]
    mitigation_steps: Tuple[str, ...]

    @property
    def sub_risks(self) -> Dict[str, int]:
        return {
            "competition": self.competition_risk,
            "financial": self.financial_risk,
            "operational": self.operational_risk,
            "regulatory": self.regulatory_risk,
        }

    def to_dict(self) -> Dict:
        return to_plain_dict(self)


def risk_level_for(overall_risk: float) -> RiskLevel:
    very_high, high, moderate, low = Config.RISK_LEVEL_BREAKPOINTS
    return band_for(overall_risk, [
        (very_high, RiskLevel.VERY_HIGH),
        (high, RiskLevel.HIGH),
        (moderate, RiskLevel.MODERATE),
        (low, RiskLevel.LOW),
    ], RiskLevel.VERY_LOW)


def competition_risk(density, competition_index: float) -> int:
    """Band risk blended 70/30 with the saturation score"""
    density = CompetitionDensity.parse(density, "competition_density")
    index = clamp(require_finite(competition_index, "competition_index"))
    return round_half_up(min(100, DENSITY_RISK[density] * 0.7 + index * 0.3))


def financial_risk(setup_cost_min: float, break_even_months: float, profit_margin_min: float) -> int:
    """Setup cost, break-even and margin bands added together"""
    risk = _strict_band(setup_cost_min, [(2_000_000, 35), (1_000_000, 25), (500_000, 15)], 5)
    risk += _strict_band(break_even_months, [(24, 35), (18, 25), (12, 15)], 5)

    if profit_margin_min < 10:
        risk += 30
    elif profit_margin_min < 20:
        risk += 20
    elif profit_margin_min < 30:
        risk += 10
    else:
        risk += 5
    return min(100, risk)


def _strict_band(value: float, bands, default):
    """First (threshold, result) pair with value > threshold"""
    for threshold, result in bands:
        if value > threshold:
            return result
    return default


def operational_risk(difficulty, staffing_needs=StaffingNeeds.MODERATE) -> int:
    difficulty = Difficulty.parse(difficulty, "category_difficulty")
    staffing = StaffingNeeds.parse(staffing_needs, "staffing_needs")
    return round_half_up(DIFFICULTY_RISK[difficulty] * 0.7 + STAFFING_RISK[staffing] * 0.3)


def regulatory_risk(business_type) -> int:
    key = str(business_type).strip().lower() if business_type is not None else ""
    return REGULATORY_RISK.get(key, DEFAULT_REGULATORY_RISK)


def generate_risk_index(
    business_type,
    competition_density,
    competition_index: float,
    category_difficulty,
    setup_cost_min: float,
    break_even_months: float,
    profit_margin_min: float,
    staffing_needs=StaffingNeeds.MODERATE,
) -> RiskBreakdown:
    """
    Build the weighted risk breakdown.

    Args:
        business_type: Business type used for the regulatory table (e.g. "Cafe")
        competition_density: Competition band
        competition_index: Saturation score 0-100
        category_difficulty: Difficulty tier
        setup_cost_min: Lower setup cost estimate
        break_even_months: Break-even months (36 is the not-profitable sentinel)
        profit_margin_min: Worst-case margin in percent
        staffing_needs: Minimal / Moderate / Extensive

    Returns:
        RiskBreakdown
    """
    risks = {
        "competition": competition_risk(competition_density, competition_index),
        "financial": financial_risk(setup_cost_min, break_even_months, profit_margin_min),
        "operational": operational_risk(category_difficulty, staffing_needs),
        "regulatory": regulatory_risk(business_type),
    }
    weights = Config.RISK_WEIGHTS
    overall = round_half_up(clamp(sum(risks[name] * weights[name] for name in risks)))
    level = risk_level_for(overall)

    critical: List[str] = [CRITICAL_FACTORS[name] for name in risks if risks[name] >= CRITICAL_RISK]
    if not critical and overall > 50:
        critical.append("Multiple moderate risk factors combined")

    mitigation: List[str] = []
    for name in risks:
        if risks[name] >= MITIGATION_RISK:
            mitigation.extend(MITIGATION_STEPS[name])
    if not mitigation:
        mitigation.extend(GENERAL_MITIGATION_STEPS)

    logger.debug(f"Risk index {overall} ({level.value}): {risks}")

    return RiskBreakdown(
        competition_risk=risks["competition"],
        financial_risk=risks["financial"],
        operational_risk=risks["operational"],
        regulatory_risk=risks["regulatory"],
        overall_risk=overall,
        risk_level=level,
        critical_factors=tuple(critical),
        mitigation_steps=tuple(mitigation),
    )
