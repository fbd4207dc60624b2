"""
Report Ranking Strategy

Ranks feasibility reports on five components:
- BizScore (60% today, 40% at 12 months)
- Forecast growth band
- Competition favorability
- Financial viability (break-even speed + average margin)
- SWOT balance

Strengths and concerns are relative to the candidate set being compared,
so the same report can read differently against different alternatives.
"""

import logging
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from opportunity_engine.errors import InvalidInputError
from opportunity_engine.finance import FinancialProjection
from opportunity_engine.models import CompetitionDensity, band_for, clamp, require_finite, round_half_up
from opportunity_engine.report_builder import FeasibilityReport
from risk_engine.swot import SWOTAnalysis
from utils.config import Config

from .base import DecisionMatrixResult, RankedOpportunity, RankingStrategy

logger = logging.getLogger(__name__)


FORECAST_BANDS = [
    (1.3, 100),
    (1.2, 85),
    (1.1, 70),
    (1.0, 50),
    (0.95, 30),
]
FORECAST_FLOOR = 15

COMPETITION_SCORES = {
    CompetitionDensity.LOW: 100,
    CompetitionDensity.BALANCED: 75,
    CompetitionDensity.HIGH: 45,
    CompetitionDensity.OVERSATURATED: 20,
}

# (upper bound in months, points)
BREAK_EVEN_POINTS = [(12, 50), (18, 35), (24, 20)]
# (minimum average margin %, points)
MARGIN_POINTS = [(25, 50), (18, 35), (12, 20)]
FINANCIAL_FLOOR_POINTS = 10

MAX_HIGHLIGHTS = 3


def biz_score_component(today: float, in_12m: float) -> float:
    return today * 0.6 + in_12m * 0.4


def forecast_component(forecast_growth: float) -> int:
    return band_for(forecast_growth, FORECAST_BANDS, FORECAST_FLOOR)


def competition_component(density) -> int:
    return COMPETITION_SCORES[CompetitionDensity.parse(density, "competition_density")]


def financial_component(financials: FinancialProjection) -> int:
    """Break-even speed and average margin, up to 50 points each"""
    points = FINANCIAL_FLOOR_POINTS
    for limit, value in BREAK_EVEN_POINTS:
        if financials.break_even_months <= limit:
            points = value
            break

    avg_margin = financials.profit_margin.midpoint
    return points + band_for(avg_margin, MARGIN_POINTS, FINANCIAL_FLOOR_POINTS)


def swot_component(swot: SWOTAnalysis) -> float:
    positive = len(swot.strengths) * 10 + len(swot.opportunities) * 12
    negative = len(swot.weaknesses) * 8 + len(swot.threats) * 10
    return clamp(50 + positive - negative)


def rank_label(index: int, total: int) -> str:
    if index == 0:
        return "Top Choice"
    if index == 1 and total > 2:
        return "Strong Alternative"
    if index == total - 1:
        return "Least Favorable"
    return "Consider with Caution"


class ReportRankingStrategy(RankingStrategy):
    """
    Canonical decision matrix.

    Scores are integers; equal scores keep the order the candidates were given in.
    """

    def __init__(self, weights: Optional[Mapping[str, float]] = None):
        merged = dict(Config.DECISION_WEIGHTS)
        for key, value in (weights or {}).items():
            if key not in merged:
                raise InvalidInputError("weights", key, merged.keys())
            if require_finite(value, key) < 0:
                raise InvalidInputError(key, value)
            merged[key] = float(value)
        self.weights = merged

    @property
    def name(self) -> str:
        return "report_ranking"

    def components(self, report: FeasibilityReport) -> Dict[str, float]:
        return {
            "biz_score": biz_score_component(report.biz_score_today, report.biz_score_12m),
            "forecast": forecast_component(report.forecast_growth),
            "competition": competition_component(report.competition_density),
            "financial": financial_component(report.financials),
            "swot": swot_component(report.swot),
        }

    def total(self, components: Dict[str, float]) -> int:
        return round_half_up(sum(components[key] * weight for key, weight in self.weights.items()))

    def rank(self, candidates: Sequence[FeasibilityReport]) -> DecisionMatrixResult:
        reports = self._check_candidates(candidates)
        components = [self.components(report) for report in reports]
        totals = [self.total(c) for c in components]
        order = self._order(totals)

        ranking = []
        for position, idx in enumerate(order):
            report = reports[idx]
            ranking.append(RankedOpportunity(
                report_id=report.id,
                location=report.location,
                category=report.category,
                score=totals[idx],
                rank=position + 1,
                label=rank_label(position, len(order)),
                strengths=tuple(self._strengths(idx, reports, components)[:MAX_HIGHLIGHTS]),
                concerns=tuple(self._concerns(idx, reports, components)[:MAX_HIGHLIGHTS]),
                components=components[idx],
            ))

        insights = self._insights(ranking, order, reports, components)
        logger.debug(f"Report ranking totals: {totals}")

        return DecisionMatrixResult(
            strategy=self.name,
            ranking=tuple(ranking),
            insights=tuple(insights),
            weights=dict(self.weights),
        )

    @staticmethod
    def _column(components: List[Dict[str, float]], key: str) -> np.ndarray:
        return np.array([c[key] for c in components], dtype=float)

    def _strengths(self, idx: int, reports: List[FeasibilityReport], components: List[Dict[str, float]]) -> List[str]:
        report = reports[idx]
        biz = self._column(components, "biz_score")
        forecast = self._column(components, "forecast")
        competition = self._column(components, "competition")
        months = np.array([r.financials.break_even_months for r in reports], dtype=float)
        opportunities = np.array([len(r.swot.opportunities) for r in reports], dtype=float)

        strengths = []
        if biz[idx] > biz.mean():
            strengths.append(f"Above-average BizScore: {report.biz_score_today}")
        if forecast[idx] == forecast.max() > forecast.min():
            strengths.append(f"Strongest growth forecast: {report.forecast_growth * 100 - 100:.0f}%")
        if competition[idx] == competition.max() > competition.min():
            strengths.append(f"Most favorable competition: {report.competition_density.value}")
        if months[idx] == months.min() < months.max():
            strengths.append(f"Fastest break-even: {report.financials.break_even_months} months")
        if opportunities[idx] > opportunities.mean():
            strengths.append("More market opportunities than the alternatives")
        return strengths

    def _concerns(self, idx: int, reports: List[FeasibilityReport], components: List[Dict[str, float]]) -> List[str]:
        report = reports[idx]
        biz = self._column(components, "biz_score")
        forecast = self._column(components, "forecast")
        competition = self._column(components, "competition")
        months = np.array([r.financials.break_even_months for r in reports], dtype=float)
        threats = np.array([len(r.swot.threats) for r in reports], dtype=float)

        concerns = []
        if biz[idx] < biz.mean():
            concerns.append(f"Below-average BizScore: {report.biz_score_today}")
        if competition[idx] == competition.min() < competition.max():
            concerns.append(f"Toughest competition: {report.competition_density.value}")
        if months[idx] == months.max() > months.min():
            if report.financials.reaches_break_even:
                concerns.append(f"Slowest break-even: {report.financials.break_even_months} months")
            else:
                concerns.append(f"No break-even within {report.financials.break_even_months} months")
        if threats[idx] > threats.mean():
            concerns.append("More market threats than the alternatives")
        if forecast[idx] == forecast.min() < forecast.max():
            concerns.append("Weakest growth outlook")
        return concerns

    def _insights(
        self,
        ranking: List[RankedOpportunity],
        order: List[int],
        reports: List[FeasibilityReport],
        components: List[Dict[str, float]],
    ) -> List[str]:
        top, runner_up = ranking[0], ranking[1]
        gap = top.score - runner_up.score

        insights = []
        if gap > Config.CLEAR_WINNER_GAP:
            insights.append(f"Clear winner: {top.location} ({top.category}) leads by {gap} points")
        else:
            insights.append(f"Close competition: Top 2 options are within {gap} points of each other")

        callouts = [
            ("financial", "Best financial outlook: {} has strongest profit potential"),
            ("forecast", "Highest growth potential: {} shows best market expansion"),
            ("competition", "Least competitive: {} has most favorable market density"),
        ]
        for key, template in callouts:
            # scan in ranking order so a tie with the top choice is no call-out
            ranked = self._column(components, key)[order]
            best = order[int(np.argmax(ranked))]
            if best != order[0]:
                insights.append(template.format(reports[best].location))
        return insights


def rank(
    candidates: Sequence[FeasibilityReport],
    strategy: Optional[RankingStrategy] = None,
) -> DecisionMatrixResult:
    """
    Rank two or more feasibility reports.

    Args:
        candidates: Reports to compare
        strategy: Ranking strategy, defaults to ReportRankingStrategy

    Returns:
        DecisionMatrixResult ordered best first

    Raises:
        InsufficientCandidatesError: If fewer than two candidates are given
    """
    strategy = strategy or ReportRankingStrategy()
    result = strategy.rank(candidates)
    top = result.top_choice
    logger.info(
        f"Ranked {len(result.ranking)} candidates with {strategy.name}: "
        f"top choice {top.location} ({top.category}) at {top.score}"
    )
    return result
