"""
Weighted Decision Matrix

Ten-criterion alternative to the report ranking. Caller weights are merged
over the defaults in Config.MATRIX_WEIGHTS and renormalized to sum to 1.0;
the caller's mapping is never modified.
"""

import logging
import math
from dataclasses import asdict, dataclass, fields, replace
from typing import Dict, List, Mapping, Optional, Sequence

import numpy as np

from opportunity_engine.errors import InvalidInputError
from opportunity_engine.models import CompetitionDensity, clamp, require_finite
from opportunity_engine.normalizers import (
    break_even_speed,
    capital_burden,
    competition_favorability,
    difficulty_ease,
    growth_score,
)
from opportunity_engine.report_builder import FeasibilityReport
from utils.config import Config

from .base import DecisionMatrixResult, RankedOpportunity, RankingStrategy

logger = logging.getLogger(__name__)

CLEAR_WINNER_CONFIDENCE = 20
STRONG_RECOMMENDATION_CONFIDENCE = 80
STRENGTH_THRESHOLD = 70
CONCERN_THRESHOLD = 40
MAX_HIGHLIGHTS = 3

CRITERION_LABELS = {
    "biz_score": "BizScore",
    "growth_potential": "Growth potential",
    "demand_level": "Demand level",
    "competition_favorability": "Competition favorability",
    "profitability": "Profitability",
    "break_even_speed": "Break-even speed",
    "capital_requirements": "Capital requirements",
    "operational_complexity": "Operational simplicity",
    "risk_level": "Risk profile",
    "strategic_fit": "Strategic fit",
}


@dataclass(frozen=True)
class MatrixWeights:
    biz_score: float
    growth_potential: float
    demand_level: float
    competition_favorability: float
    profitability: float
    break_even_speed: float
    capital_requirements: float
    operational_complexity: float
    risk_level: float
    strategic_fit: float

    @classmethod
    def defaults(cls) -> "MatrixWeights":
        return cls(**Config.MATRIX_WEIGHTS)

    def merged(self, overrides: Optional[Mapping[str, float]]) -> "MatrixWeights":
        """New weight set with overrides applied"""
        known = {f.name for f in fields(self)}
        changes = {}
        for key, value in (overrides or {}).items():
            if key not in known:
                raise InvalidInputError("weights", key, sorted(known))
            require_finite(value, key)
            if value < 0:
                raise InvalidInputError(key, value)
            changes[key] = float(value)
        return replace(self, **changes)

    def normalized(self) -> "MatrixWeights":
        """New weight set scaled to sum to 1.0"""
        total = sum(self.as_dict().values())
        if total <= 0:
            raise InvalidInputError("weights", total)
        return MatrixWeights(**{key: value / total for key, value in self.as_dict().items()})

    def as_dict(self) -> Dict[str, float]:
        return asdict(self)

    def vector(self) -> np.ndarray:
        return np.array(list(self.as_dict().values()), dtype=float)


def risk_score(report: FeasibilityReport) -> float:
    """50 baseline, higher is safer"""
    risk = 50
    if report.competition_density == CompetitionDensity.OVERSATURATED:
        risk -= 25
    elif report.competition_density == CompetitionDensity.LOW:
        risk += 20

    if report.demand_index < 40:
        risk -= 15
    elif report.demand_index > 70:
        risk += 15

    if report.forecast_growth < 1.0:
        risk -= 20
    elif report.forecast_growth > 1.2:
        risk += 15

    if report.financials.break_even_months > 24:
        risk -= 10

    return clamp(risk)


def criteria_scores(report: FeasibilityReport) -> Dict[str, float]:
    """Raw 0-100 score per criterion, keyed like MatrixWeights"""
    fin = report.financials
    return {
        "biz_score": clamp(report.biz_score_today),
        "growth_potential": growth_score(report.forecast_growth),
        "demand_level": clamp(report.demand_index),
        "competition_favorability": competition_favorability(report.competition_density),
        "profitability": clamp(fin.profit_margin.max / 50 * 100),
        "break_even_speed": break_even_speed(fin.break_even_months),
        "capital_requirements": capital_burden(fin.setup_cost.max),
        "operational_complexity": difficulty_ease(report.category_difficulty),
        "risk_level": risk_score(report),
        "strategic_fit": clamp(report.strategic_opportunity_index),
    }


def recommendation_for(rank: int, total: int, confidence: float) -> str:
    if rank == 1:
        if confidence > STRONG_RECOMMENDATION_CONFIDENCE:
            return "Strongly Recommended - Clear Top Choice"
        return "Recommended - Best Overall Score"
    if rank == 2:
        return "Good Alternative - Consider as Backup"
    if rank <= math.ceil(total / 2):
        return "Viable Option - Worth Further Investigation"
    return "Not Recommended - Consider Alternatives"


class WeightedMatrixStrategy(RankingStrategy):
    """
    Ten-criterion weighted matrix.

    The published score is the min-max normalized total (0-100); when every
    candidate has the same total they all score 100.
    """

    def __init__(self, weights: Optional[Mapping[str, float]] = None):
        self.weights = MatrixWeights.defaults().merged(weights).normalized()

    @property
    def name(self) -> str:
        return "weighted_matrix"

    def rank(self, candidates: Sequence[FeasibilityReport]) -> DecisionMatrixResult:
        reports = self._check_candidates(candidates)
        criteria = [criteria_scores(report) for report in reports]
        keys = list(self.weights.as_dict())

        matrix = np.array([[c[key] for key in keys] for c in criteria], dtype=float)
        totals = matrix @ self.weights.vector()

        low, high = totals.min(), totals.max()
        if high == low:
            normalized = np.full(len(totals), 100.0)
        else:
            normalized = (totals - low) / (high - low) * 100
        average = normalized.mean()
        confidences = np.minimum(100.0, normalized + np.abs(normalized - average) / 2)

        order = self._order(totals.tolist())
        ranking = []
        for position, idx in enumerate(order):
            report = reports[idx]
            confidence = float(confidences[idx])
            components = {key: round(float(value), 2) for key, value in criteria[idx].items()}
            components["weighted_total"] = round(float(totals[idx]), 2)
            ranking.append(RankedOpportunity(
                report_id=report.id,
                location=report.location,
                category=report.category,
                score=round(float(normalized[idx]), 2),
                rank=position + 1,
                label=recommendation_for(position + 1, len(order), confidence),
                strengths=tuple(self._highlights(criteria[idx], strengths=True)),
                concerns=tuple(self._highlights(criteria[idx], strengths=False)),
                components=components,
                confidence=round(confidence, 2),
            ))

        top_confidence = float(normalized[order[0]] - average)
        analysis = {
            "spread": round(float(high - low), 2),
            "confidence": round(top_confidence, 2),
            "clear_winner": top_confidence > CLEAR_WINNER_CONFIDENCE,
        }
        logger.debug(f"Weighted matrix totals: {totals.round(2).tolist()}")

        return DecisionMatrixResult(
            strategy=self.name,
            ranking=tuple(ranking),
            insights=tuple(self._insights(ranking, analysis)),
            weights=self.weights.as_dict(),
            analysis=analysis,
        )

    @staticmethod
    def _highlights(scores: Dict[str, float], strengths: bool) -> List[str]:
        if strengths:
            picked = sorted(
                ((key, value) for key, value in scores.items() if value >= STRENGTH_THRESHOLD),
                key=lambda item: -item[1],
            )
        else:
            picked = sorted(
                ((key, value) for key, value in scores.items() if value < CONCERN_THRESHOLD),
                key=lambda item: item[1],
            )
        return [f"{CRITERION_LABELS[key]}: {value:.0f}" for key, value in picked[:MAX_HIGHLIGHTS]]

    @staticmethod
    def _insights(ranking: List[RankedOpportunity], analysis: Dict) -> List[str]:
        top = ranking[0]
        if analysis["clear_winner"]:
            insights = [
                f"Clear winner: {top.location} ({top.category}) is "
                f"{analysis['confidence']:.0f} points above the field average"
            ]
        else:
            insights = [
                f"No clear winner: {top.location} ({top.category}) is only "
                f"{analysis['confidence']:.0f} points above the field average"
            ]
        insights.append(f"Weighted totals span {analysis['spread']:.1f} points")
        return insights
