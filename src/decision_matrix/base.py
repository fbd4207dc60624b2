"""
Base class for ranking strategies

Provides common functionality for:
- Candidate arity checks
- Stable ranking (ties keep input order)
- Result formatting (dict / pandas DataFrame)
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pandas as pd

from opportunity_engine.errors import InsufficientCandidatesError
from opportunity_engine.models import to_plain_dict
from opportunity_engine.report_builder import FeasibilityReport

logger = logging.getLogger(__name__)

MIN_CANDIDATES = 2


@dataclass(frozen=True)
class RankedOpportunity:
    """One candidate's place in a decision matrix"""
    report_id: str
    location: str
    category: str
    score: float
    rank: int
    label: str
    strengths: Tuple[str, ...] = ()
    concerns: Tuple[str, ...] = ()
    components: Dict[str, float] = field(default_factory=dict)
    confidence: Optional[float] = None


@dataclass(frozen=True)
class DecisionMatrixResult:
    strategy: str
    ranking: Tuple[RankedOpportunity, ...]
    insights: Tuple[str, ...]
    weights: Dict[str, float]
    analysis: Dict[str, Any] = field(default_factory=dict)

    @property
    def top_choice(self) -> RankedOpportunity:
        return self.ranking[0]

    def to_dict(self) -> Dict[str, Any]:
        data = to_plain_dict(self)
        data["top_choice"] = to_plain_dict(self.top_choice)
        return data

    def to_dataframe(self) -> pd.DataFrame:
        """One row per candidate, component scores as columns"""
        rows = []
        for item in self.ranking:
            row = {
                "rank": item.rank,
                "report_id": item.report_id,
                "location": item.location,
                "category": item.category,
                "score": item.score,
                "label": item.label,
            }
            row.update(item.components)
            rows.append(row)
        return pd.DataFrame(rows).set_index("rank")


class RankingStrategy(ABC):
    """
    Base class for decision-matrix strategies.

    Subclasses must implement:
    - name: Strategy name recorded on results
    - rank(): Score, order and annotate the candidates
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def rank(self, candidates: Sequence[FeasibilityReport]) -> DecisionMatrixResult:
        """
        Rank candidate reports.

        Raises:
            InsufficientCandidatesError: If fewer than two candidates are given
        """
        pass

    def _check_candidates(self, candidates: Sequence[FeasibilityReport]) -> List[FeasibilityReport]:
        candidates = list(candidates or [])
        if len(candidates) < MIN_CANDIDATES:
            raise InsufficientCandidatesError(len(candidates), MIN_CANDIDATES)
        return candidates

    @staticmethod
    def _order(scores: Sequence[float]) -> List[int]:
        """Indices by descending score; equal scores keep input order"""
        return sorted(range(len(scores)), key=lambda i: -scores[i])
