"""
Decision matrix: rank several feasibility reports against each other

ReportRankingStrategy is the default used by rank(); WeightedMatrixStrategy
is the configurable ten-criterion alternative.
"""

from .base import DecisionMatrixResult, RankedOpportunity, RankingStrategy
from .ranking import ReportRankingStrategy, rank
from .weighted_matrix import MatrixWeights, WeightedMatrixStrategy

__all__ = [
    'DecisionMatrixResult',
    'RankedOpportunity',
    'RankingStrategy',
    'ReportRankingStrategy',
    'rank',
    'MatrixWeights',
    'WeightedMatrixStrategy',
]
