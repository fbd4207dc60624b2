"""
Risk assessment engine: SWOT, risk index, failure prediction and recommendations
"""

# opportunity_engine must finish initializing before the submodules below load
from opportunity_engine.models import RiskLevel

from .swot import SWOTInputs, SWOTAnalysis, generate_swot
from .risk_index import RiskBreakdown, generate_risk_index, risk_level_for
from .failure_prediction import (
    FailurePrediction,
    FailureWarning,
    WarningKind,
    predict_business_failure,
)
from .recommendation import Recommendation, RecommendationType, recommend

__all__ = [
    'RiskLevel',
    'SWOTInputs',
    'SWOTAnalysis',
    'generate_swot',
    'RiskBreakdown',
    'generate_risk_index',
    'risk_level_for',
    'FailurePrediction',
    'FailureWarning',
    'WarningKind',
    'predict_business_failure',
    'Recommendation',
    'RecommendationType',
    'recommend',
]
