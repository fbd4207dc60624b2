"""
BizScore Opportunity Engine

Deterministic scoring pipeline for a location/category pairing:
- Metric normalizers and the category intelligence table
- Financial projections
- Composite BizScore and forecast
- Rent estimation and customer persona match
- Feasibility report builder
"""

from .errors import OpportunityEngineError, InvalidInputError, InsufficientCandidatesError
from .models import (
    CompetitionDensity,
    Difficulty,
    Level,
    MarketSignal,
    RiskLevel,
    StaffingNeeds,
    TrendDirection,
    ValueRange,
)
from .category_intelligence import (
    CategoryId,
    CategoryProfile,
    DEFAULT_PROFILE,
    ease_score_for_difficulty,
    profile_for,
    resolve_category,
)
from .finance import FinancialProjection, FinancialViability, format_currency, project
from .scoring import BizScoreBreakdown, ImpactFactor, OpportunityType, score, score_rating
from .forecast import BizScoreForecast, forecast_bizscores
from .rent_estimation import RentEstimate, estimate_rent
from .customer_persona import CustomerPersona, PersonaMatch, calculate_persona_match, generate_persona
from .report_builder import (
    FeasibilityReport,
    ReportInputs,
    analyze_opportunity,
    build_feasibility_report,
    build_quick_report,
    create_report_summary,
    export_report_json,
)

__all__ = [
    'OpportunityEngineError',
    'InvalidInputError',
    'InsufficientCandidatesError',
    'CompetitionDensity',
    'Difficulty',
    'Level',
    'MarketSignal',
    'RiskLevel',
    'StaffingNeeds',
    'TrendDirection',
    'ValueRange',
    'CategoryId',
    'CategoryProfile',
    'DEFAULT_PROFILE',
    'ease_score_for_difficulty',
    'profile_for',
    'resolve_category',
    'FinancialProjection',
    'FinancialViability',
    'format_currency',
    'project',
    'BizScoreBreakdown',
    'ImpactFactor',
    'OpportunityType',
    'score',
    'score_rating',
    'BizScoreForecast',
    'forecast_bizscores',
    'RentEstimate',
    'estimate_rent',
    'CustomerPersona',
    'PersonaMatch',
    'calculate_persona_match',
    'generate_persona',
    'FeasibilityReport',
    'ReportInputs',
    'analyze_opportunity',
    'build_feasibility_report',
    'build_quick_report',
    'create_report_summary',
    'export_report_json',
]
