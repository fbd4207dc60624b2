"""
Schema Validation for engine inputs and outputs

Provides Pydantic models for:
- ParsedIdea (fixed JSON shape returned by the idea-parsing collaborator)
- FeasibilityReportPayload (persisted single-location report)
- DecisionMatrixPayload (persisted multi-candidate comparison)

Collaborators exchange camelCase JSON; the models accept both camelCase
and snake_case keys.
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


CompetitionLabel = Literal["Low", "Balanced", "High", "Oversaturated"]
DifficultyLabel = Literal["Easy", "Moderate", "Difficult", "Very Difficult"]
RiskLabel = Literal["Very Low", "Low", "Moderate", "High", "Very High"]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# IDEA PARSING COLLABORATOR
# =============================================================================

class ParsedIdea(CamelModel):
    """Structured business idea as returned by the idea parser"""
    category: str
    niche: str = ""
    pricing_level: Literal["Affordable", "Mid-Range", "Premium"]
    target_audience: List[str] = Field(default_factory=list)
    capital_intensity: Literal["Low", "Medium", "High", "Very High"]
    operational_complexity: DifficultyLabel
    keywords: List[str] = Field(default_factory=list)
    unique_selling_points: List[str] = Field(default_factory=list)
    required_space: Literal["Small", "Medium", "Large"]
    staffing_needs: Literal["Minimal", "Moderate", "Extensive"]
    inventory_needs: Literal["Low", "Medium", "High"]
    technology_requirements: Literal["Basic", "Moderate", "Advanced"]


# =============================================================================
# FEASIBILITY REPORT
# =============================================================================

class ValueRangePayload(BaseModel):
    min: float
    max: float

    @model_validator(mode='after')
    def check_order(self):
        if self.min > self.max:
            raise ValueError(f"min {self.min} exceeds max {self.max}")
        return self


class YearProjectionPayload(BaseModel):
    revenue: ValueRangePayload
    profit: ValueRangePayload


class FinancialProjectionPayload(BaseModel):
    setup_cost: ValueRangePayload
    monthly_operating_cost: ValueRangePayload
    expected_monthly_revenue: ValueRangePayload
    break_even_months: int = Field(..., ge=1, le=36)
    profit_margin: ValueRangePayload
    year1: YearProjectionPayload
    year3: YearProjectionPayload
    reaches_break_even: bool
    currency: str
    viability: Optional[Literal["Excellent", "Good", "Fair", "Poor"]] = None

    @model_validator(mode='after')
    def check_margin_bounds(self):
        for value in (self.profit_margin.min, self.profit_margin.max):
            if not 5 <= value <= 45:
                raise ValueError(f"profit margin {value} outside [5, 45]")
        return self


class MarketSignalPayload(BaseModel):
    demand_index: float
    competition_density: CompetitionLabel
    competition_count: int = Field(default=0, ge=0)
    population_density: float = Field(default=0.0, ge=0)
    avg_income: float = 0.0
    internet_penetration: float = 0.0
    literacy_rate: float = 0.0
    competition_density_score: Optional[float] = None


class SWOTPayload(BaseModel):
    strengths: List[str] = Field(..., min_length=1)
    weaknesses: List[str] = Field(..., min_length=1)
    opportunities: List[str] = Field(..., min_length=1)
    threats: List[str] = Field(..., min_length=1)


class RecommendationPayload(BaseModel):
    type: Literal["start-now", "start-caution", "wait-monitor", "avoid"]
    label: str
    confidence: int = Field(..., ge=0, le=95)
    risk_level: RiskLabel
    timeframe: str
    reasoning: List[str]
    action_steps: List[str]
    points: int = Field(default=0, ge=0, le=100)


class FeasibilityReportPayload(BaseModel):
    """
    Complete feasibility report for one location/category pairing.

    Optional breakdown, risk and failure sections are kept as plain dicts.
    """
    id: str
    created_at: datetime
    location: str
    category: str
    category_id: Optional[str] = None
    market: MarketSignalPayload
    biz_score_today: int = Field(..., ge=0, le=100)
    biz_score_6m: int = Field(..., ge=0, le=100)
    biz_score_12m: int = Field(..., ge=0, le=100)
    forecast_growth: float
    category_difficulty: DifficultyLabel
    swot: SWOTPayload
    financials: FinancialProjectionPayload
    recommendation: RecommendationPayload
    breakdown: Optional[Dict[str, Any]] = None
    risk: Optional[Dict[str, Any]] = None
    failure: Optional[Dict[str, Any]] = None


# =============================================================================
# DECISION MATRIX
# =============================================================================

class RankedOpportunityPayload(BaseModel):
    report_id: str
    location: str
    category: str
    score: float = Field(..., ge=0, le=100)
    rank: int = Field(..., ge=1)
    label: str
    strengths: List[str] = Field(default_factory=list, max_length=3)
    concerns: List[str] = Field(default_factory=list, max_length=3)
    components: Dict[str, float] = Field(default_factory=dict)


class DecisionMatrixPayload(BaseModel):
    strategy: str
    weights: Dict[str, float]
    ranking: List[RankedOpportunityPayload] = Field(..., min_length=2)
    insights: List[str] = Field(default_factory=list)

    @model_validator(mode='after')
    def check_ranking(self):
        ranks = [item.rank for item in self.ranking]
        if ranks != list(range(1, len(ranks) + 1)):
            raise ValueError(f"ranks must run 1..n in order, got {ranks}")
        scores = [item.score for item in self.ranking]
        if any(a < b for a, b in zip(scores, scores[1:])):
            raise ValueError("ranking is not sorted by descending score")
        return self


# =============================================================================
# VALIDATION HELPERS
# =============================================================================

class ValidationError(Exception):
    """Raised when schema validation fails"""
    def __init__(self, message: str, errors: List[Dict[str, Any]] = None):
        super().__init__(message)
        self.errors = errors or []


def validate_schema(
    data: Dict[str, Any],
    schema_class: type,
) -> BaseModel:
    """
    Validate data against a Pydantic schema.

    Args:
        data: Dictionary to validate
        schema_class: Pydantic model class

    Returns:
        Validated model instance

    Raises:
        ValidationError: If validation fails
    """
    try:
        return schema_class.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Schema validation failed: {e}", e.errors())


def validate_json_string(
    json_string: str,
    schema_class: type,
) -> BaseModel:
    """Validate a JSON string against a Pydantic schema"""
    try:
        data = json.loads(json_string)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}")
    return validate_schema(data, schema_class)


def get_schema_json(schema_class: type) -> Dict[str, Any]:
    """Get JSON schema for a Pydantic model"""
    return schema_class.model_json_schema()


class SchemaValidator:
    """
    Validator returning error details instead of raising.

    Example:
        validator = SchemaValidator()
        is_valid, errors = validator.validate(data, ParsedIdea)
    """

    def validate(
        self,
        data: Dict[str, Any],
        schema: type,
    ) -> Tuple[bool, List[str]]:
        """
        Validate data against a Pydantic model.

        Returns:
            Tuple of (is_valid, errors) where errors are "field.path: message" strings
        """
        try:
            schema.model_validate(data)
            return True, []
        except PydanticValidationError as e:
            errors = []
            for err in e.errors():
                loc = ".".join(str(x) for x in err.get("loc", []))
                errors.append(f"{loc}: {err.get('msg', str(err))}")
            logger.debug(f"{schema.__name__} validation failed with {len(errors)} errors")
            return False, errors

    def validate_idea(self, data: Dict[str, Any]) -> Tuple[bool, List[str]]:
        return self.validate(data, ParsedIdea)

    def validate_report(self, data: Dict[str, Any]) -> Tuple[bool, List[str]]:
        return self.validate(data, FeasibilityReportPayload)

    def validate_matrix(self, data: Dict[str, Any]) -> Tuple[bool, List[str]]:
        return self.validate(data, DecisionMatrixPayload)
