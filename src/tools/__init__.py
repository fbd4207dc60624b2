"""
Tools layer for the BizScore Opportunity Engine

- Schema validation (Pydantic) for parsed ideas, reports and decision matrices
"""

from .schema_validation import (
    DecisionMatrixPayload,
    FeasibilityReportPayload,
    ParsedIdea,
    SchemaValidator,
    ValidationError,
    validate_json_string,
    validate_schema,
)

__all__ = [
    "ParsedIdea",
    "FeasibilityReportPayload",
    "DecisionMatrixPayload",
    "SchemaValidator",
    "validate_schema",
    "validate_json_string",
    "ValidationError",
]
