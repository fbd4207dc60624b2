"""
Tests for the parsed-idea estimators.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from opportunity_engine.idea_estimators import (
    analyze_idea,
    estimate_capital_requirements,
    estimate_competition,
    estimate_demand,
    map_to_category_difficulty,
)
from opportunity_engine.models import CompetitionDensity, Difficulty
from tools.schema_validation import ParsedIdea, ValidationError


def idea(**overrides):
    data = {
        "category": "Cafe",
        "niche": "Specialty coffee",
        "pricingLevel": "Mid-Range",
        "targetAudience": ["students", "professionals"],
        "capitalIntensity": "Medium",
        "operationalComplexity": "Moderate",
        "keywords": ["coffee"],
        "uniqueSellingPoints": ["single origin"],
        "requiredSpace": "Medium",
        "staffingNeeds": "Moderate",
        "inventoryNeeds": "Medium",
        "technologyRequirements": "Moderate",
    }
    data.update(overrides)
    return data


class TestDifficulty:

    def test_complexity_wins(self):
        assert map_to_category_difficulty(idea(operationalComplexity="Very Difficult")) == Difficulty.VERY_DIFFICULT
        assert map_to_category_difficulty(idea(operationalComplexity="Difficult",
                                               capitalIntensity="Very High")) == Difficulty.DIFFICULT

    def test_capital_intensity_next(self):
        assert map_to_category_difficulty(idea(capitalIntensity="Very High")) == Difficulty.VERY_DIFFICULT
        assert map_to_category_difficulty(idea(capitalIntensity="High")) == Difficulty.DIFFICULT

    def test_defaults(self):
        assert map_to_category_difficulty(idea()) == Difficulty.MODERATE
        assert map_to_category_difficulty(idea(operationalComplexity="Easy")) == Difficulty.EASY


class TestCapital:

    def test_medium_intensity(self):
        capital = estimate_capital_requirements(idea())
        assert capital.min == 450_000
        assert capital.max == 2_500_000

    def test_space_and_inventory_stack(self):
        capital = estimate_capital_requirements(idea(requiredSpace="Large", inventoryNeeds="High"))
        assert capital.min == 877_500
        assert capital.max == 7_500_000

    def test_small_low_intensity(self):
        capital = estimate_capital_requirements(idea(capitalIntensity="Low", requiredSpace="Small"))
        assert capital.min == 105_000
        assert capital.max == 800_000


class TestDemand:

    def test_high_demand_business(self):
        assert estimate_demand(idea()) == 75

    def test_affordable_broad_basic(self):
        rich = idea(
            pricingLevel="Affordable",
            targetAudience=["a", "b", "c"],
            uniqueSellingPoints=["x", "y", "z"],
            technologyRequirements="Basic",
        )
        assert estimate_demand(rich) == 95

    def test_floor(self):
        thin = idea(category="Observatory", pricingLevel="Premium", targetAudience=[],
                    uniqueSellingPoints=[], technologyRequirements="Advanced")
        assert estimate_demand(thin) == 40


class TestCompetition:

    def test_saturated_business(self):
        assert estimate_competition(idea(uniqueSellingPoints=[])) == "High"
        assert estimate_competition(idea(uniqueSellingPoints=["a", "b"])) == "Moderate"

    def test_hard_to_enter(self):
        assert estimate_competition(idea(category="Biotech", operationalComplexity="Very Difficult")) == "Low"
        assert estimate_competition(idea(category="Biotech", capitalIntensity="Very High")) == "Low"

    def test_default(self):
        assert estimate_competition(idea(category="Bookkeeping")) == "Moderate"


def test_analyze_idea():
    analysis = analyze_idea(ParsedIdea.model_validate(idea()))
    assert analysis.category_difficulty == Difficulty.MODERATE
    assert analysis.demand_estimate == 75
    assert analysis.competition_level == "High"
    assert analysis.competition_density == CompetitionDensity.HIGH

    data = analysis.to_dict()
    assert data["parsed"]["pricingLevel"] == "Mid-Range"
    assert data["competition_density"] == "High"


def test_moderate_competition_maps_to_balanced():
    analysis = analyze_idea(idea(category="Bookkeeping"))
    assert analysis.competition_density == CompetitionDensity.BALANCED


def test_out_of_enum_value_is_rejected():
    with pytest.raises(ValidationError):
        analyze_idea(idea(pricingLevel="Free"))
