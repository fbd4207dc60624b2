"""
Tests for rent estimation and customer persona match.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from opportunity_engine.customer_persona import calculate_persona_match, generate_persona
from opportunity_engine.errors import InvalidInputError
from opportunity_engine.rent_estimation import estimate_rent, location_grade


class TestRentEstimate:

    def test_prime_metro_cafe(self):
        rent = estimate_rent("Bangalore", "Cafe", "Medium", 120, 80)
        assert (rent.min_rent, rent.max_rent, rent.avg_rent) == (202, 353, 278)
        assert rent.suitability_score == 80
        assert rent.location_grade == "A"
        assert rent.affordability_index == pytest.approx(97.22)
        assert rent.factors.footfall == "High"
        assert rent.factors.accessibility == "Excellent"
        assert rent.factors.competition == "High"
        assert rent.factors.infrastructure == "Modern"
        assert rent.recommendations == (
            "High rent area - ensure strong revenue projections",
            "Consider negotiating long-term lease for better rates",
            "Excellent footfall potential - premium rent justified",
            "Prime location - high visibility and customer access",
        )

    def test_unlisted_city_and_business_use_defaults(self):
        rent = estimate_rent("Mysore", "Office", "Small", 30, 20)
        assert (rent.min_rent, rent.max_rent, rent.avg_rent) == (48, 83, 66)
        assert rent.suitability_score == 20
        assert rent.location_grade == "D"
        assert rent.factors.footfall == "Low"
        assert rent.factors.accessibility == "Poor"
        assert rent.factors.competition == "Low"
        assert rent.recommendations == (
            "Reasonable rent expectations for this location",
            "Consider alternative locations with better infrastructure",
        )

    def test_city_lookup_ignores_case(self):
        assert estimate_rent("mumbai", "Cafe", "Large", 100, 60) == estimate_rent("Mumbai", "Cafe", "Large", 100, 60)

    @pytest.mark.parametrize("score,grade", [
        (85, "A+"), (84, "A"), (65, "B+"), (55, "B"), (45, "C+"), (35, "C"), (34, "D"),
    ])
    def test_grades(self, score, grade):
        assert location_grade(score) == grade

    def test_rejects_unknown_space(self):
        with pytest.raises(InvalidInputError):
            estimate_rent("Pune", "Cafe", "Huge", 100, 60)

    def test_to_dict(self):
        data = estimate_rent("Pune", "Gym", "Medium", 80, 55).to_dict()
        assert data["per"] == "sqft"
        assert data["factors"]["footfall"] == "Medium"


class TestPersonaMatch:

    def test_persona_for_pricing_level(self):
        persona = generate_persona("Gym", "Mid-Range")
        assert persona.age_group == "20-40"
        assert persona.income_level == "Upper-Middle"
        assert persona.spending_power == 65
        assert generate_persona("Bookshop", "Affordable").age_group == "18-60"

    def test_premium_cafe_in_a_mall(self):
        match = calculate_persona_match("Cafe", "Premium", 120, 80, "Phoenix Mall")
        assert match.overall_match == 87
        assert match.primary_persona.match_score == 87
        assert match.demographic_fit.youth_density == 45
        assert match.demographic_fit.income_alignment == "Excellent"
        assert match.demographic_fit.lifestyle_match == "Strong"
        assert match.demographic_fit.zone_type == "Commercial"
        assert match.insights == (
            "Excellent demographic match - target audience is prevalent",
            "45% youth density aligns well with Cafe category",
            "Commercial zone - high foot traffic expected",
        )
        assert match.warnings == ()
        assert match.secondary_persona is None

    def test_premium_pricing_in_residential_area(self):
        match = calculate_persona_match("Bookshop", "Premium", 60, 40, "Jayanagar")
        assert match.overall_match == 53
        assert match.demographic_fit.income_alignment == "Fair"
        assert match.demographic_fit.zone_type == "Residential"
        assert "Residential area - focus on local customer base" in match.insights
        assert match.warnings == ("Premium pricing may not align with local income levels",)

    def test_mismatch_warning(self):
        match = calculate_persona_match("Salon", "Affordable", 20, 30, "Old Market Road")
        assert match.overall_match == 47
        assert match.demographic_fit.zone_type == "Commercial"
        assert match.warnings == ("Demographic mismatch detected - consider repositioning",)

    def test_rejects_unknown_pricing(self):
        with pytest.raises(InvalidInputError):
            calculate_persona_match("Cafe", "Luxury", 100, 60, "Indiranagar")
