"""
Tests for the decision matrix strategies.
"""

import sys
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from decision_matrix import (
    MatrixWeights,
    ReportRankingStrategy,
    WeightedMatrixStrategy,
    rank,
)
from decision_matrix.ranking import financial_component, forecast_component, rank_label, swot_component
from decision_matrix.weighted_matrix import recommendation_for, risk_score
from opportunity_engine.errors import InsufficientCandidatesError, InvalidInputError
from opportunity_engine.models import MarketSignal, ValueRange
from opportunity_engine.report_builder import analyze_opportunity
from risk_engine.swot import SWOTAnalysis
from tools.schema_validation import SchemaValidator
from utils.config import Config

AS_OF = datetime(2024, 6, 1, tzinfo=timezone.utc)


@pytest.fixture(scope="module")
def base_report():
    signal = MarketSignal(demand_index=60, competition_density="Balanced", population_density=4000)
    return analyze_opportunity("Base", "Cafe", signal, as_of=AS_OF)


def candidate(base, location, today, in_12m, growth, density, months, margin, swot_counts):
    """A report with controlled scores, financials and SWOT counts"""
    strengths, weaknesses, opportunities, threats = swot_counts
    return replace(
        base,
        id=f"report-{location.lower()}",
        location=location,
        biz_score_today=today,
        biz_score_12m=in_12m,
        forecast_growth=growth,
        market=replace(base.market, competition_density=density),
        financials=replace(
            base.financials,
            break_even_months=months,
            reaches_break_even=months < 36,
            profit_margin=ValueRange(*margin),
        ),
        swot=SWOTAnalysis(
            tuple(f"s{i}" for i in range(strengths)),
            tuple(f"w{i}" for i in range(weaknesses)),
            tuple(f"o{i}" for i in range(opportunities)),
            tuple(f"t{i}" for i in range(threats)),
        ),
    )


@pytest.fixture
def strong(base_report):
    return candidate(base_report, "Alpha", 80, 85, 1.25, "Low", 10, (20, 30), (3, 1, 3, 1))


@pytest.fixture
def weak(base_report):
    return candidate(base_report, "Beta", 55, 50, 0.97, "High", 30, (5, 10), (1, 3, 1, 3))


class TestComponents:

    @pytest.mark.parametrize("growth,expected", [
        (1.35, 100), (1.3, 100), (1.2, 85), (1.1, 70), (1.0, 50), (0.95, 30), (0.9, 15),
    ])
    def test_forecast_bands(self, growth, expected):
        assert forecast_component(growth) == expected

    def test_financial_component(self, strong, weak):
        assert financial_component(strong.financials) == 100
        assert financial_component(weak.financials) == 20

    def test_swot_component_is_clamped(self, strong):
        assert swot_component(strong.swot) == 98
        many = SWOTAnalysis(tuple("abcdef"), (), tuple("abcdef"), ())
        assert swot_component(many) == 100

    @pytest.mark.parametrize("index,total,label", [
        (0, 2, "Top Choice"),
        (1, 2, "Least Favorable"),
        (1, 3, "Strong Alternative"),
        (2, 3, "Least Favorable"),
        (2, 4, "Consider with Caution"),
    ])
    def test_labels(self, index, total, label):
        assert rank_label(index, total) == label


class TestReportRanking:

    def test_better_candidate_ranks_first(self, strong, weak):
        result = rank([weak, strong])
        assert result.strategy == "report_ranking"
        assert [item.location for item in result.ranking] == ["Alpha", "Beta"]
        assert [item.score for item in result.ranking] == [91, 35]
        assert [item.rank for item in result.ranking] == [1, 2]
        assert result.top_choice.label == "Top Choice"
        assert result.ranking[1].label == "Least Favorable"
        assert result.insights == ("Clear winner: Alpha (Cafe) leads by 56 points",)

    def test_relative_strengths_and_concerns(self, strong, weak):
        top, bottom = rank([strong, weak]).ranking
        assert top.strengths == (
            "Above-average BizScore: 80",
            "Strongest growth forecast: 25%",
            "Most favorable competition: Low",
        )
        assert bottom.concerns == (
            "Below-average BizScore: 55",
            "Toughest competition: High",
            "Slowest break-even: 30 months",
        )
        assert top.concerns == ()

    def test_ties_keep_input_order(self, base_report):
        first = candidate(base_report, "First", 70, 70, 1.1, "Balanced", 20, (10, 20), (2, 2, 2, 2))
        second = candidate(base_report, "Second", 70, 70, 1.1, "Balanced", 20, (10, 20), (2, 2, 2, 2))

        forward = rank([first, second])
        backward = rank([second, first])
        assert [item.location for item in forward.ranking] == ["First", "Second"]
        assert [item.location for item in backward.ranking] == ["Second", "First"]
        assert forward.insights[0] == "Close competition: Top 2 options are within 0 points of each other"

    def test_callouts_when_best_component_is_not_top(self, base_report):
        leader = candidate(base_report, "Leader", 90, 95, 1.3, "Low", 30, (5, 10), (3, 1, 3, 1))
        saver = candidate(base_report, "Saver", 60, 60, 1.05, "Balanced", 10, (25, 35), (2, 2, 2, 2))
        laggard = candidate(base_report, "Laggard", 50, 45, 1.0, "High", 20, (10, 15), (1, 2, 1, 2))

        result = rank([laggard, saver, leader])
        assert [item.location for item in result.ranking] == ["Leader", "Saver", "Laggard"]
        assert [item.score for item in result.ranking] == [81, 68, 45]
        assert [item.label for item in result.ranking] == ["Top Choice", "Strong Alternative", "Least Favorable"]
        assert result.insights == (
            "Close competition: Top 2 options are within 13 points of each other",
            "Best financial outlook: Saver has strongest profit potential",
        )
        assert result.ranking[2].concerns == (
            "Below-average BizScore: 50",
            "Toughest competition: High",
            "More market threats than the alternatives",
        )

    def test_no_callouts_for_components_tied_with_top_choice(self, base_report):
        lower = candidate(base_report, "Lower", 50, 50, 1.1, "Balanced", 20, (10, 20), (2, 2, 2, 2))
        top = candidate(base_report, "Top", 90, 90, 1.1, "Balanced", 20, (10, 20), (2, 2, 2, 2))

        result = rank([lower, top])
        assert [item.location for item in result.ranking] == ["Top", "Lower"]
        assert len(result.insights) == 1
        assert result.insights[0].startswith("Close competition")

    def test_sentinel_break_even_reads_as_not_reached(self, base_report, strong):
        stuck = candidate(base_report, "Stuck", 50, 50, 1.0, "High", 36, (5, 5), (1, 1, 1, 1))
        bottom = rank([strong, stuck]).ranking[1]
        assert "No break-even within 36 months" in bottom.concerns

    @pytest.mark.parametrize("count", [0, 1])
    def test_needs_two_candidates(self, strong, count):
        with pytest.raises(InsufficientCandidatesError) as exc:
            rank([strong] * count)
        assert exc.value.count == count

    @pytest.mark.parametrize("weights", [{"vibes": 0.5}, {"swot": -0.1}, {"swot": float("nan")}])
    def test_rejects_bad_weights(self, weights):
        with pytest.raises(InvalidInputError):
            ReportRankingStrategy(weights)

    def test_result_validates_and_tabulates(self, strong, weak):
        result = rank([strong, weak])
        is_valid, errors = SchemaValidator().validate_matrix(result.to_dict())
        assert is_valid, errors
        assert result.to_dict()["top_choice"]["location"] == "Alpha"

        frame = result.to_dataframe()
        assert list(frame.index) == [1, 2]
        assert frame.loc[1, "location"] == "Alpha"
        assert frame.loc[2, "financial"] == 20


class TestMatrixWeights:

    def test_defaults_sum_to_one(self):
        assert sum(MatrixWeights.defaults().as_dict().values()) == pytest.approx(1.0)

    def test_merge_and_normalize_return_new_sets(self):
        defaults = MatrixWeights.defaults()
        overrides = {"biz_score": 1.2}
        merged = defaults.merged(overrides)
        normalized = merged.normalized()

        assert overrides == {"biz_score": 1.2}
        assert defaults.biz_score == Config.MATRIX_WEIGHTS["biz_score"]
        assert merged.biz_score == 1.2
        assert sum(normalized.as_dict().values()) == pytest.approx(1.0)
        assert normalized.biz_score == pytest.approx(1.2 / 2.0)

    def test_strategy_does_not_touch_caller_or_config(self):
        overrides = {"strategic_fit": 0.5}
        before = dict(Config.MATRIX_WEIGHTS)
        strategy = WeightedMatrixStrategy(overrides)
        assert overrides == {"strategic_fit": 0.5}
        assert Config.MATRIX_WEIGHTS == before
        assert sum(strategy.weights.as_dict().values()) == pytest.approx(1.0)

    @pytest.mark.parametrize("overrides", [{"luck": 0.1}, {"biz_score": -0.1}, {"biz_score": float("nan")}])
    def test_rejects_bad_overrides(self, overrides):
        with pytest.raises(InvalidInputError):
            MatrixWeights.defaults().merged(overrides)

    def test_zero_weights_cannot_be_normalized(self):
        zeros = MatrixWeights(**{key: 0 for key in Config.MATRIX_WEIGHTS})
        with pytest.raises(InvalidInputError):
            zeros.normalized()


class TestWeightedMatrix:

    def test_min_max_normalization(self, strong, weak):
        result = WeightedMatrixStrategy().rank([weak, strong])
        top, bottom = result.ranking
        assert result.strategy == "weighted_matrix"
        assert top.location == "Alpha"
        assert top.score == 100
        assert bottom.score == 0
        assert top.confidence == 100
        assert top.label == "Strongly Recommended - Clear Top Choice"
        assert bottom.label == "Good Alternative - Consider as Backup"
        assert result.analysis["clear_winner"] is True
        assert result.analysis["confidence"] == 50

    def test_equal_totals_all_score_100(self, strong):
        twin = replace(strong, id="report-twin", location="Twin")
        result = WeightedMatrixStrategy().rank([strong, twin])
        assert [item.score for item in result.ranking] == [100, 100]
        assert [item.location for item in result.ranking] == ["Alpha", "Twin"]
        assert result.analysis["clear_winner"] is False

    def test_weights_change_the_winner(self, base_report):
        grower = candidate(base_report, "Grower", 50, 55, 1.45, "High", 30, (5, 10), (1, 1, 1, 1))
        earner = candidate(base_report, "Earner", 70, 70, 1.0, "Low", 8, (30, 45), (1, 1, 1, 1))

        assert WeightedMatrixStrategy().rank([grower, earner]).top_choice.location == "Earner"
        growth_only = {key: 0 for key in Config.MATRIX_WEIGHTS}
        growth_only["growth_potential"] = 1
        assert WeightedMatrixStrategy(growth_only).rank([grower, earner]).top_choice.location == "Grower"

    def test_strengths_and_concerns_come_from_criteria(self, strong, weak):
        top, bottom = WeightedMatrixStrategy().rank([strong, weak]).ranking
        assert len(top.strengths) <= 3 and len(top.concerns) <= 3
        assert "Competition favorability: 90" in top.strengths
        assert "Growth potential: 0" in bottom.concerns

    def test_result_validates(self, strong, weak, base_report):
        third = candidate(base_report, "Gamma", 65, 66, 1.1, "Balanced", 20, (10, 20), (2, 2, 2, 2))
        result = WeightedMatrixStrategy().rank([strong, weak, third])
        is_valid, errors = SchemaValidator().validate_matrix(result.to_dict())
        assert is_valid, errors
        assert result.ranking[2].label == "Not Recommended - Consider Alternatives"

    def test_needs_two_candidates(self, strong):
        with pytest.raises(InsufficientCandidatesError):
            WeightedMatrixStrategy().rank([strong])

    @pytest.mark.parametrize("rank_,total,confidence,text", [
        (1, 3, 90, "Strongly Recommended - Clear Top Choice"),
        (1, 3, 60, "Recommended - Best Overall Score"),
        (2, 5, 0, "Good Alternative - Consider as Backup"),
        (3, 5, 0, "Viable Option - Worth Further Investigation"),
        (3, 4, 0, "Not Recommended - Consider Alternatives"),
    ])
    def test_recommendation_text(self, rank_, total, confidence, text):
        assert recommendation_for(rank_, total, confidence) == text

    def test_risk_score(self, strong, weak):
        assert risk_score(strong) == 85
        assert risk_score(weak) == 20
