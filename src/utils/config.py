"""
Configuration management for the BizScore Opportunity Engine

Provides centralized configuration for:
- BizScore component weights
- Decision matrix weights (report ranking and weighted matrix)
- Reference ceilings used by the normalizers
- Threshold breakpoints for risk, failure and recommendation tiers
"""

import logging
import os
from typing import Dict

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
load_dotenv()


class Config:
    """Configuration settings for the BizScore Opportunity Engine"""

    # Currency for all money figures (the cost tables are expressed in INR)
    CURRENCY = os.getenv("BIZSCORE_CURRENCY", "INR")

    LOG_LEVEL = os.getenv("BIZSCORE_LOG_LEVEL", "INFO")

    # ==========================================================================
    # BIZSCORE
    # ==========================================================================

    # Composite weights (must sum to 1.0)
    BIZSCORE_WEIGHTS: Dict[str, float] = {
        "demand": 0.35,
        "growth": 0.20,
        "location": 0.15,
        "competition": 0.10,
        "category_ease": 0.10,
        "strategic_opportunity": 0.10,
    }

    # Population density that maps to a location score of 100 (people/km²)
    POPULATION_DENSITY_CEILING = 20000

    # Score rating breakpoints
    SCORE_RATING_EXCELLENT = 80
    SCORE_RATING_GOOD = 65
    SCORE_RATING_MODERATE = 50

    # ==========================================================================
    # COMPETITION
    # ==========================================================================

    # Radius (km) over which competitors are counted
    COMPETITION_SEARCH_RADIUS_KM = float(os.getenv("BIZSCORE_SEARCH_RADIUS_KM", "3"))

    # Competitors per km² that saturate the density score at 100
    COMPETITION_SATURATION_PER_KM2 = 5.0

    # ==========================================================================
    # FINANCIALS
    # ==========================================================================

    # Months after which a projection is treated as "not profitable"
    BREAK_EVEN_HORIZON_MONTHS = 36

    # Setup cost that maps to a capital score of 0
    CAPITAL_CEILING = 10_000_000

    PROFIT_MARGIN_FLOOR = 5
    PROFIT_MARGIN_CEILING = 45

    # Monthly operating cost as a share of setup cost
    OPERATING_COST_SHARE_MIN = 0.12
    OPERATING_COST_SHARE_MAX = 0.16

    # Revenue band spread around the midpoint
    REVENUE_SPREAD = 0.20

    YEAR1_GROWTH_CAP = 1.3
    YEAR3_COST_INFLATION = 1.15

    # ==========================================================================
    # THRESHOLD BANDS
    # ==========================================================================

    RISK_WEIGHTS: Dict[str, float] = {
        "competition": 0.30,
        "financial": 0.35,
        "operational": 0.20,
        "regulatory": 0.15,
    }
    RISK_LEVEL_BREAKPOINTS = (75, 60, 40, 25)  # Very High, High, Moderate, Low
    FAILURE_BREAKPOINTS = (75, 60, 40, 20)  # Very High, High, Moderate, Low
    RECOMMENDATION_BREAKPOINTS = (75, 55, 35)  # start-now, start-caution, wait-monitor

    # ==========================================================================
    # DECISION MATRIX
    # ==========================================================================

    # Report ranking weights (must sum to 1.0)
    DECISION_WEIGHTS: Dict[str, float] = {
        "biz_score": 0.30,
        "forecast": 0.20,
        "competition": 0.15,
        "financial": 0.20,
        "swot": 0.15,
    }

    # Weighted matrix default weights (must sum to 1.0)
    MATRIX_WEIGHTS: Dict[str, float] = {
        "biz_score": 0.20,
        "growth_potential": 0.15,
        "demand_level": 0.12,
        "competition_favorability": 0.12,
        "profitability": 0.12,
        "break_even_speed": 0.10,
        "capital_requirements": 0.08,
        "operational_complexity": 0.05,
        "risk_level": 0.04,
        "strategic_fit": 0.02,
    }

    # Score gap between the top two candidates that counts as a clear winner
    CLEAR_WINNER_GAP = 15

    @classmethod
    def validate_weights(cls):
        """Check that every weight table sums to 1.0"""
        tables = {
            "BIZSCORE_WEIGHTS": cls.BIZSCORE_WEIGHTS,
            "RISK_WEIGHTS": cls.RISK_WEIGHTS,
            "DECISION_WEIGHTS": cls.DECISION_WEIGHTS,
            "MATRIX_WEIGHTS": cls.MATRIX_WEIGHTS,
        }
        for name, weights in tables.items():
            total = sum(weights.values())
            if abs(total - 1.0) > 1e-9:
                raise ValueError(f"{name} must sum to 1.0, got {total:.4f}")

    @classmethod
    def configure_logging(cls, level: str = None):
        """Set up root logging for command-line use"""
        logging.basicConfig(
            level=getattr(logging, (level or cls.LOG_LEVEL).upper(), logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
