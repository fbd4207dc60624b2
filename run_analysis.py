#!/usr/bin/env python3
"""
Run the BizScore Opportunity Engine

Scores one location/category pairing, or compares several demo candidates
with the decision matrix.

Usage:
    python run_analysis.py --location "Koramangala" --category Cafe --demand 72 --density Balanced
    python run_analysis.py --demo
    python run_analysis.py --compare --strategy weighted --json

Examples:
    python run_analysis.py --location "Indiranagar" --category Gym --demand 65 --density High --population 12000
    python run_analysis.py --demo --json
"""

import argparse
import json
import logging
import os
import sys
from datetime import datetime, timezone

# Add src to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'src'))

from decision_matrix import ReportRankingStrategy, WeightedMatrixStrategy, rank
from opportunity_engine import (
    InvalidInputError,
    MarketSignal,
    OpportunityEngineError,
    analyze_opportunity,
    create_report_summary,
    export_report_json,
)
from tools.schema_validation import SchemaValidator
from utils.config import Config

logger = logging.getLogger("run_analysis")

DEMO_CANDIDATES = [
    ("Koramangala", "Cafe", MarketSignal(
        demand_index=78, competition_density="Balanced", competition_count=14,
        population_density=12000, avg_income=8, internet_penetration=82, literacy_rate=90)),
    ("Whitefield", "Gym", MarketSignal(
        demand_index=64, competition_density="Low", competition_count=4,
        population_density=6500, avg_income=9, internet_penetration=85, literacy_rate=92)),
    ("Jayanagar", "Salon", MarketSignal(
        demand_index=55, competition_density="High", competition_count=22,
        population_density=15000, avg_income=6, internet_penetration=70, literacy_rate=88)),
]


def run_single(args, as_of: datetime):
    """Analyze the pairing described on the command line"""
    signal = MarketSignal(
        demand_index=args.demand,
        competition_density=args.density,
        competition_count=args.competitors,
        population_density=args.population,
        avg_income=args.income,
        internet_penetration=args.internet,
        literacy_rate=args.literacy,
    )
    return analyze_opportunity(args.location, args.category, signal,
                               forecast_growth=args.growth, as_of=as_of)


def run_demo(as_of: datetime):
    location, category, signal = DEMO_CANDIDATES[0]
    return analyze_opportunity(location, category, signal, as_of=as_of)


def run_compare(strategy_name: str, as_of: datetime):
    reports = [analyze_opportunity(location, category, signal, as_of=as_of)
               for location, category, signal in DEMO_CANDIDATES]
    strategy = WeightedMatrixStrategy() if strategy_name == "weighted" else ReportRankingStrategy()
    return rank(reports, strategy)


def print_matrix(result):
    """Pretty print a decision matrix"""
    print("\n" + "=" * 60)
    print(f"📊 DECISION MATRIX ({result.strategy})")
    print("=" * 60)
    for item in result.ranking:
        print(f"\n#{item.rank} {item.location} ({item.category}) - {item.score:g}")
        print(f"   {item.label}")
        for strength in item.strengths:
            print(f"   + {strength}")
        for concern in item.concerns:
            print(f"   - {concern}")

    if result.insights:
        print("\n💡 Insights:")
        for insight in result.insights:
            print(f"   • {insight}")
    print("\n" + "=" * 60)


def main():
    parser = argparse.ArgumentParser(
        description="BizScore Opportunity Engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_analysis.py --location "Koramangala" --category Cafe --demand 72 --density Balanced
  python run_analysis.py --demo
  python run_analysis.py --compare --strategy weighted --json
        """
    )

    parser.add_argument("--location", help="Location name")
    parser.add_argument("--category", help="Business type or category id (e.g. Cafe, retail)")
    parser.add_argument("--demand", type=float, default=60, help="Demand index 0-100 (default: 60)")
    parser.add_argument("--density", default="Balanced",
                        help="Competition density: Low, Balanced, High, Oversaturated")
    parser.add_argument("--competitors", type=int, default=0, help="Competitor count")
    parser.add_argument("--population", type=float, default=5000, help="People per km²")
    parser.add_argument("--income", type=float, default=5, help="Average income (lakhs/year)")
    parser.add_argument("--internet", type=float, default=60, help="Internet penetration %%")
    parser.add_argument("--literacy", type=float, default=75, help="Literacy rate %%")
    parser.add_argument("--growth", type=float, help="Forecast growth ratio (1.0 = flat)")
    parser.add_argument("--demo", action="store_true", help="Analyze a built-in demo pairing")
    parser.add_argument("--compare", action="store_true", help="Rank the built-in demo candidates")
    parser.add_argument("--strategy", choices=["report", "weighted"], default="report",
                        help="Decision matrix strategy for --compare (default: report)")
    parser.add_argument("--json", action="store_true", help="Print JSON instead of a text summary")
    parser.add_argument("--output", "-o", help="Save JSON to a file")
    parser.add_argument("--log-level", default=None, help="Logging level (default: BIZSCORE_LOG_LEVEL)")

    args = parser.parse_args()
    Config.configure_logging(args.log_level)
    Config.validate_weights()

    if not (args.demo or args.compare) and not (args.location and args.category):
        parser.error("Please provide --location and --category, or use --demo / --compare")

    as_of = datetime.now(timezone.utc)

    try:
        if args.compare:
            result = run_compare(args.strategy, as_of)
            is_valid, errors = SchemaValidator().validate_matrix(result.to_dict())
            if not is_valid:
                logger.error(f"Decision matrix failed validation: {errors}")
                sys.exit(1)
            payload = json.dumps(result.to_dict(), indent=2)
            if args.json:
                print(payload)
            else:
                print_matrix(result)
        else:
            report = run_demo(as_of) if args.demo else run_single(args, as_of)
            payload = export_report_json(report)
            print(payload if args.json else create_report_summary(report))
    except InvalidInputError as e:
        parser.error(str(e))
    except OpportunityEngineError as e:
        logger.error(f"Analysis failed: {e}")
        sys.exit(1)

    if args.output:
        with open(args.output, "w") as f:
            f.write(payload)
        print(f"\n💾 Results saved to: {args.output}")


if __name__ == "__main__":
    main()
