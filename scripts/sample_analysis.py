#!/usr/bin/env python3
"""
Sample Analysis Run

Generates a 30-day synthetic session log for the five built-in categories,
runs the pattern engine over it and prints patterns, recommendations and
insight text.

Usage:
    python scripts/sample_analysis.py [--seed N] [--days N] [--json]
"""

import argparse
import json
import logging
import random
import sys
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, List

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pattern_engine.config import load_config  # noqa: E402
from pattern_engine.engine import PatternEngine  # noqa: E402
from pattern_engine.insights import potential_hint  # noqa: E402
from pattern_engine.pattern_model import UserContext  # noqa: E402

# Score ranges per category: (minimum, spread)
SAMPLE_RANGES = {
    "body": (70, 30),
    "mind": (75, 25),
    "heart": (65, 35),
    "spirit": (72, 28),
    "diet": (68, 32),
}


def generate_sample_history(days: int, rng: random.Random) -> List[Dict[str, Any]]:
    """One session per day, oldest first."""
    start = datetime.utcnow() - timedelta(days=days - 1)
    history = []
    for i in range(days):
        session: Dict[str, Any] = {"timestamp": (start + timedelta(days=i)).isoformat()}
        for category, (low, spread) in SAMPLE_RANGES.items():
            session[category] = low + rng.randrange(spread)
        history.append(session)
    return history


def main() -> int:
    parser = argparse.ArgumentParser(description="Run the pattern engine on sample data")
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--days", type=int, default=30)
    parser.add_argument("--json", action="store_true", help="Print JSON instead of text")
    args = parser.parse_args()

    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    rng = random.Random(args.seed)
    history = generate_sample_history(args.days, rng)
    scores = {category: history[-1][category] for category in SAMPLE_RANGES}
    context = UserContext.from_profile(
        {"total_sessions": args.days, "streak": min(args.days, 12)},
        scores,
        {"completed_today": 2, "today_sessions": 3},
    )

    engine = PatternEngine(config=config)
    patterns = engine.extract_patterns(scores, history)
    recommendations = engine.analyze(scores, history, context)

    if args.json:
        print(json.dumps({
            "patterns": [p.to_dict() for p in patterns],
            "recommendations": [r.to_dict() for r in recommendations],
            "insights": engine.insights(context),
        }, indent=2))
        return 0

    print("=" * 60)
    print("PATTERNS")
    print("=" * 60)
    for p in patterns:
        print(
            f"  {p.category:<8} score={p.score:5.1f} trend={p.trend:<9} "
            f"consistency={p.consistency:.2f} velocity={p.velocity:+.1f} "
            f"stability={p.stability:.2f}"
        )
        print(f"           {potential_hint(p, rng)}")

    print("\n" + "=" * 60)
    print("RECOMMENDATIONS")
    print("=" * 60)
    if not recommendations:
        print("  (none)")
    for rec in recommendations:
        print(f"  [{rec.priority.upper()}] {rec.title} ({rec.category}, {rec.archetype})")
        print(
            f"      confidence={rec.confidence:.2f} success={rec.success_probability:.2f} "
            f"impact={rec.estimated_impact:.0f} in {rec.time_to_result}"
        )
        for step in rec.action_plan:
            print(f"      - {step}")

    print("\n" + "=" * 60)
    print("INSIGHTS")
    print("=" * 60)
    for line in engine.insights(context) + engine.system_insights():
        print(f"  {line}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
