"""
Insight Text

Short descriptive strings for callers to render next to recommendations.

Everything here is presentation: no function in this module feeds back
into pattern analysis or recommendation ranking. The only source of
randomness in the package (potential_hint) lives here and takes an
injected random.Random so callers can seed it.
"""

import random
from typing import List, Optional

from .learning_store import LearningHistoryStore, LearningMaturity
from .pattern_model import Pattern, UserContext

DEFAULT_MAX_INSIGHTS = 2

EXCEPTIONAL_COMPLETION_RATE = 0.8
REMARKABLE_STREAK_DAYS = 14

MATURITY_LABELS = {
    LearningMaturity.HIGH.value: "High",
    LearningMaturity.MEDIUM.value: "Medium",
    LearningMaturity.LEARNING.value: "Learning",
}


def personalized_insights(
    user_context: Optional[UserContext],
    max_insights: int = DEFAULT_MAX_INSIGHTS,
) -> List[str]:
    """
    Up to `max_insights` (default 2) strings derived only from the user context.
    """
    context = user_context or UserContext()
    consistency_word = (
        "exceptional" if context.completion_rate > EXCEPTIONAL_COMPLETION_RATE else "good"
    )
    commitment_word = (
        "remarkable" if context.current_streak > REMARKABLE_STREAK_DAYS else "solid"
    )

    insights = [
        f"Neural Analysis: Your {context.total_sessions} sessions show "
        f"{consistency_word} optimization consistency.",
        f"Performance Trend: Your {context.current_streak}-day streak demonstrates "
        f"{commitment_word} commitment to neural enhancement.",
        f"Optimization Profile: Based on your patterns, you respond best to "
        f"{context.motivation_type} motivational approaches.",
        f"Success Probability: Your historical data suggests a "
        f"{context.completion_rate * 100:.0f}% likelihood of achieving your next "
        "optimization milestone.",
    ]
    return insights[:max(0, min(max_insights, DEFAULT_MAX_INSIGHTS))]


def system_learning_summary(store: LearningHistoryStore) -> List[str]:
    """Three lines describing how much analysis history the engine holds."""
    total = store.count
    label = MATURITY_LABELS[store.maturity()]
    return [
        f"System has performed {total} neural pattern analyses",
        f"Learning model confidence: {label}",
        "Recommendation accuracy improving through continuous user feedback integration",
    ]


def potential_hint(pattern: Pattern, rng: Optional[random.Random] = None) -> str:
    """
    Cosmetic "+N% potential" badge text for a category card, N in [2, 9].

    Not part of the engine's deterministic output.
    """
    rng = rng or random.Random()
    return f"AI suggests: +{rng.randint(2, 9)}% potential for {pattern.category}"
