"""
Success-Probability Estimator

Heuristic likelihood that a user completes / benefits from a recommendation.
NOT a calibrated probability.

Baseline 0.70 plus independent additive adjustments, clamped to [0.40, 0.98].
"""

from typing import Optional

from .pattern_model import (
    RuleKind,
    UserContext,
    SUCCESS_PROBABILITY_FLOOR,
    SUCCESS_PROBABILITY_CEILING,
)

BASELINE_PROBABILITY = 0.70

# User history adjustments
HIGH_COMPLETION_RATE = 0.8
HIGH_COMPLETION_BONUS = 0.15
LONG_STREAK_DAYS = 7
LONG_STREAK_BONUS = 0.10
EXPERIENCED_SESSIONS = 50
EXPERIENCED_BONUS = 0.05
PREFERRED_CATEGORY_BONUS = 0.10

# Rule adjustments
RULE_ADJUSTMENTS = {
    RuleKind.CONSISTENCY.value: 0.10,
    RuleKind.RECOVERY.value: 0.05,
    RuleKind.OPTIMIZATION.value: -0.05,
    RuleKind.BREAKTHROUGH.value: -0.15,
}


def estimate_success_probability(
    user_context: Optional[UserContext],
    rule: str,
    category: str,
) -> float:
    """
    Estimate success probability for a rule applied to a category.

    Mastery recommendations sit at the ceiling: the user is already
    performing the practices being recommended.
    """
    if rule == RuleKind.MASTERY.value:
        return SUCCESS_PROBABILITY_CEILING

    context = user_context or UserContext()
    probability = BASELINE_PROBABILITY

    if context.completion_rate > HIGH_COMPLETION_RATE:
        probability += HIGH_COMPLETION_BONUS
    if context.current_streak > LONG_STREAK_DAYS:
        probability += LONG_STREAK_BONUS
    if context.total_sessions > EXPERIENCED_SESSIONS:
        probability += EXPERIENCED_BONUS

    probability += RULE_ADJUSTMENTS.get(rule, 0.0)

    if category in context.category_preferences:
        probability += PREFERRED_CATEGORY_BONUS

    # Round away float noise from the additive steps (0.7 + 0.15 + ...)
    probability = round(probability, 6)
    return max(SUCCESS_PROBABILITY_FLOOR, min(SUCCESS_PROBABILITY_CEILING, probability))
