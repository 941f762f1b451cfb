"""
Recommendation Generator

This module maps patterns to recommendations using fixed rules.

Rules, evaluated per pattern in order (several may fire for one category):
1. RECOVERY:      trend declining OR score < 70
2. OPTIMIZATION:  trend improving AND score > 75
3. MASTERY:       score > 90 AND consistency > 0.8
4. CONSISTENCY:   consistency < 0.5
Then once across all categories:
5. BREAKTHROUGH:  mean score > 85

CONSTRAINTS:
- RULE-BASED ONLY: No ML, no randomness in text or scoring
- DETERMINISTIC: Same patterns and context always produce the same output,
  including recommendation IDs
- BOUNDED OUTPUT: ranked by confidence x success probability, top N only
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .category_registry import CategoryRegistry
from .pattern_model import (
    Archetype,
    Difficulty,
    Pattern,
    Priority,
    Recommendation,
    RuleKind,
    TrendDirection,
    UserContext,
    OVERALL_CATEGORY,
)
from .success_probability import estimate_success_probability

logger = logging.getLogger("recommendation_engine")


# -----------------------------------------------------------------------------
# Rule Thresholds
# -----------------------------------------------------------------------------
RECOVERY_SCORE_BELOW = 70
RECOVERY_CRITICAL_BELOW = 60
OPTIMIZATION_SCORE_ABOVE = 75
MASTERY_SCORE_ABOVE = 90
MASTERY_CONSISTENCY_ABOVE = 0.8
CONSISTENCY_BELOW = 0.5
BREAKTHROUGH_MEAN_ABOVE = 85

DEFAULT_MIN_CONFIDENCE = 0.6
DEFAULT_MAX_RECOMMENDATIONS = 5


# -----------------------------------------------------------------------------
# Recommendation Rule (Read-Only)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class RecommendationRule:
    """
    Fixed output parameters of one generator rule.

    Recovery and optimization take their action plans from the category
    registry; the other rules use action_template.
    """
    kind: str  # RuleKind value
    archetype: str  # Archetype value
    priority: str  # Priority value (recovery escalates below 60)
    confidence: float
    time_to_result: str
    difficulty: str  # Difficulty value
    scientific_basis: str
    action_template: tuple = ()


GENERATOR_RULES = {
    RuleKind.RECOVERY.value: RecommendationRule(
        kind=RuleKind.RECOVERY.value,
        archetype=Archetype.RECOVERY.value,
        priority=Priority.HIGH.value,
        confidence=0.92,
        time_to_result="1-2 weeks",
        difficulty=Difficulty.MODERATE.value,
        scientific_basis="",  # Per category
    ),
    RuleKind.OPTIMIZATION.value: RecommendationRule(
        kind=RuleKind.OPTIMIZATION.value,
        archetype=Archetype.OPTIMIZATION.value,
        priority=Priority.MEDIUM.value,
        confidence=0.88,
        time_to_result="2-4 weeks",
        difficulty=Difficulty.MODERATE.value,
        scientific_basis=(
            "Progressive optimization during positive trends can amplify results by 60% "
            "compared to static approaches."
        ),
    ),
    RuleKind.MASTERY.value: RecommendationRule(
        kind=RuleKind.MASTERY.value,
        archetype=Archetype.MAINTENANCE.value,
        priority=Priority.LOW.value,
        confidence=0.95,
        time_to_result="ongoing",
        difficulty=Difficulty.EASY.value,
        scientific_basis=(
            "Mastery maintenance requires deliberate practice and teaching others "
            "enhances personal retention by 90%."
        ),
        action_template=(
            "Maintain current successful practices with precision",
            "Fine-tune protocols based on advanced biometrics",
            "Share knowledge and mentor others in your journey",
            "Explore mastery-level challenges and innovations",
            "Document your optimization methodology for others",
        ),
    ),
    RuleKind.CONSISTENCY.value: RecommendationRule(
        kind=RuleKind.CONSISTENCY.value,
        archetype=Archetype.OPTIMIZATION.value,
        priority=Priority.HIGH.value,
        confidence=0.85,
        time_to_result="3-4 weeks",
        difficulty=Difficulty.EASY.value,
        scientific_basis=(
            "Habit formation research shows that consistency is more important than "
            "intensity, with micro-habits having 85% higher success rates."
        ),
        action_template=(
            "Start with micro-habits: 2-5 minutes daily commitment",
            "Use habit stacking: attach to existing routines",
            "Track visually: use a simple progress chart",
            "Celebrate small wins: reward consistency over perfection",
            "Prepare for obstacles: create if-then implementation plans",
        ),
    ),
    RuleKind.BREAKTHROUGH.value: RecommendationRule(
        kind=RuleKind.BREAKTHROUGH.value,
        archetype=Archetype.BREAKTHROUGH.value,
        priority=Priority.CRITICAL.value,
        confidence=0.96,
        time_to_result="1-3 months",
        difficulty=Difficulty.CHALLENGING.value,
        scientific_basis=(
            "Holistic optimization research shows that integrated practices can create "
            "synergistic effects, amplifying results by 200-300%."
        ),
        action_template=(
            "Integrate all pillars into a unified daily practice",
            "Explore cutting-edge biohacking and optimization techniques",
            "Become a mentor and guide others on their journey",
            "Document and systematize your optimization methodology",
            "Push the boundaries of human potential in your chosen areas",
        ),
    ),
}


# -----------------------------------------------------------------------------
# Recommendation Generator
# -----------------------------------------------------------------------------
class RecommendationGenerator:
    """
    Generates recommendations from patterns using fixed rules.

    Returns every match; filtering and ranking happen in rank_recommendations.
    """

    def __init__(self, registry: Optional[CategoryRegistry] = None):
        """Initialize the generator."""
        self._registry = registry or CategoryRegistry()
        self._rules = GENERATOR_RULES

    def generate(
        self,
        patterns: Sequence[Pattern],
        user_context: Optional[UserContext] = None,
    ) -> List[Recommendation]:
        """
        Apply all per-category rules, then the cross-category rule.

        Output order: pattern order, rule order within a pattern,
        breakthrough last.
        """
        context = user_context or UserContext()
        recommendations = []
        for pattern in patterns:
            recommendations.extend(self.generate_for_pattern(pattern, context))

        breakthrough = self.generate_breakthrough(patterns, context)
        if breakthrough is not None:
            recommendations.append(breakthrough)

        return recommendations

    def generate_for_pattern(
        self,
        pattern: Pattern,
        user_context: UserContext,
    ) -> List[Recommendation]:
        """Apply the four per-category rules to one pattern."""
        recommendations = []

        if (pattern.trend == TrendDirection.DECLINING.value
                or pattern.score < RECOVERY_SCORE_BELOW):
            recommendations.append(self._create_recovery(pattern, user_context))

        if (pattern.trend == TrendDirection.IMPROVING.value
                and pattern.score > OPTIMIZATION_SCORE_ABOVE):
            recommendations.append(self._create_optimization(pattern, user_context))

        if (pattern.score > MASTERY_SCORE_ABOVE
                and pattern.consistency > MASTERY_CONSISTENCY_ABOVE):
            recommendations.append(self._create_mastery(pattern, user_context))

        if pattern.consistency < CONSISTENCY_BELOW:
            recommendations.append(self._create_consistency(pattern, user_context))

        for rec in recommendations:
            logger.debug(f"Rule {rec.rule} fired for {pattern.category} (score {pattern.score})")

        return recommendations

    def generate_breakthrough(
        self,
        patterns: Sequence[Pattern],
        user_context: UserContext,
    ) -> Optional[Recommendation]:
        """One overall recommendation when the mean score exceeds 85."""
        if not patterns:
            return None

        avg_score = sum(p.score for p in patterns) / len(patterns)
        if avg_score <= BREAKTHROUGH_MEAN_ABOVE:
            return None

        avg_consistency = sum(p.consistency for p in patterns) / len(patterns)
        rule = self._rules[RuleKind.BREAKTHROUGH.value]

        return self._build(
            rule,
            category=OVERALL_CATEGORY,
            score=avg_score,
            user_context=user_context,
            title="Neural Optimization Breakthrough Protocol",
            description=(
                f"Exceptional achievement! You've reached {avg_score:.0f}% across all pillars "
                f"with {avg_consistency * 100:.0f}% consistency. "
                "Ready for the next level of human optimization?"
            ),
            action_plan=rule.action_template,
            estimated_impact=30,
            personalized_reason=(
                f"Your exceptional progress across all pillars "
                f"({user_context.total_sessions} sessions, "
                f"{user_context.current_streak}-day streak) positions you for "
                "breakthrough-level optimization."
            ),
        )

    # -------------------------------------------------------------------------
    # Per-rule builders
    # -------------------------------------------------------------------------

    def _create_recovery(self, pattern: Pattern, user_context: UserContext) -> Recommendation:
        rule = self._rules[RuleKind.RECOVERY.value]
        strategy = self._registry.get(pattern.category)
        priority = (
            Priority.CRITICAL.value
            if pattern.score < RECOVERY_CRITICAL_BELOW
            else rule.priority
        )

        return self._build(
            rule,
            category=pattern.category,
            score=pattern.score,
            user_context=user_context,
            title=strategy.recovery_title,
            description=(
                f"Your {pattern.category} pillar needs targeted recovery. Based on your "
                "patterns, this protocol is specifically designed for your optimization style."
            ),
            action_plan=strategy.recovery_actions,
            estimated_impact=min(25, 90 - pattern.score),
            personalized_reason=strategy.render_reason(pattern),
            scientific_basis=strategy.recovery_basis,
            priority=priority,
        )

    def _create_optimization(self, pattern: Pattern, user_context: UserContext) -> Recommendation:
        rule = self._rules[RuleKind.OPTIMIZATION.value]
        strategy = self._registry.get(pattern.category)

        return self._build(
            rule,
            category=pattern.category,
            score=pattern.score,
            user_context=user_context,
            title=f"{pattern.category.upper()} Advanced Optimization Protocol",
            description=(
                f"Your {pattern.category} pillar is trending upward with "
                f"{pattern.velocity:.1f} points velocity! Time to accelerate this "
                "progress with advanced techniques."
            ),
            action_plan=strategy.optimization_actions,
            estimated_impact=min(15, 95 - pattern.score),
            personalized_reason=(
                f"Your improving trend and {pattern.consistency * 100:.0f}% consistency "
                "make this the perfect time for advanced optimization."
            ),
        )

    def _create_mastery(self, pattern: Pattern, user_context: UserContext) -> Recommendation:
        rule = self._rules[RuleKind.MASTERY.value]
        consistency_pct = f"{pattern.consistency * 100:.0f}%"

        return self._build(
            rule,
            category=pattern.category,
            score=pattern.score,
            user_context=user_context,
            title=f"{pattern.category.upper()} Mastery Maintenance & Teaching",
            description=(
                f"Outstanding! Your {pattern.category} pillar has reached mastery level "
                f"({pattern.score:.0f}%) with {consistency_pct} consistency. "
                "Time to maintain and share your wisdom."
            ),
            action_plan=rule.action_template,
            estimated_impact=5,
            personalized_reason=(
                f"Your {pattern.category} mastery (score: {pattern.score:.0f}, "
                f"consistency: {consistency_pct}) positions you as a role model. "
                "Consider sharing your journey."
            ),
        )

    def _create_consistency(self, pattern: Pattern, user_context: UserContext) -> Recommendation:
        rule = self._rules[RuleKind.CONSISTENCY.value]

        return self._build(
            rule,
            category=pattern.category,
            score=pattern.score,
            user_context=user_context,
            title=f"{pattern.category.upper()} Consistency Builder Protocol",
            description=(
                f"Your {pattern.category} pillar shows inconsistent patterns "
                f"({pattern.consistency * 100:.0f}% consistency). Let's build sustainable, "
                "steady progress through proven habit formation."
            ),
            action_plan=rule.action_template,
            estimated_impact=18,
            personalized_reason=(
                f"Your completion rate of {user_context.completion_rate * 100:.0f}% suggests "
                "consistency challenges. Small, manageable changes will create lasting "
                "transformation."
            ),
        )

    def _build(
        self,
        rule: RecommendationRule,
        category: str,
        score: float,
        user_context: UserContext,
        title: str,
        description: str,
        action_plan: tuple,
        estimated_impact: float,
        personalized_reason: str,
        scientific_basis: Optional[str] = None,
        priority: Optional[str] = None,
    ) -> Recommendation:
        return Recommendation(
            recommendation_id=self._generate_id(rule.kind, category, score),
            title=title,
            description=description,
            category=category,
            priority=priority or rule.priority,
            confidence=rule.confidence,
            action_plan=tuple(action_plan),
            estimated_impact=estimated_impact,
            time_to_result=rule.time_to_result,
            difficulty=rule.difficulty,
            archetype=rule.archetype,
            personalized_reason=personalized_reason,
            scientific_basis=scientific_basis if scientific_basis is not None else rule.scientific_basis,
            success_probability=estimate_success_probability(user_context, rule.kind, category),
            rule=rule.kind,
        )

    def _generate_id(self, kind: str, category: str, score: float) -> str:
        """Generate deterministic recommendation ID, unique per (rule, category)."""
        content = f"{kind}:{category}:{score:.4f}"
        hash_suffix = hashlib.sha256(content.encode()).hexdigest()[:8]
        return f"{kind}-{category}-{hash_suffix}"


# -----------------------------------------------------------------------------
# Ranking
# -----------------------------------------------------------------------------
def rank_recommendations(
    recommendations: Sequence[Recommendation],
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
    limit: int = DEFAULT_MAX_RECOMMENDATIONS,
) -> List[Recommendation]:
    """
    Drop recommendations with confidence <= min_confidence, order by
    confidence x success probability (highest first) and keep the top `limit`.

    Ties keep generation order.
    """
    confident = filter_confident(recommendations, min_confidence)
    ranked = sorted(confident, key=lambda r: r.rank_score, reverse=True)
    return ranked[:max(limit, 0)]


def filter_confident(
    recommendations: Sequence[Recommendation],
    min_confidence: float = DEFAULT_MIN_CONFIDENCE,
) -> Tuple[Recommendation, ...]:
    """Recommendations above the confidence threshold, in generation order."""
    return tuple(r for r in recommendations if r.confidence > min_confidence)
