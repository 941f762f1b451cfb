"""
Category Strategy Registry

Per-category templates used by the recovery and optimization rules.

The registry is open: any category may be registered at runtime or loaded
from YAML. Categories without an entry use the generic strategy.

Reason templates are str.format strings and may use:
    {category}          category name
    {score}             current score
    {velocity_abs}      absolute velocity
    {gap_90}, {gap_85}  points remaining to 90 / 85
    {consistency_pct}   consistency as a percentage
    {consistency_word}  "inconsistent" if consistency < 0.3 else "declining"
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Dict, Any, List, Mapping, Union

import yaml

from .pattern_model import Pattern

logger = logging.getLogger("category_registry")

GENERIC_CATEGORY = "general"


# -----------------------------------------------------------------------------
# Category Strategy (Immutable)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class CategoryStrategy:
    """Recovery and optimization templates for one category."""
    category: str
    recovery_title: str
    recovery_actions: tuple
    recovery_basis: str
    recovery_reason: str  # Template, see module docstring
    optimization_actions: tuple

    def __post_init__(self):
        """Validate strategy on creation."""
        if not self.category:
            raise ValueError("Strategy category cannot be empty")
        if not isinstance(self.recovery_actions, tuple) or not self.recovery_actions:
            raise ValueError("recovery_actions must be a non-empty tuple")
        if not isinstance(self.optimization_actions, tuple) or not self.optimization_actions:
            raise ValueError("optimization_actions must be a non-empty tuple")

    def render_reason(self, pattern: Pattern) -> str:
        """Fill the recovery reason template from a pattern."""
        values = {
            "category": pattern.category,
            "score": pattern.score,
            "velocity_abs": abs(pattern.velocity),
            "gap_90": 90 - pattern.score,
            "gap_85": 85 - pattern.score,
            "consistency_pct": pattern.consistency * 100,
            "consistency_word": "inconsistent" if pattern.consistency < 0.3 else "declining",
        }
        try:
            return self.recovery_reason.format(**values)
        except (KeyError, IndexError, ValueError) as e:
            logger.warning(f"Bad reason template for {self.category}: {e}")
            return self.recovery_reason

    @classmethod
    def from_dict(cls, category: str, data: Mapping[str, Any]) -> "CategoryStrategy":
        return cls(
            category=category,
            recovery_title=data["recovery_title"],
            recovery_actions=tuple(data["recovery_actions"]),
            recovery_basis=data["recovery_basis"],
            recovery_reason=data["recovery_reason"],
            optimization_actions=tuple(data["optimization_actions"]),
        )


# -----------------------------------------------------------------------------
# Built-in Strategies
# -----------------------------------------------------------------------------
DEFAULT_STRATEGIES = (
    CategoryStrategy(
        category="body",
        recovery_title="Physical Recovery & Rebuilding Protocol",
        recovery_actions=(
            "Reduce workout intensity by 20% for optimal recovery",
            "Prioritize 8+ hours of restorative sleep",
            "Increase protein intake to 1.2g per kg body weight",
            "Add 15 minutes of gentle stretching daily",
            "Consider professional massage therapy",
        ),
        recovery_basis=(
            "Research shows that strategic recovery periods enhance long-term physical "
            "performance by 23% and reduce injury risk."
        ),
        recovery_reason=(
            "Your body pillar has declined {velocity_abs:.1f} points recently. "
            "Recovery is essential for sustainable progress."
        ),
        optimization_actions=(
            "Progressive overload: Increase intensity by 5-10%",
            "Add compound movements for maximum efficiency",
            "Implement periodization in your training",
            "Track biometrics for data-driven optimization",
            "Experiment with advanced recovery techniques",
        ),
    ),
    CategoryStrategy(
        category="mind",
        recovery_title="Cognitive Recovery & Mental Restoration",
        recovery_actions=(
            "Implement 20-minute focused breathing sessions",
            "Reduce screen time by 30% for digital detox",
            "Practice single-tasking for enhanced focus",
            "Take 5-minute nature breaks every 90 minutes",
            "Consider omega-3 supplementation for brain health",
        ),
        recovery_basis=(
            "Neuroscience research indicates that mental recovery protocols can restore "
            "cognitive performance by up to 40% within two weeks."
        ),
        recovery_reason=(
            "Your mind pillar shows {consistency_word} patterns. "
            "Cognitive recovery will restore your mental clarity."
        ),
        optimization_actions=(
            "Challenge yourself with complex cognitive tasks",
            "Learn a new skill that requires neuroplasticity",
            "Practice advanced meditation techniques",
            "Engage in strategic thinking exercises",
            "Explore memory palace techniques",
        ),
    ),
    CategoryStrategy(
        category="heart",
        recovery_title="Emotional Rebalancing & Heart Coherence",
        recovery_actions=(
            "Practice heart-focused breathing for 10 minutes daily",
            "Engage in gratitude journaling each morning",
            "Connect meaningfully with supportive relationships",
            "Engage in creative expression or art",
            "Consider heart rate variability training",
        ),
        recovery_basis=(
            "Heart coherence training has been shown to improve emotional regulation "
            "by 45% and reduce stress hormones significantly."
        ),
        recovery_reason=(
            "Your emotional patterns suggest the need for heart-centered practices. "
            "Your heart pillar can improve by {gap_90:.0f} points with focused attention."
        ),
        optimization_actions=(
            "Deepen emotional intelligence practices",
            "Practice advanced empathy and compassion exercises",
            "Engage in meaningful relationship building",
            "Explore creative emotional expression",
            "Volunteer for causes aligned with your values",
        ),
    ),
    CategoryStrategy(
        category="spirit",
        recovery_title="Spiritual Renewal & Consciousness Expansion",
        recovery_actions=(
            "Dedicate 20 minutes daily to meditation or prayer",
            "Spend time in nature for spiritual connection",
            "Reflect deeply on personal values and purpose",
            "Engage in meaningful service to others",
            "Explore philosophical or spiritual literature",
        ),
        recovery_basis=(
            "Studies on contemplative practices show 35% improvement in life "
            "satisfaction and 50% reduction in existential anxiety."
        ),
        recovery_reason=(
            "Your spiritual journey needs renewed attention. Current patterns suggest "
            "a 15-point improvement potential through consistent practice."
        ),
        optimization_actions=(
            "Explore advanced contemplative practices",
            "Deepen philosophical inquiry and study",
            "Practice energy cultivation techniques",
            "Connect with like-minded spiritual communities",
            "Engage in sacred ritual or ceremony",
        ),
    ),
    CategoryStrategy(
        category="diet",
        recovery_title="Nutritional Reset & Metabolic Optimization",
        recovery_actions=(
            "Return to whole, unprocessed foods for 2 weeks",
            "Increase vegetable intake to 7-9 servings daily",
            "Ensure proper hydration (35ml per kg body weight)",
            "Eliminate inflammatory foods temporarily",
            "Plan and prep meals in advance for consistency",
        ),
        recovery_basis=(
            "Nutritional intervention studies show 28% improvement in energy levels "
            "and 22% enhancement in cognitive function within 10 days."
        ),
        recovery_reason=(
            "Your nutritional patterns need optimization. A focused reset can improve "
            "your diet pillar by {gap_85:.0f} points."
        ),
        optimization_actions=(
            "Experiment with nutrient timing optimization",
            "Try intermittent fasting protocols safely",
            "Optimize micronutrient density",
            "Consider personalized nutrition testing",
            "Explore functional foods and adaptogens",
        ),
    ),
)

GENERIC_STRATEGY = CategoryStrategy(
    category=GENERIC_CATEGORY,
    recovery_title="Targeted Recovery Protocol",
    recovery_actions=(
        "Scale back session intensity for one week",
        "Protect sleep and recovery time",
        "Pick one small daily practice and keep it",
        "Review what changed before the decline started",
        "Rebuild gradually once scores stabilize",
    ),
    recovery_basis=(
        "Planned recovery phases followed by gradual progression are a well-established "
        "way to restore performance after a decline."
    ),
    recovery_reason=(
        "Your {category} pillar is at {score:.0f} and shows {consistency_word} patterns. "
        "Targeted recovery can recover up to {gap_90:.0f} points."
    ),
    optimization_actions=(
        "Increase practice difficulty by 5-10%",
        "Add one focused session per week",
        "Track results after every session",
        "Review progress weekly and adjust",
        "Experiment with one advanced technique",
    ),
)


# -----------------------------------------------------------------------------
# Category Registry
# -----------------------------------------------------------------------------
class CategoryRegistry:
    """Lookup table of category strategies with a generic fallback."""

    def __init__(
        self,
        strategies=DEFAULT_STRATEGIES,
        fallback: CategoryStrategy = GENERIC_STRATEGY,
    ):
        self._strategies: Dict[str, CategoryStrategy] = {}
        self._fallback = fallback
        for strategy in strategies:
            self.register(strategy)

    def register(self, strategy: CategoryStrategy) -> None:
        """Add or replace the strategy for a category."""
        if strategy.category in self._strategies:
            logger.info(f"Replacing strategy for category: {strategy.category}")
        self._strategies[strategy.category] = strategy

    def get(self, category: str) -> CategoryStrategy:
        """Strategy for category, or the generic fallback."""
        return self._strategies.get(category, self._fallback)

    def has(self, category: str) -> bool:
        return category in self._strategies

    @property
    def categories(self) -> List[str]:
        return sorted(self._strategies)

    def load_yaml(self, path: Union[str, Path]) -> int:
        """
        Register strategies from a YAML file.

        Expected layout:
            categories:
              sleep:
                recovery_title: ...
                recovery_actions: [...]
                recovery_basis: ...
                recovery_reason: ...
                optimization_actions: [...]

        Returns: Number of strategies registered
        Raises: ValueError on a malformed file
        """
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        section = data.get("categories") if isinstance(data, dict) else None
        if not isinstance(section, dict):
            raise ValueError(f"Strategy file {path} must contain a 'categories' mapping")

        count = 0
        for category, entry in section.items():
            if not isinstance(entry, dict):
                raise ValueError(f"Strategy for {category} must be a mapping")
            try:
                self.register(CategoryStrategy.from_dict(str(category), entry))
            except KeyError as e:
                raise ValueError(f"Strategy for {category} is missing field {e}")
            count += 1

        logger.info(f"Loaded {count} category strategies from {path}")
        return count


def create_registry(strategies_file: Optional[Union[str, Path]] = None) -> CategoryRegistry:
    """Built-in strategies plus, optionally, those from a YAML file."""
    registry = CategoryRegistry()
    if strategies_file:
        registry.load_yaml(strategies_file)
    return registry
