"""
Pattern Engine (Main Interface)

Orchestrates one analysis run:
    scores + history -> patterns -> recommendations -> filter/rank -> caller
with a learning record appended as a side effect.

The engine is an explicit object owned by the caller. Its only mutable
state is the learning history store.

NEVER FAILS: analyze() returns an empty list rather than raising for empty,
short or noisy input.
"""

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional, Union

from . import MODEL_VERSION
from .category_registry import CategoryRegistry, create_registry
from .config import EngineConfig
from .insights import personalized_insights, system_learning_summary
from .learning_store import LearningHistoryStore
from .pattern_extractor import extract_patterns
from .pattern_model import Pattern, Recommendation, UserContext
from .recommendation_engine import (
    RecommendationGenerator,
    filter_confident,
    rank_recommendations,
)

logger = logging.getLogger("pattern_engine")

ContextInput = Union[UserContext, Mapping[str, Any], None]


def coerce_context(user_context: ContextInput) -> UserContext:
    """Accept a UserContext, a loose mapping, or None."""
    if isinstance(user_context, UserContext):
        return user_context
    return UserContext.from_dict(user_context)


class PatternEngine:
    """
    Behavioral-pattern analysis and recommendation engine.

    Usage:
        engine = PatternEngine()
        recommendations = engine.analyze(scores, history, user_context)
        lines = engine.insights(user_context)
    """

    def __init__(
        self,
        config: Optional[EngineConfig] = None,
        registry: Optional[CategoryRegistry] = None,
        store: Optional[LearningHistoryStore] = None,
    ):
        """Initialize the engine."""
        self._config = config or EngineConfig()
        self._registry = registry or create_registry(self._config.strategies_file)
        self._generator = RecommendationGenerator(self._registry)
        self._store = store or LearningHistoryStore(
            cap=self._config.learning_history_cap,
            retain=self._config.learning_history_retain,
        )

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def registry(self) -> CategoryRegistry:
        return self._registry

    @property
    def store(self) -> LearningHistoryStore:
        return self._store

    # -------------------------------------------------------------------------
    # Main Analysis Entry Point
    # -------------------------------------------------------------------------

    def analyze(
        self,
        scores: Optional[Mapping[str, Any]],
        history: Any,
        user_context: ContextInput = None,
        as_of: Optional[datetime] = None,
    ) -> List[Recommendation]:
        """
        Analyze current scores against history and return ranked recommendations.

        Args:
            scores: Current score per category (0-100)
            history: Session log, oldest first, each a mapping category -> score
            user_context: UserContext, loose mapping, or None
            as_of: Timestamp stamped on patterns and the learning record
                   (defaults to now; pass it for reproducible output)

        Returns:
            At most max_recommendations recommendations, confidence above
            min_confidence, sorted by confidence x success probability
        """
        as_of = as_of or datetime.utcnow()
        context = coerce_context(user_context)

        patterns = self.extract_patterns(scores, history, as_of=as_of)
        generated = self._generator.generate(patterns, context)
        confident = filter_confident(generated, self._config.min_confidence)
        ranked = rank_recommendations(
            confident,
            min_confidence=self._config.min_confidence,
            limit=self._config.max_recommendations,
        )

        self._store.record_analysis(
            timestamp=as_of.isoformat(),
            patterns=patterns,
            recommendations=confident,
            user_context=context,
            model_version=MODEL_VERSION,
        )

        logger.info(
            f"Analyzed {len(patterns)} categories: {len(generated)} generated, "
            f"{len(ranked)} returned"
        )
        return ranked

    def extract_patterns(
        self,
        scores: Optional[Mapping[str, Any]],
        history: Any,
        as_of: Optional[datetime] = None,
    ) -> List[Pattern]:
        """Patterns for every usable category in the snapshot. No side effects."""
        return extract_patterns(scores, history, as_of=as_of, config=self._config)

    # -------------------------------------------------------------------------
    # Insight Text
    # -------------------------------------------------------------------------

    def insights(self, user_context: ContextInput = None) -> List[str]:
        """At most two descriptive strings derived from the user context."""
        return personalized_insights(coerce_context(user_context))

    def system_insights(self) -> List[str]:
        """Descriptive lines about the analysis history held by this engine."""
        return system_learning_summary(self._store)


def create_engine(config: Optional[EngineConfig] = None) -> PatternEngine:
    """Build an engine with its own registry and store."""
    return PatternEngine(config=config)


logger.debug("Pattern Engine module loaded")
