"""
Pytest configuration for Pattern Engine tests.

This module provides:
1. Common fixtures for all tests (engine, contexts, histories)
2. Factories for patterns and recommendations
3. Test session configuration
"""

from datetime import datetime

import pytest

from pattern_engine.config import EngineConfig
from pattern_engine.engine import PatternEngine
from pattern_engine.learning_store import LearningHistoryStore
from pattern_engine.pattern_model import (
    Archetype,
    Difficulty,
    Pattern,
    Priority,
    Recommendation,
    RuleKind,
    TrendDirection,
    UserContext,
)


# -----------------------------------------------------------------------------
# Test Constants
# -----------------------------------------------------------------------------
FIXED_AS_OF = datetime(2024, 3, 1, 9, 0, 0)
CATEGORIES = ("body", "mind", "heart", "spirit", "diet")


# -----------------------------------------------------------------------------
# Common Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def as_of():
    """Fixed analysis timestamp for reproducible output."""
    return FIXED_AS_OF


@pytest.fixture
def engine():
    """Fresh engine with default configuration."""
    return PatternEngine(config=EngineConfig())


@pytest.fixture
def store():
    """Fresh learning history store with default bounds."""
    return LearningHistoryStore()


@pytest.fixture
def default_context():
    """Brand-new user: no sessions, no streak, no preferences."""
    return UserContext()


@pytest.fixture
def engaged_context():
    """Committed user who qualifies for every context bonus."""
    return UserContext(
        total_sessions=60,
        current_streak=10,
        preferred_time="07:30",
        completion_rate=0.9,
        category_preferences=frozenset({"mind", "body"}),
        previous_success={"mind": 0.8},
        learning_style="visual",
        motivation_type="progress",
    )


@pytest.fixture
def declining_mind_history():
    """Mind score falling from 70 to 55 over five sessions."""
    return [
        {"timestamp": "2024-02-25T09:00:00", "mind": 70},
        {"timestamp": "2024-02-26T09:00:00", "mind": 66},
        {"timestamp": "2024-02-27T09:00:00", "mind": 62},
        {"timestamp": "2024-02-28T09:00:00", "mind": 58},
        {"timestamp": "2024-02-29T09:00:00", "mind": 55},
    ]


@pytest.fixture
def flat_high_history():
    """Ten sessions with every category steady at 92."""
    return [{category: 92 for category in CATEGORIES} for _ in range(10)]


# -----------------------------------------------------------------------------
# Factories
# -----------------------------------------------------------------------------
@pytest.fixture
def make_pattern():
    """Build a valid Pattern with overridable fields."""
    def _make(**overrides):
        values = {
            "category": "mind",
            "score": 75.0,
            "trend": TrendDirection.STABLE.value,
            "consistency": 0.9,
            "velocity": 0.0,
            "stability": 0.9,
            "last_updated": FIXED_AS_OF.isoformat(),
            "sample_size": 10,
        }
        values.update(overrides)
        return Pattern(**values)
    return _make


@pytest.fixture
def make_recommendation():
    """Build a valid Recommendation with overridable fields."""
    def _make(**overrides):
        values = {
            "recommendation_id": "rec-test-001",
            "title": "Test Recommendation",
            "description": "A test recommendation",
            "category": "mind",
            "priority": Priority.HIGH.value,
            "confidence": 0.9,
            "action_plan": ("Step 1", "Step 2"),
            "estimated_impact": 10,
            "time_to_result": "1-2 weeks",
            "difficulty": Difficulty.MODERATE.value,
            "archetype": Archetype.RECOVERY.value,
            "personalized_reason": "Because",
            "scientific_basis": "Research",
            "success_probability": 0.75,
            "rule": RuleKind.RECOVERY.value,
        }
        values.update(overrides)
        return Recommendation(**values)
    return _make
