"""
Pattern Model & Classification Enums

This module defines the data structures for pattern analysis and
recommendations. All records are IMMUTABLE.

CONSTRAINTS:
- IMMUTABLE: Records are frozen dataclasses, tuples instead of lists
- VALIDATED: Out-of-range values raise ValueError on construction
- TOLERANT INPUT: UserContext.from_dict never raises, missing data = defaults
- NO STORAGE: Patterns and recommendations are created fresh on every call
"""

import math
from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional, Dict, Any, Iterable, Mapping, FrozenSet


# -----------------------------------------------------------------------------
# Trend Direction Enum (LOCKED - EXACTLY 3 VALUES)
# -----------------------------------------------------------------------------
class TrendDirection(str, Enum):
    """Coarse direction of a category's recent score trajectory."""
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


# -----------------------------------------------------------------------------
# Priority Enum
# -----------------------------------------------------------------------------
class Priority(str, Enum):
    """Recommendation priority levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


# -----------------------------------------------------------------------------
# Difficulty Enum
# -----------------------------------------------------------------------------
class Difficulty(str, Enum):
    """How demanding the action plan is for the user."""
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


# -----------------------------------------------------------------------------
# Archetype Enum (LOCKED - EXACTLY 4 VALUES)
# -----------------------------------------------------------------------------
class Archetype(str, Enum):
    """
    Recommendation shape shown to the user.

    Consistency-building recommendations are presented as OPTIMIZATION;
    mastery recommendations as MAINTENANCE.
    """
    RECOVERY = "recovery"
    OPTIMIZATION = "optimization"
    MAINTENANCE = "maintenance"
    BREAKTHROUGH = "breakthrough"


# -----------------------------------------------------------------------------
# Rule Kind Enum (LOCKED - EXACTLY 5 VALUES)
# -----------------------------------------------------------------------------
class RuleKind(str, Enum):
    """Which generator rule produced a recommendation."""
    RECOVERY = "recovery"
    OPTIMIZATION = "optimization"
    MASTERY = "mastery"
    CONSISTENCY = "consistency"
    BREAKTHROUGH = "breakthrough"


class LearningStyle(str, Enum):
    VISUAL = "visual"
    AUDITORY = "auditory"
    KINESTHETIC = "kinesthetic"
    MIXED = "mixed"


class MotivationType(str, Enum):
    ACHIEVEMENT = "achievement"
    PROGRESS = "progress"
    SOCIAL = "social"
    PERSONAL = "personal"


# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
SCORE_MIN = 0.0
SCORE_MAX = 100.0
VELOCITY_LIMIT = 10.0
SUCCESS_PROBABILITY_FLOOR = 0.40
SUCCESS_PROBABILITY_CEILING = 0.98

# Category name used by the cross-category breakthrough recommendation
OVERALL_CATEGORY = "overall"


def to_finite_float(value: Any) -> Optional[float]:
    """
    Return value as a finite float, or None if it is not a usable number.

    Booleans are rejected even though they are ints.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _enum_value(value: Any, enum_cls, default: str) -> str:
    """Map a raw value onto an enum value, falling back to default."""
    if isinstance(value, enum_cls):
        return value.value
    if isinstance(value, str) and value.lower() in [e.value for e in enum_cls]:
        return value.lower()
    return default


# -----------------------------------------------------------------------------
# Pattern (Immutable)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Pattern:
    """
    Analysis of one category at one point in time.

    Created fresh on every analysis call; the engine never stores patterns
    except inside learning records.
    """
    category: str
    score: float  # 0 - 100
    trend: str  # TrendDirection value
    consistency: float  # 0.0 - 1.0
    velocity: float  # -10 - 10
    stability: float  # 0.0 - 1.0
    last_updated: str  # ISO format
    sample_size: int = 0  # Historical points used

    def __post_init__(self):
        """Validate pattern on creation."""
        if not SCORE_MIN <= self.score <= SCORE_MAX:
            raise ValueError(f"Score must be 0-100, got {self.score}")
        if self.trend not in [t.value for t in TrendDirection]:
            raise ValueError(f"Invalid trend: {self.trend}")
        if not 0.0 <= self.consistency <= 1.0:
            raise ValueError(f"Consistency must be 0.0-1.0, got {self.consistency}")
        if not -VELOCITY_LIMIT <= self.velocity <= VELOCITY_LIMIT:
            raise ValueError(f"Velocity must be -10-10, got {self.velocity}")
        if not 0.0 <= self.stability <= 1.0:
            raise ValueError(f"Stability must be 0.0-1.0, got {self.stability}")
        if self.sample_size < 0:
            raise ValueError(f"Sample size cannot be negative: {self.sample_size}")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# -----------------------------------------------------------------------------
# User Context (Immutable)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class UserContext:
    """
    Behavioral context for one user, supplied by the caller per invocation.
    """
    total_sessions: int = 0
    current_streak: int = 0
    preferred_time: str = ""
    completion_rate: float = 0.0  # 0.0 - 1.0
    category_preferences: FrozenSet[str] = frozenset()
    previous_success: Dict[str, float] = field(default_factory=dict, hash=False)  # Copied on creation
    learning_style: str = LearningStyle.MIXED.value
    motivation_type: str = MotivationType.ACHIEVEMENT.value

    def __post_init__(self):
        """Validate context on creation."""
        if self.total_sessions < 0:
            raise ValueError(f"Total sessions cannot be negative: {self.total_sessions}")
        if self.current_streak < 0:
            raise ValueError(f"Current streak cannot be negative: {self.current_streak}")
        if not 0.0 <= self.completion_rate <= 1.0:
            raise ValueError(f"Completion rate must be 0.0-1.0, got {self.completion_rate}")
        if not isinstance(self.category_preferences, frozenset):
            raise ValueError("category_preferences must be a frozenset for immutability")
        if not isinstance(self.previous_success, Mapping):
            raise ValueError("previous_success must be a mapping of category -> rate")
        # Detach from the caller's dict
        object.__setattr__(self, "previous_success", dict(self.previous_success))
        if self.learning_style not in [s.value for s in LearningStyle]:
            raise ValueError(f"Invalid learning style: {self.learning_style}")
        if self.motivation_type not in [m.value for m in MotivationType]:
            raise ValueError(f"Invalid motivation type: {self.motivation_type}")

    def to_dict(self) -> Dict[str, Any]:
        result = asdict(self)
        result["category_preferences"] = sorted(self.category_preferences)
        result["previous_success"] = dict(self.previous_success)
        return result

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "UserContext":
        """
        Build a context from loosely-typed data.

        Never raises: missing or malformed fields become zero/empty defaults,
        negative counts become zero and the completion rate is clamped.
        """
        if not isinstance(data, Mapping):
            return cls()

        total_sessions = to_finite_float(data.get("total_sessions"))
        current_streak = to_finite_float(data.get("current_streak"))
        completion_rate = to_finite_float(data.get("completion_rate"))

        preferences = data.get("category_preferences") or ()
        if isinstance(preferences, str):
            preferences = (preferences,)
        elif not isinstance(preferences, Iterable):
            preferences = ()

        previous_success: Dict[str, float] = {}
        raw_success = data.get("previous_success")
        if isinstance(raw_success, Mapping):
            for key, value in raw_success.items():
                number = to_finite_float(value)
                if number is not None:
                    previous_success[str(key)] = number

        preferred_time = data.get("preferred_time")

        return cls(
            total_sessions=max(0, int(total_sessions or 0)),
            current_streak=max(0, int(current_streak or 0)),
            preferred_time=preferred_time if isinstance(preferred_time, str) else "",
            completion_rate=min(1.0, max(0.0, completion_rate or 0.0)),
            category_preferences=frozenset(
                str(p) for p in preferences if isinstance(p, str) and p
            ),
            previous_success=previous_success,
            learning_style=_enum_value(
                data.get("learning_style"), LearningStyle, LearningStyle.MIXED.value
            ),
            motivation_type=_enum_value(
                data.get("motivation_type"), MotivationType, MotivationType.ACHIEVEMENT.value
            ),
        )

    @classmethod
    def from_profile(
        cls,
        profile: Optional[Mapping[str, Any]],
        scores: Optional[Mapping[str, Any]],
        session_data: Optional[Mapping[str, Any]] = None,
        preferred_count: int = 2,
    ) -> "UserContext":
        """
        Derive a context from a user profile and today's session counters.

        Preferences are the highest-scoring categories; the completion rate is
        completed sessions today over scheduled sessions today.
        """
        profile = profile if isinstance(profile, Mapping) else {}
        session_data = session_data if isinstance(session_data, Mapping) else {}

        ranked = []
        if isinstance(scores, Mapping):
            for category, value in scores.items():
                number = to_finite_float(value)
                if number is not None:
                    ranked.append((str(category), number))
        # Highest score first, ties by name for determinism
        ranked.sort(key=lambda item: (-item[1], item[0]))

        completed = to_finite_float(session_data.get("completed_today")) or 0.0
        scheduled = to_finite_float(session_data.get("today_sessions")) or 0.0

        return cls.from_dict({
            "total_sessions": profile.get("total_sessions", 0),
            "current_streak": profile.get("streak", 0),
            "preferred_time": "09:00",
            "completion_rate": completed / max(scheduled, 1.0),
            "category_preferences": [category for category, _ in ranked[:preferred_count]],
            "previous_success": {},
            "learning_style": LearningStyle.MIXED.value,
            "motivation_type": MotivationType.ACHIEVEMENT.value,
        })


# -----------------------------------------------------------------------------
# Recommendation (Immutable)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Recommendation:
    """
    Immutable recommendation record.

    Recommendations are DERIVED from patterns by the generator rules.
    """
    recommendation_id: str
    title: str
    description: str
    category: str
    priority: str  # Priority value
    confidence: float  # 0.0 - 1.0
    action_plan: tuple  # Tuple of action strings (immutable)
    estimated_impact: float
    time_to_result: str
    difficulty: str  # Difficulty value
    archetype: str  # Archetype value
    personalized_reason: str
    scientific_basis: str
    success_probability: float  # 0.40 - 0.98
    rule: str  # RuleKind value

    def __post_init__(self):
        """Validate recommendation on creation."""
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"Confidence must be 0.0-1.0, got {self.confidence}")
        if not SUCCESS_PROBABILITY_FLOOR <= self.success_probability <= SUCCESS_PROBABILITY_CEILING:
            raise ValueError(
                f"Success probability must be 0.40-0.98, got {self.success_probability}"
            )
        if self.priority not in [p.value for p in Priority]:
            raise ValueError(f"Invalid priority: {self.priority}")
        if self.difficulty not in [d.value for d in Difficulty]:
            raise ValueError(f"Invalid difficulty: {self.difficulty}")
        if self.archetype not in [a.value for a in Archetype]:
            raise ValueError(f"Invalid archetype: {self.archetype}")
        if self.rule not in [r.value for r in RuleKind]:
            raise ValueError(f"Invalid rule: {self.rule}")
        if not isinstance(self.action_plan, tuple):
            raise ValueError("action_plan must be a tuple for immutability")

    @property
    def rank_score(self) -> float:
        """Ordering key: confidence weighted by success probability."""
        return self.confidence * self.success_probability

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        result = asdict(self)
        result["action_plan"] = list(self.action_plan)
        result["rank_score"] = round(self.rank_score, 6)
        return result


# -----------------------------------------------------------------------------
# Learning Record (Immutable)
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class LearningRecord:
    """
    One analysis run, kept for introspection and insight text.

    This is presentation data, not a feedback loop.
    """
    timestamp: str  # ISO format
    patterns: tuple  # Tuple of Pattern
    recommendations: tuple  # Tuple of Recommendation
    user_context: UserContext
    model_version: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "patterns": [p.to_dict() for p in self.patterns],
            "recommendations": [r.to_dict() for r in self.recommendations],
            "user_context": self.user_context.to_dict(),
            "model_version": self.model_version,
        }
