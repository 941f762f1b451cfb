"""
Pattern Extractor

Builds one Pattern per category in the current score snapshot by running
the trend classifier and the consistency / velocity / stability analyzer
over the category's recent history.

Deterministic: the timestamp is supplied by the caller.
"""

import logging
from datetime import datetime
from typing import Any, List, Mapping, Optional

from .config import EngineConfig
from .pattern_model import Pattern, SCORE_MIN, SCORE_MAX, to_finite_float
from .score_history import get_historical_scores, materialize_history
from .trend_analysis import (
    classify_trend,
    consistency_index,
    velocity_score,
    stability_index,
)

logger = logging.getLogger("pattern_extractor")


def build_pattern(
    category: str,
    score: float,
    history: Any,
    as_of: datetime,
    config: Optional[EngineConfig] = None,
) -> Pattern:
    """Analyze one category. The score must already be a finite number."""
    config = config or EngineConfig()
    series = get_historical_scores(category, history, window=config.history_window)

    return Pattern(
        category=category,
        score=max(SCORE_MIN, min(SCORE_MAX, score)),
        trend=classify_trend(series),
        consistency=consistency_index(series),
        velocity=velocity_score(series, window=config.velocity_window),
        stability=stability_index(series, window=config.stability_window),
        last_updated=as_of.isoformat(),
        sample_size=len(series),
    )


def extract_patterns(
    scores: Optional[Mapping[str, Any]],
    history: Any,
    as_of: Optional[datetime] = None,
    config: Optional[EngineConfig] = None,
) -> List[Pattern]:
    """
    Build patterns for every usable category in the score snapshot.

    Categories whose current score is not a finite number are skipped, as are
    keys that collide with an earlier key once converted to a string (the
    first one wins). Order follows the snapshot's iteration order.
    """
    if not isinstance(scores, Mapping) or not scores:
        return []

    as_of = as_of or datetime.utcnow()
    history = materialize_history(history)
    patterns = []
    seen = set()
    for category, raw_score in scores.items():
        score = to_finite_float(raw_score)
        if score is None or category is None or str(category) == "":
            logger.warning(f"Skipping category {category!r}: unusable score {raw_score!r}")
            continue
        name = str(category)
        if name in seen:
            logger.warning(f"Skipping category {category!r}: duplicates {name!r}")
            continue
        seen.add(name)
        patterns.append(build_pattern(name, score, history, as_of, config))

    logger.debug(f"Extracted {len(patterns)} patterns from {len(scores)} categories")
    return patterns
