"""
Learning History Store

Bounded in-memory record of every analysis run.

CONSTRAINTS:
- APPEND-ONLY: Records are never modified; old records are only trimmed
- BATCH TRIM: Once the store exceeds its cap it keeps the most recent
  `retain` records (200 -> 100 by default), not per-item eviction
- THREAD-SAFE: A single lock guards writes; reads take a snapshot
- NO BEHAVIORAL COUPLING: Nothing in the analysis path reads this store

This store provides insight text data, not a feedback loop.
"""

import logging
import threading
from enum import Enum
from typing import Optional, Dict, Any, List, Sequence, Tuple

from .pattern_model import LearningRecord, Pattern, Recommendation, UserContext

logger = logging.getLogger("learning_store")


# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------
DEFAULT_HISTORY_CAP = 200
DEFAULT_HISTORY_RETAIN = 100

# Maturity buckets by number of analyses performed
MATURITY_HIGH_ABOVE = 50
MATURITY_MEDIUM_ABOVE = 20


class LearningMaturity(str, Enum):
    """Rough confidence bucket for insight text."""
    HIGH = "high"
    MEDIUM = "medium"
    LEARNING = "learning"


def maturity_for(total: int) -> str:
    """LearningMaturity value for a number of analyses."""
    if total > MATURITY_HIGH_ABOVE:
        return LearningMaturity.HIGH.value
    if total > MATURITY_MEDIUM_ABOVE:
        return LearningMaturity.MEDIUM.value
    return LearningMaturity.LEARNING.value


# -----------------------------------------------------------------------------
# Learning History Store
# -----------------------------------------------------------------------------
class LearningHistoryStore:
    """
    Ring-buffer-like store of LearningRecord.

    The engine owns one instance; callers read it for insight rendering.
    """

    def __init__(
        self,
        cap: int = DEFAULT_HISTORY_CAP,
        retain: int = DEFAULT_HISTORY_RETAIN,
    ):
        """
        Initialize store.

        Args:
            cap: Trim once the record count exceeds this
            retain: Number of most recent records kept after a trim
        """
        if retain < 1 or cap < retain:
            raise ValueError(f"Invalid store bounds: cap={cap}, retain={retain}")
        self._cap = cap
        self._retain = retain
        self._records: List[LearningRecord] = []
        self._last_analysis: Optional[Dict[str, Any]] = None
        self._lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Write Operations
    # -------------------------------------------------------------------------

    def append(self, record: LearningRecord) -> None:
        """Append a record, trimming to the most recent `retain` past the cap."""
        recommendations = record.recommendations
        avg_confidence = (
            sum(r.confidence for r in recommendations) / len(recommendations)
            if recommendations else 0.0
        )
        last_analysis = {
            "timestamp": record.timestamp,
            "pattern_count": len(record.patterns),
            "recommendation_count": len(recommendations),
            "avg_confidence": round(avg_confidence, 4),
        }

        with self._lock:
            self._records.append(record)
            if len(self._records) > self._cap:
                dropped = len(self._records) - self._retain
                self._records = self._records[-self._retain:]
                logger.info(f"Learning history trimmed: dropped {dropped}, kept {self._retain}")
            self._last_analysis = last_analysis

    def record_analysis(
        self,
        timestamp: str,
        patterns: Sequence[Pattern],
        recommendations: Sequence[Recommendation],
        user_context: UserContext,
        model_version: str,
    ) -> LearningRecord:
        """Build and append a record for one analysis run."""
        record = LearningRecord(
            timestamp=timestamp,
            patterns=tuple(patterns),
            recommendations=tuple(recommendations),
            user_context=user_context,
            model_version=model_version,
        )
        self.append(record)
        return record

    def clear(self) -> None:
        with self._lock:
            self._records = []
            self._last_analysis = None

    # -------------------------------------------------------------------------
    # Read Operations (Snapshot)
    # -------------------------------------------------------------------------

    @property
    def count(self) -> int:
        with self._lock:
            return len(self._records)

    def __len__(self) -> int:
        return self.count

    def snapshot(self) -> Tuple[LearningRecord, ...]:
        """Copy of the current records, oldest first."""
        with self._lock:
            return tuple(self._records)

    def recent(self, limit: int = 10) -> List[LearningRecord]:
        """Most recent records first."""
        records = list(self.snapshot())
        records.reverse()
        return records[:max(limit, 0)]

    @property
    def last_analysis(self) -> Optional[Dict[str, Any]]:
        with self._lock:
            return dict(self._last_analysis) if self._last_analysis else None

    def maturity(self) -> str:
        """Rough confidence bucket based on how many analyses are held."""
        return maturity_for(self.count)

    def statistics(self) -> Dict[str, Any]:
        """Descriptive statistics for insight rendering."""
        records = self.snapshot()
        by_rule: Dict[str, int] = {}
        for record in records:
            for rec in record.recommendations:
                by_rule[rec.rule] = by_rule.get(rec.rule, 0) + 1

        return {
            "count": len(records),
            "cap": self._cap,
            "retain": self._retain,
            "maturity": maturity_for(len(records)),
            "by_rule": by_rule,
            "last_analysis": self.last_analysis,
        }
