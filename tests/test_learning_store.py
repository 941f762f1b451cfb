"""
Learning History Store Tests

Test Categories:
1. Bounds Validation Tests
2. Append & Batch Trim Tests
3. Last-Analysis Summary Tests
4. Read-Only Snapshot Tests
5. Maturity & Statistics Tests
6. Concurrency Tests
"""

import threading

import pytest

from pattern_engine.learning_store import LearningHistoryStore, maturity_for
from pattern_engine.pattern_model import UserContext


def record(store, index, recommendations=(), patterns=()):
    return store.record_analysis(
        timestamp=f"2024-03-01T09:{index // 60:02d}:{index % 60:02d}",
        patterns=patterns,
        recommendations=recommendations,
        user_context=UserContext(),
        model_version="2.0",
    )


# =============================================================================
# 1. Bounds Validation Tests
# =============================================================================

class TestBounds:

    def test_defaults(self, store):
        stats = store.statistics()
        assert stats["cap"] == 200
        assert stats["retain"] == 100

    @pytest.mark.parametrize("cap,retain", [(5, 10), (10, 0), (0, 0)])
    def test_invalid_bounds(self, cap, retain):
        with pytest.raises(ValueError):
            LearningHistoryStore(cap=cap, retain=retain)


# =============================================================================
# 2. Append & Batch Trim Tests
# =============================================================================

class TestAppendAndTrim:

    def test_append_grows(self, store):
        record(store, 0)
        record(store, 1)
        assert store.count == 2
        assert len(store) == 2

    def test_no_trim_at_cap(self):
        store = LearningHistoryStore(cap=5, retain=2)
        for i in range(5):
            record(store, i)
        assert store.count == 5

    def test_trim_past_cap_keeps_most_recent(self):
        store = LearningHistoryStore(cap=5, retain=2)
        for i in range(6):
            record(store, i)
        timestamps = [r.timestamp for r in store.snapshot()]
        assert timestamps == ["2024-03-01T09:00:04", "2024-03-01T09:00:05"]

    def test_default_trim_201_to_100(self, store):
        for i in range(201):
            record(store, i)
        assert store.count == 100
        assert store.snapshot()[0].timestamp == "2024-03-01T09:01:41"

    def test_record_analysis_returns_record(self, store, make_pattern):
        rec = record(store, 0, patterns=[make_pattern()])
        assert rec.patterns == (make_pattern(),)
        assert store.snapshot() == (rec,)

    def test_clear(self, store):
        record(store, 0)
        store.clear()
        assert store.count == 0
        assert store.last_analysis is None


# =============================================================================
# 3. Last-Analysis Summary Tests
# =============================================================================

class TestLastAnalysis:

    def test_none_before_any_append(self, store):
        assert store.last_analysis is None

    def test_summary(self, store, make_pattern, make_recommendation):
        recs = (
            make_recommendation(recommendation_id="a", confidence=0.9),
            make_recommendation(recommendation_id="b", confidence=0.8),
        )
        record(store, 3, recommendations=recs, patterns=(make_pattern(),))
        assert store.last_analysis == {
            "timestamp": "2024-03-01T09:00:03",
            "pattern_count": 1,
            "recommendation_count": 2,
            "avg_confidence": 0.85,
        }

    def test_empty_recommendations(self, store):
        record(store, 0)
        assert store.last_analysis["avg_confidence"] == 0.0

    def test_returned_summary_is_a_copy(self, store):
        record(store, 0)
        store.last_analysis["pattern_count"] = 99
        assert store.last_analysis["pattern_count"] == 0


# =============================================================================
# 4. Read-Only Snapshot Tests
# =============================================================================

class TestSnapshots:

    def test_snapshot_is_tuple(self, store):
        record(store, 0)
        assert isinstance(store.snapshot(), tuple)

    def test_snapshot_unaffected_by_later_appends(self, store):
        record(store, 0)
        snap = store.snapshot()
        record(store, 1)
        assert len(snap) == 1

    def test_recent_is_newest_first(self, store):
        for i in range(5):
            record(store, i)
        recent = store.recent(limit=2)
        assert [r.timestamp for r in recent] == ["2024-03-01T09:00:04", "2024-03-01T09:00:03"]
        assert store.recent(limit=0) == []


# =============================================================================
# 5. Maturity & Statistics Tests
# =============================================================================

class TestMaturity:

    @pytest.mark.parametrize("total,expected", [
        (0, "learning"),
        (20, "learning"),
        (21, "medium"),
        (50, "medium"),
        (51, "high"),
    ])
    def test_maturity_for(self, total, expected):
        assert maturity_for(total) == expected

    def test_store_maturity(self, store):
        for i in range(21):
            record(store, i)
        assert store.maturity() == "medium"

    def test_statistics_by_rule(self, store, make_recommendation):
        record(store, 0, recommendations=(
            make_recommendation(recommendation_id="a", rule="recovery"),
            make_recommendation(recommendation_id="b", rule="mastery", archetype="maintenance"),
        ))
        record(store, 1, recommendations=(make_recommendation(rule="recovery"),))
        stats = store.statistics()
        assert stats["count"] == 2
        assert stats["maturity"] == "learning"
        assert stats["by_rule"] == {"recovery": 2, "mastery": 1}
        assert stats["last_analysis"]["recommendation_count"] == 1


# =============================================================================
# 6. Concurrency Tests
# =============================================================================

class TestConcurrency:

    def test_concurrent_appends(self, store):
        def worker(offset):
            for i in range(100):
                record(store, offset + i)

        threads = [threading.Thread(target=worker, args=(n * 100,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        # 400 appends: trims at 201 and 302, then 98 more
        assert store.count == 198
