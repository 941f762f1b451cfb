"""
Pattern Engine Module

Behavioral-pattern analysis and recommendation engine for per-category
performance scores (body, mind, heart, spirit, diet, or any registered
category).

Pipeline:
- Score history access: last N observations per category from a session log
- Trend classification: least-squares slope -> improving / stable / declining
- Consistency, velocity and stability indices per category
- Pattern extraction: one Pattern record per category in the score snapshot
- Recommendation rules: recovery, optimization, mastery, consistency, breakthrough
- Success probability: heuristic blend of user context and rule
- Learning history: bounded in-memory record of each analysis run

CONSTRAINTS:
- DETERMINISTIC: Same scores, history, context and timestamp = same output
- NEVER FAILS: Empty, short or noisy input degrades to neutral defaults
- NO I/O: The engine reads nothing and writes nothing outside its own store
- HEURISTIC: No machine learning, probabilities are not calibrated
"""

__version__ = "0.3.0"

MODEL_VERSION = "2.0"
