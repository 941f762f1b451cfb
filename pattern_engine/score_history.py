"""
Score History Accessor

Extracts per-category score series from an opaque session log.

A session log is a list of records, oldest first, each a mapping of
category -> score (other keys such as timestamps are ignored). Records
that are not mappings, and values that are not finite numbers, are
skipped rather than reported.
"""

from typing import Any, Iterable, List, Mapping

from .pattern_model import to_finite_float

DEFAULT_HISTORY_WINDOW = 20


def get_historical_scores(
    category: str,
    history: Any,
    window: int = DEFAULT_HISTORY_WINDOW,
) -> List[float]:
    """
    Return the most recent `window` scores recorded for a category.

    Order is preserved (most recent last).
    """
    if window <= 0 or not isinstance(history, Iterable) or isinstance(history, (str, bytes)):
        return []

    scores = []
    for session in history:
        if not isinstance(session, Mapping):
            continue
        value = to_finite_float(session.get(category))
        if value is not None:
            scores.append(value)
    return scores[-window:]


def materialize_history(history: Any) -> List[Any]:
    """
    Copy a session log into a list so it can be read once per category.

    Generators and other one-shot iterables would otherwise be exhausted by
    the first category. Anything that is not an iterable of records gives [].
    """
    if not isinstance(history, Iterable) or isinstance(history, (str, bytes)):
        return []
    return list(history)
