"""
API Router for Pattern Analysis & Recommendations

This module provides FastAPI routes for:
- Recommendation analysis from current scores and session history
- Pattern extraction (no side effects)
- Personalized insight text
- Learning history statistics
"""

import logging
import random
from datetime import datetime
from typing import Optional, Dict, List, Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from .engine import PatternEngine, create_engine
from .insights import potential_hint

# -----------------------------------------------------------------------------
# Logging
# -----------------------------------------------------------------------------
logger = logging.getLogger("coach_router")

# -----------------------------------------------------------------------------
# Router Setup
# -----------------------------------------------------------------------------
router = APIRouter(prefix="/coach", tags=["Pattern Analysis & Recommendations"])

_engine: Optional[PatternEngine] = None


def get_engine() -> PatternEngine:
    """Get the engine instance serving this process."""
    global _engine
    if _engine is None:
        _engine = create_engine()
    return _engine


def set_engine(engine: Optional[PatternEngine]) -> None:
    """Replace the engine instance (startup configuration, tests)."""
    global _engine
    _engine = engine


# -----------------------------------------------------------------------------
# Request Models
# -----------------------------------------------------------------------------
class UserContextPayload(BaseModel):
    """
    User context as sent by clients.

    Fields are loosely typed; the engine substitutes defaults for
    anything missing or unusable.
    """
    total_sessions: Optional[Any] = 0
    current_streak: Optional[Any] = 0
    preferred_time: Optional[str] = ""
    completion_rate: Optional[Any] = 0.0
    category_preferences: List[str] = Field(default_factory=list)
    previous_success: Dict[str, Any] = Field(default_factory=dict)
    learning_style: Optional[str] = None
    motivation_type: Optional[str] = None


class AnalyzeRequest(BaseModel):
    """Request body for analysis and pattern extraction."""
    scores: Dict[str, Any] = Field(default_factory=dict, description="Current score per category")
    history: List[Any] = Field(default_factory=list, description="Session log, oldest first")
    user_context: Optional[UserContextPayload] = None
    as_of: Optional[datetime] = Field(None, description="Timestamp for reproducible output")
    seed: Optional[int] = Field(None, description="Seed for the cosmetic potential hints")


class InsightsRequest(BaseModel):
    user_context: Optional[UserContextPayload] = None


def _context_dict(payload: Optional[UserContextPayload]) -> Optional[Dict[str, Any]]:
    return payload.model_dump() if payload is not None else None


# -----------------------------------------------------------------------------
# Routes
# -----------------------------------------------------------------------------
@router.post("/analyze")
async def analyze(request: AnalyzeRequest) -> Dict[str, Any]:
    """Ranked recommendations for the submitted scores and history."""
    engine = get_engine()
    as_of = request.as_of or datetime.utcnow()
    recommendations = engine.analyze(
        request.scores,
        request.history,
        _context_dict(request.user_context),
        as_of=as_of,
    )
    return {
        "generated_at": as_of.isoformat(),
        "count": len(recommendations),
        "recommendations": [r.to_dict() for r in recommendations],
    }


@router.post("/patterns")
async def patterns(request: AnalyzeRequest) -> Dict[str, Any]:
    """
    Per-category patterns without generating recommendations.

    Each pattern carries a cosmetic "+N% potential" hint for category cards.
    """
    extracted = get_engine().extract_patterns(
        request.scores,
        request.history,
        as_of=request.as_of,
    )
    rng = random.Random(request.seed)
    return {
        "count": len(extracted),
        "patterns": [
            dict(p.to_dict(), hint=potential_hint(p, rng)) for p in extracted
        ],
    }


@router.post("/insights")
async def insights(request: InsightsRequest) -> Dict[str, Any]:
    """Short descriptive strings derived from the user context."""
    return {"insights": get_engine().insights(_context_dict(request.user_context))}


@router.get("/categories")
async def categories() -> Dict[str, Any]:
    """Categories with a dedicated strategy (others use the generic one)."""
    return {"categories": get_engine().registry.categories}


@router.get("/learning/statistics")
async def learning_statistics() -> Dict[str, Any]:
    """Descriptive statistics of the learning history."""
    return get_engine().store.statistics()


@router.get("/learning/system")
async def learning_system() -> Dict[str, Any]:
    """Insight lines about the analysis history held by the engine."""
    return {"insights": get_engine().system_insights()}
