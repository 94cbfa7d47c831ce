"""Catalog matching and master-data option resolution."""

from .scoring import (
    DEFAULT_MATCH_THRESHOLD,
    EntityMatcher,
    MatchResult,
    score_candidate,
    score_candidates,
    select_best_match,
)
from .options import MasterData, OptionMatch, resolve_option
from .enrich import build_description, detail_from_candidate

__all__ = [
    # Scoring
    "DEFAULT_MATCH_THRESHOLD",
    "EntityMatcher",
    "MatchResult",
    "score_candidate",
    "score_candidates",
    "select_best_match",
    # Options
    "MasterData",
    "OptionMatch",
    "resolve_option",
    # Enrichment
    "build_description",
    "detail_from_candidate",
]
