"""
Weighted multi-attribute scoring of catalog rows.

A catalog search (UI result table or search index) returns candidate rows;
each row is scored against the detail being booked and the best one is
selected, or None when no row is a confident match.

Rubrics per entity kind (points only count when the attribute is present
on both sides, the score is earned / possible x 100):

    hotel:    name 40 (20 for a single significant word), room type 30,
              city 20, category 10
    servicio: name 50 (proportional to shared words), city 30, provider 20
    programa: code 40, name 40, city 20
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from ..config.models import EntityKind, MatchingConfig
from ..logging import get_contextual_logger, get_logger
from ..normalize.detail import BookableDetail
from ..normalize.parsing import normalize_enum

logger = get_logger("match.scoring")

# Best score must be strictly above this to be selected
DEFAULT_MATCH_THRESHOLD = 30.0

# Keys read from the target detail and from candidate rows
TARGET_CITY_KEYS = ("Ciudad", "ciudad", "destino")
CANDIDATE_CITY_KEYS = ("ciudad", "Ciudad", "destino")
CATEGORY_KEYS = ("Categoria", "categoria")


@dataclass(frozen=True)
class AttributeRule:
    """One scored attribute: where to read it and how to compare it."""

    name: str
    weight: float
    target_keys: tuple[str, ...]
    candidate_keys: tuple[str, ...]
    compare: Callable[[str, str], float]  # returns earned fraction in [0, 1]


@dataclass
class MatchResult:
    """The selected candidate row."""

    index: int
    score: float
    candidate: Mapping[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "index": self.index,
            "score": round(self.score, 2),
            "candidate": dict(self.candidate),
        }


# =============================================================================
# Comparisons
# =============================================================================


def contains_either(target: str, candidate: str) -> float:
    """Full credit when one value contains the other, case-insensitive."""
    a, b = target.lower(), candidate.lower()
    return 1.0 if a in b or b in a else 0.0


def exact_match(target: str, candidate: str) -> float:
    return 1.0 if target.strip().lower() == candidate.strip().lower() else 0.0


def candidate_contains(target: str, candidate: str) -> float:
    """Full credit on equality or when the candidate contains the target."""
    a, b = target.lower(), candidate.lower()
    return 1.0 if a == b or a in b else 0.0


def shared_words(target: str, candidate: str) -> float:
    """Containment, else the share of target words found in the candidate."""
    if contains_either(target, candidate):
        return 1.0
    target_words = target.lower().split()
    candidate_words = set(candidate.lower().split())
    if not target_words:
        return 0.0
    common = [w for w in target_words if w in candidate_words]
    return len(common) / len(target_words)


def significant_word(min_length: int, partial_fraction: float) -> Callable[[str, str], float]:
    """Containment, else partial credit if a long target word is in the candidate."""

    def compare(target: str, candidate: str) -> float:
        if contains_either(target, candidate):
            return 1.0
        name = candidate.lower()
        if any(len(word) > min_length and word in name for word in target.lower().split()):
            return partial_fraction
        return 0.0

    return compare


# =============================================================================
# Matcher
# =============================================================================


class EntityMatcher:
    """Scores catalog rows against a target detail.

    Weights and the selection threshold come from MatchingConfig so they
    can be tuned from configs/app.yaml without touching this module.
    """

    def __init__(self, config: MatchingConfig | None = None):
        self.config = config or MatchingConfig()
        self._rules = {
            EntityKind.HOTEL.value: self._hotel_rules(),
            EntityKind.SERVICIO.value: self._servicio_rules(),
            EntityKind.PROGRAMA.value: self._programa_rules(),
        }

    def _hotel_rules(self) -> list[AttributeRule]:
        w = self.config.hotel
        partial = w.name_partial / w.name if w.name else 0.0
        return [
            AttributeRule("name", w.name, ("nombre_hotel", "servicio"), ("nombre_hotel", "hotel"),
                          significant_word(w.min_word_length, partial)),
            AttributeRule("room_type", w.room_type, ("tipo_habitacion",), ("tipo_habitacion",), exact_match),
            AttributeRule("city", w.city, TARGET_CITY_KEYS, CANDIDATE_CITY_KEYS, contains_either),
            AttributeRule("category", w.category, CATEGORY_KEYS, CATEGORY_KEYS, contains_either),
        ]

    def _servicio_rules(self) -> list[AttributeRule]:
        w = self.config.servicio
        return [
            AttributeRule("name", w.name, ("servicio",), ("servicio",), shared_words),
            AttributeRule("city", w.city, TARGET_CITY_KEYS, CANDIDATE_CITY_KEYS, contains_either),
            AttributeRule("provider", w.provider, ("proveedor",), ("proveedor",), candidate_contains),
        ]

    def _programa_rules(self) -> list[AttributeRule]:
        w = self.config.programa
        return [
            AttributeRule("code", w.code, ("codigo",), ("codigo",), exact_match),
            # Package rows without a group title are named by their code
            AttributeRule("name", w.name, ("servicio",), ("servicio", "codigo"), contains_either),
            AttributeRule("city", w.city, TARGET_CITY_KEYS, CANDIDATE_CITY_KEYS, contains_either),
        ]

    def score(
        self,
        candidate: Mapping[str, Any],
        target: BookableDetail | Mapping[str, Any],
        kind: EntityKind | str,
    ) -> float:
        """Score one candidate row against the target, in [0, 100].

        Never raises: an attribute whose comparison fails is treated as
        missing on one side.
        """
        rules = self._rules.get(normalize_enum(kind, EntityKind) or "")
        if rules is None:
            logger.debug("No scoring rubric for entity kind %r", kind)
            return 0.0

        if isinstance(target, BookableDetail):
            target = target.to_dict()
        if not isinstance(target, Mapping) or not isinstance(candidate, Mapping):
            return 0.0

        earned = 0.0
        possible = 0.0

        for rule in rules:
            try:
                target_value = _get_value(target, rule.target_keys)
                candidate_value = _get_value(candidate, rule.candidate_keys)
                if target_value is None or candidate_value is None:
                    continue
                fraction = rule.compare(target_value, candidate_value)
            except Exception as e:
                logger.debug("Skipping %s comparison: %s", rule.name, e)
                continue

            possible += rule.weight
            earned += rule.weight * min(1.0, max(0.0, fraction))

        if possible <= 0:
            return 0.0
        return earned / possible * 100

    def score_all(
        self,
        candidates: Sequence[Mapping[str, Any]],
        target: BookableDetail | Mapping[str, Any],
        kind: EntityKind | str,
    ) -> list[float]:
        """Score every candidate row, in order."""
        return [self.score(candidate, target, kind) for candidate in candidates]

    def select_best(
        self,
        candidates: Sequence[Mapping[str, Any]],
        target: BookableDetail | Mapping[str, Any],
        kind: EntityKind | str,
        threshold: float | None = None,
    ) -> MatchResult | None:
        """Select the highest-scoring candidate above the threshold.

        Ties keep the first candidate seen. Returns None when no candidate
        scores strictly above the threshold; the caller then decides
        whether to fall back to the first row or abort.

        Args:
            candidates: Catalog rows in display order
            target: Detail being booked
            kind: Entity kind (hotel, servicio, programa)
            threshold: Minimum score (exclusive); MatchingConfig.threshold if None

        Returns:
            MatchResult or None
        """
        if threshold is None:
            threshold = self.config.threshold

        kind_name = normalize_enum(kind, EntityKind) or str(kind)
        log = get_contextual_logger("match.scoring", entity_kind=kind_name)

        best_index: int | None = None
        best_score = 0.0

        for index, score in enumerate(self.score_all(candidates, target, kind)):
            log.debug("Row %d scored %.2f", index, score, extra={"index": index, "score": score})
            if best_index is None or score > best_score:
                best_score = score
                best_index = index

        if best_index is None or best_score <= threshold:
            log.debug(
                "No confident match among %d rows (best %.2f, threshold %.2f)",
                len(candidates),
                best_score,
                threshold,
            )
            return None

        return MatchResult(index=best_index, score=best_score, candidate=candidates[best_index])


# =============================================================================
# Convenience Functions
# =============================================================================


def score_candidate(
    candidate: Mapping[str, Any],
    target: BookableDetail | Mapping[str, Any],
    kind: EntityKind | str,
    *,
    config: MatchingConfig | None = None,
) -> float:
    """Score one candidate row with the configured (or default) weights."""
    return EntityMatcher(config).score(candidate, target, kind)


def score_candidates(
    candidates: Sequence[Mapping[str, Any]],
    target: BookableDetail | Mapping[str, Any],
    kind: EntityKind | str,
    *,
    config: MatchingConfig | None = None,
) -> list[float]:
    """Score every candidate row."""
    return EntityMatcher(config).score_all(candidates, target, kind)


def select_best_match(
    candidates: Sequence[Mapping[str, Any]],
    target: BookableDetail | Mapping[str, Any],
    kind: EntityKind | str,
    threshold: float | None = None,
    *,
    config: MatchingConfig | None = None,
) -> MatchResult | None:
    """Select the best candidate row, or None when nothing scores above threshold.

    The threshold defaults to MatchingConfig.threshold (DEFAULT_MATCH_THRESHOLD).
    """
    return EntityMatcher(config).select_best(candidates, target, kind, threshold)


def _get_value(data: Mapping[str, Any], keys: tuple[str, ...]) -> Any | None:
    """First non-empty value among keys; numbers are read as text."""
    for key in keys:
        value = data.get(key)
        if value is None or isinstance(value, bool):
            continue
        if isinstance(value, (int, float)):
            return str(value)
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None
