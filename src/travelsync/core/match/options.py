"""
Master-data option resolution.

Maps a free-text label from the extraction ("Confirmada", "agencias") onto
one of the option labels the booking application offers for a header
field, e.g. "CONFIRMADA [FI]" or "AGENCIAS [COAG]".
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from thefuzz import fuzz, process

from ..config.synonyms import STATUS_KEYWORDS
from ..logging import get_logger

logger = get_logger("match.options")

# Minimum token-set ratio for a fuzzy option match
FUZZY_OPTION_THRESHOLD = 85


@dataclass
class OptionMatch:
    """Result of resolving a label against an option list."""

    value: str
    method: str  # exact, partial, keyword, fuzzy
    score: float


@dataclass
class MasterData:
    """Option lists for header fields, as supplied by the master-data store."""

    statuses: list[str] = field(default_factory=list)
    reservation_types: list[str] = field(default_factory=list)
    clients: list[str] = field(default_factory=list)
    sellers: list[str] = field(default_factory=list)

    def options_for(self, field_name: str) -> list[str]:
        """Option list for a reservation header attribute."""
        return {
            "status": self.statuses,
            "reservation_type": self.reservation_types,
            "client": self.clients,
            "seller": self.sellers,
        }.get(field_name, [])


def resolve_option(
    value: str | None,
    options: Sequence[str],
    *,
    fuzzy_threshold: int = FUZZY_OPTION_THRESHOLD,
) -> OptionMatch | None:
    """Resolve a label against an option list.

    Tries, in order:
    1. Exact match ignoring case and surrounding whitespace
    2. Partial match (either string contains the other)
    3. Keyword mapping (CONFIRM -> CONFIRMAD, PENDING -> PENDIENTE, ...)
    4. Fuzzy token-set ratio at or above ``fuzzy_threshold``

    Args:
        value: Extracted label
        options: Available option labels
        fuzzy_threshold: Minimum fuzzy score (0-100)

    Returns:
        OptionMatch, or None when nothing matches
    """
    if not value or not value.strip():
        return None

    candidates = [o for o in options if o and o.strip()]
    if not candidates:
        return None

    wanted = value.strip().upper()

    for option in candidates:
        if option.strip().upper() == wanted:
            return OptionMatch(value=option, method="exact", score=100.0)

    for option in candidates:
        upper = option.upper()
        if wanted in upper or upper.strip() in wanted:
            return OptionMatch(value=option, method="partial", score=90.0)

    for keywords, stem in STATUS_KEYWORDS:
        if any(k in wanted for k in keywords):
            for option in candidates:
                if stem in option.upper():
                    return OptionMatch(value=option, method="keyword", score=80.0)
            break

    if not any(ch.isalnum() for ch in value):
        return None

    best = process.extractOne(value, candidates, scorer=fuzz.token_set_ratio)
    if best and best[1] >= fuzzy_threshold:
        return OptionMatch(value=best[0], method="fuzzy", score=float(best[1]))

    logger.debug("No option matched %r among %d options", value, len(candidates))
    return None
