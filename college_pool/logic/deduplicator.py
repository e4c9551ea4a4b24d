"""
Deduplicator

Drops repeated candidates by normalized name. Input order encodes priority:
the first occurrence is kept, later duplicates are dropped.
"""

import logging
from typing import Dict, Iterable, List, Optional, Set

from .contracts import Candidate
from .normalizer import normalize_identity

logger = logging.getLogger(__name__)


def deduplicate(
    candidates: List[Candidate],
    aliases: Optional[Dict[str, str]] = None
) -> List[Candidate]:
    """
    Keep only the first candidate of each normalized-key group.

    Args:
        candidates: Ordered candidates (earlier = higher priority)
        aliases: Alias table used by the normalizer

    Returns:
        Ordered list without duplicates
    """
    seen: Set[str] = set()
    unique: List[Candidate] = []

    for candidate in candidates:
        key = normalize_identity(candidate.identity, aliases)
        if not key:
            logger.debug("[Dedup] Dropped candidate with empty identity")
            continue
        if key in seen:
            logger.debug(f"[Dedup] Dropped duplicate {candidate.identity!r} ({key})")
            continue
        seen.add(key)
        unique.append(candidate)

    return unique


def exclude_known(
    candidates: Iterable[Candidate],
    known_keys: Set[str],
    aliases: Optional[Dict[str, str]] = None
) -> List[Candidate]:
    """Drop candidates whose normalized key is already in `known_keys`."""
    return [
        c for c in candidates
        if normalize_identity(c.identity, aliases) not in known_keys
    ]
