"""
Display Normalizer

Keeps the publicly shown probability consistent with the assigned tier.
Out-of-band values are replaced by a number derived from a stable hash of the
institution's normalized name, so the same institution always shows the same
number without any stored state.
"""

from typing import Dict, List, Optional

from .constants import Tier, DISPLAY_BANDS
from .contracts import Candidate
from .normalizer import normalize_identity

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a hash of the UTF-8 bytes of `text`."""
    value = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * FNV_PRIME) & 0xFFFFFFFF
    return value


def in_band(probability: Optional[int], tier: str) -> bool:
    if probability is None:
        return False
    low, high = DISPLAY_BANDS[Tier(tier).value]
    return low <= probability <= high


def display_value(identity: str, tier: str, aliases: Optional[Dict[str, str]] = None) -> int:
    """Deterministic in-band display number for an identity."""
    low, high = DISPLAY_BANDS[Tier(tier).value]
    key = normalize_identity(identity, aliases)
    return low + fnv1a_32(key) % (high - low + 1)


def normalize_display(
    candidates: List[Candidate],
    aliases: Optional[Dict[str, str]] = None
) -> List[Candidate]:
    """
    Set `display_probability` on every candidate.

    Keeps the computed probability when it already sits in the tier band,
    otherwise substitutes the hash-derived value.
    """
    normalized = []
    for candidate in candidates:
        if in_band(candidate.admission_probability, candidate.tier):
            shown = candidate.admission_probability
        else:
            shown = display_value(candidate.identity, candidate.tier, aliases)
        normalized.append(candidate.model_copy(update={"display_probability": shown}))
    return normalized
