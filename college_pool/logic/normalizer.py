"""
Name Normalizer

Canonicalizes institution names into comparable keys for deduplication and
curated-table lookups. Resolves acronyms and short forms through the alias
table. No fuzzy or phonetic matching.
"""

import re
from typing import Dict, Iterable, List, Optional

from .constants import NAME_ALIASES


_PARENTHETICAL = re.compile(r"\s*\([^)]*\)")
_SEPARATORS = re.compile(r"[-–—,/]")
_PUNCTUATION = re.compile(r"[^a-z0-9 ]")
_WHITESPACE = re.compile(r"\s+")


def _clean(identity: str) -> str:
    text = (identity or "").lower().strip()
    text = _PARENTHETICAL.sub("", text)
    text = text.replace("&", " and ")
    text = _SEPARATORS.sub(" ", text)
    text = _PUNCTUATION.sub("", text)
    text = _WHITESPACE.sub(" ", text).strip()
    if text.startswith("the "):
        text = text[4:]
    return text


def normalize_identity(
    identity: str,
    aliases: Optional[Dict[str, str]] = None
) -> str:
    """
    Normalize an institution identity to its canonical key.

    Args:
        identity: Raw display name (e.g. "MIT", "University of California-Los Angeles")
        aliases: Alias table (short form -> canonical key); defaults to NAME_ALIASES

    Returns:
        Lowercase canonical key
    """
    table = NAME_ALIASES if aliases is None else aliases
    key = _clean(identity)
    return table.get(key, key)


def matches_any(
    identity: str,
    canonical_names: Iterable[str],
    aliases: Optional[Dict[str, str]] = None
) -> bool:
    """True if the identity normalizes to one of the curated canonical names."""
    key = normalize_identity(identity, aliases)
    return any(key == normalize_identity(name, aliases) for name in canonical_names)


def search_variants(
    identity: str,
    aliases: Optional[Dict[str, str]] = None
) -> List[str]:
    """
    Name variants worth trying against an external statistics lookup.

    Includes the raw name, the alias expansion, and the swapped
    "University of X" / "X University" form.
    """
    variants: List[str] = [identity.strip()]

    key = normalize_identity(identity, aliases)
    if key != _clean(identity):
        variants.append(key.title())

    uni_of = re.match(r"^university of (.+)$", identity.strip(), re.IGNORECASE)
    if uni_of:
        variants.append(f"{uni_of.group(1)} University")
    uni = re.match(r"^(.+) university$", identity.strip(), re.IGNORECASE)
    if uni:
        variants.append(f"University of {uni.group(1)}")

    # Preserve order, drop duplicates
    seen = set()
    unique = []
    for variant in variants:
        if variant and variant.lower() not in seen:
            seen.add(variant.lower())
            unique.append(variant)
    return unique
