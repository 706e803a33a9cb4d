"""Heuristic proper-noun scan for player names.

This is advisory only: it over-matches capitalized phrases and misses single-word
nicknames, so ``filters.players`` from the structured query always wins.
"""

import re

from courtside.constants import TEAM_ABBREV, resolve_team_abbrev

_NAME_PATTERN = re.compile(r"\b([A-Z][a-z]+(?:\s[A-Z][a-z]+)+(?:'s)?)")
_POSSESSIVE = re.compile(r"'s$", re.IGNORECASE)
_IGNORED = {"nba", "stats", "season", "league", "team", "teams"}

# Sentence-initial words that get glued onto a following name.
_LEADING_WORDS = {
    "compare", "show", "find", "tell", "list", "give", "rank", "who", "what", "how",
    "is", "are", "does", "did", "was", "has", "should", "can",
}


def extract_player_names(question: str) -> list[str]:
    """Return deduplicated, order-preserving candidate full names."""
    names: list[str] = []
    for match in _NAME_PATTERN.findall(question or ""):
        words = _POSSESSIVE.sub("", match).split()
        while words and words[0].lower() in _LEADING_WORDS:
            words = words[1:]
        name = " ".join(words)
        lower = name.lower()
        if lower in _IGNORED or len(words) < 2:
            continue
        if name not in names:
            names.append(name)
    return names


def drop_college_collisions(names: list[str], colleges: list[str] | None) -> list[str]:
    """Remove names equal to, containing, or contained in a college name."""
    college_names = [c.lower() for c in colleges or []]
    if not college_names:
        return list(names)
    kept = []
    for name in names:
        lower = name.lower()
        if any(c == lower or c in lower or lower in c for c in college_names):
            continue
        kept.append(name)
    return kept


def _is_team_name(name: str) -> bool:
    if resolve_team_abbrev(name):
        return True
    lower = name.lower()
    return any(aliases[0].lower() in lower for aliases in TEAM_ABBREV.values())


def drop_team_collisions(names: list[str]) -> list[str]:
    """Remove franchise names, nicknames and cities."""
    return [name for name in names if not _is_team_name(name)]


def resolve_player_names(explicit: list[str] | None, question: str, colleges: list[str] | None = None) -> list[str]:
    """Structured names win; otherwise fall back to the heuristic scan."""
    if explicit:
        return list(explicit)
    return drop_team_collisions(drop_college_collisions(extract_player_names(question), colleges))
