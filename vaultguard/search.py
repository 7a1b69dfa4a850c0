"""
Fuzzy search over vault entries.
"""

from enum import Enum
from typing import List, Sequence

from rapidfuzz import fuzz, process, utils

from . import config
from .models import Entry


class SearchScope(Enum):
    """Which part of the vault a search looks at."""
    ALL = "all"
    FAVOURITES = "favourites"
    COMPROMISED = "compromised"


def fuzzy_search(query: str, entries: Sequence[Entry],
                 threshold: int = config.FUZZY_MATCH_THRESHOLD) -> List[Entry]:
    """
    Match *query* against the website and the title of every entry.

    Hits below *threshold* are dropped. The result is ordered by score,
    best first, and holds every matching entry exactly once.
    """
    scored = []
    for field in ("website", "title"):
        choices = [getattr(entry, field) for entry in entries]
        matches = process.extract(query, choices, scorer=fuzz.WRatio, processor=utils.default_process,
                                  limit=None, score_cutoff=threshold)
        scored.extend((score, entries[index]) for _, score, index in matches)

    scored.sort(key=lambda hit: hit[0], reverse=True)
    seen = set()
    found = []
    for _, entry in scored:
        if id(entry) not in seen:
            seen.add(id(entry))
            found.append(entry)
    return found
