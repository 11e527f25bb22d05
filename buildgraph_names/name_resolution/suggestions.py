"""Spelling suggestions for unresolved module names."""

from collections.abc import Iterable
from difflib import get_close_matches

DEFAULT_LIMIT = 3
DEFAULT_CUTOFF = 0.6


def names_like(
    name: str,
    candidates: Iterable[str],
    limit: int = DEFAULT_LIMIT,
    cutoff: float = DEFAULT_CUTOFF,
) -> list[str]:
    """Return up to ``limit`` known names that look like ``name``.

    Best matches come first. Candidates are de-duplicated and sorted before
    scoring, so the result does not depend on registration order.

    Args:
        name: The name that failed to resolve
        candidates: Names known to the resolver
        limit: Maximum number of suggestions (0 disables suggestions)
        cutoff: Similarity threshold between 0 and 1

    Returns:
        Suggested names, possibly empty
    """
    if limit <= 0 or not name:
        return []
    pool = sorted({candidate for candidate in candidates if candidate and candidate != name})
    return get_close_matches(name, pool, n=limit, cutoff=cutoff)
