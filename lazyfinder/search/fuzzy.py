"""Subsequence scoring for relative file paths."""

from __future__ import annotations

from collections.abc import Iterable

WORD_BOUNDARY_CHARS = frozenset("/_- .")
RUN_BONUS = 20
BOUNDARY_BONUS = 35
BASENAME_BONUS = 15
MAX_GAP_PENALTY = 40


def _match_positions(needles: str, haystack: str) -> list[int] | None:
    positions: list[int] = []
    pos = -1
    for needle in needles:
        pos = haystack.find(needle, pos + 1)
        if pos < 0:
            return None
        positions.append(pos)
    return positions


def fuzzy_score(query: str, candidate: str) -> int | None:
    """Score ``query`` as an in-order subsequence of the path ``candidate``.

    Returns ``None`` when some query character cannot be placed. Contiguous
    runs, matches at word boundaries and matches inside the file name earn
    bonuses; gaps and long paths cost points. Matching is case-insensitive.
    """
    if not query:
        return 0
    haystack = candidate.casefold()
    positions = _match_positions(query.casefold(), haystack)
    if positions is None:
        return None

    name_start = haystack.rfind("/") + 1
    score = 0
    run = 0
    previous = -1
    for pos in positions:
        if pos == previous + 1:
            run += 1
            score += RUN_BONUS + min(16, run * 4)
        else:
            run = 0
            score -= min(MAX_GAP_PENALTY, (pos - previous - 1) * 2)
        if pos == 0 or haystack[pos - 1] in WORD_BOUNDARY_CHARS:
            score += BOUNDARY_BONUS
        if pos >= name_start:
            score += BASENAME_BONUS
        previous = pos
    return score - len(haystack) // 5


def rank_paths(query: str, paths: Iterable[str]) -> list[str]:
    """Return matching ``paths`` ordered by descending score.

    ``list.sort`` is stable, so equal scores keep the incoming (lister) order.
    """
    scored: list[tuple[int, str]] = []
    for path in paths:
        score = fuzzy_score(query, path)
        if score is None:
            continue
        scored.append((score, path))
    scored.sort(key=lambda item: -item[0])
    return [path for _, path in scored]


__all__ = ["WORD_BOUNDARY_CHARS", "fuzzy_score", "rank_paths"]
