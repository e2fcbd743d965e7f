"""
Recommendation Service - Derives a user's most searched term from their history.

Counts are recomputed from the full history on every call; nothing is cached
between calls. All functions here are pure and safe to call without an app
context.
"""

import random
from collections import Counter
from typing import Iterable, List, Optional, Tuple

TIE_BREAK_RANDOM = 'random'
TIE_BREAK_FIRST = 'first'
TIE_BREAK_POLICIES = (TIE_BREAK_RANDOM, TIE_BREAK_FIRST)


def count_terms(terms: Iterable[str]) -> Counter:
    """
    Count how many times each term was searched.

    Args:
        terms: Search terms in submission order

    Returns:
        Counter mapping term -> number of occurrences
    """
    return Counter(terms)


def rank_terms(terms: Iterable[str]) -> List[Tuple[str, int]]:
    """
    Order distinct terms by descending count.

    Terms with equal counts keep the order in which they were first searched,
    so the ranking is deterministic for a given history.

    Args:
        terms: Search terms in submission order

    Returns:
        List of (term, count) tuples, most searched first

    Example:
        >>> rank_terms(['shoes', 'bag', 'bag', 'hat', 'shoes'])
        [('shoes', 2), ('bag', 2), ('hat', 1)]
    """
    # Counter preserves insertion order and most_common() sorts stably
    return count_terms(terms).most_common()


def recommend(
    terms: Iterable[str],
    tie_break: str = TIE_BREAK_RANDOM,
    rng: Optional[random.Random] = None
) -> List[str]:
    """
    Pick the user's most searched term.

    Tie-break policies when several terms share the highest count:
    - 'random': uniform choice among every term tied at the highest count
    - 'first': the tied term that was searched first

    Args:
        terms: Search terms in submission order
        tie_break: One of TIE_BREAK_POLICIES
        rng: Random source for the 'random' policy (defaults to the module RNG)

    Returns:
        Empty list for an empty history, otherwise a single-element list

    Raises:
        ValueError: If tie_break is not a known policy
    """
    if tie_break not in TIE_BREAK_POLICIES:
        raise ValueError(f"Unknown tie-break policy: {tie_break}")

    ranked = rank_terms(terms)
    if not ranked:
        return []

    top_count = ranked[0][1]
    tied = [term for term, count in ranked if count == top_count]

    if len(tied) == 1 or tie_break == TIE_BREAK_FIRST:
        return [tied[0]]

    chooser = rng or random
    return [chooser.choice(tied)]
