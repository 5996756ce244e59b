"""Majority counting at a placement threshold.

All functions here are pure. Candidates are enumerated in ascending index
order so that anything derived from them (audit messages in particular) is
reproducible.
"""

from collections.abc import Iterable


def count_at_or_better(ordinals: list[list[int]], candidate: int, k: int) -> int:
    """Number of judges ranking a candidate at place k or better."""
    return sum(1 for row in ordinals if row[candidate] <= k)


def find_majority(
    remaining: Iterable[int],
    ordinals: list[list[int]],
    k: int,
    majority: int,
) -> tuple[dict[int, int], list[int]]:
    """Count each remaining candidate at threshold k.

    Returns (counts, eligible) where counts maps candidate -> judges at k or
    better and eligible lists, in ascending order, the candidates whose count
    reaches the majority bar.
    """
    ordered = sorted(remaining)
    counts = {c: count_at_or_better(ordinals, c, k) for c in ordered}
    eligible = [c for c in ordered if counts[c] >= majority]
    return counts, eligible


def ordinal_sums(
    tier: Iterable[int], ordinals: list[list[int]], k: int
) -> dict[int, int]:
    """Sum each candidate's placements that are k or better (lower is better)."""
    return {
        c: sum(row[c] for row in ordinals if row[c] <= k)
        for c in sorted(tier)
    }


def head_to_head_winner(
    first: int, second: int, ordinals: list[list[int]], majority: int
) -> tuple[int, int]:
    """Compare two candidates judge by judge.

    The first candidate wins if at least `majority` judges rank it strictly
    better than the second; otherwise the second wins.

    Returns (winner, first_wins) where first_wins is the number of judges
    preferring the first candidate.
    """
    first_wins = sum(1 for row in ordinals if row[first] < row[second])
    winner = first if first_wins >= majority else second
    return winner, first_wins
