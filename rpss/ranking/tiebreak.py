"""Tie resolution ladder for Relative Placement.

Applied when more than one couple shares the highest majority count at the
current threshold. Each rung is only reached if the previous one left more
than one couple tied:

1. Sum of ordinals: lower sum of the placements at k or better wins.
2. Threshold expansion: raise k one step at a time (up to C), re-counting
   the whole sum-tied set each time, until one couple has the most judges.
3. Head-to-head: exactly two left at k = C; the judges decide pairwise.
4. Multiway: three or more left at k = C share one place.
5. Unresolved: the tie was found at k = C already, so there is nothing to
   expand into; the sum-tied couples share one place.
"""

import logging

from rpss.ranking.majority import find_majority, head_to_head_winner, ordinal_sums
from rpss.ranking.run import RankingRun

logger = logging.getLogger(__name__)


class TieResolver:
    """Breaks a tie between couples and places them on a RankingRun."""

    def __init__(self, run: RankingRun):
        self.run = run

    def resolve(self, tier: list[int], k: int, max_count: int) -> bool:
        """Resolve a tie at threshold k.

        Args:
            tier: Couples tied on max_count at k
            k: Threshold where the tie occurred
            max_count: The shared majority count

        Returns:
            True if the engine should keep assigning at the same k (a sum
            winner was placed and the rest of the tier is still eligible),
            False if the engine should start a new round.
        """
        run = self.run
        tier_ids = run.couple_ids(tier)
        run.record(
            "tie",
            f"Tie between {len(tier)} couples: {', '.join(tier_ids)}. "
            f"Using sum of ordinals <={k} to break tie.",
            k=k,
            couples=tier_ids,
        )

        sums = ordinal_sums(tier, run.ordinals, k)
        best_sum = min(sums.values())
        tied = [c for c in sorted(tier) if sums[c] == best_sum]
        sums_info = ", ".join(f"{run.couple_id(c)}: sum={s}" for c, s in sums.items())
        run.record(
            "tie_sums",
            f"Ordinal sums at k<={k}: {sums_info}",
            k=k,
            sums=run.ids_by_couple(sums),
        )

        if len(tied) == 1:
            run.assign(tied[0], k, max_count, sum_used=sums[tied[0]])
            return True

        if not self._expand(tied, k):
            self._unresolved(tied, k, max_count)
        return False

    def _expand(self, tied: list[int], k: int) -> bool:
        """Raise the threshold until the tie breaks or k reaches C.

        Every step re-counts the whole sum-tied set, so a couple that trails
        at one threshold is still in contention at the next.

        Returns False only if there was no room to expand (k was already C).
        """
        run = self.run
        last = run.num_candidates

        for k2 in range(k + 1, last + 1):
            counts, _ = find_majority(tied, run.ordinals, k2, run.majority)
            best = max(counts.values())
            leaders = [c for c in tied if counts[c] == best]
            run.record(
                "expand",
                f"Expanding to k<={k2}: "
                + ", ".join(f"{run.couple_id(c)}: {n}" for c, n in counts.items())
                + f". {len(leaders)} couple(s) with the most judges ({best}).",
                k=k2,
                counts=run.ids_by_couple(counts),
                leaders=run.couple_ids(leaders),
            )

            if len(leaders) == 1:
                run.assign(leaders[0], k2, best, tiebreak="expanded_k")
                return True

            if k2 == last:
                if len(tied) == 2:
                    self._head_to_head(tied, counts)
                else:
                    self._multiway(tied, counts)
                return True

        return False

    def _head_to_head(self, pair: list[int], counts: dict[int, int]) -> None:
        run = self.run
        first, second = pair
        winner, first_wins = head_to_head_winner(first, second, run.ordinals, run.majority)
        loser = second if winner == first else first
        run.record(
            "head_to_head",
            f"Head-to-head {run.couple_id(first)} vs {run.couple_id(second)}: "
            f"{first_wins}/{run.num_judges} judges prefer {run.couple_id(first)} "
            f"(needs {run.majority}). Winner: {run.couple_id(winner)}",
            couples=[run.couple_id(first), run.couple_id(second)],
            first_wins=first_wins,
            winner=run.couple_id(winner),
        )
        run.assign(winner, run.num_candidates, counts[winner], tiebreak="head_to_head")
        if loser in run.remaining:
            run.assign(loser, run.num_candidates, counts[loser], tiebreak="head_to_head_loser")

    def _multiway(self, tied: list[int], counts: dict[int, int]) -> None:
        run = self.run
        ids = run.couple_ids(tied)
        logger.warning("Unresolved %d-way tie at k=%d: %s", len(tied), run.num_candidates, ids)
        run.record(
            "unresolved",
            f"{len(tied)}-way tie could not be broken at k<={run.num_candidates}: "
            f"{', '.join(ids)} share place {run.place}",
            couples=ids,
            tiebreak="unresolved_multiway",
        )
        run.assign_shared(tied, run.num_candidates, counts, "unresolved_multiway")

    def _unresolved(self, tied: list[int], k: int, max_count: int) -> None:
        run = self.run
        ids = run.couple_ids(tied)
        logger.warning("Could not resolve tie, assigning all to same place: %s", ids)
        run.record(
            "unresolved",
            f"Tie could not be broken at k<={k}: {', '.join(ids)} share place {run.place}",
            couples=ids,
            tiebreak="unresolved",
        )
        run.assign_shared(tied, k, {c: max_count for c in tied}, "unresolved")
