"""Relative Placement engine (WCS Standard / Skating System)."""

import logging
from collections.abc import Callable

from rpss.models import OrdinalMatrix, RankingResult
from rpss.ranking.majority import find_majority
from rpss.ranking.run import RankingRun
from rpss.ranking.tiebreak import TieResolver
from rpss.ranking.validation import validate_matrix

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 1000


def strict_majority(num_judges: int) -> int:
    """Majority bar: more than half of the judges."""
    return num_judges // 2 + 1


class PlacementEngine:
    """Relative Placement engine.

    A couple earns the next place when a majority of judges rank them at some
    threshold k or better. Each round starts at k = 1 and raises k until at
    least one remaining couple has a majority. If one couple has the most
    judges it is placed; if several share the highest count, TieResolver
    decides.

    Args:
        max_iterations: Ceiling on the number of rounds. Reaching it with
            couples left means something is wrong, so the result is flagged
            incomplete rather than silently truncated.
        majority_bar: Maps the number of judges to the majority bar.
    """

    def __init__(
        self,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        majority_bar: Callable[[int], int] = strict_majority,
    ):
        self.max_iterations = max_iterations
        self.majority_bar = majority_bar

    def rank(self, matrix: OrdinalMatrix) -> RankingResult:
        """Rank every couple in the matrix.

        Raises:
            OrdinalValidationError: If the matrix is empty or a judge's row
                is not a permutation of 1..C
        """
        validate_matrix(matrix)

        num_judges = matrix.num_judges
        num_couples = matrix.num_candidates
        majority = self.majority_bar(num_judges)
        run = RankingRun(matrix, majority)
        logger.debug("Ranking %d couples with %d judges", num_couples, num_judges)

        run.record(
            "init",
            f"Starting RPSS calculation with {num_judges} judges and "
            f"{num_couples} couples. Majority = {majority}",
            majority=majority,
        )

        iteration = 0
        while run.remaining and iteration < self.max_iterations:
            iteration += 1
            run.record(
                "iteration",
                f"Starting iteration for place {run.place}. "
                f"Remaining couples: {', '.join(run.couple_ids(run.remaining))}",
                place=run.place,
                remaining=run.couple_ids(run.remaining),
            )
            if not self._round(run):
                self._emergency(run)
                break

        complete = not run.remaining
        if not complete:
            logger.error(
                "RPSS: Max iterations (%d) exceeded with %d couples unplaced",
                self.max_iterations,
                len(run.remaining),
            )
            run.record(
                "exhausted",
                f"Stopped after {self.max_iterations} iterations with "
                f"{len(run.remaining)} couples unplaced: "
                f"{', '.join(run.couple_ids(run.remaining))}. Result is incomplete.",
                remaining=run.couple_ids(run.remaining),
            )

        return RankingResult(
            placements=sorted(run.placements, key=lambda p: p.place),
            steps=run.steps,
            majority=majority,
            total_judges=num_judges,
            total_couples=num_couples,
            complete=complete,
        )

    def _round(self, run: RankingRun) -> bool:
        """Run one round from k = 1. Returns whether anything was placed."""
        assigned = False
        k = 1
        while k <= run.num_candidates and run.remaining:
            counts, eligible = find_majority(run.remaining, run.ordinals, k, run.majority)
            run.record(
                "check",
                f"Checking k={k}: "
                + (f"{len(eligible)} couple(s) have majority" if eligible
                   else "No couples have majority yet"),
                k=k,
                counts=run.ids_by_couple(counts),
                eligible=run.couple_ids(eligible),
            )

            if not eligible:
                k += 1
                continue

            max_count = max(counts[c] for c in eligible)
            tier = [c for c in eligible if counts[c] == max_count]
            assigned = True

            if len(tier) == 1:
                run.assign(tier[0], k, max_count)
                # Others already holding a majority at this k are placed
                # before anyone who needs a higher threshold.
                if any(counts[c] >= run.majority for c in run.remaining):
                    continue
                break

            if not TieResolver(run).resolve(tier, k, max_count):
                break

        return assigned

    def _emergency(self, run: RankingRun) -> None:
        ids = run.couple_ids(run.remaining)
        logger.error("RPSS: Could not assign any couple at this iteration: %s", ids)
        run.record(
            "emergency",
            f"No couple could be placed at any k<={run.num_candidates}. "
            f"Assigning remaining couples in order: {', '.join(ids)}",
            remaining=ids,
        )
        for c in sorted(run.remaining):
            run.assign(c, run.num_candidates, 0, tiebreak="emergency_assignment")
