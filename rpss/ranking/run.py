"""Mutable state of a single ranking run: remaining couples, places, audit."""

from typing import Any

from rpss.models import AuditStep, OrdinalMatrix, Placement


class RankingRun:
    """Bookkeeping shared by the placement engine and the tie resolver.

    Holds the set of couples still to be placed, the next place number, the
    placements emitted so far and the append-only audit trail. Nothing here
    decides who wins; it only records decisions.
    """

    def __init__(self, matrix: OrdinalMatrix, majority: int):
        self.matrix = matrix
        self.ordinals = matrix.rows
        self.num_candidates = matrix.num_candidates
        self.num_judges = matrix.num_judges
        self.majority = majority
        self.remaining: set[int] = set(range(matrix.num_candidates))
        self.place = 1
        self.placements: list[Placement] = []
        self.steps: list[AuditStep] = []

    def couple_id(self, candidate: int) -> str:
        return self.matrix.couple_ids[candidate]

    def couple_ids(self, candidates) -> list[str]:
        return [self.couple_id(c) for c in sorted(candidates)]

    def ids_by_couple(self, values: dict[int, Any]) -> dict[str, Any]:
        """Re-key a candidate-indexed dict by couple id, in index order."""
        return {self.couple_id(c): values[c] for c in sorted(values)}

    def record(self, type_: str, message: str, **data: Any) -> AuditStep:
        step = AuditStep(step=len(self.steps) + 1, type=type_, message=message, data=data)
        self.steps.append(step)
        return step

    def assign(
        self,
        candidate: int,
        k: int,
        majority_count: int,
        sum_used: int | None = None,
        tiebreak: str | None = None,
        shared_place: int | None = None,
    ) -> Placement:
        """Place a candidate and remove it from contention.

        With shared_place set, the candidate gets that place and the place
        counter is left alone; the caller advances it once for the whole group.
        """
        place = self.place if shared_place is None else shared_place
        placement = Placement(
            place=place,
            couple_id=self.couple_id(candidate),
            couple_index=candidate,
            k_used=k,
            majority_count=majority_count,
            sum_used=sum_used,
            tiebreak=tiebreak,
        )
        self.placements.append(placement)
        self.remaining.discard(candidate)
        if shared_place is None:
            self.place += 1

        details = [f"majority: {majority_count}/{self.num_judges} at k<={k}"]
        if sum_used is not None:
            details.append(f"sum: {sum_used}")
        if tiebreak:
            details.append(tiebreak)
        self.record(
            "assign",
            f"Assigned place {place} to {placement.couple_id} ({', '.join(details)})",
            place=place,
            couple=placement.couple_id,
            k=k,
            majority_count=majority_count,
            sum=sum_used,
            tiebreak=tiebreak,
        )
        return placement

    def assign_shared(
        self, candidates: list[int], k: int, counts: dict[int, int], tiebreak: str
    ) -> None:
        """Give every candidate the same place; the counter skips past them all."""
        place = self.place
        for c in sorted(candidates):
            self.assign(c, k, counts[c], tiebreak=tiebreak, shared_place=place)
        self.place += len(candidates)
