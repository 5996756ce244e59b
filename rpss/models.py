"""Core data models for scoresheets, ordinal matrices and ranking results."""

from dataclasses import dataclass, field
from typing import Any, Self


@dataclass
class Competitor:
    """One couple in a finals scoresheet.

    Attributes:
        leader: Leader's full name
        follower: Follower's full name
        leader_bib: Leader's bib number (as printed, may be empty)
        follower_bib: Follower's bib number
        place: Place reported by the results source
        scores: Dict mapping judge_id -> raw placement (1 = best)
        original_index: Position in the source results list. This is the
            column of the ordinal matrix, whatever order rows are displayed in.
    """
    leader: str
    follower: str
    leader_bib: str
    follower_bib: str
    place: int
    scores: dict[str, int]
    original_index: int

    @property
    def couple_id(self) -> str:
        return f"{self.leader_bib}/{self.follower_bib}"

    @property
    def name(self) -> str:
        return f"{self.leader} & {self.follower}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "couple_id": self.couple_id,
            "name": self.name,
            "leader": self.leader,
            "follower": self.follower,
            "leader_bib": self.leader_bib,
            "follower_bib": self.follower_bib,
            "place": self.place,
            "scores": dict(self.scores),
            "original_index": self.original_index,
        }


@dataclass
class Scoresheet:
    """Complete finals scoresheet from a competition.

    Attributes:
        competition_name: Name of the competition/event
        judges: Judge identifiers, in the order the source lists them
        competitors: Competitors, in any order (see Competitor.original_index)
        category: Division or category, e.g. "Novice"
        date: Event start date as reported by the source
        location: "Venue, Country" style location string
        calculation_model: Scoring model reported by the source, if any

    Example:
        >>> scoresheet = Scoresheet(
        ...     competition_name="Novice J&J Finals",
        ...     judges=["J1", "J2"],
        ...     competitors=[
        ...         Competitor("Alice", "Bob", "101", "201", 1,
        ...                    {"J1": 1, "J2": 2}, 0),
        ...         Competitor("Carol", "Dave", "102", "202", 2,
        ...                    {"J1": 2, "J2": 1}, 1),
        ...     ],
        ... )
    """
    competition_name: str
    judges: list[str]
    competitors: list[Competitor]
    category: str = ""
    date: str = ""
    location: str = ""
    calculation_model: str = ""

    @property
    def num_competitors(self) -> int:
        return len(self.competitors)

    @property
    def num_judges(self) -> int:
        return len(self.judges)

    def by_original_index(self) -> list[Competitor]:
        """Competitors sorted into matrix column order."""
        return sorted(self.competitors, key=lambda c: c.original_index)

    def ordinal_matrix(self) -> "OrdinalMatrix":
        """Build the judge x couple ordinal matrix.

        Column c holds the competitor whose original_index is c, so that
        re-sorting the display never desyncs the matrix.

        Raises:
            ValueError: If a judge has no usable placement for a competitor
        """
        ordered = self.by_original_index()
        rows = []
        for judge in self.judges:
            row = []
            for competitor in ordered:
                try:
                    row.append(int(competitor.scores[judge]))
                except (KeyError, TypeError, ValueError):
                    raise ValueError(
                        f"Invalid placement for judge {judge}, "
                        f"couple {competitor.couple_id}"
                    ) from None
            rows.append(row)
        return OrdinalMatrix(
            rows=rows,
            judges=list(self.judges),
            couple_ids=[c.couple_id for c in ordered],
        )


@dataclass
class OrdinalMatrix:
    """Judge-indexed rows of candidate-indexed ordinals.

    rows[j][c] is the placement judge j gave to candidate c. For a valid
    matrix every row is a permutation of 1..C.
    """
    rows: list[list[int]]
    judges: list[str]
    couple_ids: list[str]

    @property
    def num_judges(self) -> int:
        return len(self.rows)

    @property
    def num_candidates(self) -> int:
        return len(self.couple_ids)

    def copy(self) -> Self:
        return type(self)(
            rows=[list(row) for row in self.rows],
            judges=list(self.judges),
            couple_ids=list(self.couple_ids),
        )


@dataclass(frozen=True)
class Placement:
    """One couple's computed place.

    Attributes:
        place: 1-indexed place. Couples share a place only when a tie could
            not be broken (unresolved_multiway / unresolved).
        couple_id: Stable couple identifier
        couple_index: Column in the ordinal matrix
        k_used: Threshold at which the place was decided
        majority_count: Judges ranking the couple at k_used or better
        sum_used: Ordinal sum that broke a tie, if one was needed
        tiebreak: Tiebreak method tag, if one was needed
    """
    place: int
    couple_id: str
    couple_index: int
    k_used: int
    majority_count: int
    sum_used: int | None = None
    tiebreak: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "place": self.place,
            "couple_id": self.couple_id,
            "couple_index": self.couple_index,
            "k_used": self.k_used,
            "majority_count": self.majority_count,
            "sum_used": self.sum_used,
            "tiebreak": self.tiebreak,
        }

    def describe(self) -> str:
        """Short "k=2, maj=3, sum=5, expanded_k" summary for result tables."""
        details = [f"k={self.k_used}", f"maj={self.majority_count}"]
        if self.sum_used:
            details.append(f"sum={self.sum_used}")
        if self.tiebreak:
            details.append(self.tiebreak)
        return ", ".join(details)


@dataclass(frozen=True)
class AuditStep:
    """One entry in the ranking audit trail.

    Attributes:
        step: Sequence number, starting at 1
        type: Step kind (init, iteration, check, tie, tie_sums, assign,
            expand, head_to_head, unresolved, emergency, exhausted)
        message: Human-readable explanation
        data: Structured details (threshold, counts, sums, ...)
    """
    step: int
    type: str
    message: str
    data: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"step": self.step, "type": self.type, "message": self.message, **self.data}


@dataclass
class RankingResult:
    """Result of one Relative Placement run.

    Attributes:
        placements: Placements ordered by place
        steps: The audit trail
        majority: Majority bar used for this run
        total_judges: Number of judges (matrix rows)
        total_couples: Number of couples (matrix columns)
        complete: False if the iteration ceiling stopped the run early, in
            which case placements are partial and must not be trusted
    """
    placements: list[Placement]
    steps: list[AuditStep]
    majority: int
    total_judges: int
    total_couples: int
    complete: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "placements": [p.to_dict() for p in self.placements],
            "audit": {
                "majority": self.majority,
                "total_judges": self.total_judges,
                "total_couples": self.total_couples,
                "steps": [s.to_dict() for s in self.steps],
            },
            "complete": self.complete,
        }
