"""Interactive editing of judge scores with recalculation."""

import logging
from dataclasses import dataclass, field
from typing import Any

from rpss.models import Competitor, Placement, RankingResult, Scoresheet
from rpss.ranking import OrdinalValidationError, PlacementEngine
from rpss.ranking.validation import row_problem

logger = logging.getLogger(__name__)

Cell = tuple[int, int]  # (judge index, couple index)

PLACE_TITLES = {
    "improved": "Improved (moved up)",
    "worsened": "Worsened (moved down)",
    "match": "Match",
    "mismatch": "Mismatch",
}


def compare_places(
    reported: int, calculated: int | None, has_modifications: bool
) -> str | None:
    """Classify a calculated place against the place the source reported.

    Returns "improved" / "worsened" when scores have been edited and the couple
    moved, otherwise "match" / "mismatch". None if there is no calculated place.
    """
    if calculated is None:
        return None
    if has_modifications:
        if calculated < reported:
            return "improved"
        if calculated > reported:
            return "worsened"
    return "match" if calculated == reported else "mismatch"


@dataclass
class ResultRow:
    """A competitor alongside its recalculated place, for display."""
    competitor: Competitor
    placement: Placement | None = None
    hint: str | None = None
    moved: str = ""  # "improved" / "worsened" while edits are applied, else ""

    @property
    def calculated_place(self) -> int | None:
        return self.placement.place if self.placement else None

    @property
    def calc_details(self) -> str:
        return self.placement.describe() if self.placement else "error"

    @property
    def place_title(self) -> str:
        return PLACE_TITLES.get(self.hint, "")

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.competitor.to_dict(),
            "calculated_place": self.calculated_place,
            "calc_details": self.calc_details,
            "hint": self.hint,
            "place_title": self.place_title,
            "moved": self.moved,
        }


@dataclass
class ValidationReport:
    """Outcome of checking every judge's scores in advanced mode."""
    valid: bool
    message: str = ""
    invalid_judges: list[int] = field(default_factory=list)


class EditSession:
    """Editable copy of a scoresheet's ordinal matrix.

    In simple mode every edit is a "smart swap": giving a couple a placement
    that another couple holds swaps the two, so each judge's scores remain a
    permutation of 1..C. In advanced mode edits are written as-is and the
    scores are validated before each recalculation.

    Args:
        scoresheet: The finals scoresheet to edit
        engine: Placement engine to rank with (defaults to PlacementEngine())
    """

    def __init__(self, scoresheet: Scoresheet, engine: PlacementEngine | None = None):
        self.scoresheet = scoresheet
        self.engine = engine or PlacementEngine()
        self.original = scoresheet.ordinal_matrix()
        self.matrix = self.original.copy()
        self.modified_cells: set[Cell] = set()
        self.has_modifications = False
        self.advanced_mode = False
        self.invalid_judges: set[int] = set()
        self.error: str | None = None
        self.result: RankingResult | None = None
        self.rows = [ResultRow(c) for c in sorted(scoresheet.competitors, key=lambda c: c.place)]

        # Initial ranking: a bad scoresheet should fail loudly here
        self._apply(self.engine.rank(self.matrix), has_modifications=False)

    @property
    def num_couples(self) -> int:
        return self.matrix.num_candidates

    def set_advanced_mode(self, enabled: bool) -> None:
        self.advanced_mode = enabled
        self.error = None
        self.invalid_judges.clear()

    def set_score(self, judge: int, couple: int, value: Any) -> list[Cell]:
        """Change one judge's placement for one couple.

        Returns the cells that changed: none if the value isn't a number or
        is unchanged, two for a smart swap, one in advanced mode. In simple
        mode a value nobody currently holds (out of range, or the row was
        broken in advanced mode) is rejected.

        Raises:
            IndexError: If judge or couple is outside the matrix
        """
        if not 0 <= judge < self.matrix.num_judges or not 0 <= couple < self.num_couples:
            raise IndexError(f"No cell for judge {judge}, couple {couple}")
        if isinstance(value, bool):
            return []
        try:
            new_value = int(value)
        except (TypeError, ValueError):
            return []
        row = self.matrix.rows[judge]
        old_value = row[couple]
        if new_value == old_value:
            return []

        if self.advanced_mode:
            row[couple] = new_value
            changed = [(judge, couple)]
        else:
            holders = [i for i, v in enumerate(row) if v == new_value and i != couple]
            if len(holders) != 1 or row_problem(row, self.num_couples) is not None:
                logger.warning(
                    "Rejected edit for judge %s: no couple holds placement %d",
                    self.matrix.judges[judge],
                    new_value,
                )
                return []
            other = holders[0]
            row[couple], row[other] = new_value, old_value
            changed = [(judge, couple), (judge, other)]

        self.modified_cells.update(changed)
        self.has_modifications = True
        return changed

    def validate(self) -> ValidationReport:
        """Check that every judge's scores are a permutation of 1..C."""
        errors = []
        invalid = []
        for j, row in enumerate(self.matrix.rows):
            problem = row_problem(row, self.num_couples)
            if problem is not None:
                errors.append(f"Judge {self.matrix.judges[j]}: {problem}")
                invalid.append(j)
        if invalid:
            return ValidationReport(valid=False, message="; ".join(errors), invalid_judges=invalid)
        return ValidationReport(valid=True)

    def recompute(self, force: bool = False) -> RankingResult | None:
        """Rank the current scores.

        Does nothing without edits unless forced. If the scores are invalid,
        sets `error` (and `invalid_judges` in advanced mode) and keeps the
        previous result. Returns the new result, or None if nothing was run.
        """
        if not force and not self.has_modifications:
            return None

        if self.advanced_mode:
            report = self.validate()
            self.invalid_judges = set(report.invalid_judges)
            if not report.valid:
                self.error = f"Invalid ordinals: {report.message}"
                return None

        try:
            result = self.engine.rank(self.matrix)
        except OrdinalValidationError as e:
            logger.error("Recalculation error: %s", e)
            self.error = f"Error recalculating placements: {e}"
            return None

        self.error = None
        self._apply(result, self.has_modifications or force)
        self.rows.sort(key=lambda r: (r.calculated_place is None, r.calculated_place or 0))
        return result

    def reset(self) -> RankingResult | None:
        """Throw away all edits and rank the original scores again."""
        self.matrix = self.original.copy()
        self.modified_cells.clear()
        self.has_modifications = False
        self.error = None
        self.invalid_judges.clear()
        result = self.recompute(force=True)
        self.rows.sort(key=lambda r: r.competitor.place)
        return result

    def _apply(self, result: RankingResult, has_modifications: bool) -> None:
        self.result = result
        by_couple = {p.couple_id: p for p in result.placements}
        for row in self.rows:
            row.placement = by_couple.get(row.competitor.couple_id)
            row.hint = compare_places(row.competitor.place, row.calculated_place, has_modifications)
            row.moved = row.hint if has_modifications and row.hint in ("improved", "worsened") else ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "judges": list(self.matrix.judges),
            "ordinals": [list(row) for row in self.matrix.rows],
            "modified_cells": sorted(list(cell) for cell in self.modified_cells),
            "has_modifications": self.has_modifications,
            "advanced_mode": self.advanced_mode,
            "invalid_judges": sorted(self.invalid_judges),
            "error": self.error,
            "rows": [row.to_dict() for row in self.rows],
            "result": self.result.to_dict() if self.result else None,
        }
