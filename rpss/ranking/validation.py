"""Permutation checks for judge ordinal rows."""

from rpss.models import OrdinalMatrix


class OrdinalValidationError(ValueError):
    """Raised when an ordinal matrix can't be ranked.

    Attributes:
        judge: The offending judge, or None if the matrix as a whole is bad
    """

    def __init__(self, message: str, judge: str | None = None):
        super().__init__(message)
        self.judge = judge


def row_problem(row: list[int], num_candidates: int) -> str | None:
    """Describe why a row is not a permutation of 1..C, or None if it is."""
    values = set(row)
    if len(row) != num_candidates:
        return f"Found {len(row)} values, expected {num_candidates}"
    if len(values) != num_candidates:
        return f"Found {len(values)} unique values, expected {num_candidates}"
    for i in range(1, num_candidates + 1):
        if i not in values:
            return f"Missing value {i}"
    return None


def validate_matrix(matrix: OrdinalMatrix) -> None:
    """Check that a matrix is rankable.

    Raises:
        OrdinalValidationError: If the matrix is empty, has no candidates,
            or any judge's row is not a permutation of 1..C
    """
    if not matrix.rows or matrix.num_candidates == 0:
        raise OrdinalValidationError("Invalid ordinals data: no judges or no couples")

    for judge, row in zip(matrix.judges, matrix.rows):
        if any(isinstance(v, bool) or not isinstance(v, int) for v in row):
            raise OrdinalValidationError(
                f"Judge {judge} has invalid ordinals (non-integer placement)",
                judge=judge,
            )
        problem = row_problem(row, matrix.num_candidates)
        if problem is not None:
            raise OrdinalValidationError(
                f"Judge {judge} has invalid ordinals "
                f"(duplicates or out of range): {problem}",
                judge=judge,
            )
