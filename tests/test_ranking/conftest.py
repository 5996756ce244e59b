"""Shared ordinal matrices for ranking tests.

Rows are judges, columns are couples A, B, C, ...
"""

import pytest
from tests.conftest import make_matrix


@pytest.fixture
def worked_example():
    """3 judges, 3 couples, majority 2.

         J1  J2  J3
    A     1   1   2
    B     2   2   1
    C     3   3   3

    k=1: A has 2 judges -> 1st. B needs k=2 (3 judges) -> 2nd. C 3rd.
    """
    return make_matrix([
        [1, 2, 3],
        [1, 2, 3],
        [2, 1, 3],
    ])


@pytest.fixture
def clear_winner():
    """Clear majorities at each cutoff, 3 judges, 4 couples.

         J1  J2  J3
    A     1   1   2
    B     2   3   1
    C     3   2   3
    D     4   4   4
    """
    return make_matrix([
        [1, 2, 3, 4],
        [1, 3, 2, 4],
        [2, 1, 3, 4],
    ])


@pytest.fixture
def disagreement():
    """5 judges, 4 couples, majority 3.

         J1  J2  J3  J4  J5
    A     1   2   3   1   4
    B     2   1   4   3   1
    C     3   4   1   4   2
    D     4   3   2   2   3

    A and B tie at k=2 (3 judges, sum 4 each) and stay tied through k=4;
    3 of 5 judges put A above B. D then beats C at k=3 (4 judges vs 3),
    and C, already holding a majority at k=3, is placed at the same k.
    """
    return make_matrix([
        [1, 2, 3, 4],
        [2, 1, 4, 3],
        [3, 4, 1, 2],
        [1, 3, 4, 2],
        [4, 1, 2, 3],
    ])


@pytest.fixture
def quality_of_majority():
    """7 judges, 4 couples, majority 4.

             J1  J2  J3  J4  J5  J6  J7
        A     1   1   1   2   3   4   4
        B     2   2   2   1   4   3   3
        C     3   4   3   3   1   2   1
        D     4   3   4   4   2   1   2

    At k=2 A and B both have 4 judges. A's sum is 5 (1+1+1+2), B's is 7.
    """
    return make_matrix([
        [1, 2, 3, 4],
        [1, 2, 4, 3],
        [1, 2, 3, 4],
        [2, 1, 3, 4],
        [3, 4, 1, 2],
        [4, 3, 2, 1],
        [4, 3, 1, 2],
    ])


@pytest.fixture
def unanimous():
    return make_matrix([
        [1, 2, 3],
        [1, 2, 3],
        [1, 2, 3],
    ])


@pytest.fixture
def perfect_cycle():
    """Perfectly symmetric, 3 judges, 3 couples.

         J1  J2  J3
    A     1   3   2
    B     2   1   3
    C     3   2   1
    """
    return make_matrix([
        [1, 2, 3],
        [3, 1, 2],
        [2, 3, 1],
    ])


@pytest.fixture
def cycle_then_last():
    """A symmetric three-way cycle for the top, D last everywhere.

         J1  J2  J3
    A     1   3   2
    B     2   1   3
    C     3   2   1
    D     4   4   4
    """
    return make_matrix([
        [1, 2, 3, 4],
        [3, 1, 2, 4],
        [2, 3, 1, 4],
    ])


@pytest.fixture
def split_pair():
    """2 judges disagree on A and B; C last.

         J1  J2
    A     1   2
    B     2   1
    C     3   3
    """
    return make_matrix([
        [1, 2, 3],
        [2, 1, 3],
    ])
