"""Shared test helpers."""

from rpss.models import Competitor, OrdinalMatrix, RankingResult, Scoresheet


def make_matrix(rows: list[list[int]], couple_ids: list[str] | None = None) -> OrdinalMatrix:
    """Build an OrdinalMatrix from judge rows.

    Couples are named "A", "B", ... and judges "J1", "J2", ... unless given.
    """
    num_couples = len(rows[0]) if rows else 0
    if couple_ids is None:
        couple_ids = [chr(ord("A") + i) for i in range(num_couples)]
    return OrdinalMatrix(
        rows=[list(row) for row in rows],
        judges=[f"J{j + 1}" for j in range(len(rows))],
        couple_ids=couple_ids,
    )


def make_scoresheet(
    name: str,
    rankings_table: dict[str, dict[str, int]],
    places: dict[str, int] | None = None,
) -> Scoresheet:
    """Build a Scoresheet from a compact rankings table.

    Args:
        name: Competition name
        rankings_table: {judge_id: {couple_id: rank}}, couple ids as
            "leaderBib/followerBib"
        places: {couple_id: reported place}; defaults to listing order

    Returns:
        Scoresheet whose competitors keep the table's order as original_index.
    """
    judges = list(rankings_table.keys())
    couple_ids = list(next(iter(rankings_table.values())).keys())
    competitors = []
    for index, couple_id in enumerate(couple_ids):
        leader_bib, follower_bib = couple_id.split("/")
        competitors.append(Competitor(
            leader=f"Leader {leader_bib}",
            follower=f"Follower {follower_bib}",
            leader_bib=leader_bib,
            follower_bib=follower_bib,
            place=places[couple_id] if places else index + 1,
            scores={judge: rankings_table[judge][couple_id] for judge in judges},
            original_index=index,
        ))
    return Scoresheet(competition_name=name, judges=judges, competitors=competitors)


def placement_ids(result: RankingResult) -> list[str]:
    """Couple ids in placement order."""
    return [p.couple_id for p in result.placements]


def steps_of_type(result: RankingResult, type_: str) -> list:
    return [s for s in result.steps if s.type == type_]
