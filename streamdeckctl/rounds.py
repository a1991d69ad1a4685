"""Round naming and match lookups for bracket data.

Matches are given as the records of a tournament response: a list of
``{"match": {...}}`` objects. Lookups return the inner match objects.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from enum import Enum
from typing import Any


class TournamentType(Enum):
    """The bracket format of a tournament."""

    SINGLE_ELIMINATION = "single elimination"
    DOUBLE_ELIMINATION = "double elimination"
    ROUND_ROBIN = "round robin"

    @classmethod
    def from_name(cls, name: str) -> TournamentType:
        """Return the type named *name*, falling back to double elimination."""
        for member in cls:
            if member.value == name:
                return member
        return cls.DOUBLE_ELIMINATION


def _to_number(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _to_int(value: Any) -> int:
    number = _to_number(value)
    if number is None:
        return 0
    if isinstance(number, float):
        return int(number) if number.is_integer() else 0
    return number


def _inner_match(record: Any) -> dict[str, Any]:
    if not isinstance(record, Mapping):
        return {}
    match = record.get("match")
    return dict(match) if isinstance(match, Mapping) else {}


def single_elimination_phase(current_round: int, entrants: int) -> str:
    """Name a round of a single elimination bracket with *entrants* players."""
    max_rounds = 0
    counter = 1
    while counter < entrants:
        max_rounds += 1
        counter *= 2

    names = {0: "Final", 1: "Semi-Final", 2: "Quarter-Final", 3: "Last 16"}
    return names.get(max_rounds - current_round, f"Round {current_round}")


def winners_rounds(num_players: int) -> int:
    """Number of winners-bracket rounds in a double elimination bracket."""
    participants = float(num_players)
    rounds = 0
    while participants > 1:
        participants /= 2
        rounds += 1
    return rounds


def losers_rounds(num_players: int) -> int:
    """Number of losers-bracket rounds in a double elimination bracket."""
    if num_players <= 2:
        return 0

    count = 2
    rounds = 2
    increment = 2
    will_increment = False

    count += increment
    while count < num_players:
        count += increment
        rounds += 1
        if will_increment:
            increment *= 2
            will_increment = False
        else:
            will_increment = True
    return rounds


def double_elimination_phase(current_round: int, entrants: int) -> str:
    """Name a round of a double elimination bracket; losers rounds are negative."""
    winners = winners_rounds(entrants)
    losers = losers_rounds(entrants)

    real_round = abs(current_round)
    stage = ""
    round_name = f"Round {real_round - 1}"
    round_limit = losers if current_round < 0 else winners

    if current_round >= 1:
        stage = "Winners "
        round_name = "Bracket"
    if current_round < 0:
        stage = "Losers "
        round_name = "Bracket"

    if current_round < 0 and real_round == round_limit - 3:
        stage = ""
        round_name = "Top 8 Losers"
    if real_round == round_limit - 2:
        round_name = "Quarters"
    if real_round == round_limit - 1:
        round_name = "Semis"
    if real_round == round_limit:
        round_name = "Finals"
    if current_round == round_limit + 1:
        stage = ""
        round_name = "Grand Finals"

    return f"{stage}{round_name}".strip()


def get_phase(tournament_type: TournamentType, current_round: int, entrants: int) -> str:
    """Name *current_round* of a tournament of the given type."""
    if tournament_type is TournamentType.ROUND_ROBIN:
        return f"Round {current_round}"
    if tournament_type is TournamentType.SINGLE_ELIMINATION:
        return single_elimination_phase(current_round, entrants)
    if tournament_type is TournamentType.DOUBLE_ELIMINATION:
        return double_elimination_phase(current_round, entrants)
    raise ValueError(f"unknown tournament type: {tournament_type!r}")


def matches_for_round(matches: Iterable[Any], round_number: int) -> list[dict[str, Any]]:
    """Return the matches played in *round_number*.

    A match whose two prerequisite matches differ is placed first.
    """
    found: list[dict[str, Any]] = []
    for record in matches:
        match = _inner_match(record)
        round_value = _to_number(match.get("round"))
        if round_value is None or round_value != round_number:
            continue
        grand_final = _to_int(match.get("player1_prereq_match_id")) != _to_int(
            match.get("player2_prereq_match_id")
        )
        if grand_final:
            found.insert(0, match)
        else:
            found.append(match)
    return found


def match_by_id(matches: Iterable[Any], match_id: str) -> dict[str, Any]:
    """Return the match with id *match_id*, or an empty dict when there is none."""
    for record in matches:
        match = _inner_match(record)
        if str(_to_int(match.get("id"))) == match_id:
            return match
    return {}


def prerequisite_matches(
    all_matches: Iterable[Any], parent_match: Mapping[str, Any]
) -> list[dict[str, Any]]:
    """Return the prerequisite matches of *parent_match* on the same bracket side."""
    records = list(all_matches)
    ids_csv = parent_match.get("prerequisite_match_ids_csv")
    ids = (ids_csv if isinstance(ids_csv, str) else "").split(",")
    parent_round = _to_int(parent_match.get("round"))

    found = []
    for match_id in ids:
        match = match_by_id(records, match_id)
        match_round = _to_int(match.get("round"))
        if (parent_round > 0 and match_round > 0) or (parent_round < 0 and match_round < 0):
            found.append(match)
    return found