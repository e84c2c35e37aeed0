"""
Seeding & Draw Builder

Turns a list of registered teams into a fresh knockout bracket:

- teams are ranked by seed (unseeded last), ties broken by name
- the bracket is padded to the next power of two with byes
- round 1 uses standard seeding order (1 v N, 2 v N-1, ...) arranged so the
  top seeds can only meet late
- byes fall to the top seeds and are advanced straight into round 2
"""

from typing import Iterable, Optional, Union

from engine.bracket import Bracket, Match, MatchStatus, Round, Team, round_name
from engine.errors import BracketError, InsufficientTeams
from engine.propagation import advance_winner


MIN_TEAMS = 4


def rank_teams(teams: Iterable[Team]) -> list[Team]:
    """Order by seed ascending, unseeded last, then case-insensitive name."""
    return sorted(
        teams,
        key=lambda t: (
            t.seed is None,
            t.seed if t.seed is not None else 0,
            t.team_name.casefold(),
        ),
    )


def bracket_size(team_count: int) -> int:
    """Smallest power of two that holds ``team_count`` teams."""
    if team_count <= 1:
        return 1
    return 1 << (team_count - 1).bit_length()


def bye_count(team_count: int) -> int:
    return bracket_size(team_count) - team_count


def seeding_order(size: int) -> list[int]:
    """
    Seed numbers in bracket-line order for a bracket of ``size`` positions.

    For 8: [1, 8, 4, 5, 2, 7, 3, 6] -> 1v8, 4v5, 2v7, 3v6.
    Each pair sums to size + 1, and the halves split seeds 1 and 2.
    """
    if size < 2:
        return [1] * size
    if size == 2:
        return [1, 2]

    upper = seeding_order(size // 2)
    order = []
    for seed in upper:
        order.extend([seed, size + 1 - seed])
    return order


def build(
    teams: Iterable[Union[Team, dict]],
    competition_id: Optional[int] = None,
    first_match_id: int = 1,
) -> Bracket:
    """
    Build the initial bracket for ``teams``.

    Raises:
        InsufficientTeams: fewer than four teams
        BracketError: the same team id is registered twice
    """
    entries = [t if isinstance(t, Team) else Team.from_dict(t) for t in teams]
    if len(entries) < MIN_TEAMS:
        raise InsufficientTeams(len(entries), MIN_TEAMS)

    ids = [t.team_id for t in entries]
    if len(set(ids)) != len(ids):
        raise BracketError("Each team can only be entered into the draw once")

    ranked = rank_teams(entries)
    size = bracket_size(len(ranked))
    total_rounds = size.bit_length() - 1
    by_seed = {position: team for position, team in enumerate(ranked, start=1)}

    next_id = first_match_id
    rounds = []

    # Round 1 follows the seeding order; empty positions are byes
    order = seeding_order(size)
    first_round = []
    for number, i in enumerate(range(0, size, 2), start=1):
        home = by_seed.get(order[i])
        away = by_seed.get(order[i + 1])
        match = Match(
            id=next_id,
            round_number=1,
            match_number=number,
            home_team_id=home.team_id if home else None,
            away_team_id=away.team_id if away else None,
        )
        if (home is None) != (away is None):
            match.winner_team_id = (home or away).team_id
            match.status = MatchStatus.COMPLETED
        first_round.append(match)
        next_id += 1
    rounds.append(Round(1, round_name(1, total_rounds, len(first_round)), first_round))

    match_count = len(first_round)
    for round_number in range(2, total_rounds + 1):
        match_count //= 2
        matches = []
        for number in range(1, match_count + 1):
            matches.append(Match(id=next_id, round_number=round_number, match_number=number))
            next_id += 1
        rounds.append(Round(round_number, round_name(round_number, total_rounds, match_count), matches))

    bracket = Bracket(
        rounds=rounds,
        teams={t.team_id: t for t in ranked},
        competition_id=competition_id,
    )

    for match in first_round:
        if match.is_bye:
            advance_winner(bracket, match)

    return bracket
