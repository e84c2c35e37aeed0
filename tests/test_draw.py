"""
Tests for the draw builder.

Covers seeding order, bracket sizing, bye placement and the validation
done before a draw is made.
"""

import pytest

from engine.bracket import MatchStatus, Side, Team
from engine.draw import (
    MIN_TEAMS,
    build,
    bracket_size,
    bye_count,
    rank_teams,
    seeding_order,
)
from engine.errors import BracketError, InsufficientTeams


def make_teams(count: int, seeded: bool = True) -> list[Team]:
    return [
        Team(team_id=i, team_name=f"Team {i:02d}", seed=i if seeded else None)
        for i in range(1, count + 1)
    ]


class TestSeedingOrder:
    """Tests for bracket sizing helpers."""

    def test_bracket_size_is_next_power_of_two(self):
        """Team counts are padded to the next power of two."""
        assert bracket_size(4) == 4
        assert bracket_size(5) == 8
        assert bracket_size(8) == 8
        assert bracket_size(9) == 16
        assert bracket_size(33) == 64

    def test_bye_count(self):
        assert bye_count(4) == 0
        assert bye_count(5) == 3
        assert bye_count(12) == 4

    def test_four_position_order(self):
        """1 v 4 on top, 2 v 3 below."""
        assert seeding_order(4) == [1, 4, 2, 3]

    def test_eight_position_order(self):
        """Seeds 1 and 2 can only meet in the final."""
        assert seeding_order(8) == [1, 8, 4, 5, 2, 7, 3, 6]

    def test_pairs_sum_to_size_plus_one(self):
        order = seeding_order(16)
        assert sorted(order) == list(range(1, 17))
        for i in range(0, 16, 2):
            assert order[i] + order[i + 1] == 17


class TestRankTeams:
    """Tests for ranking before the draw."""

    def test_seeded_before_unseeded(self):
        teams = [
            Team(1, "Zebras"),
            Team(2, "Antelopes", seed=2),
            Team(3, "Buffalo", seed=1),
            Team(4, "Cheetahs"),
        ]
        ranked = [t.team_id for t in rank_teams(teams)]
        assert ranked == [3, 2, 4, 1]

    def test_ties_broken_by_name_case_insensitive(self):
        teams = [
            Team(1, "delta"),
            Team(2, "Alpha"),
            Team(3, "charlie"),
            Team(4, "Bravo"),
        ]
        assert [t.team_name for t in rank_teams(teams)] == ["Alpha", "Bravo", "charlie", "delta"]

    def test_ranking_ignores_input_order(self):
        teams = make_teams(6)
        assert rank_teams(reversed(teams)) == rank_teams(teams)


class TestBuild:
    """Tests for building the initial bracket."""

    def test_four_team_example(self):
        """Four seeded teams give 1v4 and 2v3 feeding an empty final."""
        teams = [{"id": i, "name": f"Team {i}", "seed": i} for i in range(1, 5)]

        bracket = build(teams)

        assert bracket.total_rounds == 2
        first, second = bracket.rounds[0].matches
        assert (first.home_team_id, first.away_team_id) == (1, 4)
        assert (second.home_team_id, second.away_team_id) == (2, 3)
        final = bracket.final
        assert final.home_team_id is None
        assert final.away_team_id is None
        assert final.winner_team_id is None

    def test_round_counts(self):
        """log2(size) rounds with halving match counts."""
        bracket = build(make_teams(16))
        assert [len(r.matches) for r in bracket.rounds] == [8, 4, 2, 1]
        assert [r.name for r in bracket.rounds] == [
            "Round of 16", "Quarter Finals", "Semi Finals", "Final"
        ]

    def test_round_counts_for_every_field_size(self):
        """log2(bracket size) rounds, half the slots as first-round matches."""
        for count in range(MIN_TEAMS, 34):
            size = bracket_size(count)
            bracket = build(make_teams(count))

            assert 2 ** bracket.total_rounds == size, count
            assert len(bracket.rounds[0].matches) == size // 2, count
            assert [len(r.matches) for r in bracket.rounds] == [
                size // 2 ** r for r in range(1, bracket.total_rounds + 1)
            ], count

    def test_match_ids_are_unique_and_sequential(self):
        bracket = build(make_teams(8), first_match_id=100)
        ids = [m.id for m in bracket.matches()]
        assert ids == list(range(100, 107))

    def test_every_team_placed_once(self):
        bracket = build(make_teams(12))
        placed = [
            t for m in bracket.rounds[0].matches
            for t in (m.home_team_id, m.away_team_id) if t is not None
        ]
        assert sorted(placed) == list(range(1, 13))

    def test_five_teams_give_byes_to_top_seeds(self):
        """Seeds 1-3 get byes and are already sitting in round 2."""
        bracket = build(make_teams(5))

        byes = [m for m in bracket.rounds[0].matches if m.is_bye]
        assert sorted(m.winner_team_id for m in byes) == [1, 2, 3]
        for match in byes:
            assert match.status == MatchStatus.COMPLETED

        # 4 v 5 is the only real first-round match
        played = [m for m in bracket.rounds[0].matches if not m.is_bye]
        assert len(played) == 1
        assert (played[0].home_team_id, played[0].away_team_id) == (4, 5)

        semi_1, semi_2 = bracket.rounds[1].matches
        assert semi_1.home_team_id == 1
        assert semi_1.away_team_id is None
        assert (semi_2.home_team_id, semi_2.away_team_id) == (2, 3)

    def test_byes_follow_parent_slot_rule(self):
        """A bye from an odd match fills home, from an even match fills away."""
        bracket = build(make_teams(6))
        for match in bracket.rounds[0].matches:
            if not match.is_bye:
                continue
            parent, side = bracket.parent_slot(match)
            assert parent.team_in(side) == match.winner_team_id
            expected = Side.HOME if match.match_number % 2 == 1 else Side.AWAY
            assert side is expected

    def test_no_bye_meets_another_bye(self):
        """With fewer byes than half the bracket, no match pairs two empty slots."""
        for count in range(MIN_TEAMS, 33):
            bracket = build(make_teams(count))
            for match in bracket.rounds[0].matches:
                assert not (match.home_team_id is None and match.away_team_id is None)

    def test_unseeded_draw_is_alphabetical(self):
        teams = [Team(10, "Delta"), Team(11, "alpha"), Team(12, "Charlie"), Team(13, "bravo")]
        bracket = build(teams)
        first, second = bracket.rounds[0].matches
        # alpha=1, bravo=2, Charlie=3, Delta=4
        assert (first.home_team_id, first.away_team_id) == (11, 10)
        assert (second.home_team_id, second.away_team_id) == (13, 12)

    def test_competition_id_and_teams_kept(self):
        bracket = build(make_teams(4), competition_id=9)
        assert bracket.competition_id == 9
        assert bracket.team_name(3) == "Team 03"

    def test_built_bracket_validates(self):
        bracket = build(make_teams(11))
        bracket.validate()


class TestBuildErrors:
    """Tests for rejected draws."""

    def test_too_few_teams(self):
        with pytest.raises(InsufficientTeams) as exc_info:
            build(make_teams(3))
        assert exc_info.value.team_count == 3
        assert exc_info.value.minimum == MIN_TEAMS

    def test_insufficient_teams_is_value_error(self):
        with pytest.raises(ValueError):
            build([])

    def test_duplicate_team_ids(self):
        teams = make_teams(4) + [Team(2, "Impostor")]
        with pytest.raises(BracketError):
            build(teams)
