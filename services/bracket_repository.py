"""
Bracket Repository

Loads registered teams and stores bracket state for a competition.

The engine works on an in-memory Bracket; this module is the only place it
meets the database. Saves are checked against ``Competition.bracket_version``
so a stale copy cannot overwrite a newer one.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import delete, select, update
from sqlalchemy.orm import Session

from engine.bracket import Bracket, Match, MatchStatus, Round, Team, round_name
from models.bracket_match import TournamentBracketMatch
from models.competition import Competition, competition_teams
from models.team import Team as TeamModel


logger = logging.getLogger(__name__)


class BracketNotFound(LookupError):
    """The competition has no stored bracket."""

    def __init__(self, competition_id: int):
        self.competition_id = competition_id
        super().__init__(f"No bracket stored for competition {competition_id}")


class CompetitionNotFound(LookupError):
    def __init__(self, competition_id: int):
        self.competition_id = competition_id
        super().__init__(f"Competition {competition_id} not found")


class StaleBracketError(RuntimeError):
    """Someone else saved the bracket after it was loaded."""

    def __init__(self, competition_id: int, expected: int, actual: int):
        self.competition_id = competition_id
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Bracket for competition {competition_id} changed "
            f"(expected version {expected}, found {actual}); reload and retry"
        )


class BracketRepository:
    """
    Persistence for teams and brackets.

    Usage:
        with get_session() as session:
            repo = BracketRepository(session)
            teams = repo.list_registered_teams(competition_id)
            bracket, version = repo.load_bracket(competition_id)
            repo.save_bracket(competition_id, bracket, expected_version=version)
    """

    def __init__(self, session: Session):
        self.session = session

    def _competition(self, competition_id: int) -> Competition:
        competition = self.session.get(Competition, competition_id)
        if competition is None:
            raise CompetitionNotFound(competition_id)
        return competition

    # -------------------------------------------------------------------------
    # Team registry
    # -------------------------------------------------------------------------

    def list_registered_teams(self, competition_id: int) -> list[Team]:
        """Teams registered into the competition, in seed order (unseeded last)."""
        self._competition(competition_id)
        rows = self.session.execute(
            select(TeamModel.id, TeamModel.name, competition_teams.c.seed)
            .join(competition_teams, competition_teams.c.team_id == TeamModel.id)
            .where(competition_teams.c.competition_id == competition_id)
            .order_by(competition_teams.c.seed.is_(None), competition_teams.c.seed, TeamModel.name)
        ).all()
        return [Team(team_id=r.id, team_name=r.name, seed=r.seed) for r in rows]

    def register_team(self, competition_id: int, team_id: int, seed: Optional[int] = None) -> None:
        """Register a team, or update its seed when already registered."""
        self._competition(competition_id)
        if self.session.get(TeamModel, team_id) is None:
            raise LookupError(f"Team {team_id} not found")

        existing = self.session.execute(
            select(competition_teams.c.team_id).where(
                competition_teams.c.competition_id == competition_id,
                competition_teams.c.team_id == team_id,
            )
        ).first()
        if existing:
            self.session.execute(
                update(competition_teams)
                .where(
                    competition_teams.c.competition_id == competition_id,
                    competition_teams.c.team_id == team_id,
                )
                .values(seed=seed)
            )
        else:
            self.session.execute(
                competition_teams.insert().values(
                    competition_id=competition_id, team_id=team_id, seed=seed
                )
            )
        self.session.flush()

    # -------------------------------------------------------------------------
    # Bracket persistence
    # -------------------------------------------------------------------------

    def bracket_version(self, competition_id: int) -> int:
        return self._competition(competition_id).bracket_version

    def load_bracket(self, competition_id: int) -> tuple[Bracket, int]:
        """
        Rebuild the stored bracket.

        Returns:
            (bracket, version) - pass the version back to ``save_bracket``

        Raises:
            CompetitionNotFound, BracketNotFound
            InvalidMatchState: the stored rows do not form a valid bracket
        """
        competition = self._competition(competition_id)
        rows = self.session.scalars(
            select(TournamentBracketMatch)
            .where(TournamentBracketMatch.competition_id == competition_id)
            .order_by(TournamentBracketMatch.round_number, TournamentBracketMatch.match_number)
        ).all()
        if not rows:
            raise BracketNotFound(competition_id)

        by_round: dict[int, list[TournamentBracketMatch]] = {}
        for row in rows:
            by_round.setdefault(row.round_number, []).append(row)

        total_rounds = len(by_round)
        rounds = []
        for round_number in sorted(by_round):
            round_rows = by_round[round_number]
            matches = [self._row_to_match(row) for row in round_rows]
            name = round_rows[0].round_name or round_name(round_number, total_rounds, len(matches))
            rounds.append(Round(round_number=round_number, name=name, matches=matches))

        teams = {t.team_id: t for t in self.list_registered_teams(competition_id)}
        bracket = Bracket(rounds=rounds, teams=teams, competition_id=competition_id)
        bracket.validate()

        logger.debug("Loaded bracket for competition %s (version %s)",
                     competition_id, competition.bracket_version)
        return bracket, competition.bracket_version

    def save_bracket(
        self,
        competition_id: int,
        bracket: Bracket,
        expected_version: Optional[int] = None,
    ) -> int:
        """
        Replace the stored bracket with ``bracket``.

        Args:
            expected_version: version returned by the last load/save; None skips the check

        Returns:
            The new version number

        Raises:
            StaleBracketError: the stored version moved since ``expected_version``
        """
        competition = self._competition(competition_id)

        if expected_version is not None:
            result = self.session.execute(
                update(Competition)
                .where(
                    Competition.id == competition_id,
                    Competition.bracket_version == expected_version,
                )
                .values(bracket_version=Competition.bracket_version + 1)
            )
            if result.rowcount != 1:
                self.session.refresh(competition)
                raise StaleBracketError(competition_id, expected_version, competition.bracket_version)
        else:
            self.session.execute(
                update(Competition)
                .where(Competition.id == competition_id)
                .values(bracket_version=Competition.bracket_version + 1)
            )

        self.session.execute(
            delete(TournamentBracketMatch).where(TournamentBracketMatch.competition_id == competition_id)
        )
        for rnd in bracket.rounds:
            for match in rnd.matches:
                self.session.add(self._match_to_row(competition_id, rnd.name, match))

        self._store_results(competition, bracket)
        self.session.flush()
        self.session.refresh(competition)

        logger.info("Saved bracket for competition %s (version %s)",
                    competition_id, competition.bracket_version)
        return competition.bracket_version

    def delete_bracket(self, competition_id: int) -> None:
        self._competition(competition_id)
        self.session.execute(
            delete(TournamentBracketMatch).where(TournamentBracketMatch.competition_id == competition_id)
        )
        self.session.flush()

    def _store_results(self, competition: Competition, bracket: Bracket) -> None:
        """Write elimination flags and the champion."""
        eliminated = bracket.eliminated()
        self.session.execute(
            update(competition_teams)
            .where(competition_teams.c.competition_id == competition.id)
            .values(is_eliminated=False, elimination_round=None)
        )
        for team_id, round_number in eliminated.items():
            self.session.execute(
                update(competition_teams)
                .where(
                    competition_teams.c.competition_id == competition.id,
                    competition_teams.c.team_id == team_id,
                )
                .values(is_eliminated=True, elimination_round=round_number)
            )

        champion = bracket.champion()
        if champion != competition.winner_team_id:
            competition.winner_team_id = champion
            competition.completed_at = datetime.now(timezone.utc) if champion else None

    @staticmethod
    def _row_to_match(row: TournamentBracketMatch) -> Match:
        return Match(
            id=row.match_id,
            round_number=row.round_number,
            match_number=row.match_number,
            home_team_id=row.home_team_id,
            away_team_id=row.away_team_id,
            home_score=row.home_score,
            away_score=row.away_score,
            winner_team_id=row.winner_team_id,
            status=MatchStatus(row.status),
            game_id=row.game_id,
            scheduled_at=row.scheduled_date,
        )

    @staticmethod
    def _match_to_row(competition_id: int, name: str, match: Match) -> TournamentBracketMatch:
        return TournamentBracketMatch(
            competition_id=competition_id,
            match_id=match.id,
            round_number=match.round_number,
            round_name=name,
            match_number=match.match_number,
            home_team_id=match.home_team_id,
            away_team_id=match.away_team_id,
            winner_team_id=match.winner_team_id,
            home_score=match.home_score,
            away_score=match.away_score,
            game_id=match.game_id,
            scheduled_date=match.scheduled_at,
            status=match.status.value,
        )
