"""Game registry: in-memory store of games and their lifecycle."""

import logging
from collections.abc import Callable
from datetime import datetime
from uuid import uuid4

from bookie.exceptions import BookieError, InvalidStateError, NotFoundError
from bookie.models import Game
from bookie.storage.base import RecordStore

logger = logging.getLogger(__name__)


def generate_game_id() -> str:
    """Generate unique game ID with game_ prefix."""
    return f"game_{uuid4().hex}"


class GameRegistry(RecordStore[Game]):
    """
    Owns Game records keyed by id.

    Records handed out are copies; the only way to change a game is through
    the registry's own methods.
    """

    def __init__(self, id_factory: Callable[[], str] = generate_game_id):
        super().__init__()
        self._id_factory = id_factory

    def register(
        self,
        sport: str,
        home_team: str,
        away_team: str,
        start_time: datetime,
    ) -> Game:
        """Register a scheduled game."""
        with self._lock:
            game = Game(
                id=self._id_factory(),
                sport=sport,
                home_team=home_team,
                away_team=away_team,
                start_time=start_time,
            )
            self._insert(game.id, game)

        logger.info(f"Registered game {game.id}: {game.sport} {game.matchup}")
        return game.model_copy(deep=True)

    def get(self, game_id: str) -> Game | None:
        return self._lookup(game_id)

    def list_games(self) -> list[Game]:
        return self._select()

    def list_upcoming(self) -> list[Game]:
        """All games still in scheduled status, in registration order."""
        return self._select(lambda game: game.status == "scheduled")

    def mark_live(self, game_id: str, *, strict: bool = False) -> Game | None:
        """Move a scheduled game to live. Betting on it closes."""
        try:
            with self._lock:
                game = self._require(game_id)
                if game.status != "scheduled":
                    raise InvalidStateError(
                        f"Game {game_id} is {game.status}, not scheduled"
                    )
                game.status = "live"
                snapshot = game.model_copy(deep=True)
        except BookieError as e:
            return self._reject(e, strict)

        logger.info(f"Game {game_id} is live")
        return snapshot

    def report_final_score(
        self,
        game_id: str,
        home_score: int,
        away_score: int,
        *,
        strict: bool = False,
    ) -> Game | None:
        """
        Record the final score and mark the game final.

        Applies from any status. Reporting again on a final game overwrites
        the earlier scores.
        """
        try:
            with self._lock:
                game = self._require(game_id)
                if game.is_final:
                    logger.warning(
                        f"Game {game_id} already final "
                        f"({game.home_score}-{game.away_score}), "
                        f"overwriting with {home_score}-{away_score}"
                    )
                game.home_score = home_score
                game.away_score = away_score
                game.status = "final"
                snapshot = game.model_copy(deep=True)
        except BookieError as e:
            return self._reject(e, strict)

        logger.info(
            f"Final {snapshot.matchup}: {snapshot.away_score}-{snapshot.home_score}"
        )
        return snapshot

    def _require(self, game_id: str) -> Game:
        game = self._records.get(game_id)
        if game is None:
            raise NotFoundError(f"Game {game_id} not found")
        return game
