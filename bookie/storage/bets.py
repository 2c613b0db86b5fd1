"""Bet ledger: wagers keyed by id and their open -> accepted -> settled lifecycle."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from uuid import uuid4

from pydantic import ValidationError

from bookie.config import LedgerConfig, SettlementConfig
from bookie.exceptions import (
    BookieError,
    InvalidBetError,
    InvalidStateError,
    NotFoundError,
)
from bookie.formatting import format_bet
from bookie.models import Bet, BetOdds, BetType
from bookie.settlement import resolve
from bookie.storage.base import RecordStore
from bookie.storage.games import GameRegistry

logger = logging.getLogger(__name__)


def generate_bet_id() -> str:
    """Generate unique bet ID with bet_ prefix."""
    return f"bet_{uuid4().hex}"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BetLedger(RecordStore[Bet]):
    """
    Owns Bet records and enforces the bet lifecycle.

    Games are read from the injected registry, never written. Every
    operation that can be refused returns None on refusal and logs the
    reason; pass strict=True to get the NotFoundError / InvalidStateError /
    InvalidBetError instead.
    """

    def __init__(
        self,
        games: GameRegistry,
        *,
        ledger_config: LedgerConfig | None = None,
        settlement_config: SettlementConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = generate_bet_id,
    ):
        super().__init__()
        self.games = games
        self.ledger_config = ledger_config or LedgerConfig()
        self.settlement_config = settlement_config or SettlementConfig()
        self._clock = clock
        self._id_factory = id_factory

    # ========================================================================
    # Lifecycle
    # ========================================================================

    def create(
        self,
        creator: str,
        game_id: str,
        bet_type: BetType,
        odds: BetOdds,
        amount: float,
        *,
        strict: bool = False,
    ) -> Bet | None:
        """Open a bet on a scheduled game."""
        try:
            game = self.games.get(game_id)
            if game is None:
                raise NotFoundError(f"Game {game_id} not found")
            if game.status != "scheduled":
                raise InvalidStateError(
                    f"Game {game_id} is {game.status}; bets close once a game starts"
                )

            with self._lock:
                try:
                    bet = Bet(
                        id=self._id_factory(),
                        game_id=game_id,
                        creator=creator,
                        bet_type=bet_type,
                        odds=odds.model_copy(deep=True),
                        amount=amount,
                        created_at=self._clock(),
                    )
                except ValidationError as e:
                    raise InvalidBetError(f"Invalid bet: {e.errors()[0]['msg']}") from e
                self._insert(bet.id, bet)
        except BookieError as e:
            return self._reject(e, strict)

        logger.info(
            f"Opened bet {bet.id}: {creator} {bet_type} "
            f"{bet.odds.selection} ${bet.amount:,.2f} on {game_id}"
        )
        return bet.model_copy(deep=True)

    def accept(self, bet_id: str, acceptor: str, *, strict: bool = False) -> Bet | None:
        """Take the other side of an open bet."""
        try:
            with self._lock:
                bet = self._require(bet_id)
                if bet.status != "open":
                    raise InvalidStateError(f"Bet {bet_id} is {bet.status}, not open")
                if acceptor == bet.creator and not self.ledger_config.allow_self_accept:
                    raise InvalidStateError(f"{acceptor} cannot accept their own bet {bet_id}")

                bet.acceptor = acceptor
                bet.status = "accepted"
                bet.accepted_at = self._clock()
                snapshot = bet.model_copy(deep=True)
        except BookieError as e:
            return self._reject(e, strict)

        logger.info(f"Bet {bet_id} accepted by {acceptor}")
        return snapshot

    def settle(self, bet_id: str, *, strict: bool = False) -> Bet | None:
        """
        Settle an accepted bet once its game is final.

        The winner may come back empty (prop bets, pushes under the void
        policy); the bet is still marked settled and ``outcome`` says why.
        """
        try:
            with self._lock:
                bet = self._require(bet_id)
                if bet.status != "accepted":
                    raise InvalidStateError(f"Bet {bet_id} is {bet.status}, not accepted")

                game = self.games.get(bet.game_id)
                if game is None:
                    raise NotFoundError(f"Game {bet.game_id} for bet {bet_id} not found")
                if not game.is_final:
                    raise InvalidStateError(f"Game {game.id} is {game.status}, not final")

                resolution = resolve(bet, game, self.settlement_config.push_policy)

                bet.winner = resolution.winner
                bet.outcome = resolution.outcome
                bet.status = "settled"
                bet.settled_at = self._clock()
                snapshot = bet.model_copy(deep=True)
        except BookieError as e:
            return self._reject(e, strict)

        if resolution.winner is None:
            logger.warning(f"Settled bet {bet_id} with no winner ({resolution.outcome})")
        else:
            logger.info(
                f"Settled bet {bet_id}: {resolution.winner} wins ({resolution.outcome})"
            )
        return snapshot

    def cancel(self, bet_id: str, requester: str, *, strict: bool = False) -> Bet | None:
        """Withdraw an open bet. Only its creator may cancel it."""
        try:
            with self._lock:
                bet = self._require(bet_id)
                if bet.status != "open":
                    raise InvalidStateError(f"Bet {bet_id} is {bet.status}, not open")
                if requester != bet.creator:
                    raise InvalidStateError(
                        f"{requester} did not create bet {bet_id} and cannot cancel it"
                    )

                bet.status = "cancelled"
                bet.cancelled_at = self._clock()
                snapshot = bet.model_copy(deep=True)
        except BookieError as e:
            return self._reject(e, strict)

        logger.info(f"Bet {bet_id} cancelled by {requester}")
        return snapshot

    # ========================================================================
    # Queries
    # ========================================================================

    def get(self, bet_id: str) -> Bet | None:
        return self._lookup(bet_id)

    def list_open(self) -> list[Bet]:
        return self._select(lambda bet: bet.status == "open")

    def list_for_game(self, game_id: str) -> list[Bet]:
        return self._select(lambda bet: bet.game_id == game_id)

    def list_for_user(self, user_id: str) -> list[Bet]:
        return self._select(lambda bet: bet.involves(user_id))

    def describe(self, bet_id: str) -> str | None:
        """One-line summary of a stored bet, or None if the bet is unknown."""
        bet = self._lookup(bet_id)
        if bet is None:
            return None
        return format_bet(bet, self.games.get(bet.game_id))

    def _require(self, bet_id: str) -> Bet:
        bet = self._records.get(bet_id)
        if bet is None:
            raise NotFoundError(f"Bet {bet_id} not found")
        return bet
