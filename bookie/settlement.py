"""Settlement rules: who won an accepted bet on a final game.

Pure functions over Bet and Game records. Nothing here raises or mutates;
ambiguous cases come back as an ``unresolved`` outcome with no winner and
the ledger decides what to do with them.

Pushes (an exact tie against the line, or a level moneyline game) are always
reported as a ``push`` outcome. Who, if anyone, gets the win on a push is
controlled by the push policy:

- ``acceptor``: the strict comparisons decide. On spread and total bets that
  hands the bet to the acceptor; on a level moneyline game the away team
  counts as the winning side.
- ``void``: the bet settles with no winner.
"""

import logging
from typing import Literal

from pydantic import BaseModel

from bookie.models import Bet, Game, SettlementOutcome

logger = logging.getLogger(__name__)

PushPolicy = Literal["acceptor", "void"]


class Resolution(BaseModel):
    """Engine verdict for one bet."""

    outcome: SettlementOutcome
    winner: str | None = None

    @property
    def is_push(self) -> bool:
        return self.outcome == "push"


def _moneyline(bet: Bet, game: Game) -> tuple[bool, bool]:
    winning_team = game.home_team if game.home_score > game.away_score else game.away_team
    return bet.odds.selection == winning_team, game.home_score == game.away_score


def _spread(bet: Bet, game: Game) -> tuple[bool, bool]:
    line = bet.odds.line or 0
    spread_result = game.home_score + line - game.away_score

    # A selection naming the home team backs the home side; anything else
    # is taken as the away side.
    if game.home_team in bet.odds.selection:
        creator_wins = spread_result > 0
    else:
        creator_wins = spread_result < 0
    return creator_wins, spread_result == 0


def _over_under(bet: Bet, game: Game) -> tuple[bool, bool]:
    total = game.home_score + game.away_score
    line = bet.odds.line or 0

    if bet.odds.selection == "Over":
        creator_wins = total > line
    else:
        creator_wins = total < line
    return creator_wins, total == line


_RULES = {
    "moneyline": _moneyline,
    "spread": _spread,
    "over_under": _over_under,
}


def resolve(bet: Bet, game: Game, push_policy: PushPolicy = "acceptor") -> Resolution:
    """Determine the outcome of an accepted bet against a final game."""
    if game.home_score is None or game.away_score is None:
        logger.debug(f"Bet {bet.id}: game {game.id} has no final score")
        return Resolution(outcome="unresolved")

    if bet.acceptor is None:
        logger.debug(f"Bet {bet.id}: no acceptor")
        return Resolution(outcome="unresolved")

    rule = _RULES.get(bet.bet_type)
    if rule is None:
        logger.debug(f"Bet {bet.id}: no settlement rule for {bet.bet_type}")
        return Resolution(outcome="unresolved")

    creator_wins, is_push = rule(bet, game)

    if is_push:
        if push_policy == "void":
            return Resolution(outcome="push")
        return Resolution(
            outcome="push",
            winner=bet.creator if creator_wins else bet.acceptor,
        )

    if creator_wins:
        return Resolution(outcome="creator", winner=bet.creator)
    return Resolution(outcome="acceptor", winner=bet.acceptor)


def determine_winner(
    bet: Bet, game: Game, push_policy: PushPolicy = "acceptor"
) -> str | None:
    """Return the winning user id, or None when the bet has no winner."""
    return resolve(bet, game, push_policy).winner
