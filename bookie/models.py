"""Game and bet records shared by the registry, ledger and settlement engine."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

BetType = Literal["moneyline", "spread", "over_under", "prop"]
GameStatus = Literal["scheduled", "live", "final"]
BetStatus = Literal["open", "accepted", "settled", "cancelled"]

# creator/acceptor: that party won. push: exact tie against the line.
# unresolved: missing scores, missing acceptor, or no rule for the bet type.
SettlementOutcome = Literal["creator", "acceptor", "push", "unresolved"]


# ============================================================================
# Pydantic Models
# ============================================================================


class Game(BaseModel):
    """Sporting event a bet can reference."""

    id: str
    sport: str = Field(description="Free-form league tag, e.g. NBA")
    home_team: str
    away_team: str
    start_time: datetime
    status: GameStatus = "scheduled"
    home_score: int | None = None
    away_score: int | None = None

    @property
    def is_final(self) -> bool:
        return self.status == "final"

    @property
    def matchup(self) -> str:
        return f"{self.away_team} @ {self.home_team}"


class BetOdds(BaseModel):
    """Odds descriptor: wager sub-type, optional line, price and selection."""

    type: BetType
    line: float | None = Field(
        default=None, description="Spread (-7.5) or total (215.5) line"
    )
    odds: float = Field(description="American odds price, e.g. -110 or +150")
    selection: str = Field(description="What was picked: team name, Over, Under")


class Bet(BaseModel):
    """Wager between a creator and, once accepted, an acceptor."""

    id: str
    game_id: str
    creator: str
    acceptor: str | None = None
    bet_type: BetType
    odds: BetOdds
    amount: float = Field(gt=0, description="Stake, currency-agnostic")
    status: BetStatus = "open"
    created_at: datetime
    accepted_at: datetime | None = None
    settled_at: datetime | None = None
    cancelled_at: datetime | None = None
    winner: str | None = None
    outcome: SettlementOutcome | None = None

    def involves(self, user_id: str) -> bool:
        return self.creator == user_id or self.acceptor == user_id
