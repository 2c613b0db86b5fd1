"""Request and response schemas for the HTTP adapter."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from bookie.models import Bet, BetOdds, BetType


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
    )


class GameCreate(BaseSchema):
    """Game registration request."""

    sport: str
    home_team: str
    away_team: str
    start_time: datetime


class ScoreReport(BaseSchema):
    """Final score report."""

    home_score: int = Field(ge=0)
    away_score: int = Field(ge=0)


class BetCreate(BaseSchema):
    """Bet creation request."""

    creator: str
    game_id: str
    bet_type: BetType
    odds: BetOdds
    amount: float = Field(gt=0)


class BetAccept(BaseSchema):
    acceptor: str


class BetCancel(BaseSchema):
    requester: str


class BetSummaryResponse(BaseSchema):
    """Bet with its one-line summary."""

    bet: Bet
    summary: str


class HealthResponse(BaseSchema):
    status: str
    version: str
    games: int
    bets: int
