"""Storage layer for Bookie - in-memory record stores.

This package provides:
- Game registry (scheduled -> live -> final, with scores)
- Bet ledger (open -> accepted -> settled, or open -> cancelled)

Both stores are plain objects: construct as many as needed, inject the
registry into the ledger. Records are Pydantic models and are handed out as
copies.
"""

from .base import RecordStore
from .bets import BetLedger, generate_bet_id
from .games import GameRegistry, generate_game_id

__all__ = [
    "RecordStore",
    "BetLedger",
    "GameRegistry",
    "generate_bet_id",
    "generate_game_id",
]
