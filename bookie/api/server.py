"""FastAPI adapter exposing the game registry and bet ledger over HTTP."""

import logging
from contextlib import asynccontextmanager

from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bookie import __version__
from bookie.api.schemas import (
    BetAccept,
    BetCancel,
    BetCreate,
    BetSummaryResponse,
    GameCreate,
    HealthResponse,
    ScoreReport,
)
from bookie.config import Settings, get_settings
from bookie.exceptions import (
    BookieError,
    InvalidBetError,
    InvalidStateError,
    NotFoundError,
)
from bookie.formatting import format_bet
from bookie.models import Bet, Game
from bookie.observability import initialize_logfire
from bookie.storage import BetLedger, GameRegistry

logger = logging.getLogger(__name__)

STATUS_CODES: dict[type[BookieError], int] = {
    NotFoundError: 404,
    InvalidStateError: 409,
    InvalidBetError: 422,
}

router = APIRouter(prefix="/api")


def _registry(request: Request) -> GameRegistry:
    return request.app.state.registry


def _ledger(request: Request) -> BetLedger:
    return request.app.state.ledger


# ============================================================================
# Games
# ============================================================================


@router.post("/games", response_model=Game, status_code=201, tags=["Games"])
def register_game(body: GameCreate, request: Request):
    """Register a scheduled game."""
    return _registry(request).register(
        body.sport, body.home_team, body.away_team, body.start_time
    )


@router.get("/games", response_model=list[Game], tags=["Games"])
def list_games(request: Request):
    return _registry(request).list_games()


@router.get("/games/upcoming", response_model=list[Game], tags=["Games"])
def list_upcoming_games(request: Request):
    """Games still open for betting."""
    return _registry(request).list_upcoming()


@router.get("/games/{game_id}", response_model=Game, tags=["Games"])
def get_game(game_id: str, request: Request):
    game = _registry(request).get(game_id)
    if game is None:
        raise NotFoundError(f"Game {game_id} not found")
    return game


@router.post("/games/{game_id}/live", response_model=Game, tags=["Games"])
def mark_game_live(game_id: str, request: Request):
    return _registry(request).mark_live(game_id, strict=True)


@router.post("/games/{game_id}/score", response_model=Game, tags=["Games"])
def report_score(game_id: str, body: ScoreReport, request: Request):
    """Record a final score. Bets are settled separately."""
    return _registry(request).report_final_score(
        game_id, body.home_score, body.away_score, strict=True
    )


@router.get("/games/{game_id}/bets", response_model=list[Bet], tags=["Games"])
def list_game_bets(game_id: str, request: Request):
    return _ledger(request).list_for_game(game_id)


# ============================================================================
# Bets
# ============================================================================


@router.post("/bets", response_model=Bet, status_code=201, tags=["Bets"])
def create_bet(body: BetCreate, request: Request):
    return _ledger(request).create(
        body.creator,
        body.game_id,
        body.bet_type,
        body.odds,
        body.amount,
        strict=True,
    )


@router.get("/bets/open", response_model=list[Bet], tags=["Bets"])
def list_open_bets(request: Request):
    return _ledger(request).list_open()


@router.get("/bets/{bet_id}", response_model=Bet, tags=["Bets"])
def get_bet(bet_id: str, request: Request):
    bet = _ledger(request).get(bet_id)
    if bet is None:
        raise NotFoundError(f"Bet {bet_id} not found")
    return bet


@router.get("/bets/{bet_id}/summary", response_model=BetSummaryResponse, tags=["Bets"])
def get_bet_summary(bet_id: str, request: Request):
    bet = get_bet(bet_id, request)
    return BetSummaryResponse(
        bet=bet, summary=format_bet(bet, _registry(request).get(bet.game_id))
    )


@router.post("/bets/{bet_id}/accept", response_model=Bet, tags=["Bets"])
def accept_bet(bet_id: str, body: BetAccept, request: Request):
    return _ledger(request).accept(bet_id, body.acceptor, strict=True)


@router.post("/bets/{bet_id}/settle", response_model=Bet, tags=["Bets"])
def settle_bet(bet_id: str, request: Request):
    return _ledger(request).settle(bet_id, strict=True)


@router.post("/bets/{bet_id}/cancel", response_model=Bet, tags=["Bets"])
def cancel_bet(bet_id: str, body: BetCancel, request: Request):
    return _ledger(request).cancel(bet_id, body.requester, strict=True)


@router.get("/users/{user_id}/bets", response_model=list[Bet], tags=["Bets"])
def list_user_bets(user_id: str, request: Request):
    """Bets the user created or accepted, any status."""
    return _ledger(request).list_for_user(user_id)


# ============================================================================
# App factory
# ============================================================================


async def _handle_bookie_error(request: Request, exc: BookieError) -> JSONResponse:
    status_code = STATUS_CODES.get(type(exc), 400)
    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "reason": exc.reason},
    )


def create_app(
    settings: Settings | None = None,
    registry: GameRegistry | None = None,
    ledger: BetLedger | None = None,
) -> FastAPI:
    """
    Build the HTTP app around a registry and ledger.

    Stores default to fresh in-memory instances; pass them in to share state
    with other code or to inspect it in tests.
    """
    settings = settings or get_settings()
    if registry is None:
        registry = ledger.games if ledger is not None else GameRegistry()
    if ledger is None:
        ledger = BetLedger(
            registry,
            ledger_config=settings.ledger,
            settlement_config=settings.settlement,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"Starting Bookie API v{__version__}")
        yield
        logger.info(
            f"Shutting down Bookie API ({len(app.state.registry)} games, "
            f"{len(app.state.ledger)} bets in memory)"
        )

    app = FastAPI(
        title="Bookie API",
        description="Peer-to-peer sports wager ledger",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry
    app.state.ledger = ledger

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(BookieError, _handle_bookie_error)
    app.include_router(router)

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    def health():
        return HealthResponse(
            status="ok",
            version=__version__,
            games=len(app.state.registry),
            bets=len(app.state.ledger),
        )

    initialize_logfire(settings, app)
    return app
