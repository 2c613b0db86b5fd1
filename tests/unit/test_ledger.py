"""
Unit Tests: Bet Ledger

Test cases:
- Creation only on scheduled games
- Accept exactly once, self-acceptance policy
- Settle only accepted bets on final games, exactly once
- Cancellation by the creator from open
- Listing by status, game and user
- Round-trip and copy semantics
"""

import pytest

from bookie.config import LedgerConfig, SettlementConfig
from bookie.exceptions import InvalidBetError, InvalidStateError, NotFoundError
from bookie.storage import BetLedger, GameRegistry
from tests.conftest import START, odds


def open_bet(ledger: BetLedger, game_id: str, creator: str = "alice", **kwargs):
    bet_type = kwargs.pop("bet_type", "moneyline")
    selection = kwargs.pop("selection", "Lakers")
    line = kwargs.pop("line", None)
    amount = kwargs.pop("amount", 50)
    return ledger.create(creator, game_id, bet_type, odds(bet_type, selection, line), amount, **kwargs)


# ============================================================================
# Create
# ============================================================================


def test_create_opens_bet(ledger: BetLedger, game) -> None:
    bet = open_bet(ledger, game.id)

    assert bet.status == "open"
    assert bet.id.startswith("bet_")
    assert bet.creator == "alice"
    assert bet.acceptor is None
    assert bet.winner is None
    assert bet.outcome is None
    assert bet.created_at is not None
    assert bet.accepted_at is None


def test_create_then_lookup_round_trips(ledger: BetLedger, game) -> None:
    bet = open_bet(ledger, game.id, bet_type="over_under", selection="Over", line=210.5)
    assert ledger.get(bet.id) == bet


def test_create_rejects_unknown_game(ledger: BetLedger) -> None:
    assert open_bet(ledger, "game_missing") is None
    with pytest.raises(NotFoundError):
        open_bet(ledger, "game_missing", strict=True)
    assert len(ledger) == 0


def test_create_rejects_live_game(ledger: BetLedger, registry: GameRegistry, game) -> None:
    registry.mark_live(game.id)

    assert open_bet(ledger, game.id) is None
    with pytest.raises(InvalidStateError):
        open_bet(ledger, game.id, strict=True)


def test_create_rejects_final_game(ledger: BetLedger, registry: GameRegistry, game) -> None:
    registry.report_final_score(game.id, 100, 90)
    assert open_bet(ledger, game.id) is None


@pytest.mark.parametrize("amount", [0, -25])
def test_create_rejects_non_positive_amount(ledger: BetLedger, game, amount: float) -> None:
    assert open_bet(ledger, game.id, amount=amount) is None
    with pytest.raises(InvalidBetError):
        open_bet(ledger, game.id, amount=amount, strict=True)


def test_odds_type_does_not_override_bet_type(
    ledger: BetLedger, registry: GameRegistry, game
) -> None:
    bet = ledger.create("alice", game.id, "over_under", odds("moneyline", "Over", line=200), 50)
    assert bet is not None
    assert bet.bet_type == "over_under"
    assert bet.odds.type == "moneyline"

    ledger.accept(bet.id, "bob")
    registry.report_final_score(game.id, 110, 100)

    # Settled as a total (210 > 200), not as a moneyline pick of "Over".
    assert ledger.settle(bet.id).winner == "alice"


def test_rapid_creation_yields_unique_ids(ledger: BetLedger, game) -> None:
    ids = {open_bet(ledger, game.id).id for _ in range(200)}
    assert len(ids) == 200


# ============================================================================
# Accept
# ============================================================================


def test_accept_sets_acceptor_once(ledger: BetLedger, game) -> None:
    bet = open_bet(ledger, game.id)

    accepted = ledger.accept(bet.id, "bob")
    assert accepted.status == "accepted"
    assert accepted.acceptor == "bob"
    assert accepted.accepted_at > accepted.created_at

    assert ledger.accept(bet.id, "carol") is None
    assert ledger.get(bet.id).acceptor == "bob"
    with pytest.raises(InvalidStateError):
        ledger.accept(bet.id, "carol", strict=True)


def test_accept_unknown_bet(ledger: BetLedger) -> None:
    assert ledger.accept("bet_missing", "bob") is None
    with pytest.raises(NotFoundError):
        ledger.accept("bet_missing", "bob", strict=True)


def test_self_accept_allowed_by_default(ledger: BetLedger, game) -> None:
    bet = open_bet(ledger, game.id)
    assert ledger.accept(bet.id, "alice").acceptor == "alice"


def test_self_accept_refused_when_disabled(registry: GameRegistry, clock, game) -> None:
    ledger = BetLedger(
        registry, ledger_config=LedgerConfig(allow_self_accept=False), clock=clock
    )
    bet = open_bet(ledger, game.id)

    assert ledger.accept(bet.id, "alice") is None
    assert ledger.get(bet.id).status == "open"
    assert ledger.accept(bet.id, "bob").acceptor == "bob"


# ============================================================================
# Settle
# ============================================================================


def test_settle_records_winner(ledger: BetLedger, registry: GameRegistry, game) -> None:
    bet = open_bet(ledger, game.id, selection="Lakers")
    ledger.accept(bet.id, "bob")
    registry.report_final_score(game.id, 110, 100)

    settled = ledger.settle(bet.id)

    assert settled.status == "settled"
    assert settled.winner == "alice"
    assert settled.outcome == "creator"
    assert settled.settled_at > settled.accepted_at


def test_settle_requires_accepted_bet(ledger: BetLedger, registry: GameRegistry, game) -> None:
    bet = open_bet(ledger, game.id)
    registry.report_final_score(game.id, 110, 100)

    assert ledger.settle(bet.id) is None
    with pytest.raises(InvalidStateError):
        ledger.settle(bet.id, strict=True)


def test_settle_requires_final_game(ledger: BetLedger, registry: GameRegistry, game) -> None:
    bet = open_bet(ledger, game.id)
    ledger.accept(bet.id, "bob")

    assert ledger.settle(bet.id) is None
    registry.mark_live(game.id)
    assert ledger.settle(bet.id) is None
    assert ledger.get(bet.id).status == "accepted"


def test_settle_only_once(ledger: BetLedger, registry: GameRegistry, game) -> None:
    bet = open_bet(ledger, game.id)
    ledger.accept(bet.id, "bob")
    registry.report_final_score(game.id, 90, 100)

    first = ledger.settle(bet.id)
    assert first.winner == "bob"

    registry.report_final_score(game.id, 110, 100)
    assert ledger.settle(bet.id) is None
    assert ledger.get(bet.id) == first


def test_settle_unknown_bet(ledger: BetLedger) -> None:
    with pytest.raises(NotFoundError):
        ledger.settle("bet_missing", strict=True)


def test_prop_settles_without_winner(ledger: BetLedger, registry: GameRegistry, game) -> None:
    bet = open_bet(ledger, game.id, bet_type="prop", selection="LeBron triple-double")
    ledger.accept(bet.id, "bob")
    registry.report_final_score(game.id, 110, 100)

    settled = ledger.settle(bet.id)

    assert settled.status == "settled"
    assert settled.winner is None
    assert settled.outcome == "unresolved"


def test_push_follows_settlement_config(registry: GameRegistry, clock, game) -> None:
    legacy = BetLedger(registry, clock=clock)
    void = BetLedger(
        registry, settlement_config=SettlementConfig(push_policy="void"), clock=clock
    )
    opened = []
    for ledger in (legacy, void):
        bet = open_bet(ledger, game.id, bet_type="over_under", selection="Over", line=210)
        ledger.accept(bet.id, "bob")
        opened.append((ledger, bet.id))

    registry.report_final_score(game.id, 110, 100)

    legacy_bet = legacy.settle(opened[0][1])
    void_bet = void.settle(opened[1][1])

    assert legacy_bet.outcome == void_bet.outcome == "push"
    assert legacy_bet.winner == "bob"
    assert void_bet.winner is None


# ============================================================================
# Cancel
# ============================================================================


def test_creator_cancels_open_bet(ledger: BetLedger, game) -> None:
    bet = open_bet(ledger, game.id)

    cancelled = ledger.cancel(bet.id, "alice")

    assert cancelled.status == "cancelled"
    assert cancelled.cancelled_at is not None
    assert ledger.accept(bet.id, "bob") is None
    assert ledger.list_open() == []


def test_only_creator_may_cancel(ledger: BetLedger, game) -> None:
    bet = open_bet(ledger, game.id)

    assert ledger.cancel(bet.id, "mallory") is None
    assert ledger.get(bet.id).status == "open"


def test_accepted_bet_cannot_be_cancelled(ledger: BetLedger, game) -> None:
    bet = open_bet(ledger, game.id)
    ledger.accept(bet.id, "bob")

    with pytest.raises(InvalidStateError):
        ledger.cancel(bet.id, "alice", strict=True)


# ============================================================================
# Queries
# ============================================================================


def test_listings(ledger: BetLedger, registry: GameRegistry, game) -> None:
    other_game = registry.register("NHL", "Bruins", "Rangers", START)

    first = open_bet(ledger, game.id, creator="alice")
    second = open_bet(ledger, game.id, creator="carol")
    third = open_bet(ledger, other_game.id, creator="dave", selection="Bruins")
    ledger.accept(second.id, "alice")

    assert [b.id for b in ledger.list_open()] == [first.id, third.id]
    assert [b.id for b in ledger.list_for_game(game.id)] == [first.id, second.id]
    assert [b.id for b in ledger.list_for_user("alice")] == [first.id, second.id]
    assert ledger.list_for_user("nobody") == []

    assert ledger.list_open() == ledger.list_open()
    assert ledger.list_for_user("alice") == ledger.list_for_user("alice")


def test_returned_bets_are_copies(ledger: BetLedger, game) -> None:
    bet = open_bet(ledger, game.id)
    bet.status = "settled"
    bet.odds.selection = "Warriors"

    stored = ledger.get(bet.id)
    assert stored.status == "open"
    assert stored.odds.selection == "Lakers"


def test_describe(ledger: BetLedger, game) -> None:
    bet = open_bet(ledger, game.id, bet_type="over_under", selection="Over", line=210.5, amount=25)

    assert ledger.describe(bet.id) == "Warriors @ Lakers - Over 210.5 - $25.00"
    assert ledger.describe("bet_missing") is None
