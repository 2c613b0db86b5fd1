"""Human-readable bet summaries."""

from bookie.models import Bet, Game


def format_line(line: float) -> str:
    """Render a line compactly: 210.5 -> '210.5', -3.0 -> '-3'. Never in exponent form."""
    text = f"{line:f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def describe_selection(bet: Bet) -> str:
    if bet.bet_type == "over_under" and bet.odds.line is not None:
        return f"{bet.odds.selection} {format_line(bet.odds.line)}"
    return bet.odds.selection


def format_bet(bet: Bet, game: Game | None) -> str:
    """One-line summary: '<away> @ <home> - <selection> - $<amount>'."""
    if game is None:
        return "Game not found"
    return f"{game.matchup} - {describe_selection(bet)} - ${bet.amount:,.2f}"
