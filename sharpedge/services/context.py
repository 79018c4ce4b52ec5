# sharpedge/services/context.py
from __future__ import annotations

from typing import List, Sequence

from sharpedge.models.games import CanonicalGame, GameStatus
from sharpedge.services.leagues import League
from sharpedge.services.markets import BOOKS, BookSpec

NO_ODDS_LINE = "  No odds available currently."
ODDS_CLOSED_LINE = "  (Odds closed - Game in progress/Final)"


def _team(abbr: str, record: str) -> str:
    return f"{abbr} ({record})" if record else abbr


def _header(g: CanonicalGame) -> str:
    line = (
        f"{_team(g.away_team, g.away_record)} @ {_team(g.home_team, g.home_record)}"
        f" | Time: {g.time} | Status: {g.status.value}"
    )
    if g.status is not GameStatus.SCHEDULED:
        line += f" (Score: {g.away_score}-{g.home_score})"
    return line


def _book_line(g: CanonicalGame, spec: BookSpec, league: League) -> str:
    q = g.quote(spec.key)
    label = f"{spec.label}:".ljust(5)
    line = f"  {label}{g.away_team} {q.away_ml}/{g.home_team} {q.home_ml} | T: {q.total}"
    if spec.primary:
        line += f" | {league.spread_label}: {g.away_team} {q.away_spread}/{g.home_team} {q.home_spread}"
    return line


def game_block(g: CanonicalGame, league: League, books: Sequence[BookSpec] = BOOKS) -> str:
    lines: List[str] = [
        _book_line(g, spec, league) for spec in books if g.quote(spec.key).away_ml != "-"
    ]
    if not lines:
        lines.append(NO_ODDS_LINE if g.status is GameStatus.SCHEDULED else ODDS_CLOSED_LINE)
    return "\n".join([_header(g), *lines])


def build_context(games: Sequence[CanonicalGame], league: League, books: Sequence[BookSpec] = BOOKS) -> str:
    """Plain-text slate digest for the chat model, one blank-line separated block per game."""
    return "\n\n".join(game_block(g, league, books) for g in games)


def build_chat_preamble(context: str, league: str, message: str) -> str:
    if not context:
        return message
    return (
        f"\n[SYSTEM INJECTION - CURRENT {league} ODDS BOARD & SCORES DATA (Source: The Odds API)]:\n"
        f"{context}\n\n[USER MESSAGE]:\n{message}"
    )
