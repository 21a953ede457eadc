from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from pickup import db
from pickup.exceptions import InvalidGameRequest, StoreUnavailable
from pickup.models import Game

# Largest maxPlayers accepted; keeps counts inside a 32-bit column
MAX_PLAYERS_LIMIT = 2 ** 31 - 1


def _as_int(value, default):
    if value is None or value == '':
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def list_games():
    """All games, newest first."""
    try:
        return Game.query.order_by(Game.created_at.desc(), Game.id.desc()).all()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[games] list failed: {exc}")
        raise StoreUnavailable('Error fetching games') from exc


def create_game(data: dict) -> Game:
    """Create a game from request data.

    ``players`` falls back to 0 when missing or not a number. ``maxPlayers``
    is optional; when given it must be a positive integer no larger than
    ``MAX_PLAYERS_LIMIT``. The initial player count must fit within the
    maximum.
    """
    players = _as_int(data.get('players'), 0)
    max_players = data.get('maxPlayers')
    if max_players is not None:
        max_players = _as_int(max_players, None)
        if max_players is None or max_players < 1 or max_players > MAX_PLAYERS_LIMIT:
            raise InvalidGameRequest(f'maxPlayers must be an integer between 1 and {MAX_PLAYERS_LIMIT}')

    game = Game(
        title=data.get('title'),
        sport=data.get('sport'),
        time=data.get('time'),
        location=data.get('location'),
        players=players,
        max_players=max_players,
    )
    if game.players < 0 or game.players > game.max_players:
        raise InvalidGameRequest(f'players must be between 0 and {game.max_players}')

    try:
        db.session.add(game)
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[games] create failed: {exc}")
        raise StoreUnavailable('Error creating game') from exc

    current_app.logger.info(f"[create] game={game.id} sport={game.sport} players={game.players}/{game.max_players}")
    return game
