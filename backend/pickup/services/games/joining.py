from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError

from pickup import db
from pickup.events import game_updated
from pickup.exceptions import GameFull, GameNotFound, StoreUnavailable
from pickup.models import Game


# Ids are positive and must fit a signed 64-bit column
MAX_GAME_ID = 2 ** 63 - 1


def _parse_game_id(raw):
    try:
        game_id = int(raw)
    except (TypeError, ValueError):
        return None
    if game_id < 1 or game_id > MAX_GAME_ID:
        return None
    return game_id


def join_game(raw_game_id) -> Game:
    """Take one seat in a game.

    The increment is a single conditional UPDATE guarded by
    ``players < max_players``, so concurrent joins racing for the last seat
    cannot both win. When nothing matched, the game is looked up only to
    tell a missing game from a full one.

    On success ``game_updated`` is sent with the serialized game.
    """
    game_id = _parse_game_id(raw_game_id)
    if game_id is None:
        raise GameNotFound(raw_game_id)

    try:
        result = db.session.execute(
            update(Game)
            .where(Game.id == game_id, Game.players < Game.max_players)
            .values(players=Game.players + 1)
            .execution_options(synchronize_session=False)
        )
        db.session.commit()
        if result.rowcount == 0:
            game = db.session.get(Game, game_id)
            if game is None:
                raise GameNotFound(game_id)
            current_app.logger.info(f"[join] game={game_id} full players={game.players}/{game.max_players}")
            raise GameFull(game_id)
        game = db.session.get(Game, game_id, populate_existing=True)
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.error(f"[join] game={game_id} store error: {exc}")
        raise StoreUnavailable('Error joining game') from exc

    current_app.logger.info(f"[join] game={game.id} players={game.players}/{game.max_players}")
    _announce(game)
    return game


def _announce(game: Game) -> None:
    # Best effort; the caller's result does not depend on delivery
    try:
        game_updated.send(current_app._get_current_object(), game=game.to_dict())
    except Exception:
        current_app.logger.exception(f"[join] game={game.id} update broadcast failed")
