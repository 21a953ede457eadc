from flask import Blueprint, jsonify, request

from pickup.exceptions import GameFull, GameNotFound, InvalidGameRequest
from pickup.services.games.joining import join_game as svc_join_game
from pickup.services.games.lobby import create_game as svc_create_game
from pickup.services.games.lobby import list_games as svc_list_games


games = Blueprint('games', __name__)


@games.route('', methods=['GET'])
def list_games():
    return jsonify([game.to_dict() for game in svc_list_games()])


@games.route('', methods=['POST'])
def create_game():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    try:
        game = svc_create_game(data)
    except InvalidGameRequest as exc:
        return jsonify({'message': exc.message}), 400
    return jsonify(game.to_dict()), 201


@games.route('/<string:game_id>/join', methods=['PUT'])
def join_game(game_id):
    try:
        game = svc_join_game(game_id)
    except GameNotFound as exc:
        return jsonify({'message': exc.message}), 404
    except GameFull as exc:
        return jsonify({'message': exc.message}), 400
    return jsonify(game.to_dict())
