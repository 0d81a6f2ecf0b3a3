from flask import Blueprint, current_app, jsonify, request
from family_game.services.games import history

games = Blueprint('games', __name__)


@games.route('', methods=['GET'])
@games.route('/', methods=['GET'])
def list_games():
    """Most recent ended games, newest first."""
    cfg = current_app.config
    limit = history.parse_limit(
        request.args.get('limit'),
        default=int(cfg.get('HISTORY_DEFAULT_LIMIT', 20)),
        maximum=int(cfg.get('HISTORY_MAX_LIMIT', 50)),
    )
    return jsonify(history.list_games(limit))


@games.route('/<int:game_id>', methods=['GET'])
def get_game(game_id):
    game = history.get_game(game_id)
    if game is None:
        return jsonify({'error': 'Game not found'}), 404
    return jsonify(game)
