from family_game import db
from family_game.models import Game


def parse_limit(raw, default: int = 20, maximum: int = 50) -> int:
    """Page size from a query string value; junk falls back to ``default``."""
    try:
        parsed = int(raw)
    except (TypeError, ValueError):
        return default
    if parsed <= 0:
        return default
    return min(parsed, maximum)


def list_games(limit: int):
    games = Game.query.order_by(Game.ended_at.desc(), Game.id.desc()).limit(limit).all()
    return [game.to_summary_dict() for game in games]


def get_game(game_id: int):
    game = db.session.get(Game, game_id)
    return game.to_dict() if game else None
