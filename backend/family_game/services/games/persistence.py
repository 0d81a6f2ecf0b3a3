from datetime import datetime, timezone

from family_game import db, socketio
from family_game.models import Game, GameGuess, GamePlayer
from .state import Room

UNKNOWN_NAME = 'Unknown'


def _naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _name_of(room: Room, player_id: str) -> str:
    player = room.players.get(player_id)
    return player.name if player else UNKNOWN_NAME


def persist_ended_game(room: Room, winner_leader_id: str, ended_at: datetime = None) -> Game:
    """Write the summary, player and guess rows for an ended room.

    Session ids mean nothing once the room is gone, so every id is resolved
    to a player name here.
    """
    ended_at = ended_at or datetime.now(timezone.utc)
    game = Game(
        room_code=room.code,
        created_at=_naive_utc(room.created_at),
        ended_at=_naive_utc(ended_at),
        winner_player_name=_name_of(room, winner_leader_id),
        total_players=len(room.players),
    )
    db.session.add(game)

    for player_id, player in room.players.items():
        family = room.family_of(player_id)
        leader_id = family.leader_id if family else player_id
        game.players.append(GamePlayer(
            player_name=player.name,
            submitted_word=room.words.get(player_id, ''),
            final_family_leader_name=_name_of(room, leader_id),
            was_winner=leader_id == winner_leader_id,
        ))

    for record in room.guesses:
        game.guesses.append(GameGuess(
            guesser_player_name=_name_of(room, record.guesser_id),
            guessed_player_name=_name_of(room, record.target_id),
            guessed_word=record.word,
            was_correct=record.was_correct,
            timestamp=_naive_utc(record.timestamp),
        ))

    db.session.commit()
    return game


def hand_off_ended_game(app, snapshot: Room, winner_leader_id: str) -> None:
    """Persist an ended room without blocking gameplay.

    ``snapshot`` must be detached from the live registry (see
    ``GameEngine.snapshot``); it is read after the engine lock is released.
    Runs inline in TESTING mode, otherwise as a Socket.IO background task.
    Failures are logged and never raised to the caller.
    """

    def _worker(snap: Room, leader_id: str):
        with app.app_context():
            try:
                game = persist_ended_game(snap, leader_id)
                app.logger.info(f"[persist-ok] code={snap.code} game={game.id} guesses={len(snap.guesses)}")
            except Exception:
                db.session.rollback()
                app.logger.exception(f"[persist-failed] code={snap.code}")

    if app.config.get('TESTING'):
        _worker(snapshot, winner_leader_id)
    else:
        socketio.start_background_task(_worker, snapshot, winner_leader_id)
