from flask import current_app, request
from flask_socketio import emit, join_room
from family_game import get_engine, socketio
from family_game.services.games import GameError
from family_game.services.games.persistence import hand_off_ended_game
from family_game.services.games.room_code import normalize_room_code


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _payload(data) -> dict:
    return data if isinstance(data, dict) else {}


def _reject(err: GameError) -> dict:
    """Send a rejection to the caller only; nothing is broadcast."""
    current_app.logger.debug(f"[rejected] sid={_get_sid()} kind={err.kind} reason={err.message}")
    emit('error', err.to_dict())
    return {'ok': False, **err.to_dict()}


def handle_create_room(data):
    engine = get_engine()
    try:
        with engine.locked():
            room = engine.create_room(_payload(data).get('playerName'), _get_sid())
            view = room.to_dict()
    except GameError as err:
        return _reject(err)
    join_room(room.code)
    emit('room_created', view)
    return {'ok': True, 'roomCode': room.code}


def handle_join_room(data):
    payload = _payload(data)
    engine = get_engine()
    try:
        with engine.locked():
            room = engine.join_room(
                normalize_room_code(payload.get('roomCode')),
                payload.get('playerName'),
                _get_sid(),
            )
            view = room.to_dict()
    except GameError as err:
        return _reject(err)
    join_room(room.code)
    emit('player_joined', view, to=room.code)
    return {'ok': True, 'roomCode': room.code}


def handle_start_game(data=None):
    engine = get_engine()
    try:
        with engine.locked():
            room = engine.start_game(_get_sid())
            view = room.to_dict()
    except GameError as err:
        return _reject(err)
    emit('state_changed', view, to=room.code)
    return {'ok': True}


def handle_submit_word(data):
    sid = _get_sid()
    engine = get_engine()
    try:
        with engine.locked():
            room, all_submitted = engine.submit_word(sid, _payload(data).get('word'))
            progress = {
                'playerId': sid,
                'wordCount': len(room.words),
                'totalPlayers': len(room.players),
            }
            words = list(room.shuffled_words)
            view = room.to_dict()
    except GameError as err:
        return _reject(err)
    emit('word_submitted', progress, to=room.code)
    if all_submitted:
        emit('reading_words', {'words': words}, to=room.code)
        emit('state_changed', view, to=room.code)
    return {'ok': True, 'allSubmitted': all_submitted}


def handle_get_words(data=None):
    try:
        words = get_engine().get_shuffled_words(_get_sid())
    except GameError as err:
        return _reject(err)
    emit('reading_words', {'words': words})
    return {'ok': True, 'words': words}


def handle_advance_reading(data=None):
    engine = get_engine()
    try:
        with engine.locked():
            room = engine.advance_from_reading(_get_sid())
            view = room.to_dict()
    except GameError as err:
        return _reject(err)
    emit('state_changed', view, to=room.code)
    return {'ok': True}


def handle_make_guess(data):
    payload = _payload(data)
    sid = _get_sid()
    engine = get_engine()
    try:
        with engine.locked():
            result = engine.make_guess(sid, payload.get('targetPlayerId'), payload.get('word'))
            snapshot = engine.snapshot(engine.room_for_session(sid).code)
    except GameError as err:
        return _reject(err)

    emit('guess_result', result.to_dict(), to=snapshot.code)
    if result.game_over:
        emit('state_changed', snapshot.to_dict(), to=snapshot.code)
        if result.winner is not None:
            hand_off_ended_game(current_app._get_current_object(), snapshot, result.winner.leader_id)
    return {'ok': True, 'correct': result.correct, 'gameOver': result.game_over}


def handle_disconnect(reason=None):
    engine = get_engine()
    with engine.locked():
        departed = engine.remove_player(_get_sid())
        if not departed:
            return
        room, player = departed
        view = room.to_dict() if room.players else None
    if view is not None:
        emit('player_left', {
            'player': player.to_dict(),
            'room': view,
        }, to=room.code)


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('create_room', handle_create_room, namespace=namespace)
    socketio.on_event('join_room', handle_join_room, namespace=namespace)
    socketio.on_event('start_game', handle_start_game, namespace=namespace)
    socketio.on_event('submit_word', handle_submit_word, namespace=namespace)
    socketio.on_event('get_words', handle_get_words, namespace=namespace)
    socketio.on_event('advance_reading', handle_advance_reading, namespace=namespace)
    socketio.on_event('make_guess', handle_make_guess, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
