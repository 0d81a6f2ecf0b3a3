"""Room registry and rules engine for the family game.

Every public method is a complete, synchronous unit of work: it validates
first, then mutates, and raises ``GameError`` without touching the room when
a rule is broken. A single re-entrant lock serializes access so the engine is
safe under a threaded Socket.IO server.

Methods hand back the live ``Room``. Callers that read it after the call
returns must either hold ``locked()`` across the call and the read, or use
``snapshot``/``room_view``, which copy under the lock.
"""

import copy
import logging
import random
from threading import RLock
from typing import Dict, List, Optional, Tuple

from .errors import GameError
from .room_code import generate_room_code, normalize_room_code
from .shuffle import RandomFn, fisher_yates
from .state import (
    WORDS_VISIBLE_STATES,
    Family,
    GameState,
    GuessRecord,
    GuessResult,
    Player,
    Room,
    utcnow,
)
from .validation import names_match, normalize_word, validate_player_name, validate_submitted_word


class GameEngine:
    def __init__(
        self,
        random_fn: RandomFn = random.random,
        max_players: int = 10,
        min_players: int = 2,
        min_name_length: int = 2,
        max_name_length: int = 20,
        max_word_length: int = 50,
        logger: Optional[logging.Logger] = None,
    ):
        self.random_fn = random_fn
        self.max_players = max_players
        self.min_players = min_players
        self.min_name_length = min_name_length
        self.max_name_length = max_name_length
        self.max_word_length = max_word_length
        self.logger = logger or logging.getLogger(__name__)
        self._lock = RLock()
        self._rooms: Dict[str, Room] = {}
        self._session_rooms: Dict[str, str] = {}  # session id -> room code

    @classmethod
    def from_config(cls, config, logger=None, random_fn: RandomFn = random.random) -> 'GameEngine':
        return cls(
            random_fn=random_fn,
            max_players=int(config.get('MAX_PLAYERS', 10)),
            min_players=int(config.get('MIN_PLAYERS', 2)),
            min_name_length=int(config.get('MIN_NAME_LENGTH', 2)),
            max_name_length=int(config.get('MAX_NAME_LENGTH', 20)),
            max_word_length=int(config.get('MAX_WORD_LENGTH', 50)),
            logger=logger,
        )

    # ---- Registry ----

    def create_room(self, host_name: str, session_id: str) -> Room:
        with self._lock:
            name = self._validate_name(host_name)
            code = generate_room_code(self._rooms)
            host = Player(id=session_id, name=name, room_code=code, is_host=True)
            room = Room(code=code, host_id=session_id, players={session_id: host})
            self._rooms[code] = room
            self._session_rooms[session_id] = code
            self.logger.info(f"[room-created] code={code} host={session_id}")
            return room

    def get_room(self, code: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(normalize_room_code(code))

    def room_for_session(self, session_id: str) -> Optional[Room]:
        with self._lock:
            code = self._session_rooms.get(session_id)
            return self._rooms.get(code) if code else None

    def list_rooms(self) -> List[Room]:
        with self._lock:
            return list(self._rooms.values())

    def locked(self) -> RLock:
        """The engine lock, for holding across an operation and the reads after it."""
        return self._lock

    def snapshot(self, code: str) -> Optional[Room]:
        """Deep copy of a room, detached from later mutation."""
        with self._lock:
            room = self._rooms.get(normalize_room_code(code))
            return copy.deepcopy(room) if room else None

    def room_view(self, code: str) -> Optional[dict]:
        with self._lock:
            room = self._rooms.get(normalize_room_code(code))
            return room.to_dict() if room else None

    def join_room(self, code: str, name: str, session_id: str) -> Room:
        with self._lock:
            name = self._validate_name(name)
            room = self._rooms.get(normalize_room_code(code))
            if room is None:
                raise GameError('Room not found', GameError.NOT_FOUND)
            if room.state != GameState.LOBBY:
                raise GameError('Room is not accepting new players', GameError.CONFLICT)
            if len(room.players) >= self.max_players:
                raise GameError('Room is full', GameError.CONFLICT)
            if any(names_match(p.name, name) for p in room.players.values()):
                raise GameError('Player name is already taken in this room', GameError.CONFLICT)

            room.players[session_id] = Player(id=session_id, name=name, room_code=room.code)
            self._session_rooms[session_id] = room.code
            return room

    def remove_player(self, session_id: str) -> Optional[Tuple[Room, Player]]:
        """Drop a session from its room.

        Returns ``(room, player)`` or None when the session is not in a room.
        A room left empty is removed from the registry but still returned.
        """
        with self._lock:
            code = self._session_rooms.get(session_id)
            if not code:
                return None
            room = self._rooms.get(code)
            if room is None or session_id not in room.players:
                self._session_rooms.pop(session_id, None)
                return None

            player = room.players.pop(session_id)
            del self._session_rooms[session_id]

            if not room.players:
                del self._rooms[code]
                self.logger.info(f"[room-deleted] code={code}")
                return room, player

            if room.host_id == session_id:
                # Oldest remaining member by join order
                new_host = next(iter(room.players.values()))
                new_host.is_host = True
                room.host_id = new_host.id
                self.logger.info(f"[host-reassigned] code={code} host={new_host.id}")

            return room, player

    # ---- Lobby and word entry ----

    def start_game(self, session_id: str) -> Room:
        with self._lock:
            room = self._require_room(session_id)
            if room.host_id != session_id:
                raise GameError('Only the host can start the game', GameError.FORBIDDEN)
            if room.state != GameState.LOBBY:
                raise GameError('Game can only be started from the lobby', GameError.CONFLICT)
            if len(room.players) < self.min_players:
                raise GameError(
                    f'At least {self.min_players} players are required to start', GameError.CONFLICT
                )

            room.state = GameState.WORD_ENTRY
            room.words = {}
            self.logger.info(f"[game-started] code={room.code} players={len(room.players)}")
            return room

    def submit_word(self, session_id: str, word: str) -> Tuple[Room, bool]:
        """Store the caller's word; returns ``(room, all_submitted)``."""
        with self._lock:
            room = self._require_room(session_id)
            if room.state != GameState.WORD_ENTRY:
                raise GameError('Words can only be submitted during word entry', GameError.CONFLICT)
            if session_id in room.words:
                raise GameError('You have already submitted a word', GameError.CONFLICT)
            trimmed = validate_submitted_word(word, self.max_word_length)

            room.words[session_id] = trimmed
            all_submitted = len(room.words) == len(room.players)
            if all_submitted:
                # Values only, so position says nothing about authorship
                room.shuffled_words = fisher_yates(list(room.words.values()), self.random_fn)
                room.state = GameState.READING
                self.logger.info(f"[reading-started] code={room.code} words={len(room.shuffled_words)}")
            return room, all_submitted

    def get_shuffled_words(self, session_id: str) -> List[str]:
        with self._lock:
            room = self._require_room(session_id)
            if room.state not in WORDS_VISIBLE_STATES:
                raise GameError('Words are not available in this state', GameError.CONFLICT)
            return list(room.shuffled_words)

    def advance_from_reading(self, session_id: str) -> Room:
        with self._lock:
            room = self._require_room(session_id)
            if room.host_id != session_id:
                raise GameError('Only the host can advance the game', GameError.FORBIDDEN)
            if room.state != GameState.READING:
                raise GameError('Can only advance from reading state', GameError.CONFLICT)

            player_ids = list(room.players.keys())
            turn_order = fisher_yates(player_ids, self.random_fn)
            room.families = [Family(leader_id=pid, member_ids=[pid]) for pid in player_ids]
            room.turn_order = turn_order
            room.current_turn_id = turn_order[0]
            room.state = GameState.PLAYING
            self.logger.info(f"[play-started] code={room.code} first_turn={room.current_turn_id}")
            return room

    # ---- Guessing ----

    def make_guess(self, session_id: str, target_id: str, word: str) -> GuessResult:
        with self._lock:
            room = self._require_room(session_id)
            if room.state != GameState.PLAYING:
                raise GameError('Guesses can only be made during play', GameError.CONFLICT)
            if room.current_turn_id != session_id:
                raise GameError('It is not your turn', GameError.FORBIDDEN)
            guesser_family = room.family_led_by(session_id)
            if guesser_family is None:
                raise GameError('You are not a family leader', GameError.FORBIDDEN)
            if not isinstance(target_id, str) or target_id not in room.players:
                raise GameError('Target player does not exist', GameError.NOT_FOUND)
            if target_id == session_id:
                raise GameError('You cannot guess yourself', GameError.INVALID)
            if target_id in guesser_family.member_ids:
                raise GameError('Target is already in your family', GameError.INVALID)
            guess = normalize_word(word)
            if not guess:
                raise GameError('Guess word cannot be empty', GameError.INVALID)

            target_word = room.words.get(target_id)
            correct = target_word is not None and guess.lower() == target_word.lower()
            room.guesses.append(GuessRecord(
                guesser_id=session_id,
                target_id=target_id,
                word=guess,
                was_correct=correct,
                timestamp=utcnow(),
            ))

            if not correct:
                room.current_turn_id = self._next_leader(room, session_id)
                return GuessResult(
                    correct=False,
                    guesser_id=session_id,
                    target_player_id=target_id,
                    word=guess,
                    families=_copy_families(room.families),
                    current_turn_id=room.current_turn_id,
                )

            self._absorb(room, guesser_family, target_id)

            if len(room.families) == 1:
                room.state = GameState.ENDED
                room.current_turn_id = None
                winner = room.families[0]
                self.logger.info(
                    f"[game-ended] code={room.code} winner={winner.leader_id} guesses={len(room.guesses)}"
                )
                return GuessResult(
                    correct=True,
                    guesser_id=session_id,
                    target_player_id=target_id,
                    word=guess,
                    families=_copy_families(room.families),
                    current_turn_id=None,
                    game_over=True,
                    winner=Family(leader_id=winner.leader_id, member_ids=list(winner.member_ids)),
                )

            # A correct guess keeps the turn
            return GuessResult(
                correct=True,
                guesser_id=session_id,
                target_player_id=target_id,
                word=guess,
                families=_copy_families(room.families),
                current_turn_id=room.current_turn_id,
            )

    # ---- Helpers ----

    def _validate_name(self, name) -> str:
        return validate_player_name(name, self.min_name_length, self.max_name_length)

    def _require_room(self, session_id: str) -> Room:
        code = self._session_rooms.get(session_id)
        room = self._rooms.get(code) if code else None
        if room is None:
            raise GameError('Player is not in a room', GameError.NOT_FOUND)
        return room

    @staticmethod
    def _absorb(room: Room, guesser_family: Family, target_id: str) -> None:
        target_family = room.family_of(target_id)
        if target_family is None:
            guesser_family.member_ids.append(target_id)
            return
        if target_family.leader_id == target_id:
            # Whole family joins the guesser
            guesser_family.member_ids.extend(target_family.member_ids)
            room.families.remove(target_family)
        else:
            target_family.member_ids.remove(target_id)
            guesser_family.member_ids.append(target_id)

    @staticmethod
    def _next_leader(room: Room, current_id: str) -> Optional[str]:
        """Next family leader after ``current_id`` in turn order, wrapping around."""
        order = room.turn_order
        leaders = {f.leader_id for f in room.families}
        start = order.index(current_id) if current_id in order else -1
        for step in range(1, len(order) + 1):
            candidate = order[(start + step) % len(order)]
            if candidate in leaders:
                return candidate
        return current_id


def _copy_families(families: List[Family]) -> List[Family]:
    return [Family(leader_id=f.leader_id, member_ids=list(f.member_ids)) for f in families]
