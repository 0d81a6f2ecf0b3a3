"""In-memory game state for live rooms.

These records are owned and mutated by ``GameEngine``; transport code only
reads them, usually through ``to_dict``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GameState(str, Enum):
    LOBBY = 'LOBBY'
    WORD_ENTRY = 'WORD_ENTRY'
    READING = 'READING'
    PLAYING = 'PLAYING'
    ENDED = 'ENDED'


# States in which the shuffled word list may be shown to players
WORDS_VISIBLE_STATES = (GameState.READING, GameState.PLAYING, GameState.ENDED)


@dataclass
class Player:
    id: str
    name: str
    room_code: str
    is_host: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'isHost': self.is_host,
        }


@dataclass
class Family:
    leader_id: str
    member_ids: list[str] = field(default_factory=list)

    def to_dict(self):
        return {
            'leaderId': self.leader_id,
            'memberIds': list(self.member_ids),
        }


@dataclass(frozen=True)
class GuessRecord:
    guesser_id: str
    target_id: str
    word: str
    was_correct: bool
    timestamp: datetime


@dataclass
class GuessResult:
    correct: bool
    guesser_id: str
    target_player_id: str
    word: str
    families: list[Family]
    current_turn_id: Optional[str]
    game_over: bool = False
    winner: Optional[Family] = None

    def to_dict(self):
        payload = {
            'correct': self.correct,
            'guesserId': self.guesser_id,
            'targetPlayerId': self.target_player_id,
            'word': self.word,
            'families': [f.to_dict() for f in self.families],
            'currentTurnId': self.current_turn_id,
            'gameOver': self.game_over,
        }
        if self.winner is not None:
            payload['winner'] = self.winner.to_dict()
        return payload


@dataclass
class Room:
    code: str
    host_id: str
    state: GameState = GameState.LOBBY
    # Insertion order is join order; host succession depends on it.
    players: dict[str, Player] = field(default_factory=dict)
    created_at: datetime = field(default_factory=utcnow)
    words: dict[str, str] = field(default_factory=dict)
    shuffled_words: list[str] = field(default_factory=list)
    families: list[Family] = field(default_factory=list)
    current_turn_id: Optional[str] = None
    turn_order: list[str] = field(default_factory=list)
    guesses: list[GuessRecord] = field(default_factory=list)

    def family_led_by(self, player_id: str) -> Optional[Family]:
        for family in self.families:
            if family.leader_id == player_id:
                return family
        return None

    def family_of(self, player_id: str) -> Optional[Family]:
        for family in self.families:
            if player_id in family.member_ids:
                return family
        return None

    def to_dict(self):
        """Public view broadcast to every player in the room."""
        payload = {
            'code': self.code,
            'state': self.state.value,
            'players': [p.to_dict() for p in self.players.values()],
            'hostId': self.host_id,
            'wordCount': len(self.words),
            'families': [f.to_dict() for f in self.families],
            'currentTurnId': self.current_turn_id,
            'turnOrder': list(self.turn_order),
        }
        # Word order must not leak before everybody has submitted
        if self.state in WORDS_VISIBLE_STATES:
            payload['shuffledWords'] = list(self.shuffled_words)
        return payload
