"""Game domain services: the room engine, persistence handoff and history.

This package contains pure(ish) domain logic that should be imported by
HTTP routes and socket handlers, keeping transport concerns separated
from core game mechanics.
"""

from .engine import GameEngine
from .errors import GameError
from .state import Family, GameState, GuessRecord, GuessResult, Player, Room

__all__ = [
    'GameEngine',
    'GameError',
    'Family',
    'GameState',
    'GuessRecord',
    'GuessResult',
    'Player',
    'Room',
]
