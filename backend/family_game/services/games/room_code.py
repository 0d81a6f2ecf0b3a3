import random
from typing import Callable, Container, Sequence

# Uppercase alphanumerics without the easily confused 0/O, I/L and 1
ROOM_CODE_ALPHABET = 'ABCDEFGHJKMNPQRSTUVWXYZ23456789'
ROOM_CODE_LENGTH = 6


def generate_room_code(
    existing: Container[str],
    length: int = ROOM_CODE_LENGTH,
    choice: Callable[[Sequence[str]], str] = random.choice,
) -> str:
    """Generate a room code that is not in ``existing``."""
    while True:
        code = ''.join(choice(ROOM_CODE_ALPHABET) for _ in range(length))
        if code not in existing:
            return code


def normalize_room_code(code) -> str:
    if not isinstance(code, str):
        return ''
    return code.strip().upper()
