from .errors import GameError


def validate_player_name(name, min_length=2, max_length=20) -> str:
    """Return the trimmed name, or raise if its length is out of bounds."""
    trimmed = (name or '').strip() if isinstance(name, str) else ''
    if not trimmed or len(trimmed) < min_length or len(trimmed) > max_length:
        raise GameError(
            f'Player name must be between {min_length} and {max_length} characters',
            GameError.INVALID,
        )
    return trimmed


def normalize_word(word) -> str:
    if not isinstance(word, str):
        return ''
    return word.strip()


def validate_submitted_word(word, max_length=50) -> str:
    trimmed = normalize_word(word)
    if not trimmed:
        raise GameError('Word cannot be empty', GameError.INVALID)
    if len(trimmed) > max_length:
        raise GameError(f'Word must be {max_length} characters or fewer', GameError.INVALID)
    return trimmed


def names_match(a: str, b: str) -> bool:
    return a.lower() == b.lower()
