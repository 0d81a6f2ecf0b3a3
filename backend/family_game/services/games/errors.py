class GameError(Exception):
    """A rejected game operation.

    The room is left exactly as it was before the call. ``str(err)`` is the
    human-readable reason sent back to the caller; ``kind`` groups reasons so
    HTTP callers can pick a status code.
    """

    INVALID = 'invalid'
    NOT_FOUND = 'not_found'
    FORBIDDEN = 'forbidden'
    CONFLICT = 'conflict'

    def __init__(self, message: str, kind: str = INVALID):
        super().__init__(message)
        self.message = message
        self.kind = kind

    def to_dict(self):
        return {'message': self.message, 'kind': self.kind}
