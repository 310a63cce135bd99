class RconError(Exception):
    """Base class for every failure raised while talking to the game server."""


class CommandTooLarge(RconError):
    """Raised when an encoded command does not fit in a single datagram."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"encoded command is {size} bytes, limit is {limit}")


class InvalidCommand(RconError):
    """Raised when a command cannot be encoded as UTF-8 for the wire."""


class RconTimeout(RconError):
    """Raised when no reply datagram arrives before the deadline."""


class NetworkError(RconError):
    """Raised when the socket cannot be opened, used or resolved."""


class ProtocolError(RconError):
    """Raised when a reply is missing the out-of-band framing."""


class InvalidGametype(RconError, ValueError):
    """Raised for a gametype tag outside the known table."""

    def __init__(self, tag):
        self.tag = tag
        super().__init__(f"Invalid gametype: {tag}")


class PartialFailure(RconError):
    """A multi-step operation stopped after its first step took effect.

    ``completed`` holds the reply of the step that succeeded and ``failure``
    the exception raised by the step that did not. The game server is left
    in a mixed state (for a gametype/map change: mode changed, map unchanged).
    """

    def __init__(self, completed: str, failure: RconError, step: str = ""):
        self.completed = completed
        self.failure = failure
        self.step = step
        what = f"'{step}'" if step else "second step"
        super().__init__(f"{what} failed after the first step succeeded: {failure}")
