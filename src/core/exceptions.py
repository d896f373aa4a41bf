"""
Exceptions raised by the domain parsers and the boundary layer.

NOTE: The game reducer itself never raises. Invalid in-band actions simply return the unchanged state.
"""


class GameError(Exception):
    """Base class for everything this package raises on purpose."""


class InvalidSquareError(GameError):
    """A square name that cannot be mapped onto the board (ex. 'z9', 'e', 'e10')."""


class InvalidFENError(GameError):
    """A string that does not follow FEN notation."""


class InvalidRequestError(GameError):
    """
    Input from the UI collaborator failed boundary validation.

    NOTE: Deliberately not a ValueError, so pydantic lets it propagate instead of wrapping it in a ValidationError.
    """
