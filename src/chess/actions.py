"""
The closed set of actions the game reducer understands.

The UI collaborator only ever talks to the game by dispatching one of these.
"""

from dataclasses import dataclass
from typing import Union

from src.chess.square import Square
from src.core.shared_types import Color, GameStatus, PieceType


@dataclass(frozen=True)
class SelectSquare:
    """Click on a square: select an own piece, move the selected piece there, or drop the selection."""

    square: Square


@dataclass(frozen=True)
class MakeMove:
    """Move the selected piece (ex. after a drag-and-drop)."""

    from_square: Square
    to_square: Square


@dataclass(frozen=True)
class RequestPromotion:
    from_square: Square
    to_square: Square
    color: Color


@dataclass(frozen=True)
class CompletePromotion:
    piece_type: PieceType


@dataclass(frozen=True)
class CancelPromotion:
    pass


@dataclass(frozen=True)
class UndoMove:
    pass


@dataclass(frozen=True)
class RedoMove:
    pass


@dataclass(frozen=True)
class ResetGame:
    pass


@dataclass(frozen=True)
class SetValidMoves:
    moves: tuple[Square, ...]


@dataclass(frozen=True)
class UpdateGameStatus:
    status: GameStatus


Action = Union[
    SelectSquare,
    MakeMove,
    RequestPromotion,
    CompletePromotion,
    CancelPromotion,
    UndoMove,
    RedoMove,
    ResetGame,
    SetValidMoves,
    UpdateGameStatus,
]
