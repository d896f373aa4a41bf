"""The record of a move that has been played: everything needed to take it back (and play it again)."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from src.chess.castling import CastlingRights
from src.chess.pieces import PIECE_TO_FEN, Piece
from src.chess.square import Square
from src.core.shared_types import PieceType


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Move:
    """
    A move in the history.
    ---

    Stores snapshots of the state BEFORE the move, instead of recomputing how to invert it:
    * `piece` is the mover as it stood on `from_square` (incl. its old has_moved)
    * `captured` is the piece taken (on `to_square`, or on `en_passant_capture_square` for en passant)
    * `prev_*` are the values to restore on undo
    """

    piece: Piece
    from_square: Square
    to_square: Square
    captured: Optional[Piece] = None
    notation: str = ""
    timestamp: datetime = field(default_factory=utc_now)
    prev_has_moved: bool = False
    prev_captured_has_moved: Optional[bool] = None
    prev_castling_rights: CastlingRights = field(default_factory=CastlingRights.all)
    prev_en_passant_target: Optional[Square] = None
    is_en_passant: bool = False
    en_passant_capture_square: Optional[Square] = None
    promotion: Optional[PieceType] = None

    @property
    def is_capture(self) -> bool:
        return self.captured is not None

    def to_uci(self) -> str:
        """ex. 'e2e4', or 'e7e8q' for a promotion"""
        promotion_char = PIECE_TO_FEN[self.promotion] if self.promotion else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{promotion_char}"
