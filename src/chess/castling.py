"""
Helpers for implementing Castling rules.

* which squares the king/rook travel between
* the castling rights (what has not been revoked yet) and how a move revokes them
* the extra king destinations castling adds to the move generator
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Self

from src.chess.board import Board
from src.chess.moves import is_king_in_check
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color, PieceType, opponent


class CastlingDirection(Enum):
    """The four castling directions. Values represent their encodings in FEN string."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)

CASTLING_DIRECTIONS_BY_COLOR: dict[Color, tuple[CastlingDirection, CastlingDirection]] = {
    Color.WHITE: (
        CastlingDirection.WHITE_KING_SIDE,
        CastlingDirection.WHITE_QUEEN_SIDE,
    ),
    Color.BLACK: (
        CastlingDirection.BLACK_KING_SIDE,
        CastlingDirection.BLACK_QUEEN_SIDE,
    ),
}


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    def squares_between(self) -> list[Square]:
        """Squares strictly between king and rook. All of them must be empty to castle."""
        low, high = sorted((self.king_from.file, self.rook_from.file))
        return [Square(file, self.king_from.rank) for file in range(low + 1, high)]

    def king_path(self) -> list[Square]:
        """The king's current square, the square it passes through and the one it lands on. None may be attacked."""
        step = 1 if self.king_to.file > self.king_from.file else -1
        return [
            Square(file, self.king_from.rank)
            for file in range(self.king_from.file, self.king_to.file + step, step)
        ]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


@dataclass(frozen=True)
class CastlingRights:
    """
    Which of the four castling directions have not been revoked (yet).
    ---

    Rights only ever shrink while the game moves forward. Undo restores an older CastlingRights value as a whole.
    """

    granted: frozenset[CastlingDirection] = frozenset(CastlingDirection)

    @classmethod
    def all(cls) -> Self:
        return cls(frozenset(CastlingDirection))

    @classmethod
    def none(cls) -> Self:
        return cls(frozenset())

    @classmethod
    def from_fen(cls, castle_fen: str) -> Self:
        """parse the part of the FEN string that encodes castling rights"""
        return cls(
            frozenset(
                direction
                for direction in CastlingDirection
                if direction.value in castle_fen
            )
        )

    def to_fen(self) -> str:
        """create the part of the FEN string that encodes castling rights"""
        castling_chars = "".join(
            direction.value for direction in CASTLING_ORDER if direction in self.granted
        )
        return castling_chars or "-"

    def has(self, direction: CastlingDirection) -> bool:
        return direction in self.granted

    def king_side(self, color: Color) -> bool:
        return self.has(CASTLING_DIRECTIONS_BY_COLOR[color][0])

    def queen_side(self, color: Color) -> bool:
        return self.has(CASTLING_DIRECTIONS_BY_COLOR[color][1])

    def can_castle(self, color: Color) -> bool:
        return self.king_side(color) or self.queen_side(color)

    def revoke(self, *directions: CastlingDirection) -> Self:
        return type(self)(self.granted - frozenset(directions))

    def revoke_all(self, color: Color) -> Self:
        return self.revoke(*CASTLING_DIRECTIONS_BY_COLOR[color])


# --- CASTLING MOVES ---
def castling_direction_for_king_move(
    color: Color, from_square: Square, to_square: Square
) -> Optional[CastlingDirection]:
    """A king moving exactly two files sideways is castling. Destination file decides the side."""
    if from_square.rank != to_square.rank or abs(to_square.file - from_square.file) != 2:
        return None
    king_side, queen_side = CASTLING_DIRECTIONS_BY_COLOR[color]
    return king_side if to_square.file > from_square.file else queen_side


def is_castling_move(piece: Piece, from_square: Square, to_square: Square) -> bool:
    return (
        piece.type == PieceType.KING
        and castling_direction_for_king_move(piece.color, from_square, to_square)
        is not None
    )


def castling_candidates(
    board: Board, square: Square, rights: CastlingRights
) -> list[Square]:
    """
    Extra king destinations from castling
    ---

    **you are allowed to castle if**

    * Castling rights for that side are not yet revoked.
    * The king stands unmoved on its starting square.
    * The rook is on its corner, of your color, and never moved.
    * All squares in between king and rook are empty.
    * The king is not in check, and does not pass through or land on an attacked square.
      (tested by pretending the king stands on the square, without placing it there)
    """
    king = board.piece(square)
    if king is None or king.type != PieceType.KING or king.has_moved:
        return []

    destinations: list[Square] = []
    for direction in CASTLING_DIRECTIONS_BY_COLOR[king.color]:
        if not rights.has(direction):
            continue

        rule = CASTLING_RULES[direction]
        if square != rule.king_from:
            continue

        rook = board.piece(rule.rook_from)
        expected_rook = Piece(PieceType.ROOK, king.color, has_moved=False)
        if rook != expected_rook:
            continue

        if not all(board.is_empty(between) for between in rule.squares_between()):
            continue

        if any(
            is_king_in_check(board, king.color, king_square_override=path_square)
            for path_square in rule.king_path()
        ):
            continue

        destinations.append(rule.king_to)
    return destinations


def apply_castling_rook_move(
    board: Board, color: Color, king_from: Square, king_to: Square
) -> Board:
    """Castling moves the rook as well: from its corner to the square the king passed over. It counts as moved."""
    direction = castling_direction_for_king_move(color, king_from, king_to)
    assert direction is not None
    rule = CASTLING_RULES[direction]
    rook = board.piece(rule.rook_from)
    if rook is None:
        return board
    return board.remove_piece(rule.rook_from).place_piece(rook.moved(), rule.rook_to)


def undo_castling_rook_move(
    board: Board, color: Color, king_from: Square, king_to: Square
) -> Board:
    """Put the rook back in its corner. It could only castle because it never moved before."""
    direction = castling_direction_for_king_move(color, king_from, king_to)
    assert direction is not None
    rule = CASTLING_RULES[direction]
    rook = board.piece(rule.rook_to)
    if rook is None:
        return board
    return board.remove_piece(rule.rook_to).place_piece(
        rook.with_has_moved(False), rule.rook_from
    )


# --- REVOKING RIGHTS ---
def update_castling_rights(
    rights: CastlingRights,
    piece: Piece,
    from_square: Square,
    to_square: Square,
    captured: Optional[Piece],
) -> CastlingRights:
    """
    Checks which rights should get revoked
    ----

    1. If you are moving your king (castling included) --> revoke both of your rights
    2. If you are moving a rook away from its corner --> revoke the right for that side
    3. If you capture on your opponent's rook corner --> revoke that right of your opponent
       (whatever piece did the capturing)

    NOTE: A pure function of (piece, from, to, captured), so replaying a move derives the exact same rights.
    """
    if piece.type == PieceType.KING:
        rights = rights.revoke_all(piece.color)

    if piece.type == PieceType.ROOK:
        for direction in CASTLING_DIRECTIONS_BY_COLOR[piece.color]:
            if from_square == CASTLING_RULES[direction].rook_from:
                rights = rights.revoke(direction)

    if captured is not None:
        for direction in CASTLING_DIRECTIONS_BY_COLOR[opponent(piece.color)]:
            if to_square == CASTLING_RULES[direction].rook_from:
                rights = rights.revoke(direction)

    return rights
