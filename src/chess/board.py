"""
The Board: which piece stands on which square.

The grid is a tuple of rows (row 0 = 8th rank, column 0 = a-file). It is never changed in place:
every placement primitive returns a new Board. Rows that did not change are shared between the old and the new board,
which is safe because the rows are tuples as well.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import Color, PieceType

Row = tuple[Optional[Piece], ...]
Grid = tuple[Row, ...]

BACK_RANK_ORDER: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


@dataclass(frozen=True)
class Board:
    grid: Grid

    @classmethod
    def empty(cls) -> Board:
        num_files, num_ranks = BOARD_DIMENSIONS
        return cls(tuple((None,) * num_files for _ in range(num_ranks)))

    @classmethod
    def starting_position(cls) -> Board:
        """The classical set-up: back ranks on the 1st/8th, pawns on the 2nd/7th"""
        num_files, _ = BOARD_DIMENSIONS
        black_back = tuple(Piece(pt, Color.BLACK) for pt in BACK_RANK_ORDER)
        black_pawns = tuple(Piece(PieceType.PAWN, Color.BLACK) for _ in range(num_files))
        white_pawns = tuple(Piece(PieceType.PAWN, Color.WHITE) for _ in range(num_files))
        white_back = tuple(Piece(pt, Color.WHITE) for pt in BACK_RANK_ORDER)
        empty_row: Row = (None,) * num_files
        return cls(
            (black_back, black_pawns)
            + (empty_row,) * 4
            + (white_pawns, white_back)
        )

    @classmethod
    def from_fen(cls, fen_str: str) -> Board:
        """Construct a board using the first (piece placement) field of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with the rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.

        NOTE: FEN does not store whether a piece has moved. All pieces are created unmoved here;
        see `src.chess.fen` for how that flag gets inferred for a full game state.
        """
        rows: list[Row] = []
        # FEN string is read from the top rank (8th), which is also row 0 of the grid
        for fen_one_rank in fen_str.split("/"):
            row: list[Optional[Piece]] = []
            for character in fen_one_rank:
                if character.isalpha():
                    row.append(Piece.from_fen(character))
                else:
                    # A number denotes the amount of empty squares after each other
                    row.extend([None] * int(character))
            rows.append(tuple(row))
        return cls(tuple(rows))

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in self.grid)

    @staticmethod
    def _row_to_fen(row: Row) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for piece in row:
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # --- QUERIES ---
    def piece(self, square: Square) -> Optional[Piece]:
        """Piece on the square. Squares off the board are simply empty."""
        if not square.is_within_bounds():
            return None
        row, col = square.to_coordinates()
        return self.grid[row][col]

    def is_empty(self, square: Square) -> bool:
        return self.piece(square) is None

    def squares(self) -> list[Square]:
        """Every square of the board, top row first."""
        return [
            Square.from_coordinates(row, col)
            for row in range(len(self.grid))
            for col in range(len(self.grid[row]))
        ]

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square
            for square in self.squares()
            if (piece := self.piece(square)) is not None and piece.color == color
        ]

    def locate_pieces(self, piece_type: PieceType, color: Color) -> list[Square]:
        return [
            square
            for square in self.locate_color(color)
            if self.piece(square).type == piece_type  # type: ignore[union-attr]
        ]

    def find_king(self, color: Color) -> Optional[Square]:
        kings = self.locate_pieces(PieceType.KING, color)
        return kings[0] if kings else None

    # --- PLACEMENT PRIMITIVES (all return a new Board) ---
    def place_piece(self, piece: Optional[Piece], square: Square) -> Board:
        """Put a piece on a square (or clear it by placing None). Only the touched row gets rebuilt."""
        row, col = square.to_coordinates()
        new_row = self.grid[row][:col] + (piece,) + self.grid[row][col + 1 :]
        return Board(self.grid[:row] + (new_row,) + self.grid[row + 1 :])

    def remove_piece(self, square: Square) -> Board:
        return self.place_piece(None, square)

    def move_piece(self, from_square: Square, to_square: Square) -> Board:
        """
        Plain relocation: whatever stands on `to_square` disappears, `from_square` is emptied.

        NOTE: no castling / en passant side effects and the has_moved flag is left alone.
        This is exactly what the check-safety simulation needs.
        """
        piece_that_moved = self.piece(from_square)
        return self.remove_piece(from_square).place_piece(piece_that_moved, to_square)

    def __str__(self) -> str:
        lines = []
        for row_idx, row in enumerate(self.grid):
            rank = BOARD_DIMENSIONS[1] - row_idx
            cells = " ".join(piece.to_fen() if piece else "." for piece in row)
            lines.append(f"{rank} {cells}")
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
