"""
FEN import / export of a complete game state.

Used to start a game (or a test) from a custom position, and to show the current position in a compact form.
"""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.board import Board
from src.chess.castling import (
    CASTLING_DIRECTIONS_BY_COLOR,
    CASTLING_RULES,
    CastlingRights,
)
from src.chess.game import GameState, create_state
from src.chess.history import Move
from src.chess.moves import pawn_starting_rank
from src.chess.pieces import FEN_TO_PIECE, Piece
from src.chess.square import BOARD_DIMENSIONS, Square, is_valid_square
from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color, PieceType

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
CASTLING_CHARACTERS = "KQkq"


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows proper FEN notation.
    """

    # there should be 6 parts to the string
    parts = fen.split(" ")
    if len(parts) != 6:
        return False

    position, color, castling, en_passant, half_move_clock, full_move_number = parts
    return (
        is_valid_position(position)
        and is_valid_color_code(color)
        and is_valid_castling_rights(castling)
        and is_valid_en_passant(en_passant)
        and is_valid_move_counter(half_move_clock)
        and is_valid_move_counter(full_move_number)
    )


def is_valid_position(position: str) -> bool:
    """Only check the part of the FEN encoding for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_fen in rank_fens:
        file_count = 0
        for character in rank_fen:
            if character.isascii() and character.isdigit():
                file_count += int(character)
            elif character.lower() in FEN_TO_PIECE:
                file_count += 1
            else:
                return False

        # make sure you are creating a correctly sized board
        if file_count != num_files:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in {"w", "b"}


def is_valid_castling_rights(castling: str) -> bool:
    """Either '-' or a subsequence of 'KQkq' (order matters, no repeats)."""
    if castling == "-":
        return True
    if not castling:
        return False
    remaining = CASTLING_CHARACTERS
    for character in castling:
        index = remaining.find(character)
        if index < 0:
            return False
        remaining = remaining[index + 1 :]
    return True


def is_valid_en_passant(en_passant: str) -> bool:
    """A target square only ever sits on the 3rd or 6th rank."""
    if en_passant == "-":
        return True
    return is_valid_square(en_passant) and en_passant[1] in {"3", "6"}


def is_valid_move_counter(counter: str) -> bool:
    return counter.isascii() and counter.isdigit()


@dataclass(frozen=True)
class FENState:
    """
    Data that can be constructed from a FEN string.
    ----

    <board position string><active color><castling rights><en passant square><# half move clock><number turns played>

    * The board position is described in `Board.from_fen()`
    * The active color is either "w" or "b"
    * Castling rights: "K"/"Q" for white king-/queen-side, "k"/"q" for black. A "-" if all are revoked.
    * The en passant square is the square a pawn may capture on. "-" if not available.
    * The half move clock counts the plies since the last pawn move or capture.
    * The full move number starts at 1 and increments after every move black makes.
    """

    position: str
    color_to_move: Color
    castling_rights: CastlingRights
    en_passant_square: Optional[Square]
    half_move_clock: int
    full_move_number: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen}")

        (
            position,
            active_color,
            castling_str,
            en_passant_algebraic,
            half_move_clock,
            full_move_number,
        ) = fen.split(" ")

        en_passant_square = (
            Square.from_algebraic(en_passant_algebraic)
            if en_passant_algebraic != "-"
            else None
        )
        return cls(
            position=position,
            color_to_move=Color.WHITE if active_color == "w" else Color.BLACK,
            castling_rights=CastlingRights.from_fen(castling_str),
            en_passant_square=en_passant_square,
            half_move_clock=int(half_move_clock),
            full_move_number=int(full_move_number),
        )

    def to_fen(self) -> str:
        active_color = "w" if self.color_to_move == Color.WHITE else "b"
        en_passant_algebraic = (
            self.en_passant_square.to_algebraic()
            if self.en_passant_square is not None
            else "-"
        )
        return (
            f"{self.position} {active_color} {self.castling_rights.to_fen()} "
            f"{en_passant_algebraic} {self.half_move_clock} {self.full_move_number}"
        )

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)


# --- GAME STATE <-> FEN ---
def state_from_fen(fen: str) -> GameState:
    """
    Build a fresh game state (empty history) from a FEN string.

    FEN has no notion of `has_moved`, so it gets inferred from the position and castling rights:
    * pawns: moved when off their starting rank
    * kings: moved when off their home square, or when their color lost both castling rights
    * rooks: moved unless standing on a corner whose castling right is still granted
    * other pieces: never needed, left unmoved
    """
    fen_state = FENState.from_fen(fen)
    board = Board.from_fen(fen_state.position)
    rights = fen_state.castling_rights

    for square in board.locate_color(Color.WHITE) + board.locate_color(Color.BLACK):
        piece = board.piece(square)
        assert piece is not None
        has_moved = _infer_has_moved(piece, square, rights)
        if has_moved != piece.has_moved:
            board = board.place_piece(piece.with_has_moved(has_moved), square)

    return create_state(
        board,
        current_player=fen_state.color_to_move,
        castling_rights=rights,
        en_passant_target=fen_state.en_passant_square,
        starting_half_move_clock=fen_state.half_move_clock,
        starting_full_move_number=fen_state.full_move_number,
    )


def state_to_fen(state: GameState) -> str:
    """The move counters continue from the ones of the position the game started from."""
    fen_state = FENState(
        position=state.board.to_fen(),
        color_to_move=state.current_player,
        castling_rights=state.castling_rights,
        en_passant_square=state.en_passant_target,
        half_move_clock=half_move_clock(
            state.move_history, state.starting_half_move_clock
        ),
        full_move_number=state.starting_full_move_number
        + sum(1 for move in state.move_history if move.piece.color == Color.BLACK),
    )
    return fen_state.to_fen()


def half_move_clock(moves: tuple[Move, ...], starting_clock: int = 0) -> int:
    """
    Plies since the last pawn move or capture, counted backwards from the end of the history.
    Without any pawn move or capture in the history, the clock of the starting position keeps running.
    """
    count = 0
    for move in reversed(moves):
        if move.piece.type == PieceType.PAWN or move.is_capture:
            return count
        count += 1
    return starting_clock + count


def _infer_has_moved(piece: Piece, square: Square, rights: CastlingRights) -> bool:
    if piece.type == PieceType.PAWN:
        return square.rank != pawn_starting_rank(piece.color)

    directions = CASTLING_DIRECTIONS_BY_COLOR[piece.color]
    if piece.type == PieceType.KING:
        home = CASTLING_RULES[directions[0]].king_from
        return square != home or not rights.can_castle(piece.color)

    if piece.type == PieceType.ROOK:
        return not any(
            rights.has(direction) and square == CASTLING_RULES[direction].rook_from
            for direction in directions
        )

    return False
