"""
Standard Algebraic Notation (SAN)
---

examples: 'e4', 'exd5', 'Nbc3', 'R1a3', 'Qh4xe1', 'O-O', 'e8=Q+', 'exd6 e.p.'
"""

from typing import Iterable

from src.chess.board import Board
from src.chess.castling import is_castling_move
from src.chess.history import Move
from src.chess.moves import promotion_rank
from src.chess.pieces import PIECE_TO_SAN
from src.chess.rules import is_move_legal
from src.chess.square import Square
from src.core.shared_types import Color, GameStatus, PieceType

CHECK_SUFFIX = "+"
CHECKMATE_SUFFIX = "#"
EN_PASSANT_SUFFIX = " e.p."


def generate_algebraic_notation(
    board: Board, move: Move, result_status: GameStatus
) -> str:
    """
    SAN of a move.
    ----

    NOTE: Needs the board as it was BEFORE the move was made (to find other pieces that could reach the same square),
    and the status of the opponent AFTER the move (for the + or # suffix).
    """
    piece = move.piece

    if is_castling_move(piece, move.from_square, move.to_square):
        san = "O-O" if move.to_square.file > move.from_square.file else "O-O-O"
    elif piece.type == PieceType.PAWN:
        san = _pawn_notation(move)
    else:
        san = _piece_notation(board, move)

    return san + _status_suffix(result_status)


def _pawn_notation(move: Move) -> str:
    """
    Pawn moves only mention the destination, unless they take: then the file they came from is added.
    """
    destination = move.to_square.to_algebraic()
    is_capture = (
        move.is_capture
        or move.is_en_passant
        or move.from_square.file != move.to_square.file
    )
    san = f"{_file_letter(move.from_square)}x{destination}" if is_capture else destination

    if move.is_en_passant:
        san += EN_PASSANT_SUFFIX

    if move.promotion is not None:
        san += f"={PIECE_TO_SAN[move.promotion]}"
    elif move.to_square.rank == promotion_rank(move.piece.color):
        # a promotion without an explicit choice is a queen
        san += f"={PIECE_TO_SAN[PieceType.QUEEN]}"
    return san


def _piece_notation(board: Board, move: Move) -> str:
    """{PieceLetter}{disambiguation}{x if captured}{destination}"""
    letter = PIECE_TO_SAN[move.piece.type]
    disambiguation = _disambiguation(board, move)
    capture = "x" if move.is_capture else ""
    return f"{letter}{disambiguation}{capture}{move.to_square.to_algebraic()}"


def _disambiguation(board: Board, move: Move) -> str:
    """
    If another piece of the same type and color could legally reach the same destination:
    1. use the origin file if no competing piece shares it
    2. else the origin rank if no competing piece shares that
    3. else the full origin square
    """
    piece = move.piece
    competitors = [
        square
        for square in board.locate_pieces(piece.type, piece.color)
        if square != move.from_square
        and is_move_legal(board, square, move.to_square, piece.color)
    ]
    if not competitors:
        return ""

    origin = move.from_square
    if all(square.file != origin.file for square in competitors):
        return _file_letter(origin)
    if all(square.rank != origin.rank for square in competitors):
        return str(origin.rank)
    return origin.to_algebraic()


def _status_suffix(result_status: GameStatus) -> str:
    if result_status == GameStatus.CHECKMATE:
        return CHECKMATE_SUFFIX
    if result_status == GameStatus.CHECK:
        return CHECK_SUFFIX
    return ""


def _file_letter(square: Square) -> str:
    return square.to_algebraic()[0]


def format_move_list(moves: Iterable[Move]) -> str:
    """
    Single line of SAN with move numbers: '1. e4 e5 2. Nf3'

    If black made the first move of the list (custom starting position), it is written as '1... e5'.
    """
    tokens: list[str] = []
    move_number = 1
    for index, move in enumerate(moves):
        if move.piece.color == Color.WHITE:
            tokens.append(f"{move_number}. {move.notation}")
        else:
            if index == 0:
                tokens.append(f"{move_number}... {move.notation}")
            else:
                tokens.append(move.notation)
            move_number += 1
    return " ".join(tokens)
