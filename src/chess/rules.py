"""
Check / legality oracle
----

Combines the movement rules (`src.chess.moves`) with the special moves (castling, en passant) into the pseudo-legal
destination set of a piece, and filters out everything that leaves the own king in check.

Also classifies a position for the side to move: active / check / checkmate / stalemate.
"""

from typing import Optional

from src.chess.board import Board
from src.chess.castling import CastlingRights, castling_candidates
from src.chess.moves import (
    MOVEMENT_RULES,
    en_passant_candidates,
    is_king_in_check,
    is_square_attacked,
)
from src.chess.square import Square
from src.core.shared_types import Color, GameStatus, PieceType

__all__ = [
    "compute_game_status",
    "get_valid_moves",
    "has_any_legal_moves",
    "is_checkmate",
    "is_king_in_check",
    "is_move_legal",
    "is_square_attacked",
    "is_stalemate",
    "leaves_king_in_check",
    "pseudo_legal_moves",
]


def pseudo_legal_moves(
    board: Board,
    square: Square,
    color: Color,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> list[Square]:
    """
    Destinations allowed by the movement pattern of the piece on `square`.
    ----

    1. basic movement rules for the piece type
    2. pawns: add the en passant target if it is diagonally in front
    3. kings: add castling destinations

    Empty squares, squares off the board and pieces of the other color give no moves.
    """
    if not square.is_within_bounds():
        return []
    piece = board.piece(square)
    if piece is None or piece.color != color:
        return []

    movement_rule = MOVEMENT_RULES[piece.type]
    moves = movement_rule(square, board)

    if piece.type == PieceType.PAWN:
        moves.extend(en_passant_candidates(square, board, en_passant_target))

    if piece.type == PieceType.KING and castling_rights is not None:
        moves.extend(castling_candidates(board, square, castling_rights))

    return moves


def leaves_king_in_check(
    board: Board, from_square: Square, to_square: Square, color: Color
) -> bool:
    """Return True if the move puts (or leaves) you in check

    plan:
    1. Relocate the piece on a copy of the board (nothing else: castling rook / en passant capture are not simulated)
    2. determine if the king is in check on the new board
    """
    simulated = board.move_piece(from_square, to_square)
    return is_king_in_check(simulated, color)


def get_valid_moves(
    board: Board,
    square: Square,
    color: Color,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> list[Square]:
    """The legal destinations for the piece on `square`: pseudo-legal moves that keep your king safe."""
    return [
        destination
        for destination in pseudo_legal_moves(
            board, square, color, castling_rights, en_passant_target
        )
        if not leaves_king_in_check(board, square, destination, color)
    ]


def is_move_legal(
    board: Board,
    from_square: Square,
    to_square: Square,
    color: Color,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> bool:
    return to_square in get_valid_moves(
        board, from_square, color, castling_rights, en_passant_target
    )


# --- CHECKS FOR ENDING THE GAME ---
def has_any_legal_moves(
    board: Board,
    color: Color,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> bool:
    return any(
        get_valid_moves(board, square, color, castling_rights, en_passant_target)
        for square in board.locate_color(color)
    )


def is_checkmate(
    board: Board,
    color: Color,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> bool:
    return is_king_in_check(board, color) and not has_any_legal_moves(
        board, color, castling_rights, en_passant_target
    )


def is_stalemate(
    board: Board,
    color: Color,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> bool:
    return not is_king_in_check(board, color) and not has_any_legal_moves(
        board, color, castling_rights, en_passant_target
    )


def compute_game_status(
    board: Board,
    color_to_move: Color,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
) -> GameStatus:
    """Checkmate / stalemate take priority over check, which takes priority over active."""
    in_check = is_king_in_check(board, color_to_move)
    if not has_any_legal_moves(board, color_to_move, castling_rights, en_passant_target):
        return GameStatus.CHECKMATE if in_check else GameStatus.STALEMATE
    return GameStatus.CHECK if in_check else GameStatus.ACTIVE
