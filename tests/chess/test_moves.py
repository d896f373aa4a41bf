"""Unit tests for /src/chess/moves.py"""

import pytest

from src.chess.board import Board
from src.chess.moves import (
    candidate_bishop_moves,
    candidate_king_moves,
    candidate_knight_moves,
    candidate_pawn_moves,
    candidate_queen_moves,
    candidate_rook_moves,
    compute_en_passant_target,
    en_passant_candidates,
    en_passant_capture_square,
    is_en_passant_move,
    is_king_in_check,
    is_pawn_push_to_promotion_square,
    is_square_attacked,
    pawn_attack_squares,
)
from src.chess.pieces import Piece, PieceType
from src.chess.square import Square
from src.core.shared_types import Color


def squares(*names: str) -> set[Square]:
    return {Square.from_algebraic(name) for name in names}


# --- MOVEMENT RULES ---
@pytest.mark.parametrize(
    "square_name, expected_count",
    [("d4", 8), ("a1", 2), ("h8", 2), ("b1", 3), ("g7", 4)],
)
def test_knight_moves_on_empty_board(build_board, square_name: str, expected_count: int) -> None:
    board = build_board({square_name: "N"})
    assert len(candidate_knight_moves(Square.from_algebraic(square_name), board)) == expected_count


def test_knight_jumps_over_pieces() -> None:
    board = Board.starting_position()
    moves = candidate_knight_moves(Square.from_algebraic("g1"), board)
    assert set(moves) == squares("f3", "h3")


def test_rook_stops_at_pieces(build_board) -> None:
    """Own piece blocks (excluded), opponent piece can be taken (included)"""
    board = build_board({"d4": "R", "d6": "P", "f4": "p"})
    moves = set(candidate_rook_moves(Square.from_algebraic("d4"), board))
    assert moves == squares("d5", "d3", "d2", "d1", "e4", "f4", "c4", "b4", "a4")


def test_bishop_moves(build_board) -> None:
    board = build_board({"c1": "B", "e3": "p"})
    moves = set(candidate_bishop_moves(Square.from_algebraic("c1"), board))
    assert moves == squares("d2", "e3", "b2", "a3")


def test_queen_is_rook_plus_bishop(build_board) -> None:
    board = build_board({"d4": "Q"})
    d4 = Square.from_algebraic("d4")
    assert len(candidate_queen_moves(d4, board)) == 27


@pytest.mark.parametrize(
    "square_name, expected_count", [("e4", 8), ("a1", 3), ("e1", 5)]
)
def test_king_single_steps(build_board, square_name: str, expected_count: int) -> None:
    board = build_board({square_name: "K"})
    assert len(candidate_king_moves(Square.from_algebraic(square_name), board)) == expected_count


# --- PAWNS ---
def test_pawn_single_and_double_step() -> None:
    board = Board.starting_position()
    assert set(candidate_pawn_moves(Square.from_algebraic("e2"), board)) == squares("e3", "e4")
    assert set(candidate_pawn_moves(Square.from_algebraic("d7"), board)) == squares("d6", "d5")


def test_moved_pawn_has_no_double_step() -> None:
    """Even back on the starting rank (ex. after a FEN import/undo mismatch), a moved pawn only steps once"""
    e2 = Square.from_algebraic("e2")
    board = Board.empty().place_piece(Piece(PieceType.PAWN, Color.WHITE, has_moved=True), e2)
    assert candidate_pawn_moves(e2, board) == [Square.from_algebraic("e3")]


def test_pawn_is_blocked(build_board) -> None:
    """A piece right in front blocks both steps. A piece two squares ahead blocks the double step only."""
    board = build_board({"e2": "P", "e3": "n", "b2": "P", "b4": "p"})
    assert candidate_pawn_moves(Square.from_algebraic("e2"), board) == []
    assert candidate_pawn_moves(Square.from_algebraic("b2"), board) == [Square.from_algebraic("b3")]


def test_pawn_captures_diagonally_only_opponents(build_board) -> None:
    board = build_board({"e4": "P", "d5": "p", "f5": "N", "e5": "p"})
    assert candidate_pawn_moves(Square.from_algebraic("e4"), board) == [Square.from_algebraic("d5")]


def test_pawn_attacks_ignore_occupancy(build_board) -> None:
    board = build_board({"a2": "P", "e7": "p"})
    assert pawn_attack_squares(Square.from_algebraic("a2"), board) == [Square.from_algebraic("b3")]
    assert set(pawn_attack_squares(Square.from_algebraic("e7"), board)) == squares("d6", "f6")


# --- ATTACKS / CHECK ---
def test_square_attacked_by_pawn_but_not_in_front(build_board) -> None:
    board = build_board({"e4": "P"})
    assert is_square_attacked(Square.from_algebraic("d5"), Color.WHITE, board)
    assert not is_square_attacked(Square.from_algebraic("e5"), Color.WHITE, board)


def test_king_in_check(build_board) -> None:
    board = build_board({"e1": "K", "e8": "r"})
    assert is_king_in_check(board, Color.WHITE)
    blocked = build_board({"e1": "K", "e2": "P", "e8": "r"})
    assert not is_king_in_check(blocked, Color.WHITE)


def test_no_king_is_never_in_check(build_board) -> None:
    board = build_board({"e8": "r"})
    assert not is_king_in_check(board, Color.WHITE)


def test_king_square_override(build_board) -> None:
    """Ask if the king would be attacked on another square, without moving it"""
    board = build_board({"e1": "K", "f8": "r"})
    assert not is_king_in_check(board, Color.WHITE)
    assert is_king_in_check(board, Color.WHITE, king_square_override=Square.from_algebraic("f1"))


# --- EN PASSANT ---
def test_double_step_sets_en_passant_target() -> None:
    pawn = Piece(PieceType.PAWN, Color.WHITE)
    target = compute_en_passant_target(pawn, Square.from_algebraic("e2"), Square.from_algebraic("e4"))
    assert target == Square.from_algebraic("e3")

    black_pawn = Piece(PieceType.PAWN, Color.BLACK)
    target = compute_en_passant_target(black_pawn, Square.from_algebraic("d7"), Square.from_algebraic("d5"))
    assert target == Square.from_algebraic("d6")


@pytest.mark.parametrize(
    "piece, from_name, to_name",
    [
        (Piece(PieceType.PAWN, Color.WHITE), "e2", "e3"),
        (Piece(PieceType.ROOK, Color.WHITE), "a1", "a3"),
        (Piece(PieceType.PAWN, Color.WHITE), "e4", "d5"),
    ],
)
def test_no_en_passant_target(piece: Piece, from_name: str, to_name: str) -> None:
    assert compute_en_passant_target(piece, Square.from_algebraic(from_name), Square.from_algebraic(to_name)) is None


def test_en_passant_candidates(build_board) -> None:
    board = build_board({"e5": "P", "d5": "p"})
    e5 = Square.from_algebraic("e5")
    d6 = Square.from_algebraic("d6")
    assert en_passant_candidates(e5, board, d6) == [d6]
    assert en_passant_candidates(e5, board, None) == []
    assert en_passant_candidates(e5, board, Square.from_algebraic("a6")) == []


def test_en_passant_detection(build_board) -> None:
    board = build_board({"e5": "P", "d5": "p"})
    e5 = Square.from_algebraic("e5")
    d6 = Square.from_algebraic("d6")
    assert is_en_passant_move(board, e5, d6, d6)
    assert not is_en_passant_move(board, e5, Square.from_algebraic("e6"), d6)
    assert en_passant_capture_square(e5, d6) == Square.from_algebraic("d5")


def test_promotion_square() -> None:
    white_pawn = Piece(PieceType.PAWN, Color.WHITE)
    black_pawn = Piece(PieceType.PAWN, Color.BLACK)
    assert is_pawn_push_to_promotion_square(white_pawn, Square.from_algebraic("a8"))
    assert is_pawn_push_to_promotion_square(black_pawn, Square.from_algebraic("h1"))
    assert not is_pawn_push_to_promotion_square(white_pawn, Square.from_algebraic("a1"))
    assert not is_pawn_push_to_promotion_square(Piece(PieceType.ROOK, Color.WHITE), Square.from_algebraic("a8"))
