"""Unit tests for src/chess/fen.py"""

import pytest

from src.chess.castling import CastlingRights
from src.chess.fen import (
    STARTING_FEN,
    FENState,
    half_move_clock,
    is_valid_castling_rights,
    is_valid_color_code,
    is_valid_en_passant,
    is_valid_fen,
    is_valid_position,
    state_from_fen,
    state_to_fen,
)
from src.chess.game import initial_state
from src.chess.square import Square
from src.core.exceptions import InvalidFENError
from src.core.shared_types import Color, GameStatus


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


# --- VALIDATION ---
@pytest.mark.parametrize(
    "fen",
    [
        STARTING_FEN,
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
        "8/8/8/8/8/8/8/K1k5 w - - 12 40",
    ],
)
def test_valid_fen(fen: str) -> None:
    assert is_valid_fen(fen)


@pytest.mark.parametrize(
    "fen",
    [
        "",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP w KQkq - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR x KQkq - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkqK - 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq e4 0 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - a 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - ² 1",
        "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 ¹",
        "rnbqkbnr/pppppppp/²6/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1",
    ],
)
def test_invalid_fen(fen: str) -> None:
    assert not is_valid_fen(fen)
    with pytest.raises(InvalidFENError):
        FENState.from_fen(fen)


@pytest.mark.parametrize(
    "position, expected",
    [
        ("8/8/8/8/8/8/8/8", True),
        ("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR", True),
        ("9/8/8/8/8/8/8/8", False),
        ("7/8/8/8/8/8/8/8", False),
        ("8/8/8/8/8/8/8/7x", False),
        ("8/8/8/8/8/8/8", False),
    ],
)
def test_position_validation(position: str, expected: bool) -> None:
    assert is_valid_position(position) == expected


@pytest.mark.parametrize(
    "castling, expected",
    [("-", True), ("KQkq", True), ("Kq", True), ("qK", False), ("KK", False), ("", False), ("X", False)],
)
def test_castling_validation(castling: str, expected: bool) -> None:
    assert is_valid_castling_rights(castling) == expected


def test_color_and_en_passant_validation() -> None:
    assert is_valid_color_code("w") and is_valid_color_code("b")
    assert not is_valid_color_code("white")
    assert is_valid_en_passant("-") and is_valid_en_passant("e3") and is_valid_en_passant("d6")
    assert not is_valid_en_passant("e4")
    assert not is_valid_en_passant("z3")


# --- FEN STATE ---
def test_parsing_starting_fen() -> None:
    fen_state = FENState.starting_position()
    assert fen_state.color_to_move == Color.WHITE
    assert fen_state.castling_rights == CastlingRights.all()
    assert fen_state.en_passant_square is None
    assert fen_state.half_move_clock == 0
    assert fen_state.full_move_number == 1
    assert fen_state.to_fen() == STARTING_FEN


def test_parsing_en_passant_square() -> None:
    fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    fen_state = FENState.from_fen(fen)
    assert fen_state.en_passant_square == sq("e3")
    assert fen_state.color_to_move == Color.BLACK
    assert fen_state.to_fen() == fen


# --- GAME STATE ---
def test_starting_state_round_trip() -> None:
    assert state_to_fen(initial_state()) == STARTING_FEN
    state = state_from_fen(STARTING_FEN)
    assert state.board == initial_state().board
    assert state.castling_rights == CastlingRights.all()
    assert state.game_status == GameStatus.ACTIVE


def test_move_counters_after_moves(play) -> None:
    state = play(initial_state(), "e2e4", "e7e5", "g1f3", "b8c6")
    assert state_to_fen(state) == (
        "r1bqkbnr/pppp1ppp/2n5/4p3/4P3/5N2/PPPP1PPP/RNBQKB1R w KQkq - 2 3"
    )


def test_en_passant_target_in_fen(play) -> None:
    state = play(initial_state(), "e2e4")
    assert state_to_fen(state) == (
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    )


def test_half_move_clock_of_empty_history() -> None:
    assert half_move_clock(()) == 0
    assert half_move_clock((), 7) == 7


def test_move_counters_continue_from_imported_fen(play) -> None:
    fen = "8/8/8/8/8/8/8/K1k5 w - - 12 40"
    state = state_from_fen(fen)
    assert state_to_fen(state) == fen

    state = play(state, "a1a2")
    assert state_to_fen(state) == "8/8/8/8/8/8/K7/2k5 b - - 13 40"

    state = play(state, "c1d1")
    assert state_to_fen(state) == "8/8/8/8/8/8/K7/3k4 w - - 14 41"


def test_inferring_has_moved() -> None:
    """
    * the e4 pawn left its rank, the a2 pawn did not
    * white lost the king-side right: the h1 rook counts as moved, the a1 rook does not
    * black lost both rights: its king counts as moved
    """
    state = state_from_fen("r3k2r/8/8/8/4P3/8/P7/R3K2R b Q - 0 1")
    board = state.board

    assert board.piece(sq("e4")).has_moved  # type: ignore[union-attr]
    assert not board.piece(sq("a2")).has_moved  # type: ignore[union-attr]
    assert board.piece(sq("h1")).has_moved  # type: ignore[union-attr]
    assert not board.piece(sq("a1")).has_moved  # type: ignore[union-attr]
    assert not board.piece(sq("e1")).has_moved  # type: ignore[union-attr]
    assert board.piece(sq("e8")).has_moved  # type: ignore[union-attr]
    assert state.current_player == Color.BLACK


def test_state_from_fen_computes_status() -> None:
    state = state_from_fen("K7/1q6/2k5/8/8/8/8/8 w - - 0 1")
    assert state.game_status == GameStatus.CHECKMATE
    assert state.is_in_check


def test_state_from_invalid_fen() -> None:
    with pytest.raises(InvalidFENError):
        state_from_fen("not a fen")
