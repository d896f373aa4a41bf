"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

from typing import Callable

import pytest

from src.chess.actions import MakeMove, SelectSquare
from src.chess.board import Board
from src.chess.game import GameState, dispatch, initial_state
from src.chess.pieces import Piece
from src.chess.square import Square

BoardBuilder = Callable[[dict[str, str]], Board]
MovePlayer = Callable[..., GameState]


@pytest.fixture
def build_board() -> BoardBuilder:
    """
    Factory: create a board from {square: FEN character}, ex. {"e1": "K", "e8": "k"}.
    All pieces are unmoved.
    """

    def _build(placement: dict[str, str]) -> Board:
        board = Board.empty()
        for square_name, character in placement.items():
            board = board.place_piece(
                Piece.from_fen(character), Square.from_algebraic(square_name)
            )
        return board

    return _build


@pytest.fixture
def play() -> MovePlayer:
    """
    Factory: play a sequence of moves ("e2e4", "e7e5", ...) through the reducer (select + move), like a user would.
    """

    def _play(state: GameState, *moves: str) -> GameState:
        for uci in moves:
            from_square = Square.from_algebraic(uci[:2])
            to_square = Square.from_algebraic(uci[2:4])
            state = dispatch(state, SelectSquare(from_square))
            state = dispatch(state, MakeMove(from_square, to_square))
        return state

    return _play


@pytest.fixture
def starting_state() -> GameState:
    return initial_state()
