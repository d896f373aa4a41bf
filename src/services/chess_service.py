"""Orchestration between whatever drives the game (a UI, a script) and the game reducer."""

import logging
from typing import Optional

from src.api.models import (
    GameStateResponse,
    MoveRequest,
    NewGameRequest,
    PromotionRequest,
    SelectSquareRequest,
)
from src.chess.actions import (
    Action,
    CancelPromotion,
    CompletePromotion,
    MakeMove,
    RedoMove,
    ResetGame,
    SelectSquare,
    UndoMove,
)
from src.chess.fen import state_from_fen
from src.chess.game import GameState, dispatch, initial_state
from src.chess.square import Square
from src.core.exceptions import InvalidRequestError

logger = logging.getLogger(__name__)


class ChessService:
    """
    Holds a single game and exposes it through named entry points.
    ----

    Every entry point dispatches one action to the reducer, swaps in the resulting state and returns a snapshot of it.
    """

    def __init__(self, state: Optional[GameState] = None) -> None:
        self.state = state if state is not None else initial_state()

    # --- ENTRY POINTS ---
    def new_game(self, request: Optional[NewGameRequest] = None) -> GameStateResponse:
        """Start over from the classical set-up, or from a FEN position."""
        if request is not None and request.fen is not None:
            self.state = state_from_fen(request.fen)
            logger.debug("New game from FEN %s", request.fen)
        else:
            self.state = initial_state()
            logger.debug("New game from the starting position")
        return self.snapshot()

    def select_square(self, request: SelectSquareRequest) -> GameStateResponse:
        return self._dispatch(SelectSquare(Square.from_algebraic(request.square)))

    def make_move(self, request: MoveRequest) -> GameStateResponse:
        """
        A drag-and-drop: select the piece first (the reducer only moves the selected piece), then move it.

        The drop is ignored if the dragged piece is not yours or the destination is not legal.
        """
        from_square = Square.from_algebraic(request.from_square)
        to_square = Square.from_algebraic(request.to_square)
        dragged = self.state.board.piece(from_square)
        if dragged is None or dragged.color != self.state.current_player:
            logger.debug("Ignoring drop from %s: no piece of the player to move", from_square)
            return self.snapshot()
        if self.state.selected_square != from_square:
            self._dispatch(SelectSquare(from_square))
        return self._dispatch(MakeMove(from_square, to_square))

    def complete_promotion(self, request: PromotionRequest) -> GameStateResponse:
        return self._dispatch(CompletePromotion(request.piece_type))

    def cancel_promotion(self) -> GameStateResponse:
        return self._dispatch(CancelPromotion())

    def undo(self) -> GameStateResponse:
        return self._dispatch(UndoMove())

    def redo(self) -> GameStateResponse:
        return self._dispatch(RedoMove())

    def reset(self) -> GameStateResponse:
        return self._dispatch(ResetGame())

    def snapshot(self) -> GameStateResponse:
        return GameStateResponse.from_state(self.state)

    # --- RAW INPUT ---
    def click(self, square: str) -> GameStateResponse:
        """Click with a raw square name. Malformed input is logged and ignored."""
        try:
            request = SelectSquareRequest(square=square)
        except InvalidRequestError as error:
            logger.warning("Ignoring click: %s", error)
            return self.snapshot()
        return self.select_square(request)

    def drop(self, from_square: str, to_square: str) -> GameStateResponse:
        """Drag-and-drop with raw square names. Malformed input is logged and ignored."""
        try:
            request = MoveRequest(from_square=from_square, to_square=to_square)
        except InvalidRequestError as error:
            logger.warning("Ignoring drop: %s", error)
            return self.snapshot()
        return self.make_move(request)

    # -- Internal helpers --
    def _dispatch(self, action: Action) -> GameStateResponse:
        previous = self.state
        self.state = dispatch(self.state, action)
        if self.state is previous:
            logger.debug("Action %r left the game unchanged", action)
        else:
            logger.debug(
                "Action %r applied, %s to move (%s)",
                action,
                self.state.current_player,
                self.state.game_status,
            )
        return self.snapshot()
