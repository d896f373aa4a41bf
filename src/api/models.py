"""Requests and Response models"""

from typing import Any, Optional, Self

from pydantic import BaseModel, field_validator, model_validator

from src.chess.fen import is_valid_fen, state_to_fen
from src.chess.game import GameState
from src.chess.notation import format_move_list
from src.chess.pieces import PROMOTION_OPTIONS
from src.chess.square import is_valid_square
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, GameStatus, PieceType

SquareName = str


def _validate_square_name(value: Any) -> str:
    if not isinstance(value, str) or not is_valid_square(value):
        raise InvalidRequestError(f"Cannot interpret {value!r} as a valid square name.")
    return value


# --- REQUEST MODELS ---
class SelectSquareRequest(BaseModel):
    square: SquareName

    @field_validator("square", mode="before")
    @classmethod
    def validate_square(cls, value: Any) -> str:
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    """A drag-and-drop of a piece: a move needs two distinct squares."""

    from_square: SquareName
    to_square: SquareName

    @field_validator(*["from_square", "to_square"], mode="before")
    @classmethod
    def validate_square(cls, value: Any) -> str:
        return _validate_square_name(value)

    @model_validator(mode="after")
    def validate_distinct_squares(self) -> Self:
        if self.from_square == self.to_square:
            raise InvalidRequestError(
                f"A piece cannot move onto its own square: {self.from_square!r}."
            )
        return self


class PromotionRequest(BaseModel):
    piece_type: PieceType

    @field_validator("piece_type", mode="before")
    @classmethod
    def validate_promotion_choice(cls, value: Any) -> Any:
        if value not in PROMOTION_OPTIONS:
            raise InvalidRequestError(
                f"A pawn cannot promote to {value!r}. Choose one of {[str(p) for p in PROMOTION_OPTIONS]}."
            )
        return value


class NewGameRequest(BaseModel):
    fen: Optional[str] = None

    @field_validator("fen")
    @classmethod
    def validate_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        value = value.strip()
        if not is_valid_fen(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a FEN string.")
        return value


# --- RESPONSE MODELS ---
class PieceResponse(BaseModel):
    type: PieceType
    color: Color
    has_moved: bool
    symbol: str


class PendingPromotionResponse(BaseModel):
    from_square: SquareName
    to_square: SquareName
    color: Color


class GameStateResponse(BaseModel):
    """Read-only snapshot of a game, everything a renderer needs."""

    board: dict[SquareName, PieceResponse]
    current_player: Color
    game_status: GameStatus
    is_in_check: bool
    selected_square: Optional[SquareName]
    valid_moves: list[SquareName]
    move_history: list[str]
    move_list: str
    fen: str
    can_undo: bool
    can_redo: bool
    pending_promotion: Optional[PendingPromotionResponse]

    @classmethod
    def from_state(cls, state: GameState) -> Self:
        board = {
            square.to_algebraic(): PieceResponse(
                type=piece.type,
                color=piece.color,
                has_moved=piece.has_moved,
                symbol=piece.symbol,
            )
            for square in state.board.squares()
            if (piece := state.board.piece(square)) is not None
        }

        pending = state.pending_promotion
        pending_response = (
            PendingPromotionResponse(
                from_square=pending.from_square.to_algebraic(),
                to_square=pending.to_square.to_algebraic(),
                color=pending.color,
            )
            if pending is not None
            else None
        )

        return cls(
            board=board,
            current_player=state.current_player,
            game_status=state.game_status,
            is_in_check=state.is_in_check,
            selected_square=(
                state.selected_square.to_algebraic()
                if state.selected_square is not None
                else None
            ),
            valid_moves=[square.to_algebraic() for square in state.valid_moves],
            move_history=[move.notation for move in state.move_history],
            move_list=format_move_list(state.move_history),
            fen=state_to_fen(state),
            can_undo=bool(state.move_history),
            can_redo=bool(state.redo_history),
            pending_promotion=pending_response,
        )
