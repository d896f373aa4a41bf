"""
The game state machine
----

`dispatch(state, action)` is the entrypoint into the domain layer for whatever drives the game (the service layer, a UI).
It is a reducer: every call returns a brand-new GameState and never touches the one it received.

It is responsible for orchestrating all the rules required to play a ply:
1. asks the oracle (`src.chess.rules`) for the legal destinations of the selected piece
2. on a legal destination, moves the piece (+ castling rook / en passant capture / promotion)
3. derives the new castling rights and en passant target
4. asks the oracle for the status of the opponent
5. records the move (with the SAN string and the snapshots undo needs)

Invalid actions (illegal destination, nothing to undo, no pending promotion, ...) return the state unchanged.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional

from src.chess.actions import (
    Action,
    CancelPromotion,
    CompletePromotion,
    MakeMove,
    RedoMove,
    RequestPromotion,
    ResetGame,
    SelectSquare,
    SetValidMoves,
    UndoMove,
    UpdateGameStatus,
)
from src.chess.board import Board
from src.chess.castling import (
    CastlingRights,
    apply_castling_rook_move,
    is_castling_move,
    undo_castling_rook_move,
    update_castling_rights,
)
from src.chess.history import Move
from src.chess.moves import (
    compute_en_passant_target,
    en_passant_capture_square,
    is_en_passant_move,
    is_pawn_push_to_promotion_square,
)
from src.chess.notation import generate_algebraic_notation
from src.chess.pieces import PROMOTION_OPTIONS, Piece
from src.chess.rules import compute_game_status, get_valid_moves, is_move_legal
from src.chess.square import Square
from src.core.shared_types import Color, GameStatus, PieceType, opponent

IN_CHECK_STATUSES = (GameStatus.CHECK, GameStatus.CHECKMATE)


@dataclass(frozen=True)
class PendingPromotion:
    """A pawn reached the far rank and we are waiting for the piece choice. The board is untouched meanwhile."""

    from_square: Square
    to_square: Square
    color: Color


@dataclass(frozen=True)
class GameState:
    board: Board
    current_player: Color = Color.WHITE
    move_history: tuple[Move, ...] = ()
    redo_history: tuple[Move, ...] = ()
    game_status: GameStatus = GameStatus.ACTIVE
    selected_square: Optional[Square] = None
    valid_moves: tuple[Square, ...] = ()
    is_in_check: bool = False
    castling_rights: CastlingRights = field(default_factory=CastlingRights.all)
    en_passant_target: Optional[Square] = None
    pending_promotion: Optional[PendingPromotion] = None
    # FEN move counters of the position the game started from
    starting_half_move_clock: int = 0
    starting_full_move_number: int = 1

    @property
    def last_move(self) -> Optional[Move]:
        return self.move_history[-1] if self.move_history else None

    @property
    def is_over(self) -> bool:
        return self.game_status in (GameStatus.CHECKMATE, GameStatus.STALEMATE)


def initial_state() -> GameState:
    """A fresh game in the classical starting position. A new value on every call."""
    return GameState(board=Board.starting_position())


def create_state(
    board: Board,
    current_player: Color = Color.WHITE,
    castling_rights: Optional[CastlingRights] = None,
    en_passant_target: Optional[Square] = None,
    starting_half_move_clock: int = 0,
    starting_full_move_number: int = 1,
) -> GameState:
    """Start from a custom position (tests, puzzles, FEN import). Status and check flag are computed, not trusted."""
    rights = castling_rights if castling_rights is not None else CastlingRights.all()
    status = compute_game_status(board, current_player, rights, en_passant_target)
    return GameState(
        board=board,
        current_player=current_player,
        game_status=status,
        is_in_check=status in IN_CHECK_STATUSES,
        castling_rights=rights,
        en_passant_target=en_passant_target,
        starting_half_move_clock=starting_half_move_clock,
        starting_full_move_number=starting_full_move_number,
    )


def dispatch(state: GameState, action: Action) -> GameState:
    """Apply a single action. Unknown actions leave the state as it is."""
    handler = ACTION_HANDLERS.get(type(action))
    if handler is None:
        return state
    return handler(state, action)


# --- ACTION HANDLERS ---
def _select_square(state: GameState, action: SelectSquare) -> GameState:
    """
    Clicking on a square
    ----

    1. a legal destination of the current selection --> make the move
    2. one of your own pieces --> select it and compute its legal destinations
    3. anything else --> drop the selection
    """
    if state.pending_promotion is not None:
        return state

    square = action.square
    if state.selected_square is not None and square in state.valid_moves:
        return _play_move(state, state.selected_square, square)

    piece = state.board.piece(square)
    if piece is not None and piece.color == state.current_player:
        valid_moves = get_valid_moves(
            state.board,
            square,
            piece.color,
            state.castling_rights,
            state.en_passant_target,
        )
        return replace(state, selected_square=square, valid_moves=tuple(valid_moves))

    return replace(state, selected_square=None, valid_moves=())


def _make_move(state: GameState, action: MakeMove) -> GameState:
    """Only the selected piece may move, and only to one of the destinations computed when it was selected."""
    if state.pending_promotion is not None:
        return state

    piece = state.board.piece(action.from_square)
    if piece is None or piece.color != state.current_player:
        return state
    if state.selected_square != action.from_square:
        return state
    if action.to_square not in state.valid_moves:
        return state

    return _play_move(state, action.from_square, action.to_square)


def _request_promotion(state: GameState, action: RequestPromotion) -> GameState:
    return replace(
        state,
        pending_promotion=PendingPromotion(
            action.from_square, action.to_square, action.color
        ),
    )


def _complete_promotion(state: GameState, action: CompletePromotion) -> GameState:
    """Finish the pending pawn move, putting the chosen piece on the far rank."""
    pending = state.pending_promotion
    if pending is None:
        return state
    if action.piece_type not in PROMOTION_OPTIONS:
        return state

    pawn = state.board.piece(pending.from_square)
    is_promoting_pawn = (
        pawn is not None
        and pawn.type == PieceType.PAWN
        and pawn.color == pending.color == state.current_player
        and is_pawn_push_to_promotion_square(pawn, pending.to_square)
    )
    if not is_promoting_pawn or not is_move_legal(
        state.board,
        pending.from_square,
        pending.to_square,
        state.current_player,
        state.castling_rights,
        state.en_passant_target,
    ):
        return _clear_selection(replace(state, pending_promotion=None))

    return _commit_move(
        state, pending.from_square, pending.to_square, promotion=action.piece_type
    )


def _cancel_promotion(state: GameState, action: CancelPromotion) -> GameState:
    return _clear_selection(replace(state, pending_promotion=None))


def _undo_move(state: GameState, action: UndoMove) -> GameState:
    """
    Take back the last move using the snapshots stored in its record
    ----

    1. mover back on its origin square with its old has_moved
    2. captured piece back (on the destination, or next to it for en passant) with its old has_moved
    3. castling: rook back in its corner
    4. castling rights / en passant target restored verbatim
    5. status recomputed for the player that is to move again
    """
    if not state.move_history:
        return state

    last_move = state.move_history[-1]
    board = state.board.place_piece(
        last_move.piece.with_has_moved(last_move.prev_has_moved),
        last_move.from_square,
    )

    restored_capture = _restore_captured(last_move)
    if last_move.is_en_passant and last_move.en_passant_capture_square is not None:
        board = board.remove_piece(last_move.to_square).place_piece(
            restored_capture, last_move.en_passant_capture_square
        )
    else:
        board = board.place_piece(restored_capture, last_move.to_square)

    if is_castling_move(last_move.piece, last_move.from_square, last_move.to_square):
        board = undo_castling_rook_move(
            board, last_move.piece.color, last_move.from_square, last_move.to_square
        )

    player_to_move = opponent(state.current_player)
    status = compute_game_status(
        board,
        player_to_move,
        last_move.prev_castling_rights,
        last_move.prev_en_passant_target,
    )
    return replace(
        state,
        board=board,
        current_player=player_to_move,
        move_history=state.move_history[:-1],
        redo_history=state.redo_history + (last_move,),
        game_status=status,
        is_in_check=status in IN_CHECK_STATUSES,
        selected_square=None,
        valid_moves=(),
        castling_rights=last_move.prev_castling_rights,
        en_passant_target=last_move.prev_en_passant_target,
        pending_promotion=None,
    )


def _redo_move(state: GameState, action: RedoMove) -> GameState:
    """
    Play the last undone move again.

    Moves forward, so castling rights and en passant target are derived from the move itself (like a fresh move),
    not restored from a snapshot. The record (SAN, timestamp) is reused as it is.
    """
    if not state.redo_history:
        return state

    move = state.redo_history[-1]
    board = _apply_to_board(
        state.board,
        move.piece,
        move.from_square,
        move.to_square,
        capture_square=move.en_passant_capture_square if move.is_en_passant else None,
        promotion=move.promotion,
    )
    en_passant_target = compute_en_passant_target(
        move.piece, move.from_square, move.to_square
    )
    castling_rights = update_castling_rights(
        state.castling_rights,
        move.piece,
        move.from_square,
        move.to_square,
        move.captured,
    )

    next_player = opponent(state.current_player)
    status = compute_game_status(board, next_player, castling_rights, en_passant_target)
    return replace(
        state,
        board=board,
        current_player=next_player,
        move_history=state.move_history + (move,),
        redo_history=state.redo_history[:-1],
        game_status=status,
        is_in_check=status in IN_CHECK_STATUSES,
        selected_square=None,
        valid_moves=(),
        castling_rights=castling_rights,
        en_passant_target=en_passant_target,
        pending_promotion=None,
    )


def _reset_game(state: GameState, action: ResetGame) -> GameState:
    return initial_state()


def _set_valid_moves(state: GameState, action: SetValidMoves) -> GameState:
    return replace(state, valid_moves=tuple(action.moves))


def _update_game_status(state: GameState, action: UpdateGameStatus) -> GameState:
    return replace(state, game_status=action.status)


# --- MOVE COMMIT HELPERS ---
def _play_move(state: GameState, from_square: Square, to_square: Square) -> GameState:
    """A pawn reaching the far rank first needs a piece choice. Everything else is committed right away."""
    piece = state.board.piece(from_square)
    assert piece is not None
    if is_pawn_push_to_promotion_square(piece, to_square):
        return replace(
            state,
            pending_promotion=PendingPromotion(from_square, to_square, piece.color),
            selected_square=from_square,
        )
    return _commit_move(state, from_square, to_square)


def _commit_move(
    state: GameState,
    from_square: Square,
    to_square: Square,
    promotion: Optional[PieceType] = None,
) -> GameState:
    """
    Make the move on a new board and build the next state.

    NOTE: the SAN string is generated with the board BEFORE the move, but with the status AFTER it.
    """
    board = state.board
    piece = board.piece(from_square)
    assert piece is not None

    captured = board.piece(to_square)
    is_en_passant = is_en_passant_move(
        board, from_square, to_square, state.en_passant_target
    )
    capture_square: Optional[Square] = None
    if is_en_passant:
        capture_square = en_passant_capture_square(from_square, to_square)
        captured = board.piece(capture_square)

    new_board = _apply_to_board(
        board, piece, from_square, to_square, capture_square, promotion
    )
    en_passant_target = compute_en_passant_target(piece, from_square, to_square)
    castling_rights = update_castling_rights(
        state.castling_rights, piece, from_square, to_square, captured
    )

    next_player = opponent(state.current_player)
    status = compute_game_status(
        new_board, next_player, castling_rights, en_passant_target
    )

    move = Move(
        piece=piece,
        from_square=from_square,
        to_square=to_square,
        captured=captured,
        prev_has_moved=piece.has_moved,
        prev_captured_has_moved=captured.has_moved if captured else None,
        prev_castling_rights=state.castling_rights,
        prev_en_passant_target=state.en_passant_target,
        is_en_passant=is_en_passant,
        en_passant_capture_square=capture_square,
        promotion=promotion,
    )
    move = replace(move, notation=generate_algebraic_notation(board, move, status))

    return replace(
        state,
        board=new_board,
        current_player=next_player,
        move_history=state.move_history + (move,),
        # a new move invalidates the undone future
        redo_history=(),
        game_status=status,
        is_in_check=status in IN_CHECK_STATUSES,
        selected_square=None,
        valid_moves=(),
        castling_rights=castling_rights,
        en_passant_target=en_passant_target,
        pending_promotion=None,
    )


def _apply_to_board(
    board: Board,
    piece: Piece,
    from_square: Square,
    to_square: Square,
    capture_square: Optional[Square] = None,
    promotion: Optional[PieceType] = None,
) -> Board:
    """
    Board update for a move (shared by a fresh move and a redo)
    ---

    1. en passant: remove the taken pawn from `capture_square`
    2. relocate the piece (or put the promoted piece on the destination), marked as moved
    3. castling: move the rook as well
    """
    if capture_square is not None:
        board = board.remove_piece(capture_square)

    placed = piece.promote_to(promotion) if promotion else piece.moved()
    board = board.remove_piece(from_square).place_piece(placed, to_square)

    if is_castling_move(piece, from_square, to_square):
        board = apply_castling_rook_move(board, piece.color, from_square, to_square)
    return board


def _restore_captured(move: Move) -> Optional[Piece]:
    if move.captured is None:
        return None
    if move.prev_captured_has_moved is None:
        return move.captured
    return move.captured.with_has_moved(move.prev_captured_has_moved)


def _clear_selection(state: GameState) -> GameState:
    return replace(state, selected_square=None, valid_moves=())


# --- STRATEGY PATTERN: ACTION HANDLERS ---
ActionHandler = Callable[[GameState, Any], GameState]
ACTION_HANDLERS: dict[type, ActionHandler] = {
    SelectSquare: _select_square,
    MakeMove: _make_move,
    RequestPromotion: _request_promotion,
    CompletePromotion: _complete_promotion,
    CancelPromotion: _cancel_promotion,
    UndoMove: _undo_move,
    RedoMove: _redo_move,
    ResetGame: _reset_game,
    SetValidMoves: _set_valid_moves,
    UpdateGameStatus: _update_game_status,
}
