"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the destinations for each piece type.

Everything here is pseudo-legal: it follows the movement pattern of a piece and the occupancy of the board,
but does not care whether the moving side leaves its own king in check. Legality is decided in `src.chess.rules`.
"""

from typing import Callable, Optional, Protocol

from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import Color, PieceType, opponent


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...
    def locate_color(self, color: Color) -> list[Square]: ...
    def find_king(self, color: Color) -> Optional[Square]: ...


Vector = tuple[int, int]

DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS


def pawn_direction(color: Color) -> int:
    """White moves UP the board (increasing ranks), black moves DOWN"""
    return 1 if color == Color.WHITE else -1


def pawn_starting_rank(color: Color) -> int:
    return 2 if color == Color.WHITE else BOARD_DIMENSIONS[1] - 1


def promotion_rank(color: Color) -> int:
    """The farthest rank as seen from the given side"""
    return BOARD_DIMENSIONS[1] if color == Color.WHITE else 1


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Square]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.

    The first occupied square is included if it holds an opponent's piece (capture), excluded if it is your own.
    """
    player_color = board.piece(square).color  # type: ignore[union-attr]

    moves: list[Square] = []
    for df, dr in directions:
        file = square.file
        rank = square.rank
        while True:
            file += df
            rank += dr
            target_square = Square(file, rank)
            if not target_square.is_within_bounds():
                break

            piece_found = board.piece(target_square)
            if piece_found is not None:
                if piece_found.color != player_color:
                    moves.append(target_square)
                break

            moves.append(target_square)
    return moves


def single_step_move(
    square: Square, board: Board, deltas: list[Vector]
) -> list[Square]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    player_color = board.piece(square).color  # type: ignore[union-attr]

    moves: list[Square] = []
    for df, dr in deltas:
        target_square = Square(square.file + df, square.rank + dr)
        if not target_square.is_within_bounds():
            continue

        piece_found = board.piece(target_square)
        if piece_found is None or piece_found.color != player_color:
            moves.append(target_square)

    return moves


def candidate_pawn_moves(square: Square, board: Board) -> list[Square]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - can move by two from its starting rank if it never moved and both squares are empty.
    - takes diagonally, but only when an opponent's piece stands there.

    NOTE: En passant is added on top of this, see `en_passant_candidates()`
    """
    pawn = board.piece(square)
    assert pawn is not None
    direction = pawn_direction(pawn.color)

    moves: list[Square] = []
    one_forward = Square(square.file, square.rank + direction)
    if one_forward.is_within_bounds() and board.is_empty(one_forward):
        moves.append(one_forward)

        two_forward = Square(square.file, square.rank + 2 * direction)
        on_starting_rank = square.rank == pawn_starting_rank(pawn.color)
        if (
            on_starting_rank
            and not pawn.has_moved
            and two_forward.is_within_bounds()
            and board.is_empty(two_forward)
        ):
            moves.append(two_forward)

    for target_square in pawn_attack_squares(square, board):
        piece_found = board.piece(target_square)
        if piece_found is not None and piece_found.color != pawn.color:
            moves.append(target_square)
    return moves


def candidate_knight_moves(square: Square, board: Board) -> list[Square]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Square]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Square]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Square]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_rook_moves(square, board) + candidate_bishop_moves(square, board)


def candidate_king_moves(square: Square, board: Board) -> list[Square]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled in `src.chess.castling`).
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Square]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def pawn_attack_squares(square: Square, board: Board) -> list[Square]:
    """
    Pawns take diagonally
    ----

    NOTE: A pawn threatens both diagonal squares in front of it, whether or not there is something to take there.
    That is why occupancy is ignored here, unlike in `candidate_pawn_moves()`.
    """
    pawn = board.piece(square)
    assert pawn is not None
    direction = pawn_direction(pawn.color)
    targets = [
        Square(square.file + df, square.rank + direction) for df in (-1, 1)
    ]
    return [target for target in targets if target.is_within_bounds()]


# --- STRATEGY PATTERN: ATTACKING RULES ---
# Only the pawn attacks differently from how it moves. King attacks never include castling.
AttackSquaresFn = Callable[[Square, Board], list[Square]]
ATTACK_RULES: dict[PieceType, AttackSquaresFn] = {
    PieceType.PAWN: pawn_attack_squares,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def is_square_attacked(square: Square, by_color: Color, board: Board) -> bool:
    """Scan every piece of `by_color` and check if the square is in its attack set."""
    for attacker_square in board.locate_color(by_color):
        attacker = board.piece(attacker_square)
        assert attacker is not None
        attack_rule = ATTACK_RULES[attacker.type]
        if square in attack_rule(attacker_square, board):
            return True
    return False


def is_king_in_check(
    board: Board, color: Color, king_square_override: Optional[Square] = None
) -> bool:
    """
    Is the king of `color` attacked?
    ----

    The override lets us ask "would the king be attacked if it stood on that square?" without placing it there.
    (Needed for castling: the king may not pass through an attacked square.)

    A board without a king of the given color is never in check.
    """
    king_square = king_square_override or board.find_king(color)
    if king_square is None:
        return False
    return is_square_attacked(king_square, opponent(color), board)


# -- EN PASSANT MOVES ---
def en_passant_candidates(
    square: Square, board: Board, en_passant_target: Optional[Square]
) -> list[Square]:
    """
    The diagonal step onto the en passant target counts as a capture even though the target square is empty.
    The pawn that actually gets taken stands next to the moving pawn (see `en_passant_capture_square()`).
    """
    if en_passant_target is None:
        return []
    pawn = board.piece(square)
    if pawn is None or pawn.type != PieceType.PAWN:
        return []
    if en_passant_target in pawn_attack_squares(square, board):
        return [en_passant_target]
    return []


def en_passant_capture_square(from_square: Square, to_square: Square) -> Square:
    """The taken pawn stands on the file of the destination, on the rank the capturing pawn came from."""
    return Square(file=to_square.file, rank=from_square.rank)


def is_en_passant_move(
    board: Board,
    from_square: Square,
    to_square: Square,
    en_passant_target: Optional[Square],
) -> bool:
    """A pawn moving diagonally onto the current en passant target."""
    piece = board.piece(from_square)
    if piece is None or piece.type != PieceType.PAWN:
        return False
    is_diagonal = abs(to_square.file - from_square.file) == 1
    return is_diagonal and en_passant_target is not None and to_square == en_passant_target


def compute_en_passant_target(
    piece: Piece, from_square: Square, to_square: Square
) -> Optional[Square]:
    """
    The possible en passant square for the next ply.
    ----

    Only a pawn that just advanced two ranks creates one: the square it skipped over.
    Recomputed from scratch after every move, so it expires after a single ply automatically.
    """
    ranks_moved = abs(to_square.rank - from_square.rank)
    if piece.type != PieceType.PAWN or ranks_moved != 2:
        return None
    return Square(
        file=from_square.file, rank=(from_square.rank + to_square.rank) // 2
    )


def is_pawn_push_to_promotion_square(piece: Piece, to_square: Square) -> bool:
    """check if the move is a pawn move that reaches the far rank"""
    return piece.type == PieceType.PAWN and to_square.rank == promotion_rank(piece.color)
