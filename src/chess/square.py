"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

from src.core.exceptions import InvalidSquareError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank"""
    num_files, num_ranks = BOARD_DIMENSIONS

    if len(square) != 2:
        return False

    file_char, rank_char = square[0], square[1]
    allowed_file_names = ascii_lowercase[:num_files]
    if file_char not in allowed_file_names:
        return False

    if not (rank_char.isascii() and rank_char.isdigit()):
        return False

    return 1 <= int(rank_char) <= num_ranks


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not is_valid_square(sq):
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square name.")
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    @classmethod
    def from_coordinates(cls, row: int, col: int) -> Square:
        """
        Array coordinates -> square.

        NOTE: row 0 is the TOP of the array, which is the 8th rank. Column 0 is the a-file.
        """
        return cls(file=col + 1, rank=BOARD_DIMENSIONS[1] - row)

    def to_coordinates(self) -> tuple[int, int]:
        """Inverse of `from_coordinates()`: (row, col) with row 0 = 8th rank"""
        return BOARD_DIMENSIONS[1] - self.rank, self.file - 1

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )

    def is_light(self) -> bool:
        """a1 is a dark square, h1 a light one."""
        return (self.file + self.rank) % 2 == 1

    def __str__(self) -> str:
        return self.to_algebraic()
