# board_logic.py
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from models import Cell, SeatRole

BOARD_SIZE = 3

# Scan order is the tie-break: rows, columns, main diagonal, anti-diagonal
LINES: List[List[Tuple[int, int]]] = (
    [[(r, c) for c in range(BOARD_SIZE)] for r in range(BOARD_SIZE)]
    + [[(r, c) for r in range(BOARD_SIZE)] for c in range(BOARD_SIZE)]
    + [[(i, i) for i in range(BOARD_SIZE)]]
    + [[(i, BOARD_SIZE - 1 - i) for i in range(BOARD_SIZE)]]
)


@dataclass
class Outcome:
    winner: Optional[SeatRole] = None
    winning_cells: List[Tuple[int, int]] = field(default_factory=list)
    draw: bool = False

    def to_dict(self):
        return {
            "winner": "draw" if self.draw else self.winner,
            "winningCells": [list(c) for c in self.winning_cells] if self.winning_cells else None,
        }


class Board:
    def __init__(self):
        self.cells: List[List[Optional[Cell]]] = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]

    @staticmethod
    def in_bounds(row, col) -> bool:
        return (
            isinstance(row, int) and isinstance(col, int)
            and not isinstance(row, bool) and not isinstance(col, bool)
            and 0 <= row < BOARD_SIZE and 0 <= col < BOARD_SIZE
        )

    def get(self, row: int, col: int) -> Optional[Cell]:
        return self.cells[row][col]

    def is_empty(self, row: int, col: int) -> bool:
        return self.cells[row][col] is None

    def place(self, row: int, col: int, seat: SeatRole, answer: str):
        if not self.in_bounds(row, col):
            return False, "Invalid position"
        if self.cells[row][col] is not None:
            return False, "Cell is already occupied"
        self.cells[row][col] = Cell(seat=seat, answer=answer)
        return True, None

    def is_full(self) -> bool:
        return all(cell is not None for line in self.cells for cell in line)

    def evaluate(self) -> Optional[Outcome]:
        """Winning line in scan order, a draw on a full board, or None."""
        for line in LINES:
            first = self.cells[line[0][0]][line[0][1]]
            if first is None:
                continue
            if all(
                self.cells[r][c] is not None and self.cells[r][c].seat == first.seat
                for r, c in line
            ):
                return Outcome(winner=first.seat, winning_cells=list(line))

        if self.is_full():
            return Outcome(draw=True)
        return None

    def reset(self):
        self.cells = [[None] * BOARD_SIZE for _ in range(BOARD_SIZE)]

    def to_list(self):
        return [[cell.to_dict() if cell else None for cell in line] for line in self.cells]
