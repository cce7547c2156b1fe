from board_logic import Board, LINES


def fill(board, moves):
    for row, col, seat in moves:
        ok, _ = board.place(row, col, seat, f"{seat}-{row}{col}")
        assert ok


def test_empty_board_has_no_outcome():
    assert Board().evaluate() is None


def test_place_rejects_out_of_range_and_occupied():
    board = Board()
    assert board.place(3, 0, "seat1", "x") == (False, "Invalid position")
    assert board.place(0, -1, "seat1", "x") == (False, "Invalid position")
    assert board.place(True, 0, "seat1", "x") == (False, "Invalid position")
    assert board.place(1, 1, "seat1", "x") == (True, None)
    assert board.place(1, 1, "seat2", "y") == (False, "Cell is already occupied")
    assert board.get(1, 1).seat == "seat1"


def test_row_win_reports_cells_in_order():
    board = Board()
    fill(board, [(1, 0, "seat2"), (1, 1, "seat2"), (1, 2, "seat2"), (0, 0, "seat1")])
    outcome = board.evaluate()
    assert outcome.winner == "seat2"
    assert outcome.winning_cells == [(1, 0), (1, 1), (1, 2)]
    assert outcome.to_dict() == {"winner": "seat2", "winningCells": [[1, 0], [1, 1], [1, 2]]}


def test_diagonals():
    board = Board()
    fill(board, [(0, 2, "seat1"), (1, 1, "seat1"), (2, 0, "seat1")])
    assert board.evaluate().winning_cells == [(0, 2), (1, 1), (2, 0)]

    board = Board()
    fill(board, [(0, 0, "seat2"), (1, 1, "seat2"), (2, 2, "seat2")])
    assert board.evaluate().winning_cells == [(0, 0), (1, 1), (2, 2)]


def test_first_line_in_scan_order_wins_ties():
    board = Board()
    # row 0 and column 0 both complete; rows are scanned first
    fill(board, [(0, 0, "seat1"), (0, 1, "seat1"), (0, 2, "seat1"), (1, 0, "seat1"), (2, 0, "seat1")])
    assert board.evaluate().winning_cells == LINES[0]


def test_full_board_without_line_is_draw():
    board = Board()
    fill(board, [
        (0, 0, "seat1"), (0, 1, "seat2"), (0, 2, "seat1"),
        (1, 0, "seat1"), (1, 1, "seat2"), (1, 2, "seat2"),
        (2, 0, "seat2"), (2, 1, "seat1"), (2, 2, "seat1"),
    ])
    outcome = board.evaluate()
    assert outcome.draw
    assert outcome.to_dict() == {"winner": "draw", "winningCells": None}


def test_reset_and_serialisation():
    board = Board()
    board.place(2, 1, "seat2", "Someone")
    assert board.to_list()[2][1] == {"seat": "seat2", "answer": "Someone"}
    board.reset()
    assert board.to_list() == [[None] * 3 for _ in range(3)]
