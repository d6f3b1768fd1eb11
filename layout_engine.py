from dataclasses import dataclass

import numpy as np


MIN_COL_WIDTH = 8
MAX_COL_WIDTH = 20
CELL_PADDING = 2  # one space each side
SEPARATOR_WIDTH = 1
TABLE_BORDER_WIDTH = 2
MARGIN_WIDTH = 4

# top border, header, header rule, bottom border, legend, status, prompt/help
CHROME_LINES = 7


@dataclass(frozen=True)
class Window:
    start_row: int
    end_row: int
    start_col: int
    end_col: int

    @property
    def row_count(self) -> int:
        return self.end_row - self.start_row

    @property
    def col_count(self) -> int:
        return self.end_col - self.start_col


def column_widths(headers, rows) -> np.ndarray:
    widths = np.array([len(h) for h in headers], dtype=np.int64)
    n = len(widths)
    for row in rows:
        for i, cell in enumerate(row[:n]):
            if len(cell) > widths[i]:
                widths[i] = len(cell)
    return np.clip(widths, MIN_COL_WIDTH, MAX_COL_WIDTH)


def available_width(terminal_width: int) -> int:
    return terminal_width - TABLE_BORDER_WIDTH - MARGIN_WIDTH


def visible_columns(widths, viewport_x: int, terminal_width: int) -> tuple[int, int]:
    num_cols = len(widths)
    if num_cols == 0:
        return 0, 0

    start = min(max(viewport_x, 0), num_cols - 1)
    costs = np.asarray(widths[start:], dtype=np.int64) + CELL_PADDING
    costs[1:] += SEPARATOR_WIDTH
    totals = np.cumsum(costs)
    fit = int(np.searchsorted(totals, available_width(terminal_width), side="right"))

    # a column wider than the terminal is still shown on its own
    return start, start + max(1, fit)


def max_visible_rows(terminal_height: int) -> int:
    return max(1, terminal_height - CHROME_LINES)


def visible_rows(viewport_y: int, terminal_height: int, row_count: int) -> tuple[int, int]:
    end = min(viewport_y + max_visible_rows(terminal_height), row_count)
    return viewport_y, max(viewport_y, end)


def used_width(widths, start_col: int, end_col: int) -> int:
    total = TABLE_BORDER_WIDTH
    for i in range(start_col, min(end_col, len(widths))):
        total += int(widths[i]) + CELL_PADDING
        if i > start_col:
            total += SEPARATOR_WIDTH
    return total


def reconcile_viewport(
    cursor_row: int,
    cursor_col: int,
    viewport_x: int,
    viewport_y: int,
    widths,
    terminal_width: int,
    terminal_height: int,
) -> tuple[int, int]:
    """Return the (viewport_x, viewport_y) that keeps the cursor on screen.

    Leaves offsets alone when the cursor is already visible, so calling it
    again with its own result changes nothing.
    """
    num_cols = len(widths)
    if num_cols > 0:
        start, end = visible_columns(widths, viewport_x, terminal_width)
        if cursor_col < start:
            viewport_x = cursor_col
        elif cursor_col >= end:
            viewport_x = start
            while viewport_x < cursor_col:
                viewport_x += 1
                if cursor_col < visible_columns(widths, viewport_x, terminal_width)[1]:
                    break
        viewport_x = min(max(viewport_x, 0), num_cols - 1)
    else:
        viewport_x = 0

    max_rows = max_visible_rows(terminal_height)
    if cursor_row < viewport_y:
        viewport_y = cursor_row
    elif cursor_row >= viewport_y + max_rows:
        viewport_y = max(0, cursor_row - max_rows + 1)
    viewport_y = max(0, viewport_y)

    return viewport_x, viewport_y


def compute_window(
    widths,
    viewport_x: int,
    viewport_y: int,
    row_count: int,
    terminal_width: int,
    terminal_height: int,
) -> Window:
    start_col, end_col = visible_columns(widths, viewport_x, terminal_width)
    start_row, end_row = visible_rows(viewport_y, terminal_height, row_count)
    return Window(start_row, end_row, start_col, end_col)
