import logging

import layout_engine
from layout_engine import Window


logger = logging.getLogger(__name__)


class NavigationError(Exception):
    pass


def parse_position(text: str, upper: int, label: str) -> int:
    """Validate a 1-based position typed by the user and return it."""
    message = f"Invalid {label}: valid range 1-{upper}"
    try:
        value = int(text.strip())
    except ValueError:
        raise NavigationError(message) from None
    if value < 1 or value > upper:
        raise NavigationError(message)
    return value


class NavigationController:
    def __init__(self, store, height: int = 24, width: int = 80):
        self.store = store
        self.height = height
        self.width = width

        self.cursor_row = 0
        self.cursor_col = 0
        self.viewport_x = 0
        self.viewport_y = 0

    @property
    def table(self):
        return self.store.active

    # ---------- layout ----------
    def column_widths(self):
        return layout_engine.column_widths(self.table.headers, self.table.rows)

    def window(self, widths=None) -> Window:
        if widths is None:
            widths = self.column_widths()
        return layout_engine.compute_window(
            widths,
            self.viewport_x,
            self.viewport_y,
            self.table.row_count,
            self.width,
            self.height,
        )

    def reconcile(self, widths=None):
        self._clamp_cursor()
        if widths is None:
            widths = self.column_widths()
        self.viewport_x, self.viewport_y = layout_engine.reconcile_viewport(
            self.cursor_row,
            self.cursor_col,
            self.viewport_x,
            self.viewport_y,
            widths,
            self.width,
            self.height,
        )

    def resize(self, height: int, width: int):
        self.height = height
        self.width = width
        self.reconcile()

    def reset(self):
        self.cursor_row = 0
        self.cursor_col = 0
        self.viewport_x = 0
        self.viewport_y = 0

    def _clamp_cursor(self):
        rows = self.table.row_count
        cols = self.table.col_count
        self.cursor_row = max(0, min(self.cursor_row, rows - 1))
        self.cursor_col = max(0, min(self.cursor_col, cols - 1))

    # ---------- single steps ----------
    def move_up(self):
        if self.cursor_row > 0:
            self.cursor_row -= 1
            self.reconcile()

    def move_down(self):
        if self.cursor_row < self.table.row_count - 1:
            self.cursor_row += 1
            self.reconcile()

    def move_left(self):
        if self.cursor_col > 0:
            self.cursor_col -= 1
            self.reconcile()

    def move_right(self):
        if self.cursor_col < self.table.col_count - 1:
            self.cursor_col += 1
            self.reconcile()

    # ---------- pages ----------
    def page_up(self):
        step = layout_engine.max_visible_rows(self.height)
        self.cursor_row = max(0, self.cursor_row - step)
        self.reconcile()

    def page_down(self):
        step = layout_engine.max_visible_rows(self.height)
        self.cursor_row = min(self.table.row_count - 1, self.cursor_row + step)
        self.reconcile()

    def _column_step(self, widths) -> int:
        start, end = layout_engine.visible_columns(widths, self.viewport_x, self.width)
        return max(1, end - start)

    def page_left(self):
        widths = self.column_widths()
        self.cursor_col = max(0, self.cursor_col - self._column_step(widths))
        self.reconcile(widths)

    def page_right(self):
        widths = self.column_widths()
        step = self._column_step(widths)
        self.cursor_col = min(self.table.col_count - 1, self.cursor_col + step)
        self.reconcile(widths)

    # ---------- jumps ----------
    def jump_to(self, row: int, col: int):
        self.cursor_row = row
        self.cursor_col = col
        self.reconcile()

    def validate_goto_row(self, text: str) -> int:
        return parse_position(text, self.table.row_count, "row")

    def validate_goto_col(self, text: str) -> int:
        return parse_position(text, self.table.col_count, "column")

    def goto(self, row_number: int, col_number: int):
        logger.debug("Go to row %d, column %d", row_number, col_number)
        self.jump_to(row_number - 1, col_number - 1)
