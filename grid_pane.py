import curses

from layout_engine import CELL_PADDING


EMPTY_MESSAGE = "No data to display"


def fit_cell(text: str, width: int) -> str:
    """Pad or cut `text` to exactly `width` characters."""
    if width <= 0:
        return ""
    if len(text) <= width:
        return text.ljust(width)
    if width == 1:
        return text[:1]
    return text[: width - 1] + "…"


def border_line(widths, left: str, mid: str, right: str) -> str:
    return left + mid.join("─" * (w + CELL_PADDING) for w in widths) + right


class GridPane:
    """Paints the boxed table for one layout window.

    The pane draws exactly the rows and columns of the window it is given;
    it never scrolls on its own.
    """

    def __init__(self, theme):
        self.theme = theme

    def _put(self, win, y, x, text, attr=0):
        h, w = win.getmaxyx()
        if y < 0 or y >= h or x >= w:
            return
        try:
            win.addnstr(y, x, text, w - x, attr)
        except curses.error:
            # writing the bottom-right cell moves the cursor off screen
            pass

    def _draw_separated(self, win, y, cells, widths, border_attr):
        x = 0
        self._put(win, y, x, "│", border_attr)
        x += 1
        for (text, attr), width in zip(cells, widths):
            self._put(win, y, x, " " + fit_cell(text, width) + " ", attr)
            x += width + CELL_PADDING
            self._put(win, y, x, "│", border_attr)
            x += 1

    def draw(self, win, table, window, widths, cursor_row, cursor_col) -> int:
        """Draw the table at the top of `win`; returns the number of lines used."""
        if table.row_count == 0:
            self._put(win, 0, 0, EMPTY_MESSAGE)
            return 1

        cols = range(window.start_col, window.end_col)
        col_widths = [int(widths[c]) for c in cols]
        border_attr = self.theme.border_attr()
        header_attr = self.theme.header_attr()

        y = 0
        self._put(win, y, 0, border_line(col_widths, "┌", "┬", "┐"), border_attr)
        y += 1
        header = [(table.headers[c], header_attr) for c in cols]
        self._draw_separated(win, y, header, col_widths, border_attr)
        y += 1
        self._put(win, y, 0, border_line(col_widths, "├", "┼", "┤"), border_attr)
        y += 1

        for display_idx, r in enumerate(range(window.start_row, window.end_row)):
            # the first display row uses the dim shade, then they alternate
            dim = display_idx % 2 == 0
            cells = []
            for c in cols:
                value = table.cell(r, c)
                if r == cursor_row and c == cursor_col:
                    attr = self.theme.selected_attr()
                else:
                    attr = self.theme.cell_attr(table.column_types[c], dim)
                cells.append(("" if value is None else value, attr))
            self._draw_separated(win, y, cells, col_widths, border_attr)
            y += 1

        self._put(win, y, 0, border_line(col_widths, "└", "┴", "┘"), border_attr)
        return y + 1
