import unittest

import layout_engine
from grid_pane import EMPTY_MESSAGE, GridPane, border_line, fit_cell
from grid_store import Table
from theme import Theme


class DummyWin:
    def __init__(self, h=24, w=120):
        self._h = h
        self._w = w
        self.calls = []

    def getmaxyx(self):
        return self._h, self._w

    def addnstr(self, y, x, text, n, attr=0):
        self.calls.append((y, x, text[:n], attr))

    def lines(self):
        """Rebuild the painted text line by line."""
        rows = {}
        for y, x, text, _ in self.calls:
            line = rows.setdefault(y, [" "] * self._w)
            for i, ch in enumerate(text):
                if x + i < self._w:
                    line[x + i] = ch
        return ["".join(rows[y]).rstrip() for y in sorted(rows)]


def _table():
    return Table.from_rows(
        ["id", "name", "score"],
        [["1", "Ann", "9.5"], ["2", "Bob", "7"], ["3", "Cy"]],
    )


class GridPaneDrawTests(unittest.TestCase):
    def _draw(self, table, window=None, cursor=(0, 0), w=120):
        win = DummyWin(24, w)
        widths = layout_engine.column_widths(table.headers, table.rows)
        if window is None:
            window = layout_engine.compute_window(widths, 0, 0, table.row_count, w, 24)
        used = GridPane(Theme()).draw(win, table, window, widths, *cursor)
        return win, used

    def test_boxed_table_layout(self):
        win, used = self._draw(_table())
        lines = win.lines()
        self.assertEqual(used, 7)
        self.assertEqual(lines[0], border_line([8, 8, 8], "┌", "┬", "┐"))
        self.assertEqual(lines[1], "│ id       │ name     │ score    │")
        self.assertTrue(lines[2].startswith("├"))
        self.assertEqual(lines[3], "│ 1        │ Ann      │ 9.5      │")
        # missing trailing cell renders blank
        self.assertEqual(lines[5], "│ 3        │ Cy       │          │")
        self.assertTrue(lines[6].startswith("└"))

    def test_only_window_columns_are_drawn(self):
        table = _table()
        window = layout_engine.Window(1, 2, 1, 2)
        win, used = self._draw(table, window=window)
        lines = win.lines()
        self.assertEqual(used, 5)
        self.assertEqual(lines[1], "│ name     │")
        self.assertEqual(lines[3], "│ Bob      │")

    def test_cursor_cell_is_highlighted(self):
        theme = Theme()
        win, _ = self._draw(_table(), cursor=(1, 2))
        selected = [c for c in win.calls if c[3] == theme.selected_attr()]
        self.assertEqual(len(selected), 1)
        y, x, text, _ = selected[0]
        self.assertEqual(y, 4)
        self.assertEqual(text.strip(), "7")

    def test_empty_table_message(self):
        table = Table.from_rows(["a"], [])
        win, used = self._draw(table)
        self.assertEqual(used, 1)
        self.assertEqual(win.lines(), [EMPTY_MESSAGE])


class FitCellTests(unittest.TestCase):
    def test_pads_short_text(self):
        self.assertEqual(fit_cell("ab", 4), "ab  ")

    def test_truncates_long_text(self):
        self.assertEqual(fit_cell("abcdefgh", 5), "abcd…")

    def test_zero_width(self):
        self.assertEqual(fit_cell("abc", 0), "")


if __name__ == "__main__":
    unittest.main()
