import logging


logger = logging.getLogger(__name__)


def parse_position_filter(text: str, count: int) -> int | None:
    """Turn an optional 1-based filter into a 0-based index.

    Anything unusable (blank, non-numeric, out of range) means no filter.
    """
    text = (text or "").strip()
    if not text:
        return None
    try:
        value = int(text)
    except ValueError:
        return None
    if value < 1 or value > count:
        return None
    return value - 1


class SearchEngine:
    def __init__(self):
        self.matches: list[tuple[int, int]] = []
        self.index = 0
        self.has_searched = False

    def clear(self):
        self.matches = []
        self.index = 0
        self.has_searched = False

    @property
    def current(self) -> tuple[int, int] | None:
        if not self.matches:
            return None
        return self.matches[self.index]

    def search(self, table, term: str, row_filter: str = "", col_filter: str = ""):
        """Scan the table row-major and return the first match, if any."""
        self.matches = []
        self.index = 0
        self.has_searched = True
        if not term:
            return None

        needle = term.lower()
        target_row = parse_position_filter(row_filter, table.row_count)
        target_col = parse_position_filter(col_filter, table.col_count)

        for row_idx, row in enumerate(table.rows):
            if target_row is not None and row_idx != target_row:
                continue
            for col_idx, cell in enumerate(row[: table.col_count]):
                if target_col is not None and col_idx != target_col:
                    continue
                if needle in cell.lower():
                    self.matches.append((row_idx, col_idx))

        logger.info("Search for %r found %d matches", term, len(self.matches))
        return self.current

    def navigate(self, delta: int):
        if not self.matches:
            return None
        index = self.index + delta
        if index >= len(self.matches):
            index = 0
        elif index < 0:
            index = len(self.matches) - 1
        self.index = index
        return self.current
