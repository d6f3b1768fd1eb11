import logging
import re
from dataclasses import dataclass, field
from enum import IntEnum


logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


class DataType(IntEnum):
    STRING = 0
    INT = 1
    FLOAT = 2
    BOOL = 3
    EMPTY = 4

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def config_key(self) -> str:
        return "DataType" + self.name.capitalize()


_LABELS = {
    DataType.STRING: "str",
    DataType.INT: "int",
    DataType.FLOAT: "float",
    DataType.BOOL: "bool",
    DataType.EMPTY: "empty",
}


def parse_float(text: str) -> float | None:
    """Parse a whole string as a float, or return None.

    Surrounding whitespace and digit-group underscores are rejected, so
    " 5" and "1_000" are not numbers here even though float() accepts them.
    """
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


def _is_int(text: str) -> bool:
    if not _INT_RE.fullmatch(text):
        return False
    return _INT64_MIN <= int(text) <= _INT64_MAX


def detect_data_type(value: str) -> DataType:
    value = value.strip()
    if value == "":
        return DataType.EMPTY
    lowered = value.lower()
    if lowered == "true" or lowered == "false":
        return DataType.BOOL
    if _is_int(value):
        return DataType.INT
    if parse_float(value) is not None:
        return DataType.FLOAT
    return DataType.STRING


def analyze_column_types(rows, col_count: int) -> list[DataType]:
    counts = [dict.fromkeys(DataType, 0) for _ in range(col_count)]
    for row in rows:
        for i, cell in enumerate(row[:col_count]):
            counts[i][detect_data_type(cell)] += 1

    types = []
    for col_counts in counts:
        dominant = DataType.STRING
        best = 0
        # enum order decides ties
        for data_type in DataType:
            if data_type is DataType.EMPTY:
                continue
            if col_counts[data_type] > best:
                best = col_counts[data_type]
                dominant = data_type
        types.append(dominant)
    return types


@dataclass
class Table:
    headers: list[str]
    rows: list[list[str]]
    column_types: list[DataType] = field(default_factory=list)

    @classmethod
    def from_rows(cls, headers, rows) -> "Table":
        headers = [str(h) for h in headers]
        rows = [[str(c) for c in row] for row in rows]
        return cls(headers, rows, analyze_column_types(rows, len(headers)))

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def col_count(self) -> int:
        return len(self.headers)

    def is_empty(self) -> bool:
        return not self.rows or not self.headers

    def cell(self, row: int, col: int) -> str | None:
        if row < 0 or row >= len(self.rows):
            return None
        cells = self.rows[row]
        if col < 0 or col >= len(cells) or col >= len(self.headers):
            return None
        return cells[col]

    def copy(self) -> "Table":
        return Table(
            list(self.headers),
            [list(row) for row in self.rows],
            list(self.column_types),
        )


class GridStore:
    """Holds the master table (what gets saved) and the active view.

    While unfiltered the two tables carry the same content; a filter swaps
    in a projected active table and leaves the master untouched.
    """

    def __init__(self, table: Table):
        self.master = table
        self.active = table.copy()
        self.is_filtered = False
        self.has_changes = False

    @classmethod
    def load(cls, headers, rows) -> "GridStore":
        table = Table.from_rows(headers, rows)
        logger.info(
            "Loaded table with %d rows and %d columns",
            table.row_count,
            table.col_count,
        )
        return cls(table)

    def edit_cell(self, row: int, col: int, value: str) -> bool:
        old = self.active.cell(row, col)
        if old is None or old == value:
            return False

        self.active.rows[row][col] = value
        if not self.is_filtered:
            self.master.rows[row][col] = value
            self.has_changes = True
        return True

    def set_active(self, table: Table, filtered: bool):
        self.active = table
        self.is_filtered = filtered

    def mark_saved(self):
        self.has_changes = False
