"""SELECT/WHERE filter queries over the active table.

    SELECT name,score WHERE score > "8" AND name LIKE "an"

Keywords and column names are case-insensitive, conditions are AND-ed, and
literals are always double-quoted. A column name is one or more bare words
taken verbatim from the query, so headers containing spaces can be named.
"""

import logging
from dataclasses import dataclass, field

from grid_store import Table, analyze_column_types, parse_float


logger = logging.getLogger(__name__)

QUERY_FORMAT_HINT = 'invalid query format. Use: SELECT col1,col2 WHERE col3 == "value"'
CONDITION_FORMAT_HINT = 'Use: column == "value"'

OPERATORS = ("==", "!=", ">=", "<=", ">", "<", "LIKE")

WORD = "word"
STRING = "string"
OP = "op"
COMMA = "comma"
STAR = "star"
EOF = "eof"

_SPECIAL = ',"*=!<>'


class QueryError(Exception):
    def __init__(self, message: str, position: int | None = None):
        super().__init__(message)
        self.message = message
        self.position = position


class QuerySyntaxError(QueryError):
    pass


class UnknownColumnError(QueryError):
    def __init__(self, column: str, in_where: bool = False, position: int | None = None):
        if in_where:
            message = f"column '{column}' not found in WHERE clause"
        else:
            message = f"column '{column}' not found"
        super().__init__(message, position)
        self.column = column


@dataclass
class FilterCondition:
    column: str
    operator: str
    value: str
    # position of the column in the headers the query was parsed against
    index: int = -1


@dataclass
class FilterQuery:
    select_columns: list[str] = field(default_factory=list)
    select_indices: list[int] = field(default_factory=list)
    conditions: list[FilterCondition] = field(default_factory=list)


@dataclass
class Token:
    kind: str
    text: str
    start: int
    end: int

    def is_keyword(self, keyword: str) -> bool:
        return self.kind == WORD and self.text.upper() == keyword


def tokenize(query: str) -> list[Token]:
    tokens = []
    i = 0
    n = len(query)
    while i < n:
        ch = query[i]
        if ch.isspace():
            i += 1
            continue
        if ch == ",":
            tokens.append(Token(COMMA, ch, i, i + 1))
            i += 1
            continue
        if ch == "*":
            tokens.append(Token(STAR, ch, i, i + 1))
            i += 1
            continue
        if ch == '"':
            close = query.find('"', i + 1)
            if close == -1:
                raise QuerySyntaxError(
                    f"unterminated string literal. {CONDITION_FORMAT_HINT}", i
                )
            tokens.append(Token(STRING, query[i + 1 : close], i, close + 1))
            i = close + 1
            continue
        if ch in "=!<>":
            two = query[i : i + 2]
            if two in ("==", "!=", ">=", "<="):
                tokens.append(Token(OP, two, i, i + 2))
                i += 2
                continue
            if ch in "<>":
                tokens.append(Token(OP, ch, i, i + 1))
                i += 1
                continue
            raise QuerySyntaxError(
                f"unexpected '{ch}' at position {i + 1}. {CONDITION_FORMAT_HINT}", i
            )

        start = i
        while i < n and not query[i].isspace() and query[i] not in _SPECIAL:
            i += 1
        tokens.append(Token(WORD, query[start:i], start, i))

    tokens.append(Token(EOF, "", n, n))
    return tokens


def _resolve_column(name: str, headers) -> int | None:
    """Index of the first header matching name, ignoring case."""
    lowered = name.lower()
    for i, header in enumerate(headers):
        if header.lower() == lowered:
            return i
    return None


class _Parser:
    def __init__(self, query: str, headers):
        self.query = query
        self.headers = list(headers)
        self.tokens = tokenize(query)
        self.pos = 0

    def _peek(self) -> Token:
        return self.tokens[self.pos]

    def _advance(self) -> Token:
        tok = self.tokens[self.pos]
        if tok.kind != EOF:
            self.pos += 1
        return tok

    def parse(self) -> FilterQuery:
        if not self._peek().is_keyword("SELECT"):
            raise QuerySyntaxError(QUERY_FORMAT_HINT, self._peek().start)
        self._advance()

        indices = self._select_list()
        fq = FilterQuery(
            select_columns=[self.headers[i] for i in indices],
            select_indices=indices,
        )

        if self._peek().is_keyword("WHERE"):
            self._advance()
            fq.conditions = self._where_expr()

        if self._peek().kind != EOF:
            raise QuerySyntaxError(QUERY_FORMAT_HINT, self._peek().start)
        return fq

    def _column_words(self, stop_words) -> tuple[str, int] | None:
        first = self._peek()
        last = None
        while self._peek().kind == WORD and self._peek().text.upper() not in stop_words:
            last = self._advance()
        if last is None:
            return None
        return self.query[first.start : last.end], first.start

    def _select_list(self) -> list[int]:
        if self._peek().kind == STAR:
            self._advance()
            return list(range(len(self.headers)))

        indices = []
        while True:
            found = self._column_words({"WHERE"})
            if found is None:
                raise QuerySyntaxError(QUERY_FORMAT_HINT, self._peek().start)
            name, start = found
            idx = _resolve_column(name, self.headers)
            if idx is None:
                raise UnknownColumnError(name, position=start)
            indices.append(idx)

            if self._peek().kind != COMMA:
                return indices
            self._advance()

    def _where_expr(self) -> list[FilterCondition]:
        conditions = [self._condition()]
        while self._peek().is_keyword("AND"):
            self._advance()
            conditions.append(self._condition())
        return conditions

    def _condition_error(self, start_index: int) -> QuerySyntaxError:
        # quote the condition text up to the next AND (or end of query)
        start = self.tokens[start_index].start
        end = len(self.query)
        for tok in self.tokens[start_index:]:
            if tok.is_keyword("AND") and tok.start > start:
                end = tok.start
                break
        text = self.query[start:end].strip()
        return QuerySyntaxError(
            f"invalid condition format: {text}. {CONDITION_FORMAT_HINT}", start
        )

    def _condition(self) -> FilterCondition:
        start_index = self.pos
        found = self._column_words({"LIKE", "AND"})
        if found is None:
            raise self._condition_error(start_index)
        name, start = found

        tok = self._peek()
        if tok.kind == OP:
            operator = tok.text
        elif tok.is_keyword("LIKE"):
            operator = "LIKE"
        else:
            raise self._condition_error(start_index)
        self._advance()

        if self._peek().kind != STRING:
            raise self._condition_error(start_index)
        value = self._advance().text

        idx = _resolve_column(name, self.headers)
        if idx is None:
            raise UnknownColumnError(name, in_where=True, position=start)
        return FilterCondition(self.headers[idx], operator, value, idx)


def parse_filter_query(query: str, headers) -> FilterQuery:
    query = query.strip()
    if not query:
        raise QuerySyntaxError("empty query", 0)
    return _Parser(query, headers).parse()


def evaluate_condition(cell: str, operator: str, value: str) -> bool:
    if operator == "==":
        return cell.lower() == value.lower()
    if operator == "!=":
        return cell.lower() != value.lower()
    if operator == "LIKE":
        return value.lower() in cell.lower()

    # numeric only when both sides parse, otherwise plain string ordering
    left = parse_float(cell)
    right = parse_float(value)
    if left is None or right is None:
        left, right = cell, value

    if operator == ">":
        return left > right
    if operator == "<":
        return left < right
    if operator == ">=":
        return left >= right
    if operator == "<=":
        return left <= right
    return False


def row_matches(row, conditions) -> bool:
    for condition in conditions:
        col_idx = condition.index
        if col_idx < 0 or col_idx >= len(row):
            return False
        if not evaluate_condition(row[col_idx], condition.operator, condition.value):
            return False
    return True


def filter_table(table: Table, fq: FilterQuery) -> Table:
    indices = fq.select_indices

    rows = []
    for row in table.rows:
        if not row_matches(row, fq.conditions):
            continue
        rows.append([row[i] if i < len(row) else "" for i in indices])

    return Table(list(fq.select_columns), rows, analyze_column_types(rows, len(indices)))


class FilterEngine:
    def __init__(self, store):
        self.store = store
        self.baseline: Table | None = None
        self.history: list[str] = []

    @property
    def is_filtered(self) -> bool:
        return self.store.is_filtered

    def apply(self, query: str) -> Table:
        active = self.store.active
        try:
            fq = parse_filter_query(query, active.headers)
        except QueryError as e:
            logger.info("Rejected filter %r: %s", query, e.message)
            raise

        if not self.store.is_filtered:
            self.baseline = active.copy()

        result = filter_table(active, fq)
        self.store.set_active(result, filtered=True)
        self.history.append(query)
        logger.info(
            "Applied filter %r: %d of %d rows kept",
            query,
            result.row_count,
            active.row_count,
        )
        return result

    def reset(self) -> bool:
        if not self.store.is_filtered or self.baseline is None:
            return False
        self.store.set_active(self.baseline.copy(), filtered=False)
        self.history = []
        logger.info("Filters reset")
        return True
