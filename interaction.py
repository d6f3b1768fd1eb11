"""Mode-driven input handling.

`update(state, action, ch)` is the single entry point for input. Exactly one
mode is active; each mode has its own handler returning the next state plus
a list of effects for the orchestrator to carry out (saving, quitting, status
messages). The table, cursor and search results live in the component
objects the state refers to; mode bookkeeping is replaced, never mutated.
"""

import logging
from dataclasses import dataclass, field, replace
from enum import Enum

from filter_engine import FilterEngine, QueryError
from grid_store import GridStore
from key_bindings import Action
from line_input import LineInput
from navigation import NavigationController, NavigationError
from search_engine import SearchEngine


logger = logging.getLogger(__name__)


class Mode(Enum):
    NORMAL = "normal"
    EDITING = "editing"
    GOTO = "goto"
    SEARCHING = "searching"
    FILTERING = "filtering"
    SAVE_PROMPT = "save_prompt"
    SAVE_FILTERED_PROMPT = "save_filtered_prompt"


# ---------- effects ----------
@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class Suspend:
    pass


@dataclass(frozen=True)
class SaveSource:
    pass


@dataclass(frozen=True)
class SaveFiltered:
    path: str


@dataclass(frozen=True)
class ShowStatus:
    message: str
    seconds: float = 3


@dataclass(frozen=True)
class InteractionState:
    store: GridStore
    nav: NavigationController
    filters: FilterEngine
    search: SearchEngine
    mode: Mode = Mode.NORMAL
    goto_step: int = 0
    search_step: int = 0
    error: str = ""
    show_help: bool = False
    inputs: dict = field(default_factory=dict)

    def get_input(self, name: str) -> LineInput:
        return self.inputs[name]

    @property
    def focused_input(self) -> LineInput | None:
        if self.mode is Mode.EDITING:
            return self.inputs.get("edit")
        if self.mode is Mode.GOTO:
            return self.inputs.get("row" if self.goto_step == 0 else "col")
        if self.mode is Mode.SEARCHING:
            return self.inputs.get(SEARCH_FIELDS[self.search_step])
        if self.mode is Mode.FILTERING:
            return self.inputs.get("filter")
        if self.mode is Mode.SAVE_FILTERED_PROMPT:
            return self.inputs.get("save_as")
        return None


SEARCH_FIELDS = ("term", "search_row", "search_col")

FILTER_PLACEHOLDER = 'SELECT col1,col2 WHERE col3 == "value"'


def new_state(store: GridStore, height: int = 24, width: int = 80) -> InteractionState:
    return InteractionState(
        store=store,
        nav=NavigationController(store, height=height, width=width),
        filters=FilterEngine(store),
        search=SearchEngine(),
    )


def _to_normal(state: InteractionState) -> InteractionState:
    return replace(
        state,
        mode=Mode.NORMAL,
        goto_step=0,
        search_step=0,
        error="",
        inputs={},
    )


# ---------- per-mode handlers ----------
def _handle_normal(state, action, ch):
    nav = state.nav
    table = state.store.active

    if action is Action.QUIT:
        if state.store.is_filtered:
            inputs = {
                "save_as": LineInput(
                    placeholder="Enter filename to save filtered CSV (or press Esc to cancel)"
                )
            }
            return replace(state, mode=Mode.SAVE_FILTERED_PROMPT, inputs=inputs), []
        if state.store.has_changes:
            return replace(state, mode=Mode.SAVE_PROMPT), []
        return state, [Quit()]

    if action is Action.SUSPEND:
        return state, [Suspend()]

    if action is Action.HELP:
        return replace(state, show_help=not state.show_help), []

    if action is Action.EDIT:
        value = table.cell(nav.cursor_row, nav.cursor_col)
        if value is None:
            return state, []
        return replace(state, mode=Mode.EDITING, inputs={"edit": LineInput(value)}), []

    if action is Action.GOTO:
        inputs = {
            "row": LineInput(placeholder=f"Enter row number (1-{table.row_count})"),
        }
        return replace(state, mode=Mode.GOTO, goto_step=0, error="", inputs=inputs), []

    if action is Action.SEARCH:
        inputs = {
            "term": LineInput(placeholder="Enter search term..."),
            "search_row": LineInput(placeholder=f"Row filter (1-{table.row_count}, optional)"),
            "search_col": LineInput(placeholder=f"Col filter (1-{table.col_count}, optional)"),
        }
        return replace(state, mode=Mode.SEARCHING, search_step=0, inputs=inputs), []

    if action is Action.FILTER:
        inputs = {"filter": LineInput(placeholder=FILTER_PLACEHOLDER)}
        return replace(state, mode=Mode.FILTERING, error="", inputs=inputs), []

    if action is Action.RESET_FILTERS:
        if state.filters.reset():
            state.search.clear()
            nav.reset()
            return state, [ShowStatus("Filters reset")]
        return state, []

    if action in (Action.NEXT_MATCH, Action.PREV_MATCH):
        delta = 1 if action is Action.NEXT_MATCH else -1
        match = state.search.navigate(delta)
        if match is not None:
            nav.jump_to(*match)
        return state, []

    moves = {
        Action.UP: nav.move_up,
        Action.DOWN: nav.move_down,
        Action.LEFT: nav.move_left,
        Action.RIGHT: nav.move_right,
        Action.PAGE_UP: nav.page_up,
        Action.PAGE_DOWN: nav.page_down,
        Action.PAGE_LEFT: nav.page_left,
        Action.PAGE_RIGHT: nav.page_right,
    }
    move = moves.get(action)
    if move is not None:
        move()
    return state, []


def _handle_editing(state, action, ch):
    if action is Action.CONFIRM:
        nav = state.nav
        state.store.edit_cell(nav.cursor_row, nav.cursor_col, state.get_input("edit").value)
        return _to_normal(state), []
    if action is Action.INPUT:
        state.get_input("edit").handle_key(ch)
    return state, []


def _handle_goto(state, action, ch):
    nav = state.nav
    if action is Action.CONFIRM:
        if state.goto_step == 0:
            try:
                nav.validate_goto_row(state.get_input("row").value)
            except NavigationError as e:
                return replace(state, error=str(e)), []
            inputs = dict(state.inputs)
            inputs["col"] = LineInput(
                placeholder=f"Enter column number (1-{state.store.active.col_count})"
            )
            return replace(state, goto_step=1, error="", inputs=inputs), []

        try:
            row_number = nav.validate_goto_row(state.get_input("row").value)
            col_number = nav.validate_goto_col(state.get_input("col").value)
        except NavigationError as e:
            return replace(state, error=str(e)), []
        nav.goto(row_number, col_number)
        return _to_normal(state), []

    if action is Action.INPUT:
        state.focused_input.handle_key(ch)
        if state.error:
            return replace(state, error=""), []
    return state, []


def _handle_searching(state, action, ch):
    if action is Action.CONFIRM:
        match = state.search.search(
            state.store.active,
            state.get_input("term").value,
            state.get_input("search_row").value,
            state.get_input("search_col").value,
        )
        if match is not None:
            state.nav.jump_to(*match)
        return _to_normal(state), []
    if action is Action.TAB:
        return replace(state, search_step=(state.search_step + 1) % 3), []
    if action is Action.INPUT:
        state.focused_input.handle_key(ch)
    return state, []


def _handle_filtering(state, action, ch):
    if action is Action.CONFIRM:
        query = state.get_input("filter").value
        if not query.strip():
            return _to_normal(state), []
        try:
            state.filters.apply(query)
        except QueryError as e:
            return replace(state, error=e.message), []
        state.search.clear()
        state.nav.reset()
        count = len(state.filters.history)
        return _to_normal(state), [ShowStatus(f"Filter applied ({count} active)")]
    if action is Action.INPUT:
        if state.get_input("filter").handle_key(ch) and state.error:
            return replace(state, error=""), []
    return state, []


def _handle_save_prompt(state, action, ch):
    if action is not Action.INPUT:
        return state, []
    key = chr(ch) if isinstance(ch, int) and 0 <= ch < 0x110000 else ch
    if key in ("y", "Y"):
        return state, [SaveSource(), Quit()]
    if key in ("n", "N"):
        return state, [Quit()]
    return state, []


def _handle_save_filtered_prompt(state, action, ch):
    if action is Action.CONFIRM:
        path = state.get_input("save_as").value.strip()
        if path:
            return state, [SaveFiltered(path), Quit()]
        return state, [Quit()]
    if action is Action.INPUT:
        state.get_input("save_as").handle_key(ch)
    return state, []


_HANDLERS = {
    Mode.NORMAL: _handle_normal,
    Mode.EDITING: _handle_editing,
    Mode.GOTO: _handle_goto,
    Mode.SEARCHING: _handle_searching,
    Mode.FILTERING: _handle_filtering,
    Mode.SAVE_PROMPT: _handle_save_prompt,
    Mode.SAVE_FILTERED_PROMPT: _handle_save_filtered_prompt,
}


def update(state: InteractionState, action: Action, ch=None):
    """Route one resolved action; returns (next_state, effects)."""
    if action is None:
        return state, []
    if state.mode is not Mode.NORMAL and action is Action.CANCEL:
        logger.debug("Cancelled %s", state.mode.value)
        return _to_normal(state), []
    return _HANDLERS[state.mode](state, action, ch)


def resize(state: InteractionState, height: int, width: int) -> InteractionState:
    state.nav.resize(height, width)
    return state
