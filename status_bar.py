import time

from grid_store import DataType
from interaction import SEARCH_FIELDS, Mode


LEGEND_PREFIX = "Legend: "
LEGEND_MARK = "■"

FILTER_HINT = (
    'FILTER MODE - Enter SQL-like query (SELECT col1,col2 WHERE col3 == "value"), '
    "Enter to apply, Esc to cancel"
)
EDIT_HINT = "EDIT MODE - Enter to save, Esc to cancel"
GOTO_ROW_HINT = "GOTO MODE - Enter row number, then press Enter"
GOTO_COL_HINT = "GOTO MODE - Enter column number, then press Enter (Esc to cancel)"
SEARCH_HINT = "SEARCH MODE - Tab to switch fields, Enter to search, Esc to cancel"
SAVE_HINT = "You have unsaved changes. Save to original file? (y/n, Esc to cancel)"
SAVE_FILTERED_HINT = (
    "Enter filename to save filtered data, leave empty to quit without saving, "
    "Esc to cancel"
)


def legend_segments():
    """Legend as (text, data_type) pieces; the mark takes the type color."""
    segments = [(LEGEND_PREFIX, None)]
    for i, data_type in enumerate(DataType):
        if i:
            segments.append((" ", None))
        segments.append((LEGEND_MARK, data_type))
        segments.append((data_type.label, None))
    return segments


def table_status(context) -> str:
    """
    context keys: cursor_row, cursor_col, row_count, col_count, start_col,
                  end_col, used_width, width, has_changes, is_filtered,
                  filter_count
    """
    text = (
        f"Row: {context['cursor_row'] + 1}/{context['row_count']}, "
        f"Col: {context['cursor_col'] + 1}/{context['col_count']} | "
        f"Showing cols {context['start_col'] + 1}-{context['end_col']} | "
        f"Width: {context['used_width']}/{context['width']}"
    )
    if context.get("has_changes"):
        text += " [MODIFIED]"
    if context.get("is_filtered"):
        text += f" [FILTERED: {context.get('filter_count', 0)} filters]"
    return text


def search_status(context) -> str:
    if not context.get("has_searched"):
        return ""
    total = context.get("search_total", 0)
    if total:
        index = context.get("search_index", 0)
        return f" | Search: {index + 1}/{total} matches (n/b to navigate)"
    return " | Search: no matches found"


def render_status(context, width):
    """One status line: a live transient message, else the table status."""
    now = time.time()
    if context.get("status_msg") and now < context.get("status_until", 0):
        text = f" {context['status_msg']}"
    else:
        text = table_status(context)
        if context.get("mode", Mode.NORMAL) is Mode.NORMAL:
            text += search_status(context)
    return text.ljust(width)[:width]


def _field_line(prefix: str, field, width: int):
    text, cursor_x = field.visible(max(1, width - len(prefix) - 1))
    return prefix + text, len(prefix) + cursor_x


def prompt_lines(state, keymap, filename: str, width: int):
    """Lines shown under the status line for the active mode.

    Returns (lines, cursor): lines are (text, is_error) pairs, cursor is
    (line_index, x) of the focused text field or None.
    """
    mode = state.mode
    nav = state.nav

    if mode is Mode.SAVE_PROMPT:
        return [(f"Save changes to {filename}?", False), (SAVE_HINT, False)], None

    if mode is Mode.SAVE_FILTERED_PROMPT:
        text, x = _field_line("Save filtered CSV as: ", state.get_input("save_as"), width)
        return [(text, False), (SAVE_FILTERED_HINT, False)], (0, x)

    if mode is Mode.FILTERING:
        text, x = _field_line("Filter: ", state.get_input("filter"), width)
        hint = (state.error, True) if state.error else (FILTER_HINT, False)
        return [(text, False), hint], (0, x)

    if mode is Mode.EDITING:
        prefix = f"Editing cell [{nav.cursor_row + 1},{nav.cursor_col + 1}]: "
        text, x = _field_line(prefix, state.get_input("edit"), width)
        return [(text, False), (EDIT_HINT, False)], (0, x)

    if mode is Mode.GOTO:
        if state.goto_step == 0:
            text, x = _field_line("Go to row: ", state.get_input("row"), width)
            hint = GOTO_ROW_HINT
        else:
            prefix = f"Go to row {state.get_input('row').value}, column: "
            text, x = _field_line(prefix, state.get_input("col"), width)
            hint = GOTO_COL_HINT
        status = (state.error, True) if state.error else (hint, False)
        return [(text, False), status], (0, x)

    if mode is Mode.SEARCHING:
        labels = ("Search: ", "Row filter: ", "Col filter: ")
        lines = []
        cursor = None
        for step, (label, name) in enumerate(zip(labels, SEARCH_FIELDS)):
            marker = "► " if state.search_step == step else "  "
            text, x = _field_line(marker + label, state.get_input(name), width)
            lines.append((text, False))
            if state.search_step == step:
                cursor = (step, x)
        lines.append((SEARCH_HINT, False))
        return lines, cursor

    if state.show_help:
        return [(line, False) for line in keymap.full_help()], None
    return [(keymap.short_help(), False)], None
