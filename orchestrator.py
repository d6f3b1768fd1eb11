import curses
import logging
import os
import signal
import time

import interaction
import layout_engine
import status_bar
from file_type_handler import FileTypeHandler, StorageError
from grid_pane import GridPane
from interaction import Mode, Quit, SaveFiltered, SaveSource, ShowStatus, Suspend
from key_bindings import Action, KeyMap, key_name
from theme import Theme


logger = logging.getLogger(__name__)


class Orchestrator:
    def __init__(self, stdscr, store, handler, config=None):
        self.stdscr = stdscr
        config = config or {}
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        curses.raw()
        self.stdscr.keypad(True)
        self.stdscr.nodelay(False)
        self.stdscr.timeout(100)

        self.handler = handler
        self.keymap = KeyMap(config.get("HOTKEYS"))
        self.theme = Theme(config.get("COLORS"))
        self.theme.init_pairs()
        self.grid = GridPane(self.theme)

        h, w = self.stdscr.getmaxyx()
        self.state = interaction.new_state(store, height=h, width=w)

        # ---- status ----
        self.status_msg = None
        self.status_msg_until = 0
        warnings = config.get("WARNINGS") or []
        if warnings:
            self._set_status(warnings[0], seconds=6)

        self.exit_requested = False
        # (message, is_error) pairs printed once the terminal is restored
        self.exit_messages: list[tuple[str, bool]] = []

    # ---------------- helpers ----------------

    def _set_status(self, msg, seconds=3):
        self.status_msg = msg
        self.status_msg_until = time.time() + seconds

    def _status_context(self, window, widths):
        state = self.state
        store = state.store
        nav = state.nav
        table = store.active
        return {
            "status_msg": self.status_msg,
            "status_until": self.status_msg_until,
            "mode": state.mode,
            "cursor_row": nav.cursor_row,
            "cursor_col": nav.cursor_col,
            "row_count": table.row_count,
            "col_count": table.col_count,
            "start_col": window.start_col,
            "end_col": window.end_col,
            "used_width": layout_engine.used_width(widths, window.start_col, window.end_col),
            "width": nav.width,
            "has_changes": store.has_changes,
            "is_filtered": store.is_filtered,
            "filter_count": len(state.filters.history),
            "has_searched": state.search.has_searched,
            "search_total": len(state.search.matches),
            "search_index": state.search.index,
        }

    # ---------------- UI ----------------

    def _draw_legend(self, y, w):
        x = 0
        for text, data_type in status_bar.legend_segments():
            if x >= w:
                break
            attr = 0 if data_type is None else self.theme.legend_attr(data_type)
            try:
                self.stdscr.addnstr(y, x, text, w - x, attr)
            except curses.error:
                pass
            x += len(text)

    def redraw(self):
        scr = self.stdscr
        scr.erase()
        h, w = scr.getmaxyx()

        nav = self.state.nav
        widths = nav.column_widths()
        window = nav.window(widths)
        table_lines = self.grid.draw(
            scr, self.state.store.active, window, widths, nav.cursor_row, nav.cursor_col
        )

        prompts, cursor = status_bar.prompt_lines(
            self.state, self.keymap, self.handler.path, w
        )
        chrome = 2 + len(prompts)
        # chrome stays on screen even when the table fills the terminal
        y = max(0, min(table_lines, h - chrome))

        self._draw_legend(y, w)
        context = self._status_context(window, widths)
        try:
            scr.addnstr(y + 1, 0, status_bar.render_status(context, w), w)
        except curses.error:
            pass

        prompt_y = y + 2
        for i, (text, is_error) in enumerate(prompts):
            attr = self.theme.error_attr() if is_error else 0
            try:
                scr.addnstr(prompt_y + i, 0, text, w, attr)
            except curses.error:
                pass

        try:
            if cursor is not None and prompt_y + cursor[0] < h:
                curses.curs_set(1)
                scr.move(prompt_y + cursor[0], min(cursor[1], w - 1))
            else:
                curses.curs_set(0)
        except curses.error:
            pass

        scr.refresh()

    # ---------------- effects ----------------

    def _save_source(self):
        master = self.state.store.master
        try:
            self.handler.save(master.headers, master.rows)
        except StorageError as e:
            logger.error("Save to %s failed: %s", self.handler.path, e)
            msg = f"Error saving file: {e}"
            self._set_status(msg, 4)
            self.exit_messages.append((msg, True))
            return
        self.handler.remove_backup()
        self.state.store.mark_saved()
        self._set_status(f"Saved {self.handler.path}", 3)
        self.exit_messages.append((f"Saved changes to {self.handler.path}", False))

    def _save_filtered(self, path):
        active = self.state.store.active
        try:
            FileTypeHandler(path).save(active.headers, active.rows)
        except StorageError as e:
            logger.error("Save of filtered data to %s failed: %s", path, e)
            msg = f"Error saving filtered file: {e}"
            self._set_status(msg, 4)
            self.exit_messages.append((msg, True))
            return
        self._set_status(f"Saved {path}", 3)
        self.exit_messages.append((f"Saved filtered data to {path}", False))

    def _suspend(self):
        logger.debug("Suspending")
        curses.endwin()
        os.kill(os.getpid(), signal.SIGTSTP)
        # resumed: curses restores the program modes on the next refresh
        self.stdscr.clear()
        self.stdscr.refresh()

    def _run_effects(self, effects):
        for effect in effects:
            if isinstance(effect, ShowStatus):
                self._set_status(effect.message, effect.seconds)
            elif isinstance(effect, SaveSource):
                self._save_source()
            elif isinstance(effect, SaveFiltered):
                self._save_filtered(effect.path)
            elif isinstance(effect, Suspend):
                self._suspend()
            elif isinstance(effect, Quit):
                self.exit_requested = True

    # ---------------- input ----------------

    def handle_key(self, ch):
        if ch == curses.KEY_RESIZE:
            h, w = self.stdscr.getmaxyx()
            self.state = interaction.resize(self.state, h, w)
            return

        modal = self.state.mode is not Mode.NORMAL
        action = self.keymap.resolve(key_name(ch), modal=modal)
        if action is None and modal:
            action = Action.INPUT
        self.state, effects = interaction.update(self.state, action, ch)
        self._run_effects(effects)

    # ---------------- main loop ----------------

    def run(self) -> list[tuple[str, bool]]:
        self.stdscr.clear()
        self.stdscr.refresh()
        self.redraw()

        while not self.exit_requested:
            try:
                ch = self.stdscr.get_wch()
            except curses.error:
                ch = None  # timeout
            if ch is not None:
                self.handle_key(ch)
            if not self.exit_requested:
                self.redraw()

        return self.exit_messages
