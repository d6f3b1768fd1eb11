import curses

import pytest

import orchestrator as orch
from file_type_handler import FileTypeHandler
from grid_store import GridStore
from interaction import Mode


class DummyScreen:
    def __init__(self, keys=(), h=24, w=100):
        self._h = h
        self._w = w
        self.keys = list(keys)
        self.calls = []

    def getmaxyx(self):
        return self._h, self._w

    def keypad(self, flag):
        pass

    def nodelay(self, flag):
        pass

    def timeout(self, ms):
        pass

    def clear(self):
        pass

    def erase(self):
        self.calls = []

    def refresh(self):
        pass

    def move(self, y, x):
        pass

    def addnstr(self, y, x, text, n, attr=0):
        self.calls.append((y, x, text[:n]))

    def get_wch(self):
        if self.keys:
            key = self.keys.pop(0)
            if key is None:
                raise curses.error("no input")
            return key
        return "q"

    def text(self):
        return "\n".join(t for _, _, t in self.calls)


@pytest.fixture(autouse=True)
def no_terminal(monkeypatch):
    monkeypatch.setattr(orch.curses, "curs_set", lambda *_: None)
    monkeypatch.setattr(orch.curses, "raw", lambda: None)
    monkeypatch.setattr(orch.Theme, "init_pairs", lambda self: None)


def _csv(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text("id,name\n1,Ann\n2,Bob\n")
    return path


def _orchestrator(tmp_path, keys=(), config=None):
    path = _csv(tmp_path)
    handler = FileTypeHandler(str(path))
    store = GridStore.load(*handler.load())
    return orch.Orchestrator(DummyScreen(keys), store, handler, config), path


def _keys(text):
    return [ord(ch) for ch in text]


def test_quit_without_changes(tmp_path):
    o, _ = _orchestrator(tmp_path, keys=_keys("q"))
    assert o.run() == []


def test_edit_then_save_on_quit(tmp_path):
    # edit (0,0) to "9", quit, answer yes
    keys = _keys("e") + [127] + _keys("9") + [10] + _keys("qy")
    o, path = _orchestrator(tmp_path, keys=keys)
    (tmp_path / "data.csv.temp").write_text("stale")
    messages = o.run()
    assert path.read_text() == "id,name\n9,Ann\n2,Bob\n"
    assert not (tmp_path / "data.csv.temp").exists()
    assert messages == [(f"Saved changes to {path}", False)]
    assert not o.state.store.has_changes


def test_quit_discarding_changes(tmp_path):
    keys = _keys("e") + _keys("x") + [10] + _keys("qn")
    o, path = _orchestrator(tmp_path, keys=keys)
    o.run()
    assert path.read_text() == "id,name\n1,Ann\n2,Bob\n"


def test_filter_then_save_filtered_copy(tmp_path):
    out = tmp_path / "out.csv"
    keys = _keys("~") + _keys('SELECT name WHERE id == "2"') + [10]
    keys += _keys("q") + _keys(str(out)) + [10]
    o, path = _orchestrator(tmp_path, keys=keys)
    messages = o.run()
    assert out.read_text() == "name\nBob\n"
    assert messages == [(f"Saved filtered data to {out}", False)]
    assert path.read_text() == "id,name\n1,Ann\n2,Bob\n"


def test_save_failure_is_reported(tmp_path):
    o, _ = _orchestrator(tmp_path)
    o.state.store.edit_cell(0, 0, "9")
    o.handler = FileTypeHandler(str(tmp_path / "missing" / "data.csv"))
    o._save_source()
    msg, is_error = o.exit_messages[0]
    assert is_error
    assert msg.startswith("Error saving file:")
    assert o.status_msg.startswith("Error saving file:")
    assert o.state.store.has_changes


def test_modal_keys_become_text(tmp_path):
    o, _ = _orchestrator(tmp_path)
    o.handle_key(ord("e"))
    assert o.state.mode is Mode.EDITING
    o.handle_key(ord("q"))
    assert o.state.mode is Mode.EDITING
    assert o.state.get_input("edit").value == "1q"
    o.handle_key(27)
    assert o.state.mode is Mode.NORMAL
    assert not o.exit_requested


def test_resize_updates_dimensions(tmp_path):
    o, _ = _orchestrator(tmp_path)
    o.stdscr._h, o.stdscr._w = 12, 40
    o.handle_key(curses.KEY_RESIZE)
    assert (o.state.nav.height, o.state.nav.width) == (12, 40)


def test_redraw_shows_table_legend_and_status(tmp_path):
    o, _ = _orchestrator(tmp_path)
    o.redraw()
    text = o.stdscr.text()
    assert "Ann" in text
    assert "Legend: " in text
    assert "Row: 1/2, Col: 1/2 | Showing cols 1-2" in text


def test_config_warning_shows_in_status(tmp_path):
    o, _ = _orchestrator(tmp_path, config={"WARNINGS": ["Failed to load config: bad"]})
    o.redraw()
    assert "Failed to load config: bad" in o.stdscr.text()


def test_ctrl_z_suspends_without_quitting(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(orch.curses, "endwin", lambda: calls.append("endwin"))
    monkeypatch.setattr(orch.os, "kill", lambda pid, sig: calls.append(sig))
    o, _ = _orchestrator(tmp_path)
    o.handle_key(26)
    assert calls == ["endwin", orch.signal.SIGTSTP]
    assert not o.exit_requested
    assert o.state.mode is Mode.NORMAL


def test_ctrl_z_while_editing_is_not_a_suspend(tmp_path, monkeypatch):
    calls = []
    monkeypatch.setattr(orch.os, "kill", lambda pid, sig: calls.append(sig))
    o, _ = _orchestrator(tmp_path)
    o.handle_key(ord("e"))
    o.handle_key(26)
    assert calls == []
    assert o.state.get_input("edit").value == "1"


def test_wide_characters_reach_text_fields(tmp_path):
    o, _ = _orchestrator(tmp_path)
    o.handle_key("e")
    o.handle_key("é")
    o.handle_key("\n")
    assert o.state.mode is Mode.NORMAL
    assert o.state.store.master.rows[0][0] == "1é"


def test_input_timeout_keeps_looping(tmp_path):
    # None makes the dummy screen time out like get_wch with no key
    o, _ = _orchestrator(tmp_path, keys=[None, None, "q"])
    assert o.run() == []
