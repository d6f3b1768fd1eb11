import curses

from line_input import LineInput


def _type(field, text):
    for ch in text:
        field.handle_key(ord(ch))


def test_typing_and_backspace():
    field = LineInput()
    _type(field, "hello")
    assert field.value == "hello"
    assert field.handle_key(127) is True
    assert field.value == "hell"
    field.handle_key(curses.KEY_BACKSPACE)
    assert field.value == "hel"


def test_prefilled_value_puts_cursor_at_end():
    field = LineInput("abc")
    _type(field, "d")
    assert field.value == "abcd"


def test_cursor_movement_and_insert_in_middle():
    field = LineInput("ac")
    field.handle_key(curses.KEY_LEFT)
    _type(field, "b")
    assert field.value == "abc"
    field.handle_key(1)  # Ctrl+A
    _type(field, ">")
    assert field.value == ">abc"
    field.handle_key(curses.KEY_END)
    _type(field, "<")
    assert field.value == ">abc<"


def test_delete_word_and_kill_line():
    field = LineInput("select name where")
    field.handle_key(23)  # Ctrl+W
    assert field.value == "select name "
    field.handle_key(21)  # Ctrl+U
    assert field.value == ""


def test_kill_to_end():
    field = LineInput("abcdef")
    field.handle_key(curses.KEY_HOME)
    field.handle_key(curses.KEY_RIGHT)
    field.handle_key(11)  # Ctrl+K
    assert field.value == "a"


def test_delete_key():
    field = LineInput("xy")
    field.handle_key(curses.KEY_HOME)
    assert field.handle_key(curses.KEY_DC) is True
    assert field.value == "y"


def test_string_keys_are_inserted():
    field = LineInput()
    field.handle_key("é")
    assert field.value == "é"


def test_non_printable_keys_are_ignored():
    field = LineInput("a")
    assert field.handle_key(curses.KEY_F1) is False
    assert field.value == "a"


def test_visible_scrolls_to_cursor():
    field = LineInput("abcdefghij")
    text, cursor_x = field.visible(5)
    assert text == "ghij"
    assert cursor_x == 4


def test_placeholder_shown_when_empty():
    field = LineInput(placeholder="Enter row number")
    assert field.visible(5) == ("Enter", 0)
    _type(field, "1")
    assert field.visible(5) == ("1", 1)
