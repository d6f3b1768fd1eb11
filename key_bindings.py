import curses
from enum import Enum


class Action(Enum):
    UP = "Up"
    DOWN = "Down"
    LEFT = "Left"
    RIGHT = "Right"
    PAGE_UP = "PageUp"
    PAGE_DOWN = "PageDown"
    PAGE_LEFT = "PageLeft"
    PAGE_RIGHT = "PageRight"
    EDIT = "Edit"
    GOTO = "GoTo"
    SEARCH = "Search"
    NEXT_MATCH = "NextMatch"
    PREV_MATCH = "PrevMatch"
    FILTER = "Filter"
    RESET_FILTERS = "ResetFilters"
    CONFIRM = "Save"
    CANCEL = "Cancel"
    TAB = "Tab"
    HELP = "Help"
    QUIT = "Quit"
    SUSPEND = "Suspend"
    # raw keystroke for the focused text field or prompt
    INPUT = "Input"


DEFAULT_HOTKEYS = {
    "Up": ["up", "k"],
    "Down": ["down", "j"],
    "Left": ["left", "h"],
    "Right": ["right", "l"],
    "PageUp": ["pgup", "i"],
    "PageDown": ["pgdown", "u"],
    "PageLeft": ["y"],
    "PageRight": ["o"],
    "Edit": ["e"],
    "Help": ["?"],
    "Quit": ["q", "ctrl+c"],
    "Suspend": ["ctrl+z"],
    "Save": ["enter"],
    "Cancel": ["esc"],
    "GoTo": ["\\"],
    "Search": [" "],
    "NextMatch": ["n"],
    "PrevMatch": ["b"],
    "Tab": ["tab"],
    "Filter": ["~"],
    "ResetFilters": ["="],
}

HELP_TEXT = {
    Action.UP: "move up",
    Action.DOWN: "move down",
    Action.LEFT: "move left",
    Action.RIGHT: "move right",
    Action.PAGE_UP: "page up",
    Action.PAGE_DOWN: "page down",
    Action.PAGE_LEFT: "page left",
    Action.PAGE_RIGHT: "page right",
    Action.EDIT: "edit cell",
    Action.HELP: "toggle help",
    Action.QUIT: "quit",
    Action.SUSPEND: "suspend",
    Action.CONFIRM: "save edit",
    Action.CANCEL: "cancel",
    Action.GOTO: "go to position",
    Action.SEARCH: "search",
    Action.NEXT_MATCH: "next match",
    Action.PREV_MATCH: "prev match",
    Action.TAB: "next field",
    Action.FILTER: "filter data",
    Action.RESET_FILTERS: "reset filters",
}

SHORT_HELP = [Action.HELP, Action.EDIT, Action.QUIT]

FULL_HELP = [
    [Action.UP, Action.DOWN, Action.LEFT, Action.RIGHT],
    [Action.PAGE_UP, Action.PAGE_DOWN, Action.PAGE_LEFT, Action.PAGE_RIGHT],
    [Action.EDIT, Action.GOTO, Action.SEARCH, Action.CONFIRM, Action.CANCEL],
    [Action.NEXT_MATCH, Action.PREV_MATCH],
    [Action.FILTER, Action.RESET_FILTERS],
    [Action.HELP, Action.QUIT, Action.SUSPEND],
]

# actions that still fire while a prompt owns the keyboard
MODAL_ACTIONS = (Action.CONFIRM, Action.CANCEL, Action.TAB)

_SPECIAL_KEYS = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_PPAGE: "pgup",
    curses.KEY_NPAGE: "pgdown",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
    curses.KEY_ENTER: "enter",
    curses.KEY_BACKSPACE: "backspace",
    curses.KEY_DC: "delete",
    curses.KEY_BTAB: "shift+tab",
    9: "tab",
    10: "enter",
    13: "enter",
    27: "esc",
    127: "backspace",
}

_KEY_LABELS = {
    " ": "space",
    "pgdown": "pgdn",
}


def key_name(ch) -> str | None:
    """Name a curses key code the way hotkey config spells it."""
    if isinstance(ch, str):
        if len(ch) != 1:
            return None
        ch = ord(ch)
    if ch in _SPECIAL_KEYS:
        return _SPECIAL_KEYS[ch]
    if 1 <= ch <= 26:
        return "ctrl+" + chr(ord("a") + ch - 1)
    if 32 <= ch < 0x110000 and ch not in range(127, 160):
        return chr(ch)
    return None


def apply_config_hotkeys(hotkeys: dict | None) -> dict[str, list[str]]:
    merged = {name: list(keys) for name, keys in DEFAULT_HOTKEYS.items()}
    for name, keys in (hotkeys or {}).items():
        if name not in merged:
            continue
        if isinstance(keys, list) and keys and all(isinstance(k, str) for k in keys):
            merged[name] = list(keys)
    return merged


class KeyMap:
    def __init__(self, hotkeys: dict[str, list[str]] | None = None):
        self.hotkeys = apply_config_hotkeys(hotkeys)
        self._lookup: dict[str, Action] = {}
        # earlier actions win when two share a key
        for action in Action:
            for key in self.hotkeys.get(action.value, []):
                self._lookup.setdefault(key, action)

    def keys_for(self, action: Action) -> list[str]:
        return list(self.hotkeys.get(action.value, []))

    def resolve(self, name: str | None, modal: bool = False) -> Action | None:
        if name is None:
            return None
        action = self._lookup.get(name)
        if modal and action not in MODAL_ACTIONS:
            return None
        return action

    def label(self, action: Action) -> str:
        keys = self.keys_for(action)[:2]
        return "/".join(_KEY_LABELS.get(k, k) for k in keys)

    def short_help(self) -> str:
        return " • ".join(f"{self.label(a)} {HELP_TEXT[a]}" for a in SHORT_HELP)

    def full_help(self) -> list[str]:
        return [
            "   ".join(f"{self.label(a)} {HELP_TEXT[a]}" for a in group)
            for group in FULL_HELP
        ]
