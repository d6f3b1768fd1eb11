import curses


class LineInput:
    """Single-line text field: buffer, cursor and horizontal scroll.

    Enter, Esc and Tab never reach this class; the key map resolves them to
    actions before text input sees a key.
    """

    def __init__(self, value: str = "", placeholder: str = ""):
        self.buffer = ""
        self.cursor = 0
        self.hscroll = 0
        self.placeholder = placeholder
        self.set_value(value)

    @property
    def value(self) -> str:
        return self.buffer

    def set_value(self, text):
        self.buffer = text or ""
        self.cursor = len(self.buffer)
        self.hscroll = 0

    # ---------- word helpers ----------
    @staticmethod
    def _is_word_char(ch):
        return ch.isalnum() or ch == "_"

    def _word_boundary_left(self):
        i = self.cursor
        while i > 0 and self.buffer[i - 1].isspace():
            i -= 1
        while i > 0 and not self._is_word_char(self.buffer[i - 1]) and not self.buffer[i - 1].isspace():
            i -= 1
        while i > 0 and self._is_word_char(self.buffer[i - 1]):
            i -= 1
        return i

    def insert(self, text: str):
        self.buffer = self.buffer[: self.cursor] + text + self.buffer[self.cursor :]
        self.cursor += len(text)

    # ---------- input handling ----------
    def handle_key(self, ch) -> bool:
        """Apply one key; returns True when the buffer changed."""
        if isinstance(ch, str):
            if ch.isprintable():
                self.insert(ch)
                return True
            ch = ord(ch) if len(ch) == 1 else -1

        if ch in (curses.KEY_BACKSPACE, 127, 8):
            if self.cursor > 0:
                self.buffer = self.buffer[: self.cursor - 1] + self.buffer[self.cursor :]
                self.cursor -= 1
                return True
            return False

        if ch == curses.KEY_DC:
            if self.cursor < len(self.buffer):
                self.buffer = self.buffer[: self.cursor] + self.buffer[self.cursor + 1 :]
                return True
            return False

        if ch == 23:  # Ctrl+W, delete word backward
            start = self._word_boundary_left()
            if start < self.cursor:
                self.buffer = self.buffer[:start] + self.buffer[self.cursor :]
                self.cursor = start
                return True
            return False

        if ch == 21:  # Ctrl+U, kill to line start
            if self.cursor > 0:
                self.buffer = self.buffer[self.cursor :]
                self.cursor = 0
                return True
            return False

        if ch == 11:  # Ctrl+K, kill to line end
            if self.cursor < len(self.buffer):
                self.buffer = self.buffer[: self.cursor]
                return True
            return False

        if ch == curses.KEY_LEFT:
            self.cursor = max(0, self.cursor - 1)
            return False

        if ch == curses.KEY_RIGHT:
            self.cursor = min(len(self.buffer), self.cursor + 1)
            return False

        if ch in (curses.KEY_HOME, 1):  # Home or Ctrl+A
            self.cursor = 0
            return False

        if ch in (curses.KEY_END, 5):  # End or Ctrl+E
            self.cursor = len(self.buffer)
            return False

        if 32 <= ch <= 126:
            self.insert(chr(ch))
            return True

        return False

    # ---------- rendering ----------
    def visible(self, width: int) -> tuple[str, int]:
        """Return the slice that fits in `width` and the cursor x within it."""
        width = max(1, width)
        if self.cursor < self.hscroll:
            self.hscroll = self.cursor
        elif self.cursor > self.hscroll + width - 1:
            self.hscroll = self.cursor - width + 1

        if not self.buffer and self.placeholder:
            return self.placeholder[:width], 0
        return self.buffer[self.hscroll : self.hscroll + width], self.cursor - self.hscroll
