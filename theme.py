import curses

from grid_store import DataType


DEFAULT_COLORS = {
    DataType.STRING: "#87CEEB",  # sky blue
    DataType.INT: "#90EE90",  # light green
    DataType.FLOAT: "#FFB6C1",  # light pink
    DataType.BOOL: "#DDA0DD",  # plum
    DataType.EMPTY: "#D3D3D3",  # light gray
}

DEFAULT_DIM_COLORS = {
    DataType.STRING: "#4682B4",  # steel blue
    DataType.INT: "#6B8E23",  # olive drab
    DataType.FLOAT: "#CD5C5C",  # indian red
    DataType.BOOL: "#9370DB",  # medium purple
    DataType.EMPTY: "#A9A9A9",  # dark gray
}

# fallbacks for terminals without 256 colors
BASIC_COLORS = {
    DataType.STRING: curses.COLOR_CYAN,
    DataType.INT: curses.COLOR_GREEN,
    DataType.FLOAT: curses.COLOR_RED,
    DataType.BOOL: curses.COLOR_MAGENTA,
    DataType.EMPTY: curses.COLOR_WHITE,
}

_CUBE_STEPS = (0, 95, 135, 175, 215, 255)


def apply_config_colors(colors: dict | None):
    """Merge `{"DataTypeInt": "#RRGGBB", ...}` overrides into the defaults.

    An override replaces both the bright and the dim shade of that type.
    """
    bright = dict(DEFAULT_COLORS)
    dim = dict(DEFAULT_DIM_COLORS)
    for data_type in DataType:
        value = (colors or {}).get(data_type.config_key)
        if value:
            bright[data_type] = value
            dim[data_type] = value
    return bright, dim


def _nearest_cube_index(v: int) -> int:
    return min(range(len(_CUBE_STEPS)), key=lambda i: abs(_CUBE_STEPS[i] - v))


def to_xterm256(color: str) -> int | None:
    """Map "#RRGGBB" or an xterm index like "252" to a 256-color index."""
    color = color.strip()
    if color.isdigit():
        value = int(color)
        return value if 0 <= value <= 255 else None
    if not (color.startswith("#") and len(color) == 7):
        return None
    try:
        r, g, b = (int(color[i : i + 2], 16) for i in (1, 3, 5))
    except ValueError:
        return None

    ri, gi, bi = (_nearest_cube_index(v) for v in (r, g, b))
    cube = 16 + 36 * ri + 6 * gi + bi
    cube_rgb = (_CUBE_STEPS[ri], _CUBE_STEPS[gi], _CUBE_STEPS[bi])

    gray_level = round(((r + g + b) / 3 - 8) / 10)
    gray_level = max(0, min(23, gray_level))
    gray = 232 + gray_level
    gray_value = 8 + 10 * gray_level
    gray_rgb = (gray_value, gray_value, gray_value)

    def dist(rgb):
        return sum((a - c) ** 2 for a, c in zip(rgb, (r, g, b)))

    return gray if dist(gray_rgb) < dist(cube_rgb) else cube


class Theme:
    PAIR_HEADER = 1
    PAIR_BORDER = 2
    PAIR_SELECTED = 3
    PAIR_ERROR = 4
    PAIR_TYPE_BASE = 10
    PAIR_DIM_BASE = 20

    def __init__(self, colors: dict | None = None):
        self.bright, self.dim = apply_config_colors(colors)
        self.enabled = False

    def init_pairs(self):
        try:
            curses.start_color()
            curses.use_default_colors()
            rich = curses.COLORS >= 256
            curses.init_pair(self.PAIR_HEADER, 252 if rich else curses.COLOR_WHITE, -1)
            curses.init_pair(self.PAIR_BORDER, 238 if rich else curses.COLOR_WHITE, -1)
            curses.init_pair(
                self.PAIR_SELECTED,
                to_xterm256("#01BE85") if rich else curses.COLOR_BLACK,
                to_xterm256("#00432F") if rich else curses.COLOR_GREEN,
            )
            curses.init_pair(
                self.PAIR_ERROR, to_xterm256("#FF6B6B") if rich else curses.COLOR_RED, -1
            )
            for data_type in DataType:
                if rich:
                    fg = to_xterm256(self.bright[data_type])
                    dim_fg = to_xterm256(self.dim[data_type])
                else:
                    fg = dim_fg = None
                if fg is None:
                    fg = BASIC_COLORS[data_type]
                if dim_fg is None:
                    dim_fg = BASIC_COLORS[data_type]
                curses.init_pair(self.PAIR_TYPE_BASE + data_type, fg, -1)
                curses.init_pair(self.PAIR_DIM_BASE + data_type, dim_fg, -1)
            self.enabled = True
        except curses.error:
            self.enabled = False

    def _pair(self, number: int) -> int:
        return curses.color_pair(number) if self.enabled else 0

    def cell_attr(self, data_type: DataType, dim: bool) -> int:
        base = self.PAIR_DIM_BASE if dim else self.PAIR_TYPE_BASE
        attr = self._pair(base + data_type)
        if dim and not self.enabled:
            attr |= curses.A_DIM
        return attr

    def header_attr(self) -> int:
        return self._pair(self.PAIR_HEADER) | curses.A_BOLD

    def border_attr(self) -> int:
        return self._pair(self.PAIR_BORDER)

    def selected_attr(self) -> int:
        if self.enabled:
            return self._pair(self.PAIR_SELECTED)
        return curses.A_REVERSE

    def error_attr(self) -> int:
        return self._pair(self.PAIR_ERROR) | curses.A_BOLD

    def legend_attr(self, data_type: DataType) -> int:
        return self.cell_attr(data_type, dim=False) | curses.A_BOLD
