import re
from typing import Dict, Iterable, Tuple

RGB = Tuple[int, int, int]

DEFAULT_COLORS: Dict[str, RGB] = {
    'green': (0, 128, 0),
    'yellow': (255, 255, 0),
    'red': (255, 0, 0),
    'blue': (0, 0, 255),
}

HEX_COLOR_RE = re.compile(r'#?[0-9a-fA-F]{6}')


class ConfigError(ValueError):
    pass


def hex_to_rgb(h: str) -> RGB:
    h = h.lstrip('#')
    return tuple(int(h[i:i + 2], 16) for i in (0, 2, 4))


def rgb_to_hex(rgb: RGB) -> str:
    return '#{:02x}{:02x}{:02x}'.format(*rgb)


def parse_color(entry: str) -> Tuple[str, RGB]:
    """Parse one ``name:RRGGBB`` (or ``name:#RRGGBB``) entry."""
    name, sep, hex_value = entry.partition(':')
    if not sep or not name or not HEX_COLOR_RE.fullmatch(hex_value):
        raise ConfigError(f"Invalid color entry: {entry!r} (expected name:RRGGBB)")
    return name, hex_to_rgb(hex_value)


def parse_colors(entries: Iterable[str]) -> Dict[str, RGB]:
    entries = list(entries or [])
    if not entries:
        return dict(DEFAULT_COLORS)

    colors = {}
    for entry in entries:
        name, rgb = parse_color(entry)
        colors[name] = rgb
    return colors
