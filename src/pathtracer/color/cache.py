"""Caller-owned interning table for Color values.

Interning maps equal colors to one shared instance. It only saves memory and
allows identity checks; no arithmetic depends on it.
"""

from src.pathtracer.color.color import Color


class ColorCache:
    """An explicit, clearable Color interning table.

    Example:
        >>> cache = ColorCache()
        >>> a = cache.get(Color(0.5, 0.5, 0.5))
        >>> b = cache.get(Color(0.5, 0.5, 0.5))
        >>> a is b
        True
    """

    def __init__(self) -> None:
        self._entries: dict[Color, Color] = {}

    def get(self, color: Color) -> Color:
        """Return the canonical instance equal to color, adding it if new.

        Non-finite colors are returned as given and never stored, since a NaN
        channel never compares equal to itself.
        """
        if not color.is_finite():
            return color
        return self._entries.setdefault(color, color)

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, color: Color) -> bool:
        return color in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"ColorCache(size={len(self)})"
