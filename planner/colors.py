"""Item colour assignment for the three colour modes."""

from typing import Dict, Optional, Tuple

from config import ColorMode, ItemCategory


CATEGORY_COLORS: Dict[ItemCategory, str] = {
    ItemCategory.GENERAL: "#5b8af5",
    ItemCategory.FRAGILE: "#f87171",
    ItemCategory.HEAVY: "#fbbf24",
    ItemCategory.HAZARDOUS: "#fb923c",
    ItemCategory.PERISHABLE: "#34d399",
}

# (lower bound in lbs, colour), ascending
WEIGHT_COLOR_STOPS: Tuple[Tuple[float, str], ...] = (
    (0.0, "#34d399"),
    (500.0, "#5b8af5"),
    (2000.0, "#fbbf24"),
    (5000.0, "#f87171"),
)

ITEM_COLORS: Tuple[str, ...] = (
    "#5b8af5", "#34d399", "#fbbf24", "#f87171", "#a78bfa",
    "#f472b6", "#22c5d6", "#fb923c", "#818cf8", "#2dd4bf",
    "#fb7185", "#a3e635", "#c084fc", "#22d3ee", "#fdba74",
)


def weight_color(weight: float) -> str:
    color = WEIGHT_COLOR_STOPS[0][1]
    for threshold, stop_color in WEIGHT_COLOR_STOPS:
        if weight >= threshold:
            color = stop_color
    return color


class ColorCycle:
    """Cycles through the custom palette, one colour per new item."""

    def __init__(self, palette: Tuple[str, ...] = ITEM_COLORS) -> None:
        self.palette = palette
        self._index = 0

    def next(self) -> str:
        color = self.palette[self._index % len(self.palette)]
        self._index += 1
        return color

    def reset(self) -> None:
        self._index = 0


def color_for(
    category: ItemCategory,
    weight: float,
    mode: ColorMode,
    cycle: Optional[ColorCycle] = None,
) -> str:
    """Colour for a new item; CUSTOM mode draws from *cycle*."""
    mode = ColorMode(mode)
    if mode is ColorMode.CATEGORY:
        return CATEGORY_COLORS[ItemCategory(category)]
    if mode is ColorMode.WEIGHT:
        return weight_color(weight)
    if cycle is None:
        return ITEM_COLORS[0]
    return cycle.next()
