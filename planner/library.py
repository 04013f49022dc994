"""
Item library — reusable item templates and their JSON form.

Templates are what a user picks from to add cargo: a name, an icon, three
dimensions, a weight, a category and a display group.  Custom templates are
persisted elsewhere as a JSON array; ``dump_templates`` / ``load_templates``
round-trip that array without loss.
"""

from collections import OrderedDict
from typing import Dict, List, Sequence

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from config import ItemCategory


class ItemTemplate(BaseModel):
    """A library entry.  Dimensions in inches, weight in lbs."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str = Field(min_length=1)
    icon: str = ""
    length: float = Field(gt=0)
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    weight: float = Field(ge=0)
    category: ItemCategory = ItemCategory.GENERAL
    group: str = "Custom"


_TEMPLATE_LIST = TypeAdapter(List[ItemTemplate])


def dump_templates(templates: Sequence[ItemTemplate]) -> str:
    """Serialise templates to a JSON array."""
    return _TEMPLATE_LIST.dump_json(list(templates), indent=2).decode("utf-8")


def load_templates(text: str) -> List[ItemTemplate]:
    """Parse a JSON array produced by ``dump_templates``."""
    return _TEMPLATE_LIST.validate_json(text)


def templates_by_group(templates: Sequence[ItemTemplate]) -> Dict[str, List[ItemTemplate]]:
    """Group templates by their display group, keeping first-seen order."""
    groups: Dict[str, List[ItemTemplate]] = OrderedDict()
    for t in templates:
        groups.setdefault(t.group, []).append(t)
    return groups


def find_template(name: str, templates: Sequence[ItemTemplate] = ()) -> ItemTemplate:
    """Look a template up by name (default library when none given)."""
    for t in templates or DEFAULT_LIBRARY:
        if t.name == name:
            return t
    raise KeyError(f"No library template named '{name}'")


def _t(name, icon, l, w, h, wt, cat, group) -> ItemTemplate:
    return ItemTemplate(name=name, icon=icon, length=l, width=w, height=h,
                        weight=wt, category=ItemCategory(cat), group=group)


DEFAULT_LIBRARY: List[ItemTemplate] = [
    # Pallets
    _t("Standard Pallet (48×40)", "🟫", 48, 40, 6, 45, "general", "Pallets"),
    _t("Euro Pallet (48×32)", "🟫", 48, 32, 6, 40, "general", "Pallets"),
    _t("Half Pallet (24×40)", "🟫", 24, 40, 6, 25, "general", "Pallets"),
    # Boxes
    _t("Small Box", "📦", 18, 18, 18, 30, "general", "Boxes"),
    _t("Medium Box", "📦", 24, 24, 24, 55, "general", "Boxes"),
    _t("Large Box", "📦", 36, 24, 24, 80, "general", "Boxes"),
    _t("XL Crate", "📦", 48, 40, 48, 200, "general", "Boxes"),
    _t("Flat Box", "📦", 48, 36, 12, 65, "general", "Boxes"),
    # Drums
    _t("55-Gal Drum", "🛢️", 24, 24, 36, 484, "heavy", "Drums"),
    _t("30-Gal Drum", "🛢️", 20, 20, 30, 265, "heavy", "Drums"),
    _t("Chemical Drum", "⚠️", 24, 24, 36, 500, "hazardous", "Drums"),
    # Machinery
    _t("Small Motor", "⚙️", 30, 24, 24, 600, "heavy", "Machinery"),
    _t("Generator", "⚙️", 48, 30, 36, 1500, "heavy", "Machinery"),
    _t("Compressor", "⚙️", 36, 36, 42, 2000, "heavy", "Machinery"),
    # Fragile
    _t("Electronics Crate", "💻", 36, 24, 30, 120, "fragile", "Fragile"),
    _t("Glass Panels", "🪟", 48, 6, 72, 350, "fragile", "Fragile"),
    _t("Art Crate", "🎨", 60, 6, 48, 80, "fragile", "Fragile"),
    # Perishable
    _t("Produce Crate", "🍎", 24, 18, 12, 45, "perishable", "Perishable"),
    _t("Cold Box", "❄️", 48, 40, 42, 300, "perishable", "Perishable"),
    _t("Wine Case", "🍷", 20, 14, 14, 40, "fragile", "Perishable"),
    # Furniture
    _t("Sofa (boxed)", "🛋️", 84, 36, 36, 180, "general", "Furniture"),
    _t("Dining Table", "🪑", 72, 42, 8, 120, "general", "Furniture"),
    _t("Mattress (Queen)", "🛏️", 80, 60, 12, 85, "general", "Furniture"),
    _t("Bookshelf", "📚", 36, 12, 72, 90, "general", "Furniture"),
]
