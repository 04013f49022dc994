"""
Manifest loader — read and write cargo manifests.

A manifest is a YAML (or JSON, which YAML also parses) mapping:

    name: warehouse-run
    container: 40hc          # optional
    items:
      - template: Generator  # a DEFAULT_LIBRARY name ...
        quantity: 2
      - name: Crate A        # ... or an inline template
        length: 40
        width: 30
        height: 20
        weight: 150
        category: fragile
        quantity: 3

Usage:
    manifest = load_manifest("manifests/sample_manifest.yaml")
    for entry in manifest.entries:
        planner.add_many(entry.template, entry.quantity)
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional

import yaml
from pydantic import ValidationError

from planner.library import ItemTemplate, find_template


@dataclass(frozen=True)
class ManifestEntry:
    template: ItemTemplate
    quantity: int = 1

    def to_dict(self) -> dict:
        d = self.template.model_dump(mode="json")
        d["quantity"] = self.quantity
        return d


@dataclass
class Manifest:
    name: str
    entries: List[ManifestEntry] = field(default_factory=list)
    container: Optional[str] = None

    @property
    def item_count(self) -> int:
        return sum(e.quantity for e in self.entries)

    def to_dict(self) -> dict:
        d = {"name": self.name, "items": [e.to_dict() for e in self.entries]}
        if self.container:
            d["container"] = self.container
        return d


class ManifestError(ValueError):
    """Manifest file is malformed."""


def parse_manifest(data: dict, default_name: str = "manifest") -> Manifest:
    if not isinstance(data, dict) or not isinstance(data.get("items"), list):
        raise ManifestError("Manifest must be a mapping with an 'items' list")

    entries: List[ManifestEntry] = []
    for idx, raw in enumerate(data["items"]):
        if not isinstance(raw, dict):
            raise ManifestError(f"items[{idx}]: expected a mapping")
        raw = dict(raw)
        quantity = int(raw.pop("quantity", 1))
        if quantity < 1:
            raise ManifestError(f"items[{idx}]: quantity must be >= 1")
        try:
            if "template" in raw:
                template = find_template(raw.pop("template"))
            else:
                template = ItemTemplate(**raw)
        except (KeyError, ValidationError) as e:
            raise ManifestError(f"items[{idx}]: {e}") from e
        entries.append(ManifestEntry(template, quantity))

    return Manifest(
        name=str(data.get("name", default_name)),
        entries=entries,
        container=data.get("container"),
    )


def load_manifest(path: str) -> Manifest:
    """Load a YAML / JSON manifest file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return parse_manifest(data, default_name=os.path.splitext(os.path.basename(path))[0])


def save_manifest(manifest: Manifest, path: str) -> None:
    """Persist a manifest as YAML."""
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(manifest.to_dict(), f, sort_keys=False, allow_unicode=True)
