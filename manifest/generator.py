"""
Manifest generator — random cargo lists for demos and smoke runs.

Generators:
    generate_from_library — n picks from the item library
    generate_uniform      — n boxes with each dimension drawn from U[min, max]

Usage:
    from manifest.generator import generate_from_library
    manifest = generate_from_library(12, seed=7, save_path="manifests/random.yaml")
"""

import random
from collections import Counter
from typing import Optional, Sequence

from config import ContainerSpec, ItemCategory
from manifest.loader import Manifest, ManifestEntry, save_manifest
from planner.library import DEFAULT_LIBRARY, ItemTemplate


def generate_from_library(
    n: int,
    library: Sequence[ItemTemplate] = DEFAULT_LIBRARY,
    container: Optional[ContainerSpec] = None,
    save_path: Optional[str] = None,
    seed: Optional[int] = None,
) -> Manifest:
    """
    Pick *n* templates at random from *library*.

    Args:
        n:         Number of items.
        library:   Templates to draw from.
        container: If given, templates that cannot fit it are skipped.
        save_path: If given, save the manifest YAML here.
        seed:      Random seed for reproducibility.

    Returns:
        Manifest with one entry per distinct template.
    """
    rng = random.Random(seed)
    options = list(library)
    if container is not None:
        options = [t for t in options
                   if t.length <= container.length and t.width <= container.width
                   and t.height <= container.height]
    if not options:
        raise ValueError("No library template fits the container")

    picks = Counter(rng.randrange(len(options)) for _ in range(n))
    entries = [ManifestEntry(options[i], qty) for i, qty in sorted(picks.items())]
    manifest = Manifest(name=f"library-{n}", entries=entries,
                        container=container.name if container else None)
    if save_path:
        save_manifest(manifest, save_path)
    return manifest


def generate_uniform(
    n: int,
    min_dim: float = 12.0,
    max_dim: float = 48.0,
    max_weight: float = 500.0,
    save_path: Optional[str] = None,
    seed: Optional[int] = None,
) -> Manifest:
    """Generate *n* general-cargo boxes with dimensions drawn from U[min_dim, max_dim]."""
    rng = random.Random(seed)
    entries = [
        ManifestEntry(ItemTemplate(
            name=f"Box {i + 1}",
            icon="📦",
            length=float(round(rng.uniform(min_dim, max_dim))),
            width=float(round(rng.uniform(min_dim, max_dim))),
            height=float(round(rng.uniform(min_dim, max_dim))),
            weight=round(rng.uniform(5.0, max_weight), 1),
            category=ItemCategory.GENERAL,
            group="Generated",
        ))
        for i in range(n)
    ]
    manifest = Manifest(name=f"uniform-{n}", entries=entries)
    if save_path:
        save_manifest(manifest, save_path)
    return manifest
