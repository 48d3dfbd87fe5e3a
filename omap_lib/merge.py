# -*- coding: utf-8 -*-
"""Merging of fragmented lines.

Upstream extraction (e.g. tile by tile contour tracing) cuts lines into
fragments. Fragments whose endpoints lie within ``delta`` of each other are
joined back into longer lines, or into closed rings when a chain of
fragments comes back to its start.

Algorithm, per line symbol:

1. Closed lines are kept as they are; open lines are merge candidates.
2. If every candidate carries a numeric ``Elevation`` tag the candidates are
   grouped by elevation (to 2 decimals) and lines are only joined inside a
   group. Otherwise all candidates form one group.
3. A KD-tree over the heads (last vertices) gives, for every tail (first
   vertex), the nearest head. Pairs within ``delta`` become links
   ``head fragment -> tail fragment``. When several tails pick the same head
   the closest one wins (ties: lowest index).
4. Fragments keep a stable index for the whole pass, so links never need
   renumbering. Every fragment has at most one successor and one
   predecessor: the links form paths (joined into one line) and cycles
   (joined into one closed ring).

At each junction the head fragment's last vertex is dropped: a chain of
``n`` fragments loses ``n - 1`` vertices. A ring whose last vertex does not
already coincide with its first is closed with a copy of the first vertex.
The merged line keeps the tags of its first fragment.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from scipy.spatial import KDTree

from omap_lib.constants import ELEVATION_QUANTIZATION
from omap_lib.constants import ELEVATION_TAG
from omap_lib.objects import Coordinate
from omap_lib.objects import LineObject

if TYPE_CHECKING:
    from omap_lib.objects import MapObject
    from omap_lib.store import MapObjectStore

logger = logging.getLogger(__name__)


@dataclass
class MergeStats:
    """Summary of a merge pass."""

    fragments: int = 0
    joins: int = 0
    rings_closed: int = 0
    lines_out: int = 0


def merge_lines(store: MapObjectStore, delta: float) -> MergeStats:
    """Merge line fragments of every line symbol in ``store``.

    Args:
        store: Objects to merge, modified in place
        delta: Maximum distance between a head and a tail to join them

    Returns:
        MergeStats for the whole store

    Raises:
        ValueError: If ``delta`` is negative or not finite
    """
    if not math.isfinite(delta) or delta < 0:
        raise ValueError(f"Merge distance must be a positive number, got {delta}")

    stats = MergeStats()
    for symbol in store.symbols():
        if not symbol.is_line_symbol():
            continue

        kept: list[MapObject] = []
        candidates: list[LineObject] = []
        for obj in store.get(symbol):
            if isinstance(obj, LineObject) and not obj.is_closed:
                candidates.append(obj)
            else:
                kept.append(obj)

        if not candidates:
            continue

        merged: list[tuple[int, LineObject]] = []
        for group in group_by_elevation(candidates):
            lines = [candidates[i] for i in group]
            for local_id, line in merge_fragments(lines, delta, stats):
                merged.append((group[local_id], line))

        merged.sort(key=lambda item: item[0])
        store.replace(symbol, kept + [line for _, line in merged])
        logger.debug(
            "%s: %d open fragments merged into %d lines",
            symbol.name,
            len(candidates),
            len(merged),
        )

    logger.info(
        "Line merge: %d fragments, %d joins, %d rings closed, %d lines out",
        stats.fragments,
        stats.joins,
        stats.rings_closed,
        stats.lines_out,
    )
    return stats


def elevation_key(tags: dict[str, str]) -> int | None:
    """Quantized elevation of a line, None if missing or not numeric."""
    value = tags.get(ELEVATION_TAG)
    if value is None:
        return None
    try:
        elevation = float(value)
    except ValueError:
        return None
    if not math.isfinite(elevation):
        return None
    return round(elevation * ELEVATION_QUANTIZATION)


def group_by_elevation(lines: list[LineObject]) -> list[list[int]]:
    """Split line indices into groups that may be merged together.

    Lines are grouped by elevation only when all of them carry one, in the
    order each elevation first appears.
    """
    keys = []
    for line in lines:
        key = elevation_key(line.tags)
        if key is None:
            return [list(range(len(lines)))]
        keys.append(key)

    groups: dict[int, list[int]] = {}
    for i, key in enumerate(keys):
        groups.setdefault(key, []).append(i)
    return list(groups.values())


def find_links(coords: list[list[Coordinate]], delta: float) -> dict[int, int]:
    """Map each head fragment to the fragment whose tail attaches to it.

    Args:
        coords: Vertices of every open fragment
        delta: Maximum join distance

    Returns:
        ``{head_fragment: tail_fragment}``; a fragment mapped to itself
        closes into a ring.
    """
    heads = np.array([c[-1] for c in coords], dtype=float)
    tails = np.array([c[0] for c in coords], dtype=float)

    distances, nearest = KDTree(heads).query(tails, k=1)

    max_squared = delta * delta
    best: dict[int, tuple[float, int]] = {}
    for tail_id, (distance, head_id) in enumerate(zip(distances, nearest)):
        squared = float(distance) ** 2
        if squared > max_squared:
            continue
        head_id = int(head_id)
        candidate = (squared, tail_id)
        if head_id not in best or candidate < best[head_id]:
            best[head_id] = candidate

    return {head_id: tail_id for head_id, (_, tail_id) in best.items()}


def merge_fragments(
    lines: list[LineObject], delta: float, stats: MergeStats | None = None
) -> list[tuple[int, LineObject]]:
    """Join open lines of one group.

    Args:
        lines: Open lines sharing a symbol (and elevation)
        delta: Maximum join distance
        stats: Optional counters to update

    Returns:
        ``(lowest member index, line)`` for every output line
    """
    if stats is None:
        stats = MergeStats()
    if not lines:
        return []

    coords = [line.coords for line in lines]
    successors = find_links(coords, delta)
    has_predecessor = set(successors.values())

    visited: set[int] = set()
    chains: list[tuple[list[int], bool]] = []

    # paths start at fragments nothing attaches to
    for start in range(len(lines)):
        if start not in has_predecessor:
            chains.append((_follow(start, successors, visited), False))

    # what is left sits on cycles, started from their lowest index
    for start in range(len(lines)):
        if start not in visited:
            chains.append((_follow(start, successors, visited), True))

    result = []
    for chain, closed in chains:
        vertices = list(coords[chain[0]])
        for fragment_id in chain[1:]:
            vertices.pop()
            vertices.extend(coords[fragment_id])
        if closed:
            if vertices[-1] != vertices[0]:
                vertices.append(vertices[0])
            stats.rings_closed += 1

        head = lines[chain[0]]
        merged = LineObject.from_line_string(vertices, head.symbol)
        merged.tags = dict(head.tags)
        result.append((min(chain), merged))

        stats.joins += len(chain) - 1

    stats.fragments += len(lines)
    stats.lines_out += len(result)
    return result


def _follow(start: int, successors: dict[int, int], visited: set[int]) -> list[int]:
    chain = [start]
    visited.add(start)
    node = start
    while node in successors and successors[node] != start:
        node = successors[node]
        chain.append(node)
        visited.add(node)
    return chain
