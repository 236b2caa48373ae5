"""
Spatial index module for Letter Ocean.

A point quadtree rebuilt from scratch once per tick. Regions are half-open
boxes: a point belongs to a box when ``x0 <= x < x1`` and ``y0 <= y < y1``,
so a point on a shared quadrant edge lands in exactly one quadrant.
"""

from typing import NamedTuple

import numpy as np

from .. import config


class Rect(NamedTuple):
    """Axis-aligned half-open box ``[x0, x1) x [y0, y1)``."""

    x0: float
    y0: float
    x1: float
    y1: float

    @classmethod
    def around(cls, x, y, radius):
        """Box of half-size ``radius`` centered on ``(x, y)``."""
        return cls(x - radius, y - radius, x + radius, y + radius)

    @property
    def width(self):
        return self.x1 - self.x0

    @property
    def height(self):
        return self.y1 - self.y0

    def contains(self, x, y):
        return self.x0 <= x < self.x1 and self.y0 <= y < self.y1

    def intersects(self, other):
        return (self.x0 < other.x1 and other.x0 < self.x1 and
                self.y0 < other.y1 and other.y0 < self.y1)

    def quadrants(self):
        mx = (self.x0 + self.x1) * 0.5
        my = (self.y0 + self.y1) * 0.5
        return (
            Rect(self.x0, self.y0, mx, my),
            Rect(mx, self.y0, self.x1, my),
            Rect(self.x0, my, mx, self.y1),
            Rect(mx, my, self.x1, self.y1),
        )


def compute_index_bounds(positions, world):
    """
    Root region covering the world rectangle and every given position.

    Letters following a word path may leave the world rectangle, so the
    root grows to include them, plus a padding band so that no point sits
    on the exclusive upper edge.

    Args:
        positions (np.ndarray): Letter positions, shape (N, 2)
        world (Rect): Simulation bounds

    Returns:
        Rect: Root region for this tick's index
    """
    xmin, ymin, xmax, ymax = world.x0, world.y0, world.x1, world.y1
    if len(positions):
        positions = np.asarray(positions, dtype=float)
        xmin = min(xmin, float(positions[:, 0].min()))
        xmax = max(xmax, float(positions[:, 0].max()))
        ymin = min(ymin, float(positions[:, 1].min()))
        ymax = max(ymax, float(positions[:, 1].max()))

    x_padding = max((xmax - xmin) * config.INDEX_PADDING, 1.0)
    y_padding = max((ymax - ymin) * config.INDEX_PADDING, 1.0)
    return Rect(xmin - x_padding, ymin - y_padding, xmax + x_padding, ymax + y_padding)


class SpatialIndex:
    """
    Quadtree over letters, keyed by the position each letter had at insert.

    A node keeps its entries while it holds at most ``capacity`` of them.
    The insert that would exceed capacity splits the node into four
    quadrants, and the children absorb every entry. Below ``max_depth``
    splitting stops, so coincident letters cannot recurse forever.
    """

    def __init__(self, bounds, capacity=None, max_depth=None, depth=0):
        bounds = Rect(*bounds)
        if bounds.width <= 0 or bounds.height <= 0:
            raise ValueError(f"Spatial index bounds must have positive extent, got {bounds}")
        if capacity is None:
            capacity = config.QUADTREE_CAPACITY
        if max_depth is None:
            max_depth = config.QUADTREE_MAX_DEPTH
        if capacity < 1:
            raise ValueError(f"Spatial index capacity must be at least 1, got {capacity}")

        self.bounds = bounds
        self.capacity = capacity
        self.max_depth = max_depth
        self.depth = depth
        self.entries = []  # (x, y, item) tuples while this node is a leaf
        self.children = None

    @classmethod
    def build(cls, letters, bounds, capacity=None, max_depth=None):
        """Fresh index holding every letter whose position lies inside ``bounds``."""
        index = cls(bounds, capacity=capacity, max_depth=max_depth)
        for letter in letters:
            index.insert(letter)
        return index

    @property
    def is_leaf(self):
        return self.children is None

    def __len__(self):
        if self.is_leaf:
            return len(self.entries)
        return sum(len(child) for child in self.children)

    def insert(self, item, position=None):
        """
        Insert ``item`` at ``position`` (defaults to ``item.position``).

        Returns:
            bool: False when the position lies outside this node's bounds
        """
        if position is None:
            position = item.position
        x, y = float(position[0]), float(position[1])
        return self._insert(x, y, item)

    def _insert(self, x, y, item):
        if not self.bounds.contains(x, y):
            return False

        if self.is_leaf:
            if len(self.entries) < self.capacity or self.depth >= self.max_depth:
                self.entries.append((x, y, item))
                return True
            self._subdivide()

        for child in self.children:
            if child._insert(x, y, item):
                return True
        return False

    def _subdivide(self):
        self.children = [
            SpatialIndex(quadrant, capacity=self.capacity,
                         max_depth=self.max_depth, depth=self.depth + 1)
            for quadrant in self.bounds.quadrants()
        ]
        entries, self.entries = self.entries, []
        for x, y, item in entries:
            for child in self.children:
                if child._insert(x, y, item):
                    break

    def query(self, region, out=None):
        """
        Collect every item whose stored position lies inside ``region``.

        Subtrees whose bounds do not intersect the region are skipped.

        Args:
            region (Rect | tuple): Half-open query box (x0, y0, x1, y1)
            out (list, optional): List to extend instead of a new one

        Returns:
            list: Matching items
        """
        if out is None:
            out = []
        region = Rect(*region)
        if not self.bounds.intersects(region):
            return out

        if self.is_leaf:
            out.extend(item for x, y, item in self.entries if region.contains(x, y))
        else:
            for child in self.children:
                child.query(region, out)
        return out

    def query_radius(self, x, y, radius, out=None):
        """Items inside the box of half-size ``radius`` around ``(x, y)``."""
        return self.query(Rect.around(x, y, radius), out)
