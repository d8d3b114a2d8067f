"""LayoutEngine: assigns pixel geometry to a rendering tree.

Centered tree layout in three passes:

1. Measure (post-order): every node gets a width from its label, and every
   subtree a span, the breadth it needs along the sibling axis. A collapsed
   node or a leaf spans its own breadth; an expanded node spans
   ``max(own, sum(child spans) + gaps)``, so sibling subtrees never overlap.
2. Place (pre-order): each node is centered in the span allocated to its
   subtree; children are laid out in argument order, each offset by the spans
   of its preceding siblings.
3. Connect: one cubic S-curve edge from every expanded node to each child.

Vertical layout grows downwards; horizontal is its transpose and grows to the
right. The engine is a pure function of tree shape, labels, expansion flags
and ``LayoutConfig``: the input tree is not modified and identical inputs
give identical geometry.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace

import numpy as np

from rulegraph.layout.config import LayoutConfig, Orientation
from rulegraph.layout.result import Edge, TreeLayout
from rulegraph.tree.nodes import RenderNode

__all__ = ["LayoutEngine", "fit_zoom", "layout_tree"]


@dataclass(slots=True)
class _Box:
    """Measured node: own size plus the span of its visible subtree."""

    node: RenderNode
    width: float
    breadth: float
    span: float
    children: list[_Box] = field(default_factory=list)


def _coord(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


class LayoutEngine:
    """Computes ``TreeLayout`` geometry for ``RenderNode`` trees.

    Example::

        engine = LayoutEngine()
        result = engine.layout(TreeBuilder().build({"and": [...]}))
        result.width, result.height   # canvas size
        result.nodes[0].x             # root position
    """

    def __init__(self, config: LayoutConfig | None = None) -> None:
        self._config: LayoutConfig = config if config is not None else LayoutConfig()

    @property
    def config(self) -> LayoutConfig:
        return self._config

    @property
    def _vertical(self) -> bool:
        return self._config.orientation == Orientation.VERTICAL

    @property
    def _sibling_gap(self) -> float:
        cfg = self._config
        return cfg.horizontal_spacing if self._vertical else cfg.vertical_spacing

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def layout(self, root: RenderNode) -> TreeLayout:
        """Position every visible node of ``root`` and connect them.

        Args:
            root: Root of a rendering tree. Not modified.

        Returns:
            A ``TreeLayout`` with positioned node copies, edges and canvas size.
        """
        box = self._measure(root)
        nodes: list[RenderNode] = []
        edges: list[Edge] = []
        self._place(box, self._positioned(box, 0.0, 0.0), 0.0, 0.0, nodes, edges)
        width, height = self._canvas(nodes)
        return TreeLayout(nodes=tuple(nodes), edges=tuple(edges), width=width, height=height)

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _measure(self, node: RenderNode) -> _Box:
        width = self._config.node_width(node.label)
        breadth = width if self._vertical else self._config.node_height
        box = _Box(node=node, width=width, breadth=breadth, span=breadth)
        if node.expanded and node.children:
            box.children = [self._measure(child) for child in node.children]
            children_span = sum(c.span for c in box.children) + self._sibling_gap * (
                len(box.children) - 1
            )
            box.span = max(breadth, children_span)
        return box

    def _positioned(self, box: _Box, main: float, cross: float) -> RenderNode:
        """Copy of ``box.node`` centered in the span starting at ``cross``.

        ``main`` is the offset along the growth axis (y when vertical, x when
        horizontal); ``cross`` the offset along the sibling axis.
        """
        centered = cross + (box.span - box.breadth) / 2
        x, y = (centered, main) if self._vertical else (main, centered)
        return replace(box.node, x=x, y=y, width=box.width, height=self._config.node_height)

    def _place(
        self,
        box: _Box,
        placed: RenderNode,
        main: float,
        cross: float,
        nodes: list[RenderNode],
        edges: list[Edge],
    ) -> None:
        cfg = self._config
        nodes.append(placed)
        if not box.children:
            return

        if self._vertical:
            next_main = main + cfg.node_height + cfg.vertical_spacing
        else:
            next_main = main + box.width + cfg.horizontal_spacing

        children_span = sum(c.span for c in box.children) + self._sibling_gap * (
            len(box.children) - 1
        )
        child_cross = cross + (box.span - children_span) / 2
        for child in box.children:
            placed_child = self._positioned(child, next_main, child_cross)
            edges.append(self._edge(placed, placed_child))
            self._place(child, placed_child, next_main, child_cross, nodes, edges)
            child_cross += child.span + self._sibling_gap

    def _edge(self, parent: RenderNode, child: RenderNode) -> Edge:
        h = self._config.node_height
        # Both nodes come from _positioned, so geometry is set
        px, py, pw = float(parent.x or 0.0), float(parent.y or 0.0), float(parent.width or 0.0)
        cx, cy, cw = float(child.x or 0.0), float(child.y or 0.0), float(child.width or 0.0)
        if self._vertical:
            px, py = px + pw / 2, py + h
            cx = cx + cw / 2
            mid = (py + cy) / 2
            path = (
                f"M {_coord(px)} {_coord(py)} "
                f"C {_coord(px)} {_coord(mid)}, {_coord(cx)} {_coord(mid)}, "
                f"{_coord(cx)} {_coord(cy)}"
            )
        else:
            px, py = px + pw, py + h / 2
            cy = cy + h / 2
            mid = (px + cx) / 2
            path = (
                f"M {_coord(px)} {_coord(py)} "
                f"C {_coord(mid)} {_coord(py)}, {_coord(mid)} {_coord(cy)}, "
                f"{_coord(cx)} {_coord(cy)}"
            )
        return Edge(id=f"edge-{parent.id}-{child.id}", source=parent.id, target=child.id, path=path)

    def _canvas(self, nodes: list[RenderNode]) -> tuple[float, float]:
        """Bounding box of all node boxes plus one spacing unit of margin."""
        cfg = self._config
        boxes = np.array(
            [
                (node.x or 0.0, node.y or 0.0, node.width or 0.0, node.height or 0.0)
                for node in nodes
            ],
            dtype=np.float64,
        )
        right = float(np.max(boxes[:, 0] + boxes[:, 2]))
        bottom = float(np.max(boxes[:, 1] + boxes[:, 3]))
        return right + cfg.horizontal_spacing, bottom + cfg.vertical_spacing


def layout_tree(root: RenderNode, config: LayoutConfig | None = None) -> TreeLayout:
    """Lay out ``root`` with a fresh ``LayoutEngine``."""
    return LayoutEngine(config).layout(root)


def fit_zoom(
    layout: TreeLayout,
    viewport_width: float,
    viewport_height: float,
    padding: float = 0.0,
) -> float:
    """Zoom factor that fits the whole canvas in a viewport, never above 1.

    Args:
        layout:          A computed ``TreeLayout``.
        viewport_width:  Viewport width in pixels.
        viewport_height: Viewport height in pixels.
        padding:         Space kept free on every side of the viewport.

    Returns:
        ``min((vw - 2p) / width, (vh - 2p) / height, 1.0)``; 1.0 for an empty
        canvas.
    """
    if layout.width <= 0.0 or layout.height <= 0.0:
        return 1.0
    scale = np.array(
        [
            (viewport_width - 2 * padding) / layout.width,
            (viewport_height - 2 * padding) / layout.height,
            1.0,
        ]
    )
    return float(np.min(scale))
