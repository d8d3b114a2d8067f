"""Edge and TreeLayout dataclasses for layout engine output."""

from __future__ import annotations

from dataclasses import dataclass

from rulegraph.tree.nodes import RenderNode

__all__ = ["Edge", "TreeLayout"]


@dataclass(frozen=True, slots=True)
class Edge:
    """A drawn connector between a visible parent and one of its children.

    Attributes:
        id:     ``edge-{source}-{target}``.
        source: Id of the parent node.
        target: Id of the child node.
        path:   SVG path data for a cubic S-curve between the two boxes.
    """

    id: str
    source: str
    target: str
    path: str


@dataclass(frozen=True, slots=True)
class TreeLayout:
    """Geometry computed for the visible part of a rendering tree.

    Attributes:
        nodes:  Visible nodes in pre-order, as copies with ``x``, ``y``,
                ``width`` and ``height`` set.
        edges:  Connectors below every expanded visible node, in pre-order.
        width:  Canvas width: bounding box of all node boxes plus margin.
        height: Canvas height: bounding box of all node boxes plus margin.
    """

    nodes: tuple[RenderNode, ...]
    edges: tuple[Edge, ...]
    width: float
    height: float

    def node(self, node_id: str) -> RenderNode | None:
        """Positioned node with ``node_id``, or None when it is not visible."""
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None
