"""Public API functions for rulegraph.

Each call creates a fresh TreeBuilder, LayoutEngine or FlowchartEmitter, so
no state (id counters, label caches) survives between calls.
"""

from __future__ import annotations

from typing import Any

from rulegraph.flowchart import FlowchartOptions
from rulegraph.flowchart import to_decision_tree as _to_decision_tree
from rulegraph.flowchart import to_flowchart as _to_flowchart
from rulegraph.layout import LayoutConfig, TreeLayout
from rulegraph.layout import fit_zoom as _fit_zoom
from rulegraph.layout import layout_tree as _layout_tree
from rulegraph.tree import (
    RenderNode,
    TreeBuilder,
    collapse_all,
    expand_all,
    find_node,
    flatten_tree,
    path_to_node,
    toggle_expansion,
    visible_nodes,
)

__all__ = [
    "build_tree",
    "collapse_all",
    "expand_all",
    "find_node",
    "fit_zoom",
    "flatten_tree",
    "layout_tree",
    "path_to_node",
    "to_decision_tree",
    "to_flowchart",
    "toggle_expansion",
    "visible_nodes",
]


def build_tree(rule: Any) -> RenderNode:
    """Compile a rule expression into a rendering tree.

    Args:
        rule: A ``Rule`` or any JSON-shaped value (dict, list, str, int,
              float, bool, None).

    Returns:
        The root ``RenderNode``. Node ids start at ``node-1`` on every call.

    Raises:
        TypeError: If ``rule`` contains a value that is not JSON-shaped.
    """
    return TreeBuilder().build(rule)


def layout_tree(root: RenderNode, config: LayoutConfig | None = None) -> TreeLayout:
    """Compute geometry for the visible part of ``root``.

    Args:
        root:   A rendering tree, e.g. from ``build_tree``. Not modified.
        config: Sizing constants and orientation. Defaults to
                ``LayoutConfig()`` when None.

    Returns:
        A ``TreeLayout`` with positioned node copies, edges and canvas size.
    """
    return _layout_tree(root, config)


def fit_zoom(
    layout: TreeLayout,
    viewport_width: float,
    viewport_height: float,
    padding: float = 0.0,
) -> float:
    """Return the zoom factor (at most 1.0) that fits ``layout`` in a viewport."""
    return _fit_zoom(layout, viewport_width, viewport_height, padding)


def to_flowchart(rule: Any, options: FlowchartOptions | None = None) -> str:
    """Emit a rule expression as flowchart document text.

    Args:
        rule:    A ``Rule`` or any JSON-shaped value.
        options: Orientation, value expansion, theme and label length.
                 Defaults to ``FlowchartOptions()`` when None.

    Returns:
        The document text. Identical input gives byte-identical output.
    """
    return _to_flowchart(rule, options)


def to_decision_tree(rule: Any, options: FlowchartOptions | None = None) -> str:
    """Like ``to_flowchart`` but always top-down."""
    return _to_decision_tree(rule, options)
