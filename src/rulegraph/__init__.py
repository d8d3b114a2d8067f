"""rulegraph - tree and flowchart visualization for JSON rule expressions."""

from __future__ import annotations

import logging

from rulegraph.annotate import annotate_results
from rulegraph.api import (
    build_tree,
    collapse_all,
    expand_all,
    find_node,
    fit_zoom,
    flatten_tree,
    layout_tree,
    path_to_node,
    to_decision_tree,
    to_flowchart,
    toggle_expansion,
    visible_nodes,
)
from rulegraph.flowchart import FlowchartEmitter, FlowchartOptions, FlowOrientation, Theme
from rulegraph.labels import LabelFormatter, format_label
from rulegraph.layout import Edge, LayoutConfig, LayoutEngine, Orientation, TreeLayout
from rulegraph.protocols import Evaluator
from rulegraph.rules import Rule, parse_rule
from rulegraph.tree import NodeKind, RenderNode, TreeBuilder

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__: str = "0.1.0"
__all__: list[str] = [
    "Edge",
    "Evaluator",
    "FlowOrientation",
    "FlowchartEmitter",
    "FlowchartOptions",
    "LabelFormatter",
    "LayoutConfig",
    "LayoutEngine",
    "NodeKind",
    "Orientation",
    "RenderNode",
    "Rule",
    "Theme",
    "TreeBuilder",
    "TreeLayout",
    "annotate_results",
    "build_tree",
    "collapse_all",
    "expand_all",
    "find_node",
    "fit_zoom",
    "flatten_tree",
    "format_label",
    "layout_tree",
    "parse_rule",
    "path_to_node",
    "to_decision_tree",
    "to_flowchart",
    "toggle_expansion",
    "visible_nodes",
]
