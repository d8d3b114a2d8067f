"""Flowchart subpackage: rule expression -> flowchart document text.

Re-exports:
- FlowchartEmitter / to_flowchart / to_decision_tree: document emission
- FlowchartOptions / FlowOrientation / Theme: emitter options
- condition_text: readable boolean text used in decision diamonds
- escape_label: label sanitising
- mermaid_config: renderer initialisation settings for a theme
"""

from rulegraph.flowchart.emitter import (
    NO_LABEL,
    STYLE_CLASSES,
    YES_LABEL,
    FlowchartEmitter,
    condition_text,
    to_decision_tree,
    to_flowchart,
)
from rulegraph.flowchart.escaping import DEFAULT_MAX_LABEL_LENGTH, escape_label
from rulegraph.flowchart.options import (
    FlowchartOptions,
    FlowOrientation,
    Theme,
    mermaid_config,
)

__all__ = [
    "DEFAULT_MAX_LABEL_LENGTH",
    "NO_LABEL",
    "STYLE_CLASSES",
    "YES_LABEL",
    "FlowOrientation",
    "FlowchartEmitter",
    "FlowchartOptions",
    "Theme",
    "condition_text",
    "escape_label",
    "mermaid_config",
    "to_decision_tree",
    "to_flowchart",
]
