"""FlowchartEmitter: compiles a rule expression into a flowchart document.

The output is a line-oriented ``flowchart`` description (Mermaid syntax):
a header with the orientation, the style classes, one line per node (plus
its ``class`` assignment when styled) and one line per edge.

Shape vocabulary:

- primitives          -> terminator      ``n1(["'adult'"])``
- ``var``             -> parallelogram   ``n2[/"age"/]``
- literal arrays      -> subroutine      ``n3[["Array"]]``
- conditionals        -> diamond         ``n4{"age #gt; 18"}`` with
                         ``-->|"✓ Yes"|`` and ``-->|"✗ No"|`` edges
- comparisons, and/or -> hexagon         ``n5{{"and"}}``
- other operators     -> rectangle       ``n6["cat"]``

A conditional's outcomes are either further diamonds (chained decisions) or
styled result terminators, so "this path ends in an answer" reads differently
from "this path asks another question".

Subtrees nested more than ``MAX_RULE_DEPTH`` levels deep, and longer ``if``
chains, are cut and drawn as a ``...`` node.

Node ids (``n1``, ``n2``, ...) come from a counter local to each ``emit``
call. Emission order follows operand order, so the same rule always yields
byte-identical text.
"""

from __future__ import annotations

import itertools
import json
import logging
from dataclasses import replace
from typing import Any

from rulegraph.flowchart.escaping import escape_label
from rulegraph.flowchart.options import FlowchartOptions, FlowOrientation, mermaid_config
from rulegraph.labels import format_label, format_number
from rulegraph.rules import (
    COMPARISON_OPERATORS,
    CONDITIONAL_OPERATORS,
    LOGICAL_OPERATORS,
    MAX_RULE_DEPTH,
    PRIMITIVE_TYPES,
    TRUNCATED,
    TRUNCATED_OPERATOR,
    Bool,
    EmptyObject,
    List,
    Null,
    Number,
    Operation,
    Rule,
    String,
    as_rule,
    limit_depth,
)

__all__ = [
    "NO_LABEL",
    "STYLE_CLASSES",
    "YES_LABEL",
    "FlowchartEmitter",
    "condition_text",
    "to_decision_tree",
    "to_flowchart",
]

logger = logging.getLogger(__name__)

YES_LABEL = "✓ Yes"
NO_LABEL = "✗ No"

STYLE_CLASSES: dict[str, str] = {
    "condition": "fill:#fef3c7,stroke:#f59e0b,color:#92400e",
    "result": "fill:#d1fae5,stroke:#10b981,color:#065f46",
    "variable": "fill:#dbeafe,stroke:#3b82f6,color:#1e40af",
    "operator": "fill:#f3e8ff,stroke:#a855f7,color:#6b21a8",
}

# Label of a var with an empty path
_DEFAULT_VAR_NAME = "data"
_EMPTY_OBJECT_TEXT = "(empty)"
_MALFORMED_IF_TEXT = "IF ?"
_RESULT_JSON_LENGTH = 30

_NODE_INDENT = "    "


class FlowchartEmitter:
    """Emits flowchart documents for rule expressions.

    The emitter keeps no state between ``emit`` calls: ids and output lines
    belong to a pass object created per call.

    Example::

        emitter = FlowchartEmitter(FlowchartOptions(orientation=FlowOrientation.LR))
        text = emitter.emit({"if": [{">": [{"var": "age"}, 18]}, "adult", "minor"]})
    """

    def __init__(self, options: FlowchartOptions | None = None) -> None:
        self._options: FlowchartOptions = options if options is not None else FlowchartOptions()

    @property
    def options(self) -> FlowchartOptions:
        return self._options

    def emit(self, rule: Any) -> str:
        """Return the flowchart document for ``rule`` (a ``Rule`` or raw JSON)."""
        emission = _EmitPass(self._options)
        emission.node(limit_depth(as_rule(rule)), None)
        return emission.document()


class _EmitPass:
    """Output lines and id counter of one ``FlowchartEmitter.emit`` call."""

    def __init__(self, options: FlowchartOptions) -> None:
        self._opts = options
        self._ids = itertools.count(1)
        self._nodes: list[str] = []
        self._edges: list[str] = []
        # Decisions currently being emitted, nested or chained
        self._open_decisions = 0

    def document(self) -> str:
        lines: list[str] = []
        if self._opts.theme is not None:
            lines.append(f"%%{{init: {json.dumps(mermaid_config(self._opts.theme))}}}%%")
        lines.append(f"flowchart {self._opts.orientation}")
        lines.append("")
        lines.append("  %% Styling")
        lines.extend(f"  classDef {name} {style}" for name, style in STYLE_CLASSES.items())
        lines.append("")
        return "\n".join([*lines, *self._nodes, "", *self._edges])

    # ------------------------------------------------------------------
    # Low-level writers
    # ------------------------------------------------------------------

    def _text(self, text: str) -> str:
        return escape_label(text, self._opts.max_label_length)

    def _declare(self, opening: str, text: str, closing: str, css_class: str | None = None) -> str:
        node_id = f"n{next(self._ids)}"
        self._nodes.append(f'{_NODE_INDENT}{node_id}{opening}"{self._text(text)}"{closing}')
        if css_class is not None:
            self._nodes.append(f"{_NODE_INDENT}class {node_id} {css_class}")
        return node_id

    def _connect(self, source: str | None, target: str, label: str | None = None) -> None:
        if source is None:
            return
        if label is None:
            self._edges.append(f"{_NODE_INDENT}{source} --> {target}")
        else:
            self._edges.append(f'{_NODE_INDENT}{source} -->|"{label}"| {target}')

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def node(self, rule: Rule, parent_id: str | None) -> str:
        """Declare ``rule`` (and its operands), linked from ``parent_id``."""
        if isinstance(rule, PRIMITIVE_TYPES):
            node_id = self._declare("([", _primitive_text(rule), "])")
            self._connect(parent_id, node_id)
            return node_id

        if isinstance(rule, List):
            node_id = self._declare("[[", "Array", "]]")
            self._connect(parent_id, node_id)
            if self._opts.include_values:
                for item in rule.items:
                    self.node(item, node_id)
            return node_id

        if rule.operator == "var":
            node_id = self._declare("[/", _var_name(rule), "/]")
            self._connect(parent_id, node_id)
            return node_id

        if rule.operator in CONDITIONAL_OPERATORS:
            return self._conditional(rule, parent_id)

        if rule.operator in COMPARISON_OPERATORS or rule.operator in LOGICAL_OPERATORS:
            node_id = self._declare("{{", rule.operator, "}}", "operator")
        else:
            node_id = self._declare("[", rule.operator, "]", "operator")
        self._connect(parent_id, node_id)
        for arg in rule.args:
            self.node(arg, node_id)
        return node_id

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def _conditional(self, rule: Operation, parent_id: str | None) -> str:
        self._open_decisions += 1
        try:
            return self._decision(rule, parent_id)
        finally:
            self._open_decisions -= 1

    def _decision(self, rule: Operation, parent_id: str | None) -> str:
        args = rule.args
        if not rule.has_arg_list or len(args) < 2:
            logger.debug("Malformed %r: %d operand(s)", rule.operator, len(args))
            node_id = self._declare("{", _MALFORMED_IF_TEXT, "}", "condition")
            self._connect(parent_id, node_id)
            for arg in args:
                self.node(arg, node_id)
            return node_id

        node_id = self._declare("{", condition_text(args[0]), "}", "condition")
        self._connect(parent_id, node_id)

        then_id = self._result(args[1])
        self._connect(node_id, then_id, YES_LABEL)

        rest = args[2:]
        if len(rest) == 1:
            else_id = self._result(rest[0])
            self._connect(node_id, else_id, NO_LABEL)
        elif len(rest) >= 2 and self._open_decisions >= MAX_RULE_DEPTH:
            logger.debug("Conditional chain cut after %d decisions", MAX_RULE_DEPTH)
            else_id = self._result(TRUNCATED)
            self._connect(node_id, else_id, NO_LABEL)
        elif len(rest) >= 2:
            # if/elseif chain: the remaining operands form the next decision
            chained = Operation(operator=rule.operator, operands=rest)
            else_id = self._conditional(chained, None)
            self._connect(node_id, else_id, NO_LABEL)
        return node_id

    def _result(self, rule: Rule) -> str:
        """Declare a decision outcome; the caller draws the labelled edge."""
        if isinstance(rule, Operation) and rule.operator in CONDITIONAL_OPERATORS:
            return self._conditional(rule, None)

        if isinstance(rule, Operation) and rule.operator == "var":
            return self._declare("[/", _var_name(rule), "/]", "variable")

        if isinstance(rule, PRIMITIVE_TYPES):
            text = _primitive_text(rule)
        elif isinstance(rule, List):
            text = _compact_json(rule)[:_RESULT_JSON_LENGTH]
        else:
            text = condition_text(rule)
        return self._declare("([", text, "])", "result")


# ----------------------------------------------------------------------
# Text helpers
# ----------------------------------------------------------------------


def _compact_json(rule: Rule) -> str:
    return json.dumps(rule.to_json(), separators=(",", ":"), ensure_ascii=False)


def _primitive_text(rule: Rule) -> str:
    if isinstance(rule, EmptyObject):
        return _EMPTY_OBJECT_TEXT
    return format_label(rule)


def _var_name(rule: Operation) -> str:
    path = rule.args[0] if rule.args else Null()
    if isinstance(path, String):
        return path.value or _DEFAULT_VAR_NAME
    if isinstance(path, Number):
        return format_number(path.value)
    if isinstance(path, Null):
        return _DEFAULT_VAR_NAME
    return format_label(path, True)


def _operand_text(rule: Rule) -> str:
    """Short form of a comparison or ``in`` operand."""
    if isinstance(rule, String):
        return f"'{rule.value}'"
    if isinstance(rule, (Null, Bool, Number)):
        return format_label(rule)
    if isinstance(rule, EmptyObject):
        return _EMPTY_OBJECT_TEXT
    if isinstance(rule, List):
        return f"[{len(rule.items)} items]"
    if rule.operator == "var":
        return _var_name(rule)
    if rule.operator == TRUNCATED_OPERATOR:
        return TRUNCATED_OPERATOR
    return f"{rule.operator}(...)"


def condition_text(rule: Rule) -> str:
    """Readable boolean expression for a decision diamond.

    Expands ``and``/``or``/``!``/``!!`` recursively and renders comparisons and
    ``in`` inline, so the diamond reads as the actual test:
    ``age >= 18 AND country in [3 items]``.
    """
    if isinstance(rule, String):
        return rule.value
    if isinstance(rule, EmptyObject):
        return _EMPTY_OBJECT_TEXT
    if isinstance(rule, List):
        return _compact_json(rule)
    if not isinstance(rule, Operation):
        return format_label(rule)

    operator = rule.operator
    args = rule.args
    if operator in COMPARISON_OPERATORS and rule.has_arg_list and len(args) >= 2:
        return f"{_operand_text(args[0])} {operator} {_operand_text(args[1])}"
    if operator == "in" and rule.has_arg_list and len(args) >= 2:
        return f"{_operand_text(args[0])} in {_operand_text(args[1])}"
    if operator in LOGICAL_OPERATORS and rule.has_arg_list and args:
        joiner = " AND " if operator == "and" else " OR "
        return joiner.join(condition_text(arg) for arg in args)
    if operator in ("!", "!!"):
        prefix = "NOT " if operator == "!" else "BOOL "
        return prefix + (condition_text(args[0]) if args else "?")
    if operator == "var":
        return _var_name(rule)
    if operator == TRUNCATED_OPERATOR:
        return TRUNCATED_OPERATOR
    return f"{operator}(...)"


def to_flowchart(rule: Any, options: FlowchartOptions | None = None) -> str:
    """Emit the flowchart document for ``rule`` with a fresh emitter."""
    return FlowchartEmitter(options).emit(rule)


def to_decision_tree(rule: Any, options: FlowchartOptions | None = None) -> str:
    """Emit ``rule`` as a top-down decision tree, whatever the orientation option."""
    base = options if options is not None else FlowchartOptions()
    return FlowchartEmitter(replace(base, orientation=FlowOrientation.TD)).emit(rule)
