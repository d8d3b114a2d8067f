"""TreeBuilder: compiles a rule expression into a RenderNode tree.

The tree mirrors how a reader reasons about the rule rather than its raw
syntax:

- ``var`` references become ``variable`` leaves labelled ``$path``.
- Conditionals become decision nodes labelled with their condition, whose
  children are the "then" and "else" outcomes. ``if`` chains with more than
  three operands, and conditionals nested in an else slot, are flattened into
  one right-leaning chain of decisions.
- Other operations become ``operator`` nodes labelled with the inline
  formatter output. Only operands too complex to read inline get a child
  node, so ``{">=": [{"var": "age"}, 18]}`` is a single node.

Malformed shapes never raise: they degrade to placeholder nodes (``IF ?``)
and the recursion continues over whatever operands are present.

Containers nested more than ``MAX_RULE_DEPTH`` levels deep, and ``if`` chains
longer than that, are cut and shown as a ``...`` node.

Node ids come from a counter created per ``build`` call (``node-1``,
``node-2``, ...), so concurrent builds never interfere and ids are
reproducible.
"""

from __future__ import annotations

import itertools
import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from rulegraph.labels import LabelFormatter, format_number
from rulegraph.rules import (
    MAX_RULE_DEPTH,
    PRIMITIVE_TYPES,
    TRUNCATED,
    List,
    Null,
    Number,
    Operation,
    Rule,
    String,
    as_rule,
    is_conditional,
    is_simple,
    limit_depth,
)
from rulegraph.tree.nodes import NodeKind, RenderNode

__all__ = ["CURRENT_ITEM_LABEL", "MALFORMED_IF_LABEL", "TreeBuilder"]

logger = logging.getLogger(__name__)

CURRENT_ITEM_LABEL = "(current item)"
MALFORMED_IF_LABEL = "IF ?"

# Default expansion depth limits
_ARRAY_EXPAND_DEPTH = 3
_OPERATOR_EXPAND_DEPTH = 4


def _id_source(prefix: str = "node") -> Iterator[str]:
    return (f"{prefix}-{n}" for n in itertools.count(1))


@dataclass
class TreeBuilder:
    """Compiles a ``Rule`` (or raw JSON rule) into a ``RenderNode`` tree.

    The builder holds no per-build state: ids are drawn from an iterator
    created for each ``build`` call. Labels go through a ``LabelFormatter``
    whose locked LRU cache is reused across builds, so one builder can be
    shared between threads. Passing ``formatter=None`` selects a fresh
    default formatter.

    Example::

        builder = TreeBuilder()
        tree = builder.build({"if": [{">": [{"var": "age"}, 18]}, "adult", "minor"]})
        # tree.label == '$age > 18'
        # tree.children[0]: TRUE_BRANCH '"adult"'
        # tree.children[1]: FALSE_BRANCH '"minor"'
    """

    formatter: LabelFormatter = field(default_factory=LabelFormatter)

    def __post_init__(self) -> None:
        if self.formatter is None:
            self.formatter = LabelFormatter()

    def build(
        self,
        rule: Any,
        parent_id: str | None = None,
        depth: int = 0,
        path: tuple[str, ...] = (),
        ids: Iterator[str] | None = None,
    ) -> RenderNode:
        """Compile ``rule`` into a rendering tree.

        Args:
            rule:      A ``Rule`` or any JSON-shaped value.
            parent_id: Id recorded as the root's ``parent_id``.
            depth:     Depth of the root, for embedding in a larger tree.
            path:      Path segments leading to the root.
            ids:       Optional id source. Defaults to a fresh
                       ``node-1, node-2, ...`` counter for this call.

        Returns:
            The root ``RenderNode``.
        """
        source = ids if ids is not None else _id_source()
        build_pass = _BuildPass(self.formatter, source, depth)
        return build_pass.node(limit_depth(as_rule(rule)), parent_id, depth, path)


class _BuildPass:
    """State of one ``TreeBuilder.build`` call: the formatter and id source."""

    def __init__(
        self, formatter: LabelFormatter, ids: Iterator[str], root_depth: int = 0
    ) -> None:
        self._fmt = formatter
        self._ids = ids
        self._max_depth = root_depth + MAX_RULE_DEPTH

    def node(
        self, rule: Rule, parent_id: str | None, depth: int, path: tuple[str, ...]
    ) -> RenderNode:
        if isinstance(rule, PRIMITIVE_TYPES):
            return self._literal(self._fmt.format(rule), rule, parent_id, depth, path)

        if isinstance(rule, List):
            return self._array(rule, parent_id, depth, path)

        if rule.operator == "var":
            return self._variable(rule, parent_id, depth, path)

        if rule.operator in ("if", "?:"):
            return self._conditional(rule, parent_id, depth, path)

        return self._operator(rule, parent_id, depth, path)

    # ------------------------------------------------------------------
    # Leaves and containers
    # ------------------------------------------------------------------

    def _literal(
        self,
        label: str,
        rule: Rule,
        parent_id: str | None,
        depth: int,
        path: tuple[str, ...],
    ) -> RenderNode:
        return RenderNode(
            id=next(self._ids),
            kind=NodeKind.LITERAL,
            label=label,
            raw_value=rule,
            parent_id=parent_id,
            depth=depth,
            path=path,
        )

    def _array(
        self, rule: List, parent_id: str | None, depth: int, path: tuple[str, ...]
    ) -> RenderNode:
        node_id = next(self._ids)
        children = tuple(
            self.node(item, node_id, depth + 1, (*path, f"[{idx}]"))
            for idx, item in enumerate(rule.items)
        )
        return RenderNode(
            id=node_id,
            kind=NodeKind.ARRAY_LITERAL,
            label=f"[{len(rule.items)} items]",
            raw_value=rule,
            children=children,
            expanded=depth < _ARRAY_EXPAND_DEPTH,
            parent_id=parent_id,
            depth=depth,
            path=path,
        )

    def _variable(
        self, rule: Operation, parent_id: str | None, depth: int, path: tuple[str, ...]
    ) -> RenderNode:
        node_id = next(self._ids)
        children: tuple[RenderNode, ...] = ()
        args = rule.args
        if rule.has_arg_list and len(args) > 1:
            default = args[1]
            children = (
                self._literal(
                    f"default: {_compact_json(default)}",
                    default,
                    node_id,
                    depth + 1,
                    (*path, "var", "[1]"),
                ),
            )
        return RenderNode(
            id=node_id,
            kind=NodeKind.VARIABLE,
            label=self._variable_label(rule),
            raw_value=rule,
            operator="var",
            children=children,
            parent_id=parent_id,
            depth=depth,
            path=path,
        )

    def _variable_label(self, rule: Operation) -> str:
        var_path = rule.args[0] if rule.args else Null()
        if isinstance(var_path, String):
            name = var_path.value
        elif isinstance(var_path, Number):
            name = format_number(var_path.value)
        elif isinstance(var_path, Null):
            name = ""
        else:
            # Computed path, e.g. {"var": {"cat": [...]}}
            name = self._fmt.format(var_path, True)
        return CURRENT_ITEM_LABEL if name == "" else f"${name}"

    # ------------------------------------------------------------------
    # Decisions
    # ------------------------------------------------------------------

    def _conditional(
        self, rule: Operation, parent_id: str | None, depth: int, path: tuple[str, ...]
    ) -> RenderNode:
        args = rule.args
        if not rule.has_arg_list or len(args) < 2:
            return self._malformed_conditional(rule, parent_id, depth, path)
        if len(args) > 3:
            return self._chain(rule, args, parent_id, depth, path)

        node_id = next(self._ids)
        children = [self._branch(args[1], True, node_id, depth + 1, (*path, "then"))]
        if len(args) == 3:
            else_value = args[2]
            if is_conditional(else_value):
                # Nested conditional continues the chain without a wrapper
                children.append(self.node(else_value, node_id, depth + 1, (*path, "else")))
            else:
                children.append(
                    self._branch(else_value, False, node_id, depth + 1, (*path, "else"))
                )
        return self._decision(node_id, rule, args[0], tuple(children), parent_id, depth, path)

    def _chain(
        self,
        rule: Operation,
        args: tuple[Rule, ...],
        parent_id: str | None,
        depth: int,
        path: tuple[str, ...],
    ) -> RenderNode:
        """Decompose ``[c1, v1, c2, v2, ..., default]`` into nested decisions."""
        node_id = next(self._ids)
        children = [self._branch(args[1], True, node_id, depth + 1, (*path, "then"))]
        rest = args[2:]
        if len(rest) == 1:
            children.append(self._branch(rest[0], False, node_id, depth + 1, (*path, "else")))
        elif len(rest) >= 2 and depth + 1 >= self._max_depth:
            logger.debug(
                "Conditional chain at %s cut after %d levels",
                "/".join(path) or "<root>",
                MAX_RULE_DEPTH,
            )
            children.append(self._branch(TRUNCATED, False, node_id, depth + 1, (*path, "else")))
        elif len(rest) >= 2:
            synthetic = Operation(operator=rule.operator, operands=rest)
            children.append(self._chain(synthetic, rest, node_id, depth + 1, (*path, "else")))
        return self._decision(node_id, rule, args[0], tuple(children), parent_id, depth, path)

    def _decision(
        self,
        node_id: str,
        rule: Operation,
        condition: Rule,
        children: tuple[RenderNode, ...],
        parent_id: str | None,
        depth: int,
        path: tuple[str, ...],
    ) -> RenderNode:
        return RenderNode(
            id=node_id,
            kind=NodeKind.OPERATOR,
            label=self._fmt.format(condition),
            raw_value=rule,
            operator=rule.operator,
            children=children,
            expanded=True,
            parent_id=parent_id,
            depth=depth,
            path=path,
        )

    def _malformed_conditional(
        self, rule: Operation, parent_id: str | None, depth: int, path: tuple[str, ...]
    ) -> RenderNode:
        logger.debug(
            "Malformed %r at %s: %d operand(s)",
            rule.operator,
            "/".join(path) or "<root>",
            len(rule.args),
        )
        node_id = next(self._ids)
        children = tuple(
            self.node(arg, node_id, depth + 1, (*path, rule.operator, f"[{idx}]"))
            for idx, arg in enumerate(rule.args)
            if not is_simple(arg)
        )
        return RenderNode(
            id=node_id,
            kind=NodeKind.OPERATOR,
            label=MALFORMED_IF_LABEL,
            raw_value=rule,
            operator=rule.operator,
            children=children,
            expanded=True,
            parent_id=parent_id,
            depth=depth,
            path=path,
        )

    def _branch(
        self,
        value: Rule,
        is_true: bool,
        parent_id: str,
        depth: int,
        path: tuple[str, ...],
    ) -> RenderNode:
        """Wrap a decision outcome: simple values become tagged leaves."""
        if isinstance(value, PRIMITIVE_TYPES):
            label, leaf_kind, operator = self._fmt.format(value), NodeKind.LITERAL, None
        elif isinstance(value, List):
            label, leaf_kind, operator = f"[{len(value.items)} items]", NodeKind.ARRAY_LITERAL, None
        elif isinstance(value, Operation) and value.operator == "var":
            label, leaf_kind, operator = self._variable_label(value), NodeKind.VARIABLE, "var"
        else:
            # Nested logic under a branch stays fully explorable
            return self.node(value, parent_id, depth, path)

        return RenderNode(
            id=next(self._ids),
            kind=NodeKind.TRUE_BRANCH if is_true else NodeKind.FALSE_BRANCH,
            label=label,
            raw_value=value,
            operator=operator,
            expanded=True,
            parent_id=parent_id,
            depth=depth,
            path=path,
            leaf_kind=leaf_kind,
        )

    # ------------------------------------------------------------------
    # Generic operations
    # ------------------------------------------------------------------

    def _operator(
        self, rule: Operation, parent_id: str | None, depth: int, path: tuple[str, ...]
    ) -> RenderNode:
        node_id = next(self._ids)
        children = tuple(
            self.node(
                arg,
                node_id,
                depth + 1,
                (*path, rule.operator, f"[{idx}]") if rule.has_arg_list else (*path, rule.operator),
            )
            for idx, arg in enumerate(rule.args)
            if not is_simple(arg)
        )
        return RenderNode(
            id=node_id,
            kind=NodeKind.OPERATOR,
            label=self._fmt.format(rule),
            raw_value=rule,
            operator=rule.operator,
            children=children,
            expanded=depth < _OPERATOR_EXPAND_DEPTH,
            parent_id=parent_id,
            depth=depth,
            path=path,
        )


def _compact_json(rule: Rule) -> str:
    return json.dumps(rule.to_json(), separators=(",", ":"), ensure_ascii=False)
