"""Annotate a rendering tree with the results of an external evaluator."""

from __future__ import annotations

from dataclasses import replace
from typing import Any

from rulegraph.protocols import Evaluator
from rulegraph.tree.nodes import RenderNode
from rulegraph.tree.ops import map_tree

__all__ = ["annotate_results"]


def annotate_results(tree: RenderNode, evaluator: Evaluator, data: Any) -> RenderNode:
    """Return a copy of ``tree`` where every node carries ``evaluation_result``.

    Each node's ``raw_value`` is converted back to JSON and passed to
    ``evaluator.evaluate`` together with ``data``. The input tree is not
    modified.

    Args:
        tree:      Root of a rendering tree.
        evaluator: Any object satisfying the ``Evaluator`` protocol.
        data:      The data object rules are evaluated against.

    Returns:
        The annotated tree.

    Raises:
        TypeError: If ``evaluator`` has no ``evaluate`` method.
        Exception: Whatever ``evaluator.evaluate`` raises is propagated.
    """
    if not isinstance(evaluator, Evaluator):
        msg = f"evaluator must provide evaluate(rule, data), got {type(evaluator)!r}"
        raise TypeError(msg)

    def _annotate(node: RenderNode) -> RenderNode:
        result = evaluator.evaluate(node.raw_value.to_json(), data)
        return replace(node, evaluation_result=result)

    return map_tree(tree, _annotate)
