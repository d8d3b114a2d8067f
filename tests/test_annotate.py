"""Tests for annotate_results and the Evaluator protocol."""

from __future__ import annotations

from typing import Any

import pytest

from rulegraph.annotate import annotate_results
from rulegraph.protocols import Evaluator
from rulegraph.tree import RenderNode, TreeBuilder, flatten_tree

RULE = {"if": [{">": [{"var": "age"}, 18]}, "adult", "minor"]}


class _RecordingEvaluator:
    """Returns the JSON rule it was given, recording each call."""

    def __init__(self) -> None:
        self.calls: list[tuple[Any, Any]] = []

    def evaluate(self, rule: Any, data: Any) -> Any:
        self.calls.append((rule, data))
        return rule


class _FailingEvaluator:
    def evaluate(self, rule: Any, data: Any) -> Any:
        raise RuntimeError("boom")


@pytest.fixture
def tree() -> RenderNode:
    return TreeBuilder().build(RULE)


class TestEvaluatorProtocol:
    def test_structural_conformance(self) -> None:
        assert isinstance(_RecordingEvaluator(), Evaluator)

    def test_missing_method(self) -> None:
        assert not isinstance(object(), Evaluator)


class TestAnnotateResults:
    def test_every_node_annotated(self, tree: RenderNode) -> None:
        annotated = annotate_results(tree, _RecordingEvaluator(), {"age": 30})
        for node in flatten_tree(annotated):
            assert node.evaluation_result == node.raw_value.to_json()

    def test_evaluator_receives_json_and_data(self, tree: RenderNode) -> None:
        evaluator = _RecordingEvaluator()
        annotate_results(tree, evaluator, {"age": 30})
        assert (RULE, {"age": 30}) in evaluator.calls
        assert ("adult", {"age": 30}) in evaluator.calls
        assert len(evaluator.calls) == 3

    def test_input_not_modified(self, tree: RenderNode) -> None:
        annotated = annotate_results(tree, _RecordingEvaluator(), {})
        assert annotated is not tree
        assert all(node.evaluation_result is None for node in flatten_tree(tree))

    def test_structure_preserved(self, tree: RenderNode) -> None:
        annotated = annotate_results(tree, _RecordingEvaluator(), {})
        assert [n.id for n in flatten_tree(annotated)] == [n.id for n in flatten_tree(tree)]

    def test_evaluator_errors_propagate(self, tree: RenderNode) -> None:
        with pytest.raises(RuntimeError, match="boom"):
            annotate_results(tree, _FailingEvaluator(), {})

    def test_non_evaluator_rejected(self, tree: RenderNode) -> None:
        with pytest.raises(TypeError):
            annotate_results(tree, object(), {})  # type: ignore[arg-type]
