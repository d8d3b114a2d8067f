"""Tests for format_label and LabelFormatter."""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Any

import pytest

from rulegraph.labels import ITEM_SENTINEL, LabelFormatter, format_label, format_number
from rulegraph.rules import TRUNCATED, parse_rule


def _label(raw: Any, compact: bool = False) -> str:
    return format_label(parse_rule(raw), compact)


# ---------------------------------------------------------------------------
# Primitives and lists
# ---------------------------------------------------------------------------


class TestPrimitiveLabels:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            (None, "null"),
            (True, "true"),
            (False, "false"),
            (18, "18"),
            (2.0, "2"),
            (2.5, "2.5"),
            ("adult", '"adult"'),
            ({}, "{}"),
        ],
    )
    def test_primitive(self, raw: Any, expected: str) -> None:
        assert _label(raw) == expected

    def test_format_number(self) -> None:
        assert format_number(3) == "3"
        assert format_number(3.0) == "3"
        assert format_number(-0.25) == "-0.25"

    def test_format_number_large_floats_keep_exponent(self) -> None:
        assert format_number(1e20) == "100000000000000000000"
        assert format_number(1e300) == "1e+300"
        assert format_number(-1e21) == "-1e+21"
        assert _label(1e300) == "1e+300"


class TestListLabels:
    def test_short_list_inline(self) -> None:
        assert _label([1, "a", None]) == '[1, "a", null]'

    def test_long_list_summarised(self) -> None:
        assert _label([1, 2, 3, 4]) == "[4 items]"

    def test_compact_always_summarised(self) -> None:
        assert _label([1], compact=True) == "[1 items]"

    def test_nested_list_is_compact(self) -> None:
        assert _label([[1, 2]]) == "[[2 items]]"


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


class TestVarLabels:
    def test_path(self) -> None:
        assert _label({"var": "age"}) == "$age"

    def test_dotted_path(self) -> None:
        assert _label({"var": "user.age"}) == "$user.age"

    def test_path_with_default(self) -> None:
        assert _label({"var": ["age", 21]}) == "$age"

    def test_numeric_path(self) -> None:
        assert _label({"var": 1}) == "$1"

    @pytest.mark.parametrize("raw", [{"var": ""}, {"var": []}, {"var": None}])
    def test_empty_path_is_current_item(self, raw: Any) -> None:
        assert _label(raw) == ITEM_SENTINEL


class TestOperatorLabels:
    def test_comparison(self) -> None:
        assert _label({">=": [{"var": "age"}, 18]}) == "$age >= 18"

    def test_comparison_with_list_operand(self) -> None:
        assert _label({"==": [{"var": "x"}, [1, 2]]}) == "$x == [2 items]"

    def test_and(self) -> None:
        rule = {"and": [{">": [{"var": "a"}, 1]}, {"<": [{"var": "b"}, 2]}]}
        assert _label(rule) == "$a > 1 AND $b < 2"

    def test_or(self) -> None:
        assert _label({"or": [{"var": "a"}, False]}) == "$a OR false"

    def test_not(self) -> None:
        assert _label({"!": [{"var": "x"}]}) == "NOT $x"

    def test_not_single_operand(self) -> None:
        assert _label({"!": {"var": "x"}}) == "NOT $x"

    def test_double_negation(self) -> None:
        assert _label({"!!": [{"var": "x"}]}) == "BOOL $x"

    def test_not_missing_operand(self) -> None:
        assert _label({"!": []}) == "NOT ?"

    def test_in_always_summarises_array_haystack(self) -> None:
        assert _label({"in": [{"var": "c"}, ["US", "CA"]]}) == "$c in [2 items]"

    def test_in_string_haystack(self) -> None:
        assert _label({"in": ["Spring", {"var": "s"}]}) == '"Spring" in $s'

    def test_arithmetic(self) -> None:
        assert _label({"+": [1, {"var": "x"}, 2.0]}) == "1 + $x + 2"

    @pytest.mark.parametrize("op", ["map", "filter", "reduce", "all", "some", "none"])
    def test_iteration(self, op: str) -> None:
        assert _label({op: [{"var": "items"}, {"var": ""}]}) == f"{op.upper()}(...)"

    def test_unknown_operator(self) -> None:
        assert _label({"cat": ["a", "b"]}) == "cat(...)"

    @pytest.mark.parametrize("raw", [{"and": []}, {"or": []}, {"+": []}, {">": [1]}])
    def test_empty_family_falls_back(self, raw: dict[str, Any]) -> None:
        (op,) = raw
        assert _label(raw) == f"{op}(...)"

    def test_deterministic(self) -> None:
        rule = parse_rule({"and": [{"var": "a"}, {"in": [1, [1, 2, 3]]}]})
        assert format_label(rule) == format_label(rule)


# ---------------------------------------------------------------------------
# LabelFormatter
# ---------------------------------------------------------------------------


class TestLabelFormatter:
    def test_matches_format_label(self) -> None:
        rule = parse_rule({">=": [{"var": "age"}, 18]})
        assert LabelFormatter().format(rule) == format_label(rule)

    def test_caches_entries(self) -> None:
        formatter = LabelFormatter()
        rule = parse_rule({"var": "age"})
        formatter.format(rule)
        formatter.format(rule)
        assert formatter.curr_size == 1

    def test_compact_is_part_of_key(self) -> None:
        formatter = LabelFormatter()
        rule = parse_rule([1])
        assert formatter.format(rule) == "[1]"
        assert formatter.format(rule, True) == "[1 items]"
        assert formatter.curr_size == 2

    def test_eviction(self) -> None:
        formatter = LabelFormatter(max_size=2)
        for name in ("a", "b", "c"):
            formatter.format(parse_rule({"var": name}))
        assert formatter.max_size == 2
        assert formatter.curr_size == 2

    def test_instances_do_not_share_state(self) -> None:
        first, second = LabelFormatter(), LabelFormatter()
        first.format(parse_rule(1))
        assert second.curr_size == 0

    def test_shared_across_threads(self) -> None:
        formatter = LabelFormatter(max_size=2)
        rules = [parse_rule({">=": [{"var": f"v{n}"}, n]}) for n in range(20)]
        expected = [format_label(rule) for rule in rules] * 50
        start = threading.Barrier(8)

        def work(chunk: int) -> list[str]:
            start.wait()
            return [formatter.format(rule) for rule in rules * 50][chunk::8]

        with ThreadPoolExecutor(max_workers=8) as pool:
            chunks = list(pool.map(work, range(8)))

        for chunk, labels in enumerate(chunks):
            assert labels == expected[chunk::8]
        assert formatter.curr_size <= 2


# ---------------------------------------------------------------------------
# Deep nesting
# ---------------------------------------------------------------------------


def _deep_rule(levels: int) -> Any:
    raw: Any = {"var": "x"}
    for level in range(levels):
        raw = {"!": [raw]} if level % 2 else {"==": [raw, level]}
    return raw


class TestDeepLabels:
    def test_placeholder_label(self) -> None:
        assert format_label(TRUNCATED) == "..."

    def test_deep_rule_is_shortened(self) -> None:
        label = format_label(parse_rule(_deep_rule(400)))
        assert label.startswith("NOT ")
        assert "..." in label
        assert "$x" not in label

    def test_shallow_rule_is_complete(self) -> None:
        assert format_label(parse_rule(_deep_rule(4))) == "NOT NOT $x == 0 == 2"
