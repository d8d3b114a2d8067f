"""
CLI interface for rulegraph.

Reads a JSON rule expression from a file or stdin and prints either the
flowchart document, an indented outline of the rendering tree, or the
layout geometry as JSON.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import Any

from rulegraph.flowchart import FlowchartOptions, FlowOrientation, Theme, to_flowchart
from rulegraph.layout import LayoutConfig, Orientation, TreeLayout, layout_tree
from rulegraph.tree import RenderNode, TreeBuilder

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_IO_ERROR = 1
EXIT_BAD_INPUT = 2


def parse_args(args: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="rulegraph",
        description="Visualize JSON rule expressions as trees and flowcharts",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Log degraded rule shapes to stderr",
    )

    commands = parser.add_subparsers(dest="command", required=True)

    flowchart = commands.add_parser("flowchart", help="Print the flowchart document")
    flowchart.add_argument(
        "file",
        nargs="?",
        help="Rule file (reads from stdin if not provided or '-')",
    )
    flowchart.add_argument(
        "--orientation",
        "-o",
        choices=[o.value for o in FlowOrientation],
        default=FlowOrientation.TD.value,
        help="Flowchart direction (default: TD)",
    )
    flowchart.add_argument(
        "--no-values",
        action="store_false",
        dest="include_values",
        default=True,
        help="Do not draw the elements of literal arrays",
    )
    flowchart.add_argument(
        "--theme",
        choices=[t.value for t in Theme],
        help="Prefix the document with a theme directive",
    )

    tree = commands.add_parser("tree", help="Print the rendering tree as an outline")
    tree.add_argument(
        "file",
        nargs="?",
        help="Rule file (reads from stdin if not provided or '-')",
    )
    tree.add_argument(
        "--depth",
        "-d",
        type=int,
        help="Only print nodes up to this depth",
    )

    layout = commands.add_parser("layout", help="Print the layout geometry as JSON")
    layout.add_argument(
        "file",
        nargs="?",
        help="Rule file (reads from stdin if not provided or '-')",
    )
    layout.add_argument(
        "--horizontal",
        action="store_true",
        help="Grow the tree to the right instead of downwards",
    )

    return parser.parse_args(args)


def read_rule(path: str | None) -> Any:
    """Read and parse the rule JSON from ``path``, or stdin for None / ``-``.

    Raises:
        OSError: If the file cannot be read.
        json.JSONDecodeError: If the content is not valid JSON.
        UnicodeDecodeError: If the content is not UTF-8 text.
        RecursionError: If the JSON nests deeper than the decoder can follow.
    """
    if path is None or path == "-":
        text = sys.stdin.read()
    else:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    return json.loads(text)


def format_outline(root: RenderNode, max_depth: int | None = None) -> str:
    """Indented outline: one ``[kind] label`` line per node, two spaces per level."""
    lines: list[str] = []
    stack = [root]
    while stack:
        node = stack.pop()
        relative = node.depth - root.depth
        if max_depth is not None and relative > max_depth:
            continue
        lines.append(f"{'  ' * relative}[{node.kind}] {node.label}")
        stack.extend(reversed(node.children))
    return "\n".join(lines)


def layout_to_json(result: TreeLayout) -> dict[str, Any]:
    return {
        "width": result.width,
        "height": result.height,
        "nodes": [
            {
                "id": node.id,
                "kind": str(node.kind),
                "label": node.label,
                "x": node.x,
                "y": node.y,
                "width": node.width,
                "height": node.height,
            }
            for node in result.nodes
        ],
        "edges": [
            {"id": edge.id, "source": edge.source, "target": edge.target, "path": edge.path}
            for edge in result.edges
        ],
    }


def main(args: list[str] | None = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)

    if parsed.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        rule = read_rule(parsed.file)
    except json.JSONDecodeError as e:
        print(f"Error: invalid JSON: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT
    except UnicodeDecodeError as e:
        print(f"Error: input is not UTF-8 text: {e}", file=sys.stderr)
        return EXIT_BAD_INPUT
    except RecursionError:
        print("Error: invalid JSON: nested too deeply", file=sys.stderr)
        return EXIT_BAD_INPUT
    except OSError as e:
        print(f"Error reading input: {e}", file=sys.stderr)
        return EXIT_IO_ERROR

    if parsed.command == "flowchart":
        options = FlowchartOptions(
            orientation=FlowOrientation(parsed.orientation),
            include_values=parsed.include_values,
            theme=Theme(parsed.theme) if parsed.theme else None,
        )
        print(to_flowchart(rule, options))
    elif parsed.command == "tree":
        print(format_outline(TreeBuilder().build(rule), parsed.depth))
    else:
        orientation = Orientation.HORIZONTAL if parsed.horizontal else Orientation.VERTICAL
        result = layout_tree(TreeBuilder().build(rule), LayoutConfig(orientation=orientation))
        print(json.dumps(layout_to_json(result), indent=2, ensure_ascii=False))

    logger.debug("Rendered %s for %s", parsed.command, parsed.file or "<stdin>")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
