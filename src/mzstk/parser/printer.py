"""
AST text dump.

One node per line: the kind name, the literal in parentheses for PUSH,
STORE and LOAD, indented two spaces per nesting level.
"""

import sys
from typing import List, TextIO

from mzstk.parser.parser import ASTNode, NodeType

INDENT = "  "


def format_node(node: ASTNode) -> str:
    """Render a single node without indentation."""
    if node.node_type == NodeType.PUSH:
        return f"{node.node_type.name} ({node.value})"
    if node.node_type in (NodeType.STORE, NodeType.LOAD):
        return f"{node.node_type.name} ({node.name})"
    return node.node_type.name


def format_ast(node: ASTNode, indent: int = 0) -> str:
    """Render the whole tree, depth-first, children in source order."""
    lines = [f"{INDENT * (indent + depth)}{format_node(n)}" for depth, n in node.walk()]
    return "\n".join(lines) + "\n"


def print_ast(node: ASTNode, file: TextIO = None) -> None:
    (file or sys.stdout).write(format_ast(node))


def node_kinds(dump: str) -> List[str]:
    """Kind names of a dump, in the order they were printed."""
    return [line.split()[0] for line in dump.splitlines() if line.strip()]
