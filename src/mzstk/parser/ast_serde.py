"""
AST Serialization - JSON export of a parsed program.

Usage:
    from mzstk.parser.ast_serde import serialize_ast, deserialize_ast, count_ast_nodes
"""

import json
from typing import Any, Dict, Union

from mzstk.parser.errors import ResourceError
from mzstk.parser.parser import ASTNode


def serialize_ast(ast: ASTNode, indent: int = None) -> bytes:
    """
    Serialize AST to JSON bytes.

    Args:
        ast: Parsed AST root node
        indent: Pretty-print indent, compact output when None

    Returns:
        UTF-8 encoded JSON bytes

    Raises:
        ResourceError: the tree nests deeper than the JSON encoder can recurse
    """
    separators = (',', ':') if indent is None else None
    try:
        return json.dumps(ast.to_dict(), indent=indent, separators=separators).encode('utf-8')
    except RecursionError as e:
        raise ResourceError("AST nests too deeply to serialize as JSON") from e


def deserialize_ast(data: Union[bytes, str]) -> Dict[str, Any]:
    """Deserialize AST from JSON bytes or string into its dict form."""
    if isinstance(data, bytes):
        return json.loads(data.decode('utf-8'))
    return json.loads(data)


def count_ast_nodes(ast_dict: Dict[str, Any]) -> int:
    """Count nodes in a serialized AST, root included."""
    count = 0
    pending = [ast_dict]
    while pending:
        node = pending.pop()
        count += 1
        pending.extend(node.get('children', []))
    return count
