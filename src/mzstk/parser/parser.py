"""
mzstk Tree Builder

Converts a token stream from the lexer into an Abstract Syntax Tree (AST).
Blocks are matched with an explicit open-block stack instead of recursion.
"""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple

from mzstk.parser.errors import ResourceError, StructuralError
from mzstk.parser.lexer import Lexer, Token, TokenType, is_variable_char, read_source

logger = logging.getLogger(__name__)


# Open-block stack capacity, root included
DEFAULT_MAX_STACK_DEPTH = 100

MAX_STACK_DEPTH_ENV = "MZSTK_MAX_STACK_DEPTH"


def get_max_stack_depth() -> int:
    """Depth limit from the environment, or the default."""
    raw = os.environ.get(MAX_STACK_DEPTH_ENV)
    if raw is None:
        return DEFAULT_MAX_STACK_DEPTH
    try:
        depth = int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {MAX_STACK_DEPTH_ENV}={raw!r}")
        return DEFAULT_MAX_STACK_DEPTH
    if depth < 1:
        logger.warning(f"Ignoring {MAX_STACK_DEPTH_ENV}={depth}, must be at least 1")
        return DEFAULT_MAX_STACK_DEPTH
    return depth


def is_variable_code(value: Any) -> bool:
    """STORE/LOAD payloads are the code of one ASCII letter."""
    if not isinstance(value, int) or isinstance(value, bool) or not 0 <= value < 128:
        return False
    return is_variable_char(chr(value))


class NodeType(Enum):
    """Types of AST nodes."""
    PROGRAM = auto()        # Root container
    PUSH = auto()
    ADD = auto()
    SUBTRACT = auto()
    MULTIPLY = auto()
    DIVIDE = auto()
    MODULO = auto()
    STORE = auto()
    LOAD = auto()
    IF = auto()             # [ ... ]
    WHILE = auto()          # { ... }
    FOR = auto()            # ( ... )
    FUNCTION = auto()       # @ ... $
    EQUAL = auto()
    NOT_EQUAL = auto()
    LESS = auto()
    GREATER = auto()
    LESS_EQUAL = auto()
    GREATER_EQUAL = auto()
    AND = auto()
    OR = auto()
    NOT = auto()
    START = auto()
    EXIT = auto()


CONTAINER_TYPES = frozenset({
    NodeType.PROGRAM,
    NodeType.IF,
    NodeType.WHILE,
    NodeType.FOR,
    NodeType.FUNCTION,
})


@dataclass
class ASTNode:
    """A node of the program tree. Leaf nodes keep an empty child list."""
    node_type: NodeType
    value: Optional[int] = None
    children: List['ASTNode'] = field(default_factory=list)

    @property
    def is_container(self) -> bool:
        return self.node_type in CONTAINER_TYPES

    @property
    def name(self) -> Optional[str]:
        """Variable name for STORE/LOAD nodes."""
        if self.node_type in (NodeType.STORE, NodeType.LOAD):
            return chr(self.value)
        return None

    def walk(self, depth: int = 0) -> Iterator[Tuple[int, 'ASTNode']]:
        """Yield (depth, node) pairs depth-first, children in source order."""
        pending = [(depth, self)]
        while pending:
            level, node = pending.pop()
            yield level, node
            pending.extend((level + 1, child) for child in reversed(node.children))

    def __repr__(self):
        if self.node_type in (NodeType.STORE, NodeType.LOAD):
            return f"{self.node_type.name}({self.name!r})"
        if self.node_type == NodeType.PUSH:
            return f"PUSH({self.value})"
        if self.is_container:
            return f"{self.node_type.name}{self.children!r}"
        return self.node_type.name

    def _node_dict(self) -> Dict[str, Any]:
        """Dictionary for this node alone, with an empty child list for containers."""
        result: Dict[str, Any] = {'_type': self.node_type.name.lower()}
        if self.node_type == NodeType.PUSH:
            result['value'] = self.value
        elif self.node_type in (NodeType.STORE, NodeType.LOAD):
            result['value'] = self.name
        if self.is_container:
            result['children'] = []
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        result = self._node_dict()
        pending = [(self, result)]
        while pending:
            node, node_dict = pending.pop()
            for child in node.children:
                child_dict = child._node_dict()
                node_dict['children'].append(child_dict)
                pending.append((child, child_dict))
        return result


class Parser:
    """
    Tree builder for mzstk token streams.

    Usage:
        parser = Parser(tokens)
        ast = parser.parse()
    """

    LEAVES = {
        TokenType.PUSH: NodeType.PUSH,
        TokenType.ADD: NodeType.ADD,
        TokenType.SUBTRACT: NodeType.SUBTRACT,
        TokenType.MULTIPLY: NodeType.MULTIPLY,
        TokenType.DIVIDE: NodeType.DIVIDE,
        TokenType.MODULO: NodeType.MODULO,
        TokenType.STORE: NodeType.STORE,
        TokenType.LOAD: NodeType.LOAD,
        TokenType.EQUAL: NodeType.EQUAL,
        TokenType.NOT_EQUAL: NodeType.NOT_EQUAL,
        TokenType.LESS: NodeType.LESS,
        TokenType.GREATER: NodeType.GREATER,
        TokenType.LESS_EQUAL: NodeType.LESS_EQUAL,
        TokenType.GREATER_EQUAL: NodeType.GREATER_EQUAL,
        TokenType.AND: NodeType.AND,
        TokenType.OR: NodeType.OR,
        TokenType.NOT: NodeType.NOT,
        TokenType.START: NodeType.START,
        TokenType.EXIT: NodeType.EXIT,
    }

    # opener -> (block node type, required closer)
    OPENERS = {
        TokenType.IF_OPEN: (NodeType.IF, TokenType.IF_CLOSE),
        TokenType.WHILE_OPEN: (NodeType.WHILE, TokenType.WHILE_CLOSE),
        TokenType.FOR_OPEN: (NodeType.FOR, TokenType.FOR_CLOSE),
        TokenType.FUNCTION_OPEN: (NodeType.FUNCTION, TokenType.FUNCTION_CLOSE),
    }

    CLOSERS = frozenset(closer for _, closer in OPENERS.values())

    def __init__(self, tokens: Sequence[Token], filename: str = "<unknown>",
                 max_depth: Optional[int] = None):
        self.tokens = tokens
        self.filename = filename
        self.max_depth = max_depth if max_depth is not None else get_max_stack_depth()

    def _check_markers(self) -> None:
        """The program must open with S and contain an E somewhere."""
        if not self.tokens or self.tokens[0].type != TokenType.START:
            raise StructuralError("Program must start with 'S'")
        if not any(token.type == TokenType.EXIT for token in self.tokens):
            raise StructuralError("Program must end with 'E'")

    def parse(self) -> ASTNode:
        """Build the AST. Raises StructuralError on malformed structure."""
        self._check_markers()

        root = ASTNode(NodeType.PROGRAM)
        stack: List[ASTNode] = [root]
        expected: List[TokenType] = []

        for index, token in enumerate(self.tokens):
            if token.type == TokenType.EOF:
                break

            if token.type in self.LEAVES:
                if token.type in (TokenType.STORE, TokenType.LOAD) and not is_variable_code(token.value):
                    raise StructuralError(f"Invalid variable payload for {token.type.name}", index)
                node = ASTNode(self.LEAVES[token.type], token.value)
                stack[-1].children.append(node)
                continue

            if token.type in self.OPENERS:
                if len(stack) >= self.max_depth:
                    raise StructuralError("Stack overflow: too many nested blocks", index)
                node_type, closer = self.OPENERS[token.type]
                stack.append(ASTNode(node_type))
                expected.append(closer)
                continue

            if token.type in self.CLOSERS:
                if not expected:
                    raise StructuralError("Unexpected end block", index)
                if token.type != expected[-1]:
                    raise StructuralError(
                        f"Mismatched block ending: expected {expected[-1].name}, "
                        f"got {token.type.name}",
                        index,
                    )
                expected.pop()
                block = stack.pop()
                stack[-1].children.append(block)
                continue

            raise StructuralError(f"Unexpected token in parser: {token.type.name}", index)

        if expected:
            raise StructuralError("Unclosed block(s) at end of program")

        logger.debug(f"Built AST for {self.filename}: {len(root.children)} top-level nodes, "
                     f"depth limit {self.max_depth}")
        return root


def build(tokens: Sequence[Token], max_depth: Optional[int] = None) -> ASTNode:
    """Build the AST for a token sequence."""
    return Parser(tokens, max_depth=max_depth).parse()


def parse_source(source: str, filename: str = "<unknown>",
                 max_depth: Optional[int] = None) -> ASTNode:
    """Parse source code string into AST."""
    try:
        tokens = Lexer(source, filename).tokenize_all()
        logger.debug(f"Tokenized {filename}: {len(tokens)} tokens")
        return Parser(tokens, filename, max_depth=max_depth).parse()
    except MemoryError as e:
        raise ResourceError(f"Memory allocation failed while parsing {filename}") from e


def parse_file(filepath: str, max_depth: Optional[int] = None) -> ASTNode:
    """Parse a file into AST. Handles encoding fallback."""
    return parse_source(read_source(filepath), filepath, max_depth=max_depth)
