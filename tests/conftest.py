"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from mzstk.parser import parse_source
from mzstk.parser.parser import ASTNode, NodeType


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def programs_dir(fixtures_dir):
    """Path to sample .mzstk programs."""
    return fixtures_dir / "programs"


@pytest.fixture(autouse=True)
def clear_depth_env(monkeypatch):
    """Keep a developer's MZSTK_MAX_STACK_DEPTH out of the tests."""
    monkeypatch.delenv("MZSTK_MAX_STACK_DEPTH", raising=False)


# =============================================================================
# PARSED AST FIXTURES
# =============================================================================

@pytest.fixture
def countdown_ast(programs_dir):
    """AST of the countdown sample program."""
    return parse_source((programs_dir / "countdown.mzstk").read_text(), "countdown.mzstk")


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def kinds(node: ASTNode) -> list:
    """Kind names of a node's direct children."""
    return [child.node_type.name for child in node.children]


def nested(opener: str, closer: str, depth: int) -> str:
    """Program with `depth` blocks nested inside each other."""
    return "S" + opener * depth + closer * depth + "E"


def first_block(ast: ASTNode, node_type: NodeType) -> ASTNode:
    """Find the first child of a given block type."""
    for child in ast.children:
        if child.node_type == node_type:
            return child
    return None
