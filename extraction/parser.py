"""
Tree-sitter parser initialization and file parsing utilities.

This module provides functions to initialize the PHP parser and parse source files.
"""

import logging
from typing import Optional, Tuple

import tree_sitter_php as tsphp
from tree_sitter import Language, Node, Parser, Tree

from extraction.config import ERROR_NODE
from extraction.errors import ParseError

logger = logging.getLogger(__name__)

# Module-level language constant. The ``php`` grammar accepts mixed
# HTML/PHP files with ``<?php`` tags, which is what real source trees contain.
PHP_LANGUAGE = Language(tsphp.language_php())


def create_parser() -> Parser:
    """Create and configure a tree-sitter parser for PHP.

    Returns:
        A Parser instance configured with the PHP language.

    Example:
        >>> parser = create_parser()
        >>> tree = parser.parse(b"<?php class Foo {}")
    """
    parser = Parser(PHP_LANGUAGE)
    logger.debug("Created tree-sitter PHP parser")
    return parser


def parse_bytes(source: bytes) -> Tree:
    """Parse raw bytes of PHP source code.

    Tree-sitter never fails outright; malformed input produces a tree whose
    root ``has_error``. Use :func:`find_first_error` to locate the problem.

    Args:
        source: UTF-8 encoded bytes of PHP source code.

    Returns:
        A Tree object representing the parsed AST.

    Raises:
        TypeError: If source is not bytes.
    """
    if not isinstance(source, bytes):
        raise TypeError(f"Source must be bytes, got {type(source).__name__}")

    tree = create_parser().parse(source)
    logger.debug("Parsed %d bytes of PHP code", len(source))
    return tree


def _is_error(node: Node) -> bool:
    return node.type == ERROR_NODE or node.is_missing


def find_first_error(tree: Tree) -> Optional[Node]:
    """Return the first error or missing node in document order, if any."""
    if not tree.root_node.has_error:
        return None

    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if _is_error(node):
            return node
        # Only subtrees flagged with has_error can contain error nodes.
        stack.extend(reversed([child for child in node.children if child.has_error or child.is_missing]))
    return tree.root_node


def count_error_nodes(tree: Tree) -> int:
    """Count error and missing nodes in a parsed tree."""
    if not tree.root_node.has_error:
        return 0

    count = 0
    stack = [tree.root_node]
    while stack:
        node = stack.pop()
        if _is_error(node):
            count += 1
        stack.extend(child for child in node.children if child.has_error or child.is_missing)
    return count


def describe_error(node: Node) -> str:
    """Human-readable location of a syntax error node."""
    row, column = node.start_point
    if node.is_missing:
        return f"missing {node.type!r} at line {row + 1}, column {column + 1}"
    return f"syntax error at line {row + 1}, column {column + 1}"


def parse_file(file_path: str) -> Tuple[Tree, bytes]:
    """Parse a PHP source file from disk, rejecting malformed files.

    Args:
        file_path: Path to the .php file.

    Returns:
        A tuple of (Tree, source_bytes).

    Raises:
        ParseError: If the file cannot be read or contains syntax errors.
    """
    try:
        with open(file_path, "rb") as f:
            source_bytes = f.read()
    except OSError as e:
        logger.error("Error reading file %s: %s", file_path, e)
        raise ParseError(file_path, e) from e

    tree = parse_bytes(source_bytes)

    error_node = find_first_error(tree)
    if error_node is not None:
        reason = describe_error(error_node)
        logger.error(
            "File %s contains syntax errors (%d error nodes): %s",
            file_path,
            count_error_nodes(tree),
            reason,
        )
        raise ParseError(file_path, reason)

    logger.debug("Successfully parsed file: %s", file_path)
    return tree, source_bytes
