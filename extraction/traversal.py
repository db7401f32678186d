"""
AST traversal and declaration extraction logic.

This module walks the namespace-level statements of a parsed PHP file and
turns class, interface, enum and trait declarations into
``DeclarationDescriptor`` objects with fully-qualified names.
"""

import logging
from typing import Iterator, List, Optional, Tuple

from tree_sitter import Node, Tree

from core.names import normalize_php_name, qualify_name
from extraction.config import DECLARATION_KIND_MAP, NAMESPACE_BODY, NAMESPACE_NODE
from extraction.errors import ParseError
from extraction.models import DeclarationDescriptor, KindMask
from extraction.parser import parse_file

logger = logging.getLogger(__name__)


def node_text(node: Node, source_bytes: bytes) -> str:
    """Decode the source slice covered by ``node``.

    Raises:
        UnicodeDecodeError: If the slice is not valid UTF-8.
    """
    return source_bytes[node.start_byte:node.end_byte].decode("utf-8")


def extract_namespace_name(node: Node, source_bytes: bytes) -> Optional[str]:
    """Extract the name of a namespace from a namespace_definition node.

    Args:
        node: A namespace_definition node.
        source_bytes: The raw source file bytes.

    Returns:
        The namespace name, or None for the global namespace (``namespace { }``).
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        return None
    name = normalize_php_name(node_text(name_node, source_bytes))
    return name or None


def extract_declaration_name(node: Node, source_bytes: bytes) -> Optional[str]:
    """Extract the local name of a class/interface/enum/trait declaration.

    Returns:
        The declared name, or None if the declaration is anonymous.
    """
    name_node = node.child_by_field_name("name")
    if name_node is None:
        logger.debug("%s at line %d has no name (anonymous)", node.type, node.start_point.row + 1)
        return None
    name = normalize_php_name(node_text(name_node, source_bytes))
    return name or None


def iter_declaration_nodes(
    root: Node,
    source_bytes: bytes,
    mask: KindMask,
) -> Iterator[Tuple[Node, Optional[str]]]:
    """Yield ``(declaration_node, namespace)`` pairs in source order.

    Only namespace-level statements are visited: direct children of the
    program and statements of braced namespace bodies. Declarations inside
    functions, methods or conditional blocks are ignored.

    Each namespace_definition replaces the namespace context for every later
    declaration in the file; the last namespace seen wins.
    """
    namespace: Optional[str] = None

    for child in root.named_children:
        if child.type == NAMESPACE_NODE:
            namespace = extract_namespace_name(child, source_bytes)
            logger.debug("Namespace context set to %r at line %d", namespace, child.start_point.row + 1)

            body = child.child_by_field_name("body")
            if body is not None and body.type == NAMESPACE_BODY:
                for statement in body.named_children:
                    kind = DECLARATION_KIND_MAP.get(statement.type)
                    if kind is not None and mask.includes(kind):
                        yield statement, namespace
            continue

        kind = DECLARATION_KIND_MAP.get(child.type)
        if kind is not None and mask.includes(kind):
            yield child, namespace


def extract_declaration_from_node(
    node: Node,
    source_bytes: bytes,
    file_path: str,
    namespace: Optional[str],
) -> Optional[DeclarationDescriptor]:
    """Build a descriptor for a single declaration node.

    Args:
        node: A class/interface/enum/trait declaration node.
        source_bytes: The raw source file bytes.
        file_path: Path reported on the descriptor.
        namespace: Namespace context in effect for the node.

    Returns:
        A DeclarationDescriptor, or None for anonymous or unsupported nodes.
    """
    kind = DECLARATION_KIND_MAP.get(node.type)
    if kind is None:
        logger.warning("Unknown declaration node type: %s", node.type)
        return None

    local_name = extract_declaration_name(node, source_bytes)
    if not local_name:
        return None

    descriptor = DeclarationDescriptor(
        name=qualify_name(local_name, namespace),
        kind=kind,
        file=file_path,
        line=node.start_point.row + 1,
    )
    logger.debug("Extracted %s: %s at %s:%d", kind.name, descriptor.name, file_path, descriptor.line)
    return descriptor


def extract_declarations_from_tree(
    tree: Tree,
    source_bytes: bytes,
    file_path: str,
    mask: KindMask,
) -> List[DeclarationDescriptor]:
    """Extract all declarations selected by ``mask`` from a parsed PHP AST.

    Args:
        tree: The parsed AST tree.
        source_bytes: The raw source file bytes.
        file_path: Path reported on each descriptor.
        mask: Declaration kinds to extract.

    Returns:
        Descriptors in source order.
    """
    declarations = []
    for node, namespace in iter_declaration_nodes(tree.root_node, source_bytes, mask):
        descriptor = extract_declaration_from_node(node, source_bytes, file_path, namespace)
        if descriptor is not None:
            declarations.append(descriptor)
    return declarations


def extract_file_declarations(file_path: str, mask: KindMask) -> List[DeclarationDescriptor]:
    """Parse one file and extract its declarations.

    Raises:
        ParseError: If the file cannot be read, decoded or parsed, or a
            declared name is not a valid PHP name.
    """
    tree, source_bytes = parse_file(file_path)
    try:
        declarations = extract_declarations_from_tree(tree, source_bytes, file_path, mask)
    except (UnicodeDecodeError, ValueError) as e:
        raise ParseError(file_path, e) from e

    logger.info("Extracted %d declarations from %s", len(declarations), file_path)
    return declarations
