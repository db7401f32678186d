"""
Configuration constants for PHP declaration extraction.

Defines the tree-sitter node type strings used for declaration extraction.
"""

from typing import Dict, FrozenSet, Set

from extraction.models import DeclarationKind

# Declaration node type -> kind. Closed table; every declaration kind the
# extractor can emit is listed here.
DECLARATION_KIND_MAP: Dict[str, DeclarationKind] = {
    "interface_declaration": DeclarationKind.INTERFACE,
    "class_declaration": DeclarationKind.CLASS,
    "enum_declaration": DeclarationKind.ENUM,
    "trait_declaration": DeclarationKind.TRAIT,
}

# Namespace definition node type (both `namespace Foo;` and `namespace Foo { }`)
NAMESPACE_NODE: str = "namespace_definition"

# Body of a braced namespace
NAMESPACE_BODY: str = "compound_statement"

# Error node types produced by tree-sitter on malformed input
ERROR_NODE: str = "ERROR"

# PHP file extensions
PHP_EXTENSIONS: FrozenSet[str] = frozenset({".php"})

# Directories never descended into
VCS_DIRECTORIES: Set[str] = {
    ".git",
    ".hg",
    ".svn",
    "CVS",
    "_darcs",
    ".bzr",
}

# Extraction policy defaults
DEFAULT_CONTINUE_ON_ERROR: bool = False
