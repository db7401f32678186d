"""
Layer 1: Extraction Engine

Tree-sitter-based PHP source scanner. Discovers source files and extracts
class, interface, enum and trait declarations with fully-qualified names.
"""

from extraction.models import (
    MODE_FIND_ALL,
    MODE_FIND_CLASSES,
    MODE_FIND_ENUMS,
    MODE_FIND_INTERFACES,
    MODE_FIND_TRAITS,
    DeclarationDescriptor,
    DeclarationKind,
    KindMask,
    ScanStats,
)
from extraction.errors import ClassScanError, DiscoveryError, ParseError
from extraction.parser import create_parser, parse_file, parse_bytes, count_error_nodes
from extraction.discovery import iter_source_files
from extraction.traversal import extract_declarations_from_tree, extract_file_declarations

__all__ = [
    # Data models
    "DeclarationDescriptor",
    "DeclarationKind",
    "KindMask",
    "ScanStats",
    "MODE_FIND_ALL",
    "MODE_FIND_CLASSES",
    "MODE_FIND_ENUMS",
    "MODE_FIND_INTERFACES",
    "MODE_FIND_TRAITS",
    # Errors
    "ClassScanError",
    "DiscoveryError",
    "ParseError",
    # Low-level parsing
    "create_parser",
    "parse_file",
    "parse_bytes",
    "count_error_nodes",
    # Discovery and extraction
    "iter_source_files",
    "extract_declarations_from_tree",
    "extract_file_declarations",
]
