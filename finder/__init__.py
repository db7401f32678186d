"""
Layer 2: Finder

``ClassFinder`` orchestrator and the filter stages applied to its output.
"""

from finder.filters import (
    FILTER_REGISTRY,
    DeclarationFilter,
    KindFilter,
    LimitFilter,
    NamePatternFilter,
    NamespaceFilter,
    PredicateFilter,
    UniqueFilter,
    apply_filters,
    build_filter,
)
from finder.class_finder import ClassFinder

__all__ = [
    "ClassFinder",
    "DeclarationFilter",
    "KindFilter",
    "LimitFilter",
    "NamePatternFilter",
    "NamespaceFilter",
    "PredicateFilter",
    "UniqueFilter",
    "FILTER_REGISTRY",
    "apply_filters",
    "build_filter",
]
