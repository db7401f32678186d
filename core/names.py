"""PHP name contract shared by extraction and filtering layers."""

from __future__ import annotations

import re
from typing import Optional

NAMESPACE_SEPARATOR = "\\"

_WHITESPACE_RE = re.compile(r"\s+")
_SEGMENT_RE = re.compile(r"^[A-Za-z_\x80-\U0010ffff][A-Za-z0-9_\x80-\U0010ffff]*$")


def normalize_php_name(name: str) -> str:
    """Normalize a PHP name into a canonical form.

    Tree-sitter returns the raw source slice, which may contain whitespace
    around separators (``Foo \\ Bar``). All whitespace is dropped.

    Args:
        name: Raw name text from parser output.

    Returns:
        Canonicalized name.
    """
    return _WHITESPACE_RE.sub("", name)


def is_fully_qualified(name: str) -> bool:
    """Return True when ``name`` is already absolute (leading separator)."""
    return name.startswith(NAMESPACE_SEPARATOR)


def is_valid_qualified_name(name: str) -> bool:
    """Check that ``name`` is a non-empty, separator-joined list of identifiers.

    A leading separator is not allowed; callers strip it first.
    """
    if not name:
        return False
    return all(_SEGMENT_RE.match(segment) for segment in name.split(NAMESPACE_SEPARATOR))


def qualify_name(local_name: str, namespace: Optional[str] = None) -> str:
    """Resolve a declaration name against its namespace context.

    Args:
        local_name: Name as written in the declaration.
        namespace: Active namespace name, or None for the global namespace.

    Returns:
        Fully-qualified name without a leading separator.
    """
    local_name = normalize_php_name(local_name)
    if is_fully_qualified(local_name):
        return local_name.lstrip(NAMESPACE_SEPARATOR)
    if namespace:
        namespace = normalize_php_name(namespace).strip(NAMESPACE_SEPARATOR)
        if namespace:
            return f"{namespace}{NAMESPACE_SEPARATOR}{local_name}"
    return local_name


def split_qualified_name(name: str) -> tuple[str, str]:
    """Split ``Foo\\Bar\\Baz`` into ``("Foo\\Bar", "Baz")``."""
    namespace, _, short_name = name.rpartition(NAMESPACE_SEPARATOR)
    return namespace, short_name
