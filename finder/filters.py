"""
Filter stages for the declaration stream.

A filter stage is any callable that takes an iterable of
``DeclarationDescriptor`` and returns an iterable of them. Stages must stay
lazy: they pull from upstream only as far as their consumer pulls from them.
"""

from __future__ import annotations

import fnmatch
import itertools
import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, Iterator, Sequence, Union

from core.names import NAMESPACE_SEPARATOR
from core.scan_config import ConfigValidationError
from extraction.models import DeclarationDescriptor, KindMask

logger = logging.getLogger(__name__)

Declarations = Iterable[DeclarationDescriptor]
FilterStage = Callable[[Declarations], Declarations]


class DeclarationFilter(ABC):
    """Base class for filter stages."""

    @abstractmethod
    def apply(self, declarations: Declarations) -> Iterator[DeclarationDescriptor]:
        """Transform the upstream sequence into a new lazy sequence."""

    def __call__(self, declarations: Declarations) -> Iterator[DeclarationDescriptor]:
        return self.apply(declarations)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


def apply_filters(declarations: Declarations, filters: Sequence[FilterStage]) -> Declarations:
    """Thread ``declarations`` through ``filters`` in order.

    No element is pulled here; each stage only wraps the previous one.
    """
    for stage in filters:
        declarations = stage(declarations)
    return declarations


def _as_list(value: Union[str, Iterable[str]]) -> list[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


class KindFilter(DeclarationFilter):
    """Keep declarations whose kind is selected by a mask."""

    def __init__(self, kinds: Any):
        self.mask = KindMask.coerce(kinds)

    def apply(self, declarations: Declarations) -> Iterator[DeclarationDescriptor]:
        return (d for d in declarations if self.mask.includes(d.kind))

    def __repr__(self) -> str:
        return f"KindFilter({self.mask.value})"


class NamespaceFilter(DeclarationFilter):
    """Keep declarations that live in one of the given namespaces.

    With ``recursive=False`` only direct members of a namespace match;
    otherwise sub-namespaces match too. An empty prefix selects the global
    namespace.
    """

    def __init__(self, namespaces: Union[str, Iterable[str]], recursive: bool = True):
        self.namespaces = tuple(ns.strip(NAMESPACE_SEPARATOR) for ns in _as_list(namespaces))
        self.recursive = recursive

    def _matches(self, namespace: str) -> bool:
        for prefix in self.namespaces:
            if namespace == prefix:
                return True
            if self.recursive and (not prefix or namespace.startswith(prefix + NAMESPACE_SEPARATOR)):
                return True
        return False

    def apply(self, declarations: Declarations) -> Iterator[DeclarationDescriptor]:
        return (d for d in declarations if self._matches(d.namespace))

    def __repr__(self) -> str:
        return f"NamespaceFilter({list(self.namespaces)!r}, recursive={self.recursive})"


class NamePatternFilter(DeclarationFilter):
    """Keep (or, with ``exclude=True``, drop) names matching shell-style patterns.

    Matching is case-sensitive and runs against the fully-qualified name, so
    ``App\\*Controller`` matches ``App\\Http\\UserController``.
    """

    def __init__(self, patterns: Union[str, Iterable[str]], exclude: bool = False):
        self.patterns = tuple(_as_list(patterns))
        self.exclude = exclude

    def _matches(self, name: str) -> bool:
        return any(fnmatch.fnmatchcase(name, pattern) for pattern in self.patterns)

    def apply(self, declarations: Declarations) -> Iterator[DeclarationDescriptor]:
        return (d for d in declarations if self._matches(d.name) != self.exclude)

    def __repr__(self) -> str:
        return f"NamePatternFilter({list(self.patterns)!r}, exclude={self.exclude})"


class UniqueFilter(DeclarationFilter):
    """Drop declarations whose name was already yielded.

    Only names are buffered. The seen-set is local to each ``apply`` call, so
    one instance can serve independent scans.
    """

    def apply(self, declarations: Declarations) -> Iterator[DeclarationDescriptor]:
        seen: set[str] = set()
        for declaration in declarations:
            if declaration.name in seen:
                logger.debug("Dropping duplicate declaration %s in %s", declaration.name, declaration.file)
                continue
            seen.add(declaration.name)
            yield declaration


class PredicateFilter(DeclarationFilter):
    """Keep declarations for which ``predicate`` returns true."""

    def __init__(self, predicate: Callable[[DeclarationDescriptor], bool]):
        if not callable(predicate):
            raise TypeError("predicate must be callable")
        self.predicate = predicate

    def apply(self, declarations: Declarations) -> Iterator[DeclarationDescriptor]:
        return (d for d in declarations if self.predicate(d))


class LimitFilter(DeclarationFilter):
    """Stop after ``count`` declarations without pulling any further."""

    def __init__(self, count: int):
        if isinstance(count, bool) or not isinstance(count, int) or count < 0:
            raise ValueError(f"count must be a non-negative integer, got {count!r}")
        self.count = count

    def apply(self, declarations: Declarations) -> Iterator[DeclarationDescriptor]:
        return itertools.islice(declarations, self.count)

    def __repr__(self) -> str:
        return f"LimitFilter({self.count})"


FILTER_REGISTRY: Dict[str, Callable[..., DeclarationFilter]] = {
    "kind": KindFilter,
    "namespace": NamespaceFilter,
    "name_pattern": NamePatternFilter,
    "unique": UniqueFilter,
    "limit": LimitFilter,
}


def build_filter(spec: Union[str, Dict[str, Any]]) -> DeclarationFilter:
    """Build one filter stage from a config entry.

    Args:
        spec: A registry name, or a mapping with a ``type`` key naming the
            filter and the remaining keys passed as keyword arguments.

    Raises:
        ConfigValidationError: On unknown filter types or invalid options.
    """
    if isinstance(spec, str):
        spec = {"type": spec}
    options = dict(spec)
    filter_type = options.pop("type", None)

    factory = FILTER_REGISTRY.get(filter_type) if isinstance(filter_type, str) else None
    if factory is None:
        valid = ", ".join(sorted(FILTER_REGISTRY))
        raise ConfigValidationError(f"Unknown filter type {filter_type!r}; expected one of: {valid}")

    try:
        stage = factory(**options)
    except (TypeError, ValueError) as exc:
        raise ConfigValidationError(f"Invalid options for filter {filter_type!r}: {exc}") from exc

    logger.debug("Built filter stage %r", stage)
    return stage
