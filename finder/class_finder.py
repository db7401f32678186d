"""
High-level orchestrator for declaration discovery.

``ClassFinder`` composes file discovery, per-file declaration extraction and
the filter chain into one lazy sequence.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple, Union

from core.scan_config import FinderConfig, parse_finder_config
from core.structured_logging import file_scope
from extraction.config import DEFAULT_CONTINUE_ON_ERROR
from extraction.discovery import PathSpec, iter_source_files
from extraction.errors import ParseError
from extraction.models import MODE_FIND_ALL, DeclarationDescriptor, KindMask, ScanStats
from extraction.traversal import extract_file_declarations
from finder.filters import FilterStage, apply_filters, build_filter

logger = logging.getLogger(__name__)


class ClassFinder:
    """Find PHP type declarations under a set of directories.

    Instances are immutable: ``with_filter`` and ``with_filters`` return new
    finders and leave the receiver's filter chain untouched.

    Example:
        >>> finder = ClassFinder(MODE_FIND_CLASSES).with_filter(UniqueFilter())
        >>> for declaration in finder.find("src", exclude=["vendor"]):
        ...     print(declaration.name)
    """

    def __init__(
        self,
        mode: Any = MODE_FIND_ALL,
        filters: Iterable[FilterStage] = (),
        continue_on_error: bool = DEFAULT_CONTINUE_ON_ERROR,
    ):
        self._mask = KindMask.coerce(mode)
        self._filters: Tuple[FilterStage, ...] = ()
        self._continue_on_error = continue_on_error
        for stage in filters:
            self._filters = self._append(self._filters, stage)

    @staticmethod
    def _append(filters: Tuple[FilterStage, ...], stage: FilterStage) -> Tuple[FilterStage, ...]:
        if not callable(stage):
            raise TypeError(f"Filter stage must be callable, got {type(stage).__name__}")
        return filters + (stage,)

    @property
    def mask(self) -> KindMask:
        return self._mask

    @property
    def filters(self) -> Tuple[FilterStage, ...]:
        return self._filters

    @property
    def continue_on_error(self) -> bool:
        return self._continue_on_error

    def with_filter(self, stage: FilterStage) -> "ClassFinder":
        """Return a new finder with ``stage`` appended to the filter chain."""
        return self.with_filters([stage])

    def with_filters(self, stages: Iterable[FilterStage]) -> "ClassFinder":
        """Return a new finder with ``stages`` appended, in order."""
        return ClassFinder(
            self._mask,
            self._filters + tuple(stages),
            continue_on_error=self._continue_on_error,
        )

    def find(
        self,
        roots: PathSpec,
        exclude: PathSpec = (),
        stats: Optional[ScanStats] = None,
    ) -> Iterator[DeclarationDescriptor]:
        """Lazily yield declarations found under ``roots``.

        Nothing is discovered or parsed until the first element is pulled,
        and each file is parsed only when the consumer asks for more.

        Args:
            roots: One or more directories to scan.
            exclude: One or more exclusion patterns.
            stats: Optional counters updated as the scan progresses.

        Raises:
            DiscoveryError: If a root is missing or unreadable.
            ParseError: If a file is malformed and ``continue_on_error`` is off.
        """
        declarations = self._iter_declarations(roots, exclude, stats)
        yield from apply_filters(declarations, self._filters)

    def _iter_declarations(
        self,
        roots: PathSpec,
        exclude: PathSpec,
        stats: Optional[ScanStats],
    ) -> Iterator[DeclarationDescriptor]:
        for file_path in iter_source_files(roots, exclude):
            if stats is not None:
                stats.files_discovered += 1

            # Extraction for one file runs to completion before anything is
            # yielded, so the logging scope never spans a suspension point.
            with file_scope(file_path):
                try:
                    declarations = extract_file_declarations(file_path, self._mask)
                except ParseError as e:
                    if not self._continue_on_error:
                        raise
                    logger.warning("Skipping %s: %s", file_path, e.cause)
                    if stats is not None:
                        stats.files_skipped += 1
                    continue

            if stats is not None:
                stats.files_parsed += 1
                stats.declarations_found += len(declarations)
            yield from declarations

    @classmethod
    def from_config(cls, config: Union[FinderConfig, Mapping[str, Any]]) -> "ClassFinder":
        """Build a finder from a ``(mode, filters)`` configuration.

        Args:
            config: A validated ``FinderConfig`` or a raw mapping with optional
                ``mode``, ``filters`` and ``continue_on_error`` keys.

        Raises:
            ConfigValidationError: If a filter entry cannot be built.
            ValueError: If ``mode`` names an unknown kind.
        """
        if not isinstance(config, FinderConfig):
            config = parse_finder_config(dict(config), strict=True)

        mode = MODE_FIND_ALL if config.mode is None else config.mode
        return cls(
            mode,
            [build_filter(spec) for spec in config.filters],
            continue_on_error=config.continue_on_error,
        )

    def __repr__(self) -> str:
        return (
            f"ClassFinder(mode={self._mask.value}, filters={list(self._filters)!r}, "
            f"continue_on_error={self._continue_on_error})"
        )
