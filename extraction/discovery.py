"""
Source file discovery.

Enumerates PHP files under one or more scan roots, pruning excluded and
hidden directories. Traversal is lazy and deterministic: roots in input
order, directory entries in lexical order.
"""

import fnmatch
import logging
import os
from typing import AbstractSet, Iterable, Iterator, List, Union

from extraction.config import PHP_EXTENSIONS, VCS_DIRECTORIES
from extraction.errors import DiscoveryError

logger = logging.getLogger(__name__)

PathSpec = Union[str, os.PathLike, Iterable[Union[str, os.PathLike]]]


def as_path_list(paths: PathSpec) -> List[str]:
    """Normalize a single path or a collection of paths into a list of strings."""
    if isinstance(paths, (str, os.PathLike)):
        return [os.fspath(paths)]
    return [os.fspath(path) for path in paths]


def validate_root(root: str) -> None:
    """Check that ``root`` is a readable, traversable directory.

    Raises:
        DiscoveryError: If it is not.
    """
    if not os.path.exists(root):
        raise DiscoveryError(root, "path does not exist")
    if not os.path.isdir(root):
        raise DiscoveryError(root, "not a directory")
    if not os.access(root, os.R_OK | os.X_OK):
        raise DiscoveryError(root, "permission denied")


def is_excluded(relative_path: str, absolute_path: str, patterns: List[str]) -> bool:
    """Check a path against exclusion patterns.

    ``relative_path`` uses ``/`` separators and is relative to the scan root.
    A pattern matches when it names the path or one of its parent
    directories, or when it glob-matches the relative path or the base name.
    Absolute patterns are compared against ``absolute_path``.
    """
    basename = relative_path.rsplit("/", 1)[-1]
    for pattern in patterns:
        if os.path.isabs(pattern):
            target = os.path.normpath(pattern)
            if absolute_path == target or absolute_path.startswith(target + os.sep):
                return True
            continue

        pattern = pattern.replace(os.sep, "/").strip("/")
        if not pattern:
            continue
        if relative_path == pattern or relative_path.startswith(pattern + "/"):
            return True
        if fnmatch.fnmatchcase(relative_path, pattern) or fnmatch.fnmatchcase(basename, pattern):
            return True
    return False


def _is_hidden(name: str) -> bool:
    return name.startswith(".")


def _walk_root(root: str, patterns: List[str], extensions: AbstractSet[str]) -> Iterator[str]:
    def on_error(error: OSError) -> None:
        logger.warning("Skipping unreadable directory %s: %s", error.filename, error.strerror)

    absolute_root = os.path.abspath(root)
    for dirpath, dirs, files in os.walk(root, onerror=on_error):
        relative_dir = os.path.relpath(dirpath, root)
        relative_dir = "" if relative_dir == os.curdir else relative_dir.replace(os.sep, "/") + "/"

        kept_dirs = []
        for name in sorted(dirs):
            if name in VCS_DIRECTORIES or _is_hidden(name):
                continue
            dir_path = os.path.normpath(os.path.join(absolute_root, relative_dir, name))
            if is_excluded(relative_dir + name, dir_path, patterns):
                logger.debug("Excluding directory %s", os.path.join(dirpath, name))
                continue
            kept_dirs.append(name)
        # Prune in place so os.walk does not descend into excluded directories.
        dirs[:] = kept_dirs

        for name in sorted(files):
            if _is_hidden(name) or os.path.splitext(name)[1] not in extensions:
                continue
            absolute_path = os.path.normpath(os.path.join(absolute_root, relative_dir, name))
            if is_excluded(relative_dir + name, absolute_path, patterns):
                logger.debug("Excluding file %s", os.path.join(dirpath, name))
                continue
            yield os.path.join(dirpath, name)


def iter_source_files(
    roots: PathSpec,
    exclude: PathSpec = (),
    extensions: AbstractSet[str] = PHP_EXTENSIONS,
) -> Iterator[str]:
    """Lazily yield source files under ``roots``.

    All roots are validated before the first file is yielded, so a bad root
    aborts discovery before any file is parsed.

    Args:
        roots: One or more directories to scan.
        exclude: One or more exclusion patterns (relative paths or globs).
        extensions: File extensions to accept, including the leading dot.

    Yields:
        File paths, joined onto the root as given (not resolved).

    Raises:
        DiscoveryError: If a root does not exist or cannot be read.
    """
    root_list = as_path_list(roots)
    patterns = as_path_list(exclude)

    for root in root_list:
        validate_root(root)

    for root in root_list:
        logger.info("Discovering PHP files in %s", root)
        yield from _walk_root(root, patterns, extensions)
