"""Core shared contracts and utilities."""

from core.names import (
    NAMESPACE_SEPARATOR,
    is_fully_qualified,
    is_valid_qualified_name,
    normalize_php_name,
    qualify_name,
    split_qualified_name,
)
from core.structured_logging import (
    configure_structured_logging,
    file_scope,
    get_scan_id,
    set_scan_id,
)
from core.scan_config import (
    ConfigValidationError,
    FinderConfig,
    load_finder_config,
    load_scan_config,
    parse_finder_config,
    resolve_strict_config_validation,
)

__all__ = [
    "NAMESPACE_SEPARATOR",
    "is_fully_qualified",
    "is_valid_qualified_name",
    "normalize_php_name",
    "qualify_name",
    "split_qualified_name",
    "configure_structured_logging",
    "file_scope",
    "get_scan_id",
    "set_scan_id",
    "ConfigValidationError",
    "FinderConfig",
    "load_finder_config",
    "load_scan_config",
    "parse_finder_config",
    "resolve_strict_config_validation",
]
