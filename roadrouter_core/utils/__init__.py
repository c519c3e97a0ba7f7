"""Utils module - Configuration and path helpers."""

from roadrouter_core.utils.config import (
    RouterConfig,
    configure_logging,
    load_config,
)
from roadrouter_core.utils.helpers import (
    normalize_path,
    normalize_basepath,
    strip_basepath,
    merge_headers,
)

__all__ = [
    "RouterConfig",
    "configure_logging",
    "load_config",
    "normalize_path",
    "normalize_basepath",
    "strip_basepath",
    "merge_headers",
]
