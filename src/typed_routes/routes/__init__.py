"""Route files: naming conventions, file context and declaration generation."""

from .context import (
    CONTEXT_FILTER,
    IGNORED_DIRECTORIES,
    FileContext,
    require_context,
    should_ignore_path,
    to_context_key,
)
from .generate import (
    RouteConflictError,
    RouteHrefs,
    collect_route_hrefs,
    get_typed_routes_declaration_file,
)
from .matchers import (
    is_typed_route,
    match_array_group,
    match_dynamic_name,
    match_group_name,
    strip_extension,
    strip_platform,
)

__all__ = [
    # Context
    "CONTEXT_FILTER",
    "IGNORED_DIRECTORIES",
    "FileContext",
    "require_context",
    "should_ignore_path",
    "to_context_key",
    # Generator
    "RouteConflictError",
    "RouteHrefs",
    "collect_route_hrefs",
    "get_typed_routes_declaration_file",
    # Matchers
    "is_typed_route",
    "match_array_group",
    "match_dynamic_name",
    "match_group_name",
    "strip_extension",
    "strip_platform",
]
