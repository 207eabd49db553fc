"""Generate the typed routes declaration file from a file context."""

import itertools
import logging
from dataclasses import dataclass, field

from ..config import DeclarationOptions
from .context import FileContext
from .matchers import (
    is_typed_route,
    match_array_group,
    match_dynamic_name,
    match_group_name,
    strip_extension,
    strip_platform,
)

logger = logging.getLogger(__name__)

SINGLE_PART_TYPE = "${Router.SingleRoutePart<T>}"
CATCH_ALL_PART_TYPE = "${Router.CatchAllRoutePart<T>}"

DECLARATION_TEMPLATE = """/* eslint-disable */
import * as Router from 'expo-router';

export * from 'expo-router';

declare module 'expo-router' {{
  export namespace ExpoRouter {{
    export interface __routes<T extends string = string> extends Record<string, unknown> {{
      StaticRoutes: {static_routes};
      DynamicRoutes: {dynamic_routes};
      DynamicRouteTemplate: {dynamic_templates};
    }}
  }}
}}
"""


class RouteConflictError(ValueError):
    """Two route files resolve to the same route."""

    def __init__(self, route: str, first: str, second: str):
        self.route = route
        self.files = (first, second)
        super().__init__(
            f"Conflicting routes for '{route}': {first} and {second}"
        )


@dataclass
class RouteHrefs:
    """Hrefs collected from a file context."""

    static: set[str] = field(default_factory=set)
    dynamic: set[str] = field(default_factory=set)

    @property
    def typed_dynamic(self) -> set[str]:
        """Dynamic hrefs with their parameters typed."""
        return {_to_typed_href(href) for href in self.dynamic}


def _expand_array_groups(segments: list[str]) -> list[list[str]]:
    """Expand "(a,b)" segments into one segment list per member."""
    choices = []
    for segment in segments:
        members = match_array_group(segment)
        if members is None:
            choices.append([segment])
        else:
            choices.append([f"({member})" for member in members])
    return [list(product) for product in itertools.product(*choices)]


def _to_href(segments: list[str], keep_groups: bool) -> str:
    """Turn route segments into a URL path."""
    parts = [
        segment
        for segment in segments
        if keep_groups or match_group_name(segment) is None
    ]
    if parts and parts[-1] == "index":
        parts = parts[:-1]
    return "/" + "/".join(parts)


def _is_dynamic(href: str) -> bool:
    return any(match_dynamic_name(segment) for segment in href.split("/"))


def _to_typed_href(href: str) -> str:
    """Replace "[param]" segments with template literal types."""
    typed = []
    for segment in href.split("/"):
        dynamic = match_dynamic_name(segment)
        if dynamic is None:
            typed.append(segment)
        elif dynamic[1]:
            typed.append(CATCH_ALL_PART_TYPE)
        else:
            typed.append(SINGLE_PART_TYPE)
    return "/".join(typed)


def collect_route_hrefs(
    ctx: FileContext, options: DeclarationOptions | None = None
) -> RouteHrefs:
    """Collect the hrefs of every typed route in a context.

    Args:
        ctx: File context to read route files from
        options: Generator options

    Returns:
        Static and dynamic hrefs

    Raises:
        RouteConflictError: If two files define the same route
    """
    options = options or DeclarationOptions()
    hrefs = RouteHrefs()
    seen: dict[str, str] = {}

    for key in ctx.keys():
        if not is_typed_route(key):
            continue

        route = strip_extension(key[2:])
        without_platform = strip_platform(route)
        platform = route[len(without_platform):]

        for segments in _expand_array_groups(without_platform.split("/")):
            route_id = "/".join(segments) + platform
            if route_id in seen and seen[route_id] != key:
                raise RouteConflictError(route_id, seen[route_id], key)
            seen[route_id] = key

            candidates = {_to_href(segments, keep_groups=False)}
            if options.partial_typed_groups:
                candidates.add(_to_href(segments, keep_groups=True))

            for href in candidates:
                if _is_dynamic(href):
                    hrefs.dynamic.add(href)
                else:
                    hrefs.static.add(href)

    return hrefs


def _union(hrefs: set[str]) -> str:
    if not hrefs:
        return "never"
    return " | ".join(f"`{href}`" for href in sorted(hrefs))


def get_typed_routes_declaration_file(
    ctx: FileContext, options: DeclarationOptions | None = None
) -> str | None:
    """Render the router.d.ts declaration for a context.

    The output only depends on the set of keys in the context, so rendering
    the same context twice yields identical text.

    Args:
        ctx: File context to read route files from
        options: Generator options

    Returns:
        Declaration file contents, or None when there are no typed routes
    """
    hrefs = collect_route_hrefs(ctx, options)
    if not hrefs.static and not hrefs.dynamic:
        return None

    logger.debug(
        f"Rendering declaration: {len(hrefs.static)} static, "
        f"{len(hrefs.dynamic)} dynamic routes"
    )
    return DECLARATION_TEMPLATE.format(
        static_routes=_union(hrefs.static),
        dynamic_routes=_union(hrefs.typed_dynamic),
        dynamic_templates=_union(hrefs.dynamic),
    )
