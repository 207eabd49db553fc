"""Naming conventions for route files and route segments."""

import re

# JS/TS source files recognised by the router
SOURCE_EXTENSION_PATTERN = re.compile(r"\.[jt]sx?$")
DECLARATION_EXTENSION_PATTERN = re.compile(r"\.d\.[cm]?ts$")
PLATFORM_EXTENSION_PATTERN = re.compile(r"\.(android|ios|native|web)$")

# Layouts and special "+" files (+html, +not-found, foo+api) are not navigable
NON_TYPED_ROUTE_PATTERN = re.compile(r"(_layout|[^/]*?\+[^/]*?)\.[jt]sx?$")

GROUP_PATTERN = re.compile(r"^\((.+)\)$")
DYNAMIC_PATTERN = re.compile(r"^\[(\.\.\.)?([^\[\]]+)\]$")


def is_typed_route(name: str) -> bool:
    """Check whether a file name denotes a navigable route.

    This is the single predicate used by both the watcher and the declaration
    generator. Matching is case-sensitive.

    Args:
        name: File basename or "./"-prefixed relative path

    Returns:
        True if the file defines a route
    """
    basename = name.rsplit("/", 1)[-1]
    if basename.startswith("+"):
        return False
    if not SOURCE_EXTENSION_PATTERN.search(basename):
        return False
    if DECLARATION_EXTENSION_PATTERN.search(basename):
        return False
    return NON_TYPED_ROUTE_PATTERN.search(basename) is None


def strip_extension(path: str) -> str:
    """Remove the JS/TS source extension from a path."""
    return SOURCE_EXTENSION_PATTERN.sub("", path)


def strip_platform(path: str) -> str:
    """Remove a platform suffix such as ".ios" from an extensionless path."""
    return PLATFORM_EXTENSION_PATTERN.sub("", path)


def match_group_name(segment: str) -> str | None:
    """Return the group name of a "(group)" segment, or None."""
    match = GROUP_PATTERN.match(segment)
    if match is None:
        return None
    return match.group(1)


def match_array_group(segment: str) -> list[str] | None:
    """Return the members of an "(a,b)" array group, or None.

    A group with a single member is not an array group.
    """
    name = match_group_name(segment)
    if name is None or "," not in name:
        return None
    return [part.strip() for part in name.split(",") if part.strip()]


def match_dynamic_name(segment: str) -> tuple[str, bool] | None:
    """Parse a dynamic segment.

    Examples:
    - "[id]" -> ("id", False)
    - "[...rest]" -> ("rest", True)
    - "about" -> None
    """
    match = DYNAMIC_PATTERN.match(segment)
    if match is None:
        return None
    return match.group(2), match.group(1) is not None
