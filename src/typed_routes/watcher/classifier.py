"""Classify filesystem event paths against the app root."""

import os
from dataclasses import dataclass
from pathlib import Path, PurePath

from ..routes.context import to_context_key
from ..routes.matchers import is_typed_route


@dataclass(frozen=True)
class ClassifiedPath:
    """An event path that lies inside the app root."""

    relative_path: str  # context key, always "./"-prefixed
    basename: str
    is_route_candidate: bool


def classify_path(
    app_root: Path | None, absolute_path: str | os.PathLike[str]
) -> ClassifiedPath | None:
    """Place an event path relative to the app root.

    Args:
        app_root: Configured app root, or None when routing is not active
        absolute_path: Path reported by the filesystem watcher

    Returns:
        The classified path, or None if the event should be ignored
    """
    if app_root is None:
        return None

    try:
        relative = os.path.relpath(os.fspath(absolute_path), os.fspath(app_root))
    except ValueError:
        # Different drive on Windows
        return None

    if relative == os.curdir or relative == os.pardir:
        return None
    if relative.startswith(os.pardir + os.sep) or relative.startswith("../"):
        return None

    relative_path = to_context_key(PurePath(relative))
    basename = PurePath(relative).name
    return ClassifiedPath(
        relative_path=relative_path,
        basename=basename,
        is_route_candidate=is_typed_route(basename),
    )
