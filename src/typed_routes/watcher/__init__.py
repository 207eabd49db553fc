"""File watcher module for keeping the typed routes declaration up to date."""

from .classifier import ClassifiedPath, classify_path
from .handler import FileWatcher, RouteEventHandler
from .regenerator import DECLARATION_FILENAME, DebouncedRegenerator, regenerate_declarations
from .session import EventKind, SessionState, WatchEvent, WatchSession

__all__ = [
    "DECLARATION_FILENAME",
    "ClassifiedPath",
    "DebouncedRegenerator",
    "EventKind",
    "FileWatcher",
    "RouteEventHandler",
    "SessionState",
    "WatchEvent",
    "WatchSession",
    "classify_path",
    "regenerate_declarations",
]
