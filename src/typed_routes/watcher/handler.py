"""watchdog adapter feeding filesystem events into a watch session."""

import logging
from pathlib import Path

from watchdog.events import (
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEvent,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from .classifier import classify_path
from .session import EventKind, WatchEvent, WatchSession

logger = logging.getLogger(__name__)

FILE_EVENT_KINDS = {
    EVENT_TYPE_CREATED: EventKind.ADD,
    EVENT_TYPE_DELETED: EventKind.DELETE,
    EVENT_TYPE_MODIFIED: EventKind.CHANGE,
}


def _to_path(path: str | bytes) -> Path:
    if isinstance(path, bytes):
        path = path.decode()
    return Path(path)


class RouteEventHandler(FileSystemEventHandler):
    """Translates watchdog events into session events.

    File moves become a delete of the source and an add of the destination.
    A directory that is deleted, or moved out of the app root, may arrive as
    a single event with nothing reported for its files, so the session drops
    everything tracked below it. Directory moves inside the root are followed
    by per-file events and need no handling here.
    """

    def __init__(self, session: WatchSession):
        """Initialize the handler.

        Args:
            session: Session receiving the translated events
        """
        super().__init__()
        self._session = session

    def on_any_event(self, event: FileSystemEvent) -> None:
        """Route every watchdog event to the session."""
        if event.is_directory:
            self._handle_directory(event)
            return

        if event.event_type == EVENT_TYPE_MOVED:
            self._dispatch(event.src_path, EventKind.DELETE)
            self._dispatch(event.dest_path, EventKind.ADD)
            return

        kind = FILE_EVENT_KINDS.get(event.event_type)
        if kind is not None:
            self._dispatch(event.src_path, kind)

    def _handle_directory(self, event: FileSystemEvent) -> None:
        if event.event_type == EVENT_TYPE_DELETED:
            self._session.handle_directory_removed(_to_path(event.src_path))
        elif event.event_type == EVENT_TYPE_MOVED:
            destination = _to_path(event.dest_path)
            if classify_path(self._session.app_root, destination) is None:
                self._session.handle_directory_removed(_to_path(event.src_path))

    def _dispatch(self, path: str | bytes, kind: EventKind) -> None:
        self._session.handle_event(WatchEvent(path=_to_path(path), kind=kind))


class FileWatcher:
    """Observe a session's app root for as long as the session lives.

    Stopping the watcher also closes the session: once events stop flowing
    the route index can no longer be trusted.
    """

    def __init__(self, session: WatchSession, join_timeout: float = 5.0):
        """Initialize the file watcher.

        Args:
            session: Armed session with an app root
            join_timeout: Seconds to wait for the observer thread on stop

        Raises:
            ValueError: If the session has no app root
        """
        if session.app_root is None:
            raise ValueError("Cannot watch a session without an app root")

        self._session = session
        self._join_timeout = join_timeout
        self._observer = Observer()
        self._observer.schedule(
            RouteEventHandler(session),
            str(session.app_root),
            recursive=True,
        )

    @property
    def session(self) -> WatchSession:
        """The session fed by this watcher."""
        return self._session

    @property
    def is_running(self) -> bool:
        """Check if the observer thread is alive."""
        return self._observer.is_alive()

    def start(self) -> None:
        """Start delivering events to the session."""
        if self.is_running:
            logger.warning(f"Already watching {self._session.app_root}")
            return
        self._observer.start()
        logger.info(f"Watching {self._session.app_root} for route changes")

    def stop(self) -> None:
        """Stop the observer and close the session."""
        if self.is_running:
            self._observer.stop()
            self._observer.join(timeout=self._join_timeout)
            logger.info(f"Stopped watching {self._session.app_root}")
        self._session.close()

    def __enter__(self) -> "FileWatcher":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.stop()
