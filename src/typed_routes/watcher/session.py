"""Watch session: keeps the route index in step with filesystem events."""

import logging
import threading
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

from ..config import DeclarationOptions
from ..routes.context import FileContext, require_context
from ..routes.matchers import is_typed_route
from .classifier import classify_path
from .regenerator import DebouncedRegenerator, regenerate_declarations

logger = logging.getLogger(__name__)


class EventKind(str, Enum):
    """Kinds of filesystem events a session reacts to."""

    ADD = "add"
    DELETE = "delete"
    CHANGE = "change"


class WatchEvent(BaseModel):
    """A single filesystem event reported by the watcher."""

    path: Path = Field(..., description="Absolute path of the affected file")
    kind: EventKind = Field(..., description="What happened to the file")


class SessionState(str, Enum):
    """Lifecycle of a watch session."""

    ARMED = "armed"
    CLOSED = "closed"


class WatchSession:
    """Tracks the route files under an app root and regenerates declarations.

    The session owns the file context and the route index derived from it.
    Events are applied one at a time under a lock that is shared with the
    regenerator, so a regeneration never observes a half-applied event.
    Regeneration reads the live context when it runs, which means it always
    reflects the latest state rather than the state at the triggering event.
    """

    def __init__(
        self,
        app_root: Path | None,
        output_dir: Path,
        ctx: FileContext | None = None,
        regenerator: DebouncedRegenerator | None = None,
        options: DeclarationOptions | None = None,
        debounce_seconds: float = 1.0,
    ):
        """Initialize the session and scan the app root.

        Args:
            app_root: Directory containing route files; None makes the session inert
            output_dir: Directory the declaration file is written to
            ctx: Pre-built file context (default: scan app_root)
            regenerator: Regenerator to use (default: a DebouncedRegenerator
                         writing router.d.ts, sharing this session's lock)
            options: Generator options
            debounce_seconds: Quiet period for the default regenerator
        """
        self._app_root = app_root
        self._output_dir = output_dir
        self._options = options or DeclarationOptions()
        self._lock = threading.RLock()

        if ctx is None:
            ctx = require_context(app_root) if app_root is not None else FileContext(Path.cwd())
        self._ctx = ctx

        if regenerator is None:
            regenerator = DebouncedRegenerator(
                regenerate_fn=regenerate_declarations,
                debounce_seconds=debounce_seconds,
                lock=self._lock,
            )
        self._regenerator = regenerator

        self._route_files: set[str] = {
            key for key in self._ctx.keys() if is_typed_route(key)
        }
        self._state = SessionState.ARMED

        logger.info(
            f"Watch session armed for {app_root}: "
            f"{len(self._ctx)} files, {len(self._route_files)} routes"
        )

    @property
    def app_root(self) -> Path | None:
        """The watched app root."""
        return self._app_root

    @property
    def output_dir(self) -> Path:
        """Directory the declaration file is written to."""
        return self._output_dir

    @property
    def context(self) -> FileContext:
        """The live file context."""
        return self._ctx

    @property
    def regenerator(self) -> DebouncedRegenerator:
        """The regenerator used by this session."""
        return self._regenerator

    @property
    def route_files(self) -> list[str]:
        """Sorted snapshot of the route index."""
        with self._lock:
            return sorted(self._route_files)

    @property
    def state(self) -> SessionState:
        """Current lifecycle state."""
        return self._state

    def handle_event(self, event: WatchEvent) -> bool:
        """Apply a filesystem event to the context and route index.

        Args:
            event: The event to apply

        Returns:
            True if a regeneration was scheduled
        """
        with self._lock:
            if self._state is not SessionState.ARMED:
                return False

            classified = classify_path(self._app_root, event.path)
            if classified is None:
                return False

            relative_path = classified.relative_path
            should_regenerate = False

            if event.kind is EventKind.DELETE:
                self._ctx.delete(relative_path)
                if relative_path in self._route_files:
                    self._route_files.discard(relative_path)
                    should_regenerate = True
            elif event.kind is EventKind.ADD:
                self._ctx.add(relative_path)
                if classified.is_route_candidate:
                    self._route_files.add(relative_path)
                    should_regenerate = True
            else:
                should_regenerate = relative_path in self._route_files

            logger.debug(
                f"{event.kind.value} {relative_path} "
                f"(regenerate: {should_regenerate})"
            )

            if should_regenerate:
                self._regenerator.schedule(self._output_dir, self._options, self._ctx)
            return should_regenerate

    def handle_directory_removed(self, path: Path) -> bool:
        """Drop every tracked file below a directory that left the app root.

        Used when the watcher only reports the directory itself, e.g. when it
        is moved outside the app root or to the trash.

        Args:
            path: Absolute path of the removed directory

        Returns:
            True if a regeneration was scheduled
        """
        with self._lock:
            if self._state is not SessionState.ARMED:
                return False

            classified = classify_path(self._app_root, path)
            if classified is None:
                return False

            prefix = classified.relative_path + "/"
            removed = [key for key in self._ctx.keys() if key.startswith(prefix)]
            dropped_routes = 0
            for key in removed:
                self._ctx.delete(key)
                if key in self._route_files:
                    self._route_files.discard(key)
                    dropped_routes += 1

            logger.debug(
                f"directory removed {classified.relative_path}: "
                f"{len(removed)} files, {dropped_routes} routes"
            )

            if dropped_routes:
                self._regenerator.schedule(self._output_dir, self._options, self._ctx)
            return dropped_routes > 0

    def regenerate_now(self) -> Path | None:
        """Write the declaration for the current state synchronously.

        Used once at start-up. Errors propagate to the caller.

        Returns:
            Path of the written file, or None if there was nothing to write
        """
        with self._lock:
            return regenerate_declarations(self._output_dir, self._options, self._ctx)

    def flush(self) -> bool:
        """Run any pending regeneration immediately.

        Returns:
            True if a regeneration was pending and has run
        """
        return self._regenerator.flush()

    def close(self) -> None:
        """Tear down the session, dropping any pending regeneration."""
        with self._lock:
            if self._state is SessionState.CLOSED:
                return
            self._state = SessionState.CLOSED
            self._regenerator.close()
        logger.info("Watch session closed")
