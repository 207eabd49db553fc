"""Debounced regeneration of the typed routes declaration file."""

import logging
import threading
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any, Callable

from ..config import DeclarationOptions
from ..routes.context import FileContext
from ..routes.generate import get_typed_routes_declaration_file

logger = logging.getLogger(__name__)

DECLARATION_FILENAME = "router.d.ts"

RegenerateFn = Callable[[Path, DeclarationOptions, FileContext], Any]


def regenerate_declarations(
    output_dir: Path,
    options: DeclarationOptions | None,
    ctx: FileContext,
    generate_fn: Callable[
        [FileContext, DeclarationOptions], str | None
    ] = get_typed_routes_declaration_file,
) -> Path | None:
    """Regenerate the declaration file from the current context.

    Nothing is written, and an existing file is left in place, when the
    generator produces no content.

    Args:
        output_dir: Directory to write router.d.ts to
        options: Generator options
        ctx: File context read at call time
        generate_fn: Declaration generator

    Returns:
        Path of the written file, or None if nothing was written
    """
    contents = generate_fn(ctx, options or DeclarationOptions())
    if not contents:
        logger.debug("Declaration generator returned no content, skipping write")
        return None

    output_path = Path(output_dir) / DECLARATION_FILENAME
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(contents, encoding="utf-8")
    logger.info(f"Wrote {output_path}")
    return output_path


class DebouncedRegenerator:
    """Runs a regeneration once calls to `schedule` stop for a quiet period.

    Every call to `schedule` replaces the pending call: only the arguments of
    the most recent one are used. Failures of the regeneration are logged and
    never propagate, so the regenerator stays usable for the next call.
    """

    def __init__(
        self,
        regenerate_fn: RegenerateFn = regenerate_declarations,
        debounce_seconds: float = 1.0,
        lock: AbstractContextManager[Any] | None = None,
    ):
        """Initialize the debounced regenerator.

        Args:
            regenerate_fn: Function called with (output_dir, options, ctx)
            debounce_seconds: Seconds to wait for quiet period before regenerating
            lock: Lock held while regenerating, shared with whoever mutates ctx
        """
        self._regenerate_fn = regenerate_fn
        self._debounce_seconds = debounce_seconds
        self._run_lock = lock if lock is not None else threading.RLock()

        self._pending: tuple[Path, DeclarationOptions, FileContext] | None = None
        self._timer: threading.Timer | None = None
        self._closed = False
        self._lock = threading.Lock()

    @property
    def debounce_seconds(self) -> float:
        """Quiet period in seconds."""
        return self._debounce_seconds

    @property
    def pending(self) -> bool:
        """Check if a regeneration is waiting to run."""
        with self._lock:
            return self._pending is not None

    def schedule(
        self,
        output_dir: Path,
        options: DeclarationOptions | None,
        ctx: FileContext,
    ) -> None:
        """Request a regeneration, superseding any pending request.

        Args:
            output_dir: Directory to write the declaration to
            options: Generator options
            ctx: Live file context, read when the regeneration runs
        """
        with self._lock:
            if self._closed:
                return
            self._pending = (output_dir, options or DeclarationOptions(), ctx)

            # Reset the debounce timer
            if self._timer is not None:
                self._timer.cancel()

            self._timer = threading.Timer(self._debounce_seconds, self._fire)
            self._timer.daemon = True
            self._timer.start()

        logger.debug(f"Regeneration scheduled in {self._debounce_seconds}s")

    def _take_pending(self) -> tuple[Path, DeclarationOptions, FileContext] | None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            pending, self._pending = self._pending, None
            return pending

    def _fire(self) -> None:
        """Timer callback."""
        with self._lock:
            # Superseded by a later schedule() before we got the lock
            if self._timer is not threading.current_thread():
                return
            self._timer = None
            pending, self._pending = self._pending, None
        self._run(pending)

    def _run(self, pending: tuple[Path, DeclarationOptions, FileContext] | None) -> bool:
        if pending is None:
            return False

        output_dir, options, ctx = pending
        with self._run_lock:
            if self._closed:
                logger.debug("Regenerator closed, dropping regeneration")
                return False
            try:
                self._regenerate_fn(output_dir, options, ctx)
            except Exception:
                logger.exception("Failed to regenerate typed routes declaration")
        return True

    def flush(self) -> bool:
        """Run the pending regeneration now instead of waiting.

        Returns:
            True if a regeneration was pending and has run
        """
        return self._run(self._take_pending())

    def cancel(self) -> None:
        """Drop any pending regeneration."""
        if self._take_pending() is not None:
            logger.debug("Pending regeneration cancelled")

    def close(self) -> None:
        """Drop any pending regeneration and refuse further ones.

        A timer that already took its request waits for the shared lock and
        then sees the closed flag, so nothing is written after close returns.
        """
        with self._run_lock:
            with self._lock:
                self._closed = True
            self.cancel()
