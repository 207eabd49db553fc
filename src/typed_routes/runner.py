"""Entry point: keep router.d.ts up to date while route files change."""

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from .config import Settings, setup_logging
from .watcher import FileWatcher, WatchSession

logger = logging.getLogger(__name__)


@contextmanager
def watch_session(config: Settings) -> Iterator[WatchSession]:
    """Manage a watch session - scan, write initial declaration, watch, cleanup."""
    if config.app_root is None:
        logger.warning("No app root configured, typed routes watcher is inactive")
    else:
        logger.info(f"App root: {config.app_root}")
    logger.info(f"Declaration output directory: {config.output_dir}")

    session = WatchSession(
        app_root=config.app_root,
        output_dir=config.output_dir,
        options=config.declaration_options,
        debounce_seconds=config.debounce_seconds,
    )

    watcher: FileWatcher | None = None
    if config.app_root is not None:
        # A broken initial state must not prevent watching for the fix
        try:
            session.regenerate_now()
        except Exception:
            logger.exception("Initial typed routes generation failed")

        logger.info("Starting file watcher...")
        watcher = FileWatcher(session)
        watcher.start()

    try:
        yield session
    finally:
        logger.info("Shutting down typed routes watcher...")
        if watcher is not None:
            watcher.stop()
        session.close()
        logger.info("Shutdown complete")


def main() -> None:
    """Entry point for the typed routes watcher."""
    try:
        config = Settings()
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        raise

    setup_logging(config.log_level)

    stop = threading.Event()
    with watch_session(config):
        try:
            stop.wait()
        except KeyboardInterrupt:
            logger.info("Interrupted")


if __name__ == "__main__":
    main()
