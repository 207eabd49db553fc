"""Tests for the watchdog adapter."""

import shutil
import time

import pytest
from watchdog.events import (
    DirCreatedEvent,
    DirDeletedEvent,
    DirModifiedEvent,
    DirMovedEvent,
    FileClosedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from typed_routes.routes import FileContext, require_context
from typed_routes.watcher import (
    EventKind,
    FileWatcher,
    RouteEventHandler,
    SessionState,
    WatchSession,
)


class RecordingSession:
    """Collects the events handed to it."""

    def __init__(self, app_root):
        self.app_root = app_root
        self.events = []
        self.removed_directories = []

    def handle_event(self, event) -> bool:
        self.events.append((event.path, event.kind))
        return False

    def handle_directory_removed(self, path) -> bool:
        self.removed_directories.append(path)
        return False


class NullRegenerator:
    def schedule(self, output_dir, options, ctx):
        pass

    def flush(self) -> bool:
        return False

    def cancel(self) -> None:
        pass

    def close(self) -> None:
        pass


def wait_for(condition, timeout: float = 5.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if condition():
            return True
        time.sleep(0.05)
    return condition()


class TestRouteEventHandler:
    """Tests for RouteEventHandler class."""

    def test_created(self, tmp_path):
        """Test that file creation becomes an add event."""
        session = RecordingSession(tmp_path)
        handler = RouteEventHandler(session)

        handler.dispatch(FileCreatedEvent(str(tmp_path / "index.tsx")))

        assert session.events == [(tmp_path / "index.tsx", EventKind.ADD)]

    def test_modified(self, tmp_path):
        """Test that file modification becomes a change event."""
        session = RecordingSession(tmp_path)
        handler = RouteEventHandler(session)

        handler.dispatch(FileModifiedEvent(str(tmp_path / "index.tsx")))

        assert session.events == [(tmp_path / "index.tsx", EventKind.CHANGE)]

    def test_deleted(self, tmp_path):
        """Test that file deletion becomes a delete event."""
        session = RecordingSession(tmp_path)
        handler = RouteEventHandler(session)

        handler.dispatch(FileDeletedEvent(str(tmp_path / "index.tsx")))

        assert session.events == [(tmp_path / "index.tsx", EventKind.DELETE)]

    def test_moved(self, tmp_path):
        """Test that a move becomes a delete followed by an add."""
        session = RecordingSession(tmp_path)
        handler = RouteEventHandler(session)

        handler.dispatch(FileMovedEvent(str(tmp_path / "old.tsx"), str(tmp_path / "new.tsx")))

        assert session.events == [
            (tmp_path / "old.tsx", EventKind.DELETE),
            (tmp_path / "new.tsx", EventKind.ADD),
        ]

    def test_other_file_events_ignored(self, tmp_path):
        """Test that open/close notifications are dropped."""
        session = RecordingSession(tmp_path)
        handler = RouteEventHandler(session)

        handler.dispatch(FileClosedEvent(str(tmp_path / "index.tsx")))

        assert session.events == []

    def test_directory_created_or_modified_ignored(self, tmp_path):
        """Test that directory creation and modification are dropped."""
        session = RecordingSession(tmp_path)
        handler = RouteEventHandler(session)

        handler.dispatch(DirCreatedEvent(str(tmp_path / "(tabs)")))
        handler.dispatch(DirModifiedEvent(str(tmp_path / "(tabs)")))

        assert session.events == []
        assert session.removed_directories == []

    def test_directory_deleted(self, tmp_path):
        """Test that a deleted directory drops everything below it."""
        session = RecordingSession(tmp_path)
        handler = RouteEventHandler(session)

        handler.dispatch(DirDeletedEvent(str(tmp_path / "(tabs)")))

        assert session.removed_directories == [tmp_path / "(tabs)"]
        assert session.events == []

    def test_directory_moved_out_of_root(self, tmp_path):
        """Test that moving a directory outside the root removes its files."""
        app_root = tmp_path / "app"
        session = RecordingSession(app_root)
        handler = RouteEventHandler(session)

        handler.dispatch(DirMovedEvent(str(app_root / "(tabs)"), str(tmp_path / "trash" / "(tabs)")))

        assert session.removed_directories == [app_root / "(tabs)"]

    def test_directory_moved_inside_root(self, tmp_path):
        """Test that an in-root directory rename is left to per-file events."""
        session = RecordingSession(tmp_path)
        handler = RouteEventHandler(session)

        handler.dispatch(DirMovedEvent(str(tmp_path / "(tabs)"), str(tmp_path / "(tabs,test)")))

        assert session.removed_directories == []
        assert session.events == []


class TestFileWatcher:
    """Tests for FileWatcher class."""

    def make_session(self, app_root) -> WatchSession:
        return WatchSession(
            app_root=app_root,
            output_dir=app_root.parent / "types",
            ctx=require_context(app_root),
            regenerator=NullRegenerator(),
        )

    def test_requires_app_root(self, tmp_path):
        """Test that an inert session cannot be watched."""
        session = WatchSession(app_root=None, output_dir=tmp_path, regenerator=NullRegenerator())

        with pytest.raises(ValueError):
            FileWatcher(session)

    def test_start_stop_closes_session(self, tmp_path):
        """Test the watcher lifecycle."""
        session = self.make_session(tmp_path)
        watcher = FileWatcher(session)

        assert not watcher.is_running
        with watcher:
            assert watcher.is_running
            assert session.state is SessionState.ARMED
        assert not watcher.is_running
        assert session.state is SessionState.CLOSED

    def test_new_file_reaches_session(self, tmp_path):
        """Test that a file written on disk ends up in the route index."""
        session = WatchSession(
            app_root=tmp_path,
            output_dir=tmp_path / "types",
            ctx=FileContext(tmp_path),
            regenerator=NullRegenerator(),
        )

        with FileWatcher(session):
            (tmp_path / "about.tsx").write_text("export default function About() {}\n")
            assert wait_for(lambda: session.route_files == ["./about.tsx"])

    def test_directory_moved_outside_root(self, tmp_path):
        """Test that routes in a directory moved out of the root are dropped."""
        app_root = tmp_path / "app"
        (app_root / "(tabs)").mkdir(parents=True)
        (app_root / "index.tsx").write_text("")
        (app_root / "(tabs)" / "feed.tsx").write_text("")
        (tmp_path / "trash").mkdir()
        session = self.make_session(app_root)
        assert session.route_files == ["./(tabs)/feed.tsx", "./index.tsx"]

        with FileWatcher(session):
            shutil.move(str(app_root / "(tabs)"), str(tmp_path / "trash"))
            assert wait_for(lambda: session.route_files == ["./index.tsx"])

        assert session.context.keys() == ["./index.tsx"]
