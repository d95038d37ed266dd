from pathlib import Path

import pytest
from watchdog.events import DirCreatedEvent, FileModifiedEvent, FileMovedEvent, FileOpenedEvent

from mdr.build import Builder
from mdr.watch import WatchSession, WatchState
from mdr.watch.handler import ChangeHandler

from tests.infrastructure.config_utils import make_config
from tests.infrastructure.file_utils import write, write_template


class FakeObserver:
    """Stands in for watchdog's Observer: records schedules, emits nothing."""

    def __init__(self):
        self.scheduled = []
        self.started = False
        self.stopped = False

    def schedule(self, handler, path, recursive=False):
        self.scheduled.append((path, recursive))
        return object()

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def join(self, timeout=None):
        pass


@pytest.fixture
def project(tmp_path: Path):
    cfg = make_config(tmp_path, debounce_ms=20)
    write_template(cfg.templates_dir / "a.mdoc", '# A\n\n{% partial file="parts/shared.p.mdoc" /%}')
    write_template(cfg.templates_dir / "b.mdoc", "B")
    write_template(cfg.templates_dir / "parts" / "shared.p.mdoc", "shared v1")
    Builder(cfg).build(force=True)
    return cfg


@pytest.fixture
def session(project):
    s = WatchSession(project, observer_factory=FakeObserver)
    s.start()
    yield s
    s.stop()


def _out(cfg, name):
    return (cfg.output_dir / name).read_text(encoding="utf-8")


def test_start_runs_initial_build_and_watches_roots(session, project):
    assert session.state is WatchState.IDLE
    assert session.pending_errors == set()
    observer = session._observer
    assert observer.started
    assert (str(project.templates_dir), True) in observer.scheduled
    assert (str(project.output_dir), True) in observer.scheduled
    assert session.watched_roots == [project.templates_dir, project.output_dir]


def test_output_inside_templates_is_not_watched_twice(tmp_path: Path):
    cfg = make_config(tmp_path, output_dir=(tmp_path / "templates" / "out").resolve())
    write_template(cfg.templates_dir / "a.mdoc", "A")
    s = WatchSession(cfg, observer_factory=FakeObserver)
    s.start()
    try:
        assert s.watched_roots == [cfg.templates_dir]
    finally:
        s.stop()


def test_burst_of_events_gives_one_pass(session, project):
    template = project.templates_dir / "b.mdoc"
    write_template(template, "B v2")
    for _ in range(10):
        session.notify(str(template))
    report = session.pump(timeout=1)
    assert report is not None
    assert session.passes == 1
    assert [r.template.name for r in report.results] == ["b.mdoc"]
    assert _out(project, "b.g.md") == "B v2\n"
    # the queue is drained
    assert session.pump(timeout=0.05) is None
    assert session.passes == 1
    assert session.state is WatchState.IDLE


def test_partial_change_rebuilds_dependents(session, project, caplog):
    partial = project.templates_dir / "parts" / "shared.p.mdoc"
    write_template(partial, "shared v2")
    session.notify(str(partial))
    report = session.pump(timeout=1)
    assert [r.template.name for r in report.results] == ["a.mdoc"]
    assert _out(project, "a.g.md") == "# A\n\nshared v2\n"
    assert "Partial changed: parts/shared.p.mdoc -> 1 dependent file(s)" in caplog.text


def test_new_template_without_output_stays_pending_until_output_exists(session, project, caplog):
    template = write_template(project.templates_dir / "c.mdoc", "C")
    session.notify(str(template))
    report = session.pump(timeout=1)
    assert not report.ok
    assert session.pending_errors == {template}
    assert not (project.output_dir / "c.g.md").exists()
    assert "1 file(s) pending" in caplog.text

    # the user creates the generated file: that event is enough to retry
    output = write(project.output_dir / "c.g.md", "")
    session.notify(str(output))
    report = session.pump(timeout=1)
    assert report.ok
    assert session.pending_errors == set()
    assert _out(project, "c.g.md") == "C\n"


def test_output_events_are_ignored_without_pending_errors(session, project):
    session.notify(str(project.output_dir / "b.g.md"))
    assert session.pump(timeout=0.05) is None
    assert session.passes == 0


def test_unrelated_and_ignored_paths_do_not_trigger(tmp_path: Path):
    cfg = make_config(tmp_path, ignore=["drafts"])
    write_template(cfg.templates_dir / "a.mdoc", "A")
    Builder(cfg).build(force=True)
    s = WatchSession(cfg, observer_factory=FakeObserver)
    s.start()
    try:
        s.notify(str(cfg.templates_dir / "notes.md"))
        s.notify(str(write_template(cfg.templates_dir / "drafts" / "x.mdoc", "X")))
        s.notify(str(cfg.templates_dir / ".git" / "y.mdoc"))
        assert s.pump(timeout=0.05) is None
        assert s.passes == 0
    finally:
        s.stop()


def test_deleted_template_removes_its_output(session, project):
    template = project.templates_dir / "b.mdoc"
    template.unlink()
    session.notify(str(template))
    report = session.pump(timeout=1)
    assert report.results == []
    assert report.deleted == [project.output_dir / "b.g.md"]
    assert not (project.output_dir / "b.g.md").exists()


def test_deleted_partial_rebuilds_dependents(session, project, caplog):
    partial = project.templates_dir / "parts" / "shared.p.mdoc"
    partial.unlink()
    session.notify(str(partial))
    session.pump(timeout=1)
    assert _out(project, "a.g.md") == "# A\n"
    assert "Partial not found" in caplog.text


def test_pending_error_for_deleted_template_is_dropped(session, project):
    template = write_template(project.templates_dir / "c.mdoc", "C")
    session.notify(str(template))
    session.pump(timeout=1)
    assert session.pending_errors == {template}

    template.unlink()
    session.notify(str(template))
    session.pump(timeout=1)
    assert session.pending_errors == set()


def test_sessions_are_independent(project):
    s1 = WatchSession(project, observer_factory=FakeObserver)
    s2 = WatchSession(project, observer_factory=FakeObserver)
    s1.notify(str(project.templates_dir / "b.mdoc"))
    assert s1.pump(timeout=1) is not None
    assert s2.pump(timeout=0.05) is None
    assert (s1.passes, s2.passes) == (1, 0)


def test_handler_forwards_file_paths_only():
    seen = []
    h = ChangeHandler(seen.append)
    h.dispatch(FileModifiedEvent("/t/a.mdoc"))
    h.dispatch(FileMovedEvent("/t/old.mdoc", "/t/new.mdoc"))
    h.dispatch(DirCreatedEvent("/t/newdir"))
    h.dispatch(FileOpenedEvent("/t/a.mdoc"))
    assert seen == ["/t/a.mdoc", "/t/old.mdoc", "/t/new.mdoc"]


def test_run_forever_stops_on_keyboard_interrupt(project, monkeypatch, caplog):
    s = WatchSession(project, observer_factory=FakeObserver)

    def interrupt(timeout=None):
        raise KeyboardInterrupt

    monkeypatch.setattr(s, "pump", interrupt)
    s.run_forever(poll_seconds=0.01)
    assert s.watched_roots == []
    assert "Stopping file watcher..." in caplog.text
