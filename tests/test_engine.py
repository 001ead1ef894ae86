import io
import os

import pytest

from licenser import detect
from licenser.config import LicenserConfig
from licenser.engine import FileStatus, check_tree, run
from licenser.errors import OutcomeKind
from licenser.licenses import materialize

HEADER = materialize("ASL2", "Elasticsearch B.V.")
BODY = b"package main\n\nfunc main() {}\n"


def _write(path, data=BODY):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path


def _run(root, **kwargs):
    out = io.StringIO()
    cfg = LicenserConfig(path=str(root), **kwargs)
    outcome = run(cfg, out=out)
    return outcome, out.getvalue()


def _snapshot(root):
    return {
        str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()
    }


def test_empty_directory_is_clean(tmp_path):
    outcome, out = _run(tmp_path)
    assert outcome.kind is OutcomeKind.OK
    assert out == ""
    assert outcome.scanned == 0


def test_dry_run_reports_missing_header(tmp_path, monkeypatch):
    _write(tmp_path / "main.go")
    monkeypatch.chdir(tmp_path)
    outcome, out = _run(".", dry_run=True)
    assert outcome.kind is OutcomeKind.NEEDS_REWRITE
    assert out.splitlines() == ["main.go: is missing the license header"]
    assert (tmp_path / "main.go").read_bytes() == BODY


def test_dry_run_collects_every_violation(tmp_path):
    _write(tmp_path / "a.go")
    _write(tmp_path / "b" / "c.go")
    _write(tmp_path / "ok.go", HEADER.data + BODY)
    outcome, out = _run(tmp_path, dry_run=True)
    assert outcome.kind is OutcomeKind.NEEDS_REWRITE
    assert len(out.splitlines()) == 2
    assert len(outcome.violations) == 2
    assert outcome.scanned == 3 and outcome.compliant == 1


def test_rewrite_prepends_header(tmp_path):
    target = _write(tmp_path / "main.go")
    outcome, out = _run(tmp_path)
    assert outcome.kind is OutcomeKind.OK
    assert out == ""
    assert target.read_bytes() == HEADER.data + BODY
    assert len(outcome.rewritten) == 1


def test_compliant_file_untouched(tmp_path):
    target = _write(tmp_path / "main.go", HEADER.data + BODY)
    os.utime(target, (1_000_000_000, 1_000_000_000))
    outcome, out = _run(tmp_path)
    assert outcome.kind is OutcomeKind.OK
    assert out == ""
    assert target.read_bytes() == HEADER.data + BODY
    assert os.stat(target).st_mtime == 1_000_000_000


def test_unknown_license_touches_nothing(tmp_path, monkeypatch):
    _write(tmp_path / "main.go")
    before = _snapshot(tmp_path)

    def no_fs(*args, **kwargs):
        raise AssertionError("filesystem accessed")

    monkeypatch.setattr(os, "stat", no_fs)
    monkeypatch.setattr(os, "scandir", no_fs)
    outcome, out = _run(tmp_path, license="unknown-id")
    monkeypatch.undo()
    assert outcome.kind is OutcomeKind.UNKNOWN_LICENSE
    assert "unknown-id" in outcome.message
    assert out == ""
    assert _snapshot(tmp_path) == before


def test_excluded_directory_left_alone(tmp_path, monkeypatch):
    hidden = _write(tmp_path / "build" / "deep" / "gen.go")
    opened = []
    real_open = open

    def spy(path, *args, **kwargs):
        opened.append(os.fspath(path))
        return real_open(path, *args, **kwargs)

    monkeypatch.setattr(detect, "open", spy, raising=False)
    for dry in (True, False):
        outcome, out = _run(tmp_path, exclude=("build",), dry_run=dry)
        assert outcome.kind is OutcomeKind.OK
        assert out == ""
    assert hidden.read_bytes() == BODY
    assert opened == []


def test_non_matching_extension_never_opened(tmp_path, monkeypatch):
    _write(tmp_path / "README.md", b"# readme\n")
    _write(tmp_path / "main.go")
    opened = []
    real_open = open

    def spy(path, *args, **kwargs):
        opened.append(os.path.basename(os.fspath(path)))
        return real_open(path, *args, **kwargs)

    monkeypatch.setattr(detect, "open", spy, raising=False)
    _run(tmp_path, dry_run=True)
    assert opened == ["main.go"]


def test_rewrite_is_idempotent(tmp_path):
    _write(tmp_path / "a.go")
    _write(tmp_path / "pkg" / "b.go", b"#!/usr/bin/env gorun\npackage b\n")
    _write(tmp_path / "pkg" / "c.go", HEADER.data + BODY)
    first, _ = _run(tmp_path)
    once = _snapshot(tmp_path)
    second, out = _run(tmp_path)
    assert first.kind is second.kind is OutcomeKind.OK
    assert len(first.rewritten) == 2
    assert second.rewritten == [] and out == ""
    assert _snapshot(tmp_path) == once
    check, _ = _run(tmp_path, dry_run=True)
    assert check.kind is OutcomeKind.OK and check.compliant == 3


def test_missing_root(tmp_path):
    outcome, out = _run(tmp_path / "missing")
    assert outcome.kind is OutcomeKind.TREE_ACCESS
    assert isinstance(outcome.cause, OSError)


def test_unreadable_file_stops_run(tmp_path, monkeypatch):
    _write(tmp_path / "a.go")
    _write(tmp_path / "b.go")
    real_open = open

    def deny(path, *args, **kwargs):
        if os.path.basename(os.fspath(path)) == "a.go":
            raise PermissionError(13, "Permission denied", os.fspath(path))
        return real_open(path, *args, **kwargs)

    monkeypatch.setattr(detect, "open", deny, raising=False)
    outcome, _ = _run(tmp_path)
    assert outcome.kind is OutcomeKind.FILE_OPEN
    assert (tmp_path / "b.go").read_bytes() == BODY


def test_rewrite_failure_stops_run(tmp_path, monkeypatch):
    _write(tmp_path / "a.go")
    _write(tmp_path / "b.go")

    def boom(src, dst):
        raise OSError(30, "Read-only file system")

    monkeypatch.setattr(os, "replace", boom)
    outcome, _ = _run(tmp_path)
    assert outcome.kind is OutcomeKind.REWRITE
    assert outcome.scanned == 0
    assert (tmp_path / "b.go").read_bytes() == BODY


def test_check_tree_yields_status_per_file(tmp_path):
    _write(tmp_path / "a.go", HEADER.data + BODY)
    _write(tmp_path / "b.go")
    cfg = LicenserConfig(path=str(tmp_path), dry_run=True)
    statuses = [(e.rel, s) for e, s in check_tree(cfg, HEADER)]
    assert statuses == [("a.go", FileStatus.COMPLIANT), ("b.go", FileStatus.VIOLATION)]


@pytest.mark.parametrize("license_id", ["ASL2", "ASL2-Short", "Elastic", "Elasticv2", "Cloud"])
def test_every_license_round_trips(tmp_path, license_id):
    target = _write(tmp_path / "main.go")
    outcome, _ = _run(tmp_path, license=license_id, licensor="Acme")
    assert outcome.kind is OutcomeKind.OK
    assert target.read_bytes() == materialize(license_id, "Acme").data + BODY
    again, _ = _run(tmp_path, license=license_id, licensor="Acme", dry_run=True)
    assert again.kind is OutcomeKind.OK


def test_symlinked_file_keeps_link_and_target_gets_header(tmp_path):
    real = _write(tmp_path / "shared" / "real.txt")
    tree = tmp_path / "tree"
    tree.mkdir()
    link = tree / "link.go"
    link.symlink_to(real)
    outcome, _ = _run(tree)
    assert outcome.kind is OutcomeKind.OK
    assert link.is_symlink()
    assert real.read_bytes() == HEADER.data + BODY
    again, out = _run(tree, dry_run=True)
    assert again.kind is OutcomeKind.OK and out == ""
