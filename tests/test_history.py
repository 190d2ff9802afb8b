import os
import shutil
import subprocess
from pathlib import Path

import pytest

from mirror_inventory.history import (
    GitHistorySource,
    build_first_use_index,
    extract_manifest_keys,
    mine_first_use,
)
from mirror_inventory.models import Revision


def test_extract_manifest_keys_skips_comments_options_and_markers():
    content = (
        "# comment\n"
        "requests==2.31.0\n"
        "-e git+https://example.org/repo.git#egg=thing\n"
        'Flask[extra]>=2.0 ; python_version>="3.8"\n'
    )
    assert extract_manifest_keys(content) == {"requests", "flask"}


def test_extract_manifest_keys_operators():
    content = "\n".join([
        "a===1",
        "B~=1.0",
        "c!=2",
        "d<=3",
        "e>=4",
        "f<5",
        "g>6",
        "h @ https://example.org/h.whl",
        "i@https://example.org/i.whl",
        "Zope.Interface",
        "   ",
        "--index-url https://mirror.local/simple",
        "pkg;sys_platform=='win32'",
    ])
    assert extract_manifest_keys(content) == {
        "a", "b", "c", "d", "e", "f", "g", "h", "i", "zope-interface", "pkg",
    }


def test_build_first_use_index_keeps_earliest_date():
    index = build_first_use_index([
        ("2020-01-01", {"a"}),
        ("2021-01-01", {"a", "b"}),
    ])
    assert index == {"a": "2020-01-01", "b": "2021-01-01"}


class FakeHistorySource:
    def __init__(self, revisions, contents, fail_on=()):
        self.revisions = revisions
        self.contents = contents
        self.fail_on = set(fail_on)

    def list_revisions(self, manifest_path):
        return self.revisions

    def read_file(self, revision, manifest_path):
        if revision.revision_id in self.fail_on:
            raise subprocess.CalledProcessError(128, ["git", "show"])
        return self.contents[revision.revision_id]


def test_mine_first_use_with_fake_source(tmp_path: Path):
    source = FakeHistorySource(
        [Revision("r1", "2020-01-01"), Revision("r2", "2021-01-01")],
        {"r1": "a==1\n", "r2": "a==2\nb\n"},
    )

    index = mine_first_use(tmp_path, source=source)

    assert index == {"a": "2020-01-01", "b": "2021-01-01"}


def test_mine_first_use_skips_unreadable_revision(tmp_path: Path):
    source = FakeHistorySource(
        [Revision("r1", "2020-01-01"), Revision("r2", "2021-01-01"), Revision("r3", "2022-01-01")],
        {"r1": "a\n", "r3": "a\nc\n"},
        fail_on={"r2"},
    )

    index = mine_first_use(tmp_path, source=source)

    assert index == {"a": "2020-01-01", "c": "2022-01-01"}


def test_mine_first_use_revision_list_failure_is_recoverable(tmp_path: Path):
    class BrokenSource:
        def list_revisions(self, manifest_path):
            raise FileNotFoundError("git")

        def read_file(self, revision, manifest_path):
            raise AssertionError("not reached")

    assert mine_first_use(tmp_path, source=BrokenSource()) == {}


def test_mine_first_use_missing_repository(tmp_path: Path):
    assert mine_first_use(tmp_path / "missing") == {}
    assert mine_first_use(None) == {}


def test_git_source_on_non_repository_returns_empty(tmp_path: Path):
    # Either git is missing or the directory is not a repository.
    assert mine_first_use(tmp_path, timeout=30) == {}


def _git(repo: Path, *args: str, date: str = None) -> None:
    env = dict(os.environ)
    env.update({
        "GIT_AUTHOR_NAME": "Test",
        "GIT_AUTHOR_EMAIL": "test@example.org",
        "GIT_COMMITTER_NAME": "Test",
        "GIT_COMMITTER_EMAIL": "test@example.org",
    })
    if date:
        env["GIT_AUTHOR_DATE"] = date
        env["GIT_COMMITTER_DATE"] = date
    subprocess.run(["git", "-C", str(repo), *args], check=True, capture_output=True, env=env)


@pytest.mark.skipif(shutil.which("git") is None, reason="git not installed")
def test_git_history_source_reads_revisions_oldest_first(tmp_path: Path):
    repo = tmp_path / "approved"
    repo.mkdir()
    _git(repo, "init", "-q")

    manifest = repo / "requirements.txt"
    manifest.write_text("Requests==2.0\n", encoding="utf-8")
    _git(repo, "add", "requirements.txt")
    _git(repo, "commit", "-q", "-m", "first", date="2020-01-01T12:00:00+00:00")

    (repo / "other.txt").write_text("unrelated\n", encoding="utf-8")
    _git(repo, "add", "other.txt")
    _git(repo, "commit", "-q", "-m", "unrelated", date="2020-06-01T12:00:00+00:00")

    manifest.write_text("requests==2.1\nflask_cors\n", encoding="utf-8")
    _git(repo, "add", "requirements.txt")
    _git(repo, "commit", "-q", "-m", "second", date="2021-03-04T12:00:00+00:00")

    source = GitHistorySource(repo)
    revisions = source.list_revisions("requirements.txt")

    assert [r.date for r in revisions] == ["2020-01-01", "2021-03-04"]
    assert "flask_cors" in source.read_file(revisions[1], "requirements.txt")

    index = mine_first_use(repo)
    assert index == {"requests": "2020-01-01", "flask-cors": "2021-03-04"}


def test_revision_dates_keep_author_offset():
    from mirror_inventory.time_utils import to_date_string

    assert to_date_string("2021-03-04T23:30:00-05:00") == "2021-03-04"
    assert to_date_string("2020-01-01T00:00:00Z") == "2020-01-01"
    assert to_date_string(" not a date ") == "not a date"
    assert to_date_string("") == ""
