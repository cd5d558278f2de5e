import shutil
import subprocess

import pytest

from config import Settings


@pytest.fixture(autouse=True)
def quiet_settings(monkeypatch):
    """Keep tests off the log file and the console."""
    monkeypatch.setenv("MERGE_REVIEW_LOG_FILE", "")
    monkeypatch.setenv("MERGE_REVIEW_QUIET", "true")
    test_settings = Settings(log_file=None, quiet=True)
    monkeypatch.setattr("config.settings", test_settings)
    return test_settings


def _git(repo, *args):
    subprocess.run(["git", *args], cwd=repo, check=True, capture_output=True, text=True)


@pytest.fixture
def git_repo(tmp_path):
    """
    A repository with `main` holding a.txt and `feature` checked out with one
    commit on top that adds 2 lines and removes 1 line in a.txt.
    """
    if shutil.which("git") is None:
        pytest.skip("git executable not available")

    repo = tmp_path / "repo"
    repo.mkdir()
    _git(repo, "init", "-q")
    _git(repo, "checkout", "-q", "-b", "main")
    _git(repo, "config", "user.email", "dev@example.com")
    _git(repo, "config", "user.name", "Dev")
    _git(repo, "config", "commit.gpgsign", "false")

    (repo / "a.txt").write_text("one\ntwo\nthree\n")
    _git(repo, "add", "a.txt")
    _git(repo, "commit", "-q", "-m", "initial")

    _git(repo, "checkout", "-q", "-b", "feature")
    (repo / "a.txt").write_text("one\nthree\nfour\nfive\n")
    _git(repo, "commit", "-q", "-am", "update a.txt")
    return repo
