# ==============================================
# Tests for Git Client
# ==============================================

import subprocess
from pathlib import Path

import pytest

from corpus import CloneError, GitClient
from corpus.git import is_repository, isolated_git_environment


class RecordingRun:
    """Replacement for subprocess.run that records calls."""

    def __init__(self, error=None, create=True):
        self.calls = []
        self.error = error
        self.create = create

    def __call__(self, command, **kwargs):
        self.calls.append((command, kwargs))
        destination = command[-1]
        if self.create:
            (Path(destination) / ".git").mkdir(parents=True)
        if self.error is not None:
            raise self.error
        return subprocess.CompletedProcess(command, 0, "", "")


class TestGitClient:
    def test_shallow_clone_command(self, monkeypatch, tmp_path):
        run = RecordingRun()
        monkeypatch.setattr(subprocess, "run", run)

        destination = tmp_path / "clones" / "c" / "coreutils"
        result = GitClient(timeout=30).clone("https://example.org/coreutils.git", destination, depth=1)

        assert result == destination
        command, kwargs = run.calls[0]
        assert command == [
            "git",
            "clone",
            "--depth",
            "1",
            "--no-tags",
            "https://example.org/coreutils.git",
            str(destination),
        ]
        assert kwargs["check"] is True
        assert kwargs["timeout"] == 30
        assert kwargs["env"]["GIT_CONFIG_NOSYSTEM"] == "1"

    def test_failed_clone_removed(self, monkeypatch, tmp_path):
        error = subprocess.CalledProcessError(128, ["git"], stderr="fatal: repository not found\n")
        monkeypatch.setattr(subprocess, "run", RecordingRun(error=error))

        destination = tmp_path / "coreutils"
        with pytest.raises(CloneError, match="repository not found") as info:
            GitClient().clone("https://example.org/coreutils.git", destination)

        assert info.value.repository_url == "https://example.org/coreutils.git"
        assert not destination.exists()

    def test_timeout(self, monkeypatch, tmp_path):
        error = subprocess.TimeoutExpired(["git"], 5)
        monkeypatch.setattr(subprocess, "run", RecordingRun(error=error))

        destination = tmp_path / "coreutils"
        with pytest.raises(CloneError, match="timed out"):
            GitClient(timeout=5).clone("https://example.org/coreutils.git", destination)
        assert not destination.exists()

    def test_missing_git_executable(self, monkeypatch, tmp_path):
        monkeypatch.setattr(subprocess, "run", RecordingRun(error=FileNotFoundError(), create=False))
        with pytest.raises(CloneError, match="not found"):
            GitClient(executable="no-such-git").clone("https://example.org/x.git", tmp_path / "x")


def test_isolated_environment_ignores_user_config(monkeypatch):
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", "/home/user/.gitconfig")
    env = isolated_git_environment()
    assert env["GIT_CONFIG_GLOBAL"] != "/home/user/.gitconfig"
    assert env["GIT_TERMINAL_PROMPT"] == "0"


def test_is_repository(tmp_path):
    assert not is_repository(tmp_path)
    (tmp_path / ".git").mkdir()
    assert is_repository(tmp_path)


def test_unusable_clone_directory(tmp_path):
    blocker = tmp_path / "clones"
    blocker.write_text("a file where the cache directory belongs")
    with pytest.raises(CloneError, match="cannot create"):
        GitClient().clone("https://example.org/x.git", blocker / "c" / "x")
