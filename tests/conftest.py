"""Shared fixtures: an in-memory stand-in for git and a no-op sleep."""

import pytest

from glyphcommit.errors import FatalCommandError, TransientLockConflict
from glyphcommit.patterns import PatternResolver
from glyphcommit.scheduler import CommitScheduler, Journal


class FakeGit:
    """Records git calls. `failures` maps a call number to an exception to raise."""

    def __init__(self, repo_path):
        self.repo_path = repo_path
        self.calls = []
        self.commits = []
        self.failures = {}
        self.locks_cleared = 0

    def _step(self, call):
        self.calls.append(call)
        exc = self.failures.pop(len(self.calls), None)
        if exc is not None:
            raise exc

    def add(self, path):
        self._step(("add", path))
        return ""

    def commit(self, message, when=None):
        self._step(("commit", message))
        self.commits.append((message, when))
        return ""

    def push(self, remote="origin", ref="HEAD"):
        self._step(("push", remote, ref))
        return ""

    def clear_lock(self):
        self.locks_cleared += 1
        return True

    def is_repo(self):
        return True

    def lock_every_call_from(self, start, count=1000):
        for n in range(start, start + count):
            self.failures[n] = TransientLockConflict(["git"], "fatal: Unable to create '.git/index.lock': File exists.")

    def fail_call(self, n, output="fatal: bad object"):
        self.failures[n] = FatalCommandError(["git"], output)


@pytest.fixture
def fake_git(tmp_path):
    return FakeGit(tmp_path)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def journal(tmp_path):
    return Journal(tmp_path, clock=lambda: "2026-10-17T09:30:00.000Z")


@pytest.fixture
def scheduler(fake_git, journal, sleeps):
    return CommitScheduler(
        PatternResolver(), fake_git, journal, max_attempts=3, sleep=sleeps.append
    )
