"""Thin wrapper around the git command line."""

import os
import subprocess
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from glyphcommit.errors import FatalCommandError, TransientLockConflict

LOCK_SIGNATURE = "index.lock"


class GitRunner:
    """Runs git inside one working tree and classifies its failures."""

    def __init__(self, repo_path="."):
        self.repo_path = Path(repo_path)

    @property
    def lock_path(self) -> Path:
        return self.repo_path / ".git" / LOCK_SIGNATURE

    def run(self, cmd: List[str], env: Optional[dict] = None) -> str:
        try:
            res = subprocess.run(
                cmd,
                cwd=self.repo_path,
                env=env,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            # git missing from PATH, or repo_path does not exist
            raise FatalCommandError(cmd, str(e)) from e
        if res.returncode != 0:
            if LOCK_SIGNATURE in res.stdout:
                raise TransientLockConflict(cmd, res.stdout, res.returncode)
            raise FatalCommandError(cmd, res.stdout, res.returncode)
        return res.stdout

    def is_repo(self) -> bool:
        """False when git reports no work tree. A git that cannot be started still raises."""
        if not self.repo_path.is_dir():
            return False
        try:
            self.run(["git", "rev-parse", "--is-inside-work-tree"])
        except FatalCommandError as e:
            if e.returncode is None:
                raise
            return False
        return True

    def add(self, path: str) -> str:
        return self.run(["git", "add", path])

    def commit(self, message: str, when: Optional[datetime] = None) -> str:
        env = None
        if when is not None:
            iso = when.strftime("%Y-%m-%dT%H:%M:%S%z")
            env = os.environ.copy()
            env["GIT_AUTHOR_DATE"] = iso
            env["GIT_COMMITTER_DATE"] = iso
        return self.run(["git", "commit", "-m", message, "--quiet"], env=env)

    def push(self, remote: str = "origin", ref: str = "HEAD") -> str:
        return self.run(["git", "push", remote, ref])

    def clear_lock(self) -> bool:
        """Delete a stale index.lock. Returns True if one was removed."""
        try:
            self.lock_path.unlink()
        except FileNotFoundError:
            return False
        return True
