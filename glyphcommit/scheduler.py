"""
Walk a date range and issue the commits that draw each glyph cell.

Every commit appends a line to the journal (log.txt) first, so each one
has a change to record. Commands are run one at a time; a held
.git/index.lock is removed and the command retried a bounded number of
times before the run is abandoned.
"""

import sys
import time
from dataclasses import dataclass
from datetime import date, datetime, time as dtime, timedelta, timezone
from pathlib import Path
from typing import Callable, Iterator, List, Optional

from glyphcommit.errors import FatalCommandError, InvalidArgument, TransientLockConflict
from glyphcommit.patterns import DayPattern, PatternResolver, as_calendar_date

JOURNAL_NAME = "log.txt"
JOURNAL_HEADER = "# Commit Log\n\n"


def utc_timestamp() -> str:
    return (
        datetime.now(timezone.utc)
        .isoformat(timespec="milliseconds")
        .replace("+00:00", "Z")
    )


class Journal:
    """Append-only record of every commit made."""

    def __init__(self, repo_path=".", name: str = JOURNAL_NAME,
                 clock: Callable[[], str] = utc_timestamp):
        self.name = name
        self.path = Path(repo_path) / name
        self.clock = clock

    def exists(self) -> bool:
        return self.path.exists()

    def ensure(self) -> bool:
        """Create the journal with its header. Returns True if it was created."""
        if self.path.exists():
            return False
        self.path.write_text(JOURNAL_HEADER, encoding="utf-8")
        return True

    def append(self, index: int, target: date) -> str:
        line = f"Commit {index} made at real time {self.clock()} but dated {target.isoformat()}\n"
        with open(self.path, "a", encoding="utf-8") as f:
            f.write(line)
        return line


@dataclass(frozen=True)
class DayPlan:
    day: date
    pattern: DayPattern
    count: int


@dataclass
class RunSummary:
    dark_days: int = 0
    light_days: int = 0
    commits: int = 0


def check_count(value, label: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgument(f"{label} must be a non-negative integer, got {value!r}")
    return value


class CommitScheduler:
    """Issues dated commits for every classified day in a range."""

    def __init__(
        self,
        resolver: PatternResolver,
        git,
        journal: Journal,
        commit_time: dtime = dtime(12, 0),
        max_attempts: int = 10,
        retry_delay: float = 1.0,
        commit_delay: float = 1.2,
        day_delay: float = 1.8,
        init_delay: float = 0.5,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        if max_attempts < 1:
            raise InvalidArgument("max_attempts must be at least 1")
        for label, delay in (("retry_delay", retry_delay), ("commit_delay", commit_delay),
                             ("day_delay", day_delay), ("init_delay", init_delay)):
            if delay < 0:
                raise InvalidArgument(f"{label} must not be negative, got {delay!r}")
        self.resolver = resolver
        self.git = git
        self.journal = journal
        self.commit_time = commit_time
        self.max_attempts = max_attempts
        self.retry_delay = retry_delay
        self.commit_delay = commit_delay
        self.day_delay = day_delay
        self.init_delay = init_delay
        self.sleep = sleep or time.sleep
        self._journal_ready = False

    def plan(self, start, end, dark_count: int, light_count: int) -> Iterator[DayPlan]:
        """Yield the days that would receive commits, with their counts."""
        check_count(dark_count, "dark count")
        check_count(light_count, "light count")
        current = as_calendar_date(start)
        last = as_calendar_date(end)
        if current > last:
            raise InvalidArgument(f"start date {current} is after end date {last}")

        while current <= last:
            pattern = self.resolver.classify(current)
            if pattern is not None:
                count = dark_count if pattern.is_dark else light_count
                if count > 0:
                    yield DayPlan(day=current, pattern=pattern, count=count)
            current += timedelta(days=1)

    def run(self, start, end, dark_count: int, light_count: int) -> RunSummary:
        # Materialise first so bad arguments fail before any write.
        plans = list(self.plan(start, end, dark_count, light_count))
        summary = RunSummary()
        # The journal is checked again on every run.
        self._journal_ready = False

        for plan in plans:
            print(
                f"Processing {plan.day.isoformat()} "
                f"({plan.pattern.glyph} pattern, {plan.pattern.intensity})..."
            )
            self.run_day(plan.day, plan.count)
            print(f"  Added {plan.count} commits\n")

            if plan.pattern.is_dark:
                summary.dark_days += 1
            else:
                summary.light_days += 1
            summary.commits += plan.count
            self.sleep(self.day_delay)

        return summary

    def run_day(self, day, count: int) -> int:
        """Make `count` journal entries and commits dated to `day`."""
        day = as_calendar_date(day)
        check_count(count, "commit count")
        if count == 0:
            return 0
        self._ensure_journal()

        when = datetime.combine(day, self.commit_time)
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        stamp = day.isoformat()

        for i in range(1, count + 1):
            self.journal.append(i, day)
            self._attempt(["git", "add", self.journal.name],
                          lambda: self.git.add(self.journal.name))
            message = f"Update log: commit {i} of {count} for {stamp}"
            self._attempt(["git", "commit", "-m", message],
                          lambda: self.git.commit(message, when))
            if i < count:
                self.sleep(self.commit_delay)
        return count

    def _ensure_journal(self) -> None:
        if self._journal_ready:
            return
        if self.journal.ensure():
            self._attempt(["git", "add", self.journal.name],
                          lambda: self.git.add(self.journal.name))
            self._attempt(["git", "commit", "-m", f"Initialize {self.journal.name}"],
                          lambda: self.git.commit(f"Initialize {self.journal.name}"))
            self.sleep(self.init_delay)
        self._journal_ready = True

    def _attempt(self, cmd: List[str], action: Callable[[], Optional[str]]):
        """Run one git step, retrying while another process holds the index lock."""
        label = " ".join(cmd)
        for attempt in range(1, self.max_attempts + 1):
            try:
                return action()
            except TransientLockConflict as exc:
                print(
                    f"[WARN] index.lock detected while running \"{label}\". "
                    f"Attempt {attempt}/{self.max_attempts}",
                    file=sys.stderr,
                )
                self._clear_lock()
                if attempt == self.max_attempts:
                    raise FatalCommandError(
                        exc.cmd,
                        f"still locked after {self.max_attempts} attempts: {exc.output}",
                        exc.returncode,
                    ) from exc
                self.sleep(self.retry_delay)

    def _clear_lock(self) -> None:
        clear = getattr(self.git, "clear_lock", None)
        if clear is None:
            return
        try:
            if clear():
                print("[INFO] Removed lock file", file=sys.stderr)
        except OSError as e:
            print(f"[WARN] Failed to remove lock file: {e}", file=sys.stderr)
