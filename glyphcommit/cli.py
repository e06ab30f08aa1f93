"""
Command line front end.

Usage (inside your repo):
  glyphcommit 2025-01-12 2025-06-30 3 1      # dark days get 3 commits, light days 1
  glyphcommit                                # prompts for the same four values
  DRY_RUN=1 glyphcommit 2025-01-12 2025-03-01 3 1
  glyphcommit --today --push                 # randomised counts for today, then push
  glyphcommit --heatmap previews/            # write H/E heatmap PNGs
"""

import argparse
import os
import random
import sys
from datetime import datetime, time as dtime, timezone

from glyphcommit.errors import CommandError, InvalidArgument
from glyphcommit.git import GitRunner
from glyphcommit.heatmap import render_glyph_heatmaps
from glyphcommit.patterns import PatternResolver, sample_commit_count
from glyphcommit.scheduler import CommitScheduler, Journal, JOURNAL_NAME

# ---------- input parsing ----------


def parse_date(value: str):
    try:
        return datetime.strptime(value.strip(), "%Y-%m-%d").date()
    except ValueError:
        raise InvalidArgument(f"Invalid date (expected YYYY-MM-DD): {value!r}") from None


def parse_count(value: str, label: str) -> int:
    try:
        count = int(str(value).strip())
    except ValueError:
        raise InvalidArgument(
            "Please enter valid non-negative numbers for commit counts"
        ) from None
    if count < 0:
        raise InvalidArgument(
            f"Please enter valid non-negative numbers for commit counts ({label}: {count})"
        )
    return count


def parse_time_of_day(value: str) -> dtime:
    try:
        parsed = datetime.strptime(value, "%H:%M")
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected HH:MM, got {value!r}") from None
    return dtime(parsed.hour, parsed.minute, tzinfo=timezone.utc)


def non_negative_seconds(value: str) -> float:
    try:
        seconds = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected a number of seconds, got {value!r}") from None
    if seconds < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {value}")
    return seconds


def prompt_range():
    start = input("Enter start date (YYYY-MM-DD): ")
    end = input("Enter end date (YYYY-MM-DD): ")
    dark = input("Enter number of commits for dark dates: ")
    light = input("Enter number of commits for light dates: ")
    return start, end, dark, light


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="glyphcommit",
        description="Draw H and E glyphs on the contribution calendar with dated commits.",
    )
    ap.add_argument("start", nargs="?", help="First date (YYYY-MM-DD).")
    ap.add_argument("end", nargs="?", help="Last date, inclusive (YYYY-MM-DD).")
    ap.add_argument("dark", nargs="?", help="Commits for each dark cell.")
    ap.add_argument("light", nargs="?", help="Commits for each light cell.")

    ap.add_argument("--repo", default=".", help="Git working tree to commit into.")
    ap.add_argument("--journal", default=JOURNAL_NAME, help="Journal file name inside the repo.")
    ap.add_argument("--commit-time", type=parse_time_of_day, default=dtime(12, 0, tzinfo=timezone.utc),
                    help="UTC time of day stamped on every commit (HH:MM).")
    ap.add_argument("--commit-delay", type=non_negative_seconds, default=1.2,
                    help="Seconds to wait between commits of one day.")
    ap.add_argument("--day-delay", type=non_negative_seconds, default=1.8,
                    help="Seconds to wait after each processed day.")
    ap.add_argument("--retry-delay", type=non_negative_seconds, default=1.0,
                    help="Seconds to wait before retrying a locked git command.")
    ap.add_argument("--max-attempts", type=int, default=10,
                    help="Attempts per git command while index.lock is held.")
    ap.add_argument("--dry-run", action="store_true",
                    help="Print the plan without committing (also DRY_RUN=1).")

    ap.add_argument("--today", action="store_true",
                    help="Commit for today's cell only, with randomised counts.")
    ap.add_argument("--seed", type=int, default=None, help="Seed for randomised counts.")
    ap.add_argument("--heatmap", metavar="DIR", default=None,
                    help="Write H/E heatmap previews into DIR and exit.")

    ap.add_argument("--push", action="store_true", help="Push after committing.")
    ap.add_argument("--remote", default="origin", help="Git remote name to push to.")
    ap.add_argument("--branch", default="HEAD", help="Ref to push.")
    return ap


# ---------- main logic ----------


def run_range(args, scheduler: CommitScheduler, dry_run: bool) -> bool:
    positionals = [args.start, args.end, args.dark, args.light]
    if all(p is None for p in positionals):
        positionals = prompt_range()
    elif any(p is None for p in positionals):
        raise InvalidArgument("Expected START END DARK LIGHT, or no arguments to be prompted")

    start_str, end_str, dark_str, light_str = positionals
    dark = parse_count(dark_str, "dark")
    light = parse_count(light_str, "light")
    start = parse_date(start_str)
    end = parse_date(end_str)

    print(f"Processing dates from {start} to {end}...")
    print(f"Dark dates: {dark} commits, Light dates: {light} commits\n")

    if dry_run:
        total = 0
        for plan in scheduler.plan(start, end, dark, light):
            total += plan.count
            print(f"[DRY-RUN] {plan.day} ({plan.pattern.glyph} pattern, "
                  f"{plan.pattern.intensity}): {plan.count} commits")
        print(f"[DRY-RUN] Total would commit: {total}")
        return False

    summary = scheduler.run(start, end, dark, light)
    print("\nCompleted!")
    print(f"  Dark dates processed: {summary.dark_days}")
    print(f"  Light dates processed: {summary.light_days}")
    return summary.commits > 0


def run_today(args, scheduler: CommitScheduler, resolver: PatternResolver, dry_run: bool) -> bool:
    today = datetime.now(timezone.utc).date()
    pattern = resolver.classify(today)
    if pattern is None:
        print(f"Skip today ({today}): before the pattern epoch.")
        return False

    count = sample_commit_count(pattern.intensity, random.Random(args.seed))
    print(f"Pattern for {today}: {pattern.glyph} week {pattern.week_index} "
          f"day {pattern.day_index} ({pattern.intensity})")
    print(f"Commits count for {today}: {count}")
    if dry_run:
        print(f"[DRY-RUN] Would commit {count} times")
        return False

    scheduler.run_day(today, count)
    print("Commits generated successfully for today.")
    return True


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.heatmap:
        render_glyph_heatmaps(args.heatmap, random.Random(args.seed))
        return 0

    dry_run = args.dry_run or os.environ.get("DRY_RUN") is not None
    git = GitRunner(args.repo)
    resolver = PatternResolver()

    try:
        scheduler = CommitScheduler(
            resolver,
            git,
            Journal(args.repo, args.journal),
            commit_time=args.commit_time,
            max_attempts=args.max_attempts,
            retry_delay=args.retry_delay,
            commit_delay=args.commit_delay,
            day_delay=args.day_delay,
        )

        if not dry_run and not git.is_repo():
            sys.stderr.write("Not a git repository. Initialize one and add a remote before running.\n")
            return 1

        if args.today:
            committed = run_today(args, scheduler, resolver, dry_run)
        else:
            committed = run_range(args, scheduler, dry_run)

        if args.push and committed:
            print(f"Pushing to '{args.remote}' {args.branch}")
            git.push(args.remote, args.branch)
            print("Changes pushed successfully.")
        elif not args.push and not dry_run:
            print(f"Don't forget to push your changes: git push {args.remote} {args.branch}")
    except EOFError:
        sys.stderr.write("\nInput closed before all values were entered.\n")
        return 1
    except InvalidArgument as e:
        sys.stderr.write(f"{e}\n")
        return 1
    except CommandError as e:
        sys.stderr.write(f"[FATAL] {e}\n")
        return 1
    return 0
