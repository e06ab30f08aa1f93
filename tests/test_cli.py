"""Tests for the command line front end, with git replaced by FakeGit."""

from datetime import date

import pytest

from glyphcommit import cli
from glyphcommit.errors import InvalidArgument

from conftest import FakeGit

RANGE = ["2025-01-12", "2025-01-13"]


@pytest.fixture
def repo(tmp_path, monkeypatch):
    fake = FakeGit(tmp_path)
    monkeypatch.setattr(cli, "GitRunner", lambda repo_path: fake)
    monkeypatch.setattr("glyphcommit.scheduler.time.sleep", lambda s: None)
    monkeypatch.delenv("DRY_RUN", raising=False)
    fake.path = tmp_path
    return fake


def argv(repo, *args):
    return ["--repo", str(repo.path), *args]


class TestParsing:
    def test_parse_date(self):
        assert cli.parse_date("2025-01-12") == date(2025, 1, 12)

    @pytest.mark.parametrize("bad", ["2025-13-01", "12/01/2025", "", "tomorrow"])
    def test_parse_date_rejects(self, bad):
        with pytest.raises(InvalidArgument):
            cli.parse_date(bad)

    @pytest.mark.parametrize("bad", ["-1", "abc", "1.5", ""])
    def test_parse_count_rejects(self, bad):
        with pytest.raises(InvalidArgument):
            cli.parse_count(bad, "dark")

    def test_parse_count(self):
        assert cli.parse_count(" 3 ", "dark") == 3


class TestMain:
    def test_argument_mode(self, repo, capsys):
        assert cli.main(argv(repo, *RANGE, "3", "1")) == 0
        out = capsys.readouterr().out
        assert "Dark dates processed: 2" in out
        assert "Light dates processed: 0" in out
        assert "Don't forget to push your changes: git push origin HEAD" in out
        assert len(repo.commits) == 7  # init + 2 days x 3

    def test_interactive_mode(self, repo, monkeypatch, capsys):
        answers = iter(["2025-01-12", "2025-01-12", "2", "0"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
        assert cli.main(argv(repo)) == 0
        assert len(repo.commits) == 3

    def test_interactive_non_numeric(self, repo, monkeypatch, capsys):
        answers = iter(["2025-01-12", "2025-01-12", "many", "0"])
        monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
        assert cli.main(argv(repo)) == 1
        assert "non-negative numbers" in capsys.readouterr().err
        assert repo.calls == []

    def test_negative_count_exits_nonzero(self, repo):
        assert cli.main(argv(repo, *RANGE, "-1", "1")) == 1
        assert repo.calls == []
        assert not (repo.path / "log.txt").exists()

    def test_partial_arguments(self, repo, capsys):
        assert cli.main(argv(repo, "2025-01-12", "2025-01-13")) == 1
        assert "START END DARK LIGHT" in capsys.readouterr().err

    def test_dry_run_env(self, repo, monkeypatch, capsys):
        monkeypatch.setenv("DRY_RUN", "1")
        assert cli.main(argv(repo, *RANGE, "3", "1")) == 0
        out = capsys.readouterr().out
        assert "[DRY-RUN] 2025-01-12 (H pattern, dark): 3 commits" in out
        assert "[DRY-RUN] Total would commit: 6" in out
        assert repo.calls == []

    def test_fatal_command_exits_nonzero(self, repo, capsys):
        repo.fail_call(1, "fatal: cannot lock ref")
        assert cli.main(argv(repo, *RANGE, "1", "1")) == 1
        assert "[FATAL]" in capsys.readouterr().err

    def test_push(self, repo, capsys):
        assert cli.main(argv(repo, *RANGE, "1", "0", "--push", "--remote", "up", "--branch", "main")) == 0
        assert repo.calls[-1] == ("push", "up", "main")

    def test_nothing_committed_skips_push(self, repo):
        assert cli.main(argv(repo, "2024-01-01", "2024-01-02", "1", "1", "--push")) == 0
        assert repo.calls == []

    def test_not_a_repo(self, repo, monkeypatch, capsys):
        monkeypatch.setattr(repo, "is_repo", lambda: False)
        assert cli.main(argv(repo, *RANGE, "1", "1")) == 1
        assert "Not a git repository" in capsys.readouterr().err

    def test_commit_time_option(self, repo):
        assert cli.main(argv(repo, "2025-01-12", "2025-01-12", "1", "0", "--commit-time", "08:30")) == 0
        when = repo.commits[-1][1]
        assert (when.hour, when.minute, when.utcoffset().total_seconds()) == (8, 30, 0)

    @pytest.mark.parametrize("flag", ["--commit-delay", "--day-delay", "--retry-delay"])
    def test_negative_delay_rejected_before_commits(self, repo, flag, capsys):
        with pytest.raises(SystemExit) as info:
            cli.main(argv(repo, "2025-01-12", "2025-01-12", "3", "0", flag, "-1"))
        assert info.value.code == 2
        assert "must not be negative" in capsys.readouterr().err
        assert repo.calls == []
        assert not (repo.path / "log.txt").exists()

    def test_closed_stdin_in_interactive_mode(self, repo, monkeypatch, capsys):
        def closed(prompt=""):
            raise EOFError
        monkeypatch.setattr("builtins.input", closed)
        assert cli.main(argv(repo)) == 1
        assert "Input closed" in capsys.readouterr().err
        assert repo.calls == []

    def test_reminder_printed_without_commits(self, repo, capsys):
        assert cli.main(argv(repo, "2024-01-01", "2024-01-02", "1", "1")) == 0
        assert "Don't forget to push your changes" in capsys.readouterr().out
        assert repo.calls == []

    def test_dry_run_prints_no_reminder(self, repo, capsys):
        assert cli.main(argv(repo, *RANGE, "1", "1", "--dry-run")) == 0
        assert "Don't forget" not in capsys.readouterr().out

    def test_missing_git_binary(self, tmp_path, monkeypatch, capsys):
        def no_git(cmd, **kwargs):
            raise FileNotFoundError(2, "No such file or directory", "git")
        monkeypatch.setattr("glyphcommit.git.subprocess.run", no_git)
        assert cli.main(["--repo", str(tmp_path), *RANGE, "1", "1"]) == 1
        assert "[FATAL]" in capsys.readouterr().err

    def test_today_mode(self, repo, monkeypatch, capsys):
        monkeypatch.setattr(cli, "datetime", _FrozenDatetime)
        assert cli.main(argv(repo, "--today", "--seed", "4")) == 0
        out = capsys.readouterr().out
        assert "Pattern for 2025-01-12: H week 0 day 0 (dark)" in out
        dated = [m for m, _ in repo.commits if m.startswith("Update log")]
        assert 23 <= len(dated) <= 28
        assert all(m.endswith("for 2025-01-12") for m in dated)

    def test_heatmap_mode(self, repo, tmp_path):
        out_dir = tmp_path / "previews"
        assert cli.main(["--heatmap", str(out_dir), "--seed", "1"]) == 0
        assert (out_dir / "HPatternHeatmap.png").exists()
        assert (out_dir / "EPatternHeatmap.png").exists()
        assert repo.calls == []


class _FrozenDatetime(cli.datetime):
    @classmethod
    def now(cls, tz=None):
        return cls(2025, 1, 12, 15, 0, tzinfo=tz)
