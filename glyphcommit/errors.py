"""Error types raised while scheduling glyph commits."""


class GlyphCommitError(Exception):
    """Base class for all glyphcommit failures."""


class InvalidArgument(GlyphCommitError, ValueError):
    """Bad commit count or date. Raised before anything is written."""


class CommandError(GlyphCommitError):
    def __init__(self, cmd, output="", returncode=None):
        self.cmd = list(cmd)
        self.output = output
        # None when the command never started
        self.returncode = returncode
        super().__init__(f"{' '.join(self.cmd)} failed: {output.strip()}")


class TransientLockConflict(CommandError):
    """git refused to run because .git/index.lock exists."""


class FatalCommandError(CommandError):
    """A git command failed for good. Earlier commits are left in place."""
