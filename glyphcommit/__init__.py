"""Draw H and E glyphs on a contribution calendar with backdated commits."""

from glyphcommit.errors import (
    FatalCommandError,
    GlyphCommitError,
    InvalidArgument,
    TransientLockConflict,
)
from glyphcommit.patterns import DayPattern, PatternConfig, PatternResolver
from glyphcommit.scheduler import CommitScheduler, Journal, RunSummary

__version__ = "0.1.0"

__all__ = [
    "CommitScheduler",
    "DayPattern",
    "FatalCommandError",
    "GlyphCommitError",
    "InvalidArgument",
    "Journal",
    "PatternConfig",
    "PatternResolver",
    "RunSummary",
    "TransientLockConflict",
]
