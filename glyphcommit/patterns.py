"""
Glyph grids and the date -> calendar cell mapping.

The calendar is read as 7 weekday rows by 4 week columns. Starting at the
epoch, the first 8 weeks draw "H", then the glyph alternates every 4 weeks,
starting with "E".
"""

import random
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Dict, Optional, Tuple

DARK = "dark"
LIGHT = "light"

_D, _L = DARK, LIGHT

# [day_index][week_index]
H_GRID = (
    (_D, _L, _L, _D),
    (_D, _L, _L, _D),
    (_D, _L, _L, _D),
    (_D, _D, _D, _D),
    (_D, _L, _L, _D),
    (_D, _L, _L, _D),
    (_D, _L, _L, _D),
)

E_GRID = (
    (_D, _D, _D, _D),
    (_D, _L, _L, _L),
    (_D, _L, _L, _L),
    (_D, _D, _D, _D),
    (_D, _L, _L, _L),
    (_D, _L, _L, _L),
    (_D, _D, _D, _D),
)

# A Sunday, so day_index 0 lands on the calendar's top row.
DEFAULT_EPOCH = date(2025, 1, 12)

# Ranges used when commit counts are randomised.
DARK_COUNT_RANGE = (23, 28)
LIGHT_COUNT_RANGE = (2, 11)


def _default_glyphs() -> Dict[str, Tuple[Tuple[str, ...], ...]]:
    return {"H": H_GRID, "E": E_GRID}


@dataclass(frozen=True)
class PatternConfig:
    """Fixed drawing parameters handed to PatternResolver."""

    epoch: date = DEFAULT_EPOCH
    glyphs: Dict[str, Tuple[Tuple[str, ...], ...]] = field(
        default_factory=_default_glyphs
    )
    lead_days: int = 56  # H is held this long before alternating
    cycle_days: int = 28


@dataclass(frozen=True)
class DayPattern:
    glyph: str
    week_index: int
    day_index: int
    intensity: str
    elapsed_days: int

    @property
    def is_dark(self) -> bool:
        return self.intensity == DARK


def as_calendar_date(value) -> date:
    """
    Reduce a date or datetime to a calendar date.
    Aware datetimes are converted to UTC first; naive ones are taken as-is.
    """
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"expected date or datetime, got {type(value).__name__}")


class PatternResolver:
    """Maps calendar dates onto the glyph grids."""

    def __init__(self, config: Optional[PatternConfig] = None):
        self.config = config or PatternConfig()

    def glyph_for(self, elapsed_days: int) -> str:
        if elapsed_days < self.config.lead_days:
            return "H"
        cycle = (elapsed_days - self.config.lead_days) // self.config.cycle_days
        return "E" if cycle % 2 == 0 else "H"

    def classify(self, day) -> Optional[DayPattern]:
        """
        Return the glyph cell for `day`, or None before the epoch.
        """
        day = as_calendar_date(day)
        if day < self.config.epoch:
            return None

        elapsed = (day - self.config.epoch).days
        day_index = elapsed % 7
        week_index = (elapsed // 7) % 4
        glyph = self.glyph_for(elapsed)
        intensity = self.config.glyphs[glyph][day_index][week_index]

        return DayPattern(
            glyph=glyph,
            week_index=week_index,
            day_index=day_index,
            intensity=intensity,
            elapsed_days=elapsed,
        )


def sample_commit_count(intensity: str, rng: random.Random) -> int:
    low, high = DARK_COUNT_RANGE if intensity == DARK else LIGHT_COUNT_RANGE
    return rng.randint(low, high)
