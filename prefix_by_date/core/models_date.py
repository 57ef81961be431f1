"""
models_date.py - Core Data Structure Definitions

Contains:
- DateCandidate: Date (and optional time) extracted from a path
- MatcherSpec: Configuration of a single matcher
- Config: Formats, time mode and ordered matcher list
- RenamePlan / Unmatched: Per-path outcome of planning
- Decision / Review: Answer of a front-end for a plan
"""

from dataclasses import dataclass, field, replace
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple, List
from enum import Enum
import platform


DEFAULT_DATE_FORMAT = "%Y-%m-%d"
DEFAULT_DATE_TIME_FORMAT = "%Y-%m-%d %Hh%Mm%S"


class TimeMode(Enum):
    """Prefix by date only or by date and time"""
    DATE_ONLY = "date"
    DATE_TIME = "date_time"


class MatcherKind(Enum):
    """Matcher kind enumeration"""
    PATTERN = "pattern"                # Regex on the file stem
    METADATA = "metadata"              # Filesystem timestamps
    PREDETERMINED = "predetermined"    # Current date


class UnmatchedReason(Enum):
    """Why no plan could be built for a path"""
    NO_MATCH = "no match"
    NOT_FOUND = "not found"
    INVALID_NAME = "invalid new name"


class Decision(Enum):
    """Front-end decision for a single plan"""
    ACCEPT = "accept"      # Apply this plan
    ALWAYS = "always"      # Apply this plan and later ones from the same matcher
    REJECT = "reject"      # Do not apply this plan
    IGNORE = "ignore"      # Reject this plan and later ones from the same matcher
    SKIP = "skip"          # Leave this path alone for now
    ABORT = "abort"        # Stop reviewing, discard every remaining plan


@dataclass(frozen=True)
class TimeOfDay:
    """Time fields of a candidate"""
    hour: int
    minute: int
    second: int


@dataclass(frozen=True)
class DateCandidate:
    """Date found for a path, with the remainder of its name"""
    year: int
    month: int
    day: int
    time: Optional[TimeOfDay] = None
    start: Optional[str] = None     # Text placed right after the prefix
    end: Optional[str] = None       # Text placed after start

    @classmethod
    def from_datetime(cls, value: datetime, start: Optional[str] = None) -> "DateCandidate":
        """Create a time-carrying candidate from a datetime"""
        return cls(
            year=value.year,
            month=value.month,
            day=value.day,
            time=TimeOfDay(value.hour, value.minute, value.second),
            start=start,
        )

    @property
    def has_time(self) -> bool:
        return self.time is not None

    def to_datetime(self) -> datetime:
        """Datetime used for strftime formatting (midnight when no time)"""
        if self.time is None:
            return datetime(self.year, self.month, self.day)
        return datetime(
            self.year, self.month, self.day,
            self.time.hour, self.time.minute, self.time.second,
        )

    def remainder_parts(self) -> List[str]:
        """Non-empty remainder parts, in order"""
        return [part for part in (self.start, self.end) if part]


@dataclass(frozen=True)
class MatcherSpec:
    """Configuration of a single matcher"""
    name: str
    kind: MatcherKind
    enabled: bool = True

    # Pattern matchers
    regex: Optional[str] = None
    time: bool = False
    delimiter: Optional[str] = None
    format: Optional[str] = None
    day_month_fallback: bool = False

    # Metadata matchers, consulted in this order
    sources: Tuple[str, ...] = ()

    def with_enabled(self, enabled: bool) -> "MatcherSpec":
        return replace(self, enabled=enabled)


@dataclass(frozen=True)
class DateFormats:
    """strftime patterns for both time modes"""
    date: str = DEFAULT_DATE_FORMAT
    date_time: str = DEFAULT_DATE_TIME_FORMAT

    def for_mode(self, mode: TimeMode) -> str:
        if mode is TimeMode.DATE_TIME:
            return self.date_time
        return self.date


@dataclass(frozen=True)
class Config:
    """Merged configuration, immutable for the whole run"""
    time_mode: TimeMode = TimeMode.DATE_ONLY
    formats: DateFormats = field(default_factory=DateFormats)
    matchers: Tuple[MatcherSpec, ...] = ()

    def matcher(self, name: str) -> Optional[MatcherSpec]:
        """Find matcher spec by name"""
        for spec in self.matchers:
            if spec.name == name:
                return spec
        return None

    @property
    def names(self) -> List[str]:
        return [spec.name for spec in self.matchers]


@dataclass(frozen=True)
class RenamePlan:
    """Single proposed rename"""
    source_path: Path
    target_path: Path
    matcher_name: str
    candidate: Optional[DateCandidate] = None  # None when named by hand
    conflict: bool = False

    @property
    def is_same(self) -> bool:
        """Whether source and target are the same"""
        return self.source_path == self.target_path

    def with_target(self, target_path: Path, conflict: bool) -> "RenamePlan":
        return replace(self, target_path=target_path, conflict=conflict)


@dataclass(frozen=True)
class Unmatched:
    """Path for which no plan could be built"""
    source_path: Path
    reason: UnmatchedReason = UnmatchedReason.NO_MATCH


@dataclass(frozen=True)
class Review:
    """Answer of a front-end for one plan"""
    decision: Decision
    new_name: Optional[str] = None  # Edited file name (accept decisions only)


def is_case_insensitive_fs() -> bool:
    """Detect if current filesystem is case-insensitive"""
    return platform.system() in ("Windows", "Darwin")


def normalize_for_comparison(name: str, case_insensitive: bool) -> str:
    """Normalize filename for comparison"""
    if case_insensitive:
        return name.casefold()
    return name
