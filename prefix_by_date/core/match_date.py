"""
match_date.py - Date Matchers

Each matcher tries to find a date for a path:
- PatternMatcher: regular expression on the file stem
- MetadataMatcher: creation / modification timestamps
- PredeterminedDateMatcher: current date

All of them expose try_match(path, metadata) -> Optional[DateCandidate].
"""

from datetime import datetime, date
from pathlib import Path
from typing import Optional, Sequence, Callable, Dict
import logging
import os
import re

from .models_date import DateCandidate, MatcherSpec, MatcherKind, TimeOfDay
from .default_matchers import CREATED, MODIFIED
from .errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = " "

REQUIRED_GROUPS = ("year", "month", "day")
REMAINDER_GROUPS = ("start", "end", "rest")
DATE_TIME_GROUPS = ("year", "month", "day", "hour", "min", "sec")

# (?<name>...) but not the (?<=...) / (?<!...) lookbehinds
_NAMED_GROUP = re.compile(r"\(\?<(?=[A-Za-z_])")


class FileMetadata:
    """Timestamps of a path, None when unavailable"""

    def __init__(self, path: Path):
        self.path = path

    def _stat(self) -> Optional[os.stat_result]:
        try:
            return self.path.stat()
        except OSError as e:
            logger.debug("Cannot stat %s: %s", self.path, e)
            return None

    def created(self) -> Optional[datetime]:
        stat = self._stat()
        birthtime = getattr(stat, "st_birthtime", None) if stat else None
        if birthtime is None:
            return None
        return datetime.fromtimestamp(birthtime)

    def modified(self) -> Optional[datetime]:
        stat = self._stat()
        if stat is None:
            return None
        return datetime.fromtimestamp(stat.st_mtime)


def translate_regex(regex: str) -> str:
    """Accept the (?<name>...) and \\z spellings used by other regex engines"""
    regex = _NAMED_GROUP.sub("(?P<", regex)
    return regex.replace(r"\z", r"\Z")


def compile_pattern(name: str, regex: str) -> "re.Pattern[str]":
    """
    Compile a pattern matcher regex

    Raises:
        ConfigError: invalid regex or missing year/month/day group
    """
    try:
        compiled = re.compile(translate_regex(regex), re.VERBOSE)
    except re.error as e:
        raise ConfigError(f"invalid regex: {e}", key=f"matchers.patterns.{name}")

    missing = [group for group in REQUIRED_GROUPS if group not in compiled.groupindex]
    if missing:
        raise ConfigError(
            f"regex lacks named group(s): {', '.join(missing)}",
            key=f"matchers.patterns.{name}",
        )
    return compiled


def _valid_date(year: int, month: int, day: int) -> bool:
    try:
        date(year, month, day)
    except ValueError:
        return False
    return True


def _strip_separators(text: str) -> str:
    return text.strip(" _-.")


class PatternMatcher:
    """Find the date in the file stem with a regular expression"""

    kind = MatcherKind.PATTERN

    def __init__(
        self,
        name: str,
        regex: str,
        time: bool = False,
        delimiter: Optional[str] = None,
        format: Optional[str] = None,
        day_month_fallback: bool = False,
    ):
        self.name = name
        self.regex = compile_pattern(name, regex)
        self.time = time
        self.delimiter = DEFAULT_DELIMITER if delimiter is None else delimiter
        self.format = format
        self.day_month_fallback = day_month_fallback

    def try_match(self, path: Path, metadata=None) -> Optional[DateCandidate]:
        match = self.regex.fullmatch(path.stem)
        if match is None:
            return None

        groups = match.groupdict()
        try:
            year, month, day = (int(groups[g]) for g in REQUIRED_GROUPS)
        except (TypeError, ValueError):
            return None

        if not _valid_date(year, month, day):
            if self.day_month_fallback and _valid_date(year, day, month):
                month, day = day, month
            else:
                logger.debug("%s: invalid date %s-%s-%s in %r", self.name, year, month, day, path.name)
                return None

        time = None
        if self.time:
            try:
                time = self._time_of(groups)
            except ValueError:
                logger.debug("%s: invalid time in %r", self.name, path.name)
                return None

        start, end = self._remainder(match)
        return DateCandidate(year, month, day, time=time, start=start, end=end)

    def _time_of(self, groups: Dict[str, Optional[str]]) -> Optional[TimeOfDay]:
        """Time fields of a match, ValueError when out of range"""
        raw = [groups.get(g) for g in ("hour", "min", "sec")]
        if raw[0] is None:
            return None
        hour, minute, second = (int(v) if v else 0 for v in raw)
        if hour > 23 or minute > 59 or second > 59:
            raise ValueError(f"{hour:02}:{minute:02}:{second:02}")
        return TimeOfDay(hour, minute, second)

    def _remainder(self, match: "re.Match[str]"):
        groupindex = self.regex.groupindex
        if any(g in groupindex for g in REMAINDER_GROUPS):
            start = match.group("start") if "start" in groupindex else None
            end = match.group("end") if "end" in groupindex else None
            rest = match.group("rest") if "rest" in groupindex else None
            if start is None:
                start, rest = rest, None
            elif rest:
                end = self.delimiter.join(p for p in (end, rest) if p)
            return start or None, end or None

        # No split declared: keep everything outside the date fields
        spans = [match.span(g) for g in DATE_TIME_GROUPS if g in groupindex and match.group(g) is not None]
        text = match.string
        first = min(s for s, _ in spans)
        last = max(e for _, e in spans)
        parts = [_strip_separators(text[:first]), _strip_separators(text[last:])]
        remainder = self.delimiter.join(p for p in parts if p)
        return remainder or None, None


class MetadataMatcher:
    """Use the creation or modification time of the path"""

    kind = MatcherKind.METADATA
    delimiter = DEFAULT_DELIMITER
    format = None

    def __init__(self, name: str, sources: Sequence[str] = (CREATED, MODIFIED)):
        unknown = [s for s in sources if s not in (CREATED, MODIFIED)]
        if unknown:
            raise ConfigError(f"unknown timestamp source(s): {', '.join(unknown)}", key=f"matchers.{name}")
        self.name = name
        # created is always consulted before modified
        self.sources = [s for s in (CREATED, MODIFIED) if s in sources]

    def try_match(self, path: Path, metadata=None) -> Optional[DateCandidate]:
        if metadata is None:
            metadata = FileMetadata(path)
        for source in self.sources:
            timestamp = getattr(metadata, source)()
            if timestamp is not None:
                return DateCandidate.from_datetime(timestamp, start=path.stem or None)
        return None


class PredeterminedDateMatcher:
    """Always match with a fixed date, today by default"""

    kind = MatcherKind.PREDETERMINED
    delimiter = DEFAULT_DELIMITER
    format = None

    def __init__(self, name: str, now: Optional[datetime] = None):
        self.name = name
        self.now = now or datetime.now()

    def try_match(self, path: Path, metadata=None) -> Optional[DateCandidate]:
        return DateCandidate.from_datetime(self.now, start=path.stem or None)


def _build_pattern(spec: MatcherSpec, now: Optional[datetime]) -> PatternMatcher:
    if not spec.regex:
        raise ConfigError("missing regex", key=f"matchers.patterns.{spec.name}")
    return PatternMatcher(
        spec.name,
        spec.regex,
        time=spec.time,
        delimiter=spec.delimiter,
        format=spec.format,
        day_month_fallback=spec.day_month_fallback,
    )


def _build_metadata(spec: MatcherSpec, now: Optional[datetime]) -> MetadataMatcher:
    return MetadataMatcher(spec.name, spec.sources or (CREATED, MODIFIED))


def _build_predetermined(spec: MatcherSpec, now: Optional[datetime]) -> PredeterminedDateMatcher:
    return PredeterminedDateMatcher(spec.name, now=now)


_BUILDERS: Dict[MatcherKind, Callable] = {
    MatcherKind.PATTERN: _build_pattern,
    MatcherKind.METADATA: _build_metadata,
    MatcherKind.PREDETERMINED: _build_predetermined,
}


def build_matcher(spec: MatcherSpec, now: Optional[datetime] = None):
    """
    Build the matcher described by a spec

    Args:
        spec: Matcher spec
        now: Date used by predetermined matchers (defaults to the current time)

    Returns:
        PatternMatcher, MetadataMatcher or PredeterminedDateMatcher
    """
    return _BUILDERS[spec.kind](spec, now)
