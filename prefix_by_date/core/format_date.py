"""
format_date.py - Date prefix rendering

Provides the prefix of the new name and the assembly of the new file name
"""

from typing import Optional
import re

from .models_date import DateCandidate, DateFormats, TimeMode

# Directives and escaped percent signs, scanned left to right
_DIRECTIVE = re.compile(r"%(.)")


def pad_year(pattern: str, year: int) -> str:
    """Replace %Y by the four-digit year, strftime leaves years below 1000 unpadded"""
    return _DIRECTIVE.sub(lambda m: f"{year:04d}" if m.group(1) == "Y" else m.group(0), pattern)


class Formatter:
    """Render candidates with the configured strftime patterns"""

    def __init__(self, formats: Optional[DateFormats] = None, time_mode: TimeMode = TimeMode.DATE_ONLY):
        self.formats = formats or DateFormats()
        self.time_mode = time_mode

    def pattern_for(self, candidate: DateCandidate, override: Optional[str] = None) -> str:
        """
        Select the strftime pattern for a candidate

        Args:
            candidate: Date to render
            override: Matcher-specific pattern, wins over the configured ones

        Returns:
            strftime pattern
        """
        if override:
            return override
        if candidate.has_time:
            return self.formats.for_mode(self.time_mode)
        return self.formats.date

    def render(self, candidate: DateCandidate, override: Optional[str] = None) -> str:
        """Date prefix of a candidate"""
        pattern = pad_year(self.pattern_for(candidate, override), candidate.year)
        return candidate.to_datetime().strftime(pattern)


def assemble_name(prefix: str, candidate: DateCandidate, delimiter: str = " ", suffix: str = "") -> str:
    """
    Build the new file name

    Args:
        prefix: Rendered date
        candidate: Candidate carrying the remainder parts
        delimiter: Text placed between prefix and each remainder part
        suffix: Original extension, with its dot

    Returns:
        <prefix><delimiter><start>[<delimiter><end>]<suffix>
    """
    stem = delimiter.join([prefix] + candidate.remainder_parts())
    return f"{stem}{suffix}"
