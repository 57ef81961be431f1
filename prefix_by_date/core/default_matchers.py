# Built-in matchers, most specific first.
# Regexes are compiled in verbose mode and must match the whole file stem.

from typing import Tuple

from .models_date import MatcherSpec, MatcherKind

CREATED = "created"
MODIFIED = "modified"
TODAY = "today"

WHATSAPP_IMAGE = r"""
    .+[\ _-]
    (?P<year>\d{4})-
    (?P<month>\d{2})-
    (?P<day>\d{2})\s
    at\s
    (?P<hour>\d{2}).
    (?P<min>\d{2}).
    (?P<sec>\d{2})
"""

DATE_TIME_INFIX = r"""
    (?P<start>.+)[\ _-]
    (?P<year>\d{4})[-]?
    (?P<month>\d{2})[-]?
    (?P<day>\d{2})[\ _-]
    (?P<hour>\d{2})[h]?
    (?P<min>\d{2})[m]?
    (?P<sec>\d{2})[s\ _-]?
    (?P<end>.+)
"""

DATE_TIME_SUFFIX = r"""
    (?P<start>.+)[\ _-]
    (?P<year>\d{4})[-]?
    (?P<month>\d{2})[-]?
    (?P<day>\d{2})[\ _-]
    (?P<hour>\d{2})[h]?
    (?P<min>\d{2})[m]?
    (?P<sec>\d{2})[s]?
"""

# IMG-20231117-whatever, VID_20231117_holidays
CAMERA_PREFIX = r"""
    [A-Z]{2,}[-_]
    (?P<year>\d{4})
    (?P<month>\d{2})
    (?P<day>\d{2})
    [-_]
    (?P<rest>.+)
"""

# "Releve au 2023-10-15"
AU_SUFFIX = r"""
    (?P<rest>.+)
    \s+au\s+
    (?P<year>\d{4})[-]?
    (?P<month>\d{2})[-]?
    (?P<day>\d{2})
"""

DATE_INFIX = r"""
    (?P<start>.+)[\ _-]
    (?P<year>\d{4})[-]?
    (?P<month>\d{2})[-]?
    (?P<day>\d{2})[\ _-]
    (?P<end>.+)
"""

YMD_DATE_SUFFIX = r"""
    (?P<start>.+)[\ _-]
    (?P<year>\d{4})[\ _-]?
    (?P<month>\d{2})[\ _-]?
    (?P<day>\d{2})
"""

DMY_DATE_SUFFIX = r"""
    (?P<start>.+)[\ _-]
    (?P<day>\d{2})[\ _-]?
    (?P<month>\d{2})[\ _-]?
    (?P<year>\d{4})
"""


def default_matcher_specs() -> Tuple[MatcherSpec, ...]:
    """Compiled-in matcher list, in priority order"""
    pattern = MatcherKind.PATTERN
    return (
        MatcherSpec("whatsapp_image", pattern, regex=WHATSAPP_IMAGE, time=True),
        MatcherSpec("date_time_infix", pattern, regex=DATE_TIME_INFIX, time=True),
        MatcherSpec("date_time_suffix", pattern, regex=DATE_TIME_SUFFIX, time=True),
        MatcherSpec("camera_prefix", pattern, regex=CAMERA_PREFIX),
        MatcherSpec("au_suffix", pattern, regex=AU_SUFFIX),
        MatcherSpec("date_infix", pattern, regex=DATE_INFIX),
        MatcherSpec("ymd_date_suffix", pattern, regex=YMD_DATE_SUFFIX),
        MatcherSpec("dmy_date_suffix", pattern, regex=DMY_DATE_SUFFIX),
        MatcherSpec(CREATED, MatcherKind.METADATA, enabled=False, sources=(CREATED,)),
        MatcherSpec(MODIFIED, MatcherKind.METADATA, enabled=False, sources=(MODIFIED,)),
        MatcherSpec(TODAY, MatcherKind.PREDETERMINED, enabled=False),
    )
