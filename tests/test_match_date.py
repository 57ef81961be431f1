"""Tests for the date matchers."""

import os
from datetime import datetime
from pathlib import Path

import pytest

from prefix_by_date.core import (
    ConfigError,
    DateCandidate,
    MatcherKind,
    MatcherSpec,
    MetadataMatcher,
    PatternMatcher,
    PredeterminedDateMatcher,
    TimeOfDay,
    build_matcher,
    default_matcher_specs,
)
from prefix_by_date.core.default_matchers import (
    AU_SUFFIX,
    CAMERA_PREFIX,
    DATE_TIME_SUFFIX,
)
from prefix_by_date.core.match_date import FileMetadata, compile_pattern, translate_regex

YMD = r"(?P<year>\d{4})(?P<month>\d{2})(?P<day>\d{2})"


class FakeMetadata:
    """Metadata provider with fixed timestamps."""

    def __init__(self, created_at=None, modified_at=None):
        self.created_at = created_at
        self.modified_at = modified_at

    def created(self):
        return self.created_at

    def modified(self):
        return self.modified_at


class TestRegexCompilation:
    """Test cases for regex translation and validation."""

    def test_translate_named_groups(self):
        """Test the (?<name>...) spelling is accepted."""
        assert translate_regex(r"(?<year>\d{4})") == r"(?P<year>\d{4})"

    def test_translate_keeps_lookbehinds(self):
        """Test lookbehind assertions are left untouched."""
        assert translate_regex(r"(?<=a)(?<!b)") == r"(?<=a)(?<!b)"

    def test_translate_end_anchor(self):
        """Test \\z becomes \\Z."""
        assert translate_regex(r"\A.+\z") == r"\A.+\Z"

    def test_compile_verbose(self):
        """Test whitespace in a regex is ignored."""
        compiled = compile_pattern("spaced", r"""
            (?P<year>\d{4})
            (?P<month>\d{2})
            (?P<day>\d{2})
        """)
        assert compiled.fullmatch("20230102")

    def test_compile_invalid_regex(self):
        """Test a malformed regex is a config error."""
        with pytest.raises(ConfigError, match="matchers.patterns.broken"):
            compile_pattern("broken", r"(?P<year>\d{4}")

    def test_compile_missing_groups(self):
        """Test the date groups are mandatory."""
        with pytest.raises(ConfigError, match="month, day"):
            compile_pattern("partial", r"(?P<year>\d{4})")


class TestPatternMatcher:
    """Test cases for PatternMatcher."""

    def test_camera_prefix(self):
        """Test a camera file name."""
        matcher = PatternMatcher("camera_prefix", CAMERA_PREFIX)
        candidate = matcher.try_match(Path("IMG-20231117-whatever.jpg"))

        assert candidate == DateCandidate(2023, 11, 17, start="whatever")

    def test_au_suffix(self):
        """Test the rest group fills start."""
        matcher = PatternMatcher("au_suffix", AU_SUFFIX)
        candidate = matcher.try_match(Path("Hello au 2023-10-15.pdf"))

        assert candidate.start == "Hello"
        assert candidate.end is None

    def test_anchored_match(self):
        """Test a partial match is no match."""
        matcher = PatternMatcher("ymd", YMD)

        assert matcher.try_match(Path("20230102.txt")) is not None
        assert matcher.try_match(Path("x20230102.txt")) is None
        assert matcher.try_match(Path("20230102x.txt")) is None

    @pytest.mark.parametrize("stem", ["20231301", "20230001", "20230100", "20230132", "20230230", "20230229"])
    def test_invalid_dates(self, stem):
        """Test out-of-range date fields are no match."""
        matcher = PatternMatcher("ymd", YMD)
        assert matcher.try_match(Path(f"{stem}.txt")) is None

    def test_leap_day(self):
        """Test February 29th of a leap year."""
        matcher = PatternMatcher("ymd", YMD)
        assert matcher.try_match(Path("20240229.txt")) == DateCandidate(2024, 2, 29)

    def test_day_month_fallback(self):
        """Test month and day are swapped only when asked to."""
        strict = PatternMatcher("ymd", YMD)
        lenient = PatternMatcher("ymd", YMD, day_month_fallback=True)

        assert strict.try_match(Path("20231302.txt")) is None
        assert lenient.try_match(Path("20231302.txt")) == DateCandidate(2023, 2, 13)

    def test_time_only_when_declared(self):
        """Test time groups are ignored unless time is set."""
        with_time = PatternMatcher("suffix", DATE_TIME_SUFFIX, time=True)
        without_time = PatternMatcher("suffix", DATE_TIME_SUFFIX)
        path = Path("Scan 2023-04-05 10h20m30.pdf")

        assert with_time.try_match(path).time == TimeOfDay(10, 20, 30)
        assert without_time.try_match(path).time is None

    def test_invalid_time(self):
        """Test out-of-range time fields are no match."""
        matcher = PatternMatcher("suffix", DATE_TIME_SUFFIX, time=True)
        assert matcher.try_match(Path("Scan 2023-04-05 25h20m30.pdf")) is None

    def test_start_and_end(self):
        """Test start and end groups are kept apart."""
        matcher = PatternMatcher(
            "infix", r"(?P<start>\w+)_" + YMD + r"_(?P<end>\w+)"
        )
        candidate = matcher.try_match(Path("notes_20230102_draft.txt"))

        assert candidate.start == "notes"
        assert candidate.end == "draft"

    def test_start_and_rest(self):
        """Test rest is appended to end when start is declared."""
        matcher = PatternMatcher(
            "infix", r"(?P<start>[a-z]+)-(?P<end>[a-z]+)-" + YMD + r"-(?P<rest>[a-z]+)", delimiter="_"
        )
        candidate = matcher.try_match(Path("a-b-20230102-c.txt"))

        assert candidate.remainder_parts() == ["a", "b_c"]

    def test_remainder_without_groups(self):
        """Test text around the date is kept when no split is declared."""
        matcher = PatternMatcher("loose", r"[a-z]+?_" + YMD + r"_[a-z]+")
        candidate = matcher.try_match(Path("notes_20230102_draft.txt"))

        assert candidate.start == "notes draft"
        assert candidate.end is None

    def test_only_date(self):
        """Test a name made of the date alone has no remainder."""
        matcher = PatternMatcher("ymd", YMD)
        assert matcher.try_match(Path("20230102.txt")).remainder_parts() == []

    def test_default_delimiter(self):
        """Test the delimiter defaults to a space."""
        assert PatternMatcher("ymd", YMD).delimiter == " "
        assert PatternMatcher("ymd", YMD, delimiter="").delimiter == ""


# Name layout of each built-in pattern
LAYOUTS = {
    "whatsapp_image": "WhatsApp Image {Y}-{m}-{d} at 10.11.12",
    "date_time_infix": "Scan {Y}-{m}-{d} 10h11m12 invoice",
    "date_time_suffix": "Scan {Y}-{m}-{d} 10h11m12",
    "camera_prefix": "IMG-{Y}{m}{d}-holidays",
    "au_suffix": "Releve au {Y}-{m}-{d}",
    "date_infix": "Report {Y}-{m}-{d} final",
    "ymd_date_suffix": "Report {Y}-{m}-{d}",
    "dmy_date_suffix": "Report {d}-{m}-{Y}",
}

DATES = [(2024, 2, 29), (2023, 1, 1), (2023, 12, 31), (1999, 7, 4)]


class TestDefaultPatterns:
    """Test cases for the dates read by each built-in pattern."""

    def test_every_pattern_has_a_layout(self):
        """Test no built-in pattern is left out of the layouts."""
        names = {spec.name for spec in default_matcher_specs() if spec.kind is MatcherKind.PATTERN}
        assert names == set(LAYOUTS)

    @pytest.mark.parametrize("date", DATES, ids=lambda d: "%04d-%02d-%02d" % d)
    @pytest.mark.parametrize("name", sorted(LAYOUTS))
    def test_date_read_back(self, name, date):
        """Test the date written in the layout is the date found."""
        spec = next(s for s in default_matcher_specs() if s.name == name)
        year, month, day = date
        stem = LAYOUTS[name].format(Y=f"{year:04d}", m=f"{month:02d}", d=f"{day:02d}")

        candidate = build_matcher(spec).try_match(Path(f"{stem}.jpg"))

        assert candidate is not None
        assert (candidate.year, candidate.month, candidate.day) == date


class TestMetadataMatcher:
    """Test cases for MetadataMatcher."""

    def test_created_before_modified(self):
        """Test created wins when both are available."""
        matcher = MetadataMatcher("both", sources=("modified", "created"))
        metadata = FakeMetadata(datetime(2021, 5, 6, 7, 8, 9), datetime(2022, 1, 2, 3, 4, 5))

        candidate = matcher.try_match(Path("notes.txt"), metadata)

        assert candidate == DateCandidate(2021, 5, 6, time=TimeOfDay(7, 8, 9), start="notes")

    def test_falls_back_to_modified(self):
        """Test modified is used when created is unavailable."""
        matcher = MetadataMatcher("both")
        metadata = FakeMetadata(None, datetime(2022, 1, 2, 3, 4, 5))

        candidate = matcher.try_match(Path("notes.txt"), metadata)

        assert (candidate.year, candidate.month, candidate.day) == (2022, 1, 2)
        assert candidate.has_time

    def test_no_timestamp(self):
        """Test no match without any timestamp."""
        matcher = MetadataMatcher("created", sources=("created",))
        metadata = FakeMetadata(None, datetime(2022, 1, 2))

        assert matcher.try_match(Path("notes.txt"), metadata) is None

    def test_unknown_source(self):
        """Test unknown timestamp sources are rejected."""
        with pytest.raises(ConfigError):
            MetadataMatcher("accessed", sources=("accessed",))

    def test_file_metadata_modified(self, make_file):
        """Test the modification time of a real file."""
        path = make_file("notes.txt")
        stamp = datetime(2022, 1, 2, 3, 4, 5)
        os.utime(path, (stamp.timestamp(), stamp.timestamp()))

        assert FileMetadata(path).modified() == stamp

    def test_file_metadata_missing(self, tmp_path):
        """Test a missing file has no timestamps."""
        metadata = FileMetadata(tmp_path / "missing.txt")

        assert metadata.created() is None
        assert metadata.modified() is None


class TestPredeterminedDateMatcher:
    """Test cases for PredeterminedDateMatcher."""

    def test_always_matches(self):
        """Test every path matches with the fixed date."""
        now = datetime(2024, 3, 9, 8, 7, 6)
        matcher = PredeterminedDateMatcher("today", now=now)

        candidate = matcher.try_match(Path("IMG-20231117-x.jpg"))

        assert candidate == DateCandidate.from_datetime(now, start="IMG-20231117-x")


class TestBuildMatcher:
    """Test cases for the matcher dispatch."""

    def test_kinds(self):
        """Test each kind builds its matcher."""
        now = datetime(2024, 3, 9)
        pattern = build_matcher(MatcherSpec("ymd", MatcherKind.PATTERN, regex=YMD, delimiter="-"), now)
        metadata = build_matcher(MatcherSpec("modified", MatcherKind.METADATA, sources=("modified",)), now)
        today = build_matcher(MatcherSpec("today", MatcherKind.PREDETERMINED), now)

        assert isinstance(pattern, PatternMatcher)
        assert pattern.delimiter == "-"
        assert isinstance(metadata, MetadataMatcher)
        assert metadata.sources == ["modified"]
        assert isinstance(today, PredeterminedDateMatcher)
        assert today.now == now

    def test_pattern_without_regex(self):
        """Test a pattern spec needs a regex."""
        with pytest.raises(ConfigError, match="missing regex"):
            build_matcher(MatcherSpec("empty", MatcherKind.PATTERN))
