"""Tests for the configuration model."""

import logging

import pytest

from prefix_by_date.core import (
    CliOverrides,
    ConfigError,
    MatcherKind,
    MatcherSpec,
    TimeMode,
    config_from_table,
    default_matcher_specs,
    effective_time_mode,
    merge_matchers,
    select_active,
)

YMD = r"(?P<year>\d{4})(?P<month>\d{2})(?P<day>\d{2})"

DEFAULT_NAMES = [
    "whatsapp_image",
    "date_time_infix",
    "date_time_suffix",
    "camera_prefix",
    "au_suffix",
    "date_infix",
    "ymd_date_suffix",
    "dmy_date_suffix",
    "created",
    "modified",
    "today",
]


def active_names(config, overrides=None):
    return [spec.name for spec in select_active(config, overrides)]


class TestDefaults:
    """Test cases for the built-in configuration."""

    def test_empty_document(self):
        """Test an empty document gives the built-in matchers."""
        config = config_from_table({})

        assert config.names == DEFAULT_NAMES
        assert config.time_mode is TimeMode.DATE_ONLY
        assert config.formats.date == "%Y-%m-%d"
        assert config.formats.date_time == "%Y-%m-%d %Hh%Mm%S"

    def test_active_by_default(self):
        """Test metadata and today matchers start disabled."""
        assert active_names(config_from_table()) == DEFAULT_NAMES[:8]

    def test_default_regexes_compile(self):
        """Test every built-in pattern is valid."""
        for spec in default_matcher_specs():
            if spec.kind is MatcherKind.PATTERN:
                config_from_table({"matchers": {"patterns": {spec.name: {}}}})


class TestConfigFromTable:
    """Test cases for config_from_table."""

    def test_time_and_formats(self):
        """Test top-level time and format keys."""
        config = config_from_table({
            "time": True,
            "default_format": {"date": "%d.%m.%Y", "date_time": "%d.%m.%Y %H:%M"},
        })

        assert config.time_mode is TimeMode.DATE_TIME
        assert config.formats.date == "%d.%m.%Y"
        assert config.formats.date_time == "%d.%m.%Y %H:%M"

    def test_override_in_place(self):
        """Test overriding a built-in pattern keeps its position and regex."""
        default = next(s for s in default_matcher_specs() if s.name == "camera_prefix")
        config = config_from_table({"matchers": {"patterns": {"camera_prefix": {"delimiter": "_"}}}})

        spec = config.matcher("camera_prefix")
        assert config.names == DEFAULT_NAMES
        assert spec.delimiter == "_"
        assert spec.regex == default.regex

    def test_append_new_pattern(self):
        """Test new patterns are appended after the built-in matchers."""
        config = config_from_table({"matchers": {"patterns": {
            "first": {"regex": YMD},
            "second": {"regex": YMD, "time": True, "format": "%Y%m%d"},
        }}})

        assert config.names == DEFAULT_NAMES + ["first", "second"]
        assert config.matcher("second").time is True
        assert config.matcher("second").format == "%Y%m%d"

    def test_disable_pattern(self):
        """Test a disabled pattern is not active."""
        config = config_from_table({"matchers": {"patterns": {"au_suffix": {"enabled": False}}}})

        assert "au_suffix" in config.names
        assert "au_suffix" not in active_names(config)

    def test_metadata_and_today(self):
        """Test the metadata and predetermined date tables."""
        config = config_from_table({"matchers": {
            "metadata": {"modified": True},
            "predetermined_date": {"today": True},
        }})

        active = active_names(config)
        assert "modified" in active
        assert "created" not in active
        assert active[-1] == "today"

    def test_unknown_key_warns(self, caplog):
        """Test unknown pattern keys are reported."""
        with caplog.at_level(logging.WARNING):
            config_from_table({"matchers": {"patterns": {"date_infix": {"colour": "red"}}}})

        assert "matchers.patterns.date_infix.colour" in caplog.text

    @pytest.mark.parametrize("table, key", [
        ({"time": "yes"}, "time"),
        ({"default_format": {"date": 3}}, "default_format.date"),
        ({"matchers": {"patterns": {"new": {}}}}, "matchers.patterns.new"),
        ({"matchers": {"patterns": {"new": {"regex": "(?P<year>"}}}}, "matchers.patterns.new"),
        ({"matchers": {"patterns": {"new": {"regex": r"(?P<year>\d{4})"}}}}, "matchers.patterns.new"),
        ({"matchers": {"patterns": {"new": "not a table"}}}, "matchers.patterns.new"),
        ({"matchers": {"patterns": {"date_infix": {"time": 1}}}}, "matchers.patterns.date_infix.time"),
        ({"matchers": {"metadata": {"created": "on"}}}, "matchers.metadata.created"),
    ])
    def test_invalid_documents(self, table, key):
        """Test invalid values are config errors naming the key."""
        with pytest.raises(ConfigError) as excinfo:
            config_from_table(table)

        assert excinfo.value.key == key

    def test_pattern_reusing_metadata_name(self):
        """Test a pattern cannot take the name of a metadata matcher."""
        with pytest.raises(ConfigError, match="already used"):
            config_from_table({"matchers": {"patterns": {"created": {"regex": YMD}}}})


class TestMergeMatchers:
    """Test cases for merge_matchers."""

    def test_merge_order(self):
        """Test replaced entries stay in place and new ones go last."""
        a = MatcherSpec("a", MatcherKind.PATTERN, regex=YMD)
        b = MatcherSpec("b", MatcherKind.PATTERN, regex=YMD)
        c = MatcherSpec("c", MatcherKind.PATTERN, regex=YMD)
        a2 = MatcherSpec("a", MatcherKind.PATTERN, regex=YMD, delimiter="-")

        merged = merge_matchers([a, b], [c, a2])

        assert merged == (a2, b, c)

    def test_duplicate_defaults(self):
        """Test duplicate names are rejected."""
        a = MatcherSpec("a", MatcherKind.PATTERN, regex=YMD)

        with pytest.raises(ConfigError, match="duplicate"):
            merge_matchers([a, a], [])

    def test_duplicate_overrides(self):
        """Test an override name can only be given once."""
        a = MatcherSpec("a", MatcherKind.PATTERN, regex=YMD)

        with pytest.raises(ConfigError, match="duplicate"):
            merge_matchers([], [a, a])


class TestCliOverrides:
    """Test cases for the command-line filter."""

    @pytest.mark.parametrize("choice, expected", [
        ("none", []),
        ("created", ["created"]),
        ("modified", ["modified"]),
        ("both", ["created", "modified"]),
    ])
    def test_metadata_choice(self, choice, expected):
        """Test the metadata flag decides for the metadata family."""
        config = config_from_table({"matchers": {"metadata": {"created": True}}})
        active = active_names(config, CliOverrides(metadata=choice))

        assert [name for name in active if name in ("created", "modified")] == expected

    def test_today_flag(self):
        """Test the today flag forces the predetermined matcher."""
        config = config_from_table({"matchers": {"predetermined_date": {"today": True}}})

        assert "today" in active_names(config)
        assert "today" not in active_names(config, CliOverrides(today=False))
        assert "today" in active_names(config_from_table(), CliOverrides(today=True))

    def test_filter_keeps_matcher_list(self):
        """Test the filter never rewrites the configured matchers."""
        config = config_from_table()
        select_active(config, CliOverrides(metadata="both", today=True))

        assert not config.matcher("created").enabled
        assert not config.matcher("today").enabled

    def test_time_flag(self):
        """Test the time flag wins over the configured mode."""
        config = config_from_table({"time": True})

        assert effective_time_mode(config) is TimeMode.DATE_TIME
        assert effective_time_mode(config, CliOverrides(time=False)) is TimeMode.DATE_ONLY
        assert effective_time_mode(config_from_table(), CliOverrides(time=True)) is TimeMode.DATE_TIME

    def test_invalid_metadata_choice(self):
        """Test unknown metadata choices are rejected."""
        with pytest.raises(ConfigError):
            CliOverrides(metadata="accessed")
