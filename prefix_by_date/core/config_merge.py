"""
config_merge.py - Configuration Model

Responsibilities:
- Turn a parsed config document (dict) into a Config
- Merge user matchers into the built-in ones by name, keeping order
- Apply command-line overrides as a final filter
"""

from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple
import logging

from .models_date import (
    Config, DateFormats, MatcherKind, MatcherSpec, TimeMode,
    DEFAULT_DATE_FORMAT, DEFAULT_DATE_TIME_FORMAT,
)
from .default_matchers import default_matcher_specs, CREATED, MODIFIED, TODAY
from .match_date import compile_pattern
from .errors import ConfigError

logger = logging.getLogger(__name__)

METADATA_CHOICES = ("none", "created", "modified", "both")

# Keys allowed in a matchers.patterns.<name> table and their types
_PATTERN_KEYS = {
    "regex": str,
    "time": bool,
    "delimiter": str,
    "format": str,
    "enabled": bool,
    "day_month_fallback": bool,
}


@dataclass(frozen=True)
class CliOverrides:
    """Command-line flags applied on top of the merged config"""
    time: Optional[bool] = None         # True: date and time, False: date only
    metadata: Optional[str] = None      # none / created / modified / both
    today: Optional[bool] = None        # Force the today matcher on or off

    def __post_init__(self):
        if self.metadata is not None and self.metadata not in METADATA_CHOICES:
            raise ConfigError(f"expected one of {', '.join(METADATA_CHOICES)}", key="--metadata")


def _get(table: Mapping[str, Any], key: str, kind: type, path: str) -> Any:
    """Typed lookup, None when absent"""
    value = table.get(key)
    if value is None:
        return None
    if not isinstance(value, kind):
        raise ConfigError(f"expected {kind.__name__}, got {type(value).__name__}", key=path)
    return value


def _table(table: Mapping[str, Any], key: str, path: str) -> Mapping[str, Any]:
    return _get(table, key, dict, path) or {}


def merge_matchers(
    defaults: Iterable[MatcherSpec],
    overrides: Iterable[MatcherSpec],
) -> Tuple[MatcherSpec, ...]:
    """
    Merge matcher specs by name

    Overrides replace the default of the same name in place, unknown
    names are appended after the defaults in the order given.

    Raises:
        ConfigError: duplicate names, or an override changing a matcher kind
    """
    merged: Dict[str, MatcherSpec] = {}
    for spec in defaults:
        if spec.name in merged:
            raise ConfigError("duplicate matcher name", key=spec.name)
        merged[spec.name] = spec

    seen = set()
    for spec in overrides:
        if spec.name in seen:
            raise ConfigError("duplicate matcher name", key=spec.name)
        seen.add(spec.name)
        existing = merged.get(spec.name)
        if existing is not None and existing.kind is not spec.kind:
            raise ConfigError(
                f"duplicate matcher name, already used by a {existing.kind.value} matcher",
                key=spec.name,
            )
        merged[spec.name] = spec

    return tuple(merged.values())


def _pattern_override(name: str, table: Mapping[str, Any], default: Optional[MatcherSpec]) -> MatcherSpec:
    """Build the spec of one matchers.patterns.<name> table"""
    path = f"matchers.patterns.{name}"
    for key in table:
        if key not in _PATTERN_KEYS:
            logger.warning("Ignoring unknown key %s.%s", path, key)

    values = {}
    for key, kind in _PATTERN_KEYS.items():
        value = _get(table, key, kind, f"{path}.{key}")
        if value is not None:
            values[key] = value

    if default is not None and default.kind is MatcherKind.PATTERN:
        spec = replace(default, **values)
    else:
        if "regex" not in values:
            raise ConfigError("missing regex", key=path)
        spec = MatcherSpec(name, MatcherKind.PATTERN, **values)

    # Fail at startup rather than on the first path
    compile_pattern(name, spec.regex)
    return spec


def config_from_table(
    table: Optional[Mapping[str, Any]] = None,
    defaults: Optional[Iterable[MatcherSpec]] = None,
) -> Config:
    """
    Build the run configuration from a parsed config document

    Args:
        table: Parsed document (any key may be absent)
        defaults: Built-in matchers (default_matcher_specs() when None)

    Returns:
        Merged configuration

    Raises:
        ConfigError: invalid value or pattern
    """
    table = table or {}
    defaults = tuple(default_matcher_specs() if defaults is None else defaults)
    by_name = {spec.name: spec for spec in defaults}

    time = _get(table, "time", bool, "time")
    time_mode = TimeMode.DATE_TIME if time else TimeMode.DATE_ONLY

    formats_table = _table(table, "default_format", "default_format")
    formats = DateFormats(
        date=_get(formats_table, "date", str, "default_format.date") or DEFAULT_DATE_FORMAT,
        date_time=_get(formats_table, "date_time", str, "default_format.date_time") or DEFAULT_DATE_TIME_FORMAT,
    )

    matchers_table = _table(table, "matchers", "matchers")
    overrides: List[MatcherSpec] = []

    for name, value in _table(matchers_table, "patterns", "matchers.patterns").items():
        if not isinstance(value, dict):
            raise ConfigError("expected a table", key=f"matchers.patterns.{name}")
        overrides.append(_pattern_override(name, value, by_name.get(name)))

    metadata_table = _table(matchers_table, "metadata", "matchers.metadata")
    for source in (CREATED, MODIFIED):
        enabled = _get(metadata_table, source, bool, f"matchers.metadata.{source}")
        if enabled is not None and source in by_name:
            overrides.append(by_name[source].with_enabled(enabled))

    predetermined = _table(matchers_table, "predetermined_date", "matchers.predetermined_date")
    today = _get(predetermined, "today", bool, "matchers.predetermined_date.today")
    if today is not None and TODAY in by_name:
        overrides.append(by_name[TODAY].with_enabled(today))

    matchers = merge_matchers(defaults, overrides)
    logger.debug("Configured matchers: %s", ", ".join(s.name for s in matchers))
    return Config(time_mode=time_mode, formats=formats, matchers=matchers)


def _metadata_allowed(spec: MatcherSpec, choice: str) -> bool:
    if choice == "both":
        return True
    if choice == "none":
        return False
    return choice in spec.sources


def select_active(config: Config, overrides: Optional[CliOverrides] = None) -> List[MatcherSpec]:
    """
    Matchers to try, in priority order

    Command-line flags decide for the metadata and predetermined families
    when given; otherwise the configured enabled flag does.
    """
    overrides = overrides or CliOverrides()
    active = []
    for spec in config.matchers:
        enabled = spec.enabled
        if spec.kind is MatcherKind.METADATA and overrides.metadata is not None:
            enabled = _metadata_allowed(spec, overrides.metadata)
        elif spec.kind is MatcherKind.PREDETERMINED and overrides.today is not None:
            enabled = overrides.today
        if enabled:
            active.append(spec)
    return active


def effective_time_mode(config: Config, overrides: Optional[CliOverrides] = None) -> TimeMode:
    """Time mode after command-line flags"""
    if overrides is None or overrides.time is None:
        return config.time_mode
    return TimeMode.DATE_TIME if overrides.time else TimeMode.DATE_ONLY
