"""
core - Date Prefix Rename Core Module

Provides date matching, configuration, rename plan generation and execution
"""

from .models_date import (
    DateCandidate,
    TimeOfDay,
    MatcherSpec,
    MatcherKind,
    DateFormats,
    Config,
    TimeMode,
    RenamePlan,
    Unmatched,
    UnmatchedReason,
    Decision,
    Review,
    DEFAULT_DATE_FORMAT,
    DEFAULT_DATE_TIME_FORMAT,
)

from .errors import (
    PrefixByDateError,
    ConfigError,
    RenameError,
)

from .default_matchers import (
    default_matcher_specs,
)

from .match_date import (
    PatternMatcher,
    MetadataMatcher,
    PredeterminedDateMatcher,
    FileMetadata,
    build_matcher,
)

from .config_merge import (
    CliOverrides,
    config_from_table,
    merge_matchers,
    select_active,
    effective_time_mode,
)

from .config_file import (
    config_home,
    load_config_file,
    load_config,
)

from .format_date import (
    Formatter,
    assemble_name,
    pad_year,
)

from .plan_rename import (
    RenamePlanner,
    ClaimedTargets,
    MANUAL,
    unmatched_paths,
    conflicting_plans,
)

from .exec_rename import (
    apply_plan,
    review_and_apply,
    accept_non_conflicting,
    ReviewSession,
    RenameResult,
    FilesystemApplier,
    DryRunApplier,
)

__all__ = [
    # Data models
    "DateCandidate",
    "TimeOfDay",
    "MatcherSpec",
    "MatcherKind",
    "DateFormats",
    "Config",
    "TimeMode",
    "RenamePlan",
    "Unmatched",
    "UnmatchedReason",
    "Decision",
    "Review",
    "DEFAULT_DATE_FORMAT",
    "DEFAULT_DATE_TIME_FORMAT",

    # Errors
    "PrefixByDateError",
    "ConfigError",
    "RenameError",

    # Matchers
    "default_matcher_specs",
    "PatternMatcher",
    "MetadataMatcher",
    "PredeterminedDateMatcher",
    "FileMetadata",
    "build_matcher",

    # Configuration
    "CliOverrides",
    "config_from_table",
    "merge_matchers",
    "select_active",
    "effective_time_mode",
    "config_home",
    "load_config_file",
    "load_config",

    # Formatting
    "Formatter",
    "assemble_name",
    "pad_year",

    # Planning
    "RenamePlanner",
    "ClaimedTargets",
    "MANUAL",
    "unmatched_paths",
    "conflicting_plans",

    # Execution
    "apply_plan",
    "review_and_apply",
    "accept_non_conflicting",
    "ReviewSession",
    "RenameResult",
    "FilesystemApplier",
    "DryRunApplier",
]
