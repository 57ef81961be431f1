"""
plan_rename.py - Rename Plan Generation Module

Responsibilities:
- Try the active matchers on each path, first match wins
- Build the target name from the winning candidate
- Conflict detection against the disk and the rest of the batch
"""

from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Tuple, Union
import logging

from .models_date import (
    Config, DateCandidate, RenamePlan, Unmatched, UnmatchedReason,
    is_case_insensitive_fs, normalize_for_comparison,
)
from .config_merge import CliOverrides, select_active, effective_time_mode
from .match_date import FileMetadata, build_matcher
from .format_date import Formatter, assemble_name
from .safety_checks import is_valid_filename

logger = logging.getLogger(__name__)

PlanItem = Union[RenamePlan, Unmatched]

# Matcher name of plans renamed by hand
MANUAL = "manual"

UNNAMED = ("", ".", "..")


class ClaimedTargets:
    """Target paths reserved by the plans of a batch"""

    def __init__(self, case_insensitive: bool = True):
        self.case_insensitive = case_insensitive
        self._claims: Counter = Counter()

    def _key(self, path: Path) -> Tuple[Path, str]:
        return path.parent, normalize_for_comparison(path.name, self.case_insensitive)

    def claim(self, path: Path) -> None:
        self._claims[self._key(path)] += 1

    def release(self, path: Path) -> None:
        key = self._key(path)
        if self._claims[key] > 0:
            self._claims[key] -= 1

    def count(self, path: Path) -> int:
        return self._claims[self._key(path)]

    def same(self, a: Path, b: Path) -> bool:
        """Whether two paths designate the same name"""
        return self._key(a) == self._key(b)


class RenamePlanner:
    """Build rename plans for a batch of paths"""

    def __init__(
        self,
        config: Config,
        overrides: Optional[CliOverrides] = None,
        metadata_factory: Callable = FileMetadata,
        now: Optional[datetime] = None,
        case_insensitive: Optional[bool] = None,
    ):
        """
        Initialize planner

        Args:
            config: Merged configuration
            overrides: Command-line overrides
            metadata_factory: Callable returning the metadata provider of a path
            now: Date used by the today matcher (defaults to the current time)
            case_insensitive: Compare names case-insensitively (defaults to the platform)
        """
        self.config = config
        self.formatter = Formatter(config.formats, effective_time_mode(config, overrides))
        self.metadata_factory = metadata_factory
        self.case_insensitive = is_case_insensitive_fs() if case_insensitive is None else case_insensitive

        now = now or datetime.now()
        self.matchers = [build_matcher(spec, now) for spec in select_active(config, overrides)]
        logger.debug("Active matchers: %s", ", ".join(m.name for m in self.matchers) or "(none)")

    def match(self, path: Path):
        """
        Find the first matcher recognizing a path

        Returns:
            (matcher, candidate), or None when nothing matches
        """
        metadata = self.metadata_factory(path)
        for matcher in self.matchers:
            candidate = matcher.try_match(path, metadata)
            if candidate is not None:
                logger.debug("%s matched %r", matcher.name, path.name)
                return matcher, candidate
        return None

    def plan_path(self, path: Path) -> PlanItem:
        """
        Plan a single path, without batch conflict detection

        Args:
            path: Path to rename

        Returns:
            RenamePlan, or Unmatched
        """
        path = Path(path)
        if not path.exists():
            logger.warning("Path not found: %s", path)
            return Unmatched(path, UnmatchedReason.NOT_FOUND)

        # ".", ".." and "/" have no name to rewrite
        if path.name in UNNAMED:
            logger.warning("Skip %s: path has no file name", path)
            return Unmatched(path, UnmatchedReason.INVALID_NAME)

        found = self.match(path)
        if found is None:
            logger.info("No match for path: %s", path)
            return Unmatched(path, UnmatchedReason.NO_MATCH)

        matcher, candidate = found
        return self._plan_for(path, matcher, candidate)

    def _plan_for(self, path: Path, matcher, candidate: DateCandidate) -> PlanItem:
        prefix = self.formatter.render(candidate, matcher.format)
        new_name = assemble_name(prefix, candidate, matcher.delimiter, path.suffix)

        valid, error = is_valid_filename(new_name)
        if not valid:
            logger.warning("Skip %s: %s", path, error)
            return Unmatched(path, UnmatchedReason.INVALID_NAME)

        return RenamePlan(
            source_path=path,
            target_path=path.with_name(new_name),
            matcher_name=matcher.name,
            candidate=candidate,
        )

    def alternatives(self, plan: RenamePlan, claimed: Optional[ClaimedTargets] = None) -> List[RenamePlan]:
        """
        Renames the other active matchers propose for the source of a plan

        Args:
            plan: Plan under review
            claimed: Targets of the batch, used for the conflict flags

        Returns:
            One plan per distinct new name, in matcher order
        """
        path = plan.source_path
        metadata = self.metadata_factory(path)
        seen = {normalize_for_comparison(plan.target_path.name, self.case_insensitive)}
        found = []

        for matcher in self.matchers:
            if matcher.name == plan.matcher_name:
                continue
            candidate = matcher.try_match(path, metadata)
            if candidate is None:
                continue
            item = self._plan_for(path, matcher, candidate)
            if not isinstance(item, RenamePlan):
                continue
            key = normalize_for_comparison(item.target_path.name, self.case_insensitive)
            if key in seen:
                continue
            seen.add(key)

            target = item.target_path
            taken = claimed is not None and claimed.count(target) > 0
            conflict = not item.is_same and (taken or target.exists() or target.is_symlink())
            found.append(item.with_target(target, conflict))

        return found

    def build_plans(self, paths: Iterable[Path], progress_callback: Optional[Callable[[int, int, str], None]] = None) -> List[PlanItem]:
        """
        Plan a batch of paths, in input order

        A plan is flagged as conflicting when its target already exists on
        disk or is the target of another plan of the batch, unless the
        target is the source itself.

        Args:
            paths: Paths to rename
            progress_callback: Progress callback (current, total, message)

        Returns:
            One RenamePlan or Unmatched per path
        """
        paths = [Path(p) for p in paths]
        total = len(paths)
        logger.info("Processing %d paths...", total)

        items: List[PlanItem] = []
        for i, path in enumerate(paths):
            logger.info("Processing path %d/%d: %s", i + 1, total, path)
            if progress_callback:
                progress_callback(i + 1, total, path.name)
            items.append(self.plan_path(path))

        claimed = self.claim_all(items)
        return [
            item.with_target(item.target_path, self.is_conflict(item, claimed))
            if isinstance(item, RenamePlan) else item
            for item in items
        ]

    def claim_all(self, items: Iterable[PlanItem]) -> ClaimedTargets:
        """Reserve the target of every plan"""
        claimed = ClaimedTargets(self.case_insensitive)
        for item in items:
            if isinstance(item, RenamePlan):
                claimed.claim(item.target_path)
        return claimed

    def is_conflict(self, plan: RenamePlan, claimed: ClaimedTargets) -> bool:
        """
        Check whether a plan collides

        Args:
            plan: Plan whose target is counted in claimed
            claimed: Targets of the batch

        Returns:
            Whether the target is occupied by something else
        """
        if claimed.same(plan.source_path, plan.target_path):
            return False
        if claimed.count(plan.target_path) > 1:
            return True
        return plan.target_path.exists() or plan.target_path.is_symlink()

    def replan(self, item: PlanItem, new_name: str, claimed: Optional[ClaimedTargets] = None) -> RenamePlan:
        """
        Plan with a name typed by the user

        Args:
            item: Plan being edited (its target is released from claimed),
                or a path without match to rename by hand
            new_name: New file name, extension included
            claimed: Targets of the batch

        Returns:
            New plan, with the conflict flag recomputed

        Raises:
            ValueError: new_name is not a valid file name
        """
        valid, error = is_valid_filename(new_name)
        if not valid:
            raise ValueError(error)

        if claimed is None:
            claimed = ClaimedTargets(self.case_insensitive)
        elif isinstance(item, RenamePlan):
            claimed.release(item.target_path)

        target = item.source_path.with_name(new_name)
        claimed.claim(target)
        if isinstance(item, RenamePlan):
            edited = item.with_target(target, False)
        else:
            edited = RenamePlan(item.source_path, target, MANUAL)
        return edited.with_target(target, self.is_conflict(edited, claimed))


def unmatched_paths(items: Iterable[PlanItem]) -> List[Unmatched]:
    return [item for item in items if isinstance(item, Unmatched)]


def conflicting_plans(items: Iterable[PlanItem]) -> List[RenamePlan]:
    return [item for item in items if isinstance(item, RenamePlan) and item.conflict]
