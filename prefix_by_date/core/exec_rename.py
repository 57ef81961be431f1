"""
exec_rename.py - Rename Execution Module

Responsibilities:
- Apply a single accepted plan (refusing to overwrite)
- Drive the review of a batch, one plan at a time, in input order
- Collect the per-plan outcome
"""

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Set, Tuple
from dataclasses import dataclass, field
import logging
import os

from .models_date import Decision, RenamePlan, Review, Unmatched, UnmatchedReason, is_case_insensitive_fs
from .plan_rename import ClaimedTargets, PlanItem, RenamePlanner
from .safety_checks import check_rename_op
from .errors import RenameError

logger = logging.getLogger(__name__)

Reviewer = Callable[[RenamePlan], Review]


class FilesystemApplier:
    """Perform renames on the local filesystem"""

    def rename(self, src: Path, dst: Path) -> None:
        ok, error = check_rename_op(src, dst)
        if not ok:
            raise RenameError(src, dst, error)
        try:
            os.rename(src, dst)
        except OSError as e:
            raise RenameError(src, dst, str(e)) from e


class DryRunApplier:
    """Log renames without touching the filesystem"""

    def rename(self, src: Path, dst: Path) -> None:
        logger.info("[Preview] %s -> %s", src.name, dst.name)


def apply_plan(plan: RenamePlan, applier=None) -> None:
    """
    Apply an accepted plan

    Args:
        plan: Plan to apply
        applier: Object with a rename(src, dst) method (FilesystemApplier by default)

    Raises:
        RenameError: the rename could not be performed
    """
    if plan.is_same:
        logger.debug("Nothing to do for %s", plan.source_path)
        return
    applier = applier or FilesystemApplier()
    applier.rename(plan.source_path, plan.target_path)
    logger.info("Into: %s", plan.target_path.name)


@dataclass
class RenameResult:
    """Outcome of a reviewed batch"""
    applied: List[RenamePlan] = field(default_factory=list)
    failed: List[Tuple[RenamePlan, str]] = field(default_factory=list)  # (plan, error_msg)
    rejected: List[RenamePlan] = field(default_factory=list)
    skipped: List[RenamePlan] = field(default_factory=list)
    unmatched: List[Unmatched] = field(default_factory=list)
    aborted: bool = False

    @property
    def applied_count(self) -> int:
        return len(self.applied)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    def summary(self) -> str:
        """Generate summary"""
        lines = [
            f"Execution Result:",
            f"  - Renamed: {self.applied_count}",
            f"  - Failed: {self.failed_count}",
            f"  - Refused: {len(self.rejected)}",
            f"  - Skipped: {len(self.skipped)}",
            f"  - No match: {len(self.unmatched)}",
        ]
        if self.aborted:
            lines.append("  (aborted, remaining plans discarded)")
        if self.failed:
            lines.append("Failure Details:")
            for plan, error in self.failed[:10]:  # Show at most 10
                lines.append(f"  - {plan.source_path.name} -> {plan.target_path.name}: {error}")
            if len(self.failed) > 10:
                lines.append(f"  ... and {len(self.failed) - 10} more failures")
        return "\n".join(lines)


class ReviewSession:
    """
    Review state of a batch

    Front-ends call next_plan() then decide() until next_plan() returns
    None. Items come in input order and each plan is applied right after
    its decision. With rescue, paths without match are offered too, so the
    user can name them by hand.
    """

    def __init__(
        self,
        items: Sequence[PlanItem],
        applier=None,
        planner: Optional[RenamePlanner] = None,
        rescue: bool = False,
    ):
        self.applier = applier or FilesystemApplier()
        self.planner = planner
        self.result = RenameResult()
        self.items: List[PlanItem] = []
        for item in items:
            if isinstance(item, RenamePlan) or (rescue and item.reason is UnmatchedReason.NO_MATCH):
                self.items.append(item)
            else:
                self.result.unmatched.append(item)
        self.position = 0
        self.always: Set[str] = set()   # Matchers accepted without asking
        self.ignored: Set[str] = set()  # Matchers refused without asking

        case_insensitive = planner.case_insensitive if planner else is_case_insensitive_fs()
        self.claimed = ClaimedTargets(case_insensitive)
        for item in self.items:
            if isinstance(item, RenamePlan):
                self.claimed.claim(item.target_path)

    @property
    def total(self) -> int:
        return len(self.items)

    @property
    def finished(self) -> bool:
        return self.result.aborted or self.position >= len(self.items)

    def next_plan(self) -> Optional[PlanItem]:
        """
        Next item needing a decision, a RenamePlan or an Unmatched to rescue

        Plans of matchers marked always/ignore are settled on the way.
        """
        while not self.finished:
            item = self.items[self.position]
            if isinstance(item, Unmatched):
                return item
            if item.matcher_name in self.ignored:
                self._settle(item, Review(Decision.REJECT))
            elif item.matcher_name in self.always and not item.conflict:
                self._settle(item, Review(Decision.ACCEPT))
            else:
                return item
        return None

    def alternatives(self) -> List[RenamePlan]:
        """Renames proposed by the other matchers for the pending plan"""
        if self.finished or self.planner is None:
            return []
        item = self.items[self.position]
        if not isinstance(item, RenamePlan):
            return []
        return self.planner.alternatives(item, self.claimed)

    def decide(self, review: Review) -> PlanItem:
        """
        Settle the pending item

        Args:
            review: Decision for the item returned by next_plan()

        Returns:
            The item as settled (a new plan when a name was given)

        Raises:
            ValueError: nothing pending, invalid name, or a path without
                match accepted without a name
        """
        if self.finished:
            raise ValueError("No plan pending review")
        item = self.items[self.position]
        accepting = review.decision in (Decision.ACCEPT, Decision.ALWAYS)
        rescued = isinstance(item, Unmatched)

        if rescued and accepting and not review.new_name:
            raise ValueError(f"No match for {item.source_path.name}, a new name is required")

        if accepting and review.new_name and (rescued or review.new_name != item.target_path.name):
            if self.planner is None:
                raise ValueError("Cannot edit names without a planner")
            item = self.planner.replan(item, review.new_name, self.claimed)
            self.items[self.position] = item

        if not rescued:
            if review.decision is Decision.ALWAYS:
                self.always.add(item.matcher_name)
            elif review.decision is Decision.IGNORE:
                self.ignored.add(item.matcher_name)

        return self._settle(item, review)

    def _settle(self, item: PlanItem, review: Review) -> PlanItem:
        decision = review.decision
        self.position += 1

        if decision is Decision.ABORT:
            self.result.aborted = True
            remaining = self.items[self.position - 1:]
            self.result.unmatched.extend(i for i in remaining if isinstance(i, Unmatched))
            logger.info("Aborted, %d item(s) discarded", len(remaining))
        elif isinstance(item, Unmatched):
            self.result.unmatched.append(item)
        elif decision in (Decision.ACCEPT, Decision.ALWAYS):
            try:
                apply_plan(item, self.applier)
                self.result.applied.append(item)
            except RenameError as e:
                logger.warning("%s", e)
                self.result.failed.append((item, e.reason))
        elif decision in (Decision.REJECT, Decision.IGNORE):
            self.claimed.release(item.target_path)
            self.result.rejected.append(item)
        elif decision is Decision.SKIP:
            self.claimed.release(item.target_path)
            self.result.skipped.append(item)
        return item


def accept_non_conflicting(plan: RenamePlan) -> Review:
    """Reviewer of non-interactive runs"""
    if plan.conflict:
        logger.warning("Conflict, skipping %s -> %s", plan.source_path.name, plan.target_path.name)
        return Review(Decision.SKIP)
    return Review(Decision.ACCEPT)


def review_and_apply(
    items: Sequence[PlanItem],
    reviewer: Reviewer = accept_non_conflicting,
    applier=None,
    planner: Optional[RenamePlanner] = None,
    progress_callback: Optional[Callable[[int, int, str], None]] = None,
) -> RenameResult:
    """
    Review a batch of plans and apply the accepted ones

    Args:
        items: Output of RenamePlanner.build_plans
        reviewer: Callable returning the Review of a plan
        applier: Object with a rename(src, dst) method
        planner: Planner used to rebuild plans whose name was edited
        progress_callback: Progress callback (current, total, message)

    Returns:
        Execution result
    """
    session = ReviewSession(items, applier=applier, planner=planner)
    while True:
        plan = session.next_plan()
        if plan is None:
            break
        if progress_callback:
            progress_callback(session.position + 1, session.total, plan.source_path.name)
        session.decide(reviewer(plan))
    return session.result
