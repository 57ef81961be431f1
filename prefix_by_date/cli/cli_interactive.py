"""
cli_interactive.py - Interactive CLI

Asks for a decision on every rename plan, in input order
"""

from typing import Callable, Dict, List, Optional

from ..core import (
    Decision, Review, RenamePlan, RenamePlanner, RenameResult, ReviewSession, Unmatched,
)
from ..core.plan_rename import PlanItem

CHOICES: Dict[str, Decision] = {
    "y": Decision.ACCEPT,
    "a": Decision.ALWAYS,
    "s": Decision.SKIP,
    "r": Decision.REJECT,
    "i": Decision.IGNORE,
    "q": Decision.ABORT,
}

HELP = "[y]es / [a]lways / [e]dit / [v]iew alternatives / [s]kip / [r]efuse / [i]gnore / [q]uit"
RESCUE_HELP = "[e]dit / [s]kip / [q]uit"


def print_header(title: str):
    """Print header"""
    print()
    print("=" * 60)
    print(f"  {title}")
    print("=" * 60)
    print()


def input_choice(prompt: str, choices: List[str], default: Optional[str] = None) -> str:
    """Input choice"""
    default_str = f" [{default}]" if default else ""

    while True:
        value = input(f"{prompt}{default_str}: ").strip().lower()
        if not value and default:
            return default
        if value in choices:
            return value
        print(f"Invalid choice, please enter one of: {'/'.join(choices)}")


def input_new_name(current: str) -> Optional[str]:
    """Input edited name, None to go back"""
    value = input(f"New name [{current}] (empty to go back): ").strip()
    return value or None


def input_alternative(alternatives: List[RenamePlan]) -> Optional[str]:
    """Pick one of the names proposed by other matchers, None to go back"""
    if not alternatives:
        print("No other matcher proposes a name")
        return None
    for number, alt in enumerate(alternatives, 1):
        print(f"  {number}. {alt.target_path.name}  ({alt.matcher_name})")
    choices = [str(number) for number in range(1, len(alternatives) + 1)]
    while True:
        value = input("Alternative (empty to go back): ").strip()
        if not value:
            return None
        if value in choices:
            return alternatives[int(value) - 1].target_path.name
        print(f"Invalid choice, please enter one of: {'/'.join(choices)}")


def describe(plan: RenamePlan) -> str:
    note = "  [CONFLICT: target already taken]" if plan.conflict else ""
    return f"{plan.source_path.name}  ->  {plan.target_path.name}  ({plan.matcher_name}){note}"


def prompt_review(plan: RenamePlan, alternatives: Callable[[], List[RenamePlan]] = list) -> Review:
    """
    Ask what to do with a plan

    Args:
        plan: Plan to review
        alternatives: Returns the renames proposed by the other matchers

    Returns:
        Review of the plan
    """
    print(describe(plan))
    # Conflicting plans are not accepted by default
    default = None if plan.conflict else "y"

    while True:
        choice = input_choice(HELP, list(CHOICES) + ["e", "v"], default)
        if choice == "e":
            new_name = input_new_name(plan.target_path.name)
        elif choice == "v":
            new_name = input_alternative(alternatives())
        else:
            return Review(CHOICES[choice])
        if new_name:
            return Review(Decision.ACCEPT, new_name)


def prompt_rescue(item: Unmatched) -> Review:
    """Ask for a name for a path no matcher recognized"""
    print(f"{item.source_path.name}  (no match)")

    while True:
        choice = input_choice(RESCUE_HELP, ["e", "s", "q"], "s")
        if choice == "s":
            return Review(Decision.SKIP)
        if choice == "q":
            return Review(Decision.ABORT)
        new_name = input_new_name(item.source_path.name)
        if new_name:
            return Review(Decision.ACCEPT, new_name)


def interactive_review(items: List[PlanItem], planner: RenamePlanner, applier=None) -> RenameResult:
    """
    Interactive review loop

    Paths without match are offered too, so they can be named by hand.

    Args:
        items: Output of RenamePlanner.build_plans
        planner: Planner used for edited names
        applier: Object with a rename(src, dst) method

    Returns:
        Execution result
    """
    session = ReviewSession(items, applier=applier, planner=planner, rescue=True)
    if session.total:
        print_header(f"Review {session.total} path(s)")

    while True:
        item = session.next_plan()
        if item is None:
            break
        print(f"\n[{session.position + 1}/{session.total}]")
        if isinstance(item, Unmatched):
            review = prompt_rescue(item)
        else:
            review = prompt_review(item, session.alternatives)
        try:
            settled = session.decide(review)
        except ValueError as e:
            print(f"Error: {e}")
            continue
        if isinstance(settled, RenamePlan) and settled is not item and settled.conflict:
            print(f"Warning: {settled.target_path.name} is already taken")

    return session.result
