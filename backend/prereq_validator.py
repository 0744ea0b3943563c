"""
Pass 2A: referential-integrity pruning over the full candidate map.
Runs after parsing so every defined course_code is known.
"""

from typing import Dict

from load_summary import SELF_PREREQ, UNKNOWN_PREREQ, LoadSummary


def prune_prereqs(candidates: Dict[str, dict], summary: LoadSummary) -> None:
    """
    Drop self references and references to undefined courses, in place.

    Issues are not line-specific (line_no 0): the check spans records.
    Kept prereqs retain their original relative order.
    """
    for code, candidate in candidates.items():
        kept: list[str] = []
        for prereq in candidate["prereqs"]:
            if prereq == code:
                summary.self_prereqs += 1
                summary.add_issue(SELF_PREREQ, f"Self prerequisite removed: {code}")
                continue
            if prereq not in candidates:
                summary.unknown_prereqs += 1
                summary.add_issue(UNKNOWN_PREREQ, f"Unknown prereq '{prereq}' for {code}")
                continue
            kept.append(prereq)
        candidate["prereqs"] = kept
