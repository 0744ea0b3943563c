from typing import Dict, Iterable

from line_parser import parse_line
from load_summary import DUPLICATE, LoadSummary


def add_candidate(candidates: Dict[str, dict], parsed: dict, summary: LoadSummary) -> bool:
    """
    First definition wins. A repeated course_code is counted and reported on
    the repeating line; the later definition is discarded.
    """
    code = parsed["course_code"]
    existing = candidates.get(code)
    if existing is not None:
        summary.duplicates += 1
        summary.add_issue(
            DUPLICATE,
            f"Duplicate course number: {code} (first defined on line {existing['line_no']})",
            parsed["line_no"],
        )
        return False
    candidates[code] = parsed
    summary.parsed_courses += 1
    return True


def build_candidates(lines: Iterable[str], summary: LoadSummary) -> Dict[str, dict]:
    """Pass 1: parse every line (numbered from 1) into an ordered candidate map."""
    candidates: Dict[str, dict] = {}
    for line_no, line in enumerate(lines, start=1):
        parsed = parse_line(line, line_no, summary)
        if parsed is None:
            continue
        add_candidate(candidates, parsed, summary)
    return candidates
