import time
from typing import Iterable, Optional, Tuple

import pandas as pd

from candidates import build_candidates
from course_table import DEFAULT_BUCKET_COUNT, Course, CourseTable
from cycle_detector import exclude_dependents, mark_cycles
from load_summary import FILE_ERROR, TIMING, LoadSummary
from prereq_validator import prune_prereqs

CATALOG_FRAME_COLUMNS = ["course_code", "title", "prereqs", "prereq_count"]


def _read_lines(path) -> list[str]:
    """
    Read the whole file up front so a mid-file read error aborts cleanly.

    Bytes that are not valid UTF-8 (a cp1252 title, say) decode to U+FFFD
    instead of rejecting the file; only open/read failures are FileErrors.
    """
    with open(path, "r", encoding="utf-8-sig", errors="replace") as fh:
        return fh.readlines()


def load_catalog(path, table: CourseTable) -> LoadSummary:
    """
    Multi-pass, timed load of a catalog file into `table`.

    Passes:
      1.  parse + normalize each line, drop duplicates        (line-numbered issues)
      2A. prune self prereqs and unknown prereqs
      2B. detect cycles, exclude members and their dependents
      3.  insert survivors into the (cleared) table

    Never raises for bad input: an unreadable file yields a summary with one
    FileError issue and all counters at zero.
    """
    source = str(path)
    summary = LoadSummary(source)
    table.clear()
    started = time.perf_counter()

    try:
        lines = _read_lines(path)
    except (OSError, TypeError, ValueError):
        summary.add_issue(FILE_ERROR, f"Cannot open file: {source}")
        return summary

    _run_passes(lines, table, summary)

    summary.elapsed_ms = int(round((time.perf_counter() - started) * 1000))
    summary.add_issue(TIMING, f"Load completed in {summary.elapsed_ms} ms")
    return summary


def _run_passes(lines: Iterable[str], table: CourseTable, summary: LoadSummary) -> None:
    candidates = build_candidates(lines, summary)
    prune_prereqs(candidates, summary)
    in_cycle = mark_cycles(candidates, summary)
    excluded = exclude_dependents(candidates, in_cycle, summary)

    for code, candidate in candidates.items():
        if code in excluded:
            continue
        course = Course(code, candidate["title"], list(candidate["prereqs"]))
        if table.insert(course):
            summary.inserted += 1
        else:
            # Unreachable through pass 1, which already drops repeated codes.
            summary.duplicates += 1


def build_catalog(path, bucket_count: int = DEFAULT_BUCKET_COUNT) -> Tuple[CourseTable, LoadSummary]:
    """Load into a brand-new table; callers swap it in whole."""
    table = CourseTable(bucket_count)
    summary = load_catalog(path, table)
    return table, summary


def catalog_frame(courses: Optional[Iterable[Course]]) -> pd.DataFrame:
    """Tabular view of courses (already ordered by the caller)."""
    rows = [
        {
            "course_code": c.course_code,
            "title": c.title,
            "prereqs": list(c.prereqs),
            "prereq_count": len(c.prereqs),
        }
        for c in (courses or [])
    ]
    if not rows:
        return pd.DataFrame(columns=CATALOG_FRAME_COLUMNS)
    return pd.DataFrame(rows, columns=CATALOG_FRAME_COLUMNS)
