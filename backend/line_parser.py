from load_summary import MISSING_FIELD, LoadSummary
from normalizer import normalize_code

FIELD_SEP = ","
MIN_FIELDS = 2  # course_code, title


def parse_line(line: str, line_no: int, summary: LoadSummary) -> dict | None:
    """
    Parses one raw catalog line of the form 'CODE,Title[,PREREQ,...]'.

    Returns a candidate dict:
      {"course_code": "CSCI300", "title": "Intro to Algorithms",
       "prereqs": ["CSCI200", "MATH201"], "line_no": 7}

    Returns None for blank lines (silently) and for structural defects, in
    which case a MissingField issue carrying line_no is recorded first.
    Titles cannot contain commas; there is no quoting.
    """
    summary.lines_read += 1

    if not line or not line.strip():
        return None

    fields = line.split(FIELD_SEP)
    if len(fields) < MIN_FIELDS:
        summary.add_issue(MISSING_FIELD, "Missing course number or title", line_no)
        return None

    course_code = normalize_code(fields[0])
    title = fields[1].strip()
    # Trailing commas leave empty prereq fields; those are not errors.
    prereqs = [p for p in (normalize_code(f) for f in fields[2:]) if p]

    if not course_code:
        summary.add_issue(MISSING_FIELD, "Empty course number", line_no)
        return None
    if not title:
        summary.add_issue(MISSING_FIELD, f"Empty course title for {course_code}", line_no)
        return None

    return {
        "course_code": course_code,
        "title": title,
        "prereqs": prereqs,
        "line_no": line_no,
    }
