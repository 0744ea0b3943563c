"""
Load summary and diagnostic issue kinds for one catalog load.
No I/O; callers decide how to surface issues.
"""

# ── Issue kinds ────────────────────────────────────────────────────────────────
FILE_ERROR = "FileError"
MISSING_FIELD = "MissingField"
DUPLICATE = "Duplicate"
UNKNOWN_PREREQ = "UnknownPrereq"
SELF_PREREQ = "SelfPrereq"
CYCLE = "Cycle"
CYCLE_DEPENDENT = "CycleDependent"
TIMING = "Timing"

ISSUE_KINDS = (
    FILE_ERROR,
    MISSING_FIELD,
    DUPLICATE,
    UNKNOWN_PREREQ,
    SELF_PREREQ,
    CYCLE,
    CYCLE_DEPENDENT,
    TIMING,
)

COUNTER_FIELDS = (
    "lines_read",
    "parsed_courses",
    "inserted",
    "duplicates",
    "unknown_prereqs",
    "self_prereqs",
    "cycles",
    "cycle_dependents",
)


class LoadSummary:
    """Counters plus the ordered issue list produced by a single load."""

    def __init__(self, source: str = ""):
        self.source = source
        self.lines_read = 0
        self.parsed_courses = 0
        self.inserted = 0
        self.duplicates = 0
        self.unknown_prereqs = 0
        self.self_prereqs = 0
        self.cycles = 0
        self.cycle_dependents = 0
        self.elapsed_ms = 0
        self.issues: list[dict] = []

    def add_issue(self, kind: str, detail: str, line_no: int = 0) -> None:
        if kind not in ISSUE_KINDS:
            raise ValueError(f"Unknown issue kind: {kind!r}")
        self.issues.append({"line_no": int(line_no), "type": kind, "detail": detail})

    def issues_of(self, kind: str) -> list[dict]:
        return [i for i in self.issues if i["type"] == kind]

    @property
    def has_file_error(self) -> bool:
        return any(i["type"] == FILE_ERROR for i in self.issues)

    def counters(self) -> dict:
        return {name: getattr(self, name) for name in COUNTER_FIELDS}

    def to_dict(self) -> dict:
        """JSON-safe view; issue order is preserved exactly."""
        payload = {"source": self.source, **self.counters()}
        payload["elapsed_ms"] = self.elapsed_ms
        payload["issues"] = [dict(i) for i in self.issues]
        return payload
