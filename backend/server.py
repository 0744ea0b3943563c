import os
import sys
import threading
import time

# Ensure backend/ is on sys.path so sibling imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException
from dotenv import load_dotenv

from normalizer import normalize_code
from course_table import DEFAULT_BUCKET_COUNT
from catalog_loader import build_catalog, catalog_frame
from load_summary import TIMING, LoadSummary

load_dotenv()

app = Flask(__name__)

# ── Paths ─────────────────────────────────────────────────────────────────────
BACKEND_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.dirname(BACKEND_DIR)
_DEFAULT_CATALOG_PATH = os.path.join(PROJECT_ROOT, "data", "courses.txt")
_env_catalog_path = os.environ.get("CATALOG_PATH")
if not _env_catalog_path:
    CATALOG_PATH = _DEFAULT_CATALOG_PATH
elif not os.path.isabs(_env_catalog_path):
    CATALOG_PATH = os.path.join(PROJECT_ROOT, _env_catalog_path)
else:
    CATALOG_PATH = _env_catalog_path
_catalog_lock = threading.Lock()
_catalog_mtime = None


def _env_float(name: str, default: float, minimum: float = 0.0) -> float:
    raw = os.environ.get(name, "")
    try:
        return max(minimum, float(raw))
    except (TypeError, ValueError):
        return default


def _env_int(name: str, default: int, minimum: int = 1) -> int:
    raw = os.environ.get(name, "")
    try:
        return max(minimum, int(raw))
    except (TypeError, ValueError):
        return default


_SLOW_REQUEST_LOG_MS = _env_float("SLOW_REQUEST_LOG_MS", 750.0, minimum=0.0)
_BUCKET_COUNT = _env_int("CATALOG_BUCKETS", DEFAULT_BUCKET_COUNT, minimum=1)


def _catalog_file_mtime(path: str):
    try:
        return os.path.getmtime(path)
    except OSError:
        return None


def _report_load(summary: LoadSummary, verb: str = "Loaded") -> None:
    if summary.has_file_error:
        print(f"[WARN] Catalog file could not be read: {summary.source}", file=sys.stderr)
        return
    print(f"[OK] {verb} {summary.inserted} courses from {summary.source} in {summary.elapsed_ms} ms")
    # Timing is informational; everything else is worth a look.
    flagged = [i for i in summary.issues if i["type"] != TIMING]
    if flagged:
        print(
            f"[WARN] {len(flagged)} catalog issue(s): "
            f"{summary.duplicates} duplicate, {summary.unknown_prereqs} unknown prereq, "
            f"{summary.self_prereqs} self prereq, {summary.cycles} cycle, "
            f"{summary.cycle_dependents} cycle dependent",
            file=sys.stderr,
        )


# ── Startup catalog load ───────────────────────────────────────────────────────
# load never raises; an unreadable file leaves an empty catalog and a FileError.
_catalog, _summary = build_catalog(CATALOG_PATH, _BUCKET_COUNT)
if not _summary.has_file_error:
    _catalog_mtime = _catalog_file_mtime(CATALOG_PATH)
_report_load(_summary)


def _reload_catalog(force: bool = False) -> tuple[bool, LoadSummary | None]:
    """
    Rebuild the catalog when CATALOG_PATH changes on disk.

    A new table is built off to the side and swapped in whole under the lock,
    so readers never observe a partially loaded catalog. A reload that cannot
    read the file keeps the previous catalog.

    Returns (reloaded, summary of this attempt). The summary is None when no
    load was attempted, and is the failed summary when reloaded is False.
    """
    global _catalog, _summary, _catalog_mtime

    candidate_mtime = _catalog_file_mtime(CATALOG_PATH)
    if not force:
        if candidate_mtime is None:
            return False, None
        if _catalog_mtime is not None and candidate_mtime <= _catalog_mtime:
            return False, None

    with _catalog_lock:
        latest_mtime = _catalog_file_mtime(CATALOG_PATH)
        if not force:
            if latest_mtime is None:
                return False, None
            if _catalog_mtime is not None and latest_mtime <= _catalog_mtime:
                return False, None

        new_catalog, new_summary = build_catalog(CATALOG_PATH, _BUCKET_COUNT)
        if new_summary.has_file_error:
            print(
                f"[WARN] Catalog reload failed; keeping previous catalog: {CATALOG_PATH}",
                file=sys.stderr,
            )
            return False, new_summary

        _catalog = new_catalog
        _summary = new_summary
        _catalog_mtime = latest_mtime if latest_mtime is not None else candidate_mtime
        _report_load(new_summary, verb="Reloaded")
        return True, new_summary


def _reload_catalog_if_changed(force: bool = False) -> bool:
    """Returns True when a reload occurred, else False."""
    reloaded, _ = _reload_catalog(force=force)
    return reloaded


def _snapshot():
    """Current (catalog, summary) pair, read together under the lock."""
    with _catalog_lock:
        return _catalog, _summary


def _refresh_catalog_if_needed() -> None:
    try:
        _reload_catalog_if_changed()
    except Exception as exc:
        print(f"[WARN] Catalog reload check failed: {exc}", file=sys.stderr)


def _catalog_not_loaded_response():
    return jsonify({"error": "Catalog not loaded"}), 503


# -- Request timing ---------------------------------------------------------
@app.before_request
def _start_request_timer():
    g._request_start_time = time.perf_counter()


@app.after_request
def _log_slow_requests(response):
    response.headers["X-Content-Type-Options"] = "nosniff"

    started = getattr(g, "_request_start_time", None)
    if started is not None:
        duration_ms = (time.perf_counter() - started) * 1000.0
        if duration_ms >= _SLOW_REQUEST_LOG_MS:
            endpoint = request.endpoint or "unknown"
            print(
                f"[SLOW] {request.method} {request.path} "
                f"endpoint={endpoint} status={response.status_code} duration_ms={duration_ms:.1f}"
            )
    return response


# ── 500 handler ────────────────────────────────────────────────────────────────
@app.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return jsonify({"error": e.description, "error_code": e.name.upper().replace(" ", "_")}), e.code
    return jsonify({
        "error": "An unexpected server error occurred.",
        "error_code": "SERVER_ERROR",
    }), 500


# ── Routes ─────────────────────────────────────────────────────────────────────
@app.route("/health", methods=["GET"])
def health_endpoint():
    catalog, _ = _snapshot()
    return jsonify({
        "status": "ok",
        "courses_loaded": len(catalog),
        "catalog_path": CATALOG_PATH,
    })


def list_courses():
    _refresh_catalog_if_needed()
    catalog, _ = _snapshot()
    if len(catalog) == 0:
        return _catalog_not_loaded_response()

    started = time.perf_counter()
    courses = catalog.to_sorted_list()
    elapsed_ms = (time.perf_counter() - started) * 1000.0

    # Object dtype keeps prereq_count as a plain int for JSON.
    df = catalog_frame(courses).astype(object)
    return jsonify({
        "courses": df.to_dict(orient="records"),
        "count": int(len(df)),
        "elapsed_ms": round(elapsed_ms, 3),
    })


def get_course(course_code):
    _refresh_catalog_if_needed()
    catalog, _ = _snapshot()
    if len(catalog) == 0:
        return _catalog_not_loaded_response()

    key = normalize_code(course_code)
    course = catalog.search(key)
    if course is None:
        return jsonify({"error": f"Course not found: {key}"}), 404

    # The catalog is closed under prereq edges, but the title lookup still
    # tolerates a missing prereq rather than failing the request.
    prereq_rows = []
    for prereq_code in course.prereqs:
        prereq = catalog.search(prereq_code)
        prereq_rows.append({
            "course_code": prereq_code,
            "title": prereq.title if prereq is not None else None,
            "found": prereq is not None,
        })

    payload = course.to_dict()
    payload["prereq_details"] = prereq_rows
    return jsonify(payload)


def load_summary_endpoint():
    _refresh_catalog_if_needed()
    _, summary = _snapshot()
    return jsonify(summary.to_dict())


def reload_endpoint():
    reloaded, attempt = _reload_catalog(force=True)
    _, current = _snapshot()
    # On failure `summary` is the failed attempt; the served catalog is unchanged.
    return jsonify({
        "reloaded": reloaded,
        "summary": attempt.to_dict(),
        "catalog_summary": current.to_dict(),
    }), 200 if reloaded else 409


app.add_url_rule("/api/health", endpoint="api_health", view_func=health_endpoint, methods=["GET"])
app.add_url_rule("/api/courses", endpoint="api_courses", view_func=list_courses, methods=["GET"])
app.add_url_rule("/api/courses/<path:course_code>", endpoint="api_course", view_func=get_course, methods=["GET"])
app.add_url_rule("/api/load-summary", endpoint="api_load_summary", view_func=load_summary_endpoint, methods=["GET"])
app.add_url_rule("/api/reload", endpoint="api_reload", view_func=reload_endpoint, methods=["POST"])


# -- API catch-all (404 for unknown /api/* routes) -------------------
@app.route("/api/<path:rest>", methods=["GET", "POST", "PUT", "DELETE", "PATCH"])
def api_catch_all(rest):
    return jsonify({"error": f"/api/{rest} not found"}), 404


if __name__ == "__main__":
    port = int(os.environ.get("PORT", 5000))
    debug = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(host="0.0.0.0", port=port, debug=debug)
