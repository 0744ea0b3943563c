"""
Pass 2B: prerequisite cycle detection.

Candidates form a directed graph with an edge A -> B whenever B appears in
A's (already pruned) prereq list. Every course on a detected cycle is
excluded from the catalog outright, then every course that transitively
requires an excluded one is excluded too, so the stored catalog stays
closed under its prereq edges.
"""

from collections import deque
from typing import Dict, List, Optional, Set

from load_summary import CYCLE, CYCLE_DEPENDENT, LoadSummary

WHITE = 0  # unvisited
GRAY = 1   # on the current DFS path
BLACK = 2  # fully explored


def _cycle_path(target: str, current: str, parent: Dict[str, str]) -> List[str]:
    """Rebuild target -> ... -> current -> target from predecessor links."""
    path = [target]
    node: Optional[str] = current
    while node is not None and node != target:
        path.append(node)
        node = parent.get(node)
    path.append(target)
    path.reverse()
    return path


def find_cycles(candidates: Dict[str, dict]) -> List[List[str]]:
    """
    Three-colour DFS over every candidate, in candidate order.

    Uses an explicit stack of (node, edge iterator) pairs instead of
    recursion, so graph depth is bounded only by memory. Each back edge to a
    GRAY node yields one cycle path; the scan then continues with the node's
    remaining edges. Revisiting a BLACK node is a no-op. O(V + E).
    """
    color = {code: WHITE for code in candidates}
    parent: Dict[str, str] = {}
    cycles: List[List[str]] = []

    for start in candidates:
        if color[start] != WHITE:
            continue
        color[start] = GRAY
        stack = [(start, iter(candidates[start]["prereqs"]))]

        while stack:
            node, edges = stack[-1]
            descended = False
            for prereq in edges:
                # Unknown codes were pruned earlier; treat any stragglers as resolved.
                state = color.get(prereq, BLACK)
                if state == WHITE:
                    parent[prereq] = node
                    color[prereq] = GRAY
                    stack.append((prereq, iter(candidates[prereq]["prereqs"])))
                    descended = True
                    break
                if state == GRAY:
                    cycles.append(_cycle_path(prereq, node, parent))
            if not descended:
                color[node] = BLACK
                stack.pop()

    return cycles


def mark_cycles(candidates: Dict[str, dict], summary: LoadSummary) -> Set[str]:
    """Record one Cycle issue per detected cycle; return every member code."""
    in_cycle: Set[str] = set()
    for path in find_cycles(candidates):
        summary.cycles += 1
        summary.add_issue(CYCLE, "Cycle detected: " + " -> ".join(path))
        in_cycle.update(path)
    return in_cycle


def build_dependents_map(candidates: Dict[str, dict]) -> Dict[str, List[str]]:
    """
    Reverse prereq map: for each course, which candidates directly require it.

    Returns: {"CSCI200": ["CSCI300", "CSCI350"], ...}
    """
    dependents: Dict[str, List[str]] = {}
    for code, candidate in candidates.items():
        for prereq in candidate["prereqs"]:
            dependents.setdefault(prereq, [])
            if code not in dependents[prereq]:
                dependents[prereq].append(code)
    return dependents


def exclude_dependents(
    candidates: Dict[str, dict],
    excluded: Set[str],
    summary: LoadSummary,
) -> Set[str]:
    """
    Extend the exclusion set with every transitive dependent of an excluded
    course, breadth first. Each newly excluded course gets one CycleDependent
    issue naming the excluded prereq that pulled it out.

    Returns the extended set; the input set is not modified.
    """
    result = set(excluded)
    dependents = build_dependents_map(candidates)
    # Seed in candidate order so issue order is deterministic.
    queue = deque(code for code in candidates if code in excluded)

    while queue:
        blocked = queue.popleft()
        for dependent in dependents.get(blocked, []):
            if dependent in result:
                continue
            result.add(dependent)
            summary.cycle_dependents += 1
            summary.add_issue(
                CYCLE_DEPENDENT,
                f"Excluded {dependent}: requires excluded course {blocked}",
            )
            queue.append(dependent)

    return result
