"""
Chained hash table holding the validated course catalog.

Buckets are plain Python lists (one chain per bucket); the bucket count is
fixed at construction and never resized. Average insert/search is O(1) at a
low load factor; worst case is a linear scan of one chain.
"""

from dataclasses import dataclass, field
from typing import Iterator, List, Optional

from normalizer import normalize_code

DEFAULT_BUCKET_COUNT = 179  # prime
HASH_MULTIPLIER = 31
INSERTION_SORT_THRESHOLD = 50


@dataclass
class Course:
    course_code: str
    title: str
    prereqs: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "course_code": self.course_code,
            "title": self.title,
            "prereqs": list(self.prereqs),
        }


def _insertion_sort(courses: List[Course]) -> List[Course]:
    """Stable in-place insertion sort by course_code."""
    for i in range(1, len(courses)):
        key = courses[i]
        j = i
        while j > 0 and courses[j - 1].course_code > key.course_code:
            courses[j] = courses[j - 1]
            j -= 1
        courses[j] = key
    return courses


class CourseTable:
    """Insert-once catalog store keyed by normalized course_code."""

    def __init__(self, bucket_count: int = DEFAULT_BUCKET_COUNT):
        if isinstance(bucket_count, bool) or not isinstance(bucket_count, int) or bucket_count < 1:
            raise ValueError(f"bucket_count must be a positive int, got {bucket_count!r}")
        self.bucket_count = bucket_count
        self._buckets: List[List[Course]] = [[] for _ in range(bucket_count)]
        self._size = 0

    def hash_code(self, course_code: str) -> int:
        """Polynomial rolling hash (h * 31 + byte) reduced mod bucket_count."""
        h = 0
        for byte in course_code.encode("utf-8"):
            h = (h * HASH_MULTIPLIER + byte) % self.bucket_count
        return h

    def insert(self, course: Course) -> bool:
        """Returns False (and stores nothing) if the code is already present."""
        chain = self._buckets[self.hash_code(course.course_code)]
        for existing in chain:
            if existing.course_code == course.course_code:
                return False
        chain.append(course)
        self._size += 1
        return True

    def search(self, course_code: str) -> Optional[Course]:
        key = normalize_code(course_code)
        if not key:
            return None
        for course in self._buckets[self.hash_code(key)]:
            if course.course_code == key:
                return course
        return None

    def __contains__(self, course_code) -> bool:
        return self.search(course_code) is not None

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Course]:
        for chain in self._buckets:
            yield from chain

    @property
    def load_factor(self) -> float:
        return self._size / self.bucket_count

    def to_list(self) -> List[Course]:
        """Every stored course in bucket-then-chain order. Not sorted."""
        return list(self)

    def to_sorted_list(self) -> List[Course]:
        """
        Every stored course ordered by course_code.

        Insertion sort for small catalogs, built-in sort otherwise; output is
        identical either way.
        """
        courses = self.to_list()
        if len(courses) < INSERTION_SORT_THRESHOLD:
            return _insertion_sort(courses)
        return sorted(courses, key=lambda c: c.course_code)

    def clear(self) -> None:
        self._buckets = [[] for _ in range(self.bucket_count)]
        self._size = 0
