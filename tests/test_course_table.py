import random
import string

import pytest
from course_table import (
    DEFAULT_BUCKET_COUNT,
    INSERTION_SORT_THRESHOLD,
    Course,
    CourseTable,
)


def _random_codes(n, seed=300):
    rng = random.Random(seed)
    codes = set()
    while len(codes) < n:
        dept = "".join(rng.choice(string.ascii_uppercase) for _ in range(4))
        codes.add(f"{dept}{rng.randint(100, 499)}")
    return list(codes)


class TestHashCode:
    def test_rolling_hash_matches_formula(self):
        table = CourseTable()
        for code in ["A", "CSCI200", "MATH201", "ZZZZ999"]:
            expected = 0
            for b in code.encode("utf-8"):
                expected = expected * 31 + b
            assert table.hash_code(code) == expected % DEFAULT_BUCKET_COUNT

    def test_in_range(self):
        table = CourseTable(17)
        for code in _random_codes(100):
            assert 0 <= table.hash_code(code) < 17

    @pytest.mark.parametrize("bad", [0, -3, 2.5, "179", True, None])
    def test_invalid_bucket_count(self, bad):
        with pytest.raises(ValueError):
            CourseTable(bad)


class TestInsertSearch:
    def test_insert_and_search(self):
        table = CourseTable()
        assert table.insert(Course("CSCI200", "Data Structures", ["CSCI101"])) is True
        found = table.search("CSCI200")
        assert found.title == "Data Structures"
        assert found.prereqs == ["CSCI101"]
        assert len(table) == 1

    def test_search_normalizes_input(self):
        table = CourseTable()
        table.insert(Course("CSCI200", "Data Structures"))
        assert table.search(" csci 200 ").course_code == "CSCI200"
        assert "csci200" in table

    def test_missing(self):
        table = CourseTable()
        assert table.search("NOPE101") is None
        assert table.search("") is None
        assert "NOPE101" not in table

    def test_duplicate_insert_rejected(self):
        table = CourseTable()
        table.insert(Course("A", "First"))
        assert table.insert(Course("A", "Second")) is False
        assert table.search("A").title == "First"
        assert len(table) == 1

    def test_single_bucket_chains_everything(self):
        table = CourseTable(1)
        codes = _random_codes(30)
        for code in codes:
            assert table.insert(Course(code, f"Title {code}"))
        for code in codes:
            assert table.search(code).title == f"Title {code}"
        assert table.load_factor == 30.0

    def test_clear(self):
        table = CourseTable()
        table.insert(Course("A", "Title A"))
        table.clear()
        assert len(table) == 0
        assert table.search("A") is None
        assert table.to_list() == []


class TestEnumeration:
    def test_to_list_does_not_mutate(self):
        table = CourseTable()
        for code in ["B", "A", "C"]:
            table.insert(Course(code, f"Title {code}"))
        first = table.to_list()
        first.clear()
        assert len(table.to_list()) == 3

    def test_empty_sorted(self):
        assert CourseTable().to_sorted_list() == []

    @pytest.mark.parametrize(
        "size",
        [1, INSERTION_SORT_THRESHOLD - 1, INSERTION_SORT_THRESHOLD, 200],
    )
    def test_sorted_matches_enumeration(self, size):
        table = CourseTable()
        for code in _random_codes(size, seed=size):
            table.insert(Course(code, f"Title {code}"))

        listed = [c.course_code for c in table.to_list()]
        ordered = [c.course_code for c in table.to_sorted_list()]

        assert sorted(listed) == sorted(ordered)
        assert ordered == sorted(listed)
        assert len(ordered) == len(set(ordered)) == size
