from line_parser import parse_line
from load_summary import MISSING_FIELD, LoadSummary


class TestParseLine:
    def test_code_and_title_only(self):
        summary = LoadSummary()
        result = parse_line("CSCI100,Introduction to Computer Science", 1, summary)
        assert result == {
            "course_code": "CSCI100",
            "title": "Introduction to Computer Science",
            "prereqs": [],
            "line_no": 1,
        }
        assert summary.issues == []

    def test_prereqs_normalized_in_order(self):
        summary = LoadSummary()
        result = parse_line("csci300, Introduction to Algorithms , csci 200,math201\n", 4, summary)
        assert result["course_code"] == "CSCI300"
        assert result["title"] == "Introduction to Algorithms"
        assert result["prereqs"] == ["CSCI200", "MATH201"]
        assert result["line_no"] == 4

    def test_trailing_commas_dropped_silently(self):
        summary = LoadSummary()
        result = parse_line("CSCI200,Data Structures,CSCI101,,", 2, summary)
        assert result["prereqs"] == ["CSCI101"]
        assert summary.issues == []

    def test_blank_line_skipped_silently(self):
        summary = LoadSummary()
        assert parse_line("   \t\n", 3, summary) is None
        assert summary.issues == []
        assert summary.lines_read == 1

    def test_empty_string_skipped_silently(self):
        summary = LoadSummary()
        assert parse_line("", 1, summary) is None
        assert summary.issues == []

    def test_single_field_is_missing_field(self):
        summary = LoadSummary()
        assert parse_line("CSCI100", 5, summary) is None
        assert summary.issues == [
            {"line_no": 5, "type": MISSING_FIELD, "detail": "Missing course number or title"}
        ]

    def test_empty_course_number(self):
        summary = LoadSummary()
        assert parse_line("  ,Some Title", 6, summary) is None
        assert summary.issues[0]["type"] == MISSING_FIELD
        assert summary.issues[0]["detail"] == "Empty course number"
        assert summary.issues[0]["line_no"] == 6

    def test_empty_title_names_course(self):
        summary = LoadSummary()
        assert parse_line("csci100,   ,CSCI050", 7, summary) is None
        assert summary.issues[0]["detail"] == "Empty course title for CSCI100"
        assert summary.issues[0]["line_no"] == 7

    def test_every_call_counts_a_line(self):
        summary = LoadSummary()
        parse_line("A,Title A", 1, summary)
        parse_line("", 2, summary)
        parse_line("B", 3, summary)
        assert summary.lines_read == 3
