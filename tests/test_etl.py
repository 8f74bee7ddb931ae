import logging
from pathlib import Path

import pytest
from catalog.course_store import Course
from catalog.errors import CatalogFileError, MalformedLineError
from catalog.search import CourseSearch
from etl.pipeline import (
    CATALOG_FILE,
    load_file,
    load_lines,
    parse_fields,
    parse_line,
    resolve_catalog_file,
)


@pytest.fixture
def catalog_file(tmp_path):
    """Small catalog with a dangling prerequisite, written to disk."""
    path = tmp_path / "CS 300 ABCU_Advising_Program_Input.csv"
    path.write_text(
        "CSCI200,Data Structures,csci101\n"
        "CSCI101,Introduction to Programming in C++,CSCI100\n"
        "\n"
        "MATH201,Discrete Mathematics\n",
        encoding="utf-8",
    )
    return path


class TestParsing:
    """Line and field parsing."""

    def test_parse_fields_normalizes_keys(self):
        """Test number and prerequisites are normalized, title is verbatim."""
        course = parse_fields([" csci300 ", "  Introduction to Algorithms ", "csci200", " math201"])
        assert course == Course(
            number="CSCI300",
            title="  Introduction to Algorithms ",
            prerequisites=("CSCI200", "MATH201"),
        )

    def test_parse_fields_requires_two(self):
        """Test a single field is rejected."""
        with pytest.raises(MalformedLineError):
            parse_fields(["CSCI100"])

    def test_parse_line_without_prerequisites(self):
        """Test a two-field line."""
        course = parse_line("MATH201,Discrete Mathematics\n")
        assert course.number == "MATH201"
        assert course.title == "Discrete Mathematics"
        assert course.prerequisites == ()

    def test_parse_line_crlf(self):
        """Test Windows line endings do not leak into the last field."""
        course = parse_line("CSCI350,Operating Systems,CSCI300\r\n")
        assert course.prerequisites == ("CSCI300",)

    def test_parse_line_blank(self):
        """Test blank lines are not records."""
        assert parse_line("\n") is None
        assert parse_line("") is None

    def test_parse_line_no_comma(self):
        """Test a line without a comma is malformed."""
        with pytest.raises(MalformedLineError):
            parse_line("CSCI100 Introduction to Computer Science\n")

    def test_parse_line_trailing_comma(self):
        """Test a trailing comma adds no empty prerequisite."""
        assert parse_line("CSCI100,Intro,\n").prerequisites == ()
        with pytest.raises(MalformedLineError):
            parse_line("CSCI100,\n")

    def test_parse_line_empty_prerequisite_fields(self):
        """Test empty middle fields are kept as empty prerequisite keys."""
        assert parse_line("CSCI400,Large Software,CSCI301,, ,CSCI350").prerequisites == (
            "CSCI301", "", "", "CSCI350",
        )

    def test_empty_prerequisite_stays_unresolved(self):
        """Test an empty prerequisite key is stored and shows as unresolved."""
        result = load_lines(["CSCI400,Large,CSCI301,,CSCI350", "CSCI301,Advanced"])
        detail = CourseSearch(result.store).course("CSCI400")
        assert [(p.number, p.resolved) for p in detail.prerequisites] == [
            ("CSCI301", True),
            ("", False),
            ("CSCI350", False),
        ]


class TestLoadLines:
    """Ingestion of many lines."""

    def test_malformed_line_skipped(self, caplog):
        """Test the middle line is reported and the third still loads."""
        lines = [
            "CSCI100,Introduction to Computer Science",
            "BROKEN LINE",
            "CSCI101,Introduction to Programming in C++,CSCI100",
        ]
        with caplog.at_level(logging.WARNING):
            result = load_lines(lines)

        assert result.loaded == 2
        assert len(result.store) == 2
        assert [c.number for c in result.store] == ["CSCI100", "CSCI101"]
        assert len(result.skipped) == 1
        assert result.skipped[0].line_no == 2
        assert result.skipped[0].text == "BROKEN LINE"
        assert "BROKEN LINE" in caplog.text

    def test_blank_lines_silent(self, caplog):
        """Test blank lines are neither loaded nor reported."""
        with caplog.at_level(logging.WARNING):
            result = load_lines(["\n", "CSCI100,Intro\n", "\n"])
        assert result.loaded == 1
        assert result.skipped == []
        assert caplog.text == ""

    def test_duplicates_logged_first_wins(self, caplog):
        """Test a repeated course number is logged and lookup keeps the first."""
        with caplog.at_level(logging.WARNING):
            result = load_lines(["CSCI100,First", "csci100 ,Second"])
        assert result.duplicates == ["CSCI100"]
        assert result.store.lookup("CSCI100").title == "First"
        assert len(result.store) == 2
        assert "Duplicate course number CSCI100" in caplog.text

    def test_prerequisites_not_validated(self):
        """Test dangling prerequisite keys are accepted at load time."""
        result = load_lines(["CSCI202,Systems,CSCI999"])
        assert result.skipped == []
        assert result.store.lookup("CSCI202").prerequisites == ("CSCI999",)

    def test_loads_into_given_store(self):
        """Test an existing store is extended rather than replaced."""
        first = load_lines(["CSCI100,Intro"])
        second = load_lines(["MATH201,Discrete Mathematics"], store=first.store)
        assert second.store is first.store
        assert [c.number for c in second.store] == ["CSCI100", "MATH201"]


class TestLoadFile:
    """Loading from disk."""

    def test_load_file(self, catalog_file):
        """Test a file loads in sorted order with normalized prerequisites."""
        result = load_file(catalog_file)
        assert result.loaded == 3
        assert [c.number for c in result.store] == ["CSCI101", "CSCI200", "MATH201"]
        assert result.store.lookup("CSCI200").prerequisites == ("CSCI101",)

    def test_load_file_with_bom(self, tmp_path):
        """Test a UTF-8 BOM does not end up in the first course number."""
        path = tmp_path / "bom.csv"
        path.write_bytes("\ufeffCSCI100,Intro\n".encode("utf-8"))
        result = load_file(path)
        assert result.store.lookup("CSCI100") is not None

    def test_missing_file(self, tmp_path):
        """Test a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_file(tmp_path / "nope.csv")

    def test_non_utf8_file(self, tmp_path):
        """Test a Latin-1 export raises CatalogFileError naming the file."""
        path = tmp_path / "latin1.csv"
        path.write_bytes("CSCI100,Introducci\u00f3n\n".encode("latin-1"))
        with pytest.raises(CatalogFileError, match="latin1.csv"):
            load_file(path)

    def test_directory_instead_of_file(self, tmp_path):
        """Test an unreadable path raises CatalogFileError."""
        folder = tmp_path / "catalog.csv"
        folder.mkdir()
        with pytest.raises(CatalogFileError):
            load_file(folder)

    def test_bundled_catalog(self):
        """Test the sample catalog shipped in data/ loads cleanly."""
        result = load_file(CATALOG_FILE)
        assert result.loaded == 8
        assert result.skipped == []
        numbers = [c.number for c in result.store]
        assert numbers == sorted(numbers)
        assert numbers[0] == "CSCI100"
        assert numbers[-1] == "MATH201"


class TestResolveCatalogFile:
    """Case-insensitive file-name matching."""

    @pytest.mark.parametrize("typed", [
        "CS 300 ABCU_Advising_Program_Input",
        "cs 300 abcu_advising_program_input",
        "CS 300 ABCU_ADVISING_PROGRAM_INPUT.CSV",
        "cs 300 abcu_advising_program_input.csv",
        "  CS 300 ABCU_Advising_Program_Input.Csv  ",
    ])
    def test_accepts_case_and_extension_variants(self, typed, tmp_path):
        """Test any casing, with or without .csv, maps to the real name."""
        path = resolve_catalog_file(typed, tmp_path)
        assert path == tmp_path / "CS 300 ABCU_Advising_Program_Input.csv"

    @pytest.mark.parametrize("typed", [
        "CS300 ABCU_Advising_Program_Input",
        "courses.csv",
        "",
        "CS 300 ABCU_Advising_Program_Input.txt",
    ])
    def test_rejects_other_names(self, typed, tmp_path):
        """Test near misses are not accepted."""
        assert resolve_catalog_file(typed, tmp_path) is None

    def test_custom_base_name(self, tmp_path):
        """Test a different expected base name."""
        assert resolve_catalog_file("Courses.CSV", tmp_path, "courses") == Path(tmp_path) / "courses.csv"
