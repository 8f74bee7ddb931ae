"""
Load pipeline: reads the comma-delimited course file into a CourseStore.

Line format (no quoting, no escaped commas):
    courseNumber,courseTitle[,prereq1,prereq2,...]

Rules:
  - blank lines are skipped silently
  - lines with fewer than 2 fields are skipped and reported (LoadResult.skipped
    plus a WARNING log line); loading continues with the next line
  - courseNumber and every prerequisite are normalized; the title is verbatim
  - a course number seen twice is inserted anyway and logged; lookup keeps
    returning the first one (see catalog.course_store)
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from catalog.course_store import Course, CourseStore
from catalog.errors import CatalogFileError, MalformedLineError
from catalog.search import normalize_course_code

DATA_DIR = Path(__file__).parent.parent / "data"
CATALOG_BASENAME = "CS 300 ABCU_Advising_Program_Input"
CATALOG_FILE = DATA_DIR / f"{CATALOG_BASENAME}.csv"

log = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SkippedLine:
    line_no: int
    text: str
    reason: str


@dataclass
class LoadResult:
    store: CourseStore
    loaded: int = 0
    skipped: list[SkippedLine] = field(default_factory=list)
    duplicates: list[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

def parse_fields(fields: list[str]) -> Course:
    """Build a Course from already-split fields."""
    if len(fields) < 2:
        raise MalformedLineError(f"expected at least 2 fields, got {len(fields)}")

    number, title, *prereqs = fields
    return Course(
        number=normalize_course_code(number),
        title=title,
        prerequisites=tuple(normalize_course_code(p) for p in prereqs),
    )


def parse_line(line: str) -> Course | None:
    """
    Parse one raw line.

    Returns None for a blank line.

    Raises:
        MalformedLineError: if the line has fewer than 2 fields.
    """
    raw = line.rstrip("\r\n")
    if not raw:
        return None

    fields = raw.split(",")
    # A single trailing comma does not open another field.
    if len(fields) > 1 and fields[-1] == "":
        fields.pop()
    return parse_fields(fields)


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_lines(lines: Iterable[str], store: CourseStore | None = None) -> LoadResult:
    """Parse and insert every valid line; malformed lines are recorded, not fatal."""
    result = LoadResult(store=store if store is not None else CourseStore())

    for line_no, line in enumerate(lines, start=1):
        try:
            course = parse_line(line)
        except MalformedLineError as exc:
            text = line.rstrip("\r\n")
            log.warning("Invalid course line %d (skipped): %r: %s", line_no, text, exc)
            result.skipped.append(SkippedLine(line_no=line_no, text=text, reason=str(exc)))
            continue

        if course is None:
            continue

        if course.number in result.store:
            log.warning("Duplicate course number %s on line %d; keeping the first.",
                        course.number, line_no)
            result.duplicates.append(course.number)

        result.store.insert(course)
        result.loaded += 1

    return result


def load_file(path: Path) -> LoadResult:
    """
    Load a catalog file from disk.

    Raises:
        FileNotFoundError: if the file is missing.
        CatalogFileError: if it cannot be read or is not UTF-8 text.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Could not open file: {path}")

    log.info("Loading courses from %s…", path.name)
    # utf-8-sig drops a BOM left by spreadsheet exports
    try:
        with path.open(encoding="utf-8-sig", newline="") as fh:
            result = load_lines(fh)
    except UnicodeDecodeError as exc:
        raise CatalogFileError(
            f"Could not read file {path.name}: not UTF-8 text (byte {exc.start})"
        ) from exc
    except OSError as exc:
        raise CatalogFileError(f"Could not read file {path.name}: {exc.strerror or exc}") from exc

    log.info("  %d courses loaded, %d lines skipped.", result.loaded, len(result.skipped))
    return result


# ---------------------------------------------------------------------------
# File-name resolution
# ---------------------------------------------------------------------------

def resolve_catalog_file(
    name: str,
    data_dir: Path = DATA_DIR,
    base_name: str = CATALOG_BASENAME,
) -> Path | None:
    """
    Map a typed file name onto the catalog file, ignoring case.

    'cs 300 abcu_advising_program_input' and '...INPUT.CSV' both resolve to
    data_dir / 'CS 300 ABCU_Advising_Program_Input.csv'. Returns None when the
    name does not match.
    """
    typed = name.strip().upper()
    if typed.endswith(".CSV"):
        typed = typed[:-4]
    if typed != base_name.upper():
        return None
    return Path(data_dir) / f"{base_name}.csv"
