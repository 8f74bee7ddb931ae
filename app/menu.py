"""
Console menu for the course planner.

    python -m app.menu

  1. Load Data Structure.   – asks for the catalog file name (case-insensitive,
                              with or without .csv) and loads it
  2. Print Course List.     – every course in alphanumeric order
  3. Print Course.          – one course with its prerequisites
  9. Exit

Reads from / writes to the given text streams so it can be scripted.
"""

import logging
import sys
from typing import TextIO

from app.session import CatalogSession
from catalog.errors import CatalogFileError, CatalogNameError
from catalog.search import CourseDetail

MENU = (
    "  1. Load Data Structure.\n"
    "  2. Print Course List.\n"
    "  3. Print Course.\n"
    "  9. Exit\n"
)


def format_prerequisites(detail: CourseDetail) -> str:
    if not detail.prerequisites:
        return "Prerequisites: None"
    parts = [
        f"{p.number}: {p.title}" if p.resolved else f"{p.number}: None Required"
        for p in detail.prerequisites
    ]
    return "Prerequisites: " + ", ".join(parts)


# ---------------------------------------------------------------------------
# Menu actions
# ---------------------------------------------------------------------------

def _load(session: CatalogSession, stdin: TextIO, out: TextIO) -> None:
    out.write("Enter the file name to load (case-insensitive, with or without .csv): ")
    name = stdin.readline().rstrip("\r\n")

    try:
        path = session.resolve(name)
    except CatalogNameError as exc:
        print(f"ERROR: {exc}", file=out)
        print("Please re-check your spelling and try again.", file=out)
        return

    print(f"Using file: {path.name}", file=out)
    try:
        result = session.load_path(path)
    except (FileNotFoundError, CatalogFileError) as exc:
        print(f"ERROR: {exc}", file=out)
        return

    if result.skipped:
        print(f"Skipped {len(result.skipped)} invalid course line(s).", file=out)
    print("Courses loaded into data structure.", file=out)


def _print_list(session: CatalogSession, out: TextIO) -> None:
    if not session.loaded:
        print("Please load courses before printing the list.", file=out)
        return
    print("Here is the course schedule:\n", file=out)
    for course in session.search().courses():
        print(f"{course.number}, {course.title}", file=out)
    print(file=out)


def _print_course(session: CatalogSession, stdin: TextIO, out: TextIO) -> None:
    if not session.loaded:
        print("Please load courses before searching for a course.", file=out)
        return
    out.write("What course do you want to know about? ")
    detail = session.search().course(stdin.readline())
    if detail is None:
        print("Course not found.", file=out)
    else:
        print(f"{detail.number}, {detail.title}", file=out)
        print(format_prerequisites(detail), file=out)
    print(file=out)


# ---------------------------------------------------------------------------
# Loop
# ---------------------------------------------------------------------------

def run(
    session: CatalogSession | None = None,
    stdin: TextIO = sys.stdin,
    out: TextIO = sys.stdout,
) -> int:
    """Run the menu until option 9 or end of input."""
    session = session if session is not None else CatalogSession()
    print("Welcome to the course planner.\n", file=out)

    while True:
        out.write(MENU)
        out.write("\nWhat would you like to do? ")
        line = stdin.readline()
        if not line:
            break  # EOF

        # Plain ASCII digits only, like reading an int from the console.
        text = line.strip()
        if not (text.isascii() and text.isdigit()):
            print("Input is not a valid option.\n", file=out)
            continue
        choice = int(text)

        if choice == 1:
            _load(session, stdin, out)
        elif choice == 2:
            _print_list(session, out)
        elif choice == 3:
            _print_course(session, stdin, out)
        elif choice == 9:
            break
        else:
            print(f"{choice} is not a valid option.\n", file=out)

    session.close()
    print("Thank you for using the course planner!", file=out)
    return 0


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s  %(message)s")
    raise SystemExit(run())
