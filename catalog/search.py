"""
Course lookup with prerequisite resolution.

Every key coming from a user or a file goes through normalize_course_code
before it touches the store; the store itself never normalizes.

Prerequisite keys are not validated at load time, so a course may name a
prerequisite that is not in the catalog. Those come back as unresolved
entries (resolved=False, title=None) rather than errors.

Public API:
    normalize_course_code(raw) → str
    CourseSearch(store)
    CourseSearch.course(raw_key)            → CourseDetail | None
    CourseSearch.resolve_prerequisites(c)   → list[Prerequisite]
    CourseSearch.courses()                  → ascending Course iterator
"""

from collections.abc import Iterator
from dataclasses import dataclass

from catalog.course_store import Course, CourseStore

_WHITESPACE = " \t\r\n"


def normalize_course_code(raw: str) -> str:
    """Trim surrounding whitespace and uppercase: '  csci101 ' → 'CSCI101'."""
    return raw.strip(_WHITESPACE).upper()


@dataclass(frozen=True)
class Prerequisite:
    number: str
    title: str | None
    resolved: bool


@dataclass(frozen=True)
class CourseDetail:
    number: str
    title: str
    prerequisites: list[Prerequisite]


class CourseSearch:
    def __init__(self, store: CourseStore):
        self.store = store

    def courses(self) -> Iterator[Course]:
        return self.store.enumerate()

    def resolve_prerequisites(self, course: Course) -> list[Prerequisite]:
        """Look up each prerequisite key once; missing keys stay unresolved."""
        resolved = []
        for key in course.prerequisites:
            match = self.store.lookup(key)
            if match is None:
                resolved.append(Prerequisite(number=key, title=None, resolved=False))
            else:
                resolved.append(Prerequisite(number=match.number, title=match.title, resolved=True))
        return resolved

    def course(self, raw_key: str) -> CourseDetail | None:
        """
        Fetch one course by number, with prerequisite titles filled in.

        Args:
            raw_key: course number as typed; normalized here.

        Returns:
            CourseDetail, or None if no course has that number.
        """
        course = self.store.lookup(normalize_course_code(raw_key))
        if course is None:
            return None
        return CourseDetail(
            number=course.number,
            title=course.title,
            prerequisites=self.resolve_prerequisites(course),
        )
