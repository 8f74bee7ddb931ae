"""
Ordered in-memory course store.

An unbalanced binary search tree keyed by course number, ordinary string
(codepoint) comparison. Each node owns its two children; there are no parent
links because records are never removed or rebalanced.

Duplicate keys: equal-or-greater routes right, and lookup stops at the first
matching node on its path, so the FIRST record inserted under a key is the one
`lookup` returns. A later duplicate is still yielded by `enumerate`, directly
after the record it duplicates.

Insert and lookup are O(depth). Sorted input degrades the tree to a list, so
every walk is iterative rather than recursive.

Public API:
    Course(number, title, prerequisites)
    CourseStore.insert(course)
    CourseStore.enumerate() / iter(store)  → ascending Course iterator
    CourseStore.lookup(key)                → Course | None
    CourseStore.clear()
    build(courses)                         → CourseStore
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Course:
    number: str                         # normalized key, e.g. "CSCI101"
    title: str                          # verbatim from the file
    prerequisites: tuple[str, ...] = ()  # normalized keys, may dangle


class _Node:
    __slots__ = ("course", "left", "right")

    def __init__(self, course: Course):
        self.course = course
        self.left: _Node | None = None
        self.right: _Node | None = None


class CourseStore:
    def __init__(self) -> None:
        self._root: _Node | None = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Course]:
        return self.enumerate()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.lookup(key) is not None

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def insert(self, course: Course) -> None:
        """Add `course` at the position its number dictates. Always succeeds."""
        new = _Node(course)
        if self._root is None:
            self._root = new
            self._size = 1
            return

        node = self._root
        while True:
            if course.number < node.course.number:
                if node.left is None:
                    node.left = new
                    break
                node = node.left
            else:
                if node.right is None:
                    node.right = new
                    break
                node = node.right
        self._size += 1

    def clear(self) -> None:
        """Release every node. The store is empty afterwards."""
        # Unlink iteratively so a degenerate tree is torn down without recursion.
        stack = [self._root] if self._root is not None else []
        self._root = None
        self._size = 0
        while stack:
            node = stack.pop()
            if node.left is not None:
                stack.append(node.left)
            if node.right is not None:
                stack.append(node.right)
            node.left = node.right = None

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def enumerate(self) -> Iterator[Course]:
        """
        Yield every record in ascending key order (in-order walk).

        Each call returns a fresh iterator, so repeated calls with no insert
        in between produce the same sequence.
        """
        stack: list[_Node] = []
        node = self._root
        while stack or node is not None:
            while node is not None:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node.course
            node = node.right

    def lookup(self, key: str) -> Course | None:
        """
        Return the record stored under `key`, or None.

        `key` must already be normalized; the store compares it as given.
        """
        node = self._root
        while node is not None:
            if key == node.course.number:
                return node.course
            node = node.left if key < node.course.number else node.right
        return None


# ------------------------------------------------------------------
# Builder
# ------------------------------------------------------------------

def build(courses: Iterable[Course]) -> CourseStore:
    """Insert `courses` in the given order into a new store."""
    store = CourseStore()
    for course in courses:
        store.insert(course)
    return store
