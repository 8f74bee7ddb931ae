"""
Catalog session: the loaded store plus where it came from.

Passed explicitly to the console menu and kept on `app.state` by the HTTP
service. A load builds a fresh store and swaps it in only once it is
complete, so a reader never sees a half-built tree.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from catalog.course_store import CourseStore
from catalog.errors import CatalogNameError, CatalogNotLoadedError
from catalog.search import CourseSearch
from etl.pipeline import CATALOG_BASENAME, DATA_DIR, LoadResult, load_file, resolve_catalog_file

log = logging.getLogger(__name__)


@dataclass
class CatalogSession:
    data_dir: Path = DATA_DIR
    base_name: str = CATALOG_BASENAME
    store: CourseStore | None = None
    source: Path | None = None
    last_load: LoadResult | None = None

    @property
    def loaded(self) -> bool:
        return self.store is not None

    @property
    def expected_file(self) -> str:
        return f"{self.base_name}.csv"

    def resolve(self, name: str) -> Path:
        """Map a typed file name onto the catalog path or raise CatalogNameError."""
        path = resolve_catalog_file(name, self.data_dir, self.base_name)
        if path is None:
            raise CatalogNameError(
                f'The file name does not match "{self.base_name}" (ignoring case).'
            )
        return path

    def load(self, name: str) -> LoadResult:
        return self.load_path(self.resolve(name))

    def load_path(self, path: Path) -> LoadResult:
        result = load_file(path)
        previous = self.store
        self.store, self.source, self.last_load = result.store, Path(path), result
        if previous is not None:
            log.info("Replaced previously loaded catalog (%d courses).", len(previous))
        return result

    def close(self) -> None:
        """Drop the loaded catalog; the session reads as not loaded afterwards."""
        if self.store is not None:
            self.store.clear()
        self.store = None
        self.source = None
        self.last_load = None

    def search(self) -> CourseSearch:
        if self.store is None:
            raise CatalogNotLoadedError("No course catalog has been loaded.")
        return CourseSearch(self.store)
