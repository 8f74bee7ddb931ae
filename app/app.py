"""
FastAPI application: HTTP query surface for the course catalog.

Run as a script:
    python -m app.app

Or as a module:
    uvicorn app.app:app --reload

Configuration (environment or .env):
    CATALOG_DATA_DIR   directory holding the catalog CSV      (default: data/)
    CATALOG_BASENAME   expected catalog file name, no .csv
    CATALOG_AUTOLOAD   "1" to load the catalog at startup
    LOG_DIR            where app.log is written               (default: logs/)

Endpoints:
    POST /load               body: {"file": "..."}  → loaded / skipped lines
    GET  /courses            → every course, ascending by number
    GET  /courses/{number}   → one course with resolved prerequisites
    GET  /health

Logs each request and wall-clock response time to stdout and logs/app.log
(rotating, 5 MB max, 3 backups).
"""

import asyncio
import logging
import logging.handlers
import os
import sys
import time
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from pydantic import BaseModel

from app.session import CatalogSession
from catalog.errors import CatalogFileError, CatalogNameError, CatalogNotLoadedError
from catalog.search import CourseSearch
from etl.pipeline import CATALOG_BASENAME, DATA_DIR

load_dotenv()

LOG_DIR  = Path(os.getenv("LOG_DIR", Path(__file__).parent.parent / "logs"))
LOG_FILE = LOG_DIR / "app.log"


def _setup_logging() -> None:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    fmt = logging.Formatter("%(asctime)s  %(levelname)s  %(message)s")

    stream = logging.StreamHandler(sys.stdout)
    stream.setFormatter(fmt)

    # Rotate at 5 MB, keep 3 backups
    rotating = logging.handlers.RotatingFileHandler(
        LOG_FILE, maxBytes=5 * 1024 * 1024, backupCount=3, encoding="utf-8"
    )
    rotating.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.addHandler(stream)
    root.addHandler(rotating)

_setup_logging()
log = logging.getLogger("api")

# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

CATALOG_DIR      = Path(os.getenv("CATALOG_DATA_DIR", DATA_DIR))
CATALOG_NAME     = os.getenv("CATALOG_BASENAME", CATALOG_BASENAME)
CATALOG_AUTOLOAD = os.getenv("CATALOG_AUTOLOAD", "0").lower() in ("1", "true", "yes")


# ---------------------------------------------------------------------------
# App + lifespan
# ---------------------------------------------------------------------------

def _new_session() -> CatalogSession:
    return CatalogSession(data_dir=CATALOG_DIR, base_name=CATALOG_NAME)


@asynccontextmanager
async def lifespan(app: FastAPI):
    session = _new_session()
    app.state.session = session

    if CATALOG_AUTOLOAD:
        log.info("Autoloading %s…", session.expected_file)
        try:
            session.load(session.expected_file)
        except (FileNotFoundError, CatalogFileError) as exc:
            log.warning("  Autoload failed: %s", exc)

    yield  # server runs here

    session.close()


app = FastAPI(title="ABCU Course Planner", lifespan=lifespan)
app.state.session = _new_session()


def _session(request: Request) -> CatalogSession:
    return request.app.state.session


def _search(request: Request, action: str) -> CourseSearch:
    try:
        return _session(request).search()
    except CatalogNotLoadedError:
        raise HTTPException(status_code=409, detail=f"Please load courses before {action}.")


# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

class LoadRequest(BaseModel):
    file: str


class SkippedLineResult(BaseModel):
    line_no: int
    text: str
    reason: str


class LoadResponse(BaseModel):
    file: str
    loaded: int
    skipped: list[SkippedLineResult]
    duplicates: list[str]


class CourseResult(BaseModel):
    number: str
    title: str


class CourseListResponse(BaseModel):
    courses: list[CourseResult]


class PrerequisiteResult(BaseModel):
    number: str
    title: str | None
    resolved: bool


class CourseDetailResponse(BaseModel):
    number: str
    title: str
    prerequisites: list[PrerequisiteResult]


class HealthResponse(BaseModel):
    status: str
    loaded: bool
    courses: int


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@app.post("/load", response_model=LoadResponse)
def load(req: LoadRequest, request: Request) -> LoadResponse:
    session = _session(request)
    t0 = time.perf_counter()

    try:
        result = session.load(req.file)
    except CatalogNameError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except FileNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except CatalogFileError as exc:
        raise HTTPException(status_code=422, detail=str(exc))

    elapsed = time.perf_counter() - t0
    log.info("load file=%r  loaded=%d  skipped=%d  %.2fs",
             req.file, result.loaded, len(result.skipped), elapsed)

    return LoadResponse(
        file=session.source.name,
        loaded=result.loaded,
        skipped=[
            SkippedLineResult(line_no=s.line_no, text=s.text, reason=s.reason)
            for s in result.skipped
        ],
        duplicates=result.duplicates,
    )


@app.get("/courses", response_model=CourseListResponse)
def list_courses(request: Request) -> CourseListResponse:
    search = _search(request, "printing the list")
    t0 = time.perf_counter()

    courses = [CourseResult(number=c.number, title=c.title) for c in search.courses()]

    elapsed = time.perf_counter() - t0
    log.info("list  hits=%d  %.2fs", len(courses), elapsed)
    return CourseListResponse(courses=courses)


@app.get("/courses/{number}", response_model=CourseDetailResponse)
def get_course(number: str, request: Request) -> CourseDetailResponse:
    search = _search(request, "searching for a course")
    t0 = time.perf_counter()

    detail = search.course(number)

    elapsed = time.perf_counter() - t0
    log.info("course=%r  found=%s  %.2fs", number, detail is not None, elapsed)

    if detail is None:
        raise HTTPException(status_code=404, detail="Course not found.")

    return CourseDetailResponse(
        number=detail.number,
        title=detail.title,
        prerequisites=[
            PrerequisiteResult(number=p.number, title=p.title, resolved=p.resolved)
            for p in detail.prerequisites
        ],
    )


@app.get("/health", response_model=HealthResponse)
def health(request: Request) -> HealthResponse:
    session = _session(request)
    return HealthResponse(
        status="ok",
        loaded=session.loaded,
        courses=len(session.store) if session.store is not None else 0,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def _launch_server() -> None:
    config = uvicorn.Config(app, host="0.0.0.0", port=8000, reload=False)
    server = uvicorn.Server(config)

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        uvicorn.run(app, host="0.0.0.0", port=8000, reload=False)
        return

    log.warning(
        "Detected an existing asyncio event loop; serving with create_task() instead of asyncio.run()."
    )
    asyncio.create_task(server.serve())


if __name__ == "__main__":
    log.info("=== ABCU Course Planner starting up on http://0.0.0.0:8000 ===")
    _launch_server()
