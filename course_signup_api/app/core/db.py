"""
JSON document store.

State lives in three independent documents under ``settings.data_dir``:

* ``courses``  – ``courses.json``: ``{"courses": [...], "members": [...]}``
* ``signups``  – ``signups.json``: sheets, slots, signup records and the
  ``nextSheetId`` / ``nextSlotId`` counters
* ``grades``   – ``grades.json``: ``{"grades": [...]}``

Every mutation reads the whole document, changes it in memory and
writes it back in full.  ``open_document`` holds a per-document lock
for the whole read/modify/write so requests served by one process do
not overwrite each other's changes.  Nothing guards against a second
process writing the same files.
"""

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Callable, Dict, Iterator, Tuple

from .config import settings
from .errors import StorageError

logger = logging.getLogger(__name__)


def _empty_courses() -> Dict[str, Any]:
    return {"courses": [], "members": []}


def _empty_signups() -> Dict[str, Any]:
    return {
        "signupSheets": [],
        "slots": [],
        "signups": [],
        "nextSheetId": 1,
        "nextSlotId": 1,
    }


def _empty_grades() -> Dict[str, Any]:
    return {"grades": []}


DOCUMENTS: Dict[str, Tuple[str, Callable[[], Dict[str, Any]]]] = {
    "courses": ("courses.json", _empty_courses),
    "signups": ("signups.json", _empty_signups),
    "grades": ("grades.json", _empty_grades),
}

_locks: Dict[str, threading.Lock] = {name: threading.Lock() for name in DOCUMENTS}


def get_data_dir() -> Path:
    """Compute the directory holding the JSON documents.

    If ``settings.data_dir`` is absolute it is used as is; otherwise
    it is resolved relative to the project root.
    """
    data_dir = Path(settings.data_dir)
    if data_dir.is_absolute():
        return data_dir
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return (base_dir / data_dir).resolve()


def get_document_path(name: str) -> Path:
    try:
        filename, _ = DOCUMENTS[name]
    except KeyError:
        raise KeyError(f"Unknown document '{name}'") from None
    return get_data_dir() / filename


def init_db() -> None:
    """Create the data directory and any missing document with its empty layout."""
    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    for name, (_, factory) in DOCUMENTS.items():
        path = get_document_path(name)
        if not path.exists():
            _write(path, factory())
            logger.info("Initialised %s", path)


def _read(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError) as exc:
        logger.error("Error reading %s: %s", path, exc)
        raise StorageError(f"Could not read {path.name}", exc) from exc


def _write(path: Path, data: Dict[str, Any]) -> None:
    # Write to a sibling temp file and swap it in so readers never see
    # a half-written document.
    try:
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise
    except OSError as exc:
        logger.error("Error writing %s: %s", path, exc)
        raise StorageError(f"Could not write {path.name}", exc) from exc


def read_document(name: str) -> Dict[str, Any]:
    """Return a fresh snapshot of document ``name``.

    A missing file yields the document's empty layout, so reads work
    before ``init_db`` has run.
    """
    path = get_document_path(name)
    if not path.exists():
        return DOCUMENTS[name][1]()
    return _read(path)


def write_document(name: str, data: Dict[str, Any]) -> None:
    path = get_document_path(name)
    path.parent.mkdir(parents=True, exist_ok=True)
    _write(path, data)


@contextmanager
def open_document(name: str) -> Iterator[Dict[str, Any]]:
    """Context manager yielding document ``name`` for modification.

    The document is written back when the block exits normally.  If the
    block raises, nothing is written and the exception propagates, so a
    rejected request leaves the stored state untouched.
    """
    with _locks[name]:
        data = read_document(name)
        yield data
        write_document(name, data)
