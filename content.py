"""
The site content store.

All content lives in one aggregate document. The store keeps the current
document in memory, mirrors it to a local JSON cache and writes it back to
MongoDB as a whole-document upsert.

Writes are optimistic: `apply` changes the in-memory document at once and
`persist` pushes it afterwards. A failed push is logged and recorded on the
save status; the local document is not rolled back, so it stays ahead of the
remote copy until the next successful save.
"""
import copy
import json
import logging
import os
import threading
from datetime import datetime, timezone
from typing import Any, Optional

from pymongo.errors import (
    ConnectionFailure,
    OperationFailure,
    PyMongoError,
)

from defaults import SECTIONS, initial_content

logger = logging.getLogger(__name__)

_NESTED_THEME_KEYS = ("colors", "fonts", "font_sizes")
_PAGE_SECTIONS = ("home", "portfolio_page", "writings_page")


# Merge

def _obj(value: Any) -> dict:
    return value if isinstance(value, dict) else {}


def _normalize_bio(value: Any, default: list) -> list:
    if isinstance(value, list):
        return [str(p) for p in value if p is not None]
    if isinstance(value, str):
        return [value]
    return list(default)


def _normalize_items(value: Any, default: list) -> list:
    if not isinstance(value, list):
        return copy.deepcopy(default)
    return [dict(item) for item in value if isinstance(item, dict)]


def _normalize_albums(value: Any, default: list) -> list:
    albums = _normalize_items(value, default)
    for album in albums:
        album["photos"] = _normalize_items(album.get("photos"), [])
    return albums


def merge_with_defaults(incoming: Any) -> dict:
    """Merge a possibly partial document over the compiled-in defaults.

    The result always carries every section and every nested key of the
    defaults, whatever shape `incoming` has.
    """
    base = initial_content()
    if not isinstance(incoming, dict):
        return base

    profile_in = _obj(incoming.get("profile"))
    profile = {**base["profile"], **profile_in}
    profile["bio"] = _normalize_bio(profile_in.get("bio"), base["profile"]["bio"])
    profile["contact"] = {**base["profile"]["contact"], **_obj(profile_in.get("contact"))}

    theme_in = _obj(incoming.get("theme"))
    theme = {**base["theme"], **theme_in}
    for key in _NESTED_THEME_KEYS:
        theme[key] = {**base["theme"][key], **_obj(theme_in.get(key))}
    styles_in = _obj(theme_in.get("element_styles"))
    styles = {**base["theme"]["element_styles"], **styles_in}
    for element, style in base["theme"]["element_styles"].items():
        styles[element] = {**style, **_obj(styles_in.get(element))}
    theme["element_styles"] = styles

    merged = {**base, **incoming}
    merged["profile"] = profile
    merged["theme"] = theme
    merged["albums"] = _normalize_albums(incoming.get("albums"), base["albums"])
    merged["writings"] = _normalize_items(incoming.get("writings"), base["writings"])
    merged["testimonials"] = _normalize_items(incoming.get("testimonials"), base["testimonials"])
    for key in _PAGE_SECTIONS:
        merged[key] = {**base[key], **_obj(incoming.get(key))}
    return merged


# Backend errors

def describe_backend_error(exc: Exception) -> tuple:
    """Classify a backend failure as (kind, message)."""
    if isinstance(exc, OperationFailure):
        if exc.code in (13, 8000) or "not authorized" in str(exc).lower():
            return "permission", "No permission to save. Please log in again."
        if exc.code == 26:
            return "missing", "The content collection does not exist."
        return "error", f"Database error: {str(exc)[:120]}"
    if isinstance(exc, ConnectionFailure):
        return "unavailable", "Database unreachable."
    return "error", f"Unexpected error: {str(exc)[:120]}"


# Store

class ContentStore:
    def __init__(self, collection=None, cache_path: Optional[str] = None, row_id: str = "main"):
        self.collection = collection
        self.cache_path = cache_path
        self.row_id = row_id
        self.loaded = False
        self._lock = threading.RLock()
        # one load at a time, one remote write at a time
        self._load_lock = threading.Lock()
        self._persist_lock = threading.Lock()
        self._content = initial_content()
        self._state = "idle"
        self._message = ""
        self._last_saved_at: Optional[datetime] = None
        self._source = "defaults"

    @property
    def content(self) -> dict:
        return self.snapshot()

    def snapshot(self) -> dict:
        with self._lock:
            return copy.deepcopy(self._content)

    def _set(self, document: dict) -> None:
        with self._lock:
            self._content = document
        self._write_cache(document)

    # Loading

    def ensure_loaded(self) -> dict:
        with self._load_lock:
            if not self.loaded:
                return self.load()
        return self.snapshot()

    def load(self) -> dict:
        try:
            if self.collection is None:
                logger.warning("No database configured; using local content")
                self._load_from_local()
                return self.snapshot()

            try:
                row = self.collection.find_one({"_id": self.row_id})
            except PyMongoError as e:
                kind, message = describe_backend_error(e)
                if kind == "missing":
                    logger.warning("Content collection not found; using local content")
                else:
                    logger.error("Could not read content (%s): %s", kind, e)
                self._load_from_local()
                return self.snapshot()

            if row is not None and "content" in row:
                self._set(merge_with_defaults(row["content"]))
                self._source = "remote"
                logger.info("Loaded content row %r", self.row_id)
            else:
                logger.info("No content row %r found; initializing", self.row_id)
                self._initialize_remote()
            return self.snapshot()
        finally:
            self.loaded = True

    def _initialize_remote(self) -> None:
        document = initial_content()
        try:
            self.collection.insert_one(self._row(document))
        except PyMongoError as e:
            logger.warning("Could not store initial content (%s); using local content", e)
            self._load_from_local()
            return
        self._set(document)
        self._source = "defaults"

    def _load_from_local(self) -> None:
        cached = self._read_cache()
        if cached is not None:
            with self._lock:
                self._content = merge_with_defaults(cached)
            self._source = "cache"
        else:
            self._source = "defaults"

    # Local cache

    def _read_cache(self) -> Optional[dict]:
        if not self.cache_path or not os.path.exists(self.cache_path):
            return None
        try:
            with open(self.cache_path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Could not read content cache %s: %s", self.cache_path, e)
            return None

    def _write_cache(self, document: dict) -> None:
        if not self.cache_path:
            return
        try:
            directory = os.path.dirname(self.cache_path)
            if directory:
                os.makedirs(directory, exist_ok=True)
            tmp = self.cache_path + ".tmp"
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False)
            os.replace(tmp, self.cache_path)
        except (OSError, TypeError) as e:
            logger.warning("Skipping local cache write: %s", e)

    # Writes

    def apply(self, section: str, value: Any) -> dict:
        if section not in SECTIONS:
            raise KeyError(section)
        with self._lock:
            document = merge_with_defaults({**self._content, section: value})
            self._content = document
            self._state = "saving"
            self._message = ""
        self._write_cache(document)
        return self.snapshot()

    def _row(self, document: dict) -> dict:
        return {
            "_id": self.row_id,
            "content": document,
            "updated_at": datetime.now(timezone.utc),
        }

    def persist(self, document: Optional[dict] = None) -> bool:
        with self._persist_lock:
            return self._persist(document)

    def _persist(self, document: Optional[dict]) -> bool:
        # snapshot under the persist lock so the newest state is written last
        if document is None:
            document = self.snapshot()
        if self.collection is None:
            with self._lock:
                self._state = "error"
                self._message = "No database configured; changes are kept locally only."
            logger.warning("Save skipped: no database configured")
            return False
        try:
            self.collection.replace_one({"_id": self.row_id}, self._row(document), upsert=True)
        except PyMongoError as e:
            kind, message = describe_backend_error(e)
            logger.error("Saving content failed (%s): %s", kind, e)
            with self._lock:
                self._state = "error"
                self._message = message
            return False

        with self._lock:
            self._state = "success"
            self._message = ""
            self._last_saved_at = datetime.now(timezone.utc)
        logger.info("Content saved")
        return True

    def update(self, section: str, value: Any) -> bool:
        self.apply(section, value)
        return self.persist()

    def reset(self) -> bool:
        document = initial_content()
        with self._lock:
            self._state = "saving"
        self._set(document)
        logger.info("Content reset to defaults")
        return self.persist(document)

    def status(self) -> dict:
        with self._lock:
            return {
                "state": self._state,
                "message": self._message,
                "last_saved_at": self._last_saved_at.isoformat() if self._last_saved_at else None,
                "source": self._source,
            }
