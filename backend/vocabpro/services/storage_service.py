"""
Storage Service
Durable, versioned persistence of the AppState document.

Responsibilities:
- Key-value backends (files on disk, or memory) with quota emulation
- Debounced writes through an explicit WriteBuffer
- Loading with schema migration, default backfilling and corruption recovery
- Migration of the legacy multi-key layout into the unified document
- Quota recovery by trimming bulk history, then memory-only fallback
- JSON export/import and confirmed reset
"""
import copy
import errno
import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Iterator, Optional

from pydantic import BaseModel, Field, ValidationError

from vocabpro.config import Settings, get_settings
from vocabpro.models.state import (
    AppState,
    RECOGNIZED_FIELDS,
    STORAGE_VERSION,
    default_section,
    default_state,
)
from vocabpro.utils.dates import Clock, day_key, local_date, parse_day_key, utcnow


logger = logging.getLogger(__name__)


LEGACY_KEYS = (
    "vocabProSettings",
    "vocabProSRS",
    "vocabProBookmarks",
    "vocabProDailyGoals",
    "vocabProQuizHistory",
    "vocabProOnboarding",
    "vocabProStreakProtection",
    "vocabProUsers",
    "vocabProCurrentUser",
    "vocabProWOTD",
    "vocabProSoundEnabled",
    "pendingReferral",
)

EXPORT_METADATA_FIELDS = ("_exportedAt", "_appVersion", "_exportVersion")


# ==================== ERRORS ====================

class StorageError(Exception):
    """Backend read or write failure"""


class StorageQuotaExceededError(StorageError):
    """Write rejected because the storage capacity is exhausted"""


# ==================== BACKENDS ====================

class StorageBackend(ABC):
    """Minimal string key-value store"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Value for key, None when absent"""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value; raises StorageQuotaExceededError when full"""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Delete key if present"""

    @abstractmethod
    def keys(self) -> list[str]:
        """All stored keys"""

    def size_bytes(self) -> int:
        """Total bytes currently stored"""
        return sum(len((self.get(k) or "").encode("utf-8")) for k in self.keys())


class MemoryStorageBackend(StorageBackend):
    """Dict-backed store, used for tests and ephemeral sessions"""

    def __init__(self, quota_bytes: Optional[int] = None, initial: Optional[dict[str, str]] = None):
        self.quota_bytes = quota_bytes
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            used = sum(len(v.encode("utf-8")) for k, v in self._data.items() if k != key)
            if used + len(value.encode("utf-8")) > self.quota_bytes:
                raise StorageQuotaExceededError(
                    f"Quota of {self.quota_bytes} bytes exceeded writing '{key}'"
                )
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._data)


class FileStorageBackend(StorageBackend):
    """
    One JSON file per key inside a directory.

    Writes go to a temporary file that atomically replaces the target, so
    a crash never leaves a half-written document behind.
    """

    SUFFIX = ".json"

    def __init__(self, directory: Path | str, quota_bytes: Optional[int] = None):
        self.directory = Path(directory)
        self.quota_bytes = quota_bytes

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}{self.SUFFIX}"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Cannot read '{key}': {e}") from e

    def set(self, key: str, value: str) -> None:
        data = value.encode("utf-8")
        if self.quota_bytes is not None:
            used = sum(
                p.stat().st_size
                for p in self.directory.glob(f"*{self.SUFFIX}")
                if p != self._path(key)
            ) if self.directory.exists() else 0
            if used + len(data) > self.quota_bytes:
                raise StorageQuotaExceededError(
                    f"Quota of {self.quota_bytes} bytes exceeded writing '{key}'"
                )

        tmp_name = None
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
            os.replace(tmp_name, self._path(key))
            tmp_name = None
        except OSError as e:
            if e.errno in (errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC)):
                raise StorageQuotaExceededError(f"No space left writing '{key}'") from e
            raise StorageError(f"Cannot write '{key}': {e}") from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

    def remove(self, key: str) -> None:
        try:
            self._path(key).unlink(missing_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot remove '{key}': {e}") from e

    def keys(self) -> list[str]:
        if not self.directory.exists():
            return []
        return [p.name[: -len(self.SUFFIX)] for p in self.directory.glob(f"*{self.SUFFIX}")]

    def size_bytes(self) -> int:
        if not self.directory.exists():
            return 0
        return sum(p.stat().st_size for p in self.directory.glob(f"*{self.SUFFIX}"))


# ==================== WRITE BUFFER ====================

TimerFactory = Callable[[float, Callable[[], Any]], Any]


class WriteBuffer:
    """
    Debounces writes: bursts of schedule_flush() calls inside the delay
    window collapse into one call of the write function.

    The timer factory is injectable (threading.Timer by default) so tests
    can fire the pending write deterministically.
    """

    def __init__(
        self,
        write_fn: Callable[[], bool],
        delay_ms: int,
        timer_factory: Optional[TimerFactory] = None
    ):
        self._write_fn = write_fn
        self.delay_ms = delay_ms
        self._timer_factory = timer_factory or threading.Timer
        self._timer = None
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._timer is not None

    def schedule_flush(self, delay_ms: Optional[int] = None) -> None:
        """(Re)start the debounce window."""
        delay = self.delay_ms if delay_ms is None else delay_ms
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            generation = self._generation
            timer = self._timer_factory(delay / 1000, lambda: self._fire(generation))
            if hasattr(timer, "daemon"):
                timer.daemon = True
            self._timer = timer
        timer.start()

    def _fire(self, generation: int) -> None:
        with self._lock:
            # a cancelled or superseded timer must not write
            if generation != self._generation or self._timer is None:
                return
            self._timer = None
        self._write_fn()

    def flush(self) -> bool:
        """Write now if a write is pending."""
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is None:
            return True
        timer.cancel()
        return self._write_fn()

    def cancel(self) -> None:
        """Drop the pending write."""
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is not None:
            timer.cancel()


# ==================== MIGRATION ====================

def _rename(data: dict, old: str, new: str) -> None:
    if old not in data:
        return
    value = data.pop(old)
    data.setdefault(new, value)


def _legacy_month_day(value: Any) -> Optional[date]:
    """Parse a YYYY-M-D key whose month is zero-based (0 is January)."""
    parts = value.split("-") if isinstance(value, str) else []
    if len(parts) != 3 or not all(part.isdigit() for part in parts):
        return None
    return parse_day_key(f"{parts[0]}-{int(parts[1]) + 1}-{parts[2]}")


def _migrate_v1_to_v2(data: dict) -> dict:
    """
    Version 1 is the browser layout: `srs`, `stats` and
    `streakProtection` sections, `...Date` field names and unpadded
    YYYY-M-D day keys. The word of the day wrote its date with a
    zero-based month.
    """
    _rename(data, "srs", "reviewRecords")
    _rename(data, "stats", "progressStats")
    _rename(data, "streakProtection", "streakShields")

    records = data.get("reviewRecords")
    if isinstance(records, dict):
        for record in records.values():
            if not isinstance(record, dict):
                continue
            _rename(record, "wordId", "itemId")
            _rename(record, "nextReviewDate", "nextReviewAt")
            _rename(record, "lastReviewDate", "lastReviewedAt")
            for event in record.get("history") or []:
                if isinstance(event, dict):
                    _rename(event, "date", "timestamp")

    stats = data.get("progressStats")
    if isinstance(stats, dict):
        _rename(stats, "lastPlayedDate", "lastPlayedAt")

    shields = data.get("streakShields")
    if isinstance(shields, dict):
        _rename(shields, "shields", "count")
        _rename(shields, "lastUsed", "lastUsedAt")
        _rename(shields, "lastEarned", "lastEarnedAt")

    goals = data.get("dailyGoals")
    if isinstance(goals, dict) and isinstance(goals.get("history"), dict):
        history = {}
        for key, entry in goals["history"].items():
            day = parse_day_key(key)
            if day is None:
                logger.warning(f"Dropping daily goal entry with invalid date key '{key}'")
                continue
            history[day_key(day)] = entry
        goals["history"] = history

    wotd = data.get("wordOfTheDay")
    if isinstance(wotd, dict):
        day = _legacy_month_day(wotd.get("date"))
        if day is None:
            data.pop("wordOfTheDay")
        else:
            wotd["date"] = day_key(day)

    for obsolete in ("onboarding", "users", "currentUser", "pendingReferral"):
        data.pop(obsolete, None)

    return data


# Keyed by the version a transform upgrades from
MIGRATIONS: dict[int, Callable[[dict], dict]] = {
    1: _migrate_v1_to_v2,
}


def migrate_document(data: dict) -> dict:
    """Run version-gated transforms until the document is current."""
    version = data.get("version")
    if not isinstance(version, int) or isinstance(version, bool) or version < 1:
        version = 1

    if version > STORAGE_VERSION:
        logger.warning(
            f"Stored document version {version} is newer than {STORAGE_VERSION}; "
            "loading known fields only"
        )

    while version < STORAGE_VERSION:
        transform = MIGRATIONS.get(version)
        if transform is not None:
            logger.info(f"Migrating stored state from version {version} to {version + 1}")
            data = transform(data)
        version += 1

    data["version"] = STORAGE_VERSION
    return data


def deep_merge(defaults: Any, loaded: Any) -> Any:
    """
    Merge loaded data over defaults.

    Dicts merge recursively so fields added in later versions are
    backfilled; any other loaded value (lists, scalars, None) replaces the
    default.
    """
    if isinstance(defaults, dict) and isinstance(loaded, dict):
        merged = dict(defaults)
        for key, value in loaded.items():
            merged[key] = deep_merge(defaults.get(key), value) if key in defaults else value
        return merged
    return loaded


# Sections holding independent entries; a bad entry is dropped on its own
_COLLECTION_SECTIONS = ("reviewRecords", "bookmarks", "quizHistory")


def _drop_invalid_entries(document: dict, errors: list) -> set[str]:
    """
    Remove invalid entries of collection sections in place.

    Returns the sections whose errors cannot be fixed by dropping entries.
    """
    to_reset: set[str] = set()
    list_drops: dict[str, set[int]] = {}

    for err in errors:
        loc = err.get("loc") or ()
        if not loc:
            continue
        section = str(loc[0])

        if section in _COLLECTION_SECTIONS and len(loc) >= 2:
            container = document.get(section)
            if isinstance(container, dict):
                container.pop(loc[1], None)
                continue
            if isinstance(container, list) and isinstance(loc[1], int):
                list_drops.setdefault(section, set()).add(loc[1])
                continue

        if section == "dailyGoals" and len(loc) >= 3 and loc[1] == "history":
            history = document.get("dailyGoals", {}).get("history")
            if isinstance(history, dict):
                history.pop(loc[2], None)
                continue

        to_reset.add(section)

    for section, indexes in list_drops.items():
        document[section] = [
            entry for i, entry in enumerate(document[section]) if i not in indexes
        ]

    return to_reset


def build_state(data: dict, now: Optional[datetime] = None) -> AppState:
    """
    Migrate, backfill and validate a raw document. Never raises.

    Invalid entries are dropped and invalid sections replaced by their
    defaults; if the document still does not validate the full default
    state is returned.
    """
    document = migrate_document(copy.deepcopy(data))
    merged = deep_merge(default_state(now).to_storage(), document)

    try:
        return AppState.model_validate(merged)
    except ValidationError as e:
        errors = e.errors()

    broken = _drop_invalid_entries(merged, errors)
    logger.warning(
        f"Stored state has {len(errors)} invalid values; "
        f"dropping bad entries and restoring sections {sorted(broken)}"
    )
    for section in broken:
        try:
            merged[section] = default_section(section)
        except KeyError:
            merged.pop(section, None)

    try:
        return AppState.model_validate(merged)
    except ValidationError:
        logger.warning("Stored state could not be repaired; using defaults")
        return default_state(now)


def trim_for_quota(
    state: AppState,
    today: date,
    keep_quiz_entries: int,
    retention_days: int
) -> AppState:
    """Drop old quiz history and daily goal days beyond the retention window."""
    trimmed = state.model_copy(deep=True)
    trimmed.quiz_history = trimmed.quiz_history[:keep_quiz_entries]

    cutoff = today - timedelta(days=retention_days)
    kept = {}
    for key, record in trimmed.daily_goals.history.items():
        day = parse_day_key(key)
        if day is not None and day >= cutoff:
            kept[key] = record
    trimmed.daily_goals.history = kept
    return trimmed


# ==================== RESULTS ====================

class ImportResult(BaseModel):
    """Outcome of an import"""
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None


class StorageInfo(BaseModel):
    """Storage statistics"""
    key: str
    version: int
    size_bytes: int = Field(..., description="Serialized size of the current state")
    backend_bytes: int = Field(..., description="Bytes held by the backend")
    memory_only: bool
    pending_write: bool
    review_records: int
    bookmarks: int
    quiz_history: int
    daily_goal_days: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


# ==================== STATE STORE ====================

class AppStateStore:
    """
    Single source of truth for the learner's AppState.

    The in-memory cache holds the latest state between writes; every
    change goes through save() or mutate() on that cache, and the backend
    only ever receives full documents.
    """

    def __init__(
        self,
        backend: Optional[StorageBackend] = None,
        settings: Optional[Settings] = None,
        clock: Clock = utcnow,
        timer_factory: Optional[TimerFactory] = None
    ):
        self.settings = settings or get_settings()
        self.backend = backend or FileStorageBackend(
            self.settings.STORAGE_DIR,
            quota_bytes=self.settings.STORAGE_QUOTA_BYTES
        )
        self.key = self.settings.STORAGE_KEY
        self.clock = clock
        self.memory_only = False

        self._cache: Optional[AppState] = None
        self._lock = threading.RLock()
        self._buffer = WriteBuffer(
            self._flush_pending,
            self.settings.SAVE_DEBOUNCE_MS,
            timer_factory
        )

    # ---------- loading ----------

    def load(self) -> AppState:
        """
        Current state (a copy). Never raises.

        First call reads the backend: current document, then the legacy
        multi-key layout, then defaults.
        """
        with self._lock:
            return self._ensure_loaded().model_copy(deep=True)

    def reload(self) -> AppState:
        """Write any pending change, drop the cache and read the backend again."""
        with self._lock:
            self.flush()
            self._cache = None
            return self.load()

    def _ensure_loaded(self) -> AppState:
        if self._cache is None:
            self._cache = self._load_from_backend()
        return self._cache

    def _load_from_backend(self) -> AppState:
        now = self.clock()

        raw = self._safe_get(self.key)
        if raw is not None:
            state = self._parse(raw, now)
            if state is not None:
                return state
            logger.warning(f"Stored state under '{self.key}' is corrupt; discarding it")
            self._safe_remove(self.key)

        migrated = self._migrate_legacy(now)
        if migrated is not None:
            return migrated

        logger.debug("No stored state found; starting with defaults")
        return default_state(now)

    def _parse(self, raw: str, now: datetime) -> Optional[AppState]:
        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            return None
        if not isinstance(data, dict):
            return None
        return build_state(data, now)

    def _migrate_legacy(self, now: datetime) -> Optional[AppState]:
        found = {key: self._safe_get(key) for key in LEGACY_KEYS}
        found = {key: value for key, value in found.items() if value is not None}
        if not found:
            return None

        logger.warning(f"Migrating legacy storage keys: {sorted(found)}")

        def parsed(key: str) -> Any:
            if key not in found:
                return None
            try:
                return json.loads(found[key])
            except json.JSONDecodeError:
                logger.debug(f"Ignoring unreadable legacy key '{key}'")
                return None

        document: dict[str, Any] = {"version": 1, "createdAt": now.isoformat()}

        settings = parsed("vocabProSettings")
        document["settings"] = dict(settings) if isinstance(settings, dict) else {}
        sound = parsed("vocabProSoundEnabled")
        if isinstance(sound, bool):
            document["settings"]["soundEnabled"] = sound

        for legacy_key, field in (
            ("vocabProSRS", "srs"),
            ("vocabProBookmarks", "bookmarks"),
            ("vocabProDailyGoals", "dailyGoals"),
            ("vocabProQuizHistory", "quizHistory"),
            ("vocabProStreakProtection", "streakProtection"),
            ("vocabProWOTD", "wordOfTheDay"),
        ):
            value = parsed(legacy_key)
            if value is not None:
                document[field] = value

        stats = self._legacy_stats(parsed("vocabProCurrentUser"), parsed("vocabProUsers"))
        if stats is not None:
            document["stats"] = stats

        state = build_state(document, now)
        state.updated_at = now

        written, state = self._write(state)
        if written:
            for key in LEGACY_KEYS:
                self._safe_remove(key)
            logger.info("Legacy storage migrated to unified state")
        else:
            logger.warning("Legacy data migrated in memory only; legacy keys kept")
            self.memory_only = True
        return state

    @staticmethod
    def _legacy_stats(current_user: Any, users: Any) -> Optional[dict]:
        """Stats of the signed-in legacy profile, if any."""
        if isinstance(current_user, dict):
            if isinstance(current_user.get("stats"), dict):
                return current_user["stats"]
            if isinstance(users, list):
                for user in users:
                    if not isinstance(user, dict):
                        continue
                    same = any(
                        current_user.get(f) and user.get(f) == current_user.get(f)
                        for f in ("id", "email", "mobile")
                    )
                    if same and isinstance(user.get("stats"), dict):
                        return user["stats"]
        return None

    # ---------- saving ----------

    def save(self, state: AppState) -> bool:
        """
        Replace the state and schedule a debounced write.

        Returns True once the change is held in memory; the physical write
        happens after the debounce window (or on flush()).
        """
        with self._lock:
            snapshot = state.model_copy(deep=True)
            snapshot.updated_at = self.clock()
            self._cache = snapshot
            if self.memory_only:
                logger.debug("Memory-only mode: change kept in memory")
                return True
            self._buffer.schedule_flush()
            return True

    def save_sync(self, state: AppState) -> bool:
        """Replace the state and write it immediately."""
        with self._lock:
            snapshot = state.model_copy(deep=True)
            snapshot.updated_at = self.clock()
            self._cache = snapshot
            self._buffer.cancel()
            return self._persist()

    def flush(self) -> bool:
        """Write a pending debounced change now."""
        with self._lock:
            return self._buffer.flush()

    @property
    def has_pending_write(self) -> bool:
        return self._buffer.pending

    @contextmanager
    def mutate(self) -> Iterator[AppState]:
        """
        Edit the latest state in place.

        Yields a copy of the cached state; on normal exit it becomes the
        new state and a debounced write is scheduled. If the block raises,
        the cached state is left untouched.
        """
        with self._lock:
            draft = self._ensure_loaded().model_copy(deep=True)
            yield draft
            self.save(draft)

    def close(self) -> None:
        """Flush pending writes (call before shutdown)."""
        self.flush()

    def _flush_pending(self) -> bool:
        with self._lock:
            return self._persist()

    def _persist(self) -> bool:
        if self.memory_only or self._cache is None:
            return False
        written, state = self._write(self._cache)
        if written:
            self._cache = state
        else:
            # the untrimmed state stays in memory for the rest of the session
            logger.error("Storage unavailable; continuing in memory-only mode")
            self.memory_only = True
        return written

    def _write(self, state: AppState) -> tuple[bool, AppState]:
        """
        Write a full document, trimming bulk history once on quota errors.

        Returns whether the write succeeded and the state actually written.
        """
        try:
            self.backend.set(self.key, self._serialize(state))
            logger.debug(f"State written to '{self.key}'")
            return True, state
        except StorageQuotaExceededError as e:
            logger.warning(f"Storage quota exceeded ({e}); trimming history and retrying")
        except StorageError as e:
            logger.error(f"Storage write failed: {e}")
            return False, state

        trimmed = trim_for_quota(
            state,
            local_date(self.clock(), self.settings.TIMEZONE),
            self.settings.QUIZ_HISTORY_TRIM,
            self.settings.DAILY_GOAL_RETENTION_DAYS
        )
        try:
            self.backend.set(self.key, self._serialize(trimmed))
            logger.info("State written after trimming history")
            return True, trimmed
        except StorageError as e:
            logger.error(f"Storage write failed after trimming: {e}")
            return False, trimmed

    @staticmethod
    def _serialize(state: AppState) -> str:
        return json.dumps(state.to_storage(), ensure_ascii=False)

    # ---------- export / import / reset ----------

    def export_json(self) -> str:
        """Full state plus export metadata, pretty-printed."""
        document = self.load().to_storage()
        document["_exportedAt"] = self.clock().isoformat()
        document["_appVersion"] = self.settings.EXPORT_APP_VERSION
        document["_exportVersion"] = self.settings.EXPORT_VERSION
        return json.dumps(document, indent=2, ensure_ascii=False)

    def import_json(self, text: Any) -> ImportResult:
        """
        Replace the whole state with an exported document.

        The store is only changed when the document is valid and has been
        written; otherwise a failure result explains why.
        """
        if not isinstance(text, str) or not text.strip():
            return ImportResult(success=False, error="No data provided")

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            return ImportResult(success=False, error=f"Invalid JSON: {e.msg}")

        if not isinstance(data, dict):
            return ImportResult(success=False, error="Import data must be a JSON object")

        if not RECOGNIZED_FIELDS.intersection(data):
            return ImportResult(
                success=False,
                error="Unrecognized data format: no known fields found"
            )

        for field in EXPORT_METADATA_FIELDS:
            data.pop(field, None)

        state = build_state(data, self.clock())

        with self._lock:
            # pending changes land first so a failed import loses nothing
            self._buffer.flush()
            if self.memory_only:
                return ImportResult(success=False, error="Storage is unavailable; nothing was imported")
            written, state = self._write(state)
            if not written:
                return ImportResult(success=False, error="Could not save imported data")
            self._cache = state

        logger.info("State imported")
        return ImportResult(success=True, message="Data imported successfully")

    def reset(self, confirm: bool = False) -> AppState:
        """
        Replace the state with defaults and clear legacy keys.

        Does nothing unless confirm is True.
        """
        if not confirm:
            logger.info("Reset requested without confirmation; ignored")
            return self.load()

        with self._lock:
            self._buffer.cancel()
            self._cache = default_state(self.clock())
            if not self.memory_only:
                self._persist()
            for key in LEGACY_KEYS:
                self._safe_remove(key)
            logger.info("State reset to defaults")
            return self._cache.model_copy(deep=True)

    def get_storage_info(self) -> StorageInfo:
        """Sizes and counts describing the stored state."""
        with self._lock:
            state = self._ensure_loaded()
            try:
                backend_bytes = self.backend.size_bytes()
            except (StorageError, OSError):
                backend_bytes = 0
            return StorageInfo(
                key=self.key,
                version=state.version,
                size_bytes=len(self._serialize(state).encode("utf-8")),
                backend_bytes=backend_bytes,
                memory_only=self.memory_only,
                pending_write=self._buffer.pending,
                review_records=len(state.review_records),
                bookmarks=len(state.bookmarks),
                quiz_history=len(state.quiz_history),
                daily_goal_days=len(state.daily_goals.history),
                created_at=state.created_at,
                updated_at=state.updated_at,
            )

    # ---------- backend helpers ----------

    def _safe_get(self, key: str) -> Optional[str]:
        try:
            return self.backend.get(key)
        except StorageError as e:
            logger.warning(f"Could not read '{key}': {e}")
            return None

    def _safe_remove(self, key: str) -> None:
        try:
            self.backend.remove(key)
        except StorageError as e:
            logger.warning(f"Could not remove '{key}': {e}")
