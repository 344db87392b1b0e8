"""Preference and history records behind a key/value capability."""

from __future__ import annotations

import json
import logging
import time
from json import JSONDecodeError
from pathlib import Path
from typing import Any, Callable, MutableMapping, Optional, Protocol

from pydantic import TypeAdapter, ValidationError

from fridgefeast_backend.models import (
    Filters,
    HistoryEntry,
    ProfilePrefs,
    Sentiment,
)

logger = logging.getLogger(__name__)

PROFILE_KEY = "ff.prefs.profile"
LAST_FILTERS_KEY = "ff.prefs.filters.lastUsed"
SAVED_KEY = "ff.recipes.saved"
COOKED_KEY = "ff.recipes.cooked"
FEEDBACK_KEY = "ff.recipes.feedback"

HISTORY_LIMIT = 200
COOKED_RETENTION_MS = 90 * 24 * 60 * 60 * 1000

_HISTORY = TypeAdapter(list[HistoryEntry])
_FEEDBACK = TypeAdapter(dict[str, Sentiment])


class KeyValueStore(Protocol):
    """Minimal string key/value persistence, shaped like browser storage."""

    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...


class NullKeyValueStore:
    """Store used when there is no persistent context: reads are empty."""

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, value: str) -> None:
        return None


class MemoryKeyValueStore:
    """Dict-backed store, mostly useful for tests."""

    def __init__(self, data: MutableMapping[str, str] | None = None) -> None:
        self.data: MutableMapping[str, str] = {} if data is None else data

    def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileKeyValueStore(MemoryKeyValueStore):
    """Store persisted as one JSON object in a local file.

    Used by the command line tool, which has no browser storage. A missing or
    unreadable file starts out empty; every write rewrites the whole file.
    """

    def __init__(self, path: Path) -> None:
        super().__init__(self._load(path))
        self.path = path

    @staticmethod
    def _load(path: Path) -> dict[str, str]:
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return {}
        except (OSError, JSONDecodeError):
            logger.warning(
                "ignoring unreadable preferences file", extra={"path": str(path)}
            )
            return {}
        if not isinstance(payload, dict):
            return {}
        return {key: value for key, value in payload.items() if isinstance(value, str)}

    def set(self, key: str, value: str) -> None:
        super().set(key, value)
        self.path.write_text(json.dumps(self.data, indent=2), encoding="utf-8")


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""

    return int(time.time() * 1000)


def cap_history(entries: list[HistoryEntry]) -> list[HistoryEntry]:
    """Keep only the newest 200 positions of a saved or cooked list."""

    return entries[-HISTORY_LIMIT:]


def prune_cooked(entries: list[HistoryEntry], now: int) -> list[HistoryEntry]:
    """Drop cooked entries older than 90 days, then apply the history cap."""

    cutoff = now - COOKED_RETENTION_MS
    return cap_history([entry for entry in entries if entry.at >= cutoff])


class PreferenceStore:
    """Typed accessors for profile, filters, saved/cooked history and feedback.

    Stored values are JSON text. Anything missing, unreadable or of the wrong
    shape reads back as the empty default.
    """

    def __init__(
        self,
        backend: KeyValueStore,
        *,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self._backend = backend
        self._clock = clock

    def _read(self, key: str, default: Any) -> Any:
        raw = self._backend.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except JSONDecodeError:
            logger.warning("discarding unreadable preference value", extra={"key": key})
            return default

    def _write(self, key: str, value: Any) -> None:
        self._backend.set(key, json.dumps(value))

    def get_profile(self) -> ProfilePrefs:
        try:
            return ProfilePrefs.model_validate(self._read(PROFILE_KEY, {}))
        except ValidationError:
            return ProfilePrefs()

    def set_profile(self, profile: ProfilePrefs) -> None:
        self._write(
            PROFILE_KEY, profile.model_dump(by_alias=True, exclude_none=True)
        )

    def get_last_filters(self) -> Filters:
        try:
            return Filters.model_validate(self._read(LAST_FILTERS_KEY, {}))
        except ValidationError:
            return Filters()

    def set_last_filters(self, filters: Filters) -> None:
        self._write(LAST_FILTERS_KEY, filters.to_payload())

    def _read_history(self, key: str) -> list[HistoryEntry]:
        try:
            return _HISTORY.validate_python(self._read(key, []))
        except ValidationError:
            return []

    def _write_history(self, key: str, entries: list[HistoryEntry]) -> list[HistoryEntry]:
        self._write(key, [entry.model_dump() for entry in entries])
        return entries

    def get_saved(self) -> list[HistoryEntry]:
        return self._read_history(SAVED_KEY)

    def set_saved(self, entries: list[HistoryEntry]) -> list[HistoryEntry]:
        """Persist the saved list, keeping only the newest 200 positions."""

        return self._write_history(SAVED_KEY, cap_history(entries))

    def get_cooked(self) -> list[HistoryEntry]:
        return self._read_history(COOKED_KEY)

    def set_cooked(self, entries: list[HistoryEntry]) -> list[HistoryEntry]:
        """Persist cooked history without entries older than 90 days.

        Age pruning happens before the 200-entry cap is applied.
        """

        return self._write_history(
            COOKED_KEY, prune_cooked(entries, self._clock())
        )

    def get_feedback(self) -> dict[str, Sentiment]:
        try:
            return _FEEDBACK.validate_python(self._read(FEEDBACK_KEY, {}))
        except ValidationError:
            return {}

    def set_feedback(self, feedback: dict[str, Sentiment]) -> None:
        self._write(FEEDBACK_KEY, dict(feedback))

    def now(self) -> int:
        """Current time in epoch milliseconds, per the store's clock."""

        return self._clock()
