"""Key-value storage and the JSON codec for saved games.

A save is one JSON object stored under a single fixed key. It carries the
numeric counters and both catalogs by value, with camelCase keys::

    {"cookies": 3, "totalCookies": 18, "cookiesPerClick": 2,
     "cookiesPerSecond": 0,
     "upgrades": [{"id": "cursor", "cost": 18, "owned": 1, ...}],
     "achievements": [{"id": "first-cookie", "unlocked": true, ...}]}

Achievement conditions and cost scaling rules are behavior, not data. They
are never written; on load each entry is matched to the catalog by id and
the behavior is re-bound from there.
"""
from __future__ import annotations

import dataclasses
import json
import logging
import math
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any

from cookiecore.achievement import Achievement
from cookiecore.state import GameState
from cookiecore.upgrade import Upgrade

if TYPE_CHECKING:
    from cookiecore.definition import GameDefinition

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """The backing store could not be read or written."""


class CorruptSaveError(ValueError):
    """A saved blob could not be decoded into a valid GameState."""


# ── Storage backends ─────────────────────────────────────────────────


class Storage(ABC):
    """String key-value store holding saved games."""

    @abstractmethod
    def get(self, key: str) -> str | None: ...

    @abstractmethod
    def set(self, key: str, value: str) -> None: ...

    @abstractmethod
    def remove(self, key: str) -> None: ...


class MemoryStorage(Storage):
    """Dict-backed store; lives as long as the process."""

    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)


class FileStorage(Storage):
    """One JSON file mapping keys to blobs.

    Writes go to a sibling temp file first and are swapped in with
    os.replace, so the file on disk is always a complete store.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def get(self, key: str) -> str | None:
        value = self._read_all().get(key)
        if value is not None and not isinstance(value, str):
            raise StorageError(f"Value under {key!r} in {self.path} is not a string")
        return value

    def set(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._write_all(data)

    def remove(self, key: str) -> None:
        data = self._read_all()
        if key in data:
            del data[key]
            self._write_all(data)

    def _read_all(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError, RecursionError) as exc:
            raise StorageError(f"Cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not hold a JSON object")
        return data

    def _write_all(self, data: dict[str, Any]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, sort_keys=True)
            os.replace(tmp, self.path)
        except OSError as exc:
            raise StorageError(f"Cannot write {self.path}: {exc}") from exc
        logger.debug("Wrote %d key(s) to %s", len(data), self.path)


# ── Encoding ─────────────────────────────────────────────────────────


def _upgrade_to_dict(u: Upgrade) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": u.id,
        "name": u.name,
        "description": u.description,
        "cost": u.cost,
        "cookiesPerClick": u.cookies_per_click,
        "cookiesPerSecond": u.cookies_per_second,
        "icon": u.icon,
        "owned": u.owned,
    }
    if u.max_owned is not None:
        data["maxOwned"] = u.max_owned
    if u.unlock_threshold is not None:
        data["unlockThreshold"] = u.unlock_threshold
    return data


def _achievement_to_dict(a: Achievement) -> dict[str, Any]:
    return {
        "id": a.id,
        "name": a.name,
        "description": a.description,
        "icon": a.icon,
        "unlocked": a.unlocked,
    }


def state_to_dict(state: GameState) -> dict[str, Any]:
    return {
        "cookies": state.cookies,
        "totalCookies": state.total_cookies,
        "cookiesPerClick": state.cookies_per_click,
        "cookiesPerSecond": state.cookies_per_second,
        "upgrades": [_upgrade_to_dict(u) for u in state.upgrades],
        "achievements": [_achievement_to_dict(a) for a in state.achievements],
    }


def dumps_state(state: GameState) -> str:
    """Serialize state to the saved-game JSON blob."""
    try:
        return json.dumps(state_to_dict(state), allow_nan=False)
    except ValueError as exc:
        raise CorruptSaveError(f"State is not serializable: {exc}") from exc


# ── Decoding ─────────────────────────────────────────────────────────

_MISSING = object()


def _number(data: dict[str, Any], key: str, where: str, default: Any = _MISSING) -> float:
    value = data.get(key, default)
    if value is _MISSING:
        raise CorruptSaveError(f"{where}: missing {key!r}")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CorruptSaveError(f"{where}: {key!r} is not a number: {value!r}")
    try:
        finite = math.isfinite(value)
    except OverflowError:
        # Integer literal too large for a float
        finite = False
    if not finite or value < 0:
        raise CorruptSaveError(f"{where}: {key!r} must be finite and non-negative: {value!r}")
    return value


def _count(data: dict[str, Any], key: str, where: str, default: Any = _MISSING) -> int:
    value = _number(data, key, where, default)
    if isinstance(value, float):
        if not value.is_integer():
            raise CorruptSaveError(f"{where}: {key!r} is not a whole number: {value!r}")
        value = int(value)
    return value


def _text(data: dict[str, Any], key: str, where: str, default: str) -> str:
    value = data.get(key, default)
    if not isinstance(value, str):
        raise CorruptSaveError(f"{where}: {key!r} is not a string: {value!r}")
    return value


def _entries(data: dict[str, Any], key: str) -> dict[str, dict[str, Any]]:
    """Index a persisted catalog list by id, rejecting malformed entries."""
    raw = data.get(key, [])
    if not isinstance(raw, list):
        raise CorruptSaveError(f"{key!r} is not a list")
    by_id: dict[str, dict[str, Any]] = {}
    for entry in raw:
        if not isinstance(entry, dict) or not isinstance(entry.get("id"), str):
            raise CorruptSaveError(f"{key!r} holds an entry without a string id: {entry!r}")
        if entry["id"] in by_id:
            raise CorruptSaveError(f"{key!r} holds duplicate id {entry['id']!r}")
        by_id[entry["id"]] = entry
    return by_id


def _decode_upgrade(entry: dict[str, Any], template: Upgrade) -> Upgrade:
    where = f"upgrade {template.id!r}"
    cost = _number(entry, "cost", where)
    if cost <= 0:
        raise CorruptSaveError(f"{where}: cost must be positive: {cost!r}")
    owned = _count(entry, "owned", where)

    max_owned = template.max_owned
    if "maxOwned" in entry:
        max_owned = _count(entry, "maxOwned", where)
        if max_owned < 1:
            raise CorruptSaveError(f"{where}: maxOwned must be at least 1")
    if max_owned is not None and owned > max_owned:
        raise CorruptSaveError(f"{where}: owned {owned} exceeds maxOwned {max_owned}")

    unlock_threshold = template.unlock_threshold
    if "unlockThreshold" in entry:
        unlock_threshold = _number(entry, "unlockThreshold", where)

    return dataclasses.replace(
        template,
        name=_text(entry, "name", where, template.name),
        description=_text(entry, "description", where, template.description),
        cost=cost,
        cookies_per_click=_number(entry, "cookiesPerClick", where, 0),
        cookies_per_second=_number(entry, "cookiesPerSecond", where, 0),
        icon=_text(entry, "icon", where, template.icon),
        owned=owned,
        max_owned=max_owned,
        unlock_threshold=unlock_threshold,
    )


def _decode_achievement(entry: dict[str, Any], template: Achievement) -> Achievement:
    where = f"achievement {template.id!r}"
    unlocked = entry.get("unlocked", False)
    if not isinstance(unlocked, bool):
        raise CorruptSaveError(f"{where}: 'unlocked' is not a boolean: {unlocked!r}")
    return dataclasses.replace(
        template,
        name=_text(entry, "name", where, template.name),
        description=_text(entry, "description", where, template.description),
        icon=_text(entry, "icon", where, template.icon),
        unlocked=unlocked,
    )


def state_from_dict(data: Any, definition: GameDefinition) -> GameState:
    """Build a new GameState from decoded JSON, re-binding catalog behavior.

    Raises CorruptSaveError on any malformed field or unknown id. Catalog
    entries the save does not mention start fresh.
    """
    if not isinstance(data, dict):
        raise CorruptSaveError("Saved game is not a JSON object")

    cookies = _number(data, "cookies", "state")
    total_cookies = _number(data, "totalCookies", "state")
    if cookies > total_cookies:
        raise CorruptSaveError(
            f"state: cookies {cookies!r} exceed totalCookies {total_cookies!r}"
        )

    upgrade_entries = _entries(data, "upgrades")
    for uid in upgrade_entries:
        if definition.get_upgrade(uid) is None:
            raise CorruptSaveError(f"Unknown upgrade id {uid!r}")
    achievement_entries = _entries(data, "achievements")
    for aid in achievement_entries:
        if definition.get_achievement(aid) is None:
            raise CorruptSaveError(f"Unknown achievement id {aid!r}")

    upgrades = [
        _decode_upgrade(upgrade_entries[t.id], t)
        if t.id in upgrade_entries
        else dataclasses.replace(t)
        for t in definition.upgrades
    ]
    achievements = [
        _decode_achievement(achievement_entries[t.id], t)
        if t.id in achievement_entries
        else dataclasses.replace(t)
        for t in definition.achievements
    ]

    return GameState(
        cookies=cookies,
        total_cookies=total_cookies,
        cookies_per_click=_number(data, "cookiesPerClick", "state"),
        cookies_per_second=_number(data, "cookiesPerSecond", "state"),
        upgrades=upgrades,
        achievements=achievements,
    )


def loads_state(blob: str, definition: GameDefinition) -> GameState:
    """Parse a saved-game blob. Raises CorruptSaveError if it is unusable."""
    try:
        data = json.loads(blob)
    except (TypeError, ValueError, RecursionError) as exc:
        raise CorruptSaveError(f"Saved game is not valid JSON: {exc}") from exc
    return state_from_dict(data, definition)
