from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field

from cookiecore.achievement import Achievement
from cookiecore.upgrade import Upgrade


@dataclass
class GameConfig:
    """Top-level game configuration."""

    name: str = "Untitled"
    tick_rate: int = 10
    autosave_interval: float = 10.0
    storage_key: str = "cookie-clicker-game-state"
    default_icon: str = "Cookie"
    default_achievement_icon: str = "Award"


def resolve_icon(icon: str, fallback: str) -> str:
    """Icons are opaque to the core; empty references fall back to a default."""
    return icon or fallback


@dataclass
class GameDefinition:
    """Complete static definition of the game: config plus the fixed catalogs.

    The upgrade and achievement lists are templates. They are never mutated;
    every fresh game gets copies from new_upgrades() / new_achievements().
    """

    config: GameConfig = field(default_factory=GameConfig)
    upgrades: list[Upgrade] = field(default_factory=list)
    achievements: list[Achievement] = field(default_factory=list)

    # Lookup dicts built in __post_init__
    _upgrades_by_id: dict[str, Upgrade] = field(
        default_factory=dict, init=False, repr=False
    )
    _achievements_by_id: dict[str, Achievement] = field(
        default_factory=dict, init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._upgrades_by_id = {u.id: u for u in self.upgrades}
        self._achievements_by_id = {a.id: a for a in self.achievements}

    def get_upgrade(self, id: str) -> Upgrade | None:
        return self._upgrades_by_id.get(id)

    def get_achievement(self, id: str) -> Achievement | None:
        return self._achievements_by_id.get(id)

    def new_upgrades(self) -> list[Upgrade]:
        return [dataclasses.replace(u) for u in self.upgrades]

    def new_achievements(self) -> list[Achievement]:
        return [dataclasses.replace(a) for a in self.achievements]

    def validate(self) -> list[str]:
        """Check for common definition errors. Returns list of error messages."""
        errors: list[str] = []

        if self.config.tick_rate <= 0:
            errors.append(f"tick_rate must be positive, got {self.config.tick_rate}")
        if not self.config.storage_key:
            errors.append("storage_key must not be empty")

        # Check for duplicate IDs
        seen_u: set[str] = set()
        for u in self.upgrades:
            if u.id in seen_u:
                errors.append(f"Duplicate upgrade ID: {u.id!r}")
            seen_u.add(u.id)

        seen_a: set[str] = set()
        for a in self.achievements:
            if a.id in seen_a:
                errors.append(f"Duplicate achievement ID: {a.id!r}")
            seen_a.add(a.id)

        for u in self.upgrades:
            if u.cost <= 0:
                errors.append(f"Upgrade {u.id!r} must have a positive cost")
            if u.cookies_per_click < 0 or u.cookies_per_second < 0:
                errors.append(f"Upgrade {u.id!r} has a negative increment")
            elif u.cookies_per_click == 0 and u.cookies_per_second == 0:
                errors.append(f"Upgrade {u.id!r} grants nothing")
            if u.max_owned is not None and u.max_owned < 1:
                errors.append(f"Upgrade {u.id!r} has max_owned below 1")
            if u.owned != 0:
                errors.append(f"Upgrade {u.id!r} template must start with owned=0")

        for a in self.achievements:
            if a.condition is None:
                errors.append(f"Achievement {a.id!r} has no condition")
            if a.unlocked:
                errors.append(f"Achievement {a.id!r} template must start locked")

        return errors
