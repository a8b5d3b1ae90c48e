from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cookiecore.achievement import Achievement
from cookiecore.upgrade import Upgrade

if TYPE_CHECKING:
    from cookiecore.definition import GameDefinition


@dataclass
class GameState:
    """Mutable runtime container holding all game state."""

    cookies: float = 0.0
    total_cookies: float = 0.0
    cookies_per_click: float = 1.0
    cookies_per_second: float = 0.0
    upgrades: list[Upgrade] = field(default_factory=list)
    achievements: list[Achievement] = field(default_factory=list)

    @classmethod
    def new(cls, definition: GameDefinition) -> GameState:
        """Fresh game built from the definition's catalogs."""
        return cls(
            upgrades=definition.new_upgrades(),
            achievements=definition.new_achievements(),
        )

    def get_upgrade(self, id: str) -> Upgrade | None:
        for u in self.upgrades:
            if u.id == id:
                return u
        return None

    def upgrade_owned(self, id: str) -> int:
        u = self.get_upgrade(id)
        return u.owned if u else 0

    def get_achievement(self, id: str) -> Achievement | None:
        for a in self.achievements:
            if a.id == id:
                return a
        return None

    def unlocked_ids(self) -> list[str]:
        return [a.id for a in self.achievements if a.unlocked]

    def visible_upgrades(self) -> list[Upgrade]:
        """Upgrades revealed by lifetime total, in catalog order."""
        return [u for u in self.upgrades if u.is_visible(self.total_cookies)]
