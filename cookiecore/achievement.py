from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from cookiecore.requirement import Requirement

if TYPE_CHECKING:
    from cookiecore.state import GameState


@dataclass
class Achievement:
    """A one-way milestone that unlocks when its condition is met."""

    id: str
    name: str = ""
    description: str = ""
    icon: str = ""
    unlocked: bool = False
    condition: Requirement | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.id

    def check(self, state: GameState) -> bool:
        """Unlock if the condition now holds. Returns True only on the transition."""
        if self.unlocked or self.condition is None:
            return False
        if self.condition.evaluate(state):
            self.unlocked = True
            return True
        return False
