from __future__ import annotations

from dataclasses import dataclass, field

from cookiecore.cost_scaling import CostScaling


@dataclass
class Upgrade:
    """A repeatable purchase that raises per-click and/or per-second income.

    ``owned`` and ``cost`` are the only fields that change at runtime.
    ``cost_scaling`` is behavior bound from the catalog; it is neither
    compared nor persisted.
    """

    id: str
    name: str = ""
    description: str = ""
    cost: float = 0.0
    cookies_per_click: float = 0.0
    cookies_per_second: float = 0.0
    icon: str = ""
    owned: int = 0
    max_owned: int | None = None
    unlock_threshold: float | None = None
    cost_scaling: CostScaling = field(
        default_factory=CostScaling.exponential, compare=False, repr=False
    )

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.id

    @property
    def at_capacity(self) -> bool:
        return self.max_owned is not None and self.owned >= self.max_owned

    def is_visible(self, total_cookies: float) -> bool:
        if self.unlock_threshold is None:
            return True
        return total_cookies >= self.unlock_threshold
