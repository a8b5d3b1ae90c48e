from __future__ import annotations

import logging
import math
import threading
from dataclasses import dataclass

from cookiecore.catalog import define_game
from cookiecore.definition import GameDefinition
from cookiecore.persistence import (
    CorruptSaveError,
    MemoryStorage,
    Storage,
    StorageError,
    dumps_state,
    loads_state,
)
from cookiecore.signals import Signal, SignalKind, SignalSink, discard
from cookiecore.state import GameState
from cookiecore.upgrade import Upgrade

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PurchaseResult:
    """Outcome of a purchase attempt."""

    success: bool
    upgrade_id: str
    cost_paid: float = 0.0
    new_cost: float = 0.0
    owned: int = 0
    reason: str = ""


class GameRuntime:
    """Authoritative game logic processor.

    Every operation runs under one re-entrant lock, so a purchase's
    affordability check and its spend form a single transition even when
    click handlers, passive ticks and autosaves arrive from different threads.
    """

    def __init__(
        self,
        definition: GameDefinition | None = None,
        storage: Storage | None = None,
        on_signal: SignalSink | None = None,
    ) -> None:
        if definition is None:
            definition = define_game()
        errors = definition.validate()
        if errors:
            raise ValueError(
                "Invalid GameDefinition:\n" + "\n".join(f"  - {e}" for e in errors)
            )

        self.definition = definition
        self.storage = storage if storage is not None else MemoryStorage()
        self._emit: SignalSink = on_signal or discard
        self._lock = threading.RLock()
        self.state = GameState.new(definition)

        self.load()

    @property
    def storage_key(self) -> str:
        return self.definition.config.storage_key

    # ── Player actions ───────────────────────────────────────────────

    def grant(self, amount: float) -> None:
        """Add *amount* to both the spendable and the lifetime counters.

        Raises ValueError if *amount* is negative or not a finite float.
        """
        try:
            finite = math.isfinite(amount)
        except OverflowError:
            finite = False
        if not finite or amount < 0:
            raise ValueError(f"Grant amount must be finite and non-negative, got {amount!r}")
        with self._lock:
            self.state.cookies += amount
            self.state.total_cookies += amount
            self._evaluate_achievements()

    def click(self) -> float:
        """Grant one manual click's worth. Returns the amount added."""
        with self._lock:
            amount = self.state.cookies_per_click
            self.grant(amount)
            return amount

    def tick(self, delta: float | None = None) -> float:
        """Grant passive income for *delta* seconds (default: one tick)."""
        if delta is None:
            delta = 1.0 / self.definition.config.tick_rate
        if delta < 0:
            raise ValueError(f"Tick delta must be non-negative, got {delta!r}")
        with self._lock:
            amount = self.state.cookies_per_second * delta
            if amount == 0:
                return 0.0
            self.grant(amount)
            return amount

    def buy(self, upgrade_id: str) -> PurchaseResult:
        """Attempt to purchase one unit of an upgrade."""
        with self._lock:
            upgrade = self.state.get_upgrade(upgrade_id)
            if upgrade is None:
                return PurchaseResult(success=False, upgrade_id=upgrade_id, reason="unknown")

            if self.state.cookies < upgrade.cost:
                self._signal(SignalKind.INSUFFICIENT_FUNDS, "Not enough cookies!", upgrade.id)
                return self._rejected(upgrade, "insufficient_funds")

            if upgrade.at_capacity:
                self._signal(
                    SignalKind.MAX_OWNED,
                    "You already own the maximum amount!",
                    upgrade.id,
                )
                return self._rejected(upgrade, "max_owned")

            cost = upgrade.cost
            self.state.cookies -= cost
            self.state.cookies_per_click += upgrade.cookies_per_click
            self.state.cookies_per_second += upgrade.cookies_per_second
            upgrade.owned += 1
            upgrade.cost = upgrade.cost_scaling.next_cost(cost)

            logger.debug(
                "Purchased %s #%d for %s, next cost %s",
                upgrade.id, upgrade.owned, cost, upgrade.cost,
            )
            self._signal(SignalKind.PURCHASED, f"Purchased {upgrade.name}!", upgrade.id)
            self._evaluate_achievements()

            return PurchaseResult(
                success=True,
                upgrade_id=upgrade.id,
                cost_paid=cost,
                new_cost=upgrade.cost,
                owned=upgrade.owned,
            )

    def evaluate_achievements(self) -> list[str]:
        """Unlock every locked achievement whose condition now holds.

        Returns the newly unlocked ids in catalog order.
        """
        with self._lock:
            return self._evaluate_achievements()

    # ── Persistence ──────────────────────────────────────────────────

    def save(self) -> str | None:
        """Write the current state under the storage key. Returns the blob."""
        with self._lock:
            try:
                blob = dumps_state(self.state)
                self.storage.set(self.storage_key, blob)
            except (CorruptSaveError, StorageError):
                logger.warning("Failed to save game", exc_info=True)
                self._signal(SignalKind.SAVE_FAILED, "Failed to save game")
                return None
            logger.info("Game saved under %r", self.storage_key)
            self._signal(SignalKind.SAVED, "Game saved successfully!")
            return blob

    def load(self) -> GameState:
        """Replace the held state with the saved game, or a fresh one.

        A missing save starts fresh silently. An unreadable or corrupt save
        also starts fresh, and reports the failure. The corrupt blob is
        never partially applied.
        """
        with self._lock:
            fresh = GameState.new(self.definition)
            try:
                blob = self.storage.get(self.storage_key)
            except StorageError:
                logger.warning("Failed to read saved game", exc_info=True)
                self._signal(SignalKind.LOAD_FAILED, "Failed to load saved game")
                self.state = fresh
            else:
                if blob is None:
                    self.state = fresh
                else:
                    try:
                        self.state = loads_state(blob, self.definition)
                    except CorruptSaveError:
                        logger.warning("Saved game is corrupt, starting fresh", exc_info=True)
                        self._signal(SignalKind.LOAD_FAILED, "Failed to load saved game")
                        self.state = fresh
                    else:
                        logger.info("Game loaded from %r", self.storage_key)
                        self._signal(SignalKind.LOADED, "Game loaded successfully!")

            self._evaluate_achievements()
            return self.state

    def reset(self) -> GameState:
        """Start over: fresh state and no saved game."""
        with self._lock:
            self.state = GameState.new(self.definition)
            try:
                self.storage.remove(self.storage_key)
            except StorageError:
                logger.warning("Failed to clear saved game", exc_info=True)
            logger.info("Game reset")
            self._signal(SignalKind.RESET, "Game reset successfully!")
            return self.state

    # ── Queries ──────────────────────────────────────────────────────

    def get_state(self) -> GameState:
        """Return live reference to game state."""
        return self.state

    def visible_upgrades(self) -> list[Upgrade]:
        with self._lock:
            return self.state.visible_upgrades()

    def can_afford(self, upgrade_id: str) -> bool:
        with self._lock:
            upgrade = self.state.get_upgrade(upgrade_id)
            if upgrade is None or upgrade.at_capacity:
                return False
            return self.state.cookies >= upgrade.cost

    def compute_time_to_afford(self, upgrade_id: str) -> float | None:
        """Seconds until affordable at the current passive rate. None if never."""
        with self._lock:
            upgrade = self.state.get_upgrade(upgrade_id)
            if upgrade is None or upgrade.at_capacity:
                return None
            if self.state.cookies >= upgrade.cost:
                return 0.0
            rate = self.state.cookies_per_second
            if rate <= 0:
                return None  # will never afford without clicking
            return (upgrade.cost - self.state.cookies) / rate

    # ── Private helpers ──────────────────────────────────────────────

    def _evaluate_achievements(self) -> list[str]:
        unlocked = [a for a in self.state.achievements if a.check(self.state)]
        for a in unlocked:
            logger.debug("Achievement unlocked: %s", a.id)
            self._signal(SignalKind.ACHIEVEMENT_UNLOCKED, f"Achievement unlocked: {a.name}", a.id)
        return [a.id for a in unlocked]

    def _rejected(self, upgrade: Upgrade, reason: str) -> PurchaseResult:
        return PurchaseResult(
            success=False,
            upgrade_id=upgrade.id,
            new_cost=upgrade.cost,
            owned=upgrade.owned,
            reason=reason,
        )

    def _signal(self, kind: SignalKind, message: str, subject: str | None = None) -> None:
        self._emit(Signal(kind=kind, message=message, subject=subject))
